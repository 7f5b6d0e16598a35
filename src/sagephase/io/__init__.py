"""
I/O module for sagephase.

Provides the VCF reader feeding the phase merger and the VCF writer it forwards to.
"""

from .input import VcfReader
from .output import VcfWriter

__all__ = [
    "VcfReader",
    "VcfWriter",
]
