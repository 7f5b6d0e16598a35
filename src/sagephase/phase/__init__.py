"""
Phasing stage for sagephase.

Provides the streaming phase merger and the default MNV construction capability.
"""

from .merge import BUFFER, PhaseMerger
from .mnv import MnvFactory, MnvFilterConfig

__all__ = [
    "BUFFER",
    "MnvFactory",
    "MnvFilterConfig",
    "PhaseMerger",
]
