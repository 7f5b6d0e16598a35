"""
sagephase - merges phased SNV calls into MNV records.

This package provides a command-line interface and Python API for the
streaming stage that coalesces adjacent SNVs sharing a local phase set into
synthetic multi-nucleotide variants.

Example usage:
    $ sagephase merge -i candidates.vcf -o merged.vcf -r reference.fa
"""

__version__ = "1.0.0"

from .models.core import MERGE_FILTER, AltContext, MergeConfig, SageVariant, VariantTier
from .phase.merge import PhaseMerger
from .phase.mnv import MnvFactory
from .pipeline import Pipeline

__all__ = [
    "__version__",
    "MERGE_FILTER",
    "AltContext",
    "MergeConfig",
    "MnvFactory",
    "PhaseMerger",
    "Pipeline",
    "SageVariant",
    "VariantTier",
]
