"""
Data models for sagephase.

Provides Pydantic models for allele evidence, variant records and run configuration.
"""

from .core import (
    MAX_GERMLINE_VAF_FILTER,
    MERGE_FILTER,
    MIN_TUMOR_VAF_FILTER,
    PASS,
    AltContext,
    MergeConfig,
    SageVariant,
    VariantTier,
)

__all__ = [
    "MAX_GERMLINE_VAF_FILTER",
    "MERGE_FILTER",
    "MIN_TUMOR_VAF_FILTER",
    "PASS",
    "AltContext",
    "MergeConfig",
    "SageVariant",
    "VariantTier",
]
