"""
Core data models for sagephase.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

PASS = "PASS"
MERGE_FILTER = "merge"
MIN_TUMOR_VAF_FILTER = "min_tumor_vaf"
MAX_GERMLINE_VAF_FILTER = "max_germline_vaf"


class VariantTier(str, Enum):
    """Calling confidence tier, highest confidence first."""
    HOTSPOT = "HOTSPOT"
    PANEL = "PANEL"
    HIGH_CONFIDENCE = "HIGH_CONFIDENCE"
    LOW_CONFIDENCE = "LOW_CONFIDENCE"


class AltContext(BaseModel):
    """
    Allele evidence for one sample at one locus.

    Positions are 1-based, as in the VCF the evidence was read from.
    """
    chromosome: str
    position: int = Field(ge=1, description="1-based position of the first ref base")
    ref: str = Field(min_length=1)
    alt: str = Field(min_length=1)
    ref_support: int = Field(default=0, ge=0)
    alt_support: int = Field(default=0, ge=0)
    read_depth: int = Field(default=0, ge=0)
    quality: int = Field(default=0, ge=0)

    @property
    def end(self) -> int:
        """Last reference base spanned by the allele."""
        return self.position + len(self.ref) - 1

    @property
    def vaf(self) -> float:
        if self.read_depth == 0:
            return 0.0
        return self.alt_support / self.read_depth


class SageVariant(BaseModel):
    """
    A candidate call flowing through the phasing stage.

    `filters` and `local_phase_set` are mutated in place while the record is
    buffered; everything else is fixed once the caller has built it.
    """
    tier: VariantTier
    filters: set[str] = Field(default_factory=set)
    normal: AltContext
    tumor_alt_contexts: list[AltContext] = Field(min_length=1)
    rna: AltContext | None = None
    local_phase_set: int = Field(default=0, ge=0)
    synthetic: bool = False

    @property
    def chromosome(self) -> str:
        return self.normal.chromosome

    @property
    def position(self) -> int:
        return self.normal.position

    @property
    def ref(self) -> str:
        return self.normal.ref

    @property
    def alt(self) -> str:
        return self.normal.alt

    @property
    def end(self) -> int:
        return self.normal.end

    @property
    def primary_tumor(self) -> AltContext:
        return self.tumor_alt_contexts[0]

    @property
    def is_indel(self) -> bool:
        return len(self.ref) != len(self.alt)

    @property
    def is_insertion(self) -> bool:
        return len(self.ref) < len(self.alt)

    @property
    def is_deletion(self) -> bool:
        return len(self.ref) > len(self.alt)

    @property
    def is_mnv(self) -> bool:
        return not self.is_indel and len(self.ref) > 1

    @property
    def is_passing(self) -> bool:
        return not self.filters

    @property
    def is_phased(self) -> bool:
        return self.local_phase_set > 0

    def __str__(self) -> str:
        return f"{self.chromosome}:{self.position} {self.ref}>{self.alt}"


class MergeConfig(BaseModel):
    """
    Configuration for one merge run.
    """
    # Input
    input_vcf: Path
    reference_fasta: Path
    normal_sample: str | None = None
    rna_sample: str | None = None

    # Output
    output_vcf: Path

    # MNV filters
    min_tumor_vaf: float = Field(default=0.0, ge=0.0, le=1.0)
    max_germline_vaf: float = Field(default=1.0, ge=0.0, le=1.0)

    @field_validator("input_vcf", "reference_fasta")
    @classmethod
    def validate_file_exists(cls, v: Path | None) -> Path | None:
        if v is not None and not v.exists():
            raise ValueError(f"File not found: {v}")
        return v

    @field_validator("output_vcf")
    @classmethod
    def validate_output_vcf(cls, v: Path) -> Path:
        if v.is_dir():
            raise ValueError(f"Output path must be a file, not a directory: {v}")
        return v
