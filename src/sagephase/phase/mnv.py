"""
MNV construction: combines two phased SNV records into one synthetic record.
"""

from dataclasses import dataclass, field

import pysam

from ..models.core import (
    MAX_GERMLINE_VAF_FILTER,
    MIN_TUMOR_VAF_FILTER,
    AltContext,
    SageVariant,
    VariantTier,
)

_TIER_RANK = {tier: rank for rank, tier in enumerate(VariantTier)}


@dataclass
class MnvFilterConfig:
    """Thresholds applied to a freshly built MNV."""

    min_tumor_vaf: float = 0.0
    max_germline_vaf: float = 1.0

    def apply(self, variant: SageVariant) -> set[str]:
        filters = set()
        if variant.primary_tumor.vaf < self.min_tumor_vaf:
            filters.add(MIN_TUMOR_VAF_FILTER)
        if variant.normal.vaf > self.max_germline_vaf:
            filters.add(MAX_GERMLINE_VAF_FILTER)
        return filters


def combine_contexts(earlier: AltContext, later: AltContext, gap: str) -> AltContext:
    """
    Combine the evidence of two alleles into the evidence for the joint allele.

    A read only supports the joint allele if it supports both parts, so every
    count is the smaller of the two.
    """
    return AltContext(
        chromosome=earlier.chromosome,
        position=earlier.position,
        ref=earlier.ref + gap + later.ref,
        alt=earlier.alt + gap + later.alt,
        ref_support=min(earlier.ref_support, later.ref_support),
        alt_support=min(earlier.alt_support, later.alt_support),
        read_depth=min(earlier.read_depth, later.read_depth),
        quality=min(earlier.quality, later.quality),
    )


@dataclass
class MnvFactory:
    """
    Default MNV construction capability for `PhaseMerger`.

    Args:
        reference: Indexed FASTA used to fill the bases between two SNVs that
            are not directly adjacent. Only needed when such gaps occur.
        filter_config: Thresholds deciding whether the MNV passes.
    """

    reference: pysam.FastaFile | None = None
    filter_config: MnvFilterConfig = field(default_factory=MnvFilterConfig)

    def __call__(self, earlier: SageVariant, later: SageVariant) -> SageVariant:
        return self.create_mnv(earlier, later)

    def create_mnv(self, earlier: SageVariant, later: SageVariant) -> SageVariant:
        if later.chromosome != earlier.chromosome or later.position <= earlier.end:
            raise ValueError(f"Cannot build MNV from overlapping variants {earlier} and {later}")

        gap = self._gap_bases(earlier, later)
        if len(earlier.tumor_alt_contexts) != len(later.tumor_alt_contexts):
            raise ValueError(f"Tumor sample count differs between {earlier} and {later}")

        tumors = [
            combine_contexts(first, second, gap)
            for first, second in zip(earlier.tumor_alt_contexts, later.tumor_alt_contexts)
        ]
        rna = None
        if earlier.rna is not None and later.rna is not None:
            rna = combine_contexts(earlier.rna, later.rna, gap)

        mnv = SageVariant(
            tier=min(earlier.tier, later.tier, key=_TIER_RANK.__getitem__),
            normal=combine_contexts(earlier.normal, later.normal, gap),
            tumor_alt_contexts=tumors,
            rna=rna,
            local_phase_set=later.local_phase_set,
            synthetic=True,
        )
        mnv.filters.update(self.filter_config.apply(mnv))
        return mnv

    def _gap_bases(self, earlier: SageVariant, later: SageVariant) -> str:
        gap_length = later.position - earlier.end - 1
        if gap_length == 0:
            return ""
        if self.reference is None:
            raise ValueError(
                f"Reference FASTA required to merge non-adjacent variants {earlier} and {later}"
            )
        # FASTA fetch is 0-based half-open
        bases = self.reference.fetch(earlier.chromosome, earlier.end, later.position - 1).upper()
        if len(bases) != gap_length:
            raise ValueError(
                f"Reference does not cover {earlier.chromosome}:{earlier.end + 1}-{later.position - 1}"
            )
        return bases
