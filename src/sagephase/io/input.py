"""
Input Adapter: reading caller output from VCF.

Each alt allele of a VCF record becomes one SageVariant, carrying the allele
evidence of every sample column and the tier / local phase set annotations.
"""

from collections.abc import Iterator
from pathlib import Path

import pysam

from ..models.core import PASS, AltContext, SageVariant, VariantTier
from ..utils.logging import get_logger

logger = get_logger(__name__)

TIER_INFO = "TIER"
LOCAL_PHASE_SET_INFO = "LPS"


class VcfReader:
    """
    Reads variant records from a VCF file.

    Args:
        path: VCF (optionally bgzipped) to read.
        normal_sample: Sample column holding the reference evidence. When
            None, records get an empty normal context.
        rna_sample: Optional sample column holding RNA evidence.

    Every remaining sample column is treated as tumor evidence, in header order.
    """

    def __init__(self, path: Path, normal_sample: str | None = None, rna_sample: str | None = None):
        self.path = path
        self._vcf = pysam.VariantFile(str(path))

        samples = list(self._vcf.header.samples)
        for name in (normal_sample, rna_sample):
            if name is not None and name not in samples:
                self._vcf.close()
                raise ValueError(f"Sample '{name}' not found in {path}")

        self.normal_sample = normal_sample
        self.rna_sample = rna_sample
        self.tumor_samples = [s for s in samples if s not in (normal_sample, rna_sample)]
        if not self.tumor_samples:
            self._vcf.close()
            raise ValueError(f"No tumor sample columns found in {path}")
        logger.debug("Reading %s with tumor samples %s", path, ", ".join(self.tumor_samples))

    def __enter__(self) -> "VcfReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def contigs(self) -> list[tuple[str, int | None]]:
        """Contig names and lengths declared in the header."""
        return [(name, contig.length) for name, contig in self._vcf.header.contigs.items()]

    @property
    def filters(self) -> list[tuple[str, str | None]]:
        """FILTER IDs and descriptions declared in the header."""
        return [(name, meta.description) for name, meta in self._vcf.header.filters.items()]

    def __iter__(self) -> Iterator[SageVariant]:
        for record in self._vcf:
            filters = {f for f in record.filter.keys() if f != PASS}
            tier = VariantTier(record.info.get(TIER_INFO, VariantTier.LOW_CONFIDENCE.value))
            local_phase_set = record.info.get(LOCAL_PHASE_SET_INFO) or 0
            quality = round(record.qual) if record.qual is not None else 0

            # Multi-allelic records are split, AD index 0 is always the ref
            for alt_index, alt in enumerate(record.alts or [], start=1):
                rna = None
                if self.rna_sample:
                    rna = self._context(record, self.rna_sample, alt, alt_index, quality)

                yield SageVariant(
                    tier=tier,
                    filters=set(filters),
                    normal=self._context(record, self.normal_sample, alt, alt_index, quality),
                    tumor_alt_contexts=[
                        self._context(record, s, alt, alt_index, quality)
                        for s in self.tumor_samples
                    ],
                    rna=rna,
                    local_phase_set=local_phase_set,
                )

    def _context(
        self,
        record: pysam.VariantRecord,
        sample: str | None,
        alt: str,
        alt_index: int,
        quality: int,
    ) -> AltContext:
        # VCF POS is record.pos (1-based); record.start is 0-based
        ref_support = alt_support = depth = 0
        if sample is not None:
            call = record.samples[sample]
            ad = call.get("AD")
            if ad is not None and len(ad) > alt_index:
                ref_support = ad[0] or 0
                alt_support = ad[alt_index] or 0
            depth = call.get("DP") or (ref_support + alt_support)

        return AltContext(
            chromosome=record.chrom,
            position=record.pos,
            ref=record.ref,
            alt=alt,
            ref_support=ref_support,
            alt_support=alt_support,
            read_depth=depth,
            quality=quality,
        )

    def close(self):
        self._vcf.close()
