"""
Output Writer: formatting merged variant records as VCF.

The writer is the downstream sink of the phase merger: `write` is called once
per finalized record, in order.
"""

from pathlib import Path

from ..models.core import (
    MAX_GERMLINE_VAF_FILTER,
    MERGE_FILTER,
    MIN_TUMOR_VAF_FILTER,
    PASS,
    AltContext,
    SageVariant,
)

FILTER_DESCRIPTIONS = {
    PASS: "All filters passed",
    MERGE_FILTER: "Variant was merged into a phased MNV",
    MIN_TUMOR_VAF_FILTER: "Tumor VAF of the MNV is below the minimum",
    MAX_GERMLINE_VAF_FILTER: "Germline VAF of the MNV is above the maximum",
}


class VcfWriter:
    """Writes variant records to a VCF file."""

    def __init__(
        self,
        path: Path,
        tumor_samples: list[str],
        normal_sample: str | None = None,
        rna_sample: str | None = None,
        contigs: list[tuple[str, int | None]] | None = None,
        filters: list[tuple[str, str | None]] | None = None,
    ):
        self.path = path
        self.tumor_samples = tumor_samples
        self.normal_sample = normal_sample
        self.rna_sample = rna_sample
        self.contigs = contigs or []
        # Upstream filters pass through into the FILTER column and need a definition
        self.filters = dict(FILTER_DESCRIPTIONS)
        for name, description in filters or []:
            self.filters.setdefault(name, description or name)
        self.records_written = 0
        self.file = open(path, "w")
        self._headers_written = False

    def __enter__(self) -> "VcfWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def samples(self) -> list[str]:
        samples = [self.normal_sample] if self.normal_sample else []
        samples.extend(self.tumor_samples)
        if self.rna_sample:
            samples.append(self.rna_sample)
        return samples

    def _write_header(self):
        headers = ["##fileformat=VCFv4.2", "##source=sagephase"]
        for name, length in self.contigs:
            headers.append(f"##contig=<ID={name},length={length}>" if length else f"##contig=<ID={name}>")
        for name, description in self.filters.items():
            headers.append(f'##FILTER=<ID={name},Description="{description}">')
        headers.extend([
            '##INFO=<ID=TIER,Number=1,Type=String,Description="Calling confidence tier">',
            '##INFO=<ID=LPS,Number=1,Type=Integer,Description="Local phase set">',
            '##INFO=<ID=MNV,Number=0,Type=Flag,Description="Synthetic MNV built from phased SNVs">',
            '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
            '##FORMAT=<ID=AD,Number=R,Type=Integer,Description="Allelic depths for the ref and alt alleles">',
            '##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read depth">',
            "\t".join(["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT", *self.samples]),
        ])
        self.file.write("\n".join(headers) + "\n")
        self._headers_written = True

    def write(self, variant: SageVariant):
        if not self._headers_written:
            self._write_header()

        info = [f"TIER={variant.tier.value}"]
        if variant.local_phase_set > 0:
            info.append(f"LPS={variant.local_phase_set}")
        if variant.synthetic:
            info.append("MNV")

        contexts = [variant.normal] if self.normal_sample else []
        contexts.extend(variant.tumor_alt_contexts)
        if self.rna_sample:
            # Keep the column count fixed when a record has no RNA evidence
            contexts.append(variant.rna)

        row = [
            variant.chromosome,
            str(variant.position),
            ".",  # ID
            variant.ref,
            variant.alt,
            str(variant.primary_tumor.quality),
            ";".join(sorted(variant.filters)) if variant.filters else PASS,
            ";".join(info),
            "GT:AD:DP",
            *(self._format_sample(c) for c in contexts),
        ]

        self.file.write("\t".join(row) + "\n")
        self.records_written += 1

    @staticmethod
    def _format_sample(context: AltContext | None) -> str:
        if context is None:
            return "./.:.:."
        gt = "0/1" if context.alt_support > 0 else "0/0"
        return f"{gt}:{context.ref_support},{context.alt_support}:{context.read_depth}"

    def close(self):
        # An empty run still produces a valid VCF
        if not self._headers_written:
            self._write_header()
        self.file.close()
