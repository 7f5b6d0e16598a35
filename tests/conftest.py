"""Pytest configuration and fixtures."""

import sys
from collections.abc import Callable
from pathlib import Path

import pysam
import pytest

# Add src directory to path so tests use local code, not installed package
project_root = Path(__file__).parent.parent
src_dir = project_root / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from sagephase.models.core import AltContext, SageVariant, VariantTier  # noqa: E402

VCF_HEADER = """##fileformat=VCFv4.2
##contig=<ID=1,length=240>
##contig=<ID=2,length=240>
##FILTER=<ID=PASS,Description="All filters passed">
##FILTER=<ID=min_tumor_qual,Description="Insufficient tumor quality">
##INFO=<ID=TIER,Number=1,Type=String,Description="Tier">
##INFO=<ID=LPS,Number=1,Type=Integer,Description="Local phase set">
##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">
##FORMAT=<ID=AD,Number=R,Type=Integer,Description="Allelic depths">
##FORMAT=<ID=DP,Number=1,Type=Integer,Description="Read depth">
"""

# 240 bases, 1-based position p is REFERENCE_SEQUENCE[p - 1]
REFERENCE_SEQUENCE = "ACGTTGCA" * 30


def _context(chromosome, position, ref, alt, alt_support, depth):
    return AltContext(
        chromosome=chromosome,
        position=position,
        ref=ref,
        alt=alt,
        ref_support=depth - alt_support,
        alt_support=alt_support,
        read_depth=depth,
        quality=alt_support * 30,
    )


@pytest.fixture
def make_variant() -> Callable[..., SageVariant]:
    """Build a SageVariant with one tumor sample."""

    def build(
        position: int,
        ref: str = "A",
        alt: str = "T",
        phase: int = 0,
        filters: set[str] | None = None,
        chromosome: str = "1",
        tumor_alt: int = 10,
        tumor_depth: int = 20,
        normal_alt: int = 0,
        normal_depth: int = 20,
        tier: VariantTier = VariantTier.PANEL,
        rna: bool = False,
        synthetic: bool = False,
    ) -> SageVariant:
        return SageVariant(
            tier=tier,
            filters=set(filters or ()),
            normal=_context(chromosome, position, ref, alt, normal_alt, normal_depth),
            tumor_alt_contexts=[_context(chromosome, position, ref, alt, tumor_alt, tumor_depth)],
            rna=_context(chromosome, position, ref, alt, 4, 8) if rna else None,
            local_phase_set=phase,
            synthetic=synthetic,
        )

    return build


class StubMnvFactory:
    """Records every construction request and builds a minimal synthetic record."""

    def __init__(self, failing: set[tuple[int, int]] | None = None):
        self.calls: list[tuple[SageVariant, SageVariant]] = []
        self.created: list[SageVariant] = []
        self.failing = failing or set()

    def __call__(self, earlier: SageVariant, later: SageVariant) -> SageVariant:
        self.calls.append((earlier, later))
        gap = "N" * (later.position - earlier.end - 1)
        normal = AltContext(
            chromosome=earlier.chromosome,
            position=earlier.position,
            ref=earlier.ref + gap + later.ref,
            alt=earlier.alt + gap + later.alt,
        )
        mnv = SageVariant(
            tier=earlier.tier,
            normal=normal,
            tumor_alt_contexts=[normal],
            local_phase_set=later.local_phase_set,
            synthetic=True,
        )
        if (earlier.position, later.position) in self.failing:
            mnv.filters.add("min_tumor_vaf")
        self.created.append(mnv)
        return mnv


@pytest.fixture
def stub_factory() -> StubMnvFactory:
    return StubMnvFactory()


@pytest.fixture
def write_vcf(tmp_path: Path) -> Callable[..., Path]:
    """Write a small VCF with the given sample columns and data lines."""

    def write(lines: list[str], samples: tuple[str, ...] = ("NORMAL", "TUMOR"), name: str = "input.vcf") -> Path:
        path = tmp_path / name
        columns = ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT", *samples]
        with open(path, "w") as f:
            f.write(VCF_HEADER)
            f.write("\t".join(columns) + "\n")
            for line in lines:
                f.write(line + "\n")
        return path

    return write


@pytest.fixture
def reference_fasta(tmp_path: Path) -> Path:
    """Indexed FASTA with contigs "1" and "2"."""
    fasta = tmp_path / "reference.fa"
    with open(fasta, "w") as f:
        for contig in ("1", "2"):
            f.write(f">{contig}\n")
            for i in range(0, len(REFERENCE_SEQUENCE), 60):
                f.write(REFERENCE_SEQUENCE[i:i + 60] + "\n")
    pysam.faidx(str(fasta))
    return fasta
