"""
Pipeline Orchestrator: Manages the execution flow of sagephase.

This module handles:
1. Reading candidate variants from the input VCF.
2. Streaming them through the phase merger.
3. Writing every finalized record to the output VCF.
"""

from dataclasses import dataclass

import pysam
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from .io.input import VcfReader
from .io.output import VcfWriter
from .models.core import MergeConfig
from .phase.merge import PhaseMerger
from .phase.mnv import MnvFactory, MnvFilterConfig
from .utils.logging import console, get_logger, log_call, timed

logger = get_logger(__name__)

PROGRESS_INTERVAL = 10_000


@dataclass
class MergeSummary:
    """Counts reported at the end of a run."""

    records_read: int
    records_written: int
    mnv_created: int
    mnv_passing: int
    mnv_discarded: int


class Pipeline:
    def __init__(self, config: MergeConfig):
        self.config = config

    def run(self) -> MergeSummary:
        """Execute the pipeline."""
        logger.info("Merging phased variants from %s", self.config.input_vcf)

        reference = pysam.FastaFile(str(self.config.reference_fasta))
        try:
            factory = MnvFactory(
                reference=reference,
                filter_config=MnvFilterConfig(
                    min_tumor_vaf=self.config.min_tumor_vaf,
                    max_germline_vaf=self.config.max_germline_vaf,
                ),
            )
            with VcfReader(
                self.config.input_vcf,
                normal_sample=self.config.normal_sample,
                rna_sample=self.config.rna_sample,
            ) as reader, VcfWriter(
                self.config.output_vcf,
                tumor_samples=reader.tumor_samples,
                normal_sample=reader.normal_sample,
                rna_sample=reader.rna_sample,
                contigs=reader.contigs,
                filters=reader.filters,
            ) as writer:
                with timed("Merging phased variants", logger):
                    merger = self._merge(reader, writer, factory)
        finally:
            reference.close()

        summary = self._summarize(merger, writer)
        logger.info(
            "Read %d records, wrote %d (%d MNVs created, %d passing)",
            summary.records_read,
            summary.records_written,
            summary.mnv_created,
            summary.mnv_passing,
        )
        logger.info("Output written to %s", self.config.output_vcf)
        return summary

    def _merge(self, reader: VcfReader, writer: VcfWriter, factory: MnvFactory) -> PhaseMerger:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("[cyan]Merging variants...", total=None)

            # Leaving the block flushes the merger, also on errors
            with PhaseMerger(writer.write, factory) as merger:
                for variant in reader:
                    merger.accept(variant)
                    if merger.accepted % PROGRESS_INTERVAL == 0:
                        progress.update(
                            task,
                            description=f"[cyan]Merging variants... {variant.chromosome}:{variant.position}",
                        )

        return merger

    @log_call()
    def _summarize(self, merger: PhaseMerger, writer: VcfWriter) -> MergeSummary:
        return MergeSummary(
            records_read=merger.accepted,
            records_written=writer.records_written,
            mnv_created=merger.mnv_created,
            mnv_passing=merger.mnv_passing,
            mnv_discarded=merger.discarded,
        )
