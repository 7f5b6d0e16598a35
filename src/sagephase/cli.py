"""
CLI Entry Point: Exposes the sagephase functionality via command line.
"""

from pathlib import Path

import typer
from rich.console import Console

from . import __version__
from .models.core import MergeConfig
from .pipeline import Pipeline
from .utils.logging import setup_logging

app = typer.Typer(help="sagephase: merge phased SNVs into MNVs")


@app.callback()
def main():
    """
    sagephase: merge phased SNVs into MNVs
    """
    pass


@app.command()
def version():
    """
    Show the sagephase version.
    """
    Console().print(f"sagephase {__version__}")


@app.command()
def merge(
    input_vcf: Path = typer.Option(
        ..., "--input", "-i", help="Position-sorted VCF of candidate calls with LPS annotations"
    ),
    output_vcf: Path = typer.Option(..., "--output", "-o", help="Path of the VCF to write"),
    reference: Path = typer.Option(
        ..., "--reference", "-r", help="Indexed reference FASTA, used to fill bases between merged SNVs"
    ),
    normal_sample: str | None = typer.Option(
        None, "--normal", help="Sample column holding the normal (reference) evidence"
    ),
    rna_sample: str | None = typer.Option(
        None, "--rna", help="Sample column holding RNA evidence"
    ),
    min_tumor_vaf: float = typer.Option(
        0.0, "--min-tumor-vaf", help="Minimum primary tumor VAF for a merged MNV to pass"
    ),
    max_germline_vaf: float = typer.Option(
        1.0, "--max-germline-vaf", help="Maximum normal VAF for a merged MNV to pass"
    ),
    log_file: Path | None = typer.Option(None, "--log-file", help="Also write logs to this file"),
    verbose: bool = typer.Option(
        False, "--verbose", "-V", help="Enable verbose debug logging"
    ),
):
    """
    Merge adjacent phased SNVs of a VCF into MNV records.
    """
    setup_logging(verbose=verbose, log_file=log_file)
    console = Console(stderr=True)

    try:
        config = MergeConfig(
            input_vcf=input_vcf,
            output_vcf=output_vcf,
            reference_fasta=reference,
            normal_sample=normal_sample,
            rna_sample=rna_sample,
            min_tumor_vaf=min_tumor_vaf,
            max_germline_vaf=max_germline_vaf,
        )

        pipeline = Pipeline(config)
        summary = pipeline.run()

    except Exception as e:
        console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    console.print(
        f"[bold green]Done:[/bold green] {summary.records_written} records written, "
        f"{summary.mnv_passing} passing MNVs"
    )


if __name__ == "__main__":
    app()
