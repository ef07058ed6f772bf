"""Command-line interface for GeneAnalyzer."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from geneanalyzer import __version__
from geneanalyzer.analysis.coding import analyze_coding
from geneanalyzer.analysis.derived import analyze_derived_alleles
from geneanalyzer.analysis.fourfold import analyze_fourfold
from geneanalyzer.analysis.noncoding import analyze_noncoding
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.batch_workers import ANALYSIS_MODES, BatchTask, WorkerResult, process_gene
from geneanalyzer.core.codons import Codon, GeneticCode
from geneanalyzer.core.paths import find_best_path
from geneanalyzer.core.sequences import SequenceSet
from geneanalyzer.data.genetic_codes import NCBI_TABLES
from geneanalyzer.io.output import OutputFormat, format_batch_results, format_result
from geneanalyzer.logging_config import setup_logging
from scipy.stats import false_discovery_control

logger = logging.getLogger(__name__)


def create_progress() -> Progress:
    """Create a progress bar on stderr, leaving stdout for results."""
    return Progress(
        SpinnerColumn(style="bold magenta"),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(bar_width=40),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=Console(stderr=True),
    )


def compute_adjusted_pvalues(results: list[tuple[str, object]]) -> list[float | None]:
    """Compute Benjamini-Hochberg adjusted MK p-values for batch results.

    Results without an MK table (no outgroup, non-coding or fourfold
    analyses) take no part in the adjustment and get None.

    Returns:
        Adjusted p-values in the same order as the input results
    """
    indices = []
    p_values = []
    for i, (_, result) in enumerate(results):
        mk = getattr(result, "mk", None)
        if mk is not None:
            indices.append(i)
            p_values.append(mk.p_value)

    adjusted: list[float | None] = [None] * len(results)
    if p_values:
        for i, p in zip(indices, false_discovery_control(p_values, method="bh")):
            adjusted[i] = float(p)
    return adjusted


def get_worker_count(requested: int, num_tasks: int) -> int:
    """Determine the number of worker processes (1 means run in-process)."""
    if requested == 1 or num_tasks < 10:
        return 1
    cpu_count = os.cpu_count() or 4
    if requested > 0:
        return min(requested, cpu_count)
    return max(1, min(cpu_count - 1, num_tasks))


def _collect(worker_result: WorkerResult, results: list, warnings: list[str]) -> None:
    if worker_result.error:
        warnings.append(worker_result.error)
    elif worker_result.warning:
        warnings.append(f"Warning: {worker_result.warning}")
    elif worker_result.result is not None:
        results.append((worker_result.gene_id, worker_result.result))


def run_parallel_batch(
    tasks: list[BatchTask],
    num_workers: int,
    description: str = "Processing alignments",
) -> tuple[list[tuple[str, object]], list[str]]:
    """Run the batch tasks, in a ProcessPoolExecutor when num_workers > 1.

    Returns:
        (gene, result) pairs sorted by gene, and warning messages
    """
    results: list[tuple[str, object]] = []
    warnings: list[str] = []

    if num_workers == 1:
        with create_progress() as progress:
            task_id = progress.add_task(description, total=len(tasks))
            for task in tasks:
                _collect(process_gene(task), results, warnings)
                progress.advance(task_id)
    else:
        with ProcessPoolExecutor(max_workers=num_workers) as executor:
            futures = {executor.submit(process_gene, task): task for task in tasks}
            with create_progress() as progress:
                task_id = progress.add_task(description, total=len(tasks))
                for future in as_completed(futures):
                    try:
                        _collect(future.result(), results, warnings)
                    except Exception as e:
                        task = futures[future]
                        warnings.append(f"Error processing {task.file_path.name}: {e}")
                    progress.advance(task_id)

    results.sort(key=lambda item: item[0])
    return results, warnings


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"geneanalyzer {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="geneanalyzer",
    help="GeneAnalyzer: synonymous and non-synonymous diversity and divergence.\n\n"
    "Computes pi, theta, Tajima's D and divergence K from aligned samples, "
    "classifying codon changes along minimal evolutionary paths.",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug messages"),
    ] = False,
) -> None:
    """GeneAnalyzer: population genetics of coding and non-coding sequences."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


def _parse_format(output_format: str) -> OutputFormat:
    try:
        return OutputFormat(output_format)
    except ValueError:
        typer.echo(
            f"Error: Invalid format '{output_format}'. Must be pretty, tsv, or json.", err=True
        )
        raise typer.Exit(1)


def _genetic_code(table_id: int) -> GeneticCode:
    try:
        return GeneticCode.from_ncbi(table_id)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def _load_samples(
    ingroup: Path,
    outgroup: Path | None,
    ingroup_match: str | None,
    outgroup_match: str | None,
    reading_frame: int,
    code: GeneticCode,
) -> tuple[SequenceSet, SequenceSet | None]:
    """Load the population and optional outgroup from one or two FASTA files.

    With --ingroup-match both samples are taken from the INGROUP file by
    name pattern.
    """
    if ingroup_match is None:
        if outgroup_match is not None:
            typer.echo("Error: --outgroup-match requires --ingroup-match", err=True)
            raise typer.Exit(1)
        pop = SequenceSet.from_fasta(ingroup, reading_frame, code)
        out = SequenceSet.from_fasta(outgroup, reading_frame, code) if outgroup else None
        return pop, out

    if outgroup is not None:
        typer.echo(
            "Error: Do not provide OUTGROUP file when using --ingroup-match/--outgroup-match",
            err=True,
        )
        raise typer.Exit(1)

    all_seqs = SequenceSet.from_fasta(ingroup, reading_frame, code)
    pop = all_seqs.filter_by_name(ingroup_match)
    if len(pop) == 0:
        typer.echo(f"Error: No sequences match ingroup pattern '{ingroup_match}'", err=True)
        raise typer.Exit(1)
    out = None
    if outgroup_match is not None:
        out = all_seqs.filter_by_name(outgroup_match)
        if len(out) == 0:
            typer.echo(
                f"Error: No sequences match outgroup pattern '{outgroup_match}'", err=True
            )
            raise typer.Exit(1)
    logger.info(
        "Combined mode: %d ingroup, %d outgroup sequences", len(pop), len(out) if out else 0
    )
    return pop, out


def _build_options(**kwargs) -> AnalysisOptions:  # type: ignore[no-untyped-def]
    try:
        return AnalysisOptions(**kwargs)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def coding(
    ingroup: Annotated[
        Path,
        typer.Argument(help="Path to FASTA file (population sequences, or combined alignment)"),
    ],
    outgroup: Annotated[
        Optional[Path],
        typer.Argument(help="Path to FASTA file with outgroup sequences"),
    ] = None,
    ingroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for population sequences (combined file mode)"),
    ] = None,
    outgroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for outgroup sequences (combined file mode)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: pretty, tsv, or json"),
    ] = "pretty",
    reading_frame: Annotated[
        int,
        typer.Option("--reading-frame", "-r", min=1, max=3, help="Reading frame (1, 2, or 3)"),
    ] = 1,
    genetic_code: Annotated[
        int,
        typer.Option("--genetic-code", "-g", help="NCBI translation table id"),
    ] = 1,
    jc_pi: Annotated[bool, typer.Option(help="Jukes-Cantor correction of pi")] = False,
    jc_theta: Annotated[bool, typer.Option(help="Jukes-Cantor correction of theta")] = False,
    jc_k: Annotated[bool, typer.Option(help="Jukes-Cantor correction of divergence")] = False,
    cutoff_frequency: Annotated[
        float,
        typer.Option("--cutoff-frequency", "-c", help="Singleton cutoff frequency"),
    ] = 1.0,
    include_terminal: Annotated[
        bool,
        typer.Option(help="Allow evolutionary paths through stop codons"),
    ] = False,
    exclude_terminal_stop: Annotated[
        bool,
        typer.Option(
            "--exclude-terminal-stop/--keep-terminal-stop",
            help="Skip the final codon when it is a stop codon",
        ),
    ] = True,
    exclude_small_samples: Annotated[
        bool,
        typer.Option(help="Skip sites with fewer than 4 valid strains"),
    ] = False,
    max_strains: Annotated[
        Optional[int],
        typer.Option(help="Use at most this many strains per sample"),
    ] = None,
) -> None:
    """Analyze synonymous and non-synonymous variation of a coding alignment.

    Examples:

        geneanalyzer coding population.fa outgroup.fa

        geneanalyzer coding combined.fa --ingroup-match "mel" --outgroup-match "sim"

        geneanalyzer coding mito.fa --genetic-code 2 --format json
    """
    fmt = _parse_format(output_format)
    code = _genetic_code(genetic_code)
    options = _build_options(
        jc_pi=jc_pi,
        jc_theta=jc_theta,
        jc_k=jc_k,
        cutoff_frequency=cutoff_frequency,
        include_terminal=include_terminal,
        exclude_terminal_stop=exclude_terminal_stop,
        exclude_small_samples=exclude_small_samples,
        max_strains=max_strains,
        reading_frame=reading_frame,
    )
    pop, out = _load_samples(
        ingroup, outgroup, ingroup_match, outgroup_match, reading_frame, code
    )
    try:
        result = analyze_coding(pop, out, options, code)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(format_result(result, fmt))


@app.command()
def noncoding(
    ingroup: Annotated[
        Path,
        typer.Argument(help="Path to FASTA file (population sequences, or combined alignment)"),
    ],
    outgroup: Annotated[
        Optional[Path],
        typer.Argument(help="Path to FASTA file with outgroup sequences"),
    ] = None,
    ingroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for population sequences (combined file mode)"),
    ] = None,
    outgroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for outgroup sequences (combined file mode)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: pretty, tsv, or json"),
    ] = "pretty",
    jc_pi: Annotated[bool, typer.Option(help="Jukes-Cantor correction of pi")] = False,
    jc_theta: Annotated[bool, typer.Option(help="Jukes-Cantor correction of theta")] = False,
    jc_k: Annotated[bool, typer.Option(help="Jukes-Cantor correction of divergence")] = False,
    cutoff_frequency: Annotated[
        float,
        typer.Option("--cutoff-frequency", "-c", help="Singleton cutoff frequency"),
    ] = 1.0,
    exclude_small_samples: Annotated[
        bool,
        typer.Option(help="Skip sites with fewer than 4 valid strains"),
    ] = False,
    max_strains: Annotated[
        Optional[int],
        typer.Option(help="Use at most this many strains per sample"),
    ] = None,
) -> None:
    """Analyze nucleotide variation of a non-coding alignment.

    Examples:

        geneanalyzer noncoding introns.fa outgroup_introns.fa

        geneanalyzer noncoding combined.fa --ingroup-match "mel" --outgroup-match "sim"
    """
    fmt = _parse_format(output_format)
    options = _build_options(
        jc_pi=jc_pi,
        jc_theta=jc_theta,
        jc_k=jc_k,
        cutoff_frequency=cutoff_frequency,
        exclude_small_samples=exclude_small_samples,
        max_strains=max_strains,
    )
    pop, out = _load_samples(
        ingroup, outgroup, ingroup_match, outgroup_match, 1, GeneticCode.from_ncbi(1)
    )
    try:
        result = analyze_noncoding(pop, out, options)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(format_result(result, fmt))


@app.command()
def fourfold(
    ingroup: Annotated[
        Path,
        typer.Argument(help="Path to FASTA file (population sequences, or combined alignment)"),
    ],
    outgroup: Annotated[
        Optional[Path],
        typer.Argument(help="Path to FASTA file with outgroup sequences"),
    ] = None,
    ingroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for population sequences (combined file mode)"),
    ] = None,
    outgroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for outgroup sequences (combined file mode)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: pretty, tsv, or json"),
    ] = "pretty",
    reading_frame: Annotated[
        int,
        typer.Option("--reading-frame", "-r", min=1, max=3, help="Reading frame (1, 2, or 3)"),
    ] = 1,
    genetic_code: Annotated[
        int,
        typer.Option("--genetic-code", "-g", help="NCBI translation table id"),
    ] = 1,
    jc_pi: Annotated[bool, typer.Option(help="Jukes-Cantor correction of pi")] = False,
    jc_theta: Annotated[bool, typer.Option(help="Jukes-Cantor correction of theta")] = False,
    jc_k: Annotated[bool, typer.Option(help="Jukes-Cantor correction of divergence")] = False,
    cutoff_frequency: Annotated[
        float,
        typer.Option("--cutoff-frequency", "-c", help="Singleton cutoff frequency"),
    ] = 1.0,
    exclude_non_fourfold: Annotated[
        bool,
        typer.Option(
            "--exclude-non-fourfold/--skip-non-fourfold-strains",
            help="Drop sites where any strain has a non-fourfold codon, "
            "or only skip those strains",
        ),
    ] = True,
    exclude_nonsynonymous: Annotated[
        bool,
        typer.Option(
            "--exclude-nonsynonymous/--keep-nonsynonymous",
            help="Drop sites whose codons differ in amino acid",
        ),
    ] = True,
    exclude_small_samples: Annotated[
        bool,
        typer.Option(help="Skip sites with fewer than 4 valid strains"),
    ] = False,
    max_strains: Annotated[
        Optional[int],
        typer.Option(help="Use at most this many strains per sample"),
    ] = None,
) -> None:
    """Analyze variation at fourfold degenerate sites of a coding alignment.

    Examples:

        geneanalyzer fourfold population.fa outgroup.fa

        geneanalyzer fourfold combined.fa --ingroup-match "mel" --outgroup-match "sim"
    """
    fmt = _parse_format(output_format)
    code = _genetic_code(genetic_code)
    options = _build_options(
        jc_pi=jc_pi,
        jc_theta=jc_theta,
        jc_k=jc_k,
        cutoff_frequency=cutoff_frequency,
        exclude_small_samples=exclude_small_samples,
        max_strains=max_strains,
        reading_frame=reading_frame,
        exclude_non_fourfold=exclude_non_fourfold,
        exclude_nonsynonymous=exclude_nonsynonymous,
    )
    pop, out = _load_samples(
        ingroup, outgroup, ingroup_match, outgroup_match, reading_frame, code
    )
    try:
        result = analyze_fourfold(pop, out, options, code)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(format_result(result, fmt))


@app.command()
def derived(
    ingroup: Annotated[
        Path,
        typer.Argument(help="Path to FASTA file (population sequences, or combined alignment)"),
    ],
    outgroup: Annotated[
        Optional[Path],
        typer.Argument(help="Path to FASTA file with outgroup sequences"),
    ] = None,
    ingroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for population sequences (combined file mode)"),
    ] = None,
    outgroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for outgroup sequences (combined file mode)"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: pretty, tsv, or json"),
    ] = "pretty",
    fourfold_sites: Annotated[
        bool,
        typer.Option("--fourfold", help="Use fourfold degenerate sites of a coding alignment"),
    ] = False,
    constant_size: Annotated[
        bool,
        typer.Option(help="Divide allele counts by the sample size"),
    ] = False,
    reading_frame: Annotated[
        int,
        typer.Option("--reading-frame", "-r", min=1, max=3, help="Reading frame (1, 2, or 3)"),
    ] = 1,
    genetic_code: Annotated[
        int,
        typer.Option("--genetic-code", "-g", help="NCBI translation table id"),
    ] = 1,
    max_strains: Annotated[
        Optional[int],
        typer.Option(help="Use at most this many strains per sample"),
    ] = None,
) -> None:
    """List derived alleles and their frequencies, polarized by the outgroup.

    Examples:

        geneanalyzer derived introns.fa outgroup_introns.fa

        geneanalyzer derived combined.fa --ingroup-match "mel" --outgroup-match "sim" --fourfold
    """
    fmt = _parse_format(output_format)
    code = _genetic_code(genetic_code)
    options = _build_options(max_strains=max_strains, reading_frame=reading_frame)
    pop, out = _load_samples(
        ingroup, outgroup, ingroup_match, outgroup_match, reading_frame, code
    )
    if out is None:
        typer.echo("Error: Derived alleles need an outgroup", err=True)
        raise typer.Exit(1)
    try:
        result = analyze_derived_alleles(pop, out, options, fourfold_sites, constant_size, code)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(format_result(result, fmt))


@app.command()
def path(
    codons: Annotated[
        list[str],
        typer.Argument(help="Observed codons, e.g. AAA AAT ATA"),
    ],
    genetic_code: Annotated[
        int,
        typer.Option("--genetic-code", "-g", help="NCBI translation table id"),
    ] = 1,
    include_terminal: Annotated[
        bool,
        typer.Option(help="Allow evolutionary paths through stop codons"),
    ] = False,
) -> None:
    """Print the best evolutionary path through a set of codons.

    Observed codons are joined by '->', inferred intermediates by '=>'.
    """
    code = _genetic_code(genetic_code)
    observed = []
    for seq in codons:
        codon = Codon.get(seq)
        if codon is None:
            typer.echo(f"Error: Invalid codon '{seq}'", err=True)
            raise typer.Exit(1)
        observed.append(codon)

    best = find_best_path(observed, code, include_terminal)
    if best is None or len(best) == 0:
        typer.echo("No path found", err=True)
        raise typer.Exit(1)

    syn, nonsyn = best.polymorphism_counts()
    syn_ts, syn_tv, nonsyn_ts, nonsyn_tv = best.substitution_counts()
    typer.echo(str(best))
    typer.echo(f"Length: {len(best)}")
    typer.echo(f"Synonymous: {syn} (TS={syn_ts}, TV={syn_tv})")
    typer.echo(f"Non-synonymous: {nonsyn} (TS={nonsyn_ts}, TV={nonsyn_tv})")
    typer.echo("Amino acids: " + "-".join(code.translate(c) for c in best))


@app.command()
def batch(
    input_dir: Annotated[
        Path,
        typer.Argument(help="Directory containing FASTA files"),
    ],
    ingroup_match: Annotated[
        str,
        typer.Option(help="Filter pattern for population sequences"),
    ],
    outgroup_match: Annotated[
        Optional[str],
        typer.Option(help="Filter pattern for outgroup sequences"),
    ] = None,
    file_pattern: Annotated[
        str,
        typer.Option(help="Glob pattern to match alignment files"),
    ] = "*.fa",
    mode: Annotated[
        str,
        typer.Option("--mode", "-m", help="Analysis: coding, noncoding, or fourfold"),
    ] = "coding",
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: pretty, tsv, or json"),
    ] = "tsv",
    reading_frame: Annotated[
        int,
        typer.Option("--reading-frame", "-r", min=1, max=3, help="Reading frame (1, 2, or 3)"),
    ] = 1,
    genetic_code: Annotated[
        int,
        typer.Option("--genetic-code", "-g", help="NCBI translation table id"),
    ] = 1,
    jc_pi: Annotated[bool, typer.Option(help="Jukes-Cantor correction of pi")] = False,
    jc_theta: Annotated[bool, typer.Option(help="Jukes-Cantor correction of theta")] = False,
    jc_k: Annotated[bool, typer.Option(help="Jukes-Cantor correction of divergence")] = False,
    cutoff_frequency: Annotated[
        float,
        typer.Option("--cutoff-frequency", "-c", help="Singleton cutoff frequency"),
    ] = 1.0,
    include_terminal: Annotated[
        bool,
        typer.Option(help="Allow evolutionary paths through stop codons"),
    ] = False,
    exclude_terminal_stop: Annotated[
        bool,
        typer.Option(
            "--exclude-terminal-stop/--keep-terminal-stop",
            help="Skip the final codon when it is a stop codon",
        ),
    ] = True,
    exclude_small_samples: Annotated[
        bool,
        typer.Option(help="Skip sites with fewer than 4 valid strains"),
    ] = False,
    max_strains: Annotated[
        Optional[int],
        typer.Option(help="Use at most this many strains per sample"),
    ] = None,
    workers: Annotated[
        int,
        typer.Option("--workers", "-w", min=0, help="Parallel workers (0=auto, 1=sequential)"),
    ] = 0,
) -> None:
    """Analyze every alignment file in a directory.

    Each file holds the population and outgroup sequences of one gene,
    separated by name pattern. Coding results get a Benjamini-Hochberg
    adjusted MK p-value across all genes.

    Examples:

        geneanalyzer batch genes/ --ingroup-match "mel" --outgroup-match "sim"

        geneanalyzer batch genes/ --ingroup-match "mel" --outgroup-match "sim" -w 8

        geneanalyzer batch introns/ --mode noncoding --ingroup-match "mel" --file-pattern "*.fasta"
    """
    fmt = _parse_format(output_format)
    _genetic_code(genetic_code)
    if mode not in ANALYSIS_MODES:
        typer.echo(
            f"Error: Invalid mode '{mode}'. Must be {', '.join(ANALYSIS_MODES)}.", err=True
        )
        raise typer.Exit(1)
    options = _build_options(
        jc_pi=jc_pi,
        jc_theta=jc_theta,
        jc_k=jc_k,
        cutoff_frequency=cutoff_frequency,
        include_terminal=include_terminal,
        exclude_terminal_stop=exclude_terminal_stop,
        exclude_small_samples=exclude_small_samples,
        max_strains=max_strains,
        reading_frame=reading_frame,
    )

    alignment_files = sorted(input_dir.glob(file_pattern))
    if not alignment_files:
        typer.echo(f"No files matching '{file_pattern}' found in {input_dir}", err=True)
        raise typer.Exit(1)

    num_workers = get_worker_count(workers, len(alignment_files))
    logger.info("Processing %d files with %d workers", len(alignment_files), num_workers)
    tasks = [
        BatchTask(
            file_path=f,
            ingroup_match=ingroup_match,
            outgroup_match=outgroup_match,
            mode=mode,
            genetic_code=genetic_code,
            options=options,
        )
        for f in alignment_files
    ]
    results, warnings = run_parallel_batch(tasks, num_workers)

    for warning in warnings:
        typer.echo(warning, err=True)

    if results:
        adjusted_pvalues = compute_adjusted_pvalues(results) if mode == "coding" else None
        typer.echo(format_batch_results(results, fmt, adjusted_pvalues))
    else:
        typer.echo("No results to display", err=True)


@app.command()
def codes() -> None:
    """List the available genetic codes."""
    for table_id, (name, _, starts) in sorted(NCBI_TABLES.items()):
        typer.echo(f"{table_id:>3}  {name}  (start codons: {', '.join(sorted(starts))})")


@app.command()
def info(
    fasta: Annotated[
        Path,
        typer.Argument(help="Path to FASTA file"),
    ],
    reading_frame: Annotated[
        int,
        typer.Option("--reading-frame", "-r", min=1, max=3, help="Reading frame (1, 2, or 3)"),
    ] = 1,
) -> None:
    """Display sequence count, alignment length and codon count of a FASTA file."""
    seqs = SequenceSet.from_fasta(fasta, reading_frame=reading_frame)

    typer.echo(f"File: {fasta.name}")
    typer.echo(f"Sequences: {len(seqs)}")

    if seqs.sequences:
        typer.echo(f"Alignment length: {seqs.alignment_length} bp")
        typer.echo(f"Codons: {seqs.num_codons}")
        typer.echo(f"Reading frame: {reading_frame}")
        typer.echo("\nSequences:")
        for seq in seqs.sequences:
            typer.echo(f"  {seq.name} ({len(seq)} bp)")


if __name__ == "__main__":
    app()
