"""Per-file work units of the batch command, runnable in worker processes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from geneanalyzer.analysis.coding import analyze_coding
from geneanalyzer.analysis.fourfold import analyze_fourfold
from geneanalyzer.analysis.noncoding import analyze_noncoding
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.core.codons import GeneticCode
from geneanalyzer.core.sequences import SequenceSet

ANALYSIS_MODES = ("coding", "noncoding", "fourfold")


@dataclass
class BatchTask:
    """Everything a worker needs to analyze one alignment file."""

    file_path: Path
    ingroup_match: str
    outgroup_match: str | None = None
    mode: str = "coding"
    genetic_code: int = 1
    options: AnalysisOptions = field(default_factory=AnalysisOptions)


@dataclass
class WorkerResult:
    """Outcome of one task: a result, a warning, or an error message."""

    gene_id: str
    result: Any = None
    warning: str | None = None
    error: str | None = None


def process_gene(task: BatchTask) -> WorkerResult:
    """Load one alignment file, split it by name pattern and analyze it.

    Analysis errors are returned in the WorkerResult instead of raised, so one
    bad file does not stop the batch.
    """
    gene_id = task.file_path.stem
    try:
        code = GeneticCode.from_ncbi(task.genetic_code)
        all_seqs = SequenceSet.from_fasta(task.file_path, task.options.reading_frame, code)
        pop = all_seqs.filter_by_name(task.ingroup_match)
        out = all_seqs.filter_by_name(task.outgroup_match) if task.outgroup_match else None
        if len(pop) == 0:
            return WorkerResult(gene_id, warning=f"No ingroup sequences in {task.file_path.name}")
        if out is not None and len(out) == 0:
            return WorkerResult(gene_id, warning=f"No outgroup sequences in {task.file_path.name}")

        if task.mode == "noncoding":
            result = analyze_noncoding(pop, out, task.options)
        elif task.mode == "fourfold":
            result = analyze_fourfold(pop, out, task.options, code)
        else:
            result = analyze_coding(pop, out, task.options, code)
    except ValueError as e:
        return WorkerResult(gene_id, error=f"Error processing {task.file_path.name}: {e}")
    return WorkerResult(gene_id, result=result)
