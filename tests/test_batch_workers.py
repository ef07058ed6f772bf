"""Tests for batch work units."""

import pickle
from pathlib import Path

from geneanalyzer.analysis.coding import CodingResult
from geneanalyzer.analysis.fourfold import FourfoldResult
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.batch_workers import BatchTask, process_gene

COMBINED = """>gene1_mel_1
ATGAAAGGGAAATAA
>gene1_mel_2
ATGAAGGGGAAATAA
>gene1_sim_1
ATGAAAGGTGAATAA
"""


def test_process_gene(tmp_path: Path) -> None:
    """Test a coding task and that its result survives pickling."""
    fasta = tmp_path / "gene1.fa"
    fasta.write_text(COMBINED)

    worker_result = process_gene(BatchTask(fasta, "mel", "sim"))

    assert worker_result.gene_id == "gene1"
    assert worker_result.error is None
    assert isinstance(worker_result.result, CodingResult)
    assert pickle.loads(pickle.dumps(worker_result)).result.mk.dn == 1


def test_process_gene_fourfold(tmp_path: Path) -> None:
    """Test the fourfold mode with task options."""
    fasta = tmp_path / "gene1.fa"
    fasta.write_text(COMBINED)

    task = BatchTask(fasta, "mel", "sim", mode="fourfold", options=AnalysisOptions(jc_k=True))
    worker_result = process_gene(task)

    assert isinstance(worker_result.result, FourfoldResult)


def test_process_gene_warnings(tmp_path: Path) -> None:
    """Test missing ingroup and outgroup sequences."""
    fasta = tmp_path / "gene1.fa"
    fasta.write_text(COMBINED)

    assert "No ingroup" in process_gene(BatchTask(fasta, "yak")).warning
    assert "No outgroup" in process_gene(BatchTask(fasta, "mel", "yak")).warning


def test_process_gene_error(tmp_path: Path) -> None:
    """Test that analysis errors are returned, not raised."""
    fasta = tmp_path / "gene1.fa"
    fasta.write_text(">a_mel\nATGAAA\n>b_sim\nATG\n")

    worker_result = process_gene(BatchTask(fasta, "mel", "sim"))

    assert worker_result.result is None
    assert "Alignment length mismatch" in worker_result.error
