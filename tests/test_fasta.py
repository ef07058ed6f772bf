"""Tests for FASTA parser."""

from pathlib import Path

import pytest

from geneanalyzer.io.fasta import read_fasta, write_fasta


def test_read_fasta(tmp_path: Path) -> None:
    """Test reading a multi-line FASTA file."""
    fasta_file = tmp_path / "test.fa"
    fasta_file.write_text(">seq1\nATGC ATGC\nATGCATGC\n\n>seq2\nGGGG-CCC\n")

    sequences = list(read_fasta(fasta_file))

    assert sequences == [("seq1", "ATGCATGCATGCATGC"), ("seq2", "GGGG-CCC")]


def test_read_fasta_header_and_case(tmp_path: Path) -> None:
    """Test that the name is the first header word and bases are upper-cased."""
    fasta_file = tmp_path / "test.fa"
    fasta_file.write_text(">seq1 description here\natgcNnxX\n")

    name, sequence = next(read_fasta(fasta_file))

    assert name == "seq1"
    assert sequence == "ATGCNNXX"


def test_read_fasta_comments(tmp_path: Path) -> None:
    """Test that ';' lines are skipped."""
    fasta_file = tmp_path / "test.fa"
    fasta_file.write_text("; alignment of gene1\n>seq1\nATG\n; trailing\nAAA\n")

    assert list(read_fasta(fasta_file)) == [("seq1", "ATGAAA")]


def test_read_empty_fasta(tmp_path: Path) -> None:
    """Test reading an empty FASTA file."""
    fasta_file = tmp_path / "empty.fa"
    fasta_file.write_text("")

    assert list(read_fasta(fasta_file)) == []


def test_read_fasta_empty_header(tmp_path: Path) -> None:
    """Test that a header without a name is rejected."""
    fasta_file = tmp_path / "bad.fa"
    fasta_file.write_text(">seq1\nATG\n>\nAAA\n")

    with pytest.raises(ValueError, match=":3: empty FASTA header"):
        list(read_fasta(fasta_file))


def test_read_fasta_data_before_header(tmp_path: Path) -> None:
    """Test that sequence lines before any header are rejected."""
    fasta_file = tmp_path / "bad.fa"
    fasta_file.write_text("ATG\n>seq1\nAAA\n")

    with pytest.raises(ValueError, match="before the first header"):
        list(read_fasta(fasta_file))


def test_write_fasta(tmp_path: Path) -> None:
    """Test writing and wrapping a FASTA file."""
    sequences = [("seq1", "ATGCATGC"), ("seq2", "GGGGCC")]
    fasta_file = tmp_path / "output.fa"

    write_fasta(sequences, fasta_file, line_width=4)

    lines = fasta_file.read_text().strip().split("\n")
    assert lines == [">seq1", "ATGC", "ATGC", ">seq2", "GGGG", "CC"]
    assert list(read_fasta(fasta_file)) == sequences
