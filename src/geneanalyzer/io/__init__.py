"""Input/output utilities."""

from geneanalyzer.io.fasta import read_fasta, write_fasta
from geneanalyzer.io.output import OutputFormat, format_batch_results, format_result

__all__ = ["read_fasta", "write_fasta", "format_result", "format_batch_results", "OutputFormat"]
