"""Static data for genetic codes and codon tables."""

from geneanalyzer.data.genetic_codes import (
    CODON_TABLE,
    NCBI_TABLES,
    STANDARD_CODE,
    VERTEBRATE_MITOCHONDRIAL_CODE,
)

__all__ = ["STANDARD_CODE", "VERTEBRATE_MITOCHONDRIAL_CODE", "CODON_TABLE", "NCBI_TABLES"]
