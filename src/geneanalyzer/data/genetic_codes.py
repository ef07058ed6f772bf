"""Genetic code tables and codon data."""

from __future__ import annotations

# Standard genetic code (NCBI table 1)
STANDARD_CODE: dict[str, str] = {
    "TTT": "F", "TTC": "F", "TTA": "L", "TTG": "L",
    "TCT": "S", "TCC": "S", "TCA": "S", "TCG": "S",
    "TAT": "Y", "TAC": "Y", "TAA": "*", "TAG": "*",
    "TGT": "C", "TGC": "C", "TGA": "*", "TGG": "W",
    "CTT": "L", "CTC": "L", "CTA": "L", "CTG": "L",
    "CCT": "P", "CCC": "P", "CCA": "P", "CCG": "P",
    "CAT": "H", "CAC": "H", "CAA": "Q", "CAG": "Q",
    "CGT": "R", "CGC": "R", "CGA": "R", "CGG": "R",
    "ATT": "I", "ATC": "I", "ATA": "I", "ATG": "M",
    "ACT": "T", "ACC": "T", "ACA": "T", "ACG": "T",
    "AAT": "N", "AAC": "N", "AAA": "K", "AAG": "K",
    "AGT": "S", "AGC": "S", "AGA": "R", "AGG": "R",
    "GTT": "V", "GTC": "V", "GTA": "V", "GTG": "V",
    "GCT": "A", "GCC": "A", "GCA": "A", "GCG": "A",
    "GAT": "D", "GAC": "D", "GAA": "E", "GAG": "E",
    "GGT": "G", "GGC": "G", "GGA": "G", "GGG": "G",
}

# Vertebrate mitochondrial code (NCBI table 2)
VERTEBRATE_MITOCHONDRIAL_CODE: dict[str, str] = {
    **STANDARD_CODE,
    "AGA": "*",
    "AGG": "*",
    "ATA": "M",
    "TGA": "W",
}

# Nucleotides, in the order used to enumerate codons and neighbors
NUCLEOTIDES = ["A", "C", "G", "T"]

# All 64 codons in alphabetical order
CODONS = sorted(STANDARD_CODE.keys())

# Build codon lookup table
CODON_TABLE: dict[str, int] = {codon: i for i, codon in enumerate(CODONS)}

# One-letter code -> (three-letter code, full name)
AMINO_ACIDS: dict[str, tuple[str, str]] = {
    "A": ("Ala", "Alanine"),
    "R": ("Arg", "Arginine"),
    "N": ("Asn", "Asparagine"),
    "D": ("Asp", "Aspartate"),
    "C": ("Cys", "Cysteine"),
    "Q": ("Gln", "Glutamine"),
    "E": ("Glu", "Glutamate"),
    "G": ("Gly", "Glycine"),
    "H": ("His", "Histidine"),
    "I": ("Ile", "Isoleucine"),
    "L": ("Leu", "Leucine"),
    "K": ("Lys", "Lysine"),
    "M": ("Met", "Methionine"),
    "F": ("Phe", "Phenylalanine"),
    "P": ("Pro", "Proline"),
    "S": ("Ser", "Serine"),
    "T": ("Thr", "Threonine"),
    "W": ("Trp", "Tryptophan"),
    "Y": ("Tyr", "Tyrosine"),
    "V": ("Val", "Valine"),
    "*": ("Ter", "Terminal"),
}

# NCBI table id -> (name, codon table, start codons)
NCBI_TABLES: dict[int, tuple[str, dict[str, str], frozenset[str]]] = {
    1: ("Standard", STANDARD_CODE, frozenset({"ATG"})),
    2: (
        "Vertebrate Mitochondrial",
        VERTEBRATE_MITOCHONDRIAL_CODE,
        frozenset({"ATT", "ATC", "ATA", "ATG", "GTG"}),
    ),
    11: (
        "Bacterial, Archaeal and Plant Plastid",
        STANDARD_CODE,
        frozenset({"TTG", "CTG", "ATT", "ATC", "ATA", "ATG", "GTG"}),
    ),
}
