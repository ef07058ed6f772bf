"""Core data structures: codons, site and codon compositions, evolutionary paths."""

from geneanalyzer.core.codons import DEFAULT_CODE, Codon, CodonTable, GeneticCode
from geneanalyzer.core.composition import CodonComposition
from geneanalyzer.core.paths import EvolutionaryPath, find_best_path, find_best_path_to_any
from geneanalyzer.core.sequences import Sequence, SequenceSet
from geneanalyzer.core.sites import SiteComposition, SiteType

__all__ = [
    "Codon",
    "CodonTable",
    "GeneticCode",
    "DEFAULT_CODE",
    "CodonComposition",
    "EvolutionaryPath",
    "find_best_path",
    "find_best_path_to_any",
    "Sequence",
    "SequenceSet",
    "SiteComposition",
    "SiteType",
]
