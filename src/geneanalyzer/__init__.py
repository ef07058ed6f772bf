"""GeneAnalyzer: codon evolutionary paths and population genetics statistics."""

__version__ = "0.1.0"

from geneanalyzer.core.codons import Codon, GeneticCode
from geneanalyzer.core.composition import CodonComposition
from geneanalyzer.core.paths import EvolutionaryPath, find_best_path
from geneanalyzer.core.sequences import Sequence, SequenceSet
from geneanalyzer.core.sites import SiteComposition
from geneanalyzer.analysis.coding import CodingResult, analyze_coding
from geneanalyzer.analysis.derived import DerivedAlleleResult, analyze_derived_alleles
from geneanalyzer.analysis.fourfold import FourfoldResult, analyze_fourfold
from geneanalyzer.analysis.noncoding import NoncodingResult, analyze_noncoding
from geneanalyzer.analysis.options import AnalysisOptions

__all__ = [
    "Codon",
    "GeneticCode",
    "CodonComposition",
    "EvolutionaryPath",
    "find_best_path",
    "Sequence",
    "SequenceSet",
    "SiteComposition",
    "AnalysisOptions",
    "CodingResult",
    "analyze_coding",
    "NoncodingResult",
    "analyze_noncoding",
    "FourfoldResult",
    "analyze_fourfold",
    "DerivedAlleleResult",
    "analyze_derived_alleles",
]
