"""Diversity, divergence and neutrality analyses."""

from geneanalyzer.analysis.coding import CodingResult, analyze_coding
from geneanalyzer.analysis.derived import DerivedAlleleResult, analyze_derived_alleles
from geneanalyzer.analysis.fourfold import FourfoldResult, analyze_fourfold
from geneanalyzer.analysis.noncoding import NoncodingResult, analyze_noncoding
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.analysis.results import MKTable, PolymorphismSummary
from geneanalyzer.analysis.statistics import (
    alpha,
    correct_jc,
    dos,
    fishers_exact,
    neutrality_index,
    tajimas_d,
    watterson_theta,
)

__all__ = [
    "AnalysisOptions",
    "CodingResult",
    "analyze_coding",
    "NoncodingResult",
    "analyze_noncoding",
    "FourfoldResult",
    "analyze_fourfold",
    "DerivedAlleleResult",
    "analyze_derived_alleles",
    "MKTable",
    "PolymorphismSummary",
    "correct_jc",
    "watterson_theta",
    "tajimas_d",
    "fishers_exact",
    "neutrality_index",
    "alpha",
    "dos",
]
