"""Tests for the non-coding sequence analysis."""

import math

import pytest

from geneanalyzer.analysis.noncoding import NoncodingResult, analyze_noncoding
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.core.sequences import Sequence, SequenceSet

# Site 1 is a fixed A/G difference, site 4 a T/A polymorphism shared with
# the outgroup's T.
POPULATION = ["AACGT", "AACGA", "AACGT", "AACGT"]
OUTGROUP = ["AGCGT"]


def make_set(*seqs: str) -> SequenceSet:
    return SequenceSet([Sequence(f"seq{i}", s) for i, s in enumerate(seqs, start=1)])


class TestAnalyzeNoncoding:
    """Tests for analyze_noncoding."""

    def test_population(self) -> None:
        """Test diversity of the population sample."""
        result = analyze_noncoding(make_set(*POPULATION))

        assert isinstance(result, NoncodingResult)
        assert result.n_strains == 4
        assert result.alignment_length == 5
        assert result.analyzed_sites == 5
        assert result.population.sites == 5.0
        assert result.population.polymorphisms == 1
        assert result.population.singletons == 1
        assert result.population.transitions == 0.0
        assert result.population.transversions == 1.0
        # One site with pi 0.5 out of five
        assert result.population.pi == pytest.approx(0.1)
        assert result.divergence is None
        assert result.shared is None

    def test_divergence(self) -> None:
        """Test fixed differences and shared polymorphisms."""
        result = analyze_noncoding(make_set(*POPULATION), make_set(*OUTGROUP))
        div = result.divergence

        assert result.n_outgroup == 1
        assert div.sites == 5.0
        assert div.k == pytest.approx((1.0 + 0.25) / 5)
        assert div.fixed == 1
        assert div.fixed_transitions == 1.0
        assert div.fixed_transversions == 0.0
        assert div.polymorphisms == 1
        assert div.transitions == 0.0
        assert div.transversions == 1.0
        assert result.shared.polymorphisms == 1

    def test_gapped_site_skipped(self) -> None:
        """Test that a gap in any strain drops the site."""
        seqs = list(POPULATION)
        seqs[1] = "AA-GA"
        result = analyze_noncoding(make_set(*seqs))

        assert result.analyzed_sites == 4
        assert result.population.sites == 4.0

    def test_monomorphic(self) -> None:
        """Test that Tajima's D is undefined without polymorphisms."""
        result = analyze_noncoding(make_set("ACGT", "ACGT", "ACGT", "ACGT"))

        assert result.population.pi == 0.0
        assert math.isnan(result.population.tajimas_d)
        assert result.to_dict()["population"]["tajimas_d"] is None

    def test_jukes_cantor(self) -> None:
        """Test the correction of pi and K."""
        plain = analyze_noncoding(make_set(*POPULATION), make_set(*OUTGROUP))
        corrected = analyze_noncoding(
            make_set(*POPULATION),
            make_set(*OUTGROUP),
            AnalysisOptions(jc_pi=True, jc_k=True),
        )

        assert corrected.population.pi > plain.population.pi
        assert corrected.divergence.k > plain.divergence.k

    def test_length_mismatch(self) -> None:
        """Test that alignments of different lengths are rejected."""
        with pytest.raises(ValueError, match="Alignment length mismatch"):
            analyze_noncoding(make_set(*POPULATION), make_set("AAC"))

    def test_empty_population(self) -> None:
        """Test that an empty population is rejected."""
        with pytest.raises(ValueError, match="no sequences"):
            analyze_noncoding(SequenceSet())


class TestNoncodingResult:
    """Tests for NoncodingResult output."""

    def test_to_dict(self) -> None:
        """Test the dictionary form."""
        d = analyze_noncoding(make_set(*POPULATION), make_set(*OUTGROUP)).to_dict()

        assert d["analyzed_sites"] == 5
        assert d["population"]["polymorphisms"] == 1
        assert d["divergence"]["fixed"] == 1

    def test_str(self) -> None:
        """Test string representation."""
        s = str(analyze_noncoding(make_set(*POPULATION), make_set(*OUTGROUP)))

        assert "Non-coding Analysis Results" in s
        assert "Divergence" in s
