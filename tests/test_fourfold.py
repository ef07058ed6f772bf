"""Tests for the fourfold degenerate site analysis."""

import math

import pytest

from geneanalyzer.analysis.fourfold import (
    FourfoldResult,
    analyze_fourfold,
    fourfold_site_composition,
)
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.core.codons import DEFAULT_CODE
from geneanalyzer.core.sequences import Sequence, SequenceSet

# Codon 1 is Ala with a T/C singleton, codon 2 Lys (twofold), codon 3 Gly
# fixed for A against the outgroup's G.
POPULATION = ["GCTAAAGGA", "GCCAAAGGA", "GCTAAGGGA", "GCTAAAGGA"]
OUTGROUP = ["GCTAAAGGG"]


def make_set(*seqs: str) -> SequenceSet:
    return SequenceSet([Sequence(f"seq{i}", s) for i, s in enumerate(seqs, start=1)])


class TestFourfoldSiteComposition:
    """Tests for fourfold_site_composition."""

    def test_third_bases(self) -> None:
        """Test that third bases of fourfold codons are collected."""
        sc = fourfold_site_composition(make_set(*POPULATION), 0, DEFAULT_CODE)

        assert sc.base_count("T") == 3
        assert sc.base_count("C") == 1

    def test_non_fourfold_site_dropped(self) -> None:
        """Test that a twofold codon drops the site by default."""
        assert fourfold_site_composition(make_set(*POPULATION), 1, DEFAULT_CODE) is None

    def test_non_fourfold_strain_skipped(self) -> None:
        """Test that only the non-fourfold strain is skipped on request."""
        seqs = make_set("CTA", "CTA", "TTA", "CTG")

        assert fourfold_site_composition(seqs, 0, DEFAULT_CODE) is None
        sc = fourfold_site_composition(seqs, 0, DEFAULT_CODE, exclude_non_fourfold=False)
        assert sc.valid_bases_count == 3
        assert sc.base_count("A") == 2
        assert sc.base_count("G") == 1

    def test_no_fourfold_codon(self) -> None:
        """Test that a site without fourfold codons gives None."""
        seqs = make_set("AAA", "AAG")
        assert fourfold_site_composition(seqs, 0, DEFAULT_CODE, exclude_non_fourfold=False) is None

    def test_nonsynonymous_codons(self) -> None:
        """Test codons that do not encode the first strain's amino acid."""
        seqs = make_set("GCT", "GTT", "GCT")

        assert fourfold_site_composition(seqs, 0, DEFAULT_CODE) is None
        sc = fourfold_site_composition(seqs, 0, DEFAULT_CODE, exclude_nonsynonymous=False)
        assert sc.base_count("T") == 3

    def test_gap_drops_site(self) -> None:
        """Test that a gap in any strain drops the site."""
        assert fourfold_site_composition(make_set("GCT", "GC-"), 0, DEFAULT_CODE) is None

    def test_unknown_codon(self) -> None:
        """Test that XXX adds an X without the degeneracy check."""
        sc = fourfold_site_composition(make_set("GCT", "XXX", "GCA"), 0, DEFAULT_CODE)

        assert sc.valid_bases_count == 2
        assert sc.total_bases_count == 3


class TestAnalyzeFourfold:
    """Tests for analyze_fourfold."""

    def test_population(self) -> None:
        """Test diversity at fourfold sites."""
        result = analyze_fourfold(make_set(*POPULATION))

        assert isinstance(result, FourfoldResult)
        assert result.n_strains == 4
        assert result.n_codons == 3
        assert result.analyzed_sites == 2
        assert result.population.sites == 2.0
        assert result.population.polymorphisms == 1
        assert result.population.singletons == 1
        assert result.population.transitions == 1.0
        # One site with pi 0.5 out of two
        assert result.population.pi == pytest.approx(0.25)
        assert result.shared is None
        assert result.divergence is None

    def test_divergence(self) -> None:
        """Test fixed differences and shared polymorphisms at fourfold sites."""
        result = analyze_fourfold(make_set(*POPULATION), make_set(*OUTGROUP))
        div = result.divergence

        assert result.n_outgroup == 1
        assert div.sites == 2.0
        assert div.k == pytest.approx((0.25 + 1.0) / 2)
        assert div.fixed == 1
        assert div.fixed_transitions == 1.0
        assert div.polymorphisms == 1
        assert div.transitions == 1.0
        assert result.shared.polymorphisms == 1

    def test_outgroup_amino_acid_differs(self) -> None:
        """Test that sites where population and outgroup differ in amino acid are skipped."""
        pop = make_set("GCT", "GCC", "GCT", "GCT")
        out = make_set("GGT")

        strict = analyze_fourfold(pop, out)
        relaxed = analyze_fourfold(pop, out, AnalysisOptions(exclude_nonsynonymous=False))

        assert strict.analyzed_sites == 1
        assert strict.divergence.sites == 0.0
        assert strict.divergence.k == 0.0
        assert relaxed.divergence.sites == 1.0

    def test_small_samples(self) -> None:
        """Test that sites with fewer than 4 strains can be excluded."""
        options = AnalysisOptions(exclude_small_samples=True)
        result = analyze_fourfold(make_set("GCT", "GCC", "GCT"), options=options)

        assert result.analyzed_sites == 0
        assert math.isnan(result.population.tajimas_d)

    def test_to_dict(self) -> None:
        """Test the dictionary form."""
        data = analyze_fourfold(make_set(*POPULATION), make_set(*OUTGROUP)).to_dict()

        assert data["n_codons"] == 3
        assert data["divergence"]["fixed"] == 1

    def test_empty_population(self) -> None:
        """Test that an empty population is rejected."""
        with pytest.raises(ValueError, match="no sequences"):
            analyze_fourfold(SequenceSet())

    def test_length_mismatch(self) -> None:
        """Test that outgroups of another length are rejected."""
        with pytest.raises(ValueError, match="Alignment length mismatch"):
            analyze_fourfold(make_set("GCTGCT"), make_set("GCT"))
