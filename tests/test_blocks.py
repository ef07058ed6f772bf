"""Tests for per-sample-size accumulators."""

import math
from types import SimpleNamespace

import pytest

from geneanalyzer.analysis.blocks import (
    CodonsBlock,
    SitesBlock,
    combined_codons_pi,
    combined_codons_theta,
    combined_sites_pi,
    combined_sites_theta,
    total_codon_sites,
    total_polymorphisms,
    total_sites,
    total_transitions,
)
from geneanalyzer.analysis.statistics import (
    correct_jc,
    tajimas_d,
    tajimas_d_codons,
    tajimas_d_prime_sites,
    tajimas_d_sites,
    watterson_theta,
)
from geneanalyzer.core.codons import DEFAULT_CODE
from geneanalyzer.core.composition import CodonComposition
from geneanalyzer.core.sites import SiteComposition


def sites_block(n_strains: int, *columns: str, **kwargs) -> SitesBlock:
    block = SitesBlock(n_strains, **kwargs)
    for column in columns:
        block.add_site(SiteComposition(column))
    return block


def composition(*seqs: str) -> CodonComposition:
    cc = CodonComposition(DEFAULT_CODE)
    for seq in seqs:
        cc.add_codon(seq)
    return cc


class TestSitesBlock:
    """Tests for SitesBlock."""

    def test_rejects_other_sample_sizes(self) -> None:
        """Test that only sites with exactly n_strains valid bases are added."""
        block = SitesBlock(4)

        assert block.add_site(SiteComposition("AAAT"))
        assert not block.add_site(SiteComposition("AAT"))
        assert not block.add_site(SiteComposition("AAATT"))
        assert block.sites_count == 1.0

    def test_accumulation(self) -> None:
        """Test pi, theta and counters over two sites."""
        block = sites_block(4, "AAAT", "AAAA")

        assert block.sites_count == 2.0
        assert block.pi == pytest.approx(0.25)
        assert block.theta == pytest.approx(watterson_theta(1, 2, 4))
        assert block.polymorphisms_count == 1
        assert block.singletons_count == 1
        assert block.transitions_count == 0.0

    def test_weighted_pi_sum(self) -> None:
        """Test that the pi sum is exposed before the Jukes-Cantor correction."""
        block = sites_block(4, "AAAT", "AAAA", jc_pi=True)

        assert block.weighted_pi_sum == pytest.approx(0.5)

    def test_jukes_cantor(self) -> None:
        """Test that the correction is applied on request."""
        block = sites_block(4, "AAAT", "AAAA", jc_pi=True)
        assert block.pi == pytest.approx(correct_jc(0.25))

    def test_empty(self) -> None:
        """Test an empty block."""
        block = SitesBlock(4)

        assert block.pi == 0.0
        assert block.theta == 0.0


class TestCodonsBlock:
    """Tests for CodonsBlock."""

    def test_accumulation(self) -> None:
        """Test one synonymous polymorphism."""
        block = CodonsBlock(2, DEFAULT_CODE)

        assert block.add_codon(composition("AAA", "AAG"))
        assert not block.add_codon(composition("AAA", "AAG", "AAA"))

        syn_sites, nonsyn_sites = block.sites_count
        assert syn_sites == pytest.approx(1 / 3)
        assert nonsyn_sites == pytest.approx(8 / 3)
        assert block.pi[0] == pytest.approx(3.0)
        assert block.pi[1] == 0.0
        assert block.polymorphisms_count == (1, 0)
        assert block.singletons_count == (2, 0)
        assert block.transitions_count == (1, 0)
        assert block.transversions_count == (0, 0)

    def test_pi_weighted_by_sites(self) -> None:
        """Test that block pi is the site-weighted mean over codon sites."""
        block = CodonsBlock(2, DEFAULT_CODE)
        block.add_codon(composition("AAA", "AAG"))
        block.add_codon(composition("GGG", "GGG"))

        # AAA/AAG: 1/3 synonymous sites at pi 3.0; GGG: 1 synonymous site at 0
        assert block.pi[0] == pytest.approx(1.0 / (1 / 3 + 1.0))

    def test_weighted_pi_sum(self) -> None:
        """Test that pi sums are weighted by synonymous and non-synonymous sites."""
        block = CodonsBlock(2, DEFAULT_CODE)
        block.add_codon(composition("AAA", "AAG"))

        assert block.weighted_pi_sum == pytest.approx((1.0, 0.0))


class TestCombinedBlocks:
    """Tests for combining blocks of different sample sizes."""

    def test_combined_sites(self) -> None:
        """Test site-weighted pi and totals over two blocks."""
        blocks = [sites_block(4, "AAAT", "AAAA"), sites_block(2, "AG")]

        assert combined_sites_pi(blocks) == pytest.approx((0.5 + 1.0) / 3)
        assert total_sites(blocks) == 3.0
        assert total_polymorphisms(blocks) == 2
        assert total_transitions(blocks) == 1.0

    def test_combined_theta(self) -> None:
        """Test that theta is averaged with site weights."""
        blocks = [sites_block(4, "AAAT", "AAAA"), sites_block(2, "AG")]
        expected = (watterson_theta(1, 2, 4) * 2 + watterson_theta(1, 1, 2) * 1) / 3

        assert combined_sites_theta(blocks) == pytest.approx(expected)

    def test_combined_codons(self) -> None:
        """Test that a single block combines to itself."""
        block = CodonsBlock(2, DEFAULT_CODE)
        block.add_codon(composition("AAA", "AAG"))

        assert combined_codons_pi([block]) == pytest.approx(block.pi)
        assert total_codon_sites([block]) == pytest.approx(block.sites_count)

    def test_combined_from_public_accessors(self) -> None:
        """Test that combination only needs the public block accessors."""
        sites = SimpleNamespace(
            n_strains=4, weighted_pi_sum=0.5, sites_count=2.0, polymorphisms_count=1
        )
        codons = SimpleNamespace(
            n_strains=2,
            weighted_pi_sum=(1.0, 0.0),
            sites_count=(1.0, 2.0),
            polymorphisms_count=(1, 0),
        )

        assert combined_sites_pi([sites]) == pytest.approx(0.25)
        assert combined_sites_theta([sites]) == pytest.approx(watterson_theta(1, 2, 4))
        assert total_sites([sites]) == 2.0
        assert combined_codons_pi([codons]) == pytest.approx((1.0, 0.0))
        assert combined_codons_theta([codons]) == pytest.approx(
            (watterson_theta(1, 1.0, 2), 0.0)
        )


class TestBlockTajima:
    """Tests for Tajima's D over blocks."""

    def test_single_block_matches_direct_formula(self) -> None:
        """Test that one block gives the plain Tajima's D."""
        block = sites_block(4, "AAAT", "AAAA")
        expected = tajimas_d(block.pi, block.theta, block.sites_count, 1, 4)

        assert tajimas_d_sites([block]) == pytest.approx(expected)

    def test_small_blocks_skipped(self) -> None:
        """Test that blocks with fewer than 4 strains give NaN."""
        block = sites_block(3, "AAT")

        assert math.isnan(tajimas_d_sites([block]))
        assert math.isnan(tajimas_d_prime_sites([block]))

    def test_codons_without_polymorphisms(self) -> None:
        """Test NaN when no block has polymorphisms."""
        block = CodonsBlock(4, DEFAULT_CODE)
        block.add_codon(composition("AAA", "AAA", "AAA", "AAA"))

        d_syn, d_nonsyn = tajimas_d_codons([block])
        assert math.isnan(d_syn)
        assert math.isnan(d_nonsyn)
