"""Accumulators for sites and codons sharing the same sample size.

An alignment column only enters a block when exactly `n_strains` sequences
have a valid base (or codon) there, so theta and Tajima's D can be computed
with a single sample size per block. Blocks of different sizes are combined
by the module-level functions.
"""

from __future__ import annotations

from typing import Iterable

from geneanalyzer.analysis.statistics import codon_pi, correct_jc, site_pi, watterson_theta
from geneanalyzer.core.codons import CodonTable
from geneanalyzer.core.composition import CodonComposition
from geneanalyzer.core.sites import SiteComposition


def _jc(value: float, enabled: bool) -> float:
    return correct_jc(value) if enabled else value


class SitesBlock:
    """Running sums over non-coding sites with `n_strains` valid bases."""

    def __init__(
        self,
        n_strains: int,
        jc_pi: bool = False,
        jc_theta: bool = False,
        cutoff_frequency: float = 1.0,
    ):
        self.n_strains = n_strains
        self.jc_pi = jc_pi
        self.jc_theta = jc_theta
        self.cutoff_frequency = cutoff_frequency
        self._pi_sum = 0.0
        self._sites = 0
        self._polymorphisms = 0
        self._singletons = 0
        self._transitions = 0.0

    def add_site(self, sc: SiteComposition) -> bool:
        """Add a site; returns False if its valid base count is not n_strains."""
        if sc.valid_bases_count != self.n_strains:
            return False
        self._pi_sum += site_pi(sc)
        self._polymorphisms += sc.number_of_polymorphisms()
        self._singletons += sc.number_of_singletons(self.cutoff_frequency)
        self._transitions += sc.number_of_transitions()
        self._sites += 1
        return True

    @property
    def pi(self) -> float:
        value = self._pi_sum / self._sites if self._sites > 0 else 0.0
        return _jc(value, self.jc_pi)

    @property
    def theta(self) -> float:
        return _jc(watterson_theta(self._polymorphisms, self._sites, self.n_strains), self.jc_theta)

    @property
    def weighted_pi_sum(self) -> float:
        """Sum of per-site pi, uncorrected."""
        return self._pi_sum

    @property
    def sites_count(self) -> float:
        return float(self._sites)

    @property
    def polymorphisms_count(self) -> int:
        return self._polymorphisms

    @property
    def singletons_count(self) -> int:
        return self._singletons

    @property
    def transitions_count(self) -> float:
        """Transitions; transversions are polymorphisms minus transitions."""
        return self._transitions

    def __repr__(self) -> str:
        return f"SitesBlock(n_strains={self.n_strains}, sites={self._sites})"


class CodonsBlock:
    """Running synonymous and non-synonymous sums over codon sites.

    Every pair accessor returns (synonymous, non_synonymous).
    """

    def __init__(
        self,
        n_strains: int,
        table: CodonTable,
        jc_pi: bool = False,
        jc_theta: bool = False,
        cutoff_frequency: float = 1.0,
        include_terminal: bool = False,
    ):
        self.n_strains = n_strains
        self.table = table
        self.jc_pi = jc_pi
        self.jc_theta = jc_theta
        self.cutoff_frequency = cutoff_frequency
        self.include_terminal = include_terminal
        self._pi_sum = [0.0, 0.0]
        self._sites = [0.0, 0.0]
        self._polymorphisms = [0, 0]
        self._singletons = [0, 0]
        self._transitions = [0, 0]
        self._transversions = [0, 0]

    def add_codon(self, cc: CodonComposition) -> bool:
        """Add a codon site; returns False if its valid codon count is not n_strains.

        Pi is accumulated weighted by the number of sites so that the block
        value is the site-weighted mean.
        """
        if cc.valid_codons_count != self.n_strains:
            return False
        sites = cc.sites_count()
        pis = codon_pi(cc, self.table, self.include_terminal)
        poly = cc.number_of_polymorphisms()
        singletons = cc.number_of_singletons(self.cutoff_frequency)
        syn_ts, syn_tv, nonsyn_ts, nonsyn_tv = cc.substitutions_count()
        for k in range(2):
            self._pi_sum[k] += pis[k] * sites[k]
            self._sites[k] += sites[k]
            self._polymorphisms[k] += poly[k]
            self._singletons[k] += singletons[k]
        self._transitions[0] += syn_ts
        self._transitions[1] += nonsyn_ts
        self._transversions[0] += syn_tv
        self._transversions[1] += nonsyn_tv
        return True

    @property
    def pi(self) -> tuple[float, float]:
        return tuple(  # type: ignore[return-value]
            _jc(self._pi_sum[k] / self._sites[k] if self._sites[k] > 0 else 0.0, self.jc_pi)
            for k in range(2)
        )

    @property
    def theta(self) -> tuple[float, float]:
        return tuple(  # type: ignore[return-value]
            _jc(
                watterson_theta(self._polymorphisms[k], self._sites[k], self.n_strains),
                self.jc_theta,
            )
            for k in range(2)
        )

    @property
    def weighted_pi_sum(self) -> tuple[float, float]:
        """Site-weighted pi sums, uncorrected."""
        return self._pi_sum[0], self._pi_sum[1]

    @property
    def sites_count(self) -> tuple[float, float]:
        return self._sites[0], self._sites[1]

    @property
    def polymorphisms_count(self) -> tuple[int, int]:
        return self._polymorphisms[0], self._polymorphisms[1]

    @property
    def singletons_count(self) -> tuple[int, int]:
        return self._singletons[0], self._singletons[1]

    @property
    def transitions_count(self) -> tuple[int, int]:
        return self._transitions[0], self._transitions[1]

    @property
    def transversions_count(self) -> tuple[int, int]:
        return self._transversions[0], self._transversions[1]

    def __repr__(self) -> str:
        return (
            f"CodonsBlock(n_strains={self.n_strains}, "
            f"sites=({self._sites[0]:.2f}, {self._sites[1]:.2f}))"
        )


def combined_sites_pi(blocks: Iterable[SitesBlock], jc: bool = False) -> float:
    """Pi over all site blocks, weighted by their number of sites."""
    pi_sum = 0.0
    n_sites = 0
    for block in blocks:
        pi_sum += block.weighted_pi_sum
        n_sites += block.sites_count
    return _jc(pi_sum / n_sites if n_sites > 0 else 0.0, jc)


def combined_sites_theta(blocks: Iterable[SitesBlock], jc: bool = False) -> float:
    """Theta over all site blocks, weighted by their number of sites."""
    theta_sum = 0.0
    n_sites = 0
    for block in blocks:
        n = block.sites_count
        theta = _jc(watterson_theta(block.polymorphisms_count, n, block.n_strains), jc)
        theta_sum += theta * n
        n_sites += n
    return theta_sum / n_sites if n_sites > 0 else 0.0


def total_sites(blocks: Iterable[SitesBlock]) -> float:
    return sum((block.sites_count for block in blocks), 0.0)


def total_polymorphisms(blocks: Iterable[SitesBlock]) -> int:
    return sum(block.polymorphisms_count for block in blocks)


def total_singletons(blocks: Iterable[SitesBlock]) -> int:
    return sum(block.singletons_count for block in blocks)


def total_transitions(blocks: Iterable[SitesBlock]) -> float:
    return sum(block.transitions_count for block in blocks)


def combined_codons_pi(
    blocks: Iterable[CodonsBlock], jc: bool = False
) -> tuple[float, float]:
    """Synonymous and non-synonymous pi over all codon blocks, site-weighted."""
    pi_sum = [0.0, 0.0]
    n_sites = [0.0, 0.0]
    for block in blocks:
        weighted = block.weighted_pi_sum
        sites = block.sites_count
        for k in range(2):
            pi_sum[k] += weighted[k]
            n_sites[k] += sites[k]
    return tuple(  # type: ignore[return-value]
        _jc(pi_sum[k] / n_sites[k] if n_sites[k] > 0 else 0.0, jc) for k in range(2)
    )


def combined_codons_theta(
    blocks: Iterable[CodonsBlock], jc: bool = False
) -> tuple[float, float]:
    """Synonymous and non-synonymous theta over all codon blocks, site-weighted."""
    theta_sum = [0.0, 0.0]
    n_sites = [0.0, 0.0]
    for block in blocks:
        sites = block.sites_count
        poly = block.polymorphisms_count
        for k in range(2):
            theta = _jc(watterson_theta(poly[k], sites[k], block.n_strains), jc)
            theta_sum[k] += theta * sites[k]
            n_sites[k] += sites[k]
    return tuple(  # type: ignore[return-value]
        theta_sum[k] / n_sites[k] if n_sites[k] > 0 else 0.0 for k in range(2)
    )


def _pair_total(values: Iterable[tuple[float, float]]) -> tuple[float, float]:
    syn = 0.0
    nonsyn = 0.0
    for s, n in values:
        syn += s
        nonsyn += n
    return syn, nonsyn


def total_codon_sites(blocks: Iterable[CodonsBlock]) -> tuple[float, float]:
    return _pair_total(block.sites_count for block in blocks)


def total_codon_polymorphisms(blocks: Iterable[CodonsBlock]) -> tuple[int, int]:
    syn, nonsyn = _pair_total(block.polymorphisms_count for block in blocks)
    return int(syn), int(nonsyn)


def total_codon_singletons(blocks: Iterable[CodonsBlock]) -> tuple[int, int]:
    syn, nonsyn = _pair_total(block.singletons_count for block in blocks)
    return int(syn), int(nonsyn)


def total_codon_transitions(blocks: Iterable[CodonsBlock]) -> tuple[int, int]:
    syn, nonsyn = _pair_total(block.transitions_count for block in blocks)
    return int(syn), int(nonsyn)


def total_codon_transversions(blocks: Iterable[CodonsBlock]) -> tuple[int, int]:
    syn, nonsyn = _pair_total(block.transversions_count for block in blocks)
    return int(syn), int(nonsyn)
