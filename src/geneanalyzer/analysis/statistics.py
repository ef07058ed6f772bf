"""Population genetics statistics: diversity, divergence and neutrality tests."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Iterable, Sequence

import numpy as np
from scipy import stats

from geneanalyzer.core.codons import Codon, CodonTable, number_of_sites
from geneanalyzer.core.paths import find_best_path
from geneanalyzer.core.sites import SiteComposition

if TYPE_CHECKING:
    from geneanalyzer.analysis.blocks import CodonsBlock, SitesBlock
    from geneanalyzer.core.composition import CodonComposition


def correct_jc(d: float) -> float:
    """Apply the Jukes-Cantor correction to a distance.

    Values at or above 0.75 (saturation) and negative values are returned
    unchanged.
    """
    if d >= 0.75 or d < 0:
        return d
    return -0.75 * math.log(1.0 - 4.0 * d / 3.0)


def _harmonic_sums(n_sequences: int) -> tuple[float, float]:
    """Return a1 = sum(1/i) and a2 = sum(1/i^2) for i in 1..n-1."""
    i = np.arange(1, n_sequences, dtype=np.float64)
    return float(np.sum(1.0 / i)), float(np.sum(1.0 / (i * i)))


def _tajima_coefficients(n_sequences: int) -> tuple[float, float]:
    """Return the variance coefficients e1 and e2 of Tajima (1989)."""
    n = n_sequences
    a1, a2 = _harmonic_sums(n)
    b1 = (n + 1) / (3.0 * (n - 1))
    b2 = 2.0 * (n * n + n + 3) / (9.0 * n * (n - 1))
    c1 = b1 - 1.0 / a1
    c2 = b2 - (n + 2) / (n * a1) + a2 / (a1 * a1)
    return c1 / a1, c2 / (a1 * a1 + a2)


def _tajima_variance(n_polymorphic: int, n_sequences: int) -> float:
    e1, e2 = _tajima_coefficients(n_sequences)
    return e1 * n_polymorphic + e2 * n_polymorphic * (n_polymorphic - 1)


def watterson_theta(n_polymorphic: int, sites: float, n_sequences: int) -> float:
    """Calculate Watterson's theta per site.

    theta = (S / L) / a1, where a1 = sum(1/i) for i in 1..n-1.

    Args:
        n_polymorphic: Number of segregating sites (S)
        sites: Number of sites analyzed (L)
        n_sequences: Sample size (n)

    Returns:
        Theta per site, 0.0 for fewer than 2 sequences, no polymorphisms or
        no sites
    """
    if n_sequences < 2 or n_polymorphic == 0 or sites <= 0:
        return 0.0
    a1, _ = _harmonic_sums(n_sequences)
    return (n_polymorphic / sites) / a1


def tajimas_d(
    pi: float, theta: float, sites: float, n_polymorphic: int, n_sequences: int
) -> float:
    """Calculate Tajima's D.

    D = L * (pi - theta) / sqrt(e1 * S + e2 * S * (S - 1))

    Args:
        pi: Nucleotide diversity per site
        theta: Watterson's theta per site
        sites: Number of sites analyzed (L)
        n_polymorphic: Number of segregating sites (S)
        n_sequences: Sample size (n)

    Returns:
        Tajima's D, or NaN for fewer than 4 sequences or no polymorphisms
    """
    if n_sequences < 4 or n_polymorphic == 0:
        return math.nan
    variance = _tajima_variance(n_polymorphic, n_sequences)
    if variance <= 0:
        return math.nan
    return sites * (pi - theta) / math.sqrt(variance)


def tajimas_d_prime(
    pi: float, theta: float, sites: float, n_polymorphic: int, n_sequences: int
) -> float:
    """Calculate Tajima's D', normalised to the minimum possible pi.

    D' = (pi - theta) / (pi_min - theta), where pi_min = (2/n) * S / L is the
    diversity if every segregating site were a singleton.

    Returns:
        D', or NaN for fewer than 2 sequences, no polymorphisms or a
        zero denominator
    """
    if n_sequences < 2 or n_polymorphic == 0 or sites <= 0:
        return math.nan
    pi_min = (2.0 / n_sequences) * n_polymorphic / sites
    denominator = pi_min - theta
    if denominator == 0:
        return math.nan
    return (pi - theta) / denominator


def site_pi(sc: SiteComposition) -> float:
    """Calculate nucleotide diversity at one site from base counts.

    The number of pairwise mismatches is (N^2 - sum(n_i^2)) / 2 out of
    N(N-1)/2 comparisons.
    """
    n_total = sc.valid_bases_count
    if n_total < 2:
        return 0.0
    counts = np.asarray(sc.counts[:4], dtype=np.int64)
    diffs = n_total * n_total - int(np.sum(counts * counts))
    return diffs / (n_total * (n_total - 1))


def _pair_counts(
    c1: Codon, c2: Codon, table: CodonTable, include_terminal: bool
) -> tuple[int, int]:
    if c1 is c2:
        return 0, 0
    path = find_best_path([c1, c2], table, include_terminal)
    if path is None:
        return 0, 0
    return path.polymorphism_counts()


def codon_pi(
    cc: CodonComposition, table: CodonTable, include_terminal: bool = False
) -> tuple[float, float]:
    """Calculate synonymous and non-synonymous diversity at a codon site.

    Every pair of valid codons is joined by its best evolutionary path, and
    the mean numbers of synonymous and non-synonymous differences are divided
    by the mean numbers of synonymous and non-synonymous sites.

    Returns:
        Tuple of (pi_syn, pi_nonsyn); 0.0 for fewer than 2 codons or no sites
    """
    codons = cc.valid_codons()
    n = len(codons)
    if n < 2:
        return 0.0, 0.0

    n_syn = 0
    n_nonsyn = 0
    syn_sites = 0.0
    nonsyn_sites = 0.0
    for i, c1 in enumerate(codons):
        s, ns = number_of_sites(c1, table, include_terminal)
        syn_sites += s
        nonsyn_sites += ns
        for c2 in codons[i + 1 :]:
            ps, pn = _pair_counts(c1, c2, table, include_terminal)
            n_syn += ps
            n_nonsyn += pn

    n_pairs = n * (n - 1) // 2
    pi_s = (n_syn / n_pairs) / (syn_sites / n) if syn_sites > 0 else 0.0
    pi_n = (n_nonsyn / n_pairs) / (nonsyn_sites / n) if nonsyn_sites > 0 else 0.0
    return pi_s, pi_n


def site_divergence(pop: SiteComposition, out: SiteComposition) -> float:
    """Calculate the divergence K between two samples at one site.

    Every outgroup base X mismatches the N - n_X population bases that differ
    from it; K is the mismatch count divided by the number of comparisons.

    Returns:
        K, or 0.0 if either sample has no valid bases
    """
    n_pop = pop.valid_bases_count
    n_out = out.valid_bases_count
    if n_pop == 0 or n_out == 0:
        return 0.0
    pop_counts = np.asarray(pop.counts[:4], dtype=np.int64)
    out_counts = np.asarray(out.counts[:4], dtype=np.int64)
    mismatches = int(np.sum(out_counts * (n_pop - pop_counts)))
    return mismatches / (n_pop * n_out)


def codon_divergence(
    pop: Sequence[Codon],
    out: Sequence[Codon],
    table: CodonTable,
    include_terminal: bool = False,
) -> tuple[float, float]:
    """Calculate synonymous and non-synonymous divergence at a codon site.

    Every population codon is paired with every outgroup codon. Site counts
    are averaged over the codons of both samples.

    Returns:
        Tuple of (k_syn, k_nonsyn); 0.0 components where there are no sites
        or either sample is empty
    """
    if not pop or not out:
        return 0.0, 0.0

    n_syn = 0
    n_nonsyn = 0
    syn_sites = 0.0
    nonsyn_sites = 0.0
    for c in list(pop) + list(out):
        s, ns = number_of_sites(c, table, include_terminal)
        syn_sites += s
        nonsyn_sites += ns
    for c1 in pop:
        for c2 in out:
            ps, pn = _pair_counts(c1, c2, table, include_terminal)
            n_syn += ps
            n_nonsyn += pn

    n_pairs = len(pop) * len(out)
    n = len(pop) + len(out)
    k_s = (n_syn / n_pairs) / (syn_sites / n) if syn_sites > 0 else 0.0
    k_n = (n_nonsyn / n_pairs) / (nonsyn_sites / n) if nonsyn_sites > 0 else 0.0
    return k_s, k_n


def tajimas_d_sites(blocks: Iterable[SitesBlock]) -> float:
    """Combine Tajima's D over blocks of different sample sizes.

    D = sum(L_i * (pi_i - theta_i)) / sqrt(sum(V_i)), where V_i is the
    variance term of block i. Blocks with fewer than 4 strains are skipped.

    Returns:
        Combined D, or NaN if no block contributes
    """
    numerator = 0.0
    variance = 0.0
    for block in blocks:
        if block.n_strains < 4:
            continue
        numerator += block.sites_count * (block.pi - block.theta)
        variance += _tajima_variance(block.polymorphisms_count, block.n_strains)
    if variance <= 0:
        return math.nan
    return numerator / math.sqrt(variance)


def tajimas_d_codons(blocks: Iterable[CodonsBlock]) -> tuple[float, float]:
    """Combined synonymous and non-synonymous Tajima's D over codon blocks."""
    numerator = [0.0, 0.0]
    variance = [0.0, 0.0]
    for block in blocks:
        if block.n_strains < 4:
            continue
        sites = block.sites_count
        pis = block.pi
        thetas = block.theta
        poly = block.polymorphisms_count
        for k in range(2):
            numerator[k] += sites[k] * (pis[k] - thetas[k])
            variance[k] += _tajima_variance(poly[k], block.n_strains)
    return tuple(  # type: ignore[return-value]
        numerator[k] / math.sqrt(variance[k]) if variance[k] > 0 else math.nan
        for k in range(2)
    )


def tajimas_d_prime_sites(blocks: Iterable[SitesBlock]) -> float:
    """Combined Tajima's D' over site blocks with at least 4 strains."""
    numerator = 0.0
    denominator = 0.0
    for block in blocks:
        n_poly = block.polymorphisms_count
        if block.n_strains < 4 or n_poly == 0:
            continue
        theta = block.theta
        numerator += block.pi - theta
        pi_min = (2.0 / block.n_strains) * n_poly / block.sites_count
        denominator += pi_min - theta
    if denominator == 0:
        return math.nan
    return numerator / denominator


def tajimas_d_prime_codons(blocks: Iterable[CodonsBlock]) -> tuple[float, float]:
    """Combined synonymous and non-synonymous Tajima's D' over codon blocks."""
    numerator = [0.0, 0.0]
    denominator = [0.0, 0.0]
    for block in blocks:
        if block.n_strains < 4:
            continue
        sites = block.sites_count
        pis = block.pi
        thetas = block.theta
        poly = block.polymorphisms_count
        for k in range(2):
            if sites[k] <= 0:
                continue
            numerator[k] += pis[k] - thetas[k]
            pi_min = (2.0 / block.n_strains) * poly[k] / sites[k]
            denominator[k] += pi_min - thetas[k]
    return tuple(  # type: ignore[return-value]
        numerator[k] / denominator[k] if denominator[k] != 0 else math.nan
        for k in range(2)
    )


def fishers_exact(
    dn: int, ds: int, pn: int, ps: int, alternative: str = "two-sided"
) -> float:
    """Perform Fisher's exact test on the McDonald-Kreitman table.

    The table is:
                     | Non-synonymous | Synonymous
        ---------------------------------------------
        Divergence   |      dn        |     ds
        Polymorphism |      pn        |     ps

    Args:
        dn: Non-synonymous fixed differences
        ds: Synonymous fixed differences
        pn: Non-synonymous polymorphisms
        ps: Synonymous polymorphisms
        alternative: 'two-sided', 'less', or 'greater'

    Returns:
        p-value from Fisher's exact test
    """
    _, p_value = stats.fisher_exact([[dn, ds], [pn, ps]], alternative=alternative)
    return float(p_value)


def neutrality_index(dn: float, ds: float, pn: float, ps: float) -> float | None:
    """Calculate the Neutrality Index NI = (Pn/Ps) / (Dn/Ds).

    Returns:
        NI, or None when Ds, Ps or Dn is zero
    """
    if ds == 0 or ps == 0 or dn == 0:
        return None
    return (pn / ps) / (dn / ds)


def alpha(dn: float, ds: float, pn: float, ps: float) -> float | None:
    """Proportion of adaptive substitutions, 1 - (Ds * Pn) / (Dn * Ps).

    Smith and Eyre-Walker (2002). Returns None when Dn or Ps is zero.
    """
    if dn == 0 or ps == 0:
        return None
    return 1.0 - (ds * pn) / (dn * ps)


def dos(dn: float, ds: float, pn: float, ps: float) -> float | None:
    """Direction of Selection, Dn/(Dn+Ds) - Pn/(Pn+Ps).

    Stoletzki & Eyre-Walker (2011). Returns None when all counts are zero.
    """
    d_total = dn + ds
    p_total = pn + ps
    if d_total == 0 and p_total == 0:
        return None
    d_ratio = dn / d_total if d_total > 0 else 0.0
    p_ratio = pn / p_total if p_total > 0 else 0.0
    return d_ratio - p_ratio
