"""Diversity and divergence of non-coding sequences (introns, intergenic regions)."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from geneanalyzer.analysis.blocks import (
    SitesBlock,
    combined_sites_pi,
    combined_sites_theta,
    total_polymorphisms,
    total_singletons,
    total_sites,
    total_transitions,
)
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.analysis.results import PolymorphismSummary
from geneanalyzer.analysis.statistics import (
    correct_jc,
    site_divergence,
    tajimas_d_prime_sites,
    tajimas_d_sites,
)
from geneanalyzer.core.sequences import SequenceSet, as_sequence_set
from geneanalyzer.core.sites import SiteComposition

logger = logging.getLogger(__name__)


@dataclass
class SiteDivergence:
    """Divergence from the outgroup at non-coding sites.

    Sites with K >= 1 and more than one population base are fixed
    differences; sites with 0 < K < 1 are shared polymorphisms. Transitions
    are those of the pooled site.
    """

    sites: float
    k: float
    polymorphisms: int
    transitions: float
    transversions: float
    fixed: int
    fixed_transitions: float
    fixed_transversions: float

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"sites={self.sites:g}  K={self.k:.6f}\n"
            f"    polymorphisms={self.polymorphisms} (TS={self.transitions:.1f}, "
            f"TV={self.transversions:.1f})  fixed={self.fixed} "
            f"(TS={self.fixed_transitions:.1f}, TV={self.fixed_transversions:.1f})"
        )


@dataclass
class NoncodingResult:
    """Results of a non-coding sequence analysis."""

    n_strains: int
    n_outgroup: int
    alignment_length: int
    analyzed_sites: int
    population: PolymorphismSummary
    shared: PolymorphismSummary | None = None
    divergence: SiteDivergence | None = None

    def __str__(self) -> str:
        lines = [
            "Non-coding Analysis Results:",
            f"  Strains: {self.n_strains} (outgroup: {self.n_outgroup})",
            f"  Sites analyzed: {self.analyzed_sites} of {self.alignment_length}",
            f"  Population:\n    {self.population}",
        ]
        if self.shared is not None:
            lines.append(f"  Shared sites:\n    {self.shared}")
        if self.divergence is not None:
            lines.append(f"  Divergence:\n    {self.divergence}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert results to a dictionary."""
        return {
            "n_strains": self.n_strains,
            "n_outgroup": self.n_outgroup,
            "alignment_length": self.alignment_length,
            "analyzed_sites": self.analyzed_sites,
            "population": self.population.to_dict(),
            "shared": self.shared.to_dict() if self.shared is not None else None,
            "divergence": self.divergence.to_dict() if self.divergence is not None else None,
        }


def summarize_sites(blocks: list[SitesBlock], options: AnalysisOptions) -> PolymorphismSummary:
    n_poly = total_polymorphisms(blocks)
    n_sites = total_sites(blocks)
    if n_poly == 0:
        return PolymorphismSummary(
            sites=n_sites,
            pi=0.0,
            theta=0.0,
            tajimas_d=float("nan"),
            tajimas_d_prime=float("nan"),
            polymorphisms=0,
            singletons=0,
            transitions=0.0,
            transversions=0.0,
        )
    ts = total_transitions(blocks)
    return PolymorphismSummary(
        sites=n_sites,
        pi=combined_sites_pi(blocks, options.jc_pi),
        theta=combined_sites_theta(blocks, options.jc_theta),
        tajimas_d=tajimas_d_sites(blocks),
        tajimas_d_prime=tajimas_d_prime_sites(blocks),
        polymorphisms=n_poly,
        singletons=total_singletons(blocks),
        transitions=ts,
        transversions=n_poly - ts,
    )


def analyze_noncoding(
    population: SequenceSet | str | Path,
    outgroup: SequenceSet | str | Path | None = None,
    options: AnalysisOptions | None = None,
) -> NoncodingResult:
    """Analyze nucleotide variation of a non-coding alignment.

    Sites with a gap in any strain are skipped. The remaining sites are
    grouped into blocks by their number of valid bases.

    Args:
        population: SequenceSet or path to FASTA file for the population sample
        outgroup: SequenceSet or path to FASTA file for the outgroup, if any
        options: Analysis options (defaults if None); codon options are ignored

    Returns:
        NoncodingResult with diversity and divergence statistics

    Raises:
        ValueError: If the population is empty or the outgroup alignment has
            a different length
    """
    options = options or AnalysisOptions()
    pop = as_sequence_set(population).limit(options.max_strains)
    if len(pop) == 0:
        raise ValueError("Population sample contains no sequences")

    out: SequenceSet | None = None
    if outgroup is not None:
        out = as_sequence_set(outgroup).limit(options.max_strains)
        if out.alignment_length != pop.alignment_length:
            raise ValueError(
                f"Alignment length mismatch: population has {pop.alignment_length} sites, "
                f"outgroup has {out.alignment_length} sites"
            )

    def new_block(n_strains: int) -> SitesBlock:
        return SitesBlock(n_strains, options.jc_pi, options.jc_theta, options.cutoff_frequency)

    single: dict[int, SitesBlock] = {}
    shared: dict[int, SitesBlock] = {}
    k_sum = 0.0
    n_poly = 0
    poly_ts = 0.0
    n_fixed = 0
    fixed_ts = 0.0
    analyzed = 0

    for idx in range(pop.alignment_length):
        sc_pop = pop.site_composition(idx)
        if sc_pop is None:
            continue
        n_valid = sc_pop.valid_bases_count
        if n_valid == 0 or (n_valid < 4 and options.exclude_small_samples):
            continue
        if n_valid not in single:
            single[n_valid] = new_block(n_valid)
        single[n_valid].add_site(sc_pop)
        analyzed += 1

        if out is None:
            continue
        sc_out = out.site_composition(idx)
        if sc_out is None:
            continue
        if n_valid not in shared:
            shared[n_valid] = new_block(n_valid)
        shared[n_valid].add_site(sc_pop)

        merged = SiteComposition.merge(sc_pop, sc_out)
        k = site_divergence(sc_pop, sc_out)
        if k >= 1.0 and n_valid > 1:
            fixed_ts += merged.number_of_transitions()
            n_fixed += 1
        elif k > 0.0:
            poly_ts += merged.number_of_transitions()
            n_poly += 1
        k_sum += k

    logger.debug(
        "Analyzed %d of %d sites in %d sample-size blocks",
        analyzed,
        pop.alignment_length,
        len(single),
    )

    result = NoncodingResult(
        n_strains=len(pop),
        n_outgroup=len(out) if out is not None else 0,
        alignment_length=pop.alignment_length,
        analyzed_sites=analyzed,
        population=summarize_sites(list(single.values()), options),
    )
    if out is None:
        return result

    shared_blocks = list(shared.values())
    result.shared = summarize_sites(shared_blocks, options)
    div_sites = total_sites(shared_blocks)
    k_mean = k_sum / div_sites if div_sites > 0 else 0.0
    if options.jc_k:
        k_mean = correct_jc(k_mean)
    result.divergence = SiteDivergence(
        sites=div_sites,
        k=k_mean,
        polymorphisms=n_poly,
        transitions=poly_ts,
        transversions=n_poly - poly_ts,
        fixed=n_fixed,
        fixed_transitions=fixed_ts,
        fixed_transversions=n_fixed - fixed_ts,
    )
    return result
