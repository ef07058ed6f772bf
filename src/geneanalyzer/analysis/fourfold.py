"""Diversity and divergence at fourfold degenerate sites of coding sequences.

The third base of every fourfold degenerate codon is treated as a single
neutral site and analyzed like a non-coding site.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from geneanalyzer.analysis.blocks import SitesBlock, total_sites
from geneanalyzer.analysis.noncoding import SiteDivergence, summarize_sites
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.analysis.results import PolymorphismSummary
from geneanalyzer.analysis.statistics import correct_jc, site_divergence
from geneanalyzer.core.codons import CodonTable
from geneanalyzer.core.sequences import SequenceSet, as_sequence_set
from geneanalyzer.core.sites import SiteComposition

logger = logging.getLogger(__name__)

UNKNOWN_CODON = "XXX"


def fourfold_site_composition(
    sequences: SequenceSet,
    codon_index: int,
    table: CodonTable,
    exclude_non_fourfold: bool = True,
    exclude_nonsynonymous: bool = True,
) -> SiteComposition | None:
    """Collect the third bases of the fourfold codons at one codon site.

    The first strain's codon is the reference amino acid. An unknown codon
    (XXX) contributes an X without further checks.

    Args:
        sequences: Aligned strains
        codon_index: Zero-based codon index
        table: Codon table deciding degeneracy and synonymy
        exclude_non_fourfold: Return None when a strain's codon is not
            fourfold degenerate; otherwise that strain is skipped
        exclude_nonsynonymous: Return None when a codon is not synonymous
            with the reference codon

    Returns:
        The composition, or None if the site is excluded, any strain has a gap
        or no strain has a fourfold codon
    """
    if not sequences.sequences:
        return None
    frame = sequences.reading_frame
    reference = sequences[0].get_codon(codon_index, frame).upper()
    sc = SiteComposition()
    found = False
    for seq in sequences.sequences:
        codon = seq.get_codon(codon_index, frame).upper()
        if len(codon) < 3 or "-" in codon:
            return None
        if codon != UNKNOWN_CODON:
            if not table.is_fourfold(codon):
                if exclude_non_fourfold:
                    return None
                continue
            if exclude_nonsynonymous and not table.are_synonymous(codon, reference):
                return None
            found = True
        sc.add_base(codon[2])
    return sc if found else None


@dataclass
class FourfoldResult:
    """Results of a fourfold degenerate site analysis."""

    n_strains: int
    n_outgroup: int
    n_codons: int
    analyzed_sites: int
    population: PolymorphismSummary
    shared: PolymorphismSummary | None = None
    divergence: SiteDivergence | None = None

    def __str__(self) -> str:
        lines = [
            "Fourfold Degenerate Site Results:",
            f"  Strains: {self.n_strains} (outgroup: {self.n_outgroup})",
            f"  Sites analyzed: {self.analyzed_sites} of {self.n_codons} codons",
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
            "n_codons": self.n_codons,
            "analyzed_sites": self.analyzed_sites,
            "population": self.population.to_dict(),
            "shared": self.shared.to_dict() if self.shared is not None else None,
            "divergence": self.divergence.to_dict() if self.divergence is not None else None,
        }


def analyze_fourfold(
    population: SequenceSet | str | Path,
    outgroup: SequenceSet | str | Path | None = None,
    options: AnalysisOptions | None = None,
    table: CodonTable | None = None,
) -> FourfoldResult:
    """Analyze variation at the fourfold degenerate sites of a coding alignment.

    Args:
        population: SequenceSet or path to FASTA file for the population sample
        outgroup: SequenceSet or path to FASTA file for the outgroup, if any
        options: Analysis options (defaults if None)
        table: Codon table (the population's genetic code if None)

    Returns:
        FourfoldResult with diversity and divergence statistics

    Raises:
        ValueError: If the population is empty or the outgroup alignment has
            a different length
    """
    options = options or AnalysisOptions()
    pop = as_sequence_set(population, options.reading_frame).limit(options.max_strains)
    if len(pop) == 0:
        raise ValueError("Population sample contains no sequences")
    table = table or pop.genetic_code

    out: SequenceSet | None = None
    if outgroup is not None:
        out = as_sequence_set(outgroup, options.reading_frame).limit(options.max_strains)
        if out.alignment_length != pop.alignment_length:
            raise ValueError(
                f"Alignment length mismatch: population has {pop.alignment_length} sites, "
                f"outgroup has {out.alignment_length} sites"
            )

    def site(sequences: SequenceSet, idx: int) -> SiteComposition | None:
        return fourfold_site_composition(
            sequences,
            idx,
            table,
            options.exclude_non_fourfold,
            options.exclude_nonsynonymous,
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

    for idx in range(pop.num_codons):
        sc_pop = site(pop, idx)
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
        sc_out = site(out, idx)
        if sc_out is None:
            continue
        if options.exclude_nonsynonymous and not table.are_synonymous(
            pop[0].get_codon(idx, pop.reading_frame), out[0].get_codon(idx, out.reading_frame)
        ):
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

    logger.debug("Analyzed %d of %d codons as fourfold sites", analyzed, pop.num_codons)

    result = FourfoldResult(
        n_strains=len(pop),
        n_outgroup=len(out) if out is not None else 0,
        n_codons=pop.num_codons,
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
