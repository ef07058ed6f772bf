"""Synonymous and non-synonymous diversity and divergence of coding sequences."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from geneanalyzer.analysis.blocks import (
    CodonsBlock,
    combined_codons_pi,
    combined_codons_theta,
    total_codon_polymorphisms,
    total_codon_singletons,
    total_codon_sites,
    total_codon_transitions,
    total_codon_transversions,
)
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.analysis.results import MKTable, PolymorphismSummary
from geneanalyzer.analysis.statistics import (
    codon_divergence,
    correct_jc,
    tajimas_d_codons,
    tajimas_d_prime_codons,
)
from geneanalyzer.core.codons import CodonTable
from geneanalyzer.core.composition import CodonComposition, paths_overlap
from geneanalyzer.core.paths import SubstitutionClass, find_best_path_to_any
from geneanalyzer.core.sequences import SequenceSet, as_sequence_set
from geneanalyzer.core.sites import shares_bases

logger = logging.getLogger(__name__)


@dataclass
class DivergenceSummary:
    """Divergence between population and outgroup over one class of sites.

    Polymorphisms and their transitions/transversions are pooled over both
    samples at sites where the outgroup has data.
    """

    sites: float
    k: float
    polymorphisms: int
    transitions: int
    transversions: int
    fixed: int
    fixed_transitions: int
    fixed_transversions: int

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"sites={self.sites:.2f}  K={self.k:.6f}\n"
            f"    polymorphisms={self.polymorphisms} (TS={self.transitions}, "
            f"TV={self.transversions})  fixed={self.fixed} "
            f"(TS={self.fixed_transitions}, TV={self.fixed_transversions})"
        )


@dataclass
class CodingResult:
    """Results of a coding sequence analysis.

    `population_*` summarize every analyzed codon site, `shared_*` only the
    sites where the outgroup has data as well. The outgroup-dependent fields
    are None when no outgroup was given.
    """

    n_strains: int
    n_outgroup: int
    n_codons: int
    analyzed_codons: int
    population_syn: PolymorphismSummary
    population_nonsyn: PolymorphismSummary
    shared_syn: PolymorphismSummary | None = None
    shared_nonsyn: PolymorphismSummary | None = None
    divergence_syn: DivergenceSummary | None = None
    divergence_nonsyn: DivergenceSummary | None = None
    mk: MKTable | None = None

    def __str__(self) -> str:
        lines = [
            "Coding Analysis Results:",
            f"  Strains: {self.n_strains} (outgroup: {self.n_outgroup})",
            f"  Codon sites analyzed: {self.analyzed_codons} of {self.n_codons}",
            f"  Population, synonymous:\n    {self.population_syn}",
            f"  Population, non-synonymous:\n    {self.population_nonsyn}",
        ]
        if self.shared_syn is not None and self.shared_nonsyn is not None:
            lines.append(f"  Shared sites, synonymous:\n    {self.shared_syn}")
            lines.append(f"  Shared sites, non-synonymous:\n    {self.shared_nonsyn}")
        if self.divergence_syn is not None and self.divergence_nonsyn is not None:
            lines.append(f"  Divergence, synonymous:\n    {self.divergence_syn}")
            lines.append(f"  Divergence, non-synonymous:\n    {self.divergence_nonsyn}")
        if self.mk is not None:
            lines.append("MK Test Results:")
            lines.append(str(self.mk))
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert results to a dictionary."""

        def pair(syn, nonsyn):  # type: ignore[no-untyped-def]
            if syn is None or nonsyn is None:
                return None
            return {"syn": syn.to_dict(), "nonsyn": nonsyn.to_dict()}

        return {
            "n_strains": self.n_strains,
            "n_outgroup": self.n_outgroup,
            "n_codons": self.n_codons,
            "analyzed_codons": self.analyzed_codons,
            "population": pair(self.population_syn, self.population_nonsyn),
            "shared": pair(self.shared_syn, self.shared_nonsyn),
            "divergence": pair(self.divergence_syn, self.divergence_nonsyn),
            "mk": self.mk.to_dict() if self.mk is not None else None,
        }


def is_site_divergent(cc1: CodonComposition, cc2: CodonComposition) -> bool:
    """True if both samples have a path and the paths share no codon."""
    path1 = cc1.evolutionary_path()
    path2 = cc2.evolutionary_path()
    if len(path1) == 0 or len(path2) == 0:
        return False
    return not paths_overlap(path1, path2)


def count_divergent_substitutions(
    population: CodonComposition, outgroup: CodonComposition
) -> tuple[int, int, int, int, int, int]:
    """Classify the fixed differences at a divergent codon site.

    Every codon position where the two samples share no base holds one fixed
    difference. For each population path codon carrying a base the outgroup
    lacks, the best path to any outgroup codon is searched and the
    substitution of that base classified along it; the first synonymous one
    decides the position. Otherwise the difference is non-synonymous, and a
    transition if any inspected substitution was one.

    Returns:
        Tuple of (syn, syn_transitions, syn_transversions,
        nonsyn, nonsyn_transitions, nonsyn_transversions)
    """
    counts = [0] * 6
    pop_path = population.evolutionary_path()
    out_codons = list(outgroup.evolutionary_path().codons)

    for pos in range(3):
        sc_pop = population.site_composition(pos)
        sc_out = outgroup.site_composition(pos)
        if sc_pop is None or sc_out is None or shares_bases(sc_pop, sc_out):
            continue

        is_transition = False
        synonymous = False
        for codon in pop_path:
            base = codon[pos]
            if sc_pop.base_count(base) == 0 or sc_out.base_count(base) > 0:
                continue
            path = find_best_path_to_any(
                codon, out_codons, population.table, population.include_terminal
            )
            kind = path.substitution_type(base, pos) if path is not None else SubstitutionClass.NONE
            if kind & SubstitutionClass.TRANSITION:
                is_transition = True
            if kind & SubstitutionClass.SYNONYMOUS:
                counts[0] += 1
                if kind & SubstitutionClass.TRANSITION:
                    counts[1] += 1
                elif kind & SubstitutionClass.TRANSVERSION:
                    counts[2] += 1
                synonymous = True
                break

        if synonymous:
            continue
        counts[3] += 1
        counts[4 if is_transition else 5] += 1

    return counts[0], counts[1], counts[2], counts[3], counts[4], counts[5]


def _summarize(
    blocks: list[CodonsBlock], options: AnalysisOptions
) -> tuple[PolymorphismSummary, PolymorphismSummary]:
    sites = total_codon_sites(blocks)
    pis = combined_codons_pi(blocks, options.jc_pi)
    thetas = combined_codons_theta(blocks, options.jc_theta)
    d = tajimas_d_codons(blocks)
    d_prime = tajimas_d_prime_codons(blocks)
    poly = total_codon_polymorphisms(blocks)
    singletons = total_codon_singletons(blocks)
    ts = total_codon_transitions(blocks)
    tv = total_codon_transversions(blocks)
    syn, nonsyn = (
        PolymorphismSummary(
            sites=sites[k],
            pi=pis[k],
            theta=thetas[k],
            tajimas_d=d[k],
            tajimas_d_prime=d_prime[k],
            polymorphisms=poly[k],
            singletons=singletons[k],
            transitions=ts[k],
            transversions=tv[k],
        )
        for k in range(2)
    )
    return syn, nonsyn


def analyze_coding(
    population: SequenceSet | str | Path,
    outgroup: SequenceSet | str | Path | None = None,
    options: AnalysisOptions | None = None,
    table: CodonTable | None = None,
) -> CodingResult:
    """Analyze synonymous and non-synonymous variation of a coding alignment.

    Codon sites with a gap in any strain are skipped. Sites are grouped into
    blocks by their number of valid codons, so that every block has a single
    sample size; blocks are then combined into per-gene statistics.

    Args:
        population: SequenceSet or path to FASTA file for the population sample
        outgroup: SequenceSet or path to FASTA file for the outgroup, if any
        options: Analysis options (defaults if None)
        table: Codon table (the population's genetic code if None)

    Returns:
        CodingResult with diversity, divergence and MK statistics

    Raises:
        ValueError: If the population is empty or the outgroup alignment has
            a different number of codons
    """
    options = options or AnalysisOptions()
    pop = as_sequence_set(population, options.reading_frame, table).limit(options.max_strains)
    table = table or pop.genetic_code
    if len(pop) == 0:
        raise ValueError("Population sample contains no sequences")

    out: SequenceSet | None = None
    if outgroup is not None:
        out = as_sequence_set(outgroup, options.reading_frame, table).limit(options.max_strains)
        if out.num_codons != pop.num_codons:
            raise ValueError(
                f"Alignment length mismatch: population has {pop.num_codons} codons, "
                f"outgroup has {out.num_codons} codons"
            )

    def new_block(n_strains: int) -> CodonsBlock:
        return CodonsBlock(
            n_strains,
            table,
            jc_pi=options.jc_pi,
            jc_theta=options.jc_theta,
            cutoff_frequency=options.cutoff_frequency,
            include_terminal=options.include_terminal,
        )

    single: dict[int, CodonsBlock] = {}
    shared: dict[int, CodonsBlock] = {}
    k_sum = [0.0, 0.0]
    div_sites = [0.0, 0.0]
    poly = [0, 0]
    poly_ts = [0, 0]
    poly_tv = [0, 0]
    fixed = [0] * 6
    analyzed = 0

    for idx in range(pop.num_codons):
        cc_pop = pop.codon_composition(
            idx, table, options.include_terminal, options.exclude_terminal_stop
        )
        if cc_pop is None:
            continue
        n_valid = cc_pop.valid_codons_count
        if n_valid == 0 or (n_valid < 4 and options.exclude_small_samples):
            continue
        if n_valid not in single:
            single[n_valid] = new_block(n_valid)
        single[n_valid].add_codon(cc_pop)
        analyzed += 1

        if out is None:
            continue
        cc_out = out.codon_composition(
            idx, table, options.include_terminal, options.exclude_terminal_stop
        )
        if cc_out is None:
            continue
        if n_valid not in shared:
            shared[n_valid] = new_block(n_valid)
        shared[n_valid].add_codon(cc_pop)

        ks = codon_divergence(
            cc_pop.valid_codons(), cc_out.valid_codons(), table, options.include_terminal
        )
        merged = CodonComposition.merge(cc_pop, cc_out)
        sites = merged.sites_count() if merged is not None else (0.0, 0.0)
        for k in range(2):
            div_sites[k] += sites[k]
            k_sum[k] += ks[k] * sites[k]

        if is_site_divergent(cc_out, cc_pop) and cc_pop.valid_codons_count > 1:
            for i, n in enumerate(count_divergent_substitutions(cc_pop, cc_out)):
                fixed[i] += n

        p_pop = cc_pop.number_of_polymorphisms()
        p_out = cc_out.number_of_polymorphisms()
        s_pop = cc_pop.substitutions_count()
        s_out = cc_out.substitutions_count()
        for k in range(2):
            poly[k] += p_pop[k] + p_out[k]
            poly_ts[k] += s_pop[2 * k] + s_out[2 * k]
            poly_tv[k] += s_pop[2 * k + 1] + s_out[2 * k + 1]

    logger.debug(
        "Analyzed %d of %d codon sites in %d sample-size blocks",
        analyzed,
        pop.num_codons,
        len(single),
    )

    population_syn, population_nonsyn = _summarize(list(single.values()), options)
    result = CodingResult(
        n_strains=len(pop),
        n_outgroup=len(out) if out is not None else 0,
        n_codons=pop.num_codons,
        analyzed_codons=analyzed,
        population_syn=population_syn,
        population_nonsyn=population_nonsyn,
    )
    if out is None:
        return result

    result.shared_syn, result.shared_nonsyn = _summarize(list(shared.values()), options)
    divergence = []
    for k in range(2):
        kv = k_sum[k] / div_sites[k] if div_sites[k] > 0 else 0.0
        if options.jc_k:
            kv = correct_jc(kv)
        divergence.append(
            DivergenceSummary(
                sites=div_sites[k],
                k=kv,
                polymorphisms=poly[k],
                transitions=poly_ts[k],
                transversions=poly_tv[k],
                fixed=fixed[3 * k],
                fixed_transitions=fixed[3 * k + 1],
                fixed_transversions=fixed[3 * k + 2],
            )
        )
    result.divergence_syn, result.divergence_nonsyn = divergence
    result.mk = MKTable.from_counts(dn=fixed[3], ds=fixed[0], pn=poly[1], ps=poly[0])
    return result
