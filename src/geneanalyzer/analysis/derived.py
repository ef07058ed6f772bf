"""Derived allele frequencies at polymorphic sites polarized by an outgroup."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from geneanalyzer.analysis.fourfold import fourfold_site_composition
from geneanalyzer.analysis.options import AnalysisOptions
from geneanalyzer.analysis.results import defined
from geneanalyzer.core.codons import CodonTable
from geneanalyzer.core.sequences import SequenceSet, as_sequence_set
from geneanalyzer.core.sites import SiteComposition

logger = logging.getLogger(__name__)

BASES = "ACGT"


@dataclass
class DerivedMutation:
    """One derived allele at a polymorphic site."""

    position: int
    ancestral: str
    derived: str
    count: int
    frequency: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DerivedAlleleResult:
    """Derived alleles of one alignment."""

    n_strains: int
    n_outgroup: int
    sites: int
    mode: str
    mutations: list[DerivedMutation] = field(default_factory=list)

    @property
    def mean_frequency(self) -> float:
        """Average derived allele frequency, NaN without derived alleles."""
        if not self.mutations:
            return float("nan")
        return sum(m.frequency for m in self.mutations) / len(self.mutations)

    def __str__(self) -> str:
        lines = [
            "Derived Allele Frequencies:",
            f"  Mode: {self.mode}",
            f"  Strains: {self.n_strains} (outgroup: {self.n_outgroup})",
            f"  Sites: {self.sites}",
            f"  Derived alleles: {len(self.mutations)}",
            f"  Mean frequency: {self.mean_frequency:.3f}",
        ]
        for m in self.mutations:
            lines.append(f"    {m.position}: {m.ancestral}->{m.derived}  {m.frequency:.3f}")
        return "\n".join(lines)

    def to_dict(self) -> dict:
        """Convert results to a dictionary."""
        return {
            "n_strains": self.n_strains,
            "n_outgroup": self.n_outgroup,
            "sites": self.sites,
            "mode": self.mode,
            "derived_alleles": len(self.mutations),
            "mean_frequency": defined(self.mean_frequency),
            "mutations": [m.to_dict() for m in self.mutations],
        }


def find_derived_mutations(
    population: SiteComposition, outgroup: SiteComposition
) -> list[tuple[str, str, int]] | None:
    """Polarize a population site against the outgroup.

    The ancestral base is the outgroup base that is most frequent in the
    population (first in A, C, G, T order on ties).

    Returns:
        (ancestral, derived, count) for every other population base, or None
        if the site is monomorphic or no outgroup base occurs in the population
    """
    if population.number_of_polymorphisms() == 0:
        return None
    ancestral = None
    best = 0
    for base in BASES:
        if outgroup.base_count(base) > 0:
            n = population.base_count(base)
            if n > best:
                best = n
                ancestral = base
    if ancestral is None:
        return None
    return [
        (ancestral, base, population.base_count(base))
        for base in BASES
        if base != ancestral and population.base_count(base) > 0
    ]


def analyze_derived_alleles(
    population: SequenceSet | str | Path,
    outgroup: SequenceSet | str | Path,
    options: AnalysisOptions | None = None,
    fourfold: bool = False,
    constant_size: bool = False,
    table: CodonTable | None = None,
) -> DerivedAlleleResult:
    """Find derived alleles and their frequencies in the population sample.

    Sites are single nucleotides, or the third bases of fourfold degenerate
    codons when `fourfold` is set. Sites with a gap in any strain or fewer
    than two valid population bases are skipped.

    Args:
        population: SequenceSet or path to FASTA file for the population sample
        outgroup: SequenceSet or path to FASTA file for the outgroup
        options: Analysis options (defaults if None)
        fourfold: Use fourfold degenerate sites of a coding alignment
        constant_size: Divide counts by the sample size instead of the number
            of bases at the site
        table: Codon table for fourfold sites (the population's genetic code if None)

    Raises:
        ValueError: If the population has fewer than two strains, the outgroup
            is empty or the alignment lengths differ
    """
    options = options or AnalysisOptions()
    pop = as_sequence_set(population, options.reading_frame).limit(options.max_strains)
    out = as_sequence_set(outgroup, options.reading_frame).limit(options.max_strains)
    if len(pop) < 2:
        raise ValueError("Derived alleles need at least 2 population sequences")
    if len(out) == 0:
        raise ValueError("Outgroup sample contains no sequences")
    if out.alignment_length != pop.alignment_length:
        raise ValueError(
            f"Alignment length mismatch: population has {pop.alignment_length} sites, "
            f"outgroup has {out.alignment_length} sites"
        )
    table = table or pop.genetic_code

    if fourfold:
        n_sites = pop.num_codons

        def site(sequences: SequenceSet, idx: int) -> SiteComposition | None:
            return fourfold_site_composition(
                sequences,
                idx,
                table,
                options.exclude_non_fourfold,
                options.exclude_nonsynonymous,
            )

    else:
        n_sites = pop.alignment_length

        def site(sequences: SequenceSet, idx: int) -> SiteComposition | None:
            return sequences.site_composition(idx)

    result = DerivedAlleleResult(
        n_strains=len(pop),
        n_outgroup=len(out),
        sites=0,
        mode="fourfold" if fourfold else "noncoding",
    )
    for idx in range(n_sites):
        sc_pop = site(pop, idx)
        if sc_pop is None or sc_pop.valid_bases_count < 2:
            continue
        sc_out = site(out, idx)
        if sc_out is None:
            continue
        if (
            fourfold
            and options.exclude_nonsynonymous
            and not table.are_synonymous(
                pop[0].get_codon(idx, pop.reading_frame),
                out[0].get_codon(idx, out.reading_frame),
            )
        ):
            continue
        result.sites += 1
        derived = find_derived_mutations(sc_pop, sc_out)
        if derived is None:
            continue
        size = len(pop) if constant_size else sc_pop.total_bases_count
        for ancestral, base, count in derived:
            result.mutations.append(
                DerivedMutation(
                    position=idx + 1,
                    ancestral=ancestral,
                    derived=base,
                    count=count,
                    frequency=count / size,
                )
            )

    logger.debug(
        "Found %d derived alleles at %d %s sites",
        len(result.mutations),
        result.sites,
        result.mode,
    )
    return result
