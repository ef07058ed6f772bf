"""Codon composition of one codon site across a sample of strains."""

from __future__ import annotations

import re

from geneanalyzer.core.codons import Codon, CodonTable, number_of_sites
from geneanalyzer.core.paths import EvolutionaryPath, find_best_path
from geneanalyzer.core.sites import SiteComposition, SiteType
from geneanalyzer.data.genetic_codes import NUCLEOTIDES

_CODON_PATTERN = re.compile(r"[ACGTNX-]{3}")


class CodonComposition:
    """Codons observed at one codon site of an alignment.

    Codons with gaps, N or X are counted but kept out of the valid codon
    list. The evolutionary path through the valid codons is computed on
    first use and cached until another codon is added.
    """

    def __init__(self, table: CodonTable, include_terminal: bool = False):
        """Create an empty composition.

        Args:
            table: Codon table used for paths and site counts
            include_terminal: Whether paths may pass through terminal codons
        """
        self.table = table
        self.include_terminal = include_terminal
        self._codons: list[Codon] = []
        self._sites = [SiteComposition() for _ in range(3)]
        self._n_gaps = 0
        self._n_n = 0
        self._n_x = 0
        self._n_total = 0
        self._path: EvolutionaryPath | None = None

    def add_codon(self, sequence: str | None) -> bool:
        """Add the codon of one strain.

        Args:
            sequence: Three characters from A, C, G, T, N, X and '-'

        Returns:
            False if the sequence is malformed and was not added
        """
        if sequence is None:
            return False
        sequence = sequence.upper()
        if not _CODON_PATTERN.fullmatch(sequence):
            return False

        self._n_total += 1
        for pos in range(3):
            self._sites[pos].add_base(sequence[pos])

        codon = Codon.get(sequence)
        if codon is not None:
            self._codons.append(codon)
            self._path = None
        elif "-" in sequence:
            self._n_gaps += 1
        else:
            if "N" in sequence:
                self._n_n += 1
            if "X" in sequence:
                self._n_x += 1
        return True

    def site_composition(self, site: int) -> SiteComposition | None:
        """Composition of codon position `site` (0-2), or None if out of range."""
        if site < 0 or site > 2:
            return None
        return self._sites[site]

    def valid_codons(self) -> list[Codon]:
        """Valid codons in the order they were added, duplicates included."""
        return list(self._codons)

    @property
    def valid_codons_count(self) -> int:
        return len(self._codons)

    @property
    def total_codons_count(self) -> int:
        return self._n_total

    @property
    def gaps_count(self) -> int:
        return self._n_gaps

    @property
    def n_count(self) -> int:
        return self._n_n

    @property
    def x_count(self) -> int:
        return self._n_x

    def evolutionary_path(self) -> EvolutionaryPath:
        """Return the path that best explains the codons at this site."""
        if self._path is None:
            path = find_best_path(self._codons, self.table, self.include_terminal)
            self._path = path if path is not None else EvolutionaryPath(self.table)
        return self._path

    def sites_count(self) -> tuple[float, float]:
        """Mean numbers of synonymous and non-synonymous sites per codon."""
        if not self._codons:
            return 0.0, 0.0
        syn = 0.0
        nonsyn = 0.0
        for codon in self._codons:
            s, n = number_of_sites(codon, self.table, self.include_terminal)
            syn += s
            nonsyn += n
        return syn / len(self._codons), nonsyn / len(self._codons)

    def base_frequencies(self) -> tuple[float, ...]:
        """Split synonymous and non-synonymous sites by base.

        For every codon position the fraction of substitutions that are
        synonymous is credited to the base at that position. Values are
        averaged over the valid codons.

        Returns:
            Ten values: synonymous sites, synonymous A, C, G, T, then
            non-synonymous sites, non-synonymous A, C, G, T
        """
        res = [0.0] * 10
        if not self._codons:
            return tuple(res)

        for codon in self._codons:
            syn, nonsyn = number_of_sites(codon, self.table, self.include_terminal)
            res[0] += syn
            res[5] += nonsyn
            seq = codon.sequence
            for pos in range(3):
                n_syn = 0
                n_total = 0
                for nt in NUCLEOTIDES:
                    if nt == seq[pos]:
                        continue
                    changed = seq[:pos] + nt + seq[pos + 1 :]
                    if not self.include_terminal and self.table.is_terminal(changed):
                        continue
                    n_total += 1
                    if self.table.are_synonymous(seq, changed):
                        n_syn += 1
                if n_total == 0:
                    continue
                f_syn = n_syn / n_total
                idx = NUCLEOTIDES.index(seq[pos])
                res[1 + idx] += f_syn
                res[6 + idx] += 1.0 - f_syn

        size = len(self._codons)
        return tuple(v / size for v in res)

    def number_of_polymorphisms(self) -> tuple[int, int]:
        """Synonymous and non-synonymous polymorphisms along the path."""
        return self.evolutionary_path().polymorphism_counts()

    def singletons(self, cutoff_frequency: float = 1.0) -> list[Codon]:
        """Find codons carrying a rare base at any position.

        Singletons are searched site-wise, not codon-wise: in the sample
        ATG, ATC, TTG, TTG only ATC is a singleton, since each base of ATG
        also appears in another codon.

        Args:
            cutoff_frequency: Bases with frequency at or below this value are
                rare; from 0.5 upwards only bases seen once count

        Returns:
            Each singleton codon once, in order of discovery
        """
        n_codons = len(self._codons)
        if n_codons < 2:
            return []

        found: list[Codon] = []
        for pos in range(3):
            sc = SiteComposition("".join(c[pos] for c in self._codons))
            for nt in NUCLEOTIDES:
                n = sc.base_count(nt)
                if cutoff_frequency >= 0.5:
                    rare = n == 1
                else:
                    rare = n > 0 and n / n_codons <= cutoff_frequency
                if not rare:
                    continue
                for codon in self._codons:
                    if codon[pos] == nt and codon not in found:
                        found.append(codon)
        return found

    def number_of_singletons(self, cutoff_frequency: float = 1.0) -> tuple[int, int]:
        """Synonymous and non-synonymous singletons at the site."""
        singletons = self.singletons(cutoff_frequency)
        if not singletons:
            return 0, 0
        path = self.evolutionary_path()
        n_syn = sum(1 for c in singletons if path.is_substitution_synonymous(c))
        return n_syn, len(singletons) - n_syn

    def substitutions_count(self) -> tuple[int, int, int, int]:
        """Transitions and transversions along the path, split by synonymy."""
        return self.evolutionary_path().substitution_counts()

    @staticmethod
    def site_type(cc1: CodonComposition | None, cc2: CodonComposition | None) -> SiteType:
        """Classify the codon site between two populations."""
        if cc1 is None or cc2 is None or cc1.valid_codons_count == 0 or cc2.valid_codons_count == 0:
            return SiteType.INVALID

        result = SiteType.INVALID
        if any(cc1.number_of_polymorphisms()):
            result |= SiteType.POLYMORPHIC_FIRST
        if any(cc2.number_of_polymorphisms()):
            result |= SiteType.POLYMORPHIC_SECOND
        if not paths_overlap(cc1.evolutionary_path(), cc2.evolutionary_path()):
            result |= SiteType.DIVERGENT

        return result if result else SiteType.MONOMORPHIC

    @staticmethod
    def merge(cc1: CodonComposition, cc2: CodonComposition) -> CodonComposition | None:
        """Pool two samples of the same codon site.

        Returns:
            A new composition, or None if the two use different codon tables
            or treat terminal codons differently
        """
        if cc1.table is not cc2.table or cc1.include_terminal != cc2.include_terminal:
            return None
        merged = CodonComposition(cc1.table, cc1.include_terminal)
        merged._codons = cc1._codons + cc2._codons
        merged._sites = [SiteComposition.merge(a, b) for a, b in zip(cc1._sites, cc2._sites)]
        merged._n_gaps = cc1._n_gaps + cc2._n_gaps
        merged._n_n = cc1._n_n + cc2._n_n
        merged._n_x = cc1._n_x + cc2._n_x
        merged._n_total = cc1._n_total + cc2._n_total
        return merged

    def __repr__(self) -> str:
        codons = ",".join(c.sequence for c in self._codons)
        return f"CodonComposition([{codons}], total={self._n_total})"


def paths_overlap(path1: EvolutionaryPath, path2: EvolutionaryPath) -> bool:
    """True if the two paths share at least one codon."""
    return any(c in path2 for c in path1)
