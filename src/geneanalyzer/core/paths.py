"""Evolutionary paths through the codon graph.

An evolutionary path is a walk through the graph whose nodes are the 64
codons and whose edges join codons differing at a single position. The path
finder searches for the shortest walks visiting every codon observed at an
alignment site and keeps the one with the fewest non-synonymous steps.
"""

from __future__ import annotations

import logging
from enum import IntFlag
from typing import Iterable, Iterator, Sequence

from geneanalyzer.core.codons import Codon, CodonTable
from geneanalyzer.core.sites import SiteComposition, substitution_type

logger = logging.getLogger(__name__)

# Walks longer than this are never searched
MAX_PATH_STEPS = 64


class SubstitutionClass(IntFlag):
    """Classification of the substitution introducing a base along a path.

    NONE is returned for bases other than A, C, G, T. MONOMORPHIC and ABSENT
    are never combined with other flags.
    """

    NONE = 0
    SYNONYMOUS = 1
    NONSYNONYMOUS = 2
    TRANSITION = 4
    TRANSVERSION = 8
    MONOMORPHIC = 16
    ABSENT = 32


class EvolutionaryPath:
    """An ordered walk of codons with per-codon observed flags.

    Observed codons were sampled at the site; the others are transient
    intermediates needed to connect them. A path of length 0 means that no
    path could be found.
    """

    def __init__(self, table: CodonTable):
        self.table = table
        self._codons: list[Codon] = []
        self._observed: list[bool] = []

    def append(self, codon: Codon | None, observed: bool = True) -> bool:
        """Add a codon to the end of the path; returns False for None."""
        if codon is None:
            return False
        self._codons.append(codon)
        self._observed.append(observed)
        return True

    def __len__(self) -> int:
        return len(self._codons)

    def __iter__(self) -> Iterator[Codon]:
        return iter(self._codons)

    def __contains__(self, codon: object) -> bool:
        return codon in self._codons

    @property
    def codons(self) -> tuple[Codon, ...]:
        return tuple(self._codons)

    @property
    def observed_mask(self) -> tuple[bool, ...]:
        return tuple(self._observed)

    def index(self, codon: Codon) -> int:
        """Position of the codon in the path, or -1 if absent."""
        try:
            return self._codons.index(codon)
        except ValueError:
            return -1

    def contains_all(self, codons: Iterable[Codon]) -> bool:
        present = set(self._codons)
        return all(c in present for c in codons)

    def _steps(self) -> Iterator[tuple[Codon, Codon]]:
        return zip(self._codons, self._codons[1:])

    def polymorphism_counts(self) -> tuple[int, int]:
        """Count synonymous and non-synonymous steps.

        Returns:
            Tuple of (synonymous, non_synonymous); they sum to len(path) - 1
        """
        if not self._codons:
            return 0, 0
        n_syn = sum(1 for prev, cur in self._steps() if self.table.are_synonymous(prev, cur))
        return n_syn, len(self._codons) - 1 - n_syn

    def substitution_counts(self) -> tuple[int, int, int, int]:
        """Count transitions and transversions by synonymy.

        Returns:
            Tuple of (syn_transitions, syn_transversions,
            nonsyn_transitions, nonsyn_transversions)
        """
        counts = [0, 0, 0, 0]
        for prev, cur in self._steps():
            offset = 0 if self.table.are_synonymous(prev, cur) else 2
            for pos in range(3):
                kind = substitution_type(prev[pos], cur[pos])
                if kind > 0:
                    counts[offset + kind - 1] += 1
                    break
        return counts[0], counts[1], counts[2], counts[3]

    def is_substitution_synonymous(self, codon: Codon | None) -> bool:
        """True if the codon is in the path and synonymous to a path neighbor."""
        if codon is None or len(self._codons) < 2:
            return False
        idx = self.index(codon)
        if idx == -1:
            return False
        if idx > 0 and self.table.are_synonymous(codon, self._codons[idx - 1]):
            return True
        return idx < len(self._codons) - 1 and self.table.are_synonymous(
            codon, self._codons[idx + 1]
        )

    def substitution_type(self, base: str, site: int) -> SubstitutionClass:
        """Classify the substitution that gives rise to `base` at `site`.

        Both the step entering the first codon carrying the base and the step
        leaving the last one are inspected; if any of them is synonymous the
        substitution is reported as synonymous.

        Args:
            base: Nucleotide to look for
            site: Codon position (0, 1 or 2)

        Returns:
            SubstitutionClass flags, combining (NON)SYNONYMOUS with
            TRANSITION or TRANSVERSION
        """
        n_codons = len(self._codons)
        if n_codons < 2:
            return SubstitutionClass.MONOMORPHIC
        base = base.upper()
        if len(base) != 1 or base not in "ACGT":
            return SubstitutionClass.NONE

        carriers = [i for i, c in enumerate(self._codons) if c[site] == base]
        if not carriers:
            return SubstitutionClass.ABSENT
        first, last = carriers[0], carriers[-1]
        if first == 0 and last == n_codons - 1:
            return SubstitutionClass.MONOMORPHIC

        steps = []
        if first > 0:
            steps.append((first, first - 1))
        if last < n_codons - 1:
            steps.append((last, last + 1))

        change = SubstitutionClass.NONE
        for i, j in steps:
            kind = substitution_type(self._codons[i][site], self._codons[j][site])
            if kind <= 0:
                continue
            change = SubstitutionClass.TRANSITION if kind == 1 else SubstitutionClass.TRANSVERSION
            if self.table.are_synonymous(self._codons[i], self._codons[j]):
                return SubstitutionClass.SYNONYMOUS | change

        if change == SubstitutionClass.NONE:
            return change
        return SubstitutionClass.NONSYNONYMOUS | change

    def contains_terminal_codons(self) -> bool:
        return any(self.table.is_terminal(c) for c in self._codons)

    def copy(self) -> EvolutionaryPath:
        path = EvolutionaryPath(self.table)
        path._codons = list(self._codons)
        path._observed = list(self._observed)
        return path

    def __str__(self) -> str:
        if not self._codons:
            return ""
        # The first codon is always observed.
        parts = [self._codons[0].sequence]
        for codon, observed in zip(self._codons[1:], self._observed[1:]):
            parts.append("->" if observed else "=>")
            parts.append(codon.sequence)
        return "".join(parts)

    def __repr__(self) -> str:
        return f"EvolutionaryPath({str(self)!r})"


def mutations_lower_bound(codons: Iterable[Codon]) -> int:
    """Minimum number of substitutions needed to produce all codons.

    Sums, over the three codon positions, the number of distinct bases at that
    position minus one.
    """
    compositions = [SiteComposition() for _ in range(3)]
    for codon in codons:
        for pos in range(3):
            compositions[pos].add_base(codon[pos])
    return sum(sc.number_of_polymorphisms() for sc in compositions)


def _distance(c1: Codon, c2: Codon) -> int:
    return sum(1 for a, b in zip(c1.sequence, c2.sequence) if a != b)


def _collect_walks(
    ancestor: Codon,
    targets: Sequence[Codon],
    table: CodonTable,
    n_steps: int,
    found: list[EvolutionaryPath],
) -> None:
    """Append every simple walk of exactly `n_steps` steps from `ancestor`
    that visits all `targets`.

    The walk lives in a single buffer extended and shrunk in place; only
    accepted walks are copied out.
    """
    target_set = set(targets)
    walk: list[Codon] = []
    on_walk: set[Codon] = set()

    def extend(codon: Codon, remaining: int) -> None:
        walk.append(codon)
        on_walk.add(codon)
        try:
            missing = [c for c in targets if c not in on_walk]
            if remaining == 0:
                if not missing:
                    path = EvolutionaryPath(table)
                    for c in walk:
                        path.append(c, c in target_set)
                    found.append(path)
                return
            # Every missing codon is a further node at least `distance` steps away.
            if len(missing) > remaining or any(_distance(codon, c) > remaining for c in missing):
                return
            for neighbor in table.neighbors(codon):
                if neighbor not in on_walk:
                    extend(neighbor, remaining - 1)
        finally:
            walk.pop()
            on_walk.discard(codon)

    extend(ancestor, n_steps)


def generate_all_paths(codons: Sequence[Codon], table: CodonTable) -> list[EvolutionaryPath]:
    """Find all shortest walks that visit every codon.

    Every codon is tried as the ancestral one. If two codons share a
    substitution at different positions the lower bound is too small, so the
    allowed number of steps grows until a walk is found or MAX_PATH_STEPS is
    exceeded. Duplicate input codons produce duplicate walks.

    Note:
        The walks may contain terminal codons.

    Args:
        codons: Codons that must appear in every walk
        table: Codon table providing the neighbor relation

    Returns:
        List of walks in the order they were found; empty if none exists
    """
    paths: list[EvolutionaryPath] = []
    lower_bound = mutations_lower_bound(codons)
    n_steps = lower_bound
    while not paths and n_steps <= MAX_PATH_STEPS:
        if n_steps > lower_bound:
            logger.debug(
                "No walk through %s in %d steps, trying %d",
                "/".join(str(c) for c in codons),
                n_steps - 1,
                n_steps,
            )
        for codon in codons:
            _collect_walks(codon, codons, table, n_steps, paths)
        n_steps += 1

    if not paths:
        logger.debug("No path connects %s within %d steps", codons, MAX_PATH_STEPS)
    return paths


def find_best_path(
    codons: Sequence[Codon] | None,
    table: CodonTable | None,
    include_terminal: bool = False,
) -> EvolutionaryPath | None:
    """Find the evolutionary path that best explains the observed codons.

    The best path is the shortest one with the fewest non-synonymous steps.
    Ties go to the first path found.

    Args:
        codons: Observed codons; duplicates are ignored
        table: Codon table
        include_terminal: Whether paths may pass through terminal codons

    Returns:
        The best path, an empty path if every shortest path was rejected, or
        None if codons is empty or table is missing
    """
    if not codons or table is None:
        return None

    unique = list(dict.fromkeys(codons))
    best: EvolutionaryPath | None = None
    best_nonsyn = 0
    for path in generate_all_paths(unique, table):
        if not include_terminal and path.contains_terminal_codons():
            continue
        nonsyn = path.polymorphism_counts()[1]
        if best is None or nonsyn < best_nonsyn:
            best = path
            best_nonsyn = nonsyn

    if best is None:
        logger.debug("All shortest paths through %s contain terminal codons", unique)
        return EvolutionaryPath(table)
    return best


def find_best_path_to_any(
    codon: Codon | None,
    candidates: Sequence[Codon] | None,
    table: CodonTable | None,
    include_terminal: bool = False,
) -> EvolutionaryPath | None:
    """Find the best path from `codon` to the closest of `candidates`.

    Candidates are compared by the number of non-synonymous steps, then by
    path length. Empty paths only win when no candidate can be reached.

    Returns:
        The best path, or None if any argument is missing or empty
    """
    if codon is None or not candidates or table is None:
        return None

    best: EvolutionaryPath | None = None
    best_key: tuple[bool, int, int] | None = None
    for candidate in candidates:
        path = find_best_path([codon, candidate], table, include_terminal)
        if path is None:
            continue
        key = (len(path) == 0, path.polymorphism_counts()[1], len(path))
        if best_key is None or key < best_key:
            best = path
            best_key = key
    return best
