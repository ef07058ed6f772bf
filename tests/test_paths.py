"""Tests for the evolutionary path finder."""

import logging
import random

import pytest

from geneanalyzer.core import paths as paths_module
from geneanalyzer.core.codons import ALL_CODONS, DEFAULT_CODE, Codon
from geneanalyzer.core.paths import (
    EvolutionaryPath,
    SubstitutionClass,
    find_best_path,
    find_best_path_to_any,
    generate_all_paths,
    mutations_lower_bound,
)


def codons(*seqs: str) -> list[Codon]:
    return [Codon.get(s) for s in seqs]


def path_of(*seqs: str) -> EvolutionaryPath:
    path = EvolutionaryPath(DEFAULT_CODE)
    for s in seqs:
        path.append(Codon.get(s))
    return path


SAMPLE_SETS = [
    ("AAA", "AAT", "ATA"),
    ("AAA", "ATT"),
    ("GGG", "GGA", "GGC", "GGT"),
    ("TTA", "CTG", "TTG"),
    ("ATG", "GTG", "ACG", "ATA"),
    ("CAT", "CAC", "AAT"),
]


def unpruned_walks(observed: list[Codon]) -> list[tuple[str, ...]]:
    """Shortest simple walks through all observed codons, by exhaustive search."""
    found: list[tuple[str, ...]] = []
    n_steps = mutations_lower_bound(observed)

    def extend(walk: list[Codon]) -> None:
        if len(walk) - 1 == n_steps:
            if all(c in walk for c in observed):
                found.append(tuple(c.sequence for c in walk))
            return
        for neighbor in DEFAULT_CODE.neighbors(walk[-1]):
            if neighbor not in walk:
                walk.append(neighbor)
                extend(walk)
                walk.pop()

    while not found:
        for start in observed:
            extend([start])
        n_steps += 1
    return found


def seeded_codon_sets(seed: int = 1729, count: int = 20) -> list[tuple[str, ...]]:
    """Random sets of 2-4 distinct codons needing at most 3 substitutions."""
    rng = random.Random(seed)
    sets = []
    while len(sets) < count:
        observed = rng.sample(ALL_CODONS, rng.randint(2, 4))
        if mutations_lower_bound(observed) <= 3:
            sets.append(tuple(c.sequence for c in observed))
    return sets


class TestLowerBound:
    """Tests for the minimum number of substitutions."""

    def test_scenario(self) -> None:
        """Test the lower bound of {AAA, AAT, ATA}."""
        assert mutations_lower_bound(codons("AAA", "AAT", "ATA")) == 2

    def test_single_codon(self) -> None:
        """Test that a single codon needs no substitutions."""
        assert mutations_lower_bound(codons("ATG")) == 0


class TestFindBestPath:
    """Tests for find_best_path."""

    def test_scenario(self) -> None:
        """Test that {AAA, AAT, ATA} gives a 3-codon path with 2 non-synonymous steps."""
        path = find_best_path(codons("AAA", "AAT", "ATA"), DEFAULT_CODE)

        assert path is not None
        assert len(path) == 3
        assert path.polymorphism_counts() == (0, 2)
        assert str(path) == "AAT->AAA->ATA"

    def test_prefers_fewer_nonsynonymous(self) -> None:
        """Test that the intermediate codon minimizes non-synonymous steps."""
        path = find_best_path(codons("AAA", "ATT"), DEFAULT_CODE)

        # AAA(K) -> ATA(I) -> ATT(I) beats AAA(K) -> AAT(N) -> ATT(I)
        assert str(path) == "AAA=>ATA->ATT"
        assert path.observed_mask == (True, False, True)
        assert path.polymorphism_counts() == (1, 1)

    def test_single_codon(self) -> None:
        """Test that a single codon is a path of length 1."""
        path = find_best_path(codons("ATG"), DEFAULT_CODE)

        assert len(path) == 1
        assert path.polymorphism_counts() == (0, 0)

    def test_duplicates_ignored(self) -> None:
        """Test that repeated codons do not change the result."""
        path = find_best_path(codons("AAA", "AAA", "AAT"), DEFAULT_CODE)
        assert str(path) == "AAA->AAT"

    def test_invalid_input(self) -> None:
        """Test that empty input or a missing table give None."""
        assert find_best_path([], DEFAULT_CODE) is None
        assert find_best_path(None, DEFAULT_CODE) is None
        assert find_best_path(codons("AAA"), None) is None

    def test_terminal_codons_excluded(self) -> None:
        """Test that paths through stop codons are rejected unless allowed."""
        assert len(find_best_path(codons("TAA"), DEFAULT_CODE)) == 0
        assert len(find_best_path(codons("TAA"), DEFAULT_CODE, include_terminal=True)) == 1

    @pytest.mark.parametrize("seqs", SAMPLE_SETS)
    def test_connectivity(self, seqs: tuple[str, ...]) -> None:
        """Test that consecutive codons differ at exactly one position."""
        path = find_best_path(codons(*seqs), DEFAULT_CODE)
        for prev, cur in zip(path.codons, path.codons[1:]):
            assert cur in prev.neighbors

    @pytest.mark.parametrize("seqs", SAMPLE_SETS)
    def test_not_shorter_than_lower_bound(self, seqs: tuple[str, ...]) -> None:
        """Test that no path has fewer steps than the lower bound."""
        observed = codons(*seqs)
        path = find_best_path(observed, DEFAULT_CODE)
        assert len(path) - 1 >= mutations_lower_bound(observed)

    @pytest.mark.parametrize("seqs", SAMPLE_SETS)
    def test_coverage(self, seqs: tuple[str, ...]) -> None:
        """Test that every path visits all observed codons."""
        observed = codons(*seqs)
        for path in generate_all_paths(observed, DEFAULT_CODE):
            assert path.contains_all(observed)


class TestGenerateAllPaths:
    """Tests for the shortest-walk search."""

    def test_steps_grow_past_lower_bound(self) -> None:
        """Test codons that need one more step than the lower bound."""
        observed = codons("CGG", "AAG", "CGA", "CAA")

        assert mutations_lower_bound(observed) == 3
        walks = generate_all_paths(observed, DEFAULT_CODE)
        assert walks
        assert all(len(walk) == 5 for walk in walks)

        best = find_best_path(observed, DEFAULT_CODE)
        assert len(best) == 5
        assert str(best) == "CGG->CGA->CAA=>AAA->AAG"

    def test_step_growth_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the debug message when the lower bound is not enough."""
        with caplog.at_level(logging.DEBUG, logger="geneanalyzer.core.paths"):
            generate_all_paths(codons("CGG", "AAG", "CGA", "CAA"), DEFAULT_CODE)

        assert "No walk through CGG/AAG/CGA/CAA in 3 steps, trying 4" in caplog.text

    def test_no_growth_no_message(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a walk at the lower bound logs nothing."""
        with caplog.at_level(logging.DEBUG, logger="geneanalyzer.core.paths"):
            generate_all_paths(codons("AAA", "AAT", "ATA"), DEFAULT_CODE)

        assert "trying" not in caplog.text

    def test_gives_up_at_step_limit(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test that the search stops once the step limit is exceeded."""
        monkeypatch.setattr(paths_module, "MAX_PATH_STEPS", 3)

        with caplog.at_level(logging.DEBUG, logger="geneanalyzer.core.paths"):
            walks = generate_all_paths(codons("CGG", "AAG", "CGA", "CAA"), DEFAULT_CODE)

        assert walks == []
        assert "No path connects" in caplog.text
        assert len(find_best_path(codons("CGG", "AAG", "CGA", "CAA"), DEFAULT_CODE)) == 0

    def test_default_step_limit(self) -> None:
        """Test the shipped step limit."""
        assert paths_module.MAX_PATH_STEPS == 64

    @pytest.mark.parametrize("seqs", seeded_codon_sets())
    def test_matches_unpruned_search(self, seqs: tuple[str, ...]) -> None:
        """Test that pruning drops no walk an exhaustive search finds."""
        observed = codons(*seqs)

        walks = generate_all_paths(observed, DEFAULT_CODE)

        assert [tuple(c.sequence for c in walk.codons) for walk in walks] == unpruned_walks(
            observed
        )


class TestFindBestPathToAny:
    """Tests for connecting one codon to the closest of several."""

    def test_picks_synonymous_candidate(self) -> None:
        """Test that a synonymous candidate beats a non-synonymous one."""
        path = find_best_path_to_any(Codon.get("AAA"), codons("GGG", "AAG"), DEFAULT_CODE)

        assert str(path) == "AAA->AAG"
        assert path.polymorphism_counts() == (1, 0)

    def test_invalid_input(self) -> None:
        """Test that missing arguments give None."""
        assert find_best_path_to_any(None, codons("AAA"), DEFAULT_CODE) is None
        assert find_best_path_to_any(Codon.get("AAA"), [], DEFAULT_CODE) is None


class TestEvolutionaryPath:
    """Tests for EvolutionaryPath queries."""

    def test_append_and_index(self) -> None:
        """Test appending codons and looking them up."""
        path = path_of("AAT", "AAA")

        assert not path.append(None)
        assert path.index(Codon.get("AAA")) == 1
        assert path.index(Codon.get("GGG")) == -1
        assert Codon.get("AAT") in path

    def test_substitution_counts(self) -> None:
        """Test transitions and transversions split by synonymy."""
        assert path_of("AAT", "AAA", "ATA").substitution_counts() == (0, 0, 0, 2)
        assert path_of("AAA", "AAG").substitution_counts() == (1, 0, 0, 0)

    def test_is_substitution_synonymous(self) -> None:
        """Test synonymy of a codon with its path neighbors."""
        path = path_of("AAA", "AAG", "AGG")

        assert path.is_substitution_synonymous(Codon.get("AAA"))
        assert not path.is_substitution_synonymous(Codon.get("AGG"))
        assert not path.is_substitution_synonymous(Codon.get("GGG"))
        assert not path_of("AAA").is_substitution_synonymous(Codon.get("AAA"))

    def test_substitution_type(self) -> None:
        """Test classification of the change introducing a base."""
        path = path_of("AAT", "AAA", "ATA")

        assert path.substitution_type("T", 2) == (
            SubstitutionClass.NONSYNONYMOUS | SubstitutionClass.TRANSVERSION
        )
        assert path.substitution_type("A", 0) == SubstitutionClass.MONOMORPHIC
        assert path.substitution_type("G", 0) == SubstitutionClass.ABSENT
        assert path.substitution_type("N", 0) == SubstitutionClass.NONE

    def test_substitution_type_synonymous(self) -> None:
        """Test that a synonymous step into the base is reported."""
        path = path_of("AAA", "AAG")

        assert path.substitution_type("G", 2) == (
            SubstitutionClass.SYNONYMOUS | SubstitutionClass.TRANSITION
        )
        assert path_of("AAA").substitution_type("A", 0) == SubstitutionClass.MONOMORPHIC

    def test_contains_terminal_codons(self) -> None:
        """Test detection of stop codons."""
        assert path_of("TAC", "TAA").contains_terminal_codons()
        assert not path_of("TAC", "TAT").contains_terminal_codons()

    def test_copy_is_independent(self) -> None:
        """Test that copies do not share state."""
        path = path_of("AAA")
        clone = path.copy()
        clone.append(Codon.get("AAG"))

        assert len(path) == 1
        assert len(clone) == 2

    def test_str_empty(self) -> None:
        """Test the string form of an empty path."""
        assert str(EvolutionaryPath(DEFAULT_CODE)) == ""
