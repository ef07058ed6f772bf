"""Codon registry, codon table interface and genetic codes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from functools import lru_cache
from typing import ClassVar, Union

from geneanalyzer.data.genetic_codes import (
    AMINO_ACIDS,
    CODON_TABLE,
    CODONS,
    NCBI_TABLES,
    NUCLEOTIDES,
    STANDARD_CODE,
)


class Codon:
    """A single codon over the A, C, G, T alphabet.

    Instances are interned: there is exactly one object per sequence, so
    codons compare by identity. Use `Codon.get` to obtain them.
    """

    __slots__ = ("_sequence", "_neighbors")

    _registry: ClassVar[dict[str, Codon]] = {}
    _sealed: ClassVar[bool] = False

    def __init__(self, sequence: str):
        if Codon._sealed:
            raise TypeError("Codon instances are interned, use Codon.get()")
        self._sequence = sequence
        self._neighbors: tuple[Codon, ...] = ()

    @classmethod
    def get(cls, sequence: str | None) -> Codon | None:
        """Return the canonical codon for a sequence.

        Args:
            sequence: Three-letter nucleotide string (case-insensitive)

        Returns:
            The interned Codon, or None if the sequence is not exactly three
            of A, C, G, T
        """
        if sequence is None:
            return None
        return cls._registry.get(sequence.upper())

    @property
    def sequence(self) -> str:
        return self._sequence

    @property
    def index(self) -> int:
        """Position of the codon in alphabetical order (0-63)."""
        return CODON_TABLE[self._sequence]

    @property
    def neighbors(self) -> tuple[Codon, ...]:
        """The 9 codons that differ from this one at exactly one position."""
        return self._neighbors

    def __getitem__(self, position: int) -> str:
        return self._sequence[position]

    def __len__(self) -> int:
        return 3

    def __str__(self) -> str:
        return self._sequence

    def __repr__(self) -> str:
        return f"Codon({self._sequence!r})"

    def __reduce__(self):  # type: ignore[no-untyped-def]
        return (Codon.get, (self._sequence,))

    def __copy__(self) -> Codon:
        return self

    def __deepcopy__(self, memo: dict) -> Codon:
        return self


def _build_registry() -> None:
    for seq in CODONS:
        Codon._registry[seq] = Codon(seq)

    # Neighbors are ordered by position, then by base.
    for seq, codon in Codon._registry.items():
        neighbors = []
        for pos in range(3):
            for nt in NUCLEOTIDES:
                if nt == seq[pos]:
                    continue
                neighbors.append(Codon._registry[seq[:pos] + nt + seq[pos + 1 :]])
        codon._neighbors = tuple(neighbors)
    Codon._sealed = True


_build_registry()

ALL_CODONS: tuple[Codon, ...] = tuple(Codon._registry[seq] for seq in CODONS)

CodonLike = Union[Codon, str]


def _sequence_of(codon: CodonLike) -> str:
    return str(codon).upper()


class AminoAcidStyle(Enum):
    """How amino acids are reported by `GeneticCode.amino_acid`."""

    ONE_LETTER = "one_letter"
    THREE_LETTER = "three_letter"
    FULL_NAME = "full_name"


class CodonTable(ABC):
    """Lookups the path engine needs from a genetic code."""

    name: str = ""

    @abstractmethod
    def is_terminal(self, codon: CodonLike) -> bool:
        """Return True if the codon signals translation termination."""

    @abstractmethod
    def is_start_codon(self, codon: CodonLike) -> bool:
        """Return True if the codon can start translation."""

    @abstractmethod
    def are_synonymous(self, codon1: CodonLike, codon2: CodonLike) -> bool:
        """Return True if both codons encode the same amino acid."""

    def neighbors(self, codon: CodonLike) -> tuple[Codon, ...]:
        """Return the codons one substitution away from `codon`."""
        c = codon if isinstance(codon, Codon) else Codon.get(codon)
        if c is None:
            return ()
        return c.neighbors

    def fold_family(self, codon: CodonLike) -> int:
        """Degeneracy of the third codon position.

        Returns:
            1 plus the number of third-position changes that keep the amino
            acid, or 0 for an invalid codon
        """
        seq = _sequence_of(codon)
        if Codon.get(seq) is None:
            return 0
        return 1 + sum(
            1
            for nt in NUCLEOTIDES
            if nt != seq[2] and self.are_synonymous(seq, seq[:2] + nt)
        )

    def is_fourfold(self, codon: CodonLike) -> bool:
        """True if every change at the third position is synonymous."""
        return self.fold_family(codon) == 4


class GeneticCode(CodonTable):
    """Represents a genetic code for translation and codon classification."""

    def __init__(
        self,
        code: dict[str, str] | None = None,
        name: str = "Standard",
        start_codons: frozenset[str] | set[str] | None = None,
    ):
        """Initialize with a codon-to-amino-acid mapping.

        Args:
            code: Dict mapping codons to single-letter amino acids, with '*'
                  for terminal codons. Uses standard code if not provided.
            name: Name of the code, used in reports
            start_codons: Codons that can start translation (ATG if None)
        """
        self.code = {k.upper(): v.upper() for k, v in (code or STANDARD_CODE).items()}
        self.name = name
        self.start_codons = frozenset(
            c.upper() for c in (start_codons if start_codons is not None else {"ATG"})
        )

    @classmethod
    def from_ncbi(cls, table_id: int) -> GeneticCode:
        """Create one of the shipped NCBI translation tables.

        Raises:
            ValueError: If the table id is not available
        """
        if table_id not in NCBI_TABLES:
            available = ", ".join(str(t) for t in sorted(NCBI_TABLES))
            raise ValueError(f"Unknown genetic code {table_id}; available: {available}")
        name, code, starts = NCBI_TABLES[table_id]
        return cls(code, name=name, start_codons=starts)

    def __repr__(self) -> str:
        return f"GeneticCode(name={self.name!r})"

    def translate(self, codon: CodonLike) -> str:
        """Translate a codon to its amino acid.

        Args:
            codon: Three-letter codon string or Codon

        Returns:
            Single-letter amino acid code, or 'X' for unknown
        """
        return self.code.get(_sequence_of(codon), "X")

    def translate_sequence(self, sequence: str, reading_frame: int = 1) -> str:
        """Translate a nucleotide sequence to amino acids.

        Args:
            sequence: Nucleotide sequence string
            reading_frame: Reading frame (1, 2, or 3)

        Returns:
            Amino acid sequence string
        """
        start = reading_frame - 1
        amino_acids = []
        for i in range(start, len(sequence) - 2, 3):
            amino_acids.append(self.translate(sequence[i : i + 3]))
        return "".join(amino_acids)

    def amino_acid(
        self, codon: CodonLike, style: AminoAcidStyle = AminoAcidStyle.ONE_LETTER
    ) -> str | None:
        """Name the amino acid encoded by a codon, or None for invalid codons."""
        aa = self.code.get(_sequence_of(codon))
        if aa is None:
            return None
        if style == AminoAcidStyle.ONE_LETTER:
            return aa
        three_letter, full_name = AMINO_ACIDS.get(aa, (aa, aa))
        return three_letter if style == AminoAcidStyle.THREE_LETTER else full_name

    def is_terminal(self, codon: CodonLike) -> bool:
        return self.code.get(_sequence_of(codon)) == "*"

    def is_start_codon(self, codon: CodonLike) -> bool:
        return _sequence_of(codon) in self.start_codons

    def are_synonymous(self, codon1: CodonLike, codon2: CodonLike) -> bool:
        aa1 = self.code.get(_sequence_of(codon1))
        aa2 = self.code.get(_sequence_of(codon2))
        if aa1 is None or aa2 is None or aa1 == "*" or aa2 == "*":
            return False
        return aa1 == aa2


@lru_cache(maxsize=4096)
def number_of_sites(
    codon: Codon, table: CodonTable, include_terminal: bool = False
) -> tuple[float, float]:
    """Count synonymous and non-synonymous sites in a codon.

    Uses the Nei-Gojobori method: for each position, the fraction of the
    possible single-base changes that are synonymous. When terminal codons are
    excluded, changes leading to them are not counted as possible changes.

    Args:
        codon: Codon to evaluate
        table: Codon table used to classify changes
        include_terminal: Whether changes to terminal codons count

    Returns:
        Tuple of (synonymous_sites, non_synonymous_sites), summing to 3
    """
    syn_sites = 0.0
    seq = codon.sequence
    for pos in range(3):
        syn_count = 0
        total_count = 0
        for nt in NUCLEOTIDES:
            if nt == seq[pos]:
                continue
            new_codon = seq[:pos] + nt + seq[pos + 1 :]
            if not include_terminal and table.is_terminal(new_codon):
                continue
            total_count += 1
            if table.are_synonymous(seq, new_codon):
                syn_count += 1
        if total_count > 0:
            syn_sites += syn_count / total_count

    return syn_sites, 3.0 - syn_sites


# Default genetic code instance
DEFAULT_CODE = GeneticCode()
