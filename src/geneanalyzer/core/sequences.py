"""Sequence and SequenceSet classes for handling aligned sequences."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from geneanalyzer.core.codons import DEFAULT_CODE, CodonTable
from geneanalyzer.core.composition import CodonComposition
from geneanalyzer.core.sites import SiteComposition
from geneanalyzer.io.fasta import read_fasta


@dataclass
class Sequence:
    """Represents a single biological sequence."""

    name: str
    sequence: str

    def __len__(self) -> int:
        return len(self.sequence)

    def __getitem__(self, index: int | slice) -> str:
        return self.sequence[index]

    def get_codon(self, codon_index: int, reading_frame: int = 1) -> str:
        """Get the codon at a given index.

        Args:
            codon_index: Zero-based codon index
            reading_frame: Reading frame (1, 2, or 3)

        Returns:
            Three-letter codon string
        """
        start = (reading_frame - 1) + (codon_index * 3)
        return self.sequence[start : start + 3]

    def num_codons(self, reading_frame: int = 1) -> int:
        """Get the number of complete codons in the sequence."""
        return max(len(self.sequence) - (reading_frame - 1), 0) // 3


@dataclass
class SequenceSet:
    """Aligned sequences of one population (the strains of a sample)."""

    sequences: list[Sequence] = field(default_factory=list)
    reading_frame: int = 1
    genetic_code: CodonTable = field(default_factory=lambda: DEFAULT_CODE)

    @classmethod
    def from_fasta(
        cls,
        path: str | Path,
        reading_frame: int = 1,
        genetic_code: CodonTable | None = None,
    ) -> SequenceSet:
        """Load sequences from a FASTA file.

        Args:
            path: Path to FASTA file
            reading_frame: Reading frame (1, 2, or 3)
            genetic_code: Genetic code for codon classification

        Returns:
            SequenceSet containing all sequences from the file
        """
        sequences = [Sequence(name, seq) for name, seq in read_fasta(path)]
        return cls(
            sequences=sequences,
            reading_frame=reading_frame,
            genetic_code=genetic_code or DEFAULT_CODE,
        )

    def __len__(self) -> int:
        return len(self.sequences)

    def __getitem__(self, index: int) -> Sequence:
        return self.sequences[index]

    @property
    def names(self) -> list[str]:
        return [seq.name for seq in self.sequences]

    @property
    def num_codons(self) -> int:
        """Number of complete codons (based on first sequence)."""
        if not self.sequences:
            return 0
        return self.sequences[0].num_codons(self.reading_frame)

    @property
    def alignment_length(self) -> int:
        """Length of the alignment (based on first sequence)."""
        if not self.sequences:
            return 0
        return len(self.sequences[0])

    def filter_by_name(self, pattern: str) -> SequenceSet:
        """Keep the sequences whose name contains `pattern`."""
        return SequenceSet(
            sequences=[seq for seq in self.sequences if pattern in seq.name],
            reading_frame=self.reading_frame,
            genetic_code=self.genetic_code,
        )

    def limit(self, max_strains: int | None) -> SequenceSet:
        """Keep at most `max_strains` sequences, in file order."""
        if max_strains is None or max_strains >= len(self.sequences):
            return self
        return SequenceSet(
            sequences=self.sequences[:max_strains],
            reading_frame=self.reading_frame,
            genetic_code=self.genetic_code,
        )

    def site_composition(self, site_index: int) -> SiteComposition | None:
        """Count the bases at one alignment column.

        Args:
            site_index: Zero-based nucleotide position

        Returns:
            The composition, or None if there are no strains or any strain has
            a gap (or ends) at the site
        """
        if not self.sequences:
            return None
        sc = SiteComposition()
        for seq in self.sequences:
            if site_index >= len(seq) or seq.sequence[site_index] == "-":
                return None
            sc.add_base(seq.sequence[site_index])
        return sc

    def codon_composition(
        self,
        codon_index: int,
        table: CodonTable | None = None,
        include_terminal: bool = False,
        exclude_terminal_stop: bool = True,
    ) -> CodonComposition | None:
        """Collect the codons of all strains at one codon site.

        Args:
            codon_index: Zero-based codon index
            table: Codon table for the composition (the set's genetic code if None)
            include_terminal: Whether evolutionary paths may use terminal codons
            exclude_terminal_stop: Skip the last codon when it is a stop codon

        Returns:
            The composition, or None if there are no strains, any strain has
            a gap in the codon, or the final stop codon is excluded
        """
        if not self.sequences:
            return None
        table = table or self.genetic_code
        is_last = codon_index == self.num_codons - 1
        cc = CodonComposition(table, include_terminal)
        for seq in self.sequences:
            codon = seq.get_codon(codon_index, self.reading_frame).upper()
            if "-" in codon:
                return None
            if is_last and exclude_terminal_stop and table.is_terminal(codon):
                return None
            cc.add_codon(codon)
        return cc


def as_sequence_set(
    source: SequenceSet | str | Path,
    reading_frame: int = 1,
    genetic_code: CodonTable | None = None,
) -> SequenceSet:
    """Return `source` unchanged, or load it from a FASTA path."""
    if isinstance(source, SequenceSet):
        return source
    return SequenceSet.from_fasta(source, reading_frame, genetic_code)
