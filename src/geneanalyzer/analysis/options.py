"""Options shared by the coding, non-coding and fourfold analyses."""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass
class AnalysisOptions:
    """Settings of a diversity and divergence analysis.

    Attributes:
        jc_pi: Apply the Jukes-Cantor correction to pi
        jc_theta: Apply the Jukes-Cantor correction to theta
        jc_k: Apply the Jukes-Cantor correction to divergence
        cutoff_frequency: Upper frequency of a base counted as a singleton;
            0.5 and above means bases seen exactly once
        include_terminal: Let evolutionary paths pass through stop codons
        exclude_terminal_stop: Skip the final codon when it is a stop codon
        exclude_small_samples: Skip sites with fewer than 4 valid strains
        max_strains: Use at most this many strains per sample (all if None)
        reading_frame: Reading frame of coding sequences (1, 2, or 3)
        exclude_non_fourfold: Drop a fourfold site when any strain has a
            codon that is not fourfold degenerate (otherwise skip that strain)
        exclude_nonsynonymous: Drop a fourfold site when codons do not encode
            the amino acid of the first strain, or the first population and
            outgroup codons differ in amino acid
    """

    jc_pi: bool = False
    jc_theta: bool = False
    jc_k: bool = False
    cutoff_frequency: float = 1.0
    include_terminal: bool = False
    exclude_terminal_stop: bool = True
    exclude_small_samples: bool = False
    max_strains: int | None = None
    reading_frame: int = 1
    exclude_non_fourfold: bool = True
    exclude_nonsynonymous: bool = True

    def __post_init__(self) -> None:
        if not 0.0 < self.cutoff_frequency <= 1.0:
            raise ValueError(
                f"cutoff_frequency must be in (0, 1], got {self.cutoff_frequency}"
            )
        if self.reading_frame not in (1, 2, 3):
            raise ValueError(f"reading_frame must be 1, 2, or 3, got {self.reading_frame}")
        if self.max_strains is not None and self.max_strains < 1:
            raise ValueError(f"max_strains must be at least 1, got {self.max_strains}")

    def to_dict(self) -> dict:
        return asdict(self)
