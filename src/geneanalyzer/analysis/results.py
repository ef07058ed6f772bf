"""Result records shared by the coding and non-coding analyses."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields

from geneanalyzer.analysis.statistics import alpha, dos, fishers_exact, neutrality_index


def _fmt(value: float | None, pattern: str = ".6f") -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "N/A"
    return format(value, pattern)


def defined(value: float | None) -> float | None:
    """Map NaN to None so undefined statistics serialize as null."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    return value


@dataclass
class PolymorphismSummary:
    """Diversity statistics of one sample over one class of sites."""

    sites: float
    pi: float
    theta: float
    tajimas_d: float  # NaN when undefined
    tajimas_d_prime: float  # NaN when undefined
    polymorphisms: int
    singletons: int
    transitions: float
    transversions: float

    def to_dict(self) -> dict:
        return {f.name: defined(getattr(self, f.name)) for f in fields(self)}

    def __str__(self) -> str:
        return (
            f"sites={self.sites:.2f}  pi={self.pi:.6f}  theta={self.theta:.6f}  "
            f"D={_fmt(self.tajimas_d, '.4f')}  D'={_fmt(self.tajimas_d_prime, '.4f')}\n"
            f"    polymorphisms={self.polymorphisms}  singletons={self.singletons}  "
            f"TS={self.transitions:g}  TV={self.transversions:g}"
        )


@dataclass
class MKTable:
    """McDonald-Kreitman contingency table and its statistics."""

    dn: int  # Non-synonymous fixed differences
    ds: int  # Synonymous fixed differences
    pn: int  # Non-synonymous polymorphisms
    ps: int  # Synonymous polymorphisms
    p_value: float  # Fisher's exact test p-value
    ni: float | None  # Neutrality Index
    alpha: float | None  # Proportion of adaptive substitutions
    dos: float | None  # Direction of Selection

    @classmethod
    def from_counts(cls, dn: int, ds: int, pn: int, ps: int) -> MKTable:
        """Build the table and compute its statistics from the four counts."""
        return cls(
            dn=dn,
            ds=ds,
            pn=pn,
            ps=ps,
            p_value=fishers_exact(dn, ds, pn, ps),
            ni=neutrality_index(dn, ds, pn, ps),
            alpha=alpha(dn, ds, pn, ps),
            dos=dos(dn, ds, pn, ps),
        )

    def __str__(self) -> str:
        return (
            f"  Divergence:    Dn={self.dn}, Ds={self.ds}\n"
            f"  Polymorphism:  Pn={self.pn}, Ps={self.ps}\n"
            f"  Fisher's exact p-value: {self.p_value:.4g}\n"
            f"  Neutrality Index (NI):  {_fmt(self.ni, '.4f')}\n"
            f"  Alpha (α):              {_fmt(self.alpha, '.4f')}\n"
            f"  DoS:                    {_fmt(self.dos, '.4f')}"
        )

    def to_dict(self) -> dict:
        return {
            "dn": self.dn,
            "ds": self.ds,
            "pn": self.pn,
            "ps": self.ps,
            "p_value": self.p_value,
            "ni": self.ni,
            "alpha": self.alpha,
            "dos": self.dos,
        }
