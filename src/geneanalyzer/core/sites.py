"""Base composition of single alignment columns."""

from __future__ import annotations

from enum import IntFlag

# Order of the counters kept by SiteComposition
SYMBOLS = ("A", "C", "G", "T", "-", "N", "X")
_SYMBOL_INDEX = {s: i for i, s in enumerate(SYMBOLS)}

TRANSITION_PAIRS = frozenset({("A", "G"), ("G", "A"), ("C", "T"), ("T", "C")})


class SiteType(IntFlag):
    """Classification of an alignment site between two populations.

    INVALID and MONOMORPHIC are never combined with other flags.
    """

    INVALID = 0
    MONOMORPHIC = 1
    POLYMORPHIC_FIRST = 2
    POLYMORPHIC_SECOND = 4
    DIVERGENT = 8


def substitution_type(base1: str, base2: str) -> int:
    """Classify a single base change.

    Returns:
        -1 if either base is not A, C, G or T, 0 if the bases are equal,
        1 for a transition (A<->G, C<->T), 2 for a transversion
    """
    b1 = base1.upper()
    b2 = base2.upper()
    if len(b1) != 1 or len(b2) != 1 or b1 not in "ACGT" or b2 not in "ACGT":
        return -1
    if b1 == b2:
        return 0
    return 1 if (b1, b2) in TRANSITION_PAIRS else 2


class SiteComposition:
    """Counts of A, C, G, T, gap, N and X observed at one alignment column.

    Ambiguity codes other than N and X are not supported.
    """

    def __init__(self, bases: str | None = None):
        self._counts = [0] * len(SYMBOLS)
        if bases:
            for base in bases:
                self.add_base(base)

    def add_base(self, base: str) -> bool:
        """Add a single base; returns False for unsupported symbols."""
        idx = _SYMBOL_INDEX.get(base.upper())
        if idx is None:
            return False
        self._counts[idx] += 1
        return True

    def base_count(self, base: str) -> int:
        """Number of times `base` was added, or -1 for unsupported symbols."""
        idx = _SYMBOL_INDEX.get(base.upper())
        return self._counts[idx] if idx is not None else -1

    @property
    def counts(self) -> tuple[int, ...]:
        return tuple(self._counts)

    @property
    def valid_bases_count(self) -> int:
        """Number of A, C, G and T at the site."""
        return sum(self._counts[:4])

    @property
    def total_bases_count(self) -> int:
        """Number of bases including N and X, excluding gaps."""
        return self.valid_bases_count + self._counts[5] + self._counts[6]

    @property
    def gaps_count(self) -> int:
        return self._counts[4]

    def base_frequencies(self, use_all: bool = False) -> tuple[float, ...]:
        """Frequencies of A, C, G, T (and N, X when `use_all` is set).

        Returns all zeros for a site without bases.
        """
        if use_all:
            total = self.total_bases_count
            values = self._counts[:4] + self._counts[5:]
        else:
            total = self.valid_bases_count
            values = self._counts[:4]
        if total == 0:
            return tuple(0.0 for _ in values)
        return tuple(v / total for v in values)

    def _distinct_bases(self) -> int:
        return sum(1 for n in self._counts[:4] if n > 0)

    def number_of_polymorphisms(self) -> int:
        """Number of distinct valid bases minus one; gaps, N and X are ignored."""
        return max(self._distinct_bases() - 1, 0)

    def number_of_singletons(self, cutoff_frequency: float = 1.0) -> int:
        """Count rare bases at the site.

        With a cutoff of 0.5 or more only true singletons (bases seen once)
        are counted. Below 0.5, every base whose frequency is under the
        cutoff counts.
        """
        n_total = self.valid_bases_count
        if n_total < 2:
            return 0
        if cutoff_frequency >= 0.5:
            return sum(1 for n in self._counts[:4] if n == 1)
        return sum(1 for n in self._counts[:4] if n > 0 and n / n_total < cutoff_frequency)

    def number_of_transitions(self) -> float:
        """Expected number of transitions among the polymorphisms at the site."""
        n_bases = self._distinct_bases()
        if n_bases < 2:
            return 0.0
        if n_bases == 2:
            a, c, g, t = self._counts[:4]
            return 1.0 if (a > 0 and g > 0) or (c > 0 and t > 0) else 0.0
        # 3 bases: 2 changes, one of them a transition; 4 bases: 1.5 of 3
        return 1.0 if n_bases == 3 else 1.5

    def number_of_transversions(self) -> float:
        return self.number_of_polymorphisms() - self.number_of_transitions()

    @staticmethod
    def site_type(sc1: SiteComposition | None, sc2: SiteComposition | None) -> SiteType:
        """Classify the site between two populations."""
        if sc1 is None or sc2 is None or sc1.valid_bases_count == 0 or sc2.valid_bases_count == 0:
            return SiteType.INVALID

        result = SiteType.INVALID
        if sc1.number_of_polymorphisms() > 0:
            result |= SiteType.POLYMORPHIC_FIRST
        if sc2.number_of_polymorphisms() > 0:
            result |= SiteType.POLYMORPHIC_SECOND
        if not shares_bases(sc1, sc2):
            result |= SiteType.DIVERGENT

        return result if result else SiteType.MONOMORPHIC

    @staticmethod
    def merge(sc1: SiteComposition, sc2: SiteComposition) -> SiteComposition:
        """Return a new composition with the counts of both summed."""
        merged = SiteComposition()
        merged._counts = [a + b for a, b in zip(sc1._counts, sc2._counts)]
        return merged

    def __repr__(self) -> str:
        parts = ", ".join(f"{s}={n}" for s, n in zip(SYMBOLS, self._counts) if n)
        return f"SiteComposition({parts})"


def shares_bases(sc1: SiteComposition, sc2: SiteComposition) -> bool:
    """True if any valid base occurs in both compositions."""
    return any(a > 0 and b > 0 for a, b in zip(sc1._counts[:4], sc2._counts[:4]))
