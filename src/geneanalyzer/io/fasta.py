"""Reading and writing aligned sequences in FASTA format."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator


def read_fasta(path: str | Path) -> Iterator[tuple[str, str]]:
    """Yield (name, sequence) records from a FASTA file.

    The name is the first word of the header line. Sequence lines are joined,
    stripped of whitespace and upper-cased. Lines starting with ';' are
    comments.

    Args:
        path: Path to FASTA file

    Raises:
        ValueError: On an empty header or sequence data before the first header
    """
    path = Path(path)
    name: str | None = None
    chunks: list[str] = []

    with path.open() as handle:
        for line_no, raw in enumerate(handle, start=1):
            line = raw.strip()
            if not line or line.startswith(";"):
                continue
            if line.startswith(">"):
                if name is not None:
                    yield name, "".join(chunks)
                header = line[1:].split()
                if not header:
                    raise ValueError(f"{path}:{line_no}: empty FASTA header")
                name = header[0]
                chunks = []
            elif name is None:
                raise ValueError(f"{path}:{line_no}: sequence data before the first header")
            else:
                chunks.append("".join(line.split()).upper())

    if name is not None:
        yield name, "".join(chunks)


def write_fasta(
    records: Iterable[tuple[str, str]],
    path: str | Path,
    line_width: int = 60,
) -> None:
    """Write (name, sequence) records to a FASTA file, wrapping long sequences."""
    with Path(path).open("w") as handle:
        for name, sequence in records:
            handle.write(f">{name}\n")
            for start in range(0, len(sequence), line_width):
                handle.write(f"{sequence[start : start + line_width]}\n")
