"""Output formatters for analysis results."""

from __future__ import annotations

import json
import math
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from geneanalyzer.analysis.coding import CodingResult
    from geneanalyzer.analysis.derived import DerivedAlleleResult
    from geneanalyzer.analysis.fourfold import FourfoldResult
    from geneanalyzer.analysis.noncoding import NoncodingResult

    AnalysisResult = Union[CodingResult, NoncodingResult, FourfoldResult, DerivedAlleleResult]


class OutputFormat(Enum):
    """Supported output formats."""

    PRETTY = "pretty"
    TSV = "tsv"
    JSON = "json"


def format_result(
    result: AnalysisResult,
    format: OutputFormat = OutputFormat.PRETTY,
) -> str:
    """Format an analysis result for output.

    Args:
        result: Analysis result object
        format: Output format

    Returns:
        Formatted string representation
    """
    if format == OutputFormat.PRETTY:
        return str(result)

    elif format == OutputFormat.JSON:
        return json.dumps(result.to_dict(), indent=2)

    elif format == OutputFormat.TSV:
        columns = flatten(result.to_dict())
        header = "\t".join(columns)
        values = "\t".join(_tsv_value(v) for v in columns.values())
        return f"{header}\n{values}"

    else:
        raise ValueError(f"Unknown format: {format}")


def format_batch_results(
    results: list[tuple[str, AnalysisResult]],
    format: OutputFormat = OutputFormat.TSV,
    adjusted_pvalues: list[float | None] | None = None,
) -> str:
    """Format the results of several genes, one block or row per gene.

    Args:
        results: List of (name, result) tuples
        format: Output format
        adjusted_pvalues: Optional Benjamini-Hochberg adjusted MK p-values,
            one per result (None where a result has no MK table)

    Returns:
        Formatted string representation
    """
    if format == OutputFormat.PRETTY:
        lines = []
        for i, (name, result) in enumerate(results):
            lines.append(f"=== {name} ===")
            lines.append(str(result))
            if adjusted_pvalues is not None and adjusted_pvalues[i] is not None:
                lines.append(f"  p-value (BH adj):     {adjusted_pvalues[i]:.6g}")
            lines.append("")
        return "\n".join(lines)

    elif format == OutputFormat.JSON:
        data = {}
        for i, (name, result) in enumerate(results):
            result_dict = result.to_dict()
            if adjusted_pvalues is not None:
                result_dict["p_value_adjusted"] = adjusted_pvalues[i]
            data[name] = result_dict
        return json.dumps(data, indent=2)

    elif format == OutputFormat.TSV:
        if not results:
            return ""
        rows = []
        for i, (name, result) in enumerate(results):
            row = flatten(result.to_dict())
            if adjusted_pvalues is not None:
                row["p_value_adjusted"] = adjusted_pvalues[i]
            rows.append((name, row))
        # Results without an outgroup have fewer columns; the widest row sets the header.
        header = max((row for _, row in rows), key=len)
        lines = ["gene\t" + "\t".join(header)]
        for name, row in rows:
            lines.append(name + "\t" + "\t".join(_tsv_value(row.get(col)) for col in header))
        return "\n".join(lines)

    else:
        raise ValueError(f"Unknown format: {format}")


def flatten(data: dict, prefix: str = "") -> dict[str, Any]:
    """Flatten nested result dictionaries into dotted column names.

    Nested sections that are None (no outgroup) and lists are dropped.
    """
    flat: dict[str, Any] = {}
    for key, value in data.items():
        name = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(flatten(value, f"{name}."))
        elif value is None and key in ("shared", "divergence", "mk"):
            continue
        elif isinstance(value, list):
            continue
        else:
            flat[name] = value
    return flat


def _tsv_value(value: Any) -> str:
    if value is None:
        return "NA"
    if isinstance(value, float):
        if math.isnan(value):
            return "NA"
        return f"{value:.6g}"
    return str(value)
