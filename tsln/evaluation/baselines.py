"""Baseline notations used for format comparison.

These only need to be realistic enough to measure: structured JSON records,
flat CSV with a header row, and a compact tabular notation that declares the
column list once (in the style of TOON).
"""

import json

import pandas as pd

from ..analysis import field_names
from ..codec.literals import format_number
from ..model import format_instant


def canonical_json(points) -> str:
    """Compact JSON array of ``{"timestamp", "data"}`` records."""
    return json.dumps(
        [p.to_dict() for p in points],
        separators=(",", ":"),
        ensure_ascii=False,
    )


def csv_text(points) -> str:
    """Flat CSV: a timestamp column followed by every field."""
    columns = ["timestamp"] + field_names(points)
    records = [
        {"timestamp": format_instant(p.timestamp), **p.values}
        for p in points
    ]
    df = pd.DataFrame.from_records(records, columns=columns)
    return df.to_csv(index=False, lineterminator="\n")


def _tabular_value(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if value == "" or any(c in value for c in ',"\n:') or value.strip() != value:
        return json.dumps(value, ensure_ascii=False)
    return value


def compact_tabular_text(points, name: str = "data") -> str:
    """Column list declared once, then one comma-separated row per point."""
    columns = ["timestamp"] + field_names(points)
    lines = [f"{name}[{len(points)}]{{{','.join(columns)}}}:"]
    for p in points:
        row = [format_instant(p.timestamp)]
        row.extend(_tabular_value(p.values.get(c)) for c in columns[1:])
        lines.append("  " + ",".join(row))
    return "\n".join(lines)


BASELINES = {
    "json": canonical_json,
    "csv": csv_text,
    "toon": compact_tabular_text,
}
