"""Size, ratio and token-estimate reporting for TSLN and baseline notations."""

from .baselines import canonical_json, compact_tabular_text, csv_text
from .metrics import (
    FormatComparison,
    FormatMetrics,
    Statistics,
    compare_formats,
    compute_statistics,
    estimate_tokens,
    savings_percent,
    text_size,
)

__all__ = [
    "FormatComparison",
    "FormatMetrics",
    "Statistics",
    "canonical_json",
    "compact_tabular_text",
    "compare_formats",
    "compute_statistics",
    "csv_text",
    "estimate_tokens",
    "savings_percent",
    "text_size",
]
