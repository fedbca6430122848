"""Field profiler: per-field statistics that drive strategy selection.

For every field the dataset is walked once in order, tracking:
  - observation count and distinct values
  - adjacent-pair equalities (repeat rate)
  - for numeric fields, successive deltas -> volatility and trend

Volatility is the standard deviation of successive deltas divided by the
field's value range, so fields of different magnitude are comparable.
"""

import math
from typing import Optional

import numpy as np

from ..config import DEFAULT_CONFIG, TSLNConfig
from ..model import FieldProfile, FieldType, Trend, ValueKind, kind_of, same_value

_KIND_TO_TYPE = {
    ValueKind.NUMBER: FieldType.NUMERIC,
    ValueKind.TEXT: FieldType.STRING,
    ValueKind.BOOLEAN: FieldType.BOOLEAN,
}


def field_names(dataset) -> list[str]:
    """Union of field names in first-seen order."""
    names = {}
    for point in dataset:
        for name in point.values:
            names.setdefault(name, None)
    return list(names)


def infer_type(values) -> FieldType:
    """Narrowest common type across non-null observations."""
    kinds = {kind_of(v) for v in values} - {ValueKind.NULL}
    if len(kinds) == 1:
        return _KIND_TO_TYPE[kinds.pop()]
    return FieldType.MIXED


def repeat_rate(values) -> float:
    """Fraction of consecutive pairs holding an identical value."""
    if len(values) < 2:
        return 0.0
    repeats = sum(1 for prev, curr in zip(values, values[1:]) if same_value(prev, curr))
    return repeats / (len(values) - 1)


def compute_volatility(series: np.ndarray) -> Optional[float]:
    """Std of successive deltas normalized by value range.

    Returns None with fewer than 2 observations, or when the range or the
    delta spread overflows float64.
    """
    if len(series) < 2:
        return None
    with np.errstate(over="ignore", invalid="ignore"):
        deltas = np.diff(series)
        value_range = float(series.max() - series.min())
        spread = float(np.std(deltas))
    if not (math.isfinite(value_range) and math.isfinite(spread)):
        return None
    if value_range == 0.0:
        return 0.0
    return spread / value_range


def classify_trend(
    series: np.ndarray,
    volatility: Optional[float],
    config: TSLNConfig = DEFAULT_CONFIG,
) -> Optional[Trend]:
    """Monotonic if a majority of deltas share a sign, else stable or oscillating."""
    if len(series) < 2 or volatility is None:
        return None
    deltas = np.diff(series)
    n = len(deltas)
    if np.count_nonzero(deltas > 0) / n >= config.trend_majority:
        return Trend.INCREASING
    if np.count_nonzero(deltas < 0) / n >= config.trend_majority:
        return Trend.DECREASING
    if volatility <= config.stable_volatility:
        return Trend.STABLE
    return Trend.OSCILLATING


def _is_finite(value) -> bool:
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large for float64
        return False


def _unique_count(values) -> int:
    seen = set()
    for v in values:
        if isinstance(v, float) and math.isnan(v):
            key = (float, "nan")
        else:
            # Tag by type so 1, 1.0 and True stay distinct
            key = (type(v), v)
        seen.add(key)
    return len(seen)


def profile_field(name: str, values: list, config: TSLNConfig = DEFAULT_CONFIG) -> FieldProfile:
    """Profile one field given its per-point values (None for null/absent)."""
    field_type = infer_type(values)
    volatility = None
    trend = None
    has_non_finite = False

    if field_type is FieldType.NUMERIC:
        numbers = [v for v in values if v is not None]
        finite = [v for v in numbers if _is_finite(v)]
        has_non_finite = len(finite) != len(numbers)
        series = np.asarray(finite, dtype=np.float64)
        volatility = compute_volatility(series)
        trend = classify_trend(series, volatility, config)

    return FieldProfile(
        name=name,
        type=field_type,
        total_count=len(values),
        unique_count=_unique_count(values),
        repeat_rate=repeat_rate(values),
        volatility=volatility,
        trend=trend,
        has_non_finite=has_non_finite,
    )


def profile_fields(dataset, config: TSLNConfig = DEFAULT_CONFIG) -> dict[str, FieldProfile]:
    """Profile every field of a dataset.

    Returns:
        Dict mapping field name -> FieldProfile, in first-seen field order.
    """
    profiles = {}
    for name in field_names(dataset):
        values = [point.values.get(name) for point in dataset]
        profiles[name] = profile_field(name, values, config)
    return profiles
