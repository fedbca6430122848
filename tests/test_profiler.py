"""Tests for the field profiler."""

import math
import warnings

import numpy as np
import pytest

from tsln.analysis.profiler import (
    classify_trend,
    compute_volatility,
    field_names,
    infer_type,
    profile_field,
    profile_fields,
    repeat_rate,
)
from tsln.config import TSLNConfig
from tsln.model import DataPoint, FieldType, Trend


class TestTypeInference:

    def test_numeric(self):
        assert infer_type([1, 2.5, None, 3]) is FieldType.NUMERIC

    def test_string(self):
        assert infer_type(["a", None, "b"]) is FieldType.STRING

    def test_boolean(self):
        """Booleans do not widen to numeric."""
        assert infer_type([True, False]) is FieldType.BOOLEAN

    def test_mixed(self):
        assert infer_type([1, "a"]) is FieldType.MIXED
        assert infer_type([1, True]) is FieldType.MIXED

    def test_all_null_is_mixed(self):
        assert infer_type([None, None]) is FieldType.MIXED
        assert infer_type([]) is FieldType.MIXED


class TestRepeatRate:

    def test_constant(self):
        assert repeat_rate(["BTC"] * 10) == 1.0

    def test_no_repeats(self):
        assert repeat_rate([1, 2, 3, 4]) == 0.0

    def test_partial(self):
        assert repeat_rate([1, 1, 2, 2, 3]) == pytest.approx(0.5)

    def test_strict_equality(self):
        """1 followed by 1.0 is not a repeat."""
        assert repeat_rate([1, 1.0, True]) == 0.0

    def test_nulls_repeat(self):
        assert repeat_rate([None, None, None]) == 1.0

    def test_short_sequences(self):
        assert repeat_rate([]) == 0.0
        assert repeat_rate([5]) == 0.0


class TestVolatility:

    def test_linear_is_zero(self):
        """Constant steps have zero delta dispersion."""
        assert compute_volatility(np.arange(100, dtype=np.float64)) == 0.0

    def test_constant_is_zero(self):
        assert compute_volatility(np.full(10, 7.0)) == 0.0

    def test_alternating(self):
        series = np.array([0.0, 10.0, 0.0, 10.0])
        expected = np.std([10.0, -10.0, 10.0]) / 10.0
        assert compute_volatility(series) == pytest.approx(expected)

    def test_scale_invariant(self):
        """Volatility is independent of units."""
        rng = np.random.RandomState(42)
        series = np.cumsum(rng.randn(200))
        assert compute_volatility(series) == pytest.approx(compute_volatility(series * 1000))

    def test_too_short(self):
        assert compute_volatility(np.array([1.0])) is None
        assert compute_volatility(np.array([])) is None

    def test_overflowing_range_is_undefined(self):
        """A range beyond float64 leaves volatility undefined."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert compute_volatility(np.array([1.7e308, -1.7e308, 1.7e308])) is None

    def test_smooth_walk_below_noise(self):
        """A random walk is far less volatile than white noise."""
        rng = np.random.RandomState(0)
        walk = np.cumsum(rng.randn(500))
        noise = rng.randn(500)
        assert compute_volatility(walk) < compute_volatility(noise)


class TestTrend:

    def test_increasing(self):
        series = np.arange(10, dtype=np.float64)
        assert classify_trend(series, compute_volatility(series)) is Trend.INCREASING

    def test_decreasing(self):
        series = np.array([10.0, 8.0, 6.0, 4.0])
        assert classify_trend(series, compute_volatility(series)) is Trend.DECREASING

    def test_stable(self):
        series = np.full(5, 3.0)
        assert classify_trend(series, 0.0) is Trend.STABLE

    def test_oscillating(self):
        series = np.array([0.0, 10.0, 0.0, 10.0])
        assert classify_trend(series, compute_volatility(series)) is Trend.OSCILLATING

    def test_majority_threshold(self):
        """Three of four positive deltas (75%) counts as increasing at 0.7."""
        series = np.array([0.0, 1.0, 2.0, 1.0, 2.0])
        volatility = compute_volatility(series)
        assert classify_trend(series, volatility) is Trend.INCREASING
        strict = TSLNConfig(trend_majority=0.8)
        assert classify_trend(series, volatility, strict) is Trend.OSCILLATING

    def test_unknown_for_single_value(self):
        assert classify_trend(np.array([1.0]), None) is None


class TestProfileField:

    def test_numeric_profile(self):
        profile = profile_field("price", [100, 101, 102, 103])
        assert profile.type is FieldType.NUMERIC
        assert profile.is_numeric
        assert profile.total_count == 4
        assert profile.unique_count == 4
        assert profile.repeat_rate == 0.0
        assert profile.volatility == 0.0
        assert profile.trend is Trend.INCREASING
        assert not profile.has_non_finite

    def test_string_profile_has_no_volatility(self):
        profile = profile_field("symbol", ["BTC", "BTC", "ETH"])
        assert profile.volatility is None
        assert profile.trend is None
        assert profile.unique_count == 2

    def test_unique_count_is_type_aware(self):
        profile = profile_field("m", [1, 1.0, True, None, None])
        assert profile.unique_count == 4

    def test_single_observation(self):
        """Fewer than two observations: undefined volatility and trend."""
        profile = profile_field("x", [42.0])
        assert profile.volatility is None
        assert profile.trend is None
        assert profile.repeat_rate == 0.0

    def test_non_finite_flagged(self):
        profile = profile_field("x", [1.0, math.inf, 2.0, math.nan])
        assert profile.type is FieldType.NUMERIC
        assert profile.has_non_finite
        assert profile.volatility == 0.0  # computed on the finite values only

    def test_huge_int_treated_as_non_finite(self):
        profile = profile_field("x", [1, 10 ** 400])
        assert profile.has_non_finite

    def test_near_max_floats_stay_raw(self):
        profile = profile_field("v", [1.7e308, -1.7e308, 1.7e308])
        assert profile.volatility is None
        assert profile.trend is None
        assert not profile.has_non_finite

    def test_nulls_skipped_for_deltas(self):
        profile = profile_field("x", [1, None, 2, None, 3])
        assert profile.volatility == 0.0
        assert profile.trend is Trend.INCREASING


class TestProfileFields:

    def test_field_order_is_first_seen(self):
        points = [
            DataPoint(0, {"b": 1, "a": 2}),
            DataPoint(1000, {"a": 3, "c": 4}),
        ]
        assert field_names(points) == ["b", "a", "c"]
        assert list(profile_fields(points)) == ["b", "a", "c"]

    def test_absent_keys_are_null(self):
        points = [DataPoint(0, {"a": 1}), DataPoint(1000, {})]
        profile = profile_fields(points)["a"]
        assert profile.total_count == 2
        assert profile.unique_count == 2

    def test_empty_dataset(self):
        assert profile_fields([]) == {}

    def test_crypto_fields(self, crypto_points):
        profiles = profile_fields(crypto_points)
        assert profiles["symbol"].repeat_rate == 1.0
        assert profiles["price"].volatility < profiles["volume"].volatility
