"""Shared fixtures for TSLN tests."""

import math
from datetime import datetime, timedelta, timezone

import numpy as np
import pytest

from tsln.model import DataPoint

BASE_TIME = datetime(2025, 12, 27, 10, 0, 0, tzinfo=timezone.utc)


def generate_crypto_points(count: int, seed: int = 42, step_ms: int = 1000) -> list[DataPoint]:
    """Deterministic market-tick-like data with five fields."""
    rng = np.random.RandomState(seed)
    points = []
    for i in range(count):
        price = 50000 + math.sin(i / 10) * 500 + rng.rand() * 200
        points.append(DataPoint(
            BASE_TIME + timedelta(milliseconds=i * step_ms),
            {
                "symbol": "BTC",
                "price": round(price, 2),
                "volume": int(round(1_000_000 + rng.rand() * 500_000)),
                "marketCap": 980_000_000_000 + rng.rand() * 20_000_000_000,
                "change24h": (rng.rand() - 0.5) * 5,
            },
        ))
    return points


def build_points(columns: dict, step_ms: int = 1000, offsets_ms=None) -> list[DataPoint]:
    """Build points from ``{field: [values...]}``; all lists share one length."""
    lengths = {len(v) for v in columns.values()}
    assert len(lengths) <= 1
    n = lengths.pop() if lengths else 0
    if offsets_ms is None:
        offsets_ms = [i * step_ms for i in range(n)]
    return [
        DataPoint(
            BASE_TIME + timedelta(milliseconds=offsets_ms[i]),
            {name: values[i] for name, values in columns.items()},
        )
        for i in range(n)
    ]


@pytest.fixture
def crypto_points():
    return generate_crypto_points(100)


@pytest.fixture
def make_points():
    return build_points
