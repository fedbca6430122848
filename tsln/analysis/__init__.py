"""Dataset analysis: field profiling, timestamp classification, strategy choice."""

from dataclasses import dataclass
from typing import Optional

from ..config import DEFAULT_CONFIG, EncodeOptions, TSLNConfig
from ..model import EncodingStrategy, FieldProfile, TimestampAnalysis
from .profiler import profile_fields, profile_field, field_names
from .strategy import select_strategies, select_strategy
from .timestamps import analyze_timestamps


@dataclass(frozen=True)
class DatasetAnalysis:
    """Derived, per-call analysis of a dataset."""

    profiles: dict
    strategies: dict
    timestamps: TimestampAnalysis
    dataset_volatility: float
    compression_potential: float

    @property
    def is_regular_interval(self) -> bool:
        return self.timestamps.is_regular

    @property
    def timestamp_interval(self) -> Optional[int]:
        return self.timestamps.interval_ms

    def uses(self, strategy: EncodingStrategy) -> list[str]:
        """Names of the fields encoded with ``strategy``."""
        return [name for name, s in self.strategies.items() if s is strategy]


def _field_potential(profile: FieldProfile) -> float:
    if profile.volatility is None:
        return profile.repeat_rate
    return max(profile.repeat_rate, 1.0 - min(profile.volatility, 1.0))


def analyze_dataset(dataset, options=None, config: TSLNConfig = DEFAULT_CONFIG) -> DatasetAnalysis:
    """Profile fields, classify timestamps and select strategies in one pass."""
    options = EncodeOptions.coerce(options)
    profiles = profile_fields(dataset, config)
    strategies = select_strategies(profiles, options, config)
    timestamps = analyze_timestamps([point.timestamp for point in dataset])

    volatilities = [p.volatility for p in profiles.values() if p.volatility is not None]
    dataset_volatility = sum(volatilities) / len(volatilities) if volatilities else 0.0
    if profiles:
        potential = sum(_field_potential(p) for p in profiles.values()) / len(profiles)
    else:
        potential = 0.0

    return DatasetAnalysis(
        profiles=profiles,
        strategies=strategies,
        timestamps=timestamps,
        dataset_volatility=dataset_volatility,
        compression_potential=potential,
    )


__all__ = [
    "DatasetAnalysis",
    "analyze_dataset",
    "analyze_timestamps",
    "field_names",
    "profile_field",
    "profile_fields",
    "select_strategies",
    "select_strategy",
]
