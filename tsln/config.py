"""Central configuration for the Time-Series Lean Notation codec."""

import warnings
from dataclasses import dataclass

FORMAT_VERSION = 1


@dataclass
class TSLNConfig:
    """All TSLN thresholds in one place.

    Decoding never depends on these: the chosen strategy for every field is
    written into the header, so documents stay decodable if they change.
    """

    # --- Strategy selection ---
    repeat_threshold: float = 0.9  # Min repeat rate for the repeat-marker strategy
    volatility_threshold: float = 0.2  # Max volatility for the differential strategy

    # --- Trend classification ---
    trend_majority: float = 0.7  # Fraction of same-sign deltas for a monotonic trend
    stable_volatility: float = 0.01  # Volatility at or below this is 'stable'

    # --- Metrics ---
    chars_per_token: int = 4  # Approximate characters per LLM token


DEFAULT_CONFIG = TSLNConfig()


_OPTION_ALIASES = {
    "enable_differential": "enable_differential",
    "enableDifferential": "enable_differential",
    "enable_repeat_markers": "enable_repeat_markers",
    "enableRepeatMarkers": "enable_repeat_markers",
}


@dataclass(frozen=True)
class EncodeOptions:
    """Caller-requested capability flags for one encode call."""

    enable_differential: bool = True
    enable_repeat_markers: bool = True

    @classmethod
    def coerce(cls, options) -> "EncodeOptions":
        """Build options from None, an EncodeOptions or a dict.

        Unknown keys and non-boolean values fall back to the defaults with a
        warning instead of failing.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        if not isinstance(options, dict):
            warnings.warn(f"Ignoring invalid encode options of type {type(options).__name__}")
            return cls()

        resolved = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key)
            if name is None:
                warnings.warn(f"Ignoring unknown encode option {key!r}")
                continue
            if value is None:
                continue
            if not isinstance(value, bool):
                warnings.warn(f"Ignoring non-boolean value for {key!r}: {value!r}")
                continue
            resolved[name] = value
        return cls(**resolved)
