"""Strategy selector: turns field profiles into per-field encodings.

Priority per field:
  1. repeat marker  - the value barely changes between consecutive points
  2. differential   - numeric, finite, small regular steps (low volatility)
  3. raw            - everything else
"""

from ..config import DEFAULT_CONFIG, EncodeOptions, TSLNConfig
from ..model import EncodingStrategy, FieldProfile, FieldType


def select_strategy(
    profile: FieldProfile,
    options: EncodeOptions,
    config: TSLNConfig = DEFAULT_CONFIG,
) -> EncodingStrategy:
    """Pick the encoding strategy for one field."""
    if options.enable_repeat_markers and profile.repeat_rate >= config.repeat_threshold:
        return EncodingStrategy.REPEAT
    if (
        options.enable_differential
        and profile.type is FieldType.NUMERIC
        and not profile.has_non_finite
        and profile.volatility is not None
        and profile.volatility <= config.volatility_threshold
    ):
        return EncodingStrategy.DIFFERENTIAL
    return EncodingStrategy.RAW


def select_strategies(
    profiles: dict[str, FieldProfile],
    options=None,
    config: TSLNConfig = DEFAULT_CONFIG,
) -> dict[str, EncodingStrategy]:
    """Pick strategies for every profiled field, preserving field order."""
    options = EncodeOptions.coerce(options)
    return {name: select_strategy(p, options, config) for name, p in profiles.items()}
