"""Evaluation metrics for TSLN: sizes, compression ratio, token estimates.

Token counts here are an approximation (characters / chars_per_token,
rounded up), not the output of a real tokenizer.
"""

import math
from dataclasses import asdict, dataclass
from typing import Optional

from ..config import DEFAULT_CONFIG, TSLNConfig
from ..codec.encoder import coerce_dataset, encode
from .baselines import BASELINES, canonical_json

STRUCTURED_BASELINE = "json"
NATIVE_FORMAT = "tsln"


def text_size(text: str) -> int:
    """Size of ``text`` in UTF-8 bytes."""
    return len(text.encode("utf-8"))


def estimate_tokens(text: str, chars_per_token: int = DEFAULT_CONFIG.chars_per_token) -> int:
    """Approximate LLM token count: ceil(characters / chars_per_token)."""
    return math.ceil(len(text) / chars_per_token)


@dataclass(frozen=True)
class FormatMetrics:
    size: int
    tokens: int


@dataclass(frozen=True)
class Statistics:
    """Size and token figures for one conversion."""

    original_size: int
    encoded_size: int
    compression_ratio: float
    original_tokens: int
    estimated_tokens: int
    estimated_token_savings: int
    token_savings_percent: float

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class FormatComparison:
    """Per-format metrics plus the winner and TSLN savings vs JSON."""

    formats: dict
    best_format: str
    savings: float

    def __getitem__(self, name: str) -> FormatMetrics:
        return self.formats[name]

    def to_dict(self) -> dict:
        out = {name: asdict(m) for name, m in self.formats.items()}
        out["bestFormat"] = self.best_format
        out["savings"] = self.savings
        return out


def measure(text: str, config: TSLNConfig = DEFAULT_CONFIG) -> FormatMetrics:
    return FormatMetrics(size=text_size(text), tokens=estimate_tokens(text, config.chars_per_token))


def savings_percent(baseline_tokens: int, tokens: int) -> float:
    """Percentage of ``baseline_tokens`` saved, rounded to one decimal."""
    if baseline_tokens == 0:
        return 0.0
    return round((baseline_tokens - tokens) / baseline_tokens * 100, 1)


def compute_statistics(
    dataset,
    document,
    config: TSLNConfig = DEFAULT_CONFIG,
) -> Statistics:
    """Compare an encoded document against the canonical JSON of its dataset."""
    original = canonical_json(coerce_dataset(dataset))
    encoded = document.text
    original_size = text_size(original)
    encoded_size = text_size(encoded)
    original_tokens = estimate_tokens(original, config.chars_per_token)
    encoded_tokens = estimate_tokens(encoded, config.chars_per_token)

    return Statistics(
        original_size=original_size,
        encoded_size=encoded_size,
        compression_ratio=encoded_size / original_size if original_size else 0.0,
        original_tokens=original_tokens,
        estimated_tokens=encoded_tokens,
        estimated_token_savings=original_tokens - encoded_tokens,
        token_savings_percent=savings_percent(original_tokens, encoded_tokens),
    )


def compare_formats(
    dataset,
    options=None,
    baselines: Optional[dict] = None,
    config: TSLNConfig = DEFAULT_CONFIG,
) -> FormatComparison:
    """Measure TSLN against baseline notations of the same dataset.

    Args:
        dataset: DataPoints (or ``{"timestamp", "data"}`` dicts).
        options: Encode options for the TSLN document.
        baselines: Externally produced baseline texts keyed by format name.
            json, csv and toon are produced locally when not supplied.
        config: Token estimate and selection settings.

    Returns:
        FormatComparison. Ties for best keep the earlier format.
    """
    points = coerce_dataset(dataset)
    texts = dict(baselines or {})
    for name, produce in BASELINES.items():
        if name not in texts:
            texts[name] = produce(points)

    ordered = {name: texts[name] for name in BASELINES}
    ordered.update((name, text) for name, text in texts.items() if name not in BASELINES)
    ordered[NATIVE_FORMAT] = encode(points, options, config).text

    formats = {name: measure(text, config) for name, text in ordered.items()}
    best = min(formats, key=lambda name: formats[name].tokens)
    savings = savings_percent(
        formats[STRUCTURED_BASELINE].tokens, formats[NATIVE_FORMAT].tokens
    )
    return FormatComparison(formats=formats, best_format=best, savings=savings)
