"""Time-Series Lean Notation (TSLN): token-lean, lossless text for time series.

Lightweight API:
    import tsln
    document = tsln.encode(points)
    recovered = tsln.decode(document.text)
    report = tsln.compare_formats(points)

pandas integration (registers the ``df.tsln`` accessor):
    import tsln.pandas_ext
"""

__version__ = "1.0.0"

from dataclasses import dataclass

from .analysis import DatasetAnalysis, analyze_dataset
from .codec import decode, encode
from .codec.encoder import coerce_dataset
from .config import DEFAULT_CONFIG, EncodeOptions, TSLNConfig
from .errors import TSLNDecodeError
from .evaluation import (
    FormatComparison,
    Statistics,
    compare_formats,
    compute_statistics,
    estimate_tokens,
)
from .model import (
    DataPoint,
    EncodedDocument,
    EncodingStrategy,
    FieldProfile,
    FieldType,
    Schema,
    TimestampMode,
    Trend,
)


@dataclass(frozen=True)
class ConversionResult:
    """Encoded document together with its statistics and analysis."""

    document: EncodedDocument
    statistics: Statistics
    analysis: DatasetAnalysis

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def schema(self) -> Schema:
        return self.document.schema


def analyze(dataset, options=None, config: TSLNConfig = DEFAULT_CONFIG) -> DatasetAnalysis:
    """Profile a dataset without encoding it."""
    return analyze_dataset(coerce_dataset(dataset), options, config)


def convert(dataset, options=None, config: TSLNConfig = DEFAULT_CONFIG) -> ConversionResult:
    """Encode a dataset and report statistics and analysis in one call.

    Example:
        >>> result = tsln.convert(points)
        >>> result.statistics.estimated_tokens
    """
    points = coerce_dataset(dataset)
    options = EncodeOptions.coerce(options)
    analysis = analyze_dataset(points, options, config)
    document = encode(points, options, config, analysis=analysis)
    return ConversionResult(
        document=document,
        statistics=compute_statistics(points, document, config),
        analysis=analysis,
    )


__all__ = [
    "ConversionResult",
    "DataPoint",
    "DatasetAnalysis",
    "EncodeOptions",
    "EncodedDocument",
    "EncodingStrategy",
    "FieldProfile",
    "FieldType",
    "FormatComparison",
    "Schema",
    "Statistics",
    "TSLNConfig",
    "TSLNDecodeError",
    "TimestampMode",
    "Trend",
    "analyze",
    "compare_formats",
    "convert",
    "decode",
    "encode",
    "estimate_tokens",
]
