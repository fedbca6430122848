"""TSLN encoder: schema header plus one delimited row per data point."""

from ..analysis import DatasetAnalysis, analyze_dataset
from ..config import DEFAULT_CONFIG, FORMAT_VERSION, EncodeOptions, TSLNConfig
from ..model import (
    DataPoint,
    EncodedDocument,
    EncodingStrategy,
    FieldDescriptor,
    Schema,
    TimestampMode,
    same_value,
)
from .header import write_header
from .literals import (
    FIELD_SEP,
    LITERAL_TAG,
    REPEAT_TOKEN,
    format_delta,
    format_literal,
)
from .state import RowState


def coerce_dataset(dataset) -> list[DataPoint]:
    """Accept DataPoints or ``{"timestamp", "data"}`` dicts."""
    points = []
    for item in dataset:
        if isinstance(item, DataPoint):
            points.append(item)
        elif isinstance(item, dict):
            points.append(DataPoint.from_dict(item))
        else:
            raise TypeError(f"Expected DataPoint or dict, got {type(item).__name__}")
    return points


def encode_value(value, descriptor: FieldDescriptor, state: RowState) -> str:
    """Encode one field value and advance the running state."""
    name = descriptor.name
    has_previous = state.has_previous(name)
    previous = state.previous(name) if has_previous else None
    state.update(name, value)

    if descriptor.strategy is EncodingStrategy.REPEAT:
        if has_previous and same_value(previous, value):
            return REPEAT_TOKEN
        return format_literal(value, descriptor.type)

    if descriptor.strategy is EncodingStrategy.DIFFERENTIAL:
        if has_previous and previous is not None and value is not None:
            delta = format_delta(previous, value)
            if delta is not None:
                return delta
            return LITERAL_TAG + format_literal(value, descriptor.type)
        return format_literal(value, descriptor.type)

    return format_literal(value, descriptor.type)


def build_schema(points: list[DataPoint], analysis: DatasetAnalysis, options: EncodeOptions) -> Schema:
    descriptors = tuple(
        FieldDescriptor(name, profile.type, analysis.strategies[name])
        for name, profile in analysis.profiles.items()
    )
    timestamps = analysis.timestamps
    return Schema(
        version=FORMAT_VERSION,
        timestamp_mode=timestamps.mode,
        base_timestamp=timestamps.base,
        interval_ms=timestamps.interval_ms,
        point_count=len(points),
        fields=descriptors,
        enable_differential=options.enable_differential,
        enable_repeat_markers=options.enable_repeat_markers,
    )


def encode(
    dataset,
    options=None,
    config: TSLNConfig = DEFAULT_CONFIG,
    analysis: DatasetAnalysis = None,
) -> EncodedDocument:
    """Encode a dataset to TSLN.

    Args:
        dataset: Time-ordered DataPoints (or ``{"timestamp", "data"}`` dicts).
        options: EncodeOptions, a dict of flags, or None for defaults.
        config: Selection thresholds.
        analysis: Precomputed analysis of the same dataset and options.

    Returns:
        EncodedDocument with schema, header and body text.
    """
    points = coerce_dataset(dataset)
    options = EncodeOptions.coerce(options)
    if analysis is None:
        analysis = analyze_dataset(points, options, config)

    schema = build_schema(points, analysis, options)
    state = RowState(schema.field_names)
    with_offsets = schema.timestamp_mode is TimestampMode.OFFSET

    rows = []
    for point, offset in zip(points, analysis.timestamps.offsets_ms):
        tokens = [str(offset)] if with_offsets else []
        for descriptor in schema.fields:
            tokens.append(encode_value(point.values.get(descriptor.name), descriptor, state))
        rows.append(FIELD_SEP.join(tokens))

    return EncodedDocument(schema=schema, header=write_header(schema), body="\n".join(rows))
