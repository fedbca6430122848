"""TSLN decoder: parses the header and reverses each field strategy row by row."""

from ..errors import TSLNDecodeError
from ..model import (
    DataPoint,
    EncodedDocument,
    EncodingStrategy,
    FieldDescriptor,
    Schema,
    TimestampMode,
    from_epoch_ms,
    to_epoch_ms,
)
from .header import HEADER_LINES, parse_header
from .literals import (
    LITERAL_TAG,
    NULL_TOKEN,
    REPEAT_TOKEN,
    apply_delta,
    parse_literal,
    parse_number,
    split_escaped,
)
from .state import RowState


def decode_value(token: str, descriptor: FieldDescriptor, state: RowState, row: int):
    """Decode one field token and advance the running state."""
    name = descriptor.name
    has_previous = state.has_previous(name)
    previous = state.previous(name) if has_previous else None
    strategy = descriptor.strategy

    try:
        if token == REPEAT_TOKEN:
            if strategy is not EncodingStrategy.REPEAT:
                raise TSLNDecodeError("Unescaped repeat marker in a non-repeat field", row, name)
            if not has_previous:
                raise TSLNDecodeError("Repeat marker without a previous value", row, name)
            value = previous
        elif strategy is EncodingStrategy.DIFFERENTIAL:
            if token.startswith(LITERAL_TAG):
                value = parse_number(token[len(LITERAL_TAG):])
            elif not has_previous or previous is None or token == NULL_TOKEN:
                value = parse_literal(token, descriptor.type)
            else:
                value = apply_delta(previous, token)
        else:
            value = parse_literal(token, descriptor.type)
    except TSLNDecodeError:
        raise
    except ValueError as exc:
        raise TSLNDecodeError(str(exc), row, name) from None

    state.update(name, value)
    return value


def _split_rows(schema: Schema, body_lines: list[str]) -> list[str]:
    # Tolerate a single trailing newline
    if len(body_lines) == schema.point_count + 1 and body_lines[-1] == "":
        body_lines = body_lines[:-1]
    if len(body_lines) != schema.point_count:
        raise TSLNDecodeError(
            f"Expected {schema.point_count} rows, found {len(body_lines)}"
        )
    return body_lines


def _row_timestamp(schema: Schema, index: int, tokens: list[str], state: RowState) -> int:
    base_ms = to_epoch_ms(schema.base_timestamp)
    if schema.timestamp_mode is TimestampMode.REGULAR:
        return base_ms + index * (schema.interval_ms or 0)

    token = tokens.pop(0)
    try:
        offset = int(token)
    except ValueError:
        raise TSLNDecodeError(f"Invalid timestamp offset: {token!r}", index) from None
    previous = base_ms if state.previous_ms is None else state.previous_ms
    state.previous_ms = previous + offset
    return state.previous_ms


def decode(document) -> list[DataPoint]:
    """Decode TSLN text (or an EncodedDocument) back to data points.

    Raises:
        TSLNDecodeError: on any structural violation (bad header, strategy not
            enabled by the flags, wrong row count or arity, unparseable token).
    """
    text = document.text if isinstance(document, EncodedDocument) else document
    if not isinstance(text, str):
        raise TypeError(f"Expected str or EncodedDocument, got {type(text).__name__}")

    lines = text.split("\n")
    schema = parse_header(lines[:HEADER_LINES])
    rows = _split_rows(schema, lines[HEADER_LINES:])

    arity = len(schema.fields)
    if schema.timestamp_mode is TimestampMode.OFFSET:
        arity += 1

    state = RowState(schema.field_names)
    points = []
    for index, line in enumerate(rows):
        if arity == 0:
            if line:
                raise TSLNDecodeError("Expected an empty row", index)
            tokens = []
        else:
            try:
                tokens = split_escaped(line)
            except ValueError as exc:
                raise TSLNDecodeError(str(exc), index) from None
            if len(tokens) != arity:
                raise TSLNDecodeError(f"Expected {arity} tokens, found {len(tokens)}", index)

        ms = _row_timestamp(schema, index, tokens, state)
        values = {
            descriptor.name: decode_value(token, descriptor, state, index)
            for descriptor, token in zip(schema.fields, tokens)
        }
        points.append(DataPoint(from_epoch_ms(ms), values))
    return points
