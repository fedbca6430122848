"""Schema header: the self-describing block in front of the body rows.

Layout (one line each):
    #TSLN/1
    #ts regular base=2025-12-27T10:00:00.000Z step=1000 n=500
    #flags diff=1 repeat=1
    #fields symbol:str:repeat|price:num:diff|volume:num:raw
    ---

Irregular timestamps use ``#ts offset base=... n=...``. Undefined values
(no base for an empty dataset, no step below two points) are written ``~``.
Field names escape ``\\``, ``|``, ``:`` and line breaks.
"""

from ..config import FORMAT_VERSION
from ..errors import TSLNDecodeError
from ..model import (
    EncodingStrategy,
    FieldDescriptor,
    FieldType,
    Schema,
    TimestampMode,
    format_instant,
    parse_instant,
)
from .literals import NULL_TOKEN, escape_text, split_escaped, unescape_text

MAGIC = "#TSLN/"
BODY_SEPARATOR = "---"
HEADER_LINES = 5

_TYPES = {t.value: t for t in FieldType}
_STRATEGIES = {s.value: s for s in EncodingStrategy}


def write_header(schema: Schema) -> str:
    """Render the header block for ``schema``."""
    base = NULL_TOKEN if schema.base_timestamp is None else format_instant(schema.base_timestamp)
    ts_parts = ["#ts", schema.timestamp_mode.value, f"base={base}"]
    if schema.timestamp_mode is TimestampMode.REGULAR:
        step = NULL_TOKEN if schema.interval_ms is None else str(schema.interval_ms)
        ts_parts.append(f"step={step}")
    ts_parts.append(f"n={schema.point_count}")

    flags = (
        f"#flags diff={int(schema.enable_differential)} "
        f"repeat={int(schema.enable_repeat_markers)}"
    )

    descriptors = "|".join(
        f"{escape_text(f.name, extra=':')}:{f.type.value}:{f.strategy.value}"
        for f in schema.fields
    )
    fields_line = f"#fields {descriptors}" if schema.fields else "#fields"

    return "\n".join([
        f"{MAGIC}{schema.version}",
        " ".join(ts_parts),
        flags,
        fields_line,
        BODY_SEPARATOR,
    ])


def _parse_int(text: str, what: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise TSLNDecodeError(f"Invalid {what}: {text!r}") from None


def _parse_key_values(parts: list[str], line_name: str) -> dict[str, str]:
    values = {}
    for part in parts:
        key, sep, value = part.partition("=")
        if not sep or not key:
            raise TSLNDecodeError(f"Malformed {line_name} entry: {part!r}")
        values[key] = value
    return values


def _parse_version(line: str) -> int:
    if not line.startswith(MAGIC):
        raise TSLNDecodeError("Not a TSLN document (missing #TSLN/ header)")
    version = _parse_int(line[len(MAGIC):], "format version")
    if version != FORMAT_VERSION:
        raise TSLNDecodeError(f"Unsupported TSLN version: {version}")
    return version


def _parse_timestamps(line: str):
    parts = line.split(" ")
    if parts[0] != "#ts" or len(parts) < 2:
        raise TSLNDecodeError(f"Malformed timestamp line: {line!r}")
    try:
        mode = TimestampMode(parts[1])
    except ValueError:
        raise TSLNDecodeError(f"Unknown timestamp mode: {parts[1]!r}") from None

    values = _parse_key_values(parts[2:], "timestamp")
    for key in ("base", "n"):
        if key not in values:
            raise TSLNDecodeError(f"Timestamp line is missing {key!r}")

    count = _parse_int(values["n"], "point count")
    if count < 0:
        raise TSLNDecodeError(f"Invalid point count: {count}")

    base = None
    if values["base"] != NULL_TOKEN:
        try:
            base = parse_instant(values["base"])
        except ValueError:
            raise TSLNDecodeError(f"Invalid base timestamp: {values['base']!r}") from None
    if count > 0 and base is None:
        raise TSLNDecodeError("Base timestamp is required for a non-empty document")

    interval = None
    if mode is TimestampMode.REGULAR:
        step = values.get("step", NULL_TOKEN)
        if step != NULL_TOKEN:
            interval = _parse_int(step, "interval")
        if count > 1 and interval is None:
            raise TSLNDecodeError("Regular timestamps need a step for more than one point")

    return mode, base, interval, count


def _parse_flags(line: str) -> tuple[bool, bool]:
    parts = line.split(" ")
    if parts[0] != "#flags":
        raise TSLNDecodeError(f"Malformed flags line: {line!r}")
    values = _parse_key_values(parts[1:], "flags")
    flags = []
    for key in ("diff", "repeat"):
        if values.get(key) not in ("0", "1"):
            raise TSLNDecodeError(f"Flag {key!r} must be 0 or 1")
        flags.append(values[key] == "1")
    return flags[0], flags[1]


def _parse_fields(line: str, enable_differential: bool, enable_repeat: bool) -> tuple:
    if line == "#fields":
        return ()
    if not line.startswith("#fields "):
        raise TSLNDecodeError(f"Malformed fields line: {line!r}")

    try:
        entries = split_escaped(line[len("#fields "):], "|")
    except ValueError as exc:
        raise TSLNDecodeError(str(exc)) from None

    descriptors = []
    seen = set()
    for entry in entries:
        parts = split_escaped(entry, ":")
        if len(parts) != 3:
            raise TSLNDecodeError(f"Malformed field descriptor: {entry!r}")
        name = unescape_text(parts[0])
        if name in seen:
            raise TSLNDecodeError("Duplicate field", field=name)
        seen.add(name)

        field_type = _TYPES.get(parts[1])
        if field_type is None:
            raise TSLNDecodeError(f"Unknown field type {parts[1]!r}", field=name)
        strategy = _STRATEGIES.get(parts[2])
        if strategy is None:
            raise TSLNDecodeError(f"Unknown strategy {parts[2]!r}", field=name)

        if strategy is EncodingStrategy.DIFFERENTIAL:
            if not enable_differential:
                raise TSLNDecodeError("Differential strategy used but diff=0", field=name)
            if field_type is not FieldType.NUMERIC:
                raise TSLNDecodeError("Differential strategy requires a numeric field", field=name)
        if strategy is EncodingStrategy.REPEAT and not enable_repeat:
            raise TSLNDecodeError("Repeat strategy used but repeat=0", field=name)

        descriptors.append(FieldDescriptor(name, field_type, strategy))
    return tuple(descriptors)


def parse_header(lines: list[str]) -> Schema:
    """Parse the first HEADER_LINES lines of a document into a Schema."""
    if not lines:
        raise TSLNDecodeError("Empty document")
    version = _parse_version(lines[0])
    if len(lines) < HEADER_LINES:
        raise TSLNDecodeError("Truncated header")
    mode, base, interval, count = _parse_timestamps(lines[1])
    enable_differential, enable_repeat = _parse_flags(lines[2])
    fields = _parse_fields(lines[3], enable_differential, enable_repeat)
    if lines[4] != BODY_SEPARATOR:
        raise TSLNDecodeError(f"Expected {BODY_SEPARATOR!r} after the header")

    return Schema(
        version=version,
        timestamp_mode=mode,
        base_timestamp=base,
        interval_ms=interval,
        point_count=count,
        fields=fields,
        enable_differential=enable_differential,
        enable_repeat_markers=enable_repeat,
    )
