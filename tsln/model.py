"""Core data types for TSLN: data points, value kinds, profiles and schema."""

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

import numpy as np

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ValueKind(Enum):
    """Tag attached to every scalar value."""

    NUMBER = "number"
    TEXT = "text"
    BOOLEAN = "boolean"
    NULL = "null"


class FieldType(Enum):
    """Narrowest common type of a field's non-null observations."""

    NUMERIC = "num"
    STRING = "str"
    BOOLEAN = "bool"
    MIXED = "mixed"


class Trend(Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"
    OSCILLATING = "oscillating"


class EncodingStrategy(Enum):
    RAW = "raw"
    DIFFERENTIAL = "diff"
    REPEAT = "repeat"


class TimestampMode(Enum):
    REGULAR = "regular"
    OFFSET = "offset"


def kind_of(value) -> ValueKind:
    """Classify a scalar. ``bool`` is checked first since it subclasses int."""
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.TEXT
    raise TypeError(f"Unsupported value type: {type(value).__name__}")


def same_value(a, b) -> bool:
    """Strict equality used for repeat detection.

    ``1``, ``1.0`` and ``True`` are all different here, and so are
    ``0.0`` and ``-0.0``.
    """
    if type(a) is not type(b):
        return False
    if isinstance(a, float):
        if math.isnan(a) or math.isnan(b):
            return False
        return a == b and math.copysign(1.0, a) == math.copysign(1.0, b)
    return a == b


def to_epoch_ms(instant: datetime) -> int:
    return (instant - _EPOCH) // timedelta(milliseconds=1)


def from_epoch_ms(ms: int) -> datetime:
    return _EPOCH + timedelta(milliseconds=ms)


def format_instant(instant: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""
    instant = instant.astimezone(timezone.utc)
    # strftime does not zero-pad years below 1000
    return (
        f"{instant.year:04d}-" + instant.strftime("%m-%dT%H:%M:%S.")
        + f"{instant.microsecond // 1000:03d}Z"
    )


def parse_instant(value) -> datetime:
    """Coerce a datetime, ISO string or epoch-milliseconds int to aware UTC."""
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            instant = datetime.fromisoformat(text)
        except ValueError:
            raise ValueError(f"Invalid timestamp: {value!r}") from None
    elif isinstance(value, int) and not isinstance(value, bool):
        return from_epoch_ms(value)
    else:
        raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")

    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    instant = instant.astimezone(timezone.utc)
    # Millisecond resolution
    return instant.replace(microsecond=(instant.microsecond // 1000) * 1000)


@dataclass(frozen=True)
class DataPoint:
    """One timestamped observation: an instant plus a field -> scalar mapping.

    Not hashable, since values is a dict.
    """

    timestamp: datetime
    values: dict = field(default_factory=dict)

    __hash__ = None

    def __post_init__(self):
        object.__setattr__(self, "timestamp", parse_instant(self.timestamp))
        values = {}
        for name, value in self.values.items():
            if not isinstance(name, str):
                raise TypeError(f"Field names must be str, got {type(name).__name__}")
            if isinstance(value, np.generic):
                value = value.item()
            kind_of(value)
            values[name] = value
        object.__setattr__(self, "values", values)

    @property
    def epoch_ms(self) -> int:
        return to_epoch_ms(self.timestamp)

    @classmethod
    def from_dict(cls, record: dict) -> "DataPoint":
        """Build from ``{"timestamp": ..., "data": {...}}``."""
        if "timestamp" not in record:
            raise ValueError("Record is missing 'timestamp'")
        return cls(record["timestamp"], record.get("data") or {})

    def to_dict(self) -> dict:
        return {"timestamp": format_instant(self.timestamp), "data": dict(self.values)}


@dataclass(frozen=True)
class FieldProfile:
    """Per-field statistics over a whole dataset."""

    name: str
    type: FieldType
    total_count: int
    unique_count: int
    repeat_rate: float
    volatility: Optional[float] = None
    trend: Optional[Trend] = None
    has_non_finite: bool = False

    @property
    def is_numeric(self) -> bool:
        return self.type is FieldType.NUMERIC


@dataclass(frozen=True)
class FieldDescriptor:
    name: str
    type: FieldType
    strategy: EncodingStrategy


@dataclass(frozen=True)
class TimestampAnalysis:
    """Result of classifying a timestamp sequence."""

    mode: TimestampMode
    base: Optional[datetime]
    interval_ms: Optional[int]
    offsets_ms: tuple = ()

    @property
    def is_regular(self) -> bool:
        return self.mode is TimestampMode.REGULAR


@dataclass(frozen=True)
class Schema:
    """Self-describing header of an encoded document."""

    version: int
    timestamp_mode: TimestampMode
    base_timestamp: Optional[datetime]
    interval_ms: Optional[int]
    point_count: int
    fields: tuple
    enable_differential: bool = True
    enable_repeat_markers: bool = True

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


@dataclass(frozen=True)
class EncodedDocument:
    """Schema plus encoded body rows."""

    schema: Schema
    header: str
    body: str

    @property
    def text(self) -> str:
        if self.schema.point_count == 0:
            return self.header
        return self.header + "\n" + self.body

    @property
    def size(self) -> int:
        """Size of the text in UTF-8 bytes."""
        return len(self.text.encode("utf-8"))

    def __str__(self) -> str:
        return self.text
