"""Timestamp analyzer: regular-interval vs irregular sequences."""

from ..model import TimestampAnalysis, TimestampMode, from_epoch_ms, to_epoch_ms


def analyze_timestamps(instants) -> TimestampAnalysis:
    """Classify an ordered sequence of instants.

    Timestamps are whole milliseconds, so gaps are compared exactly.
    Sequences of 0 or 1 instants are regular with no interval.

    Args:
        instants: Ordered datetimes (or epoch-millisecond ints).

    Returns:
        TimestampAnalysis with mode, base instant, interval and per-point
        offsets from the previous instant (first offset is 0).
    """
    ms = [i if isinstance(i, int) else to_epoch_ms(i) for i in instants]
    if not ms:
        return TimestampAnalysis(TimestampMode.REGULAR, None, None, ())

    base = from_epoch_ms(ms[0])
    offsets = (0,) + tuple(b - a for a, b in zip(ms, ms[1:]))
    if len(ms) == 1:
        return TimestampAnalysis(TimestampMode.REGULAR, base, None, offsets)

    gaps = set(offsets[1:])
    if len(gaps) == 1:
        return TimestampAnalysis(TimestampMode.REGULAR, base, offsets[1], offsets)
    return TimestampAnalysis(TimestampMode.OFFSET, base, None, offsets)
