"""Exceptions raised by the TSLN codec."""

from typing import Optional


class TSLNDecodeError(ValueError):
    """Structural violation found while decoding a TSLN document.

    ``row`` is the zero-based body row index (None for header problems) and
    ``field`` the offending field name, when known.
    """

    def __init__(self, message: str, row: Optional[int] = None, field: Optional[str] = None):
        self.row = row
        self.field = field
        location = []
        if row is not None:
            location.append(f"row {row}")
        if field is not None:
            location.append(f"field {field!r}")
        if location:
            message = f"{', '.join(location)}: {message}"
        super().__init__(message)
