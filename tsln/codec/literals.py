"""Literal value tokens, escaping and exact delta arithmetic.

Body tokens:
    ~           null
    ^           same value as the previous row (repeat strategy only)
    T / F       booleans
    42, -7      integers
    0.1, 1e+16  floats (shortest round-trip repr; inf, -inf, nan)
    +3, -0.25   signed deltas (differential strategy only)
    =12.5       literal inside a differential column (delta not exact)
    "text       string inside a mixed-type column

Strings escape backslash, the ``|`` delimiter, CR and LF with a backslash.
A string that would read as ``~`` or ``^`` gets a leading backslash.
"""

import re
from decimal import Context, Decimal, InvalidOperation

from ..model import FieldType, ValueKind, kind_of, same_value

FIELD_SEP = "|"
ESCAPE = "\\"
NULL_TOKEN = "~"
REPEAT_TOKEN = "^"
LITERAL_TAG = "="
STRING_TAG = '"'
TRUE_TOKEN = "T"
FALSE_TOKEN = "F"

_RESERVED = (NULL_TOKEN, REPEAT_TOKEN)
_ESCAPES = {"\\": "\\\\", "|": "\\|", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"n": "\n", "r": "\r"}

_INT_RE = re.compile(r"^-?\d+$")
_FLOAT_RE = re.compile(r"^-?(\d+\.\d*|\.\d+|\d+)([eE][+-]?\d+)?$")
_NON_FINITE = ("inf", "-inf", "nan")
_INT_DELTA_RE = re.compile(r"^[+-]\d+$")
_DECIMAL_DELTA_RE = re.compile(r"^[+-](\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")

# Wide enough for an exact sum/difference of any two float64 reprs
_DELTA_CONTEXT = Context(prec=800)


def escape_text(text: str, extra: str = "") -> str:
    """Backslash-escape delimiters (plus any chars in ``extra``)."""
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ch in extra:
            out.append(ESCAPE + ch)
        else:
            out.append(ch)
    return "".join(out)


def unescape_text(token: str) -> str:
    if ESCAPE not in token:
        return token
    out = []
    chars = iter(token)
    for ch in chars:
        if ch == ESCAPE:
            nxt = next(chars, None)
            if nxt is None:
                raise ValueError("Dangling escape character")
            out.append(_UNESCAPES.get(nxt, nxt))
        else:
            out.append(ch)
    return "".join(out)


def split_escaped(line: str, sep: str = FIELD_SEP) -> list[str]:
    """Split on unescaped ``sep``, keeping escapes in the returned tokens."""
    if ESCAPE not in line:
        return line.split(sep)
    tokens = []
    current = []
    chars = iter(line)
    for ch in chars:
        if ch == ESCAPE:
            nxt = next(chars, None)
            if nxt is None:
                raise ValueError("Dangling escape character at end of line")
            current.append(ch)
            current.append(nxt)
        elif ch == sep:
            tokens.append("".join(current))
            current = []
        else:
            current.append(ch)
    tokens.append("".join(current))
    return tokens


# ---- Numbers ----

def format_number(value) -> str:
    if isinstance(value, int):
        return str(value)
    return repr(float(value))


def parse_number(token: str):
    if _INT_RE.match(token):
        return int(token)
    if _FLOAT_RE.match(token) or token in _NON_FINITE:
        return float(token)
    raise ValueError(f"Invalid number literal: {token!r}")


# ---- Literals ----

def format_literal(value, field_type: FieldType) -> str:
    """Render one value as a body token for a field of ``field_type``."""
    kind = kind_of(value)
    if kind is ValueKind.NULL:
        return NULL_TOKEN
    if kind is ValueKind.BOOLEAN:
        return TRUE_TOKEN if value else FALSE_TOKEN
    if kind is ValueKind.NUMBER:
        return format_number(value)

    text = escape_text(value)
    if field_type is FieldType.MIXED:
        return STRING_TAG + text
    if text in _RESERVED:
        return ESCAPE + text
    return text


def parse_literal(token: str, field_type: FieldType):
    """Inverse of format_literal. Raises ValueError on unparseable tokens."""
    if token == NULL_TOKEN:
        return None
    if field_type is FieldType.STRING:
        return unescape_text(token)
    if field_type is FieldType.NUMERIC:
        return parse_number(token)
    if field_type is FieldType.BOOLEAN:
        return _parse_bool(token)

    # Mixed: strings are tagged, everything else is self-describing
    if token.startswith(STRING_TAG):
        return unescape_text(token[1:])
    if token in (TRUE_TOKEN, FALSE_TOKEN):
        return token == TRUE_TOKEN
    return parse_number(token)


def _parse_bool(token: str) -> bool:
    if token == TRUE_TOKEN:
        return True
    if token == FALSE_TOKEN:
        return False
    raise ValueError(f"Invalid boolean literal: {token!r}")


# ---- Deltas ----

def _to_decimal(value) -> Decimal:
    if isinstance(value, int):
        return Decimal(value)
    return Decimal(repr(value))


def apply_delta(previous, token: str):
    """Add a signed delta token to the previous value.

    The result is an int only when both the previous value and the delta
    are integers; otherwise it is the float nearest to the exact sum.
    """
    if _INT_DELTA_RE.match(token):
        if isinstance(previous, int):
            return previous + int(token)
    elif not _DECIMAL_DELTA_RE.match(token):
        raise ValueError(f"Invalid delta: {token!r}")
    try:
        total = _DELTA_CONTEXT.add(_to_decimal(previous), Decimal(token))
    except InvalidOperation:
        raise ValueError(f"Invalid delta: {token!r}") from None
    return float(total)


def format_delta(previous, current):
    """Signed delta token that reproduces ``current`` exactly, or None."""
    if isinstance(previous, int) and isinstance(current, int):
        token = f"{current - previous:+d}"
    else:
        diff = _DELTA_CONTEXT.subtract(_to_decimal(current), _to_decimal(previous))
        token = str(diff)
        if "." not in token and "E" not in token:
            token += ".0"
        if not token.startswith("-"):
            token = "+" + token

    try:
        decoded = apply_delta(previous, token)
    except ValueError:
        return None
    return token if same_value(decoded, current) else None
