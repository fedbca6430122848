"""TSLN codec subpackage: literals, header, encoder and decoder."""

from .decoder import decode
from .encoder import encode, coerce_dataset
from .header import parse_header, write_header

__all__ = [
    "encode",
    "decode",
    "coerce_dataset",
    "parse_header",
    "write_header",
]
