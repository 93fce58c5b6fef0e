"""Parser for PILER-CR CRISPR array reports."""

__version__ = "0.1.0"

from pilercr.builder import parse
from pilercr.errors import (
    ParseError,
    MalformedLine,
    UnterminatedArray,
    InvalidSequenceSymbol,
    EmptyArray,
)
