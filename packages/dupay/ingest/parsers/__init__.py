"""Bank statement parsers, one module per supported bank layout."""

from .base import StatementParser
from .mbank import MbankParser
from .optima import OptimaParser

__all__ = ["StatementParser", "MbankParser", "OptimaParser"]
