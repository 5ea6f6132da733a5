"""Parser selection by content sniffing.

The registry is an ordered tuple of parser instances. The first parser whose
``detect`` accepts the raw text is used; when none does, the source contributes
no transactions and the caller decides whether to warn about it.
"""

from __future__ import annotations

from collections.abc import Sequence

from ..logging_setup import get_logger
from ..models import Transaction
from .parsers import MbankParser, OptimaParser, StatementParser

_logger = get_logger("dupay.ingest")

DEFAULT_PARSERS: tuple[StatementParser, ...] = (
    OptimaParser(),
    MbankParser(),
)


def select_parser(
    text: str, parsers: Sequence[StatementParser] = DEFAULT_PARSERS
) -> StatementParser | None:
    """Return the first parser in ``parsers`` that recognizes ``text``."""

    for parser in parsers:
        if parser.detect(text):
            return parser
    return None


def parse_statement_text(
    text: str, parsers: Sequence[StatementParser] = DEFAULT_PARSERS
) -> tuple[str | None, list[Transaction]]:
    """Detect the bank format of ``text`` and parse it.

    Returns ``(parser_name, transactions)``; ``(None, [])`` when no parser
    recognizes the text.
    """

    parser = select_parser(text, parsers)
    if parser is None:
        _logger.info("parse_statement:unrecognized chars=%d", len(text))
        return None, []
    transactions = parser.parse(text)
    _logger.info(
        "parse_statement:parsed parser=%s num_transactions=%d", parser.name, len(transactions)
    )
    return parser.name, transactions


__all__ = ["DEFAULT_PARSERS", "select_parser", "parse_statement_text"]
