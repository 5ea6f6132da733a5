"""Public API and orchestration for ``dupay``.

Pipeline::

    document_to_text -> select parser -> parse -> concatenate (input order)
        -> deduplicate_transactions -> find_duplicates

The parsing and matching stages are pure functions over immutable values.
Only :func:`scan_documents` performs I/O; it extracts document text on a small
thread pool and always hands results back in input order, because the
pre-pass keeps the first occurrence of a repeated entry.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from .dedup import deduplicate_transactions
from .duplicates import find_duplicates
from .ingest.parsers import StatementParser
from .ingest.text import DocumentReadError, document_to_text
from .ingest.utils import DEFAULT_PARSERS, parse_statement_text
from .logging_setup import get_logger
from .models import DuplicateMatch, MatchTolerance, Transaction

_logger = get_logger("dupay.api")


@dataclass(frozen=True, slots=True)
class StatementResult:
    """Outcome of reading and parsing one input document.

    ``parser_name`` is ``None`` when no parser recognized the text or when the
    document could not be read (``error`` is set in that case).
    """

    path: Path
    parser_name: str | None
    transactions: tuple[Transaction, ...] = ()
    error: str | None = None

    @property
    def recognized(self) -> bool:
        return self.parser_name is not None


def parse_statements(
    texts: Iterable[str], parsers: Sequence[StatementParser] = DEFAULT_PARSERS
) -> list[Transaction]:
    """Parse each statement text and concatenate the results in input order.

    Texts that no parser recognizes contribute nothing.
    """

    out: list[Transaction] = []
    for text in texts:
        _name, transactions = parse_statement_text(text, parsers)
        out.extend(transactions)
    return out


def find_duplicate_payments(
    transactions: Sequence[Transaction], tolerance: MatchTolerance
) -> list[DuplicateMatch]:
    """Collapse same-source repeats, then match across sources."""

    unique = deduplicate_transactions(transactions)
    if len(unique) != len(transactions):
        _logger.info(
            "find_duplicate_payments:dedup removed=%d kept=%d",
            len(transactions) - len(unique),
            len(unique),
        )
    return find_duplicates(
        unique,
        max_time_diff=tolerance.max_time_diff,
        max_amount_diff=tolerance.max_amount_diff,
    )


def _read_one(path: Path, parsers: Sequence[StatementParser]) -> StatementResult:
    try:
        text = document_to_text(path)
    except DocumentReadError as e:
        _logger.warning("scan_documents:read_failed path=%s error=%s", path.name, e)
        return StatementResult(path=path, parser_name=None, error=str(e))
    name, transactions = parse_statement_text(text, parsers)
    return StatementResult(path=path, parser_name=name, transactions=tuple(transactions))


def scan_documents(
    paths: Iterable[str | PathLike[str]],
    *,
    max_workers: int,
    parsers: Sequence[StatementParser] = DEFAULT_PARSERS,
) -> list[StatementResult]:
    """Read and parse every document, returning one result per path in order.

    Read failures are captured on the result rather than raised, so one bad
    file does not abort the run.
    """

    if not isinstance(max_workers, int) or max_workers < 1:
        raise ValueError("max_workers must be a positive integer")

    items = [Path(p) for p in paths]
    if not items:
        return []
    # ``Executor.map`` yields in submission order regardless of completion order.
    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as pool:
        return list(pool.map(lambda p: _read_one(p, parsers), items))


def collect_transactions(results: Iterable[StatementResult]) -> list[Transaction]:
    """Concatenate the transactions of ``results`` in input order."""

    out: list[Transaction] = []
    for result in results:
        out.extend(result.transactions)
    return out


__all__ = [
    "StatementResult",
    "parse_statements",
    "find_duplicate_payments",
    "scan_documents",
    "collect_transactions",
]
