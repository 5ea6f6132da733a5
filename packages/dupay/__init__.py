"""Public interface for the ``dupay`` package.

Re-exports the parsing, deduplication and matching API together with the
models, so callers can ``from dupay import ...`` without knowing the module
layout.
"""

__version__ = "0.1.0"

from .api import (  # noqa: E402
    StatementResult,
    collect_transactions,
    find_duplicate_payments,
    parse_statements,
    scan_documents,
)
from .dedup import deduplicate_transactions  # noqa: E402
from .duplicates import find_duplicates  # noqa: E402
from .ingest.parsers import MbankParser, OptimaParser, StatementParser  # noqa: E402
from .ingest.text import DocumentReadError, document_to_text  # noqa: E402
from .ingest.utils import DEFAULT_PARSERS, parse_statement_text, select_parser  # noqa: E402
from .models import DuplicateMatch, MatchTolerance, Transaction  # noqa: E402

__all__ = [
    "__version__",
    # API
    "find_duplicate_payments",
    "find_duplicates",
    "deduplicate_transactions",
    "parse_statements",
    "parse_statement_text",
    "select_parser",
    "scan_documents",
    "collect_transactions",
    "document_to_text",
    # Parsers
    "DEFAULT_PARSERS",
    "StatementParser",
    "MbankParser",
    "OptimaParser",
    # Models / types
    "Transaction",
    "DuplicateMatch",
    "MatchTolerance",
    "StatementResult",
    "DocumentReadError",
]
