"""Plain-text acquisition for statement documents.

``document_to_text`` is the only place that touches the input files. PDFs are
read with ``pdfplumber`` page by page; ``.txt`` files (text already extracted
elsewhere, or hand-written fixtures) are returned as-is.
"""

from __future__ import annotations

from os import PathLike
from pathlib import Path

from ..logging_setup import get_logger

_logger = get_logger("dupay.ingest.text")

SUPPORTED_SUFFIXES: frozenset[str] = frozenset({".pdf", ".txt"})


class DocumentReadError(RuntimeError):
    """Raised when a statement document cannot be turned into text."""


def _pdf_to_text(path: Path) -> str:
    import pdfplumber

    chunks: list[str] = []
    with pdfplumber.open(path) as pdf:
        for page_no, page in enumerate(pdf.pages, start=1):
            page_text = page.extract_text()
            if not page_text:
                _logger.debug("document_to_text:empty_page path=%s page=%d", path.name, page_no)
                continue
            chunks.append(page_text)
            chunks.append("\n")
    return "".join(chunks)


def document_to_text(path: str | PathLike[str]) -> str:
    """Return the plain text of the statement at ``path``.

    Raises
    ------
    DocumentReadError
        When the file is missing or unreadable, the suffix is not supported,
        or PDF text extraction fails. The original exception is chained.
    """

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DocumentReadError(
            f"unsupported document type {p.suffix or '(none)'!r} for {p.name}; "
            f"expected one of: {', '.join(sorted(SUPPORTED_SUFFIXES))}"
        )

    try:
        if suffix == ".txt":
            return p.read_text(encoding="utf-8")
        return _pdf_to_text(p)
    except FileNotFoundError as exc:
        raise DocumentReadError(f"file not found: {p}") from exc
    except PermissionError as exc:
        raise DocumentReadError(f"permission denied: {p}") from exc
    except UnicodeDecodeError as exc:
        raise DocumentReadError(f"not valid UTF-8 text: {p}") from exc
    except Exception as exc:  # pdfplumber/pdfminer raise a variety of types
        raise DocumentReadError(f"failed to read {p.name}: {exc}") from exc


__all__ = ["DocumentReadError", "document_to_text", "SUPPORTED_SUFFIXES"]
