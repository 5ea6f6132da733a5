"""Contract shared by the bank statement parsers.

A parser turns the plain text of one statement into :class:`Transaction`
records. Each supported bank gets its own subclass; the registry in
:mod:`dupay.ingest.utils` picks the first parser whose :meth:`detect` matches.
Adding a bank means adding a subclass, never editing an existing one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ...models import Transaction


class StatementParser(ABC):
    """Detect and parse one bank's statement text layout."""

    #: Human-readable bank name, also stored as ``Transaction.source``.
    bank_name: str
    #: Literal substrings that identify the bank in the raw text.
    markers: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.bank_name

    def detect(self, text: str) -> bool:
        """Return ``True`` when ``text`` contains one of :attr:`markers`.

        The test is a plain substring search on the text as given; callers
        must not case-fold or re-encode it first.
        """

        return any(marker in text for marker in self.markers)

    @abstractmethod
    def parse(self, text: str) -> list[Transaction]:
        """Return every transaction that could be fully resolved from ``text``.

        Lines that do not form a complete record are skipped; this method does
        not raise for malformed statement content.
        """

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"{type(self).__name__}()"


def split_lines(text: str) -> list[str]:
    """Split ``text`` on newlines and strip surrounding whitespace per line."""

    return [line.strip() for line in text.split("\n")]


def collapse_whitespace(parts: Iterable[str]) -> str:
    """Join ``parts`` with single spaces and collapse inner whitespace runs."""

    return " ".join(" ".join(parts).split())


__all__ = ["StatementParser", "split_lines", "collapse_whitespace"]
