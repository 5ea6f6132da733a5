"""Parser for Optima Bank statement exports.

Layout
------
Text extracted from Optima Bank statements puts every table cell on its own
line. A record is a block::

    15.01.2025          <- date, alone on the line
    10:30               <- time, alone on the line
    Payment to          <- one or more memo lines
    merchant
    -1 500.00           <- amount
    KGS                 <- currency code
    0                   <- fee block: "0" / "KGS" / blank lines
    KGS

Card payments made in another currency list the foreign amount first
(``-20.00`` / ``USD``) followed by the KGS equivalent; only the KGS figure is
kept. The scanner below makes these steps explicit as named states so that the
skip-and-retry path for foreign amounts can be followed line by line.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum, auto

from ...logging_setup import get_logger
from ...models import Transaction
from .base import StatementParser, collapse_whitespace, split_lines

_logger = get_logger("dupay.ingest.parsers.optima")

NATIVE_CURRENCY = "KGS"
# ISO 4217 style code on its own line: "KGS", "USD", "GBP".
_CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")

# Unicode spaces that PDF text extraction emits inside numbers.
_SPACE_TRANSLATION = str.maketrans(
    {
        "\u00a0": " ",  # no-break space
        "\u2007": " ",  # figure space
        "\u202f": " ",  # narrow no-break space
    }
)

_DATE_RE = re.compile(r"^(\d{2}\.\d{2}\.\d{4})\s*$")
_TIME_RE = re.compile(r"^(\d{2}:\d{2})$")
# "-1 965.84", "318 273.38", "0"
_AMOUNT_RE = re.compile(r"^(-?[0-9\s]+(?:\.\d+)?)\s*$")
_PAGE_MARKER_RE = re.compile(r"^\d+\s*/\s*\d+$")

# Column titles and the lone fee cell, matched as whole lines.
BOILERPLATE_LINES: frozenset[str] = frozenset(
    {
        "Date",
        "Details",
        "of",
        "operations",
        "Operation",
        "amount",
        "Fee",
        "0",
    }
)
_FEE_LINES: frozenset[str] = frozenset({"0", NATIVE_CURRENCY, ""})


def normalize_spaces(s: str) -> str:
    """Map non-breaking, figure, and narrow no-break spaces to ``" "``.

    Each replaced character maps to exactly one ordinary space.
    """

    return s.translate(_SPACE_TRANSLATION)


def parse_amount(raw: str) -> Decimal:
    """Parse an Optima amount such as ``"-1 965.84"`` into a ``Decimal``.

    Raises ``ValueError`` for tokens that are not numbers.
    """

    s = normalize_spaces(raw).replace(" ", "").strip()
    try:
        return Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {raw!r}") from exc


def is_boilerplate(line: str) -> bool:
    return line in BOILERPLATE_LINES or _PAGE_MARKER_RE.match(line) is not None


class _State(Enum):
    AWAITING_DATE = auto()
    AWAITING_TIME = auto()
    ACCUMULATING_DESCRIPTION = auto()
    AWAITING_NATIVE_AMOUNT = auto()
    SKIPPING_FEE = auto()


@dataclass(slots=True)
class _PendingRecord:
    date: str
    start: int
    time: str = ""
    description: list[str] = field(default_factory=list)


class OptimaParser(StatementParser):
    bank_name = "Optima Bank"
    markers = ("Optima Bank", "OptimaBank", "optimabank.kg", "Оптима Банк")

    def parse(self, text: str) -> list[Transaction]:
        return list(self._scan(split_lines(normalize_spaces(text))))

    def _scan(self, lines: list[str]) -> Iterator[Transaction]:
        # ``pending`` is None exactly in AWAITING_DATE and SKIPPING_FEE.
        state = _State.AWAITING_DATE
        pending: _PendingRecord | None = None

        i = 0
        while i < len(lines):
            line = lines[i]

            if state is _State.SKIPPING_FEE:
                if line in _FEE_LINES:
                    i += 1
                else:
                    state = _State.AWAITING_DATE

            elif pending is None:  # AWAITING_DATE
                if _DATE_RE.match(line):
                    pending = _PendingRecord(date=line, start=i)
                    state = _State.AWAITING_TIME
                i += 1

            elif state is _State.AWAITING_TIME:
                if _TIME_RE.match(line):
                    pending.time = line
                    state = _State.ACCUMULATING_DESCRIPTION
                    i += 1
                else:
                    # Not a record start after all; look at this line again as
                    # a potential date.
                    pending = None
                    state = _State.AWAITING_DATE

            elif state is _State.ACCUMULATING_DESCRIPTION:
                if not line:
                    i += 1
                    continue
                pair = self._amount_pair(lines, i)
                if pair is not None:
                    currency, after = pair
                    if currency == NATIVE_CURRENCY:
                        tx = self._build(pending, line, lines[pending.start : after])
                        if tx is not None:
                            yield tx
                        pending = None
                        state = _State.SKIPPING_FEE
                    else:
                        state = _State.AWAITING_NATIVE_AMOUNT
                    i = after
                    continue
                if not is_boilerplate(line):
                    pending.description.append(line)
                i += 1

            else:  # AWAITING_NATIVE_AMOUNT
                pair = self._amount_pair(lines, i)
                if pair is not None and pair[0] == NATIVE_CURRENCY:
                    after = pair[1]
                    tx = self._build(pending, line, lines[pending.start : after])
                    if tx is not None:
                        yield tx
                    pending = None
                    state = _State.SKIPPING_FEE
                    i = after
                    continue
                i += 1

        if pending is not None and pending.time:
            _logger.debug("optima:skip reason=no_amount date=%s time=%s", pending.date, pending.time)

    @staticmethod
    def _amount_pair(lines: list[str], i: int) -> tuple[str, int] | None:
        """Return ``(currency, next_index)`` when ``lines[i]`` is an amount cell.

        An amount cell is a standalone number whose next non-blank line is a
        three-letter currency code. ``next_index`` points just past that code.
        """

        if not _AMOUNT_RE.match(lines[i]):
            return None
        j = i + 1
        while j < len(lines) and not lines[j]:
            j += 1
        if j >= len(lines):
            return None
        code = lines[j]
        if _CURRENCY_CODE_RE.match(code):
            return code, j + 1
        return None

    def _build(
        self, pending: _PendingRecord, amount_line: str, raw: list[str]
    ) -> Transaction | None:
        try:
            amount = parse_amount(amount_line)
        except ValueError:
            _logger.debug("optima:skip reason=bad_amount token=%r", amount_line)
            return None
        if amount == 0:
            return None
        try:
            date_time = datetime.strptime(f"{pending.date} {pending.time}", "%d.%m.%Y %H:%M")
        except ValueError:
            _logger.debug(
                "optima:skip reason=bad_datetime value=%r", f"{pending.date} {pending.time}"
            )
            return None

        return Transaction(
            date_time=date_time,
            description=collapse_whitespace(pending.description),
            amount=amount,
            currency=NATIVE_CURRENCY,
            source=self.bank_name,
            raw_text="\n".join(raw),
        )


__all__ = [
    "OptimaParser",
    "normalize_spaces",
    "parse_amount",
    "is_boilerplate",
    "NATIVE_CURRENCY",
]
