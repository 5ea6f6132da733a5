"""Parser for Mbank statement exports.

Layout
------
Each transaction starts on a line prefixed with ``DD.MM.YYYY HH:MM``. The rest
of that line is the beginning of the memo; the memo may wrap onto following
lines, and the signed amount closes the record at the very end, written with
space-grouped thousands and a decimal comma::

    24.12.2025 12:02 Оплата в магазине - 1 018,00
    24.12.2025 14:30 Перевод на карту
    4169 **** 1234 - 5 000,00

An unsigned credit amount directly after a memo that ends in digits cannot be
told apart from those digits; the leftmost number that runs to the end of the
record wins. Amounts are always in KGS. Lines that carry no transaction data (headers,
column titles, footers) are recognised by the literal lists below, which match
the statement templates seen so far and are expected to grow.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum, auto

from ...logging_setup import get_logger
from ...models import Transaction
from .base import StatementParser, collapse_whitespace, split_lines

_logger = get_logger("dupay.ingest.parsers.mbank")

CURRENCY = "KGS"

_DATETIME_RE = re.compile(r"^(\d{2}\.\d{2}\.\d{4})\s+(\d{2}:\d{2})")
# "- 1 018,00", "-1018,00", "1 018,00" at the end of the joined record text.
_AMOUNT_RE = re.compile(r"(-?\s*[0-9\s]+,\d{2})$")

# Header/footer boilerplate, matched by prefix.
BOILERPLATE_PREFIXES: tuple[str, ...] = (
    "Выписка по счету",
    "За период",
    "Дата формирования",
    "Клиент",
    "Баланс",
    "Всего списаний",
    "Всего пополнений",
    "Для проверки",
    "Данная информация",
    "С0082",
    "Телефон",
    "Факс",
    "E-mail",
    "www.",
)
# Column titles, matched as whole lines.
BOILERPLATE_LINES: frozenset[str] = frozenset(
    {
        "Дата операции",
        "Описание операции",
        "Сумма операции",
    }
)
BOILERPLATE_FRAGMENTS: tuple[str, ...] = ("KGS KGS",)
# Footer lines that terminate a wrapped memo.
FOOTER_PREFIXES: tuple[str, ...] = (
    "Всего",
    "Для проверки",
    "Данная информация",
)


def parse_amount(raw: str) -> Decimal:
    """Parse an Mbank amount such as ``"- 1 018,00"`` into a ``Decimal``.

    Every whitespace character (including non-breaking variants) is removed,
    which also turns ``"- "`` into a bare minus, and the decimal comma becomes
    a period. Raises ``ValueError`` for tokens that are not numbers.
    """

    s = "".join(raw.split()).replace(",", ".")
    try:
        return Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount: {raw!r}") from exc


def is_boilerplate(line: str) -> bool:
    return (
        line in BOILERPLATE_LINES
        or line.startswith(BOILERPLATE_PREFIXES)
        or any(fragment in line for fragment in BOILERPLATE_FRAGMENTS)
    )


class _State(Enum):
    AWAITING_RECORD = auto()
    COLLECTING_CONTINUATION = auto()


class MbankParser(StatementParser):
    bank_name = "Mbank"
    markers = ("mbank.kg", "Mbank", "МБАНК")

    def parse(self, text: str) -> list[Transaction]:
        return list(self._scan(split_lines(text)))

    def _scan(self, lines: list[str]) -> Iterator[Transaction]:
        state = _State.AWAITING_RECORD
        date_str = time_str = ""
        parts: list[str] = []
        raw: list[str] = []

        i = 0
        while i < len(lines):
            line = lines[i]

            if state is _State.AWAITING_RECORD:
                i += 1
                if not line or is_boilerplate(line):
                    continue
                m = _DATETIME_RE.match(line)
                if m is None:
                    continue
                date_str, time_str = m.group(1), m.group(2)
                parts = [line[m.end() :].strip()]
                raw = [line]
                state = _State.COLLECTING_CONTINUATION
                continue

            # COLLECTING_CONTINUATION: the cursor stays on a line that ends the
            # record so that it is examined again as a potential record start.
            if _DATETIME_RE.match(line) or line.startswith(FOOTER_PREFIXES):
                tx = self._build(date_str, time_str, parts, raw)
                if tx is not None:
                    yield tx
                state = _State.AWAITING_RECORD
                continue
            if line and not is_boilerplate(line):
                parts.append(line)
                raw.append(line)
            i += 1

        if state is _State.COLLECTING_CONTINUATION:
            tx = self._build(date_str, time_str, parts, raw)
            if tx is not None:
                yield tx

    def _build(
        self, date_str: str, time_str: str, parts: list[str], raw: list[str]
    ) -> Transaction | None:
        combined = " ".join(p for p in parts if p)
        m = _AMOUNT_RE.search(combined)
        if m is None:
            _logger.debug("mbank:skip reason=no_amount line=%r", raw[0])
            return None
        try:
            amount = parse_amount(m.group(1))
        except ValueError:
            _logger.debug("mbank:skip reason=bad_amount token=%r", m.group(1))
            return None
        if amount == 0:
            # Balance rows and similar carry a zero amount.
            return None
        try:
            date_time = datetime.strptime(f"{date_str} {time_str}", "%d.%m.%Y %H:%M")
        except ValueError:
            _logger.debug("mbank:skip reason=bad_datetime value=%r", f"{date_str} {time_str}")
            return None

        return Transaction(
            date_time=date_time,
            description=collapse_whitespace([combined[: m.start()]]),
            amount=amount,
            currency=CURRENCY,
            source=self.bank_name,
            raw_text="\n".join(raw),
        )


__all__ = ["MbankParser", "parse_amount", "is_boilerplate", "CURRENCY"]
