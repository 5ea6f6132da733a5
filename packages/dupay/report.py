"""Plain-text rendering of duplicate matches for the terminal."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from decimal import Decimal

from .models import DuplicateMatch, Transaction

DESCRIPTION_WIDTH = 80
SEPARATOR = "-" * 60
_DATETIME_FMT = "%d.%m.%Y %H:%M"


def truncate(text: str, max_len: int = DESCRIPTION_WIDTH) -> str:
    """Shorten ``text`` to ``max_len`` characters, ending with ``...`` when cut."""

    if len(text) <= max_len:
        return text
    return text[: max(0, max_len - 3)] + "..."


def format_duration(td: timedelta) -> str:
    """Render a duration compactly: ``0s``, ``45s``, ``1m0s``, ``1h2m3s``.

    Sub-second remainders are shown as fractional seconds (``1.5s``).
    """

    us = abs(td) // timedelta(microseconds=1)
    sign = "-" if td < timedelta(0) else ""
    hours, us = divmod(us, 3_600_000_000)
    minutes, us = divmod(us, 60_000_000)
    seconds = Decimal(us) / Decimal(1_000_000)
    sec_text = f"{seconds.normalize():f}" if us else "0"

    if hours:
        return f"{sign}{hours}h{minutes}m{sec_text}s"
    if minutes:
        return f"{sign}{minutes}m{sec_text}s"
    return f"{sign}{sec_text}s"


def format_amount(amount: Decimal, currency: str) -> str:
    return f"{amount:.2f} {currency}"


def _transaction_block(label: str, tx: Transaction) -> list[str]:
    return [
        f"{label} ({tx.source}):",
        f"  Date/Time: {tx.date_time.strftime(_DATETIME_FMT)}",
        f"  Amount: {format_amount(tx.amount, tx.currency)}",
        f"  Description: {truncate(tx.description)}",
    ]


def duplicate_totals(matches: Sequence[DuplicateMatch]) -> dict[str, Decimal]:
    """Sum the average amount of each match, grouped by currency."""

    totals: dict[str, Decimal] = {}
    for m in matches:
        avg = (m.first.amount + m.second.amount) / 2
        totals[m.first.currency] = totals.get(m.first.currency, Decimal(0)) + avg
    return totals


def render_report(matches: Sequence[DuplicateMatch]) -> str:
    """Return the human-readable report for ``matches``."""

    if not matches:
        return "No potential duplicates found."

    lines: list[str] = [f"Found {len(matches)} potential duplicate(s):", ""]
    for n, m in enumerate(matches, start=1):
        lines.append(f"=== Duplicate #{n} ===")
        lines.append(f"Time difference: {format_duration(m.time_diff)}")
        lines.append(
            f"Amount difference: {format_amount(m.amount_diff, m.first.currency)}"
        )
        lines.append("")
        lines.extend(_transaction_block("Transaction 1", m.first))
        lines.append("")
        lines.extend(_transaction_block("Transaction 2", m.second))
        lines.append(SEPARATOR)

    lines.append("")
    for currency, total in sorted(duplicate_totals(matches).items()):
        lines.append(f"Total potential duplicate amount: {format_amount(total, currency)}")
    return "\n".join(lines)


__all__ = [
    "render_report",
    "format_duration",
    "format_amount",
    "duplicate_totals",
    "truncate",
]
