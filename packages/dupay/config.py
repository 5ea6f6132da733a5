"""Runtime configuration for the ``dupay`` command line.

The matching core takes its tolerances as explicit arguments and has no
defaults. This module resolves them for the CLI, in order of precedence:

1. explicit values (command-line flags);
2. environment variables, typically loaded from ``.env`` by the CLI:
   ``DUPAY_MAX_TIME_DIFF``, ``DUPAY_MAX_AMOUNT_DIFF``,
   ``DUPAY_EXTRACT_WORKERS``;
3. built-in defaults (``1m``, ``1.0``, ``4`` workers).

Durations use the compact ``1h2m3s`` notation (units ``h``, ``m``, ``s``,
``ms``; fractional values allowed, e.g. ``1.5m``).
"""

from __future__ import annotations

import os
import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from .models import MatchTolerance

DEFAULT_MAX_TIME_DIFF = "1m"
DEFAULT_MAX_AMOUNT_DIFF = "1.0"
DEFAULT_EXTRACT_WORKERS = 4
MAX_EXTRACT_WORKERS = 32
# Both supported banks report in KGS; the amount tolerance is shown in it.
AMOUNT_TOLERANCE_CURRENCY = "KGS"

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_UNITS: dict[str, timedelta] = {
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
    "s": timedelta(seconds=1),
    "ms": timedelta(milliseconds=1),
}


def parse_duration(text: str) -> timedelta:
    """Parse ``"90s"``, ``"1m"``, ``"1m30s"``, ``"250ms"`` into a ``timedelta``.

    A bare ``"0"`` is accepted as zero. Raises ``ValueError`` for anything
    else that is not a sequence of number+unit parts.
    """

    s = text.strip()
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError("duration is empty")

    total = timedelta(0)
    pos = 0
    for m in _DURATION_PART_RE.finditer(s):
        if m.start() != pos:
            break
        try:
            total += float(m.group(1)) * _UNITS[m.group(2)]
        except OverflowError as exc:
            raise ValueError(f"duration {text!r} is too large") from exc
        pos = m.end()
    if pos != len(s):
        raise ValueError(f"invalid duration {text!r}; use forms like 30s, 1m, 1m30s, 1h")
    return total


def parse_amount_tolerance(text: str) -> Decimal:
    """Parse a decimal amount tolerance such as ``"1.0"`` or ``"0,5"``."""

    try:
        return Decimal(text.strip().replace(",", "."))
    except InvalidOperation as exc:
        raise ValueError(f"invalid amount {text!r}; expected a decimal number") from exc


def resolve_tolerance(time: str | None = None, amount: str | None = None) -> MatchTolerance:
    """Build a validated :class:`MatchTolerance` from flags, env, and defaults.

    Raises ``ValueError`` (including pydantic's ``ValidationError``) when a
    value cannot be parsed or is negative.
    """

    time_text = time or os.getenv("DUPAY_MAX_TIME_DIFF") or DEFAULT_MAX_TIME_DIFF
    amount_text = amount or os.getenv("DUPAY_MAX_AMOUNT_DIFF") or DEFAULT_MAX_AMOUNT_DIFF
    return MatchTolerance(
        max_time_diff=parse_duration(time_text),
        max_amount_diff=parse_amount_tolerance(amount_text),
    )


def resolve_max_workers(value: int | None = None) -> int:
    """Resolve the text extraction worker count, clamped to ``[1, 32]``.

    An unparsable ``DUPAY_EXTRACT_WORKERS`` falls back to the default.
    """

    if value is None:
        env_val = os.getenv("DUPAY_EXTRACT_WORKERS")
        try:
            value = int(env_val) if env_val else DEFAULT_EXTRACT_WORKERS
        except ValueError:
            value = DEFAULT_EXTRACT_WORKERS
    return max(1, min(value, MAX_EXTRACT_WORKERS))


__all__ = [
    "DEFAULT_MAX_TIME_DIFF",
    "DEFAULT_MAX_AMOUNT_DIFF",
    "DEFAULT_EXTRACT_WORKERS",
    "AMOUNT_TOLERANCE_CURRENCY",
    "parse_duration",
    "parse_amount_tolerance",
    "resolve_tolerance",
    "resolve_max_workers",
]
