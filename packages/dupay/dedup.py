"""Same-source deduplication pre-pass.

Statement exports from one bank that cover overlapping periods repeat the same
entries verbatim. Those repeats are collapsed here, before cross-source
matching, using an exact key: ``(source, minute, amount rounded to cents)``.
No tolerance is applied.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, localcontext

from .models import Transaction

_CENTS = Decimal("0.01")

DedupKey = tuple[str, datetime, Decimal]


def _to_cents(amount: Decimal) -> Decimal:
    # quantize needs enough precision for every integer digit plus the cents.
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, amount.adjusted() + 3)
        return amount.quantize(_CENTS, rounding=ROUND_HALF_UP)


def dedup_key(tx: Transaction) -> DedupKey:
    return (
        tx.source,
        tx.date_time.replace(second=0, microsecond=0),
        _to_cents(tx.amount),
    )


def deduplicate_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return a new list keeping only the first occurrence of each key.

    Survivors keep their original relative order. Running the pre-pass on its
    own output returns an equal list.
    """

    seen: set[DedupKey] = set()
    result: list[Transaction] = []
    for tx in transactions:
        key = dedup_key(tx)
        if key in seen:
            continue
        seen.add(key)
        result.append(tx)
    return result


__all__ = ["dedup_key", "deduplicate_transactions"]
