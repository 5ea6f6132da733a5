"""Cross-source duplicate payment detection.

Two banks (for example the payer's card bank and the account the card is
linked to) may each record the same outgoing payment. Their records differ
slightly in timestamp and sometimes in amount (fees, rounding), so matching is
tolerance based.

Public surface:
- ``find_duplicates``: compare every unordered pair once and return a
  :class:`~dupay.models.DuplicateMatch` for each pair that satisfies all
  matching rules.
- ``is_candidate_pair``: the source/currency/sign preconditions on their own.

Rules for a pair ``(t1, t2)``:

1. different ``source``;
2. identical ``currency``;
3. both amounts negative (debits only; credit-side reconciliation is a
   different problem);
4. ``abs(t1.date_time - t2.date_time) <= max_time_diff``;
5. ``abs(abs(t1.amount) - abs(t2.amount)) <= max_amount_diff``.

Same-source repeats are not handled here; run
:func:`dupay.dedup.deduplicate_transactions` first.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import timedelta
from decimal import Decimal

from .logging_setup import get_logger
from .models import DuplicateMatch, Transaction

_logger = get_logger("dupay.duplicates")


def is_candidate_pair(t1: Transaction, t2: Transaction) -> bool:
    """Return ``True`` when the pair passes the source, currency and sign rules."""

    if t1.source == t2.source:
        return False
    if t1.currency != t2.currency:
        return False
    return t1.amount < 0 and t2.amount < 0


def find_duplicates(
    transactions: Sequence[Transaction],
    *,
    max_time_diff: timedelta,
    max_amount_diff: Decimal,
) -> list[DuplicateMatch]:
    """Return candidate duplicate pairs across different sources.

    Pairs are enumerated as ``(i, j)`` with ``i < j`` in input order, and each
    match keeps that orientation (``first`` is the earlier item in the input).
    Both tolerance bounds are inclusive. Quadratic in ``len(transactions)``,
    which is fine for statement-sized inputs.
    """

    matches: list[DuplicateMatch] = []
    n = len(transactions)
    for i in range(n):
        t1 = transactions[i]
        for j in range(i + 1, n):
            t2 = transactions[j]
            if not is_candidate_pair(t1, t2):
                continue

            time_diff = abs(t1.date_time - t2.date_time)
            if time_diff > max_time_diff:
                continue

            amount_diff = abs(abs(t1.amount) - abs(t2.amount))
            if amount_diff > max_amount_diff:
                continue

            matches.append(
                DuplicateMatch(
                    first=t1,
                    second=t2,
                    time_diff=time_diff,
                    amount_diff=amount_diff,
                )
            )

    _logger.debug(
        "find_duplicates:done num_transactions=%d num_matches=%d", n, len(matches)
    )
    return matches


__all__ = ["find_duplicates", "is_candidate_pair"]
