"""Data models for ``dupay``.

- :class:`Transaction`: one normalized statement entry emitted by a parser.
- :class:`DuplicateMatch`: a candidate pair of transactions from two sources
  that likely denote the same payment, with the measured deltas.
- :class:`MatchTolerance`: caller-supplied tolerance configuration for the
  duplicate finder. It carries no defaults; those belong to the CLI layer.

Amounts are :class:`~decimal.Decimal` with the sign kept exactly as
extracted (negative = debit, positive = credit). Timestamps are naive
``datetime`` values at minute precision; no timezone conversion happens.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator


@dataclass(frozen=True, slots=True)
class Transaction:
    """A normalized financial event extracted from one statement.

    ``raw_text`` holds the source lines the record was built from. It is kept
    for diagnostics only and does not take part in equality or matching.
    """

    date_time: datetime
    description: str
    amount: Decimal
    currency: str
    source: str
    raw_text: str = field(default="", compare=False)


@dataclass(frozen=True, slots=True)
class DuplicateMatch:
    """Two transactions from different sources that look like one payment.

    ``time_diff`` and ``amount_diff`` are absolute values (never negative).
    Instances are produced by :func:`dupay.duplicates.find_duplicates` only.
    """

    first: Transaction
    second: Transaction
    time_diff: timedelta
    amount_diff: Decimal


class MatchTolerance(BaseModel):
    """Maximum allowed differences for two transactions to be one payment.

    Both bounds are inclusive and must be non-negative.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_time_diff: timedelta
    max_amount_diff: Decimal

    @field_validator("max_time_diff")
    @classmethod
    def _time_non_negative(cls, v: timedelta) -> timedelta:
        if v < timedelta(0):
            raise ValueError("max_time_diff must not be negative")
        return v

    @field_validator("max_amount_diff")
    @classmethod
    def _amount_non_negative(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("max_amount_diff must be a finite number")
        if v < 0:
            raise ValueError("max_amount_diff must not be negative")
        return v


__all__ = ["Transaction", "DuplicateMatch", "MatchTolerance"]
