"""Pytest configuration for test isolation.

The CLI reads ``DUPAY_*`` settings from the environment and loads a ``.env``
file from the current working directory (``python-dotenv`` writes what it
loads into ``os.environ``). Left alone, a developer's ``.env`` or a value
loaded by one CLI test would leak into the next test.

The autouse fixture below runs every test from its own temporary directory
with no ``DUPAY_*`` variables set, and removes any that a test added.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest

from dupay.models import Transaction

_ENV_PREFIX = "DUPAY_"


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield
    # Variables set by load_dotenv are not tracked by monkeypatch.
    for key in [k for k in os.environ if k.startswith(_ENV_PREFIX)]:
        os.environ.pop(key, None)


@pytest.fixture
def base_time() -> datetime:
    return datetime(2025, 1, 15, 10, 30)


@pytest.fixture
def make_tx(base_time: datetime) -> Callable[..., Transaction]:
    """Factory for transactions with sensible defaults for matching tests."""

    def _make(
        source: str = "BankA",
        amount: str | Decimal = "-100.00",
        *,
        date_time: datetime | None = None,
        currency: str = "KGS",
        description: str = "Payment",
    ) -> Transaction:
        return Transaction(
            date_time=date_time or base_time,
            description=description,
            amount=Decimal(amount),
            currency=currency,
            source=source,
        )

    return _make
