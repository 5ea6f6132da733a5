from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

import pytest

from dupay.api import (
    StatementResult,
    collect_transactions,
    find_duplicate_payments,
    parse_statements,
    scan_documents,
)
from dupay.ingest.utils import parse_statement_text, select_parser
from dupay.models import MatchTolerance
from tests.helpers.statements import MBANK_STATEMENT, OPTIMA_STATEMENT, UNKNOWN_STATEMENT

TOLERANCE = MatchTolerance(max_time_diff=timedelta(minutes=1), max_amount_diff=Decimal("1.0"))


def _write(tmp_path: Path, name: str, text: str) -> Path:
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_select_parser_by_content():
    assert select_parser(OPTIMA_STATEMENT).name == "Optima Bank"
    assert select_parser(MBANK_STATEMENT).name == "Mbank"
    assert select_parser(UNKNOWN_STATEMENT) is None


def test_parse_statement_text_unrecognized():
    assert parse_statement_text(UNKNOWN_STATEMENT) == (None, [])


def test_parse_statements_concatenates_in_input_order():
    txs = parse_statements([OPTIMA_STATEMENT, UNKNOWN_STATEMENT, MBANK_STATEMENT])
    assert [t.source for t in txs] == ["Optima Bank"] * 3 + ["Mbank"] * 3
    assert [t.amount for t in txs] == [
        Decimal("-1500.00"),
        Decimal("-1136.63"),
        Decimal("5000.00"),
        Decimal("-1500.00"),
        Decimal("-1137.00"),
        Decimal("2000.00"),
    ]


def test_find_duplicate_payments_end_to_end():
    txs = parse_statements([OPTIMA_STATEMENT, MBANK_STATEMENT])
    matches = find_duplicate_payments(txs, TOLERANCE)
    assert len(matches) == 2

    first, second = matches
    assert first.first.source == "Optima Bank"
    assert first.second.source == "Mbank"
    assert first.time_diff == timedelta(0)
    assert first.amount_diff == Decimal("0")

    assert second.first.date_time == datetime(2025, 1, 15, 14, 45)
    assert second.second.date_time == datetime(2025, 1, 15, 14, 46)
    assert second.time_diff == timedelta(minutes=1)
    assert second.amount_diff == Decimal("0.37")


def test_overlapping_exports_of_one_bank_do_not_double_count():
    txs = parse_statements([OPTIMA_STATEMENT, OPTIMA_STATEMENT, MBANK_STATEMENT])
    assert len(find_duplicate_payments(txs, TOLERANCE)) == 2


def test_tighter_tolerance_drops_the_delayed_match():
    txs = parse_statements([OPTIMA_STATEMENT, MBANK_STATEMENT])
    tight = MatchTolerance(max_time_diff=timedelta(seconds=30), max_amount_diff=Decimal("1"))
    matches = find_duplicate_payments(txs, tight)
    assert [m.first.amount for m in matches] == [Decimal("-1500.00")]


def test_scan_documents_reads_in_input_order(tmp_path: Path):
    paths = [
        _write(tmp_path, "mbank.txt", MBANK_STATEMENT),
        _write(tmp_path, "other.txt", UNKNOWN_STATEMENT),
        _write(tmp_path, "optima.txt", OPTIMA_STATEMENT),
    ]
    results = scan_documents(paths, max_workers=3)

    assert [r.path for r in results] == paths
    assert [r.parser_name for r in results] == ["Mbank", None, "Optima Bank"]
    assert [r.recognized for r in results] == [True, False, True]
    assert all(r.error is None for r in results)
    assert [len(r.transactions) for r in results] == [3, 0, 3]

    txs = collect_transactions(results)
    assert [t.source for t in txs] == ["Mbank"] * 3 + ["Optima Bank"] * 3


def test_scan_documents_captures_read_errors(tmp_path: Path):
    good = _write(tmp_path, "optima.txt", OPTIMA_STATEMENT)
    missing = tmp_path / "missing.pdf"
    unsupported = _write(tmp_path, "notes.docx", "Optima Bank")

    results = scan_documents([good, missing, unsupported], max_workers=2)

    assert results[0].recognized
    assert results[1].parser_name is None
    assert "not found" in results[1].error
    assert results[2].parser_name is None
    assert "unsupported" in results[2].error
    assert len(collect_transactions(results)) == 3


def test_scan_documents_accepts_str_paths(tmp_path: Path):
    p = _write(tmp_path, "mbank.txt", MBANK_STATEMENT)
    (result,) = scan_documents([str(p)], max_workers=1)
    assert result.path == p
    assert result.parser_name == "Mbank"


def test_scan_documents_empty():
    assert scan_documents([], max_workers=4) == []


@pytest.mark.parametrize("workers", [0, -1])
def test_scan_documents_rejects_bad_worker_count(workers: int):
    with pytest.raises(ValueError):
        scan_documents([], max_workers=workers)


def test_statement_result_defaults():
    r = StatementResult(path=Path("x.pdf"), parser_name=None)
    assert r.transactions == ()
    assert r.error is None
    assert not r.recognized
