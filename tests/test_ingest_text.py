from pathlib import Path

import pdfplumber
import pytest

from dupay.ingest.text import DocumentReadError, document_to_text


class _FakePage:
    def __init__(self, text: str | None) -> None:
        self._text = text

    def extract_text(self) -> str | None:
        return self._text


class _FakePdf:
    def __init__(self, pages: list[_FakePage]) -> None:
        self.pages = pages

    def __enter__(self) -> "_FakePdf":
        return self

    def __exit__(self, *exc: object) -> None:
        return None


def test_txt_is_returned_verbatim(tmp_path: Path):
    p = tmp_path / "statement.txt"
    p.write_text("Mbank\n24.12.2025 10:00 Payment - 5,00\n", encoding="utf-8")
    assert document_to_text(p) == "Mbank\n24.12.2025 10:00 Payment - 5,00\n"


def test_suffix_is_case_insensitive(tmp_path: Path):
    p = tmp_path / "STATEMENT.TXT"
    p.write_text("Optima Bank", encoding="utf-8")
    assert document_to_text(str(p)) == "Optima Bank"


def test_pdf_pages_are_joined(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    opened: list[Path] = []

    def fake_open(path):
        opened.append(Path(path))
        return _FakePdf([_FakePage("page one"), _FakePage(None), _FakePage("page three")])

    monkeypatch.setattr(pdfplumber, "open", fake_open)
    p = tmp_path / "statement.pdf"
    p.write_bytes(b"%PDF-1.4")

    assert document_to_text(p) == "page one\npage three\n"
    assert opened == [p]


def test_pdf_extraction_failure_is_wrapped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def broken_open(path):
        raise ValueError("no /Root object")

    monkeypatch.setattr(pdfplumber, "open", broken_open)
    p = tmp_path / "broken.pdf"
    p.write_bytes(b"garbage")

    with pytest.raises(DocumentReadError, match="broken.pdf") as excinfo:
        document_to_text(p)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_missing_file(tmp_path: Path):
    with pytest.raises(DocumentReadError, match="file not found") as excinfo:
        document_to_text(tmp_path / "nope.txt")
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "statement.csv"
    p.write_text("a,b", encoding="utf-8")
    with pytest.raises(DocumentReadError, match="unsupported document type"):
        document_to_text(p)


def test_invalid_utf8(tmp_path: Path):
    p = tmp_path / "statement.txt"
    p.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(DocumentReadError, match="UTF-8"):
        document_to_text(p)
