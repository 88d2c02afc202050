from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

from scanpay.cli.main import main
from scanpay.runtime import LOGGER_NAMESPACE, set_log_level
from scanpay.runtime.receipt_pipeline import RecognitionError

LINES = ["Cafe X", "1 Soup $5.00", "1 Bread $2.00", "Subtotal $7.00", "Tax $0.50", "Total $7.50"]


def _receipt_file(tmp_path: Path) -> Path:
    path = tmp_path / "lines.txt"
    path.write_text("\n".join(LINES) + "\n", encoding="utf-8")
    return path


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "parse" in capsys.readouterr().out


def test_parse_prints_review_block(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", str(_receipt_file(tmp_path))]) == 0

    out = capsys.readouterr().out
    assert "Restaurant: Cafe X" in out
    assert "1. Soup - $5.00" in out
    assert "$7.50" in out
    assert out.rstrip().endswith("Processing complete")


def test_parse_json_from_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("\n".join(LINES)))

    assert main(["parse", "-", "--json"]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["subtotal"] == "7.00"
    assert [item["price"] for item in data["items"]] == ["5.00", "2.00"]


def test_parse_missing_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["parse", str(tmp_path / "nope.txt")]) == 1
    assert "cannot read" in capsys.readouterr().out


def test_split_by_item_number(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = main(["split", str(_receipt_file(tmp_path)), "--person", "Ana=1", "--person", "Ben=2", "--json"])

    assert code == 0
    data = json.loads(capsys.readouterr().out)
    assert [(p["name"], p["total"]) for p in data["people"]] == [("Ana", "5.36"), ("Ben", "2.14")]
    assert data["grand_total"] == "7.50"


def test_split_text_summary(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["split", str(_receipt_file(tmp_path)), "--person", "Ana=1,2"]) == 0

    out = capsys.readouterr().out
    assert "Ana" in out
    assert "Grand Total" in out
    assert "unclaimed" not in out


def test_split_rejects_unknown_item_number(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["split", str(_receipt_file(tmp_path)), "--person", "Ana=9"]) == 1
    assert "item 9 does not exist" in capsys.readouterr().out


def test_split_rejects_bad_person_claim(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["split", str(_receipt_file(tmp_path)), "--person", "Ana"]) == 1
    assert "NAME=ITEM" in capsys.readouterr().out


def test_scan_missing_image(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["scan", str(tmp_path / "missing.jpg")]) == 1
    assert "Receipt file not found" in capsys.readouterr().out


def test_scan_recognition_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    image = tmp_path / "dinner.jpg"
    image.write_bytes(b"jpeg")

    def failing(path: Path, url: str) -> list[str]:
        raise RecognitionError("Failed to connect to OCR service: refused")

    monkeypatch.setattr("scanpay.application.receipts.scan.call_ocr_service", failing)

    assert main(["scan", str(image), "--ocr-url", "http://ocr.local"]) == 1
    assert "OCR service unavailable" in capsys.readouterr().out


def test_scan_prints_receipt_json(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    image = tmp_path / "dinner.jpg"
    image.write_bytes(b"jpeg")
    monkeypatch.setattr("scanpay.application.receipts.scan.call_ocr_service", lambda path, url: LINES)

    assert main(["scan", str(image), "--json"]) == 0
    assert json.loads(capsys.readouterr().out)["grand_total"] == "7.50"


def test_log_level_option_changes_namespace_level(tmp_path: Path) -> None:
    try:
        assert main(["--log-level", "debug", "parse", str(_receipt_file(tmp_path))]) == 0
        assert logging.getLogger(LOGGER_NAMESPACE).level == logging.DEBUG
    finally:
        set_log_level(logging.INFO)


def test_log_level_option_rejects_unknown_level(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        main(["--log-level", "LOUD", "parse", str(_receipt_file(tmp_path))])
