import json
import logging

import pytest

import main
from receipt_ocr.extraction import LineCorpus
from receipt_ocr.output_handler import ExpenseStore
from receipt_ocr.utils.logger import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.handlers.clear()
    app_logger.propagate = True
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def lines_file(tmp_path, sample_lines):
    path = tmp_path / "receipt.txt"
    path.write_text("\n".join(sample_lines) + "\n", encoding="utf-8")
    return path


def test_prints_draft_as_json(lines_file, capsys):
    exit_code = main.main(["--lines-file", str(lines_file)])

    assert exit_code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "merchant": "FRESH GROCERY MART",
        "amount": 245.5,
        "date": "2024-08-05",
        "category": "Food",
    }


def test_save_stores_expense(lines_file, tmp_path, capsys):
    db_path = tmp_path / "expenses.db"

    exit_code = main.main([
        "--lines-file", str(lines_file), "--save", "--db", str(db_path), "--notes", "groceries"
    ])

    assert exit_code == 0
    expenses = ExpenseStore(db_path).get_all()
    assert len(expenses) == 1
    assert expenses[0]["merchant"] == "FRESH GROCERY MART"
    assert expenses[0]["notes"] == "groceries"


def test_save_without_amount_fails(tmp_path, capsys):
    path = tmp_path / "receipt.txt"
    path.write_text("Thank you\n", encoding="utf-8")

    exit_code = main.main(["--lines-file", str(path), "--save", "--db", str(tmp_path / "x.db")])

    assert exit_code == 1
    assert "amount" in capsys.readouterr().err


def test_missing_lines_file(tmp_path, capsys):
    exit_code = main.main(["--lines-file", str(tmp_path / "missing.txt")])

    assert exit_code == 1
    assert "Error:" in capsys.readouterr().err


def test_missing_image(tmp_path, capsys):
    exit_code = main.main(["--input", str(tmp_path / "missing.jpg"), "--backend", "tesseract"])
    assert exit_code == 1


def test_source_is_required():
    with pytest.raises(SystemExit):
        main.parse_arguments([])


def test_run_extraction_needs_exactly_one_source(sample_lines):
    with pytest.raises(ValueError):
        main.run_extraction()
    with pytest.raises(ValueError):
        main.run_extraction(image="receipt.jpg", lines=LineCorpus(sample_lines))


def test_failed_ocr_job_exit_code(monkeypatch, tmp_path, capsys):
    from receipt_ocr.utils.exceptions import OCRJobFailedError

    def failing_extraction(**kwargs):
        raise OCRJobFailedError("op-1")

    monkeypatch.setattr(main, "run_extraction", failing_extraction)
    image = tmp_path / "receipt.png"
    image.write_bytes(b"png")

    assert main.main(["--input", str(image)]) == 2
    assert "extraction unavailable" in capsys.readouterr().err


def test_lines_file_with_byte_order_mark(tmp_path, sample_lines, capsys):
    path = tmp_path / "receipt.txt"
    path.write_text("\n".join(["CITY CAFE"] + sample_lines[2:]), encoding="utf-8-sig")

    assert main.read_lines_file(str(path)).lines[0] == "CITY CAFE"
    assert main.main(["--lines-file", str(path)]) == 0
    assert json.loads(capsys.readouterr().out)["merchant"] == "CITY CAFE"
