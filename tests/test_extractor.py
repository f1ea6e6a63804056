import json
from decimal import Decimal

from receipt_ocr.extraction import Category, ExtractionDraft, LineCorpus, extract


def test_grocery_receipt(extractor, sample_lines):
    draft = extractor.extract(sample_lines)

    assert draft == ExtractionDraft(
        merchant="FRESH GROCERY MART",
        amount=Decimal("245.50"),
        date="2024-08-05",
        category=Category.FOOD
    )
    assert draft.missing_fields == []


def test_empty_input_gives_defaulted_draft(extractor):
    draft = extractor.extract([])

    assert draft.merchant is None
    assert draft.amount is None
    assert draft.date == "2026-01-15"
    assert draft.category is Category.OTHER
    assert draft.missing_fields == ["merchant", "amount"]


def test_accepts_line_corpus(extractor, sample_lines):
    assert extractor.extract(LineCorpus(sample_lines)) == extractor.extract(sample_lines)


def test_extraction_is_deterministic(extractor, sample_lines):
    first = extractor.extract(sample_lines)
    second = extractor.extract(list(sample_lines))

    assert first == second
    assert first.to_json() == second.to_json()


def test_draft_serialization(extractor, sample_lines):
    payload = json.loads(extractor.extract(sample_lines).to_json())

    assert payload == {
        "merchant": "FRESH GROCERY MART",
        "amount": 245.5,
        "date": "2024-08-05",
        "category": "Food",
    }


def test_merchant_feeds_category(extractor):
    draft = extractor.extract(["GST INVOICE", "Apollo Pharmacy", "Total 320.00"])

    assert draft.merchant == "Apollo Pharmacy"
    assert draft.category is Category.MEDICAL


def test_module_level_extract(today, sample_lines):
    draft = extract(sample_lines, today=today)

    assert draft.merchant == "FRESH GROCERY MART"
    assert draft.amount == Decimal("245.50")
