"""Shared fixtures for the receipt OCR test suite."""

from datetime import date

import pytest

from config import ConfigurationManager
from receipt_ocr.extraction import KeywordTables, ReceiptExtractor

FIXED_TODAY = date(2026, 1, 15)


@pytest.fixture(autouse=True)
def reset_config():
    """Start every test from the bundled settings.yaml."""
    ConfigurationManager.reset()
    yield
    ConfigurationManager.reset()


@pytest.fixture
def today():
    return lambda: FIXED_TODAY


@pytest.fixture
def keywords():
    return KeywordTables.from_config()


@pytest.fixture
def extractor(today):
    return ReceiptExtractor(today=today)


@pytest.fixture
def sample_lines():
    return [
        "GST INVOICE",
        "FRESH GROCERY MART",
        "Date: 05/08/2024",
        "Item A  100.00",
        "Net Amount: Rs. 245.50",
        "Thank you",
    ]
