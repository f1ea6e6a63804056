"""
Extraction Module for the Receipt OCR System.

Turns the ordered OCR lines of one receipt into a structured draft using
static, configurable heuristics:
    - Merchant name from the top of the receipt
    - Total amount near total-like keywords
    - Transaction date, read day-first
    - Spending category from keyword tables

Author: ML Engineering Team
"""

from .line_corpus import LineCorpus
from .extraction_draft import Category, ExtractionDraft
from .keywords import KeywordTables, CATEGORY_PRIORITY
from .merchant import MerchantExtractor
from .amount import AmountExtractor
from .date import DateExtractor
from .category import CategoryClassifier
from .extractor import ReceiptExtractor, extract

__all__ = [
    'LineCorpus',
    'Category',
    'ExtractionDraft',
    'KeywordTables',
    'CATEGORY_PRIORITY',
    'MerchantExtractor',
    'AmountExtractor',
    'DateExtractor',
    'CategoryClassifier',
    'ReceiptExtractor',
    'extract'
]
