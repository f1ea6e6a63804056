"""
Category Classifier Module.

Assigns exactly one spending category by keyword lookup. Categories are
tried in a fixed priority order and the first one with a matching keyword
wins, so a receipt mentioning both "cafe" and "uber" is Food.

Author: ML Engineering Team
"""

from typing import Optional

from receipt_ocr.utils.logger import get_logger
from .extraction_draft import Category
from .keywords import CATEGORY_PRIORITY, KeywordTables, contains_any
from .line_corpus import LineCorpus

logger = get_logger(__name__)


class CategoryClassifier:
    """
    Keyword-based spending category classifier.

    Example:
        >>> classifier = CategoryClassifier()
        >>> classifier.classify("CITY CAFE", LineCorpus(["CITY CAFE"]))
        <Category.FOOD: 'Food'>
    """

    def __init__(self, keywords: Optional[KeywordTables] = None) -> None:
        self.keywords = keywords or KeywordTables.from_config()

    def classify(self, merchant: Optional[str], corpus: LineCorpus) -> Category:
        """
        Classify a receipt.

        Args:
            merchant: Output of the merchant extractor (may be None).
            corpus: Receipt lines.

        Returns:
            The first matching category in priority order, else Other.
        """
        merchant_lower = (merchant or '').lower()
        text = corpus.joined_lowercase

        for category in CATEGORY_PRIORITY:
            words = self.keywords.categories.get(category, frozenset())
            if contains_any(merchant_lower, words) or contains_any(text, words):
                logger.debug(f"Classified as {category.value}")
                return category

        return Category.OTHER
