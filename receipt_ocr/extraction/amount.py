"""
Amount Extractor Module.

Finds the most probable total on a receipt in two phases:

    1. Keyword phase: numbers on or right after a total-like line
       ("net amount", "grand total", "total", ...), bounded to (0, 100000).
    2. Fallback phase: any two-decimal number anywhere on the receipt,
       bounded to (5, 10000). Only used when phase 1 finds nothing.

In both phases the largest qualifying value wins. Receipts list the
subtotal and tax lines before the grand total, and the grand total is
numerically the largest figure near those keywords.

Author: ML Engineering Team
"""

import re
from decimal import Decimal
from typing import Iterable, Optional

from config import get_config
from receipt_ocr.utils.logger import get_logger
from .keywords import KeywordTables, contains_any
from .line_corpus import LineCorpus

logger = get_logger(__name__)

ZERO = Decimal('0')


class AmountExtractor:
    """
    Extracts the total amount from a receipt.

    Attributes:
        keywords: Keyword tables providing the total-like phrases
        keyword_max: Exclusive upper bound for keyword-phase values
        fallback_min: Exclusive lower bound for fallback-phase values
        fallback_max: Exclusive upper bound for fallback-phase values

    Example:
        >>> extractor = AmountExtractor()
        >>> extractor.extract(LineCorpus(["Net Amount: Rs. 245.50"]))
        Decimal('245.50')
    """

    # Optional rupee marker followed by a number with up to two decimals
    KEYWORD_AMOUNT_PATTERN = re.compile(
        r'(?:rs\.?|₹)?\s*(\d+(?:\.\d{1,2})?)', re.IGNORECASE | re.ASCII
    )

    # Bare decimal amounts such as 20.00
    FALLBACK_AMOUNT_PATTERN = re.compile(r'\d+\.\d{2}', re.ASCII)

    def __init__(self, keywords: Optional[KeywordTables] = None) -> None:
        self.keywords = keywords or KeywordTables.from_config()
        self.keyword_max = Decimal(str(get_config("extraction.amount.keyword_max", 100000)))
        self.fallback_min = Decimal(str(get_config("extraction.amount.fallback_min", 5)))
        self.fallback_max = Decimal(str(get_config("extraction.amount.fallback_max", 10000)))

    def extract(self, corpus: LineCorpus) -> Optional[Decimal]:
        """
        Extract the total amount.

        Args:
            corpus: Receipt lines.

        Returns:
            Highest qualifying amount, or None when nothing qualifies.
        """
        amount = self._keyword_phase(corpus)

        if amount == ZERO:
            amount = self._fallback_phase(corpus)
            if amount > ZERO:
                logger.debug(f"Amount from fallback phase: {amount}")
        else:
            logger.debug(f"Amount from keyword phase: {amount}")

        if amount <= ZERO:
            logger.debug("No amount found")
            return None

        return amount

    def _keyword_phase(self, corpus: LineCorpus) -> Decimal:
        """Largest number on or directly after a total-like line."""
        lines = corpus.lines
        best = ZERO

        for index, line in enumerate(lines):
            if not contains_any(line.lower(), self.keywords.amount_keywords):
                continue

            window = lines[index:index + 2]
            for value in self._numbers(window, self.KEYWORD_AMOUNT_PATTERN, group=1):
                if ZERO < value < self.keyword_max and value > best:
                    best = value

        return best

    def _fallback_phase(self, corpus: LineCorpus) -> Decimal:
        """Largest two-decimal number anywhere within the fallback bounds."""
        best = ZERO

        for value in self._numbers(corpus.lines, self.FALLBACK_AMOUNT_PATTERN, group=0):
            if self.fallback_min < value < self.fallback_max and value > best:
                best = value

        return best

    @staticmethod
    def _numbers(lines: Iterable[str], pattern: re.Pattern, group: int) -> Iterable[Decimal]:
        for line in lines:
            for match in pattern.finditer(line):
                yield Decimal(match.group(group))
