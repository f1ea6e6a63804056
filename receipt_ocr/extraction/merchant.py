"""
Merchant Extractor Module.

Finds the business name near the top of a receipt. The first qualifying
line wins; there is no scoring between candidates.

Author: ML Engineering Team
"""

import re
from typing import Optional

from config import get_config
from receipt_ocr.utils.helpers import collapse_whitespace
from receipt_ocr.utils.logger import get_logger
from .keywords import KeywordTables, contains_any
from .line_corpus import LineCorpus

logger = get_logger(__name__)


class MerchantExtractor:
    """
    Extracts the merchant name from the first lines of a receipt.

    A line is a candidate when it is long enough, carries no header or
    contact skip word and is not purely numeric. A candidate is accepted
    when it mentions a business word or is written in capitals. If nothing
    is accepted, the line following a "GST INVOICE" header is used.

    Attributes:
        keywords: Keyword tables used for skipping and acceptance
        scan_lines: Number of leading lines examined
        max_length: Longest merchant name kept before truncation

    Example:
        >>> extractor = MerchantExtractor()
        >>> extractor.extract(LineCorpus(["GST INVOICE", "FRESH GROCERY MART"]))
        'FRESH GROCERY MART'
    """

    # Lines made only of digits, dates and separators
    NUMERIC_LINE_PATTERN = re.compile(r'^[0-9\-/.\s:,]+$')

    def __init__(self, keywords: Optional[KeywordTables] = None) -> None:
        self.keywords = keywords or KeywordTables.from_config()
        self.scan_lines = get_config("extraction.merchant.scan_lines", 7)
        self.min_length = get_config("extraction.merchant.min_length", 3)
        self.max_length = get_config("extraction.merchant.max_length", 50)
        self.truncation_marker = get_config("extraction.merchant.truncation_marker", "...")
        self.caps_min_length = get_config("extraction.merchant.caps_min_length", 5)
        self.caps_max_length = get_config("extraction.merchant.caps_max_length", 60)

    def extract(self, corpus: LineCorpus) -> Optional[str]:
        """
        Extract the merchant name.

        Args:
            corpus: Receipt lines.

        Returns:
            Cleaned merchant name, or None if no line qualifies.
        """
        candidate = self._scan_header(corpus)

        if candidate is None:
            candidate = self._line_after_invoice_header(corpus)

        merchant = self._clean(candidate) if candidate else None
        if not merchant:
            logger.debug("No merchant candidate found")
            return None

        logger.debug(f"Extracted merchant: '{merchant}'")
        return merchant

    def _scan_header(self, corpus: LineCorpus) -> Optional[str]:
        """Return the first accepted line among the leading lines."""
        for raw_line in corpus.head(self.scan_lines):
            line = raw_line.strip()
            lower_line = line.lower()

            if self._is_skipped(line, lower_line):
                continue

            if self._is_business_name(line, lower_line):
                return line

        return None

    def _is_skipped(self, line: str, lower_line: str) -> bool:
        if len(line) < self.min_length:
            return True
        if contains_any(lower_line, self.keywords.skip_words):
            return True
        if self.NUMERIC_LINE_PATTERN.match(line):
            return True
        return lower_line in self.keywords.skip_exact

    def _is_business_name(self, line: str, lower_line: str) -> bool:
        if contains_any(lower_line, self.keywords.business_words):
            return True
        # Capitals test: upper-casing leaves the line unchanged
        return (
            line == line.upper()
            and self.caps_min_length < len(line) < self.caps_max_length
        )

    def _line_after_invoice_header(self, corpus: LineCorpus) -> Optional[str]:
        """Return the line right after the first invoice header, if any."""
        lines = corpus.lines
        header = self.keywords.invoice_header

        for index, line in enumerate(lines):
            if header in line.lower():
                if index < len(lines) - 1:
                    return lines[index + 1].strip()
                return None

        return None

    def _clean(self, candidate: str) -> str:
        """Collapse whitespace and truncate overly long names."""
        merchant = collapse_whitespace(candidate)
        if len(merchant) > self.max_length:
            merchant = merchant[:self.max_length] + self.truncation_marker
        return merchant
