"""
Date Extractor Module.

Finds the transaction date on a receipt and normalizes it to YYYY-MM-DD.

Dates are read day-first (DD/MM/YYYY), the convention of the receipts this
system targets. Month-first receipts such as 08/05/2024 will be read as
8 May; the format is ambiguous and no guess is made. A year must be two
or four digits long: a token cut short by OCR (05/08/202) is not a date.

Author: ML Engineering Team
"""

import re
from datetime import date
from typing import Callable, Optional

from receipt_ocr.utils.helpers import utc_today
from receipt_ocr.utils.logger import get_logger
from .keywords import KeywordTables
from .line_corpus import LineCorpus

logger = get_logger(__name__)


class DateExtractor:
    """
    Extracts and normalizes the transaction date.

    Lines labelled with "date" are searched first; otherwise the first
    date-shaped token anywhere is used. Anything that is not a real
    calendar date falls back to today.

    Attributes:
        keywords: Keyword tables providing the date label
        today: Callable returning the fallback date (UTC today by default)

    Example:
        >>> extractor = DateExtractor()
        >>> extractor.extract(LineCorpus(["Date: 05/08/2024"]))
        '2024-08-05'
    """

    # D{1,2} / M{1,2} / YYYY or YY, separated by '/' or '-', not followed by a digit
    DATE_PATTERN = re.compile(r'\d{1,2}[/\-]\d{1,2}[/\-](?:\d{4}|\d{2})(?!\d)', re.ASCII)

    SEPARATOR_PATTERN = re.compile(r'[/\-]')

    def __init__(
        self,
        keywords: Optional[KeywordTables] = None,
        today: Optional[Callable[[], date]] = None
    ) -> None:
        self.keywords = keywords or KeywordTables.from_config()
        self.today = today or utc_today

    def extract(self, corpus: LineCorpus) -> str:
        """
        Extract the transaction date.

        Args:
            corpus: Receipt lines.

        Returns:
            Date string in YYYY-MM-DD format. Never None.
        """
        raw = self.find_raw_date(corpus)

        if raw is None:
            logger.debug("No date token found, using today")
            return self._today_string()

        normalized = self.normalize(raw)
        logger.debug(f"Extracted date: '{raw}' -> '{normalized}'")
        return normalized

    def find_raw_date(self, corpus: LineCorpus) -> Optional[str]:
        """
        Locate the raw date token.

        Args:
            corpus: Receipt lines.

        Returns:
            The matched token text, or None.
        """
        label = self.keywords.date_label

        for line in corpus:
            if label in line.lower():
                match = self.DATE_PATTERN.search(line)
                if match:
                    return match.group(0)

        for line in corpus:
            match = self.DATE_PATTERN.search(line)
            if match:
                return match.group(0)

        return None

    def normalize(self, raw: str) -> str:
        """
        Normalize a day-first date token to YYYY-MM-DD.

        Two-digit years are read as 20YY. Impossible dates (month 13,
        31 February, ...) become today's date.

        Args:
            raw: Token such as "5/8/24" or "05-08-2024".

        Returns:
            Normalized date string.

        Example:
            >>> extractor.normalize("5/8/24")
            '2024-08-05'
        """
        parts = self.SEPARATOR_PATTERN.split(raw)
        if len(parts) != 3:
            return self._today_string()

        day, month, year = parts
        if len(year) == 2:
            year = '20' + year

        try:
            parsed = date(int(year), int(month), int(day))
        except ValueError:
            logger.debug(f"Invalid calendar date '{raw}', using today")
            return self._today_string()

        return parsed.isoformat()

    def _today_string(self) -> str:
        return self.today().isoformat()
