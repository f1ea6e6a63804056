"""
Receipt Extractor Module.

This module provides the ReceiptExtractor class, the single entry point
of the extraction core. It runs the four extractors over a LineCorpus and
assembles their outputs into an ExtractionDraft.

Pipeline:
    LineCorpus → Merchant / Amount / Date extractors
               → Category classifier (uses the merchant)
               → ExtractionDraft

The extractor is a pure function of its input: no state is kept between
calls and the same lines always produce the same draft.

Usage:
    from receipt_ocr.extraction import extract

    draft = extract(["GST INVOICE", "FRESH GROCERY MART", "Total 245.50"])
    print(draft.to_json())

Author: ML Engineering Team
"""

from datetime import date
from typing import Callable, Iterable, Optional, Union

from receipt_ocr.utils.logger import get_logger
from .amount import AmountExtractor
from .category import CategoryClassifier
from .date import DateExtractor
from .extraction_draft import ExtractionDraft
from .keywords import KeywordTables
from .line_corpus import LineCorpus
from .merchant import MerchantExtractor

logger = get_logger(__name__)


class ReceiptExtractor:
    """
    Heuristic receipt field extractor.

    All extractors share one set of keyword tables. Nothing here raises on
    noisy or empty input: unrecoverable fields take their defaults.

    Attributes:
        keywords: Keyword tables shared by every stage
        merchant_extractor: MerchantExtractor instance
        amount_extractor: AmountExtractor instance
        date_extractor: DateExtractor instance
        category_classifier: CategoryClassifier instance

    Example:
        >>> extractor = ReceiptExtractor()
        >>> draft = extractor.extract(["FRESH GROCERY MART", "Total 245.50"])
        >>> draft.category
        <Category.FOOD: 'Food'>
    """

    def __init__(
        self,
        keywords: Optional[KeywordTables] = None,
        today: Optional[Callable[[], date]] = None
    ) -> None:
        """
        Initialize the extractor and its stages.

        Args:
            keywords: Keyword tables. If None, loaded from configuration.
            today: Clock used for the date fallback (UTC today by default).
        """
        self.keywords = keywords or KeywordTables.from_config()

        self.merchant_extractor = MerchantExtractor(self.keywords)
        self.amount_extractor = AmountExtractor(self.keywords)
        self.date_extractor = DateExtractor(self.keywords, today=today)
        self.category_classifier = CategoryClassifier(self.keywords)

    def extract(self, lines: Union[LineCorpus, Iterable[str]]) -> ExtractionDraft:
        """
        Extract a draft record from receipt lines.

        Args:
            lines: LineCorpus or ordered OCR line strings.

        Returns:
            ExtractionDraft with merchant, amount, date and category.
        """
        corpus = lines if isinstance(lines, LineCorpus) else LineCorpus.from_lines(lines)

        merchant = self.merchant_extractor.extract(corpus)
        amount = self.amount_extractor.extract(corpus)
        transaction_date = self.date_extractor.extract(corpus)
        category = self.category_classifier.classify(merchant, corpus)

        draft = ExtractionDraft(
            merchant=merchant,
            amount=amount if amount is not None and amount > 0 else None,
            date=transaction_date,
            category=category
        )

        logger.info(
            f"Extracted draft from {len(corpus)} lines: "
            f"merchant={draft.merchant!r}, amount={draft.amount}, "
            f"date={draft.date}, category={draft.category.value}"
        )

        return draft


def extract(
    lines: Union[LineCorpus, Iterable[str]],
    today: Optional[Callable[[], date]] = None
) -> ExtractionDraft:
    """
    Convenience function: extract a draft with configured keyword tables.

    Args:
        lines: LineCorpus or ordered OCR line strings.
        today: Optional clock for the date fallback.

    Returns:
        ExtractionDraft.
    """
    return ReceiptExtractor(today=today).extract(lines)
