"""
Keyword Tables Module.

All word lists used by the extractors live here as immutable data. The
built-in defaults can be overridden from settings.yaml under
``extraction.keywords`` so the heuristics can be tuned without code changes.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Tuple, Union

from config import get_config
from receipt_ocr.utils.logger import get_logger
from .extraction_draft import Category

logger = get_logger(__name__)


# Fixed evaluation order for classification; Other is the fallback.
CATEGORY_PRIORITY: Tuple[Category, ...] = (
    Category.FOOD,
    Category.TRANSPORT,
    Category.SHOPPING,
    Category.ENTERTAINMENT,
    Category.MEDICAL,
)

DEFAULT_SKIP_WORDS = (
    'gst', 'invoice', 'bill', 'receipt', 'tax', 'invoice#', 'receipt#',
    'user', 'customer', 'mobile', 'address', 'phone',
)
DEFAULT_SKIP_EXACT = ('invoice', 'gst invoice')
DEFAULT_BUSINESS_WORDS = (
    'grocery', 'store', 'shop', 'mart', 'market', 'restaurant', 'cafe', 'hotel',
)
DEFAULT_INVOICE_HEADER = 'gst invoice'
DEFAULT_AMOUNT_KEYWORDS = (
    'net amount', 'total amount', 'grand total', 'amount payable', 'total',
)
DEFAULT_DATE_LABEL = 'date'

DEFAULT_CATEGORY_KEYWORDS = {
    Category.FOOD: (
        'grocery', 'restaurant', 'cafe', 'coffee', 'starbucks', 'pizza', 'burger',
        'food', 'kitchen', 'dining', 'hotel', 'dhaba', 'snacks', 'sweets', 'bakery',
    ),
    Category.TRANSPORT: (
        'uber', 'ola', 'taxi', 'auto', 'gas', 'fuel', 'petrol', 'diesel',
        'parking', 'transport',
    ),
    Category.SHOPPING: (
        'mall', 'mart', 'store', 'shop', 'bazaar', 'market', 'clothing', 'fashion',
    ),
    Category.ENTERTAINMENT: (
        'cinema', 'movie', 'pvr', 'inox', 'theatre', 'theater', 'game',
    ),
    Category.MEDICAL: (
        'pharmacy', 'medical', 'hospital', 'clinic', 'doctor', 'chemist',
    ),
}


def _lowered(words: Union[str, Iterable[str]]) -> FrozenSet[str]:
    # A bare YAML string is one keyword, not a sequence of characters
    if isinstance(words, str):
        words = (words,)
    return frozenset(str(word).lower() for word in words)


def _freeze_categories(
    table: Mapping[Category, Union[str, Iterable[str]]]
) -> Mapping[Category, FrozenSet[str]]:
    frozen = {category: _lowered(table.get(category, ())) for category in CATEGORY_PRIORITY}
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class KeywordTables:
    """
    Immutable keyword configuration shared by all extractors.

    Every keyword is stored lower-cased; matching is case-insensitive
    substring search against lower-cased text.

    Attributes:
        skip_words: Merchant candidates containing any of these are skipped
        skip_exact: Merchant candidates equal to any of these are skipped
        business_words: Words marking a line as a business name
        invoice_header: Header after which the merchant name usually follows
        amount_keywords: Phrases anchoring the total amount search
        date_label: Label marking the preferred date line
        categories: Mapping of category to its keyword set

    Example:
        >>> tables = KeywordTables.from_config()
        >>> 'uber' in tables.categories[Category.TRANSPORT]
        True
    """
    skip_words: FrozenSet[str] = _lowered(DEFAULT_SKIP_WORDS)
    skip_exact: FrozenSet[str] = _lowered(DEFAULT_SKIP_EXACT)
    business_words: FrozenSet[str] = _lowered(DEFAULT_BUSINESS_WORDS)
    invoice_header: str = DEFAULT_INVOICE_HEADER
    amount_keywords: FrozenSet[str] = _lowered(DEFAULT_AMOUNT_KEYWORDS)
    date_label: str = DEFAULT_DATE_LABEL
    categories: Mapping[Category, FrozenSet[str]] = field(
        default_factory=lambda: _freeze_categories(DEFAULT_CATEGORY_KEYWORDS)
    )

    @classmethod
    def from_config(cls) -> 'KeywordTables':
        """
        Build keyword tables from ``extraction.keywords`` in settings.yaml.

        Missing keys keep the built-in defaults. Unknown category names are
        ignored with a warning.

        Returns:
            KeywordTables instance.
        """
        categories = dict(DEFAULT_CATEGORY_KEYWORDS)
        configured = get_config("extraction.keywords.categories", {})

        for name, words in configured.items():
            try:
                category = Category(name)
            except ValueError:
                logger.warning(f"Ignoring keywords for unknown category: {name}")
                continue
            if category is Category.OTHER:
                logger.warning("Keywords for category 'Other' are ignored")
                continue
            categories[category] = words or ()

        return cls(
            skip_words=_lowered(get_config("extraction.keywords.skip_words", DEFAULT_SKIP_WORDS)),
            skip_exact=_lowered(get_config("extraction.keywords.skip_exact", DEFAULT_SKIP_EXACT)),
            business_words=_lowered(
                get_config("extraction.keywords.business_words", DEFAULT_BUSINESS_WORDS)
            ),
            invoice_header=str(
                get_config("extraction.keywords.invoice_header", DEFAULT_INVOICE_HEADER)
            ).lower(),
            amount_keywords=_lowered(
                get_config("extraction.keywords.amount_keywords", DEFAULT_AMOUNT_KEYWORDS)
            ),
            date_label=str(get_config("extraction.keywords.date_label", DEFAULT_DATE_LABEL)).lower(),
            categories=_freeze_categories(categories)
        )


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Check whether lower-cased ``text`` contains any keyword."""
    return any(keyword in text for keyword in keywords)
