"""
Extraction Draft Data Class.

This module defines the structured result of running every extractor over
a LineCorpus, together with the closed set of spending categories.

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional


class Category(str, Enum):
    """Spending categories a receipt can be classified into."""
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    MEDICAL = "Medical"
    OTHER = "Other"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ExtractionDraft:
    """
    Best-effort structured record inferred from one receipt.

    The draft is always complete: fields that could not be recovered carry
    an explicit default instead of raising.

    Attributes:
        merchant: Cleaned merchant name, or None
        amount: Most probable total amount, or None
        date: Transaction date as YYYY-MM-DD (today when unknown)
        category: Spending category (Other when unknown)

    Example:
        >>> draft = ExtractionDraft(
        ...     merchant="FRESH GROCERY MART",
        ...     amount=Decimal("245.50"),
        ...     date="2024-08-05",
        ...     category=Category.FOOD
        ... )
        >>> draft.to_dict()["amount"]
        245.5
    """
    merchant: Optional[str]
    amount: Optional[Decimal]
    date: str
    category: Category = Category.OTHER

    @property
    def fields(self) -> Dict[str, Any]:
        """Get the four extracted fields as a dictionary."""
        return {
            'merchant': self.merchant,
            'amount': self.amount,
            'date': self.date,
            'category': self.category
        }

    @property
    def missing_fields(self) -> list:
        """Names of the optional fields that were not recovered."""
        return [name for name in ('merchant', 'amount') if self.fields[name] is None]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a JSON-compatible dictionary.

        Returns:
            Dictionary with amount as float (or None) and category as text.
        """
        return {
            'merchant': self.merchant,
            'amount': float(self.amount) if self.amount is not None else None,
            'date': self.date,
            'category': self.category.value
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"ExtractionDraft("
            f"merchant={self.merchant!r}, "
            f"amount={self.amount}, "
            f"date={self.date}, "
            f"category={self.category.value})"
        )
