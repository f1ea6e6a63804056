"""
Line Corpus Data Class.

This module defines the immutable input of the extraction pipeline: the
ordered OCR text lines of one receipt plus a lower-cased, single-space
joined view used for whole-document keyword search.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple


@dataclass(frozen=True)
class LineCorpus:
    """
    Ordered OCR lines for a single receipt.

    Line order is OCR reading order, top of the receipt first. The corpus
    cannot be modified after construction.

    Attributes:
        lines: Tuple of raw line texts
        joined_lowercase: All lines joined with one space, lower-cased

    Example:
        >>> corpus = LineCorpus.from_lines(["FRESH MART", "Total 20.00"])
        >>> corpus.joined_lowercase
        'fresh mart total 20.00'
    """
    lines: Tuple[str, ...] = ()
    joined_lowercase: str = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        # Accept any sequence but always store a tuple
        object.__setattr__(self, 'lines', tuple(self.lines))
        object.__setattr__(self, 'joined_lowercase', ' '.join(self.lines).lower())

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> 'LineCorpus':
        """Build a corpus from any iterable of line strings."""
        return cls(tuple(lines))

    @classmethod
    def from_pages(cls, pages: Iterable[Sequence[str]]) -> 'LineCorpus':
        """
        Flatten OCR pages into one corpus, page order then line order.

        Args:
            pages: Iterable of pages, each an ordered sequence of line texts.

        Returns:
            LineCorpus over every line of every page.
        """
        return cls(tuple(line for page in pages for line in page))

    def head(self, count: int) -> Tuple[str, ...]:
        """Return at most the first ``count`` lines."""
        return self.lines[:count]

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def is_empty(self) -> bool:
        """Check if the corpus has no lines."""
        return not self.lines
