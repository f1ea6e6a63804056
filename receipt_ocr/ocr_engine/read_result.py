"""
OCR Read Result Data Classes.

This module defines the backend-independent shape of an OCR job: a status
and, once the job has succeeded, an ordered list of pages, each an ordered
list of line texts.

Classes:
    OCRJobStatus: Lifecycle status of an OCR job
    ReadPage: Ordered text lines of one page
    ReadResult: Status plus pages for one job

Author: ML Engineering Team
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple


class OCRJobStatus(str, Enum):
    """Status values reported by an asynchronous OCR job."""
    NOT_STARTED = "notStarted"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True once the job will not change status again."""
        return self in (OCRJobStatus.SUCCEEDED, OCRJobStatus.FAILED)

    @classmethod
    def parse(cls, value: Any) -> 'OCRJobStatus':
        """
        Convert a backend status (enum member or string) to OCRJobStatus.

        Example:
            >>> OCRJobStatus.parse("notStarted")
            <OCRJobStatus.NOT_STARTED: 'notStarted'>
        """
        return cls(getattr(value, 'value', value))


@dataclass(frozen=True)
class ReadPage:
    """
    Text lines of a single page, in reading order.

    Attributes:
        lines: Tuple of line texts
        page_number: 1-based page number
    """
    lines: Tuple[str, ...] = ()
    page_number: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {'page_number': self.page_number, 'lines': list(self.lines)}


@dataclass
class ReadResult:
    """
    Result of polling an OCR job once.

    Attributes:
        status: Current job status
        pages: Pages of text (only populated once the job succeeded)
        operation_id: Backend job identifier
        engine: Backend name
        metadata: Additional backend details

    Example:
        >>> result = ReadResult(OCRJobStatus.SUCCEEDED, [ReadPage(("TOTAL 20.00",))])
        >>> result.lines
        ['TOTAL 20.00']
    """
    status: OCRJobStatus
    pages: List[ReadPage] = field(default_factory=list)
    operation_id: str = ""
    engine: str = "unknown"
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def lines(self) -> List[str]:
        """All lines flattened in page order, then line order."""
        return [line for page in self.pages for line in page.lines]

    @property
    def succeeded(self) -> bool:
        return self.status is OCRJobStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        return self.status is OCRJobStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for serialization."""
        return {
            'status': self.status.value,
            'operation_id': self.operation_id,
            'engine': self.engine,
            'pages': [page.to_dict() for page in self.pages],
            'metadata': self.metadata
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __repr__(self) -> str:
        return (
            f"ReadResult(status={self.status.value}, pages={len(self.pages)}, "
            f"lines={len(self.lines)})"
        )
