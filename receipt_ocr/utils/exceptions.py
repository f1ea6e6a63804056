"""
Custom Exceptions Module.

This module defines the exceptions used throughout the receipt extraction
system. The extractors themselves never raise: they fall back to explicit
defaults. Everything around them (input resolution, the OCR job, the
expense store) reports failures through this hierarchy.

Exception Hierarchy:
    ReceiptExtractionError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── InputFileNotFoundError
    │   └── CorruptedFileError
    ├── OCRError
    │   ├── OCREngineNotAvailableError
    │   ├── OCRProcessingError
    │   ├── OCRJobFailedError
    │   └── OCRTimeoutError
    ├── ValidationError
    └── OutputError
        ├── DatabaseError
        └── ExpenseNotFoundError
"""


class ReceiptExtractionError(Exception):
    """
    Base exception for all receipt extraction errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(ReceiptExtractionError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when an image file has an unsupported extension.

    Example:
        >>> raise UnsupportedFileTypeError(".pdf", [".jpg", ".png"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class InputFileNotFoundError(InputError):
    """Raised when an input image file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class CorruptedFileError(InputError):
    """Raised when an image payload cannot be decoded or read."""

    def __init__(self, source: str, reason: str = None):
        message = f"Corrupted or unreadable image: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# OCR ERRORS
# =============================================================================

class OCRError(ReceiptExtractionError):
    """Base exception for OCR-related errors."""
    pass


class OCREngineNotAvailableError(OCRError):
    """Raised when the configured OCR backend cannot be used."""

    def __init__(self, engine_name: str, reason: str = None):
        message = f"OCR engine not available: {engine_name}"
        details = {"engine": engine_name, "reason": reason}
        super().__init__(message, details)


class OCRProcessingError(OCRError):
    """Raised when submitting an image or fetching a job result fails."""

    def __init__(self, source: str, reason: str = None):
        message = f"OCR processing failed for: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


class OCRJobFailedError(OCRError):
    """
    Raised when the OCR job reaches the ``failed`` status.

    Callers treat this as "extraction unavailable": no draft is produced.
    """

    def __init__(self, operation_id: str):
        message = "OCR processing failed: extraction unavailable"
        details = {"operation_id": operation_id}
        super().__init__(message, details)


class OCRTimeoutError(OCRError):
    """Raised when an OCR job is still running after the attempt limit."""

    def __init__(self, operation_id: str, attempts: int):
        message = f"OCR job did not finish after {attempts} polls"
        details = {"operation_id": operation_id, "attempts": attempts}
        super().__init__(message, details)


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(ReceiptExtractionError):
    """Raised when data supplied to the expense store is invalid."""

    def __init__(self, field: str, value, reason: str = None):
        message = f"Validation failed for field '{field}'"
        details = {"field": field, "value": value, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(ReceiptExtractionError):
    """Base exception for output handling errors."""
    pass


class DatabaseError(OutputError):
    """Raised when database operations fail."""

    def __init__(self, operation: str, reason: str = None):
        message = f"Database operation failed: {operation}"
        details = {"operation": operation, "reason": reason}
        super().__init__(message, details)


class ExpenseNotFoundError(OutputError):
    """Raised when an expense id does not exist."""

    def __init__(self, expense_id: int):
        message = f"Expense not found: {expense_id}"
        details = {"expense_id": expense_id}
        super().__init__(message, details)


__all__ = [
    'ReceiptExtractionError',
    'InputError',
    'UnsupportedFileTypeError',
    'InputFileNotFoundError',
    'CorruptedFileError',
    'OCRError',
    'OCREngineNotAvailableError',
    'OCRProcessingError',
    'OCRJobFailedError',
    'OCRTimeoutError',
    'ValidationError',
    'OutputError',
    'DatabaseError',
    'ExpenseNotFoundError',
]
