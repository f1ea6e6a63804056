"""
Receipt OCR Extraction System - Source Package.

This package turns photographed retail receipts into draft expense
records. Each module has a single responsibility.

Modules:
    - input_handler: Image path / URL / data URL resolution
    - ocr_engine: OCR job submission and polling
    - extraction: Merchant, amount, date and category heuristics
    - output_handler: SQLite expense storage

Architecture:
    Input → OCR → Extraction → ExtractionDraft → (optional) Expense store
"""

__version__ = "1.0.0"
__author__ = "ML Engineering Team"

__all__ = [
    'input_handler',
    'ocr_engine',
    'extraction',
    'output_handler',
    'utils'
]
