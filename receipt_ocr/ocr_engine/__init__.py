"""
OCR Engine Module for the Receipt OCR System.

This module provides OCR functionality including:
    - Submitting receipt images to an OCR backend
    - Polling asynchronous jobs until they finish
    - Flattening pages of text lines into a LineCorpus

Supports multiple OCR backends:
    - Azure Computer Vision Read API (default)
    - Tesseract (local)

Author: ML Engineering Team
"""

from .engine import OCREngine, create_backend
from .azure_backend import AzureReadBackend
from .tesseract_backend import TesseractBackend
from .read_result import OCRJobStatus, ReadPage, ReadResult

__all__ = [
    'OCREngine',
    'create_backend',
    'AzureReadBackend',
    'TesseractBackend',
    'OCRJobStatus',
    'ReadPage',
    'ReadResult'
]
