"""
Main OCR Engine Module.

This module provides the OCREngine class that drives an asynchronous OCR
job to completion and turns its output into a LineCorpus for extraction.

Flow:
    submit image → poll at a fixed interval while the job is
    notStarted/running → on success flatten pages into lines;
    on failure raise OCRJobFailedError ("extraction unavailable").

Usage:
    from receipt_ocr.ocr_engine import OCREngine, create_backend

    engine = OCREngine(create_backend("azure"))
    corpus = engine.read_lines(image_source)

Author: ML Engineering Team
"""

import time
from typing import Callable, Optional

from config import get_config
from receipt_ocr.extraction.line_corpus import LineCorpus
from receipt_ocr.input_handler.handler import ImageSource
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import OCRJobFailedError, OCRTimeoutError
from .read_result import OCRJobStatus, ReadResult
from .azure_backend import AzureReadBackend
from .tesseract_backend import TesseractBackend

logger = get_logger(__name__)


class OCREngine:
    """
    Polling driver for OCR backends.

    A backend is any object with ``submit(image) -> operation_id`` and
    ``get_result(operation_id) -> ReadResult``. The backend (and the client
    it wraps) is built by the caller and passed in.

    Attributes:
        backend: Active OCR backend
        poll_interval: Seconds to wait between polls
        max_attempts: Maximum number of polls, or None for no limit

    Example:
        >>> engine = OCREngine(AzureReadBackend.from_environment())
        >>> corpus = engine.read_lines(source)
        >>> len(corpus)
        14
    """

    def __init__(
        self,
        backend,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        sleep: Optional[Callable[[float], None]] = None
    ) -> None:
        """
        Initialize the OCR engine.

        Args:
            backend: OCR backend instance.
            poll_interval: Seconds between polls. Defaults to configuration.
            max_attempts: Poll limit. Defaults to configuration (no limit).
            sleep: Sleep function, replaceable in tests.
        """
        self.backend = backend
        self.poll_interval = (
            poll_interval if poll_interval is not None
            else float(get_config("ocr.polling.interval_seconds", 1.0))
        )
        self.max_attempts = (
            max_attempts if max_attempts is not None
            else get_config("ocr.polling.max_attempts")
        )
        self._sleep = sleep or time.sleep

        logger.info(
            f"OCR Engine initialized with backend: {getattr(backend, 'name', type(backend).__name__)}"
        )

    def read(self, image: ImageSource) -> ReadResult:
        """
        Submit an image and poll until the job reaches a terminal status.

        Args:
            image: Image to read.

        Returns:
            Terminal ReadResult (succeeded or failed).

        Raises:
            OCRTimeoutError: If max_attempts is set and exceeded.
        """
        operation_id = self.backend.submit(image)
        logger.info(f"Processing image {image.name} (operation {operation_id})")

        result = self.backend.get_result(operation_id)
        attempts = 1

        while result.status in (OCRJobStatus.NOT_STARTED, OCRJobStatus.RUNNING):
            if self.max_attempts and attempts >= self.max_attempts:
                raise OCRTimeoutError(operation_id, attempts)

            self._sleep(self.poll_interval)
            result = self.backend.get_result(operation_id)
            attempts += 1

        logger.debug(f"Operation {operation_id} finished after {attempts} polls: {result.status.value}")
        return result

    def read_lines(self, image: ImageSource) -> LineCorpus:
        """
        Read an image and return its text lines as a corpus.

        Args:
            image: Image to read.

        Returns:
            LineCorpus of all lines, page order then line order.

        Raises:
            OCRJobFailedError: If the OCR job failed.
        """
        result = self.read(image)

        if result.failed:
            logger.error(f"OCR job {result.operation_id} failed")
            raise OCRJobFailedError(result.operation_id)

        corpus = LineCorpus.from_pages(page.lines for page in result.pages)
        logger.info(f"Extracted {len(corpus)} lines from {len(result.pages)} page(s)")
        logger.debug(f"Extracted lines: {list(corpus.lines)}")
        return corpus


def create_backend(name: Optional[str] = None):
    """
    Build an OCR backend by name.

    Args:
        name: 'azure' or 'tesseract'. Defaults to the configured backend.
             Unknown names fall back to tesseract with a warning.

    Returns:
        Backend instance.

    Raises:
        OCREngineNotAvailableError: If the backend cannot be initialized.
    """
    backend_name = (name or get_config("ocr.backend", "azure")).lower()

    if backend_name == "pytesseract":
        backend_name = "tesseract"

    if backend_name == "azure":
        return AzureReadBackend.from_environment()

    if backend_name != "tesseract":
        logger.warning(f"Unknown backend '{backend_name}', falling back to tesseract")

    return TesseractBackend()


__all__ = ['OCREngine', 'create_backend']
