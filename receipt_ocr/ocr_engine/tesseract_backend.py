"""
Tesseract OCR Backend.

This module provides a local, synchronous OCR backend using Tesseract
(pytesseract). It exposes the same submit / get_result contract as the
Azure backend: submit() runs OCR immediately and stores the finished
result, so the first poll already reports a terminal status.

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package

Author: ML Engineering Team
"""

import io
import time
import uuid
from typing import Dict

from PIL import Image, UnidentifiedImageError
import pytesseract

from config import get_config
from receipt_ocr.input_handler.handler import ImageSource
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from .read_result import OCRJobStatus, ReadPage, ReadResult

logger = get_logger(__name__)


class TesseractBackend:
    """
    Tesseract OCR backend implementation.

    Attributes:
        language: Tesseract language code (e.g., "eng")
        psm: Page Segmentation Mode (1-13)
        oem: OCR Engine Mode (0-3)
        extra_config: Additional Tesseract configuration

    Example:
        >>> backend = TesseractBackend()
        >>> operation_id = backend.submit(source)
        >>> backend.get_result(operation_id).lines
        ['FRESH GROCERY MART', 'Total 245.50']
    """

    name = "tesseract"

    def __init__(self, tesseract=None) -> None:
        """
        Initialize the Tesseract backend with configuration.

        Args:
            tesseract: pytesseract-compatible module. Defaults to pytesseract.
        """
        self.language = get_config("ocr.tesseract.lang", "eng")
        self.psm = get_config("ocr.tesseract.psm", 4)
        self.oem = get_config("ocr.tesseract.oem", 3)
        self.extra_config = get_config("ocr.tesseract.config", "")

        self._tesseract = tesseract or pytesseract
        self._results: Dict[str, ReadResult] = {}

        self._check_dependencies()

        logger.debug(
            f"TesseractBackend initialized (lang={self.language}, "
            f"psm={self.psm}, oem={self.oem})"
        )

    def _check_dependencies(self) -> None:
        """
        Check that the Tesseract binary is reachable.

        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
        """
        try:
            version = self._tesseract.get_tesseract_version()
        except Exception as e:
            raise OCREngineNotAvailableError(
                self.name, f"Tesseract not installed or not in PATH: {e}"
            )
        logger.info(f"Tesseract version: {version}")

    def _build_config(self) -> str:
        """Build the Tesseract command-line configuration string."""
        config_parts = [
            f"--psm {self.psm}",
            f"--oem {self.oem}"
        ]

        if self.extra_config:
            config_parts.append(self.extra_config)

        return ' '.join(config_parts)

    def submit(self, image: ImageSource) -> str:
        """
        Run OCR on an image and keep the finished result.

        Args:
            image: Image bytes. Remote URLs are not fetched.

        Returns:
            Operation id for get_result().

        Raises:
            OCRProcessingError: If the image cannot be read.
        """
        if image.is_remote:
            raise OCRProcessingError(
                image.name, "the tesseract backend only reads local image data"
            )

        start_time = time.time()

        try:
            pil_image = Image.open(io.BytesIO(image.data))
            if pil_image.mode != 'RGB':
                pil_image = pil_image.convert('RGB')
        except (UnidentifiedImageError, OSError) as e:
            raise OCRProcessingError(image.name, f"Failed to load image: {e}")

        operation_id = uuid.uuid4().hex

        try:
            text = self._tesseract.image_to_string(
                pil_image,
                lang=self.language,
                config=self._build_config()
            )
        except Exception as e:
            logger.error(f"OCR processing failed: {e}")
            self._results[operation_id] = ReadResult(
                status=OCRJobStatus.FAILED,
                operation_id=operation_id,
                engine=self.name,
                metadata={'error': str(e)}
            )
            return operation_id

        lines = tuple(line.strip() for line in text.splitlines() if line.strip())
        processing_time = time.time() - start_time

        self._results[operation_id] = ReadResult(
            status=OCRJobStatus.SUCCEEDED,
            pages=[ReadPage(lines=lines, page_number=1)],
            operation_id=operation_id,
            engine=self.name,
            metadata={'psm': self.psm, 'oem': self.oem, 'processing_time': processing_time}
        )

        logger.info(f"OCR completed: {len(lines)} lines ({processing_time:.2f}s)")
        return operation_id

    def get_result(self, operation_id: str) -> ReadResult:
        """
        Return and forget the stored result of a submitted job.

        Raises:
            OCRProcessingError: If the operation id is unknown.
        """
        try:
            return self._results.pop(operation_id)
        except KeyError:
            raise OCRProcessingError(operation_id, "unknown operation id")
