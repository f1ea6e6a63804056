"""
Main Input Handler Module.

This module resolves the different ways a receipt image can be supplied
into an ImageSource the OCR engine understands:

    - data:image/...;base64,... URLs (decoded to bytes)
    - http:// and https:// URLs (passed through as a reference)
    - local image files (read as bytes)

Usage:
    from receipt_ocr.input_handler import InputHandler

    handler = InputHandler()
    source = handler.load("receipt.jpg")

Author: ML Engineering Team
"""

import base64
import binascii
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from config import get_config
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.helpers import get_file_extension
from receipt_ocr.utils.exceptions import (
    InputError,
    UnsupportedFileTypeError,
    InputFileNotFoundError,
    CorruptedFileError
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImageSource:
    """
    A receipt image ready to be submitted for OCR.

    Exactly one of ``data`` or ``url`` is set.

    Attributes:
        data: Raw image bytes
        url: Remote image URL
        origin: Where the image came from ('file', 'data_url' or 'url')
        name: File name or URL, for logging
    """
    data: Optional[bytes] = None
    url: Optional[str] = None
    origin: str = "file"
    name: str = ""

    @property
    def is_remote(self) -> bool:
        """True when the OCR backend must fetch the image itself."""
        return self.url is not None

    def __repr__(self) -> str:
        size = f"{len(self.data)} bytes" if self.data is not None else self.url
        return f"ImageSource(origin='{self.origin}', {size})"


class InputHandler:
    """
    Resolves receipt image inputs.

    Attributes:
        supported_extensions: Set of accepted image file extensions

    Example:
        >>> handler = InputHandler()
        >>> handler.load("https://example.com/receipt.jpg").is_remote
        True
    """

    IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.tiff', '.tif', '.gif'}

    DATA_URL_PREFIX = "data:image"
    REMOTE_PREFIXES = ("http://", "https://")

    def __init__(self) -> None:
        self.supported_extensions = {
            ext.lower()
            for ext in get_config("input.supported_extensions", list(self.IMAGE_EXTENSIONS))
        }
        logger.debug(f"InputHandler initialized with extensions: {sorted(self.supported_extensions)}")

    def load(self, value: Union[str, Path]) -> ImageSource:
        """
        Resolve an input value into an ImageSource.

        Args:
            value: File path, http(s) URL or base64 data URL.

        Returns:
            ImageSource for the OCR engine.

        Raises:
            InputError: If the value is empty.
            CorruptedFileError: If a data URL cannot be decoded.
            InputFileNotFoundError: If a local file does not exist.
            UnsupportedFileTypeError: If a local file is not an image.
        """
        if isinstance(value, Path):
            return self._load_file(value)

        if not value or not value.strip():
            raise InputError("Image URL or base64 data is required")

        value = value.strip()

        if value.startswith(self.DATA_URL_PREFIX):
            return self._load_data_url(value)

        if value.lower().startswith(self.REMOTE_PREFIXES):
            logger.debug(f"Using remote image: {value}")
            return ImageSource(url=value, origin="url", name=value)

        return self._load_file(Path(value))

    def _load_data_url(self, value: str) -> ImageSource:
        """Decode the payload after the first comma of a data URL."""
        _, _, payload = value.partition(',')

        if not payload:
            raise CorruptedFileError("data URL", "missing base64 payload")

        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise CorruptedFileError("data URL", str(e))

        logger.debug(f"Decoded data URL image ({len(data)} bytes)")
        return ImageSource(data=data, origin="data_url", name="data URL")

    def _load_file(self, path: Path) -> ImageSource:
        """Read a local image file."""
        if not path.is_file():
            raise InputFileNotFoundError(str(path))

        extension = get_file_extension(path)
        if extension not in self.supported_extensions:
            raise UnsupportedFileTypeError(extension, sorted(self.supported_extensions))

        data = path.read_bytes()
        if not data:
            raise CorruptedFileError(str(path), "file is empty")

        logger.debug(f"Loaded image file: {path.name} ({len(data)} bytes)")
        return ImageSource(data=data, origin="file", name=path.name)

    def is_supported(self, filepath: Union[str, Path]) -> bool:
        """Check if a file has a supported image extension."""
        return get_file_extension(filepath) in self.supported_extensions
