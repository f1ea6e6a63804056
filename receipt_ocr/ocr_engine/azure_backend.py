"""
Azure Read API Backend.

This module submits receipt images to the Azure Computer Vision Read API
and fetches job results. The Read API is asynchronous: submitting returns
an operation id in the Operation-Location header, which OCREngine then
polls until the job succeeds or fails.

Requirements:
    - azure-cognitiveservices-vision-computervision
    - An endpoint and subscription key (see ocr.azure in settings.yaml)

Author: ML Engineering Team
"""

import io
import os
from typing import Optional

from azure.cognitiveservices.vision.computervision import ComputerVisionClient
from msrest.authentication import CognitiveServicesCredentials
from msrest.exceptions import ClientException

from config import get_config
from receipt_ocr.input_handler.handler import ImageSource
from receipt_ocr.utils.logger import get_logger
from receipt_ocr.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError
from .read_result import OCRJobStatus, ReadPage, ReadResult

logger = get_logger(__name__)


class AzureReadBackend:
    """
    Azure Computer Vision Read API backend.

    The client is created by the caller and passed in, so one client can
    be shared for the lifetime of the host process.

    Attributes:
        client: ComputerVisionClient (or any object with the same
               read / read_in_stream / get_read_result methods)

    Example:
        >>> backend = AzureReadBackend.from_environment()
        >>> operation_id = backend.submit(source)
        >>> backend.get_result(operation_id).status
        <OCRJobStatus.RUNNING: 'running'>
    """

    name = "azure"

    def __init__(self, client) -> None:
        self.client = client

    @classmethod
    def from_environment(cls) -> 'AzureReadBackend':
        """
        Build a backend from the endpoint and key environment variables.

        Raises:
            OCREngineNotAvailableError: If either variable is missing.
        """
        endpoint_env = get_config("ocr.azure.endpoint_env", "AZURE_COMPUTER_VISION_ENDPOINT")
        key_env = get_config("ocr.azure.key_env", "AZURE_COMPUTER_VISION_KEY")

        endpoint = os.environ.get(endpoint_env)
        key = os.environ.get(key_env)

        if not endpoint or not key:
            raise OCREngineNotAvailableError(
                cls.name,
                f"set {endpoint_env} and {key_env} to use the Azure Read API"
            )

        logger.info(f"Azure Read API endpoint: {endpoint}")
        client = ComputerVisionClient(endpoint, CognitiveServicesCredentials(key))
        return cls(client)

    def submit(self, image: ImageSource) -> str:
        """
        Start a Read job for an image.

        Args:
            image: Image bytes or remote URL.

        Returns:
            Operation id of the job.

        Raises:
            OCRProcessingError: If the request is rejected.
        """
        try:
            if image.is_remote:
                response = self.client.read(image.url, raw=True)
            else:
                response = self.client.read_in_stream(io.BytesIO(image.data), raw=True)
        except ClientException as e:
            raise OCRProcessingError(image.name, f"Read request failed: {e}")

        operation_location = response.headers.get("Operation-Location")
        if not operation_location:
            raise OCRProcessingError(image.name, "response has no Operation-Location header")

        operation_id = operation_location.rstrip('/').split('/')[-1]
        logger.debug(f"Submitted Read job {operation_id} for {image.name}")
        return operation_id

    def get_result(self, operation_id: str) -> ReadResult:
        """
        Fetch the current state of a Read job.

        Args:
            operation_id: Id returned by submit().

        Returns:
            ReadResult; pages are filled in once the job has succeeded.
        """
        try:
            response = self.client.get_read_result(operation_id)
        except ClientException as e:
            raise OCRProcessingError(operation_id, f"Could not fetch Read result: {e}")

        status = OCRJobStatus.parse(response.status)
        result = ReadResult(status=status, operation_id=operation_id, engine=self.name)

        analyze_result = getattr(response, 'analyze_result', None)
        if status is OCRJobStatus.SUCCEEDED and analyze_result is not None:
            for index, page in enumerate(analyze_result.read_results or [], start=1):
                lines = tuple(line.text for line in (page.lines or []))
                result.pages.append(ReadPage(lines=lines, page_number=index))

        return result
