import io
from types import SimpleNamespace

import pytest
from PIL import Image

from receipt_ocr.input_handler import ImageSource
from receipt_ocr.ocr_engine import (
    AzureReadBackend,
    OCREngine,
    OCRJobStatus,
    ReadPage,
    ReadResult,
    TesseractBackend,
    create_backend,
)
from receipt_ocr.utils.exceptions import (
    OCREngineNotAvailableError,
    OCRJobFailedError,
    OCRProcessingError,
    OCRTimeoutError,
)

LOCAL_IMAGE = ImageSource(data=b"fake image bytes", origin="file", name="receipt.png")
REMOTE_IMAGE = ImageSource(url="https://example.com/receipt.jpg", origin="url", name="receipt.jpg")


class ScriptedBackend:
    """Backend returning a fixed sequence of results, one per poll."""

    name = "scripted"

    def __init__(self, results):
        self.results = list(results)
        self.submitted = []
        self.polls = 0

    def submit(self, image):
        self.submitted.append(image)
        return "op-1"

    def get_result(self, operation_id):
        self.polls += 1
        return self.results.pop(0)


def running():
    return ReadResult(OCRJobStatus.RUNNING, operation_id="op-1")


def succeeded(*pages):
    return ReadResult(
        OCRJobStatus.SUCCEEDED,
        pages=[ReadPage(tuple(lines), number) for number, lines in enumerate(pages, start=1)],
        operation_id="op-1"
    )


@pytest.fixture
def sleeps():
    return []


def make_engine(backend, sleeps, **kwargs):
    return OCREngine(backend, poll_interval=0.5, sleep=sleeps.append, **kwargs)


class TestOCRJobStatus:

    def test_parse_accepts_strings_and_enums(self):
        assert OCRJobStatus.parse("notStarted") is OCRJobStatus.NOT_STARTED
        assert OCRJobStatus.parse(SimpleNamespace(value="failed")) is OCRJobStatus.FAILED

    def test_terminal_statuses(self):
        assert OCRJobStatus.SUCCEEDED.is_terminal
        assert OCRJobStatus.FAILED.is_terminal
        assert not OCRJobStatus.RUNNING.is_terminal


class TestOCREngine:

    def test_polls_until_terminal_status(self, sleeps):
        backend = ScriptedBackend([
            ReadResult(OCRJobStatus.NOT_STARTED),
            running(),
            succeeded(["TOTAL 20.00"]),
        ])

        result = make_engine(backend, sleeps).read(LOCAL_IMAGE)

        assert result.succeeded
        assert backend.polls == 3
        assert sleeps == [0.5, 0.5]

    def test_no_sleep_when_first_poll_is_terminal(self, sleeps):
        backend = ScriptedBackend([succeeded(["A"])])
        make_engine(backend, sleeps).read(LOCAL_IMAGE)
        assert sleeps == []

    def test_read_lines_flattens_pages_in_order(self, sleeps):
        backend = ScriptedBackend([running(), succeeded(["p1 a", "p1 b"], ["p2 a"])])

        corpus = make_engine(backend, sleeps).read_lines(LOCAL_IMAGE)

        assert corpus.lines == ("p1 a", "p1 b", "p2 a")
        assert backend.submitted == [LOCAL_IMAGE]

    def test_failed_job_means_extraction_unavailable(self, sleeps):
        backend = ScriptedBackend([running(), ReadResult(OCRJobStatus.FAILED, operation_id="op-1")])

        with pytest.raises(OCRJobFailedError) as exc_info:
            make_engine(backend, sleeps).read_lines(LOCAL_IMAGE)

        assert "extraction unavailable" in str(exc_info.value)
        assert exc_info.value.details["operation_id"] == "op-1"

    def test_attempt_limit(self, sleeps):
        backend = ScriptedBackend([running() for _ in range(5)])

        with pytest.raises(OCRTimeoutError):
            make_engine(backend, sleeps, max_attempts=3).read(LOCAL_IMAGE)

        assert backend.polls == 3
        assert len(sleeps) == 2

    def test_polling_defaults_from_configuration(self):
        engine = OCREngine(ScriptedBackend([]))
        assert engine.poll_interval == 1.0
        assert engine.max_attempts is None


def fake_azure_client(statuses, operation_location="https://westus.api/vision/v3.2/read/analyzeResults/abc-123"):
    calls = []
    pending = list(statuses)

    def read(url, raw=False):
        calls.append(("read", url))
        return SimpleNamespace(headers={"Operation-Location": operation_location})

    def read_in_stream(stream, raw=False):
        calls.append(("read_in_stream", stream.read()))
        return SimpleNamespace(headers={"Operation-Location": operation_location})

    def get_read_result(operation_id):
        calls.append(("get_read_result", operation_id))
        return pending.pop(0)

    client = SimpleNamespace(
        read=read, read_in_stream=read_in_stream, get_read_result=get_read_result
    )
    return client, calls


def azure_response(status, pages=None):
    analyze_result = None
    if pages is not None:
        analyze_result = SimpleNamespace(read_results=[
            SimpleNamespace(lines=[SimpleNamespace(text=text) for text in page])
            for page in pages
        ])
    return SimpleNamespace(status=status, analyze_result=analyze_result)


class TestAzureReadBackend:

    def test_submit_url_returns_operation_id(self):
        client, calls = fake_azure_client([])
        backend = AzureReadBackend(client)

        assert backend.submit(REMOTE_IMAGE) == "abc-123"
        assert calls == [("read", "https://example.com/receipt.jpg")]

    def test_submit_bytes_uses_stream(self):
        client, calls = fake_azure_client([])
        AzureReadBackend(client).submit(LOCAL_IMAGE)
        assert calls == [("read_in_stream", b"fake image bytes")]

    def test_missing_operation_location(self):
        client, _ = fake_azure_client([], operation_location=None)
        with pytest.raises(OCRProcessingError):
            AzureReadBackend(client).submit(REMOTE_IMAGE)

    def test_polled_through_engine(self, sleeps):
        client, _ = fake_azure_client([
            azure_response("notStarted"),
            azure_response("running"),
            azure_response("succeeded", [["FRESH GROCERY MART", "Total 245.50"], ["Thank you"]]),
        ])

        corpus = make_engine(AzureReadBackend(client), sleeps).read_lines(REMOTE_IMAGE)

        assert corpus.lines == ("FRESH GROCERY MART", "Total 245.50", "Thank you")
        assert len(sleeps) == 2

    def test_failed_status(self):
        client, _ = fake_azure_client([azure_response("failed")])
        result = AzureReadBackend(client).get_result("abc-123")

        assert result.failed
        assert result.pages == []

    def test_from_environment_requires_credentials(self, monkeypatch):
        monkeypatch.delenv("AZURE_COMPUTER_VISION_ENDPOINT", raising=False)
        monkeypatch.delenv("AZURE_COMPUTER_VISION_KEY", raising=False)

        with pytest.raises(OCREngineNotAvailableError):
            AzureReadBackend.from_environment()

    def test_create_backend_azure_without_credentials(self, monkeypatch):
        monkeypatch.delenv("AZURE_COMPUTER_VISION_ENDPOINT", raising=False)
        monkeypatch.delenv("AZURE_COMPUTER_VISION_KEY", raising=False)

        with pytest.raises(OCREngineNotAvailableError):
            create_backend("azure")


class FakeTesseract:

    def __init__(self, text="", error=None, version_error=None):
        self.text = text
        self.error = error
        self.version_error = version_error
        self.calls = []

    def get_tesseract_version(self):
        if self.version_error:
            raise self.version_error
        return "5.3.0"

    def image_to_string(self, image, lang=None, config=None):
        self.calls.append((image.mode, lang, config))
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def png_image():
    buffer = io.BytesIO()
    Image.new("L", (40, 20), color=255).save(buffer, format="PNG")
    return ImageSource(data=buffer.getvalue(), origin="file", name="receipt.png")


class TestTesseractBackend:

    def test_submit_and_get_result(self, png_image):
        tesseract = FakeTesseract(text="  FRESH MART \n\n Total 20.00\n")
        backend = TesseractBackend(tesseract)

        operation_id = backend.submit(png_image)
        result = backend.get_result(operation_id)

        assert result.succeeded
        assert result.lines == ["FRESH MART", "Total 20.00"]
        assert tesseract.calls == [("RGB", "eng", "--psm 4 --oem 3")]

    def test_result_can_only_be_fetched_once(self, png_image):
        backend = TesseractBackend(FakeTesseract(text="A"))
        operation_id = backend.submit(png_image)
        backend.get_result(operation_id)

        with pytest.raises(OCRProcessingError):
            backend.get_result(operation_id)

    def test_ocr_exception_becomes_failed_job(self, png_image, sleeps):
        backend = TesseractBackend(FakeTesseract(error=RuntimeError("boom")))

        with pytest.raises(OCRJobFailedError):
            make_engine(backend, sleeps).read_lines(png_image)

    def test_missing_binary(self):
        with pytest.raises(OCREngineNotAvailableError):
            TesseractBackend(FakeTesseract(version_error=OSError("not found")))

    def test_remote_images_are_rejected(self):
        backend = TesseractBackend(FakeTesseract())
        with pytest.raises(OCRProcessingError):
            backend.submit(REMOTE_IMAGE)

    def test_unreadable_bytes(self):
        backend = TesseractBackend(FakeTesseract())
        with pytest.raises(OCRProcessingError):
            backend.submit(LOCAL_IMAGE)
