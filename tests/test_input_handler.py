import base64
from pathlib import Path

import pytest

from receipt_ocr.input_handler import ImageSource, InputHandler
from receipt_ocr.utils.exceptions import (
    CorruptedFileError,
    InputError,
    InputFileNotFoundError,
    UnsupportedFileTypeError,
)


@pytest.fixture
def handler():
    return InputHandler()


def test_remote_url_is_passed_through(handler):
    source = handler.load("https://example.com/receipt.jpg")

    assert source.is_remote
    assert source.url == "https://example.com/receipt.jpg"
    assert source.data is None
    assert source.origin == "url"


def test_data_url_is_decoded(handler):
    payload = base64.b64encode(b"\x89PNG fake").decode("ascii")
    source = handler.load(f"data:image/png;base64,{payload}")

    assert not source.is_remote
    assert source.data == b"\x89PNG fake"
    assert source.origin == "data_url"


@pytest.mark.parametrize("value", ["data:image/png;base64,", "data:image/png;base64,@@not-base64@@"])
def test_bad_data_url(handler, value):
    with pytest.raises(CorruptedFileError):
        handler.load(value)


@pytest.mark.parametrize("value", ["", "   "])
def test_empty_input_is_rejected(handler, value):
    with pytest.raises(InputError):
        handler.load(value)


def test_local_file(handler, tmp_path):
    image = tmp_path / "receipt.JPG"
    image.write_bytes(b"jpeg bytes")

    source = handler.load(str(image))

    assert source == ImageSource(data=b"jpeg bytes", origin="file", name="receipt.JPG")


def test_path_objects_are_accepted(handler, tmp_path):
    image = tmp_path / "receipt.png"
    image.write_bytes(b"png bytes")
    assert handler.load(image).data == b"png bytes"


def test_missing_file(handler, tmp_path):
    with pytest.raises(InputFileNotFoundError):
        handler.load(str(tmp_path / "missing.jpg"))


def test_unsupported_extension(handler, tmp_path):
    document = tmp_path / "receipt.pdf"
    document.write_bytes(b"%PDF")

    with pytest.raises(UnsupportedFileTypeError) as exc_info:
        handler.load(str(document))

    assert exc_info.value.details["file_type"] == ".pdf"


def test_empty_file(handler, tmp_path):
    image = tmp_path / "receipt.png"
    image.write_bytes(b"")

    with pytest.raises(CorruptedFileError):
        handler.load(image)


def test_is_supported(handler):
    assert handler.is_supported("scan.TIFF")
    assert not handler.is_supported(Path("notes.txt"))
