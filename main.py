#!/usr/bin/env python3
"""
Receipt OCR Extraction System - Main Entry Point.

Reads a receipt image (or a file of already recognised text lines),
extracts merchant, amount, date and category, and prints the draft as
JSON. The draft can optionally be stored as an expense.

Usage:
    Command Line:
        python main.py --input receipt.jpg
        python main.py --input https://example.com/receipt.jpg --backend azure
        python main.py --lines-file receipt.txt --save --notes "team lunch"

    Python:
        from main import run_extraction
        draft = run_extraction(image="receipt.jpg")

Author: ML Engineering Team
Version: 1.0.0
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from config import ConfigurationManager
from receipt_ocr.extraction import ExtractionDraft, LineCorpus, ReceiptExtractor
from receipt_ocr.input_handler import InputHandler
from receipt_ocr.ocr_engine import OCREngine, create_backend
from receipt_ocr.output_handler import ExpenseStore
from receipt_ocr.utils.exceptions import OCRJobFailedError, ReceiptExtractionError
from receipt_ocr.utils.logger import setup_logger_from_config, get_logger


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Receipt OCR Extraction System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Extract from an image:
        python main.py --input receipt.jpg

    Extract from recognised text lines and store the expense:
        python main.py --lines-file receipt.txt --save
        """
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input", "-i",
        type=str,
        help="Receipt image: file path, http(s) URL or base64 data URL"
    )
    source.add_argument(
        "--lines-file", "-l",
        type=str,
        help="Text file with one OCR line per line (skips OCR)"
    )

    parser.add_argument(
        "--backend", "-b",
        choices=["azure", "tesseract"],
        default=None,
        help="OCR backend (default: ocr.backend from configuration)"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    parser.add_argument(
        "--save",
        action="store_true",
        help="Store the extracted draft as an expense"
    )

    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Path to the expense database (default from configuration)"
    )

    parser.add_argument(
        "--notes",
        type=str,
        default=None,
        help="Notes stored with the expense (with --save)"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        logger.setLevel(logging.DEBUG)
        for handler in logger.handlers:
            handler.setLevel(logging.DEBUG)

    logger.info(f"Receipt OCR v{config.get('project.version', '1.0.0')}")
    return config


def read_lines_file(path: str) -> LineCorpus:
    """
    Load OCR lines from a UTF-8 text file.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    text = Path(path).read_text(encoding='utf-8-sig')
    return LineCorpus.from_lines(text.splitlines())


def run_extraction(
    image: Optional[str] = None,
    lines: Optional[LineCorpus] = None,
    backend_name: Optional[str] = None
) -> ExtractionDraft:
    """
    Run the receipt extraction pipeline.

    Exactly one of ``image`` or ``lines`` must be given.

    Args:
        image: Image path, URL or data URL to OCR.
        lines: Already recognised lines.
        backend_name: OCR backend name for images.

    Returns:
        ExtractionDraft for the receipt.

    Raises:
        OCRJobFailedError: If OCR failed; no draft is produced.
    """
    logger = get_logger(__name__)

    if (image is None) == (lines is None):
        raise ValueError("Provide either an image or lines")

    if lines is None:
        source = InputHandler().load(image)
        engine = OCREngine(create_backend(backend_name))
        lines = engine.read_lines(source)

    logger.debug(f"Running extraction on {len(lines)} lines")
    return ReceiptExtractor().extract(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code (0 success, 1 error, 2 OCR unavailable, 130 interrupted).
    """
    try:
        args = parse_arguments(argv)
        initialize_system(args)
        logger = get_logger(__name__)

        lines = read_lines_file(args.lines_file) if args.lines_file else None
        draft = run_extraction(image=args.input, lines=lines, backend_name=args.backend)

        print(draft.to_json())

        if args.save:
            receipt_url = args.input if args.input and args.input.startswith("http") else None
            expense = ExpenseStore(args.db).insert_draft(
                draft, notes=args.notes, receipt_url=receipt_url
            )
            logger.info(f"Saved expense {expense['id']}")

        return 0

    except OCRJobFailedError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    except (ReceiptExtractionError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
