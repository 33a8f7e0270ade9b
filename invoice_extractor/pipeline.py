"""
pipeline.py - Invoice text extraction pipeline.

Pipeline:
1. Read the whole invoice PDF
2. Isolate its only stream (scanner)
3. ASCII85-decode the stream
4. zlib-inflate the decoded bytes
5. Keep the text literals (content FSA)
6. Append the text and a separator row to the report

Every stage finishes before the next starts. The report is only touched
once the whole invoice has been decoded, so a failing invoice leaves no
partial block behind.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import ascii85
from .config import ExtractionConfig
from .content import extract_text
from .errors import (
    AllocationFailure,
    EnvironmentFailure,
    ExitStatus,
    InvoiceExtractorError,
)
from .inflate import check_zlib_version, inflate
from .scanner import copy_stream, locate_stream

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Result of extracting one invoice."""
    invoice_path: Path
    report_path: Path
    success: bool
    error: Optional[str] = None
    exit_status: ExitStatus = ExitStatus.OK

    invoice_size: int = 0
    stream_size: int = 0
    decoded_size: int = 0
    inflated_size: int = 0
    text_size: int = 0
    line_count: int = 0
    total_time: float = 0.0

    @property
    def expansion(self) -> float:
        if self.decoded_size == 0:
            return 0
        return self.inflated_size / self.decoded_size

    def summary(self) -> str:
        return (
            f"Invoice: {self.invoice_path.name} ({self.invoice_size:,} bytes)\n"
            f"Stream:  {self.stream_size:,} ascii85 -> {self.decoded_size:,} zlib "
            f"-> {self.inflated_size:,} content bytes ({self.expansion:.1f}x)\n"
            f"Text:    {self.line_count} lines, {self.text_size:,} bytes -> {self.report_path.name}\n"
            f"Time:    {self.total_time:.3f}s"
        )


def read_invoice(path: Path) -> bytes:
    """Read the whole invoice into memory."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except MemoryError as e:
        raise AllocationFailure(
            f"Failed to allocate memory for invoice {path}",
            ExitStatus.INVOICE_BUFFER_ALLOCATION,
        ) from e
    except OSError as e:
        raise EnvironmentFailure(
            f"Error opening file {path} for reading: {e}",
            ExitStatus.INVOICE_OPEN_FAILED,
        ) from e


def decode_invoice(document: bytes, inflate_ratio: int, result: ExtractionResult) -> bytes:
    """Run the decode stages on an in-memory invoice and return its text."""
    result.invoice_size = len(document)
    logger.debug(f"Read {result.invoice_path.name}: {result.invoice_size:,} bytes")

    stream = locate_stream(document)
    payload = copy_stream(document, stream)
    result.stream_size = len(payload)

    compressed = ascii85.decode(payload, stream.z_count)
    result.decoded_size = len(compressed)
    del payload

    content = inflate(compressed, inflate_ratio)
    result.inflated_size = len(content)
    del compressed

    text = extract_text(content)
    result.text_size = len(text)
    result.line_count = text.count(b"\n") + (1 if text and not text.endswith(b"\n") else 0)
    return text


def append_report(report_path: Path, text: bytes, separator: bytes) -> None:
    """Append one invoice's text block and its separator row."""
    try:
        with open(report_path, "ab") as f:
            f.write(text)
            f.write(separator)
    except OSError as e:
        raise EnvironmentFailure(
            f"Error opening file {report_path} for appending: {e}",
            ExitStatus.REPORT_WRITE_FAILED,
        ) from e


def extract_invoice(config: ExtractionConfig) -> ExtractionResult:
    """
    Extract the text of one invoice and append it to the report.

    Args:
        config: Paths and limits for this run

    Returns:
        ExtractionResult; on failure success is False and exit_status
        names the cause
    """
    invoice_path = Path(config.invoice_path)
    report_path = Path(config.report_path)

    result = ExtractionResult(
        invoice_path=invoice_path,
        report_path=report_path,
        success=False
    )

    try:
        start_time = time.time()

        config.validate()
        check_zlib_version()

        text = decode_invoice(read_invoice(invoice_path), config.inflate_ratio, result)

        append_report(report_path, text, config.separator)

        result.success = True
        result.total_time = time.time() - start_time

        logger.info(f"Extracted {invoice_path.name}: {result.line_count} lines appended to {report_path.name}")

    except InvoiceExtractorError as e:
        logger.error(f"{invoice_path.name}: {e}")
        result.error = str(e)
        result.exit_status = e.exit_status

    return result
