"""
errors.py - Failure classes and their process exit statuses.

Every failure is fatal. Each exception carries the exit status the CLI
terminates with, so calling scripts can branch on the cause without
parsing messages.
"""

from enum import IntEnum


class ExitStatus(IntEnum):
    """Stable process exit statuses, one per failure class."""
    OK = 0
    USAGE = 1
    INVOICE_NAME_TOO_LONG = 2
    REPORT_NAME_TOO_LONG = 3
    NO_64BIT_INTEGERS = 4  # reserved, Python integers are unbounded
    INCOMPATIBLE_ZLIB = 5
    INVOICE_OPEN_FAILED = 6
    INVOICE_BUFFER_ALLOCATION = 7
    STREAM_START_NOT_FOUND = 8
    STREAM_END_NOT_FOUND = 9
    STREAM_EMPTY = 10
    STREAM_BUFFER_ALLOCATION = 11
    BASE85_BUFFER_ALLOCATION = 12
    BASE85_DECODE_FAILED = 13
    INFLATE_BUFFER_ALLOCATION = 14
    DECOMPRESSOR_INIT_FAILED = 15
    UNEXPECTED_DECOMPRESSOR_STATUS = 16
    DECOMPRESSOR_FINALIZE_FAILED = 17
    REPORT_WRITE_FAILED = 18
    UNTERMINATED_LITERAL = 19
    TEXT_REPORT_READ_FAILED = 20
    INVOICE_BLOCK_NOT_FOUND = 21
    INVOICE_BLOCK_UNTERMINATED = 22
    MISSING_INVOICE_FIELD = 23
    CSV_WRITE_FAILED = 24
    CSV_READ_FAILED = 25
    BAD_AMOUNT = 26
    BAD_TAX_YEAR = 27
    SUMMARY_WRITE_FAILED = 28


class InvoiceExtractorError(Exception):
    """Base class for every failure the tool reports."""
    exit_status = ExitStatus.USAGE

    def __init__(self, message: str, exit_status: ExitStatus = None):
        super().__init__(message)
        if exit_status is not None:
            self.exit_status = exit_status


# Usage errors: detected before any file is touched

class UsageError(InvoiceExtractorError):
    exit_status = ExitStatus.USAGE


class NameTooLong(UsageError):
    """A file name given on the command line exceeds the allowed length."""


class BadTaxYear(UsageError):
    exit_status = ExitStatus.BAD_TAX_YEAR


# Environment errors: I/O and allocation

class EnvironmentFailure(InvoiceExtractorError):
    pass


class AllocationFailure(EnvironmentFailure):
    """A working buffer could not be obtained."""


class IncompatibleDecompressor(EnvironmentFailure):
    exit_status = ExitStatus.INCOMPATIBLE_ZLIB


# Format errors: unsupported or corrupt input

class FormatError(InvoiceExtractorError):
    pass


class StreamStartNotFound(FormatError):
    exit_status = ExitStatus.STREAM_START_NOT_FOUND


class StreamEndNotFound(FormatError):
    exit_status = ExitStatus.STREAM_END_NOT_FOUND


class StreamEmpty(FormatError):
    exit_status = ExitStatus.STREAM_EMPTY


class Base85Error(FormatError):
    exit_status = ExitStatus.BASE85_DECODE_FAILED


class MissingEodMarker(Base85Error):
    """The ASCII85 data does not end with '~>'."""


class MalformedBase85(Base85Error):
    """The ASCII85 data holds bytes or groups the encoding cannot produce."""


class DecompressorInitFailed(FormatError):
    exit_status = ExitStatus.DECOMPRESSOR_INIT_FAILED


class UnexpectedDecompressorStatus(FormatError):
    exit_status = ExitStatus.UNEXPECTED_DECOMPRESSOR_STATUS


class DecompressorFinalizeFailed(FormatError):
    exit_status = ExitStatus.DECOMPRESSOR_FINALIZE_FAILED


class UnterminatedLiteral(FormatError):
    """The content stream ends inside a parenthesised string."""
    exit_status = ExitStatus.UNTERMINATED_LITERAL


class InvoiceBlockNotFound(FormatError):
    exit_status = ExitStatus.INVOICE_BLOCK_NOT_FOUND


class InvoiceBlockUnterminated(FormatError):
    exit_status = ExitStatus.INVOICE_BLOCK_UNTERMINATED


class MissingInvoiceField(FormatError):
    exit_status = ExitStatus.MISSING_INVOICE_FIELD


class BadAmount(FormatError):
    exit_status = ExitStatus.BAD_AMOUNT
