"""
config.py - Settings for one extraction run.

Everything derived from the command line travels in an ExtractionConfig
value handed to the pipeline; nothing is kept at module level.
"""

from dataclasses import dataclass
from pathlib import Path

from .errors import ExitStatus, NameTooLong, UsageError

# Inflate capacity as a multiple of the compressed length. Decompression
# must finish within it in one call.
DEFAULT_INFLATE_RATIO = 20

# Longest file name accepted on the command line
MAX_NAME_LENGTH = 199

# Written after every invoice's text to mark the document boundary
SEPARATOR = b"=" * 96 + b"\n"


@dataclass(frozen=True)
class ExtractionConfig:
    """Inputs of one `extract` run."""
    invoice_path: Path
    report_path: Path
    inflate_ratio: int = DEFAULT_INFLATE_RATIO
    max_name_length: int = MAX_NAME_LENGTH
    separator: bytes = SEPARATOR

    def validate(self) -> "ExtractionConfig":
        """Reject oversized names and nonsensical ratios before any I/O."""
        if len(str(self.invoice_path)) > self.max_name_length:
            raise NameTooLong(
                f"Invoice name too long (max {self.max_name_length} characters)",
                ExitStatus.INVOICE_NAME_TOO_LONG,
            )
        if len(str(self.report_path)) > self.max_name_length:
            raise NameTooLong(
                f"Report file name too long (max {self.max_name_length} characters)",
                ExitStatus.REPORT_NAME_TOO_LONG,
            )
        if self.inflate_ratio < 1:
            raise UsageError(f"Inflate ratio must be positive, got {self.inflate_ratio}")
        return self


def check_name_length(name, limit: int = MAX_NAME_LENGTH, what: str = "File") -> None:
    """Usage check shared by the tabulate and summarize commands."""
    if len(str(name)) > limit:
        raise NameTooLong(f"{what} name too long (max {limit} characters)")
