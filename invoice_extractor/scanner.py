"""
scanner.py - Locate the embedded stream inside an invoice PDF.

The invoice holds exactly one stream. Its payload starts at the first
non-whitespace byte after a line beginning with 'stream' and runs up to
the byte before the following 'endstream'.
"""

import logging
from dataclasses import dataclass

from .errors import (
    AllocationFailure,
    ExitStatus,
    StreamEmpty,
    StreamEndNotFound,
    StreamStartNotFound,
)

logger = logging.getLogger(__name__)

STREAM_START = b"\nstream"
STREAM_END = b"endstream"

# PDF white-space characters: NUL, HT, LF, FF, CR, SP
PDF_WHITESPACE = frozenset(b"\x00\t\n\x0c\r ")

ZERO_GROUP = ord("z")


@dataclass(frozen=True)
class StreamSlice:
    """Byte range [start, end) of the ASCII85 payload in the document."""
    start: int
    end: int
    z_count: int

    @property
    def length(self) -> int:
        return self.end - self.start


def locate_stream(document: bytes) -> StreamSlice:
    """
    Find the stream payload and count its 'z' shorthand bytes.

    Raises:
        StreamStartNotFound: no line starts with 'stream'
        StreamEndNotFound: no 'endstream' after it
        StreamEmpty: only white space between the two keywords
    """
    marker = document.find(STREAM_START)
    if marker < 0:
        raise StreamStartNotFound("Can't find start of stream in invoice")
    keyword_end = marker + len(STREAM_START)

    end = document.find(STREAM_END, keyword_end)
    if end < 0:
        raise StreamEndNotFound("Can't find end of stream in invoice")

    start = keyword_end
    while start < end and document[start] in PDF_WHITESPACE:
        start += 1
    if start >= end:
        raise StreamEmpty("Couldn't find start of ascii85 stream")

    z_count = document.count(ZERO_GROUP, start, end)
    logger.debug(f"Stream payload at [{start}, {end}): {end - start:,} bytes, {z_count} 'z'")

    return StreamSlice(start=start, end=end, z_count=z_count)


def copy_stream(document: bytes, stream: StreamSlice) -> bytearray:
    """Copy the payload out so the whole document can be released."""
    try:
        return bytearray(document[stream.start:stream.end])
    except MemoryError as e:
        raise AllocationFailure(
            f"Failed to allocate {stream.length:,} bytes for ascii85 input buffer",
            ExitStatus.STREAM_BUFFER_ALLOCATION,
        ) from e
