"""
inflate.py - zlib decompression of the decoded stream.

The output capacity is a fixed multiple of the compressed size and the
whole stream has to come out of a single decompress call. Running out of
room is a hard failure, not a reason to grow the buffer and retry.
"""

import logging
import zlib

from .config import DEFAULT_INFLATE_RATIO
from .errors import (
    AllocationFailure,
    DecompressorFinalizeFailed,
    DecompressorInitFailed,
    ExitStatus,
    IncompatibleDecompressor,
    UnexpectedDecompressorStatus,
)

logger = logging.getLogger(__name__)


def check_zlib_version() -> None:
    """
    Make sure the runtime zlib matches the one Python was built against.

    A different major version is fatal; any other difference is only
    worth a warning.
    """
    built = zlib.ZLIB_VERSION
    runtime = zlib.ZLIB_RUNTIME_VERSION
    if built.split(".")[0] != runtime.split(".")[0]:
        raise IncompatibleDecompressor(
            f"Incompatible zlib version: built against {built}, runtime {runtime}"
        )
    if built != runtime:
        logger.warning(f"Different zlib version: built against {built}, runtime {runtime}")


def inflate(compressed: bytes, ratio: int = DEFAULT_INFLATE_RATIO) -> bytes:
    """
    Decompress a complete zlib stream.

    Args:
        compressed: zlib data (header, deflate blocks, checksum)
        ratio: Output capacity as a multiple of len(compressed)

    Returns:
        The decompressed bytes

    Raises:
        DecompressorInitFailed: the decompressor could not be set up
        UnexpectedDecompressorStatus: corrupt data, or the stream did not
            end within the capacity
        DecompressorFinalizeFailed: flushing the decompressor failed
        AllocationFailure: the capacity is too large to allocate
    """
    capacity = ratio * len(compressed)
    try:
        decompressor = zlib.decompressobj()
    except MemoryError as e:
        raise AllocationFailure(
            f"Failed to allocate inflate state for {capacity:,} bytes of output",
            ExitStatus.INFLATE_BUFFER_ALLOCATION,
        ) from e
    except zlib.error as e:
        raise DecompressorInitFailed(f"zlib decompressobj() failed: {e}") from e

    try:
        content = decompressor.decompress(compressed, capacity)
    except MemoryError as e:
        raise AllocationFailure(
            f"Failed to allocate {capacity:,} bytes for inflate output buffer",
            ExitStatus.INFLATE_BUFFER_ALLOCATION,
        ) from e
    except zlib.error as e:
        raise UnexpectedDecompressorStatus(f"Unexpected status from zlib: {e}") from e

    if not decompressor.eof:
        if decompressor.unconsumed_tail:
            raise UnexpectedDecompressorStatus(
                f"Output exceeds {ratio}x the input ({capacity:,} bytes); "
                f"{len(decompressor.unconsumed_tail):,} input bytes left"
            )
        raise UnexpectedDecompressorStatus("zlib stream ended before its end marker")
    if decompressor.unused_data:
        raise UnexpectedDecompressorStatus(
            f"{len(decompressor.unused_data):,} bytes follow the end of the zlib stream"
        )

    try:
        tail = decompressor.flush()
    except zlib.error as e:
        raise DecompressorFinalizeFailed(f"zlib flush() failed: {e}") from e
    if tail:
        raise DecompressorFinalizeFailed(f"zlib flush() produced {len(tail):,} extra bytes")

    logger.debug(f"inflate: {len(compressed):,} bytes -> {len(content):,} bytes")
    return content
