"""
ascii85.py - ASCII85 (Base85) decoding as used by the PDF ASCII85Decode filter.

Every 4 bytes of binary data are encoded as 5 characters in the range
'!' (33) through 'u' (117): subtract 33 from each character, read the
five values as a base-85 number and write that number back out as four
base-256 digits. For example '6M<G#' is

    21*85**4 + 44*85**3 + 27*85**2 + 38*85 + 2 = 1,123,432,932 = 0x42f639e4

A group of four zero bytes is written as the single character 'z'. A final
group of n (1-3) bytes is zero-padded, encoded, and only its first n+1
characters are kept; decoding pads those with 'u' and keeps n bytes. The
data ends with the two-character EOD marker '~>'. White space anywhere
before the marker is ignored.
"""

import logging
from typing import Optional

from .errors import AllocationFailure, ExitStatus, MalformedBase85, MissingEodMarker
from .scanner import PDF_WHITESPACE

logger = logging.getLogger(__name__)

EOD_MARKER = b"~>"

ZERO_GROUP = ord("z")
PAD = ord("u")
FIRST_DIGIT = ord("!")
LAST_DIGIT = ord("u")

# Place values of the five digits, most significant first
POWERS_OF_85 = (85 ** 4, 85 ** 3, 85 ** 2, 85, 1)

MAX_GROUP_VALUE = 0xFFFFFFFF

_STRIP_WHITESPACE = bytes(PDF_WHITESPACE)


def decoded_capacity(encoded_length: int, z_count: int) -> int:
    """
    Upper bound on the decoded size.

    A plain group shrinks 5 bytes to 4 and a 'z' grows 1 byte to 4, so the
    input length plus 3 per 'z' is always enough.
    """
    return encoded_length + 3 * z_count


def _group_value(group: bytes, offset: int) -> int:
    total = 0
    for digit, power in zip(group, POWERS_OF_85):
        if digit < FIRST_DIGIT or digit > LAST_DIGIT:
            raise MalformedBase85(
                f"Byte 0x{digit:02x} near offset {offset} is not an ascii85 digit"
            )
        total += (digit - FIRST_DIGIT) * power
    if total > MAX_GROUP_VALUE:
        raise MalformedBase85(f"Group at offset {offset} exceeds 32 bits")
    return total


def _put_group(out: bytearray, pos: int, value: int, count: int = 4) -> int:
    """Write the first `count` base-256 digits of value at out[pos]."""
    digits = (
        (value >> 24) & 0xFF,
        (value >> 16) & 0xFF,
        (value >> 8) & 0xFF,
        value & 0xFF,
    )
    out[pos:pos + count] = bytes(digits[:count])
    return pos + count


def decode(data: bytes, z_count: Optional[int] = None) -> bytes:
    """
    Decode an ASCII85 stream terminated by '~>'.

    Args:
        data: Encoded bytes, EOD marker included as the last two bytes
        z_count: Number of 'z' bytes in data (counted here if not given)

    Returns:
        The decoded bytes

    Raises:
        MissingEodMarker: data does not end with '~>'
        MalformedBase85: a byte or group the encoding cannot produce
        AllocationFailure: the output buffer could not be allocated
    """
    if not data.endswith(EOD_MARKER):
        raise MissingEodMarker("EOD ('~>') missing at end of stream")

    encoded = bytes(data[:-len(EOD_MARKER)]).translate(None, _STRIP_WHITESPACE)
    if z_count is None:
        z_count = encoded.count(ZERO_GROUP)

    capacity = decoded_capacity(len(encoded), z_count)
    try:
        out = bytearray(capacity)
    except MemoryError as e:
        raise AllocationFailure(
            f"Failed to allocate {capacity:,} bytes for ascii85 output buffer",
            ExitStatus.BASE85_BUFFER_ALLOCATION,
        ) from e

    pos = 0
    i = 0
    length = len(encoded)
    while i < length and (length - i >= 5 or encoded[i] == ZERO_GROUP):
        if encoded[i] == ZERO_GROUP:
            out[pos:pos + 4] = b"\x00\x00\x00\x00"
            pos += 4
            i += 1
            continue
        group = encoded[i:i + 5]
        if ZERO_GROUP in group:
            raise MalformedBase85(f"'z' inside a group at offset {i}")
        pos = _put_group(out, pos, _group_value(group, i))
        i += 5

    left = length - i
    if left == 1:
        raise MalformedBase85("Final group holds a single character")
    if left:
        group = encoded[i:] + bytes([PAD]) * (5 - left)
        pos = _put_group(out, pos, _group_value(group, i), left - 1)

    logger.debug(f"ascii85: {len(data):,} encoded bytes -> {pos:,} decoded bytes")

    del out[pos:]
    return bytes(out)
