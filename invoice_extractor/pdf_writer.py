"""
pdf_writer.py - Single-stream invoice PDF assembly.

Writes the kind of document the extractor reads: one page whose only
stream is the page content, filtered through FlateDecode and then
ASCII85Decode, with one text literal per line. Useful for fixtures and
for checking the extractor against real PDF readers.
"""

import base64
import logging
import zlib
from pathlib import Path
from typing import Iterable, List

from .ascii85 import EOD_MARKER

logger = logging.getLogger(__name__)

# US Letter, in points
PAGE_WIDTH_PTS = 612
PAGE_HEIGHT_PTS = 792

FONT_SIZE = 10
LEADING = 14
MARGIN_PTS = 50

# ASCII85 line width inside the stream
WRAP_COLUMNS = 75


def escape_pdf_text(text: str) -> bytes:
    """Escape special characters for a PDF string literal."""
    result = text.replace("\\", "\\\\")
    result = result.replace("(", "\\(")
    result = result.replace(")", "\\)")
    # WinAnsiEncoding stand-in: anything outside latin-1 becomes a space
    filtered = ""
    for c in result:
        try:
            c.encode("latin-1")
            filtered += c
        except UnicodeEncodeError:
            filtered += " "
    return filtered.encode("latin-1")


def build_content_stream(lines: Iterable[str]) -> bytes:
    """Content stream drawing each line with Helvetica, top to bottom."""
    parts = [
        b"BT",
        f"/F1 {FONT_SIZE} Tf".encode("ascii"),
        f"{LEADING} TL".encode("ascii"),
        f"{MARGIN_PTS} {PAGE_HEIGHT_PTS - MARGIN_PTS} Td".encode("ascii"),
    ]
    for line in lines:
        parts.append(b"(" + escape_pdf_text(line) + b") Tj T*")
    parts.append(b"ET")
    return b"\n".join(parts) + b"\n"


def encode_stream(content: bytes, level: int = 9) -> bytes:
    """Flate-compress, then ASCII85-encode with the '~>' end marker."""
    compressed = zlib.compress(content, level)
    return base64.a85encode(compressed, wrapcol=WRAP_COLUMNS) + EOD_MARKER


class PDFWriter:
    """
    Assembles a one-page, one-stream PDF.

    Objects are written in number order and the cross-reference table is
    built from their byte offsets.
    """

    def __init__(self):
        self.objects: List[bytes] = []

    def add_object(self, body: bytes) -> int:
        """Add an object body; returns its object number."""
        self.objects.append(body)
        return len(self.objects)

    def add_stream(self, data: bytes, filters: str) -> int:
        # '~>' runs straight into 'endstream' with no end-of-line
        header = f"<< /Length {len(data)} /Filter {filters} >>\nstream\n".encode("ascii")
        return self.add_object(header + data + b"endstream")

    def to_bytes(self) -> bytes:
        out = bytearray(b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n")
        offsets = []
        for number, body in enumerate(self.objects, 1):
            offsets.append(len(out))
            out.extend(f"{number} 0 obj\n".encode("ascii"))
            out.extend(body)
            out.extend(b"\nendobj\n")

        xref_pos = len(out)
        size = len(self.objects) + 1
        out.extend(f"xref\n0 {size}\n".encode("ascii"))
        out.extend(b"0000000000 65535 f \n")
        for offset in offsets:
            out.extend(f"{offset:010d} 00000 n \n".encode("ascii"))
        out.extend(f"trailer\n<< /Size {size} /Root 1 0 R >>\n".encode("ascii"))
        out.extend(f"startxref\n{xref_pos}\n%%EOF\n".encode("ascii"))
        return bytes(out)


def build_invoice_pdf(lines: Iterable[str]) -> bytes:
    """Return the bytes of a one-page invoice PDF showing `lines`."""
    lines = list(lines)
    writer = PDFWriter()
    writer.add_object(b"<< /Type /Catalog /Pages 2 0 R >>")
    writer.add_object(b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>")
    writer.add_object(
        f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {PAGE_WIDTH_PTS} {PAGE_HEIGHT_PTS}] "
        f"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>".encode("ascii")
    )
    writer.add_object(
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>"
    )
    content = build_content_stream(lines)
    writer.add_stream(encode_stream(content), "[/ASCII85Decode /FlateDecode]")

    logger.debug(f"Built invoice PDF: {len(lines)} lines, {len(content):,} content bytes")
    return writer.to_bytes()


def write_invoice_pdf(lines: Iterable[str], output_path: Path) -> int:
    """
    Create an invoice PDF on disk.

    Returns output file size in bytes.
    """
    output_path = Path(output_path)
    output_path.write_bytes(build_invoice_pdf(lines))
    size = output_path.stat().st_size
    logger.info(f"Saved sample invoice to {output_path} ({size:,} bytes)")
    return size
