import pikepdf
import pytest

from invoice_extractor import ascii85
from invoice_extractor.inflate import inflate
from invoice_extractor.pdf_writer import (
    build_content_stream,
    build_invoice_pdf,
    escape_pdf_text,
    write_invoice_pdf,
)
from invoice_extractor.scanner import locate_stream


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Gross Amount ", b"Gross Amount "),
        ("(note)", b"\\(note\\)"),
        ("C:\\temp", b"C:\\\\temp"),
        ("caf\u00e9", b"caf\xe9"),
        ("\u20ac5", b" 5"),
    ],
)
def test_escape_pdf_text(text, expected):
    assert escape_pdf_text(text) == expected


def test_build_content_stream_one_literal_per_line():
    content = build_content_stream(["Tax Invoice", "13.94 CAD"])
    assert content.startswith(b"BT\n")
    assert content.endswith(b"ET\n")
    assert b"(Tax Invoice) Tj T*\n(13.94 CAD) Tj T*\n" in content


def test_stream_decodes_back_to_content(invoice_lines):
    document = build_invoice_pdf(invoice_lines)
    stream = locate_stream(document)
    payload = document[stream.start:stream.end]
    assert payload.endswith(b"~>")
    assert inflate(ascii85.decode(payload, stream.z_count)) == build_content_stream(invoice_lines)


def test_written_pdf_opens_in_pikepdf(invoice_lines, tmp_path):
    path = tmp_path / "trip.pdf"
    size = write_invoice_pdf(invoice_lines, path)
    assert size == path.stat().st_size

    with pikepdf.open(path) as pdf:
        assert len(pdf.pages) == 1
        page = pdf.pages[0]
        assert page.Contents.read_bytes() == build_content_stream(invoice_lines)
        assert page.Resources.Font.F1.BaseFont == pikepdf.Name.Helvetica
