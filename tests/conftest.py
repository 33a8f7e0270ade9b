import pytest

from invoice_extractor.pdf_writer import encode_stream, write_invoice_pdf


def _invoice_lines(number="UBER-CA-0001", net="12.34", hst="1.60", gross="13.94"):
    lines = [
        "Issued on behalf of Joe's Pizza",
        "Tax Invoice",
        f"Invoice Number:  {number}",
        "Invoice Date:  March 3, 2021",
        "Tax Point Date",
        "March 3, 2021 ",
        "Delivery service ",
        "Uber Portier B.V.",
        "Joe's Pizza, Downtown",
        "GST Registration Number: 123456789RT0001",
        "Total Net ",
        f"{net} CAD",
    ]
    if hst is not None:
        lines += ["Total HST Amount ", f"{hst} CAD"]
    lines += ["Gross Amount ", f"{gross} CAD"]
    return lines


@pytest.fixture
def invoice_lines():
    return _invoice_lines()


@pytest.fixture
def make_invoice(tmp_path):
    """Write a sample invoice PDF; returns its path."""
    counter = {"n": 0}

    def _make(lines=None, **fields):
        counter["n"] += 1
        path = tmp_path / f"trip_{counter['n']:04d}.pdf"
        write_invoice_pdf(lines if lines is not None else _invoice_lines(**fields), path)
        return path

    return _make


@pytest.fixture
def make_raw_invoice(tmp_path):
    """Write a one-stream PDF around an arbitrary content stream or payload."""

    def _make(content=None, payload=None, name="raw.pdf"):
        if payload is None:
            payload = encode_stream(content)
        data = (
            b"%PDF-1.4\n1 0 obj\n<< /Length " + str(len(payload)).encode("ascii")
            + b" /Filter [/ASCII85Decode /FlateDecode] >>\nstream\n"
            + payload + b"endstream\nendobj\n%%EOF\n"
        )
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _make
