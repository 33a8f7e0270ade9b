"""
fields.py - Turn the accumulated invoice text into CSV rows.

The text report holds one block per invoice, each followed by a separator
row of '=' characters. A block starts at its 'Issued on behalf of' line.
Every field sits at a fixed anchor phrase inside the block.
"""

import csv
import logging
from dataclasses import astuple, dataclass
from pathlib import Path
from typing import List, Optional

from .errors import (
    EnvironmentFailure,
    ExitStatus,
    InvoiceBlockNotFound,
    InvoiceBlockUnterminated,
    MissingInvoiceField,
)

logger = logging.getLogger(__name__)

BLOCK_START = "===\nIssued on behalf of "
BLOCK_END = "\n==="
ISSUED = "Issued on behalf of "

CSV_HEADER = (
    "InvoiceNumber", "InvoiceDate", "TaxPointDate", "Restaurant",
    "GSTNumber", "TotalNet", "TotalHST", "GrossAmt",
)

NOT_SPECIFIED = "notSpecified"
ZERO_AMOUNT = "0.00"

# Restaurant names longer than this are cut
RESTAURANT_MAX = 50

# The report is written byte for byte from the PDF strings
REPORT_ENCODING = "latin-1"


@dataclass
class InvoiceRecord:
    """One invoice's row in the CSV file."""
    invoice_number: str
    invoice_date: str
    tax_point_date: str
    restaurant: str
    gst_number: str
    total_net: str
    total_hst: str
    gross_amount: str

    def as_row(self) -> List[str]:
        return list(astuple(self))


def split_invoices(text: str) -> List[str]:
    """
    Cut the report into invoice blocks.

    A block runs from the 'I' of its 'Issued on behalf of' line up to the
    character before the newline of the next separator row.
    """
    if text.startswith(ISSUED):
        # first invoice of a report that was not started with a separator
        text = "===\n" + text

    pos = text.find(BLOCK_START)
    if pos < 0:
        raise InvoiceBlockNotFound("Couldn't find beginning of first invoice")

    blocks = []
    while pos >= 0:
        start = pos + len("===\n")
        end = text.find(BLOCK_END, start)
        if end < 0:
            raise InvoiceBlockUnterminated(
                f"Couldn't find the end of invoice #{len(blocks) + 1}"
            )
        blocks.append(text[start:end])
        pos = text.find(BLOCK_START, end)
    return blocks


def _rest_of_line(block: str, anchor: str) -> Optional[str]:
    at = block.find(anchor)
    if at < 0:
        return None
    start = at + len(anchor)
    end = block.find("\n", start)
    return block[start:] if end < 0 else block[start:end]


def _amount_after(block: str, anchor: str) -> Optional[str]:
    # amounts start the line after the label and end at the first blank
    line = _rest_of_line(block, anchor)
    if line is None:
        return None
    return line.split(" ", 1)[0]


def _tax_point_date(block: str) -> str:
    # Only invoices with a 'Delivery service' line carry a tax point date;
    # it is the whole line above that one.
    at = block.find("\nDelivery service")
    if at < 0:
        return NOT_SPECIFIED
    line = block[block.rfind("\n", 0, at) + 1:at]
    return line[:-1] if line.endswith(" ") else line


def _restaurant(block: str) -> Optional[str]:
    at = block.find("\nUber Portier B.V.")
    if at < 0:
        return None
    start = block.find("\n", at + 1)
    if start < 0:
        return ""
    name = _rest_of_line(block[start:], "\n")
    return name[:RESTAURANT_MAX]


def parse_invoice(block: str) -> InvoiceRecord:
    """
    Extract one invoice's fields.

    Raises:
        MissingInvoiceField: a required anchor is absent
    """
    number = _rest_of_line(block, "\nInvoice Number:  ")
    if number is None:
        raise MissingInvoiceField("Invoice found without an invoice number")

    def required(value: Optional[str], what: str) -> str:
        if value is None:
            raise MissingInvoiceField(f"Invoice {number} does not contain {what}")
        return value

    record = InvoiceRecord(
        invoice_number=number,
        invoice_date=required(_rest_of_line(block, "\nInvoice Date:  "), "an invoice date"),
        tax_point_date=_tax_point_date(block),
        restaurant=required(_restaurant(block), "'Uber Portier B.V.'"),
        gst_number=required(
            _rest_of_line(block, "\nGST Registration Number: "), "a GST registration number"
        ),
        total_net=required(_amount_after(block, "\nTotal Net \n"), "a net amount"),
        total_hst=_amount_after(block, "\nTotal HST Amount \n") or ZERO_AMOUNT,
        gross_amount=required(_amount_after(block, "\nGross Amount \n"), "a gross amount"),
    )
    return record


def read_report(report_path: Path) -> str:
    try:
        return Path(report_path).read_text(encoding=REPORT_ENCODING)
    except OSError as e:
        raise EnvironmentFailure(
            f"Opening raw text file {report_path} failed: {e}",
            ExitStatus.TEXT_REPORT_READ_FAILED,
        ) from e


def write_csv(csv_path: Path, records: List[InvoiceRecord]) -> None:
    """Write the header and one row per invoice; commas and quotes are quoted."""
    try:
        with open(csv_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for record in records:
                writer.writerow(record.as_row())
    except OSError as e:
        raise EnvironmentFailure(
            f"Error writing to CSV file {csv_path}: {e}",
            ExitStatus.CSV_WRITE_FAILED,
        ) from e


def tabulate(report_path: Path, csv_path: Path) -> List[InvoiceRecord]:
    """Build the CSV table from a text report; returns the records written."""
    blocks = split_invoices(read_report(report_path))
    records = []
    for i, block in enumerate(blocks, 1):
        record = parse_invoice(block)
        logger.debug(f"Invoice {i}: {record.invoice_number}")
        records.append(record)

    write_csv(csv_path, records)
    logger.info(f"Wrote {len(records)} invoices to {Path(csv_path).name}")
    return records
