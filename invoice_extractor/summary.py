"""
summary.py - Yearly totals over the invoice CSV.

Amounts are summed as integer cents so the totals are exact.
"""

import csv
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import BadAmount, BadTaxYear, EnvironmentFailure, ExitStatus

logger = logging.getLogger(__name__)

AMOUNT_RE = re.compile(r"^(?P<dollars>\d+)\.(?P<cents>\d{2})$")

RULE = "=" * 87


@dataclass
class InvoiceTotals:
    """Running totals, in cents, over all invoices and the HST subset."""
    invoices: int = 0
    invoices_with_hst: int = 0
    net_all: int = 0
    gross_all: int = 0
    net_with_hst: int = 0
    hst: int = 0
    gross_with_hst: int = 0

    def add(self, net: int, hst: int, gross: int) -> None:
        self.invoices += 1
        self.net_all += net
        self.gross_all += gross
        if hst:
            self.invoices_with_hst += 1
            self.net_with_hst += net
            self.hst += hst
            self.gross_with_hst += gross


def to_cents(value: str) -> int:
    """'12.34' -> 1234."""
    match = AMOUNT_RE.match(value)
    if not match:
        raise ValueError(value)
    return int(match.group("dollars")) * 100 + int(match.group("cents"))


def format_dollars(cents: int) -> str:
    return f"{cents // 100}.{cents % 100:02d}".rjust(9)


def read_totals(csv_path: Path) -> InvoiceTotals:
    """
    Sum the last three columns (net, HST, gross) of every data row.

    Raises:
        BadAmount: an amount is not in 'dollars.cents' form
        EnvironmentFailure: the CSV file cannot be read
    """
    totals = InvoiceTotals()
    try:
        with open(csv_path, newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            next(reader, None)  # header
            for row in reader:
                if not row:
                    continue
                amounts = []
                for column, value in zip(("net amount", "HST", "gross amount"), row[-3:]):
                    try:
                        amounts.append(to_cents(value))
                    except ValueError:
                        raise BadAmount(
                            f"{','.join(row)}\nFormat of {column} value in above line is incorrect"
                        ) from None
                if len(amounts) != 3:
                    raise BadAmount(f"{','.join(row)}\nLine has fewer than three amounts")
                totals.add(*amounts)
    except (OSError, csv.Error) as e:
        raise EnvironmentFailure(
            f"Error reading CSV file {csv_path}: {e}",
            ExitStatus.CSV_READ_FAILED,
        ) from e
    return totals


def format_summary(totals: InvoiceTotals, tax_year: str, report_date: str) -> str:
    lines = [
        f"Trip invoice summary for tax year {tax_year}        Report date: {report_date}",
        RULE,
        "",
        f"{totals.invoices} trip invoices were found for this tax year.",
        f"{totals.invoices_with_hst} of them had HST applied.",
    ]
    sections = (
        ("Totals for ALL trip invoices", totals.net_all, totals.gross_all),
        ("Totals for ONLY the trip invoices that have HST applied",
         totals.net_with_hst, totals.gross_with_hst),
    )
    for title, net, gross in sections:
        lines += [
            "",
            title,
            "=" * len(title),
            f"     Net: $ {format_dollars(net)}",
            f"Plus HST: $ {format_dollars(totals.hst)}",
            "          ===========",
            f"   Total: $ {format_dollars(gross)}",
        ]
    return "\n".join(lines) + "\n"


def summarize(tax_year: str, report_date: str, csv_path: Path, summary_path: Path) -> InvoiceTotals:
    """Write the summary report for one tax year's CSV."""
    if len(tax_year) != 4 or not tax_year.isdigit():
        raise BadTaxYear(f"Tax year must be 4 digits, got {tax_year!r}")

    totals = read_totals(csv_path)
    text = format_summary(totals, tax_year, report_date)
    try:
        Path(summary_path).write_text(text, encoding="utf-8")
    except OSError as e:
        raise EnvironmentFailure(
            f"Opening of summary report file {summary_path} failed: {e}",
            ExitStatus.SUMMARY_WRITE_FAILED,
        ) from e

    logger.info(
        f"Summarized {totals.invoices} invoices ({totals.invoices_with_hst} with HST) "
        f"into {Path(summary_path).name}"
    )
    return totals
