#!/usr/bin/env python3
"""
extract_invoices.py - Trip invoice text extraction and reporting CLI.

Stages, each run as its own invocation:
  extract    append one invoice PDF's text to a text report
  tabulate   turn the text report into a CSV table
  summarize  total a tax year's CSV table
  sample     write a single-stream invoice PDF from a text file

Usage:
    python extract_invoices.py extract invoice.pdf report1.txt
    python extract_invoices.py tabulate report1.txt report2.csv
    python extract_invoices.py summarize 2021 "March 1, 2022" report2.csv report3.txt

Every failure exits with its own status (see invoice_extractor.errors).
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent to path when running as script
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent))

from invoice_extractor.config import (
    DEFAULT_INFLATE_RATIO,
    MAX_NAME_LENGTH,
    ExtractionConfig,
    check_name_length,
)
from invoice_extractor.errors import EnvironmentFailure, ExitStatus, InvoiceExtractorError
from invoice_extractor.fields import tabulate
from invoice_extractor.pdf_writer import write_invoice_pdf
from invoice_extractor.pipeline import extract_invoice
from invoice_extractor.summary import summarize


class ArgumentParser(argparse.ArgumentParser):
    """argparse with bad usage mapped to the tool's usage status."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(ExitStatus.USAGE, f"{self.prog}: error: {message}\n")


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = ArgumentParser(
        description="Extract dollar amounts from single-stream PDF trip invoices.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python extract_invoices.py extract trip_0001.pdf report1.txt
  python extract_invoices.py tabulate report1.txt report2.csv
  python extract_invoices.py summarize 2021 "March 1, 2022" report2.csv report3.txt

The text report accumulates one block per invoice, each followed by a
row of '=' characters, in the order the invoices were extracted.
"""
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    extract = commands.add_parser("extract", help="Append an invoice's text to a report")
    extract.add_argument("invoice", type=Path, help="Invoice PDF")
    extract.add_argument("report", type=Path, help="Text report to append to")
    extract.add_argument(
        "--inflate-ratio",
        type=int,
        default=DEFAULT_INFLATE_RATIO,
        help=f"Inflate capacity as a multiple of the compressed size (default: {DEFAULT_INFLATE_RATIO})"
    )

    table = commands.add_parser("tabulate", help="Build the invoice CSV from a text report")
    table.add_argument("report", type=Path, help="Text report written by 'extract'")
    table.add_argument("csv", type=Path, help="CSV file to create")

    totals = commands.add_parser("summarize", help="Write the yearly summary of an invoice CSV")
    totals.add_argument("tax_year", help="Four-digit tax year")
    totals.add_argument("report_date", help="Date printed in the report heading")
    totals.add_argument("csv", type=Path, help="CSV file written by 'tabulate'")
    totals.add_argument("summary", type=Path, help="Summary report to create")

    sample = commands.add_parser("sample", help="Write an invoice PDF showing the lines of a text file")
    sample.add_argument("text", type=Path, help="UTF-8 text file, one line per PDF text line")
    sample.add_argument("output", type=Path, help="PDF file to create")

    return parser.parse_args(argv)


def run_extract(args) -> int:
    config = ExtractionConfig(
        invoice_path=args.invoice,
        report_path=args.report,
        inflate_ratio=args.inflate_ratio,
    )
    result = extract_invoice(config)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return result.exit_status
    print(result.summary())
    return ExitStatus.OK


def run_tabulate(args) -> int:
    check_name_length(args.report, MAX_NAME_LENGTH, "Input file")
    check_name_length(args.csv, MAX_NAME_LENGTH, "Output file")
    records = tabulate(args.report, args.csv)
    print(f"{len(records)} invoices written to {args.csv}")
    return ExitStatus.OK


def run_summarize(args) -> int:
    check_name_length(args.csv, MAX_NAME_LENGTH, "Input file")
    check_name_length(args.summary, MAX_NAME_LENGTH, "Output file")
    totals = summarize(args.tax_year, args.report_date, args.csv, args.summary)
    print(f"{totals.invoices} invoices summarized in {args.summary}")
    return ExitStatus.OK


def run_sample(args) -> int:
    try:
        lines = args.text.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise EnvironmentFailure(
            f"Error opening file {args.text} for reading: {e}",
            ExitStatus.INVOICE_OPEN_FAILED,
        ) from e
    try:
        size = write_invoice_pdf(lines, args.output)
    except OSError as e:
        raise EnvironmentFailure(
            f"Error writing {args.output}: {e}",
            ExitStatus.REPORT_WRITE_FAILED,
        ) from e
    print(f"Wrote {args.output} ({size:,} bytes)")
    return ExitStatus.OK


COMMANDS = {
    "extract": run_extract,
    "tabulate": run_tabulate,
    "summarize": run_summarize,
    "sample": run_sample,
}


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        status = COMMANDS[args.command](args)
    except InvoiceExtractorError as e:
        print(f"Error: {e}", file=sys.stderr)
        status = e.exit_status

    sys.exit(int(status))


if __name__ == "__main__":
    main()
