import pytest

from invoice_extractor.errors import BadAmount, BadTaxYear, EnvironmentFailure, ExitStatus
from invoice_extractor.fields import CSV_HEADER
from invoice_extractor.summary import (
    RULE,
    InvoiceTotals,
    format_dollars,
    read_totals,
    summarize,
    to_cents,
)

ROWS = [
    ("A-1", "12.34", "1.60", "13.94"),
    ("A-2", "10.00", "0.00", "10.00"),
    ("A-3", "5.55", "0.72", "6.27"),
]


def _write_csv(path, rows=ROWS):
    lines = [",".join(CSV_HEADER)]
    for number, net, hst, gross in rows:
        lines.append(
            f'{number},"March 3, 2021",notSpecified,"Joe\'s Pizza, Downtown",123456789RT0001,'
            f"{net},{hst},{gross}"
        )
    path.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return path


@pytest.mark.parametrize("value, cents", [("0.00", 0), ("12.34", 1234), ("1000.05", 100005)])
def test_to_cents(value, cents):
    assert to_cents(value) == cents


@pytest.mark.parametrize("value", ["12.3", "12", "$12.34", "-1.00", "1,000.00", ""])
def test_to_cents_rejects(value):
    with pytest.raises(ValueError):
        to_cents(value)


def test_format_dollars():
    assert format_dollars(123456) == "  1234.56"
    assert format_dollars(5) == "     0.05"


def test_read_totals(tmp_path):
    totals = read_totals(_write_csv(tmp_path / "report2.csv"))
    assert totals == InvoiceTotals(
        invoices=3,
        invoices_with_hst=2,
        net_all=2789,
        gross_all=3021,
        net_with_hst=1789,
        hst=232,
        gross_with_hst=2021,
    )


def test_read_totals_bad_amount(tmp_path):
    path = _write_csv(tmp_path / "report2.csv", ROWS + [("A-4", "5.5", "0.00", "5.50")])
    with pytest.raises(BadAmount, match="net amount") as exc:
        read_totals(path)
    assert exc.value.exit_status == ExitStatus.BAD_AMOUNT
    assert "A-4" in str(exc.value)


def test_summarize_writes_report(tmp_path):
    csv_path = _write_csv(tmp_path / "report2.csv")
    out = tmp_path / "report3.txt"

    summarize("2021", "March 1, 2022", csv_path, out)

    lines = out.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("Trip invoice summary for tax year 2021")
    assert lines[0].endswith("Report date: March 1, 2022")
    assert lines[1] == RULE
    assert "3 trip invoices were found for this tax year." in lines
    assert "2 of them had HST applied." in lines
    assert "     Net: $     27.89" in lines
    assert "   Total: $     30.21" in lines
    assert "     Net: $     17.89" in lines
    assert lines.count("Plus HST: $      2.32") == 2


@pytest.mark.parametrize("year", ["21", "20211", "20x1"])
def test_summarize_bad_year(year, tmp_path):
    with pytest.raises(BadTaxYear) as exc:
        summarize(year, "today", _write_csv(tmp_path / "report2.csv"), tmp_path / "report3.txt")
    assert exc.value.exit_status == ExitStatus.BAD_TAX_YEAR
    assert not (tmp_path / "report3.txt").exists()


def test_summarize_missing_csv(tmp_path):
    with pytest.raises(EnvironmentFailure) as exc:
        summarize("2021", "today", tmp_path / "missing.csv", tmp_path / "report3.txt")
    assert exc.value.exit_status == ExitStatus.CSV_READ_FAILED
