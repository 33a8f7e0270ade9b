import logging
import zlib

import pytest

from invoice_extractor import inflate as inflate_module
from invoice_extractor.errors import ExitStatus, IncompatibleDecompressor, UnexpectedDecompressorStatus
from invoice_extractor.inflate import check_zlib_version, inflate

CONTENT = b"BT\n/F1 10 Tf\n14 TL\n50 742 Td\n(Gross Amount ) Tj T*\n(13.94 CAD) Tj T*\nET\n"


def test_inflate_round_trip():
    assert inflate(zlib.compress(CONTENT, 9)) == CONTENT


def test_inflate_fails_past_fixed_ratio():
    content = b"(A) Tj\n" * 10000
    compressed = zlib.compress(content, 9)
    with pytest.raises(UnexpectedDecompressorStatus) as exc:
        inflate(compressed, ratio=20)
    assert exc.value.exit_status == ExitStatus.UNEXPECTED_DECOMPRESSOR_STATUS
    assert inflate(compressed, ratio=len(content)) == content


@pytest.mark.parametrize(
    "data",
    [
        zlib.compress(CONTENT)[:-6],        # truncated
        b"not zlib data at all",            # bad header
        zlib.compress(CONTENT) + b"junk",   # trailing bytes
        b"",
    ],
)
def test_inflate_rejects_incomplete_streams(data):
    with pytest.raises(UnexpectedDecompressorStatus):
        inflate(data)


def test_check_zlib_version_major_mismatch(monkeypatch):
    monkeypatch.setattr(inflate_module.zlib, "ZLIB_VERSION", "1.2.13")
    monkeypatch.setattr(inflate_module.zlib, "ZLIB_RUNTIME_VERSION", "2.0.0")
    with pytest.raises(IncompatibleDecompressor) as exc:
        check_zlib_version()
    assert exc.value.exit_status == ExitStatus.INCOMPATIBLE_ZLIB


def test_check_zlib_version_minor_mismatch_warns(monkeypatch, caplog):
    monkeypatch.setattr(inflate_module.zlib, "ZLIB_VERSION", "1.2.13")
    monkeypatch.setattr(inflate_module.zlib, "ZLIB_RUNTIME_VERSION", "1.3.1")
    with caplog.at_level(logging.WARNING, logger="invoice_extractor.inflate"):
        check_zlib_version()
    assert "Different zlib version" in caplog.text
