import pytest

from invoice_extractor.content import State, TRANSITIONS, extract_text
from invoice_extractor.errors import ExitStatus, UnterminatedLiteral
from invoice_extractor.pdf_writer import escape_pdf_text


def test_extract_text_one_line_per_literal_line():
    assert extract_text(b"(Hello) Tj\n(World) Tj\n") == b"Hello\nWorld\n"


def test_extract_text_skips_lines_without_literals():
    assert extract_text(b"BT\n") == b""
    assert extract_text(b"BT\n(A) Tj\n/F1 10 Tf\n14 TL\n(B) Tj\nET\n") == b"A\nB\n"


def test_extract_text_escaped_close_paren_stays_literal():
    assert extract_text(b"(a\\)b) Tj\n") == b"a)b\n"
    assert extract_text(b"(C:\\\\dir) Tj\n") == b"C:\\dir\n"


def test_extract_text_joins_literals_on_one_line():
    assert extract_text(b"[(Gr) -20 (oss)] TJ\n") == b"Gross\n"


def test_extract_text_last_line_without_newline():
    assert extract_text(b"(A) Tj\n(B) Tj") == b"A\nB"


def test_extract_text_nesting_is_not_tracked():
    # the first unescaped ')' closes the literal
    assert extract_text(b"(a(b)c) Tj\n") == b"a(b\n"


@pytest.mark.parametrize("content", [b"(abc", b"BT\n(abc\\", b"(ok) Tj\n(abc\nET\n"])
def test_extract_text_unterminated_literal(content):
    with pytest.raises(UnterminatedLiteral) as exc:
        extract_text(content)
    assert exc.value.exit_status == ExitStatus.UNTERMINATED_LITERAL


def test_transitions_cover_every_running_state():
    assert set(TRANSITIONS) == {State.SCAN, State.IN_LITERAL, State.AFTER_LITERAL}


@pytest.mark.parametrize("text", ["Joe's (Downtown)", "C:\\temp", "a)b(c", "$12.34"])
def test_extract_text_undoes_pdf_escaping(text):
    content = b"(" + escape_pdf_text(text) + b") Tj\n"
    assert extract_text(content) == text.encode("latin-1") + b"\n"
