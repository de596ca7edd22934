import pytest

from negation.negation_datatypes import (
    CharStream, Cursor, Declaration, Err, FormatError, NumberFormatError, Ok,
    UnexpectedEndOfInput, VariableKind,
)
from negation.negation_scanner import read_boolean, read_number, read_string, scan_name


def scan(fn, text):
    stream = CharStream(text)
    return fn(stream, Cursor()), stream


def assert_ok(res, expected=None):
    assert isinstance(res, Ok), res
    if expected is not None:
        assert res.value == expected


def assert_err(res, error_type, char=None):
    assert isinstance(res, Err), f"expected error, got {res!r}"
    assert isinstance(res.error, error_type), res.error
    if char is not None:
        assert res.error.char == char


# --- Name Scanner ---

@pytest.mark.parametrize("text, expected", [
    ("flag?!!\n", ("flag", "?")),
    ("flag\n", ("flag", "\n")),
    ("flag\r\n", ("flag", "\r")),
    ("name  \n", ("name  ", "\n")),
    ("name \r\n", ("name ", "\r")),
    ("name  ?1", ("name", "?")),
    ("a b ?x", ("a b", "?")),
    (" x\n", (" x", "\n")),
    ("?", ("", "?")),
])
def test_scan_name_stops_at_terminators(text, expected):
    res, _ = scan(scan_name, text)
    assert_ok(res, expected)


def test_scan_name_leaves_the_value_region_unread():
    res, stream = scan(scan_name, "x?rest")
    assert_ok(res, ("x", "?"))
    assert stream.read() == "r"
    assert res.cursor.col == 2


def test_scan_name_needs_a_terminator():
    res, _ = scan(scan_name, "abc")
    assert_err(res, UnexpectedEndOfInput)


# --- Boolean Reader ---

@pytest.mark.parametrize("toggles", range(6))
def test_boolean_is_true_for_an_even_number_of_toggles(toggles):
    res, _ = scan(read_boolean, "flag?" + "!" * toggles + "\n")
    assert_ok(res, Declaration(VariableKind.BOOLEAN, "flag", toggles % 2 == 0))


def test_boolean_without_value_region_is_true():
    res, _ = scan(read_boolean, "flag\n")
    assert_ok(res, Declaration(VariableKind.BOOLEAN, "flag", True))


def test_boolean_rejects_other_characters():
    res, _ = scan(read_boolean, "flag?!x\n")
    assert_err(res, FormatError, char="x")
    assert res.error.line == 1
    assert res.error.col == 7


def test_boolean_rejects_spaces_in_toggle_chain():
    res, _ = scan(read_boolean, "flag? !\n")
    assert_err(res, FormatError, char=" ")


def test_boolean_needs_a_line_break():
    res, _ = scan(read_boolean, "flag?!!")
    assert_err(res, UnexpectedEndOfInput)


def test_boolean_needs_a_name():
    res, _ = scan(read_boolean, "?!\n")
    assert_err(res, FormatError)


def test_boolean_stops_at_carriage_return():
    res, stream = scan(read_boolean, "flag?!\r\n")
    assert_ok(res, Declaration(VariableKind.BOOLEAN, "flag", False))
    assert stream.read() == "\n"


def test_boolean_cursor_moves_to_next_line():
    res, _ = scan(read_boolean, "flag?!\n")
    assert (res.cursor.line, res.cursor.col) == (2, 0)


# --- Number Reader ---

def test_number_skips_spaces():
    res, _ = scan(read_number, "count?4 2\n")
    assert_ok(res, Declaration(VariableKind.NUMBER, "count", 42))


def test_number_leading_zeros():
    res, _ = scan(read_number, "x? 007 \n")
    assert_ok(res, Declaration(VariableKind.NUMBER, "x", 7))


def test_number_with_letter_fails_at_parse():
    res, _ = scan(read_number, "x?1a\n")
    assert_err(res, NumberFormatError)
    assert "1a" in str(res.error)


def test_number_rejects_characters_outside_digits_and_lowercase():
    res, _ = scan(read_number, "x?1%\n")
    assert_err(res, FormatError, char="%")
    assert not isinstance(res.error, NumberFormatError)
    assert "line 1" in str(res.error)


def test_number_rejects_uppercase_and_sign():
    res, _ = scan(read_number, "x?A\n")
    assert_err(res, FormatError, char="A")
    res, _ = scan(read_number, "x?-1\n")
    assert_err(res, FormatError, char="-")


def test_number_empty_literal_is_a_format_error():
    res, _ = scan(read_number, "x\n")
    assert_err(res, NumberFormatError)


def test_number_needs_a_line_break():
    res, _ = scan(read_number, "x?12")
    assert_err(res, UnexpectedEndOfInput)


# --- String Reader ---

def test_string_elides_spaces():
    res, _ = scan(read_string, "greet?hi there\n")
    assert_ok(res, Declaration(VariableKind.STRING, "greet", "hithere"))


def test_string_copies_everything_else_verbatim():
    res, _ = scan(read_string, "s?a\tb\\n?!\n")
    assert_ok(res, Declaration(VariableKind.STRING, "s", "a\tb\\n?!"))


def test_string_without_value_is_empty():
    res, _ = scan(read_string, "s\n")
    assert_ok(res, Declaration(VariableKind.STRING, "s", ""))


def test_string_needs_a_line_break():
    res, _ = scan(read_string, "s?abc")
    assert_err(res, UnexpectedEndOfInput)
