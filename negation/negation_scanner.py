"""
Single-pass scanning of names and typed values.

Every function here takes the character stream and the current cursor and
returns an `Ok` carrying what it read plus the advanced cursor, or an `Err`
carrying the first error. None of them touch the symbol tables: the readers
hand back a `Declaration` for the dispatcher to store.
"""

from negation.negation_datatypes import (
    ASSIGNMENT_MARKER, BOOLEAN_MARKER, EOF, LINE_BREAKS, NAME_TERMINATORS, SPACE,
    CharStream, Cursor, Declaration, Err, FormatError, NumberFormatError, Ok,
    Result, UnexpectedEndOfInput, VariableKind,
)


def _unexpected_eof(what: str, cursor: Cursor) -> Err:
    return Err(UnexpectedEndOfInput(
        f"Unexpected end of input while reading {what} at line {cursor.line}",
        line=cursor.line, col=cursor.col))


def _bad_char(ch: str, cursor: Cursor, what: str) -> Err:
    return Err(FormatError(
        f"Unable to parse character {ch!r} in {what} at line {cursor.line}",
        line=cursor.line, col=cursor.col, char=ch))


def scan_name(stream: CharStream, cursor: Cursor) -> Result:
    """Read a name token up to a line break or the assignment marker.

    On success the value is a `(name, terminator)` pair. Spaces that directly
    precede the assignment marker are dropped; before a line break they are
    kept.
    """
    chars: list[str] = []
    spaces = 0
    while True:
        ch, cursor = stream.next(cursor)
        if ch == EOF:
            return _unexpected_eof("a name", cursor)
        if ch in NAME_TERMINATORS:
            if ch in LINE_BREAKS and spaces:
                chars.append(SPACE * spaces)
            return Ok(("".join(chars), ch), cursor)
        if ch == SPACE:
            spaces += 1
            continue
        if spaces:
            chars.append(SPACE * spaces)
            spaces = 0
        chars.append(ch)


def _scan_declared_name(stream: CharStream, cursor: Cursor, kind: VariableKind) -> Result:
    start = cursor
    match scan_name(stream, cursor):
        case Err() as err:
            return err
        case Ok(value=(name, terminator), cursor=cursor):
            if not name:
                return Err(FormatError(
                    f"Missing {kind.name.lower()} variable name at line {start.line}",
                    line=start.line, col=start.col + 1))
            return Ok((name, terminator), cursor)


def read_boolean(stream: CharStream, cursor: Cursor) -> Result:
    """Read `name?<toggles>`; the value starts at True and each `!` inverts it."""
    match _scan_declared_name(stream, cursor, VariableKind.BOOLEAN):
        case Err() as err:
            return err
        case Ok(value=(name, terminator), cursor=cursor):
            pass

    value = True
    if terminator == ASSIGNMENT_MARKER:
        while True:
            ch, cursor = stream.next(cursor)
            if ch == EOF:
                return _unexpected_eof(f"boolean {name!r}", cursor)
            if ch in LINE_BREAKS:
                break
            if ch != BOOLEAN_MARKER:
                return _bad_char(ch, cursor, f"boolean {name!r}")
            value = not value
    return Ok(Declaration(VariableKind.BOOLEAN, name, value), cursor)


def _is_literal_char(ch: str) -> bool:
    return "0" <= ch <= "9" or "a" <= ch <= "z"


def read_number(stream: CharStream, cursor: Cursor) -> Result:
    """Read `name?<digits>`; spaces are skipped and the literal is parsed base-10."""
    match _scan_declared_name(stream, cursor, VariableKind.NUMBER):
        case Err() as err:
            return err
        case Ok(value=(name, terminator), cursor=cursor):
            pass

    literal: list[str] = []
    start = cursor
    if terminator == ASSIGNMENT_MARKER:
        while True:
            ch, cursor = stream.next(cursor)
            if ch == EOF:
                return _unexpected_eof(f"number {name!r}", cursor)
            if ch in LINE_BREAKS:
                break
            if ch == SPACE:
                continue
            if not _is_literal_char(ch):
                return _bad_char(ch, cursor, f"number {name!r}")
            literal.append(ch)

    text = "".join(literal)
    try:
        value = int(text, 10)
    except ValueError:
        return Err(NumberFormatError(
            f"Invalid base-10 literal {text!r} for number {name!r} at line {start.line}",
            line=start.line, col=start.col + 1))
    return Ok(Declaration(VariableKind.NUMBER, name, value), cursor)


def read_string(stream: CharStream, cursor: Cursor) -> Result:
    """Read `name?<text>`; plain spaces are elided, nothing is unescaped."""
    match _scan_declared_name(stream, cursor, VariableKind.STRING):
        case Err() as err:
            return err
        case Ok(value=(name, terminator), cursor=cursor):
            pass

    chars: list[str] = []
    if terminator == ASSIGNMENT_MARKER:
        while True:
            ch, cursor = stream.next(cursor)
            if ch == EOF:
                return _unexpected_eof(f"string {name!r}", cursor)
            if ch in LINE_BREAKS:
                break
            if ch != SPACE:
                chars.append(ch)
    return Ok(Declaration(VariableKind.STRING, name, "".join(chars)), cursor)


READERS = {
    VariableKind.BOOLEAN: read_boolean,
    VariableKind.NUMBER: read_number,
    VariableKind.STRING: read_string,
}


__all__ = [
    "scan_name",
    "read_boolean",
    "read_number",
    "read_string",
    "READERS",
]
