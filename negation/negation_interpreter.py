"""
Statement dispatch, print evaluation and the program driver.
"""

import os
import sys
from dataclasses import dataclass
from typing import Any, List, Optional

from negation.negation_datatypes import (
    ASSIGNMENT_MARKER, BOOLEAN_MARKER, CLOSING_LEAD, CLOSING_SIGNATURE, EOF,
    FILE_SIGNATURE, LINE_BREAKS, NEWLINE_ESCAPE, OUTPUT_MARKER, CharStream,
    Cursor, Err, FormatError, Ok, Result, SignatureError,
    StatementKind, SymbolTables, UnexpectedEndOfInput, VariableKind,
    VariableLookupError,
)
from negation.negation_scanner import READERS, scan_name


def _dbg(*parts):
    if os.environ.get("NEGATION_DEBUG"):
        try:
            print("[DBG]", *parts, file=sys.stderr)
        except Exception:
            pass


class OutputSink:
    """Append-only in-memory destination for emitted text."""

    def __init__(self):
        self.chunks: List[str] = []

    def write(self, text: str) -> int:
        self.chunks.append(text)
        return len(text)

    def getvalue(self) -> str:
        return "".join(self.chunks)

    def __str__(self) -> str:
        return self.getvalue()


# =================================================================
# Print Evaluator
# =================================================================

def _missing(kind: VariableKind, name: str, cursor: Cursor) -> Err:
    return Err(VariableLookupError(
        f"Undefined {kind.name.lower()} variable {name!r} at line {cursor.line}",
        line=cursor.line, col=cursor.col))


def evaluate_print(kind: VariableKind, stream: CharStream, cursor: Cursor,
                   tables: SymbolTables) -> Result:
    """Resolve the token after `#<kind>` into the text to emit."""
    start = cursor
    match scan_name(stream, cursor):
        case Err() as err:
            return err
        case Ok(value=(token, terminator), cursor=cursor):
            pass

    if terminator == ASSIGNMENT_MARKER:
        return Err(FormatError(
            f"Unexpected {ASSIGNMENT_MARKER!r} in print statement at line {cursor.line}",
            line=cursor.line, col=cursor.col, char=ASSIGNMENT_MARKER))

    match kind:
        case VariableKind.BOOLEAN:
            if not tables.contains(kind, token):
                return _missing(kind, token, start)
            return Ok("1" if tables.lookup(kind, token) else "0", cursor)
        case VariableKind.NUMBER:
            if not tables.contains(kind, token):
                return _missing(kind, token, start)
            return Ok(str(tables.lookup(kind, token)), cursor)
        case VariableKind.STRING:
            if token == NEWLINE_ESCAPE:
                return Ok("\n", cursor)
            if tables.contains(kind, token):
                return Ok(tables.lookup(kind, token), cursor)
            # Unknown names print as literals.
            return Ok(token, cursor)


# =================================================================
# Statement Dispatcher
# =================================================================

def _missing_close(cursor: Cursor) -> Err:
    return Err(UnexpectedEndOfInput(
        f"Expected closing signature {CLOSING_SIGNATURE!r} at line {cursor.line}",
        line=cursor.line, col=cursor.col))


def _classify(ch: str) -> Optional[StatementKind]:
    if VariableKind.from_marker(ch) is not None:
        return StatementKind.DECLARE
    if ch == OUTPUT_MARKER:
        return StatementKind.PRINT
    if ch == CLOSING_LEAD:
        return StatementKind.CLOSE
    if ch in LINE_BREAKS:
        return StatementKind.BLANK
    if ch == EOF:
        return StatementKind.END
    return None


def dispatch_statement(stream: CharStream, cursor: Cursor, tables: SymbolTables,
                       sink: Any, *, framed: bool = True) -> Result:
    """Read one sigil and run the statement it introduces.

    Returns `Ok(StatementKind, cursor)`. Declarations are stored in `tables`,
    print output is written to `sink`.
    """
    sigil, cursor = stream.next(cursor)
    kind = _classify(sigil)
    _dbg("dispatch", repr(sigil), kind, "line", cursor.line)

    match kind:
        case StatementKind.DECLARE:
            reader = READERS[VariableKind.from_marker(sigil)]
            match reader(stream, cursor):
                case Err() as err:
                    return err
                case Ok(value=declaration, cursor=cursor):
                    tables.declare(declaration)
                    return Ok(kind, cursor)

        case StatementKind.PRINT:
            selector, cursor = stream.next(cursor)
            if selector == EOF:
                return Err(UnexpectedEndOfInput(
                    f"Unexpected end of input after {OUTPUT_MARKER!r} at line {cursor.line}",
                    line=cursor.line, col=cursor.col))
            print_kind = VariableKind.from_marker(selector)
            if print_kind is None:
                return Err(FormatError(
                    f"Unknown print kind {selector!r} at line {cursor.line}",
                    line=cursor.line, col=cursor.col, char=selector))
            match evaluate_print(print_kind, stream, cursor, tables):
                case Err() as err:
                    return err
                case Ok(value=text, cursor=cursor):
                    sink.write(text)
                    return Ok(kind, cursor)

        case StatementKind.CLOSE:
            follower, cursor = stream.next(cursor)
            if follower == BOOLEAN_MARKER:
                return Ok(kind, cursor)
            return _missing_close(cursor)

        case StatementKind.END:
            if framed:
                return _missing_close(cursor)
            return Ok(kind, cursor)

        case StatementKind.BLANK:
            return Ok(kind, cursor)

        case _:
            return Err(FormatError(
                f"Unrecognized statement sigil {sigil!r} at line {cursor.line}",
                line=cursor.line, col=cursor.col, char=sigil))


# =================================================================
# Program Driver
# =================================================================

@dataclass(frozen=True)
class RunSummary:
    statements: int
    closed: bool


def check_signature(stream: CharStream, cursor: Cursor) -> Result:
    for expected in FILE_SIGNATURE:
        ch, cursor = stream.next(cursor)
        if ch != expected:
            found = "end of input" if ch == EOF else repr(ch)
            return Err(SignatureError(
                f"Expected file signature {FILE_SIGNATURE!r}, found {found}",
                line=cursor.line, col=cursor.col, char=ch or None))
    return Ok(FILE_SIGNATURE, cursor)


class Interpreter:
    """Runs Negation programs against one set of symbol tables."""

    def __init__(self, tables: Optional[SymbolTables] = None):
        self.tables = tables if tables is not None else SymbolTables()

    def run(self, source: Any, sink: Any = None, *, framed: bool = True) -> Result:
        """Interpret `source` until the closing signature, an error, or the end.

        `source` is a string or any text reader. With `framed=False` the file
        signature is not required and the end of input ends the run cleanly.
        """
        stream = source if isinstance(source, CharStream) else CharStream(source)
        sink = sink if sink is not None else OutputSink()
        cursor = Cursor()
        _dbg("run start", "framed", framed)

        if framed:
            match check_signature(stream, cursor):
                case Err() as err:
                    return err
                case Ok(cursor=cursor):
                    pass

        statements = 0
        while True:
            match dispatch_statement(stream, cursor, self.tables, sink, framed=framed):
                case Err() as err:
                    _dbg("run failed", err.error.kind, "after", statements, "statements")
                    return Err(err.error, statements)
                case Ok(value=StatementKind.CLOSE | StatementKind.END as kind, cursor=cursor):
                    _dbg("run stop", kind, "after", statements, "statements")
                    return Ok(RunSummary(statements, kind is StatementKind.CLOSE), cursor)
                case Ok(value=StatementKind.BLANK, cursor=cursor):
                    continue
                case Ok(cursor=cursor):
                    statements += 1


def run_program(source: Any, sink: Any = None, tables: Optional[SymbolTables] = None) -> SymbolTables:
    """Run a framed program, raising its error on failure; returns the tables."""
    interpreter = Interpreter(tables)
    result = interpreter.run(source, sink)
    if isinstance(result, Err):
        raise result.error
    return interpreter.tables


def interpret(source: Any) -> str:
    """Run a framed program and return everything it printed."""
    sink = OutputSink()
    run_program(source, sink)
    return sink.getvalue()


__all__ = [
    "OutputSink",
    "RunSummary",
    "Interpreter",
    "evaluate_print",
    "dispatch_statement",
    "check_signature",
    "run_program",
    "interpret",
]
