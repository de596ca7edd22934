"""
Defines the core data types for the Negation interpreter.

This module holds the character constants of the notation, the symbol tables,
the cursor threaded through every scan, the result union returned by the
scanner and evaluator, and the error taxonomy.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union
import io

# =================================================================
# Character constants
# =================================================================

FILE_SIGNATURE = "!-"
CLOSING_SIGNATURE = "-!"

EOF = ""
LF = "\n"
CR = "\r"
SPACE = " "

BOOLEAN_MARKER = "!"
NUMBER_MARKER = "$"
STRING_MARKER = "_"
OUTPUT_MARKER = "#"
CLOSING_LEAD = "-"
ASSIGNMENT_MARKER = "?"

LINE_BREAKS = (LF, CR)
NAME_TERMINATORS = (LF, CR, ASSIGNMENT_MARKER)

NEWLINE_ESCAPE = "/n"


class VariableKind(Enum):
    """The three variable types, keyed by their marker character."""
    BOOLEAN = BOOLEAN_MARKER
    NUMBER = NUMBER_MARKER
    STRING = STRING_MARKER

    @property
    def marker(self) -> str:
        return self.value

    @classmethod
    def from_marker(cls, ch: str) -> Optional['VariableKind']:
        try:
            return cls(ch)
        except ValueError:
            return None


class StatementKind(Enum):
    """What a single pass of the dispatcher did."""
    BLANK = "blank"
    DECLARE = "declare"
    PRINT = "print"
    CLOSE = "close"
    END = "end"


# =================================================================
# Errors
# =================================================================

class NegationError(Exception):
    """Base class for every error a Negation run can fail with."""
    kind = "NegationError"

    def __init__(self, message: str, *, line: Optional[int] = None,
                 col: Optional[int] = None, char: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.col = col
        self.char = char

    @property
    def token(self) -> Dict[str, Any]:
        return {'line': self.line, 'col': self.col, 'char': self.char}

    def __str__(self) -> str:
        return self.message


class SignatureError(NegationError):
    kind = "SignatureError"


class UnexpectedEndOfInput(NegationError, EOFError):
    kind = "UnexpectedEndOfInput"


class FormatError(NegationError, ValueError):
    kind = "FormatError"


class NumberFormatError(FormatError):
    """A number literal passed character validation but is not base-10."""
    kind = "FormatError"


class VariableLookupError(NegationError, LookupError):
    kind = "LookupError"


# =================================================================
# Cursor and result union
# =================================================================

@dataclass(frozen=True)
class Cursor:
    """Position of the most recently consumed character.

    Lines are 1-based. A CR LF pair counts as a single line break.
    """
    line: int = 1
    col: int = 0
    after_cr: bool = False

    def advance(self, ch: str) -> 'Cursor':
        if ch == LF:
            if self.after_cr:
                return Cursor(self.line, 0, False)
            return Cursor(self.line + 1, 0, False)
        if ch == CR:
            return Cursor(self.line + 1, 0, True)
        if ch == EOF:
            return self
        return Cursor(self.line, self.col + 1, False)


@dataclass(frozen=True)
class Ok:
    value: Any
    cursor: Cursor


@dataclass(frozen=True)
class Err:
    error: NegationError
    # statements completed before the failure; set by the program driver
    statements: int = 0


Result = Union[Ok, Err]


# =================================================================
# Character stream
# =================================================================

class CharStream:
    """Reads one character at a time from a string or a text reader.

    `read()` returns an empty string once the source is exhausted, and keeps
    returning it on every later call.
    """

    def __init__(self, source: Any):
        if isinstance(source, str):
            source = io.StringIO(source)
        if not hasattr(source, "read"):
            raise TypeError(f"Cannot read characters from {type(source).__name__}")
        self._source = source
        self._exhausted = False

    def read(self) -> str:
        if self._exhausted:
            return EOF
        ch = self._source.read(1)
        if not ch:
            self._exhausted = True
            return EOF
        return ch

    def next(self, cursor: Cursor) -> tuple[str, Cursor]:
        """Read one character and return it with the advanced cursor."""
        ch = self.read()
        return ch, cursor.advance(ch)


# =================================================================
# Declarations and symbol tables
# =================================================================

@dataclass(frozen=True)
class Declaration:
    kind: VariableKind
    name: str
    value: Union[bool, int, str]


@dataclass
class SymbolTables:
    """The per-type name → value mappings owned by one interpreter."""
    booleans: Dict[str, bool] = field(default_factory=dict)
    numbers: Dict[str, int] = field(default_factory=dict)
    strings: Dict[str, str] = field(default_factory=dict)

    def table(self, kind: VariableKind) -> Dict[str, Any]:
        match kind:
            case VariableKind.BOOLEAN:
                return self.booleans
            case VariableKind.NUMBER:
                return self.numbers
            case VariableKind.STRING:
                return self.strings
        raise ValueError(f"Unknown variable kind: {kind!r}")

    def declare(self, declaration: Declaration) -> None:
        self.table(declaration.kind)[declaration.name] = declaration.value

    def contains(self, kind: VariableKind, name: str) -> bool:
        return name in self.table(kind)

    def lookup(self, kind: VariableKind, name: str) -> Any:
        """Return the stored value; raises KeyError when the name is absent."""
        return self.table(kind)[name]

    def declarations(self):
        for kind in VariableKind:
            for name, value in self.table(kind).items():
                yield Declaration(kind, name, value)

    def copy(self) -> 'SymbolTables':
        return SymbolTables(dict(self.booleans), dict(self.numbers), dict(self.strings))

    def clear(self) -> None:
        self.booleans.clear()
        self.numbers.clear()
        self.strings.clear()

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        return {
            'boolean': dict(self.booleans),
            'number': dict(self.numbers),
            'string': dict(self.strings),
        }

    def __len__(self) -> int:
        return len(self.booleans) + len(self.numbers) + len(self.strings)


__all__ = [
    "FILE_SIGNATURE",
    "CLOSING_SIGNATURE",
    "BOOLEAN_MARKER",
    "NUMBER_MARKER",
    "STRING_MARKER",
    "OUTPUT_MARKER",
    "ASSIGNMENT_MARKER",
    "NEWLINE_ESCAPE",
    "VariableKind",
    "StatementKind",
    "NegationError",
    "SignatureError",
    "UnexpectedEndOfInput",
    "FormatError",
    "NumberFormatError",
    "VariableLookupError",
    "Cursor",
    "Ok",
    "Err",
    "Result",
    "CharStream",
    "Declaration",
    "SymbolTables",
]
