"""
Negation: an interpreter for `!-` scripts that declare and print typed variables.
"""

from negation.negation_datatypes import (
    CharStream,
    Cursor,
    Declaration,
    Err,
    FormatError,
    NegationError,
    NumberFormatError,
    Ok,
    SignatureError,
    StatementKind,
    SymbolTables,
    UnexpectedEndOfInput,
    VariableKind,
    VariableLookupError,
)
from negation.negation_interpreter import Interpreter, OutputSink, interpret, run_program
from negation.negation_printer import Printer
from negation.negation_runtime import ExecutionResult, ScriptRunner

__all__ = [
    "CharStream",
    "Cursor",
    "Declaration",
    "Err",
    "ExecutionResult",
    "FormatError",
    "Interpreter",
    "NegationError",
    "NumberFormatError",
    "Ok",
    "OutputSink",
    "Printer",
    "ScriptRunner",
    "SignatureError",
    "StatementKind",
    "SymbolTables",
    "UnexpectedEndOfInput",
    "VariableKind",
    "VariableLookupError",
    "interpret",
    "run_program",
]
