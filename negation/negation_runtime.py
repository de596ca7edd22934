import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from negation.negation_datatypes import Err, NegationError, Ok, SymbolTables
from negation.negation_interpreter import Interpreter, _dbg

# ===================================================================
# Script Execution
# ===================================================================

Token = Dict[str, Any]


class _EffectSink:
    """Records every emitted chunk as a `stdout` side effect."""

    def __init__(self, side_effects: List[Dict]):
        self._side_effects = side_effects

    def write(self, text: str) -> int:
        self._side_effects.append({'topics': ['stdout'], 'message': text})
        return len(text)


@dataclass
class ExecutionResult:
    """The structured result of a script execution."""
    status: Literal['success', 'error']
    value: str = ""
    variables: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    statements: int = 0
    error_message: Optional[str] = None
    error_token: Optional[Token] = None
    side_effects: List[Dict] = field(default_factory=list)

    def format_error(self) -> str:
        """Formats an error message with line and column if available."""
        if self.status != 'error':
            return ""
        msg = str(self.error_message or "Unknown error")

        if self.error_token and self.error_token.get('line') is not None:
            line = self.error_token.get('line')
            col = self.error_token.get('col')
            if not msg.startswith("Error on line "):
                col_info = f", col {col}" if col else ""
                return f"Error on line {line}{col_info}: {msg}"
        return msg


class ScriptRunner:
    """Loads and executes Negation programs against one set of symbol tables."""

    def __init__(self, tables: Optional[SymbolTables] = None,
                 http_config: Optional[Dict[str, Any]] = None):
        self.tables = tables if tables is not None else SymbolTables()
        self.http_config = dict(http_config or {})
        self.source_dir: Optional[str] = None

    def reset(self):
        self.tables.clear()

    def _format_runtime_error(self, e: NegationError, source: str) -> tuple[str, Token]:
        msg = f"{e.kind}: {e}"
        token = e.token
        context = self._source_context(source, e.line, e.col)
        if context:
            msg = f"{msg}\n{context}"
        return msg, token

    def _source_context(self, source: str, line: Optional[int], col: Optional[int], radius: int = 2) -> str:
        # same line breaks as Cursor.advance: CR, LF, CR LF
        lines = re.split(r"\r\n|\r|\n", source)
        if not line or line < 1 or line > len(lines):
            return ""
        start = max(1, line - radius)
        end = min(len(lines), line + radius)
        width = len(str(end))
        out = []
        for i in range(start, end + 1):
            prefix = ">" if i == line else " "
            ln = str(i).rjust(width)
            content = lines[i - 1]
            out.append(f"{prefix} {ln} | {content}")
            if i == line and col:
                caret = " " * max(col - 1, 0)
                out.append(f"  {' ' * width} | {caret}^")
        return "\n".join(out)

    async def handle_script(self, source_code: str, *, framed: bool = True) -> ExecutionResult:
        """The main entry point to execute a script."""
        side_effects: List[Dict] = []
        interpreter = Interpreter(self.tables)
        result = interpreter.run(source_code, _EffectSink(side_effects), framed=framed)
        output = "".join(e['message'] for e in side_effects)

        match result:
            case Ok(value=summary):
                return ExecutionResult(
                    status='success',
                    value=output,
                    variables=self.tables.to_dict(),
                    statements=summary.statements,
                    side_effects=side_effects,
                )
            case Err(error=error, statements=statements):
                err_msg, err_token = self._format_runtime_error(error, source_code)
                # Emit consolidated stderr side-effect
                side_effects.append({'topics': ['stderr'], 'message': err_msg})
                return ExecutionResult(
                    status='error',
                    value=output,
                    variables=self.tables.to_dict(),
                    statements=statements,
                    error_message=err_msg,
                    error_token=err_token,
                    side_effects=side_effects,
                )

    async def load_source(self, locator: str) -> str:
        """Fetch program text from an http(s) URL, a file:// locator or a path."""
        _dbg("load", locator)
        if locator.startswith(("http://", "https://")):
            from negation.negation_http import http_get
            return await http_get(locator, self.http_config)
        from negation.negation_file import file_get
        return await file_get(locator, base_dir=self.source_dir or os.getcwd())

    async def handle_locator(self, locator: str) -> ExecutionResult:
        """Load the program at `locator` and run it."""
        try:
            source = await self.load_source(locator)
        except Exception as e:
            msg = f"IOError: {e}"
            return ExecutionResult(
                status='error',
                error_message=msg,
                side_effects=[{'topics': ['stderr'], 'message': msg}],
            )
        return await self.handle_script(source)


__all__ = ["ExecutionResult", "ScriptRunner"]
