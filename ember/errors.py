"""Diagnostics and error types for Ember.

Every failure the pipeline can produce ends up as a `Diagnostic`. Lexical
and syntax errors are recorded directly into a `Diagnostics` collector so
that scanning and parsing can keep going; runtime errors are raised as
`EmberRuntimeError` and converted into a diagnostic by the interpreter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional

if TYPE_CHECKING:
    from .scanner import Token


class DiagnosticKind(Enum):
    LEXICAL = 'LexicalError'
    SYNTAX = 'SyntaxError'
    RUNTIME = 'RuntimeError'


@dataclass(frozen=True)
class Diagnostic:
    """A single reported failure with its source position."""
    kind: DiagnosticKind
    message: str
    line: int
    column: Optional[int] = None

    def __str__(self) -> str:
        where = f"line {self.line}"
        if self.kind is DiagnosticKind.LEXICAL and self.column is not None:
            where += f", column {self.column}"
        return f"[{where}] {self.kind.value}: {self.message}"


class Diagnostics:
    """Collects diagnostics for one scan/parse/run of a unit."""

    def __init__(self) -> None:
        self.items: List[Diagnostic] = []

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    def lexical(self, message: str, line: int, column: int) -> Diagnostic:
        return self._add(Diagnostic(DiagnosticKind.LEXICAL, message, line, column))

    def syntax(self, token: 'Token', message: str) -> Diagnostic:
        from .scanner import TokenType
        if token.kind is TokenType.EOF:
            message = f"Error at end: {message}"
        else:
            message = f"Error at '{token.lexeme}': {message}"
        return self._add(Diagnostic(DiagnosticKind.SYNTAX, message, token.line, token.column))

    def runtime(self, error: 'EmberRuntimeError') -> Diagnostic:
        token = error.token
        line = token.line if token is not None else 0
        column = token.column if token is not None else None
        return self._add(Diagnostic(DiagnosticKind.RUNTIME, error.message, line, column))

    def _add(self, diagnostic: Diagnostic) -> Diagnostic:
        self.items.append(diagnostic)
        return diagnostic

    @property
    def had_static_error(self) -> bool:
        return any(d.kind is not DiagnosticKind.RUNTIME for d in self.items)


class EmberRuntimeError(Exception):
    """Exception type used to propagate Ember runtime errors."""
    def __init__(self, token: Optional['Token'], message: str):
        super().__init__(message)
        self.token = token
        self.message = message

    def __str__(self) -> str:
        if self.token is None:
            return self.message
        return f"{self.message} [line {self.token.line}]"


class DefinitionError(EmberRuntimeError):
    """Raised when a name is defined twice in the same scope."""
