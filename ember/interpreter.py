"""Tree-walking interpreter for the Ember language.

`Interpreter` owns one global environment for its whole lifetime, so
definitions made by one `run_source`/`interpret` call are visible to the
next one until `reset()` is called. Program output goes to an
`OutputSink`; the interpreter itself never prints.

Statement execution returns either None or a `ReturnSignal`. A signal is
passed straight back up through blocks, ifs and loops until the function
call that is executing them turns it into the call's result. Errors are a
separate channel: `EmberRuntimeError` propagates as an exception and is
caught at the top of `interpret`.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from .ast import (
    Assign, Binary, Block, Call, Expr, ExpressionStatement, FunctionDecl,
    Grouping, If, Literal, Logical, Print, Return, Stmt, Unary, Variable,
    VarDecl, While,
)
from .environment import Environment
from .errors import Diagnostic, DiagnosticKind, Diagnostics, EmberRuntimeError
from .functions import NativeFunction, UserFunction
from .parser import parse
from .scanner import Token, TokenType, scan
from .std.io import ConsoleSink, OutputSink, populate_io_environment
from .types import is_equal, is_number, is_truthy, stringify


@dataclass
class ReturnSignal:
    """Carries a `return` value up to the enclosing function call."""
    value: Any


@dataclass
class RunResult:
    """Outcome of scanning, parsing and/or running one unit of source."""
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def had_error(self) -> bool:
        return bool(self.diagnostics)

    @property
    def had_static_error(self) -> bool:
        return any(d.kind is not DiagnosticKind.RUNTIME for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return any(d.kind is DiagnosticKind.RUNTIME for d in self.diagnostics)


class Interpreter:
    """Core interpreter that executes Ember statements."""
    def __init__(self, sink: Optional[OutputSink] = None, debug_level: int = 0,
                 debug_file: Optional[str] = None):
        self.sink = sink if sink is not None else ConsoleSink()
        self.globals = Environment()
        self.environment = self.globals
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None
        self.load_standard_module()

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg, file=sys.stderr)

    def close(self) -> None:
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def __enter__(self) -> 'Interpreter':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def load_standard_module(self):
        """Install the native functions into the global environment."""

        def std_clock(args: List[Any]) -> Any:
            return float(time.time_ns() // 1_000_000)

        self.globals.define('clock', NativeFunction('clock', 0, std_clock))
        populate_io_environment(self.globals, self.sink)

    def reset(self) -> None:
        """Forget every global binding and reinstall the natives."""
        self.globals.clear()
        self.environment = self.globals
        self.load_standard_module()
        if self.debug_level >= 1:
            self.debug('reset global environment')

    # Public API
    def run_source(self, source: str) -> RunResult:
        """Scan, parse and run one unit of source text.

        A unit with lexical or syntax errors is not executed at all.
        """
        diagnostics = Diagnostics()
        statements = parse(scan(source, diagnostics), diagnostics)
        if diagnostics.had_static_error:
            if self.debug_level >= 1:
                self.debug(f"not running unit: {len(diagnostics)} static error(s)")
            return RunResult(list(diagnostics))
        return self.interpret(statements)

    def interpret(self, statements: Sequence[Optional[Stmt]],
                  env: Optional[Environment] = None) -> RunResult:
        """Execute top-level statements in order.

        None entries (statements the parser discarded) are skipped. The
        first runtime error stops the unit and is returned as a diagnostic.
        """
        diagnostics = Diagnostics()
        previous = self.environment
        if env is not None:
            self.environment = env
        if self.debug_level >= 1:
            self.debug(f"interpret {len(statements)} statement(s)")
        try:
            for stmt in statements:
                if stmt is None:
                    continue
                if self.execute(stmt) is not None:
                    break
        except EmberRuntimeError as error:
            diagnostics.runtime(error)
            if self.debug_level >= 1:
                self.debug(f"runtime error: {error}")
        finally:
            self.environment = previous
        return RunResult(list(diagnostics))

    def execute_block(self, statements: Sequence[Stmt], env: Environment) -> Optional[ReturnSignal]:
        previous = self.environment
        self.environment = env
        if self.debug_level >= 3:
            self.debug('enter scope')
        try:
            for stmt in statements:
                signal = self.execute(stmt)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous
            if self.debug_level >= 3:
                self.debug('leave scope')

    def execute(self, stmt: Stmt) -> Optional[ReturnSignal]:
        if isinstance(stmt, ExpressionStatement):
            self.evaluate(stmt.expr)
            return None
        if isinstance(stmt, Print):
            value = self.evaluate(stmt.expr)
            self.sink.write_line(stringify(value))
            return None
        if isinstance(stmt, VarDecl):
            value = self.evaluate(stmt.initializer) if stmt.initializer is not None else None
            self.environment.define(stmt.name.lexeme, value, stmt.name)
            if self.debug_level >= 2:
                self.debug(f"declare {stmt.name.lexeme} = {stringify(value)}")
            return None
        if isinstance(stmt, Block):
            return self.execute_block(stmt.body, Environment(parent=self.environment))
        if isinstance(stmt, If):
            cond = self.evaluate(stmt.condition)
            truthy = is_truthy(cond)
            if self.debug_level >= 3:
                self.debug(f"if condition {stringify(cond)} -> {truthy}")
            if truthy:
                return self.execute(stmt.then_branch)
            if stmt.else_branch is not None:
                return self.execute(stmt.else_branch)
            return None
        if isinstance(stmt, While):
            while True:
                cond = self.evaluate(stmt.condition)
                if self.debug_level >= 3:
                    self.debug(f"while condition {stringify(cond)}")
                if not is_truthy(cond):
                    break
                signal = self.execute(stmt.body)
                if signal is not None:
                    return signal
            return None
        if isinstance(stmt, FunctionDecl):
            func = UserFunction(stmt, self.environment)
            self.environment.define(stmt.name.lexeme, func, stmt.name)
            if self.debug_level >= 2:
                self.debug(f"define function {stmt.name.lexeme}")
            return None
        if isinstance(stmt, Return):
            value = self.evaluate(stmt.value) if stmt.value is not None else None
            return ReturnSignal(value)
        raise NotImplementedError(f"execute: unexpected node type {type(stmt).__name__}")

    def evaluate(self, expr: Expr) -> Any:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.inner)
        if isinstance(expr, Variable):
            return self.environment.get(expr.name)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value)
            self.environment.assign(expr.name, value)
            return value
        if isinstance(expr, Unary):
            operand = self.evaluate(expr.operand)
            if expr.op.kind is TokenType.MINUS:
                if not is_number(operand):
                    raise EmberRuntimeError(expr.op, "Operand of '-' must be a number.")
                return -operand
            if expr.op.kind is TokenType.BANG:
                return not is_truthy(operand)
            raise NotImplementedError(f"unsupported unary operator {expr.op.lexeme}")
        if isinstance(expr, Binary):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            return self.apply_binary_op(expr.op, left, right)
        if isinstance(expr, Logical):
            # The deciding operand's value is returned as-is, not as a bool.
            left = self.evaluate(expr.left)
            if expr.op.kind is TokenType.OR:
                if is_truthy(left):
                    return left
            elif not is_truthy(left):
                return left
            return self.evaluate(expr.right)
        if isinstance(expr, Call):
            callee = self.evaluate(expr.callee)
            args = [self.evaluate(arg) for arg in expr.args]
            return self.call_function(callee, expr.paren, args)
        raise NotImplementedError(f"evaluate: unexpected node type {type(expr).__name__}")

    def call_function(self, callee: Any, paren: Token, args: List[Any]) -> Any:
        if not isinstance(callee, (NativeFunction, UserFunction)):
            raise EmberRuntimeError(paren, 'Can only call functions and natives.')
        if len(args) != callee.arity():
            raise EmberRuntimeError(
                paren, f"Expected {callee.arity()} arguments but got {len(args)}.")
        if self.debug_level >= 2:
            self.debug(f"call {callee} with {len(args)} argument(s)")
        return callee.invoke(self, args)

    def apply_binary_op(self, op: Token, a: Any, b: Any) -> Any:
        kind = op.kind
        if kind is TokenType.EQUAL_EQUAL:
            return is_equal(a, b)
        if kind is TokenType.BANG_EQUAL:
            return not is_equal(a, b)
        if kind is TokenType.PLUS:
            if is_number(a) and is_number(b):
                return a + b
            if isinstance(a, str) and isinstance(b, str):
                return a + b
            raise EmberRuntimeError(op, "Operands of '+' must be two numbers or two strings.")

        # everything else is numeric only
        if not (is_number(a) and is_number(b)):
            raise EmberRuntimeError(op, f"Operands of '{op.lexeme}' must be numbers.")
        if kind is TokenType.MINUS:
            return a - b
        if kind is TokenType.STAR:
            return a * b
        if kind is TokenType.SLASH:
            if b == 0.0:
                raise EmberRuntimeError(op, 'Division by zero.')
            return a / b
        if kind is TokenType.GREATER:
            return a > b
        if kind is TokenType.GREATER_EQUAL:
            return a >= b
        if kind is TokenType.LESS:
            return a < b
        if kind is TokenType.LESS_EQUAL:
            return a <= b
        raise NotImplementedError(f"unknown operator {op.lexeme}")


def parse_program(source: str, diagnostics: Optional[Diagnostics] = None) -> List[Optional[Stmt]]:
    """Scan and parse source text into top-level statements."""
    if diagnostics is None:
        diagnostics = Diagnostics()
    return parse(scan(source, diagnostics), diagnostics)


def run_program(source: str, sink: Optional[OutputSink] = None, debug_level: int = 0) -> RunResult:
    """Convenience function to run an Ember program from a source string."""
    with Interpreter(sink=sink, debug_level=debug_level) as interpreter:
        return interpreter.run_source(source)
