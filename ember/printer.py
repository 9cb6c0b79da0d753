"""Parenthesized text rendering of Ember ASTs.

Used by `python -m ember --ast` and by the tests to check tree shape:
`1 + 2 * 3` renders as `(+ 1 (* 2 3))`.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from .ast import (
    Assign, Binary, Block, Call, Expr, ExpressionStatement, FunctionDecl,
    Grouping, If, Literal, Logical, Print, Return, Stmt, Unary, Variable,
    VarDecl, While,
)
from .types import stringify


def parenthesize(name: str, *parts: str) -> str:
    return '(' + ' '.join((name,) + parts) + ')'


def format_expr(expr: Expr) -> str:
    if isinstance(expr, Literal):
        if isinstance(expr.value, str):
            return '"' + expr.value + '"'
        return stringify(expr.value)
    if isinstance(expr, Variable):
        return expr.name.lexeme
    if isinstance(expr, Assign):
        return parenthesize('=', expr.name.lexeme, format_expr(expr.value))
    if isinstance(expr, Unary):
        return parenthesize(expr.op.lexeme, format_expr(expr.operand))
    if isinstance(expr, (Binary, Logical)):
        return parenthesize(expr.op.lexeme, format_expr(expr.left), format_expr(expr.right))
    if isinstance(expr, Grouping):
        return parenthesize('group', format_expr(expr.inner))
    if isinstance(expr, Call):
        return parenthesize('call', format_expr(expr.callee), *(format_expr(a) for a in expr.args))
    raise NotImplementedError(f"format_expr: unexpected node type {type(expr).__name__}")


def format_stmt(stmt: Optional[Stmt]) -> str:
    # discarded statements show up as None in parser output
    if stmt is None:
        return '(error)'
    if isinstance(stmt, ExpressionStatement):
        return parenthesize(';', format_expr(stmt.expr))
    if isinstance(stmt, Print):
        return parenthesize('print', format_expr(stmt.expr))
    if isinstance(stmt, VarDecl):
        if stmt.initializer is None:
            return parenthesize('var', stmt.name.lexeme)
        return parenthesize('var', stmt.name.lexeme, format_expr(stmt.initializer))
    if isinstance(stmt, Block):
        return parenthesize('block', *(format_stmt(s) for s in stmt.body))
    if isinstance(stmt, If):
        parts = [format_expr(stmt.condition), format_stmt(stmt.then_branch)]
        if stmt.else_branch is not None:
            parts.append(format_stmt(stmt.else_branch))
        return parenthesize('if', *parts)
    if isinstance(stmt, While):
        return parenthesize('while', format_expr(stmt.condition), format_stmt(stmt.body))
    if isinstance(stmt, FunctionDecl):
        params = '(' + ' '.join(p.lexeme for p in stmt.params) + ')'
        return parenthesize('fun', stmt.name.lexeme, params, *(format_stmt(s) for s in stmt.body))
    if isinstance(stmt, Return):
        if stmt.value is None:
            return parenthesize('return')
        return parenthesize('return', format_expr(stmt.value))
    raise NotImplementedError(f"format_stmt: unexpected node type {type(stmt).__name__}")


def format_program(statements: Sequence[Optional[Stmt]]) -> str:
    lines: List[str] = [format_stmt(stmt) for stmt in statements]
    return '\n'.join(lines)
