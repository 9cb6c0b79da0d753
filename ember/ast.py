"""Abstract Syntax Tree (AST) definitions for the Ember language.

The AST classes defined in this module represent the syntactic structure
of parsed Ember programs. Expressions and statements are two closed sets
of frozen dataclasses; the `Expr` and `Stmt` unions list every variant the
parser can produce and the interpreter must handle. Child sequences are
tuples so a finished tree cannot be modified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from .scanner import Token


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


###############################################################################
# Expressions
###############################################################################


@dataclass(frozen=True)
class Literal(Node):
    value: Any  # float, str, bool or None


@dataclass(frozen=True)
class Variable(Node):
    name: Token


@dataclass(frozen=True)
class Assign(Node):
    name: Token
    value: 'Expr'


@dataclass(frozen=True)
class Unary(Node):
    op: Token
    operand: 'Expr'


@dataclass(frozen=True)
class Binary(Node):
    op: Token
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class Logical(Node):
    op: Token  # 'and' or 'or'
    left: 'Expr'
    right: 'Expr'


@dataclass(frozen=True)
class Grouping(Node):
    inner: 'Expr'


@dataclass(frozen=True)
class Call(Node):
    callee: 'Expr'
    paren: Token  # closing paren, used for error positions
    args: Tuple['Expr', ...]


Expr = Union[Literal, Variable, Assign, Unary, Binary, Logical, Grouping, Call]


###############################################################################
# Statements
###############################################################################


@dataclass(frozen=True)
class ExpressionStatement(Node):
    expr: Expr


@dataclass(frozen=True)
class Print(Node):
    expr: Expr


@dataclass(frozen=True)
class VarDecl(Node):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Node):
    body: Tuple['Stmt', ...]


@dataclass(frozen=True)
class If(Node):
    condition: Expr
    then_branch: 'Stmt'
    else_branch: Optional['Stmt']


@dataclass(frozen=True)
class While(Node):
    condition: Expr
    body: 'Stmt'


@dataclass(frozen=True)
class FunctionDecl(Node):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple['Stmt', ...]


@dataclass(frozen=True)
class Return(Node):
    keyword: Token
    value: Optional[Expr]


Stmt = Union[ExpressionStatement, Print, VarDecl, Block, If, While, FunctionDecl, Return]
