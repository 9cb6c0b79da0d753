"""Recursive-descent parser for the Ember language.

Each precedence level is one method that composes the next-higher level:

    assignment -> logic_or -> logic_and -> equality -> comparison
               -> term -> factor -> unary -> call -> primary

Parse failures do not raise. A rule that cannot continue records a
SyntaxError diagnostic and returns None; every caller passes the None
upward until `declaration`, which synchronizes to the next statement
boundary and yields None for the discarded statement. Some errors
(invalid assignment target, too many arguments, top-level return) are
reported without failing the rule at all.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple, Type

from .ast import (
    Assign, Binary, Block, Call, Expr, ExpressionStatement, FunctionDecl,
    Grouping, If, Literal, Logical, Print, Return, Stmt, Variable, VarDecl,
    While, Unary,
)
from .errors import Diagnostics
from .scanner import Token, TokenType

MAX_ARGUMENTS = 255

# tokens that begin a statement the parser can resume at
SYNC_KEYWORDS = frozenset({
    TokenType.FOR,
    TokenType.WHILE,
    TokenType.IF,
    TokenType.RETURN,
})


class Parser:
    def __init__(self, tokens: List[Token], diagnostics: Optional[Diagnostics] = None):
        self.tokens = tokens
        self.pos = 0
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.function_depth = 0

    def parse(self) -> List[Optional[Stmt]]:
        """Parse the whole token list.

        Statements that failed to parse are present as None so the result
        lines up with the statements in the source.
        """
        statements: List[Optional[Stmt]] = []
        while not self.is_at_end():
            statements.append(self.declaration())
        return statements

    # Token helpers

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def is_at_end(self) -> bool:
        return self.peek().kind is TokenType.EOF

    def check(self, kind: TokenType) -> bool:
        if self.is_at_end():
            return False
        return self.peek().kind is kind

    def advance(self) -> Token:
        token = self.peek()
        if not self.is_at_end():
            self.pos += 1
        return token

    def match(self, *kinds: TokenType) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind: TokenType, message: str) -> Optional[Token]:
        if self.check(kind):
            return self.advance()
        self.error(self.peek(), message)
        return None

    def error(self, token: Token, message: str) -> None:
        self.diagnostics.syntax(token, message)

    def synchronize(self) -> None:
        """Discard tokens up to the next likely statement boundary."""
        self.advance()
        while not self.is_at_end():
            if self.previous().kind is TokenType.SEMICOLON:
                return
            if self.peek().kind in SYNC_KEYWORDS:
                return
            self.advance()

    # Statements

    def declaration(self) -> Optional[Stmt]:
        if self.match(TokenType.FUN):
            stmt = self.function('function')
        elif self.match(TokenType.VAR):
            stmt = self.var_declaration()
        else:
            stmt = self.statement()
        if stmt is None:
            self.synchronize()
        return stmt

    def statement(self) -> Optional[Stmt]:
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.LEFT_BRACE):
            body = self.block()
            if body is None:
                return None
            return Block(body)
        return self.expression_statement()

    def function(self, kind: str) -> Optional[FunctionDecl]:
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        if name is None:
            return None
        if self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.") is None:
            return None
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) == MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                param = self.consume(TokenType.IDENTIFIER, 'Expect parameter name.')
                if param is None:
                    return None
                params.append(param)
                if not self.match(TokenType.COMMA):
                    break
        if self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.") is None:
            return None
        if self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.") is None:
            return None
        self.function_depth += 1
        body = self.block()
        self.function_depth -= 1
        if body is None:
            return None
        return FunctionDecl(name, tuple(params), body)

    def var_declaration(self) -> Optional[VarDecl]:
        name = self.consume(TokenType.IDENTIFIER, 'Expect variable name.')
        if name is None:
            return None
        initializer: Optional[Expr] = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()
            if initializer is None:
                return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after value.") is None:
            return None
        return VarDecl(name, initializer)

    def block(self) -> Optional[Tuple[Stmt, ...]]:
        # the opening brace has already been consumed
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        if self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.") is None:
            return None
        return tuple(statements)

    def if_statement(self) -> Optional[If]:
        if self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.") is None:
            return None
        condition = self.expression()
        if condition is None:
            return None
        if self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.") is None:
            return None
        then_branch = self.statement()
        if then_branch is None:
            return None
        else_branch: Optional[Stmt] = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()
            if else_branch is None:
                return None
        return If(condition, then_branch, else_branch)

    def while_statement(self) -> Optional[While]:
        if self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.") is None:
            return None
        condition = self.expression()
        if condition is None:
            return None
        if self.consume(TokenType.RIGHT_PAREN, "Expect ')' after while condition.") is None:
            return None
        body = self.statement()
        if body is None:
            return None
        return While(condition, body)

    def for_statement(self) -> Optional[Block]:
        """Parse a for loop and rewrite it as a while loop inside a block.

        `for (init; cond; incr) body` becomes
        `{ init; while (cond) { body; incr; } }`.
        """
        if self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.") is None:
            return None

        initializer: Optional[Stmt]
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
            if initializer is None:
                return None
        else:
            initializer = self.expression_statement()
            if initializer is None:
                return None

        condition: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
            if condition is None:
                return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.") is None:
            return None

        increment: Optional[Expr] = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
            if increment is None:
                return None
        if self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.") is None:
            return None

        body = self.statement()
        if body is None:
            return None

        if increment is not None:
            body = Block((body, ExpressionStatement(increment)))
        if condition is None:
            condition = Literal(True)
        loop = While(condition, body)
        if initializer is None:
            return Block((loop,))
        return Block((initializer, loop))

    def print_statement(self) -> Optional[Print]:
        value = self.expression()
        if value is None:
            return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after value.") is None:
            return None
        return Print(value)

    def return_statement(self) -> Optional[Return]:
        keyword = self.previous()
        if self.function_depth == 0:
            self.error(keyword, "Can't return from top-level code.")
        value: Optional[Expr] = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()
            if value is None:
                return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after return value.") is None:
            return None
        return Return(keyword, value)

    def expression_statement(self) -> Optional[ExpressionStatement]:
        expr = self.expression()
        if expr is None:
            return None
        if self.consume(TokenType.SEMICOLON, "Expect ';' after value.") is None:
            return None
        return ExpressionStatement(expr)

    # Expressions

    def expression(self) -> Optional[Expr]:
        return self.assignment()

    def assignment(self) -> Optional[Expr]:
        # right-associative: a = b = c is a = (b = c)
        expr = self.logic_or()
        if expr is None:
            return None
        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()
            if value is None:
                return None
            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            self.error(equals, 'Invalid assignment target.')
        return expr

    def left_associative(self, operand: Callable[[], Optional[Expr]],
                         operators: Sequence[TokenType],
                         node_type: Type) -> Optional[Expr]:
        expr = operand()
        if expr is None:
            return None
        while self.match(*operators):
            op = self.previous()
            right = operand()
            if right is None:
                return None
            expr = node_type(op, expr, right)
        return expr

    def logic_or(self) -> Optional[Expr]:
        return self.left_associative(self.logic_and, (TokenType.OR,), Logical)

    def logic_and(self) -> Optional[Expr]:
        return self.left_associative(self.equality, (TokenType.AND,), Logical)

    def equality(self) -> Optional[Expr]:
        return self.left_associative(
            self.comparison, (TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL), Binary)

    def comparison(self) -> Optional[Expr]:
        return self.left_associative(
            self.term,
            (TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL),
            Binary)

    def term(self) -> Optional[Expr]:
        return self.left_associative(self.factor, (TokenType.MINUS, TokenType.PLUS), Binary)

    def factor(self) -> Optional[Expr]:
        return self.left_associative(self.unary, (TokenType.SLASH, TokenType.STAR), Binary)

    def unary(self) -> Optional[Expr]:
        if self.match(TokenType.BANG, TokenType.MINUS):
            op = self.previous()
            operand = self.unary()
            if operand is None:
                return None
            return Unary(op, operand)
        return self.call()

    def call(self) -> Optional[Expr]:
        expr = self.primary()
        if expr is None:
            return None
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
            if expr is None:
                return None
        return expr

    def finish_call(self, callee: Expr) -> Optional[Call]:
        args: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(args) == MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arg = self.expression()
                if arg is None:
                    return None
                args.append(arg)
                if not self.match(TokenType.COMMA):
                    break
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        if paren is None:
            return None
        return Call(callee, paren, tuple(args))

    def primary(self) -> Optional[Expr]:
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NULL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            if expr is None:
                return None
            if self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.") is None:
                return None
            return Grouping(expr)
        self.error(self.peek(), 'Expect expression.')
        return None


def parse(tokens: List[Token], diagnostics: Optional[Diagnostics] = None) -> List[Optional[Stmt]]:
    """Parse a token list into top-level statements (None for discarded ones)."""
    return Parser(tokens, diagnostics).parse()
