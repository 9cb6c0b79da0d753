"""Callable values: host-supplied natives and user-defined functions.

Both variants expose `arity()` and `invoke(interpreter, args)` so the
interpreter can call either one the same way once the argument count has
been checked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List

from .ast import FunctionDecl
from .environment import Environment

if TYPE_CHECKING:
    from .interpreter import Interpreter


@dataclass(eq=False)
class NativeFunction:
    name: str
    arity_count: int
    fn: Callable[[List[Any]], Any]

    def arity(self) -> int:
        return self.arity_count

    def invoke(self, interpreter: 'Interpreter', args: List[Any]) -> Any:
        return self.fn(args)

    def __str__(self) -> str:
        return f"<native fn {self.name}>"


@dataclass(eq=False)
class UserFunction:
    declaration: FunctionDecl
    closure: Environment

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def invoke(self, interpreter: 'Interpreter', args: List[Any]) -> Any:
        # Parameters live in a fresh scope whose parent is the defining
        # scope, not the caller's.
        env = Environment(parent=self.closure)
        for param, arg in zip(self.declaration.params, args):
            env.define(param.lexeme, arg, param)
        signal = interpreter.execute_block(self.declaration.body, env)
        if signal is not None:
            return signal.value
        return None

    def __str__(self) -> str:
        return f"<fn {self.name}>"

    def __repr__(self) -> str:
        return f"<function {self.name}>"

