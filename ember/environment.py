from typing import Any, Dict, Optional

from .errors import DefinitionError, EmberRuntimeError
from .scanner import Token


class Environment:
    """One scope of name bindings plus a link to its enclosing scope.

    Function values keep a reference to the scope they were defined in,
    so a block or call scope stays alive for as long as any closure
    created inside it does.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def define(self, name: str, value: Any, token: Optional[Token] = None) -> None:
        # Only this scope is checked: shadowing an outer binding is allowed.
        if name in self.values:
            raise DefinitionError(token, f"Variable '{name}' is already defined in this scope.")
        self.values[name] = value

    def get(self, name: Token) -> Any:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.parent
        raise EmberRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any) -> None:
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.parent
        raise EmberRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def clear(self) -> None:
        self.values.clear()

    def __contains__(self, name: str) -> bool:
        return name in self.values
