#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Chained variable scopes for the Lox interpreter.

Each Environment maps names to runtime values and points at its enclosing
scope; the global environment has none. Function values hold a reference to
the environment they were declared in, so a scope stays alive for as long as
any closure can still reach it.
"""

from typing import Any, Dict, Optional

from lox.lexer import Token


class LoxRuntimeError(Exception):
    """Raised when evaluation fails; carries the token responsible."""

    def __init__(self, token: Token, message: str):
        self.message = message
        self.token = token
        self.line = token.line
        super().__init__(self._format())

    def _format(self) -> str:
        return f"{self.message}\n[line {self.line}]"


class Environment:
    """A single scope in the environment chain."""

    __slots__ = ("values", "enclosing")

    def __init__(self, enclosing: Optional["Environment"] = None):
        self.values: Dict[str, Any] = {}
        self.enclosing = enclosing

    def __repr__(self):
        return f"Environment({sorted(self.values)!r})"

    def define(self, name: str, value: Any) -> None:
        """Bind a name in this scope; redefinition simply overwrites."""
        self.values[name] = value

    def get(self, name: Token) -> Any:
        """Look a name up, walking outward through enclosing scopes."""
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                return env.values[name.lexeme]
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def assign(self, name: Token, value: Any) -> None:
        """Assign to an existing binding, walking outward through enclosing scopes."""
        env: Optional[Environment] = self
        while env is not None:
            if name.lexeme in env.values:
                env.values[name.lexeme] = value
                return
            env = env.enclosing
        raise LoxRuntimeError(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int) -> "Environment":
        """Return the environment exactly `distance` hops up the chain."""
        env = self
        for _ in range(distance):
            env = env.enclosing
        return env

    def get_at(self, distance: int, name: str) -> Any:
        return self.ancestor(distance).values[name]

    def assign_at(self, distance: int, name: Token, value: Any) -> None:
        self.ancestor(distance).values[name.lexeme] = value
