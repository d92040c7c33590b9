#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Runtime value model for Lox.

Lox values map onto Python values: nil is None, booleans are bool, numbers
are float and strings are str. Functions, classes and instances get their
own classes below.
"""

import time
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from lox.environment import Environment, LoxRuntimeError
from lox.lexer import Token, format_double
from lox.lox_ast import Function

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class LoxCallable:
    """Anything that can appear before a call's parentheses."""

    __slots__ = ()

    def arity(self) -> int:
        raise NotImplementedError

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        raise NotImplementedError


class NativeFunction(LoxCallable):
    """A function implemented in Python."""

    __slots__ = ("name", "_arity", "fn")

    def __init__(self, name: str, arity: int, fn: Callable[..., Any]):
        self.name = name
        self._arity = arity
        self.fn = fn

    def arity(self) -> int:
        return self._arity

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        return self.fn(*arguments)

    def __str__(self):
        return f"<fn {self.name}>"


def _clock() -> float:
    return float(time.time())


NATIVES = [NativeFunction("clock", 0, _clock)]


class LoxFunction(LoxCallable):
    """A user function or method together with its closure."""

    __slots__ = ("declaration", "closure", "is_initializer")

    def __init__(
        self, declaration: Function, closure: Environment, is_initializer: bool = False
    ):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self) -> str:
        return self.declaration.name.lexeme

    def arity(self) -> int:
        return len(self.declaration.params)

    def bind(self, instance: "LoxInstance") -> "LoxFunction":
        """Return a copy of this method whose closure has `this` bound."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(self.declaration, environment, self.is_initializer)

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        # Parameters live in a fresh scope under the closure, not the caller
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        result = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.get_at(0, "this")
        if result is not None:
            return result.value
        return None

    def __str__(self):
        return f"<fn {self.name}>"


class LoxClass(LoxCallable):
    """A class: calling it constructs an instance."""

    __slots__ = ("name", "superclass", "methods")

    def __init__(
        self,
        name: str,
        superclass: Optional["LoxClass"],
        methods: Dict[str, LoxFunction],
    ):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def find_method(self, name: str) -> Optional[LoxFunction]:
        """Search this class, then each ancestor in turn."""
        klass: Optional[LoxClass] = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def arity(self) -> int:
        initializer = self.find_method("init")
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter: "Interpreter", arguments: List[Any]) -> Any:
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self):
        return self.name


class LoxInstance:
    """An instance of a LoxClass with its own fields."""

    __slots__ = ("klass", "fields")

    def __init__(self, klass: LoxClass):
        self.klass = klass
        self.fields: Dict[str, Any] = {}

    def get(self, name: Token) -> Any:
        """Fields shadow methods; methods come back bound to this instance."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise LoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name: Token, value: Any) -> None:
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"


def is_truthy(value: Any) -> bool:
    """Only nil and false are falsey."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(a: Any, b: Any) -> bool:
    """Equality without coercion: values of different kinds are never equal."""
    if a is None and b is None:
        return True
    if a is None or b is None:
        return False
    # bool is a subclass of int in Python, so compare exact types
    if type(a) is not type(b):
        return False
    return a == b


def format_number(value: float) -> str:
    text = format_double(value)
    if text.endswith(".0"):
        text = text[:-2]
    return text


def stringify(value: Any) -> str:
    """Render a runtime value the way `print` displays it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return format_number(value)
    return str(value)
