#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Abstract Syntax Tree (AST) node definitions for Lox.
Nodes keep the tokens they were built from so later stages can report lines.
Nodes compare and hash by identity: the resolver keys its table on them.
"""

from typing import Any, List, Optional

from lox.lexer import Token


class Node:
    """Base class for all AST nodes."""

    __slots__ = ()

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class Expr(Node):
    """Base class for expression nodes."""

    __slots__ = ()


class Stmt(Node):
    """Base class for statement nodes."""

    __slots__ = ()


# Expressions


class Literal(Expr):
    """Literal value: number, string, true, false or nil."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self):
        return f"Literal({self.value!r})"


class Grouping(Expr):
    """Parenthesized expression."""

    __slots__ = ("expression",)

    def __init__(self, expression: Expr):
        self.expression = expression

    def __repr__(self):
        return f"Grouping({self.expression!r})"


class Unary(Expr):
    """Prefix operation: op right."""

    __slots__ = ("operator", "right")

    def __init__(self, operator: Token, right: Expr):
        self.operator = operator
        self.right = right

    def __repr__(self):
        return f"Unary({self.operator.lexeme!r}, {self.right!r})"


class Binary(Expr):
    """Binary operation: left op right."""

    __slots__ = ("left", "operator", "right")

    def __init__(self, left: Expr, operator: Token, right: Expr):
        self.left = left
        self.operator = operator
        self.right = right

    def __repr__(self):
        return f"Binary({self.operator.lexeme!r}, {self.left!r}, {self.right!r})"


class Logical(Expr):
    """Short-circuiting `and` / `or`."""

    __slots__ = ("left", "operator", "right")

    def __init__(self, left: Expr, operator: Token, right: Expr):
        self.left = left
        self.operator = operator
        self.right = right

    def __repr__(self):
        return f"Logical({self.operator.lexeme!r}, {self.left!r}, {self.right!r})"


class Variable(Expr):
    """Variable reference."""

    __slots__ = ("name",)

    def __init__(self, name: Token):
        self.name = name

    def __repr__(self):
        return f"Variable({self.name.lexeme!r})"


class Assign(Expr):
    """Assignment to a variable."""

    __slots__ = ("name", "value")

    def __init__(self, name: Token, value: Expr):
        self.name = name
        self.value = value

    def __repr__(self):
        return f"Assign({self.name.lexeme!r}, {self.value!r})"


class Call(Expr):
    """Function call: callee(args). `paren` is the closing parenthesis."""

    __slots__ = ("callee", "paren", "arguments")

    def __init__(self, callee: Expr, paren: Token, arguments: List[Expr]):
        self.callee = callee
        self.paren = paren
        self.arguments = arguments

    def __repr__(self):
        return f"Call({self.callee!r}, {self.arguments!r})"


class Get(Expr):
    """Property access: object.name."""

    __slots__ = ("object", "name")

    def __init__(self, object: Expr, name: Token):
        self.object = object
        self.name = name

    def __repr__(self):
        return f"Get({self.object!r}, {self.name.lexeme!r})"


class Set(Expr):
    """Property assignment: object.name = value."""

    __slots__ = ("object", "name", "value")

    def __init__(self, object: Expr, name: Token, value: Expr):
        self.object = object
        self.name = name
        self.value = value

    def __repr__(self):
        return f"Set({self.object!r}, {self.name.lexeme!r}, {self.value!r})"


class This(Expr):
    """The `this` keyword inside a method."""

    __slots__ = ("keyword",)

    def __init__(self, keyword: Token):
        self.keyword = keyword

    def __repr__(self):
        return "This()"


class Super(Expr):
    """Superclass method access: super.method."""

    __slots__ = ("keyword", "method")

    def __init__(self, keyword: Token, method: Token):
        self.keyword = keyword
        self.method = method

    def __repr__(self):
        return f"Super({self.method.lexeme!r})"


# Statements


class Expression(Stmt):
    """Expression evaluated for its side effects."""

    __slots__ = ("expression",)

    def __init__(self, expression: Expr):
        self.expression = expression

    def __repr__(self):
        return f"Expression({self.expression!r})"


class Print(Stmt):
    """print expr;"""

    __slots__ = ("expression",)

    def __init__(self, expression: Expr):
        self.expression = expression

    def __repr__(self):
        return f"Print({self.expression!r})"


class Var(Stmt):
    """Variable declaration with an optional initializer."""

    __slots__ = ("name", "initializer")

    def __init__(self, name: Token, initializer: Optional[Expr]):
        self.name = name
        self.initializer = initializer

    def __repr__(self):
        return f"Var({self.name.lexeme!r}, {self.initializer!r})"


class Block(Stmt):
    """Braced sequence of statements with its own scope."""

    __slots__ = ("statements",)

    def __init__(self, statements: List[Stmt]):
        self.statements = statements

    def __repr__(self):
        return f"Block({self.statements!r})"


class If(Stmt):
    """If statement."""

    __slots__ = ("condition", "then_branch", "else_branch")

    def __init__(
        self, condition: Expr, then_branch: Stmt, else_branch: Optional[Stmt]
    ):
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch

    def __repr__(self):
        return f"If({self.condition!r}, {self.then_branch!r}, {self.else_branch!r})"


class While(Stmt):
    """While loop. `for` loops are desugared into this."""

    __slots__ = ("condition", "body")

    def __init__(self, condition: Expr, body: Stmt):
        self.condition = condition
        self.body = body

    def __repr__(self):
        return f"While({self.condition!r}, {self.body!r})"


class Function(Stmt):
    """Function or method declaration."""

    __slots__ = ("name", "params", "body")

    def __init__(self, name: Token, params: List[Token], body: List[Stmt]):
        self.name = name
        self.params = params
        self.body = body

    def __repr__(self):
        params = [p.lexeme for p in self.params]
        return f"Function({self.name.lexeme!r}, {params!r}, body=[...])"


class Return(Stmt):
    """Return statement."""

    __slots__ = ("keyword", "value")

    def __init__(self, keyword: Token, value: Optional[Expr]):
        self.keyword = keyword
        self.value = value

    def __repr__(self):
        return f"Return({self.value!r})"


class Class(Stmt):
    """Class declaration with an optional superclass."""

    __slots__ = ("name", "superclass", "methods")

    def __init__(
        self, name: Token, superclass: Optional[Variable], methods: List[Function]
    ):
        self.name = name
        self.superclass = superclass
        self.methods = methods

    def __repr__(self):
        return f"Class({self.name.lexeme!r}, {self.superclass!r}, methods=[...])"
