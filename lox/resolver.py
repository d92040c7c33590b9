#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Static resolution pass: works out, for every variable reference, how many
scopes out its binding lives, and reports misuse of `return`, `this` and
`super`. The interpreter reads the resulting distances instead of searching
the environment chain by name.
"""

from enum import Enum, auto
from typing import TYPE_CHECKING, Dict, List

from lox.lexer import Token, TokenType
from lox.lox_ast import (
    Assign,
    Binary,
    Block,
    Call,
    Class,
    Expr,
    Expression,
    Function,
    Get,
    Grouping,
    If,
    Literal,
    Logical,
    Node,
    Print,
    Return,
    Set,
    Stmt,
    Super,
    This,
    Unary,
    Var,
    Variable,
    While,
)

if TYPE_CHECKING:
    from lox.interpreter import Interpreter


class ResolveError(Exception):
    def __init__(self, token: Token, message: str):
        self.message = message
        self.token = token
        self.line = token.line
        super().__init__(self._format())

    def _format(self) -> str:
        if self.token.type == TokenType.EOF:
            where = " at end"
        else:
            where = f" at '{self.token.lexeme}'"
        return f"[line {self.line}] Error{where}: {self.message}"


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    def __init__(self, interpreter: "Interpreter"):
        self.interpreter = interpreter
        # Innermost scope last; maps name -> "initializer finished"
        self.scopes: List[Dict[str, bool]] = []
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.errors: List[ResolveError] = []

    def resolve(self, statements: List[Stmt]) -> List[ResolveError]:
        for statement in statements:
            self.visit(statement)
        return self.errors

    def visit(self, node: Node):
        method = getattr(self, f"visit_{type(node).__name__}")
        method(node)

    def _error(self, token: Token, message: str) -> None:
        self.errors.append(ResolveError(token, message))

    # Scope bookkeeping

    def _begin_scope(self) -> None:
        self.scopes.append({})

    def _end_scope(self) -> None:
        self.scopes.pop()

    def _declare(self, name: Token) -> None:
        if not self.scopes:
            return
        scope = self.scopes[-1]
        if name.lexeme in scope:
            self._error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def _define(self, name: Token) -> None:
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def _resolve_local(self, expr: Expr, name: Token) -> None:
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return
        # Not found locally: the interpreter looks it up in globals

    def _resolve_function(self, function: Function, type: FunctionType) -> None:
        enclosing_function = self.current_function
        self.current_function = type

        self._begin_scope()
        for param in function.params:
            self._declare(param)
            self._define(param)
        for statement in function.body:
            self.visit(statement)
        self._end_scope()

        self.current_function = enclosing_function

    # Statements

    def visit_Block(self, stmt: Block) -> None:
        self._begin_scope()
        for statement in stmt.statements:
            self.visit(statement)
        self._end_scope()

    def visit_Class(self, stmt: Class) -> None:
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self._declare(stmt.name)
        self._define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self._error(stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.visit(stmt.superclass)

            self._begin_scope()
            self.scopes[-1]["super"] = True

        self._begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            if method.name.lexeme == "init":
                declaration = FunctionType.INITIALIZER
            else:
                declaration = FunctionType.METHOD
            self._resolve_function(method, declaration)

        self._end_scope()
        if stmt.superclass is not None:
            self._end_scope()

        self.current_class = enclosing_class

    def visit_Expression(self, stmt: Expression) -> None:
        self.visit(stmt.expression)

    def visit_Function(self, stmt: Function) -> None:
        # Defined before the body so the function can call itself
        self._declare(stmt.name)
        self._define(stmt.name)
        self._resolve_function(stmt, FunctionType.FUNCTION)

    def visit_If(self, stmt: If) -> None:
        self.visit(stmt.condition)
        self.visit(stmt.then_branch)
        if stmt.else_branch is not None:
            self.visit(stmt.else_branch)

    def visit_Print(self, stmt: Print) -> None:
        self.visit(stmt.expression)

    def visit_Return(self, stmt: Return) -> None:
        if self.current_function == FunctionType.NONE:
            self._error(stmt.keyword, "Can't return from top-level code.")
        if stmt.value is not None:
            if self.current_function == FunctionType.INITIALIZER:
                self._error(stmt.keyword, "Can't return a value from an initializer.")
            self.visit(stmt.value)

    def visit_Var(self, stmt: Var) -> None:
        self._declare(stmt.name)
        if stmt.initializer is not None:
            self.visit(stmt.initializer)
        self._define(stmt.name)

    def visit_While(self, stmt: While) -> None:
        self.visit(stmt.condition)
        self.visit(stmt.body)

    # Expressions

    def visit_Assign(self, expr: Assign) -> None:
        self.visit(expr.value)
        self._resolve_local(expr, expr.name)

    def visit_Binary(self, expr: Binary) -> None:
        self.visit(expr.left)
        self.visit(expr.right)

    def visit_Call(self, expr: Call) -> None:
        self.visit(expr.callee)
        for argument in expr.arguments:
            self.visit(argument)

    def visit_Get(self, expr: Get) -> None:
        # Property names are looked up dynamically; only the object resolves
        self.visit(expr.object)

    def visit_Grouping(self, expr: Grouping) -> None:
        self.visit(expr.expression)

    def visit_Literal(self, expr: Literal) -> None:
        pass

    def visit_Logical(self, expr: Logical) -> None:
        self.visit(expr.left)
        self.visit(expr.right)

    def visit_Set(self, expr: Set) -> None:
        self.visit(expr.value)
        self.visit(expr.object)

    def visit_Super(self, expr: Super) -> None:
        if self.current_class == ClassType.NONE:
            self._error(expr.keyword, "Can't use 'super' outside of a class.")
        elif self.current_class != ClassType.SUBCLASS:
            self._error(expr.keyword, "Can't use 'super' in a class with no superclass.")
        self._resolve_local(expr, expr.keyword)

    def visit_This(self, expr: This) -> None:
        if self.current_class == ClassType.NONE:
            self._error(expr.keyword, "Can't use 'this' outside of a class.")
            return
        self._resolve_local(expr, expr.keyword)

    def visit_Unary(self, expr: Unary) -> None:
        self.visit(expr.right)

    def visit_Variable(self, expr: Variable) -> None:
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self._error(expr.name, "Can't read local variable in its own initializer.")
        self._resolve_local(expr, expr.name)


def resolve(statements: List[Stmt], interpreter: "Interpreter") -> List[ResolveError]:
    """Resolve statements into `interpreter`'s table and return any errors."""
    return Resolver(interpreter).resolve(statements)
