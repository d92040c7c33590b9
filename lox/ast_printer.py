#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Render AST nodes in a fully parenthesized prefix form, e.g. `(+ 1.0 2.0)`.
"""

from typing import Union

from lox.lexer import Token, format_double
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


class AstPrinter:
    def print(self, node: Node) -> str:
        method = getattr(self, f"visit_{type(node).__name__}")
        return method(node)

    def _parenthesize(self, name: str, *parts: Union[Expr, Stmt, Token, str]) -> str:
        pieces = [name]
        for part in parts:
            if isinstance(part, Node):
                pieces.append(self.print(part))
            elif isinstance(part, Token):
                pieces.append(part.lexeme)
            else:
                pieces.append(str(part))
        return "(" + " ".join(pieces) + ")"

    # Expressions

    def visit_Literal(self, expr: Literal) -> str:
        if expr.value is None:
            return "nil"
        if isinstance(expr.value, bool):
            return "true" if expr.value else "false"
        if isinstance(expr.value, float):
            return format_double(expr.value)
        return expr.value

    def visit_Grouping(self, expr: Grouping) -> str:
        return self._parenthesize("group", expr.expression)

    def visit_Unary(self, expr: Unary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.right)

    def visit_Binary(self, expr: Binary) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_Logical(self, expr: Logical) -> str:
        return self._parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_Variable(self, expr: Variable) -> str:
        return expr.name.lexeme

    def visit_Assign(self, expr: Assign) -> str:
        return self._parenthesize(f"assign {expr.name.lexeme}", expr.value)

    def visit_Call(self, expr: Call) -> str:
        return self._parenthesize("call", expr.callee, *expr.arguments)

    def visit_Get(self, expr: Get) -> str:
        return self._parenthesize(f"get {expr.name.lexeme}", expr.object)

    def visit_Set(self, expr: Set) -> str:
        return self._parenthesize(f"set {expr.name.lexeme}", expr.object, expr.value)

    def visit_This(self, expr: This) -> str:
        return "this"

    def visit_Super(self, expr: Super) -> str:
        return self._parenthesize("super", expr.method)

    # Statements

    def visit_Expression(self, stmt: Expression) -> str:
        return self._parenthesize("expression", stmt.expression)

    def visit_Print(self, stmt: Print) -> str:
        return self._parenthesize("print", stmt.expression)

    def visit_Var(self, stmt: Var) -> str:
        if stmt.initializer is None:
            return f"(var {stmt.name.lexeme})"
        return self._parenthesize(f"var {stmt.name.lexeme}", stmt.initializer)

    def visit_Block(self, stmt: Block) -> str:
        return self._parenthesize("block", *stmt.statements)

    def visit_If(self, stmt: If) -> str:
        if stmt.else_branch is None:
            return self._parenthesize("if", stmt.condition, stmt.then_branch)
        return self._parenthesize(
            "if-else", stmt.condition, stmt.then_branch, stmt.else_branch
        )

    def visit_While(self, stmt: While) -> str:
        return self._parenthesize("while", stmt.condition, stmt.body)

    def visit_Function(self, stmt: Function) -> str:
        params = " ".join(param.lexeme for param in stmt.params)
        return self._parenthesize(f"fun {stmt.name.lexeme}({params})", *stmt.body)

    def visit_Return(self, stmt: Return) -> str:
        if stmt.value is None:
            return "(return)"
        return self._parenthesize("return", stmt.value)

    def visit_Class(self, stmt: Class) -> str:
        name = f"class {stmt.name.lexeme}"
        if stmt.superclass is not None:
            name += f" < {stmt.superclass.name.lexeme}"
        return self._parenthesize(name, *stmt.methods)
