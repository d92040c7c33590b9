#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Lox interpreter – walks the resolved AST and executes it.
"""

import math
import sys
import threading
from typing import Any, Callable, Dict, List, Optional, TextIO

from lox.environment import Environment, LoxRuntimeError
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
from lox.runtime import (
    NATIVES,
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    is_equal,
    is_truthy,
    stringify,
)


# Each Lox call nests a dozen or so Python frames; deep Lox recursion needs
# a raised recursion limit and a thread stack big enough to back it.
RECURSION_LIMIT = 200_000
THREAD_STACK_SIZE = 512 * 1024 * 1024


def run_with_deep_stack(fn: Callable[..., Any], *args: Any) -> Any:
    """Call fn(*args) on a worker thread with a large stack and recursion limit.

    Exceptions raised by fn are re-raised in the calling thread.
    """
    result: List[Any] = []
    failure: List[BaseException] = []

    def target() -> None:
        try:
            result.append(fn(*args))
        except BaseException as error:
            failure.append(error)

    old_limit = sys.getrecursionlimit()
    old_stack_size = threading.stack_size(THREAD_STACK_SIZE)
    sys.setrecursionlimit(RECURSION_LIMIT)
    try:
        worker = threading.Thread(target=target, name="lox-interpreter")
        worker.start()
        worker.join()
    finally:
        threading.stack_size(old_stack_size)
        sys.setrecursionlimit(old_limit)

    if failure:
        raise failure[0]
    return result[0]


class ReturnValue:
    """Completion of a `return` statement, passed up to the enclosing call."""

    __slots__ = ("value",)

    def __init__(self, value: Any):
        self.value = value

    def __repr__(self):
        return f"ReturnValue({self.value!r})"


# Statement execution yields None for normal completion
Completion = Optional[ReturnValue]


class Interpreter:
    """Tree-walking evaluator for Lox."""

    def __init__(self, out: Optional[TextIO] = None):
        self.out = out if out is not None else sys.stdout
        self.globals = Environment()
        self.environment = self.globals
        # Scope distances filled in by the resolver, keyed by node identity
        self.locals: Dict[Expr, int] = {}

        for native in NATIVES:
            self.globals.define(native.name, native)

    def interpret(self, statements: List[Stmt]) -> Optional[LoxRuntimeError]:
        """Run a program; return the runtime error that stopped it, if any."""
        try:
            for statement in statements:
                self.execute(statement)
        except LoxRuntimeError as error:
            return error
        return None

    def resolve(self, expr: Expr, depth: int) -> None:
        """Record that `expr` refers to a binding `depth` scopes out."""
        self.locals[expr] = depth

    def visit(self, node: Node):
        method = getattr(self, f"visit_{type(node).__name__}")
        return method(node)

    def evaluate(self, expr: Expr) -> Any:
        return self.visit(expr)

    def execute(self, stmt: Stmt) -> Completion:
        return self.visit(stmt)

    def execute_block(
        self, statements: List[Stmt], environment: Environment
    ) -> Completion:
        """Run statements in `environment`, restoring the current one afterwards."""
        previous = self.environment
        try:
            self.environment = environment
            for statement in statements:
                result = self.execute(statement)
                if result is not None:
                    return result
            return None
        finally:
            self.environment = previous

    # Statements

    def visit_Expression(self, stmt: Expression) -> Completion:
        self.evaluate(stmt.expression)
        return None

    def visit_Print(self, stmt: Print) -> Completion:
        value = self.evaluate(stmt.expression)
        self.out.write(stringify(value) + "\n")
        return None

    def visit_Var(self, stmt: Var) -> Completion:
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)
        return None

    def visit_Block(self, stmt: Block) -> Completion:
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_If(self, stmt: If) -> Completion:
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def visit_While(self, stmt: While) -> Completion:
        while is_truthy(self.evaluate(stmt.condition)):
            result = self.execute(stmt.body)
            if result is not None:
                return result
        return None

    def visit_Function(self, stmt: Function) -> Completion:
        function = LoxFunction(stmt, self.environment)
        self.environment.define(stmt.name.lexeme, function)
        return None

    def visit_Return(self, stmt: Return) -> Completion:
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return ReturnValue(value)

    def visit_Class(self, stmt: Class) -> Completion:
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, LoxClass):
                raise LoxRuntimeError(
                    stmt.superclass.name, "Superclass must be a class."
                )

        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define("super", superclass)

        methods: Dict[str, LoxFunction] = {}
        for method in stmt.methods:
            methods[method.name.lexeme] = LoxFunction(
                method, self.environment, method.name.lexeme == "init"
            )

        klass = LoxClass(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)
        return None

    # Expressions

    def visit_Literal(self, expr: Literal) -> Any:
        return expr.value

    def visit_Grouping(self, expr: Grouping) -> Any:
        return self.evaluate(expr.expression)

    def visit_Unary(self, expr: Unary) -> Any:
        right = self.evaluate(expr.right)
        if expr.operator.type == TokenType.MINUS:
            self._check_number_operand(expr.operator, right)
            return -right
        # TokenType.BANG
        return not is_truthy(right)

    def visit_Binary(self, expr: Binary) -> Any:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.operator.type

        if op == TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op == TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op == TokenType.PLUS:
            if isinstance(left, float) and isinstance(right, float):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(
                expr.operator, "Operands must be two numbers or two strings."
            )

        self._check_number_operands(expr.operator, left, right)
        if op == TokenType.MINUS:
            return left - right
        if op == TokenType.STAR:
            return left * right
        if op == TokenType.SLASH:
            return self._divide(left, right)
        if op == TokenType.GREATER:
            return left > right
        if op == TokenType.GREATER_EQUAL:
            return left >= right
        if op == TokenType.LESS:
            return left < right
        if op == TokenType.LESS_EQUAL:
            return left <= right
        raise LoxRuntimeError(expr.operator, "Unknown operator.")

    def visit_Logical(self, expr: Logical) -> Any:
        left = self.evaluate(expr.left)
        if expr.operator.type == TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left
        return self.evaluate(expr.right)

    def visit_Variable(self, expr: Variable) -> Any:
        return self._look_up_variable(expr.name, expr)

    def visit_Assign(self, expr: Assign) -> Any:
        value = self.evaluate(expr.value)
        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)
        return value

    def visit_Call(self, expr: Call) -> Any:
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
        if len(arguments) != callee.arity():
            raise LoxRuntimeError(
                expr.paren,
                f"Expected {callee.arity()} arguments but got {len(arguments)}.",
            )
        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

    def visit_Get(self, expr: Get) -> Any:
        obj = self.evaluate(expr.object)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)
        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    def visit_Set(self, expr: Set) -> Any:
        obj = self.evaluate(expr.object)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")
        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    def visit_This(self, expr: This) -> Any:
        return self._look_up_variable(expr.keyword, expr)

    def visit_Super(self, expr: Super) -> Any:
        distance = self.locals[expr]
        superclass = self.environment.get_at(distance, "super")
        # `this` is always bound one scope inside the one holding `super`
        obj = self.environment.get_at(distance - 1, "this")
        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(
                expr.method, f"Undefined property '{expr.method.lexeme}'."
            )
        return method.bind(obj)

    # Helpers

    def _look_up_variable(self, name: Token, expr: Expr) -> Any:
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    @staticmethod
    def _check_number_operand(operator: Token, operand: Any) -> None:
        if isinstance(operand, float):
            return
        raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def _check_number_operands(operator: Token, left: Any, right: Any) -> None:
        if isinstance(left, float) and isinstance(right, float):
            return
        raise LoxRuntimeError(operator, "Operands must be numbers.")

    @staticmethod
    def _divide(left: float, right: float) -> float:
        """IEEE-754 division: dividing by zero gives inf or nan."""
        if right == 0:
            if left == 0 or math.isnan(left):
                return math.nan
            return math.copysign(math.inf, left) * math.copysign(1.0, right)
        return left / right
