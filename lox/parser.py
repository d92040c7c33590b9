#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Lox parser – recursive descent parser that consumes tokens from the lexer
and produces a list of statements.

Syntax errors are collected rather than raised to the caller: after each one
the parser skips ahead to the next likely statement boundary and carries on,
so a single pass reports every independent error.
"""

from typing import List, Optional, Tuple

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

MAX_ARGUMENTS = 255
NESTING_TOO_DEEP = "Expression nesting too deep."


class ParseError(Exception):
    """Raised when the parser encounters a syntax error."""

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


class Parser:
    """Recursive descent parser for Lox."""

    # Tokens that begin a statement; used to find where to resume after an error
    STATEMENT_STARTS = {
        TokenType.CLASS,
        TokenType.FUN,
        TokenType.VAR,
        TokenType.FOR,
        TokenType.IF,
        TokenType.WHILE,
        TokenType.PRINT,
        TokenType.RETURN,
    }

    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0
        self.errors: List[ParseError] = []

    # Token helpers

    def peek(self) -> Token:
        """Return the current token without consuming it."""
        return self.tokens[self.pos]

    def previous(self) -> Token:
        return self.tokens[self.pos - 1]

    def _at_end(self) -> bool:
        return self.peek().type == TokenType.EOF

    def _advance(self) -> Token:
        """Consume the current token and return it."""
        if not self._at_end():
            self.pos += 1
        return self.previous()

    def check(self, type: TokenType) -> bool:
        if self._at_end():
            return False
        return self.peek().type == type

    def match(self, *types: TokenType) -> bool:
        """Consume the current token if it is one of the given types."""
        for type in types:
            if self.check(type):
                self._advance()
                return True
        return False

    def consume(self, expected_type: TokenType, message: str) -> Token:
        """Consume a token of the expected type or raise ParseError."""
        if self.check(expected_type):
            return self._advance()
        raise self._error(self.peek(), message)

    def _error(self, token: Token, message: str) -> ParseError:
        """Record a syntax error and return it so the caller may raise it."""
        error = ParseError(token, message)
        self.errors.append(error)
        return error

    def synchronize(self) -> None:
        """Discard tokens until a likely statement boundary."""
        self._advance()
        while not self._at_end():
            if self.previous().type == TokenType.SEMICOLON:
                return
            if self.peek().type in self.STATEMENT_STARTS:
                return
            self._advance()

    # Entry points

    def parse(self) -> List[Stmt]:
        """Parse a whole Lox program."""
        statements: List[Stmt] = []
        while not self._at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression_statement(self) -> Optional[Stmt]:
        """Parse a single expression; a trailing ';' is optional."""
        try:
            expr = self.expression()
            self.match(TokenType.SEMICOLON)
            if not self._at_end():
                raise self._error(self.peek(), "Expect end of expression.")
            return Expression(expr)
        except ParseError:
            return None
        except RecursionError:
            self._error(self.peek(), NESTING_TOO_DEEP)
            return None

    # Declarations

    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError:
            self.synchronize()
            return None
        except RecursionError:
            self._error(self.peek(), NESTING_TOO_DEEP)
            self.synchronize()
            return None

    def class_declaration(self) -> Class:
        """Parse 'class Name [< Super] { methods }'."""
        name = self.consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self.match(TokenType.LESS):
            self.consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = Variable(self.previous())

        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")
        methods: List[Function] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self._at_end():
            methods.append(self.function("method"))
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return Class(name, superclass, methods)

    def function(self, kind: str) -> Function:
        """Parse 'name(params) { body }' for a function or method."""
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: List[Token] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self._error(
                        self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters."
                    )
                params.append(
                    self.consume(TokenType.IDENTIFIER, "Expect parameter name.")
                )
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        body = self.block()
        return Function(name, params, body)

    def var_declaration(self) -> Var:
        """Parse 'var name [= expr];'."""
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    # Statements

    def statement(self) -> Stmt:
        """Parse a single statement."""
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.block())
        return self.expression_statement()

    def for_statement(self) -> Stmt:
        """Parse a for loop and desugar it into a while loop."""
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = Block([body, Expression(increment)])
        if condition is None:
            condition = Literal(True)
        body = While(condition, body)
        if initializer is not None:
            body = Block([initializer, body])
        return body

    def if_statement(self) -> If:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        # A dangling else binds to the nearest if
        if self.match(TokenType.ELSE):
            else_branch = self.statement()
        return If(condition, then_branch, else_branch)

    def print_statement(self) -> Print:
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self) -> Return:
        keyword = self.previous()
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def while_statement(self) -> While:
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return While(condition, self.statement())

    def block(self) -> List[Stmt]:
        """Parse declarations up to the closing brace (the '{' is consumed)."""
        statements: List[Stmt] = []
        while not self.check(TokenType.RIGHT_BRACE) and not self._at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self) -> Expression:
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    # Expressions, lowest precedence first

    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        """Parse right-associative assignment to a variable or property."""
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)

            # Reported but not raised: the parser is not confused
            self._error(equals, "Invalid assignment target.")

        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            right = self.logic_and()
            expr = Logical(expr, operator, right)
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.equality()
            expr = Logical(expr, operator, right)
        return expr

    def _binary(self, operand, *operators: TokenType) -> Expr:
        """Parse a left-associative chain of binary operators."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = Binary(expr, operator, right)
        return expr

    def equality(self) -> Expr:
        return self._binary(
            self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL
        )

    def comparison(self) -> Expr:
        return self._binary(
            self.term,
            TokenType.GREATER,
            TokenType.GREATER_EQUAL,
            TokenType.LESS,
            TokenType.LESS_EQUAL,
        )

    def term(self) -> Expr:
        return self._binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self) -> Expr:
        return self._binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def unary(self) -> Expr:
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.call()

    def call(self) -> Expr:
        """Parse chained calls and property accesses: a.b.c(x)(y)."""
        expr = self.primary()
        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(
                    TokenType.IDENTIFIER, "Expect property name after '.'."
                )
                expr = Get(expr, name)
            else:
                break
        return expr

    def finish_call(self, callee: Expr) -> Call:
        """Parse arguments inside parentheses."""
        arguments: List[Expr] = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self._error(
                        self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments."
                    )
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break
        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, arguments)

    def primary(self) -> Expr:
        """Parse a primary expression: literal, identifier, this, super or group."""
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)
        if self.match(TokenType.THIS):
            return This(self.previous())
        if self.match(TokenType.SUPER):
            keyword = self.previous()
            self.consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self.consume(
                TokenType.IDENTIFIER, "Expect superclass method name."
            )
            return Super(keyword, method)
        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self._error(self.peek(), "Expect expression.")


def parse(tokens: List[Token]) -> Tuple[List[Stmt], List[ParseError]]:
    """Parse a token list into statements, returning any syntax errors too."""
    parser = Parser(tokens)
    statements = parser.parse()
    return statements, parser.errors


def parse_expression_statement(
    tokens: List[Token],
) -> Tuple[Optional[Stmt], List[ParseError]]:
    """Parse exactly one expression statement (for the parse/evaluate modes)."""
    parser = Parser(tokens)
    statement = parser.parse_expression_statement()
    return statement, parser.errors
