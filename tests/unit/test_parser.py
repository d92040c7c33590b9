#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

import unittest

from lox.ast_printer import AstPrinter
from lox.lexer import Lexer
from lox.lox_ast import (
    Assign,
    Block,
    Call,
    Class,
    Expression,
    Function,
    Get,
    Print,
    Set,
    Var,
    Variable,
    While,
)
from lox.parser import Parser, parse, parse_expression_statement


class TestParser(unittest.TestCase):
    def parse(self, source: str):
        """Parse source and return (statements, errors)."""
        return parse(Lexer(source).scan_tokens())

    def parse_ok(self, source: str):
        statements, errors = self.parse(source)
        self.assertEqual(errors, [])
        return statements

    def expr(self, source: str) -> str:
        """Parse one expression and render it in prefix form."""
        statement, errors = parse_expression_statement(Lexer(source).scan_tokens())
        self.assertEqual(errors, [])
        return AstPrinter().print(statement.expression)

    def errors(self, source: str):
        return [str(e) for e in self.parse(source)[1]]

    def test_empty_program(self):
        self.assertEqual(self.parse_ok(""), [])
        self.assertEqual(self.parse_ok("  // just a comment\n"), [])

    def test_literals(self):
        cases = [
            ("123", "123.0"),
            ("1.5", "1.5"),
            ('"hi"', "hi"),
            ("true", "true"),
            ("false", "false"),
            ("nil", "nil"),
        ]
        for src, want in cases:
            with self.subTest(src=src):
                self.assertEqual(self.expr(src), want)

    def test_precedence(self):
        cases = [
            ("1 + 2 * 3", "(+ 1.0 (* 2.0 3.0))"),
            ("(1 + 2) * 3", "(* (group (+ 1.0 2.0)) 3.0)"),
            ("1 - 2 - 3", "(- (- 1.0 2.0) 3.0)"),
            ("-123", "(- 123.0)"),
            ("!!true", "(! (! true))"),
            ("1 < 2 == 3 >= 4", "(== (< 1.0 2.0) (>= 3.0 4.0))"),
            ("a or b and c", "(or a (and b c))"),
            ("a = b = 1", "(assign a (assign b 1.0))"),
            ("-a * b", "(* (- a) b)"),
        ]
        for src, want in cases:
            with self.subTest(src=src):
                self.assertEqual(self.expr(src), want)

    def test_calls_and_properties_chain(self):
        self.assertEqual(
            self.expr("a.b.c(x)(y)"), "(call (call (get c (get b a)) x) y)"
        )
        self.assertEqual(self.expr("a.b = 1"), "(set b a 1.0)")

    def test_property_assignment_becomes_set(self):
        stmt = self.parse_ok("a.b.c = 3;")[0]
        self.assertIsInstance(stmt, Expression)
        self.assertIsInstance(stmt.expression, Set)
        self.assertIsInstance(stmt.expression.object, Get)

    def test_variable_assignment(self):
        stmt = self.parse_ok("x = 1;")[0]
        self.assertIsInstance(stmt.expression, Assign)

    def test_invalid_assignment_target(self):
        self.assertEqual(
            self.errors("1 + a = 3;"),
            ["[line 1] Error at '=': Invalid assignment target."],
        )

    def test_declarations(self):
        statements = self.parse_ok(
            "var a; var b = 1; fun f(x, y) { return x; } class C < B { m() {} }"
        )
        self.assertIsInstance(statements[0], Var)
        self.assertIsNone(statements[0].initializer)
        self.assertIsInstance(statements[2], Function)
        self.assertEqual([p.lexeme for p in statements[2].params], ["x", "y"])
        klass = statements[3]
        self.assertIsInstance(klass, Class)
        self.assertIsInstance(klass.superclass, Variable)
        self.assertEqual(klass.superclass.name.lexeme, "B")
        self.assertEqual([m.name.lexeme for m in klass.methods], ["m"])

    def test_for_desugars_to_while(self):
        stmt = self.parse_ok("for (var i = 0; i < 3; i = i + 1) print i;")[0]
        self.assertIsInstance(stmt, Block)
        self.assertIsInstance(stmt.statements[0], Var)
        loop = stmt.statements[1]
        self.assertIsInstance(loop, While)
        self.assertIsInstance(loop.body, Block)
        self.assertIsInstance(loop.body.statements[0], Print)

    def test_for_without_clauses(self):
        loop = self.parse_ok("for (;;) print 1;")[0]
        self.assertIsInstance(loop, While)
        self.assertEqual(AstPrinter().print(loop), "(while true (print 1.0))")

    def test_statement_printing(self):
        statements = self.parse_ok(
            "if (a) print 1; else { var b = 2; }\nfun f(a, b) { return a; }"
        )
        printer = AstPrinter()
        self.assertEqual(
            printer.print(statements[0]),
            "(if-else a (print 1.0) (block (var b 2.0)))",
        )
        self.assertEqual(printer.print(statements[1]), "(fun f(a b) (return a))")

    def test_missing_expression(self):
        self.assertEqual(
            self.errors("print;"), ["[line 1] Error at ';': Expect expression."]
        )

    def test_missing_paren_at_end(self):
        statement, errors = parse_expression_statement(Lexer("(1 + 2").scan_tokens())
        self.assertIsNone(statement)
        self.assertEqual(
            [str(e) for e in errors],
            ["[line 1] Error at end: Expect ')' after expression."],
        )

    def test_recovers_and_reports_multiple_errors(self):
        source = "var = 1;\nprint 2;\nprint (;\nvar ok = 3;"
        statements, errors = self.parse(source)
        self.assertEqual(
            [str(e) for e in errors],
            [
                "[line 1] Error at '=': Expect variable name.",
                "[line 3] Error at ';': Expect expression.",
            ],
        )
        self.assertEqual(len(statements), 2)
        self.assertIsInstance(statements[0], Print)
        self.assertIsInstance(statements[1], Var)

    def test_too_many_arguments(self):
        args = ", ".join(["1"] * 256)
        statements, errors = self.parse(f"f({args});")
        self.assertEqual(len(errors), 1)
        self.assertIn("Can't have more than 255 arguments.", str(errors[0]))
        # Reported without abandoning the call
        self.assertIsInstance(statements[0].expression, Call)
        self.assertEqual(len(statements[0].expression.arguments), 256)

    def test_too_many_parameters(self):
        params = ", ".join(f"p{i}" for i in range(256))
        _, errors = self.parse(f"fun f({params}) {{}}")
        self.assertEqual(len(errors), 1)
        self.assertIn("Can't have more than 255 parameters.", str(errors[0]))

    def test_super_requires_method(self):
        self.assertEqual(
            self.errors("super;"), ["[line 1] Error at ';': Expect '.' after 'super'."]
        )

    def test_deep_nesting_is_reported(self):
        source = "print " + "(" * 5000 + "1" + ")" * 5000 + ";"
        _, errors = self.parse(source)
        self.assertEqual(len(errors), 1)
        self.assertEqual(errors[0].message, "Expression nesting too deep.")

        tokens = Lexer("(" * 5000 + "1" + ")" * 5000).scan_tokens()
        statement, errors = parse_expression_statement(tokens)
        self.assertIsNone(statement)
        self.assertEqual(
            [e.message for e in errors], ["Expression nesting too deep."]
        )

    def test_parse_is_repeatable(self):
        source = "var a = 1 + 2 * 3; print a.b(c);"
        first = [AstPrinter().print(s) for s in self.parse_ok(source)]
        second = [AstPrinter().print(s) for s in self.parse_ok(source)]
        self.assertEqual(first, second)

    def test_parser_class_entry_point(self):
        parser = Parser(Lexer("print 1;").scan_tokens())
        statements = parser.parse()
        self.assertEqual(len(statements), 1)
        self.assertEqual(parser.errors, [])


if __name__ == "__main__":
    unittest.main()
