#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from lox.main import evaluate, main, parse_command, run, tokenize


class TestMain(unittest.TestCase):
    def call(self, handler, source: str):
        """Run a command handler; return (exit code, stdout, stderr)."""
        out = io.StringIO()
        err = io.StringIO()
        code = handler(source, out, err)
        return code, out.getvalue(), err.getvalue()

    def test_tokenize(self):
        code, out, err = self.call(tokenize, '123 "hi" +')
        self.assertEqual(code, 0)
        self.assertEqual(
            out.splitlines(),
            ["NUMBER 123 123.0", 'STRING "hi" hi', "PLUS + null", "EOF  null"],
        )
        self.assertEqual(err, "")

    def test_tokenize_with_errors_still_prints_tokens(self):
        code, out, err = self.call(tokenize, ",$")
        self.assertEqual(code, 65)
        self.assertEqual(out.splitlines(), ["COMMA , null", "EOF  null"])
        self.assertEqual(err.strip(), "[line 1] Error: Unexpected character: $")

    def test_parse(self):
        code, out, _ = self.call(parse_command, "(1 + 2) * 3")
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "(* (group (+ 1.0 2.0)) 3.0)")

    def test_parse_error(self):
        code, out, err = self.call(parse_command, "+")
        self.assertEqual(code, 65)
        self.assertEqual(out, "")
        self.assertIn("[line 1] Error at '+': Expect expression.", err)

    def test_evaluate(self):
        cases = [
            ("(1 + 2) * 3", "9"),
            ('"foo" + "bar"', "foobar"),
            ("nil == false", "false"),
            ("10 / 4", "2.5"),
            ("1 / 0", "Infinity"),
            ("1000000000000000000000", "1.0E21"),
        ]
        for src, want in cases:
            with self.subTest(src=src):
                code, out, _ = self.call(evaluate, src)
                self.assertEqual(code, 0)
                self.assertEqual(out.strip(), want)

    def test_evaluate_runtime_error(self):
        code, out, err = self.call(evaluate, '-"hello"')
        self.assertEqual(code, 70)
        self.assertEqual(out, "")
        self.assertEqual(err.splitlines(), ["Operand must be a number.", "[line 1]"])

    def test_run(self):
        code, out, err = self.call(run, "print 1 + 2;\nprint \"done\";")
        self.assertEqual((code, out.splitlines(), err), (0, ["3", "done"], ""))

    def test_run_resolve_error_prints_nothing(self):
        code, out, err = self.call(
            run,
            'fun outer() {\n  var a = "outer";\n  fun inner() {\n'
            "    var a = a;\n    print a;\n  }\n  inner();\n}\nouter();",
        )
        self.assertEqual(code, 65)
        self.assertEqual(out, "")
        self.assertIn("[line 4] Error", err)
        self.assertIn("Can't read local variable in its own initializer", err)

    def test_run_syntax_errors_are_all_reported(self):
        code, out, err = self.call(run, "print;\nvar = 1;\nprint 2;")
        self.assertEqual(code, 65)
        self.assertEqual(out, "")
        self.assertEqual(len(err.splitlines()), 2)

    def test_run_runtime_error(self):
        code, out, err = self.call(
            run, 'print "before";\nprint 21 - false;\nprint "after";'
        )
        self.assertEqual(code, 70)
        self.assertEqual(out.splitlines(), ["before"])
        self.assertEqual(err.splitlines(), ["Operands must be numbers.", "[line 2]"])

    def test_main_reads_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "prog.lox"
            path.write_text("print 40 + 2;", encoding="utf-8")
            out = io.StringIO()
            with redirect_stdout(out):
                code = main(["run", str(path)])
        self.assertEqual(code, 0)
        self.assertEqual(out.getvalue().strip(), "42")

    def run_file(self, source: str):
        """Run source through main() from a temporary file."""
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "prog.lox"
            path.write_text(source, encoding="utf-8")
            out = io.StringIO()
            err = io.StringIO()
            with redirect_stdout(out), redirect_stderr(err):
                code = main(["run", str(path)])
        return code, out.getvalue(), err.getvalue()

    def test_main_runs_deep_recursion(self):
        code, out, err = self.run_file(
            "fun count(n) { if (n <= 0) return 0; return 1 + count(n - 1); }\n"
            "print count(2000);"
        )
        self.assertEqual((code, out.strip(), err), (0, "2000", ""))

    def test_main_nested_parentheses(self):
        code, out, _ = self.run_file("print " + "(" * 400 + "1" + ")" * 400 + ";")
        self.assertEqual((code, out.strip()), (0, "1"))

    def test_main_reports_runaway_nesting(self):
        code, out, err = self.run_file(
            "print " + "(" * 50000 + "1" + ")" * 50000 + ";"
        )
        self.assertEqual(code, 65)
        self.assertEqual(out, "")
        self.assertIn("Expression nesting too deep.", err)

    def test_main_runtime_error_after_unbounded_recursion(self):
        code, _, err = self.run_file("fun f() { f(); }\nf();")
        self.assertEqual(code, 70)
        self.assertEqual(err.splitlines(), ["Stack overflow.", "[line 1]"])

    def test_main_missing_file(self):
        err = io.StringIO()
        with redirect_stderr(err):
            code = main(["run", "/nonexistent/prog.lox"])
        self.assertEqual(code, 1)
        self.assertIn("not found", err.getvalue())


if __name__ == "__main__":
    unittest.main()
