#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

"""
Lox driver – reads a source file and tokenizes, parses, evaluates or runs it.

Exit status is 0 on success, 65 when the source has scan, parse or resolve
errors and 70 when execution stops on a runtime error.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, TextIO

# Add project root to sys.path so that imports from lox work when running as script
sys.path.insert(0, str(Path(__file__).parent.parent))

from lox.ast_printer import AstPrinter
from lox.environment import LoxRuntimeError
from lox.interpreter import Interpreter, run_with_deep_stack
from lox.lexer import scan
from lox.parser import parse, parse_expression_statement
from lox.resolver import resolve
from lox.runtime import stringify

EXIT_OK = 0
EXIT_DATA_ERROR = 65
EXIT_SOFTWARE_ERROR = 70

COMMANDS = ("tokenize", "parse", "evaluate", "run")


def report(errors: List[Exception], err: TextIO) -> None:
    for error in errors:
        print(str(error), file=err)


def tokenize(source: str, out: TextIO, err: TextIO) -> int:
    tokens, errors = scan(source)
    report(errors, err)
    for token in tokens:
        print(token, file=out)
    return EXIT_DATA_ERROR if errors else EXIT_OK


def parse_command(source: str, out: TextIO, err: TextIO) -> int:
    tokens, scan_errors = scan(source)
    statement, parse_errors = parse_expression_statement(tokens)
    report(scan_errors + parse_errors, err)
    if scan_errors or parse_errors or statement is None:
        return EXIT_DATA_ERROR
    print(AstPrinter().print(statement.expression), file=out)
    return EXIT_OK


def evaluate(source: str, out: TextIO, err: TextIO) -> int:
    tokens, scan_errors = scan(source)
    statement, parse_errors = parse_expression_statement(tokens)
    report(scan_errors + parse_errors, err)
    if scan_errors or parse_errors or statement is None:
        return EXIT_DATA_ERROR

    interpreter = Interpreter(out)
    try:
        value = interpreter.evaluate(statement.expression)
    except LoxRuntimeError as error:
        report([error], err)
        return EXIT_SOFTWARE_ERROR
    print(stringify(value), file=out)
    return EXIT_OK


def run(source: str, out: TextIO, err: TextIO) -> int:
    tokens, scan_errors = scan(source)
    statements, parse_errors = parse(tokens)
    report(scan_errors + parse_errors, err)
    if scan_errors or parse_errors:
        return EXIT_DATA_ERROR

    interpreter = Interpreter(out)
    resolve_errors = resolve(statements, interpreter)
    report(resolve_errors, err)
    if resolve_errors:
        return EXIT_DATA_ERROR

    error = interpreter.interpret(statements)
    if error is not None:
        report([error], err)
        return EXIT_SOFTWARE_ERROR
    return EXIT_OK


HANDLERS = {
    "tokenize": tokenize,
    "parse": parse_command,
    "evaluate": evaluate,
    "run": run,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Lox interpreter")
    parser.add_argument("command", choices=COMMANDS, help="What to do with the file")
    parser.add_argument("filename", help="Input .lox file")
    args = parser.parse_args(argv)

    input_path = Path(args.filename)
    if not input_path.exists():
        print(f"Error: input file {input_path} not found", file=sys.stderr)
        return 1

    source = input_path.read_text(encoding="utf-8")
    handler = HANDLERS[args.command]
    return run_with_deep_stack(handler, source, sys.stdout, sys.stderr)


if __name__ == "__main__":
    sys.exit(main())
