#!/usr/bin/env python3.14
# SPDX-License-Identifier: Apache-2.0

import unittest

from lox.lexer import Lexer, TokenType, scan


class TestLexer(unittest.TestCase):
    def token_types(self, source, include_eof=False):
        types = [tok.type for tok in Lexer(source).scan_tokens()]
        if not include_eof:
            types = [t for t in types if t != TokenType.EOF]
        return types

    def tokens(self, source, include_eof=False):
        toks = Lexer(source).scan_tokens()
        if not include_eof:
            toks = [t for t in toks if t.type != TokenType.EOF]
        return toks

    def test_empty(self):
        tokens = self.tokens("", include_eof=True)
        self.assertEqual(len(tokens), 1)
        self.assertEqual(tokens[0].type, TokenType.EOF)
        self.assertEqual(tokens[0].lexeme, "")
        self.assertEqual(str(tokens[0]), "EOF  null")

    def test_single_char_tokens(self):
        self.assertEqual(
            self.token_types("(){},.-+;*/"),
            [
                TokenType.LEFT_PAREN,
                TokenType.RIGHT_PAREN,
                TokenType.LEFT_BRACE,
                TokenType.RIGHT_BRACE,
                TokenType.COMMA,
                TokenType.DOT,
                TokenType.MINUS,
                TokenType.PLUS,
                TokenType.SEMICOLON,
                TokenType.STAR,
                TokenType.SLASH,
            ],
        )

    def test_two_char_operators_maximal_munch(self):
        cases = [
            ("!=", [TokenType.BANG_EQUAL]),
            ("==", [TokenType.EQUAL_EQUAL]),
            ("<=", [TokenType.LESS_EQUAL]),
            (">=", [TokenType.GREATER_EQUAL]),
            ("===", [TokenType.EQUAL_EQUAL, TokenType.EQUAL]),
            ("! =", [TokenType.BANG, TokenType.EQUAL]),
            ("<>", [TokenType.LESS, TokenType.GREATER]),
        ]
        for src, types in cases:
            with self.subTest(src=src):
                self.assertEqual(self.token_types(src), types)

    def test_keywords(self):
        keywords = "and class else false for fun if nil or print return super this true var while"
        tokens = self.tokens(keywords)
        self.assertEqual(len(tokens), 16)
        for t in tokens:
            self.assertEqual(t.type.name, t.lexeme.upper())

    def test_identifiers(self):
        tokens = self.tokens("foo _bar baz9 classy")
        self.assertEqual([t.type for t in tokens], [TokenType.IDENTIFIER] * 4)
        self.assertEqual([t.lexeme for t in tokens], ["foo", "_bar", "baz9", "classy"])

    def test_numbers(self):
        cases = [
            ("123", 123.0, "NUMBER 123 123.0"),
            ("3.14", 3.14, "NUMBER 3.14 3.14"),
            ("0.5", 0.5, "NUMBER 0.5 0.5"),
            ("10000000", 1e7, "NUMBER 10000000 1.0E7"),
            ("1000000000000000000000", 1e21, "NUMBER 1000000000000000000000 1.0E21"),
            ("0.0000001", 1e-7, "NUMBER 0.0000001 1.0E-7"),
        ]
        for src, value, text in cases:
            with self.subTest(src=src):
                tokens = self.tokens(src)
                self.assertEqual(len(tokens), 1)
                self.assertEqual(tokens[0].literal, value)
                self.assertEqual(str(tokens[0]), text)

    def test_trailing_dot_is_not_part_of_number(self):
        tokens = self.tokens("123.")
        self.assertEqual([t.type for t in tokens], [TokenType.NUMBER, TokenType.DOT])
        self.assertEqual(tokens[0].lexeme, "123")

    def test_leading_dot_is_not_part_of_number(self):
        self.assertEqual(self.token_types(".5"), [TokenType.DOT, TokenType.NUMBER])

    def test_string(self):
        tokens = self.tokens('"hello"')
        self.assertEqual(tokens[0].type, TokenType.STRING)
        self.assertEqual(tokens[0].literal, "hello")
        self.assertEqual(str(tokens[0]), 'STRING "hello" hello')

    def test_multiline_string_counts_lines(self):
        tokens = self.tokens('"a\nb"\nx', include_eof=True)
        self.assertEqual(tokens[0].literal, "a\nb")
        self.assertEqual(tokens[1].lexeme, "x")
        self.assertEqual(tokens[1].line, 3)
        self.assertEqual(tokens[2].line, 3)

    def test_unterminated_string(self):
        tokens, errors = scan('print "oops')
        self.assertEqual([t.type for t in tokens], [TokenType.PRINT, TokenType.EOF])
        self.assertEqual(len(errors), 1)
        self.assertEqual(str(errors[0]), "[line 1] Error: Unterminated string.")

    def test_line_comment(self):
        tokens = self.tokens("// comment ( ) \n+ // trailing")
        self.assertEqual([t.type for t in tokens], [TokenType.PLUS])
        self.assertEqual(tokens[0].line, 2)

    def test_whitespace_and_lines(self):
        tokens = self.tokens(" \t\r\n\n  var")
        self.assertEqual(tokens[0].type, TokenType.VAR)
        self.assertEqual(tokens[0].line, 3)

    def test_unexpected_characters_are_skipped(self):
        tokens, errors = scan(",.$(#\n@")
        self.assertEqual(
            [t.type for t in tokens],
            [TokenType.COMMA, TokenType.DOT, TokenType.LEFT_PAREN, TokenType.EOF],
        )
        self.assertEqual(
            [str(e) for e in errors],
            [
                "[line 1] Error: Unexpected character: $",
                "[line 1] Error: Unexpected character: #",
                "[line 2] Error: Unexpected character: @",
            ],
        )

    def test_tokenize_output(self):
        tokens = Lexer("var x = 1;").scan_tokens()
        self.assertEqual(
            [str(t) for t in tokens],
            [
                "VAR var null",
                "IDENTIFIER x null",
                "EQUAL = null",
                "NUMBER 1 1.0",
                "SEMICOLON ; null",
                "EOF  null",
            ],
        )


if __name__ == "__main__":
    unittest.main()
