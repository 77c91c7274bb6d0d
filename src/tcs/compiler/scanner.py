# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for .tcs schema files.

A single ordered alternation is matched repeatedly over the source. Every
match must start exactly where the previous one ended; anything in between is
text the grammar cannot classify and is reported as a lexical error.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

from tcs.compiler.errors import LexerError, quote

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the scanner."""

    # Keywords
    PACKAGE = "package"
    ENUM = "enum"
    STRUCT = "struct"
    MESSAGE = "message"

    # Punctuation
    EQUALS = "="
    SEMICOLON = ";"
    LBRACE = "{"
    RBRACE = "}"

    # Bracket forms
    ARRAY = "[]"
    FIXED_ARRAY = "[N]"
    DEPRECATED = "[deprecated]"

    # Literals and names
    INTEGER = "INTEGER"
    IDENTIFIER = "IDENTIFIER"

    # End of input
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A classified token with its source location.

    Attributes:
        type: The kind of token.
        text: The raw matched text (empty for EOF).
        line: 1-based line number of the first character.
        column: 1-based column number of the first character.
    """

    type: TokenType
    text: str
    line: int
    column: int


def tokenize(source: str) -> list[Token]:
    """Tokenize schema source text.

    Whitespace and ``//`` comments are consumed but not emitted. The returned
    list always ends with exactly one EOF token whose text is empty.

    Args:
        source: The full text of a .tcs file.

    Returns:
        The classified tokens, terminated by EOF.

    Raises:
        LexerError: At the first character sequence no token pattern matches.
    """
    tokens: list[Token] = []
    line = 1
    column = 1
    last_end = 0

    for match in _TOKEN_RE.finditer(source):
        if match.start() > last_end:
            raise _gap_error(source[last_end : match.start()], line, column)

        text = match.group()
        if match.lastgroup not in _SKIPPED_GROUPS:
            tokens.append(Token(_classify(match.lastgroup, text), text, line, column))

        newlines = text.count("\n")
        if newlines:
            line += newlines
            column = len(text) - text.rfind("\n")
        else:
            column += len(text)
        last_end = match.end()

    if last_end != len(source):
        raise _gap_error(source[last_end:], line, column)

    tokens.append(Token(TokenType.EOF, "", line, column))
    return tokens


# ################
# Implementation
# ################

# Alternatives are tried in this order at every position.
_TOKEN_RE = re.compile(
    r"(?P<integer>(?:-|\b)\d+\b)"
    r"|(?P<punct>[=;{}])"
    r"|(?P<fixed_array>\[\d+\])"
    r"|(?P<array>\[\])"
    r"|(?P<deprecated>\[deprecated\])"
    r"|(?P<identifier>\b[A-Za-z_][A-Za-z0-9_]*\b)"
    r"|(?P<comment>//.*)"
    r"|(?P<whitespace>\s+)"
)

_SKIPPED_GROUPS = frozenset({"comment", "whitespace"})

_KEYWORDS: dict[str, TokenType] = {
    "package": TokenType.PACKAGE,
    "enum": TokenType.ENUM,
    "struct": TokenType.STRUCT,
    "message": TokenType.MESSAGE,
}

_PUNCTUATION: dict[str, TokenType] = {
    "=": TokenType.EQUALS,
    ";": TokenType.SEMICOLON,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}

_FIXED_TYPES: dict[str, TokenType] = {
    "integer": TokenType.INTEGER,
    "fixed_array": TokenType.FIXED_ARRAY,
    "array": TokenType.ARRAY,
    "deprecated": TokenType.DEPRECATED,
}


def _classify(group: str | None, text: str) -> TokenType:
    """Map a match group and its text to a token type."""
    if group == "punct":
        return _PUNCTUATION[text]
    if group == "identifier":
        return _KEYWORDS.get(text, TokenType.IDENTIFIER)
    return _FIXED_TYPES[group or ""]


def _gap_error(unexpected: str, line: int, column: int) -> LexerError:
    return LexerError(f"Syntax error: {quote(unexpected)}", line, column)
