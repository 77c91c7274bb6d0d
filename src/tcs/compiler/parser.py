# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Recursive-descent parser for .tcs schema files.

Converts the token stream produced by the scanner into a Schema model. The
field grammar depends on the enclosing definition kind:

* enum:    ``NAME = VALUE ;``
* struct:  ``TYPE [array] NAME ;`` (ids are positional, deprecation is illegal)
* message: ``TYPE [array] NAME = ID [deprecated] ;``
"""

from __future__ import annotations

from tcs.compiler.errors import ParseError, quote
from tcs.compiler.scanner import Token, TokenType, tokenize
from tcs.model.schema import Definition, DefinitionKind, Field, Schema

# ###############
# Public Interface
# ###############


def parse(source: str) -> Schema:
    """Parse schema source text into a Schema model.

    Args:
        source: The full text of a .tcs file.

    Returns:
        The parsed, unverified Schema.

    Raises:
        LexerError: If the source contains text the scanner cannot classify.
        ParseError: If the source is syntactically invalid.
    """
    return parse_tokens(tokenize(source))


def parse_tokens(tokens: list[Token]) -> Schema:
    """Parse an EOF-terminated token list into a Schema model.

    Raises:
        ParseError: If the token sequence violates the grammar.
    """
    return _Parser(tokens).parse()


# ################
# Implementation
# ################

_DEFINITION_KINDS: dict[TokenType, DefinitionKind] = {
    TokenType.ENUM: DefinitionKind.ENUM,
    TokenType.STRUCT: DefinitionKind.STRUCT,
    TokenType.MESSAGE: DefinitionKind.MESSAGE,
}

# Keywords remain usable wherever a name is expected.
_NAME_TYPES: frozenset[TokenType] = frozenset(
    {
        TokenType.IDENTIFIER,
        TokenType.PACKAGE,
        TokenType.ENUM,
        TokenType.STRUCT,
        TokenType.MESSAGE,
    }
)

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class _Parser:
    """Single-lookahead parser over a flat token list."""

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token list must end with an EOF token")
        self._tokens = tokens
        self._pos = 0

    def parse(self) -> Schema:
        """Parse the full token stream and return a Schema."""
        package: str | None = None
        if self._eat(TokenType.PACKAGE):
            package = self._expect_name().text
            self._expect(TokenType.SEMICOLON, '";"')

        definitions: list[Definition] = []
        while not self._eat(TokenType.EOF):
            definitions.append(self._parse_definition())
        return Schema(package=package, definitions=tuple(definitions))

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _eat(self, token_type: TokenType) -> Token | None:
        """Consume and return the current token if it has *token_type*."""
        tok = self._current()
        if tok.type != token_type:
            return None
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        """Consume the current token or raise a ParseError naming *expected*."""
        tok = self._eat(token_type)
        if tok is None:
            raise self._error_expected(expected)
        return tok

    def _expect_name(self) -> Token:
        """Consume an identifier, accepting keywords in name position."""
        tok = self._current()
        if tok.type not in _NAME_TYPES:
            raise self._error_expected("identifier")
        self._eat(tok.type)
        return tok

    def _error_expected(self, expected: str) -> ParseError:
        tok = self._current()
        return ParseError(f"Expected {expected} but found {quote(tok.text)}", tok.line, tok.column)

    # ------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------

    def _parse_definition(self) -> Definition:
        """Parse: (enum | struct | message) <Name> { field* }"""
        tok = self._current()
        kind = _DEFINITION_KINDS.get(tok.type)
        if kind is None:
            raise ParseError(f"Unexpected token {quote(tok.text)}", tok.line, tok.column)
        self._eat(tok.type)

        name_tok = self._expect_name()
        self._expect(TokenType.LBRACE, '"{"')
        fields: list[Field] = []
        while not self._eat(TokenType.RBRACE):
            if kind is DefinitionKind.ENUM:
                fields.append(self._parse_enum_field())
            else:
                fields.append(self._parse_typed_field(kind, len(fields) + 1))
        return Definition(
            name=name_tok.text,
            kind=kind,
            fields=tuple(fields),
            line=name_tok.line,
            column=name_tok.column,
        )

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def _parse_enum_field(self) -> Field:
        """Parse: <NAME> = <value> ;"""
        name_tok = self._expect_name()
        self._expect(TokenType.EQUALS, '"="')
        value = self._parse_integer()
        deprecated_tok = self._eat(TokenType.DEPRECATED)
        if deprecated_tok is not None:
            raise ParseError("Cannot deprecate this field", deprecated_tok.line, deprecated_tok.column)
        self._expect(TokenType.SEMICOLON, '";"')
        return Field(
            name=name_tok.text,
            field_id=value,
            line=name_tok.line,
            column=name_tok.column,
        )

    def _parse_typed_field(self, kind: DefinitionKind, position: int) -> Field:
        """Parse a struct or message field.

        Struct fields take *position* as their id; message fields require an
        explicit ``= <id>`` and may carry ``[deprecated]``.
        """
        type_tok = self._expect_name()
        is_array = False
        array_size: int | None = None
        if self._eat(TokenType.ARRAY):
            is_array = True
        else:
            size_tok = self._eat(TokenType.FIXED_ARRAY)
            if size_tok is not None:
                is_array = True
                array_size = int(size_tok.text[1:-1])

        name_tok = self._expect_name()

        field_id = position
        if kind is DefinitionKind.MESSAGE:
            self._expect(TokenType.EQUALS, '"="')
            field_id = self._parse_integer()

        is_deprecated = False
        deprecated_tok = self._eat(TokenType.DEPRECATED)
        if deprecated_tok is not None:
            if kind is not DefinitionKind.MESSAGE:
                raise ParseError("Cannot deprecate this field", deprecated_tok.line, deprecated_tok.column)
            is_deprecated = True

        self._expect(TokenType.SEMICOLON, '";"')
        return Field(
            name=name_tok.text,
            type_=type_tok.text,
            is_array=is_array,
            array_size=array_size,
            is_deprecated=is_deprecated,
            field_id=field_id,
            line=name_tok.line,
            column=name_tok.column,
        )

    def _parse_integer(self) -> int:
        """Parse an integer literal in the signed 32-bit range."""
        tok = self._expect(TokenType.INTEGER, "integer")
        value = int(tok.text)
        if not _INT32_MIN <= value <= _INT32_MAX:
            raise ParseError(f"Invalid integer {quote(tok.text)}", tok.line, tok.column)
        return value
