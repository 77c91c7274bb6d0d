# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error taxonomy shared by every compiler stage."""

from __future__ import annotations

from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TcsError(Exception):
    """Base class for all errors raised by the schema compiler."""


class ParseError(TcsError):
    """Raised when the token stream violates the schema grammar.

    Attributes:
        message: The bare description, without position.
        line: 1-based line number of the offending token.
        column: 1-based column number of the offending token.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.message = message
        self.line = line
        self.column = column


class LexerError(ParseError):
    """Raised when the scanner meets text it cannot classify."""


@dataclass(frozen=True)
class VerificationIssue:
    """A semantic problem found by the verifier.

    Attributes:
        message: Human-readable description of the problem.
        line: 1-based line of the offending declaration, if known.
        column: 1-based column of the offending declaration, if known.
    """

    message: str
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"Line {self.line}, column {self.column}: {self.message}"


class VerificationError(TcsError):
    """Raised when a syntactically valid schema is semantically invalid."""

    def __init__(self, issue: VerificationIssue) -> None:
        super().__init__(str(issue))
        self.issue = issue
        self.message = issue.message
        self.line = issue.line
        self.column = issue.column


class CodeGenError(TcsError):
    """Raised when code generation is asked for something a verified schema cannot need."""


class CompilerError(TcsError):
    """Raised by the build driver; wraps a stage error with the failing file."""


def quote(text: str) -> str:
    """Double-quote *text* for diagnostics, escaping backslashes and quotes."""
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
