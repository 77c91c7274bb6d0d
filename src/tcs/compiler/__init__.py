# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler pipeline for .tcs files: scanning, parsing, verification, code generation and formatting."""

from tcs.compiler.build import SOURCE_SUFFIX, build_files, compile_source, load_schema
from tcs.compiler.codegen import TARGETS, GeneratorOptions, generate
from tcs.compiler.errors import (
    CodeGenError,
    CompilerError,
    LexerError,
    ParseError,
    TcsError,
    VerificationError,
    VerificationIssue,
)
from tcs.compiler.formatter import format_schema
from tcs.compiler.parser import parse, parse_tokens
from tcs.compiler.scanner import Token, TokenType, tokenize
from tcs.compiler.verifier import VerifierPolicy, check, verify

__all__ = [
    "tokenize",
    "Token",
    "TokenType",
    "parse",
    "parse_tokens",
    "check",
    "verify",
    "VerifierPolicy",
    "generate",
    "GeneratorOptions",
    "TARGETS",
    "format_schema",
    "load_schema",
    "compile_source",
    "build_files",
    "SOURCE_SUFFIX",
    "TcsError",
    "LexerError",
    "ParseError",
    "VerificationError",
    "VerificationIssue",
    "CodeGenError",
    "CompilerError",
]
