# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Compiler pipeline and multi-file build driver.

The pipeline runs tokenize -> parse -> verify -> generate and stops at the
first failing stage, re-raising that stage's error untouched. The build
driver applies the pipeline to many files with a CMake-style cache: an output
is reused when it already exists and is strictly newer than its source and
the workspace configuration that shaped it.
"""

from __future__ import annotations

from pathlib import Path

from tcs.compiler.codegen import DEFAULT_TARGET, GeneratorOptions, generate, output_file_name
from tcs.compiler.errors import CompilerError, TcsError
from tcs.compiler.parser import parse_tokens
from tcs.compiler.scanner import tokenize
from tcs.compiler.verifier import VerifierPolicy, verify
from tcs.model.schema import Schema

# ###############
# Public Interface
# ###############

SOURCE_SUFFIX = ".tcs"


def load_schema(source: str, policy: VerifierPolicy | None = None) -> Schema:
    """Tokenize, parse and verify schema source text.

    Raises:
        LexerError: On unclassifiable text.
        ParseError: On a grammar violation.
        VerificationError: On the first semantic issue.
    """
    schema = parse_tokens(tokenize(source))
    verify(schema, policy)
    return schema


def compile_source(
    source: str,
    *,
    target: str = DEFAULT_TARGET,
    options: GeneratorOptions | None = None,
    policy: VerifierPolicy | None = None,
) -> str:
    """Compile schema source text to generated code for *target*.

    Raises:
        TcsError: The error of the first failing stage.
    """
    return generate(load_schema(source, policy), target, options)


def build_files(
    files: list[Path],
    build_dir: Path,
    *,
    target: str = DEFAULT_TARGET,
    options: GeneratorOptions | None = None,
    policy: VerifierPolicy | None = None,
    force: bool = False,
    config_file: Path | None = None,
) -> list[Path]:
    """Compile each schema file into *build_dir*.

    For each file, the driver:
    1. Computes the output path from the file stem and target.
    2. Skips the file if its output is up to date, unless *force* is set.
    3. Otherwise compiles the source and writes the output.

    Args:
        files: Paths of the .tcs files to compile.
        build_dir: Directory receiving the generated files.
        target: Backend name passed to the generator.
        options: Backend settings.
        policy: Optional verifier rules.
        force: Recompile even when the output is up to date.
        config_file: Configuration the build settings came from. Outputs older
            than this file are regenerated.

    Returns:
        The output paths that were written, in input order.

    Raises:
        CompilerError: On the first file that fails to read or compile, or
            when two inputs map to the same output file.
    """
    outputs: dict[Path, Path] = {}
    for source_file in files:
        output = build_dir / _output_name(source_file, target)
        previous = outputs.get(output)
        if previous is not None:
            raise CompilerError(f"'{source_file}' and '{previous}' both generate '{output}'")
        outputs[output] = source_file

    written: list[Path] = []
    for output, source_file in outputs.items():
        if not force and _is_up_to_date(source_file, output, config_file):
            continue
        code = _compile_file(source_file, target, options, policy)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(code, encoding="utf-8")
        written.append(output)
    return written


# ################
# Implementation
# ################


def _output_name(source_file: Path, target: str) -> str:
    try:
        return output_file_name(source_file.stem, target)
    except TcsError as exc:
        raise CompilerError(str(exc)) from exc


def _is_up_to_date(source_file: Path, output: Path, config_file: Path | None) -> bool:
    """Return True if *output* exists and is strictly newer than *source_file* and *config_file*."""
    if not output.exists() or not source_file.exists():
        return False
    output_mtime = output.stat().st_mtime
    if config_file is not None and config_file.exists() and output_mtime <= config_file.stat().st_mtime:
        return False
    return output_mtime > source_file.stat().st_mtime


def _compile_file(
    source_file: Path,
    target: str,
    options: GeneratorOptions | None,
    policy: VerifierPolicy | None,
) -> str:
    try:
        source_text = source_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise CompilerError(f"Cannot read source file '{source_file}': {exc}") from exc

    try:
        return compile_source(source_text, target=target, options=options, policy=policy)
    except TcsError as exc:
        raise CompilerError(f"Error in '{source_file}': {exc}") from exc
