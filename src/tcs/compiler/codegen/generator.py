# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Code generation entry point dispatching to the target backends."""

from __future__ import annotations

from collections.abc import Callable

from jinja2 import Environment, PackageLoader, StrictUndefined

from tcs.compiler.codegen.naming import to_snake_case
from tcs.compiler.codegen.options import GeneratorOptions
from tcs.compiler.codegen.python import python_module_name, render_python
from tcs.compiler.codegen.rust import render_rust
from tcs.compiler.errors import CodeGenError
from tcs.model.schema import Schema

# ###############
# Public Interface
# ###############

DEFAULT_TARGET = "rust"
TARGETS: tuple[str, ...] = ("python", "rust")


def generate(schema: Schema, target: str = DEFAULT_TARGET, options: GeneratorOptions | None = None) -> str:
    """Generate source code for a verified schema.

    Args:
        schema: A schema that passed verification.
        target: Backend name, one of :data:`TARGETS`.
        options: Backend settings; defaults to :class:`GeneratorOptions()`.

    Returns:
        The complete generated source file.

    Raises:
        CodeGenError: On an unknown target or a schema that was not verified.
    """
    backend = _BACKENDS.get(target)
    if backend is None:
        raise CodeGenError(f"Unknown target '{target}', expected one of {', '.join(TARGETS)}")
    return backend(schema, options or GeneratorOptions(), _template_env())


def output_file_name(stem: str, target: str) -> str:
    """Return the generated file name for a schema file stem."""
    if target == "python":
        return f"{python_module_name(stem)}.py"
    if target == "rust":
        return f"{to_snake_case(stem)}.rs"
    raise CodeGenError(f"Unknown target '{target}', expected one of {', '.join(TARGETS)}")


# ################
# Implementation
# ################

_BACKENDS: dict[str, Callable[[Schema, GeneratorOptions, Environment], str]] = {
    "python": render_python,
    "rust": render_rust,
}


def _template_env() -> Environment:
    return Environment(
        loader=PackageLoader("tcs.compiler.codegen", "templates"),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )
