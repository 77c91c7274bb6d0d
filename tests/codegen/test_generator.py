# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the code generation entry point."""

import pytest

from tcs.compiler.codegen import (
    DEFAULT_CODEC_MODULE,
    DEFAULT_TARGET,
    TARGETS,
    GeneratorOptions,
    generate,
    output_file_name,
)
from tcs.compiler.errors import CodeGenError
from tcs.compiler.parser import parse


def test_default_target_is_rust() -> None:
    assert DEFAULT_TARGET == "rust"
    assert generate(parse("struct S {}")).startswith("// @generated by tcs")


def test_targets() -> None:
    assert TARGETS == ("python", "rust")


def test_default_options() -> None:
    options = GeneratorOptions()
    assert options.codec_module == DEFAULT_CODEC_MODULE == "tcs_runtime"
    assert options.extra_derives == ()


@pytest.mark.parametrize(
    ("stem", "target", "expected"),
    [
        ("chain", "rust", "chain.rs"),
        ("BlockChain", "rust", "block_chain.rs"),
        ("chain", "python", "chain.py"),
        ("NodeTypes", "python", "node_types.py"),
        ("class", "python", "class_.py"),
    ],
)
def test_output_file_name(stem: str, target: str, expected: str) -> None:
    assert output_file_name(stem, target) == expected


def test_output_file_name_unknown_target() -> None:
    with pytest.raises(CodeGenError):
        output_file_name("chain", "go")
