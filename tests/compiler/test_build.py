# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the compiler pipeline and the multi-file build driver."""

import os
from pathlib import Path

import pytest

from tcs.compiler.build import build_files, compile_source, load_schema
from tcs.compiler.codegen import GeneratorOptions
from tcs.compiler.errors import CompilerError, LexerError, ParseError, VerificationError
from tcs.compiler.verifier import VerifierPolicy
from tcs.model.schema import Schema

# ###############
# Test Helpers
# ###############

_VALID = "package chain;\n\nstruct Header {\n  uint64 height;\n}\n"


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _set_mtime(path: Path, seconds: float) -> None:
    os.utime(path, (seconds, seconds))


# ###############
# Pipeline
# ###############


class TestPipeline:
    def test_load_schema(self) -> None:
        schema = load_schema(_VALID)
        assert isinstance(schema, Schema)
        assert schema.package == "chain"

    def test_compile_source_rust(self) -> None:
        code = compile_source(_VALID)
        assert "pub mod chain {" in code
        assert "pub height: u64," in code

    def test_compile_source_python(self) -> None:
        code = compile_source(_VALID, target="python", options=GeneratorOptions(codec_module="wire"))
        assert "import wire as codec" in code
        assert "class Header(pydantic.BaseModel):" in code

    def test_lexical_error_propagates_untouched(self) -> None:
        with pytest.raises(LexerError):
            compile_source("struct S { uint8 a; } !")

    def test_syntax_error_propagates_untouched(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            compile_source("struct S { uint8 a [deprecated]; }")
        assert exc_info.value.message == "Cannot deprecate this field"

    def test_semantic_error_stops_before_generation(self) -> None:
        with pytest.raises(VerificationError):
            compile_source("struct Bad { Unknown field; }")

    def test_policy_is_applied(self) -> None:
        with pytest.raises(VerificationError, match="Recursive type"):
            compile_source("struct A { A a; }", policy=VerifierPolicy(reject_recursive_types=True))


# ###############
# Build Driver
# ###############


class TestBuildFiles:
    def test_builds_rust_output(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "src" / "chain.tcs", _VALID)
        build_dir = tmp_path / "out"

        written = build_files([source], build_dir)

        assert written == [build_dir / "chain.rs"]
        assert "pub struct Header {" in (build_dir / "chain.rs").read_text(encoding="utf-8")

    def test_builds_python_output(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "BlockChain.tcs", _VALID)
        written = build_files([source], tmp_path / "out", target="python")
        assert written == [tmp_path / "out" / "block_chain.py"]

    def test_up_to_date_output_is_skipped(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "chain.tcs", _VALID)
        build_dir = tmp_path / "out"
        build_files([source], build_dir)
        _set_mtime(source, 1_000_000)

        assert build_files([source], build_dir) == []

    def test_stale_output_is_rebuilt(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "chain.tcs", _VALID)
        build_dir = tmp_path / "out"
        build_files([source], build_dir)
        _set_mtime(build_dir / "chain.rs", 1_000_000)

        assert build_files([source], build_dir) == [build_dir / "chain.rs"]

    def test_force_rebuilds(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "chain.tcs", _VALID)
        build_dir = tmp_path / "out"
        build_files([source], build_dir)
        _set_mtime(source, 1_000_000)

        assert build_files([source], build_dir, force=True) == [build_dir / "chain.rs"]

    def test_newer_config_rebuilds(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "chain.tcs", _VALID)
        config = _write(tmp_path / ".tcs-workspace.yaml", "build-directory: out\n")
        build_dir = tmp_path / "out"
        build_files([source], build_dir, config_file=config)
        _set_mtime(source, 1_000_000)
        _set_mtime(build_dir / "chain.rs", 2_000_000)
        _set_mtime(config, 3_000_000)

        assert build_files([source], build_dir, config_file=config) == [build_dir / "chain.rs"]

    def test_older_config_keeps_output(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "chain.tcs", _VALID)
        config = _write(tmp_path / ".tcs-workspace.yaml", "build-directory: out\n")
        build_dir = tmp_path / "out"
        build_files([source], build_dir, config_file=config)
        _set_mtime(source, 1_000_000)
        _set_mtime(config, 1_000_000)
        _set_mtime(build_dir / "chain.rs", 2_000_000)

        assert build_files([source], build_dir, config_file=config) == []

    def test_missing_config_is_ignored(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "chain.tcs", _VALID)
        build_dir = tmp_path / "out"
        build_files([source], build_dir)
        _set_mtime(source, 1_000_000)

        assert build_files([source], build_dir, config_file=tmp_path / "missing.yaml") == []

    def test_error_names_the_file(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "bad.tcs", "struct Bad { Unknown field; }")
        with pytest.raises(CompilerError) as exc_info:
            build_files([source], tmp_path / "out")
        assert str(exc_info.value).startswith(f"Error in '{source}': Line 1, column 22: Undefined type")
        assert isinstance(exc_info.value.__cause__, VerificationError)

    def test_failing_file_writes_nothing(self, tmp_path: Path) -> None:
        good = _write(tmp_path / "good.tcs", _VALID)
        bad = _write(tmp_path / "bad.tcs", "enum E { A = 1 }")
        build_dir = tmp_path / "out"
        with pytest.raises(CompilerError):
            build_files([good, bad], build_dir)
        assert (build_dir / "good.rs").exists()
        assert not (build_dir / "bad.rs").exists()

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(CompilerError, match="Cannot read source file"):
            build_files([tmp_path / "missing.tcs"], tmp_path / "out")

    def test_colliding_outputs(self, tmp_path: Path) -> None:
        first = _write(tmp_path / "a" / "chain.tcs", _VALID)
        second = _write(tmp_path / "b" / "chain.tcs", _VALID)
        with pytest.raises(CompilerError, match="both generate"):
            build_files([first, second], tmp_path / "out")
        assert not (tmp_path / "out").exists()

    def test_unknown_target(self, tmp_path: Path) -> None:
        source = _write(tmp_path / "chain.tcs", _VALID)
        with pytest.raises(CompilerError, match="Unknown target 'go'"):
            build_files([source], tmp_path / "out", target="go")
