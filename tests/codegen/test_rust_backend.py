# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Rust code generation backend."""

import pytest

from tcs.compiler.build import load_schema
from tcs.compiler.codegen import GeneratorOptions, generate
from tcs.compiler.codegen.rust import HEADER, rust_field_name, rust_type_name
from tcs.compiler.errors import CodeGenError
from tcs.compiler.parser import parse

# ###############
# Test Helpers
# ###############

_ENUM_DERIVES = "#[derive(Debug, Clone, Copy, PartialEq, Eq, Hash, Default, SchemaRead, SchemaWrite)]"
_RECORD_DERIVES = "#[derive(Debug, Clone, PartialEq, Default, SchemaRead, SchemaWrite)]"
_NO_DEFAULT_DERIVES = "#[derive(Debug, Clone, PartialEq, SchemaRead, SchemaWrite)]"


def _rust(source: str, options: GeneratorOptions | None = None) -> str:
    """Verify *source* and generate Rust code for it."""
    return generate(load_schema(source), "rust", options)


def _block(code: str, header: str) -> str:
    """Return the lines from *header* up to and including the closing brace."""
    start = code.index(header)
    end = code.index("\n}", start)
    return code[start : end + 2]


def _chain(length: int, last_member: str) -> str:
    """Return structs S0 .. S<length-1> where each holds the next by value."""
    links = [f"struct S{i} {{ S{i + 1} next; }}" for i in range(length - 1)]
    return "\n".join([*links, f"struct S{length - 1} {{ {last_member} }}"])


# ###############
# Enums
# ###############


class TestEnum:
    def test_node_role_full_output(self) -> None:
        assert _rust("enum NodeRole { STORAGE = 1; VALIDATOR = 2; }") == (
            HEADER
            + "\n"
            + "use wincode_derive::{SchemaRead, SchemaWrite};\n"
            + "\n"
            + _ENUM_DERIVES
            + "\n"
            + "#[repr(u32)]\n"
            + "pub enum NodeRole {\n"
            + "    #[default]\n"
            + "    Storage = 1,\n"
            + "    Validator = 2,\n"
            + "}\n"
        )

    def test_default_marks_first_variant_only(self) -> None:
        code = _rust("enum E { B = 5; A = 0; }")
        assert "    #[default]\n    B = 5,\n    A = 0,\n" in code
        assert code.count("#[default]") == 1

    def test_empty_enum_has_no_default(self) -> None:
        code = _rust("enum Empty {}")
        assert "#[derive(Debug, Clone, Copy, PartialEq, Eq, Hash, SchemaRead, SchemaWrite)]" in code
        assert "#[default]" not in code

    def test_variant_keyword_is_escaped(self) -> None:
        assert "    Self_ = 1," in _rust("enum E { Self = 1; }")


# ###############
# Structs
# ###############


class TestStruct:
    def test_block_header(self) -> None:
        code = _rust("struct BlockHeader { uint64 height; byte[32] prevHash; }")
        assert _block(code, _RECORD_DERIVES) == (
            _RECORD_DERIVES
            + "\npub struct BlockHeader {\n    pub height: u64,\n    pub prev_hash: [u8; 32],\n}"
        )
        assert "Option<" not in code

    def test_scalar_mapping(self) -> None:
        code = _rust(
            "struct S { uint8 a; uint16 b; uint32 c; uint64 d; int8 e; int16 f; int32 g; int64 h;"
            " float32 i; float64 j; byte k; bool l; string m; }"
        )
        for member in (
            "pub a: u8,",
            "pub b: u16,",
            "pub c: u32,",
            "pub d: u64,",
            "pub e: i8,",
            "pub f: i16,",
            "pub g: i32,",
            "pub h: i64,",
            "pub i: f32,",
            "pub j: f64,",
            "pub k: u8,",
            "pub l: bool,",
            "pub m: String,",
        ):
            assert member in code

    def test_arrays(self) -> None:
        code = _rust("struct S { uint32[4] fixed; string[] names; byte[] blob; }")
        assert "pub fixed: [u32; 4]," in code
        assert "pub names: Vec<String>," in code
        assert "pub blob: Vec<u8>," in code

    def test_definition_reference_by_value(self) -> None:
        code = _rust("enum Role { A = 0; } struct Node { Role role; Node[] children; }")
        assert "pub role: Role," in code
        assert "pub children: Vec<Node>," in code

    def test_large_fixed_array_drops_default(self) -> None:
        code = _rust("struct Sig { byte[64] bytes; }")
        assert _NO_DEFAULT_DERIVES + "\npub struct Sig {" in code

    def test_missing_default_is_transitive(self) -> None:
        code = _rust("struct Sig { byte[64] bytes; } struct Signed { Sig sig; uint8 flag; }")
        assert _NO_DEFAULT_DERIVES + "\npub struct Signed {" in code

    def test_large_variable_array_keeps_default(self) -> None:
        code = _rust("struct Sig { Big[] all; } struct Big { byte[64] bytes; }")
        assert _RECORD_DERIVES + "\npub struct Sig {" in code

    def test_empty_enum_member_drops_default(self) -> None:
        code = _rust("enum Never {} struct S { Never n; }")
        assert _NO_DEFAULT_DERIVES + "\npub struct S {" in code

    def test_field_keyword_is_escaped(self) -> None:
        assert "pub type_: u32," in _rust("struct S { uint32 type; }")

    def test_long_reference_chain_keeps_default(self) -> None:
        code = _rust(_chain(1500, "uint8 value;"))
        assert code.count(_RECORD_DERIVES + "\npub struct S") == 1500

    def test_long_reference_chain_propagates_missing_default(self) -> None:
        code = _rust(_chain(1500, "byte[64] bytes;"))
        assert code.count(_NO_DEFAULT_DERIVES + "\npub struct S") == 1500


# ###############
# Messages
# ###############


class TestMessage:
    def test_transaction(self) -> None:
        code = _rust("message Transaction { byte[32] txHash = 1; byte[] data = 3 [deprecated]; }")
        assert _block(code, _RECORD_DERIVES) == (
            _RECORD_DERIVES
            + "\n#[allow(deprecated)]\npub struct Transaction {\n"
            + "    pub tx_hash: Option<[u8; 32]>,\n"
            + "    #[deprecated]\n"
            + "    pub data: Option<Vec<u8>>,\n"
            + "}"
        )

    def test_without_deprecation_has_no_allow(self) -> None:
        code = _rust("message M { uint64 a = 1; }")
        assert "#[allow(deprecated)]" not in code
        assert "pub a: Option<u64>," in code

    def test_message_is_always_defaultable(self) -> None:
        code = _rust("message M { byte[64] sig = 1; }")
        assert _RECORD_DERIVES + "\npub struct M {" in code
        assert "pub sig: Option<[u8; 64]>," in code

    def test_reference_is_optional(self) -> None:
        code = _rust("struct H { uint8 a; } message M { H header = 1; H[] all = 2; }")
        assert "pub header: Option<H>," in code
        assert "pub all: Option<Vec<H>>," in code


# ###############
# Module Layout
# ###############


class TestModuleLayout:
    def test_package_wraps_module(self) -> None:
        code = _rust("package chain; struct S { uint8 a; }")
        assert code == (
            HEADER
            + "\n"
            + "pub mod chain {\n"
            + "    use wincode_derive::{SchemaRead, SchemaWrite};\n"
            + "\n"
            + "    "
            + _RECORD_DERIVES
            + "\n"
            + "    pub struct S {\n"
            + "        pub a: u8,\n"
            + "    }\n"
            + "}\n"
        )

    def test_package_name_is_snake_case(self) -> None:
        assert "pub mod my_chain {" in _rust("package MyChain;")

    def test_definitions_keep_order(self) -> None:
        code = _rust("struct B { uint8 x; } enum A { X = 0; } message C {}")
        assert code.index("pub struct B") < code.index("pub enum A") < code.index("pub struct C")

    def test_extra_derives(self) -> None:
        code = _rust("enum E { A = 0; } struct S {}", GeneratorOptions(extra_derives=("Serialize", "Eq")))
        assert "Hash, Default, SchemaRead, SchemaWrite, Serialize, Eq)]" in code
        assert "PartialEq, Default, SchemaRead, SchemaWrite, Serialize, Eq)]" in code

    def test_output_is_deterministic(self) -> None:
        source = "message M { string name = 1; } struct S { M m; }"
        assert _rust(source) == _rust(source)


# ###############
# Names and Errors
# ###############


class TestNames:
    def test_type_names(self) -> None:
        assert rust_type_name("block_header") == "BlockHeader"
        assert rust_type_name("Option") == "Option_"
        assert rust_type_name("SchemaRead") == "SchemaRead_"

    def test_field_names(self) -> None:
        assert rust_field_name("txHash") == "tx_hash"
        assert rust_field_name("match") == "match_"
        assert rust_field_name("self") == "self_"

    def test_underscore_names_are_escaped(self) -> None:
        assert rust_type_name("_") == "__"
        assert rust_field_name("_") == "__"
        code = _rust("enum E { _ = 0; } struct _ { uint8 _; E e; }")
        assert "    __ = 0,\n" in code
        assert "pub struct __ {\n    pub __: u8,\n    pub e: E,\n}" in code
        assert "pub struct _ " not in code

    def test_colliding_member_names_raise(self) -> None:
        with pytest.raises(CodeGenError, match="Generated name 'foo_bar' is not unique in struct 'S'"):
            generate(parse("struct S { uint8 fooBar; uint8 foo_bar; }"), "rust")

    def test_colliding_type_names_raise(self) -> None:
        with pytest.raises(CodeGenError, match="Generated name 'NodeRole' is not unique in type names"):
            generate(parse("enum node_role { A = 0; } struct NodeRole {}"), "rust")

    def test_colliding_variant_names_raise(self) -> None:
        with pytest.raises(CodeGenError, match="Generated name 'Active' is not unique in enum 'E'"):
            generate(parse("enum E { ACTIVE = 0; active = 1; }"), "rust")


def test_unverified_reference_raises() -> None:
    with pytest.raises(CodeGenError, match="unknown type 'Missing'"):
        generate(parse("struct S { Missing m; }"), "rust")
