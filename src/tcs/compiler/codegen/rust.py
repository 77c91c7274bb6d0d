# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rust backend: emits plain data types deriving the wincode codec traits."""

from __future__ import annotations

import textwrap
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from jinja2 import Environment

from tcs.compiler.codegen.naming import escape_identifier, first_duplicate, to_pascal_case, to_snake_case
from tcs.compiler.codegen.options import GeneratorOptions
from tcs.compiler.errors import CodeGenError
from tcs.model.schema import Definition, DefinitionKind, Field, Schema

# ###############
# Public Interface
# ###############

RUST_KEYWORDS: frozenset[str] = frozenset(
    {
        # Strict keywords
        "as", "break", "const", "continue", "crate", "else", "enum", "extern", "false", "fn",
        "for", "if", "impl", "in", "let", "loop", "match", "mod", "move", "mut", "pub", "ref",
        "return", "self", "Self", "static", "struct", "super", "trait", "true", "type", "unsafe",
        "use", "where", "while", "async", "await", "dyn",
        # Reserved for future use
        "abstract", "become", "box", "do", "final", "macro", "override", "priv", "try", "typeof",
        "unsized", "virtual", "yield",
        # Wildcard pattern, not an identifier
        "_",
    }
)  # fmt: skip

HEADER = "// @generated by tcs. Do not edit.\n"


def rust_type_name(name: str) -> str:
    """Translate a definition name to a Rust type name."""
    return escape_identifier(to_pascal_case(name), _RESERVED_TYPE_NAMES)


def rust_field_name(name: str) -> str:
    return escape_identifier(to_snake_case(name), RUST_KEYWORDS)


def render_rust(schema: Schema, options: GeneratorOptions, env: Environment) -> str:
    """Render *schema* as a Rust source file.

    Definitions are emitted in declaration order; a package wraps them in a
    ``pub mod``.

    Raises:
        CodeGenError: If a field references a type the schema does not define.
    """
    return _RustRenderer(schema, options, env).render()


# ################
# Implementation
# ################

_SCALARS: dict[str, str] = {
    "uint8": "u8",
    "uint16": "u16",
    "uint32": "u32",
    "uint64": "u64",
    "int8": "i8",
    "int16": "i16",
    "int32": "i32",
    "int64": "i64",
    "float32": "f32",
    "float64": "f64",
    "byte": "u8",
    "bool": "bool",
    "string": "String",
}

# Type names that would shadow the prelude or the derive macros used below.
_RESERVED_TYPE_NAMES: frozenset[str] = RUST_KEYWORDS | {
    "Option",
    "Some",
    "None",
    "Vec",
    "String",
    "Box",
    "Result",
    "Ok",
    "Err",
    "SchemaRead",
    "SchemaWrite",
}

_CODEC_IMPORT = "use wincode_derive::{SchemaRead, SchemaWrite};\n"

# std implements Default for arrays of at most this many elements.
_MAX_DEFAULT_ARRAY_LEN = 32

_ENUM_DERIVES = ("Debug", "Clone", "Copy", "PartialEq", "Eq", "Hash", "Default", "SchemaRead", "SchemaWrite")
_RECORD_DERIVES = ("Debug", "Clone", "PartialEq", "Default", "SchemaRead", "SchemaWrite")


class _RustRenderer:
    def __init__(self, schema: Schema, options: GeneratorOptions, env: Environment) -> None:
        self._schema = schema
        self._options = options
        self._env = env
        self._definitions: dict[str, Definition] = {}
        for definition in schema.definitions:
            self._definitions.setdefault(definition.name, definition)
        self._defaultable: dict[str, bool] = {}

    def render(self) -> str:
        _check_unique((rust_type_name(d.name) for d in self._schema.definitions), "type names")
        items = [_CODEC_IMPORT]
        for definition in self._schema.definitions:
            if definition.kind is DefinitionKind.ENUM:
                items.append(self._env.get_template("rust_enum.rs.j2").render(self._enum_context(definition)))
            else:
                items.append(self._env.get_template("rust_struct.rs.j2").render(self._record_context(definition)))
        body = "\n".join(items)

        if self._schema.package is not None:
            module = rust_field_name(self._schema.package)
            body = f"pub mod {module} {{\n{textwrap.indent(body, '    ')}}}\n"
        return f"{HEADER}\n{body}"

    # ------------------------------------------------------------------
    # Template contexts
    # ------------------------------------------------------------------

    def _enum_context(self, definition: Definition) -> dict[str, Any]:
        derives = list(_ENUM_DERIVES)
        if not definition.fields:
            # An enum without variants has no default value.
            derives.remove("Default")
        variants = [
            {"name": escape_identifier(to_pascal_case(f.name), RUST_KEYWORDS), "value": f.field_id}
            for f in definition.fields
        ]
        _check_unique((v["name"] for v in variants), f"enum '{definition.name}'")
        return {
            "name": rust_type_name(definition.name),
            "derives": derives + list(self._options.extra_derives),
            "variants": variants,
        }

    def _record_context(self, definition: Definition) -> dict[str, Any]:
        derives = list(_RECORD_DERIVES)
        if not self._is_defaultable(definition):
            derives.remove("Default")
        is_message = definition.kind is DefinitionKind.MESSAGE
        members = []
        for field_def in definition.fields:
            member_type = self._member_type(field_def)
            if is_message:
                member_type = f"Option<{member_type}>"
            members.append(
                {
                    "name": rust_field_name(field_def.name),
                    "type": member_type,
                    "deprecated": field_def.is_deprecated,
                }
            )
        _check_unique((m["name"] for m in members), f"{definition.kind.value} '{definition.name}'")
        return {
            "name": rust_type_name(definition.name),
            "derives": derives + list(self._options.extra_derives),
            "allow_deprecated": any(m["deprecated"] for m in members),
            "members": members,
        }

    # ------------------------------------------------------------------
    # Type mapping
    # ------------------------------------------------------------------

    def _member_type(self, field_def: Field) -> str:
        """Map a field to its Rust type, ignoring message optionality."""
        element = self._element_type(field_def)
        if field_def.array_size is not None:
            return f"[{element}; {field_def.array_size}]"
        if field_def.is_array:
            return f"Vec<{element}>"
        return element

    def _element_type(self, field_def: Field) -> str:
        type_name = field_def.type_ or ""
        if type_name in _SCALARS:
            return _SCALARS[type_name]
        if type_name in self._definitions:
            return rust_type_name(type_name)
        raise CodeGenError(f"Cannot generate field '{field_def.name}': unknown type '{type_name}'")

    def _is_defaultable(self, definition: Definition) -> bool:
        """Return True if every member of *definition* implements Default.

        The walk keeps its own stack so arbitrarily long chains of nested
        structs do not exhaust the interpreter stack. A definition reached
        again while still on the stack counts as defaultable, and results that
        relied on that assumption are not cached.
        """
        if definition.kind is DefinitionKind.MESSAGE:
            return True
        if definition.kind is DefinitionKind.ENUM:
            return bool(definition.fields)
        if definition.name in self._defaultable:
            return self._defaultable[definition.name]

        frames = [_DefaultFrame(definition, iter(definition.fields))]
        on_stack = {definition.name}
        while True:
            frame = frames[-1]
            field_def = next(frame.fields, None) if frame.ok else None
            if field_def is None:
                frames.pop()
                on_stack.discard(frame.definition.name)
                if not frame.ok or not frame.assumed:
                    self._defaultable[frame.definition.name] = frame.ok
                if not frames:
                    return frame.ok
                frames[-1].ok = frames[-1].ok and frame.ok
                frames[-1].assumed = frames[-1].assumed or frame.assumed
                continue

            if field_def.is_variable_array:
                continue
            if field_def.array_size is not None and field_def.array_size > _MAX_DEFAULT_ARRAY_LEN:
                frame.ok = False
                continue
            target = self._definitions.get(field_def.type_ or "")
            if target is None or target.kind is DefinitionKind.MESSAGE:
                continue
            if target.kind is DefinitionKind.ENUM:
                frame.ok = bool(target.fields)
            elif target.name in on_stack:
                frame.assumed = True
            elif target.name in self._defaultable:
                frame.ok = self._defaultable[target.name]
            else:
                on_stack.add(target.name)
                frames.append(_DefaultFrame(target, iter(target.fields)))


@dataclass
class _DefaultFrame:
    definition: Definition
    fields: Iterator[Field]
    ok: bool = True
    assumed: bool = False


def _check_unique(names: Iterable[str], scope: str) -> None:
    duplicate = first_duplicate(names)
    if duplicate is not None:
        raise CodeGenError(f"Generated name '{duplicate}' is not unique in {scope}")
