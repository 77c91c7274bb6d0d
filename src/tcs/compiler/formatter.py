# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Canonical pretty-printer for schema models.

Formatting already-canonical text after parsing reproduces it exactly.
"""

from __future__ import annotations

from tcs.model.schema import Definition, DefinitionKind, Field, Schema

# ###############
# Public Interface
# ###############

INDENT = "  "


def format_schema(schema: Schema) -> str:
    """Render *schema* as canonical .tcs source text."""
    parts: list[str] = []
    if schema.package is not None:
        parts.append(f"package {schema.package};\n")
    parts.extend(_format_definition(d) for d in schema.definitions)
    return "\n".join(parts)


# ################
# Implementation
# ################


def _format_definition(definition: Definition) -> str:
    lines = [f"{definition.kind.value} {definition.name} {{"]
    lines.extend(INDENT + _format_field(f, definition.kind) for f in definition.fields)
    lines.append("}")
    return "\n".join(lines) + "\n"


def _format_field(field_def: Field, kind: DefinitionKind) -> str:
    if kind is DefinitionKind.ENUM:
        return f"{field_def.name} = {field_def.field_id};"
    if kind is DefinitionKind.STRUCT:
        return f"{_format_typed(field_def)};"
    suffix = " [deprecated]" if field_def.is_deprecated else ""
    return f"{_format_typed(field_def)} = {field_def.field_id}{suffix};"


def _format_typed(field_def: Field) -> str:
    array = ""
    if field_def.array_size is not None:
        array = f"[{field_def.array_size}]"
    elif field_def.is_array:
        array = "[]"
    return f"{field_def.type_}{array} {field_def.name}"
