# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Python backend: emits IntEnum and pydantic model classes for a codec module.

Each class is decorated with ``codec.schema`` and each member carries its wire
representation as ``typing.Annotated`` metadata, which is all the codec needs
to derive encoding. Message members are optional and tagged with their id.
"""

from __future__ import annotations

import keyword
from collections.abc import Iterable
from typing import Any

import pydantic
from jinja2 import Environment

from tcs.compiler.codegen.naming import escape_identifier, first_duplicate, to_pascal_case, to_snake_case
from tcs.compiler.codegen.options import GeneratorOptions
from tcs.compiler.errors import CodeGenError
from tcs.model.schema import Definition, DefinitionKind, Field, Schema

# ###############
# Public Interface
# ###############

# Names the generated module binds at top level.
MODULE_NAMES: frozenset[str] = frozenset({"annotations", "codec", "enum", "pydantic", "typing"})

PYTHON_RESERVED: frozenset[str] = frozenset(keyword.kwlist) | frozenset(keyword.softkwlist) | MODULE_NAMES

# Members must not shadow attributes inherited from pydantic.BaseModel.
MODEL_RESERVED: frozenset[str] = PYTHON_RESERVED | frozenset(
    name for name in dir(pydantic.BaseModel) if not name.startswith("_")
)


def render_python(schema: Schema, options: GeneratorOptions, env: Environment) -> str:
    """Render *schema* as a Python module.

    Raises:
        CodeGenError: If a field references a type the schema does not define.
    """
    return _PythonRenderer(schema, options, env).render()


def python_module_name(name: str) -> str:
    """Translate a package or file stem to a module name."""
    return escape_identifier(to_snake_case(name), PYTHON_RESERVED)


# ################
# Implementation
# ################

# Schema scalar -> (Python type, codec wire marker)
_SCALARS: dict[str, tuple[str, str]] = {
    "uint8": ("int", "codec.U8"),
    "uint16": ("int", "codec.U16"),
    "uint32": ("int", "codec.U32"),
    "uint64": ("int", "codec.U64"),
    "int8": ("int", "codec.I8"),
    "int16": ("int", "codec.I16"),
    "int32": ("int", "codec.I32"),
    "int64": ("int", "codec.I64"),
    "float32": ("float", "codec.F32"),
    "float64": ("float", "codec.F64"),
    "byte": ("int", "codec.U8"),
    "bool": ("bool", "codec.BOOL"),
    "string": ("str", "codec.STRING"),
}


def _class_name(name: str) -> str:
    return escape_identifier(_public_name(to_pascal_case(name), "Unnamed"), PYTHON_RESERVED)


def _public_name(name: str, fallback: str) -> str:
    """Move leading underscores to the end of *name*.

    pydantic treats underscore-prefixed members as private attributes and
    drops them from the model fields, so ``_hidden`` becomes ``hidden_``. A
    name made only of underscores becomes *fallback* with one trailing
    underscore.
    """
    stripped = name.lstrip("_")
    if stripped == name:
        return name
    return f"{stripped or fallback}_"


def _check_unique(names: Iterable[str], scope: str) -> None:
    duplicate = first_duplicate(names)
    if duplicate is not None:
        raise CodeGenError(f"Generated name '{duplicate}' is not unique in {scope}")


class _PythonRenderer:
    def __init__(self, schema: Schema, options: GeneratorOptions, env: Environment) -> None:
        self._schema = schema
        self._options = options
        self._env = env
        self._names = {d.name for d in schema.definitions}

    def render(self) -> str:
        _check_unique((_class_name(d.name) for d in self._schema.definitions), "class names")
        definitions: list[dict[str, Any]] = []
        models: list[str] = []
        for definition in self._schema.definitions:
            if definition.kind is DefinitionKind.ENUM:
                definitions.append(self._enum_context(definition))
            else:
                context = self._model_context(definition)
                definitions.append(context)
                models.append(context["name"])
        return self._env.get_template("python_module.py.j2").render(
            package=self._schema.package,
            codec_module=self._options.codec_module,
            has_enums=any(d["kind"] == "enum" for d in definitions),
            definitions=definitions,
            models=models,
        )

    def _enum_context(self, definition: Definition) -> dict[str, Any]:
        variants = [
            {
                "name": escape_identifier(_public_name(to_snake_case(f.name).upper(), "UNNAMED"), PYTHON_RESERVED),
                "value": f.field_id,
            }
            for f in definition.fields
        ]
        _check_unique((v["name"] for v in variants), f"enum '{definition.name}'")
        return {"kind": "enum", "name": _class_name(definition.name), "variants": variants}

    def _model_context(self, definition: Definition) -> dict[str, Any]:
        is_message = definition.kind is DefinitionKind.MESSAGE
        members = []
        names = [
            escape_identifier(_public_name(to_snake_case(f.name), "unnamed"), MODEL_RESERVED) for f in definition.fields
        ]
        _check_unique(names, f"{definition.kind.value} '{definition.name}'")
        for name, field_def in zip(names, definition.fields):
            py_type, marker = self._wire_type(field_def)
            if not is_message:
                annotation = f"typing.Annotated[{py_type}, {marker}]" if marker else py_type
                members.append({"declaration": f"{name}: {annotation}"})
                continue
            metadata = ", ".join(m for m in (marker, f"codec.Tag({field_def.field_id})") if m)
            default = "pydantic.Field(default=None, deprecated=True)" if field_def.is_deprecated else "None"
            members.append({"declaration": f"{name}: typing.Annotated[{py_type} | None, {metadata}] = {default}"})
        return {"kind": definition.kind.value, "name": _class_name(definition.name), "members": members}

    def _wire_type(self, field_def: Field) -> tuple[str, str | None]:
        """Return the Python type and codec marker for a field.

        The marker is None for a scalar reference to another definition, whose
        class already describes its own encoding.
        """
        type_name = field_def.type_ or ""
        if field_def.is_fixed_byte_array:
            return "bytes", f"codec.FixedBytes({field_def.array_size})"
        if field_def.is_variable_array and type_name == "byte":
            return "bytes", "codec.Bytes()"

        if type_name in _SCALARS:
            py_type, element = _SCALARS[type_name]
        elif type_name in self._names:
            py_type = element = _class_name(type_name)
        else:
            raise CodeGenError(f"Cannot generate field '{field_def.name}': unknown type '{type_name}'")

        if field_def.array_size is not None:
            return f"list[{py_type}]", f"codec.Array({element}, {field_def.array_size})"
        if field_def.is_array:
            return f"list[{py_type}]", f"codec.Vec({element})"
        if type_name in self._names:
            return py_type, None
        return py_type, element
