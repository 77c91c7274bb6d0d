# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Schema AST produced by the parser and consumed by every later stage."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from tcs.model.types import ScalarType

# ###############
# Public Interface
# ###############


class DefinitionKind(Enum):
    """The three kinds of declaration; values are the schema keywords."""

    ENUM = "enum"
    STRUCT = "struct"
    MESSAGE = "message"


class Field(BaseModel):
    """A member of a definition: an enum variant, struct member or message field.

    Attributes:
        name: Field name as written in the schema.
        type_: Type name, ``None`` for enum variants.
        is_array: True for both fixed and variable arrays.
        array_size: Element count of a fixed array, ``None`` otherwise.
        is_deprecated: Only ever set on message fields.
        field_id: Enum value, message field id, or ``index + 1`` for struct members.
        line: 1-based line of the field name.
        column: 1-based column of the field name.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    type_: str | None = None
    is_array: bool = False
    array_size: int | None = None
    is_deprecated: bool = False
    field_id: int = 0
    line: int = 0
    column: int = 0

    @property
    def is_fixed_array(self) -> bool:
        return self.array_size is not None

    @property
    def is_variable_array(self) -> bool:
        return self.is_array and self.array_size is None

    @property
    def is_fixed_byte_array(self) -> bool:
        """True for ``byte[N]``, which maps to a fixed-length byte block."""
        return self.array_size is not None and self.type_ == ScalarType.BYTE.value


class Definition(BaseModel):
    """A named enum, struct or message declaration."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: DefinitionKind
    fields: tuple[Field, ...] = ()
    line: int = 0
    column: int = 0

    @property
    def is_enum(self) -> bool:
        return self.kind is DefinitionKind.ENUM

    @property
    def is_struct(self) -> bool:
        return self.kind is DefinitionKind.STRUCT

    @property
    def is_message(self) -> bool:
        return self.kind is DefinitionKind.MESSAGE


class Schema(BaseModel):
    """Root of the AST: an optional package name and the ordered definitions."""

    model_config = ConfigDict(frozen=True)

    package: str | None = None
    definitions: tuple[Definition, ...] = ()

    def find(self, name: str) -> Definition | None:
        """Return the first definition called *name*, or None."""
        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None
