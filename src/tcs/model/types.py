# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Builtin scalar types of the schema language."""

from __future__ import annotations

from enum import Enum

# ###############
# Public Interface
# ###############


class ScalarType(Enum):
    """Scalar types every schema can reference without defining them."""

    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BYTE = "byte"
    BOOL = "bool"
    STRING = "string"


# Type names that resolve without a matching definition.
BUILTIN_TYPE_NAMES: frozenset[str] = frozenset(t.value for t in ScalarType)


def is_builtin(type_name: str) -> bool:
    """Return True if *type_name* names a builtin scalar."""
    return type_name in BUILTIN_TYPE_NAMES
