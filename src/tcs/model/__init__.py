# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""In-memory schema model: definitions, fields and builtin scalar types."""

from tcs.model.schema import Definition, DefinitionKind, Field, Schema
from tcs.model.types import BUILTIN_TYPE_NAMES, ScalarType, is_builtin

__all__ = [
    # Builtin types
    "ScalarType",
    "BUILTIN_TYPE_NAMES",
    "is_builtin",
    # Schema
    "DefinitionKind",
    "Field",
    "Definition",
    "Schema",
]
