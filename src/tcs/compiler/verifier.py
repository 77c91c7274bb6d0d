# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic verification of parsed schemas.

Checks the rules the grammar cannot express: unique names, resolvable type
references, unique wire ids and sane array sizes. The verifier only reads the
schema; it never repairs it. Rules beyond wire compatibility (recursion,
id ranges) are opt-in through :class:`VerifierPolicy`.
"""

from __future__ import annotations

from dataclasses import dataclass

from tcs.compiler.codegen.naming import name_keys
from tcs.compiler.errors import VerificationError, VerificationIssue
from tcs.model.schema import Definition, DefinitionKind, Field, Schema
from tcs.model.types import is_builtin

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class VerifierPolicy:
    """Optional rules layered on top of the mandatory checks.

    Attributes:
        reject_recursive_types: Reject definitions that contain themselves by
            value (directly or through other definitions). Variable-length
            arrays break such cycles.
        max_field_id: Upper bound for enum values and message field ids.
    """

    reject_recursive_types: bool = False
    max_field_id: int | None = None


def check(schema: Schema, policy: VerifierPolicy | None = None) -> list[VerificationIssue]:
    """Run every semantic check and return all issues in schema order.

    Checks performed:
    - Definition names are unique and do not shadow builtin scalars.
    - Field names are unique within each definition.
    - Enum variants carry no type; struct and message fields name a builtin
      scalar or a definition of this schema.
    - Enum values and message ids are non-negative and unique per definition.
    - Struct ids equal the field position and struct fields are never deprecated.
    - Fixed array sizes are positive.
    - Policy rules, when enabled.

    Args:
        schema: The parsed schema.
        policy: Optional rules; defaults to :class:`VerifierPolicy()`.

    Returns:
        A list of :class:`VerificationIssue`. Empty means the schema is valid.
    """
    return _Verifier(schema, policy or VerifierPolicy()).check()


def verify(schema: Schema, policy: VerifierPolicy | None = None) -> None:
    """Verify *schema*, failing on the first issue found.

    Raises:
        VerificationError: Carrying the first issue reported by :func:`check`.
    """
    issues = check(schema, policy)
    if issues:
        raise VerificationError(issues[0])


# ################
# Implementation
# ################


class _Verifier:
    """Performs semantic checks on a single schema."""

    def __init__(self, schema: Schema, policy: VerifierPolicy) -> None:
        self._schema = schema
        self._policy = policy
        self._names: set[str] = {d.name for d in schema.definitions}

    def check(self) -> list[VerificationIssue]:
        issues: list[VerificationIssue] = []

        # 1. Top-level names.
        issues.extend(_check_duplicates(self._schema.definitions, "Duplicate definition name '{}'"))
        issues.extend(
            _check_normalized(self._schema.definitions, "Definition '{}' collides with '{}' after name normalization")
        )
        for definition in self._schema.definitions:
            if is_builtin(definition.name):
                issues.append(_issue(f"Definition '{definition.name}' shadows a builtin type", definition))

        # 2. Each definition in declaration order.
        for definition in self._schema.definitions:
            ctx = f"{definition.kind.value} '{definition.name}'"
            issues.extend(_check_duplicates(definition.fields, f"Duplicate field name '{{}}' in {ctx}"))
            issues.extend(
                _check_normalized(
                    definition.fields, f"Field '{{}}' collides with '{{}}' in {ctx} after name normalization"
                )
            )
            for index, field_def in enumerate(definition.fields):
                issues.extend(self._check_field(definition, ctx, index, field_def))
            if definition.kind is not DefinitionKind.STRUCT:
                issues.extend(_check_duplicate_ids(definition, ctx))

        # 3. Optional policy rules.
        if self._policy.reject_recursive_types:
            issues.extend(self._check_recursion())

        return issues

    def _check_field(
        self,
        definition: Definition,
        ctx: str,
        index: int,
        field_def: Field,
    ) -> list[VerificationIssue]:
        issues: list[VerificationIssue] = []
        where = f"field '{field_def.name}' of {ctx}"

        if definition.kind is DefinitionKind.ENUM:
            if field_def.type_ is not None or field_def.is_array:
                issues.append(_issue(f"Enum variant '{field_def.name}' of {ctx} cannot have a type", field_def))
        elif field_def.type_ is None:
            issues.append(_issue(f"Missing type for {where}", field_def))
        elif not is_builtin(field_def.type_) and field_def.type_ not in self._names:
            issues.append(_issue(f"Undefined type '{field_def.type_}' in {where}", field_def))

        if field_def.array_size is not None:
            if not field_def.is_array:
                issues.append(_issue(f"Array size given for non-array {where}", field_def))
            elif field_def.array_size <= 0:
                issues.append(
                    _issue(f"Array size of {where} must be positive, got {field_def.array_size}", field_def)
                )

        if field_def.is_deprecated and definition.kind is not DefinitionKind.MESSAGE:
            issues.append(_issue(f"Cannot deprecate {where}", field_def))

        if definition.kind is DefinitionKind.STRUCT:
            if field_def.field_id != index + 1:
                issues.append(
                    _issue(f"Struct {where} must have id {index + 1}, got {field_def.field_id}", field_def)
                )
        else:
            label = "Value" if definition.kind is DefinitionKind.ENUM else "Id"
            if field_def.field_id < 0:
                issues.append(_issue(f"{label} of {where} must be non-negative, got {field_def.field_id}", field_def))
            max_id = self._policy.max_field_id
            if max_id is not None and field_def.field_id > max_id:
                issues.append(
                    _issue(f"{label} of {where} exceeds the maximum of {max_id}, got {field_def.field_id}", field_def)
                )

        return issues

    def _check_recursion(self) -> list[VerificationIssue]:
        """Report every definition cycle formed by by-value references."""
        edges: dict[str, list[str]] = {}
        for definition in self._schema.definitions:
            if definition.kind is DefinitionKind.ENUM:
                continue
            targets = edges.setdefault(definition.name, [])
            for field_def in definition.fields:
                if field_def.is_variable_array or field_def.type_ not in self._names:
                    continue
                if field_def.type_ not in targets:
                    targets.append(field_def.type_)

        issues: list[VerificationIssue] = []
        for cycle in _find_cycles(edges, [d.name for d in self._schema.definitions]):
            definition = self._schema.find(cycle[0])
            path = " -> ".join(cycle)
            issues.append(_issue(f"Recursive type '{cycle[0]}' contains itself by value ({path})", definition))
        return issues


def _issue(message: str, node: Definition | Field | None) -> VerificationIssue:
    if node is None:
        return VerificationIssue(message)
    return VerificationIssue(message, node.line, node.column)


def _check_duplicates(nodes: tuple[Definition, ...] | tuple[Field, ...], fmt: str) -> list[VerificationIssue]:
    """Return an issue for the second occurrence of each repeated name.

    *fmt* must contain a single ``{}`` placeholder for the duplicate name.
    """
    seen: set[str] = set()
    reported: set[str] = set()
    issues: list[VerificationIssue] = []
    for node in nodes:
        if node.name in seen:
            if node.name not in reported:
                issues.append(_issue(fmt.format(node.name), node))
                reported.add(node.name)
        else:
            seen.add(node.name)
    return issues


def _check_normalized(nodes: tuple[Definition, ...] | tuple[Field, ...], fmt: str) -> list[VerificationIssue]:
    """Return an issue for each name that generates the same identifier as an earlier, different name.

    Exact repeats are left to :func:`_check_duplicates`. *fmt* takes the
    offending name and the earlier name it collides with.
    """
    owners: dict[tuple[int, str], str] = {}
    issues: list[VerificationIssue] = []
    for node in nodes:
        keys = list(enumerate(name_keys(node.name)))
        other = next((owners[key] for key in keys if owners.get(key, node.name) != node.name), None)
        if other is not None:
            issues.append(_issue(fmt.format(node.name, other), node))
        for key in keys:
            owners.setdefault(key, node.name)
    return issues


def _check_duplicate_ids(definition: Definition, ctx: str) -> list[VerificationIssue]:
    """Enum values and message ids identify fields on the wire and must be unique."""
    label = "value" if definition.kind is DefinitionKind.ENUM else "field id"
    owners: dict[int, str] = {}
    issues: list[VerificationIssue] = []
    for field_def in definition.fields:
        owner = owners.get(field_def.field_id)
        if owner is None:
            owners[field_def.field_id] = field_def.name
        else:
            issues.append(
                _issue(
                    f"Duplicate {label} {field_def.field_id} in {ctx}: "
                    f"'{field_def.name}' reuses the {label} of '{owner}'",
                    field_def,
                )
            )
    return issues


def _find_cycles(edges: dict[str, list[str]], order: list[str]) -> list[list[str]]:
    """Return each cycle of *edges* once, as a closed path such as ``[A, B, A]``."""
    done: set[str] = set()
    cycles: list[list[str]] = []
    for start in order:
        if start in done:
            continue
        # Depth-first walk; pending[i] holds the unvisited targets of path[i].
        path = [start]
        visiting = {start}
        pending = [iter(edges.get(start, ()))]
        while pending:
            target = next(pending[-1], None)
            if target is None:
                pending.pop()
                name = path.pop()
                visiting.discard(name)
                done.add(name)
            elif target in visiting:
                cycles.append(path[path.index(target) :] + [target])
            elif target not in done:
                path.append(target)
                visiting.add(target)
                pending.append(iter(edges.get(target, ())))
    return cycles
