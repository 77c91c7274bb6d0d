# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Identifier case conversion shared by the code generation backends.

All helpers are pure functions of their input so generated code is
diff-stable across compiles.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable

# ###############
# Public Interface
# ###############


def to_pascal_case(name: str) -> str:
    """Convert a schema identifier to UpperCamelCase.

    ``hello_world`` -> ``HelloWorld``, ``STORAGE`` -> ``Storage``,
    ``clientID`` -> ``ClientID``.
    """
    if "_" in name:
        # A name made only of underscores has no words to join.
        return "".join(word[0].upper() + word[1:].lower() for word in name.split("_") if word) or name
    if name and name == name.upper():
        return name[0].upper() + name[1:].lower()
    return name[:1].upper() + name[1:]


def to_snake_case(name: str) -> str:
    """Convert a schema identifier to lower_snake_case.

    ``HelloWorld`` -> ``hello_world``, ``clientID`` -> ``client_id``,
    ``HTTPServer`` -> ``http_server``, ``FOO_BAR`` -> ``foo_bar``.
    """
    chars: list[str] = []
    for i, ch in enumerate(name):
        if ch.isupper():
            prev = name[i - 1] if i > 0 else ""
            next_is_lower = i + 1 < len(name) and name[i + 1].islower()
            if prev and prev != "_" and (not prev.isupper() or next_is_lower):
                chars.append("_")
            chars.append(ch.lower())
        else:
            chars.append(ch)
    return "".join(chars)


def escape_identifier(name: str, reserved: Collection[str]) -> str:
    """Append ``_`` to *name* if it collides with a reserved word."""
    if name in reserved:
        return f"{name}_"
    return name


def name_keys(name: str) -> tuple[str, str]:
    """Return the forms two identifiers must not share to stay distinct in generated code.

    The first is the type-name form, the second the member-name form with
    surrounding underscores removed, since backends add or strip those when
    escaping.
    """
    return to_pascal_case(name), to_snake_case(name).strip("_")


def first_duplicate(names: Iterable[str]) -> str | None:
    """Return the first name that occurs twice, or None."""
    seen: set[str] = set()
    for name in names:
        if name in seen:
            return name
        seen.add(name)
    return None
