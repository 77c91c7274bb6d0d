# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the TCS workspace configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from tcs.compiler.codegen import DEFAULT_CODEC_MODULE, DEFAULT_TARGET, TARGETS, GeneratorOptions
from tcs.compiler.verifier import VerifierPolicy

# ###############
# Public Interface
# ###############

WORKSPACE_FILE_NAME = ".tcs-workspace.yaml"

DEFAULT_BUILD_DIRECTORY = "generated"

DEFAULT_WORKSPACE_CONFIG = f"""\
# TCS Workspace Configuration
# This file marks the root of a TCS workspace.

build-directory: {DEFAULT_BUILD_DIRECTORY}
target: {DEFAULT_TARGET}
python-codec-module: {DEFAULT_CODEC_MODULE}
rust-extra-derives: []
verifier:
  reject-recursive-types: false
"""


class WorkspaceConfigError(Exception):
    """Raised when a workspace configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a TCS workspace.

    Attributes:
        build_directory: Relative path (from the workspace root) for generated code.
        target: Code generation backend.
        codec_module: Codec module imported by generated Python code.
        extra_derives: Additional derives for generated Rust types.
        policy: Optional verifier rules.
    """

    build_directory: str
    target: str = DEFAULT_TARGET
    codec_module: str = DEFAULT_CODEC_MODULE
    extra_derives: list[str] = field(default_factory=list)
    policy: VerifierPolicy = field(default_factory=VerifierPolicy)

    def generator_options(self) -> GeneratorOptions:
        return GeneratorOptions(codec_module=self.codec_module, extra_derives=tuple(self.extra_derives))


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a TCS workspace configuration file.

    Args:
        path: Path to the `.tcs-workspace.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Workspace config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read workspace config file: {exc}") from exc

    return parse_workspace_config(text, source_label=str(path))


def parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        WorkspaceConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: workspace config must be a YAML mapping")

    build_directory = _require_string(data, "build-directory", source_label)

    target = _optional_string(data, "target", source_label, DEFAULT_TARGET)
    if target not in TARGETS:
        choices = ", ".join(f"'{t}'" for t in TARGETS)
        raise WorkspaceConfigError(f"{source_label}: 'target' must be one of {choices}")

    codec_module = _optional_string(data, "python-codec-module", source_label, DEFAULT_CODEC_MODULE)

    extra_derives: list[str] = []
    if data.get("rust-extra-derives") is not None:
        raw_derives = data["rust-extra-derives"]
        if not isinstance(raw_derives, list) or not all(isinstance(d, str) for d in raw_derives):
            raise WorkspaceConfigError(f"{source_label}: 'rust-extra-derives' must be a list of strings")
        extra_derives = list(raw_derives)

    policy = VerifierPolicy()
    if data.get("verifier") is not None:
        policy = _parse_policy(data["verifier"], f"{source_label}: verifier")

    return WorkspaceConfig(
        build_directory=build_directory,
        target=target,
        codec_module=codec_module,
        extra_derives=extra_derives,
        policy=policy,
    )


# ################
# Implementation
# ################


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a required string field from a mapping, raising WorkspaceConfigError if missing."""
    if key not in mapping:
        raise WorkspaceConfigError(f"{source_label}: missing required field '{key}'")
    return _optional_string(mapping, key, source_label, "")


def _optional_string(mapping: dict[str, object], key: str, source_label: str, default: str) -> str:
    value = mapping.get(key, default)
    if not isinstance(value, str):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _parse_policy(entry: object, location: str) -> VerifierPolicy:
    """Parse the optional ``verifier`` mapping."""
    if not isinstance(entry, dict):
        raise WorkspaceConfigError(f"{location} must be a YAML mapping")

    reject_recursive = entry.get("reject-recursive-types", False)
    # bool is checked explicitly since YAML "yes"/"no" already load as bool.
    if not isinstance(reject_recursive, bool):
        raise WorkspaceConfigError(f"{location}: 'reject-recursive-types' must be a boolean")

    max_field_id = entry.get("max-field-id")
    if max_field_id is not None and (
        isinstance(max_field_id, bool) or not isinstance(max_field_id, int) or max_field_id <= 0
    ):
        raise WorkspaceConfigError(f"{location}: 'max-field-id' must be a positive integer")

    return VerifierPolicy(reject_recursive_types=reject_recursive, max_field_id=max_field_id)
