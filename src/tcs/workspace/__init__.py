# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration for multi-file builds."""

from tcs.workspace.config import (
    DEFAULT_WORKSPACE_CONFIG,
    WORKSPACE_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    parse_workspace_config,
)

__all__ = [
    "WORKSPACE_FILE_NAME",
    "DEFAULT_WORKSPACE_CONFIG",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "load_workspace_config",
    "parse_workspace_config",
]
