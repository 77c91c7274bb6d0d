# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Options shared by the code generation backends."""

from __future__ import annotations

from dataclasses import dataclass

# ###############
# Public Interface
# ###############

DEFAULT_CODEC_MODULE = "tcs_runtime"


@dataclass(frozen=True)
class GeneratorOptions:
    """Backend settings passed explicitly through code generation.

    Attributes:
        codec_module: Module the Python backend imports as ``codec``.
        extra_derives: Additional derive macros appended by the Rust backend.
    """

    codec_module: str = DEFAULT_CODEC_MODULE
    extra_derives: tuple[str, ...] = ()
