# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Code generation from verified schemas."""

from tcs.compiler.codegen.generator import DEFAULT_TARGET, TARGETS, generate, output_file_name
from tcs.compiler.codegen.options import DEFAULT_CODEC_MODULE, GeneratorOptions

__all__ = [
    "generate",
    "output_file_name",
    "GeneratorOptions",
    "TARGETS",
    "DEFAULT_TARGET",
    "DEFAULT_CODEC_MODULE",
]
