# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""TCS - schema compiler for Tape Canonical Serialization."""

__version__ = "0.1.0"
