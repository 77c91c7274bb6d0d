# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the TCS schema compiler documentation."""

project = "TCS"
author = "TCS Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
