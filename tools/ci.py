#!/usr/bin/env python3
# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run all CI checks locally: format, lint, type check, tests, sample schemas and build."""

import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: list[tuple[str, list[str]]] = [
    ("Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/"]),
    ("Lint", ["uv", "run", "ruff", "check", "src/", "tests/"]),
    ("Type check", ["uv", "run", "ty", "check", "src/"]),
    ("Tests", ["uv", "run", "pytest", "--cov=tcs", "--cov-report=term-missing"]),
    ("Build", ["uv", "build"]),
]

SCHEMA_DIRECTORY = "schemas"


def main() -> int:
    """Run all CI steps and report results."""
    results: list[tuple[str, bool, float]] = []

    for name, cmd in STEPS + _schema_steps():
        _print_banner(name)
        start = time.monotonic()
        proc = subprocess.run(cmd, cwd=_repo_root())
        elapsed = time.monotonic() - start
        results.append((name, proc.returncode == 0, elapsed))

    _print_banner("  Summary")
    all_passed = True
    for name, passed, elapsed in results:
        if passed:
            line = chalk.green(f"  PASS  {name} ({elapsed:.1f}s)")
        else:
            line = chalk.red(f"  FAIL  {name} ({elapsed:.1f}s)")
            all_passed = False
        print(line)

    print()
    return 0 if all_passed else 1


# ################
# Implementation
# ################


def _repo_root() -> pathlib.Path:
    return pathlib.Path(__file__).parent.parent


def _print_banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}")
    print(chalk.blue(title))
    print(sep)


def _schema_steps() -> list[tuple[str, list[str]]]:
    """Validate and format-check every sample schema with the installed `tcs` CLI."""
    steps: list[tuple[str, list[str]]] = []
    for schema in sorted((_repo_root() / SCHEMA_DIRECTORY).glob("*.tcs")):
        relative = str(schema.relative_to(_repo_root()))
        steps.append((f"Validate {relative}", ["uv", "run", "tcs", "validate", "--reject-recursive-types", relative]))
        steps.append((f"Format {relative}", ["uv", "run", "tcs", "format", "--check", relative]))
    return steps


if __name__ == "__main__":
    sys.exit(main())
