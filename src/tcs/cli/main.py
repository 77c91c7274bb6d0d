# Copyright 2026 TCS Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the TCS command-line interface."""

import argparse
import sys
from pathlib import Path

from tcs.compiler.build import SOURCE_SUFFIX, build_files, compile_source
from tcs.compiler.codegen import DEFAULT_CODEC_MODULE, DEFAULT_TARGET, TARGETS, GeneratorOptions
from tcs.compiler.errors import CompilerError, TcsError
from tcs.compiler.formatter import format_schema
from tcs.compiler.parser import parse
from tcs.compiler.verifier import VerifierPolicy, check
from tcs.workspace.config import (
    DEFAULT_WORKSPACE_CONFIG,
    WORKSPACE_FILE_NAME,
    WorkspaceConfigError,
    load_workspace_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the TCS CLI."""
    parser = argparse.ArgumentParser(
        prog="tcs",
        description="TCS schema compiler",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new TCS workspace",
        description=f"Create a default {WORKSPACE_FILE_NAME} in a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize the workspace in (default: current directory)",
    )

    # gen subcommand
    gen_parser = subparsers.add_parser(
        "gen",
        help="Generate code from a schema file",
        description="Compile a single schema file and print or write the generated code.",
    )
    gen_parser.add_argument("input", help="Path to the schema file")
    gen_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (default: print to stdout)",
    )
    gen_parser.add_argument(
        "--target",
        choices=TARGETS,
        default=DEFAULT_TARGET,
        help=f"Code generation target (default: {DEFAULT_TARGET})",
    )
    gen_parser.add_argument(
        "--codec-module",
        default=DEFAULT_CODEC_MODULE,
        help=f"Codec module imported by generated Python code (default: {DEFAULT_CODEC_MODULE})",
    )
    gen_parser.add_argument(
        "--extra-derive",
        action="append",
        default=[],
        metavar="DERIVE",
        help="Additional derive for generated Rust types (repeatable)",
    )
    gen_parser.add_argument(
        "--reject-recursive-types",
        action="store_true",
        help="Reject definitions that contain themselves by value",
    )
    gen_parser.add_argument(
        "--max-field-id",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Upper bound for enum values and message field ids",
    )

    # validate subcommand
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a schema file",
        description="Parse and verify a schema file, reporting every issue found.",
    )
    validate_parser.add_argument("input", help="Path to the schema file")
    validate_parser.add_argument(
        "--reject-recursive-types",
        action="store_true",
        help="Reject definitions that contain themselves by value",
    )
    validate_parser.add_argument(
        "--max-field-id",
        type=_positive_int,
        default=None,
        metavar="N",
        help="Upper bound for enum values and message field ids",
    )

    # format subcommand
    format_parser = subparsers.add_parser(
        "format",
        help="Format a schema file",
        description="Print the canonical form of a schema file.",
    )
    format_parser.add_argument("input", help="Path to the schema file")
    format_mode = format_parser.add_mutually_exclusive_group()
    format_mode.add_argument(
        "--check",
        action="store_true",
        help="Exit with code 1 if the file is not canonically formatted",
    )
    format_mode.add_argument(
        "--write",
        action="store_true",
        help="Rewrite the file in place",
    )

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Compile every schema file of a workspace",
        description=f"Compile all {SOURCE_SUFFIX} files under a workspace into its build directory.",
    )
    build_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the TCS workspace (default: current directory)",
    )
    build_parser.add_argument(
        "--force",
        action="store_true",
        help="Recompile files even when their output is up to date",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: '{text}'") from None
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: '{text}'")
    return value


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "gen":
        return _cmd_gen(args)
    if args.command == "validate":
        return _cmd_validate(args)
    if args.command == "format":
        return _cmd_format(args)
    if args.command == "build":
        return _cmd_build(args)
    return 0


def _read_input(path: Path) -> str | None:
    """Read a schema file, printing an error and returning None on failure."""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read '{path}': {exc.strerror or exc}", file=sys.stderr)
        return None


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    workspace_file = directory / WORKSPACE_FILE_NAME

    if workspace_file.exists():
        print(
            f"Error: workspace already exists at '{workspace_file}'.",
            file=sys.stderr,
        )
        return 1

    workspace_file.write_text(DEFAULT_WORKSPACE_CONFIG, encoding="utf-8")
    print(f"Initialized TCS workspace at '{workspace_file}'.")
    return 0


def _cmd_gen(args: argparse.Namespace) -> int:
    """Handle the gen subcommand."""
    input_path = Path(args.input)
    source = _read_input(input_path)
    if source is None:
        return 1

    options = GeneratorOptions(codec_module=args.codec_module, extra_derives=tuple(args.extra_derive))
    policy = VerifierPolicy(reject_recursive_types=args.reject_recursive_types, max_field_id=args.max_field_id)
    try:
        code = compile_source(source, target=args.target, options=options, policy=policy)
    except TcsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.output is None:
        sys.stdout.write(code)
        return 0

    output_path = Path(args.output)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(code, encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot write '{output_path}': {exc.strerror or exc}", file=sys.stderr)
        return 1
    print(f"Generated: {output_path}")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate subcommand."""
    input_path = Path(args.input)
    source = _read_input(input_path)
    if source is None:
        return 1

    try:
        schema = parse(source)
    except TcsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    policy = VerifierPolicy(reject_recursive_types=args.reject_recursive_types, max_field_id=args.max_field_id)
    issues = check(schema, policy)
    if issues:
        for issue in issues:
            print(f"Error: {issue}", file=sys.stderr)
        print(f"Found {len(issues)} issue(s) in '{input_path}'.", file=sys.stderr)
        return 1

    print(f"Schema is valid: {input_path}")
    if schema.package is not None:
        print(f"  Package: {schema.package}")
    print(f"  Definitions: {len(schema.definitions)}")
    for definition in schema.definitions:
        print(f"    {definition.kind.value} {definition.name} ({len(definition.fields)} field(s))")
    return 0


def _cmd_format(args: argparse.Namespace) -> int:
    """Handle the format subcommand."""
    input_path = Path(args.input)
    source = _read_input(input_path)
    if source is None:
        return 1

    try:
        formatted = format_schema(parse(source))
    except TcsError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.check:
        if formatted != source:
            print(f"Error: '{input_path}' is not canonically formatted.", file=sys.stderr)
            return 1
        print(f"Already formatted: {input_path}")
        return 0

    if args.write:
        if formatted == source:
            print(f"Already formatted: {input_path}")
            return 0
        input_path.write_text(formatted, encoding="utf-8")
        print(f"Formatted: {input_path}")
        return 0

    sys.stdout.write(formatted)
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    """Handle the build subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    workspace_file = directory / WORKSPACE_FILE_NAME

    if not workspace_file.exists():
        print(
            f"Error: no TCS workspace found at '{directory}'. Run 'tcs init' to initialize a workspace.",
            file=sys.stderr,
        )
        return 1

    try:
        config = load_workspace_config(workspace_file)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    build_dir = (directory / config.build_directory).resolve()
    schema_files = sorted(f for f in directory.rglob(f"*{SOURCE_SUFFIX}") if build_dir not in f.parents)
    if not schema_files:
        print(f"No {SOURCE_SUFFIX} files found in the workspace.")
        return 0

    print(f"Building {len(schema_files)} schema file(s)...")
    try:
        written = build_files(
            schema_files,
            build_dir,
            target=config.target,
            options=config.generator_options(),
            policy=config.policy,
            force=args.force,
            config_file=workspace_file,
        )
    except CompilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for output in written:
        print(f"Generated: {output}")
    skipped = len(schema_files) - len(written)
    if skipped:
        print(f"Up to date: {skipped} file(s)")
    print("Build finished.")
    return 0
