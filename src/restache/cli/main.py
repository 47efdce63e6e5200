# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the restache command-line interface."""

import argparse
import glob
import os
import sys
from pathlib import Path

from restache import __version__
from restache.compiler.artifact import read_artifact, serialize, write_artifact
from restache.compiler.module import ModuleError, parse_dir
from restache.compiler.render import RenderError, render
from restache.parser.parser import parse, parse_file
from restache.parser.tokenizer import TokenizerError
from restache.workspace.config import CONFIG_FILE_NAME, Config, ConfigError, find_config, load_config

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the restache CLI."""
    parser = argparse.ArgumentParser(
        prog="restache",
        description="restache: compile HTML templates into JSX components",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s version {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Compile templates into JSX modules",
        description=(
            "Compile the templates matched by the given glob patterns. Files in the same "
            "directory are compiled together so that they can use each other as components. "
            "With no PATTERN, or when PATTERN is -, read standard input and write standard output."
        ),
    )
    build_parser.add_argument(
        "patterns",
        nargs="*",
        metavar="PATTERN",
        help="Glob pattern or directory selecting template files",
    )
    build_parser.add_argument(
        "-o",
        "--outdir",
        default=None,
        help="Write output files to DIR (default: next to the input files)",
    )
    build_parser.add_argument(
        "-p",
        "--parallelism",
        type=int,
        default=None,
        help="Number of files to parse in parallel (default: number of CPUs, at most 32)",
    )
    build_parser.add_argument(
        "--config",
        default=None,
        help=f"Configuration file (default: {CONFIG_FILE_NAME} in the current directory, if present)",
    )

    # ast subcommand
    ast_parser = subparsers.add_parser(
        "ast",
        help="Print the parsed tree of a template as JSON",
        description="Parse a single template and print its tree as a JSON document.",
    )
    ast_parser.add_argument("file", help="Template file to parse")
    ast_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the tree to FILE instead of standard output",
    )

    # render subcommand
    render_parser = subparsers.add_parser(
        "render",
        help="Render JSX from a tree saved by 'restache ast -o'",
        description="Read a JSON tree artifact and write the JSX module it describes.",
    )
    render_parser.add_argument("artifact", help="JSON tree artifact to render")
    render_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Write the JSX to FILE instead of standard output",
    )

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "build":
        return _cmd_build(args)
    if args.command == "ast":
        return _cmd_ast(args)
    if args.command == "render":
        return _cmd_render(args)
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    """Handle the build subcommand."""
    base_dir = Path.cwd()

    try:
        config, config_dir = _load_build_config(args, base_dir)
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    patterns: list[str] = args.patterns
    if not patterns or patterns[0] == "-":
        if args.outdir is not None:
            print("Warning: ignoring --outdir (no input files)", file=sys.stderr)
        return _build_stdin()

    files_by_dir = _resolve_patterns(base_dir, patterns, config.extension)
    if not files_by_dir:
        print("Error: no files matched the provided pattern", file=sys.stderr)
        return 1

    outdir: Path | None = None
    if args.outdir is not None:
        outdir = (base_dir / args.outdir).resolve()
    elif config.output_directory is not None:
        outdir = (config_dir / config.output_directory).resolve()

    parallelism = args.parallelism if args.parallelism is not None else config.parallelism
    common_dir = Path(os.path.commonpath([str(d) for d in files_by_dir]))

    written = 0
    for directory, files in files_by_dir.items():
        dst = directory if outdir is None else outdir / directory.relative_to(common_dir)
        try:
            written += _build_directory(directory, dst, files, parallelism)
        except (ModuleError, TokenizerError, RenderError, OSError) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    print(f"Compiled {written} template(s).")
    return 0


def _cmd_ast(args: argparse.Namespace) -> int:
    """Handle the ast subcommand."""
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return 1
    try:
        root = parse_file(path)
    except (TokenizerError, OSError) as exc:
        print(f"Error: cannot parse '{path}': {exc}", file=sys.stderr)
        return 1
    if args.output is None:
        print(serialize(root, indent=2))
        return 0
    output = Path(args.output)
    try:
        write_artifact(root, output, indent=2)
    except OSError as exc:
        print(f"Error: cannot write '{output}': {exc}", file=sys.stderr)
        return 1
    print(f"Wrote '{output}'.")
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    """Handle the render subcommand."""
    path = Path(args.artifact)
    if not path.is_file():
        print(f"Error: file '{path}' does not exist.", file=sys.stderr)
        return 1
    try:
        root = read_artifact(path)
    except (ValueError, KeyError, OSError) as exc:
        print(f"Error: cannot read artifact '{path}': {exc}", file=sys.stderr)
        return 1

    try:
        if args.output is None:
            render(root, sys.stdout)
            return 0
        output = Path(args.output)
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8", newline="\n") as f:
            render(root, f)
    except (RenderError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"Wrote '{output}'.")
    return 0


def _load_build_config(args: argparse.Namespace, base_dir: Path) -> tuple[Config, Path]:
    """Return the configuration in effect and the directory it is relative to."""
    if args.config is not None:
        path = (base_dir / args.config).resolve()
        return load_config(path), path.parent
    found = find_config(base_dir)
    if found is None:
        return Config(), base_dir
    return load_config(found), base_dir


def _build_stdin() -> int:
    try:
        root = parse(sys.stdin.buffer)
        render(root, sys.stdout)
    except (TokenizerError, OSError) as exc:
        print(f"Error: failed to parse stdin: {exc}", file=sys.stderr)
        return 1
    except RenderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


def _resolve_patterns(base_dir: Path, patterns: list[str], extension: str) -> dict[Path, list[str]]:
    """Expand glob patterns into basenames grouped by their directory.

    A pattern matching a directory selects the files with *extension* inside
    it. Symbolic links are skipped and every file is reported once.
    """
    files_by_dir: dict[Path, list[str]] = {}
    seen: set[Path] = set()
    for pattern in patterns:
        for match in sorted(glob.glob(str(base_dir / pattern), recursive=True)):
            path = Path(match)
            if path.is_symlink():
                continue
            if path.is_dir():
                candidates = sorted(p for p in path.iterdir() if p.is_file() and p.suffix == extension)
            else:
                candidates = [path]
            for candidate in candidates:
                candidate = candidate.resolve()
                if candidate in seen:
                    continue
                seen.add(candidate)
                files_by_dir.setdefault(candidate.parent, []).append(candidate.name)
    return files_by_dir


def _build_directory(directory: Path, dst: Path, files: list[str], parallelism: int | None) -> int:
    """Compile *files* from *directory* into *dst* and return the number of outputs."""
    if len(files) == 1:
        roots = [parse_file(directory / files[0])]
    else:
        roots = parse_dir(directory, files, parallelism=parallelism)

    dst.mkdir(parents=True, exist_ok=True)
    for root in roots:
        outfile = dst / f"{root.data}.jsx"
        with outfile.open("w", encoding="utf-8", newline="\n") as f:
            render(root, f)
        print(f"Wrote '{outfile}'.")
    return len(roots)
