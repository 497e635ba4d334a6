"""Command-line interface for publicapi-core."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from contract.baseline import (
    PUBLIC_API_FILE_NAME,
    AdditionalFileError,
    is_public_api_file_name,
    read_additional_files,
)
from logging_config import setup_logging
from parse.treesitter_symbols import build_symbol_graph
from reconcile.driver import collect_public_api, run_analysis
from report.write import write_jsonl, write_text
from rules.config import ConfigError, load_config, resolve_within_root
from symbols.graph import SymbolGraphError, load_symbol_graph

if TYPE_CHECKING:
    from rules.config import PublicApiConfig
    from symbols.model import Symbol


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Repository root (default: .)",
    )
    parser.add_argument(
        "--graph",
        default=None,
        help="Read the symbol graph from a JSONL file instead of parsing sources",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="publicapi")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser(
        "check", help="Compare the public API against PublicAPI.txt"
    )
    _add_common_arguments(check_parser)
    check_parser.add_argument(
        "--baseline",
        default=None,
        help="Baseline file (default: config baseline, PublicAPI.txt)",
    )
    check_parser.add_argument(
        "--format",
        choices=("text", "jsonl"),
        default="text",
        help="Diagnostic output format (default: text)",
    )
    check_parser.add_argument(
        "--jobs",
        type=int,
        default=None,
        help="Worker threads used to observe symbols (default: config jobs)",
    )

    surface_parser = subparsers.add_parser(
        "surface", help="Print the signature names of the current public API"
    )
    _add_common_arguments(surface_parser)

    return parser


def _load_roots(
    root: Path, config: PublicApiConfig, graph: str | None
) -> list[Symbol]:
    if graph is not None:
        return load_symbol_graph(Path(graph).expanduser().resolve())
    return build_symbol_graph(
        resolve_within_root(root, config.source_root),
        include_patterns=config.include or None,
        exclude_patterns=config.exclude or None,
        nested_gitignore=config.nested_gitignore,
    )


def _resolve_additional_paths(
    root: Path, config: PublicApiConfig, baseline: str | None
) -> list[Path]:
    if baseline is not None:
        baseline_path = Path(baseline).expanduser().resolve()
        if not baseline_path.is_file():
            msg = f"Baseline file does not exist: {baseline_path}"
            raise FileNotFoundError(msg)
        if not is_public_api_file_name(baseline_path.name):
            msg = (
                f"Baseline file must be named {PUBLIC_API_FILE_NAME}: {baseline_path}"
            )
            raise ConfigError(msg)
        paths = [baseline_path]
    else:
        paths = [resolve_within_root(root, config.baseline)]
    paths.extend(resolve_within_root(root, extra) for extra in config.additional_files)
    return paths


def _handle_check(root: Path, args: argparse.Namespace) -> int:
    config = load_config(root)
    jobs = args.jobs if args.jobs is not None else config.jobs
    if jobs < 1:
        sys.stderr.write("error: --jobs must be at least 1\n")
        return 2

    additional_files = read_additional_files(
        _resolve_additional_paths(root, config, args.baseline)
    )
    roots = _load_roots(root, config, args.graph)
    result = run_analysis(roots, additional_files, jobs=jobs)

    if not result.ran:
        sys.stderr.write("No PublicAPI.txt found; public API check skipped.\n")
        return 0

    if args.format == "jsonl":
        write_jsonl(sys.stdout, result.diagnostics)
    else:
        write_text(sys.stdout, result.diagnostics)

    return 0 if result.ok else 1


def _handle_surface(root: Path, args: argparse.Namespace) -> int:
    config = load_config(root)
    roots = _load_roots(root, config, args.graph)
    for signature in collect_public_api(roots):
        sys.stdout.write(signature + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, quiet=args.quiet)
    root = Path(args.root).expanduser().resolve()

    try:
        if args.command == "check":
            return _handle_check(root, args)

        if args.command == "surface":
            return _handle_surface(root, args)
    except (
        ConfigError,
        SymbolGraphError,
        AdditionalFileError,
        FileNotFoundError,
    ) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
