"""CLI entrypoints for sfclint commands."""

from __future__ import annotations

import argparse
import logging
import json
import sys
from pathlib import Path
from typing import List

from .config import CONFIG_FILENAME, ConfigError, load_config
from .fixes import apply_fixes
from .linter import Linter, LintResult
from .logging import configure_logging


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sfclint",
        description="Check parsed single-file components for prop, computed and directive invariants.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    lint_parser = subparsers.add_parser(
        "lint",
        help="Lint JSON tree dumps produced by the component parser.",
    )
    _add_verbose_option(lint_parser, suppress_default=True)
    lint_parser.add_argument(
        "paths",
        nargs="+",
        help="Tree dumps (Foo.vue.json next to Foo.vue, or envelopes carrying the source).",
    )
    lint_parser.add_argument(
        "--config",
        default=".",
        help=f"Path to {CONFIG_FILENAME} or the directory holding it (defaults to current directory).",
    )
    lint_parser.add_argument(
        "--rule",
        action="append",
        dest="rules",
        help="Only run the named rule (repeatable).",
    )
    lint_parser.add_argument(
        "--fix",
        action="store_true",
        help="Write fixes back to the source files.",
    )
    lint_parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write a debug-level log to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for sfclint commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logger = configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(2, f"sfclint: {exc}\n")
    if args.rules:
        config.enabled = list(args.rules)

    try:
        linter = Linter(config)
    except ValueError as exc:
        parser.exit(2, f"sfclint: {exc}\n")

    failed = False
    for raw_path in args.paths:
        path = Path(raw_path)
        try:
            result = linter.lint_path(path)
        except (OSError, json.JSONDecodeError) as exc:
            print(f"{path}: error: {exc}", file=sys.stderr)
            failed = True
            continue
        if result.error is not None:
            print(f"{path}: error: {result.error}", file=sys.stderr)
            failed = True
            continue
        if args.fix:
            _write_fixes(result, logger)
        for line in _format(result):
            print(line)
        if result.diagnostics:
            failed = True
    return 1 if failed else 0


def _write_fixes(result: LintResult, logger: logging.Logger) -> None:
    if result.text is None or result.filename is None:
        logger.warning("No source text for %s; fixes not written", result.filename)
        return
    target = Path(result.filename)
    outcome = apply_fixes(result.text, result.diagnostics)
    if not outcome.changed:
        return
    if not target.exists():
        logger.warning("Source %s not found on disk; fixes not written", target)
        return
    target.write_text(outcome.text, encoding="utf-8")
    logger.info("Applied %d fix(es) to %s", len(outcome.applied), target)
    fixed = {id(diagnostic) for diagnostic in outcome.applied}
    result.diagnostics = [diagnostic for diagnostic in result.diagnostics if id(diagnostic) not in fixed]


def _format(result: LintResult) -> List[str]:
    lines = []
    for diagnostic in result.diagnostics:
        line = diagnostic.line if diagnostic.line is not None else 0
        column = (diagnostic.column or 0) + 1
        lines.append(f"{result.filename}:{line}:{column}: {diagnostic.message} [{diagnostic.rule}]")
    return lines


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
