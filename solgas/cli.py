#!/usr/bin/env python3
"""solgas/cli.py — command-line front end.

Usage examples
--------------
    # Analyze a syntax tree (snippets come from Vault.sol next to it)
    solgas analyze Vault.json

    # Several files, machine-readable output
    solgas analyze build/*.json --format gcc

    # Run selected rules only, opt-in rules included
    solgas analyze Vault.json -r storage-read-in-loop,unchecked-math

    # List available rules
    solgas rules

Exit codes
----------
    0   Success, no high-severity issue.
    1   At least one high-severity issue was reported.
    2   Infrastructure failure (missing file, bad tree, unknown rule).

The module doubles as ``python -m solgas`` via ``solgas/__main__.py``.
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
from pathlib import Path
from typing import Optional, Sequence, TextIO

from termcolor import colored

from solgas import __version__
from solgas.analyzer import GasAnalyzer
from solgas.config import OUTPUT_FORMATS, AnalyzerConfig, parse_rule_list
from solgas.errors import EXIT_FINDINGS, EXIT_INFRA, EXIT_OK, SolgasError
from solgas.issues import Severity
from solgas.loader import load_tree, read_source, source_path_for
from solgas.reporter import render
from solgas.rules import RuleRegistry, default_registry

_log = logging.getLogger("solgas")


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``solgas`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("solgas")
    root.setLevel(level)
    if any(getattr(h, "_solgas_cli", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler._solgas_cli = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def _open_output(dest: Optional[str]) -> TextIO:
    """``None`` or ``"-"`` → stdout; otherwise open *dest* for writing."""
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _config_from_args(args: argparse.Namespace) -> AnalyzerConfig:
    return AnalyzerConfig(
        rules=parse_rule_list(args.rules),
        min_severity=Severity.from_string(args.min_severity),
        output_format=args.format,
        color=not args.no_color and args.output in (None, "-"),
        show_snippets=not args.no_snippets,
    )


def _write_rule_list(registry: RuleRegistry, stream: TextIO, color: bool) -> None:
    stream.write("Available rules:\n\n")
    for cls in registry.get_all():
        state = "enabled" if registry.is_enabled(cls.name) else "disabled"
        name = cls.name
        if color:
            name = colored(name, "yellow", attrs=["bold"])
        stream.write(f"  • {name} ({state})\n")
        stream.write(f"    {cls.description}\n\n")


# ===========================================================================
# Sub-command implementations
# ===========================================================================

def cmd_analyze(args: argparse.Namespace) -> int:
    """Analyze one or more syntax trees and print a report per file."""
    if args.list_rules:
        return cmd_rules(args)
    if not args.trees:
        _log.error("No syntax tree given.")
        return EXIT_INFRA

    config = _config_from_args(args)
    for warning in config.validate():
        _log.warning("AnalyzerConfig: %s", warning)

    analyzer = GasAnalyzer(rules=config.rules)
    _log.info("Running rules: %s", ", ".join(analyzer.rule_names))

    if args.source and len(args.trees) > 1:
        _log.warning("--source ignored when analyzing more than one tree")

    exit_code = EXIT_OK
    out = _open_output(args.output)
    try:
        for raw in args.trees:
            tree = load_tree(raw)
            if args.source and len(args.trees) == 1:
                source_file = Path(args.source)
            else:
                source_file = source_path_for(raw)

            _log.info("Analyzing %s", source_file)
            result = analyzer.analyze(tree, str(source_file))

            source = None
            if config.output_format == "text" and config.show_snippets:
                source = read_source(source_file)
            out.write(render(result, config, source))

            if result.high_count:
                exit_code = EXIT_FINDINGS
    finally:
        if out is not sys.stdout:
            out.close()
    return exit_code


def cmd_rules(args: argparse.Namespace) -> int:
    """List registered rules with their enabled state."""
    _write_rule_list(default_registry(), sys.stdout, not args.no_color)
    return EXIT_OK


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="solgas",
        description=(
            "solgas — gas-optimization analyzer for Solidity syntax trees.\n\n"
            "Reads JSON trees produced by @solidity-parser/parser and reports\n"
            "storage reads in loops, visibility, packing and revert-string issues."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              solgas analyze Vault.json
              solgas analyze build/*.json -f gcc --min-severity medium
              solgas rules
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # --- analyze -----------------------------------------------------------
    p_analyze = subparsers.add_parser(
        "analyze",
        aliases=["analyse"],
        help="Analyze Solidity syntax trees.",
        description="Load each JSON syntax tree and report gas issues.",
    )
    p_analyze.add_argument(
        "trees",
        nargs="*",
        metavar="TREE.json",
        help="Syntax tree(s) from @solidity-parser/parser (loc: true).",
    )
    p_analyze.add_argument(
        "--source",
        default=None,
        metavar="FILE.sol",
        help="Solidity source for snippets (default: TREE.sol next to the tree).",
    )
    p_analyze.add_argument(
        "-r", "--rules",
        default=None,
        metavar="a,b",
        help="Comma-separated rule names to run (default: all enabled rules).",
    )
    p_analyze.add_argument(
        "-f", "--format",
        choices=list(OUTPUT_FORMATS),
        default="text",
        help="Output format (default: text).",
    )
    p_analyze.add_argument(
        "--min-severity",
        choices=[s.value for s in Severity],
        default=Severity.LOW.value,
        help="Hide issues below this severity (default: low).",
    )
    p_analyze.add_argument(
        "-o", "--output",
        default=None,
        metavar="FILE",
        help='Output file ("-" or omit for stdout).',
    )
    p_analyze.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output.",
    )
    p_analyze.add_argument(
        "--no-snippets",
        action="store_true",
        help="Do not print source snippets.",
    )
    p_analyze.add_argument(
        "-l", "--list-rules",
        action="store_true",
        help="List available rules and exit.",
    )
    p_analyze.set_defaults(func=cmd_analyze)

    # --- rules -------------------------------------------------------------
    p_rules = subparsers.add_parser(
        "rules",
        help="List available rules.",
    )
    p_rules.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output.",
    )
    p_rules.set_defaults(func=cmd_rules)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the solgas CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except SolgasError as exc:
        _log.error("%s", exc)
        return exc.exit_code
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
