#!/usr/bin/env python3
"""grammar_conventions/main.py — CLI entry-point.

Usage examples
--------------
    # Check every *.g file below src/grammar with a configuration file
    grammar-conventions check src/grammar --config conventions.json

    # Check with the built-in checks, including the license header
    grammar-conventions check TSPHP.g --header-file LICENSE-header.txt

    # Dump the syntax tree of a grammar (debugging aid)
    grammar-conventions parse TSPHP.g --format sexp

    # List the node kinds usable in a check's "tokens" setting
    grammar-conventions kinds

Exit codes
----------
    0   No convention violations.
    1   One or more diagnostics were reported.
    2   Configuration or infrastructure failure (bad config, missing file).

The module doubles as ``python -m grammar_conventions`` via the companion
``grammar_conventions/__main__.py`` which simply calls :func:`main`.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import textwrap
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, TextIO

from grammar_conventions import __version__
from grammar_conventions.checks import NEEDS_SETTINGS, default_registry
from grammar_conventions.config import CheckConfig, load_config
from grammar_conventions.diagnostics import Diagnostic, sort_diagnostics
from grammar_conventions.errors import GrammarConventionError
from grammar_conventions.frontend import parse_grammar
from grammar_conventions.node_kinds import DEFAULT_REGISTRY
from grammar_conventions.walker import GrammarWalker

_log = logging.getLogger("grammar_conventions")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_VIOLATIONS: int = 1
EXIT_INFRA: int = 2


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the ``grammar_conventions`` logger.

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

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    root = logging.getLogger("grammar_conventions")
    root.setLevel(level)
    for stale in list(root.handlers):
        root.removeHandler(stale)
    root.addHandler(handler)


def _open_output(dest: Optional[str]) -> TextIO:
    """``None`` or ``"-"`` → ``sys.stdout``; otherwise open *dest* for writing."""
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def iter_grammar_files(paths: Sequence[str], extension: str = "g") -> Iterator[Path]:
    """Yield files named on the command line and ``*.<extension>`` files below directories."""
    suffix = "." + extension.lstrip(".")
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            yield from sorted(p for p in path.rglob(f"*{suffix}") if p.is_file())
        else:
            yield path


def default_configs(header_file: Optional[str] = None) -> List[CheckConfig]:
    """Every built-in check that runs without settings, plus HeaderCheck if asked."""
    configs = [
        CheckConfig(check_cls.name)
        for check_cls in default_registry().get_all()
        if check_cls.name not in NEEDS_SETTINGS
    ]
    if header_file:
        configs.insert(0, CheckConfig("HeaderCheck", {"headerFile": header_file}))
    return configs


def _emit_diagnostics(
    diagnostics: List[Diagnostic],
    fmt: str,
    stream: TextIO,
) -> None:
    if fmt == "json":
        json.dump([d.to_dict() for d in diagnostics], stream, indent=2)
        stream.write("\n")
        return
    for diag in diagnostics:
        stream.write(diag.to_text() + "\n")
    if diagnostics:
        files = len({d.file for d in diagnostics})
        stream.write(f"\n--- {len(diagnostics)} diagnostic(s) in {files} file(s) ---\n")


# ===========================================================================
# Sub-command implementations
# ===========================================================================

def cmd_check(args: argparse.Namespace) -> int:
    """Run the configured checks over the given grammar files."""
    try:
        if args.config:
            configs = load_config(args.config)
            if args.header_file:
                configs.append(
                    CheckConfig("HeaderCheck", {"headerFile": args.header_file})
                )
        else:
            configs = default_configs(args.header_file)
        walker = GrammarWalker()
        walker.setup_checks(configs)
    except GrammarConventionError as exc:
        _log.error("invalid configuration: %s", exc.format())
        return EXIT_INFRA

    files = list(iter_grammar_files(args.paths, args.extension))
    if not files:
        _log.error("no grammar files found in %s", ", ".join(args.paths))
        return EXIT_INFRA

    _log.info("checking %d file(s) with %d check(s)", len(files), len(walker.checks))
    try:
        diagnostics = sort_diagnostics(walker.process_files(files))
    finally:
        walker.destroy()

    out = _open_output(args.output)
    try:
        _emit_diagnostics(diagnostics, args.format, out)
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_VIOLATIONS if diagnostics else EXIT_OK


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse a grammar file and dump its syntax tree."""
    src_path = Path(args.source_file)
    try:
        source = src_path.read_text(encoding="utf-8-sig")
        contents = parse_grammar(source, str(src_path))
    except OSError as exc:
        _log.error("cannot read %s: %s", src_path, exc)
        return EXIT_INFRA
    except GrammarConventionError as exc:
        _log.error("parse error: %s", exc.format())
        return EXIT_VIOLATIONS

    out = _open_output(args.output)
    try:
        if args.format == "sexp":
            out.write(contents.root.to_sexp() + "\n")
        else:
            out.write(contents.root.pretty() + "\n")
    finally:
        if out is not sys.stdout:
            out.close()
    return EXIT_OK


def cmd_kinds(args: argparse.Namespace) -> int:
    """List the node kinds known to the front end."""
    for name in DEFAULT_REGISTRY.names():
        sys.stdout.write(f"{DEFAULT_REGISTRY.kind_id(name):4d}  {name}\n")
    return EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grammar-conventions",
        description="Convention checker for ANTLR v3 grammar files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              grammar-conventions check src/grammar --config conventions.json
              grammar-conventions check TSPHP.g --header-file header.txt
              grammar-conventions parse TSPHP.g --format sexp
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

    # --- check -------------------------------------------------------------
    p_check = subparsers.add_parser(
        "check",
        help="Check grammar files against the conventions.",
    )
    p_check.add_argument(
        "paths",
        nargs="+",
        metavar="PATH",
        help="Grammar files or directories to search.",
    )
    p_check.add_argument(
        "-c", "--config",
        default=None,
        metavar="FILE",
        help="JSON check configuration (default: all built-in checks).",
    )
    p_check.add_argument(
        "--header-file",
        default=None,
        metavar="FILE",
        help="Enable HeaderCheck with this license notice.",
    )
    p_check.add_argument(
        "--extension",
        default="g",
        help="Extension of grammar files searched in directories (default: g).",
    )
    p_check.add_argument(
        "-f", "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text).",
    )
    p_check.add_argument(
        "-o", "--output",
        default=None,
        metavar="FILE",
        help='Output file ("-" or omit for stdout).',
    )
    p_check.set_defaults(func=cmd_check)

    # --- parse -------------------------------------------------------------
    p_parse = subparsers.add_parser(
        "parse",
        help="Parse a grammar file and dump its syntax tree.",
    )
    p_parse.add_argument(
        "source_file",
        metavar="SOURCE",
        help="ANTLR v3 grammar file.",
    )
    p_parse.add_argument(
        "-f", "--format",
        choices=["tree", "sexp"],
        default="tree",
        help="Tree output format (default: tree).",
    )
    p_parse.add_argument(
        "-o", "--output",
        default=None,
        metavar="FILE",
        help='Output file ("-" or omit for stdout).',
    )
    p_parse.set_defaults(func=cmd_parse)

    # --- kinds -------------------------------------------------------------
    p_kinds = subparsers.add_parser(
        "kinds",
        help="List the node kinds checks can subscribe to.",
    )
    p_kinds.set_defaults(func=cmd_kinds)

    return parser


# ===========================================================================
# Main entry point
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI; returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
