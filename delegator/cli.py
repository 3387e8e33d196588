"""Command-line entry point: expand attributed declarations in a Swift file."""

from __future__ import annotations

import argparse
import logging
import sys

from .api import apply_fix_its, expand_source
from .config import ExpansionConfig
from .decl_stats import count_declaration_kinds
from .diagnostics import Diagnostic
from . import constants

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delegator",
        description="Synthesize delegate members for structs attributed "
        f"@{constants.MACRO_NAME}",
    )
    parser.add_argument("file", nargs="?", help="Swift source file (default: stdin)")
    parser.add_argument("--output", "-o", default=None, help="Write expanded source here")
    parser.add_argument(
        "--macro-name",
        default=constants.MACRO_NAME,
        help=f"Attribute that marks declarations (default: {constants.MACRO_NAME})",
    )
    parser.add_argument(
        "--no-inline-hints",
        action="store_true",
        help="Omit @inlinable/@inline(__always) on forwarding methods",
    )
    parser.add_argument(
        "--apply-fix-its",
        action="store_true",
        help="Print the source with suggested fix-its applied instead of expanding",
    )
    parser.add_argument(
        "--stats", action="store_true", help="Print generated declaration counts"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def _format_diagnostic(path: str, diagnostic: Diagnostic) -> str:
    lines = [f"{path}:{diagnostic}"]
    for fix_it in diagnostic.fix_its:
        lines.append(f"  fix-it: {fix_it.message}")
    return "\n".join(lines)


def _write(path: str | None, text: str) -> None:
    if path:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        logger.info("Wrote %s", path)
    else:
        sys.stdout.write(text)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    if args.file:
        with open(args.file, encoding="utf-8") as f:
            source = f.read()
    else:
        source = sys.stdin.read()

    config = ExpansionConfig(
        macro_name=args.macro_name,
        inline_hints=not args.no_inline_hints,
    )
    if args.apply_fix_its:
        _write(args.output, apply_fix_its(source, config))
        return 0

    result = expand_source(source, config)

    for diagnostic in result.diagnostics:
        print(_format_diagnostic(args.file or "<stdin>", diagnostic), file=sys.stderr)

    _write(args.output, result.expanded_source)

    if args.stats:
        for expansion in result.expansions:
            counts = count_declaration_kinds(expansion.members)
            summary = ", ".join(f"{k}={v}" for k, v in sorted(counts.items()))
            print(f"{expansion.declaration.name}: {summary or 'no members'}", file=sys.stderr)

    return 0 if result.ok else 1


if __name__ == "__main__":
    sys.exit(main())
