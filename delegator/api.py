"""Composable API functions for the delegate expansion pipeline.

Each function corresponds to a CLI workflow but is callable programmatically
without argparse.
"""

from __future__ import annotations

import logging

from .config import DEFAULT_CONFIG, ExpansionConfig
from .decl_stats import count_declaration_kinds
from .diagnostics import CollectingSink, Diagnostic, apply_edits
from .expander import expand
from .expansion_types import Expansion, ExpansionResult
from .frontend import SourceDeclaration, SwiftFrontend, parse_swift
from .render import render_members
from .syntax import Declaration, NominalDecl

logger = logging.getLogger(__name__)

_WHITESPACE = b" \t\r\n"


def parse_declarations(source: str) -> list[NominalDecl]:
    """Parse Swift *source* and lower its top-level nominal declarations."""
    tree = parse_swift(source)
    return SwiftFrontend().lower(tree, source.encode("utf-8"))


def expand_declaration(
    declaration: Declaration, config: ExpansionConfig = DEFAULT_CONFIG
) -> tuple[list[Declaration], list[Diagnostic]]:
    """Expand one declaration, collecting its diagnostics.

    Returns:
        ``(members, diagnostics)``; members is empty whenever diagnostics
        is not.
    """
    sink = CollectingSink()
    members = expand(declaration, sink, config)
    return members, sink.diagnostics


def _splice(
    found: SourceDeclaration,
    source: bytes,
    members: list[Declaration],
    config: ExpansionConfig,
) -> bytes:
    """Rewrite one declaration: drop the attribute, append *members*."""
    resume = found.attribute_end
    while resume < len(source) and source[resume] in _WHITESPACE:
        resume += 1
    head = (
        source[found.start_byte : found.attribute_start]
        + source[resume : found.body_close_byte]
    ).decode("utf-8").rstrip()
    member_indent = found.indent + config.indent
    rendered = "\n".join(
        f"{member_indent}{line}" if line else line
        for line in render_members(members, config).split("\n")
    )
    tail = source[found.body_close_byte : found.end_byte].decode("utf-8")
    return f"{head}\n\n{rendered}\n{found.indent}{tail}".encode("utf-8")


def expand_source(source: str, config: ExpansionConfig = DEFAULT_CONFIG) -> ExpansionResult:
    """Expand every declaration in *source* attributed with the macro name.

    Declarations that fail validation are left untouched; their diagnostics
    are reported on the result.

    Args:
        source: Swift source text.
        config: Naming and rendering options.

    Returns:
        An ExpansionResult with the rewritten source and one Expansion per
        attributed declaration.
    """
    logger.info("Expanding source (%d bytes)", len(source))
    source_bytes = source.encode("utf-8")
    tree = parse_swift(source)
    found = SwiftFrontend().collect_attributed(tree, source_bytes, config.macro_name)

    expansions: list[Expansion] = []
    pieces: list[bytes] = []
    cursor = 0
    for item in found:
        members, diagnostics = expand_declaration(item.declaration, config)
        expansions.append(
            Expansion(
                declaration=item.declaration,
                members=members,
                diagnostics=diagnostics,
            )
        )
        if diagnostics or item.body_close_byte < 0:
            continue
        pieces.append(source_bytes[cursor : item.start_byte])
        pieces.append(_splice(item, source_bytes, members, config))
        cursor = item.end_byte
    pieces.append(source_bytes[cursor:])

    return ExpansionResult(
        source=source,
        expanded_source=b"".join(pieces).decode("utf-8"),
        expansions=expansions,
    )


def dump_expansion(source: str, config: ExpansionConfig = DEFAULT_CONFIG) -> str:
    """Expand *source* and return the rewritten text."""
    return expand_source(source, config).expanded_source


def dump_members(source: str, config: ExpansionConfig = DEFAULT_CONFIG) -> str:
    """Expand *source* and return only the generated members, per declaration."""
    result = expand_source(source, config)
    return "\n\n".join(
        render_members(expansion.members, config)
        for expansion in result.expansions
        if expansion.ok
    )


def expansion_stats(
    source: str, config: ExpansionConfig = DEFAULT_CONFIG
) -> dict[str, int]:
    """Expand *source* and count the generated declaration kinds.

    Returns:
        A dict mapping declaration kind tags to their occurrence counts,
        summed over every successful expansion.
    """
    result = expand_source(source, config)
    totals: dict[str, int] = {}
    for expansion in result.expansions:
        for kind, count in count_declaration_kinds(expansion.members).items():
            totals[kind] = totals.get(kind, 0) + count
    return totals


def apply_fix_its(source: str, config: ExpansionConfig = DEFAULT_CONFIG) -> str:
    """Expand *source* and apply the first fix-it of every diagnostic.

    Returns:
        *source* with the suggested edits applied; unchanged when no
        diagnostic offers a fix-it.
    """
    result = expand_source(source, config)
    edits = [
        edit
        for diagnostic in result.diagnostics
        if diagnostic.fix_its
        for edit in diagnostic.fix_its[0].edits
    ]
    logger.info("Applying %d fix-it edit(s)", len(edits))
    return apply_edits(source, edits)
