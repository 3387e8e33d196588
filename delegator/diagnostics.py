"""Diagnostics Emitter: structured errors with optional fix-its."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from .config import DEFAULT_CONFIG, ExpansionConfig
from .syntax import NO_SOURCE_LOCATION, Declaration, NominalDecl, SourceLocation
from . import constants

logger = logging.getLogger(__name__)


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


class DiagnosticKind(str, Enum):
    NOT_AN_AGGREGATE = "not_an_aggregate"
    MISSING_INTERFACE = "missing_interface"


class SourceEdit(BaseModel):
    """Replace the text spanned by ``location`` with ``replacement``."""

    model_config = ConfigDict(frozen=True)

    location: SourceLocation
    replacement: str


class FixIt(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    edits: tuple[SourceEdit, ...] = ()


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind
    severity: Severity = Severity.ERROR
    message: str
    anchor: str = ""
    location: SourceLocation = NO_SOURCE_LOCATION
    fix_its: tuple[FixIt, ...] = ()

    def __str__(self) -> str:
        return f"{self.location}: {self.severity.value}: {self.message}"


class DiagnosticSink(ABC):
    """Receives diagnostics produced by an expansion."""

    @abstractmethod
    def report(self, diagnostic: Diagnostic) -> None: ...


class CollectingSink(DiagnosticSink):
    """Keeps every reported diagnostic in order."""

    def __init__(self):
        self.diagnostics: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        self.diagnostics.append(diagnostic)


class LoggingSink(DiagnosticSink):
    """Writes each diagnostic to the module logger at its severity."""

    _LEVELS: dict[Severity, int] = {
        Severity.ERROR: logging.ERROR,
        Severity.WARNING: logging.WARNING,
        Severity.NOTE: logging.INFO,
    }

    def report(self, diagnostic: Diagnostic) -> None:
        logger.log(self._LEVELS[diagnostic.severity], "%s", diagnostic)


def _anchor_name(declaration: Declaration) -> str:
    name = getattr(declaration, "name", None)
    return f"{declaration.kind} {name}" if name is not None else declaration.kind


def not_an_aggregate(
    declaration: Declaration, config: ExpansionConfig = DEFAULT_CONFIG
) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.NOT_AN_AGGREGATE,
        message=(
            f"'@{config.macro_name}' can only be applied to "
            f"{constants.AGGREGATE_KIND}s"
        ),
        anchor=_anchor_name(declaration),
        location=declaration.location,
    )


def interface_stub(config: ExpansionConfig = DEFAULT_CONFIG) -> str:
    """Source text inserted by the missing-``Interface`` fix-it."""
    return f"\n{config.indent}{constants.PROTOCOL_KIND} {constants.INTERFACE_NAME} {{ }}\n"


def missing_interface(
    container: NominalDecl, config: ExpansionConfig = DEFAULT_CONFIG
) -> Diagnostic:
    """Anchored on the container; the fix-it inserts an empty ``Interface``
    just before the closing brace, leaving the existing text untouched."""
    fix_it = FixIt(
        message=f"Insert 'protocol {constants.INTERFACE_NAME}'",
        edits=(SourceEdit(location=container.body_end, replacement=interface_stub(config)),),
    )
    return Diagnostic(
        kind=DiagnosticKind.MISSING_INTERFACE,
        message=(
            f"'@{config.macro_name}' requires a nested protocol named "
            f"'{constants.INTERFACE_NAME}'"
        ),
        anchor=_anchor_name(container),
        location=container.location,
        fix_its=(fix_it,),
    )


_BUILDERS = {
    DiagnosticKind.NOT_AN_AGGREGATE: not_an_aggregate,
    DiagnosticKind.MISSING_INTERFACE: missing_interface,
}


def build_diagnostic(
    kind: DiagnosticKind,
    declaration: Declaration,
    config: ExpansionConfig = DEFAULT_CONFIG,
) -> Diagnostic:
    return _BUILDERS[kind](declaration, config)


def emit(
    kind: DiagnosticKind,
    declaration: Declaration,
    sink: DiagnosticSink,
    config: ExpansionConfig = DEFAULT_CONFIG,
) -> Diagnostic:
    """Build the diagnostic for a failure and hand it to *sink*."""
    diagnostic = build_diagnostic(kind, declaration, config)
    logger.info("Reporting %s on %s", kind.value, diagnostic.anchor)
    sink.report(diagnostic)
    return diagnostic


def _byte_offset(lines: list[bytes], line: int, col: int) -> int:
    return sum(len(text) + 1 for text in lines[: line - 1]) + col


def apply_edits(source: str, edits: Sequence[SourceEdit]) -> str:
    """Apply *edits* to *source*.

    Locations use 1-based lines and byte columns, as produced by the front
    end. Edits without a known location are skipped.

    Args:
        source: The text the edit locations refer to.
        edits: Non-overlapping edits, in any order.

    Returns:
        The edited text.
    """
    data = source.encode("utf-8")
    lines = data.split(b"\n")
    spans = []
    for edit in edits:
        if edit.location.is_unknown():
            logger.warning("Skipping edit without a source location")
            continue
        loc = edit.location
        spans.append(
            (
                _byte_offset(lines, loc.start_line, loc.start_col),
                _byte_offset(lines, loc.end_line, loc.end_col),
                edit.replacement.encode("utf-8"),
            )
        )
    for start, end, replacement in sorted(spans, reverse=True):
        data = data[:start] + replacement + data[end:]
    return data.decode("utf-8")
