"""Expansion pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field

from .diagnostics import Diagnostic
from .syntax import Declaration


@dataclass
class Expansion:
    """One attributed declaration and what expanding it produced."""

    declaration: Declaration
    members: list[Declaration] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.diagnostics


@dataclass
class ExpansionResult:
    """Result of expanding every attributed declaration in a source text."""

    source: str
    expanded_source: str
    expansions: list[Expansion] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [d for expansion in self.expansions for d in expansion.diagnostics]

    @property
    def ok(self) -> bool:
        return not self.diagnostics
