"""Expansion configuration (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass

from . import constants


@dataclass(frozen=True)
class ExpansionConfig:
    """Groups rendering and naming options for one expansion run."""

    macro_name: str = constants.MACRO_NAME
    indent: str = constants.DEFAULT_INDENT
    inline_hints: bool = True


DEFAULT_CONFIG = ExpansionConfig()
