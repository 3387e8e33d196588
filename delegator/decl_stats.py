"""Pure functions for computing statistics over generated declarations."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from delegator.syntax import Declaration


def count_declaration_kinds(declarations: Sequence[Declaration]) -> dict[str, int]:
    """Return a frequency map of declaration kinds in *declarations*.

    Args:
        declarations: Generated (or parsed) declarations.

    Returns:
        A dict mapping kind tags (``"function"``, ``"struct"``, ...) to their
        occurrence counts. Empty dict for an empty input list.
    """
    return dict(Counter(decl.kind for decl in declarations))
