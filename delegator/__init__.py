"""Delegate synthesis: closure-backed structs from a nested ``Interface``."""

from .expander import expand  # noqa: F401
from .api import (  # noqa: F401
    parse_declarations,
    expand_declaration,
    expand_source,
    dump_expansion,
    dump_members,
    expansion_stats,
    apply_fix_its,
)
