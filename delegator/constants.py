"""Named constants: eliminates magic strings across the codebase."""

from __future__ import annotations

MACRO_NAME = "AltDependencyClient"

INTERFACE_NAME = "Interface"
IMPL_STRUCT_NAME = "Impl"
IMPL_MEMBER_NAME = "impl"

AGGREGATE_KIND = "struct"
PROTOCOL_KIND = "protocol"

VOID_TYPE = "Void"

CONCURRENCY_SAFE_PROTOCOL = "Sendable"
STANDARD_MODULE_PREFIX = "Swift."
CONCURRENCY_SAFE_ATTRIBUTE = "@Sendable"
ESCAPING_ATTRIBUTE = "@escaping"
AUTOCLOSURE_ATTRIBUTE = "@autoclosure"
INLINABLE_ATTRIBUTE = "@inlinable"
INLINE_ALWAYS_ATTRIBUTE = "@inline(__always)"

INOUT_SPECIFIER = "inout"
TYPE_SPECIFIERS: tuple[str, ...] = ("inout", "borrowing", "consuming", "__owned", "__shared")

PUBLIC_MODIFIER = "public"
VAR_BINDING = "var"
LET_BINDING = "let"

ASYNC_MARKER = "async"
THROWS_MARKER = "throws"
RETHROWS_MARKER = "rethrows"

WILDCARD = "_"
SYNTHETIC_PARAM_PREFIX = "p"

FRONTEND_LANGUAGE = "swift"
DEFAULT_INDENT = "  "

# Keywords that must be written with backticks to be used as identifiers.
RESERVED_WORDS: frozenset[str] = frozenset(
    {
        # declarations
        "associatedtype",
        "class",
        "deinit",
        "enum",
        "extension",
        "fileprivate",
        "func",
        "import",
        "init",
        "inout",
        "internal",
        "let",
        "open",
        "operator",
        "private",
        "precedencegroup",
        "protocol",
        "public",
        "rethrows",
        "static",
        "struct",
        "subscript",
        "typealias",
        "var",
        # statements
        "break",
        "case",
        "catch",
        "continue",
        "default",
        "defer",
        "do",
        "else",
        "fallthrough",
        "for",
        "guard",
        "if",
        "in",
        "repeat",
        "return",
        "throw",
        "switch",
        "where",
        "while",
        # expressions and types
        "Any",
        "as",
        "await",
        "false",
        "is",
        "nil",
        "self",
        "Self",
        "super",
        "throws",
        "true",
        "try",
    }
)

# Keywords that stay escaped even in argument-label position.
LABEL_RESERVED_WORDS: frozenset[str] = frozenset({"inout", "var", "let"})
