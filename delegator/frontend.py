"""SwiftFrontend — tree-sitter Swift CST → declaration model.

Only the shapes the expansion reads are modelled structurally: nominal
declarations, nested protocols and their function requirements. Every other
member is kept as a ``RawDecl`` holding its source text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable

import tree_sitter_language_pack

from .syntax import (
    NO_SOURCE_LOCATION,
    EffectKind,
    FunctionDecl,
    FunctionParameter,
    NominalDecl,
    RawDecl,
    SourceLocation,
    attribute_name,
    ident,
    type_from_text,
)
from . import constants

logger = logging.getLogger(__name__)

_ASYNC_PATTERN = re.compile(rf"\b{constants.ASYNC_MARKER}\b")
_THROWS_PATTERN = re.compile(
    rf"\b(?:{constants.THROWS_MARKER}|{constants.RETHROWS_MARKER})\b"
)
_THROWN_TYPE_PATTERN = re.compile(rf"\b{constants.THROWS_MARKER}\s*\(\s*([^)]*?)\s*\)")


def parse_swift(source: str):
    """Parse *source* with the tree-sitter Swift grammar."""
    parser = tree_sitter_language_pack.get_parser(constants.FRONTEND_LANGUAGE)
    return parser.parse(source.encode("utf-8"))


@dataclass(frozen=True)
class SourceDeclaration:
    """A declaration carrying the expansion attribute, with its byte spans."""

    declaration: NominalDecl | FunctionDecl
    start_byte: int
    end_byte: int
    indent: str = ""
    attribute_start: int = -1
    attribute_end: int = -1
    body_close_byte: int = -1


class SwiftFrontend:
    """Lowers a Swift tree-sitter CST into the declaration model."""

    NOMINAL_NODE_TYPES: frozenset[str] = frozenset(
        {"class_declaration", "protocol_declaration"}
    )
    FUNCTION_NODE_TYPES: frozenset[str] = frozenset(
        {"function_declaration", "protocol_function_declaration"}
    )
    BODY_NODE_TYPES: frozenset[str] = frozenset(
        {"class_body", "enum_class_body", "protocol_body"}
    )
    DECLARATION_KINDS: tuple[str, ...] = (
        "struct",
        "class",
        "enum",
        "actor",
        "extension",
        "protocol",
    )
    NAME_NODE_TYPES: frozenset[str] = frozenset(
        {"type_identifier", "simple_identifier", "user_type"}
    )
    COMMENT_TYPES: frozenset[str] = frozenset({"comment", "multiline_comment"})

    MODIFIERS_NODE_TYPE: str = "modifiers"
    ATTRIBUTE_NODE_TYPE: str = "attribute"
    INHERITANCE_NODE_TYPE: str = "inheritance_specifier"
    PARAMETER_NODE_TYPE: str = "parameter"
    GENERIC_PARAMETERS_NODE_TYPE: str = "type_parameters"
    GENERIC_CONSTRAINTS_NODE_TYPE: str = "type_constraints"
    FUNCTION_BODY_NODE_TYPE: str = "function_body"

    NAME_FIELD: str = "name"
    KIND_FIELD: str = "declaration_kind"
    BODY_FIELD: str = "body"
    RETURN_TYPE_FIELD: str = "return_type"

    def __init__(self):
        self._source: bytes = b""
        self._MEMBER_DISPATCH: dict[str, dict[str, Callable]] = {
            "struct": {"protocol_declaration": self._lower_nominal},
            "protocol": {"protocol_function_declaration": self._lower_function},
        }

    # ── helpers ──────────────────────────────────────────────────

    def _node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _source_loc(self, node) -> SourceLocation:
        s, e = node.start_point, node.end_point
        return SourceLocation(
            start_line=s[0] + 1,
            start_col=s[1],
            end_line=e[0] + 1,
            end_col=e[1],
        )

    def _line_indent(self, node) -> str:
        line_start = self._source.rfind(b"\n", 0, node.start_byte) + 1
        prefix = self._source[line_start : node.start_byte].decode("utf-8")
        return prefix if not prefix.strip() else ""

    def _dedented_text(self, node) -> str:
        """Node text with the node's own indentation removed from later lines."""
        indent = self._line_indent(node)
        lines = self._node_text(node).split("\n")
        return "\n".join(
            [lines[0]]
            + [line[len(indent) :] if line.startswith(indent) else line for line in lines[1:]]
        )

    def _modifiers(self, node) -> tuple[tuple[str, ...], tuple[str, ...]]:
        """Split the node's modifier list into (attributes, modifiers)."""
        attributes: list[str] = []
        modifiers: list[str] = []
        for child in node.children:
            if child.type == self.ATTRIBUTE_NODE_TYPE:
                attributes.append(self._node_text(child))
            if child.type != self.MODIFIERS_NODE_TYPE:
                continue
            for mod in child.children:
                if mod.type == self.ATTRIBUTE_NODE_TYPE:
                    attributes.append(self._node_text(mod))
                elif mod.is_named:
                    modifiers.append(self._node_text(mod))
        return tuple(attributes), tuple(modifiers)

    def _attribute_nodes(self, node) -> list:
        direct = [c for c in node.children if c.type == self.ATTRIBUTE_NODE_TYPE]
        nested = [
            mod
            for child in node.children
            if child.type == self.MODIFIERS_NODE_TYPE
            for mod in child.children
            if mod.type == self.ATTRIBUTE_NODE_TYPE
        ]
        return direct + nested

    def _find_attribute(self, node, attribute: str):
        return next(
            (
                attr
                for attr in self._attribute_nodes(node)
                if attribute_name(self._node_text(attr)) == attribute
            ),
            None,
        )

    def _declaration_kind(self, node) -> str:
        kind_node = node.child_by_field_name(self.KIND_FIELD)
        if kind_node is not None:
            return self._node_text(kind_node)
        keyword = next(
            (c.type for c in node.children if c.type in self.DECLARATION_KINDS), None
        )
        if keyword is not None:
            return keyword
        return "protocol" if node.type == "protocol_declaration" else "class"

    def _name_text(self, node) -> str:
        name_node = node.child_by_field_name(self.NAME_FIELD)
        if name_node is None:
            name_node = next(
                (c for c in node.children if c.type in self.NAME_NODE_TYPES), None
            )
        return self._node_text(name_node) if name_node is not None else "__unknown"

    def _body(self, node):
        body = node.child_by_field_name(self.BODY_FIELD)
        if body is not None and body.type in self.BODY_NODE_TYPES:
            return body
        return next((c for c in node.children if c.type in self.BODY_NODE_TYPES), None)

    # ── entry points ─────────────────────────────────────────────

    def lower(self, tree, source: bytes) -> list[NominalDecl]:
        """Lower every top-level nominal declaration."""
        self._source = source
        return [
            self._lower_nominal(child)
            for child in tree.root_node.named_children
            if child.type in self.NOMINAL_NODE_TYPES
        ]

    def collect_attributed(
        self, tree, source: bytes, attribute: str = constants.MACRO_NAME
    ) -> list[SourceDeclaration]:
        """Find the outermost declarations carrying ``@attribute``."""
        self._source = source
        found: list[SourceDeclaration] = []
        self._collect(tree.root_node, attribute, found)
        logger.info("Found %d declaration(s) attributed @%s", len(found), attribute)
        return found

    def _collect(self, node, attribute: str, found: list[SourceDeclaration]):
        for child in node.named_children:
            if child.type in self.FUNCTION_NODE_TYPES:
                attr = self._find_attribute(child, attribute)
                if attr is not None:
                    found.append(self._source_declaration(child, attr, None))
                continue
            if child.type not in self.NOMINAL_NODE_TYPES:
                continue
            attr = self._find_attribute(child, attribute)
            body = self._body(child)
            if attr is not None:
                found.append(self._source_declaration(child, attr, body))
            elif body is not None:
                self._collect(body, attribute, found)

    def _source_declaration(self, node, attr, body) -> SourceDeclaration:
        if node.type in self.FUNCTION_NODE_TYPES:
            declaration = self._lower_function(node)
        else:
            declaration = self._lower_nominal(node)
        return SourceDeclaration(
            declaration=declaration,
            start_byte=node.start_byte,
            end_byte=node.end_byte,
            indent=self._line_indent(node),
            attribute_start=attr.start_byte,
            attribute_end=attr.end_byte,
            body_close_byte=body.end_byte - 1 if body is not None else -1,
        )

    # ── declarations ─────────────────────────────────────────────

    def _lower_nominal(self, node) -> NominalDecl:
        kind = self._declaration_kind(node)
        attributes, modifiers = self._modifiers(node)
        inherited = tuple(
            self._node_text(c)
            for c in node.children
            if c.type == self.INHERITANCE_NODE_TYPE
        )
        body = self._body(node)
        members = (
            tuple(
                self._lower_member(kind, child)
                for child in body.named_children
                if child.type not in self.COMMENT_TYPES
            )
            if body is not None
            else ()
        )
        return NominalDecl(
            kind=kind,
            attributes=attributes,
            modifiers=modifiers,
            name=ident(self._name_text(node)),
            inherited=inherited,
            members=members,
            location=self._source_loc(node),
            body_end=self._closing_brace_loc(body) if body is not None else NO_SOURCE_LOCATION,
        )

    def _closing_brace_loc(self, body) -> SourceLocation:
        """Zero-width position just before the body's closing brace."""
        line, col = body.end_point[0] + 1, body.end_point[1] - 1
        return SourceLocation(start_line=line, start_col=col, end_line=line, end_col=col)

    def _lower_member(self, container_kind: str, node):
        handler = self._MEMBER_DISPATCH.get(container_kind, {}).get(node.type)
        if handler is not None:
            return handler(node)
        return RawDecl(text=self._dedented_text(node), location=self._source_loc(node))

    def _lower_function(self, node) -> FunctionDecl:
        attributes, modifiers = self._modifiers(node)
        parameters = tuple(self._lower_parameter(c) for c in self._parameter_nodes(node))
        return_node = self._return_type_node(node)
        effect, thrown_type = self._effect_clause(node, return_node)
        return FunctionDecl(
            attributes=attributes,
            modifiers=modifiers,
            name=ident(self._name_text(node)),
            generic_parameters=self._child_text(node, self.GENERIC_PARAMETERS_NODE_TYPE),
            parameters=parameters,
            effect=effect,
            thrown_type=type_from_text(thrown_type) if thrown_type else None,
            return_type=(
                type_from_text(self._node_text(return_node))
                if return_node is not None
                else None
            ),
            generic_constraints=self._child_text(node, self.GENERIC_CONSTRAINTS_NODE_TYPE),
            location=self._source_loc(node),
        )

    def _child_text(self, node, node_type: str) -> str | None:
        child = next((c for c in node.children if c.type == node_type), None)
        return self._node_text(child) if child is not None else None

    def _parameter_nodes(self, node) -> list:
        """Parameters are direct children unless wrapped in a parameter list."""
        found = []
        for child in node.children:
            if child.type == self.PARAMETER_NODE_TYPE:
                found.append(child)
            elif child.type.endswith("parameters") and child.type != self.GENERIC_PARAMETERS_NODE_TYPE:
                found.extend(
                    c for c in child.children if c.type == self.PARAMETER_NODE_TYPE
                )
        return found

    def _lower_parameter(self, node) -> FunctionParameter:
        """Split ``[label] name: type`` on the first colon."""
        head, _, type_text = self._node_text(node).partition(":")
        names = head.split()
        return FunctionParameter(
            first_name=ident(names[0]),
            second_name=ident(names[1]) if len(names) > 1 else None,
            type=type_from_text(type_text),
        )

    def _return_type_node(self, node):
        return_node = node.child_by_field_name(self.RETURN_TYPE_FIELD)
        if return_node is not None:
            return return_node
        children = node.children
        arrow = next(
            (i for i, c in enumerate(children) if self._node_text(c) == "->"), None
        )
        if arrow is None:
            return None
        return next((c for c in children[arrow + 1 :] if c.is_named), None)

    def _effect_clause(self, node, return_node) -> tuple[EffectKind, str | None]:
        """Read ``async``, ``throws`` and a typed ``throws(E)`` from the text
        between the parameter clause and whatever follows the effects."""
        children = node.children
        close = next((c for c in children if c.type == ")"), None)
        if close is None:
            return EffectKind.NONE, None
        stops = {self.GENERIC_CONSTRAINTS_NODE_TYPE, self.FUNCTION_BODY_NODE_TYPE}
        limit = next(
            (
                c.start_byte
                for c in children
                if c.start_byte >= close.end_byte
                and (
                    c.type in stops
                    or c.type == "->"
                    or (return_node is not None and c.start_byte >= return_node.start_byte)
                )
            ),
            node.end_byte,
        )
        clause = self._source[close.end_byte : limit].decode("utf-8")
        thrown = _THROWN_TYPE_PATTERN.search(clause)
        effect = EffectKind.from_markers(
            _ASYNC_PATTERN.search(clause) is not None,
            _THROWS_PATTERN.search(clause) is not None,
        )
        return effect, thrown.group(1) if thrown else None
