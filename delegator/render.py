"""Canonical textual rendering of the syntax model."""

from __future__ import annotations

from typing import Callable, Sequence

from .config import DEFAULT_CONFIG, ExpansionConfig
from .syntax import (
    AssignExpr,
    AttributedType,
    AwaitExpr,
    CallExpr,
    Declaration,
    Expr,
    FunctionDecl,
    FunctionParameter,
    FunctionType,
    IdentifierExpr,
    InitializerDecl,
    InOutExpr,
    LabeledArgument,
    MemberAccessExpr,
    NamedType,
    NominalDecl,
    RawDecl,
    TryExpr,
    TupleTypeElement,
    TypeExpr,
    VariableDecl,
)


class Renderer:
    """Renders types, expressions and declarations as Swift source text.

    Dispatch is keyed on each node's ``kind`` tag. Nested blocks are indented
    with ``config.indent``; separate members that span several lines are set
    apart by a blank line.
    """

    def __init__(self, config: ExpansionConfig = DEFAULT_CONFIG):
        self._unit = config.indent
        self._TYPE_DISPATCH: dict[str, Callable] = {
            "named": self._render_named_type,
            "function_type": self._render_function_type,
            "attributed": self._render_attributed_type,
        }
        self._EXPR_DISPATCH: dict[str, Callable] = {
            "identifier": self._render_identifier,
            "member_access": self._render_member_access,
            "call": self._render_call,
            "inout": self._render_inout,
            "await": self._render_await,
            "try": self._render_try,
            "assign": self._render_assign,
        }
        self._DECL_DISPATCH: dict[str, Callable] = {
            "function": self._render_function,
            "initializer": self._render_initializer,
            "variable": self._render_variable,
            "struct": self._render_nominal,
            "class": self._render_nominal,
            "enum": self._render_nominal,
            "actor": self._render_nominal,
            "extension": self._render_nominal,
            "protocol": self._render_nominal,
            "raw": self._render_raw,
        }

    # ── dispatchers ──────────────────────────────────────────────

    def render_type(self, node: TypeExpr) -> str:
        return self._dispatch(self._TYPE_DISPATCH, node, "type")

    def render_expr(self, node: Expr) -> str:
        return self._dispatch(self._EXPR_DISPATCH, node, "expression")

    def render_decl(self, node: Declaration) -> str:
        return self._dispatch(self._DECL_DISPATCH, node, "declaration")

    def render_members(self, members: Sequence[Declaration]) -> str:
        rendered = [self.render_decl(member) for member in members]
        if not rendered:
            return ""
        parts = [rendered[0]]
        for previous, current in zip(rendered, rendered[1:]):
            separator = "\n\n" if "\n" in previous or "\n" in current else "\n"
            parts.append(separator)
            parts.append(current)
        return "".join(parts)

    def _dispatch(self, table: dict[str, Callable], node, category: str) -> str:
        handler = table.get(node.kind)
        if handler is None:
            raise ValueError(f"Cannot render {category} of kind '{node.kind}'")
        return handler(node)

    # ── helpers ──────────────────────────────────────────────────

    def _indent(self, text: str) -> str:
        return "\n".join(
            f"{self._unit}{line}" if line else line for line in text.split("\n")
        )

    def _block(self, header: str, lines: Sequence[str]) -> str:
        if not lines:
            return f"{header} {{}}"
        body = "\n".join(self._indent(line) for line in lines)
        return f"{header} {{\n{body}\n}}"

    def _effects(self, node: FunctionDecl | FunctionType) -> str:
        markers = list(node.effect.markers())
        if node.thrown_type is not None and node.effect.throws:
            markers[-1] = f"{markers[-1]}({self.render_type(node.thrown_type)})"
        return f" {' '.join(markers)}" if markers else ""

    # ── types ────────────────────────────────────────────────────

    def _render_named_type(self, node: NamedType) -> str:
        return node.text

    def _render_tuple_element(self, element: TupleTypeElement) -> str:
        names = " ".join(
            name.escaped
            for name in (element.first_name, element.second_name)
            if name is not None
        )
        rendered_type = self.render_type(element.type)
        return f"{names}: {rendered_type}" if names else rendered_type

    def _render_function_type(self, node: FunctionType) -> str:
        params = ", ".join(self._render_tuple_element(e) for e in node.parameters)
        return f"({params}){self._effects(node)} -> {self.render_type(node.return_type)}"

    def _render_attributed_type(self, node: AttributedType) -> str:
        parts = list(node.attributes)
        if node.specifier:
            parts.append(node.specifier)
        parts.append(self.render_type(node.base))
        return " ".join(parts)

    # ── expressions ──────────────────────────────────────────────

    def _render_identifier(self, node: IdentifierExpr) -> str:
        return node.name.escaped

    def _render_member_access(self, node: MemberAccessExpr) -> str:
        return f"{self.render_expr(node.base)}.{node.member.escaped}"

    def _render_argument(self, argument: LabeledArgument) -> str:
        value = self.render_expr(argument.value)
        if argument.label is None:
            return value
        return f"{argument.label.label}: {value}"

    def _render_call(self, node: CallExpr) -> str:
        callee = self.render_expr(node.callee)
        arguments = [self._render_argument(a) for a in node.arguments]
        if node.multiline and arguments:
            body = ",\n".join(self._indent(a) for a in arguments)
            return f"{callee}(\n{body}\n)"
        return f"{callee}({', '.join(arguments)})"

    def _render_inout(self, node: InOutExpr) -> str:
        return f"&{self.render_expr(node.operand)}"

    def _render_await(self, node: AwaitExpr) -> str:
        return f"await {self.render_expr(node.operand)}"

    def _render_try(self, node: TryExpr) -> str:
        return f"try {self.render_expr(node.operand)}"

    def _render_assign(self, node: AssignExpr) -> str:
        return f"{self.render_expr(node.target)} = {self.render_expr(node.value)}"

    # ── declarations ─────────────────────────────────────────────

    def _render_parameter(self, param: FunctionParameter) -> str:
        names = param.first_name.declared_label
        if param.second_name is not None:
            names = f"{names} {param.second_name.escaped}"
        return f"{names}: {self.render_type(param.type)}"

    def _render_function(self, node: FunctionDecl) -> str:
        params = ", ".join(self._render_parameter(p) for p in node.parameters)
        generics = node.generic_parameters or ""
        header = " ".join([*node.modifiers, "func", f"{node.name.escaped}{generics}({params})"])
        header += self._effects(node)
        if node.return_type is not None:
            header += f" -> {self.render_type(node.return_type)}"
        if node.generic_constraints:
            header += f" {node.generic_constraints}"
        lines = list(node.attributes)
        if node.body is None:
            lines.append(header)
        else:
            lines.append(self._block(header, [self.render_expr(e) for e in node.body]))
        return "\n".join(lines)

    def _render_initializer(self, node: InitializerDecl) -> str:
        params = [self._render_parameter(p) for p in node.parameters]
        if params:
            param_list = "(\n" + ",\n".join(self._indent(p) for p in params) + "\n)"
        else:
            param_list = "()"
        header = " ".join([*node.modifiers, "init"]) + param_list
        return self._block(header, [self.render_expr(e) for e in node.body])

    def _render_variable(self, node: VariableDecl) -> str:
        binding = f"{node.name.escaped}: {self.render_type(node.type)}"
        line = " ".join([*node.modifiers, node.binding, binding])
        return "\n".join([*node.attributes, line])

    def _render_nominal(self, node: NominalDecl) -> str:
        header = " ".join([*node.modifiers, node.kind, node.name.escaped])
        if node.inherited:
            header += f": {', '.join(node.inherited)}"
        members = self.render_members(node.members)
        body = self._block(header, [members] if members else [])
        return "\n".join([*node.attributes, body])

    def _render_raw(self, node: RawDecl) -> str:
        return node.text


def render_type(node: TypeExpr, config: ExpansionConfig = DEFAULT_CONFIG) -> str:
    return Renderer(config).render_type(node)


def render_expr(node: Expr, config: ExpansionConfig = DEFAULT_CONFIG) -> str:
    return Renderer(config).render_expr(node)


def render_decl(node: Declaration, config: ExpansionConfig = DEFAULT_CONFIG) -> str:
    return Renderer(config).render_decl(node)


def render_members(
    members: Sequence[Declaration], config: ExpansionConfig = DEFAULT_CONFIG
) -> str:
    return Renderer(config).render_members(members)
