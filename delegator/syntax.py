"""Syntax model: tagged declaration, expression and type nodes.

Every node carries a ``kind`` tag; consumers dispatch on the tag rather than
on concrete classes. Type expressions are opaque: ``NamedType`` keeps the
source text verbatim and only the wrappers the synthesizers add (function
types, attributes, specifiers) are modelled structurally.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from . import constants


class SyntaxNode(BaseModel):
    model_config = ConfigDict(frozen=True)


class SourceLocation(SyntaxNode):
    """Structured source span from tree-sitter CST nodes."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def is_unknown(self) -> bool:
        return (
            self.start_line == 0
            and self.start_col == 0
            and self.end_line == 0
            and self.end_col == 0
        )

    def __str__(self) -> str:
        if self.is_unknown():
            return "<unknown>"
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


NO_SOURCE_LOCATION = SourceLocation(start_line=0, start_col=0, end_line=0, end_col=0)


class EffectKind(str, Enum):
    NONE = "none"
    ASYNC = "async"
    THROWS = "throws"
    ASYNC_THROWS = "async_throws"

    @classmethod
    def from_markers(cls, is_async: bool, throws: bool) -> EffectKind:
        if is_async and throws:
            return cls.ASYNC_THROWS
        if is_async:
            return cls.ASYNC
        if throws:
            return cls.THROWS
        return cls.NONE

    @property
    def is_async(self) -> bool:
        return self in (EffectKind.ASYNC, EffectKind.ASYNC_THROWS)

    @property
    def throws(self) -> bool:
        return self in (EffectKind.THROWS, EffectKind.ASYNC_THROWS)

    def markers(self) -> tuple[str, ...]:
        """Effect keywords in source order (``async`` before ``throws``)."""
        markers: list[str] = []
        if self.is_async:
            markers.append(constants.ASYNC_MARKER)
        if self.throws:
            markers.append(constants.THROWS_MARKER)
        return tuple(markers)


class Identifier(SyntaxNode):
    """An identifier; ``backticked`` records whether the source escaped it."""

    name: str
    backticked: bool = False

    @classmethod
    def parse(cls, text: str) -> Identifier:
        text = text.strip()
        if len(text) >= 2 and text.startswith("`") and text.endswith("`"):
            return cls(name=text[1:-1], backticked=True)
        return cls(name=text)

    @property
    def is_wildcard(self) -> bool:
        return self.name == constants.WILDCARD and not self.backticked

    @property
    def needs_escaping(self) -> bool:
        return self.backticked or self.name in constants.RESERVED_WORDS

    @property
    def escaped(self) -> str:
        return f"`{self.name}`" if self.needs_escaping else self.name

    @property
    def label(self) -> str:
        """Spelling in argument-label position, where most keywords are legal."""
        if self.name in constants.LABEL_RESERVED_WORDS:
            return f"`{self.name}`"
        return self.name

    @property
    def declared_label(self) -> str:
        """Spelling of an external parameter label, as written in the source."""
        if self.backticked:
            return f"`{self.name}`"
        return self.label

    def __str__(self) -> str:
        return self.escaped


# ── type expressions ─────────────────────────────────────────────


class NamedType(SyntaxNode):
    kind: Literal["named"] = "named"
    text: str


class TupleTypeElement(SyntaxNode):
    first_name: Identifier | None = None
    second_name: Identifier | None = None
    type: TypeExpr


class FunctionType(SyntaxNode):
    kind: Literal["function_type"] = "function_type"
    parameters: tuple[TupleTypeElement, ...] = ()
    effect: EffectKind = EffectKind.NONE
    thrown_type: TypeExpr | None = None
    return_type: TypeExpr


class AttributedType(SyntaxNode):
    kind: Literal["attributed"] = "attributed"
    specifier: str | None = None
    attributes: tuple[str, ...] = ()
    base: TypeExpr


TypeExpr = Annotated[
    Union[NamedType, FunctionType, AttributedType], Field(discriminator="kind")
]


# ── expressions ──────────────────────────────────────────────────


class IdentifierExpr(SyntaxNode):
    kind: Literal["identifier"] = "identifier"
    name: Identifier


class MemberAccessExpr(SyntaxNode):
    kind: Literal["member_access"] = "member_access"
    base: Expr
    member: Identifier


class LabeledArgument(SyntaxNode):
    label: Identifier | None = None
    value: Expr


class CallExpr(SyntaxNode):
    kind: Literal["call"] = "call"
    callee: Expr
    arguments: tuple[LabeledArgument, ...] = ()
    multiline: bool = False


class InOutExpr(SyntaxNode):
    kind: Literal["inout"] = "inout"
    operand: Expr


class AwaitExpr(SyntaxNode):
    kind: Literal["await"] = "await"
    operand: Expr


class TryExpr(SyntaxNode):
    kind: Literal["try"] = "try"
    operand: Expr


class AssignExpr(SyntaxNode):
    kind: Literal["assign"] = "assign"
    target: Expr
    value: Expr


Expr = Annotated[
    Union[
        IdentifierExpr,
        MemberAccessExpr,
        CallExpr,
        InOutExpr,
        AwaitExpr,
        TryExpr,
        AssignExpr,
    ],
    Field(discriminator="kind"),
]


# ── declarations ─────────────────────────────────────────────────


class FunctionParameter(SyntaxNode):
    """``first_name second_name: type``; ``second_name`` is optional."""

    first_name: Identifier
    second_name: Identifier | None = None
    type: TypeExpr


class FunctionDecl(SyntaxNode):
    """A function; ``generic_parameters`` and ``generic_constraints`` hold the
    ``<...>`` and ``where ...`` clauses as written."""

    kind: Literal["function"] = "function"
    attributes: tuple[str, ...] = ()
    modifiers: tuple[str, ...] = ()
    name: Identifier
    generic_parameters: str | None = None
    parameters: tuple[FunctionParameter, ...] = ()
    effect: EffectKind = EffectKind.NONE
    thrown_type: TypeExpr | None = None
    return_type: TypeExpr | None = None
    generic_constraints: str | None = None
    body: tuple[Expr, ...] | None = None
    location: SourceLocation = NO_SOURCE_LOCATION


class InitializerDecl(SyntaxNode):
    kind: Literal["initializer"] = "initializer"
    modifiers: tuple[str, ...] = ()
    parameters: tuple[FunctionParameter, ...] = ()
    body: tuple[Expr, ...] = ()
    location: SourceLocation = NO_SOURCE_LOCATION


class VariableDecl(SyntaxNode):
    kind: Literal["variable"] = "variable"
    attributes: tuple[str, ...] = ()
    modifiers: tuple[str, ...] = ()
    binding: str = constants.VAR_BINDING
    name: Identifier
    type: TypeExpr
    location: SourceLocation = NO_SOURCE_LOCATION


class NominalDecl(SyntaxNode):
    """A struct, class, enum, actor, extension or protocol declaration.

    ``body_end`` is the zero-width position of the closing brace of the
    member block, when the declaration came from source.
    """

    kind: Literal["struct", "class", "enum", "actor", "extension", "protocol"]
    attributes: tuple[str, ...] = ()
    modifiers: tuple[str, ...] = ()
    name: Identifier
    inherited: tuple[str, ...] = ()
    members: tuple[Declaration, ...] = ()
    location: SourceLocation = NO_SOURCE_LOCATION
    body_end: SourceLocation = NO_SOURCE_LOCATION

    @property
    def is_aggregate(self) -> bool:
        return self.kind == constants.AGGREGATE_KIND

    @property
    def is_concurrency_safe(self) -> bool:
        # ``@unchecked Sendable`` and ``Swift.Sendable`` also declare it.
        return any(
            spec.split()[-1].removeprefix(constants.STANDARD_MODULE_PREFIX)
            == constants.CONCURRENCY_SAFE_PROTOCOL
            for spec in self.inherited
            if spec.strip()
        )

    def function_members(self) -> list[FunctionDecl]:
        return [m for m in self.members if m.kind == "function"]

    def with_members(self, members: tuple[Declaration, ...]) -> NominalDecl:
        return self.model_copy(update={"members": members})

    def without_attribute(self, attribute: str) -> NominalDecl:
        kept = tuple(a for a in self.attributes if attribute_name(a) != attribute)
        return self.model_copy(update={"attributes": kept})


class RawDecl(SyntaxNode):
    """A member the engine does not interpret, kept as source text."""

    kind: Literal["raw"] = "raw"
    text: str
    location: SourceLocation = NO_SOURCE_LOCATION


Declaration = Annotated[
    Union[FunctionDecl, InitializerDecl, VariableDecl, NominalDecl, RawDecl],
    Field(discriminator="kind"),
]


for _model in (
    TupleTypeElement,
    FunctionType,
    AttributedType,
    MemberAccessExpr,
    LabeledArgument,
    CallExpr,
    InOutExpr,
    AwaitExpr,
    TryExpr,
    AssignExpr,
    FunctionParameter,
    FunctionDecl,
    InitializerDecl,
    VariableDecl,
    NominalDecl,
):
    _model.model_rebuild()


# ── builders ─────────────────────────────────────────────────────


def ident(text: str) -> Identifier:
    return Identifier.parse(text)


def named_type(text: str) -> NamedType:
    return NamedType(text=text.strip())


def void_type() -> NamedType:
    return NamedType(text=constants.VOID_TYPE)


def attribute_name(attribute: str) -> str:
    """``@inline(__always)`` → ``inline``."""
    return attribute.lstrip("@").split("(", 1)[0].strip()


def _split_attribute(text: str) -> tuple[str, str]:
    """Split a leading ``@name`` or ``@name(...)`` attribute off *text*."""
    end = 1
    while end < len(text) and (text[end].isalnum() or text[end] == "_"):
        end += 1
    if end < len(text) and text[end] == "(":
        depth = 0
        for i in range(end, len(text)):
            if text[i] == "(":
                depth += 1
            elif text[i] == ")":
                depth -= 1
                if depth == 0:
                    end = i + 1
                    break
    return text[:end], text[end:].lstrip()


def type_from_text(text: str) -> TypeExpr:
    """Build a type expression from raw source text.

    Leading attributes (``@autoclosure``, ``@escaping``, ...) and ownership
    specifiers (``inout``, ...) are peeled off; whatever remains is kept
    verbatim as a ``NamedType``.
    """
    rest = text.strip()
    specifier: str | None = None
    attributes: list[str] = []
    while rest:
        if rest.startswith("@"):
            attribute, rest = _split_attribute(rest)
            attributes.append(attribute)
            continue
        parts = rest.split(None, 1)
        if specifier is None and len(parts) == 2 and parts[0] in constants.TYPE_SPECIFIERS:
            specifier, rest = parts[0], parts[1].lstrip()
            continue
        break
    base = NamedType(text=rest)
    if specifier is None and not attributes:
        return base
    return AttributedType(specifier=specifier, attributes=tuple(attributes), base=base)


def with_attributes(type_expr: TypeExpr, *attributes: str) -> AttributedType:
    """Prefix *attributes* to *type_expr*, merging into an existing wrapper."""
    if isinstance(type_expr, AttributedType):
        return type_expr.model_copy(
            update={"attributes": tuple(attributes) + type_expr.attributes}
        )
    return AttributedType(attributes=tuple(attributes), base=type_expr)


def ref(name: Identifier | str) -> IdentifierExpr:
    if isinstance(name, str):
        name = ident(name)
    return IdentifierExpr(name=name)


def member_access(base: Expr, member: Identifier | str) -> MemberAccessExpr:
    if isinstance(member, str):
        member = ident(member)
    return MemberAccessExpr(base=base, member=member)


def call(
    callee: Expr,
    arguments: tuple[LabeledArgument, ...] | list[LabeledArgument] = (),
    *,
    multiline: bool = False,
) -> CallExpr:
    return CallExpr(callee=callee, arguments=tuple(arguments), multiline=multiline)
