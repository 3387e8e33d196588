"""Shared builders for the delegate synthesis test suite."""

from __future__ import annotations

import pytest

from delegator.syntax import (
    EffectKind,
    FunctionDecl,
    FunctionParameter,
    NominalDecl,
    ident,
    type_from_text,
)

SAMPLE_SOURCE = """\
@AltDependencyClient
struct Foo {
  protocol Interface {
    func foo(integer: Int) -> String
    func bar(from string: String) -> Int
    func baz() async throws
  }
}
"""


def param(first: str, second: str | None = None, type_text: str = "Int") -> FunctionParameter:
    """Build ``first second: type_text``."""
    return FunctionParameter(
        first_name=ident(first),
        second_name=ident(second) if second is not None else None,
        type=type_from_text(type_text),
    )


def method(
    name: str,
    *params: FunctionParameter,
    returns: str | None = None,
    effect: EffectKind = EffectKind.NONE,
    attributes: tuple[str, ...] = (),
) -> FunctionDecl:
    return FunctionDecl(
        attributes=attributes,
        name=ident(name),
        parameters=params,
        effect=effect,
        return_type=type_from_text(returns) if returns is not None else None,
    )


def interface(*members) -> NominalDecl:
    return NominalDecl(kind="protocol", name=ident("Interface"), members=members)


def container(
    *members,
    kind: str = "struct",
    name: str = "Foo",
    inherited: tuple[str, ...] = (),
) -> NominalDecl:
    return NominalDecl(kind=kind, name=ident(name), inherited=inherited, members=members)


def sample_methods() -> tuple[FunctionDecl, ...]:
    """``foo(integer:)``, ``bar(from:)``, ``baz()``, the canonical example."""
    return (
        method("foo", param("integer"), returns="String"),
        method("bar", param("from", "string", "String"), returns="Int"),
        method("baz", effect=EffectKind.ASYNC_THROWS),
    )


def sample_container(inherited: tuple[str, ...] = ()) -> NominalDecl:
    return container(interface(*sample_methods()), inherited=inherited)


@pytest.fixture
def foo_container() -> NominalDecl:
    return sample_container()


@pytest.fixture
def sendable_container() -> NominalDecl:
    return sample_container(inherited=("Sendable",))
