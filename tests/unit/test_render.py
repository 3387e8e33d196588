"""Tests for canonical Swift rendering of the syntax model."""

import pytest

from delegator.config import ExpansionConfig
from delegator.render import Renderer, render_decl, render_expr, render_members, render_type
from delegator.syntax import (
    AssignExpr,
    AwaitExpr,
    EffectKind,
    FunctionType,
    InitializerDecl,
    InOutExpr,
    LabeledArgument,
    NamedType,
    RawDecl,
    TryExpr,
    TupleTypeElement,
    VariableDecl,
    call,
    ident,
    member_access,
    ref,
    type_from_text,
    with_attributes,
)
from tests.unit.conftest import container, interface, method, param


class TestRenderType:
    def test_named(self):
        assert render_type(NamedType(text="[Int]")) == "[Int]"

    def test_function_type_with_unlabelled_parameter(self):
        node = FunctionType(
            parameters=(
                TupleTypeElement(
                    first_name=ident("_"),
                    second_name=ident("integer"),
                    type=NamedType(text="Int"),
                ),
            ),
            return_type=NamedType(text="String"),
        )
        assert render_type(node) == "(_ integer: Int) -> String"

    def test_function_type_effects(self):
        node = FunctionType(effect=EffectKind.ASYNC_THROWS, return_type=NamedType(text="Void"))
        assert render_type(node) == "() async throws -> Void"

    def test_typed_throws(self):
        node = FunctionType(
            effect=EffectKind.ASYNC_THROWS,
            thrown_type=NamedType(text="LoadError"),
            return_type=NamedType(text="Data"),
        )
        assert render_type(node) == "() async throws(LoadError) -> Data"

    def test_thrown_type_without_throws_effect_is_ignored(self):
        node = FunctionType(thrown_type=NamedType(text="E"), return_type=NamedType(text="Void"))
        assert render_type(node) == "() -> Void"

    def test_attributed_with_specifier(self):
        assert render_type(type_from_text("inout Int")) == "inout Int"

    def test_attributes_precede_base(self):
        node = with_attributes(
            FunctionType(return_type=NamedType(text="Void")), "@escaping", "@Sendable"
        )
        assert render_type(node) == "@escaping @Sendable () -> Void"


class TestRenderExpr:
    def test_member_call(self):
        expr = call(member_access(ref("impl"), "foo"), [LabeledArgument(value=ref("x"))])
        assert render_expr(expr) == "impl.foo(x)"

    def test_reserved_member_is_escaped(self):
        expr = call(member_access(ref("impl"), ident("`return`")))
        assert render_expr(expr) == "impl.`return`()"

    def test_inout_and_lazy_arguments(self):
        expr = call(
            ref("f"),
            [
                LabeledArgument(value=InOutExpr(operand=ref("a"))),
                LabeledArgument(value=call(ref("b"))),
            ],
        )
        assert render_expr(expr) == "f(&a, b())"

    def test_try_wraps_await(self):
        expr = TryExpr(operand=AwaitExpr(operand=call(ref("g"))))
        assert render_expr(expr) == "try await g()"

    def test_labelled_arguments_drop_ordinary_backticks(self):
        expr = call(
            ref("Impl"),
            [LabeledArgument(label=ident("`return`"), value=ref(ident("`return`")))],
        )
        assert render_expr(expr) == "Impl(return: `return`)"

    def test_multiline_call(self):
        expr = AssignExpr(
            target=ref("impl"),
            value=call(
                ref("Impl"),
                [
                    LabeledArgument(label=ident("a"), value=ref("a")),
                    LabeledArgument(label=ident("b"), value=ref("b")),
                ],
                multiline=True,
            ),
        )
        assert render_expr(expr) == "impl = Impl(\n  a: a,\n  b: b\n)"

    def test_multiline_call_without_arguments_stays_inline(self):
        assert render_expr(call(ref("Impl"), multiline=True)) == "Impl()"


class TestRenderDecl:
    def test_requirement_without_body(self):
        decl = method("bar", param("from", "string", "String"), returns="Int")
        assert render_decl(decl) == "func bar(from string: String) -> Int"

    def test_function_with_attributes_and_body(self):
        decl = method("baz", effect=EffectKind.ASYNC).model_copy(
            update={
                "attributes": ("@inlinable",),
                "modifiers": ("public",),
                "body": (AwaitExpr(operand=call(ref("run"))),),
            }
        )
        assert render_decl(decl) == (
            "@inlinable\npublic func baz() async {\n  await run()\n}"
        )

    def test_generic_clauses(self):
        decl = method("echo", param("_", "value", "T"), returns="T").model_copy(
            update={"generic_parameters": "<T>", "generic_constraints": "where T: Equatable"}
        )
        assert render_decl(decl) == "func echo<T>(_ value: T) -> T where T: Equatable"

    def test_variable(self):
        decl = VariableDecl(
            modifiers=("public",), name=ident("impl"), type=NamedType(text="Impl")
        )
        assert render_decl(decl) == "public var impl: Impl"

    def test_initializer_parameters_one_per_line(self):
        decl = InitializerDecl(
            modifiers=("public",),
            parameters=(param("a"), param("b", None, "String")),
        )
        assert render_decl(decl) == "public init(\n  a: Int,\n  b: String\n) {}"

    def test_initializer_without_parameters(self):
        decl = InitializerDecl(body=(AssignExpr(target=ref("x"), value=ref("y")),))
        assert render_decl(decl) == "init() {\n  x = y\n}"

    def test_empty_nominal(self):
        assert render_decl(interface()) == "protocol Interface {}"

    def test_nominal_with_inheritance_and_members(self):
        decl = container(
            RawDecl(text="let id: Int"), name="Impl", inherited=("Sendable",)
        )
        assert render_decl(decl) == "struct Impl: Sendable {\n  let id: Int\n}"

    def test_nested_nominal_indents_each_level(self):
        decl = container(interface(method("foo")))
        assert render_decl(decl) == (
            "struct Foo {\n  protocol Interface {\n    func foo()\n  }\n}"
        )

    def test_custom_indent(self):
        config = ExpansionConfig(indent="    ")
        decl = container(RawDecl(text="let id: Int"))
        assert render_decl(decl, config) == "struct Foo {\n    let id: Int\n}"

    def test_unknown_kind_raises(self):
        class Bogus:
            kind = "bogus"

        with pytest.raises(ValueError, match="bogus"):
            Renderer().render_decl(Bogus())


class TestRenderMembers:
    def test_empty(self):
        assert render_members([]) == ""

    def test_single_line_members_are_adjacent(self):
        members = [RawDecl(text="let a: Int"), RawDecl(text="let b: Int")]
        assert render_members(members) == "let a: Int\nlet b: Int"

    def test_multiline_members_are_separated_by_blank_line(self):
        members = [RawDecl(text="let a: Int"), interface(method("f"))]
        assert render_members(members) == (
            "let a: Int\n\nprotocol Interface {\n  func f()\n}"
        )
