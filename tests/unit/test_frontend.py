"""Tests for SwiftFrontend -- tree-sitter Swift CST to declaration model."""

from __future__ import annotations

from delegator.frontend import SourceDeclaration, SwiftFrontend, parse_swift
from delegator.signature import ParamMode, extract_signatures
from delegator.syntax import EffectKind, NamedType, NominalDecl
from tests.unit.conftest import SAMPLE_SOURCE


def _lower_swift(source: str) -> list[NominalDecl]:
    tree = parse_swift(source)
    return SwiftFrontend().lower(tree, source.encode("utf-8"))


def _collect_swift(source: str, attribute: str = "AltDependencyClient") -> list[SourceDeclaration]:
    tree = parse_swift(source)
    return SwiftFrontend().collect_attributed(tree, source.encode("utf-8"), attribute)


def _interface(decl: NominalDecl) -> NominalDecl:
    return next(m for m in decl.members if m.kind == "protocol")


class TestSwiftDeclarations:
    def test_struct(self):
        (decl,) = _lower_swift(SAMPLE_SOURCE)
        assert decl.kind == "struct"
        assert decl.name.name == "Foo"
        assert decl.attributes == ("@AltDependencyClient",)

    def test_class_and_enum_kinds(self):
        decls = _lower_swift("class A {}\nenum B { case x }\n")
        assert [d.kind for d in decls] == ["class", "enum"]

    def test_nested_protocol(self):
        (decl,) = _lower_swift(SAMPLE_SOURCE)
        proto = _interface(decl)
        assert proto.name.name == "Interface"
        assert [m.name.name for m in proto.function_members()] == ["foo", "bar", "baz"]

    def test_inheritance(self):
        (decl,) = _lower_swift("struct Foo: Sendable, Equatable {}\n")
        assert decl.inherited == ("Sendable", "Equatable")
        assert decl.is_concurrency_safe

    def test_other_members_kept_as_raw_text(self):
        (decl,) = _lower_swift("struct Foo {\n  let id: Int\n}\n")
        (member,) = decl.members
        assert member.kind == "raw"
        assert member.text == "let id: Int"

    def test_location(self):
        (decl,) = _lower_swift(SAMPLE_SOURCE)
        assert decl.location.start_line == 1
        assert not decl.location.is_unknown()

    def test_module_qualified_sendable(self):
        (decl,) = _lower_swift("struct Foo: Swift.Sendable {}\n")
        assert decl.is_concurrency_safe

    def test_body_end_is_closing_brace(self):
        source = "struct Foo {\n  let id: Int\n}\n"
        (decl,) = _lower_swift(source)
        end = decl.body_end
        assert (end.start_line, end.start_col) == (3, 0)
        assert (end.end_line, end.end_col) == (3, 0)
        assert source.split("\n")[end.start_line - 1][end.start_col] == "}"

    def test_body_end_on_same_line(self):
        (decl,) = _lower_swift("struct Foo {}\n")
        assert (decl.body_end.start_line, decl.body_end.start_col) == (1, 12)


class TestSwiftRequirements:
    def test_parameters(self):
        (decl,) = _lower_swift(SAMPLE_SOURCE)
        foo, bar, _ = _interface(decl).function_members()
        (integer,) = foo.parameters
        assert integer.first_name.name == "integer"
        assert integer.second_name is None
        assert integer.type == NamedType(text="Int")
        (string,) = bar.parameters
        assert string.first_name.name == "from"
        assert string.second_name.name == "string"

    def test_return_types(self):
        (decl,) = _lower_swift(SAMPLE_SOURCE)
        foo, bar, baz = _interface(decl).function_members()
        assert foo.return_type == NamedType(text="String")
        assert bar.return_type == NamedType(text="Int")
        assert baz.return_type is None

    def test_effects(self):
        source = """\
struct Foo {
  protocol Interface {
    func a()
    func b() async
    func c() throws -> Int
    func d() async throws -> Int
  }
}
"""
        (decl,) = _lower_swift(source)
        effects = [m.effect for m in _interface(decl).function_members()]
        assert effects == [
            EffectKind.NONE,
            EffectKind.ASYNC,
            EffectKind.THROWS,
            EffectKind.ASYNC_THROWS,
        ]

    def test_passing_modes(self):
        source = """\
struct Foo {
  protocol Interface {
    func f(_ value: inout Int, message: @autoclosure () -> String, _ plain: Bool)
  }
}
"""
        (decl,) = _lower_swift(source)
        (signature,) = extract_signatures(_interface(decl))
        assert [p.mode for p in signature.parameters] == [
            ParamMode.BY_MUTABLE_REF,
            ParamMode.LAZY,
            ParamMode.BY_VALUE,
        ]
        assert [p.internal_name.name for p in signature.parameters] == [
            "value",
            "message",
            "plain",
        ]

    def test_backticked_name(self):
        source = """\
struct Foo {
  protocol Interface {
    func `return`(from: Int)
  }
}
"""
        (decl,) = _lower_swift(source)
        (requirement,) = _interface(decl).function_members()
        assert requirement.name.name == "return"
        assert requirement.name.escaped == "`return`"

    def test_typed_throws(self):
        source = """\
struct Foo {
  protocol Interface {
    func load(id: Int) async throws(LoadError) -> Data
  }
}
"""
        (decl,) = _lower_swift(source)
        (requirement,) = _interface(decl).function_members()
        assert requirement.effect == EffectKind.ASYNC_THROWS
        assert requirement.thrown_type == NamedType(text="LoadError")
        assert requirement.return_type == NamedType(text="Data")

    def test_rethrows_counts_as_throws(self):
        source = """\
struct Foo {
  protocol Interface {
    func run(_ body: () throws -> Void) rethrows
  }
}
"""
        (decl,) = _lower_swift(source)
        (requirement,) = _interface(decl).function_members()
        assert requirement.effect == EffectKind.THROWS
        assert requirement.thrown_type is None

    def test_throwing_parameter_type_is_not_an_effect(self):
        source = """\
struct Foo {
  protocol Interface {
    func run(_ body: () async throws -> Void)
  }
}
"""
        (decl,) = _lower_swift(source)
        (requirement,) = _interface(decl).function_members()
        assert requirement.effect == EffectKind.NONE

    def test_generic_clauses(self):
        source = """\
struct Foo {
  protocol Interface {
    func echo<T>(_ value: T) -> T where T: Equatable
  }
}
"""
        (decl,) = _lower_swift(source)
        (requirement,) = _interface(decl).function_members()
        assert requirement.generic_parameters == "<T>"
        assert requirement.generic_constraints == "where T: Equatable"
        assert [p.type for p in requirement.parameters] == [NamedType(text="T")]
        assert requirement.return_type == NamedType(text="T")
        assert requirement.effect == EffectKind.NONE

    def test_non_generic_function_has_no_clauses(self):
        (decl,) = _lower_swift(SAMPLE_SOURCE)
        foo = _interface(decl).function_members()[0]
        assert foo.generic_parameters is None
        assert foo.generic_constraints is None


class TestCollectAttributed:
    def test_finds_attributed_struct(self):
        (found,) = _collect_swift(SAMPLE_SOURCE)
        assert found.declaration.name.name == "Foo"
        assert found.start_byte == 0
        assert found.end_byte == len(SAMPLE_SOURCE.rstrip("\n"))
        assert SAMPLE_SOURCE[found.attribute_start : found.attribute_end] == "@AltDependencyClient"
        assert SAMPLE_SOURCE[found.body_close_byte] == "}"

    def test_unattributed_declarations_are_skipped(self):
        assert _collect_swift("struct Foo {\n  protocol Interface {}\n}\n") == []

    def test_other_attribute_name(self):
        source = "@Client\nstruct Foo {}\n"
        assert _collect_swift(source) == []
        assert len(_collect_swift(source, "Client")) == 1

    def test_nested_declaration_and_indent(self):
        source = """\
enum Namespace {
  @AltDependencyClient
  struct Inner {
    protocol Interface {}
  }
}
"""
        (found,) = _collect_swift(source)
        assert found.declaration.name.name == "Inner"
        assert found.indent == "  "

    def test_attributed_class_is_collected(self):
        (found,) = _collect_swift("@AltDependencyClient\nclass Foo {}\n")
        assert found.declaration.kind == "class"

    def test_attributed_function_is_collected(self):
        (found,) = _collect_swift("@AltDependencyClient\nfunc run() {}\n")
        assert found.declaration.kind == "function"
        assert found.body_close_byte == -1
