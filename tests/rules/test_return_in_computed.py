"""Tests for the return-in-computed-property rule."""

from __future__ import annotations

from typing import List

from sfclint.models import Diagnostic
from sfclint.rules import ReturnInComputedRule, SourceFile
from sfclint.tree import load_tree
from tests._fixtures import estree as es


def _check(data: dict, filename: str = "test.vue", **options) -> List[Diagnostic]:
    rule = ReturnInComputedRule(**options)
    return list(rule.check(SourceFile(tree=load_tree(data), filename=filename)))


def _messages(diagnostics: List[Diagnostic]) -> List[str]:
    return [diagnostic.message for diagnostic in diagnostics]


def _computed(*entries: dict) -> dict:
    return es.component(es.prop("computed", es.obj(*entries)))


def _missing(name: str) -> str:
    return f'Expected to return a value in "{name}" computed property.'


IN_FUNCTION = "Expected to return a value in computed function."


def test_getters_returning_on_every_path_are_valid() -> None:
    data = _computed(
        es.prop("foo", es.func(es.ret(es.lit(True))), method=True),
        es.prop("bar", es.func(es.if_(es.ident("a"), es.ret(es.lit(1)), es.ret(es.lit(2))))),
        es.prop("baz", es.obj(es.prop("get", es.func(es.ret(es.lit(1)))), es.prop("set", es.func()))),
        es.prop("qux", es.arrow(es.lit(1))),
        es.prop("quux", es.func(es.throw(es.new("Error")))),
    )

    assert _check(data) == []


def test_empty_getter() -> None:
    data = _computed(es.prop("foo", es.at(es.func(), line=4), method=True))

    diagnostics = _check(data)

    assert _messages(diagnostics) == [_missing("foo")]
    assert diagnostics[0].line == 4
    assert diagnostics[0].data == {"name": "foo"}


def test_conditional_valueless_return() -> None:
    data = _computed(es.prop("foo", es.func(es.if_(es.ident("a"), es.block(es.ret())))))

    assert _messages(_check(data)) == [_missing("foo")]


def test_getter_in_accessor_object_is_reported_at_the_getter() -> None:
    getter = es.at(es.func(), line=7)
    data = _computed(es.prop("foo", es.obj(es.prop("set", es.at(es.func(), line=5)), es.prop("get", getter))))

    diagnostics = _check(data)

    assert [diagnostic.line for diagnostic in diagnostics] == [7]


def test_return_inside_nested_function_does_not_count() -> None:
    data = _computed(
        es.prop(
            "foo",
            es.func(
                es.func_decl("bar", es.ret(es.member("this", "baz"))),
                es.expr(es.call("bar")),
            ),
        )
    )

    assert _messages(_check(data)) == [_missing("foo")]


def test_treat_undefined_as_unspecified_toggle() -> None:
    data = _computed(
        es.prop("foo", es.func(), method=True),
        es.prop("bar", es.func(es.ret()), method=True),
    )

    assert _messages(_check(data)) == [_missing("foo"), _missing("bar")]
    assert _messages(_check(data, treat_undefined_as_unspecified=False)) == [_missing("foo")]


def test_component_marker_in_plain_js() -> None:
    data = es.program(
        es.export_default(
            es.obj(es.prop("computed", es.obj(es.prop("my_FALSE_test", es.func(es.let("aa", es.lit(2)))))))
        ),
        comments=[" @vue/component"],
    )

    assert _messages(_check(data, filename="test.js")) == [_missing("my_FALSE_test")]


def test_string_keyed_computed_option() -> None:
    data = es.component(es.prop(es.lit("computed"), es.obj(es.prop("foo", es.func(), method=True))))

    assert _messages(_check(data)) == [_missing("foo")]


def test_composition_getters() -> None:
    setup_body = [
        es.let("foo", es.call("computed", es.at(es.arrow(es.block()), line=5))),
        es.let("foo2", es.call("computed", es.at(es.func(), line=6))),
        es.let("foo3", es.call("computed", es.at(es.arrow(es.block(es.if_(es.ident("a"), es.block(es.ret())))), line=7))),
        es.let(
            "foo4",
            es.call(
                "computed",
                es.obj(es.prop("set", es.arrow(es.block())), es.prop("get", es.at(es.arrow(es.block()), line=14))),
            ),
        ),
        es.let("ok", es.call("computed", es.arrow(es.lit(1)))),
    ]
    data = es.program(
        es.import_from("vue", "computed"),
        es.export_default(es.obj(es.prop("setup", es.func(*setup_body), method=True))),
    )

    diagnostics = _check(data)

    assert _messages(diagnostics) == [IN_FUNCTION] * 4
    assert [diagnostic.line for diagnostic in diagnostics] == [5, 6, 7, 14]


def test_composition_valueless_return_with_option_disabled() -> None:
    data = es.program(
        es.import_from("vue", "computed"),
        es.let("foo", es.call("computed", es.arrow(es.block()))),
        es.let("baz", es.call("computed", es.arrow(es.block(es.ret())))),
    )

    assert len(_check(data, treat_undefined_as_unspecified=False)) == 1
