"""Tests for sfclint.linter."""

from __future__ import annotations

import json
from pathlib import Path

from sfclint.config import LintConfig
from sfclint.linter import Linter, source_path_for
from sfclint.rules import RequireDefaultPropRule, ReturnInComputedRule, VBindStyleRule
from tests._fixtures import estree as es
from tests._fixtures.template import template_program


def _mixed_component() -> dict:
    data = es.component(
        es.at(es.prop("props", es.obj(es.at(es.prop("a", es.ident("Number")), line=3, column=4))), line=2),
        es.prop("computed", es.obj(es.prop("b", es.at(es.func(), line=6, column=4), method=True))),
    )
    return data


def test_linter_runs_all_builtin_rules(linter: Linter) -> None:
    assert {rule.name for rule in linter.rules} == {
        RequireDefaultPropRule.name,
        ReturnInComputedRule.name,
        VBindStyleRule.name,
    }


def test_linter_honours_enabled_rules(tmp_path: Path) -> None:
    linter = Linter(LintConfig(root=tmp_path, enabled=["v-bind-style"]))

    assert [rule.name for rule in linter.rules] == ["v-bind-style"]


def test_lint_document_sorts_diagnostics_by_position(linter: Linter) -> None:
    result = linter.lint_document(_mixed_component(), filename="test.vue")

    assert result.error is None
    assert [diagnostic.rule for diagnostic in result.diagnostics] == [
        "require-default-prop",
        "return-in-computed-property",
    ]
    assert [diagnostic.line for diagnostic in result.diagnostics] == [3, 6]
    assert not result.ok


def test_lint_document_is_deterministic(linter: Linter) -> None:
    first = linter.lint_document(_mixed_component(), filename="test.vue")
    second = linter.lint_document(_mixed_component(), filename="test.vue")

    assert [(d.rule, d.message, d.line) for d in first.diagnostics] == [
        (d.rule, d.message, d.line) for d in second.diagnostics
    ]


def test_lint_document_accepts_envelope(linter: Linter) -> None:
    markup = '<div v-bind:foo="bar"></div>'
    payload = {"filename": "Card.vue", "source": markup, "ast": template_program(markup)}

    result = linter.lint_document(payload)

    assert result.filename == "Card.vue"
    assert result.text == markup
    assert [diagnostic.rule for diagnostic in result.diagnostics] == ["v-bind-style"]
    assert result.diagnostics[0].fix is not None


def test_malformed_tree_is_isolated(linter: Linter) -> None:
    broken = es.program(es.expr(es.ident("x")))
    broken["body"][0]["range"] = [9, 1]

    result = linter.lint_document(broken, filename="broken.vue")
    healthy = linter.lint_document(_mixed_component(), filename="test.vue")

    assert result.error is not None
    assert result.diagnostics == []
    assert len(healthy.diagnostics) == 2


def test_missing_range_during_fix_building_aborts_file_only(linter: Linter) -> None:
    markup = '<div v-bind:foo="bar"></div>'
    data = template_program(markup)
    del data["templateBody"]["startTag"]["attributes"][0]["key"]["name"]["range"]

    result = linter.lint_document(data, filename="test.vue", text=markup)

    assert result.error is not None
    assert result.diagnostics == []


def test_clean_component_is_ok(linter: Linter) -> None:
    data = es.component(es.prop("props", es.obj(es.prop("a", es.ident("Boolean")))))

    assert linter.lint_document(data, filename="test.vue").ok


def test_lint_path_reads_source_beside_dump(tmp_path: Path, linter: Linter) -> None:
    markup = '<div v-bind:foo="bar"></div>'
    source = tmp_path / "Card.vue"
    source.write_text(markup, encoding="utf-8")
    dump = tmp_path / "Card.vue.json"
    dump.write_text(json.dumps(template_program(markup)), encoding="utf-8")

    result = linter.lint_path(dump)

    assert result.filename == str(source)
    assert result.text == markup
    assert len(result.diagnostics) == 1


def test_lint_path_rejects_non_object_dump(tmp_path: Path, linter: Linter) -> None:
    dump = tmp_path / "bad.json"
    dump.write_text("[]", encoding="utf-8")

    result = linter.lint_path(dump)

    assert result.error is not None


def test_source_path_for_strips_json_suffix() -> None:
    assert source_path_for(Path("a/Foo.vue.json")) == Path("a/Foo.vue")
    assert source_path_for(Path("a/Foo.vue")) == Path("a/Foo.vue")
