"""Rule enforcing one spelling for property-binding directives.

``v-bind:foo`` (longform), ``:foo`` (shorthand) and ``.foo`` (shorthand for
``v-bind:foo.prop``) bind the same thing.  The rule reports attributes that do
not use the configured spelling and attaches a fix rewriting them.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from .base import Rule, SourceFile
from ..models import Diagnostic, DirectiveBindingAttribute, DirectiveStyle, Fix, TextEdit
from ..tree import Node

_SHORTHAND_SPELLINGS = frozenset({":", "."})
_PROP_SHORTHAND = "."


def classify_binding(node: Node) -> Optional[DirectiveBindingAttribute]:
    """Return spelling facts for a ``v-bind`` attribute with an argument."""
    if node.kind != "VAttribute" or not node.field("directive"):
        return None
    key = node.field("key")
    if key is None:
        return None
    name = key.field("name")
    if name is None or name.field("name") != "bind" or key.field("argument") is None:
        return None

    raw_name = name.raw
    prop_shorthand = raw_name == _PROP_SHORTHAND
    style = DirectiveStyle.SHORTHAND if raw_name in _SHORTHAND_SPELLINGS else DirectiveStyle.LONGFORM
    modifiers = key.field("modifiers", ())
    first = modifiers[0] if modifiers else None
    auto_prop = first is not None and first.field("name") == "prop" and first.field("rawName") == ""
    return DirectiveBindingAttribute(
        node=node,
        style=style,
        prop_shorthand=prop_shorthand,
        has_auto_prop_modifier=auto_prop,
    )


def build_fix(attribute: DirectiveBindingAttribute, preferred: DirectiveStyle) -> Fix:
    """Edits converting ``attribute`` to the ``preferred`` spelling."""
    key = attribute.node.field("key")
    name = key.field("name")
    if preferred is DirectiveStyle.SHORTHAND:
        return Fix((TextEdit.remove(name),))

    edits: List[TextEdit] = [TextEdit.insert_before(attribute.node, "v-bind")]
    if attribute.prop_shorthand:
        edits.append(TextEdit.replace(name, ":"))
        if attribute.has_auto_prop_modifier:
            edits.append(TextEdit.insert_before(key.field("modifiers")[0], ".prop"))
    return Fix(tuple(edits))


class VBindStyleRule(Rule):
    """Reports ``v-bind`` attributes spelled against the preferred style."""

    name = "v-bind-style"
    messages = {
        "expectedLonghand": "Expected 'v-bind' before ':'.",
        "unexpectedLonghand": "Unexpected 'v-bind' before ':'.",
        "expectedLonghandForProp": "Expected 'v-bind:' instead of '.'.",
    }

    def __init__(self, *, style: str = "shorthand") -> None:
        self.preferred = DirectiveStyle(style)

    def supports(self, source: SourceFile) -> bool:
        return source.template is not None

    def check(self, source: SourceFile) -> Iterable[Diagnostic]:
        template = source.template
        if template is None:
            return []
        diagnostics: List[Diagnostic] = []
        for node in template.iter_descendants():
            attribute = classify_binding(node)
            if attribute is None or attribute.style is self.preferred:
                continue
            diagnostics.append(
                self.report(node, self._message_id(attribute), fix=build_fix(attribute, self.preferred))
            )
        return diagnostics

    def _message_id(self, attribute: DirectiveBindingAttribute) -> str:
        if self.preferred is DirectiveStyle.SHORTHAND:
            return "unexpectedLonghand"
        if attribute.prop_shorthand:
            return "expectedLonghandForProp"
        return "expectedLonghand"


__all__ = ["VBindStyleRule", "build_fix", "classify_binding"]
