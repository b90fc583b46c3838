"""Rule requiring every prop to declare a default value."""

from __future__ import annotations

from typing import Iterable, List

from .base import Rule, SourceFile
from ..models import UNKNOWN, Diagnostic, PropertyDeclaration
from ..normalizer import iter_components

ARRAY_PROPS_IGNORE = "ignore"
ARRAY_PROPS_CHECK = "check"


class RequireDefaultPropRule(Rule):
    """Flags props that have neither a default nor a Boolean type."""

    name = "require-default-prop"
    messages = {
        "missingDefault": "Prop '{propName}' requires default value to be set.",
    }

    def __init__(self, *, array_props: str = ARRAY_PROPS_IGNORE, exempt_required: bool = False) -> None:
        if array_props not in {ARRAY_PROPS_IGNORE, ARRAY_PROPS_CHECK}:
            raise ValueError(f"array_props must be 'ignore' or 'check', got {array_props!r}")
        self.array_props = array_props
        self.exempt_required = exempt_required

    def supports(self, source: SourceFile) -> bool:
        return bool(source.tree.field("body"))

    def check(self, source: SourceFile) -> Iterable[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for component in iter_components(source.tree, filename=source.filename):
            for prop in component.props:
                if self.requires_default(prop):
                    diagnostics.append(
                        self.report(prop.node, "missingDefault", {"propName": prop.name.display})
                    )
        return diagnostics

    def requires_default(self, prop: PropertyDeclaration) -> bool:
        """Return True when ``prop`` violates the default-value obligation."""
        if prop.from_array:
            return self.array_props == ARRAY_PROPS_CHECK
        if prop.has_default:
            return False
        if prop.declared_type is not UNKNOWN and prop.declared_type.is_boolean:
            return False
        if prop.required and self.exempt_required:
            return False
        return True


__all__ = ["ARRAY_PROPS_CHECK", "ARRAY_PROPS_IGNORE", "RequireDefaultPropRule"]
