"""Rule requiring computed getters to return a value on every path."""

from __future__ import annotations

from typing import Iterable, List

from .base import Rule, SourceFile
from ..models import Diagnostic, GetterOptions
from ..normalizer import iter_components
from ..reachability import DEFAULT_MAX_DEPTH, Reachability, ReachabilityAnalyzer


class ReturnInComputedRule(Rule):
    name = "return-in-computed-property"
    messages = {
        "missingReturn": 'Expected to return a value in "{name}" computed property.',
        "missingReturnInFunction": "Expected to return a value in computed function.",
    }

    def __init__(self, *, treat_undefined_as_unspecified: bool = True, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.options = GetterOptions(treat_undefined_as_unspecified=treat_undefined_as_unspecified)
        self.analyzer = ReachabilityAnalyzer(
            treat_undefined_as_unspecified=treat_undefined_as_unspecified,
            max_depth=max_depth,
        )

    def supports(self, source: SourceFile) -> bool:
        return bool(source.tree.field("body"))

    def check(self, source: SourceFile) -> Iterable[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        components = iter_components(source.tree, filename=source.filename, getter_options=self.options)
        for component in components:
            for getter in component.computed:
                if self.analyzer.analyze(getter) is Reachability.COMPLETE:
                    continue
                if getter.owner_name is None:
                    diagnostics.append(self.report(getter.node, "missingReturnInFunction"))
                else:
                    diagnostics.append(self.report(getter.node, "missingReturn", {"name": getter.owner_name}))
        return diagnostics


__all__ = ["ReturnInComputedRule"]
