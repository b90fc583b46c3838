"""Rule plugin implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set

from .base import Rule, SourceFile
from .require_default_prop import RequireDefaultPropRule
from .return_in_computed import ReturnInComputedRule
from .v_bind_style import VBindStyleRule
from ..config import LintConfig

_ENTRY_POINT_GROUP = "sfclint.rules"

_BUILTIN_FACTORIES: dict[str, Callable[[LintConfig], Rule]] = {
    RequireDefaultPropRule.name: lambda config: RequireDefaultPropRule(
        array_props=config.default_prop.array_props,
        exempt_required=config.default_prop.exempt_required,
    ),
    ReturnInComputedRule.name: lambda config: ReturnInComputedRule(
        treat_undefined_as_unspecified=config.computed_return.treat_undefined_as_unspecified,
        max_depth=config.max_depth,
    ),
    VBindStyleRule.name: lambda config: VBindStyleRule(style=config.bind_style.style),
}


def discover_rules(config: LintConfig, enabled: Sequence[str] | None = None) -> List[Rule]:
    """Return instantiated rules, honoring optional enabled names."""

    if enabled is None and config.enabled:
        enabled = config.enabled
    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    rules: List[Rule] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[LintConfig], Rule]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory(config)
        if not isinstance(instance, Rule):
            raise TypeError(f"Rule factory for '{name}' did not return a Rule instance")
        rules.append(instance)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load rule entry point '{name}': {exc}") from exc

        def _factory(config: LintConfig, obj: object = loaded) -> Rule:
            return _coerce_rule(obj)

        _add(name, _factory)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown rules requested: {missing}")

    return rules


def _coerce_rule(obj: object) -> Rule:
    if isinstance(obj, Rule):
        return obj
    if isinstance(obj, type) and issubclass(obj, Rule):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Rule):
            return instance
    raise TypeError("Rule entry point must be a Rule subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "RequireDefaultPropRule",
    "ReturnInComputedRule",
    "Rule",
    "SourceFile",
    "VBindStyleRule",
    "discover_rules",
]
