"""Core data models shared across sfclint components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .tree import MalformedTreeError, Node


class _UnknownType(Enum):
    UNKNOWN = "unknown"

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = _UnknownType.UNKNOWN
"""Marker for values that cannot be determined statically."""


class DeclarationStyle(str, Enum):
    """Syntactic idiom a component uses to declare props or computed getters."""

    OPTIONS_OBJECT = "options-object"
    COMPOSITION_CALL = "composition-call"
    TYPE_ONLY_INTERFACE = "type-only-interface"
    TYPE_ONLY_WITH_DEFAULTS = "type-only-with-defaults"


class DirectiveStyle(str, Enum):
    SHORTHAND = "shorthand"
    LONGFORM = "longform"


@dataclass(frozen=True)
class StaticName:
    """Property name known at analysis time."""

    value: str

    @property
    def display(self) -> str:
        return self.value


@dataclass(frozen=True)
class DynamicName:
    """Computed property key whose value cannot be resolved statically."""

    source_text: str

    @property
    def display(self) -> str:
        return f"[{self.source_text}]"


PropName = Union[StaticName, DynamicName]


@dataclass(frozen=True)
class TypeExpr:
    """Runtime type names a prop accepts, e.g. ``("Boolean", "String")``."""

    names: Tuple[str, ...]

    @property
    def is_boolean(self) -> bool:
        return self.names == ("Boolean",)


DeclaredType = Union[TypeExpr, _UnknownType]


@dataclass(frozen=True)
class PropertyDeclaration:
    """Canonical view of one declared prop."""

    name: PropName
    declared_type: DeclaredType
    has_default: bool
    node: Node
    style: DeclarationStyle
    required: bool = False
    from_array: bool = False


@dataclass(frozen=True)
class GetterOptions:
    treat_undefined_as_unspecified: bool = True


@dataclass(frozen=True)
class ComputedGetter:
    """A computed accessor body; ``owner_name`` is None for anonymous calls."""

    owner_name: Optional[str]
    body: Node
    node: Node
    options: GetterOptions = field(default_factory=GetterOptions)


@dataclass(frozen=True)
class ComponentDeclaration:
    """Props and computed getters found at one definition site."""

    node: Node
    props_style: Optional[DeclarationStyle]
    computed_style: Optional[DeclarationStyle]
    props: Tuple[PropertyDeclaration, ...] = ()
    computed: Tuple[ComputedGetter, ...] = ()


@dataclass(frozen=True)
class TextEdit:
    """Replace ``range`` (start, end offsets) with ``text``."""

    range: Tuple[int, int]
    text: str

    @classmethod
    def insert_before(cls, node: Node, text: str) -> "TextEdit":
        start = _require_range(node)[0]
        return cls((start, start), text)

    @classmethod
    def replace(cls, node: Node, text: str) -> "TextEdit":
        return cls(_require_range(node), text)

    @classmethod
    def remove(cls, node: Node) -> "TextEdit":
        return cls(_require_range(node), "")


@dataclass(frozen=True)
class Fix:
    """Ordered, non-overlapping edits applied as one unit."""

    edits: Tuple[TextEdit, ...]

    def __post_init__(self) -> None:
        previous_end: Optional[int] = None
        for edit in self.edits:
            start, end = edit.range
            if start > end:
                raise ValueError(f"edit range {edit.range} is inverted")
            if previous_end is not None and start < previous_end:
                raise ValueError("fix edits must be ordered and must not overlap")
            previous_end = end

    @property
    def range(self) -> Tuple[int, int]:
        return self.edits[0].range[0], self.edits[-1].range[1]


@dataclass(frozen=True)
class Diagnostic:
    """One violation reported by a rule."""

    rule: str
    message_id: str
    message: str
    node: Node
    data: Dict[str, Any] = field(default_factory=dict)
    fix: Optional[Fix] = None

    @property
    def line(self) -> Optional[int]:
        return self.node.line

    @property
    def column(self) -> Optional[int]:
        return self.node.column


@dataclass(frozen=True)
class DirectiveBindingAttribute:
    """Spelling facts about one property-binding directive attribute."""

    node: Node
    style: DirectiveStyle
    prop_shorthand: bool
    has_auto_prop_modifier: bool


def _require_range(node: Node) -> Tuple[int, int]:
    if node.range is None:
        raise MalformedTreeError(f"{node.kind} node has no source range")
    return node.range


__all__ = [
    "UNKNOWN",
    "ComponentDeclaration",
    "ComputedGetter",
    "DeclarationStyle",
    "DeclaredType",
    "Diagnostic",
    "DirectiveBindingAttribute",
    "DirectiveStyle",
    "DynamicName",
    "Fix",
    "GetterOptions",
    "PropName",
    "PropertyDeclaration",
    "StaticName",
    "TextEdit",
    "TypeExpr",
]
