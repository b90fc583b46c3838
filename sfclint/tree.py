"""Read-only node tree built from host parser output.

The host parses component sources (script and template) and hands over an
ESTree-shaped mapping, typically the JSON dump of ``vue-eslint-parser``
output.  ``load_tree`` turns that mapping into :class:`Node` objects that the
analyzers navigate.  Nodes are never mutated after construction.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

# Keys that carry positions or back-references rather than child structure.
_POSITION_KEYS = frozenset({"type", "range", "loc", "start", "end"})
_SKIPPED_KEYS = frozenset({"parent", "tokens", "errors"})
_MAX_RENDER_DEPTH = 64

_TYPE_WRAPPERS = frozenset(
    {
        "TSAsExpression",
        "TSSatisfiesExpression",
        "TSNonNullExpression",
        "TSTypeAssertion",
        "ParenthesizedExpression",
    }
)


class MalformedTreeError(ValueError):
    """Raised when the host-supplied tree violates the node contract."""


class SourceText:
    """Source string with a line index for offset to line/column lookups."""

    def __init__(self, text: str) -> None:
        self.text = text
        self._line_starts: List[int] = [0]
        for index, char in enumerate(text):
            if char == "\n":
                self._line_starts.append(index + 1)

    def position(self, offset: int) -> Tuple[int, int]:
        """Return the 1-based line and 0-based column of ``offset``."""
        line_index = bisect_right(self._line_starts, offset) - 1
        return line_index + 1, offset - self._line_starts[line_index]

    def slice(self, start: int, end: int) -> str:
        return self.text[start:end]


class Node:
    """One node of the host tree."""

    __slots__ = ("kind", "range", "line", "column", "parent", "_fields", "_source")

    def __init__(
        self,
        kind: str,
        range_: Optional[Tuple[int, int]],
        line: Optional[int],
        column: Optional[int],
        parent: Optional["Node"],
        source: Optional[SourceText],
    ) -> None:
        self.kind = kind
        self.range = range_
        self.line = line
        self.column = column
        self.parent = parent
        self._fields: Dict[str, Any] = {}
        self._source = source

    def __repr__(self) -> str:
        return f"Node({self.kind!r}, range={self.range!r}, line={self.line!r})"

    @property
    def start(self) -> Optional[int]:
        return self.range[0] if self.range is not None else None

    @property
    def end(self) -> Optional[int]:
        return self.range[1] if self.range is not None else None

    def field(self, name: str, default: Any = None) -> Any:
        """Return a child node, a tuple of children, or a scalar attribute."""
        return self._fields.get(name, default)

    def has_field(self, name: str) -> bool:
        return name in self._fields

    @property
    def raw(self) -> Optional[str]:
        """Raw spelling recorded by the parser (``raw`` or ``rawName``)."""
        for key in ("raw", "rawName"):
            value = self._fields.get(key)
            if isinstance(value, str):
                return value
        return None

    def children(self) -> Iterator["Node"]:
        for value in self._fields.values():
            if isinstance(value, Node):
                yield value
            elif isinstance(value, tuple):
                for item in value:
                    if isinstance(item, Node):
                        yield item

    def iter_descendants(self) -> Iterator["Node"]:
        """Yield every node below this one in depth-first source order."""
        stack: List[Node] = list(reversed(list(self.children())))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(list(node.children())))

    def ancestors(self) -> Iterator["Node"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    @property
    def next_sibling(self) -> Optional["Node"]:
        return self._sibling(1)

    @property
    def previous_sibling(self) -> Optional["Node"]:
        return self._sibling(-1)

    def _sibling(self, step: int) -> Optional["Node"]:
        if self.parent is None:
            return None
        siblings = list(self.parent.children())
        for index, candidate in enumerate(siblings):
            if candidate is self:
                target = index + step
                if 0 <= target < len(siblings):
                    return siblings[target]
                return None
        return None

    @property
    def text(self) -> str:
        """Source text of the node, or a compact rendering without source."""
        if self._source is not None and self.range is not None:
            return self._source.slice(*self.range)
        return _render(self)


def load_tree(data: Mapping[str, Any], source: Optional[str] = None) -> Node:
    """Build a :class:`Node` tree from an ESTree-shaped mapping.

    Construction is iterative so pathological nesting never exhausts the
    interpreter stack.
    """
    if not isinstance(data, Mapping) or not isinstance(data.get("type"), str):
        raise MalformedTreeError("tree root must be a mapping with a string 'type'")

    text = SourceText(source) if source is not None else None
    root = _make_node(data, None, text)
    pending: List[Tuple[Mapping[str, Any], Node]] = [(data, root)]
    while pending:
        mapping, node = pending.pop()
        for key, value in mapping.items():
            if key in _POSITION_KEYS or key in _SKIPPED_KEYS:
                continue
            if _is_node_mapping(value):
                child = _make_node(value, node, text)
                node._fields[key] = child
                pending.append((value, child))
            elif isinstance(value, list):
                items: List[Any] = []
                for item in value:
                    if _is_node_mapping(item):
                        child = _make_node(item, node, text)
                        pending.append((item, child))
                        items.append(child)
                    else:
                        items.append(item)
                node._fields[key] = tuple(items)
            else:
                node._fields[key] = value
    return root


def _is_node_mapping(value: Any) -> bool:
    if not isinstance(value, Mapping) or "type" not in value:
        return False
    if not isinstance(value["type"], str):
        raise MalformedTreeError(f"node 'type' must be a string, got {value['type']!r}")
    return True


def _make_node(mapping: Mapping[str, Any], parent: Optional[Node], source: Optional[SourceText]) -> Node:
    range_ = _read_range(mapping)
    line: Optional[int] = None
    column: Optional[int] = None
    loc = mapping.get("loc")
    if isinstance(loc, Mapping) and isinstance(loc.get("start"), Mapping):
        line = loc["start"].get("line")
        column = loc["start"].get("column")
    elif range_ is not None and source is not None:
        line, column = source.position(range_[0])
    return Node(mapping["type"], range_, line, column, parent, source)


def _read_range(mapping: Mapping[str, Any]) -> Optional[Tuple[int, int]]:
    raw_range = mapping.get("range")
    if raw_range is None and isinstance(mapping.get("start"), int) and isinstance(mapping.get("end"), int):
        raw_range = (mapping["start"], mapping["end"])
    if raw_range is None:
        return None
    if (
        not isinstance(raw_range, Sequence)
        or len(raw_range) != 2
        or not all(isinstance(value, int) for value in raw_range)
        or raw_range[0] > raw_range[1]
    ):
        raise MalformedTreeError(f"invalid range {raw_range!r} on {mapping['type']} node")
    return int(raw_range[0]), int(raw_range[1])


def _render(node: Optional[Node], depth: int = 0) -> str:
    if node is None:
        return ""
    kind = node.kind
    if depth > _MAX_RENDER_DEPTH:
        return kind
    if kind == "Identifier":
        return str(node.field("name", ""))
    if kind == "Literal":
        raw = node.raw
        return raw if raw is not None else repr(node.field("value"))
    if kind == "ThisExpression":
        return "this"
    if kind == "MemberExpression":
        obj = _render(node.field("object"), depth + 1)
        prop = _render(node.field("property"), depth + 1)
        optional = "?." if node.field("optional") else ""
        if node.field("computed"):
            return f"{obj}{optional}[{prop}]"
        return f"{obj}{optional or '.'}{prop}"
    if kind == "CallExpression":
        args = ", ".join(_render(arg, depth + 1) for arg in node.field("arguments", ()) if arg is not None)
        joiner = "?." if node.field("optional") else ""
        return f"{_render(node.field('callee'), depth + 1)}{joiner}({args})"
    if kind == "ChainExpression":
        return _render(node.field("expression"), depth + 1)
    if kind == "TemplateLiteral" and not node.field("expressions"):
        quasis = node.field("quasis", ())
        cooked = quasis[0].field("value", {}).get("cooked", "") if quasis else ""
        return f"`{cooked}`"
    return kind


def unwrap_type_assertion(node: Optional[Node]) -> Optional[Node]:
    """Skip TypeScript assertion and parenthesis wrappers around an expression."""
    while node is not None and node.kind in _TYPE_WRAPPERS:
        node = node.field("expression")
    return node


def wrapping_parent(node: Node) -> Optional[Node]:
    """Return the nearest ancestor that is not a type assertion or parenthesis wrapper."""
    parent = node.parent
    while parent is not None and parent.kind in _TYPE_WRAPPERS:
        parent = parent.parent
    return parent


def static_string(node: Optional[Node]) -> Optional[str]:
    """Return the string value of a literal or expression-free template literal."""
    if node is None:
        return None
    if node.kind == "Literal":
        if node.field("regex") is not None or node.field("bigint") is not None:
            return node.raw
        value = node.field("value")
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        if value is None:
            return "null" if node.raw == "null" else None
        return str(value)
    if node.kind == "TemplateLiteral" and not node.field("expressions"):
        quasis = node.field("quasis", ())
        if len(quasis) == 1:
            value = quasis[0].field("value") or {}
            cooked = value.get("cooked")
            return cooked if isinstance(cooked, str) else None
    return None


def static_property_name(node: Optional[Node]) -> Optional[str]:
    """Return the statically known key of a property-like node."""
    if node is None:
        return None
    key = node.field("key")
    if key is None:
        return None
    if key.kind == "Identifier" and not node.field("computed"):
        return key.field("name")
    return static_string(key)


__all__ = [
    "MalformedTreeError",
    "Node",
    "SourceText",
    "load_tree",
    "static_property_name",
    "static_string",
    "unwrap_type_assertion",
    "wrapping_parent",
]
