"""Decide whether a getter body yields a value on every path.

The walk is structural: each statement is mapped to the set of ways it can
complete (fall through normally, return, break or continue to a label).  A
body is complete when falling off its end is impossible.  Nested functions and
classes are opaque; their returns only terminate themselves.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Optional, Tuple

from .logging import get_logger
from .models import ComputedGetter
from .tree import Node

logger = get_logger("reachability")

DEFAULT_MAX_DEPTH = 128


class Reachability(str, Enum):
    COMPLETE = "complete"
    MISSING = "missing"


# Completion records: ("normal", None), ("return", None), ("break", label), ("continue", label).
Completion = Tuple[str, Optional[str]]
NORMAL: Completion = ("normal", None)
RETURN: Completion = ("return", None)

_OPAQUE_STATEMENTS = frozenset(
    {
        "FunctionDeclaration",
        "ClassDeclaration",
        "ExpressionStatement",
        "VariableDeclaration",
        "EmptyStatement",
        "DebuggerStatement",
        "ImportDeclaration",
        "TSTypeAliasDeclaration",
        "TSInterfaceDeclaration",
        "TSEnumDeclaration",
    }
)
_LOOPS = frozenset({"WhileStatement", "DoWhileStatement", "ForStatement", "ForInStatement", "ForOfStatement"})


class ReachabilityAnalyzer:
    """Computes :class:`Reachability` for computed getter bodies."""

    def __init__(self, *, treat_undefined_as_unspecified: bool = True, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.treat_undefined_as_unspecified = treat_undefined_as_unspecified
        self.max_depth = max_depth

    def analyze(self, getter: ComputedGetter) -> Reachability:
        walk = _Walk(
            treat_undefined_as_unspecified=getter.options.treat_undefined_as_unspecified,
            max_depth=self.max_depth,
        )
        return walk.verdict(getter.body)

    def analyze_body(self, body: Node) -> Reachability:
        walk = _Walk(
            treat_undefined_as_unspecified=self.treat_undefined_as_unspecified,
            max_depth=self.max_depth,
        )
        return walk.verdict(body)


class _Walk:
    """State for one body analysis; discarded afterwards."""

    def __init__(self, *, treat_undefined_as_unspecified: bool, max_depth: int) -> None:
        self.treat_undefined_as_unspecified = treat_undefined_as_unspecified
        self.max_depth = max_depth
        self.valueless_return: Optional[Node] = None
        self._handlers: Dict[str, Callable[[Node, int, Optional[str]], FrozenSet[Completion]]] = {
            "BlockStatement": self._block,
            "StaticBlock": self._block,
            "ReturnStatement": self._return,
            "ThrowStatement": self._throw,
            "IfStatement": self._if,
            "WhileStatement": self._loop,
            "DoWhileStatement": self._loop,
            "ForStatement": self._loop,
            "ForInStatement": self._loop,
            "ForOfStatement": self._loop,
            "SwitchStatement": self._switch,
            "TryStatement": self._try,
            "LabeledStatement": self._labeled,
            "BreakStatement": self._jump,
            "ContinueStatement": self._jump,
            "WithStatement": self._with,
        }

    def verdict(self, body: Optional[Node]) -> Reachability:
        if body is None:
            return Reachability.MISSING
        if body.kind != "BlockStatement":
            # Expression-bodied arrow functions always yield their expression.
            return Reachability.COMPLETE
        completions = self._statement(body, 0, None)
        if NORMAL in completions:
            return Reachability.MISSING
        if self.valueless_return is not None and self.treat_undefined_as_unspecified:
            return Reachability.MISSING
        return Reachability.COMPLETE

    def _statement(self, node: Optional[Node], depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        if node is None or node.kind in _OPAQUE_STATEMENTS:
            return frozenset({NORMAL})
        if depth > self.max_depth:
            logger.debug("Nesting deeper than %d at line %s; treating branch as falling through", self.max_depth, node.line)
            return frozenset({NORMAL})
        handler = self._handlers.get(node.kind)
        if handler is None:
            return frozenset({NORMAL})
        return handler(node, depth + 1, label)

    def _sequence(self, statements: Iterable[Node], depth: int) -> FrozenSet[Completion]:
        result = set()
        for statement in statements:
            completions = self._statement(statement, depth, None)
            result.update(completions - {NORMAL})
            if NORMAL not in completions:
                # Remaining statements are unreachable.
                return frozenset(result)
        result.add(NORMAL)
        return frozenset(result)

    def _block(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        return self._sequence(node.field("body", ()), depth)

    def _return(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        if node.field("argument") is None and self.valueless_return is None:
            self.valueless_return = node
        return frozenset({RETURN})

    def _throw(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        return frozenset({RETURN})

    def _jump(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        target = node.field("label")
        kind = "break" if node.kind == "BreakStatement" else "continue"
        return frozenset({(kind, target.field("name") if target is not None else None)})

    def _if(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        consequent = self._statement(node.field("consequent"), depth, None)
        alternate_node = node.field("alternate")
        if alternate_node is None:
            return consequent | {NORMAL}
        return consequent | self._statement(alternate_node, depth, None)

    def _loop(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        body = self._statement(node.field("body"), depth, None)
        own_targets = {None, label}
        breaks_out = any(kind == "break" and target in own_targets for kind, target in body)
        continues = any(kind == "continue" and target in own_targets for kind, target in body)
        escaping = {
            completion
            for completion in body
            if completion != NORMAL and not (completion[0] in {"break", "continue"} and completion[1] in own_targets)
        }

        if _is_infinite(node):
            if breaks_out:
                escaping.add(NORMAL)
            return frozenset(escaping)
        if node.kind == "DoWhileStatement":
            if breaks_out or continues or NORMAL in body:
                escaping.add(NORMAL)
            return frozenset(escaping)
        # The body may run zero times.
        escaping.add(NORMAL)
        return frozenset(escaping)

    def _switch(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        own_targets = {None, label}
        result = set()
        has_default = False
        falls_out = True
        for case in node.field("cases", ()):
            if case.field("test") is None:
                has_default = True
            completions = self._sequence(case.field("consequent", ()), depth)
            falls_out = NORMAL in completions
            for completion in completions:
                if completion == NORMAL:
                    continue
                if completion[0] == "break" and completion[1] in own_targets:
                    result.add(NORMAL)
                else:
                    result.add(completion)
        if not has_default or falls_out:
            result.add(NORMAL)
        return frozenset(result)

    def _try(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        completions = set(self._statement(node.field("block"), depth, None))
        handler = node.field("handler")
        if handler is not None:
            completions |= self._statement(handler.field("body"), depth, None)
        finalizer = node.field("finalizer")
        if finalizer is None:
            return frozenset(completions)
        final = self._statement(finalizer, depth, None)
        if NORMAL not in final:
            return final
        return frozenset(completions | (final - {NORMAL}))

    def _labeled(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        name = node.field("label").field("name")
        body = node.field("body")
        completions = self._statement(body, depth, name)
        if body is not None and body.kind in _LOOPS:
            return completions
        if ("break", name) in completions:
            return frozenset((completions - {("break", name)}) | {NORMAL})
        return completions

    def _with(self, node: Node, depth: int, label: Optional[str]) -> FrozenSet[Completion]:
        return self._statement(node.field("body"), depth, None)


def _is_infinite(loop: Node) -> bool:
    if loop.kind in {"ForInStatement", "ForOfStatement"}:
        return False
    test = loop.field("test")
    if test is None:
        return loop.kind == "ForStatement"
    return test.kind == "Literal" and bool(test.field("value")) and test.field("regex") is None


__all__ = ["DEFAULT_MAX_DEPTH", "Reachability", "ReachabilityAnalyzer"]
