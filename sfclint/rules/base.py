"""Base classes for rule plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterable, Optional

from ..models import Diagnostic, Fix
from ..tree import Node


@dataclass(frozen=True)
class SourceFile:
    """One parsed component file as handed over by the host."""

    tree: Node
    text: Optional[str] = None
    filename: Optional[str] = None

    @property
    def template(self) -> Optional[Node]:
        return self.tree.field("templateBody")


class Rule(ABC):
    """Contract for rules that emit diagnostics for a parsed component file."""

    name: ClassVar[str]
    messages: ClassVar[Dict[str, str]]

    @abstractmethod
    def supports(self, source: SourceFile) -> bool:
        """Return True when this rule has anything to inspect in ``source``."""

    @abstractmethod
    def check(self, source: SourceFile) -> Iterable[Diagnostic]:
        """Produce one diagnostic per violation found in ``source``."""

    def report(
        self,
        node: Node,
        message_id: str,
        data: Optional[Dict[str, Any]] = None,
        fix: Optional[Fix] = None,
    ) -> Diagnostic:
        payload = dict(data or {})
        return Diagnostic(
            rule=self.name,
            message_id=message_id,
            message=self.messages[message_id].format(**payload),
            node=node,
            data=payload,
            fix=fix,
        )
