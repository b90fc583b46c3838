"""Per-file lint orchestration."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from .config import LintConfig
from .logging import get_logger
from .models import Diagnostic
from .rules import Rule, SourceFile, discover_rules
from .tree import MalformedTreeError, load_tree


@dataclass
class LintResult:
    """Diagnostics for one file, or the reason analysis was aborted."""

    filename: Optional[str]
    diagnostics: List[Diagnostic] = field(default_factory=list)
    error: Optional[str] = None
    text: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.diagnostics


class Linter:
    """Runs the configured rules over parsed component files."""

    def __init__(self, config: LintConfig | None = None, rules: Optional[Iterable[Rule]] = None) -> None:
        self.config = config or LintConfig(root=Path.cwd())
        self.rules = list(rules) if rules is not None else discover_rules(self.config)
        self.logger = get_logger("linter")

    def lint(self, source: SourceFile) -> LintResult:
        result = LintResult(filename=source.filename, text=source.text)
        try:
            for rule in self.rules:
                if not rule.supports(source):
                    continue
                self.logger.debug("Running rule %s on %s", rule.name, source.filename or "<input>")
                result.diagnostics.extend(rule.check(source))
        except MalformedTreeError as exc:
            self.logger.warning("Skipping %s: malformed tree (%s)", source.filename or "<input>", exc)
            result.diagnostics = []
            result.error = str(exc)
            return result
        result.diagnostics.sort(key=_position_key)
        return result

    def lint_document(
        self,
        payload: Mapping[str, Any],
        *,
        filename: Optional[str] = None,
        text: Optional[str] = None,
    ) -> LintResult:
        """Lint a host payload: a bare program or ``{"filename", "source", "ast"}``."""
        if "ast" in payload and isinstance(payload.get("ast"), Mapping):
            filename = filename or payload.get("filename")
            text = text if text is not None else payload.get("source")
            payload = payload["ast"]
        try:
            tree = load_tree(payload, text)
        except MalformedTreeError as exc:
            self.logger.warning("Skipping %s: malformed tree (%s)", filename or "<input>", exc)
            return LintResult(filename=filename, error=str(exc), text=text)
        return self.lint(SourceFile(tree=tree, text=text, filename=filename))

    def lint_path(self, path: Path) -> LintResult:
        """Lint a JSON tree dump; a bare program reads its source beside the dump."""
        payload = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(payload, Mapping):
            return LintResult(filename=str(path), error="tree dump must contain a JSON object")
        if "ast" in payload:
            return self.lint_document(payload, filename=payload.get("filename") or str(path))
        source_path = source_path_for(path)
        text = source_path.read_text(encoding="utf-8") if source_path.exists() else None
        return self.lint_document(payload, filename=str(source_path), text=text)


def source_path_for(dump_path: Path) -> Path:
    """``Foo.vue.json`` holds the tree of ``Foo.vue``."""
    if dump_path.suffix == ".json":
        return dump_path.with_suffix("")
    return dump_path


def _position_key(diagnostic: Diagnostic) -> tuple:
    node = diagnostic.node
    start = node.start if node.start is not None else -1
    return (node.line or 0, node.column or 0, start, diagnostic.rule)


__all__ = ["LintResult", "Linter", "source_path_for"]
