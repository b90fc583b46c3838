"""Apply diagnostic fixes to source text."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from .models import Diagnostic, Fix


@dataclass
class FixOutcome:
    """Result of applying a batch of fixes to one file."""

    text: str
    applied: List[Diagnostic] = field(default_factory=list)
    skipped: List[Diagnostic] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def apply_fixes(text: str, diagnostics: Iterable[Diagnostic]) -> FixOutcome:
    """Apply each diagnostic's fix as one unit, in source order.

    A fix overlapping one that was already applied is skipped whole, so the
    caller can run another pass on the new text to pick it up.
    """
    fixable = [diagnostic for diagnostic in diagnostics if diagnostic.fix is not None and diagnostic.fix.edits]
    fixable.sort(key=lambda diagnostic: diagnostic.fix.range)

    outcome = FixOutcome(text=text)
    pieces: List[str] = []
    cursor = 0
    for diagnostic in fixable:
        fix = diagnostic.fix
        start, end = fix.range
        if start < cursor or end > len(text):
            outcome.skipped.append(diagnostic)
            continue
        pieces.append(text[cursor:start])
        pieces.append(_render(text, fix))
        cursor = end
        outcome.applied.append(diagnostic)
    pieces.append(text[cursor:])
    outcome.text = "".join(pieces)
    return outcome


def _render(text: str, fix: Fix) -> str:
    """Text replacing ``fix.range`` once every edit is applied."""
    pieces: List[str] = []
    cursor = fix.range[0]
    for edit in fix.edits:
        edit_start, edit_end = edit.range
        pieces.append(text[cursor:edit_start])
        pieces.append(edit.text)
        cursor = edit_end
    return "".join(pieces)


__all__ = ["FixOutcome", "apply_fixes"]
