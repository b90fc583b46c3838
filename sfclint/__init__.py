"""Structural checks for single-file component sources."""

from .linter import Linter, LintResult
from .models import Diagnostic, Fix, TextEdit
from .tree import MalformedTreeError, Node, load_tree

__version__ = "0.1.0"

__all__ = [
    "Diagnostic",
    "Fix",
    "LintResult",
    "Linter",
    "MalformedTreeError",
    "Node",
    "TextEdit",
    "load_tree",
]
