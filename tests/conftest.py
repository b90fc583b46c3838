from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from sfclint.config import LintConfig
from sfclint.linter import Linter


@pytest.fixture
def lint_config(tmp_path: Path) -> LintConfig:
    """Default configuration rooted at the pytest tmp_path."""
    return LintConfig(root=tmp_path)


@pytest.fixture
def linter(lint_config: LintConfig) -> Linter:
    """Linter running every built-in rule with default options."""
    return Linter(lint_config)


@pytest.fixture
def reset_logging() -> Iterator[None]:
    """Detach handlers installed by configure_logging once the test ends."""
    yield
    logger = logging.getLogger("sfclint")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
