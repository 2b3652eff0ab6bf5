"""Shared fixtures."""

import logging
import sys
from pathlib import Path

import pytest

from src.utils import logging_config


@pytest.fixture(scope="session")
def project_root():
    """Project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def restore_logging():
    """Undo setup_logging(): its handlers, root level, context, excepthook."""
    root = logging.getLogger()
    level = root.level
    hook = sys.excepthook
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, logging_config.ContextFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
    logging.captureWarnings(False)
    logging_config.pop_context()
    logging_config._installed.clear()
    sys.excepthook = hook
