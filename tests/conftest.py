"""Pytest configuration and shared fixtures."""

import logging
from collections.abc import Iterator

import pytest

# The timebench testing plugin is registered via a ``pytest11`` entry
# point for external consumers.  Our own suite disables it
# (``-p no:timebench``) and loads it here instead, so the import chain
# happens after ``pytest-cov`` has started tracing.
pytest_plugins = ["timebench.testing._plugin"]


@pytest.fixture
def _restore_root_logger() -> Iterator[None]:
    """Save and restore root logger handlers and level.

    Ensures tests that call ``configure_logging()`` don't leak
    state across subsequent tests.
    """
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    yield
    for h in root.handlers:
        if h not in original_handlers:
            h.close()
    root.handlers = original_handlers
    root.setLevel(original_level)
