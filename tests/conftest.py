import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Undo handlers installed by configure_logging so they don't outlive a test's streams"""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)
