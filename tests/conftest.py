import logging

import numpy as np
import pytest


@pytest.fixture(autouse=True)
def _seed_numpy_rng():
    """Ensure deterministic noise generation for reproducible tests."""
    np.random.seed(0)


@pytest.fixture
def restore_logging():
    """Put back root handlers replaced by setup_logging()."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
