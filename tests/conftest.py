"""Pytest configuration and shared fixtures."""

import pytest
import random
import sys
from pathlib import Path

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture
def rng():
    """A seeded random number generator, so that every test is reproducible."""
    return random.Random(42)


@pytest.fixture
def default_config():
    """Config holding the default values."""
    from neatdag.run.config import Config
    return Config()


@pytest.fixture
def identity():
    """The identity activation, which keeps expected network outputs easy to compute."""
    from neatdag.activations import identity_activation
    return identity_activation
