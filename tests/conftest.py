import numpy as np # type: ignore
import pytest # type: ignore

def pytest_configure(config):
    """Add markers to the pytest configuration."""
    config.addinivalue_line("markers", "quick: mark test as quick to run")
    config.addinivalue_line("markers", "full: mark test as part of the full test suite")
    config.addinivalue_line("markers", "slow: mark test as very slow to run")


class ScriptedRng:
    """Stand-in for numpy.random.Generator that replays fixed uniform draws."""

    def __init__(self, draws):
        self.draws = list(draws)
        self.used = 0

    def _next(self) -> float:
        value = self.draws[self.used]
        self.used += 1
        return value

    def random(self, size=None):
        if size is None:
            return self._next()
        return np.array([self._next() for _ in range(size)], dtype=float)


@pytest.fixture
def scripted_rng():
    """Factory for generators that return the given uniform draws in order."""
    return ScriptedRng


@pytest.fixture
def rng():
    """Seeded generator for reproducible runs."""
    return np.random.default_rng(42)
