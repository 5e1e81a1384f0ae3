"""Shared fixtures for the simulation tests."""

import pytest


class ScriptedRandom:
    """Random source that replays a fixed sequence of random() values."""

    def __init__(self, values, default: float = 0.0):
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def never_fire():
    """Random source under which no invader ever fires."""
    return ScriptedRandom([], default=0.0)


@pytest.fixture
def scripted():
    """Factory for scripted random sources."""
    return ScriptedRandom
