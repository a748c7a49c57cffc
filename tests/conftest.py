"""Pytest configuration - shared fixtures for fluere tests."""
from __future__ import annotations

import os
from pathlib import Path

import pytest

from fluere import RandomSource, parse_palettes

ROOT = Path(__file__).resolve().parents[1]

SAMPLE_PALETTES = """Number_of_palettes 3
Cold        4 0x33ccff 0x0099ff 0x0033cc 0x0033ff
Grayscale   6 0xffffff 0x333333 0xcccccc 0x999999 0x666666 0x000000
Hot         5 0xffff33 0xffcc00 0xff6600 0xbb0033 0xff3300
"""

RED_GREEN = "Number_of_palettes 1\nTest 2 0xff0000 0x00ff00\n"


def pytest_sessionstart(session):
    os.chdir(ROOT)


class ScriptedRandom:
    """Random source that replays fixed values, one queue per kind of draw."""

    def __init__(self, uniforms=(), integers=(), coins=()):
        self.uniforms = list(uniforms)
        self.integers = list(integers)
        self.coins = list(coins)

    def uniform(self):
        return self.uniforms.pop(0)

    def integer(self, n):
        value = self.integers.pop(0)
        assert 0 <= value < n, f"scripted integer {value} outside 0..{n - 1}"
        return value

    def coin(self):
        return self.coins.pop(0)


@pytest.fixture
def scripted():
    """Factory for ScriptedRandom."""
    return ScriptedRandom


@pytest.fixture
def rng():
    """Seeded random source."""
    return RandomSource(20090704)


@pytest.fixture
def sample_palettes():
    """Three-palette list in the classic file format."""
    return parse_palettes(SAMPLE_PALETTES)


@pytest.fixture
def red_green():
    """Single two-color palette, red then green."""
    return parse_palettes(RED_GREEN)[0]
