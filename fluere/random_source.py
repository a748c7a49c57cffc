"""
Explicit random stream for knot generation and color table building.

Every generator in fluere takes one of these as an argument instead of
reaching for process-wide random state, so two drawings seeded the same way
come out identical and never disturb each other.
"""

import numpy as np


class RandomSource:
    """Uniform / integer / coin-flip draws backed by numpy's Generator.

    Anything with the same three methods can stand in for it (tests use a
    scripted source).
    """

    def __init__(self, seed=None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def uniform(self):
        """Float in [0, 1)"""
        return float(self._rng.random())

    def integer(self, n):
        """Integer uniformly chosen from 0..n-1"""
        return int(self._rng.integers(0, n))

    def coin(self):
        """True or False with probability 1/2"""
        return bool(self._rng.integers(0, 2))

    def spawn(self):
        """Independent child stream (for a second consumer of the same seed)"""
        return RandomSource(int(self._rng.integers(0, 2**63 - 1)))
