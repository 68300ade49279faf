"""
Deterministic pseudo-random sequence generator.
Every pipeline stage builds its own generator from an explicit seed so that
results depend only on the input dataset and never on global random state.
"""

import numpy as np

UINT32_MASK = 0xFFFFFFFF
STATE_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply, low word only."""
    return (a * b) & UINT32_MASK


class DeterministicRNG:
    """
    Mulberry32 generator producing floats in [0, 1).
    Two instances created with the same seed yield identical streams.
    """

    def __init__(self, seed: int):
        """
        Initialize the generator.

        Args:
            seed: Any integer; only the low 32 bits are used
        """
        self.seed = int(seed)
        self._state = self.seed & UINT32_MASK

    def next(self) -> float:
        """Advance the state and return the next value in [0, 1)."""
        self._state = (self._state + STATE_INCREMENT) & UINT32_MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & UINT32_MASK
        return ((t ^ (t >> 14)) & UINT32_MASK) / TWO_POW_32

    __call__ = next

    def centered(self) -> float:
        """Return the next value mapped to [-1, 1)."""
        return (self.next() - 0.5) * 2

    def draw(self, n: int) -> np.ndarray:
        """Draw the next n values as an array."""
        return np.array([self.next() for _ in range(n)], dtype=float)
