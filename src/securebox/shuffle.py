from __future__ import annotations

import numpy as np

from .box import SecureBox


def shuffle_state(
    y: int,
    x: int,
    rng: np.random.Generator | None = None,
    max_toggles: int = 1000,
) -> np.ndarray:
    """Scramble an all-open y-by-x box with a random number of random toggles.

    Draws t in [0, max_toggles) and applies t toggles at uniform positions,
    so the result is always reachable from the open box.
    """
    rng = rng or np.random.default_rng()
    box = SecureBox(y, x)
    if y == 0 or x == 0 or max_toggles <= 0:
        return box.get_state()

    t = int(rng.integers(max_toggles))
    rows = rng.integers(y, size=t)
    cols = rng.integers(x, size=t)
    for r, c in zip(rows, cols):
        box.toggle(int(r), int(c))
    return box.get_state()


def random_cells(
    y: int, x: int, rng: np.random.Generator | None = None
) -> np.ndarray:
    """Independent uniform bits; not necessarily reachable by toggles."""
    rng = rng or np.random.default_rng()
    return rng.random((y, x)) < 0.5


def make_rng(seed: int | None = None) -> np.random.Generator:
    return np.random.default_rng(seed)
