from __future__ import annotations

import numpy as np


class SecureBox:
    """A y-by-x grid of locks; True means locked.

    The state is only changed through toggle(). get_state() hands out copies.
    """

    def __init__(self, y: int, x: int, state: np.ndarray | None = None):
        if y < 0 or x < 0:
            raise ValueError(f"Box dimensions must be non-negative, got {(y, x)}")
        self.y = int(y)
        self.x = int(x)
        if state is None:
            self.state = np.zeros((self.y, self.x), dtype=bool)
        else:
            state = np.asarray(state)
            if state.shape != (self.y, self.x):
                raise ValueError(
                    f"Expected state of shape {(self.y, self.x)}, got {state.shape}"
                )
            self.state = state.astype(bool, copy=True)

    @classmethod
    def shuffled(
        cls,
        y: int,
        x: int,
        rng: np.random.Generator | None = None,
        max_toggles: int = 1000,
    ) -> "SecureBox":
        from .shuffle import shuffle_state

        return cls(y, x, shuffle_state(y, x, rng=rng, max_toggles=max_toggles))

    def toggle(self, row: int, col: int) -> None:
        """Flip (row, col), then its whole row, then its whole column."""
        if not (0 <= row < self.y and 0 <= col < self.x):
            raise IndexError(
                f"Toggle position {(row, col)} outside a {self.y}x{self.x} box"
            )
        self.state[row, col] ^= True
        self.state[row, :] ^= True
        self.state[:, col] ^= True

    def is_locked(self) -> bool:
        return bool(self.state.any())

    def get_state(self) -> np.ndarray:
        return self.state.copy()

    def count_locked(self) -> int:
        return int(self.state.sum())

    def copy(self) -> "SecureBox":
        return SecureBox(self.y, self.x, self.state)

    def __repr__(self):
        return f"SecureBox(y={self.y}, x={self.x}, locked={self.count_locked()})"

    def __str__(self) -> str:
        return "\n".join(
            "".join("1" if cell else "0" for cell in row) for row in self.state
        )
