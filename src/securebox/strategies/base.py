from __future__ import annotations
from typing import Protocol

import numpy as np


class Strategy(Protocol):
    def plan(self, state: np.ndarray) -> list[int]: ...
