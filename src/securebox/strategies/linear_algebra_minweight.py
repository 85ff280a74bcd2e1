from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..algebra import build_system, gf2_min_weight_solution, gf2_solve_first_fit
from .base import Strategy

logger = logging.getLogger(__name__)


class LinearAlgebraMinWeight(Strategy):
    """Pick the toggle set with the fewest toggles among all exact solutions.

    Inconsistent systems fall back to the first-fit plan, which leaves the box
    locked but keeps the outcome a plain locked/unlocked check.
    """

    def __init__(self, max_nullity: Optional[int] = 16):
        self.max_nullity = max_nullity

    def reset(self, params: dict | None = None) -> None:
        if params is not None and "max_nullity" in params:
            mn = params["max_nullity"]
            self.max_nullity = None if mn is None else int(mn)

    def plan(self, state: np.ndarray) -> list[int]:
        system_matrix, target_state = build_system(state)
        solution, is_valid = gf2_min_weight_solution(
            system_matrix, target_state, max_nullity=self.max_nullity
        )
        if not is_valid or solution is None:
            logger.debug("system is inconsistent, using first-fit plan")
            solution = gf2_solve_first_fit(system_matrix, target_state)
        return [int(i) for i in np.flatnonzero(solution)]
