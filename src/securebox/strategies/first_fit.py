from __future__ import annotations

import logging

import numpy as np

from ..algebra import build_system, gf2_solve_first_fit
from .base import Strategy

logger = logging.getLogger(__name__)


class FirstFitGauss(Strategy):
    """Gaussian elimination plus back-substitution, taking whatever solution
    the elimination order yields.
    """

    def plan(self, state: np.ndarray) -> list[int]:
        A, b = build_system(state)
        solution = gf2_solve_first_fit(A, b)
        plan = [int(i) for i in np.flatnonzero(solution)]
        logger.debug("first-fit plan: %d toggles", len(plan))
        return plan
