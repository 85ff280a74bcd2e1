from __future__ import annotations

import logging
from typing import Iterable, Tuple

import numpy as np

from .algebra import cell_position
from .box import SecureBox
from .strategies import FirstFitGauss, Strategy

logger = logging.getLogger(__name__)


def apply_toggles(box: SecureBox, plan: Iterable[int]) -> None:
    """Toggle every linear index in plan once, in order."""
    for i in plan:
        row, col = cell_position(int(i), box.x)
        box.toggle(row, col)


def solve_box(
    box: SecureBox, strategy: Strategy | None = None
) -> Tuple[list[int], bool]:
    """Plan from one state snapshot, replay the plan, and check the box.

    Returns the applied plan (linear indices) and whether the box is still
    locked.
    """
    strategy = strategy or FirstFitGauss()
    if box.y == 0 or box.x == 0:
        return [], box.is_locked()

    plan = strategy.plan(box.get_state())
    apply_toggles(box, plan)

    locked = box.is_locked()
    logger.debug(
        "%dx%d box: %d toggles applied, %s",
        box.y,
        box.x,
        len(plan),
        "still locked" if locked else "opened",
    )
    return plan, locked


def open_box(box: SecureBox, strategy: Strategy | None = None) -> bool:
    """Solve the box in place. Returns True if it is still locked afterwards."""
    _, locked = solve_box(box, strategy)
    return locked


def open_new_box(
    y: int,
    x: int,
    rng: np.random.Generator | None = None,
    strategy: Strategy | None = None,
    max_toggles: int = 1000,
) -> bool:
    """Build a scrambled y-by-x box and try to open it."""
    box = SecureBox.shuffled(y, x, rng=rng, max_toggles=max_toggles)
    return open_box(box, strategy)
