import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Rectangle

from .algebra import cell_position


def _outline_toggles(ax, plan, x, color):
    for i in plan:
        r, c = cell_position(int(i), x)
        ax.add_patch(
            Rectangle(
                (c - 0.5, r - 0.5),
                1,
                1,
                edgecolor=color,
                facecolor="none",
                linewidth=2,
            )
        )


def show_box(state, plan=(), ax=None, title=None, toggle_color="red", cmap="Greys"):
    """Draw a box state; locked cells dark, toggled cells outlined."""
    state = np.asarray(state, dtype=bool)
    y, x = state.shape
    if ax is None:
        _, ax = plt.subplots(figsize=(max(2.0, 0.5 * x), max(2.0, 0.5 * y)))
    ax.imshow(state.astype(float), cmap=cmap, vmin=0.0, vmax=1.0)
    _outline_toggles(ax, plan, x, toggle_color)
    ax.set_xticks(range(x))
    ax.set_yticks(range(y))
    ax.set_xlabel("col")
    ax.set_ylabel("row")
    if title is not None:
        ax.set_title(title)
    return ax


def show_solve(before, after, plan, titles=("Before", "After")):
    """
    Side-by-side view of a solve: the initial state with the planned toggles
    outlined, and the state after replaying them.
    """
    _, axes = plt.subplots(1, 2, figsize=(7.2, 3.5), constrained_layout=True)
    show_box(before, plan, ax=axes[0], title=titles[0])
    show_box(after, ax=axes[1], title=titles[1])
    return axes


def save_solve(path, before, after, plan) -> None:
    axes = show_solve(before, after, plan)
    fig = axes[0].figure
    fig.savefig(path)
    plt.close(fig)
