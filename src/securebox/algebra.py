from __future__ import annotations

import itertools
import logging
from typing import List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def linear_index(row: int, col: int, x: int) -> int:
    """Row-major position of cell (row, col) in a box with x columns."""
    return row * x + col


def cell_position(i: int, x: int) -> Tuple[int, int]:
    """Inverse of linear_index."""
    return divmod(i, x)


def build_A(y: int, x: int) -> np.ndarray:
    """Return the NxN toggle matrix A over GF(2) for a y-by-x box.

    A[i, j] is 1 iff toggle j flips cell i: j shares the row of i, the
    column of i, or is i itself.
    """
    if y < 0 or x < 0:
        raise ValueError(f"Box dimensions must be non-negative, got {(y, x)}")
    N = y * x
    A = np.zeros((N, N), dtype=np.uint8)

    for row in range(y):
        for col in range(x):
            i = linear_index(row, col, x)
            A[i, i] = 1
            for k in range(x):
                A[i, linear_index(row, k, x)] = 1
            for k in range(y):
                A[i, linear_index(k, col, x)] = 1
    return A


def build_system(state: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Build (A, b) for the current box state (read once, not modified)."""
    state = np.asarray(state, dtype=bool)
    if state.ndim != 2:
        raise ValueError(f"Expected a 2D box state, got shape {state.shape}")
    y, x = state.shape
    A = build_A(y, x)
    b = state.reshape(-1).astype(np.uint8)
    logger.debug("built %dx%d system for a %dx%d box", A.shape[0], A.shape[1], y, x)
    return A, b


def _check_square(A: np.ndarray, b: np.ndarray) -> int:
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"A must be a square matrix, got shape {A.shape}")
    n = A.shape[0]
    if b.shape != (n,):
        raise ValueError(f"Expected b of shape {(n,)}, got {b.shape}")
    return n


def gf2_forward_eliminate(A: np.ndarray, b: np.ndarray) -> list[int]:
    """Reduce (A | b) to row-echelon form over GF(2), in place.

    The pivot for column c is moved to row c. Columns without a pivot in
    rows >= c are free and skipped. Returns the list of pivot columns.
    """
    n = _check_square(A, b)
    pivcols: list[int] = []

    for col in range(n):
        # first row at or below the diagonal with a 1 in this column
        candidates = np.flatnonzero(A[col:, col])
        if candidates.size == 0:
            continue
        pivot = col + int(candidates[0])

        if pivot != col:
            A[[col, pivot]] = A[[pivot, col]]
            b[[col, pivot]] = b[[pivot, col]]

        below = col + 1 + np.flatnonzero(A[col + 1 :, col])
        if below.size:
            A[below, col:] ^= A[col, col:]
            b[below] ^= b[col]
        pivcols.append(col)

    logger.debug("forward elimination: rank %d of %d", len(pivcols), n)
    return pivcols


def gf2_back_substitute(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Recover x from a row-echelon (A | b), last row first.

    Rows of free columns get whatever the substitution yields; no particular
    solution is preferred among several.
    """
    n = _check_square(A, b)
    x = np.zeros((n,), dtype=np.uint8)
    for row in range(n - 1, -1, -1):
        acc = int(b[row])
        if row + 1 < n:
            acc ^= int(np.bitwise_and(A[row, row + 1 :], x[row + 1 :]).sum() % 2)
        x[row] = acc
    return x


def gf2_solve_first_fit(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Eliminate and back-substitute on private copies of A and b."""
    A = (np.asarray(A) % 2).astype(np.uint8)
    b = (np.asarray(b) % 2).astype(np.uint8).reshape(-1)
    gf2_forward_eliminate(A, b)
    return gf2_back_substitute(A, b)


def gf2_rref_augmented(
    A: np.ndarray, b: np.ndarray
) -> Tuple[np.ndarray, list[int]]:
    """Return RREF of augmented matrix [A|b] over GF(2) and list of pivot columns."""
    A = (A % 2).astype(np.uint8)
    b = (b % 2).astype(np.uint8).reshape(-1, 1)
    m, n = A.shape
    M = np.concatenate([A, b], axis=1)  # shape (m, n+1)

    row = 0
    pivcols: list[int] = []
    for col in range(n):
        if row == m:
            break
        nz = np.flatnonzero(M[row:, col])
        if nz.size == 0:
            continue
        pivot = row + int(nz[0])
        if pivot != row:
            M[[row, pivot]] = M[[pivot, row]]
        # eliminate ALL other rows (Gauss-Jordan)
        others = np.flatnonzero(M[:, col])
        others = others[others != row]
        if others.size:
            M[others, :] ^= M[row, :]
        pivcols.append(col)
        row += 1
    return M, pivcols


def gf2_solve_with_nullspace(
    A: np.ndarray, b: np.ndarray
) -> Tuple[Optional[np.ndarray], List[np.ndarray], bool]:
    """Solve A x = b over GF(2), and return a nullspace basis of A.

    Returns:
        x0: one particular solution (length n, uint8) or None if inconsistent
        basis: list of nullspace basis vectors v (length n, uint8) with A v = 0
        solvable: bool
    """
    m, n = A.shape
    R, pivcols = gf2_rref_augmented(A, b)
    R_A = R[:, :n]
    R_b = R[:, n]

    # 0...0 | 1 rows
    if np.any((R_A.sum(axis=1) == 0) & (R_b == 1)):
        return None, [], False

    # free vars = 0; in RREF each pivot row only mentions its pivot and free columns
    x0 = np.zeros((n,), dtype=np.uint8)
    for ri, pc in enumerate(pivcols):
        x0[pc] = R_b[ri]

    pivset = set(pivcols)
    frees = [j for j in range(n) if j not in pivset]
    basis: list[np.ndarray] = []
    for f in frees:
        v = np.zeros((n,), dtype=np.uint8)
        v[f] = 1
        for ri, pc in enumerate(pivcols):
            v[pc] = R_A[ri, f]
        basis.append(v)

    return x0, basis, True


def gf2_min_weight_solution(
    A: np.ndarray, b: np.ndarray, max_nullity: Optional[int] = None
) -> Tuple[Optional[np.ndarray], bool]:
    """Return the minimum-Hamming-weight solution to A x = b (if solvable).

    When the nullspace has more than max_nullity basis vectors the search is
    skipped and the particular solution is returned.
    """
    x0, basis, ok = gf2_solve_with_nullspace(A, b)
    if not ok or x0 is None:
        return None, False
    k = len(basis)
    if max_nullity is not None and k > max_nullity:
        logger.warning(
            "nullspace dimension %d exceeds max_nullity=%d, "
            "skipping minimum-weight search",
            k,
            max_nullity,
        )
        return x0, True

    best = x0.copy()
    best_w = int(best.sum())
    for r in range(1, k + 1):
        for combo in itertools.combinations(range(k), r):
            cand = x0.copy()
            for idx in combo:
                cand ^= basis[idx]
            w = int(cand.sum())
            if w < best_w:
                best, best_w = cand, w
    return best, True


def gf2_rank(A: np.ndarray) -> int:
    """Rank of A over GF(2)."""
    if A.size == 0:
        return 0
    _, pivcols = gf2_rref_augmented(A, np.zeros((A.shape[0],), dtype=np.uint8))
    return len(pivcols)


def is_reachable(state: np.ndarray) -> bool:
    """True iff some toggle set clears the given box state."""
    A, b = build_system(state)
    _, _, solvable = gf2_solve_with_nullspace(A, b)
    return solvable
