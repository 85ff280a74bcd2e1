from __future__ import annotations

import itertools

import numpy as np
import pytest

from securebox.algebra import (
    build_A,
    build_system,
    cell_position,
    gf2_back_substitute,
    gf2_forward_eliminate,
    gf2_min_weight_solution,
    gf2_rank,
    gf2_solve_first_fit,
    gf2_solve_with_nullspace,
    is_reachable,
    linear_index,
)
from securebox.box import SecureBox
from securebox.shuffle import shuffle_state

# sizes on which the first-fit elimination is checked exhaustively below
SIZES = [(1, 1), (1, 4), (1, 5), (5, 1), (2, 2), (2, 3), (3, 2), (3, 3), (3, 4), (4, 3), (4, 4)]


def _mod2(A: np.ndarray, x: np.ndarray) -> np.ndarray:
    return (A.astype(np.int64) @ x.astype(np.int64)) % 2


def test_index_mapping_roundtrip() -> None:
    y, x = 3, 5
    seen = set()
    for row, col in itertools.product(range(y), range(x)):
        i = linear_index(row, col, x)
        assert cell_position(i, x) == (row, col)
        seen.add(i)
    assert seen == set(range(y * x))


def test_build_A_2x2() -> None:
    expected = np.asarray(
        [
            [1, 1, 1, 0],
            [1, 1, 0, 1],
            [1, 0, 1, 1],
            [0, 1, 1, 1],
        ]
    )
    np.testing.assert_array_equal(build_A(2, 2), expected)


@pytest.mark.parametrize(("y", "x"), SIZES + [(5, 6)])
def test_build_A_symmetric(y: int, x: int) -> None:
    A = build_A(y, x)
    np.testing.assert_array_equal(A, A.T)
    assert np.all(np.diag(A) == 1)
    # each cell is flipped by its row, its column and itself
    np.testing.assert_array_equal(A.sum(axis=1), np.full(y * x, x + y - 1))


@pytest.mark.parametrize(("y", "x"), [(2, 3), (3, 3), (4, 2)])
def test_build_A_matches_toggle(y: int, x: int) -> None:
    A = build_A(y, x)
    for j in range(y * x):
        box = SecureBox(y, x)
        box.toggle(*cell_position(j, x))
        np.testing.assert_array_equal(A[:, j], box.get_state().reshape(-1))


def test_build_A_negative() -> None:
    with pytest.raises(ValueError, match=r"non-negative"):
        build_A(-1, 2)


def test_build_system_reads_state() -> None:
    state = np.array([[True, False, True], [False, False, True]])
    A, b = build_system(state)
    assert A.shape == (6, 6)
    np.testing.assert_array_equal(b, [1, 0, 1, 0, 0, 1])
    assert b.dtype == np.uint8
    # input untouched
    np.testing.assert_array_equal(state, [[True, False, True], [False, False, True]])


@pytest.mark.parametrize(("y", "x"), [(0, 0), (0, 3), (4, 0)])
def test_build_system_empty(y: int, x: int) -> None:
    A, b = build_system(np.zeros((y, x), dtype=bool))
    assert A.shape == (0, 0)
    assert b.shape == (0,)
    assert gf2_solve_first_fit(A, b).shape == (0,)


def test_build_system_baddim() -> None:
    with pytest.raises(ValueError, match=r"2D box state"):
        build_system(np.zeros(4, dtype=bool))


def test_forward_eliminate_baddim() -> None:
    with pytest.raises(ValueError, match=r"square matrix"):
        gf2_forward_eliminate(np.zeros((2, 3), dtype=np.uint8), np.zeros(2, dtype=np.uint8))
    with pytest.raises(ValueError, match=r"Expected b of shape"):
        gf2_forward_eliminate(np.zeros((2, 2), dtype=np.uint8), np.zeros(3, dtype=np.uint8))


def test_forward_eliminate_keeps_rows_paired() -> None:
    A = np.asarray([[0, 1], [1, 1]], dtype=np.uint8)
    b = np.asarray([1, 0], dtype=np.uint8)
    pivcols = gf2_forward_eliminate(A, b)
    assert pivcols == [0, 1]
    np.testing.assert_array_equal(A, [[1, 1], [0, 1]])
    np.testing.assert_array_equal(b, [0, 1])
    np.testing.assert_array_equal(gf2_back_substitute(A, b), [1, 1])


def test_forward_eliminate_3x3_pivots() -> None:
    A = build_A(3, 3)
    b = np.zeros(9, dtype=np.uint8)
    assert gf2_forward_eliminate(A, b) == [0, 1, 2, 3, 4]
    # rows past the rank are cleared
    assert not A[5:].any()


def test_forward_eliminate_row_echelon() -> None:
    A = build_A(4, 4)
    b = np.zeros(16, dtype=np.uint8)
    assert gf2_forward_eliminate(A, b) == list(range(16))
    np.testing.assert_array_equal(np.tril(A, -1), np.zeros((16, 16), dtype=np.uint8))
    assert np.all(np.diag(A) == 1)


@pytest.mark.parametrize(
    ("y", "x", "rank"),
    [(1, 1, 1), (1, 5, 1), (2, 2, 4), (2, 3, 5), (3, 3, 5), (3, 4, 9), (4, 3, 9), (4, 4, 16)],
)
def test_rank(y: int, x: int, rank: int) -> None:
    A = build_A(y, x)
    assert gf2_rank(A) == rank
    pivcols = gf2_forward_eliminate(A.copy(), np.zeros(y * x, dtype=np.uint8))
    assert len(pivcols) == rank


def test_solve_first_fit_leaves_inputs() -> None:
    A = build_A(2, 3)
    b = np.asarray([1, 1, 1, 0, 0, 0], dtype=np.uint8)
    A0, b0 = A.copy(), b.copy()
    gf2_solve_first_fit(A, b)
    np.testing.assert_array_equal(A, A0)
    np.testing.assert_array_equal(b, b0)


@pytest.mark.parametrize(("y", "x"), SIZES)
def test_first_fit_solves_reachable(fx_rng: np.random.Generator, y: int, x: int) -> None:
    A = build_A(y, x)
    for _ in range(20):
        state = shuffle_state(y, x, rng=fx_rng, max_toggles=50)
        b = state.reshape(-1).astype(np.uint8)
        sol = gf2_solve_first_fit(A, b)
        np.testing.assert_array_equal(_mod2(A, sol), b)


@pytest.mark.parametrize(("y", "x"), [(2, 2), (3, 3), (4, 3), (1, 4)])
def test_linearity(fx_rng: np.random.Generator, y: int, x: int) -> None:
    A = build_A(y, x)
    for _ in range(10):
        b1 = shuffle_state(y, x, rng=fx_rng, max_toggles=30).reshape(-1).astype(np.uint8)
        b2 = shuffle_state(y, x, rng=fx_rng, max_toggles=30).reshape(-1).astype(np.uint8)
        x1 = gf2_solve_first_fit(A, b1)
        x2 = gf2_solve_first_fit(A, b2)
        np.testing.assert_array_equal(gf2_solve_first_fit(A, b1 ^ b2), x1 ^ x2)


def test_nullspace_basis() -> None:
    A = build_A(3, 3)
    b = np.zeros(9, dtype=np.uint8)
    x0, basis, ok = gf2_solve_with_nullspace(A, b)
    assert ok
    assert x0 is not None
    assert not x0.any()
    assert len(basis) == 4
    for v in basis:
        assert not _mod2(A, v).any()


def test_nullspace_inconsistent() -> None:
    A = build_A(1, 2)
    x0, basis, ok = gf2_solve_with_nullspace(A, np.asarray([1, 0], dtype=np.uint8))
    assert not ok
    assert x0 is None
    assert basis == []


def test_min_weight_row() -> None:
    A = build_A(1, 4)
    b = np.ones(4, dtype=np.uint8)
    sol, ok = gf2_min_weight_solution(A, b)
    assert ok
    assert int(sol.sum()) == 1
    np.testing.assert_array_equal(_mod2(A, sol), b)


def test_min_weight_not_heavier(fx_rng: np.random.Generator) -> None:
    A = build_A(3, 3)
    for _ in range(10):
        b = shuffle_state(3, 3, rng=fx_rng, max_toggles=40).reshape(-1).astype(np.uint8)
        sol, ok = gf2_min_weight_solution(A, b)
        assert ok
        np.testing.assert_array_equal(_mod2(A, sol), b)
        assert sol.sum() <= gf2_solve_first_fit(A, b).sum()


def test_min_weight_nullity_cap(caplog: pytest.LogCaptureFixture) -> None:
    A = build_A(1, 4)
    b = np.ones(4, dtype=np.uint8)
    with caplog.at_level("WARNING", logger="securebox.algebra"):
        sol, ok = gf2_min_weight_solution(A, b, max_nullity=2)
    assert ok
    np.testing.assert_array_equal(_mod2(A, sol), b)
    assert "exceeds max_nullity=2" in caplog.text


def test_is_reachable() -> None:
    assert is_reachable(np.array([[True, True]]))
    assert not is_reachable(np.array([[True, False]]))
    single = np.zeros((3, 3), dtype=bool)
    single[0, 0] = True
    assert not is_reachable(single)
    # every state of an even-by-even box is reachable
    assert is_reachable(single[:2, :2].copy())
