from __future__ import annotations

from securebox.evaluation.metrics import expected_outcome, opened, toggles_used


def test_opened() -> None:
    assert opened(False) == 1
    assert opened(True) == 0


def test_toggles_used_collapses_pairs() -> None:
    assert toggles_used([]) == 0
    assert toggles_used([3, 1, 3]) == 1
    assert toggles_used([0, 1, 2]) == 3


def test_expected_outcome() -> None:
    assert expected_outcome(1, 1) == "ok"
    assert expected_outcome(0, 0) == "ok"
    assert expected_outcome(1, 0) == "missed"
    assert expected_outcome(0, 1) == "impossible"
