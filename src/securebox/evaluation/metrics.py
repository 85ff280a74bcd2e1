from __future__ import annotations


def opened(locked: bool) -> int:
    return int(not locked)


def toggles_used(plan) -> int:
    # a toggle applied twice cancels, so only odd counts matter
    counts: dict[int, int] = {}
    for i in plan:
        counts[int(i)] = counts.get(int(i), 0) + 1
    return sum(1 for c in counts.values() if c % 2 == 1)


def expected_outcome(reachable: int, is_open: int) -> str:
    # "ok" when the outcome matches reachability, else which way it went wrong
    if reachable == 1 and is_open == 0:
        return "missed"
    if reachable == 0 and is_open == 1:
        return "impossible"
    return "ok"
