from securebox.strategies.base import Strategy
from securebox.strategies.first_fit import FirstFitGauss
from securebox.strategies.linear_algebra_minweight import LinearAlgebraMinWeight

STRATEGY_NAMES = ("first_fit", "min_weight")


def make_strategy(name: str, params: dict | None = None) -> Strategy:
    name = name.lower()
    if name == "first_fit":
        return FirstFitGauss()
    if name == "min_weight":
        strat = LinearAlgebraMinWeight()
        strat.reset(params)
        return strat
    raise ValueError(f"Unknown strategy: {name}")
