import argparse
import logging
import sys

from securebox.box import SecureBox
from securebox.config import load_config
from securebox.shuffle import make_rng
from securebox.solver import solve_box
from securebox.strategies import STRATEGY_NAMES, make_strategy


def positive_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="securebox",
        description="Scramble a y-by-x secure box and unlock it over GF(2).",
    )
    ap.add_argument("y", type=positive_int, help="Number of rows")
    ap.add_argument("x", type=positive_int, help="Number of columns")
    ap.add_argument("--config", default=None, help="YAML config path")
    ap.add_argument("--seed", type=int, default=None, help="Shuffle seed")
    ap.add_argument(
        "--strategy", choices=STRATEGY_NAMES, default=None, help="Solver strategy"
    )
    ap.add_argument(
        "--max-toggles",
        type=int,
        default=None,
        help="Upper bound on random toggles used to scramble the box",
    )
    ap.add_argument("--plot", default=None, help="Save a before/after figure here")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)
    seed = args.seed if args.seed is not None else cfg["shuffle"]["seed"]
    max_toggles = (
        args.max_toggles
        if args.max_toggles is not None
        else int(cfg["shuffle"]["max_toggles"])
    )
    strat_name = args.strategy or cfg["solver"]["strategy"]
    strategy = make_strategy(
        strat_name, params={"max_nullity": cfg["solver"]["max_nullity"]}
    )

    box = SecureBox.shuffled(args.y, args.x, rng=make_rng(seed), max_toggles=max_toggles)
    before = box.get_state()
    plan, locked = solve_box(box, strategy)

    if args.plot:
        from securebox.viz import save_solve

        save_solve(args.plot, before, box.get_state(), plan)

    if locked:
        print("BOX: LOCKED!")
    else:
        print("BOX: OPENED!")
    return int(locked)


if __name__ == "__main__":
    sys.exit(main())
