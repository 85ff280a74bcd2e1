import argparse
import csv
import multiprocessing as mp
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

import numpy as np
import yaml

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from securebox.algebra import build_system, gf2_forward_eliminate, is_reachable  # noqa: E402
from securebox.box import SecureBox  # noqa: E402
from securebox.evaluation.metrics import (  # noqa: E402
    expected_outcome,
    opened,
    toggles_used,
)
from securebox.shuffle import shuffle_state  # noqa: E402
from securebox.solver import solve_box  # noqa: E402
from securebox.strategies import make_strategy  # noqa: E402

mp.freeze_support()


def parse_strategies(cfg_strats):
    """Parse strategy configs from YAML."""
    parsed = []
    for item in cfg_strats:
        if isinstance(item, str):
            parsed.append({"name": item, "params": {}})
        elif isinstance(item, dict) and "name" in item:
            parsed.append({"name": item["name"], "params": item.get("params") or {}})
        else:
            raise ValueError(f"Invalid strategy spec: {item}")
    return parsed


def parse_sizes(cfg_sizes):
    sizes = []
    for item in cfg_sizes:
        y, x = (int(v) for v in item)
        if y <= 0 or x <= 0:
            raise ValueError(f"Invalid box size: {item}")
        sizes.append((y, x))
    return sizes


def _task_seed(base_seed: int, *coords: int) -> int:
    """Generate deterministic seed for each task."""
    ss = np.random.SeedSequence([int(base_seed)] + [int(c) for c in coords])

    return int(
        ss.generate_state(1, dtype=np.uint64)[0] & np.uint64((1 << 63) - 1)
    )


def make_jobs(sizes, strat_specs, trials, batch_size):
    """One job per (size, strategy, trial range)."""
    ranges = [
        (i, min(i + batch_size, trials)) for i in range(0, trials, batch_size)
    ]
    for y, x in sizes:
        for spec in strat_specs:
            for lo, hi in ranges:
                yield {
                    "y": y,
                    "x": x,
                    "strategy_spec": spec,
                    "trial_lo": lo,
                    "trial_hi": hi,
                }


def _system_rank(state) -> int:
    A, b = build_system(state)
    return len(gf2_forward_eliminate(A, b))


def _run_batch(job):
    """Scramble and open one batch of boxes."""
    y, x = job["y"], job["x"]
    base_seed = job["base_seed"]
    strat_name = job["strategy_spec"]["name"]
    strategy = make_strategy(strat_name, params=job["strategy_spec"]["params"])

    rows = []
    for trial in range(job["trial_lo"], job["trial_hi"]):
        # same initial box for every strategy at a given (size, trial)
        rng = np.random.default_rng(_task_seed(base_seed, y, x, trial))
        init = shuffle_state(y, x, rng=rng, max_toggles=job["max_toggles"])
        box = SecureBox(y, x, init)

        start_time = time.perf_counter()
        plan, locked = solve_box(box, strategy)
        time_ms = (time.perf_counter() - start_time) * 1000
        reachable = int(is_reachable(init))
        is_open = opened(locked)

        rows.append(
            {
                "y": y,
                "x": x,
                "strategy": strat_name,
                "seed": base_seed,
                "trial": trial,
                "initial_locked": int(init.sum()),
                "toggles_used": toggles_used(plan),
                "rank": _system_rank(init),
                "reachable": reachable,
                "opened": is_open,
                "outcome": expected_outcome(reachable, is_open),
                "time_ms": time_ms,
            }
        )
    return rows


def run_pool(jobs, writer, workers, total_jobs=None):
    """Run jobs in parallel and write results as they complete."""
    ctx = mp.get_context("spawn")
    done = 0
    total_rows = 0
    failures = 0
    start_time = time.time()

    with ProcessPoolExecutor(max_workers=workers, mp_context=ctx) as ex:
        futures = [ex.submit(_run_batch, j) for j in jobs]
        total_jobs = total_jobs or len(futures)
        for fut in as_completed(futures):
            rows = fut.result()
            writer.writerows(rows)
            done += 1
            total_rows += len(rows)
            failures += sum(1 for r in rows if r["outcome"] != "ok")

            elapsed = time.time() - start_time
            pct = done / total_jobs
            print(
                f"\r[progress] {done}/{total_jobs} batches ({pct:>6.1%}) | "
                f"{total_rows:>7,} boxes | {failures:,} unexpected | "
                f"elapsed: {int(elapsed // 60)}m {int(elapsed % 60)}s",
                end="",
                flush=True,
            )
    print()
    return failures


def main():
    n_cpus = os.cpu_count() or 1
    default_workers = max(n_cpus - 1, 1)

    ap = argparse.ArgumentParser()
    ap.add_argument(
        "--config",
        default=str(ROOT / "experiments" / "configs" / "sweep.yaml"),
    )
    ap.add_argument("--out", default=None, help="Output CSV path")
    ap.add_argument(
        "--workers", type=int, default=default_workers, help="Number of workers"
    )
    ap.add_argument(
        "--batch-size", type=int, default=50, help="Boxes per batch"
    )
    args = ap.parse_args()

    with open(args.config, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)["experiment"]

    sizes = parse_sizes(cfg["sizes"])
    trials = int(cfg["trials"])
    base_seed = int(cfg.get("seed", 0))
    max_toggles = int(cfg.get("max_toggles", 1000))
    strat_specs = parse_strategies(cfg.get("strategies", ["first_fit"]))
    out_dir = Path(cfg.get("output_dir", "results/runs"))
    out_dir.mkdir(parents=True, exist_ok=True)
    out_csv = args.out or str(out_dir / "sweep.csv")

    jobs = list(make_jobs(sizes, strat_specs, trials, args.batch_size))
    for j in jobs:
        j.update({"base_seed": base_seed, "max_toggles": max_toggles})

    fieldnames = [
        "y",
        "x",
        "strategy",
        "seed",
        "trial",
        "initial_locked",
        "toggles_used",
        "rank",
        "reachable",
        "opened",
        "outcome",
        "time_ms",
    ]

    print(
        f"\nStarting {len(jobs):,} batches ({len(sizes)} sizes x {trials} trials) "
        f"with {args.workers} workers...\n"
    )

    start_time = time.time()
    with open(out_csv, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        failures = run_pool(jobs, writer, workers=args.workers)

    elapsed = time.time() - start_time
    print(f"\nDone in {int(elapsed/60)}m {int(elapsed%60)}s")
    print(f"Output: {out_csv}\n")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
