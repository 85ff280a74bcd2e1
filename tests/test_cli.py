from __future__ import annotations

from pathlib import Path

import matplotlib
import pytest

from securebox.cli import main

matplotlib.use("Agg")


@pytest.mark.parametrize(("y", "x"), [("1", "1"), ("2", "2"), ("4", "3")])
def test_opens(capsys: pytest.CaptureFixture[str], y: str, x: str) -> None:
    assert main([y, x, "--seed", "0"]) == 0
    assert capsys.readouterr().out.strip() == "BOX: OPENED!"


def test_min_weight(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["3", "3", "--seed", "1", "--strategy", "min_weight"]) == 0
    assert "BOX: OPENED!" in capsys.readouterr().out


@pytest.mark.parametrize("argv", [["0", "2"], ["2", "-1"], ["a", "2"], ["2"], []])
def test_bad_arguments(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2


def test_bad_strategy() -> None:
    with pytest.raises(SystemExit):
        main(["2", "2", "--strategy", "guess"])


def test_config_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cfg = tmp_path / "box.yaml"
    cfg.write_text("securebox:\n  shuffle:\n    seed: 3\n    max_toggles: 10\n")
    assert main(["3", "4", "--config", str(cfg)]) == 0
    assert "OPENED" in capsys.readouterr().out


def test_plot(tmp_path: Path) -> None:
    out = tmp_path / "solve.png"
    assert main(["2", "3", "--seed", "4", "--plot", str(out)]) == 0
    assert out.exists()
