"""Tests for the jaxgam-diagnose command."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest
from typer.testing import CliRunner

from jaxgam import AdditiveModel, StepFunction
from jaxgam.cli import app, main, run
from jaxgam.gam import save

runner = CliRunner()


@pytest.fixture
def inputs(tmp_path: Path) -> tuple[Path, Path]:
    dataset = tmp_path / "data.txt"
    dataset.write_text("1 5\n2 5\n3 ?\n")

    model = AdditiveModel(intercept=1.0)
    model.add((1,), StepFunction(1, [np.inf], [10.0], 10.0))
    model.add((0,), StepFunction(0, [1.0, 2.0, np.inf], [1.0, 2.0, 3.0]))
    model_path = tmp_path / "model.txt"
    save(model, model_path)
    return dataset, model_path


def read_output(path: Path) -> list[tuple[str, float]]:
    lines = []
    for line in path.read_text().splitlines():
        term, _, weight = line.rpartition(": ")
        lines.append((term, float(weight)))
    return lines


class TestDiagnoseCommand:
    def test_writes_sorted_terms(self, inputs, tmp_path):
        """Test one line per term, largest weight first."""
        dataset, model_path = inputs
        out = tmp_path / "weights.txt"

        result = runner.invoke(
            app, ["-d", str(dataset), "-i", str(model_path), "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        lines = read_output(out)
        assert [term for term, _ in lines] == ["[0]", "[1]"]
        assert lines[0][1] == pytest.approx(2.0 / 3.0)
        assert lines[1][1] == 0.0

    def test_l1_mode(self, inputs, tmp_path):
        """Test the L1 mode writes mean absolute deviations."""
        dataset, model_path = inputs
        out = tmp_path / "weights.txt"
        dataset.write_text("1 5\n1 5\n3 ?\n")

        result = runner.invoke(
            app,
            ["-d", str(dataset), "-i", str(model_path), "-o", str(out), "-m", "L1"],
        )

        assert result.exit_code == 0, result.output
        # contributions [1, 1, 3]: mean 5/3
        assert read_output(out)[0][1] == pytest.approx(8.0 / 9.0)

    def test_verbose(self, inputs, tmp_path):
        """Test verbose mode reports progress."""
        dataset, model_path = inputs
        out = tmp_path / "weights.txt"

        result = runner.invoke(
            app,
            ["-d", str(dataset), "-i", str(model_path), "-o", str(out), "--verbose"],
        )

        assert result.exit_code == 0, result.output
        assert "Loaded 3 instances and 2 components" in result.output
        assert "Wrote 2 terms" in result.output

    def test_csv_dataset(self, inputs, tmp_path):
        """Test a delimited dataset."""
        _, model_path = inputs
        dataset = tmp_path / "data.csv"
        dataset.write_text("1,5\n2,5\n3,\n")
        out = tmp_path / "weights.txt"

        result = runner.invoke(
            app,
            [
                "-d", str(dataset),
                "-i", str(model_path),
                "-o", str(out),
                "--delimiter", ",",
            ],
        )

        assert result.exit_code == 0, result.output
        assert read_output(out)[0][1] == pytest.approx(2.0 / 3.0)


class TestExitCodes:
    def test_success(self, inputs, tmp_path):
        """Test a successful run returns 0."""
        dataset, model_path = inputs
        out = tmp_path / "weights.txt"

        code = main(["-d", str(dataset), "-i", str(model_path), "-o", str(out)])

        assert code == 0
        assert out.exists()

    def test_missing_option(self, inputs):
        """Test a missing required option returns 1."""
        dataset, model_path = inputs
        assert main(["-d", str(dataset), "-i", str(model_path)]) == 1

    def test_unknown_mode(self, inputs, tmp_path):
        """Test an unknown mode returns 1 and writes nothing."""
        dataset, model_path = inputs
        out = tmp_path / "weights.txt"

        code = main(
            ["-d", str(dataset), "-i", str(model_path), "-o", str(out), "-m", "L3"]
        )

        assert code == 1
        assert not out.exists()

    def test_missing_dataset_file(self, inputs, tmp_path):
        """Test a dataset path that does not exist returns 1."""
        _, model_path = inputs
        out = tmp_path / "weights.txt"

        code = main(
            ["-d", str(tmp_path / "nope.txt"), "-i", str(model_path), "-o", str(out)]
        )

        assert code == 1

    def test_run_exits_with_usage_code(self, monkeypatch):
        """Test the console script exits with 1 on bad arguments."""
        monkeypatch.setattr(sys, "argv", ["jaxgam-diagnose", "-m", "L1"])

        with pytest.raises(SystemExit) as excinfo:
            run()

        assert excinfo.value.code == 1
