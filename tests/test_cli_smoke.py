"""
Minimal smoke tests for gymtrack CLI.

Tests basic functionality:
- App runs without errors
- Calculator commands print results and JSON
- Invalid input exits with an error code
- Week-by-week recomputation from an exercise file
"""

import json

import pytest
from typer.testing import CliRunner

from gymtrack.cli.main import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep the user's model.yaml out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("GYMTRACK_HOME", str(home))
    return home


@pytest.fixture
def exercise_file(tmp_path):
    path = tmp_path / "bench.yaml"
    path.write_text(
        "exercise:\n"
        "  id: bench\n"
        "  name: Bench Press\n"
        "  one_rm: 120\n"
        "  min_rep_range: 0.83\n"
        "  max_rep_range: 0.89\n"
        "  max_weight_stack: 200\n"
        "  rounding: 2.5\n"
        "  max_sets: 8\n"
        "sessions:\n"
        "  - {date: '2026-01-05', block: 1, weight: 100, sets: [6, {reps: 8, weight: 95}]}\n"
        "  - {date: '2026-01-12', block: 2, weight: 100, sets: []}\n"
    )
    return path


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        """Test that app runs and shows help."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "gymtrack" in result.output or "1RM" in result.output

    def test_weight(self):
        result = runner.invoke(app, ["weight", "100", "0.8", "0.85", "180", "2.5", "--block", "2", "--prev", "82"])
        assert result.exit_code == 0
        assert "82.5 kg" in result.output

    def test_sets_shows_status(self):
        result = runner.invoke(app, ["sets", "8@100, 8@100", "--block", "2"])
        assert result.exit_code == 0
        assert "Suggested sets" in result.output

    def test_summary_warns_when_counting_stops(self):
        result = runner.invoke(app, ["summary", "8@100, 0, 10@100"])
        assert result.exit_code == 0
        assert "Stopped counting" in result.output

    def test_deload(self):
        result = runner.invoke(app, ["deload", "5"])
        assert result.exit_code == 0
        assert "deload" in result.output

    def test_advance(self):
        result = runner.invoke(app, ["advance", "1", "4"])
        assert result.exit_code == 0
        assert "block 2, week 1" in result.output

    def test_weeks_table(self, exercise_file):
        result = runner.invoke(app, ["weeks", str(exercise_file)])
        assert result.exit_code == 0
        assert "Bench Press" in result.output


class TestJSONOutput:
    """--json output is machine-readable and carries the computed values."""

    def test_weight_json(self):
        result = runner.invoke(app, ["weight", "100", "0.8", "0.85", "180", "2.5", "--block", "1", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["suggested_weight"] == 80.0
        assert data["deload"] is True
        assert data["rep_range"] == {"min": 6, "max": 10}

    def test_sets_json(self):
        result = runner.invoke(
            app,
            ["sets", "8, 6", "--block", "1", "--multiplier", "0.5", "--volume", "Low", "--json"],
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["suggested_sets"] == 2
        assert data["completed_sets"] == 2
        assert data["goal"] == pytest.approx(9.58)
        assert data["state"] == "complete"

    def test_summary_json(self):
        result = runner.invoke(app, ["summary", "8@100, 0, 10@100", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["completed_sets"] == 1
        assert data["total_effective_reps"] == pytest.approx(5.65)

    def test_one_rm_json(self):
        result = runner.invoke(app, ["one-rm", "100", "5", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["estimated_1rm"] == 112.5

    def test_rep_range_json(self):
        result = runner.invoke(app, ["rep-range", "80", "100", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"min": 6, "max": 10}

    def test_deload_json(self):
        result = runner.invoke(app, ["deload", "5", "--json"])
        assert json.loads(result.output)["deload"] is True

        result = runner.invoke(app, ["deload", "5", "--frequency", "0", "--json"])
        assert json.loads(result.output)["deload"] is False

    def test_progress_json(self):
        result = runner.invoke(app, ["progress", "100", "110", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["percent"] == pytest.approx(10.0)
        assert data["trend"] == "increase"

    def test_advance_json(self):
        result = runner.invoke(app, ["advance", "1", "4", "--json"])
        assert json.loads(result.output) == {"block": 2, "week": 1}

    def test_weeks_json(self, exercise_file):
        result = runner.invoke(app, ["weeks", str(exercise_file), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["exercise"] == "Bench Press"

        week1, week2 = data["weeks"]
        assert week1["deload"] is True
        assert week1["suggested_weight"] == 100.0
        assert week1["completed_sets"] == 2
        assert week1["suggested_sets"] == 3
        assert week2["suggested_sets"] == 1
        assert week2["estimated_1rm"] is None
        assert data["progress"]["trend"] in ("increase", "decrease", "stable")

    def test_user_config_changes_deload_schedule(self, isolated_home):
        (isolated_home / "model.yaml").write_text("periodization:\n  DELOAD_FREQUENCY: 2\n")
        result = runner.invoke(app, ["deload", "3", "--json"])
        data = json.loads(result.output)
        assert data["frequency"] == 2
        assert data["deload"] is True


class TestInvalidInput:

    def test_one_rm_out_of_range(self):
        result = runner.invoke(app, ["one-rm", "100", "40"])
        assert result.exit_code == 1

    def test_invalid_volume(self):
        result = runner.invoke(app, ["sets", "8", "--volume", "Extreme"])
        assert result.exit_code == 1

    def test_invalid_sets_string(self):
        result = runner.invoke(app, ["summary", "eight@heavy"])
        assert result.exit_code == 1

    def test_weight_without_valid_increment(self):
        result = runner.invoke(app, ["weight", "100", "0.8", "0.85", "180", "0"])
        assert result.exit_code == 1

    def test_advance_rejects_zero(self):
        result = runner.invoke(app, ["advance", "0", "1"])
        assert result.exit_code == 1

    def test_weeks_missing_file(self, tmp_path):
        result = runner.invoke(app, ["weeks", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 1
