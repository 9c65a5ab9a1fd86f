"""
Smoke tests for the lift-log CLI.

Tests basic functionality:
- App runs and shows help
- Storage file is created on first use
- Weeks, workouts, templates and weights can be added and listed
- Charts and the calendar render
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from lift_log.cli.main import app


runner = CliRunner()


@pytest.fixture
def data_path():
    """Temporary storage file location."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "storage.json"


def _run(data_path: Path, *args: str):
    return runner.invoke(app, [*args, "--data-path", str(data_path)])


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "lift-log" in result.output or "tracker" in result.output.lower()

    def test_weeks_creates_storage(self, data_path):
        result = _run(data_path, "weeks")

        assert result.exit_code == 0
        assert data_path.exists()
        assert "Week 1" in result.output

    def test_add_week(self, data_path):
        _run(data_path, "add-week")
        result = _run(data_path, "weeks", "--json")

        assert result.exit_code == 0
        weeks = json.loads(result.output)
        assert [w["name"] for w in weeks] == ["Week 1", "Week 2"]

    def test_log_workout_and_history(self, data_path):
        result = _run(
            data_path,
            "log-workout",
            "--title", "Heavy Push",
            "--date", "2024-03-04",
            "-e", "Bench:100x5,100x5,100x4",
            "-e", "Dips:20x8x3",
        )
        assert result.exit_code == 0
        assert "Heavy Push" in result.output

        result = _run(data_path, "history", "--json")
        workouts = json.loads(result.output)
        assert len(workouts) == 1
        assert workouts[0]["date"] == "2024-03-04"
        assert len(workouts[0]["exercises"][1]["sets"]) == 3

        result = _run(data_path, "show-workout", str(workouts[0]["id"]))
        assert result.exit_code == 0
        assert "Bench" in result.output

    def test_log_workout_from_template(self, data_path):
        _run(data_path, "add-template", "Upper", "-e", "Row:60x10", "-e", "Press")
        result = _run(data_path, "log-workout", "--template", "Upper", "--date", "2024-03-05")
        assert result.exit_code == 0

        workouts = json.loads(_run(data_path, "history", "--json").output)
        assert workouts[0]["title"] == "Upper"
        assert [e["name"] for e in workouts[0]["exercises"]] == ["Row", "Press"]

    def test_log_workout_rejects_bad_input(self, data_path):
        assert _run(data_path, "log-workout", "--date", "2024-02-30").exit_code == 1
        assert _run(data_path, "log-workout", "-e", "Bench:heavy").exit_code == 1
        assert _run(data_path, "log-workout", "--week", "5").exit_code == 1
        assert _run(data_path, "log-workout", "--template", "Nope").exit_code == 1

    def test_show_missing_workout(self, data_path):
        assert _run(data_path, "show-workout", "42").exit_code == 1

    def test_templates(self, data_path):
        result = _run(data_path, "templates", "--json")
        assert [t["name"] for t in json.loads(result.output)] == ["Push", "Pull", "Legs"]

    def test_weights_and_chart(self, data_path):
        for day, weight in [("2024-03-01", "82"), ("2024-03-05", "81.5"), ("2024-03-09", "80.8")]:
            result = _run(data_path, "log-weight", weight, "--date", day)
            assert result.exit_code == 0

        result = _run(data_path, "log-weight", "80.5", "--date", "2024-03-09")
        assert "Updated" in result.output

        result = _run(data_path, "weights")
        assert result.exit_code == 0
        assert "Bodyweight" in result.output
        assert "Trend" in result.output

        entries = json.loads(_run(data_path, "weights", "--json").output)
        assert [e["weight"] for e in entries] == [82.0, 81.5, 80.5]

    def test_log_weight_rejects_bad_input(self, data_path):
        assert _run(data_path, "log-weight", "0").exit_code == 1
        assert _run(data_path, "log-weight", "80", "--date", "yesterday").exit_code == 1

    def test_calendar(self, data_path):
        _run(data_path, "log-workout", "--date", "2024-03-04")
        result = _run(data_path, "calendar", "--month", "2024-03", "--json")

        assert result.exit_code == 0
        grid = json.loads(result.output)
        assert grid["leading_blanks"] == 5
        assert grid["days"][3]["workout_done"] is True

        result = _run(data_path, "calendar", "--month", "2024-03")
        assert result.exit_code == 0
        assert "March 2024" in result.output

    def test_calendar_bad_month(self, data_path):
        assert _run(data_path, "calendar", "--month", "March").exit_code == 1

    def test_day(self, data_path):
        _run(data_path, "log-weight", "80", "--date", "2024-03-04")
        result = _run(data_path, "day", "2024-03-04", "--json")

        details = json.loads(result.output)
        assert details["workout"] is None
        assert details["weight"]["weight"] == 80.0

        result = _run(data_path, "day", "2024-03-04")
        assert "No workout recorded." in result.output

    def test_onerepmax(self, data_path):
        _run(data_path, "log-workout", "--date", "2024-03-01", "-e", "Squat:100x10")
        _run(data_path, "log-workout", "--date", "2024-03-08", "-e", "squat:140x1")

        result = _run(data_path, "onerepmax", "SQUAT", "--json")
        points = json.loads(result.output)
        assert points == [
            {"date": "2024-03-01", "one_rm": 133.33},
            {"date": "2024-03-08", "one_rm": 140.0},
        ]

        result = _run(data_path, "onerepmax", "Squat")
        assert result.exit_code == 0
        assert "Estimated 1RM" in result.output

    def test_export(self, data_path):
        _run(data_path, "add-week")
        result = _run(data_path, "export")

        state = json.loads(result.output)
        assert set(state) == {"weeks", "workouts", "templates", "weights"}
        assert len(state["weeks"]) == 2

    def test_interactive_quit(self, data_path):
        result = runner.invoke(app, ["--data-path", str(data_path)], input="q\n")
        assert result.exit_code == 0
        assert "Week 1" in result.output

    @pytest.mark.parametrize("raw", ["inf", "nan", "1e309"])
    def test_log_weight_rejects_non_finite(self, data_path, raw):
        result = _run(data_path, "log-weight", raw, "--date", "2024-01-01")
        assert result.exit_code == 1

        result = _run(data_path, "weights", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_unreadable_storage_file_is_kept(self, data_path):
        data_path.parent.mkdir(parents=True, exist_ok=True)
        data_path.write_text("{half-written", encoding="utf-8")

        result = _run(data_path, "weeks")

        assert result.exit_code == 0
        backup = data_path.with_name("storage.json.corrupt")
        assert backup.read_text(encoding="utf-8") == "{half-written"
