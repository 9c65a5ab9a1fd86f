"""
Tests for 1RM estimation and the least-squares trend line.

Expected values are hand-computed from the Epley formula and the OLS
closed form.
"""

import pytest

from lift_log.core.metrics import (
    OneRepMaxPoint,
    calculate_1rm,
    calculate_trend_line,
    exercise_best_1rm,
    one_rm_chart_points,
    one_rm_history,
)
from lift_log.core.models import Exercise, SetEntry, Workout


def _workout(date: str, name: str, *sets: tuple[float, float]) -> Workout:
    return Workout(
        date=date,
        title="w",
        exercises=[Exercise(name=name, sets=[SetEntry(w, r) for w, r in sets])],
    )


class TestEpley:
    def test_single_rep_is_the_weight(self):
        assert calculate_1rm(100, 1) == 100

    def test_ten_reps(self):
        assert calculate_1rm(100, 10) == pytest.approx(133.333, abs=1e-3)

    def test_five_reps(self):
        assert calculate_1rm(60, 5) == pytest.approx(70.0)

    def test_zero_reps_gives_weight(self):
        assert calculate_1rm(80, 0) == 80

    def test_best_set_wins(self):
        ex = Exercise(name="Bench", sets=[SetEntry(100, 5), SetEntry(90, 10), SetEntry(0, 0)])
        assert exercise_best_1rm(ex) == pytest.approx(120.0)

    def test_best_of_blank_sets_is_zero(self):
        assert exercise_best_1rm(Exercise(name="Bench", sets=[SetEntry()])) == 0.0


class TestTrendLine:
    def test_perfect_line(self):
        assert calculate_trend_line([10, 20, 30]) == pytest.approx([10, 20, 30])

    def test_flat(self):
        assert calculate_trend_line([5, 5, 5, 5]) == pytest.approx([5, 5, 5, 5])

    def test_noisy(self):
        # slope = (3*13 - 3*11) / (3*5 - 9) = 1, intercept = (11 - 1*3) / 3
        trend = calculate_trend_line([2, 5, 4])
        assert trend == pytest.approx([8 / 3, 11 / 3, 14 / 3])

    @pytest.mark.parametrize("values", [[], [5]])
    def test_undefined_below_two_points(self, values):
        assert calculate_trend_line(values) is None


class TestHistory:
    def test_case_insensitive_and_sorted(self):
        workouts = [
            _workout("2024-03-10", "bench press", (100, 5)),
            _workout("2024-03-01", "Bench Press", (90, 5)),
            _workout("2024-03-05", "Squat", (140, 5)),
        ]

        history = one_rm_history(workouts, "BENCH PRESS")

        assert [p.date for p in history] == ["2024-03-01", "2024-03-10"]
        assert history[1].one_rm == pytest.approx(100 * (1 + 5 / 30))

    def test_blank_sets_are_skipped(self):
        workouts = [_workout("2024-03-01", "Bench", (0, 0))]
        assert one_rm_history(workouts, "Bench") == []

    def test_first_matching_exercise_only(self):
        workout = Workout(
            date="2024-03-01",
            title="w",
            exercises=[
                Exercise(name="Bench", sets=[SetEntry(50, 1)]),
                Exercise(name="bench", sets=[SetEntry(200, 1)]),
            ],
        )
        assert one_rm_history([workout], "Bench") == [OneRepMaxPoint("2024-03-01", 50)]


class TestChartPoints:
    def test_uses_saved_history(self):
        workouts = [_workout("2024-03-01", "Bench", (100, 1))]
        editing = Exercise(name="bench", sets=[SetEntry(200, 1)])

        points = one_rm_chart_points(workouts, editing, "2024-03-08")

        assert points == [OneRepMaxPoint("2024-03-01", 100)]

    def test_provisional_point_without_history(self):
        editing = Exercise(name="Deadlift", sets=[SetEntry(180, 1)])

        points = one_rm_chart_points([], editing, "2024-03-08")

        assert points == [OneRepMaxPoint("2024-03-08", 180)]

    def test_nothing_for_unnamed_exercise(self):
        editing = Exercise(name="", sets=[SetEntry(100, 5)])
        assert one_rm_chart_points([], editing, "2024-03-08") == []

    def test_nothing_for_blank_sets(self):
        editing = Exercise(name="Row", sets=[SetEntry()])
        assert one_rm_chart_points([], editing, "2024-03-08") == []

    def test_overflowing_estimate_is_ignored(self):
        ex = Exercise(name="Bench", sets=[SetEntry(1.7e308, 10), SetEntry(100, 1)])
        assert exercise_best_1rm(ex) == 100
