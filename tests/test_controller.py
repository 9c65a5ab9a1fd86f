"""
Tests for AppController: editor buffer isolation, save semantics, weight
logging, calendar navigation and screen rendering.
"""

from datetime import date
from itertools import count

import pytest

from lift_log.cli.controller import (
    AppController,
    CalendarView,
    EditorView,
    NoActiveEditorError,
    WeekView,
    WeightView,
)
from lift_log.core.ascii_plot import render_line_chart
from lift_log.core.models import Exercise, SetEntry, Template
from lift_log.io.serializers import ValidationError
from lift_log.io.storage import MemoryStorage
from lift_log.io.tracker_store import TrackerStore

TODAY = date(2024, 3, 15)


@pytest.fixture
def store():
    ids = count(1)
    return TrackerStore(MemoryStorage(), id_generator=lambda: next(ids))


@pytest.fixture
def controller(store):
    return AppController(store, today=lambda: TODAY)


def _saved_workout(controller: AppController, title: str = "Push", day: str = "2024-03-04") -> int:
    controller.create_new_workout()
    controller.set_title(title)
    controller.set_date(day)
    idx = controller.add_exercise("Bench")
    controller.update_set(idx, 0, "weight", "100")
    controller.update_set(idx, 0, "reps", "5")
    return controller.save_workout().id


class TestNavigation:
    def test_initial_state(self, controller, store):
        assert controller.active_tab == "week"
        assert controller.active_week_id == store.get_weeks()[0].id
        assert controller.calendar_cursor == date(2024, 3, 1)

    def test_add_week_switches_to_it(self, controller, store):
        controller.show_tab("weight")
        week_id = controller.add_week()

        assert controller.active_tab == "week"
        assert controller.active_week_id == week_id
        assert store.get_week(week_id).name == "Week 2"

    def test_select_week_closes_editor(self, controller, store):
        week2 = controller.add_week()
        controller.create_new_workout()

        controller.select_week(store.get_weeks()[0].id)

        assert controller.editing_workout is None
        assert controller.active_week_id != week2

    def test_select_unknown_week(self, controller):
        with pytest.raises(KeyError):
            controller.select_week(999)

    def test_unknown_tab(self, controller):
        with pytest.raises(ValueError):
            controller.show_tab("settings")

    def test_tab_bar(self, controller):
        controller.add_week()
        tabs = controller.render().tabs

        assert [t.label for t in tabs] == ["Week 1", "Week 2", "Weight", "Calendar"]
        assert [t.active for t in tabs] == [False, True, False, False]


class TestEditor:
    def test_new_workout_defaults(self, controller):
        controller.create_new_workout()
        workout = controller.editing_workout
        assert workout.title == "New Workout"
        assert workout.date == "2024-03-15"
        assert workout.exercises == []
        assert workout.is_new

    def test_actions_need_open_editor(self, controller):
        with pytest.raises(NoActiveEditorError):
            controller.add_exercise("Bench")
        with pytest.raises(NoActiveEditorError):
            controller.save_workout()

    def test_template_is_applied_by_value(self, controller, store):
        store.add_template(Template(name="Arms", exercises=[Exercise(name="Curl", sets=[SetEntry(20, 12)])]))
        controller.create_new_workout()

        assert controller.apply_template("Arms")
        controller.update_set(0, 0, "weight", "25")
        controller.rename_exercise(0, "Hammer Curl")

        template = store.get_template("Arms")
        assert template.exercises[0].name == "Curl"
        assert template.exercises[0].sets[0].weight == 20
        assert controller.editing_workout.title == "Arms"

    def test_template_replaces_exercises(self, controller):
        controller.create_new_workout()
        controller.add_exercise("Bench")

        assert controller.apply_template("Push")
        assert controller.editing_workout.exercises == []

    def test_unknown_or_empty_template(self, controller):
        controller.create_new_workout()
        assert not controller.apply_template("")
        assert not controller.apply_template("Nope")

    def test_template_not_allowed_on_saved_workout(self, controller):
        workout_id = _saved_workout(controller)
        controller.edit_workout(workout_id)
        with pytest.raises(ValueError):
            controller.apply_template("Push")

    def test_cancel_leaves_store_untouched(self, controller, store):
        workout_id = _saved_workout(controller)
        controller.edit_workout(workout_id)
        controller.set_title("Changed")
        controller.update_set(0, 0, "weight", "999")
        controller.add_exercise("Dips")

        controller.cancel_edit()

        stored = store.get_workout(workout_id)
        assert stored.title == "Push"
        assert stored.exercises[0].sets[0].weight == 100
        assert len(stored.exercises) == 1
        assert controller.editing_workout is None

    def test_save_new_adds_to_active_week(self, controller, store):
        week_id = controller.add_week()
        workout_id = _saved_workout(controller)

        assert store.get_week(week_id).workout_ids == [workout_id]
        assert store.get_weeks()[0].workout_ids == []
        assert controller.editing_workout is None

    def test_save_existing_updates_in_place(self, controller, store):
        workout_id = _saved_workout(controller)
        controller.edit_workout(workout_id)
        controller.set_title("Heavy Push")

        saved = controller.save_workout()

        assert saved.id == workout_id
        assert store.get_workout(workout_id).title == "Heavy Push"
        assert store.get_weeks()[0].workout_ids == [workout_id]
        assert len(store.get_workouts()) == 1

    def test_new_exercise_has_one_blank_set(self, controller):
        controller.create_new_workout()
        idx = controller.add_exercise()
        assert controller.editing_workout.exercises[idx] == Exercise(name="", sets=[SetEntry(0, 0)])

    def test_add_set_copies_previous(self, controller):
        controller.create_new_workout()
        idx = controller.add_exercise("Squat")
        controller.update_set(idx, 0, "weight", "140")
        controller.update_set(idx, 0, "reps", "5")

        controller.add_set(idx)
        controller.update_set(idx, 1, "reps", "4")

        sets = controller.editing_workout.exercises[idx].sets
        assert sets == [SetEntry(140, 5), SetEntry(140, 4)]

    def test_add_set_after_removing_all(self, controller):
        controller.create_new_workout()
        idx = controller.add_exercise("Squat")
        controller.remove_set(idx, 0)
        controller.add_set(idx)
        assert controller.editing_workout.exercises[idx].sets == [SetEntry()]

    def test_update_set_coerces_garbage_to_zero(self, controller):
        controller.create_new_workout()
        idx = controller.add_exercise("Row")
        controller.update_set(idx, 0, "weight", "heavy")
        controller.update_set(idx, 0, "reps", "")
        assert controller.editing_workout.exercises[idx].sets[0] == SetEntry(0.0, 0.0)

    def test_remove_exercise_shifts_open_charts(self, controller):
        controller.create_new_workout()
        for name in ("A", "B", "C"):
            controller.add_exercise(name)
        controller.toggle_one_rm_chart(0)
        controller.toggle_one_rm_chart(2)

        controller.remove_exercise(0)

        assert controller.expanded_charts == {1}
        assert [e.name for e in controller.editing_workout.exercises] == ["B", "C"]

    def test_invalid_date(self, controller):
        controller.create_new_workout()
        with pytest.raises(ValidationError):
            controller.set_date("2024-02-31")

    def test_save_as_template_copies_exercises(self, controller, store):
        controller.create_new_workout()
        controller.add_exercise("Deadlift")

        assert controller.save_as_template("Heavy Day")
        controller.rename_exercise(0, "RDL")

        assert store.get_template("Heavy Day").exercises[0].name == "Deadlift"
        assert controller.editing_workout is not None

    def test_save_as_template_needs_name(self, controller, store):
        controller.create_new_workout()
        assert not controller.save_as_template("")
        assert not controller.save_as_template(None)
        assert len(store.get_templates()) == 3


class TestOneRmChart:
    def test_toggle(self, controller):
        controller.create_new_workout()
        controller.add_exercise("Bench")
        assert controller.toggle_one_rm_chart(0)
        assert not controller.toggle_one_rm_chart(0)

    def test_chart_from_history(self, controller):
        _saved_workout(controller, day="2024-03-01")
        _saved_workout(controller, day="2024-03-08")
        controller.create_new_workout()
        controller.add_exercise("bench")
        controller.toggle_one_rm_chart(0)

        view = controller.render().content

        assert isinstance(view, EditorView)
        chart = view.exercises[0].chart
        assert chart.labels == ["2024-03-01", "2024-03-08"]

    def test_hidden_chart_not_built(self, controller):
        controller.create_new_workout()
        controller.add_exercise("Bench")
        view = controller.render().content
        assert view.exercises[0].chart is None
        assert not view.exercises[0].chart_visible


class TestWeight:
    def test_log_weight(self, controller, store):
        assert controller.log_weight("2024-03-15", "81.4")
        assert store.get_weight_for_date("2024-03-15").weight == 81.4

    @pytest.mark.parametrize(
        "day, raw",
        [("", "80"), ("15/03/2024", "80"), ("2024-03-15", ""), ("2024-03-15", "abc"), ("2024-03-15", "0"), ("2024-03-15", "nan")],
    )
    def test_rejected_input_is_ignored(self, controller, store, day, raw):
        assert not controller.log_weight(day, raw)
        assert store.get_weights() == []

    def test_weight_view(self, controller):
        controller.log_weight("2024-03-10", "82")
        controller.log_weight("2024-03-12", "81")
        controller.show_tab("weight")

        view = controller.render().content

        assert isinstance(view, WeightView)
        assert view.default_date == "2024-03-15"
        assert [e.date for e in view.entries] == ["2024-03-10", "2024-03-12"]
        assert view.chart is not None


class TestCalendar:
    def test_month_navigation_wraps(self, controller):
        controller.show_tab("calendar")
        for _ in range(3):
            controller.prev_month()
        assert controller.calendar_cursor == date(2023, 12, 1)

        controller.next_month()
        view = controller.render().content
        assert isinstance(view, CalendarView)
        assert (view.grid.year, view.grid.month) == (2024, 1)

    def test_workout_in_any_week_marks_day(self, controller):
        controller.add_week()
        _saved_workout(controller, day="2024-03-04")
        controller.show_tab("calendar")

        grid = controller.render().content.grid

        assert grid.days[3].workout_done
        assert grid.days[4].workout_missed

    def test_day_details(self, controller):
        _saved_workout(controller, day="2024-03-04")
        controller.log_weight("2024-03-04", "80")
        controller.show_tab("calendar")

        controller.show_day_details("2024-03-04")
        details = controller.render().day_details

        assert details.workout.title == "Push"
        assert details.weight.weight == 80

        controller.close_day_details()
        assert controller.render().day_details is None

    def test_day_details_cleared_on_tab_switch(self, controller):
        controller.show_tab("calendar")
        controller.show_day_details("2024-03-04")
        controller.show_tab("weight")
        assert controller.render().day_details is None


class TestRender:
    def test_editor_has_priority(self, controller):
        controller.create_new_workout()
        controller.show_tab("calendar")

        view = controller.render().content

        assert isinstance(view, EditorView)
        assert view.template_names == ["Push", "Pull", "Legs"]

    def test_saved_workout_hides_templates(self, controller):
        workout_id = _saved_workout(controller)
        controller.edit_workout(workout_id)
        view = controller.render().content
        assert not view.is_new
        assert view.template_names == []

    def test_week_view_lists_workouts(self, controller):
        _saved_workout(controller, title="Push")
        _saved_workout(controller, title="Pull", day="2024-03-06")

        view = controller.render().content

        assert isinstance(view, WeekView)
        assert [(w.title, w.date) for w in view.workouts] == [("Push", "2024-03-04"), ("Pull", "2024-03-06")]


class TestNonFiniteInput:
    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "1e309"])
    def test_set_fields_become_zero(self, controller, raw):
        controller.create_new_workout()
        idx = controller.add_exercise("Bench")
        controller.update_set(idx, 0, "weight", raw)
        controller.update_set(idx, 0, "reps", raw)
        assert controller.editing_workout.exercises[idx].sets[0] == SetEntry(0.0, 0.0)

    @pytest.mark.parametrize("raw", ["inf", "-inf", "1e309", "nan"])
    def test_weight_rejected(self, controller, store, raw):
        assert not controller.log_weight("2024-03-10", raw)
        assert store.get_weights() == []

    def test_weight_tab_renders_after_rejected_input(self, controller):
        controller.log_weight("2024-03-09", "81")
        controller.log_weight("2024-03-10", "inf")
        controller.log_weight("2024-03-11", "80")
        controller.show_tab("weight")

        chart = controller.render().content.chart

        assert "Bodyweight" in render_line_chart(chart)

    def test_one_rm_chart_with_overflowing_weight(self, controller):
        controller.create_new_workout()
        idx = controller.add_exercise("Bench")
        controller.update_set(idx, 0, "weight", "1e309")
        controller.update_set(idx, 0, "reps", "5")
        controller.add_set(idx)
        controller.update_set(idx, 1, "weight", "100")
        controller.toggle_one_rm_chart(idx)

        chart = controller.render().content.exercises[idx].chart

        assert chart.datasets[0].data == pytest.approx([100 * (1 + 5 / 30)])
        assert "Estimated 1RM" in render_line_chart(chart)


class TestDayDetailsAcrossWeeks:
    def test_workout_from_another_week(self, controller):
        _saved_workout(controller, title="Early", day="2024-03-04")
        controller.add_week()
        controller.show_tab("calendar")
        controller.show_day_details("2024-03-04")

        assert controller.render().day_details.workout.title == "Early"
