"""
Application controller.

Holds the transient UI state (active tab and week, the workout being edited,
the calendar month) and turns user actions into store calls. render() derives
the whole screen from that state plus a fresh read of the store; callers
repaint once after each action.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date
from typing import Literal

from ..core.calendar import DayDetails, MonthGrid, day_details, month_grid, shift_month
from ..core.charts import ChartConfig, build_one_rm_chart, build_weight_chart
from ..core.config import DATE_FORMAT, NEW_WORKOUT_TITLE
from ..core.metrics import one_rm_chart_points
from ..core.models import Exercise, SetEntry, Template, WeightEntry, Workout
from ..io.serializers import ValidationError, parse_number, validate_date
from ..io.tracker_store import TrackerStore

Tab = Literal["week", "weight", "calendar"]
SetField = Literal["weight", "reps"]

TABS: tuple[Tab, ...] = ("week", "weight", "calendar")


class NoActiveEditorError(RuntimeError):
    """Raised by editor actions when no workout is being edited."""


# =============================================================================
# Screen view model
# =============================================================================


@dataclass
class TabItem:
    """One entry of the tab bar."""

    label: str
    active: bool
    week_id: int | None = None  # None for the Weight and Calendar tabs


@dataclass
class WorkoutSummary:
    id: int
    title: str
    date: str


@dataclass
class WeekView:
    week_id: int
    name: str
    workouts: list[WorkoutSummary] = field(default_factory=list)


@dataclass
class ExerciseView:
    index: int
    exercise: Exercise
    chart_visible: bool = False
    chart: ChartConfig | None = None


@dataclass
class EditorView:
    """The workout being edited; template_names is empty for saved workouts."""

    workout: Workout
    is_new: bool
    template_names: list[str] = field(default_factory=list)
    exercises: list[ExerciseView] = field(default_factory=list)


@dataclass
class WeightView:
    default_date: str
    entries: list[WeightEntry] = field(default_factory=list)
    chart: ChartConfig | None = None


@dataclass
class CalendarView:
    grid: MonthGrid


@dataclass
class Screen:
    """Everything visible for one controller state."""

    tabs: list[TabItem]
    content: EditorView | WeekView | WeightView | CalendarView
    day_details: DayDetails | None = None


# =============================================================================
# Controller
# =============================================================================


class AppController:
    """
    Translates user actions into store calls and renders the screen.

    Editor actions work on a deep copy of the workout; nothing reaches the
    store until save_workout().
    """

    def __init__(self, store: TrackerStore, today: Callable[[], date] = date.today):
        self.store = store
        self.today = today
        self.active_tab: Tab = "week"
        self.active_week_id: int = store.get_weeks()[0].id
        self.editing_workout: Workout | None = None
        self.calendar_cursor: date = today().replace(day=1)
        self.selected_day: str | None = None
        self.expanded_charts: set[int] = set()

    def _today_str(self) -> str:
        return self.today().strftime(DATE_FORMAT)

    def _buffer(self) -> Workout:
        if self.editing_workout is None:
            raise NoActiveEditorError("No workout is being edited")
        return self.editing_workout

    def _exercise(self, ex_idx: int) -> Exercise:
        return self._buffer().exercises[ex_idx]

    def _close_editor(self) -> None:
        self.editing_workout = None
        self.expanded_charts.clear()

    # -- navigation ----------------------------------------------------------

    def add_week(self) -> int:
        """Create the next week and switch to it. Returns its id."""
        week = self.store.add_week()
        self.active_week_id = week.id
        self.active_tab = "week"
        return week.id

    def select_week(self, week_id: int) -> None:
        """Show a week; any open editor is discarded."""
        if self.store.get_week(week_id) is None:
            raise KeyError(f"No week with id {week_id}")
        self.active_tab = "week"
        self.active_week_id = week_id
        self.selected_day = None
        self._close_editor()

    def show_tab(self, tab: Tab) -> None:
        """Switch tab. An open editor keeps priority over the tab content."""
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab!r}. Expected one of {TABS}")
        self.active_tab = tab
        self.selected_day = None

    # -- editor ----------------------------------------------------------------

    def create_new_workout(self) -> None:
        """Open the editor on a blank workout dated today."""
        self.editing_workout = Workout(date=self._today_str(), title=NEW_WORKOUT_TITLE)
        self.expanded_charts.clear()

    def edit_workout(self, workout_id: int) -> None:
        """Open the editor on a copy of a stored workout."""
        stored = self.store.get_workout(workout_id)
        if stored is None:
            raise KeyError(f"No workout with id {workout_id}")
        self.editing_workout = stored.clone()
        self.expanded_charts.clear()

    def set_title(self, title: str) -> None:
        self._buffer().title = title

    def set_date(self, date_str: str) -> None:
        """Change the buffer date; raises ValidationError for non-ISO dates."""
        self._buffer().date = validate_date(date_str)

    def apply_template(self, template_name: str) -> bool:
        """
        Replace the buffer's exercises with a copy of a template's.

        Only offered for workouts that were never saved. Exercises already
        entered are discarded. The buffer title becomes the template name.

        Returns:
            False when the name is empty or unknown, True otherwise
        """
        buffer = self._buffer()
        if not buffer.is_new:
            raise ValueError("Templates can only be applied to new workouts")
        if not template_name:
            return False
        template = self.store.get_template(template_name)
        if template is None:
            return False
        buffer.title = template.name
        buffer.exercises = [ex.clone() for ex in template.exercises]
        self.expanded_charts.clear()
        return True

    def add_exercise(self, name: str = "") -> int:
        """Append an exercise with one blank set. Returns its index."""
        exercises = self._buffer().exercises
        exercises.append(Exercise(name=name, sets=[SetEntry()]))
        return len(exercises) - 1

    def remove_exercise(self, ex_idx: int) -> None:
        exercises = self._buffer().exercises
        if not 0 <= ex_idx < len(exercises):
            raise IndexError(f"Exercise index {ex_idx} out of range")
        del exercises[ex_idx]
        self.expanded_charts = {
            i if i < ex_idx else i - 1 for i in self.expanded_charts if i != ex_idx
        }

    def rename_exercise(self, ex_idx: int, name: str) -> None:
        self._exercise(ex_idx).name = name

    def add_set(self, ex_idx: int) -> None:
        """Append a set copying the previous set's values, or a blank one."""
        sets = self._exercise(ex_idx).sets
        sets.append(sets[-1].clone() if sets else SetEntry())

    def update_set(self, ex_idx: int, set_idx: int, set_field: SetField, raw_value: object) -> None:
        """Set weight or reps; input that is not a number becomes 0."""
        if set_field not in ("weight", "reps"):
            raise ValueError(f"Unknown set field: {set_field!r}")
        entry = self._exercise(ex_idx).sets[set_idx]
        setattr(entry, set_field, parse_number(raw_value))

    def remove_set(self, ex_idx: int, set_idx: int) -> None:
        sets = self._exercise(ex_idx).sets
        if not 0 <= set_idx < len(sets):
            raise IndexError(f"Set index {set_idx} out of range")
        del sets[set_idx]

    def toggle_one_rm_chart(self, ex_idx: int) -> bool:
        """Show or hide an exercise's 1RM chart. Returns the new visibility."""
        self._exercise(ex_idx)
        if ex_idx in self.expanded_charts:
            self.expanded_charts.discard(ex_idx)
            return False
        self.expanded_charts.add(ex_idx)
        return True

    def save_workout(self) -> Workout:
        """
        Store the buffer and close the editor.

        Saved workouts are overwritten; new ones are added to the active week.
        """
        buffer = self._buffer()
        if buffer.id is not None:
            self.store.update_workout(buffer)
            saved = buffer
        else:
            saved = self.store.add_workout(self.active_week_id, buffer)
        self._close_editor()
        return saved

    def save_as_template(self, name: str | None) -> bool:
        """
        Store a copy of the buffer's exercises as a new template.

        The editor stays open. Returns False when no name was given.
        """
        buffer = self._buffer()
        if not name:
            return False
        self.store.add_template(Template(name=name, exercises=[ex.clone() for ex in buffer.exercises]))
        return True

    def cancel_edit(self) -> None:
        """Discard the buffer."""
        self._close_editor()

    # -- bodyweight ------------------------------------------------------------

    def log_weight(self, date_str: str, raw_weight: object) -> bool:
        """
        Record bodyweight for a date.

        Silently ignored (returns False) when the date is empty or invalid or
        the weight does not parse to a finite, non-zero number.
        """
        if not date_str:
            return False
        try:
            validate_date(date_str)
        except ValidationError:
            return False
        weight = parse_number(raw_weight)
        if not weight or not math.isfinite(weight):
            return False
        self.store.add_weight(date_str, weight)
        return True

    # -- calendar --------------------------------------------------------------

    def prev_month(self) -> None:
        self.calendar_cursor = shift_month(self.calendar_cursor, -1)

    def next_month(self) -> None:
        self.calendar_cursor = shift_month(self.calendar_cursor, 1)

    def show_day_details(self, date_str: str) -> None:
        self.selected_day = validate_date(date_str)

    def close_day_details(self) -> None:
        self.selected_day = None

    # -- rendering ---------------------------------------------------------------

    def render(self) -> Screen:
        """Build the full screen from the current state."""
        if self.editing_workout is not None:
            content: EditorView | WeekView | WeightView | CalendarView = self._render_editor()
        elif self.active_tab == "week":
            content = self._render_week()
        elif self.active_tab == "weight":
            content = self._render_weight()
        else:
            content = self._render_calendar()

        details = None
        if self.selected_day is not None:
            day = self.selected_day
            details = day_details(self.store.workouts_on(day), self.store.get_weights(), day)

        return Screen(tabs=self._render_tabs(), content=content, day_details=details)

    def _render_tabs(self) -> list[TabItem]:
        tabs = [
            TabItem(
                label=week.name,
                active=self.active_tab == "week" and self.active_week_id == week.id,
                week_id=week.id,
            )
            for week in self.store.get_weeks()
        ]
        tabs.append(TabItem(label="Weight", active=self.active_tab == "weight"))
        tabs.append(TabItem(label="Calendar", active=self.active_tab == "calendar"))
        return tabs

    def _render_week(self) -> WeekView:
        week = self.store.get_week(self.active_week_id)
        if week is None:
            raise KeyError(f"No week with id {self.active_week_id}")
        summaries = []
        for workout_id in week.workout_ids:
            workout = self.store.get_workout(workout_id)
            if workout is not None:
                summaries.append(WorkoutSummary(id=workout_id, title=workout.title, date=workout.date))
        return WeekView(week_id=week.id, name=week.name, workouts=summaries)

    def _render_editor(self) -> EditorView:
        buffer = self._buffer()
        workouts = self.store.get_workouts()
        exercises = []
        for i, ex in enumerate(buffer.exercises):
            visible = i in self.expanded_charts
            chart = None
            if visible:
                chart = build_one_rm_chart(one_rm_chart_points(workouts, ex, buffer.date), ex.name)
            exercises.append(ExerciseView(index=i, exercise=ex, chart_visible=visible, chart=chart))
        return EditorView(
            workout=buffer,
            is_new=buffer.is_new,
            template_names=[t.name for t in self.store.get_templates()] if buffer.is_new else [],
            exercises=exercises,
        )

    def _render_weight(self) -> WeightView:
        weights = self.store.get_weights()
        return WeightView(
            default_date=self._today_str(),
            entries=list(weights),
            chart=build_weight_chart(weights),
        )

    def _render_calendar(self) -> CalendarView:
        cursor = self.calendar_cursor
        grid = month_grid(
            cursor.year,
            cursor.month,
            (w.date for w in self.store.get_workouts()),
            self.today(),
        )
        return CalendarView(grid=grid)
