"""
CLI view formatters using Rich for pretty console output.

Paints controller Screens and formats workouts, weights and charts.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.ascii_plot import render_line_chart
from ..core.calendar import DayCell, DayDetails, MonthGrid
from ..core.charts import ChartConfig
from ..core.config import DEFAULT_CHART_HEIGHT, DEFAULT_CHART_WIDTH
from ..core.metrics import OneRepMaxPoint, calculate_1rm, exercise_best_1rm
from ..core.models import Exercise, Template, Week, WeightEntry, Workout
from .controller import CalendarView, EditorView, Screen, TabItem, WeekView, WeightView

console = Console()

WEEKDAY_HEADERS = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

# Calendar day class -> (Rich style, suffix mark); applied in css_classes order
DAY_CLASS_STYLES = {
    "today": ("bold underline", ""),
    "workout-done": ("green", "✓"),
    "workout-missed": ("red", "✗"),
}


def _fmt_num(value: float) -> str:
    """100.0 -> "100", 102.5 -> "102.5"."""
    return f"{value:g}"


def format_sets(exercise: Exercise) -> str:
    """Compact "100x5, 100x5" form of an exercise's sets."""
    if not exercise.sets:
        return "-"
    return ", ".join(f"{_fmt_num(s.weight)}x{_fmt_num(s.reps)}" for s in exercise.sets)


# =============================================================================
# Screen parts
# =============================================================================


def format_tab_bar(tabs: list[TabItem]) -> str:
    """One line of tabs; the active tab is highlighted."""
    parts = []
    for i, tab in enumerate(tabs, 1):
        label = escape(tab.label)
        key = str(i) if tab.week_id is not None else tab.label[0].lower()
        if tab.active:
            parts.append(f"[bold reverse] {key}:{label} [/bold reverse]")
        else:
            parts.append(f"[dim]{key}:[/dim]{label}")
    return "  ".join(parts)


def format_week_table(view: WeekView) -> Table:
    """
    Create a Rich table listing the workouts of a week.

    Args:
        view: Week content from the controller

    Returns:
        Rich Table object
    """
    table = Table(title=escape(view.name))
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Workout", style="bold")
    table.add_column("Date", style="cyan")
    table.add_column("ID", style="dim")

    for i, summary in enumerate(view.workouts, 1):
        table.add_row(str(i), escape(summary.title), summary.date, str(summary.id))

    return table


def format_exercise_table(exercise: Exercise, index: int | None = None) -> Table:
    """Sets of one exercise with their estimated 1RM."""
    title = escape(exercise.name) if exercise.name else "[dim](unnamed)[/dim]"
    if index is not None:
        title = f"{index + 1}. {title}"
    table = Table(title=title, title_justify="left", show_edge=False)
    table.add_column("Set", justify="right", style="dim")
    table.add_column("Weight", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Est. 1RM", justify="right", style="magenta")

    for j, s in enumerate(exercise.sets, 1):
        one_rm = calculate_1rm(s.weight, s.reps)
        table.add_row(str(j), _fmt_num(s.weight), _fmt_num(s.reps), f"{one_rm:.1f}" if one_rm > 0 else "-")

    return table


def format_calendar_table(grid: MonthGrid) -> Table:
    """
    Create a 7-column month grid.

    Done days are green, missed days red; today is underlined.
    """
    table = Table(title=grid.title, show_lines=False)
    for header in WEEKDAY_HEADERS:
        table.add_column(header, justify="right")

    for week in grid.weeks():
        table.add_row(*(_fmt_day_cell(cell) for cell in week))

    return table


def _fmt_day_cell(cell: DayCell | None) -> str:
    if cell is None:
        return ""
    text = str(cell.day)
    for css_class in cell.css_classes:
        style, mark = DAY_CLASS_STYLES.get(css_class, (None, ""))
        if style:
            text = f"[{style}]{text}{mark}[/{style}]"
    return text


def format_day_details(details: DayDetails) -> Panel:
    """Workout and weight recorded on one date."""
    lines = []
    if details.workout is not None:
        lines.append(f"[bold]Workout: {escape(details.workout.title)}[/bold]")
        for ex in details.workout.exercises:
            lines.append(f"  [bold]{escape(ex.name)}[/bold]: {len(ex.sets)} sets")
    else:
        lines.append("No workout recorded.")
    if details.weight is not None:
        lines.append(f"[bold]Weight:[/bold] {_fmt_num(details.weight.weight)}")
    else:
        lines.append("No weight recorded.")
    return Panel("\n".join(lines), title=details.date, expand=False)


def print_chart(
    chart: ChartConfig | None,
    width: int = DEFAULT_CHART_WIDTH,
    height: int = DEFAULT_CHART_HEIGHT,
) -> None:
    """Print an ASCII line chart, or nothing when there is no chart."""
    if chart is None:
        return
    console.print(render_line_chart(chart, width=width, height=height), highlight=False, markup=False)


def _print_editor(view: EditorView, chart_width: int, chart_height: int) -> None:
    workout = view.workout
    heading = "New workout" if view.is_new else f"Editing workout {workout.id}"
    console.print(f"[bold cyan]{heading}[/bold cyan]")
    console.print(f"  Title: [bold]{escape(workout.title)}[/bold]   Date: [cyan]{workout.date}[/cyan]")
    if view.is_new and view.template_names:
        names = ", ".join(escape(n) for n in view.template_names)
        console.print(f"  [dim]Start from template:[/dim] {names}")
    console.print()

    if not view.exercises:
        console.print("[yellow]No exercises yet.[/yellow]")
    for ex_view in view.exercises:
        console.print(format_exercise_table(ex_view.exercise, ex_view.index))
        if ex_view.chart_visible:
            if ex_view.chart is None:
                console.print("[dim]No 1RM data for this exercise yet.[/dim]")
            else:
                print_chart(ex_view.chart, chart_width, chart_height)
        console.print()


def _print_week(view: WeekView) -> None:
    if not view.workouts:
        console.print(f"[bold]{escape(view.name)}[/bold]")
        console.print("[yellow]No workouts in this week yet.[/yellow]")
        return
    console.print(format_week_table(view))


def _print_weight(view: WeightView, chart_width: int, chart_height: int) -> None:
    console.print("[bold]Weight Tracking[/bold]")
    console.print(f"[dim]Log date defaults to {view.default_date}[/dim]")
    print_chart(view.chart, chart_width, chart_height)
    print_weights(view.entries)


def print_screen(
    screen: Screen,
    chart_width: int = DEFAULT_CHART_WIDTH,
    chart_height: int = DEFAULT_CHART_HEIGHT,
) -> None:
    """
    Paint a whole screen: tab bar, content, then the day overlay if open.

    Args:
        screen: Screen built by AppController.render()
        chart_width: Chart width in characters
        chart_height: Chart height in lines
    """
    console.clear()
    console.print(format_tab_bar(screen.tabs))
    console.rule()

    content = screen.content
    if isinstance(content, EditorView):
        _print_editor(content, chart_width, chart_height)
    elif isinstance(content, WeekView):
        _print_week(content)
    elif isinstance(content, WeightView):
        _print_weight(content, chart_width, chart_height)
    elif isinstance(content, CalendarView):
        console.print(format_calendar_table(content.grid))

    if screen.day_details is not None:
        console.print()
        console.print(format_day_details(screen.day_details))


# =============================================================================
# Command output
# =============================================================================


def print_weeks(weeks: list[Week], workouts_by_id: dict[int, Workout]) -> None:
    """Print all weeks with their workout counts."""
    table = Table(title="Weeks")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="bold")
    table.add_column("Workouts", justify="right")
    table.add_column("Dates", style="cyan")
    table.add_column("ID", style="dim")

    for i, week in enumerate(weeks, 1):
        dates = sorted(workouts_by_id[w].date for w in week.workout_ids if w in workouts_by_id)
        span = f"{dates[0]} – {dates[-1]}" if dates else "-"
        table.add_row(str(i), escape(week.name), str(len(week.workout_ids)), span, str(week.id))

    console.print(table)


def format_workout_table(workouts: list[Workout]) -> Table:
    """
    Create a Rich table of workouts.

    Args:
        workouts: Workouts in display order

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")
    table.add_column("Date", style="cyan")
    table.add_column("Title", style="bold")
    table.add_column("Exercises")
    table.add_column("Sets", justify="right")
    table.add_column("ID", style="dim")

    for workout in workouts:
        names = ", ".join(escape(ex.name) for ex in workout.exercises) or "-"
        n_sets = sum(len(ex.sets) for ex in workout.exercises)
        table.add_row(workout.date, escape(workout.title), names, str(n_sets), str(workout.id))

    return table


def print_history(workouts: list[Workout]) -> None:
    """Print workouts, or a notice when there are none."""
    if not workouts:
        console.print("[yellow]No workouts recorded yet.[/yellow]")
        return
    console.print(format_workout_table(workouts))


def print_workout(workout: Workout) -> None:
    """Print one workout with all its sets."""
    console.print(f"[bold]{escape(workout.title)}[/bold]  [cyan]{workout.date}[/cyan]  [dim]id {workout.id}[/dim]")
    if not workout.exercises:
        console.print("[yellow]No exercises.[/yellow]")
    for i, ex in enumerate(workout.exercises):
        console.print(format_exercise_table(ex, i))
        best = exercise_best_1rm(ex)
        if best > 0:
            console.print(f"  [dim]Best est. 1RM:[/dim] {best:.1f}")


def print_templates(templates: list[Template]) -> None:
    """Print templates with their exercise names."""
    table = Table(title="Templates")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="bold")
    table.add_column("Exercises")

    for i, template in enumerate(templates, 1):
        names = "; ".join(
            f"{escape(ex.name)} {format_sets(ex)}" if ex.sets else escape(ex.name) for ex in template.exercises
        ) or "[dim](empty)[/dim]"
        table.add_row(str(i), escape(template.name), names)

    console.print(table)


def print_weights(entries: list[WeightEntry]) -> None:
    """Print the bodyweight history, oldest first."""
    if not entries:
        console.print("[yellow]No weight recorded yet.[/yellow]")
        return

    table = Table(title="History")
    table.add_column("Date", style="cyan")
    table.add_column("Weight", justify="right", style="bold")
    table.add_column("Change", justify="right")

    previous: float | None = None
    for entry in entries:
        change = "-" if previous is None else f"{entry.weight - previous:+.1f}"
        table.add_row(entry.date, _fmt_num(entry.weight), change)
        previous = entry.weight

    console.print(table)


def print_one_rm_history(points: list[OneRepMaxPoint], exercise_name: str) -> None:
    """Print estimated 1RM per workout for one exercise."""
    if not points:
        console.print(f"[yellow]No sets recorded for {escape(exercise_name)}.[/yellow]")
        return

    table = Table(title=f"Estimated 1RM: {escape(exercise_name)}")
    table.add_column("Date", style="cyan")
    table.add_column("Est. 1RM", justify="right", style="magenta")

    for point in points:
        table.add_row(point.date, f"{point.one_rm:.1f}")

    console.print(table)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {escape(message)}[/red]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")
