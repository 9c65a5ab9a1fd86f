"""
Interactive terminal session.

Reads one short command per line, applies it to the AppController and
repaints the whole screen. Commands depend on whether the workout editor is
open; `help` lists the ones available.
"""

import shlex
from collections.abc import Callable

from ..core.config_loader import Settings
from ..io.serializers import ValidationError
from . import views
from .controller import AppController, CalendarView, NoActiveEditorError, WeekView, WeightView

InputFn = Callable[[str], str]

NAV_HELP = "[1..N] week  w weight  c calendar  + add week  q quit  help"
WEEK_HELP = "new  edit N"
WEIGHT_HELP = "log WEIGHT [YYYY-MM-DD]"
CALENDAR_HELP = "< prev month  > next month  day D|YYYY-MM-DD  close"
EDITOR_HELP = (
    "title TEXT  date YYYY-MM-DD  template NAME  ex [NAME]  name N TEXT  rmex N\n"
    "set N  wt N S VALUE  reps N S VALUE  rmset N S  chart N  save  tpl [NAME]  cancel"
)


class QuitSession(Exception):
    """Raised by the quit command to leave the loop."""


def _index(token: str, what: str) -> int:
    """Convert a 1-based number typed by the user to a 0-based index."""
    try:
        value = int(token)
    except ValueError:
        raise ValueError(f"{what} must be a number, got {token!r}") from None
    if value < 1:
        raise IndexError(f"{what} must be 1 or more")
    return value - 1


def _need(args: list[str], count: int, usage: str) -> None:
    if len(args) < count:
        raise ValueError(f"Usage: {usage}")


def help_text(controller: AppController) -> str:
    """Commands available in the current mode."""
    if controller.editing_workout is not None:
        return f"{EDITOR_HELP}\n{NAV_HELP}"
    mode = {"week": WEEK_HELP, "weight": WEIGHT_HELP, "calendar": CALENDAR_HELP}[controller.active_tab]
    return f"{mode}\n{NAV_HELP}"


def _navigate(controller: AppController, cmd: str) -> bool:
    """Tab and week commands valid everywhere. Returns False when cmd is not one."""
    if cmd.isdigit():
        weeks = controller.store.get_weeks()
        idx = _index(cmd, "Week")
        if idx >= len(weeks):
            raise IndexError(f"There are only {len(weeks)} weeks")
        controller.select_week(weeks[idx].id)
        return True
    if cmd in ("w", "weight"):
        controller.show_tab("weight")
        return True
    if cmd in ("c", "cal", "calendar"):
        controller.show_tab("calendar")
        return True
    if cmd in ("+", "add-week"):
        controller.add_week()
        return True
    return False


def _editor_command(controller: AppController, cmd: str, args: list[str], ask: InputFn) -> str | None:
    if cmd == "title":
        _need(args, 1, "title TEXT")
        controller.set_title(" ".join(args))
    elif cmd == "date":
        _need(args, 1, "date YYYY-MM-DD")
        controller.set_date(args[0])
    elif cmd == "template":
        _need(args, 1, "template NAME")
        name = " ".join(args)
        if not controller.apply_template(name):
            raise ValueError(f"No template named {name!r}")
    elif cmd == "ex":
        controller.add_exercise(" ".join(args))
    elif cmd == "name":
        _need(args, 2, "name N TEXT")
        controller.rename_exercise(_index(args[0], "Exercise"), " ".join(args[1:]))
    elif cmd == "rmex":
        _need(args, 1, "rmex N")
        controller.remove_exercise(_index(args[0], "Exercise"))
    elif cmd == "set":
        _need(args, 1, "set N")
        controller.add_set(_index(args[0], "Exercise"))
    elif cmd in ("wt", "reps"):
        _need(args, 3, f"{cmd} N S VALUE")
        field = "weight" if cmd == "wt" else "reps"
        controller.update_set(_index(args[0], "Exercise"), _index(args[1], "Set"), field, args[2])
    elif cmd == "rmset":
        _need(args, 2, "rmset N S")
        controller.remove_set(_index(args[0], "Exercise"), _index(args[1], "Set"))
    elif cmd == "chart":
        _need(args, 1, "chart N")
        controller.toggle_one_rm_chart(_index(args[0], "Exercise"))
    elif cmd == "save":
        saved = controller.save_workout()
        return f"Saved workout {saved.id}."
    elif cmd == "tpl":
        title = controller.editing_workout.title if controller.editing_workout else ""
        name = " ".join(args) or ask(f"Enter template name [{title}]: ").strip() or title
        if controller.save_as_template(name):
            return "Template saved!"
    elif cmd == "cancel":
        controller.cancel_edit()
    else:
        raise ValueError(f"Unknown command: {cmd}. Type 'help' for commands.")
    return None


def _tab_command(controller: AppController, cmd: str, args: list[str]) -> str | None:
    content = controller.render().content
    if isinstance(content, WeekView):
        if cmd == "new":
            controller.create_new_workout()
            return None
        if cmd == "edit":
            _need(args, 1, "edit N")
            idx = _index(args[0], "Workout")
            if idx >= len(content.workouts):
                raise IndexError(f"{content.name} has {len(content.workouts)} workouts")
            controller.edit_workout(content.workouts[idx].id)
            return None
    elif isinstance(content, WeightView):
        if cmd == "log":
            _need(args, 1, "log WEIGHT [YYYY-MM-DD]")
            date_str = args[1] if len(args) > 1 else content.default_date
            controller.log_weight(date_str, args[0])
            return None
    elif isinstance(content, CalendarView):
        if cmd in ("<", "prev"):
            controller.prev_month()
            return None
        if cmd in (">", "next"):
            controller.next_month()
            return None
        if cmd == "day":
            _need(args, 1, "day D|YYYY-MM-DD")
            token = args[0]
            if token.isdigit():
                grid = content.grid
                token = f"{grid.year:04d}-{grid.month:02d}-{int(token):02d}"
            controller.show_day_details(token)
            return None
        if cmd == "close":
            controller.close_day_details()
            return None
    raise ValueError(f"Unknown command: {cmd}. Type 'help' for commands.")


def dispatch(controller: AppController, raw: str, ask: InputFn) -> str | None:
    """
    Apply one command line to the controller.

    Returns:
        A message to show after the next repaint, or None

    Raises:
        QuitSession: On q/quit/exit
    """
    try:
        tokens = shlex.split(raw)
    except ValueError as e:
        raise ValueError(f"Could not parse command: {e}") from e
    if not tokens:
        return None
    cmd, args = tokens[0].lower(), tokens[1:]

    if cmd in ("q", "quit", "exit"):
        raise QuitSession()
    if cmd in ("help", "?", "h"):
        return help_text(controller)

    if _navigate(controller, cmd):
        return None

    if controller.editing_workout is not None:
        return _editor_command(controller, cmd, args, ask)
    return _tab_command(controller, cmd, args)


def run_interactive(
    controller: AppController,
    settings: Settings,
    ask: InputFn | None = None,
) -> None:
    """
    Run the read-command / repaint loop until the user quits.

    Args:
        controller: Controller bound to the store
        settings: Used for chart size
        ask: Input function (defaults to the Rich console)
    """
    ask = ask or views.console.input
    message: str | None = None
    error: str | None = None

    while True:
        views.print_screen(controller.render(), settings.chart_width, settings.chart_height)
        if error:
            views.print_error(error)
        elif message:
            views.print_info(message)
        else:
            views.console.print(f"[dim]{help_text(controller)}[/dim]")
        message = error = None

        try:
            raw = ask("> ")
        except EOFError:
            return

        try:
            message = dispatch(controller, raw, ask)
        except QuitSession:
            return
        except (ValueError, IndexError, KeyError, ValidationError, NoActiveEditorError) as e:
            error = str(e)
