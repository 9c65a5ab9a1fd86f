"""
ASCII line charts.

Draws a ChartConfig as terminal-friendly text. Points are spaced evenly by
index along the x-axis (a category axis), one marker character per dataset.
"""

from .charts import ChartConfig, ChartDataset
from .config import DEFAULT_CHART_HEIGHT, DEFAULT_CHART_WIDTH

_Y_LABEL_WIDTH = 9  # "  123.4 ┤"


def _x_positions(n_points: int, plot_width: int) -> list[int]:
    if n_points == 1:
        return [plot_width // 2]
    return [int(i * (plot_width - 1) / (n_points - 1)) for i in range(n_points)]


def _draw_solid(grid: list[list[str]], points: list[tuple[int, int]]) -> None:
    """Connect consecutive points with staircase segments (╭─╯)."""
    plot_height = len(grid)
    plot_width = len(grid[0]) if grid else 0

    def _p(x: int, r: int, ch: str) -> None:
        if 0 <= x < plot_width and 0 <= r < plot_height and grid[r][x] == " ":
            grid[r][x] = ch

    for (col1, row1), (col2, row2) in zip(points, points[1:]):
        n_rows = abs(row2 - row1)
        if n_rows == 0:
            for x in range(col1 + 1, col2):
                _p(x, row1, "─")
            continue

        if col1 == col2:
            for r in range(min(row1, row2) + 1, max(row1, row2)):
                _p(col1, r, "│")
            continue

        row_dir = -1 if row2 < row1 else 1  # -1 = going up (higher value)
        corner_exit = "╯" if row_dir == -1 else "╮"
        corner_entry = "╭" if row_dir == -1 else "╰"
        n_segs = n_rows + 1

        for step in range(n_segs):
            row = row1 + row_dir * step
            pivot_in = col1 + (col2 - col1) * step // n_segs
            pivot_out = col1 + (col2 - col1) * (step + 1) // n_segs

            if step == 0:
                for x in range(col1 + 1, pivot_out):
                    _p(x, row, "─")
                _p(pivot_out, row, corner_exit)
            elif step == n_segs - 1:
                _p(pivot_in, row, corner_entry)
                for x in range(pivot_in + 1, col2):
                    _p(x, row, "─")
            else:
                _p(pivot_in, row, corner_entry)
                for x in range(pivot_in + 1, pivot_out):
                    _p(x, row, "─")
                _p(pivot_out, row, corner_exit)


def _draw_dashed(
    grid: list[list[str]],
    xs: list[int],
    values: list[float],
    to_row,
    marker: str,
) -> None:
    """Dots every other column along straight segments between points."""
    plot_height = len(grid)
    for (x1, v1), (x2, v2) in zip(zip(xs, values), zip(xs[1:], values[1:])):
        for x in range(x1, x2 + 1, 2):
            t = (x - x1) / (x2 - x1) if x2 != x1 else 0.0
            r = to_row(v1 + (v2 - v1) * t)
            if 0 <= r < plot_height and grid[r][x] == " ":
                grid[r][x] = marker


def render_line_chart(
    config: ChartConfig,
    width: int = DEFAULT_CHART_WIDTH,
    height: int = DEFAULT_CHART_HEIGHT,
) -> str:
    """
    Render a line chart as ASCII text.

    Args:
        config: Labels, datasets and style options
        width: Total width in characters including the y-axis labels
        height: Total height in lines including title, axis and legend

    Returns:
        Multi-line string
    """
    datasets: list[ChartDataset] = [d for d in config.datasets if d.data]
    if not config.labels or not datasets:
        return "No data to display."

    all_values = [v for d in datasets for v in d.data]
    y_min = min(all_values)
    y_max = max(all_values)
    if y_max == y_min:
        y_min -= 1
        y_max += 1
    pad = (y_max - y_min) * 0.05
    y_min -= pad
    y_max += pad
    y_range = y_max - y_min

    plot_width = max(10, width - _Y_LABEL_WIDTH)
    plot_height = max(3, height - 5)  # title, two rules, x labels, legend

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]
    n_points = len(config.labels)
    xs = _x_positions(n_points, plot_width)

    def to_row(value: float) -> int:
        y = int(round((value - y_min) / y_range * (plot_height - 1)))
        return plot_height - 1 - y  # Flip y-axis

    # Dashed series first so solid lines and points draw over them
    ordered = sorted(datasets, key=lambda d: not d.dashed)
    for dataset in ordered:
        values = dataset.data[:n_points]
        dx = xs[: len(values)]
        marker = str(dataset.style.get("marker", "●"))
        if dataset.dashed:
            _draw_dashed(grid, dx, values, to_row, marker)
        else:
            _draw_solid(grid, [(x, to_row(v)) for x, v in zip(dx, values)])

    for dataset in ordered:
        if dataset.dashed or dataset.style.get("point_radius") == 0:
            continue
        marker = str(dataset.style.get("marker", "●"))
        for x, v in zip(xs, dataset.data):
            grid[to_row(v)][x] = marker

    lines = []
    total_width = _Y_LABEL_WIDTH + plot_width

    if config.title:
        lines.append(config.title)
    lines.append("─" * total_width)

    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range if plot_height > 1 else y_max
        lines.append(f"{y_val:7.1f} ┤" + "".join(row))

    lines.append("─" * total_width)

    # X-axis labels: first, middle, last
    label_line = [" "] * plot_width
    shown = {0, n_points // 2, n_points - 1}
    for idx in sorted(shown):
        text = config.labels[idx]
        start = min(max(0, xs[idx] - len(text) // 2), max(0, plot_width - len(text)))
        if any(c != " " for c in label_line[max(0, start - 1): start + len(text) + 1]):
            continue
        for j, c in enumerate(text):
            if start + j < plot_width:
                label_line[start + j] = c
    lines.append(" " * _Y_LABEL_WIDTH + "".join(label_line).rstrip())

    legend = "   ".join(f"{d.style.get('marker', '●')} {d.label}" for d in datasets)
    lines.append(legend)

    return "\n".join(lines)
