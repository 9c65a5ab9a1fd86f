"""
Line chart configurations.

A ChartConfig describes what to draw (labels, numeric series, style options);
ascii_plot.render_line_chart draws it. Both the bodyweight chart and the
per-exercise 1RM chart are a data series plus an optional dashed trend line.
"""

from dataclasses import dataclass, field
from typing import Any

from .config import (
    GRID_COLOR,
    SERIES_COLOR,
    SERIES_MARKER,
    TICK_COLOR,
    TREND_COLOR,
    TREND_DASH,
    TREND_MARKER,
)
from .metrics import OneRepMaxPoint, calculate_trend_line
from .models import WeightEntry


@dataclass
class ChartDataset:
    """One named numeric series with its style options."""

    label: str
    data: list[float]
    style: dict[str, Any] = field(default_factory=dict)

    @property
    def dashed(self) -> bool:
        return bool(self.style.get("border_dash"))


@dataclass
class ChartConfig:
    """Everything a line chart renderer needs."""

    labels: list[str]
    datasets: list[ChartDataset]
    options: dict[str, Any] = field(default_factory=dict)
    type: str = "line"
    title: str = ""


def _default_options() -> dict[str, Any]:
    return {
        "scales": {
            "x": {"grid_color": GRID_COLOR, "tick_color": TICK_COLOR},
            "y": {"grid_color": GRID_COLOR, "tick_color": TICK_COLOR},
        },
        "legend": {"label_color": TICK_COLOR},
    }


def build_trend_chart(
    labels: list[str],
    values: list[float],
    series_label: str,
    title: str = "",
) -> ChartConfig:
    """
    Chart of a series plus its least-squares trend (when defined).

    Args:
        labels: X labels, one per value
        values: Data series
        series_label: Legend label of the data series
        title: Chart title

    Returns:
        ChartConfig with one or two datasets
    """
    datasets = [
        ChartDataset(
            label=series_label,
            data=list(values),
            style={"color": SERIES_COLOR, "marker": SERIES_MARKER, "tension": 0.1, "fill": False},
        )
    ]
    trend = calculate_trend_line(values)
    if trend is not None:
        datasets.append(
            ChartDataset(
                label="Trend",
                data=trend,
                style={
                    "color": TREND_COLOR,
                    "marker": TREND_MARKER,
                    "border_dash": list(TREND_DASH),
                    "point_radius": 0,
                    "fill": False,
                },
            )
        )
    return ChartConfig(labels=list(labels), datasets=datasets, options=_default_options(), title=title)


def build_weight_chart(weights: list[WeightEntry]) -> ChartConfig | None:
    """Bodyweight chart, or None when nothing is logged."""
    if not weights:
        return None
    return build_trend_chart(
        [w.date for w in weights],
        [w.weight for w in weights],
        "Weight",
        title="Bodyweight",
    )


def build_one_rm_chart(points: list[OneRepMaxPoint], exercise_name: str = "") -> ChartConfig | None:
    """Estimated 1RM chart, or None without points."""
    if not points:
        return None
    title = f"Estimated 1RM ({exercise_name})" if exercise_name else "Estimated 1RM"
    return build_trend_chart(
        [p.date for p in points],
        [p.one_rm for p in points],
        "Estimated 1RM",
        title=title,
    )
