"""Shape aggregates into plotting-library agnostic chart data."""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

from .models import Aggregate

LIGHT_FILL_COLORS: tuple[str, ...] = (
    "rgba(255, 99, 132, 0.2)",
    "rgba(255, 159, 64, 0.2)",
    "rgba(255, 205, 86, 0.2)",
    "rgba(75, 192, 192, 0.2)",
    "rgba(54, 162, 235, 0.2)",
    "rgba(153, 102, 255, 0.2)",
    "rgba(201, 203, 207, 0.2)",
)

SOLID_FILL_COLORS: tuple[str, ...] = (
    "rgb(255, 99, 132)",
    "rgb(255, 159, 64)",
    "rgb(255, 205, 86)",
    "rgb(75, 192, 192)",
    "rgb(54, 162, 235)",
    "rgb(153, 102, 255)",
    "rgb(201, 203, 207)",
)


def aggregate_to_chart_data(
    aggregates: Sequence[Aggregate],
    label: str,
    get_label: Optional[Callable[[Aggregate], str]] = None,
    get_value: Optional[Callable[[Aggregate], Any]] = None,
    style_options: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Build ``{"labels", "series"}`` for a bar chart of the aggregates.

    Colours cycle through the palettes per data point; ``style_options``
    override any series field.
    """
    get_label = get_label or (lambda item: "(none)" if item.key is None else str(item.key))
    get_value = get_value or (lambda item: item.total_time)

    labels = [get_label(item) for item in aggregates]
    data = [get_value(item) for item in aggregates]
    series: dict[str, Any] = {
        "label": label,
        "data": data,
        "backgroundColor": [
            LIGHT_FILL_COLORS[index % len(LIGHT_FILL_COLORS)] for index in range(len(data))
        ],
        "borderColor": [
            SOLID_FILL_COLORS[index % len(SOLID_FILL_COLORS)] for index in range(len(data))
        ],
        "borderWidth": 1,
    }
    if style_options:
        series.update(style_options)
    return {"labels": labels, "series": [series]}
