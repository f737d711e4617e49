"""Layout and rendering logic for the weather card - pure functions for testability."""
import textwrap
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Tuple, Union

from fetch_controller import Idle, Loading, Error, Success, RequestState
from icons import ICON_COLORS, ICON_GLYPHS
from local_clock import local_time_from
from view_model import build_view_model
from weather_data import METRIC

TITLE_COLOR = (255, 255, 255)
TEXT_COLOR = (200, 200, 200)
MUTED_COLOR = (140, 140, 140)
ERROR_COLOR = (255, 0, 0)
ACCENT_COLOR = (0, 113, 255)
MOOD_COLOR = (180, 120, 255)


@dataclass(frozen=True)
class EmptyPrompt:
    title: str = "Search for a city"
    hint: str = "Type a city name and press Enter (e.g. Tokyo, London)."
    source: str = "This app uses OpenWeatherMap's Current Weather API."


@dataclass(frozen=True)
class LoadingPanel:
    title: str = "Loading weather..."
    detail: str = "Fetching data from the weather service"


@dataclass(frozen=True)
class ErrorPanel:
    message: str
    title: str = "Error"
    retry_label: str = "Retry"


@dataclass(frozen=True)
class ResultPanel:
    location: str
    conditions: str
    icon: str
    temperature: str
    feels_like: str
    humidity: str
    wind: str
    mood: str
    updated: str
    local_date: str
    local_time: str
    footer: str


Panel = Union[EmptyPrompt, LoadingPanel, ErrorPanel, ResultPanel]


class DrawOp:
    """Represents a drawing operation (for testing/layout calculation)."""
    def __init__(self, op_type: str, **kwargs):
        self.op_type = op_type
        self.kwargs = kwargs

    def __repr__(self) -> str:
        return f"DrawOp({self.op_type!r}, {self.kwargs!r})"


def _degrees(value: Optional[int], symbol: str) -> str:
    return f"{value}{symbol}" if value is not None else f"-{symbol}"


def build_panel(
    query: str,
    state: RequestState,
    units: str = METRIC,
    local_time: Optional[datetime] = None
) -> Panel:
    """
    Map the query and request state onto exactly one panel.

    Only the fields of the matched state are read.
    """
    if not (query or "").strip() or isinstance(state, Idle):
        return EmptyPrompt()
    if isinstance(state, Loading):
        return LoadingPanel()
    if isinstance(state, Error):
        return ErrorPanel(message=state.message)
    if isinstance(state, Success):
        report = state.report
        view = build_view_model(report, units)
        updated = local_time_from(report.timestamp, report.timezone_offset)
        return ResultPanel(
            location=view.location,
            conditions=f"{view.condition_main} - {view.condition_description}",
            icon=view.icon,
            temperature=_degrees(view.temperature_display, view.unit_symbol),
            feels_like=f"Feels like {_degrees(view.feels_like_display, view.unit_symbol)}",
            humidity=f"Humidity: {view.humidity_display}",
            wind=f"Wind: {view.wind_display}",
            mood=view.mood,
            updated=f"Updated {updated:%H:%M:%S}",
            local_date=f"{local_time:%Y-%m-%d}" if local_time else "-",
            local_time=f"{local_time:%H:%M:%S}" if local_time else "-",
            footer="Source: OpenWeatherMap. Data shown in "
                   + ("Celsius." if units == METRIC else "Fahrenheit."),
        )
    raise TypeError(f"Unknown request state: {state!r}")


def _text(x: int, y: int, text: str, color: Tuple[int, int, int], width: int) -> DrawOp:
    text = text[:max(0, width - x)]
    return DrawOp("text", text=text, x=x, y=y, r=color[0], g=color[1], b=color[2])


def calculate_layout(panel: Panel, width: int = 64, height: int = 12) -> List[DrawOp]:
    """
    Calculate drawing operations for a panel on a character grid.

    This is a pure function that returns drawing operations,
    making it easy to test without actual rendering.

    Args:
        panel: Panel to lay out
        width: Canvas width in character cells
        height: Canvas height in character cells

    Returns:
        List of DrawOp objects representing what to draw
    """
    ops: List[DrawOp] = []

    if isinstance(panel, EmptyPrompt):
        ops.append(_text(1, 1, panel.title, TITLE_COLOR, width))
        ops.append(_text(1, 3, panel.hint, TEXT_COLOR, width))
        ops.append(_text(1, 5, panel.source, MUTED_COLOR, width))

    elif isinstance(panel, LoadingPanel):
        ops.append(_text(1, 1, panel.title, ACCENT_COLOR, width))
        ops.append(_text(1, 3, panel.detail, MUTED_COLOR, width))

    elif isinstance(panel, ErrorPanel):
        ops.append(_text(1, 1, panel.title, ERROR_COLOR, width))
        # Cap message rows so the retry action stays on the grid
        lines = textwrap.wrap(panel.message, max(1, width - 2)) or [""]
        max_lines = max(1, height - 5)
        if len(lines) > max_lines:
            lines = lines[:max_lines]
            lines[-1] = lines[-1][:max(0, width - 5)].rstrip() + "..."
        for row, line in enumerate(lines):
            ops.append(_text(1, 3 + row, line, TEXT_COLOR, width))
        ops.append(_text(1, 4 + len(lines), f"[{panel.retry_label}]", ACCENT_COLOR, width))

    elif isinstance(panel, ResultPanel):
        # Icon block on the left, details to its right
        glyph = ICON_GLYPHS.get(panel.icon, ICON_GLYPHS["clear"])
        icon_color = ICON_COLORS.get(panel.icon, ICON_COLORS["clear"])
        for row, line in enumerate(glyph):
            ops.append(_text(1, 1 + row, line, icon_color, width))

        right = 1 + max(len(line) for line in glyph) + 2
        clock_x = max(right, width - len(panel.local_time) - 1)
        ops.append(_text(right, 1, panel.location, TITLE_COLOR, width))
        ops.append(_text(right, 2, panel.conditions, TEXT_COLOR, width))
        ops.append(_text(clock_x, 3, panel.local_time, TITLE_COLOR, width))
        ops.append(_text(max(right, width - len(panel.local_date) - 1), 4, panel.local_date, MUTED_COLOR, width))

        ops.append(_text(1, 5, panel.temperature, ACCENT_COLOR, width))
        ops.append(_text(1 + len(panel.temperature) + 2, 5, panel.feels_like, TEXT_COLOR, width))
        ops.append(_text(1, 6, panel.humidity, TEXT_COLOR, width))
        ops.append(_text(1, 7, panel.wind, TEXT_COLOR, width))
        ops.append(_text(1, 8, f"Mood: {panel.mood}", MOOD_COLOR, width))
        ops.append(_text(1, 9, panel.updated, MUTED_COLOR, width))
        ops.append(_text(1, 10, panel.footer, MUTED_COLOR, width))

    return [op for op in ops if op.kwargs["y"] < height]


def render_panel(canvas, panel: Panel) -> None:
    """
    Render a panel onto a canvas.

    Args:
        canvas: CardCanvas instance (text or PIL)
        panel: Panel to draw
    """
    canvas.clear()
    for op in calculate_layout(panel, canvas.width, canvas.height):
        if op.op_type == "text":
            canvas.draw_text(
                op.kwargs["x"],
                op.kwargs["y"],
                op.kwargs["text"],
                op.kwargs["r"],
                op.kwargs["g"],
                op.kwargs["b"]
            )
