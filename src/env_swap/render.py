"""Rendering of the selection screen.

:func:`build_draw_model` projects a :class:`SelectionState` into what should be
shown (title, hint, items, highlighted row). :func:`draw_frame` lays that out
as a bordered box centred on the screen, with the key hint on the line below
the box, and returns one string per terminal row.

Layout: the box is 80% of the terminal width and ``items + 3`` rows high
(two border rows and the hint line), clamped to the terminal height. Lists
taller than the box are not paged; the visible window only follows the
highlighted row.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Protocol

from env_swap.utils import center_in_width, truncate_to_width, visible_width

if TYPE_CHECKING:
    from env_swap.state import Phase, SelectionState

BOX_WIDTH_PERCENT = 80
# Two border rows plus the key hint line
BOX_OVERHEAD_ROWS = 3
HIGHLIGHT_SYMBOL = "> "

_BORDER_TOP_LEFT = "┌"
_BORDER_TOP_RIGHT = "┐"
_BORDER_BOTTOM_LEFT = "└"
_BORDER_BOTTOM_RIGHT = "┘"
_BORDER_HORIZONTAL = "─"
_BORDER_VERTICAL = "│"

_BOLD_REVERSE = "\x1b[1;7m"
_DIM = "\x1b[2m"
_RESET = "\x1b[0m"


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int


def centered_rect(percent_x: int, height: int, area: Rect) -> Rect:
    """Return a rect *percent_x* wide and *height* tall, centred in *area*.

    The height is clamped to the area height and the percentage to 100.
    """
    height = max(0, min(height, area.height))
    percent_x = max(0, min(percent_x, 100))

    popup_width = area.width * percent_x // 100

    x_margin = (area.width - popup_width) // 2
    y_margin = (area.height - height) // 2

    return Rect(
        x=area.x + x_margin,
        y=area.y + y_margin,
        width=popup_width,
        height=height,
    )


# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------


class SelectionTheme(Protocol):
    highlight: Callable[[str], str]
    border: Callable[[str], str]
    title: Callable[[str], str]
    hint: Callable[[str], str]


class DefaultTheme:
    """Bold reverse-video highlight, plain borders, dim hint."""

    @staticmethod
    def highlight(text: str) -> str:
        return f"{_BOLD_REVERSE}{text}{_RESET}"

    @staticmethod
    def border(text: str) -> str:
        return text

    @staticmethod
    def title(text: str) -> str:
        return text

    @staticmethod
    def hint(text: str) -> str:
        return f"{_DIM}{text}{_RESET}"


# ---------------------------------------------------------------------------
# Draw model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DrawModel:
    phase: Phase
    title: str
    hint: str
    items: tuple[str, ...]
    cursor: int


def build_draw_model(state: SelectionState) -> DrawModel:
    """Project the current state into the list to display."""
    messages = state.messages
    if state.current_phase == "value":
        return DrawModel(
            phase="value",
            title=messages.get("select_value"),
            hint=messages.get("key_hint_value_selection"),
            items=tuple(v.label for v in state.current_values()),
            cursor=state.value_cursor or 0,
        )
    return DrawModel(
        phase="variable",
        title=messages.get("select_variable"),
        hint=messages.get("key_hint_variable_selection"),
        items=tuple(state.variable_names),
        cursor=state.variable_cursor,
    )


def layout(model: DrawModel, area: Rect) -> Rect:
    return centered_rect(
        BOX_WIDTH_PERCENT, len(model.items) + BOX_OVERHEAD_ROWS, area
    )


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------


def _visible_offset(cursor: int, count: int, rows: int) -> int:
    if rows <= 0 or count <= rows:
        return 0
    return max(0, min(cursor - rows + 1, count - rows))


def _draw_box(
    model: DrawModel, width: int, height: int, theme: SelectionTheme
) -> list[str]:
    if height <= 0 or width <= 0:
        return []
    if width < 2 or height < 2:
        return [" " * width for _ in range(height)]

    inner_width = width - 2
    inner_height = height - 2

    title = truncate_to_width(model.title, inner_width, "")
    fill = _BORDER_HORIZONTAL * (inner_width - visible_width(title))
    lines = [
        theme.border(_BORDER_TOP_LEFT)
        + theme.title(title)
        + theme.border(fill + _BORDER_TOP_RIGHT)
    ]

    offset = _visible_offset(model.cursor, len(model.items), inner_height)
    blank_prefix = " " * len(HIGHLIGHT_SYMBOL)
    for row in range(inner_height):
        index = offset + row
        if index < len(model.items):
            selected = index == model.cursor
            prefix = HIGHLIGHT_SYMBOL if selected else blank_prefix
            text = truncate_to_width(prefix + model.items[index], inner_width, "", pad=True)
            if selected:
                text = theme.highlight(text)
        else:
            text = " " * inner_width
        lines.append(theme.border(_BORDER_VERTICAL) + text + theme.border(_BORDER_VERTICAL))

    lines.append(
        theme.border(
            _BORDER_BOTTOM_LEFT + _BORDER_HORIZONTAL * inner_width + _BORDER_BOTTOM_RIGHT
        )
    )
    return lines


def draw_frame(
    model: DrawModel,
    width: int,
    height: int,
    theme: SelectionTheme | None = None,
) -> list[str]:
    """Render *model* onto a *width* x *height* screen.

    Returns exactly *height* lines; rows outside the box are empty strings and
    rows inside it are indented to the box's column.
    """
    theme = theme or DefaultTheme()
    lines = [""] * max(height, 0)
    rect = layout(model, Rect(0, 0, max(width, 0), max(height, 0)))
    if rect.height == 0 or rect.width == 0:
        return lines

    indent = " " * rect.x
    box = _draw_box(model, rect.width, rect.height - 1, theme)
    for row, text in enumerate(box):
        lines[rect.y + row] = indent + text

    hint = theme.hint(center_in_width(model.hint, rect.width))
    lines[rect.y + rect.height - 1] = indent + hint
    return lines


def render(
    state: SelectionState,
    width: int,
    height: int,
    theme: SelectionTheme | None = None,
) -> list[str]:
    """Build the draw model for *state* and lay it out on screen."""
    return draw_frame(build_draw_model(state), width, height, theme)
