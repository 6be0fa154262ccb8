"""Selection state for the two-phase picker.

The user first picks a variable, then one of its values. The phase is a
tagged union: :class:`VariableSelect` carries nothing extra, while
:class:`ValueSelect` carries the chosen variable and the value cursor, so a
value cursor cannot exist outside the value phase.

The variable cursor lives on :class:`SelectionState` itself and survives a
round trip through the value phase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal, Union

if TYPE_CHECKING:
    from env_swap.config import Configuration, EnvValue
    from env_swap.i18n import Messages

Phase = Literal["variable", "value"]


@dataclass(frozen=True)
class VariableSelect:
    kind: Phase = field(default="variable", init=False)


@dataclass(frozen=True)
class ValueSelect:
    variable: str
    cursor: int = 0
    kind: Phase = field(default="value", init=False)


PhaseState = Union[VariableSelect, ValueSelect]


def _clamp(index: int, count: int) -> int:
    return max(0, min(index, count - 1))


class SelectionState:
    """Cursor positions, current phase and the quit flag for one run.

    Holds the configuration and messages by reference; neither is copied or
    modified.
    """

    def __init__(self, config: Configuration, messages: Messages) -> None:
        if len(config) == 0:
            raise ValueError("Cannot select from an empty configuration")
        for name in config:
            if config.value_count(name) == 0:
                raise ValueError(f"Variable {name} has no values to select from")
        self.config = config
        self.messages = messages
        self.variable_names: list[str] = config.variable_names()
        self.variable_cursor: int = 0
        self.phase: PhaseState = VariableSelect()
        self.quit: bool = False

    def __repr__(self) -> str:
        return (
            f"SelectionState(phase={self.phase!r}, "
            f"variable_cursor={self.variable_cursor}, quit={self.quit})"
        )

    # -- read-out -----------------------------------------------------------

    @property
    def current_phase(self) -> Phase:
        return self.phase.kind

    @property
    def selected_variable(self) -> str | None:
        if isinstance(self.phase, ValueSelect):
            return self.phase.variable
        return None

    @property
    def value_cursor(self) -> int | None:
        if isinstance(self.phase, ValueSelect):
            return self.phase.cursor
        return None

    @property
    def highlighted_variable(self) -> str:
        return self.variable_names[self.variable_cursor]

    def current_values(self) -> tuple[EnvValue, ...]:
        """Values of the selected variable; empty in the variable phase."""
        if isinstance(self.phase, ValueSelect):
            return self.config.values(self.phase.variable)
        return ()

    def result(self) -> tuple[str, EnvValue] | None:
        """The committed ``(variable, value)`` pair, if the user confirmed one."""
        if not self.quit or not isinstance(self.phase, ValueSelect):
            return None
        values = self.config.values(self.phase.variable)
        return self.phase.variable, values[self.phase.cursor]

    # -- transitions --------------------------------------------------------

    def move_up(self) -> None:
        self._move(-1)

    def move_down(self) -> None:
        self._move(1)

    def _move(self, delta: int) -> None:
        if isinstance(self.phase, ValueSelect):
            count = self.config.value_count(self.phase.variable)
            cursor = _clamp(self.phase.cursor + delta, count)
            self.phase = ValueSelect(self.phase.variable, cursor)
        else:
            self.variable_cursor = _clamp(
                self.variable_cursor + delta, len(self.variable_names)
            )

    def confirm(self) -> None:
        """Enter the value phase, or finish when a value is highlighted."""
        if isinstance(self.phase, ValueSelect):
            self.quit = True
        else:
            self.phase = ValueSelect(self.highlighted_variable, 0)

    def cancel(self) -> None:
        """Return from the value phase to the variable list."""
        if isinstance(self.phase, ValueSelect):
            self.phase = VariableSelect()

    def request_quit(self) -> None:
        self.quit = True
