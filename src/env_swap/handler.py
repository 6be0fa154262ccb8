"""Key handling for the selection screen.

Resolves raw input to a :data:`SelectionAction` and applies the phase
dependent transition to a :class:`SelectionState`. Nothing here performs I/O.

Variable phase: up/down move, confirm opens the value list, cancel and quit
both end the run. Value phase: up/down move, confirm ends the run with the
highlighted value, cancel goes back to the variable list, quit ends the run.
Movement clamps at both ends of a list.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from env_swap.keybindings import (
    SelectionAction,
    SelectionKeybindingsManager,
    get_selection_keybindings,
)

if TYPE_CHECKING:
    from env_swap.state import SelectionState


def apply_action(state: SelectionState, action: SelectionAction) -> None:
    """Apply *action* to *state* according to its current phase."""
    if state.quit:
        return

    if action == "quit":
        state.request_quit()
    elif action == "selectCancel":
        if state.current_phase == "value":
            state.cancel()
        else:
            state.request_quit()
    elif action == "selectUp":
        state.move_up()
    elif action == "selectDown":
        state.move_down()
    elif action == "selectConfirm":
        state.confirm()


def handle_input(
    state: SelectionState,
    data: str,
    keybindings: SelectionKeybindingsManager | None = None,
) -> SelectionAction | None:
    """Dispatch one complete key sequence.

    Returns the action that was applied, or ``None`` when *data* is not bound
    to anything.
    """
    kb = keybindings or get_selection_keybindings()
    action = kb.resolve(data)
    if action is None:
        return None
    apply_action(state, action)
    return action
