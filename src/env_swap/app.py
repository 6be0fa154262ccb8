"""Event loop driving the selection screen.

Each iteration renders the state, waits up to ``poll_interval`` seconds for
input and dispatches every complete key press to the input handler. Only
rows that changed since the previous frame are rewritten; a size change
clears the screen and redraws everything.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from env_swap.handler import handle_input
from env_swap.keys import is_key_release
from env_swap.render import render
from env_swap.terminal import ProcessTerminal

if TYPE_CHECKING:
    from env_swap.keybindings import SelectionKeybindingsManager
    from env_swap.render import SelectionTheme
    from env_swap.state import SelectionState
    from env_swap.terminal import Terminal

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.25

_CLEAR_SCREEN = "\x1b[2J"
_CLEAR_TO_EOL = "\x1b[K"


class _FrameWriter:
    """Differential writer: remembers the last frame drawn to the terminal."""

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal
        self._previous_lines: list[str] = []
        self._previous_size: tuple[int, int] | None = None
        self.full_redraws: int = 0

    def draw(self, lines: list[str], size: tuple[int, int]) -> None:
        out: list[str] = []
        if size != self._previous_size:
            out.append(_CLEAR_SCREEN)
            changed = range(len(lines))
            self.full_redraws += 1
        else:
            changed = [
                i
                for i, line in enumerate(lines)
                if i >= len(self._previous_lines) or self._previous_lines[i] != line
            ]

        for i in changed:
            out.append(f"\x1b[{i + 1};1H{lines[i]}{_CLEAR_TO_EOL}")

        self._previous_lines = list(lines)
        self._previous_size = size
        if out:
            self._terminal.write("".join(out))


def run(
    state: SelectionState,
    terminal: Terminal | None = None,
    poll_interval: float = POLL_INTERVAL,
    theme: SelectionTheme | None = None,
    keybindings: SelectionKeybindingsManager | None = None,
) -> SelectionState:
    """Run the selection screen until the user confirms a value or quits.

    The terminal is entered once before the loop and left once afterwards,
    whether the loop ends normally or by an exception. Returns *state*, from
    which the caller reads :meth:`SelectionState.result`.
    """
    if terminal is None:
        terminal = ProcessTerminal()

    terminal.enter()
    try:
        writer = _FrameWriter(terminal)
        logger.debug("Selection loop started with %d variable(s)", len(state.variable_names))

        while not state.quit:
            size = (terminal.columns, terminal.rows)
            writer.draw(render(state, size[0], size[1], theme), size)

            if terminal.poll(poll_interval):
                pending = terminal.read()
            else:
                pending = terminal.flush_pending()

            for data in pending:
                if is_key_release(data):
                    continue
                action = handle_input(state, data, keybindings)
                if action is not None:
                    logger.debug("Key %r -> %s (%r)", data, action, state)
                if state.quit:
                    break
    finally:
        terminal.leave()

    result = state.result()
    if result is None:
        logger.debug("Selection loop finished without a selection")
    else:
        logger.debug("Selection loop finished: %s -> %s", result[0], result[1].label)
    return state
