"""Terminal abstraction for the selection screen.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal`` that puts
stdin into raw mode, switches to the alternate screen and draws on
**stderr**, leaving stdout free for the command printed after the run.

``ProcessTerminal`` is a context manager; leaving the ``with`` block always
restores the terminal, including when an exception is propagating.
"""

from __future__ import annotations

import codecs
import logging
import os
import re
import select
import sys
import termios
import tty
from typing import IO, Protocol

from env_swap.stdin_buffer import ESC, StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_ALT_SCREEN_ENABLE = "\x1b[?1049h"
_ALT_SCREEN_DISABLE = "\x1b[?1049l"

# Flags 1 (disambiguate) + 2 (report event types, so releases are tagged)
_KITTY_QUERY = "\x1b[?u"
_KITTY_ENABLE = "\x1b[>3u"
_KITTY_DISABLE = "\x1b[<u"

_KITTY_RESPONSE_RE = re.compile(r"^\x1b\[\?(\d+)u$")

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_SCREEN = "\x1b[2J\x1b[H"


class TerminalError(Exception):
    """The terminal could not be put into, or used in, raw mode."""


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for terminal I/O operations used by the event loop."""

    def enter(self) -> None: ...

    def leave(self) -> None: ...

    def poll(self, timeout: float) -> bool: ...

    def read(self) -> list[str]: ...

    def flush_pending(self) -> list[str]: ...

    def write(self, data: str) -> None: ...

    @property
    def columns(self) -> int: ...

    @property
    def rows(self) -> int: ...


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Raw-mode terminal backed by ``sys.stdin`` for input and ``sys.stderr`` for output."""

    def __init__(
        self,
        input_stream: IO[str] | None = None,
        output_stream: IO[str] | None = None,
    ) -> None:
        self._input = input_stream or sys.stdin
        self._output = output_stream or sys.stderr
        self._active: bool = False
        self._original_termios: list | None = None
        self._kitty_protocol_active: bool = False
        self._stdin_buffer = StdinBuffer()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._write_log_path: str = os.environ.get("ENV_SWAP_WRITE_LOG", "")

    # -- properties ---------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def kitty_protocol_active(self) -> bool:
        return self._kitty_protocol_active

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size(self._output.fileno()).columns
        except (ValueError, OSError):
            return 80

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size(self._output.fileno()).lines
        except (ValueError, OSError):
            return 24

    # -- enter / leave ------------------------------------------------------

    def enter(self) -> None:
        """Enable raw mode and the alternate screen, hide the cursor."""
        if self._active:
            raise TerminalError("Terminal is already in raw mode")

        fd = self._input.fileno()
        if not os.isatty(fd):
            raise TerminalError("Standard input is not a terminal")

        try:
            self._original_termios = termios.tcgetattr(fd)
        except termios.error as e:
            raise TerminalError(f"Cannot read terminal attributes: {e}") from e

        self._active = True
        try:
            tty.setraw(fd)
            self.write(_ALT_SCREEN_ENABLE + _HIDE_CURSOR + _CLEAR_SCREEN)
            self.write(_KITTY_QUERY)
        except BaseException:
            self.leave()
            raise
        logger.debug("Entered raw mode on fd %d", fd)

    def leave(self) -> None:
        """Restore the terminal. Safe to call when not active."""
        if not self._active:
            return
        self._active = False

        try:
            sequence = ""
            if self._kitty_protocol_active:
                sequence += _KITTY_DISABLE
                self._kitty_protocol_active = False
            self.write(sequence + _SHOW_CURSOR + _ALT_SCREEN_DISABLE)
        finally:
            self._stdin_buffer.clear()
            if self._original_termios is not None:
                termios.tcsetattr(
                    self._input.fileno(), termios.TCSADRAIN, self._original_termios
                )
                self._original_termios = None
            logger.debug("Left raw mode")

    def __enter__(self) -> ProcessTerminal:
        self.enter()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.leave()

    # -- input --------------------------------------------------------------

    def poll(self, timeout: float) -> bool:
        """Wait up to *timeout* seconds for input to become readable."""
        readable, _, _ = select.select([self._input.fileno()], [], [], timeout)
        return bool(readable)

    def read(self) -> list[str]:
        """Read available input and return complete key sequences.

        A read that ends on a bare ESC delivers it as the Escape key.
        """
        raw = os.read(self._input.fileno(), 4096)
        if not raw:
            raise TerminalError("Terminal input closed")
        data = self._decoder.decode(raw)
        sequences = self._stdin_buffer.process(data)
        if self._stdin_buffer.get_buffer() == ESC:
            sequences.extend(self._stdin_buffer.flush())
        return self._filter_responses(sequences)

    def flush_pending(self) -> list[str]:
        """Return input held back as a possible escape-sequence prefix."""
        return self._filter_responses(self._stdin_buffer.flush())

    def _filter_responses(self, sequences: list[str]) -> list[str]:
        keys: list[str] = []
        for sequence in sequences:
            if _KITTY_RESPONSE_RE.match(sequence):
                if not self._kitty_protocol_active:
                    self._kitty_protocol_active = True
                    self.write(_KITTY_ENABLE)
                    logger.debug("Kitty keyboard protocol enabled")
                continue
            keys.append(sequence)
        return keys

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write data to the output stream and optionally to the write log."""
        self._output.write(data)
        self._output.flush()

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                pass
