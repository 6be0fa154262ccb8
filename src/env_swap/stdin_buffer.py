"""StdinBuffer splits raw input chunks into complete key sequences.

A single ``read`` from the terminal may hold several keys, or only part of an
escape sequence. Without buffering, a partial sequence such as ``\\x1b[`` would
be misread as an Escape key press followed by ``[``.
"""

from __future__ import annotations

import re

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


def _is_complete_sequence(data: str) -> str:
    """Check if a string is a complete escape sequence or needs more data.

    Returns ``'complete'``, ``'incomplete'`` or ``'not-escape'``.
    """
    if not data.startswith(ESC):
        return "not-escape"

    if len(data) == 1:
        return "incomplete"

    after_esc = data[1:]

    # CSI: ESC [
    if after_esc.startswith("["):
        if after_esc.startswith("[M"):
            return "complete" if len(data) >= 6 else "incomplete"
        return _is_complete_csi_sequence(data)

    # OSC / DCS / APC end with ST, OSC may also end with BEL
    if after_esc.startswith("]"):
        if data.endswith(f"{ESC}\\") or data.endswith("\x07"):
            return "complete"
        return "incomplete"
    if after_esc.startswith("P") or after_esc.startswith("_"):
        return "complete" if data.endswith(f"{ESC}\\") else "incomplete"

    # SS3: ESC O <letter>
    if after_esc.startswith("O"):
        return "complete" if len(after_esc) >= 2 else "incomplete"

    # Meta key: ESC followed by a single character
    return "complete"


def _is_complete_csi_sequence(data: str) -> str:
    if len(data) < 3:
        return "incomplete"

    payload = data[2:]
    last_char = payload[-1]

    if 0x40 <= ord(last_char) <= 0x7E:
        if payload.startswith("<"):
            return "complete" if _SGR_MOUSE_RE.match(payload) else "incomplete"
        return "complete"

    return "incomplete"


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split accumulated buffer into complete sequences.

    Returns ``(sequences, remainder)`` where *remainder* is a trailing escape
    sequence that has not been completed yet.
    """
    sequences: list[str] = []
    pos = 0

    while pos < len(buffer):
        remaining = buffer[pos:]

        if not remaining.startswith(ESC):
            sequences.append(remaining[0])
            pos += 1
            continue

        # ESC ESC followed by more input is an Escape press, then a new sequence
        if remaining[1:2] == ESC and len(remaining) > 2:
            sequences.append(ESC)
            pos += 1
            continue

        seq_end = 1
        while seq_end <= len(remaining):
            candidate = remaining[:seq_end]
            if _is_complete_sequence(candidate) == "complete":
                sequences.append(candidate)
                pos += seq_end
                break
            seq_end += 1
        else:
            return sequences, remaining

    return sequences, ""


class StdinBuffer:
    """Buffers stdin input and hands back complete sequences.

    Bracketed paste content is returned as one chunk, still wrapped in its
    start/end markers, so that callers can recognise and skip it.
    """

    def __init__(self) -> None:
        self._buffer: str = ""
        self._paste_mode: bool = False
        self._paste_buffer: str = ""

    def process(self, data: str) -> list[str]:
        """Feed *data* into the buffer and return every complete sequence."""
        out: list[str] = []
        self._buffer += data

        while self._buffer:
            if self._paste_mode:
                self._paste_buffer += self._buffer
                self._buffer = ""
                end_index = self._paste_buffer.find(BRACKETED_PASTE_END)
                if end_index == -1:
                    break
                pasted = self._paste_buffer[:end_index]
                self._buffer = self._paste_buffer[end_index + len(BRACKETED_PASTE_END) :]
                self._paste_mode = False
                self._paste_buffer = ""
                out.append(BRACKETED_PASTE_START + pasted + BRACKETED_PASTE_END)
                continue

            start_index = self._buffer.find(BRACKETED_PASTE_START)
            if start_index != -1:
                sequences, _ = _extract_complete_sequences(self._buffer[:start_index])
                out.extend(sequences)
                self._buffer = self._buffer[start_index + len(BRACKETED_PASTE_START) :]
                self._paste_mode = True
                continue

            sequences, remainder = _extract_complete_sequences(self._buffer)
            out.extend(sequences)
            self._buffer = remainder
            break

        return out

    def flush(self) -> list[str]:
        """Return held-back data as-is, e.g. a lone ESC after a quiet poll."""
        if not self._buffer:
            return []
        sequences = [self._buffer]
        self._buffer = ""
        return sequences

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""

    def get_buffer(self) -> str:
        return self._buffer
