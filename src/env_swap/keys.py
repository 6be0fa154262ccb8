"""Keyboard input decoding for the selection screen.

Turns raw terminal input into key identifiers such as ``"up"``, ``"q"`` or
``"ctrl+c"``. Understands legacy VT sequences, single control bytes,
ESC-prefixed (alt) keys and the Kitty keyboard protocol, including its
press/repeat/release event types.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Optional

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Caps lock / num lock bits reported by kitty; never part of a binding
LOCK_MASK = 64 + 128

CODEPOINTS: dict[str, int] = {
    "escape": 27,
    "tab": 9,
    "enter": 13,
    "space": 32,
    "backspace": 127,
    "kp_enter": 57414,
}

# Aliases accepted in key identifiers
_KEY_ALIASES: dict[str, str] = {
    "esc": "escape",
    "return": "enter",
    "pageup": "pageUp",
    "pagedown": "pageDown",
}

# Legacy escape sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[4~": "end",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[5~": "pageUp",
    "\x1b[6~": "pageDown",
    "\x1b[Z": "shift+tab",
}

# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------

KeyEventType = Literal["press", "repeat", "release"]

_EVENT_TYPES: dict[int, KeyEventType] = {
    1: "press",
    2: "repeat",
    3: "release",
}


@dataclass
class ParsedKittySequence:
    codepoint: int
    base_layout_key: Optional[int]
    modifier: int
    event_type: int  # 1 = press, 2 = repeat, 3 = release

    @property
    def event(self) -> KeyEventType:
        return _EVENT_TYPES.get(self.event_type, "press")


# ---------------------------------------------------------------------------
# Regex patterns for kitty protocol parsing
# ---------------------------------------------------------------------------

# CSI u: \x1b[<codepoint>(:<shifted>(:<base>))?(;<modifier>(:<event>))?u
_KITTY_CSI_U_RE = re.compile(
    r"^\x1b\[(\d+)(?::(\d*)(?::(\d+))?)?(?:;(\d+)(?::(\d+))?)?u$"
)

# Arrows, home/end and F1-F4 with modifier: \x1b[1;<modifier>(:<event>)?<letter>
_KITTY_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)(?::(\d+))?([ABCDHFPQRS])$")

# Functional keys with modifier: \x1b[<number>;<modifier>(:<event>)?~
_KITTY_FUNCTIONAL_RE = re.compile(r"^\x1b\[(\d+);(\d+)(?::(\d+))?~$")

_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "P": "f1",
    "Q": "f2",
    "R": "f3",
    "S": "f4",
}

_FUNCTIONAL_NUMBER_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
}

# ---------------------------------------------------------------------------
# Release / repeat detection
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_RE = re.compile(r"\x1b\[200~")

_RELEASE_PATTERNS = re.compile(r"(?::3u|;[^:]*:3~|;[^:]*:3[ABCDHFPQRS])$")

_REPEAT_PATTERNS = re.compile(r"(?::2u|;[^:]*:2~|;[^:]*:2[ABCDHFPQRS])$")


def is_key_release(data: str) -> bool:
    """Check if data is a key release event."""
    if _BRACKETED_PASTE_RE.search(data):
        return False
    return bool(_RELEASE_PATTERNS.search(data))


def is_key_repeat(data: str) -> bool:
    """Check if data is a key repeat event."""
    if _BRACKETED_PASTE_RE.search(data):
        return False
    return bool(_REPEAT_PATTERNS.search(data))


# ---------------------------------------------------------------------------
# Kitty sequence parsing
# ---------------------------------------------------------------------------


def parse_kitty_sequence(data: str) -> ParsedKittySequence | None:
    """Parse a kitty keyboard protocol sequence.

    Modified legacy sequences such as ``\\x1b[1;5A`` share the same shape and
    are parsed here too. Keys without a CSI u codepoint (arrows, page keys)
    get ``codepoint=0``; use :func:`parse_key` to get their names.
    """
    m = _KITTY_CSI_U_RE.match(data)
    if m:
        return ParsedKittySequence(
            codepoint=int(m.group(1)),
            base_layout_key=int(m.group(3)) if m.group(3) else None,
            modifier=int(m.group(4)) if m.group(4) else 1,
            event_type=int(m.group(5)) if m.group(5) else 1,
        )

    m = _KITTY_LETTER_RE.match(data)
    if m:
        return ParsedKittySequence(
            codepoint=0,
            base_layout_key=None,
            modifier=int(m.group(1)),
            event_type=int(m.group(2)) if m.group(2) else 1,
        )

    m = _KITTY_FUNCTIONAL_RE.match(data)
    if m:
        return ParsedKittySequence(
            codepoint=0,
            base_layout_key=None,
            modifier=int(m.group(2)),
            event_type=int(m.group(3)) if m.group(3) else 1,
        )

    return None


def _modifier_prefix(modifier: int) -> str:
    mod = (modifier - 1) & ~LOCK_MASK
    prefix = ""
    if mod & MODIFIERS["ctrl"]:
        prefix += "ctrl+"
    if mod & MODIFIERS["shift"]:
        prefix += "shift+"
    if mod & MODIFIERS["alt"]:
        prefix += "alt+"
    return prefix


def _kitty_key_name(data: str, parsed: ParsedKittySequence) -> str | None:
    if parsed.codepoint == 0:
        m = _KITTY_LETTER_RE.match(data)
        if m:
            return _LETTER_KEYS.get(m.group(3))
        m = _KITTY_FUNCTIONAL_RE.match(data)
        if m:
            return _FUNCTIONAL_NUMBER_KEYS.get(int(m.group(1)))
        return None

    for name, code in CODEPOINTS.items():
        if parsed.codepoint == code:
            return "enter" if name == "kp_enter" else name

    ch = chr(parsed.codepoint)
    if ch.isprintable():
        return ch.lower()
    return None


# ---------------------------------------------------------------------------
# Key ID normalisation
# ---------------------------------------------------------------------------


def parse_key_id(key_id: str) -> dict[str, object] | None:
    """Split a key identifier like ``"ctrl+shift+a"`` into its components.

    Returns a dict with ``modifiers`` (bitmask: shift=1, alt=2, ctrl=4) and
    ``key``, or ``None`` if no base key is present.
    """
    if not key_id:
        return None

    # "ctrl++" binds the plus key itself
    if key_id.endswith("++"):
        parts = key_id[:-2].split("+") + ["+"]
    else:
        parts = key_id.split("+")

    modifier = 0
    key_parts: list[str] = []
    for part in parts:
        lower = part.lower()
        if lower in MODIFIERS:
            modifier |= MODIFIERS[lower]
        elif part:
            key_parts.append(part)

    if len(key_parts) != 1:
        return None

    key = key_parts[0]
    key = _KEY_ALIASES.get(key.lower(), key)
    return {"modifiers": modifier, "key": key}


def normalize_key_id(key_id: str) -> str | None:
    """Return the canonical ``ctrl+shift+alt+key`` spelling of *key_id*."""
    parsed = parse_key_id(key_id)
    if parsed is None:
        return None
    mod: int = parsed["modifiers"]  # type: ignore[assignment]
    return _modifier_prefix(mod + 1) + str(parsed["key"])


# ---------------------------------------------------------------------------
# parse_key / matches_key
# ---------------------------------------------------------------------------


def parse_key(data: str) -> str | None:  # noqa: C901
    """Parse raw terminal input and return the key identifier, or ``None``.

    The returned string uses the same format as ``matches_key`` expects:
    e.g. ``"a"``, ``"ctrl+a"``, ``"shift+enter"``, ``"pageUp"``.
    """
    if not data or _BRACKETED_PASTE_RE.match(data):
        return None

    parsed = parse_kitty_sequence(data)
    if parsed is not None:
        name = _kitty_key_name(data, parsed)
        if name is None:
            return None
        return _modifier_prefix(parsed.modifier) + name

    if data in LEGACY_KEY_SEQUENCES:
        return LEGACY_KEY_SEQUENCES[data]

    # Simple single-byte keys
    if data == "\x1b":
        return "escape"
    if data == "\r" or data == "\n":
        return "enter"
    if data == "\t":
        return "tab"
    if data == " ":
        return "space"
    if data == "\x7f" or data == "\x08":
        return "backspace"
    if data == "\x00":
        return "ctrl+space"

    # Ctrl + letter (0x01 - 0x1a)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return "ctrl+" + chr(ord(data) + ord("a") - 1)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b":
        ch = data[1]
        if ch == "\x1b":
            return "alt+escape"
        if ch == "\r" or ch == "\n":
            return "alt+enter"
        if 1 <= ord(ch) <= 26:
            return "ctrl+alt+" + chr(ord(ch) + ord("a") - 1)
        if ch.isprintable():
            return "alt+" + ch

    if len(data) == 1 and data.isprintable():
        return data

    return None


def matches_key(data: str, key_id: KeyId) -> bool:
    """Return ``True`` if *data* (raw terminal input) matches the named *key_id*.

    *key_id* examples: ``"q"``, ``"ctrl+c"``, ``"escape"``, ``"down"``.
    """
    expected = normalize_key_id(key_id)
    if expected is None:
        return False
    actual = parse_key(data)
    if actual is None:
        return False
    return normalize_key_id(actual) == expected
