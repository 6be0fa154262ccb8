"""Localized UI messages.

Messages are embedded in the package as ``messages.json`` with one table per
language. Japanese locales get the ``ja`` table, everything else ``en``.
"""

from __future__ import annotations

import json
import locale
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "ja")

_LOCALE_ENV_VARS = ("LC_ALL", "LC_MESSAGES", "LANG")

_MESSAGES_JSON = Path(__file__).parent / "messages.json"


class Messages:
    """Messages for a single language, looked up by key."""

    def __init__(self, messages: dict[str, str], language: str = DEFAULT_LANGUAGE) -> None:
        self._messages = messages
        self.language = language

    def get(self, key: str) -> str:
        """Get a message by key, falling back to the key itself."""
        return self._messages.get(key, key)

    def format(self, key: str, **kwargs: object) -> str:
        """Get a message and substitute ``{name}`` placeholders."""
        text = self.get(key)
        for name, value in kwargs.items():
            text = text.replace("{" + name + "}", str(value))
        return text


def load_message_tables() -> dict[str, dict[str, str]]:
    """Load every language table from the embedded JSON."""
    tables = json.loads(_MESSAGES_JSON.read_text(encoding="utf-8"))
    for language in SUPPORTED_LANGUAGES:
        if language not in tables:
            raise ValueError(f"messages.json has no '{language}' table")
    return tables


def detect_locale() -> str:
    """Return the user's locale name, e.g. ``"ja_JP.UTF-8"``, or ``"en"``."""
    for var in _LOCALE_ENV_VARS:
        value = os.environ.get(var)
        if value:
            return value
    try:
        lang, _ = locale.getlocale()
    except ValueError:
        lang = None
    return lang or DEFAULT_LANGUAGE


def language_for_locale(name: str) -> str:
    return "ja" if name.lower().startswith("ja") else DEFAULT_LANGUAGE


def load_messages(locale_name: str | None = None) -> Messages:
    """Load messages for *locale_name* (detected when omitted)."""
    tables = load_message_tables()
    if locale_name is None:
        locale_name = detect_locale()
    language = language_for_locale(locale_name)
    logger.debug("Using %s messages for locale %s", language, locale_name)
    return Messages(tables[language], language)
