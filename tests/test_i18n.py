"""Tests for env_swap.i18n -- message tables and locale detection."""

from __future__ import annotations

import pytest

from env_swap.i18n import (
    Messages,
    detect_locale,
    language_for_locale,
    load_message_tables,
    load_messages,
)


@pytest.fixture
def clean_locale(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestMessageTables:
    def test_languages_present(self) -> None:
        tables = load_message_tables()
        assert {"en", "ja"} <= set(tables)

    def test_tables_have_same_keys(self) -> None:
        tables = load_message_tables()
        assert set(tables["en"]) == set(tables["ja"])

    def test_required_keys(self) -> None:
        en = load_message_tables()["en"]
        for key in (
            "select_variable",
            "select_value",
            "key_hint_variable_selection",
            "key_hint_value_selection",
            "config_not_found",
            "config_load_failed",
        ):
            assert en[key]


class TestMessages:
    def test_get(self) -> None:
        assert Messages({"hello": "Hello"}).get("hello") == "Hello"

    def test_missing_key_returns_key(self) -> None:
        assert Messages({}).get("nope") == "nope"

    def test_format(self) -> None:
        messages = Messages({"err": "Error at {path}: {error}"})
        assert messages.format("err", path="/tmp/x", error="boom") == "Error at /tmp/x: boom"

    def test_format_leaves_unknown_placeholders(self) -> None:
        assert Messages({"err": "{a} {b}"}).format("err", a=1) == "1 {b}"


class TestLocale:
    @pytest.mark.parametrize(
        "name, language",
        [
            ("ja_JP.UTF-8", "ja"),
            ("ja", "ja"),
            ("JA_JP", "ja"),
            ("en_US.UTF-8", "en"),
            ("C", "en"),
            ("fr_FR", "en"),
        ],
    )
    def test_language_for_locale(self, name: str, language: str) -> None:
        assert language_for_locale(name) == language

    def test_lc_all_wins(self, clean_locale: pytest.MonkeyPatch) -> None:
        clean_locale.setenv("LANG", "en_US.UTF-8")
        clean_locale.setenv("LC_ALL", "ja_JP.UTF-8")
        assert detect_locale() == "ja_JP.UTF-8"

    def test_lang_fallback(self, clean_locale: pytest.MonkeyPatch) -> None:
        clean_locale.setenv("LANG", "ja_JP.UTF-8")
        assert detect_locale() == "ja_JP.UTF-8"

    def test_empty_variable_skipped(self, clean_locale: pytest.MonkeyPatch) -> None:
        clean_locale.setenv("LC_ALL", "")
        clean_locale.setenv("LC_MESSAGES", "ja_JP.UTF-8")
        assert detect_locale() == "ja_JP.UTF-8"


class TestLoadMessages:
    def test_japanese(self) -> None:
        messages = load_messages("ja_JP.UTF-8")
        assert messages.language == "ja"
        assert messages.get("select_variable") == "環境変数を選択してください"

    def test_english(self) -> None:
        messages = load_messages("en_US.UTF-8")
        assert messages.language == "en"
        assert messages.get("select_variable") == "Select an environment variable"

    def test_detected(self, clean_locale: pytest.MonkeyPatch) -> None:
        clean_locale.setenv("LANG", "ja_JP.UTF-8")
        assert load_messages().language == "ja"
