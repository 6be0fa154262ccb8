"""Tests for env_swap.config -- reading, validating and merging presets."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from env_swap.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    ConfigNotFoundError,
    Configuration,
    EnvValue,
    EnvVar,
    get_home_config_path,
    get_work_config_path,
    load_config,
    merge_configs,
    parse_config,
)

WORK_TOML = """\
[API_KEY]
[[API_KEY.values]]
label = "Dev"
value = "dev-key"

[[API_KEY.values]]
label = "Prod"
value = "prod-key"

[DB_HOST]
[[DB_HOST.values]]
label = "Local"
value = "localhost"
"""

HOME_TOML = """\
[API_KEY]
[[API_KEY.values]]
label = "Shared"
value = "shared-key"

[REGION]
[[REGION.values]]
label = "US"
value = "us-east-1"
"""


def _write(directory: Path, content: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / CONFIG_FILE_NAME
    path.write_text(content, encoding="utf-8")
    return path


class TestParseConfig:
    def test_parses_values_in_order(self) -> None:
        config = parse_config(WORK_TOML)
        assert list(config) == ["API_KEY", "DB_HOST"]
        assert config["API_KEY"].values == [
            EnvValue(label="Dev", value="dev-key"),
            EnvValue(label="Prod", value="prod-key"),
        ]

    def test_empty_document(self) -> None:
        assert parse_config("") == {}

    def test_table_without_values(self) -> None:
        assert parse_config("[EMPTY]\n")["EMPTY"].values == []

    def test_invalid_toml(self) -> None:
        with pytest.raises(ConfigError, match="Failed to parse TOML"):
            parse_config("[[API_KEY", source="broken.toml")

    def test_non_table_entry(self) -> None:
        with pytest.raises(ConfigError, match="'API_KEY' must be a table"):
            parse_config('API_KEY = "dev-key"\n')

    def test_missing_value_field(self) -> None:
        content = '[API_KEY]\n[[API_KEY.values]]\nlabel = "Dev"\n'
        with pytest.raises(ConfigError, match="Invalid entry 'API_KEY'"):
            parse_config(content)

    def test_unknown_field(self) -> None:
        content = '[API_KEY]\ndefault = "Dev"\n'
        with pytest.raises(ConfigError):
            parse_config(content)

    def test_values_keep_special_characters(self) -> None:
        content = "[PW]\n[[PW.values]]\nlabel = \"Quote\"\nvalue = \"it's $ok\"\n"
        assert parse_config(content)["PW"].values[0].value == "it's $ok"


class TestMergeConfigs:
    def test_work_values_first(self) -> None:
        merged = merge_configs(parse_config(WORK_TOML), parse_config(HOME_TOML))
        assert [v.label for v in merged["API_KEY"].values] == ["Dev", "Prod", "Shared"]

    def test_home_only_variables_added(self) -> None:
        merged = merge_configs(parse_config(WORK_TOML), parse_config(HOME_TOML))
        assert set(merged) == {"API_KEY", "DB_HOST", "REGION"}

    def test_inputs_not_modified(self) -> None:
        work = parse_config(WORK_TOML)
        merge_configs(work, parse_config(HOME_TOML))
        assert len(work["API_KEY"].values) == 2

    def test_empty_home(self) -> None:
        merged = merge_configs({"A": EnvVar(values=[EnvValue(label="a", value="1")])}, {})
        assert [v.value for v in merged["A"].values] == ["1"]


class TestLoadConfig:
    def test_work_and_home(self, tmp_path: Path) -> None:
        work = _write(tmp_path / "project", WORK_TOML)
        home = _write(tmp_path / "home", HOME_TOML)
        config = load_config(work, home)
        assert config.variable_names() == ["API_KEY", "DB_HOST", "REGION"]
        assert [v.label for v in config.values("API_KEY")] == ["Dev", "Prod", "Shared"]

    def test_only_home(self, tmp_path: Path) -> None:
        home = _write(tmp_path / "home", HOME_TOML)
        config = load_config(tmp_path / "missing" / CONFIG_FILE_NAME, home)
        assert config.variable_names() == ["API_KEY", "REGION"]

    def test_only_work(self, tmp_path: Path) -> None:
        work = _write(tmp_path / "project", WORK_TOML)
        config = load_config(work, tmp_path / "missing" / CONFIG_FILE_NAME)
        assert config.variable_names() == ["API_KEY", "DB_HOST"]

    def test_neither_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError, match="No .env.swap.toml file found"):
            load_config(tmp_path / "a" / CONFIG_FILE_NAME, tmp_path / "b" / CONFIG_FILE_NAME)

    def test_same_file_read_once(self, tmp_path: Path) -> None:
        path = _write(tmp_path, WORK_TOML)
        config = load_config(path, path)
        assert config.value_count("API_KEY") == 2

    def test_empty_variables_dropped(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        work = _write(tmp_path / "project", WORK_TOML + "\n[EMPTY]\n")
        with caplog.at_level("WARNING", logger="env_swap.config"):
            config = load_config(work, tmp_path / "missing" / CONFIG_FILE_NAME)
        assert "EMPTY" not in config
        assert "EMPTY" in caplog.text

    def test_parse_error_propagates(self, tmp_path: Path) -> None:
        work = _write(tmp_path / "project", "not = [valid")
        with pytest.raises(ConfigError):
            load_config(work, tmp_path / "missing" / CONFIG_FILE_NAME)

    def test_default_paths(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        project = tmp_path / "project"
        home = tmp_path / "home"
        _write(project, WORK_TOML)
        _write(home, HOME_TOML)
        monkeypatch.chdir(project)
        monkeypatch.setenv("HOME", str(home))
        assert get_work_config_path() == project / CONFIG_FILE_NAME
        assert get_home_config_path() == home / CONFIG_FILE_NAME
        assert len(load_config()) == 3

    def test_cwd_is_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        _write(tmp_path, WORK_TOML)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert load_config().value_count("API_KEY") == 2


class TestConfiguration:
    def test_names_sorted(self) -> None:
        config = Configuration({"b": [], "a": [], "C": []})
        assert config.variable_names() == ["C", "a", "b"]

    def test_read_only_view(self) -> None:
        values = [EnvValue(label="a", value="1")]
        config = Configuration({"A": values})
        values.append(EnvValue(label="b", value="2"))
        assert config.value_count("A") == 1
        assert config["A"] == (EnvValue(label="a", value="1"),)

    def test_mapping_protocol(self) -> None:
        config = Configuration({"A": [], "B": []})
        assert len(config) == 2
        assert "A" in config
        assert "Z" not in config
        assert list(config) == ["A", "B"]

    def test_env_value_is_frozen(self) -> None:
        value = EnvValue(label="a", value="1")
        with pytest.raises(ValidationError):
            value.value = "2"  # type: ignore[misc]
