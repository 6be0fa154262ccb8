"""Configuration loading for env-swap.

Presets live in ``.env.swap.toml`` files. The file in the current directory
(the work file) and the one in the home directory (the global file) are both
read; for a variable defined in both, the work file's values come first.

Example::

    [API_KEY]
    [[API_KEY.values]]
    label = "Dev"
    value = "dev-key"
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import toml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".env.swap.toml"


class ConfigError(Exception):
    """A configuration file could not be read or is malformed."""


class ConfigNotFoundError(ConfigError):
    """Neither the work nor the global configuration file exists."""


# --- Schema ---


class EnvValue(BaseModel):
    """One preset: the text shown in the list and the value to assign."""

    model_config = ConfigDict(frozen=True)

    label: str
    value: str


class EnvVar(BaseModel):
    model_config = ConfigDict(extra="forbid")

    values: list[EnvValue] = Field(default_factory=list)


RawConfig = dict[str, EnvVar]


# --- Read-only view ---


class Configuration:
    """Ordered, read-only mapping of variable name to its preset values."""

    def __init__(self, variables: Mapping[str, list[EnvValue] | tuple[EnvValue, ...]]) -> None:
        self._variables: dict[str, tuple[EnvValue, ...]] = {
            name: tuple(values) for name, values in variables.items()
        }

    @classmethod
    def from_raw(cls, raw: RawConfig) -> Configuration:
        return cls({name: var.values for name, var in raw.items()})

    def __getitem__(self, name: str) -> tuple[EnvValue, ...]:
        return self._variables[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def __contains__(self, name: object) -> bool:
        return name in self._variables

    def __repr__(self) -> str:
        return f"Configuration({self._variables!r})"

    def variable_names(self) -> list[str]:
        """Variable names in display order (sorted)."""
        return sorted(self._variables)

    def values(self, name: str) -> tuple[EnvValue, ...]:
        """Preset values for *name*, in file order."""
        return self._variables[name]

    def value_count(self, name: str) -> int:
        return len(self._variables[name])


# --- Paths ---


def get_work_config_path() -> Path:
    return Path.cwd() / CONFIG_FILE_NAME


def get_home_config_path() -> Path | None:
    try:
        return Path.home() / CONFIG_FILE_NAME
    except RuntimeError:
        return None


# --- Loading ---


def parse_config(content: str, source: Path | str = "<string>") -> RawConfig:
    """Parse and validate TOML *content*."""
    try:
        data: dict[str, Any] = toml.loads(content)
    except toml.TomlDecodeError as e:
        raise ConfigError(f"Failed to parse TOML at {source}: {e}") from e

    config: RawConfig = {}
    for name, table in data.items():
        if not isinstance(table, dict):
            raise ConfigError(
                f"Failed to parse TOML at {source}: '{name}' must be a table"
            )
        try:
            config[name] = EnvVar.model_validate(table)
        except ValidationError as e:
            raise ConfigError(f"Invalid entry '{name}' in {source}: {e}") from e
    return config


def read_config_from_path(path: Path | None) -> RawConfig | None:
    """Read a config file, returning ``None`` when *path* is missing."""
    if path is None or not path.exists():
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {path}: {e}") from e
    logger.debug("Read config file %s", path)
    return parse_config(content, path)


def merge_configs(work: RawConfig, home: RawConfig) -> RawConfig:
    """Append *home* values onto *work*; variables only in *home* are added."""
    merged: RawConfig = {
        name: EnvVar(values=list(var.values)) for name, var in work.items()
    }
    for name, home_var in home.items():
        target = merged.setdefault(name, EnvVar())
        target.values.extend(home_var.values)
    return merged


def _same_file(a: Path, b: Path) -> bool:
    try:
        return a.resolve() == b.resolve()
    except OSError:
        return a == b


def load_config(
    work_path: Path | None = None,
    home_path: Path | None = None,
) -> Configuration:
    """Load and merge the work and global configuration files.

    Paths default to ``./.env.swap.toml`` and ``~/.env.swap.toml``. When both
    point at the same file it is read once. Variables left without any value
    after merging are dropped.
    """
    if work_path is None:
        work_path = get_work_config_path()
    if home_path is None:
        home_path = get_home_config_path()

    if home_path is not None and _same_file(work_path, home_path):
        home_path = None

    work = read_config_from_path(work_path)
    home = read_config_from_path(home_path)

    if work is None and home is None:
        raise ConfigNotFoundError(
            f"No {CONFIG_FILE_NAME} file found in current or home directory."
        )

    merged = merge_configs(work or {}, home or {})

    for name in [n for n, var in merged.items() if not var.values]:
        logger.warning("Variable %s has no values and is skipped", name)
        del merged[name]

    logger.info("Loaded %d variable(s)", len(merged))
    return Configuration.from_raw(merged)
