"""CLI entry point for env-swap. Uses Click for argument parsing.

Without a subcommand, shows the selection screen on stderr and prints the
PowerShell assignment for the chosen value on stdout, so that it can be piped
into ``Invoke-Expression``.
"""

from __future__ import annotations

import json
import logging
import sys

import click

from env_swap import __version__
from env_swap.app import run
from env_swap.config import (
    ConfigError,
    ConfigNotFoundError,
    Configuration,
    get_home_config_path,
    get_work_config_path,
    load_config,
)
from env_swap.i18n import Messages, load_messages
from env_swap.output import generate_powershell_command
from env_swap.show import collect_status, format_status
from env_swap.state import SelectionState
from env_swap.terminal import TerminalError

logger = logging.getLogger(__name__)


def _configure_logging(log_file: str | None, log_level: str) -> None:
    # stderr is the drawing surface, so records only go to an explicit file
    if not log_file:
        return
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


def _load_config_or_exit(messages: Messages) -> Configuration:
    try:
        config = load_config()
    except ConfigNotFoundError:
        _fail(messages.get("config_not_found"))
    except ConfigError as e:
        _fail(messages.format("config_load_failed", error=e))

    if len(config) == 0:
        _fail(messages.get("config_not_found"))
    return config


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="env-swap")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    envvar="ENV_SWAP_LOG",
    default=None,
    help="Write debug logs to this file",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="debug",
    show_default=True,
)
@click.pass_context
def main(ctx, log_file, log_level):
    """Quickly switch environment variables in a PowerShell session."""
    _configure_logging(log_file, log_level)

    try:
        messages = load_messages()
    except (OSError, ValueError, json.JSONDecodeError) as e:
        _fail(f"Error loading i18n messages: {e}")
    ctx.obj = messages

    if ctx.invoked_subcommand is None:
        run_tui_mode(messages)


def run_tui_mode(messages: Messages) -> None:
    """Pick a variable and value, then print the command that sets it."""
    config = _load_config_or_exit(messages)

    state = SelectionState(config, messages)
    try:
        run(state)
    except (TerminalError, OSError) as e:
        logger.debug("Selection screen failed", exc_info=True)
        _fail(messages.format("terminal_error", error=e))

    result = state.result()
    if result is None:
        return
    name, value = result
    click.echo(generate_powershell_command(name, value.value))


@main.command()
@click.argument(
    "target",
    type=click.Choice(["local", "global"]),
    default="local",
)
@click.pass_obj
def edit(messages, target):
    """Edit a configuration file. Defaults to the local file."""
    path = get_work_config_path() if target == "local" else get_home_config_path()
    if path is None:
        _fail(messages.get("home_not_found"))

    if not path.exists():
        try:
            path.write_text("", encoding="utf-8")
        except OSError as e:
            _fail(f"{messages.format('file_creation_failed', path=path)} ({e})")
        logger.info("Created %s", path)

    if click.launch(str(path)) != 0:
        _fail(messages.format("file_open_failed", path=path))


@main.command()
@click.option("--reveal", is_flag=True, help="Reveal the actual values of the environment variables.")
@click.pass_obj
def show(messages, reveal):
    """Show the current status of environment variables."""
    config = _load_config_or_exit(messages)
    for line in format_status(collect_status(config), messages, reveal=reveal):
        click.echo(line)
