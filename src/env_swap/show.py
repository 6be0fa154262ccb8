"""Current-status report for the configured variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from env_swap.config import Configuration
    from env_swap.i18n import Messages

MASK = "********"


@dataclass
class VariableStatus:
    name: str
    current: str | None
    label: str | None


def collect_status(
    config: Configuration, environ: Mapping[str, str] | None = None
) -> list[VariableStatus]:
    """Report each configured variable's current value and matching preset."""
    if environ is None:
        environ = os.environ
    statuses: list[VariableStatus] = []
    for name in config.variable_names():
        current = environ.get(name)
        label = None
        if current is not None:
            label = next(
                (v.label for v in config.values(name) if v.value == current), None
            )
        statuses.append(VariableStatus(name=name, current=current, label=label))
    return statuses


def format_status(
    statuses: list[VariableStatus], messages: Messages, reveal: bool = False
) -> list[str]:
    lines: list[str] = []
    width = max((len(s.name) for s in statuses), default=0)
    for status in statuses:
        if status.current is None:
            lines.append(f"{status.name:<{width}}  {messages.get('show_not_set')}")
            continue
        shown = status.current if reveal else MASK
        label = status.label if status.label is not None else messages.get("show_custom_value")
        lines.append(f"{status.name:<{width}}  {label}  {shown}")
    return lines
