"""Shell command generation for the chosen value."""

from __future__ import annotations


def generate_powershell_command(name: str, value: str) -> str:
    """Return a PowerShell command that sets environment variable *name*.

    Single quotes inside a single-quoted PowerShell string are escaped by
    doubling them::

        >>> generate_powershell_command("API_KEY", "it's a secret")
        "$Env:API_KEY = 'it''s a secret'"
    """
    escaped_value = value.replace("'", "''")
    return f"$Env:{name} = '{escaped_value}'"
