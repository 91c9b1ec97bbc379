"""
CLI Utilities - Shared helper functions for command line operations.

Formatted printing and payload loading used across commands.
"""

from pathlib import Path
from typing import Optional

import click

from ..config import LoChaConfig
from ..core.exceptions import LoChaError
from ..core.payload import load_payload
from ..core.session import LoChaSession


# kind -> (prefix, click.style options, write to stderr)
_MESSAGE_STYLES = {
    "success": ("✅ ", {"fg": "green"}, False),
    "error": ("❌ ", {"fg": "red"}, True),
    "warning": ("⚠️  ", {"fg": "yellow"}, False),
    "info": ("   ", {"dim": True}, False),
}


def _echo(kind: str, message: str) -> None:
    prefix, style, to_stderr = _MESSAGE_STYLES[kind]
    click.echo(click.style(prefix + message, **style), err=to_stderr)


def echo_success(message: str) -> None:
    _echo("success", message)


def echo_error(message: str) -> None:
    """Printed to stderr."""
    _echo("error", message)


def echo_warning(message: str) -> None:
    _echo("warning", message)


def echo_info(message: str) -> None:
    _echo("info", message)


def get_config(ctx: click.Context) -> LoChaConfig:
    """Config loaded by the root command, or defaults when run standalone."""
    obj = ctx.find_object(dict) or {}
    return obj.get("config") or LoChaConfig()


def load_session(
    payload_file: str,
    config: LoChaConfig,
    lenient: bool = False,
) -> Optional[LoChaSession]:
    """
    Load a payload file into a new session.

    Args:
        payload_file: Path to a JSON response saved from the API.
        config: Settings for the session.
        lenient: Report dangling links instead of rejecting the payload.

    Returns:
        The loaded session, or None if loading failed (the error has
        already been printed).
    """
    path = Path(payload_file)
    if not path.exists():
        echo_error(f"Payload file not found: {payload_file}")
        return None

    session = LoChaSession(config)
    strict = False if lenient else config.strict_links
    try:
        session.set_data(load_payload(path, strict=strict), strict=strict)
    except LoChaError as e:
        echo_error(f"Failed to load payload: {e}")
        return None
    return session
