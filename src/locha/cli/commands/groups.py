"""
Groups Command - Show the change groups of a logical-history response.
"""

import logging

import click
from rich.console import Console

from ..formatting import build_groups_response, render_groups
from ..utils import echo_info, echo_warning, get_config, load_session

logger = logging.getLogger(__name__)


@click.command()
@click.argument("payload_file", type=click.Path())
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--lenient", is_flag=True,
              help="Report links to unknown features instead of rejecting the payload")
@click.pass_context
def groups(ctx: click.Context, payload_file: str, as_json: bool, lenient: bool) -> None:
    """
    Group the features of PAYLOAD_FILE into logical changes.
    """
    session = load_session(payload_file, get_config(ctx), lenient=lenient)
    if session is None:
        ctx.exit(1)

    response = build_groups_response(session)

    if as_json:
        click.echo(response.model_dump_json(indent=2))
        return

    if response.empty:
        echo_info("No changes found in this response.")
        return

    render_groups(response, Console())

    if response.broken_links:
        echo_warning(f"{len(response.broken_links)} link(s) could not be resolved")
