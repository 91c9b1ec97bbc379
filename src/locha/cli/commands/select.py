"""
Select Command - Show what a click on one feature highlights.
"""

import click
from rich.console import Console

from ...core.exceptions import UnknownFeatureError
from ..formatting import build_selection_response, render_selection
from ..utils import echo_error, get_config, load_session


@click.command()
@click.argument("payload_file", type=click.Path())
@click.argument("feature_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--lenient", is_flag=True,
              help="Report links to unknown features instead of rejecting the payload")
@click.pass_context
def select(ctx: click.Context, payload_file: str, feature_id: int, as_json: bool, lenient: bool) -> None:
    """
    Select FEATURE_ID in PAYLOAD_FILE and list the related links and features.
    """
    session = load_session(payload_file, get_config(ctx), lenient=lenient)
    if session is None:
        ctx.exit(1)

    try:
        selection = session.select(feature_id)
    except UnknownFeatureError as e:
        echo_error(str(e))
        ctx.exit(1)

    response = build_selection_response(session, selection)

    if as_json:
        click.echo(response.model_dump_json(indent=2))
        return

    render_selection(response, Console())
