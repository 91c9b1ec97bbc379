"""
Fetch Command - Download a response from the logical-history API.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from ...api.client import HistoryApiClient, HistoryQuery
from ...core.exceptions import LoChaError
from ...core.payload import parse_payload
from ..utils import echo_error, echo_info, echo_success, get_config

logger = logging.getLogger(__name__)


@click.command()
@click.option("--start", "date_start", type=click.DateTime(), help="Start of the period")
@click.option("--end", "date_end", type=click.DateTime(), help="End of the period")
@click.option("--bbox", help="min_lon,min_lat,max_lon,max_lat")
@click.option("-o", "--output", type=click.Path(), help="Write the response to this file")
@click.pass_context
def fetch(
    ctx: click.Context,
    date_start: Optional[datetime],
    date_end: Optional[datetime],
    bbox: Optional[str],
    output: Optional[str],
) -> None:
    """
    Fetch logical history for a period and area.
    """
    try:
        query = HistoryQuery(date_start=date_start, date_end=date_end, bbox=bbox)
    except ValidationError as e:
        echo_error(f"Invalid query: {e.errors()[0]['msg']}")
        ctx.exit(2)

    client = HistoryApiClient(get_config(ctx))
    try:
        data = client.fetch(query)
        payload = parse_payload(data, strict=False)
    except LoChaError as e:
        echo_error(str(e))
        ctx.exit(1)

    if output:
        out_path = Path(output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(data, indent=2))
        echo_success(f"Saved {len(payload.features)} features to {out_path}")
    else:
        click.echo(json.dumps(data, indent=2))

    if not payload.features:
        echo_info("No changes found for this query.")
