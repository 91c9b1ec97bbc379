"""
locha CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from ..config import LoChaConfig
from ..core.exceptions import ConfigError
from .commands import fetch, groups, select
from .utils import echo_error


@click.group()
@click.version_option(package_name="locha")
@click.option("-c", "--config", "config_path", type=click.Path(),
              help="Path to config.yaml (default: .locha/config.yaml)")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """locha: logical changes of OpenStreetMap objects.

    Groups the object versions returned by the logical-history API
    into change groups.

    \b
    Quick Start:
      locha fetch --start 2024-01-01 --end 2024-01-15 --bbox 1.4,43.5,1.5,43.6 -o changes.json
      locha groups changes.json
      locha select changes.json 12
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = LoChaConfig.load(Path(config_path) if config_path else None)
    except ConfigError as e:
        echo_error(str(e))
        ctx.exit(1)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


main.add_command(groups.groups)
main.add_command(select.select)
main.add_command(fetch.fetch)

if __name__ == "__main__":
    main()
