#!/usr/bin/env python
#
# Authors:
# rafael@e-mc2.net / https://e-mc2.net/
#
# Copyright (c) 2014-2024 USIT-University of Oslo
#
# This file is part of Zabbix-triggers
# https://github.com/unioslo/zabbix-triggers
#
# Zabbix-triggers is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# Zabbix-triggers is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with Zabbix-triggers.  If not, see <http://www.gnu.org/licenses/>.
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from zabbix_triggers.__about__ import APP_NAME
from zabbix_triggers.__about__ import __version__
from zabbix_triggers.config.constants import OutputFormat
from zabbix_triggers.config.model import Config
from zabbix_triggers.config.utils import get_config
from zabbix_triggers.logs import add_server
from zabbix_triggers.logs import add_user
from zabbix_triggers.logs import configure_logging
from zabbix_triggers.logs import logger
from zabbix_triggers.pyzabbix.client import ZabbixAPI
from zabbix_triggers.triggers.query import TriggerOptions
from zabbix_triggers.triggers.workflow import check_search_query
from zabbix_triggers.triggers.workflow import handle_triggers

app = typer.Typer(
    name=APP_NAME,
    help="Show Zabbix triggers and optionally acknowledge them.",
    add_completion=False,
    rich_markup_mode="rich",
)


def version_callback(value: bool):
    if value:
        print(f"{APP_NAME} version {__version__}")
        raise typer.Exit()


def login(client: ZabbixAPI, config: Config) -> None:
    """Log in to the Zabbix API with the credentials from the config."""
    client.login(
        user=config.api.username,
        password=config.api.password.get_secret_value(),
        auth_token=config.api.auth_token.get_secret_value(),
    )
    add_user(config.api.username)


def run_triggers(config: Config, options: TriggerOptions, fmt: OutputFormat) -> None:
    """Log in, run the triggers workflow and log out again."""
    client = ZabbixAPI.from_config(config)
    add_server(client.url)
    try:
        login(client, config)
        try:
            handle_triggers(client, options, output_format=fmt)
        finally:
            client.logout()
    finally:
        client.close()


@app.command(name="triggers")
def triggers(
    pattern: Optional[list[str]] = typer.Argument(
        None,
        help="Search pattern prefixed with [bold]/[/], e.g. [bold]/db01[/].",
        show_default=False,
    ),
    acknowledge: bool = typer.Option(
        False,
        "--acknowledge",
        "-k",
        help="Acknowledge the last event of the matched triggers.",
    ),
    no_confirm: bool = typer.Option(
        False,
        "--noconfirm",
        "-f",
        help="Acknowledge without asking for confirmation.",
    ),
    severity: int = typer.Option(
        0,
        "--severity",
        "-x",
        min=0,
        max=5,
        help="Minimum trigger severity (0-5).",
    ),
    only_nack: bool = typer.Option(
        False,
        "--only-nack",
        "-u",
        help="Only show triggers whose last event is unacknowledged.",
    ),
    maintenance: bool = typer.Option(
        False,
        "--maintenance",
        "-m",
        help="Only show triggers of hosts in maintenance.",
    ),
    problem: bool = typer.Option(
        False,
        "--problem",
        "-p",
        help="Only show triggers in the problem state.",
    ),
    recent: bool = typer.Option(
        False,
        "--recent",
        "-t",
        help="Only show triggers that are in the problem state or recently were.",
    ),
    since: str = typer.Option(
        "",
        "--since",
        "-s",
        help="Only show triggers that changed state after this date.",
        show_default=False,
    ),
    until: str = typer.Option(
        "",
        "--until",
        "-e",
        help="Only show triggers that changed state before this date. Overrides [option]--since[/].",
        show_default=False,
    ),
    sort: Optional[str] = typer.Option(
        None,
        "--sort",
        help="Comma-separated fields to sort by. Defaults to the configured sort.",
    ),
    order: Optional[str] = typer.Option(
        None,
        "--order",
        help="Sort order (ASC or DESC). Defaults to the configured order.",
    ),
    limit: Optional[str] = typer.Option(
        None,
        "--limit",
        help="Maximum number of triggers to fetch. Defaults to the configured limit.",
    ),
    message: Optional[str] = typer.Option(
        None,
        "--message",
        help="Message to add to acknowledged events.",
    ),
    output_format: Optional[OutputFormat] = typer.Option(
        None,
        "--format",
        "-o",
        help="Output format.",
        case_sensitive=False,
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Alternate configuration file to use.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug messages to stderr.",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show the version of zabbix-triggers and exit.",
        is_eager=True,
        callback=version_callback,
    ),
) -> None:
    """Show Zabbix triggers matching the given filters.

    With [option]--acknowledge[/], the last event of every listed trigger
    is acknowledged after confirmation.
    """
    try:
        config = get_config(config_file)
        if verbose:
            config.logging.enabled = True
            config.logging.log_file = None
            config.logging.log_level = "DEBUG"
        configure_logging(config.logging)
        logger.debug("zabbix-triggers started.")

        # Fail on malformed search terms before connecting to the API
        check_search_query(pattern or [])

        defaults = config.triggers
        options = TriggerOptions(
            acknowledge=acknowledge,
            no_confirm=no_confirm,
            only_unacknowledged=only_nack,
            maintenance_only=maintenance,
            problem_only=problem,
            recent_only=recent,
            min_severity=severity,
            since=since,
            until=until,
            sort=sort if sort is not None else defaults.sort,
            order=order if order is not None else defaults.order,
            limit=limit if limit is not None else defaults.limit,
            pattern=tuple(pattern or []),
            message=message if message is not None else defaults.acknowledge_message,
        )
        fmt = output_format or defaults.output_format
        run_triggers(config, options, fmt)
    except Exception as e:
        from zabbix_triggers.exceptions import handle_exception

        handle_exception(e)
    finally:
        logger.debug("zabbix-triggers stopped.")


def main() -> int:
    """Main entry point for the CLI."""
    configure_logging()
    app()
    return 0


if __name__ == "__main__":
    main()
