"""Fetching, filtering, rendering and acknowledging triggers."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Callable
from typing import Optional
from typing import Protocol

from zabbix_triggers.config.constants import OutputFormat
from zabbix_triggers.exceptions import FetchError
from zabbix_triggers.exceptions import OutputError
from zabbix_triggers.exceptions import UsageError
from zabbix_triggers.exceptions import ZabbixAPIException
from zabbix_triggers.output.console import info
from zabbix_triggers.output.console import success
from zabbix_triggers.output.prompts import confirm_acknowledge
from zabbix_triggers.output.render import render_triggers
from zabbix_triggers.pyzabbix.types import Trigger
from zabbix_triggers.triggers.matcher import match_pattern
from zabbix_triggers.triggers.query import ParseDateTime
from zabbix_triggers.triggers.query import TriggerOptions
from zabbix_triggers.triggers.query import TriggerQuery
from zabbix_triggers.triggers.query import build_query
from zabbix_triggers.triggers.search import PATTERN_MARKER
from zabbix_triggers.triggers.search import SearchQuery
from zabbix_triggers.triggers.search import parse_search_query
from zabbix_triggers.utils.dates import parse_datetime

logger = logging.getLogger(__name__)


class TriggerSource(Protocol):
    """Source of triggers that can also acknowledge their events."""

    def get_triggers(self, query: TriggerQuery) -> list[Trigger]: ...

    def acknowledge(
        self, event_ids: Sequence[str], message: Optional[str] = None
    ) -> list[str]: ...


Confirm = Callable[[], bool]


def check_search_query(tokens: Sequence[str]) -> SearchQuery:
    """Parse search tokens, rejecting words that are not a pattern.

    Raises:
        UsageError: A search token is not marked as a pattern.
    """
    search = parse_search_query(tokens)
    if search.words:
        word = search.words[0]
        raise UsageError(
            f"Unexpected search term {word!r}. "
            f"Did you mean {PATTERN_MARKER}{word} to search for a pattern?"
        )
    return search


def handle_triggers(
    source: TriggerSource,
    options: TriggerOptions,
    *,
    parse_date: ParseDateTime = parse_datetime,
    confirm: Confirm = confirm_acknowledge,
    output_format: OutputFormat = OutputFormat.TABLE,
) -> list[str]:
    """Show triggers matching the options and optionally acknowledge them.

    Returns the IDs of the acknowledged events. The list is empty
    if nothing was acknowledged.

    Raises:
        UsageError: The search query contains words that are not a pattern.
        QueryError: A date option could not be parsed.
        FetchError: The triggers could not be fetched.
        OutputError: The triggers could not be written to stdout.
        AcknowledgeError: The events could not be acknowledged.
    """
    search = check_search_query(options.pattern)

    query = build_query(options, parse_date=parse_date)
    logger.debug("Fetching triggers with params: %s", query.as_params())
    try:
        triggers = source.get_triggers(query)
    except ZabbixAPIException as e:
        raise FetchError("Can't obtain Zabbix triggers") from e
    logger.debug("Fetched %d triggers", len(triggers))

    matched: list[Trigger] = []
    event_ids: list[str] = []
    for trigger in triggers:
        if not match_pattern(search.pattern, str(trigger)):
            continue
        matched.append(trigger)
        event_ids.append(trigger.event_id)
    logger.debug(
        "%d of %d triggers matched pattern %r",
        len(matched),
        len(triggers),
        search.pattern,
    )

    try:
        render_triggers(matched, output_format)
    except OSError as e:
        raise OutputError("Failed to write triggers") from e

    if not options.acknowledge:
        return []
    if not event_ids:
        info("No triggers to acknowledge")
        return []

    if not options.no_confirm and not confirm():
        info(f"Acknowledge of {len(event_ids)} events cancelled")
        return []

    acknowledged = source.acknowledge(event_ids, message=options.message)
    success("Acknowledged")
    return acknowledged
