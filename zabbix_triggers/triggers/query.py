"""Translation of trigger command options into a `trigger.get` query."""

from __future__ import annotations

from typing import Callable
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator
from rich.markup import escape
from typing_extensions import Self

from zabbix_triggers.exceptions import DateParseError
from zabbix_triggers.exceptions import QueryError
from zabbix_triggers.output.console import warning
from zabbix_triggers.pyzabbix.types import ParamsType
from zabbix_triggers.utils.args import parse_list_arg
from zabbix_triggers.utils.dates import parse_datetime

ParseDateTime = Callable[[str], int]
"""Converts a date string to a Unix timestamp."""


class TriggerOptions(BaseModel):
    """Options for querying and acknowledging triggers."""

    model_config = ConfigDict(frozen=True)

    acknowledge: bool = False
    no_confirm: bool = False
    only_unacknowledged: bool = False
    maintenance_only: bool = False
    problem_only: bool = False
    recent_only: bool = False
    min_severity: int = Field(default=0, ge=0, le=5)
    since: str = ""
    until: str = ""
    sort: str = "lastchange,priority"
    order: str = "DESC"
    limit: str = "1000"
    pattern: tuple[str, ...] = ()
    message: Optional[str] = None


class TriggerQuery(BaseModel):
    """Query for the `trigger.get` API method."""

    model_config = ConfigDict(frozen=True)

    sort_fields: tuple[str, ...] = ()
    sort_order: str = "DESC"
    min_severity: int = 0
    limit: str = ""
    only_unacknowledged: bool = False
    maintenance: bool = False
    only_true: bool = False
    problem: bool = False
    last_change_till: Optional[int] = None
    last_change_since: Optional[int] = None

    @model_validator(mode="after")
    def _check_time_window(self) -> Self:
        if self.last_change_till is not None and self.last_change_since is not None:
            raise ValueError(
                "Cannot filter on both last change till and last change since."
            )
        return self

    def as_params(self) -> ParamsType:
        """The query as `trigger.get` parameters."""
        params: ParamsType = {
            "sortfield": list(self.sort_fields),
            "sortorder": self.sort_order,
            "min_severity": self.min_severity,
            "limit": self.limit,
        }
        if self.only_unacknowledged:
            params["withLastEventUnacknowledged"] = "1"
        if self.maintenance:
            params["maintenance"] = "1"
        if self.only_true:
            params["only_true"] = "1"
        if self.problem:
            params["filter"] = {"value": "1"}
        if self.last_change_till is not None:
            params["lastChangeTill"] = self.last_change_till
        elif self.last_change_since is not None:
            params["lastChangeSince"] = self.last_change_since
        return params


def _parse_date_option(value: str, parse_date: ParseDateTime) -> int:
    try:
        return parse_date(value)
    except (DateParseError, ValueError) as e:
        raise QueryError(f"Invalid date: {value}", value=value) from e


def build_query(
    options: TriggerOptions, parse_date: ParseDateTime = parse_datetime
) -> TriggerQuery:
    """Build a trigger query from trigger options.

    If both `until` and `since` are given, only `until` is used.

    Raises:
        QueryError: A date option could not be parsed.
    """
    last_change_till: Optional[int] = None
    last_change_since: Optional[int] = None
    if options.until:
        last_change_till = _parse_date_option(options.until, parse_date)
    elif options.since:
        last_change_since = _parse_date_option(options.since, parse_date)

    if options.until and options.since:
        warning(f"Ignoring --since {escape(options.since)!r} in favor of --until")

    return TriggerQuery(
        sort_fields=tuple(parse_list_arg(options.sort)),
        sort_order=options.order,
        min_severity=options.min_severity,
        limit=options.limit,
        only_unacknowledged=options.only_unacknowledged,
        maintenance=options.maintenance_only,
        only_true=options.recent_only,
        problem=options.problem_only,
        last_change_till=last_change_till,
        last_change_since=last_change_since,
    )
