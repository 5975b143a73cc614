"""Type definitions for Zabbix API objects.

Since we are supporting multiple versions of the Zabbix API at the same time,
we don't operate with very strict type definitions. All models are able to
take extra fields, since we don't know (or always care) which fields are
present in which API versions.
"""

from __future__ import annotations

import logging
from collections.abc import MutableMapping
from collections.abc import Sequence
from datetime import datetime
from typing import Annotated
from typing import Any
from typing import Optional
from typing import Union

from pydantic import AliasChoices
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import ValidationInfo
from pydantic import ValidatorFunctionWrapHandler
from pydantic import WrapValidator
from pydantic import computed_field
from pydantic import field_validator
from pydantic_core import PydanticCustomError
from typing_extensions import TypeAliasType

from zabbix_triggers.pyzabbix.enums import AckStatus
from zabbix_triggers.pyzabbix.enums import TriggerPriority
from zabbix_triggers.pyzabbix.enums import TriggerValue

logger = logging.getLogger(__name__)


# Source: https://docs.pydantic.dev/2.7/concepts/types/#named-recursive-types
def json_custom_error_validator(
    value: Any, handler: ValidatorFunctionWrapHandler, _info: ValidationInfo
) -> Any:
    """Simplify the error message to avoid a gross error stemming from
    exhaustive checking of all union options.
    """  # noqa: D205
    try:
        return handler(value)
    except ValidationError:
        raise PydanticCustomError(
            "invalid_json",
            "Input is not valid json",
        ) from None


Json = TypeAliasType(
    "Json",
    Annotated[
        Union[
            MutableMapping[str, "Json"],
            Sequence["Json"],
            str,
            int,
            float,
            bool,
            None,
        ],
        WrapValidator(json_custom_error_validator),
    ],
)


ParamsType = MutableMapping[str, Json]
"""Type used to construct parameters for API requests.
Can only contain native JSON-serializable types.
"""


def format_datetime(dt: Optional[datetime]) -> str:
    """Returns a formatted datetime string in local time, or empty string
    if the datetime is None."""
    if not dt:
        return ""
    return dt.astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ZabbixAPIError(BaseModel):
    """Zabbix API error information."""

    code: int
    message: str
    data: Optional[str] = None


class ZabbixAPIResponse(BaseModel):
    """The raw response from the Zabbix API"""

    jsonrpc: str
    id: int
    result: Any = None
    """Result of API call, if request succeeded."""
    error: Optional[ZabbixAPIError] = None
    """Error info, if request failed."""


class ZabbixAPIBaseModel(BaseModel):
    """Base model for Zabbix API objects."""

    model_config = ConfigDict(
        validate_assignment=True, extra="ignore", populate_by_name=True
    )


class Host(ZabbixAPIBaseModel):
    hostid: str
    host: str = ""


class LastEvent(ZabbixAPIBaseModel):
    """The most recent event of a trigger (`selectLastEvent`)."""

    eventid: str
    acknowledged: int = 0
    clock: Optional[datetime] = None
    value: Optional[int] = None


class Trigger(ZabbixAPIBaseModel):
    triggerid: str
    description: str = ""
    lastchange: Optional[datetime] = None
    priority: Optional[int] = None
    value: Optional[int] = None
    hosts: list[Host] = []
    last_event: Optional[LastEvent] = Field(
        default=None,
        validation_alias=AliasChoices("lastEvent", "last_event"),
    )

    @field_validator("last_event", mode="before")
    @classmethod
    def _empty_last_event_is_none(cls, v: Any) -> Any:
        """The API returns an empty list for triggers without events."""
        if not v:
            return None
        return v

    @computed_field
    @property
    def event_id(self) -> str:
        """ID of the last event of the trigger, if any."""
        if self.last_event:
            return self.last_event.eventid
        return ""

    @computed_field
    @property
    def hostname(self) -> str:
        """Returns the hostname of the trigger."""
        if self.hosts:
            return self.hosts[0].host
        return ""

    @computed_field
    @property
    def severity(self) -> str:
        return TriggerPriority.string_from_value(self.priority)

    @computed_field
    @property
    def status_problem(self) -> str:
        return TriggerValue.string_from_value(self.value)

    @computed_field
    @property
    def status_acknowledge(self) -> str:
        acknowledged = self.last_event.acknowledged if self.last_event else 0
        return AckStatus.string_from_value(acknowledged)

    @property
    def datetime_str(self) -> str:
        return format_datetime(self.lastchange)

    def row(self) -> list[str]:
        """The columns of the trigger as shown in the triggers table."""
        return [
            self.event_id,
            self.datetime_str,
            self.severity,
            self.status_problem,
            self.status_acknowledge,
            self.hostname,
            self.description,
        ]

    def __str__(self) -> str:
        return " ".join(self.row())
