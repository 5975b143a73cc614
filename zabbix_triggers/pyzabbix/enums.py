from __future__ import annotations

from enum import Enum
from typing import Any
from typing import Generic
from typing import TypeVar

from typing_extensions import Self

from zabbix_triggers.exceptions import ZabbixTriggersError

T = TypeVar("T")


class APIStr(str, Generic[T]):
    """String type that can be used as an Enum choice while also
    carrying an API value associated with the string.
    """

    # Instance variables are set by __new__
    api_value: T
    value: str

    def __new__(
        cls,
        s: str,
        api_value: T = None,
    ) -> APIStr[T]:
        if isinstance(s, APIStr):
            return s  # type: ignore # Type checker should be able to infer generic type
        if api_value is None:
            raise ZabbixTriggersError("API value must be provided for APIStr.")
        obj = str.__new__(cls, s)
        obj.value = s
        obj.api_value = api_value
        return obj


class Choice(Enum):
    """Enum subclass that allows for an Enum to have APIStr values, which
    enables it to be instantiated with either the name of the option
    or the Zabbix API value of the option.

    We can instantiate the enum with either the name or the API value:
        * `TriggerPriority("high")`
        * `TriggerPriority(4)`
        * `TriggerPriority("4")`
    """

    value: APIStr[int]  # pyright: ignore[reportIncompatibleMethodOverride]
    __choice_name__: str = ""  # default (falls back to class name)

    def __new__(cls, value: APIStr[int]) -> Choice:
        # Adds type checking for members in enum definition
        obj = object.__new__(cls)
        obj._value_ = value
        return obj

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        pass

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def __fmt_name__(cls) -> str:
        """Return the name of the enum class in a human-readable format.

        If no default is provided, the class name is split on capital letters and
        lowercased, e.g. `TriggerPriority` becomes `trigger priority`.
        """
        if cls.__choice_name__:
            return cls.__choice_name__
        return (
            "".join([(" " + i if i.isupper() else i) for i in cls.__name__])
            .lower()
            .strip()
        )

    @classmethod
    def choices(cls) -> list[str]:
        """Return list of string values of the enum members."""
        return [str(e) for e in cls]

    def as_api_value(self) -> int:
        """Return the equivalent Zabbix API value."""
        return self.value.api_value

    @classmethod
    def _missing_(cls, value: object) -> object:
        """Method that is called when an enum member is not found.

        Attempts to find the member with 2 strategies:
        1. Search for a member with the given string value (ignoring case)
        2. Search for a member with the given API value (converted to string)
        """
        for v in cls:
            if v.value == value:
                return v
            elif str(v.value).lower() == str(value).lower():
                return v
            elif str(v.as_api_value()) == str(value):
                return v
        raise ZabbixTriggersError(f"Invalid {cls.__fmt_name__()}: {value!r}.")


class APIStrEnum(Choice):
    """Enum that returns value of member as str."""

    @classmethod
    def string_from_value(
        cls: type[Self], value: Any, default: str = "Unknown", with_code: bool = False
    ) -> str:
        """Get a formatted status string given a value."""
        try:
            c = cls(value)
            # All lowercase is capitalized
            if c.value.islower():
                name = c.value.capitalize()
            # Everything else is left as is
            else:
                name = str(c.value)
            code = c.value.api_value
        except (ValueError, ZabbixTriggersError):
            name = default
            code = value
        if with_code:
            return f"{name} ({code})"
        return name


class AckStatus(APIStrEnum):
    """Acknowledgement status of the last event of a trigger."""

    NACK = APIStr("NACK", 0)
    ACK = APIStr("ACK", 1)


class TriggerValue(APIStrEnum):
    """State of a trigger."""

    OK = APIStr("OK", 0)
    PROBLEM = APIStr("PROBLEM", 1)


class TriggerPriority(APIStrEnum):
    UNCLASSIFIED = APIStr("unclassified", 0)
    INFORMATION = APIStr("information", 1)
    WARNING = APIStr("warning", 2)
    AVERAGE = APIStr("average", 3)
    HIGH = APIStr("high", 4)
    DISASTER = APIStr("disaster", 5)
