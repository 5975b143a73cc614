from __future__ import annotations

import functools
from typing import TYPE_CHECKING
from typing import Any
from typing import NoReturn
from typing import Optional
from typing import Protocol
from typing import runtime_checkable

if TYPE_CHECKING:
    from httpx import ConnectError
    from httpx import RequestError
    from httpx import Response as HTTPResponse
    from pydantic import ValidationError

    from zabbix_triggers.pyzabbix.types import ParamsType
    from zabbix_triggers.pyzabbix.types import ZabbixAPIResponse


class ZabbixTriggersError(Exception):
    """Base exception class for zabbix-triggers exceptions."""


class ConfigError(ZabbixTriggersError):
    """Error with configuration file."""


class UsageError(ZabbixTriggersError):
    """Invalid combination of command line arguments."""


class DateParseError(ZabbixTriggersError, ValueError):
    """A date string could not be parsed."""


class QueryError(ZabbixTriggersError):
    """Failed to build a trigger query from the given options."""

    def __init__(self, message: str, value: str = "") -> None:
        super().__init__(message)
        self.value = value


class FetchError(ZabbixTriggersError):
    """Failed to obtain triggers from the Zabbix API."""


class OutputError(ZabbixTriggersError, OSError):
    """Failed to write output."""


class ZabbixAPIException(ZabbixTriggersError):
    # Extracted from pyzabbix, hence *Exception suffix instead of *Error
    """Base exception class for Zabbix API exceptions."""

    def reason(self) -> str:
        return ""


class ZabbixAPIRequestError(ZabbixAPIException):
    """Zabbix API response error."""

    def __init__(
        self,
        *args: Any,
        params: Optional[ParamsType] = None,
        api_response: Optional[ZabbixAPIResponse] = None,
        response: Optional[HTTPResponse] = None,
    ) -> None:
        super().__init__(*args)
        self.params = params
        self.api_response = api_response
        self.response = response

    def reason(self) -> str:
        if self.api_response and self.api_response.error:
            reason = (
                f"({self.api_response.error.code}) {self.api_response.error.message}"
            )
            if self.api_response.error.data:
                reason += f" {self.api_response.error.data}"
        elif self.response and self.response.text:
            reason = self.response.text
        else:
            reason = str(self)
        return reason


class ZabbixAPITokenExpiredError(ZabbixAPIRequestError):
    """Zabbix API token expired error."""


class ZabbixAPINotAuthorizedError(ZabbixAPIRequestError):
    """Zabbix API not authorized error."""


class ZabbixAPIResponseParsingError(ZabbixAPIRequestError):
    """Zabbix API returned a response we could not parse."""


class ZabbixAPISessionExpired(ZabbixAPIRequestError):
    """Zabbix API session expired."""


class ZabbixAPICallError(ZabbixAPIException):
    """Zabbix API call failed."""

    def __str__(self) -> str:
        msg = super().__str__()
        if self.__cause__ and isinstance(self.__cause__, ZabbixAPIRequestError):
            msg = f"{msg}: {self.__cause__.reason()}"
        return msg


class ZabbixAPILoginError(ZabbixAPICallError):
    """Zabbix API login error."""


class ZabbixAPILogoutError(ZabbixAPICallError):
    """Zabbix API logout error."""


class AcknowledgeError(ZabbixAPICallError):
    """The Zabbix API rejected an event acknowledgement."""


class Exiter(Protocol):
    """Protocol class for exit function that can be passed to an
    exception handler function.

    See Also:
    --------
    [zabbix_triggers.exceptions.HandleFunc][]
    """

    def __call__(
        self,
        message: str,
        code: int = ...,
        exception: Optional[Exception] = ...,
        exc_info: bool = ...,
    ) -> NoReturn: ...


@runtime_checkable
class HandleFunc(Protocol):
    """Interface for exception handler functions.

    They take any exception as the argument and exit with the appropriate
    message after running any necessary logging.
    """

    def __call__(self, e: Any) -> NoReturn: ...


def format_cause_chain(e: BaseException) -> str:
    """Formats an exception and its causes as a tree of messages.

    Each exception in the `__cause__` chain adds one line, indented
    below the exception that wraps it.
    """
    lines = [str(e)]
    cause = e.__cause__
    depth = 0
    while cause:
        msg = str(cause)
        # ZabbixAPICallError already appends the reason of its cause
        if not (msg and msg in lines[-1]):
            lines.append(f"{'   ' * depth}└─ {msg or type(cause).__name__}")
            depth += 1
        cause = cause.__cause__
    return "\n".join(lines)


def handle_notraceback(e: Exception) -> NoReturn:
    """Handles an exception with no traceback in console.
    The exception is logged with a traceback in the log file.
    """
    get_exit_err()(format_cause_chain(e), exception=e, exc_info=True)


def handle_validation_error(e: ValidationError) -> NoReturn:
    """Handles a Pydantic validation error."""
    get_exit_err()(str(e), exception=e, exc_info=True)


def _fmt_request_error(e: RequestError, exc_type: str, reason: str) -> str:
    method = e.request.method
    url = e.request.url
    return f"{exc_type}: {method} {url} - {reason}"


def handle_connect_error(e: ConnectError) -> NoReturn:
    """Handles an httpx ConnectError."""
    # Simple heuristic here to determine cause
    if e.args and "connection refused" in str(e.args[0]).casefold():
        reason = "Connection refused"
    else:
        reason = str(e)
    msg = _fmt_request_error(e, "Connection error", reason)
    get_exit_err()(msg, exception=e, exc_info=False)


def get_exception_handler(type_: type[Exception]) -> Optional[HandleFunc]:
    """Returns the exception handler for the given exception type."""
    from httpx import ConnectError
    from pydantic import ValidationError

    # Defined inline for performance reasons (httpx and pydantic imports)
    EXC_HANDLERS: dict[type[Exception], HandleFunc] = {
        ZabbixTriggersError: handle_notraceback,
        ValidationError: handle_validation_error,
        ConnectError: handle_connect_error,
    }
    """Mapping of exception types to exception handling strategies."""

    handler = EXC_HANDLERS.get(type_, None)
    if handler:
        return handler
    if type_.__bases__:
        for base in type_.__bases__:
            handler = get_exception_handler(base)
            if handler:
                return handler
    return None


def handle_exception(e: Exception) -> NoReturn:
    """Handles an exception and exits with the appropriate message."""
    handler = get_exception_handler(type(e))
    if not handler:
        raise e
    handler(e)


@functools.lru_cache(maxsize=1)
def get_exit_err() -> Exiter:
    """Cached lazy-import of `zabbix_triggers.output.console.exit_err`.
    Avoids circular imports.
    """
    from zabbix_triggers.output.console import exit_err as _exit_err

    return _exit_err
