from __future__ import annotations

import pytest
from inline_snapshot import snapshot
from zabbix_triggers.exceptions import AcknowledgeError
from zabbix_triggers.exceptions import FetchError
from zabbix_triggers.exceptions import QueryError
from zabbix_triggers.exceptions import UsageError
from zabbix_triggers.exceptions import ZabbixAPIRequestError
from zabbix_triggers.exceptions import format_cause_chain
from zabbix_triggers.exceptions import get_exception_handler
from zabbix_triggers.exceptions import handle_exception
from zabbix_triggers.exceptions import handle_notraceback
from zabbix_triggers.pyzabbix.types import ZabbixAPIError
from zabbix_triggers.pyzabbix.types import ZabbixAPIResponse


def test_request_error_reason_with_api_response() -> None:
    api_resp = ZabbixAPIResponse(
        jsonrpc="2.0",
        result=None,
        id=1,
        error=ZabbixAPIError(code=-123, message="Some error", data='{"foo": 42}'),
    )
    e = ZabbixAPIRequestError("foo!", api_response=api_resp)
    assert e.reason() == snapshot('(-123) Some error {"foo": 42}')


def test_request_error_reason_fallback() -> None:
    assert ZabbixAPIRequestError("foo!").reason() == "foo!"


def test_call_error_includes_reason() -> None:
    try:
        try:
            raise ZabbixAPIRequestError("Invalid params.")
        except ZabbixAPIRequestError as e:
            raise AcknowledgeError("Failed to acknowledge events 101") from e
    except AcknowledgeError as e:
        assert str(e) == snapshot("Failed to acknowledge events 101: Invalid params.")


def test_format_cause_chain() -> None:
    try:
        try:
            try:
                raise ConnectionResetError("Connection reset by peer")
            except ConnectionResetError as e:
                raise ZabbixAPIRequestError("Failed to send request") from e
        except ZabbixAPIRequestError as e:
            raise FetchError("Can't obtain Zabbix triggers") from e
    except FetchError as e:
        assert format_cause_chain(e) == snapshot(
            """\
Can't obtain Zabbix triggers
└─ Failed to send request
   └─ Connection reset by peer\
"""
        )


def test_format_cause_chain_skips_included_reason() -> None:
    """Causes already included in the message of a call error are not repeated."""
    try:
        try:
            raise ZabbixAPIRequestError("Error: Invalid params. No permissions.")
        except ZabbixAPIRequestError as e:
            raise AcknowledgeError("Failed to acknowledge events 101") from e
    except AcknowledgeError as e:
        assert format_cause_chain(e) == snapshot(
            "Failed to acknowledge events 101: Error: Invalid params. No permissions."
        )


def test_format_cause_chain_no_cause() -> None:
    assert format_cause_chain(UsageError("bad")) == "bad"


@pytest.mark.parametrize(
    "exc_type",
    [UsageError, QueryError, FetchError, AcknowledgeError, ZabbixAPIRequestError],
)
def test_get_exception_handler(exc_type: type[Exception]) -> None:
    assert get_exception_handler(exc_type) is handle_notraceback


def test_get_exception_handler_unknown() -> None:
    assert get_exception_handler(KeyError) is None


def test_handle_exception_exits(capsys: pytest.CaptureFixture[str]) -> None:
    try:
        raise QueryError("Invalid date: tomorrow", value="tomorrow")
    except QueryError as e:
        with pytest.raises(SystemExit) as exc_info:
            handle_exception(e)
    assert exc_info.value.code == 1
    assert "Invalid date: tomorrow" in capsys.readouterr().err


def test_handle_exception_reraises_unknown() -> None:
    with pytest.raises(KeyError):
        handle_exception(KeyError("foo"))
