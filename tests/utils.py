from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any
from typing import Optional

from pytest_httpserver import HTTPServer
from werkzeug import Request
from werkzeug import Response
from zabbix_triggers.pyzabbix.types import Json
from zabbix_triggers.pyzabbix.types import Trigger
from zabbix_triggers.triggers.query import TriggerQuery


def add_zabbix_endpoint(
    httpserver: HTTPServer,
    method: str,  # method is zabbix API method, not HTTP method
    *,
    params: dict[str, Any],
    response: Json = None,
    error: Optional[dict[str, Any]] = None,
    auth: Optional[str] = None,
    headers: Optional[dict[str, str]] = None,
    id: int = 0,
    check_id: bool = False,
) -> None:
    """Add an endpoint mocking a Zabbix API endpoint.

    Responds with `error` instead of `response` if given.
    """

    # Use a custom handler to check request contents
    def handler(request: Request) -> Response:
        # Request has content type 'application/json-rpc'
        # so request.json() method does not work
        request_json = json.loads(request.data.decode())

        # Zabbix API method
        assert request_json["method"] == method

        # Only check the params we passed are correct
        # Missing/extra params are not checked
        for k, v in params.items():
            assert k in request_json["params"]
            assert request_json["params"][k] == v

        # Test auth token in body (< 6.4.0)
        if auth:
            assert request_json["auth"] == auth

        if headers:
            for k, v in headers.items():
                assert request.headers[k] == v

        if check_id:
            assert request_json["id"] == id

        resp: dict[str, Any] = {"jsonrpc": "2.0", "id": request_json["id"]}
        if error:
            resp["error"] = error
        else:
            resp["result"] = response
        return Response(json.dumps(resp), status=200, content_type="application/json")

    httpserver.expect_oneshot_request(
        "/api_jsonrpc.php",
        method="POST",
    ).respond_with_handler(handler)


def add_zabbix_version_endpoint(
    httpserver: HTTPServer, version: str, id: int = 0
) -> None:
    """Add an endpoint emulating the Zabbix apiiinfo.version method."""
    add_zabbix_endpoint(
        httpserver,
        method="apiinfo.version",
        params={},
        response=version,
        id=id,
    )


def add_zabbix_login_endpoints(
    httpserver: HTTPServer, version: str = "7.0.0", token: str = "session123"
) -> None:
    """Add endpoints for a username/password login."""
    add_zabbix_version_endpoint(httpserver, version)
    add_zabbix_endpoint(
        httpserver,
        method="user.login",
        params={"username": "Admin", "password": "zabbix"},
        response=token,
    )
    add_zabbix_endpoint(
        httpserver,
        method="host.get",
        params={"limit": 1},
        response=[{"hostid": "10084"}],
        headers={"Authorization": f"Bearer {token}"},
    )


def make_trigger(
    triggerid: str = "1",
    eventid: str = "100",
    host: str = "db01",
    description: str = "Disk full",
    priority: int = 4,
    value: int = 1,
    acknowledged: int = 0,
    lastchange: int = 1700000000,
) -> dict[str, Any]:
    """Returns a trigger as returned by the `trigger.get` API method."""
    return {
        "triggerid": triggerid,
        "description": description,
        "lastchange": str(lastchange),
        "priority": str(priority),
        "value": str(value),
        "hosts": [{"hostid": "10" + triggerid, "host": host}],
        "lastEvent": {
            "eventid": eventid,
            "acknowledged": str(acknowledged),
            "clock": str(lastchange),
            "value": str(value),
        },
    }


class FakeSource:
    """Trigger source that records the calls made to it."""

    def __init__(
        self,
        triggers: Optional[list[Trigger]] = None,
        fetch_error: Optional[Exception] = None,
        ack_error: Optional[Exception] = None,
    ) -> None:
        self.triggers = triggers or []
        self.fetch_error = fetch_error
        self.ack_error = ack_error
        self.queries: list[TriggerQuery] = []
        self.acknowledged: list[tuple[list[str], Optional[str]]] = []

    def get_triggers(self, query: TriggerQuery) -> list[Trigger]:
        self.queries.append(query)
        if self.fetch_error:
            raise self.fetch_error
        return list(self.triggers)

    def acknowledge(
        self, event_ids: Sequence[str], message: Optional[str] = None
    ) -> list[str]:
        self.acknowledged.append((list(event_ids), message))
        if self.ack_error:
            raise self.ack_error
        return list(event_ids)
