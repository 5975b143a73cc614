#
# The code in this file is based on the pyzabbix library:
# https://github.com/lukecyca/pyzabbix
#
# Numerous changes have been made to the original code to make it more
# type-safe and to better fit the use-cases of the zabbix-triggers project.
#
# We have modified the login method to be able to send an auth-token so
# we do not have to login again as long as the auth-token used is still
# active.
#
# We have also modified the output when an error happens to not show
# the username + password information.
#
from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import cached_property
from typing import TYPE_CHECKING
from typing import Any
from typing import Optional
from typing import Union

import httpx
from packaging.version import InvalidVersion
from packaging.version import Version
from pydantic import ValidationError

from zabbix_triggers.__about__ import APP_NAME
from zabbix_triggers.__about__ import __version__
from zabbix_triggers.exceptions import AcknowledgeError
from zabbix_triggers.exceptions import ZabbixAPICallError
from zabbix_triggers.exceptions import ZabbixAPIException
from zabbix_triggers.exceptions import ZabbixAPILoginError
from zabbix_triggers.exceptions import ZabbixAPILogoutError
from zabbix_triggers.exceptions import ZabbixAPINotAuthorizedError
from zabbix_triggers.exceptions import ZabbixAPIRequestError
from zabbix_triggers.exceptions import ZabbixAPIResponseParsingError
from zabbix_triggers.exceptions import ZabbixAPISessionExpired
from zabbix_triggers.exceptions import ZabbixAPITokenExpiredError
from zabbix_triggers.pyzabbix import compat
from zabbix_triggers.pyzabbix.types import ParamsType
from zabbix_triggers.pyzabbix.types import Trigger
from zabbix_triggers.pyzabbix.types import ZabbixAPIResponse
from zabbix_triggers.pyzabbix.utils import get_acknowledge_action_value

if TYPE_CHECKING:
    from httpx._types import TimeoutTypes
    from typing_extensions import TypedDict

    from zabbix_triggers.config.model import Config
    from zabbix_triggers.triggers.query import TriggerQuery

    class HTTPXClientKwargs(TypedDict, total=False):
        timeout: TimeoutTypes


logger = logging.getLogger(__name__)

RPC_ENDPOINT = "/api_jsonrpc.php"

TRIGGER_SELECT_PARAMS: ParamsType = {
    "output": "extend",
    "expandDescription": 1,
    "selectHosts": ["host"],
    "selectLastEvent": "extend",
}
"""Parameters added to every `trigger.get` request to include the
hosts and last event of each trigger."""


class ZabbixAPI:
    def __init__(
        self,
        server: str = "http://localhost/zabbix",
        timeout: Optional[int] = None,
        verify_ssl: bool = True,
    ) -> None:
        """Parameters:
        server: Base URI for zabbix web interface (omitting /api_jsonrpc.php)
        timeout: optional connect and read timeout in seconds.
        verify_ssl: verify the server's SSL certificate.
        """
        self.timeout = timeout if timeout else None
        self.session = self._get_client(verify_ssl=verify_ssl, timeout=timeout)

        self.auth = ""
        self.use_api_token = False
        self.id = 0

        self.url = self._get_url(server)
        logger.info("JSON-RPC Server Endpoint: %s", self.url)

    def _get_url(self, server: str) -> str:
        """Format a URL for the Zabbix API."""
        server, _, _ = server.partition(RPC_ENDPOINT)
        return f"{server.rstrip('/')}{RPC_ENDPOINT}"

    @classmethod
    def from_config(cls, config: Config) -> ZabbixAPI:
        """Create a ZabbixAPI instance from a Config object. Does not log in."""
        client = cls(
            server=config.api.url,
            timeout=config.api.timeout,
            verify_ssl=config.api.verify_ssl,
        )
        return client

    def _get_client(
        self, verify_ssl: bool, timeout: Union[float, int, None] = None
    ) -> httpx.Client:
        kwargs: HTTPXClientKwargs = {}
        if timeout is not None:
            kwargs["timeout"] = timeout
        client = httpx.Client(
            verify=verify_ssl,
            # Default headers for all requests
            headers={
                "Content-Type": "application/json-rpc",
                "User-Agent": f"python/{APP_NAME}/{__version__}",
                "Cache-Control": "no-cache",
            },
            **kwargs,
        )
        return client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.session.close()

    def login(
        self,
        user: Optional[str] = None,
        password: Optional[str] = None,
        auth_token: Optional[str] = None,
    ) -> str:
        """Log in to the Zabbix API using a username/password or an API token.

        At least one authentication method must be provided.
        The API token takes precedence if both are given.

        Args:
            user (str, optional): Username. Defaults to None.
            password (str, optional): Password. Defaults to None.
            auth_token (str, optional): API token. Defaults to None.
        """
        # By checking the version, we also check if the API is reachable
        try:
            version = self.version  # property
        except ZabbixAPIException as e:
            raise ZabbixAPILoginError(
                f"Failed to connect to Zabbix API at {self.url}"
            ) from e

        logger.debug("Logging in to Zabbix %s API at %s", version, self.url)

        use_auth_token = False
        if auth_token:
            logger.debug("Using API token for authentication")
            auth = auth_token
            use_auth_token = True
        elif user and password:
            logger.debug("Using username and password for authentication")
            params: ParamsType = {
                compat.login_user_name(version): user,
                "password": password,
            }
            try:
                auth = self.do_request("user.login", params).result
            except ZabbixAPIRequestError as e:
                raise ZabbixAPILoginError("Failed to log in to Zabbix") from e
            auth = str(auth) if auth else ""
        else:
            raise ZabbixAPILoginError(
                "No authentication method provided. Must provide user/password or API token"
            )

        self.auth = auth
        self.use_api_token = use_auth_token

        # Check if the auth token we obtained or specified is valid
        self.ensure_authenticated()
        return self.auth

    def ensure_authenticated(self) -> None:
        """Test an authenticated Zabbix API session."""
        try:
            self.do_request("host.get", {"output": ["hostid"], "limit": 1})
        except ZabbixAPIException as e:
            # Leaking the token should be OK - it's invalid
            raise ZabbixAPILoginError(f"Invalid session token: {self.auth}") from e

    def logout(self) -> None:
        if not self.auth:
            logger.debug("No auth token to log out with")
            return
        elif self.use_api_token:
            logger.debug("Logging out with API token")
            self.auth = ""
            return

        try:
            self.do_request("user.logout")
        except ZabbixAPITokenExpiredError:
            logger.debug(
                "Attempted to log out of Zabbix API with expired token: %s", self.auth
            )
        except ZabbixAPIRequestError as e:
            raise ZabbixAPILogoutError("Failed to log out of Zabbix") from e
        else:
            self.auth = ""

    @cached_property
    def version(self) -> Version:
        """`api_version()` exposed as a cached property."""
        return self.api_version()

    def api_version(self) -> Version:
        """Get the version of the Zabbix API as a Version object."""
        try:
            return Version(str(self.do_request("apiinfo.version").result))
        except ZabbixAPIException as e:
            raise ZabbixAPIException("Failed to get Zabbix version from API") from e
        except InvalidVersion as e:
            raise ZabbixAPIException("Got invalid Zabbix version from API") from e

    def do_request(
        self, method: str, params: Optional[ParamsType] = None
    ) -> ZabbixAPIResponse:
        params = params or {}

        request_json: dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": self.id,
        }
        request_headers: dict[str, str] = {}

        # We don't have to pass the auth token if asking for the apiinfo.version
        if self.auth and method.lower() not in [
            "apiinfo.version",
            "user.login",
        ]:
            if compat.auth_header(self.version):
                request_headers["Authorization"] = f"Bearer {self.auth}"
            else:
                request_json["auth"] = self.auth

        logger.debug("Sending %s to %s", method, self.url)

        try:
            response = self.session.post(
                self.url, json=request_json, headers=request_headers
            )
        except httpx.HTTPError as e:
            raise ZabbixAPIRequestError(
                f"Failed to send request to {self.url} ({method})",
                params=params,
            ) from e

        logger.debug("Response Code: %s", str(response.status_code))

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ZabbixAPIRequestError(
                f"Zabbix API returned HTTP {response.status_code} ({method})",
                response=response,
            ) from e

        if not len(response.text):
            raise ZabbixAPIRequestError("Received empty response", response=response)

        self.id += 1

        try:
            resp = ZabbixAPIResponse.model_validate_json(response.text)
        except ValidationError as e:
            raise ZabbixAPIResponseParsingError(
                "Zabbix API returned malformed response", response=response
            ) from e
        except ValueError as e:
            raise ZabbixAPIResponseParsingError(
                "Zabbix API returned invalid JSON", response=response
            ) from e

        self._check_response_errors(resp, response, params)

        return resp

    def _check_response_errors(
        self,
        resp: ZabbixAPIResponse,
        response: httpx.Response,
        params: ParamsType,
    ) -> None:
        # Nothing to handle
        if not resp.error:
            return

        # some errors don't contain 'data': workaround for ZBX-9340
        if not resp.error.data:
            resp.error.data = "No data"

        msg = f"Error: {resp.error.message} {resp.error.data}"

        to_replace = [
            (self.auth, "<token>"),
            (params.get("password", ""), "<password>"),
        ]
        for secret, replacement in to_replace:
            if secret:
                msg = msg.replace(str(secret), replacement)

        msgc = msg.casefold()
        if "api token expired" in msgc:
            cls = ZabbixAPITokenExpiredError
            logger.debug(
                "API token '%s' has expired.",
                f"{self.auth[:8]}...",  # Redact most of the token
            )
        elif "re-login" in msgc:
            cls = ZabbixAPISessionExpired
        elif "not authorized" in msgc:
            cls = ZabbixAPINotAuthorizedError
        else:
            cls = ZabbixAPIRequestError
        raise cls(
            msg,
            api_response=resp,
            response=response,
        )

    def get_triggers(self, query: TriggerQuery) -> list[Trigger]:
        """Fetches triggers matching a trigger query.

        Each trigger includes its hosts and its last event.
        """
        params: ParamsType = {**TRIGGER_SELECT_PARAMS, **query.as_params()}
        try:
            resp = self.do_request("trigger.get", params).result
        except ZabbixAPIException as e:
            raise ZabbixAPICallError("Failed to fetch triggers") from e
        if not isinstance(resp, list):
            raise ZabbixAPICallError(
                f"Expected 'trigger.get' to return a list, got {type(resp).__name__}"
            )
        try:
            return [Trigger.model_validate(trigger) for trigger in resp]
        except ValidationError as e:
            raise ZabbixAPICallError("Failed to parse triggers") from e

    def acknowledge(
        self, event_ids: Sequence[str], message: Optional[str] = None
    ) -> list[str]:
        """Acknowledges events given their IDs.

        Returns the IDs of the acknowledged events.
        """
        params: ParamsType = {"eventids": list(event_ids)}
        if compat.event_acknowledge_action(self.version):
            params["action"] = get_acknowledge_action_value(
                acknowledge=True, message=bool(message)
            )
        if message:
            params["message"] = message
        try:
            resp = self.do_request("event.acknowledge", params).result
        except ZabbixAPIException as e:
            raise AcknowledgeError(
                f"Failed to acknowledge events {', '.join(event_ids)}"
            ) from e
        if not isinstance(resp, dict) or not resp.get("eventids"):
            raise AcknowledgeError(
                f"No event IDs returned when acknowledging events {', '.join(event_ids)}"
            )
        # For some reason this API method returns a list of ints instead of strings
        # even though the API docs specify that it should be a list of strings.
        return [str(eventid) for eventid in resp["eventids"]]
