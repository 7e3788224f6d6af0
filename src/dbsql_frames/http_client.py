import json
import logging
from typing import Any, Dict, Optional

import urllib3
from urllib3.exceptions import HTTPError

from dbsql_frames.auth import AccessTokenAuthProvider, AuthProvider, HttpHeader
from dbsql_frames.connection import DatabricksConnection
from dbsql_frames.constants import (
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_SOCKET_TIMEOUT_SECONDS,
    USER_AGENT,
)
from dbsql_frames.exc import InvalidServerResponseError, RequestError
from dbsql_frames.models import ExecuteStatementRequest
from dbsql_frames.url_utils import redact_url

logger = logging.getLogger(__name__)


class StatementHttpClient:
    """
    HTTP client for the Statement Execution API.

    Authenticated calls (submission, status polling, chunk pagination) carry the
    bearer token and a JSON content type. Presigned external links are fetched
    with no headers at all.

    Transport failures are raised immediately; this client never retries.
    """

    def __init__(
        self,
        connection: DatabricksConnection,
        auth_provider: Optional[AuthProvider] = None,
        **kwargs,
    ):
        """
        Initialize the HTTP client.

        Args:
            connection: Descriptor of the warehouse to talk to
            auth_provider: Authentication provider, defaults to the bearer token
                of the connection
            **kwargs: Additional keyword arguments
                _socket_timeout: Seconds before a single request times out
                _user_agent_entry: Extra product token appended to the User-Agent
                max_connections: Connection pool size per host
                _tls_verify: Whether to verify server certificates
        """

        self.connection = connection
        self.auth_provider = auth_provider or AccessTokenAuthProvider(
            connection.access_token
        )

        self._socket_timeout = kwargs.get(
            "_socket_timeout", DEFAULT_SOCKET_TIMEOUT_SECONDS
        )
        self.max_connections = kwargs.get("max_connections", DEFAULT_MAX_CONNECTIONS)
        self._tls_verify = kwargs.get("_tls_verify", True)

        user_agent_entry = kwargs.get("_user_agent_entry")
        user_agent = (
            "{} ({})".format(USER_AGENT, user_agent_entry)
            if user_agent_entry
            else USER_AGENT
        )

        self.headers: Dict[str, str] = {
            HttpHeader.CONTENT_TYPE.value: "application/json",
            HttpHeader.USER_AGENT.value: user_agent,
        }

        self._pool: Optional[urllib3.PoolManager] = None
        self._open()

    def _open(self):
        """Initialize the connection pool."""
        self._pool = urllib3.PoolManager(
            maxsize=self.max_connections,
            cert_reqs="CERT_REQUIRED" if self._tls_verify else "CERT_NONE",
        )

    def close(self):
        """Close the connection pool."""
        if self._pool:
            self._pool.clear()

    def __enter__(self) -> "StatementHttpClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def _get_auth_headers(self) -> Dict[str, str]:
        """Get authentication headers from the auth provider."""
        headers: Dict[str, str] = {}
        self.auth_provider.add_headers(headers)
        return headers

    def _send(
        self,
        method: str,
        url: str,
        body: Optional[bytes],
        headers: Dict[str, str],
    ) -> bytes:
        """Issue one request and return the raw body of a 2xx response."""

        if self._pool is None:
            raise RequestError("Connection pool not initialized", None)

        safe_url = redact_url(url)
        logger.debug("Making %s request to %s", method, safe_url)

        try:
            response = self._pool.request(
                method,
                url,
                body=body,
                headers=headers,
                timeout=self._socket_timeout,
                retries=False,
            )
        except HTTPError as e:
            logger.error("HTTP %s request to %s failed: %s", method, safe_url, e)
            raise RequestError(
                "Error during request to server. {}".format(e),
                {
                    "method": method,
                    "url": safe_url,
                    "http-code": None,
                    "error-message": str(e),
                },
                e,
            ) from e

        if not 200 <= response.status < 300:
            error_message = response.data.decode("utf-8", errors="replace")
            logger.error(
                "HTTP %s request to %s returned status %s",
                method,
                safe_url,
                response.status,
            )
            raise RequestError(
                "HTTP request failed with status {}".format(response.status),
                {
                    "method": method,
                    "url": safe_url,
                    "http-code": response.status,
                    "error-message": error_message,
                },
            )

        return response.data

    @staticmethod
    def _parse_json(raw: bytes, url: str) -> Any:
        try:
            return json.loads(raw.decode("utf-8")) if raw else {}
        except ValueError as e:
            raise InvalidServerResponseError(
                "Response body is not valid JSON",
                {"url": redact_url(url), "error-message": str(e)},
            ) from e

    def _make_request(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an authenticated request to the statements endpoint.

        Args:
            method: HTTP method (GET, POST)
            url: Absolute request URL
            data: Request payload data, serialized as JSON

        Returns:
            Dict[str, Any]: Response data parsed from JSON

        Raises:
            RequestError: If the request fails or returns a non-2xx status
            InvalidServerResponseError: If the response body is not JSON
        """

        headers = {**self.headers, **self._get_auth_headers()}
        body = json.dumps(data).encode("utf-8") if data is not None else None

        raw = self._send(method.upper(), url, body, headers)
        return self._parse_json(raw, url)

    def post_statement(self, request: ExecuteStatementRequest) -> Dict[str, Any]:
        """Submit a statement."""
        return self._make_request(
            "POST", self.connection.api_url, data=request.to_dict()
        )

    def get_statement(self, statement_id: str) -> Dict[str, Any]:
        """Fetch the status, manifest and first result chunk of a statement."""
        return self._make_request("GET", self.connection.statement_url(statement_id))

    def get_next_chunk(self, next_chunk_internal_link: str) -> Dict[str, Any]:
        """Follow a server-supplied relative ``next_chunk_internal_link``."""
        return self._make_request(
            "GET", self.connection.next_chunk_url(next_chunk_internal_link)
        )

    def fetch_external_link(self, url: str) -> bytes:
        """
        Download one presigned result file.

        No Authorization header is sent: the presigned URL is self-contained.

        Returns:
            bytes: The raw response body, a JSON array of rows for JSON_ARRAY results
        """
        return self._send("GET", url, None, {})
