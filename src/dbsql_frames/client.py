import logging
from typing import Optional

import pandas

from dbsql_frames import metadata
from dbsql_frames.auth import AuthProvider
from dbsql_frames.backend import StatementExecutor
from dbsql_frames.connection import DatabricksConnection
from dbsql_frames.constants import DEFAULT_POLL_INTERVAL_SECONDS
from dbsql_frames.exc import InterfaceError
from dbsql_frames.http_client import StatementHttpClient
from dbsql_frames.results import ResultMaterializer

logger = logging.getLogger(__name__)


class StatementClient:
    def __init__(
        self,
        connection: DatabricksConnection,
        auth_provider: Optional[AuthProvider] = None,
        **kwargs,
    ):
        """
        Run SQL statements on a warehouse and receive pandas DataFrames.

        Parameters:
            :param connection: `DatabricksConnection`
                Host, token, catalog, schema and warehouse to run statements against.
            :param auth_provider: `AuthProvider`, optional
                Overrides the bearer token of `connection`.

        Other Parameters:
            poll_interval: `float`, optional
                Seconds to wait between status requests. Defaults to 1.
            max_poll_attempts: `int`, optional
                Give up with `PollingTimeoutError` after this many status requests.
                Polling is unbounded when omitted.
            sleep: `Callable[[float], None]`, optional
                Replaces `time.sleep` between status requests.
            _socket_timeout: `float`, optional
                Seconds before a single HTTP request times out. Defaults to 60.
            _user_agent_entry: `str`, optional
                Product token appended to the User-Agent header.
            max_connections: `int`, optional
                HTTP connection pool size. Defaults to 10.
            _tls_verify: `bool`, optional
                Verify server certificates. Defaults to True.
        """

        executor_kwargs = {
            key: kwargs.pop(key)
            for key in ("max_poll_attempts", "sleep")
            if key in kwargs
        }
        poll_interval = kwargs.pop("poll_interval", DEFAULT_POLL_INTERVAL_SECONDS)

        self.connection = connection
        self._http_client = StatementHttpClient(connection, auth_provider, **kwargs)
        self._executor = StatementExecutor(
            connection,
            self._http_client,
            poll_interval=poll_interval,
            **executor_kwargs,
        )
        self._materializer = ResultMaterializer(self._http_client)
        self.open = True

    def __enter__(self) -> "StatementClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self) -> None:
        self._http_client.close()
        self.open = False

    def execute(self, query: str) -> pandas.DataFrame:
        """
        Run a statement and return its complete result.

        :param query: SQL text to run against the connection's catalog and schema
        :returns: A DataFrame with one column per manifest column, in manifest order

        Will throw an InterfaceError if the client has been closed.
        """
        if not self.open:
            raise InterfaceError(
                "Cannot execute a statement on a closed client",
                {"warehouse-id": self.connection.warehouse_id},
            )

        logger.debug(
            "StatementClient.execute(warehouse_id=%s)", self.connection.warehouse_id
        )
        response = self._executor.execute(query)
        return self._materializer.materialize(response)

    def get_table_metadata(self, table_name: str) -> pandas.DataFrame:
        return metadata.get_table_metadata(self, table_name)

    def list_tables(self) -> pandas.DataFrame:
        return metadata.list_tables(self)


def execute_databricks(
    connection: DatabricksConnection, query: str, **kwargs
) -> pandas.DataFrame:
    """Run one statement with a short-lived client. See `StatementClient` for kwargs."""
    with StatementClient(connection, **kwargs) as client:
        return client.execute(query)


def get_table_metadata(
    connection: DatabricksConnection, table_name: str, **kwargs
) -> pandas.DataFrame:
    with StatementClient(connection, **kwargs) as client:
        return client.get_table_metadata(table_name)


def list_tables(connection: DatabricksConnection, **kwargs) -> pandas.DataFrame:
    with StatementClient(connection, **kwargs) as client:
        return client.list_tables()
