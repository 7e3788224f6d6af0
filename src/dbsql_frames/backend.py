import json
import logging
import time
from typing import Callable, Optional

from dbsql_frames.connection import DatabricksConnection
from dbsql_frames.constants import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    ResultDisposition,
    ResultFormat,
    StatementState,
)
from dbsql_frames.exc import PollingTimeoutError, ServerOperationError
from dbsql_frames.http_client import StatementHttpClient
from dbsql_frames.models import ExecuteStatementRequest, StatementResponse

logger = logging.getLogger(__name__)


class StatementExecutor:
    """
    Drives one statement through its lifecycle on the Statement Execution API.

    A statement is submitted with the INLINE disposition and polled at a fixed
    interval until it leaves the PENDING/RUNNING states. RUNNING is polled like
    PENDING instead of ending the loop as a final state would. A FAILED
    statement is resubmitted once with the EXTERNAL_LINKS disposition. Any final
    state other than SUCCEEDED is raised as a ServerOperationError.

    Polling has no ceiling unless ``max_poll_attempts`` is given, and there is no
    cancellation.
    """

    def __init__(
        self,
        connection: DatabricksConnection,
        http_client: StatementHttpClient,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_poll_attempts: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.connection = connection
        self._http_client = http_client
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self._sleep = sleep

    def build_request(self, statement: str) -> ExecuteStatementRequest:
        return ExecuteStatementRequest(
            warehouse_id=self.connection.warehouse_id,
            statement=statement,
            catalog=self.connection.catalog,
            schema=self.connection.schema,
            disposition=ResultDisposition.INLINE.value,
            format=ResultFormat.JSON_ARRAY.value,
        )

    def _poll_query(self, statement_id: str) -> StatementResponse:
        """
        Poll for the current statement info.
        """
        response = self._http_client.get_statement(statement_id)
        return StatementResponse.from_dict(response)

    def _wait_until_command_done(
        self, response: StatementResponse
    ) -> StatementResponse:
        """
        Sleep and re-poll while the statement is in progress. One status request
        is made for every in-progress response observed.
        """

        attempts = 0
        while response.status.in_progress:
            if (
                self.max_poll_attempts is not None
                and attempts >= self.max_poll_attempts
            ):
                raise PollingTimeoutError(
                    "Statement {} still {} after {} status requests".format(
                        response.statement_id,
                        response.status.raw_state,
                        attempts,
                    ),
                    {"statement-id": response.statement_id, "attempts": attempts},
                )

            self._sleep(self.poll_interval)
            attempts += 1
            logger.debug(
                "StatementExecutor: polling statement %s (attempt %d)",
                response.statement_id,
                attempts,
            )
            response = self._poll_query(response.statement_id)

        return response

    def submit(self, request: ExecuteStatementRequest) -> StatementResponse:
        """
        Submit a statement and wait until it reaches a terminal state.

        Returns:
            StatementResponse: The first response whose state is not in progress
        """

        logger.debug(
            "StatementExecutor.submit(disposition=%s, warehouse_id=%s)",
            request.disposition,
            request.warehouse_id,
        )
        response = StatementResponse.from_dict(
            self._http_client.post_statement(request)
        )
        return self._wait_until_command_done(response)

    def execute(self, statement: str) -> StatementResponse:
        """
        Execute a SQL statement and return its successful final response.

        Args:
            statement: SQL text to run

        Returns:
            StatementResponse: A SUCCEEDED response carrying manifest and result

        Raises:
            ServerOperationError: If the statement does not succeed, including
                after the EXTERNAL_LINKS fallback
            PollingTimeoutError: If max_poll_attempts is exceeded
            RequestError: If any HTTP request fails
        """

        request = self.build_request(statement)
        response = self.submit(request)

        if response.status.state == StatementState.FAILED:
            logger.warning(
                "Statement %s failed with %s disposition, retrying once with %s",
                response.statement_id,
                request.disposition,
                ResultDisposition.EXTERNAL_LINKS.value,
            )
            request = request.with_disposition(ResultDisposition.EXTERNAL_LINKS)
            response = self.submit(request)

        if response.status.state != StatementState.SUCCEEDED:
            raise ServerOperationError(
                "Query failed with status: {}".format(
                    json.dumps(response.status.payload, default=str)
                ),
                {
                    "statement-id": response.statement_id,
                    "status": response.status.payload,
                    "disposition": request.disposition,
                },
            )

        return response
