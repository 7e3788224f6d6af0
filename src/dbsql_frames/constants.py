"""
Constants for the Statement Execution API.
"""

from enum import Enum
from typing import Optional

STATEMENTS_API_PATH = "/api/2.0/sql/statements"

DEFAULT_POLL_INTERVAL_SECONDS = 1.0
DEFAULT_SOCKET_TIMEOUT_SECONDS = 60.0
DEFAULT_MAX_CONNECTIONS = 10

USER_AGENT = "dbsql-frames/0.1.0"


class ResultFormat(Enum):
    """Enum for result format values."""

    JSON_ARRAY = "JSON_ARRAY"


class ResultDisposition(Enum):
    """Enum for result disposition values."""

    INLINE = "INLINE"
    EXTERNAL_LINKS = "EXTERNAL_LINKS"


class StatementState(Enum):
    """
    Execution state of a statement as reported by the warehouse.

    Attributes:
        PENDING: Statement is queued and waiting for the warehouse
        RUNNING: Statement is executing
        SUCCEEDED: Statement finished and its result is available
        FAILED: Statement failed; the status carries an error
        CANCELED: Statement was canceled before completion
        CLOSED: Statement was closed and its result is gone
    """

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"
    CLOSED = "CLOSED"

    @classmethod
    def from_sea_state(cls, state: str) -> Optional["StatementState"]:
        """Map a state string from the API to a StatementState, or None if unknown."""
        try:
            return cls(state)
        except ValueError:
            return None


IN_PROGRESS_STATES = (StatementState.PENDING, StatementState.RUNNING)


class MetadataCommands(Enum):
    """SQL commands issued by the metadata helpers."""

    SHOW_TABLES = "SHOW TABLES IN {}"
    TABLE_COLUMNS = (
        "SELECT COLUMN_NAME, DATA_TYPE\n"
        "FROM {catalog}.INFORMATION_SCHEMA.COLUMNS\n"
        "WHERE TABLE_SCHEMA = '{schema}'\n"
        "AND TABLE_NAME = '{table}'\n"
        "ORDER BY ORDINAL_POSITION;"
    )
