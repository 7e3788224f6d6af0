"""
Models for the Statement Execution API.

This package contains data models for API requests and responses.
"""

from dbsql_frames.models.base import (
    ServiceError,
    StatementStatus,
    ColumnInfo,
    ExternalLink,
    ResultData,
    ResultManifest,
)

from dbsql_frames.models.requests import ExecuteStatementRequest

from dbsql_frames.models.responses import (
    StatementResponse,
    ResultChunkResponse,
)

__all__ = [
    # Base models
    "ServiceError",
    "StatementStatus",
    "ColumnInfo",
    "ExternalLink",
    "ResultData",
    "ResultManifest",
    # Request models
    "ExecuteStatementRequest",
    # Response models
    "StatementResponse",
    "ResultChunkResponse",
]
