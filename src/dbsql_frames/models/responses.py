"""
Response models for the Statement Execution API.

These models define the structures used in API responses.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dbsql_frames.constants import StatementState
from dbsql_frames.models.base import (
    ColumnInfo,
    ExternalLink,
    ResultData,
    ResultManifest,
    ServiceError,
    StatementStatus,
)


def _parse_status(data: Dict[str, Any]) -> StatementStatus:
    """Parse status from response data."""
    status_data = data.get("status") or {}
    error = None
    error_data = status_data.get("error") or {}
    if error_data:
        error = ServiceError(
            message=error_data.get("message", ""),
            error_code=error_data.get("error_code"),
        )

    raw_state = status_data.get("state", "")
    return StatementStatus(
        state=StatementState.from_sea_state(raw_state),
        raw_state=raw_state,
        error=error,
        sql_state=status_data.get("sql_state"),
        payload=status_data,
    )


def _parse_manifest(data: Dict[str, Any]) -> ResultManifest:
    """Parse manifest from response data."""
    manifest_data = data.get("manifest") or {}
    schema_data = manifest_data.get("schema") or {}

    columns = [
        ColumnInfo(
            name=column.get("name", ""),
            position=column.get("position", index),
            type_name=column.get("type_name"),
            type_text=column.get("type_text"),
        )
        for index, column in enumerate(schema_data.get("columns") or [])
    ]

    return ResultManifest(
        format=manifest_data.get("format", ""),
        columns=columns,
        total_row_count=manifest_data.get("total_row_count", 0),
        total_chunk_count=manifest_data.get("total_chunk_count", 0),
        truncated=manifest_data.get("truncated", False),
    )


def _parse_result(result_data: Dict[str, Any]) -> ResultData:
    """Parse a result object, either the ``result`` of a statement or a bare chunk."""
    external_links = None

    if result_data.get("external_links") is not None:
        external_links = [
            ExternalLink(
                external_link=link_data.get("external_link", ""),
                expiration=link_data.get("expiration", ""),
                chunk_index=link_data.get("chunk_index", 0),
                row_count=link_data.get("row_count", 0),
                row_offset=link_data.get("row_offset", 0),
                byte_count=link_data.get("byte_count", 0),
                next_chunk_index=link_data.get("next_chunk_index"),
                next_chunk_internal_link=link_data.get("next_chunk_internal_link"),
            )
            for link_data in result_data["external_links"]
        ]

    return ResultData(
        data=result_data.get("data_array"),
        external_links=external_links,
        chunk_index=result_data.get("chunk_index"),
        next_chunk_index=result_data.get("next_chunk_index"),
        next_chunk_internal_link=result_data.get("next_chunk_internal_link"),
        row_count=result_data.get("row_count"),
        row_offset=result_data.get("row_offset"),
    )


@dataclass
class StatementResponse:
    """Response to submitting a statement or to polling its status."""

    statement_id: str
    status: StatementStatus
    manifest: ResultManifest
    result: ResultData

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatementResponse":
        """Create a StatementResponse from a dictionary."""
        return cls(
            statement_id=data.get("statement_id", ""),
            status=_parse_status(data),
            manifest=_parse_manifest(data),
            result=_parse_result(data.get("result") or {}),
        )


@dataclass
class ResultChunkResponse:
    """
    Continuation chunk fetched through a ``next_chunk_internal_link``.

    The server does not repeat the manifest on continuation chunks, so only
    result data is carried. The response model can be found in the docs, here:
    https://docs.databricks.com/api/workspace/statementexecution/getstatementresultchunkn
    """

    data: Optional[List[List[Any]]] = None
    external_links: Optional[List[ExternalLink]] = None
    chunk_index: Optional[int] = None
    next_chunk_internal_link: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResultChunkResponse":
        """Create a ResultChunkResponse from a dictionary."""
        result = _parse_result(data)
        return cls(
            data=result.data,
            external_links=result.external_links,
            chunk_index=result.chunk_index,
            next_chunk_internal_link=result.next_chunk_internal_link,
        )
