"""
Base models for the Statement Execution API.

These models define the common structures used in API requests and responses.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from dbsql_frames.constants import IN_PROGRESS_STATES, StatementState


@dataclass
class ServiceError:
    """Error information returned by the API."""

    message: str
    error_code: Optional[str] = None


@dataclass
class StatementStatus:
    """Status information for a statement execution.

    ``state`` is None when the server reports a state this client does not know;
    ``raw_state`` always holds the string as sent and ``payload`` the untouched
    ``status`` object.
    """

    state: Optional[StatementState]
    raw_state: str = ""
    error: Optional[ServiceError] = None
    sql_state: Optional[str] = None
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def in_progress(self) -> bool:
        return self.state in IN_PROGRESS_STATES


@dataclass
class ColumnInfo:
    """One column of the result schema."""

    name: str
    position: int = 0
    type_name: Optional[str] = None
    type_text: Optional[str] = None


@dataclass
class ExternalLink:
    """Presigned link to one chunk of result data."""

    external_link: str
    expiration: str = ""
    chunk_index: int = 0
    row_count: int = 0
    row_offset: int = 0
    byte_count: int = 0
    next_chunk_index: Optional[int] = None
    next_chunk_internal_link: Optional[str] = None


@dataclass
class ResultData:
    """Result data from a statement execution, or one continuation chunk of it."""

    data: Optional[List[List[Any]]] = None
    external_links: Optional[List[ExternalLink]] = None
    chunk_index: Optional[int] = None
    next_chunk_index: Optional[int] = None
    next_chunk_internal_link: Optional[str] = None
    row_count: Optional[int] = None
    row_offset: Optional[int] = None

    @property
    def is_inline(self) -> bool:
        return self.data is not None

    @property
    def has_external_links(self) -> bool:
        return self.external_links is not None


@dataclass
class ResultManifest:
    """Manifest information for a result set."""

    format: str = ""
    columns: List[ColumnInfo] = field(default_factory=list)
    total_row_count: int = 0
    total_chunk_count: int = 0
    truncated: bool = False

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]
