"""
Request models for the Statement Execution API.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict

from dbsql_frames.constants import ResultDisposition, ResultFormat


@dataclass(frozen=True)
class ExecuteStatementRequest:
    """Representation of a request to execute a SQL statement."""

    warehouse_id: str
    statement: str
    catalog: str
    schema: str
    disposition: str = ResultDisposition.INLINE.value
    format: str = ResultFormat.JSON_ARRAY.value

    def with_disposition(
        self, disposition: ResultDisposition
    ) -> "ExecuteStatementRequest":
        """Return a copy of this request asking for a different disposition."""
        return replace(self, disposition=disposition.value)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the request to a dictionary for JSON serialization."""
        return {
            "warehouse_id": self.warehouse_id,
            "statement": self.statement,
            "catalog": self.catalog,
            "schema": self.schema,
            "disposition": self.disposition,
            "format": self.format,
        }
