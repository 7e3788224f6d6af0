from dataclasses import dataclass, field
from typing import ClassVar

from dbsql_frames.constants import STATEMENTS_API_PATH
from dbsql_frames.url_utils import normalize_host_with_protocol


@dataclass(frozen=True)
class DatabricksConnection:
    """
    Everything needed to reach one SQL warehouse through the Statement Execution API.

    The descriptor is immutable and performs no validation beyond requiring every
    field; a wrong host or token surfaces as a RequestError on first use.

    Attributes:
        host: Workspace hostname, with or without the https:// prefix
        access_token: Personal access token sent as a bearer token
        catalog: Catalog statements run against
        schema: Schema statements run against
        warehouse_id: Id of the SQL warehouse that executes the statements
    """

    statements_path: ClassVar[str] = STATEMENTS_API_PATH

    host: str
    access_token: str = field(repr=False)
    catalog: str
    schema: str
    warehouse_id: str

    @classmethod
    def from_api_url(
        cls,
        api_url: str,
        access_token: str,
        catalog: str,
        schema: str,
        warehouse_id: str,
    ) -> "DatabricksConnection":
        """Build a connection from a full statements endpoint URL such as
        ``https://host/api/2.0/sql/statements``."""
        api_url = api_url.rstrip("/")
        if api_url.endswith(cls.statements_path):
            api_url = api_url[: -len(cls.statements_path)]
        return cls(
            host=api_url,
            access_token=access_token,
            catalog=catalog,
            schema=schema,
            warehouse_id=warehouse_id,
        )

    @property
    def api_url(self) -> str:
        """Statement submission endpoint."""
        return normalize_host_with_protocol(self.host) + self.statements_path

    @property
    def base_url(self) -> str:
        """Workspace root that server-supplied relative links are resolved against."""
        return self.api_url.replace(self.statements_path, "")

    def statement_url(self, statement_id: str) -> str:
        return f"{self.api_url}/{statement_id}"

    def next_chunk_url(self, next_chunk_internal_link: str) -> str:
        return f"{self.base_url}{next_chunk_internal_link}"
