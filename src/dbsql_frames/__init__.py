from dbsql_frames.exc import *

from dbsql_frames.connection import DatabricksConnection
from dbsql_frames.client import (
    StatementClient,
    execute_databricks,
    get_table_metadata,
    list_tables,
)

__version__ = "0.1.0"


def connect(**kwargs) -> StatementClient:
    """Create a StatementClient from DatabricksConnection fields plus client kwargs."""
    connection = DatabricksConnection(
        host=kwargs.pop("host"),
        access_token=kwargs.pop("access_token"),
        catalog=kwargs.pop("catalog"),
        schema=kwargs.pop("schema"),
        warehouse_id=kwargs.pop("warehouse_id"),
    )
    return StatementClient(connection, **kwargs)
