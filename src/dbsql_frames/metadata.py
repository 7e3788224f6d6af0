"""
Convenience queries describing the tables of the connection's schema.
"""

import logging
from typing import TYPE_CHECKING

import pandas

from dbsql_frames.constants import MetadataCommands

if TYPE_CHECKING:
    from dbsql_frames.client import StatementClient

logger = logging.getLogger(__name__)

TABLE_METADATA_COLUMNS = ["name", "type", "current_selection", "table_name"]


def get_table_metadata(client: "StatementClient", table_name: str) -> pandas.DataFrame:
    """
    Describe the columns of ``table_name`` in the connection's catalog and schema.

    Returns:
        pandas.DataFrame: One row per column in ordinal order, with exactly the
        columns ``name``, ``type``, ``current_selection`` (always 1) and
        ``table_name`` (always ``table_name``)
    """

    connection = client.connection
    operation = MetadataCommands.TABLE_COLUMNS.value.format(
        catalog=connection.catalog,
        schema=connection.schema,
        table=table_name,
    )
    result = client.execute(operation)

    metadata = pandas.DataFrame(
        {
            "name": result.iloc[:, 0].reset_index(drop=True),
            "type": result.iloc[:, 1].reset_index(drop=True),
        }
    )
    metadata["current_selection"] = 1
    metadata["table_name"] = table_name

    logger.debug("Table %s has %d columns", table_name, len(metadata))
    return metadata[TABLE_METADATA_COLUMNS]


def list_tables(client: "StatementClient") -> pandas.DataFrame:
    """List the tables of the connection's schema with ``SHOW TABLES``; the
    server's column names are kept as they are."""
    operation = MetadataCommands.SHOW_TABLES.value.format(client.connection.schema)
    return client.execute(operation)
