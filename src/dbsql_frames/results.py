import json
import logging
from typing import Any, List, Optional, Sequence

import pandas

from dbsql_frames.conversion import promote_numeric_column, to_cells
from dbsql_frames.exc import (
    DataError,
    InvalidServerResponseError,
    UnexpectedResultFormatError,
)
from dbsql_frames.http_client import StatementHttpClient
from dbsql_frames.models import (
    ExternalLink,
    ResultChunkResponse,
    ResultData,
    ResultManifest,
    StatementResponse,
)

logger = logging.getLogger(__name__)


class ResultMaterializer:
    """
    Assembles the result of a succeeded statement into a pandas DataFrame.

    Chunks and external links are fetched strictly one after another and
    appended in arrival order. The manifest of the statement response applies
    to every one of them.
    Numeric promotion runs once on the assembled frame so a column is promoted
    only if it is numeric across the whole result.
    """

    def __init__(self, http_client: StatementHttpClient):
        self._http_client = http_client

    def materialize(self, response: StatementResponse) -> pandas.DataFrame:
        """
        Build the DataFrame for a SUCCEEDED statement response.

        Raises:
            UnexpectedResultFormatError: If the result has neither inline data
                nor external links
        """

        result = response.result
        if result.is_inline:
            return self.from_inline_result(result, response.manifest)
        if result.has_external_links:
            return self.from_external_links(result.external_links, response.manifest)

        raise UnexpectedResultFormatError(
            "Unexpected response format: no result data or external_links found",
            {"statement-id": response.statement_id},
        )

    @staticmethod
    def _rows_to_cell_frame(
        rows: Optional[Sequence[Sequence[Any]]], manifest: ResultManifest
    ) -> pandas.DataFrame:
        """Tag every cell and lay the rows out under the manifest's column names."""

        column_names = manifest.column_names
        expected = len(column_names)
        tagged = []
        for row_index, row in enumerate(rows or []):
            if len(row) != expected:
                raise DataError(
                    "Row has {} values but the manifest has {} columns".format(
                        len(row), expected
                    ),
                    {
                        "row-index": row_index,
                        "expected-columns": expected,
                        "actual-columns": len(row),
                    },
                )
            tagged.append(to_cells(row))

        return pandas.DataFrame(tagged, columns=column_names, dtype=object)

    @staticmethod
    def _promote_columns(frame: pandas.DataFrame) -> pandas.DataFrame:
        columns = {
            position: promote_numeric_column(frame.iloc[:, position], name)
            for position, name in enumerate(frame.columns)
        }
        promoted = pandas.DataFrame(columns, index=pandas.RangeIndex(len(frame)))
        promoted.columns = list(frame.columns)
        return promoted

    @staticmethod
    def _concat(chunk_frames: List[pandas.DataFrame]) -> pandas.DataFrame:
        if len(chunk_frames) == 1:
            return chunk_frames[0]
        return pandas.concat(chunk_frames, ignore_index=True)

    def rows_to_dataframe(
        self, rows: Optional[Sequence[Sequence[Any]]], manifest: ResultManifest
    ) -> pandas.DataFrame:
        """
        Convert row-major JSON scalars into a DataFrame with manifest column order.

        Args:
            rows: Rows of one chunk, each position-aligned with the manifest
            manifest: Manifest of the statement the rows belong to

        Returns:
            pandas.DataFrame: Columns named after the manifest, numeric where possible

        Raises:
            DataError: If a row's length differs from the manifest column count
        """
        return self._promote_columns(self._rows_to_cell_frame(rows, manifest))

    def from_inline_result(
        self, result: ResultData, manifest: ResultManifest
    ) -> pandas.DataFrame:
        """
        Build a DataFrame from an INLINE result, following ``next_chunk_internal_link``
        until the server stops supplying one.
        """

        chunk_frames = [self._rows_to_cell_frame(result.data, manifest)]

        next_chunk_link = result.next_chunk_internal_link
        if next_chunk_link:
            logger.debug("Response was broken in additional chunks")

        chunk_count = 1
        while next_chunk_link:
            logger.debug("Fetching chunk index: %d", chunk_count)
            chunk = ResultChunkResponse.from_dict(
                self._http_client.get_next_chunk(next_chunk_link)
            )
            chunk_frames.append(self._rows_to_cell_frame(chunk.data, manifest))
            next_chunk_link = chunk.next_chunk_internal_link
            chunk_count += 1

        return self._promote_columns(self._concat(chunk_frames))

    def _read_external_link(self, link: ExternalLink) -> List[List[Any]]:
        raw = self._http_client.fetch_external_link(link.external_link)
        try:
            rows = json.loads(raw.decode("utf-8"))
        except ValueError as e:
            raise InvalidServerResponseError(
                "External link content is not a JSON array",
                {"chunk-index": link.chunk_index, "error-message": str(e)},
            ) from e
        if not isinstance(rows, list):
            raise InvalidServerResponseError(
                "External link content is not a JSON array",
                {"chunk-index": link.chunk_index},
            )
        return rows

    def from_external_links(
        self, links: List[ExternalLink], manifest: ResultManifest
    ) -> pandas.DataFrame:
        """
        Build a DataFrame from an EXTERNAL_LINKS result.

        Links are downloaded in the order the server listed them, never reordered
        by expiration or chunk index. When the last link of a batch points to a
        further batch through ``next_chunk_internal_link``, that batch is requested
        and processed in turn.
        """

        chunk_frames: List[pandas.DataFrame] = []
        batch = list(links)

        while batch:
            for link in batch:
                logger.debug(
                    "Fetching external link for chunk index: %s", link.chunk_index
                )
                chunk_frames.append(
                    self._rows_to_cell_frame(self._read_external_link(link), manifest)
                )

            next_chunk_link = batch[-1].next_chunk_internal_link
            if not next_chunk_link:
                break
            chunk = ResultChunkResponse.from_dict(
                self._http_client.get_next_chunk(next_chunk_link)
            )
            batch = chunk.external_links or []

        if not chunk_frames:
            chunk_frames.append(self._rows_to_cell_frame([], manifest))
        return self._promote_columns(self._concat(chunk_frames))
