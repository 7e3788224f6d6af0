"""
Tests for parsing Statement Execution API payloads into models.
"""

from dbsql_frames.constants import StatementState
from dbsql_frames.models import ResultChunkResponse, StatementResponse

CHUNK_LINK = "/api/2.0/sql/statements/s1/result/chunks/{}"


class TestStatementResponse:
    def test_from_dict(self):
        response = StatementResponse.from_dict(
            {
                "statement_id": "s1",
                "status": {"state": "SUCCEEDED"},
                "manifest": {
                    "format": "JSON_ARRAY",
                    "schema": {"columns": [{"name": "id"}, {"name": "city"}]},
                    "total_row_count": 2,
                },
                "result": {"data_array": [["1", "Oslo"], ["2", "Lima"]]},
            }
        )

        assert response.statement_id == "s1"
        assert response.status.state == StatementState.SUCCEEDED
        assert response.status.error is None
        assert response.manifest.column_names == ["id", "city"]
        assert response.manifest.total_row_count == 2
        assert response.result.is_inline
        assert not response.result.has_external_links

    def test_failed_status_error(self):
        status = {
            "state": "FAILED",
            "error": {"error_code": "BAD_REQUEST", "message": "syntax error"},
            "sql_state": "42601",
        }

        response = StatementResponse.from_dict({"statement_id": "s1", "status": status})

        assert response.status.state == StatementState.FAILED
        assert response.status.error.error_code == "BAD_REQUEST"
        assert response.status.error.message == "syntax error"
        assert response.status.sql_state == "42601"
        assert response.status.payload == status

    def test_null_fields_are_treated_as_absent(self):
        response = StatementResponse.from_dict(
            {
                "statement_id": "s1",
                "status": {"state": "FAILED", "error": None},
                "manifest": {"schema": {"columns": None}},
                "result": {"data_array": None, "external_links": None},
            }
        )

        assert response.status.state == StatementState.FAILED
        assert response.status.error is None
        assert response.status.payload == {"state": "FAILED", "error": None}
        assert response.manifest.column_names == []
        assert not response.result.is_inline
        assert not response.result.has_external_links

    def test_unknown_state_keeps_raw_string(self):
        response = StatementResponse.from_dict(
            {"statement_id": "s1", "status": {"state": "QUEUED_FOR_LATER"}}
        )

        assert response.status.state is None
        assert response.status.raw_state == "QUEUED_FOR_LATER"
        assert not response.status.in_progress

    def test_missing_sections(self):
        response = StatementResponse.from_dict({"statement_id": "s1"})

        assert response.status.state is None
        assert response.manifest.columns == []
        assert response.result.data is None


class TestResultChunkResponse:
    def test_external_links_chunk(self):
        chunk = ResultChunkResponse.from_dict(
            {
                "external_links": [
                    {
                        "external_link": "https://storage/3",
                        "chunk_index": 3,
                        "next_chunk_internal_link": CHUNK_LINK.format(4),
                    }
                ]
            }
        )

        assert chunk.data is None
        assert [link.chunk_index for link in chunk.external_links] == [3]
        assert chunk.next_chunk_internal_link is None
        assert chunk.external_links[0].next_chunk_internal_link == CHUNK_LINK.format(4)
