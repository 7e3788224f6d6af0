import dataclasses

import pytest

from dbsql_frames.connection import DatabricksConnection


class TestDatabricksConnection:
    @pytest.fixture
    def connection(self):
        return DatabricksConnection(
            host="adb-123.azuredatabricks.net",
            access_token="dapi-secret",
            catalog="main",
            schema="sales",
            warehouse_id="abc123",
        )

    def test_api_url(self, connection):
        assert (
            connection.api_url
            == "https://adb-123.azuredatabricks.net/api/2.0/sql/statements"
        )

    def test_statement_url(self, connection):
        assert (
            connection.statement_url("01ef-stmt")
            == "https://adb-123.azuredatabricks.net/api/2.0/sql/statements/01ef-stmt"
        )

    def test_next_chunk_url_strips_statements_path(self, connection):
        link = "/api/2.0/sql/statements/01ef-stmt/result/chunks/1?row_offset=100"
        assert (
            connection.next_chunk_url(link)
            == "https://adb-123.azuredatabricks.net" + link
        )

    def test_is_immutable(self, connection):
        with pytest.raises(dataclasses.FrozenInstanceError):
            connection.schema = "other"

    def test_repr_hides_token(self, connection):
        assert "dapi-secret" not in repr(connection)

    def test_from_api_url(self):
        connection = DatabricksConnection.from_api_url(
            "https://adb-123.azuredatabricks.net/api/2.0/sql/statements/",
            access_token="t",
            catalog="main",
            schema="sales",
            warehouse_id="abc123",
        )
        assert connection.host == "https://adb-123.azuredatabricks.net"
        assert (
            connection.api_url
            == "https://adb-123.azuredatabricks.net/api/2.0/sql/statements"
        )

    def test_no_validation_on_construction(self):
        connection = DatabricksConnection(
            host="", access_token="", catalog="", schema="", warehouse_id=""
        )
        assert connection.warehouse_id == ""
