import os
import pytest


@pytest.fixture(scope="session")
def host():
    return os.getenv("DATABRICKS_SERVER_HOSTNAME")


@pytest.fixture(scope="session")
def access_token():
    return os.getenv("DATABRICKS_TOKEN")


@pytest.fixture(scope="session")
def warehouse_id():
    return os.getenv("DATABRICKS_WAREHOUSE_ID")


@pytest.fixture(scope="session")
def catalog():
    return os.getenv("DATABRICKS_CATALOG")


@pytest.fixture(scope="session")
def schema():
    return os.getenv("DATABRICKS_SCHEMA", "default")


@pytest.fixture(scope="session")
def connection_details(host, access_token, warehouse_id, catalog, schema):
    return {
        "host": host,
        "access_token": access_token,
        "warehouse_id": warehouse_id,
        "catalog": catalog,
        "schema": schema,
    }
