"""Shared pytest fixtures for mortar unit and integration tests."""
from __future__ import annotations

import pytest

from mortar.compile.dialect import DefaultDialect
from mortar.compile.mysql import MySQLDialect
from mortar.compile.postgres import PostgresDialect
from mortar.compile.sqlite import SQLiteDialect
from mortar.schema.table import TableElem
from tests.fixtures import profiles_table, sessions_table, users_table


@pytest.fixture()
def users() -> TableElem:
    return users_table()


@pytest.fixture()
def sessions() -> TableElem:
    return sessions_table()


@pytest.fixture()
def profiles() -> TableElem:
    return profiles_table()


@pytest.fixture()
def default_dialect() -> DefaultDialect:
    return DefaultDialect()


@pytest.fixture()
def postgres() -> PostgresDialect:
    """Postgres without escaping."""
    return PostgresDialect()


@pytest.fixture()
def mysql() -> MySQLDialect:
    return MySQLDialect()


@pytest.fixture()
def sqlite() -> SQLiteDialect:
    return SQLiteDialect()


@pytest.fixture()
def postgres_escaped() -> PostgresDialect:
    """Postgres with identifier escaping on."""
    return PostgresDialect(escaping=True)
