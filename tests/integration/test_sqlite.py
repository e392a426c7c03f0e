"""Integration tests: build → execute against a real SQLite in-memory DB.

Covers DDL generation, INSERT/UPDATE/DELETE/UPSERT, filtered and joined
SELECTs, grouping, subqueries, identifier escaping and error mapping.
"""
from __future__ import annotations

import sqlite3

import pytest

from mortar.compile.base import Statement
from mortar.compile.sqlite import SQLiteDialect
from mortar.errors import ErrorCode
from mortar.expression.operators import (
    count,
    eq,
    exists,
    gt,
    in_,
    like,
    not_exists,
)
from mortar.schema.table import column, table
from mortar.schema.types import int_, varchar
from mortar.statement.delete import delete
from mortar.statement.insert import insert
from mortar.statement.select import select
from mortar.statement.update import update
from mortar.statement.upsert import upsert
from tests.fixtures import profiles_table, sessions_table, users_table

USERS = users_table()
SESSIONS = sessions_table()
PROFILES = profiles_table()
DIALECT = SQLiteDialect()

_USERS = [
    ("ann@example.com", "Ann"),
    ("bob@example.com", "Bob"),
    ("bob2@example.com", "Bob"),
]
_SESSIONS = [(1, "t1"), (1, "t2"), (2, "t3")]


def _run(conn: sqlite3.Connection, statement: Statement) -> list[tuple]:
    return conn.execute(statement.sql, statement.bindings).fetchall()


@pytest.fixture()
def db() -> sqlite3.Connection:
    conn = sqlite3.connect(":memory:")
    for tbl in (USERS, SESSIONS, PROFILES):
        conn.executescript(tbl.create(DIALECT))
    for email, name in _USERS:
        _run(conn, insert(USERS).values(email=email, full_name=name).build(DIALECT))
    for user_id, token in _SESSIONS:
        stmt = insert(SESSIONS).values(
            user_id=user_id, auth_token=token, created_at="2024-01-01 00:00:00"
        )
        _run(conn, stmt.build(DIALECT))
    yield conn
    conn.close()


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


def test_auto_increment_ids(db):
    rows = _run(db, select(USERS.c("id")).from_(USERS).order_by(USERS.c("id")).build(DIALECT))
    assert rows == [(1,), (2,), (3,)]


def test_filter_order_limit(db):
    statement = (
        select(USERS.c("email"))
        .from_(USERS)
        .where(gt(USERS.c("id"), 1))
        .order_by(USERS.c("id"))
        .desc()
        .limit(1)
        .build(DIALECT)
    )
    assert _run(db, statement) == [("bob2@example.com",)]


def test_limit_offset(db):
    statement = (
        select(USERS.c("id")).from_(USERS).order_by(USERS.c("id")).limit(1, 1).build(DIALECT)
    )
    assert _run(db, statement) == [(2,)]


def test_in(db):
    statement = (
        select(USERS.c("full_name"))
        .from_(USERS)
        .where(in_(USERS.c("id"), 1, 3))
        .order_by(USERS.c("id"))
        .build(DIALECT)
    )
    assert _run(db, statement) == [("Ann",), ("Bob",)]


def test_like(db):
    statement = select(USERS.c("id")).from_(USERS).where(like(USERS.c("email"), "bob%")).build(
        DIALECT
    )
    assert sorted(_run(db, statement)) == [(2,), (3,)]


def test_guessed_join(db):
    statement = (
        select(USERS.c("email"), SESSIONS.c("auth_token"))
        .from_(USERS)
        .inner_join(SESSIONS)
        .order_by(SESSIONS.c("id"))
        .build(DIALECT)
    )
    assert _run(db, statement) == [
        ("ann@example.com", "t1"),
        ("ann@example.com", "t2"),
        ("bob@example.com", "t3"),
    ]


def test_left_join_with_grouping(db):
    statement = (
        select(USERS.c("email"), count(SESSIONS.c("id")))
        .from_(USERS)
        .left_join(SESSIONS)
        .group_by(USERS.c("email"))
        .order_by(USERS.c("email"))
        .build(DIALECT)
    )
    assert _run(db, statement) == [
        ("ann@example.com", 2),
        ("bob2@example.com", 0),
        ("bob@example.com", 1),
    ]


def test_having(db):
    statement = (
        select(USERS.c("full_name"), count(USERS.c("id")))
        .from_(USERS)
        .group_by(USERS.c("full_name"))
        .having(count(USERS.c("id")), ">", 1)
        .build(DIALECT)
    )
    assert _run(db, statement) == [("Bob", 2)]


def test_exists(db):
    with_sessions = (
        select(SESSIONS.c("id"))
        .from_(SESSIONS)
        .where(eq(SESSIONS.c("user_id"), USERS.c("id")))
    )
    active = select(USERS.c("id")).from_(USERS).where(exists(with_sessions))
    inactive = select(USERS.c("id")).from_(USERS).where(not_exists(with_sessions))
    assert sorted(_run(db, active.build(DIALECT))) == [(1,), (2,)]
    assert _run(db, inactive.build(DIALECT)) == [(3,)]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


def test_update(db):
    _run(
        db,
        update(USERS).values(full_name="Robert").where(eq(USERS.c("id"), 2)).build(DIALECT),
    )
    query = select(USERS.c("full_name")).from_(USERS).where(eq(USERS.c("id"), 2))
    assert _run(db, query.build(DIALECT)) == [("Robert",)]


def test_delete(db):
    _run(db, delete(SESSIONS).where(eq(SESSIONS.c("user_id"), 1)).build(DIALECT))
    rows = _run(db, select(SESSIONS.c("auth_token")).from_(SESSIONS).build(DIALECT))
    assert rows == [("t3",)]


def test_upsert_replaces_row(db):
    first = upsert(PROFILES).values(id="p-1", email="old@example.com", bio="hi")
    second = upsert(PROFILES).values(id="p-1", email="new@example.com", bio="hello")
    _run(db, first.build(DIALECT))
    _run(db, second.build(DIALECT))
    rows = _run(db, select(PROFILES.c("email"), PROFILES.c("bio")).from_(PROFILES).build(DIALECT))
    assert rows == [("new@example.com", "hello")]


@pytest.mark.skipif(sqlite3.sqlite_version_info < (3, 35), reason="RETURNING needs SQLite 3.35")
def test_insert_returning(db):
    statement = (
        insert(USERS)
        .values(email="cat@example.com", full_name="Cat")
        .returning("id")
        .build(DIALECT)
    )
    assert _run(db, statement) == [(4,)]


# ---------------------------------------------------------------------------
# Escaping and errors
# ---------------------------------------------------------------------------


def test_reserved_words_with_escaping():
    dialect = SQLiteDialect(escaping=True)
    orders = table(
        "order",
        column("id", int_()).primary_key().auto_increment(),
        column("group", varchar()),
    )
    conn = sqlite3.connect(":memory:")
    conn.executescript(orders.create(dialect))
    _run(conn, insert(orders).values(group="a").build(dialect))
    rows = _run(
        conn,
        select(orders.c("id"), orders.c("group"))
        .from_(orders)
        .where(eq(orders.c("group"), "a"))
        .build(dialect),
    )
    conn.close()
    assert rows == [(1, "a")]


def test_duplicate_email_is_integrity_error(db):
    statement = insert(USERS).values(email="ann@example.com", full_name="Ann 2").build(DIALECT)
    with pytest.raises(sqlite3.IntegrityError) as exc_info:
        _run(db, statement)
    error = DIALECT.wrap_error(exc_info.value)
    assert error.code is ErrorCode.INTEGRITY
    assert error.table == "users"
    assert error.column == "email"
    assert error.is_database_error()


def test_missing_table_is_operational_error(db):
    ghost = table("ghost", column("id", int_()))
    with pytest.raises(sqlite3.OperationalError) as exc_info:
        _run(db, select().from_(ghost).build(DIALECT))
    assert DIALECT.wrap_error(exc_info.value).code is ErrorCode.OPERATIONAL


def test_missing_required_column_is_integrity_error(db):
    statement = insert(USERS).values(email="dan@example.com").build(DIALECT)
    with pytest.raises(sqlite3.IntegrityError) as exc_info:
        _run(db, statement)
    error = DIALECT.wrap_error(exc_info.value)
    assert error.code is ErrorCode.INTEGRITY
    assert (error.table, error.column, error.constraint) == ("users", "full_name", "NOT NULL")
