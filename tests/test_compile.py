"""Unit tests for clause rendering (SQLCompiler and dialect compilers)."""

from __future__ import annotations

import pytest

from mortar.compile.base import Statement
from mortar.compile.context import CompilerContext
from mortar.compile.dialect import DefaultDialect, Dialect
from mortar.compile.mysql import MySQLDialect
from mortar.compile.postgres import PostgresDialect
from mortar.expression.elements import (
    ForUpdateClause,
    LabelClause,
    OrderByClause,
    WhereClause,
)
from mortar.expression.operators import (
    and_,
    avg,
    bind,
    condition,
    count,
    eq,
    exists,
    gt,
    gte,
    in_,
    like,
    lt,
    lte,
    max_,
    min_,
    not_eq,
    not_exists,
    not_in,
    or_,
    sql_text,
    sum_,
)
from mortar.statement.select import select
from tests.fixtures import sessions_table, users_table

USERS = users_table()
SESSIONS = sessions_table()


def _render(clause, dialect: Dialect | None = None, default_table: str = ""):
    context = CompilerContext.for_dialect(dialect or DefaultDialect())
    context.default_table_name = default_table
    return clause.accept(context), context.binds


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


def test_text_is_verbatim():
    assert _render(sql_text("NOW()")) == ("NOW()", [])


def test_bind_adds_value():
    assert _render(bind(42)) == ("?", [42])


def test_label_is_escaped():
    assert _render(LabelClause("email"), PostgresDialect(escaping=True))[0] == '"email"'
    assert _render(LabelClause('a"b'), PostgresDialect(escaping=True))[0] == '"a""b"'


class TestColumnQualification:
    def test_foreign_table_is_qualified(self):
        assert _render(USERS.c("id"))[0] == "users.id"

    def test_default_table_is_unqualified(self):
        assert _render(USERS.c("id"), default_table="users")[0] == "id"

    def test_escaped_qualified_column(self):
        sql, _ = _render(USERS.c("id"), PostgresDialect(escaping=True))
        assert sql == '"users"."id"'

    def test_mysql_escapes_with_backticks(self):
        sql, _ = _render(USERS.c("id"), MySQLDialect(escaping=True), default_table="users")
        assert sql == "`id`"

    def test_default_dialect_never_escapes(self):
        dialect = DefaultDialect(escaping=True)
        assert _render(USERS.c("id"), dialect)[0] == "users.id"


# ---------------------------------------------------------------------------
# Conditions
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("factory", "op"),
    [(eq, "="), (not_eq, "!="), (gt, ">"), (gte, ">="), (lt, "<"), (lte, "<=")],
)
def test_comparisons_bind_right_operand(factory, op):
    sql, binds = _render(factory(USERS.c("id"), 5), default_table="users")
    assert sql == f"id {op} ?"
    assert binds == [5]


def test_column_to_column_is_not_bound():
    sql, binds = _render(eq(SESSIONS.c("user_id"), USERS.c("id")), default_table="sessions")
    assert sql == "user_id = users.id"
    assert binds == []


def test_custom_operator():
    sql, binds = _render(condition(USERS.c("email"), "ILIKE", "a%"))
    assert sql == "users.email ILIKE ?"
    assert binds == ["a%"]


def test_column_shortcuts():
    sql, binds = _render(USERS.c("id").gte(3), default_table="users")
    assert (sql, binds) == ("id >= ?", [3])


def test_like_inlines_pattern_verbatim():
    sql, binds = _render(like(USERS.c("email"), "%o''brien%"), default_table="users")
    assert sql == "email LIKE '%o''brien%'"
    assert binds == []


class TestIn:
    def test_in(self):
        sql, binds = _render(in_(USERS.c("id"), 1, 2, 3), default_table="users")
        assert sql == "id IN (?, ?, ?)"
        assert binds == [1, 2, 3]

    def test_not_in(self):
        sql, binds = _render(not_in(USERS.c("id"), 7), default_table="users")
        assert sql == "id NOT IN (?)"
        assert binds == [7]

    def test_postgres_numbers_each_value(self):
        sql, _ = _render(USERS.c("id").in_(1, 2, 3), PostgresDialect(), default_table="users")
        assert sql == "id IN ($1, $2, $3)"


class TestCombiners:
    def test_nested_combiners_keep_bind_order(self):
        clause = and_(
            eq(USERS.c("id"), 1),
            or_(eq(USERS.c("email"), "a@b.c"), eq(USERS.c("full_name"), "Ann")),
        )
        sql, binds = _render(clause, default_table="users")
        assert sql == "(id = ? AND (email = ? OR full_name = ?))"
        assert binds == [1, "a@b.c", "Ann"]

    def test_postgres_numbering_follows_text_order(self):
        clause = or_(eq(USERS.c("id"), 1), and_(gt(USERS.c("id"), 5), lt(USERS.c("id"), 9)))
        sql, binds = _render(clause, PostgresDialect(), default_table="users")
        assert sql == "(id = $1 OR (id > $2 AND id < $3))"
        assert binds == [1, 5, 9]


@pytest.mark.parametrize(
    ("factory", "fn"),
    [(count, "COUNT"), (sum_, "SUM"), (avg, "AVG"), (min_, "MIN"), (max_, "MAX")],
)
def test_aggregates(factory, fn):
    assert _render(factory(USERS.c("id")), default_table="users")[0] == f"{fn}(id)"


class TestExists:
    def _subquery(self):
        return (
            select(SESSIONS.c("id"))
            .from_(SESSIONS)
            .where(eq(SESSIONS.c("user_id"), USERS.c("id")))
        )

    def test_subquery_columns_are_qualified(self):
        sql, _ = _render(exists(self._subquery()), default_table="users")
        assert sql == (
            "EXISTS(SELECT sessions.id\nFROM sessions\nWHERE sessions.user_id = users.id)"
        )

    def test_not_exists(self):
        sql, _ = _render(not_exists(self._subquery()), default_table="users")
        assert sql.startswith("NOT EXISTS(SELECT sessions.id")

    def test_context_is_restored(self):
        context = CompilerContext.for_dialect(DefaultDialect())
        context.default_table_name = "users"
        exists(self._subquery()).accept(context)
        assert context.in_sub_query is False
        assert context.default_table_name == "users"
        assert USERS.c("id").accept(context) == "id"


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def test_where():
    sql, binds = _render(WhereClause(eq(USERS.c("id"), 1)), default_table="users")
    assert (sql, binds) == ("WHERE id = ?", [1])


def test_order_by():
    clause = OrderByClause((USERS.c("full_name"), USERS.c("id")), "DESC")
    assert _render(clause, default_table="users")[0] == "ORDER BY full_name, id DESC"


class TestForUpdate:
    def test_plain(self):
        assert _render(ForUpdateClause())[0] == "FOR UPDATE"

    def test_of_tables_escaped(self):
        sql, _ = _render(ForUpdateClause(("users", "sessions")), MySQLDialect(escaping=True))
        assert sql == "FOR UPDATE OF `users`, `sessions`"


# ---------------------------------------------------------------------------
# Statement and context
# ---------------------------------------------------------------------------


class TestStatement:
    def test_sql_joins_clauses_and_terminates(self):
        statement = Statement()
        statement.add_clause("SELECT *")
        statement.add_clause("FROM users")
        statement.add_binding(1, 2)
        assert statement.sql == "SELECT *\nFROM users;"
        assert str(statement) == statement.sql
        assert statement.bindings == [1, 2]

    def test_custom_delimiter(self):
        statement = Statement(clauses=["SELECT *", "FROM users"], delimiter=" ")
        assert statement.sql == "SELECT * FROM users;"


class TestCompilerContext:
    def test_scope_restores_on_error(self):
        context = CompilerContext.for_dialect(DefaultDialect())
        with pytest.raises(RuntimeError):
            with context.scope(default_table_name="users", in_sub_query=True):
                assert context.default_table_name == "users"
                raise RuntimeError("boom")
        assert context.default_table_name == ""
        assert context.in_sub_query is False

    def test_none_leaves_field_untouched(self):
        context = CompilerContext.for_dialect(DefaultDialect())
        context.default_table_name = "users"
        with context.scope(in_sub_query=True):
            assert context.default_table_name == "users"

    def test_compiler_matches_dialect(self):
        context = CompilerContext.for_dialect(PostgresDialect())
        assert type(context.compiler).__name__ == "PostgresCompiler"
        assert context.binds == []
