"""Unit tests for tables, columns, constraints and MetaData."""

from __future__ import annotations

import pytest

from mortar.compile.dialect import DefaultDialect
from mortar.compile.mysql import MySQLDialect
from mortar.compile.postgres import PostgresDialect
from mortar.compile.sqlite import SQLiteDialect
from mortar.errors import SchemaError, UnsupportedOperationError
from mortar.schema.constraints import (
    IndexElem,
    foreign_key,
    index,
    primary_key,
    unique_key,
)
from mortar.schema.metadata import MetaData
from mortar.schema.table import column, table
from mortar.schema.types import big_int, int_, small_int, varchar
from tests.fixtures import load_metadata

# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------


def test_column_ddl_with_constraints():
    col = column("s", varchar().unique().not_null().default("hello"))
    assert col.ddl(DefaultDialect()) == "s VARCHAR(255) UNIQUE NOT NULL DEFAULT 'hello'"


def test_column_shortcuts_delegate_to_type():
    col = column("name", varchar(40)).not_null().unique()
    assert col.ddl(DefaultDialect()) == "name VARCHAR(40) NOT NULL UNIQUE"


class TestAutoIncrement:
    def test_default(self):
        col = column("id", int_()).inline_primary_key().auto_increment()
        assert col.ddl(DefaultDialect()) == "id INT PRIMARY KEY AUTO INCREMENT"

    def test_mysql(self):
        col = column("id", int_()).inline_primary_key().auto_increment()
        assert col.ddl(MySQLDialect()) == "id INT PRIMARY KEY AUTO_INCREMENT"

    def test_mysql_without_inline_key(self):
        col = column("id", int_()).auto_increment()
        assert col.ddl(MySQLDialect()) == "id INT AUTO_INCREMENT"

    @pytest.mark.parametrize(
        ("type_elem", "expected"),
        [(int_(), "id SERIAL"), (big_int(), "id BIGSERIAL"), (small_int(), "id SMALLSERIAL")],
    )
    def test_postgres_serials(self, type_elem, expected):
        assert column("id", type_elem).auto_increment().ddl(PostgresDialect()) == expected

    def test_postgres_inline(self):
        col = column("id", big_int()).inline_primary_key().auto_increment()
        assert col.ddl(PostgresDialect()) == "id BIGSERIAL PRIMARY KEY"

    def test_sqlite_inline(self):
        col = column("id", int_()).inline_primary_key().auto_increment()
        assert col.ddl(SQLiteDialect()) == "id INTEGER PRIMARY KEY"

    def test_sqlite_rejects_non_inline(self):
        col = column("id", int_()).auto_increment()
        with pytest.raises(UnsupportedOperationError):
            col.ddl(SQLiteDialect())


# ---------------------------------------------------------------------------
# Constraints
# ---------------------------------------------------------------------------


class TestConstraints:
    def test_primary_key(self):
        assert primary_key("id", "email").ddl() == "PRIMARY KEY(id, email)"

    def test_foreign_key(self):
        fk = foreign_key("user_id").references("users", "id")
        assert fk.ddl() == "FOREIGN KEY(user_id) REFERENCES users(id)"

    def test_foreign_key_actions(self):
        fk = (
            foreign_key("user_id", "org_id")
            .references("users", "id", "org_id")
            .on_update("cascade")
            .on_delete("set null")
        )
        assert fk.ddl() == (
            "FOREIGN KEY(user_id, org_id) REFERENCES users(id, org_id) "
            "ON UPDATE CASCADE ON DELETE SET NULL"
        )
        assert fk.pairs() == [("user_id", "id"), ("org_id", "org_id")]

    def test_foreign_key_escaped(self):
        fk = foreign_key("user_id").references("users", "id")
        assert fk.ddl(PostgresDialect(escaping=True)) == (
            'FOREIGN KEY("user_id") REFERENCES "users"("id")'
        )

    def test_invalid_action(self):
        with pytest.raises(SchemaError, match="Invalid referential action"):
            foreign_key("user_id").references("users", "id").on_delete("EXPLODE")

    def test_reference_count_mismatch(self):
        with pytest.raises(SchemaError):
            foreign_key("a", "b").references("t", "x")

    def test_foreign_key_without_target(self):
        with pytest.raises(SchemaError):
            foreign_key("user_id").ddl()

    def test_unique_key_named_after_table(self):
        tbl = table(
            "users",
            column("id", int_()),
            column("email", varchar()),
            unique_key("id", "email"),
        )
        assert tbl.unique_keys[0].ddl() == "CONSTRAINT u_users_id_email UNIQUE(id, email)"

    def test_index(self):
        idx = IndexElem(("id", "email"), table="users")
        assert idx.ddl() == "CREATE INDEX i_id_email ON users(id, email);"


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------


class TestTable:
    def test_columns_are_owned_by_table(self, users):
        assert users.c("email").table == "users"
        assert [c.name for c in users.all()] == ["id", "email", "full_name"]
        assert users.default_name() == "users"

    def test_unknown_column(self, users):
        with pytest.raises(SchemaError, match="has no column 'nope'"):
            users.c("nope")

    def test_primary_key_from_column_flag(self, users):
        assert users.primary_key is not None
        assert users.primary_key.columns == ("id",)
        assert [c.name for c in users.primary_cols()] == ["id"]

    def test_explicit_primary_key_marks_columns(self):
        tbl = table("t", column("a", int_()), column("b", int_()), primary_key("a", "b"))
        assert all(c.options.primary_key for c in tbl.all())

    def test_duplicate_column(self):
        with pytest.raises(SchemaError, match="Duplicate column"):
            table("t", column("a", int_()), column("a", int_()))

    def test_constraint_on_unknown_column(self):
        with pytest.raises(SchemaError, match="unknown"):
            table("t", column("a", int_()), primary_key("b"))
        with pytest.raises(SchemaError):
            table("t", column("a", int_()), foreign_key("b").references("u", "id"))
        with pytest.raises(SchemaError):
            table("t", column("a", int_()), index("b"))

    def test_index_returns_new_table(self, users):
        indexed = users.index("email", "full_name")
        assert len(users.indices) == 1
        assert [i.name for i in indexed.indices] == ["i_full_name", "i_email_full_name"]
        assert indexed.indices[-1].table == "users"

    def test_foreign_key_index(self, sessions):
        assert len(sessions.foreign_keys_to("users")) == 1
        assert sessions.foreign_keys_to("profiles") == ()


class TestTableDDL:
    def test_sqlite_inlines_auto_increment_key(self, users):
        assert users.create(SQLiteDialect()) == (
            "CREATE TABLE users (\n"
            "\tid INTEGER PRIMARY KEY,\n"
            "\temail VARCHAR(255) UNIQUE NOT NULL,\n"
            "\tfull_name VARCHAR(255) NOT NULL\n"
            ");\n"
            "CREATE INDEX i_full_name ON users(full_name);"
        )

    def test_default_uses_table_level_key(self, users):
        assert users.create(DefaultDialect()) == (
            "CREATE TABLE users (\n"
            "\tid INT AUTO INCREMENT,\n"
            "\temail VARCHAR(255) UNIQUE NOT NULL,\n"
            "\tfull_name VARCHAR(255) NOT NULL,\n"
            "\tPRIMARY KEY(id)\n"
            ");\n"
            "CREATE INDEX i_full_name ON users(full_name);"
        )

    def test_postgres_escaped(self, users):
        assert users.create(PostgresDialect(escaping=True)) == (
            'CREATE TABLE "users" (\n'
            '\t"id" SERIAL PRIMARY KEY,\n'
            '\t"email" VARCHAR(255) UNIQUE NOT NULL,\n'
            '\t"full_name" VARCHAR(255) NOT NULL\n'
            ");\n"
            'CREATE INDEX "i_full_name" ON "users"("full_name");'
        )

    def test_mysql_with_foreign_key(self, sessions):
        assert sessions.create(MySQLDialect()) == (
            "CREATE TABLE sessions (\n"
            "\tid INT PRIMARY KEY AUTO_INCREMENT,\n"
            "\tuser_id INT NOT NULL,\n"
            "\tauth_token VARCHAR(36) UNIQUE NOT NULL,\n"
            "\tcreated_at TIMESTAMP NOT NULL,\n"
            "\tFOREIGN KEY(user_id) REFERENCES users(id) ON DELETE CASCADE\n"
            ");"
        )

    def test_unique_key_line(self):
        tbl = table(
            "users",
            column("id", int_()),
            column("email", varchar()),
            unique_key("id", "email"),
        )
        assert tbl.create(DefaultDialect()) == (
            "CREATE TABLE users (\n"
            "\tid INT,\n"
            "\temail VARCHAR(255),\n"
            "\tCONSTRAINT u_users_id_email UNIQUE(id, email)\n"
            ");"
        )

    def test_sqlite_rejects_auto_increment_outside_key(self):
        tbl = table(
            "counters",
            column("id", int_()).primary_key(),
            column("n", int_()).auto_increment(),
        )
        with pytest.raises(UnsupportedOperationError):
            tbl.create(SQLiteDialect())

    def test_sqlite_rejects_composite_auto_increment_key(self):
        tbl = table(
            "t",
            column("a", int_()).auto_increment(),
            column("b", int_()),
            primary_key("a", "b"),
        )
        with pytest.raises(UnsupportedOperationError):
            tbl.create(SQLiteDialect())

    def test_drop(self, users):
        assert users.drop(DefaultDialect()) == "DROP TABLE users;"
        assert users.drop(MySQLDialect(escaping=True)) == "DROP TABLE `users`;"


# ---------------------------------------------------------------------------
# MetaData
# ---------------------------------------------------------------------------


class TestMetaData:
    def test_lookup(self):
        metadata = load_metadata()
        assert metadata.table("users").name == "users"
        assert "sessions" in metadata
        assert len(metadata) == 2
        assert metadata.get("missing") is None

    def test_unknown_table(self):
        with pytest.raises(SchemaError, match="Unknown table"):
            load_metadata().table("missing")

    def test_duplicate_table(self, users):
        with pytest.raises(SchemaError, match="already registered"):
            MetaData(users, users)

    def test_referencing_index(self):
        metadata = load_metadata()
        [(owner, fk)] = metadata.referencing("users")
        assert owner.name == "sessions"
        assert fk.pairs() == [("user_id", "id")]
        assert metadata.referencing("sessions") == []

    def test_foreign_keys_between(self):
        metadata = load_metadata()
        assert len(metadata.foreign_keys_between("users", "sessions")) == 1
        assert len(metadata.foreign_keys_between("sessions", "users")) == 1
        assert metadata.foreign_keys_between("users", "users") == []


def test_repeated_unique_renders_once():
    email = column("email", varchar().unique().not_null().unique())
    assert email.ddl(DefaultDialect()) == "email VARCHAR(255) UNIQUE NOT NULL"
