"""mortar – a dialect-aware SQL statement builder.

Assemble statements from composable clause objects and compile them into
dialect-correct SQL text plus an ordered list of bound values::

    import mortar as m

    users = m.table(
        "users",
        m.column("id", m.int_()).primary_key(),
        m.column("email", m.varchar().not_null()),
    )
    statement = (
        m.select(users.c("id"), users.c("email"))
        .from_(users)
        .where(m.eq(users.c("email"), "a@example.com"))
        .build(m.new_dialect("postgres"))
    )
    statement.sql       # 'SELECT id, email\\nFROM users\\nWHERE email = $1;'
    statement.bindings  # ['a@example.com']

Extensibility
-------------
New dialects can be registered via::

    from mortar.compile.registry import DialectRegistry

    @DialectRegistry.register("oracle")
    class OracleDialect(Dialect):
        ...

After registration, ``new_dialect("oracle")`` and ``MortarConfig`` pick it
up automatically.
"""

from __future__ import annotations

from mortar.compile.base import SQLCompiler, Statement
from mortar.compile.context import CompilerContext
from mortar.compile.dialect import DefaultDialect, Dialect
from mortar.compile.mysql import MySQLDialect
from mortar.compile.postgres import PostgresDialect
from mortar.compile.registry import DialectRegistry, new_dialect, register_dialect
from mortar.compile.sqlite import SQLiteDialect
from mortar.config import MortarConfig
from mortar.errors import (
    BuildError,
    CompilationError,
    DatabaseError,
    ErrorCode,
    JoinResolutionError,
    MortarError,
    SchemaError,
    UnsupportedOperationError,
)
from mortar.expression.elements import Clause, Selectable
from mortar.expression.operators import (
    aggregate,
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
from mortar.schema.constraints import foreign_key, index, primary_key, unique_key
from mortar.schema.converters import (
    metadata_from_sqlalchemy,
    schema_from_sqlalchemy,
    table_from_sqlalchemy,
)
from mortar.schema.joins import alias, guess_join_on_clause, make_join_on_clause
from mortar.schema.metadata import MetaData
from mortar.schema.table import ColumnElem, TableElem, column, table
from mortar.schema.types import (
    TypeElem,
    big_int,
    blob,
    boolean,
    char,
    decimal,
    float_,
    int_,
    numeric,
    small_int,
    text,
    timestamp,
    tiny_int,
    type_,
    uuid,
    varchar,
)
from mortar.statement.delete import DeleteStmt, delete
from mortar.statement.insert import InsertStmt, insert
from mortar.statement.select import SelectStmt, select
from mortar.statement.update import UpdateStmt, update
from mortar.statement.upsert import UpsertStmt, upsert

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectRegistry
# ---------------------------------------------------------------------------

DialectRegistry.register_factory("default", DefaultDialect)
DialectRegistry.register_factory("postgres", PostgresDialect)
DialectRegistry.register_factory("mysql", MySQLDialect)
DialectRegistry.register_factory("sqlite3", SQLiteDialect)
DialectRegistry.register_factory("sqlite", SQLiteDialect)

__all__ = [
    # compile
    "SQLCompiler",
    "Statement",
    "CompilerContext",
    "Dialect",
    "DefaultDialect",
    "MySQLDialect",
    "PostgresDialect",
    "SQLiteDialect",
    "DialectRegistry",
    "new_dialect",
    "register_dialect",
    "MortarConfig",
    # errors
    "BuildError",
    "CompilationError",
    "DatabaseError",
    "ErrorCode",
    "JoinResolutionError",
    "MortarError",
    "SchemaError",
    "UnsupportedOperationError",
    # clauses
    "Clause",
    "Selectable",
    "aggregate",
    "and_",
    "avg",
    "bind",
    "condition",
    "count",
    "eq",
    "exists",
    "gt",
    "gte",
    "in_",
    "like",
    "lt",
    "lte",
    "max_",
    "min_",
    "not_eq",
    "not_exists",
    "not_in",
    "or_",
    "sql_text",
    "sum_",
    # schema
    "ColumnElem",
    "MetaData",
    "TableElem",
    "TypeElem",
    "alias",
    "column",
    "foreign_key",
    "guess_join_on_clause",
    "index",
    "make_join_on_clause",
    "metadata_from_sqlalchemy",
    "primary_key",
    "schema_from_sqlalchemy",
    "table",
    "table_from_sqlalchemy",
    "unique_key",
    # types
    "big_int",
    "blob",
    "boolean",
    "char",
    "decimal",
    "float_",
    "int_",
    "numeric",
    "small_int",
    "text",
    "timestamp",
    "tiny_int",
    "type_",
    "uuid",
    "varchar",
    # statements
    "DeleteStmt",
    "InsertStmt",
    "SelectStmt",
    "UpdateStmt",
    "UpsertStmt",
    "delete",
    "insert",
    "select",
    "update",
    "upsert",
]
