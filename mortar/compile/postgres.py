"""PostgreSQL dialect and compiler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mortar.compile.base import SQLCompiler
from mortar.compile.dialect import Dialect
from mortar.errors import CompilationError, ErrorCode

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.schema.table import ColumnElem
    from mortar.schema.types import TypeElem
    from mortar.statement.upsert import UpsertStmt

# SQLSTATE class (first two characters) -> error category.
_SQLSTATE_CLASSES: dict[str, ErrorCode] = {
    "0A": ErrorCode.NOT_SUPPORTED,
    "20": ErrorCode.PROGRAMMING,
    "21": ErrorCode.PROGRAMMING,
    "22": ErrorCode.DATA,
    "23": ErrorCode.INTEGRITY,
    "24": ErrorCode.INTERNAL,
    "25": ErrorCode.INTERNAL,
    "26": ErrorCode.OPERATIONAL,
    "27": ErrorCode.OPERATIONAL,
    "28": ErrorCode.OPERATIONAL,
    "2B": ErrorCode.INTERNAL,
    "2D": ErrorCode.INTERNAL,
    "2F": ErrorCode.INTERNAL,
    "34": ErrorCode.OPERATIONAL,
    "38": ErrorCode.INTERNAL,
    "39": ErrorCode.INTERNAL,
    "3B": ErrorCode.INTERNAL,
    "3D": ErrorCode.PROGRAMMING,
    "3F": ErrorCode.PROGRAMMING,
    "40": ErrorCode.OPERATIONAL,
    "42": ErrorCode.PROGRAMMING,
    "44": ErrorCode.PROGRAMMING,
    "53": ErrorCode.OPERATIONAL,
    "54": ErrorCode.OPERATIONAL,
    "55": ErrorCode.OPERATIONAL,
    "57": ErrorCode.OPERATIONAL,
    "58": ErrorCode.OPERATIONAL,
    "F0": ErrorCode.INTERNAL,
    "HV": ErrorCode.OPERATIONAL,
    "P0": ErrorCode.INTERNAL,
    "XX": ErrorCode.INTERNAL,
}


class PostgresCompiler(SQLCompiler):
    """Numbers placeholders ``$1, $2, ...`` and renders ``ON CONFLICT`` upserts.

    Numbering comes from the bind count of the current context, so every
    build starts at ``$1`` regardless of earlier builds.
    """

    def placeholder(self, context: CompilerContext) -> str:
        return f"${len(context.binds)}"

    def visit_upsert(self, context: CompilerContext, upsert: UpsertStmt) -> str:
        conflict = upsert.table.primary_key
        if conflict is None:
            raise CompilationError(
                f"UPSERT into '{upsert.table.name}' needs a primary key "
                "to use as the ON CONFLICT target.",
                clause="UPSERT",
            )
        with context.scope(default_table_name=upsert.table.name):
            table, columns, values = self.insert_parts(context, upsert.table, upsert.assignments)
            target = ", ".join(self.dialect.escape_all(conflict.columns))
            sql = (
                f"INSERT INTO {table}({columns})\nVALUES({values})\n"
                f"ON CONFLICT ({target}) DO UPDATE SET "
                f"{self.assignments(context, upsert.assignments)}"
            )
            sql += self.returning(upsert.returning_columns)
        return sql


class PostgresDialect(Dialect):
    """PostgreSQL: double-quoted identifiers, ``$N`` placeholders."""

    escape_char = '"'
    compiler_class = PostgresCompiler

    @property
    def driver(self) -> str:
        return "postgres"

    def placeholder(self) -> str:
        self._bindings += 1
        return f"${self._bindings}"

    def compile_type(self, type_: TypeElem) -> str:
        if type_.name == "BLOB":
            return "bytea"
        return super().compile_type(type_)

    def auto_increment(self, column: ColumnElem) -> str:
        if column.type.name == "BIGINT":
            spec = "BIGSERIAL"
        elif column.type.name == "SMALLINT":
            spec = "SMALLSERIAL"
        else:
            spec = "SERIAL"
        if column.options.inline_primary_key:
            spec += " PRIMARY KEY"
        return spec

    def classify_error(self, exc: BaseException) -> ErrorCode:
        # psycopg 3 exposes ``sqlstate``, psycopg2 ``pgcode``.
        sqlstate = getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None)
        if not sqlstate:
            return super().classify_error(exc)
        return _SQLSTATE_CLASSES.get(sqlstate[:2], ErrorCode.DATABASE)

    def error_details(self, exc: BaseException) -> dict[str, str | None]:
        diag = getattr(exc, "diag", None)
        if diag is None:
            return {}
        return {
            "table": getattr(diag, "table_name", None),
            "column": getattr(diag, "column_name", None),
            "constraint": getattr(diag, "constraint_name", None),
        }
