"""SQLite dialect and compiler."""
from __future__ import annotations

import re
from typing import TYPE_CHECKING

from mortar.compile.base import SQLCompiler
from mortar.compile.dialect import Dialect
from mortar.errors import ErrorCode, UnsupportedOperationError

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.schema.table import ColumnElem
    from mortar.schema.types import TypeElem
    from mortar.statement.upsert import UpsertStmt

# Primary result codes (extended code & 0xFF).
_RESULT_CODES: dict[int, ErrorCode] = {
    1: ErrorCode.OPERATIONAL,  # SQLITE_ERROR
    2: ErrorCode.INTERNAL,  # SQLITE_INTERNAL
    3: ErrorCode.OPERATIONAL,  # SQLITE_PERM
    4: ErrorCode.OPERATIONAL,  # SQLITE_ABORT
    5: ErrorCode.OPERATIONAL,  # SQLITE_BUSY
    6: ErrorCode.OPERATIONAL,  # SQLITE_LOCKED
    7: ErrorCode.INTERNAL,  # SQLITE_NOMEM
    8: ErrorCode.OPERATIONAL,  # SQLITE_READONLY
    9: ErrorCode.OPERATIONAL,  # SQLITE_INTERRUPT
    10: ErrorCode.OPERATIONAL,  # SQLITE_IOERR
    11: ErrorCode.DATABASE,  # SQLITE_CORRUPT
    12: ErrorCode.INTERNAL,  # SQLITE_NOTFOUND
    13: ErrorCode.OPERATIONAL,  # SQLITE_FULL
    14: ErrorCode.OPERATIONAL,  # SQLITE_CANTOPEN
    15: ErrorCode.OPERATIONAL,  # SQLITE_PROTOCOL
    16: ErrorCode.OPERATIONAL,  # SQLITE_EMPTY
    17: ErrorCode.OPERATIONAL,  # SQLITE_SCHEMA
    18: ErrorCode.DATA,  # SQLITE_TOOBIG
    19: ErrorCode.INTEGRITY,  # SQLITE_CONSTRAINT
    20: ErrorCode.INTEGRITY,  # SQLITE_MISMATCH
    21: ErrorCode.PROGRAMMING,  # SQLITE_MISUSE
}

# e.g. "UNIQUE constraint failed: users.email", "NOT NULL constraint failed: users.name"
_CONSTRAINT_FAILED = re.compile(r"^([A-Z ]+?) constraint failed: (\w+)\.(\w+)")


class SQLiteCompiler(SQLCompiler):
    """Renders upserts as ``REPLACE INTO``; values are bound once."""

    def visit_upsert(self, context: CompilerContext, upsert: UpsertStmt) -> str:
        with context.scope(default_table_name=upsert.table.name):
            table, columns, values = self.insert_parts(context, upsert.table, upsert.assignments)
            return f"REPLACE INTO {table}({columns})\nVALUES({values})"


class SQLiteDialect(Dialect):
    """SQLite: backtick-quoted identifiers, ``?`` placeholders.

    Auto-increment is only available as ``INTEGER PRIMARY KEY``.
    """

    escape_char = "`"
    compiler_class = SQLiteCompiler

    @property
    def driver(self) -> str:
        return "sqlite3"

    def compile_type(self, type_: TypeElem) -> str:
        if type_.name == "UUID":
            return "VARCHAR(36)"
        return super().compile_type(type_)

    def auto_increment(self, column: ColumnElem) -> str:
        if not column.options.inline_primary_key:
            raise UnsupportedOperationError(
                f"SQLite only auto-increments an inline INTEGER PRIMARY KEY; "
                f"column '{column.name}' is not one.",
                clause="AUTO INCREMENT",
            )
        return "INTEGER PRIMARY KEY"

    def classify_error(self, exc: BaseException) -> ErrorCode:
        # ``sqlite_errorcode`` is available on Python 3.11+.
        code = getattr(exc, "sqlite_errorcode", None)
        if code is None:
            return super().classify_error(exc)
        return _RESULT_CODES.get(code & 0xFF, ErrorCode.DATABASE)

    def error_details(self, exc: BaseException) -> dict[str, str | None]:
        match = _CONSTRAINT_FAILED.match(str(exc))
        if match is None:
            return {}
        kind, table, column = match.groups()
        return {"table": table, "column": column, "constraint": kind}
