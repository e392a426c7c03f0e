"""MySQL dialect and compiler."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mortar.compile.base import SQLCompiler
from mortar.compile.dialect import Dialect
from mortar.errors import ErrorCode

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.schema.table import ColumnElem
    from mortar.schema.types import TypeElem
    from mortar.statement.upsert import UpsertStmt

# Server / client error numbers, grouped the way MySQL-python classifies them.
_ERRNO_CODES: dict[int, ErrorCode] = {
    # programming
    2014: ErrorCode.PROGRAMMING,  # CR_COMMANDS_OUT_OF_SYNC
    1007: ErrorCode.PROGRAMMING,  # ER_DB_CREATE_EXISTS
    1149: ErrorCode.PROGRAMMING,  # ER_SYNTAX_ERROR
    1064: ErrorCode.PROGRAMMING,  # ER_PARSE_ERROR
    1146: ErrorCode.PROGRAMMING,  # ER_NO_SUCH_TABLE
    1102: ErrorCode.PROGRAMMING,  # ER_WRONG_DB_NAME
    1103: ErrorCode.PROGRAMMING,  # ER_WRONG_TABLE_NAME
    1110: ErrorCode.PROGRAMMING,  # ER_FIELD_SPECIFIED_TWICE
    1111: ErrorCode.PROGRAMMING,  # ER_INVALID_GROUP_FUNC_USE
    1112: ErrorCode.PROGRAMMING,  # ER_UNSUPPORTED_EXTENSION
    1113: ErrorCode.PROGRAMMING,  # ER_TABLE_MUST_HAVE_COLUMNS
    1179: ErrorCode.PROGRAMMING,  # ER_CANT_DO_THIS_DURING_AN_TRANSACTION
    # data
    1265: ErrorCode.DATA,  # WARN_DATA_TRUNCATED
    1264: ErrorCode.DATA,  # ER_WARN_DATA_OUT_OF_RANGE
    1230: ErrorCode.DATA,  # ER_NO_DEFAULT
    1171: ErrorCode.DATA,  # ER_PRIMARY_CANT_HAVE_NULL
    1406: ErrorCode.DATA,  # ER_DATA_TOO_LONG
    1441: ErrorCode.DATA,  # ER_DATETIME_FUNCTION_OVERFLOW
    # integrity
    1062: ErrorCode.INTEGRITY,  # ER_DUP_ENTRY
    1169: ErrorCode.INTEGRITY,  # ER_DUP_UNIQUE
    1216: ErrorCode.INTEGRITY,  # ER_NO_REFERENCED_ROW
    1452: ErrorCode.INTEGRITY,  # ER_NO_REFERENCED_ROW_2
    1217: ErrorCode.INTEGRITY,  # ER_ROW_IS_REFERENCED
    1451: ErrorCode.INTEGRITY,  # ER_ROW_IS_REFERENCED_2
    1215: ErrorCode.INTEGRITY,  # ER_CANNOT_ADD_FOREIGN
    # not supported
    1196: ErrorCode.NOT_SUPPORTED,  # ER_WARNING_NOT_COMPLETE_ROLLBACK
    1235: ErrorCode.NOT_SUPPORTED,  # ER_NOT_SUPPORTED_YET
    1289: ErrorCode.NOT_SUPPORTED,  # ER_FEATURE_DISABLED
    1286: ErrorCode.NOT_SUPPORTED,  # ER_UNKNOWN_STORAGE_ENGINE
}


class MySQLCompiler(SQLCompiler):
    """Renders upserts as ``INSERT ... ON DUPLICATE KEY UPDATE``.

    The values are bound twice: once for the insert and once for the
    update assignments.
    """

    def visit_upsert(self, context: CompilerContext, upsert: UpsertStmt) -> str:
        with context.scope(default_table_name=upsert.table.name):
            table, columns, values = self.insert_parts(context, upsert.table, upsert.assignments)
            return (
                f"INSERT INTO {table}({columns})\nVALUES({values})\n"
                f"ON DUPLICATE KEY UPDATE {self.assignments(context, upsert.assignments)}"
            )


class MySQLDialect(Dialect):
    """MySQL: backtick-quoted identifiers, ``?`` placeholders, UNSIGNED types."""

    escape_char = "`"
    compiler_class = MySQLCompiler

    @property
    def driver(self) -> str:
        return "mysql"

    def supports_unsigned(self) -> bool:
        return True

    def compile_type(self, type_: TypeElem) -> str:
        if type_.name == "UUID":
            return "VARCHAR(36)"
        return super().compile_type(type_)

    def auto_increment(self, column: ColumnElem) -> str:
        spec = self.compile_type(column.type)
        if column.options.inline_primary_key:
            spec += " PRIMARY KEY"
        return f"{spec} AUTO_INCREMENT"

    def classify_error(self, exc: BaseException) -> ErrorCode:
        errno = _errno(exc)
        if errno is None:
            return super().classify_error(exc)
        code = _ERRNO_CODES.get(errno)
        if code is not None:
            return code
        return ErrorCode.INTERNAL if errno < 1000 else ErrorCode.OPERATIONAL


def _errno(exc: BaseException) -> int | None:
    # mysql-connector sets ``errno``; PyMySQL and mysqlclient pass it as args[0].
    errno = getattr(exc, "errno", None)
    if isinstance(errno, int):
        return errno
    if exc.args and isinstance(exc.args[0], int):
        return exc.args[0]
    return None
