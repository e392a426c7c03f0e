"""Custom exception hierarchy for mortar.

All public errors inherit from MortarError so callers can catch the base
class for any mortar-specific failure.
"""
from __future__ import annotations

from enum import IntEnum
from typing import Any


class MortarError(Exception):
    """Base exception for all mortar errors."""


class SchemaError(MortarError):
    """Raised when a table, column, or constraint definition is invalid.

    Args:
        message: Human-readable description.
        details: Extra context (table name, column name, ...).
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class CompilationError(MortarError):
    """Raised when a clause tree cannot be rendered to SQL.

    Args:
        message: Human-readable description.
        clause: The clause kind being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class UnsupportedOperationError(CompilationError):
    """Raised when a dialect has no rendering for the requested operation."""


class JoinResolutionError(CompilationError):
    """Raised when a JOIN ON clause cannot be derived from foreign keys."""

    def __init__(self, message: str) -> None:
        super().__init__(message, clause="JOIN")


class BuildError(MortarError):
    """Raised by ``build()`` when chained builder calls recorded errors.

    Every recorded problem is reported at once, newline separated.

    Args:
        errors: Messages collected by the builder, in call order.
    """

    def __init__(self, errors: list[str]) -> None:
        super().__init__("\n".join(errors))
        self.errors = list(errors)


# ---------------------------------------------------------------------------
# Database error taxonomy
# ---------------------------------------------------------------------------


class ErrorCode(IntEnum):
    """Driver-independent classification of database errors.

    ``INTERFACE`` and ``DATABASE`` are category bits; every concrete
    database category carries the ``DATABASE`` bit.
    """

    ANY = 0
    INTERFACE = 1 << 8
    DATABASE = 1 << 9
    DATA = DATABASE | 32
    OPERATIONAL = DATABASE | 33
    INTEGRITY = DATABASE | 34
    INTERNAL = DATABASE | 35
    PROGRAMMING = DATABASE | 36
    NOT_SUPPORTED = DATABASE | 37


_CODE_LABELS: dict[ErrorCode, str] = {
    ErrorCode.ANY: "error",
    ErrorCode.INTERFACE: "interface error",
    ErrorCode.DATABASE: "database error",
    ErrorCode.DATA: "data error",
    ErrorCode.OPERATIONAL: "operational error",
    ErrorCode.INTEGRITY: "integrity error",
    ErrorCode.INTERNAL: "internal error",
    ErrorCode.PROGRAMMING: "programming error",
    ErrorCode.NOT_SUPPORTED: "not supported error",
}


class DatabaseError(MortarError):
    """A native driver error mapped onto :class:`ErrorCode`.

    Produced by :meth:`mortar.compile.dialect.Dialect.wrap_error`; the
    original exception stays reachable through ``orig``.

    Args:
        code: The classified category.
        message: Driver message.
        orig: The native exception.
        table: Table named by the driver, when it reports one.
        column: Column named by the driver, when it reports one.
        constraint: Constraint named by the driver, when it reports one.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        orig: BaseException | None = None,
        table: str | None = None,
        column: str | None = None,
        constraint: str | None = None,
    ) -> None:
        super().__init__(f"{_CODE_LABELS[code]}: {message}")
        self.code = code
        self.orig = orig
        self.table = table
        self.column = column
        self.constraint = constraint

    def is_interface_error(self) -> bool:
        return bool(self.code & ErrorCode.INTERFACE)

    def is_database_error(self) -> bool:
        return bool(self.code & ErrorCode.DATABASE)
