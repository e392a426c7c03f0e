"""Dialect abstraction.

A dialect bundles what differs between SQL engines: identifier escaping,
placeholder syntax, column DDL rules, the compiler used for statements with
engine-specific syntax, and the mapping of native driver errors onto
:class:`~mortar.errors.ErrorCode`.

Dialect instances are mutable (escaping flag, placeholder counter) and are
not safe to share between threads while :meth:`Dialect.placeholder` is in
use.  ``build()`` does not use the counter; it numbers placeholders from its
own per-build context.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, ClassVar

from mortar.compile.base import SQLCompiler
from mortar.errors import DatabaseError, ErrorCode
from mortar.schema.types import TypeElem, compile_type

if TYPE_CHECKING:
    from mortar.schema.table import ColumnElem

# PEP 249 exception class names, most specific first.
_PEP249_CODES: dict[str, ErrorCode] = {
    "IntegrityError": ErrorCode.INTEGRITY,
    "DataError": ErrorCode.DATA,
    "OperationalError": ErrorCode.OPERATIONAL,
    "ProgrammingError": ErrorCode.PROGRAMMING,
    "InternalError": ErrorCode.INTERNAL,
    "NotSupportedError": ErrorCode.NOT_SUPPORTED,
    "InterfaceError": ErrorCode.INTERFACE,
    "DatabaseError": ErrorCode.DATABASE,
}


class Dialect(ABC):
    """Base class for SQL dialects.

    Args:
        escaping: Whether identifiers are quoted.
    """

    #: Quote character wrapped around escaped identifiers.
    escape_char: ClassVar[str] = '"'
    #: Compiler used by :meth:`get_compiler`.
    compiler_class: ClassVar[type[SQLCompiler]] = SQLCompiler

    def __init__(self, escaping: bool = False) -> None:
        self._escaping = escaping
        self._bindings = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(escaping={self._escaping})"

    @property
    @abstractmethod
    def driver(self) -> str:
        """Return the driver name (``""`` for the default dialect)."""

    # ------------------------------------------------------------------
    # Escaping
    # ------------------------------------------------------------------

    @property
    def escaping(self) -> bool:
        return self._escaping

    def set_escaping(self, escaping: bool) -> None:
        self._escaping = escaping

    def escape(self, name: str) -> str:
        """Quote ``name`` when escaping is enabled.

        Embedded quote characters are doubled, so every call wraps exactly
        once.
        """
        if not self._escaping or not self.escape_char:
            return name
        q = self.escape_char
        return f"{q}{name.replace(q, q * 2)}{q}"

    def escape_all(self, names: Iterable[str]) -> list[str]:
        return [self.escape(name) for name in names]

    # ------------------------------------------------------------------
    # Placeholders
    # ------------------------------------------------------------------

    def placeholder(self) -> str:
        """Return the next placeholder token for hand-assembled SQL."""
        self._bindings += 1
        return "?"

    def placeholders(self, *values: Any) -> list[str]:
        return [self.placeholder() for _ in values]

    def reset(self) -> None:
        """Restart placeholder numbering."""
        self._bindings = 0

    # ------------------------------------------------------------------
    # DDL hooks
    # ------------------------------------------------------------------

    def supports_unsigned(self) -> bool:
        return False

    def supports_inline_primary_key(self) -> bool:
        return True

    def compile_type(self, type_: TypeElem) -> str:
        return compile_type(type_, self.supports_unsigned())

    def auto_increment(self, column: ColumnElem) -> str:
        """Return the column spec of an auto-incrementing column."""
        spec = self.compile_type(column.type)
        if column.options.inline_primary_key:
            spec += " PRIMARY KEY"
        return f"{spec} AUTO INCREMENT"

    def get_compiler(self) -> SQLCompiler:
        return self.compiler_class(self)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def wrap_error(self, exc: BaseException) -> DatabaseError:
        """Map a native driver exception onto :class:`DatabaseError`.

        Args:
            exc: Exception raised by the database driver.

        Returns:
            A :class:`DatabaseError` carrying the classified code and the
            original exception.
        """
        if isinstance(exc, DatabaseError):
            return exc
        return DatabaseError(
            self.classify_error(exc),
            str(exc),
            orig=exc,
            **self.error_details(exc),
        )

    def classify_error(self, exc: BaseException) -> ErrorCode:
        """Classify ``exc`` by its PEP 249 exception class."""
        for klass in type(exc).__mro__:
            code = _PEP249_CODES.get(klass.__name__)
            if code is not None:
                return code
        return ErrorCode.ANY

    def error_details(self, exc: BaseException) -> dict[str, str | None]:
        """Return the table / column / constraint the driver reported, if any."""
        return {}


class DefaultDialect(Dialect):
    """Generic dialect: never escapes, ``?`` placeholders."""

    escape_char = ""

    @property
    def driver(self) -> str:
        return ""

    def supports_inline_primary_key(self) -> bool:
        return False
