"""Per-compilation state.

A :class:`CompilerContext` is created fresh for every ``build()`` and
discarded afterwards.  It is never shared between compilations: it collects
the bound values of exactly one statement and tracks the state that decides
whether column references must be table-qualified.
"""
from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mortar.compile.base import SQLCompiler
    from mortar.compile.dialect import Dialect


@dataclass
class CompilerContext:
    """Mutable state for a single compilation pass.

    Attributes:
        dialect: Dialect supplying escaping and DDL rules.
        compiler: Dialect-specific visitor.
        binds: Bound values in placeholder order.
        default_table_name: Columns owned by this table render unqualified.
        in_sub_query: Set while rendering a nested SELECT; forces qualification.
    """

    dialect: Dialect
    compiler: SQLCompiler
    binds: list[Any] = field(default_factory=list)
    default_table_name: str = ""
    in_sub_query: bool = False

    @classmethod
    def for_dialect(cls, dialect: Dialect) -> CompilerContext:
        return cls(dialect=dialect, compiler=dialect.get_compiler())

    def add_binds(self, *values: Any) -> None:
        self.binds.extend(values)

    @contextmanager
    def scope(
        self,
        *,
        default_table_name: str | None = None,
        in_sub_query: bool | None = None,
    ) -> Iterator[CompilerContext]:
        """Temporarily override the qualification state.

        ``None`` leaves a field untouched; both fields are restored on exit.
        """
        saved = (self.default_table_name, self.in_sub_query)
        if default_table_name is not None:
            self.default_table_name = default_table_name
        if in_sub_query is not None:
            self.in_sub_query = in_sub_query
        try:
            yield self
        finally:
            self.default_table_name, self.in_sub_query = saved
