"""Shared behaviour of the statement builders.

Statements are frozen dataclasses: every builder method returns a new
statement, so a partially built statement can be branched into several
variants.  Misuse that can be detected while chaining (unknown column
names, ``asc()`` before ``order_by()``, ...) is recorded on the statement
and reported all at once by :meth:`BuildableStatement.build`.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

import structlog

from mortar.compile.base import Statement
from mortar.compile.context import CompilerContext
from mortar.errors import BuildError
from mortar.expression.elements import Clause, WhereClause
from mortar.expression.operators import and_

if TYPE_CHECKING:
    from mortar.compile.dialect import Dialect
    from mortar.schema.table import ColumnElem, TableElem

logger = structlog.get_logger(__name__)

S = TypeVar("S", bound="BuildableStatement")


class BuildableStatement(Clause):
    """Mixin for top-level statements.

    Subclasses are frozen dataclasses declaring an ``errors`` field.
    """

    kind: ClassVar[str] = "statement"
    errors: tuple[str, ...]

    def with_error(self: S, message: str) -> S:
        return replace(self, errors=(*self.errors, message))

    def problems(self) -> list[str]:
        """Return the errors that make this statement unbuildable."""
        return list(self.errors)

    def build(self, dialect: Dialect) -> Statement:
        """Compile this statement for ``dialect``.

        Args:
            dialect: Target dialect.

        Returns:
            The SQL text and its bindings.

        Raises:
            BuildError: If builder calls recorded errors.
            CompilationError: If the clause tree cannot be rendered.
        """
        problems = self.problems()
        if problems:
            raise BuildError(problems)

        context = CompilerContext.for_dialect(dialect)
        sql = self.accept(context)

        statement = Statement(driver=dialect.driver)
        statement.add_clause(sql)
        statement.add_binding(*context.binds)
        logger.debug(
            "statement_built",
            kind=self.kind,
            driver=dialect.driver or "default",
            bind_count=len(context.binds),
        )
        return statement


def combine_where(current: WhereClause | None, clauses: tuple[Clause, ...]) -> WhereClause | None:
    """AND ``clauses`` onto an existing WHERE clause."""
    if not clauses:
        return current
    clause = clauses[0] if len(clauses) == 1 else and_(*clauses)
    if current is not None:
        clause = and_(current.clause, clause)
    return WhereClause(clause)


def merge_assignments(
    table: TableElem,
    current: tuple[tuple[str, Any], ...],
    values: Mapping[str, Any],
) -> tuple[tuple[tuple[str, Any], ...], list[str]]:
    """Merge ``values`` into ``current`` keeping first-seen column order.

    Returns:
        The merged assignments and an error message per unknown column.
    """
    merged = dict(current)
    errors = []
    for name, value in values.items():
        if not table.has_column(name):
            errors.append(f"Table '{table.name}' has no column '{name}'.")
            continue
        merged[name] = value
    return tuple(merged.items()), errors


def resolve_columns(
    table: TableElem,
    columns: tuple[ColumnElem | str, ...],
) -> tuple[list[ColumnElem], list[str]]:
    """Resolve column objects or names against ``table``."""
    resolved = []
    errors = []
    for col in columns:
        name = col if isinstance(col, str) else col.name
        if not table.has_column(name):
            errors.append(f"Table '{table.name}' has no column '{name}'.")
            continue
        resolved.append(table.c(name))
    return resolved, errors
