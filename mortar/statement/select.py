"""SELECT statements."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar

from mortar.errors import SchemaError
from mortar.expression.elements import (
    AggregateClause,
    Clause,
    ForUpdateClause,
    HavingClause,
    OrderByClause,
    Selectable,
    WhereClause,
    as_clause,
)
from mortar.schema.joins import JoinType, join
from mortar.statement.base import BuildableStatement, combine_where

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.schema.table import ColumnElem


@dataclass(frozen=True)
class SelectStmt(BuildableStatement):
    """A SELECT statement.

    Sections render in a fixed order: select list, FROM (including joins),
    WHERE, GROUP BY, HAVING, ORDER BY, LIMIT/OFFSET, FOR UPDATE.
    """

    kind: ClassVar[str] = "select"

    columns: tuple[Clause, ...] = ()
    from_clause: Selectable | None = None
    where_clause: WhereClause | None = None
    group_by_columns: tuple[ColumnElem, ...] = ()
    having_clauses: tuple[HavingClause, ...] = ()
    order_by_clause: OrderByClause | None = None
    limit_count: int | None = None
    offset_count: int | None = None
    for_update_clause: ForUpdateClause | None = None
    errors: tuple[str, ...] = ()

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_select(context, self)

    def select(self, *clauses: Clause) -> SelectStmt:
        """Append to the select list."""
        return replace(self, columns=(*self.columns, *clauses))

    def from_(self, selectable: Selectable) -> SelectStmt:
        return replace(self, from_clause=selectable)

    def where(self, *clauses: Clause) -> SelectStmt:
        """Add conditions; several conditions, or repeated calls, are ANDed."""
        return replace(self, where_clause=combine_where(self.where_clause, clauses))

    # -- joins ------------------------------------------------------------

    def inner_join(self, right: Selectable, *on: Clause) -> SelectStmt:
        """Join ``right``; without ``on`` the ON clause is guessed from foreign keys."""
        return self._join(JoinType.INNER, right, on)

    def left_join(self, right: Selectable, *on: Clause) -> SelectStmt:
        return self._join(JoinType.LEFT, right, on)

    def right_join(self, right: Selectable, *on: Clause) -> SelectStmt:
        return self._join(JoinType.RIGHT, right, on)

    def cross_join(self, right: Selectable) -> SelectStmt:
        return self._join(JoinType.CROSS, right, ())

    def _join(self, join_type: JoinType, right: Selectable, on: tuple[Clause, ...]) -> SelectStmt:
        if self.from_clause is None:
            return self.with_error(
                f"{join_type.value} of '{right.default_name()}' requires a FROM clause."
            )
        return replace(self, from_clause=join(join_type, self.from_clause, right, *on))

    # -- grouping ---------------------------------------------------------

    def group_by(self, *columns: ColumnElem) -> SelectStmt:
        return replace(self, group_by_columns=(*self.group_by_columns, *columns))

    def having(self, aggregate: AggregateClause, op: str, value: Any) -> SelectStmt:
        """Add ``HAVING aggregate op value``; each call adds its own line."""
        clause = HavingClause(aggregate, op, as_clause(value))
        return replace(self, having_clauses=(*self.having_clauses, clause))

    # -- ordering and paging ----------------------------------------------

    def order_by(self, *clauses: Clause) -> SelectStmt:
        return replace(self, order_by_clause=OrderByClause(tuple(clauses)))

    def asc(self) -> SelectStmt:
        return self._direction("ASC")

    def desc(self) -> SelectStmt:
        return self._direction("DESC")

    def _direction(self, direction: str) -> SelectStmt:
        if self.order_by_clause is None:
            return self.with_error(f"{direction.lower()}() called before order_by().")
        return replace(
            self, order_by_clause=replace(self.order_by_clause, direction=direction)
        )

    def limit(self, count: int, offset: int | None = None) -> SelectStmt:
        if offset is None:
            return replace(self, limit_count=count)
        return replace(self, limit_count=count, offset_count=offset)

    def offset(self, offset: int) -> SelectStmt:
        return replace(self, offset_count=offset)

    def for_update(self, *tables: Selectable | str) -> SelectStmt:
        """Lock the selected rows, optionally only those of ``tables``."""
        names = tuple(t if isinstance(t, str) else t.default_name() for t in tables)
        return replace(self, for_update_clause=ForUpdateClause(names))

    # -- lookups ----------------------------------------------------------

    def c(self, name: str) -> ColumnElem:
        """Return column ``name`` of the FROM target."""
        if self.from_clause is None:
            raise SchemaError(f"Cannot look up column '{name}' without a FROM clause.")
        return self.from_clause.c(name)


def select(*clauses: Clause) -> SelectStmt:
    """Start a SELECT; an empty select list renders ``SELECT *``."""
    return SelectStmt(columns=tuple(clauses))
