"""UPDATE statements."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar

from mortar.expression.elements import Clause, WhereClause
from mortar.schema.table import ColumnElem, TableElem
from mortar.statement.base import (
    BuildableStatement,
    combine_where,
    merge_assignments,
    resolve_columns,
)

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext


@dataclass(frozen=True)
class UpdateStmt(BuildableStatement):
    """``UPDATE table SET ...`` with optional WHERE and RETURNING.

    A value that is already a clause (e.g. ``sql_text("hits + 1")``) is
    rendered instead of bound.
    """

    kind: ClassVar[str] = "update"

    table: TableElem
    assignments: tuple[tuple[str, Any], ...] = ()
    where_clause: WhereClause | None = None
    returning_columns: tuple[ColumnElem, ...] = ()
    errors: tuple[str, ...] = ()

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_update(context, self)

    def values(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> UpdateStmt:
        assignments, errors = merge_assignments(
            self.table, self.assignments, {**(values or {}), **kwargs}
        )
        return replace(self, assignments=assignments, errors=(*self.errors, *errors))

    def where(self, *clauses: Clause) -> UpdateStmt:
        return replace(self, where_clause=combine_where(self.where_clause, clauses))

    def returning(self, *columns: ColumnElem | str) -> UpdateStmt:
        resolved, errors = resolve_columns(self.table, columns)
        return replace(
            self,
            returning_columns=(*self.returning_columns, *resolved),
            errors=(*self.errors, *errors),
        )

    def problems(self) -> list[str]:
        problems = super().problems()
        if not self.assignments:
            problems.append(f"UPDATE of '{self.table.name}' has no values.")
        return problems


def update(table: TableElem) -> UpdateStmt:
    return UpdateStmt(table)
