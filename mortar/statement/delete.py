"""DELETE statements."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, ClassVar

from mortar.expression.elements import Clause, WhereClause
from mortar.schema.table import ColumnElem, TableElem
from mortar.statement.base import BuildableStatement, combine_where, resolve_columns

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext


@dataclass(frozen=True)
class DeleteStmt(BuildableStatement):
    """``DELETE FROM table`` with optional WHERE and RETURNING.

    Column references in the WHERE clause are always table-qualified.
    RETURNING is emitted for every dialect, although only PostgreSQL (and
    recent SQLite) accept it.
    """

    kind: ClassVar[str] = "delete"

    table: TableElem
    where_clause: WhereClause | None = None
    returning_columns: tuple[ColumnElem, ...] = ()
    errors: tuple[str, ...] = ()

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_delete(context, self)

    def where(self, *clauses: Clause) -> DeleteStmt:
        return replace(self, where_clause=combine_where(self.where_clause, clauses))

    def returning(self, *columns: ColumnElem | str) -> DeleteStmt:
        resolved, errors = resolve_columns(self.table, columns)
        return replace(
            self,
            returning_columns=(*self.returning_columns, *resolved),
            errors=(*self.errors, *errors),
        )


def delete(table: TableElem) -> DeleteStmt:
    return DeleteStmt(table)
