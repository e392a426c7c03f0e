"""INSERT statements."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar

from mortar.schema.table import ColumnElem, TableElem
from mortar.statement.base import BuildableStatement, merge_assignments, resolve_columns

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext


@dataclass(frozen=True)
class InsertStmt(BuildableStatement):
    """``INSERT INTO table(cols) VALUES(...)`` with optional RETURNING.

    Columns render in the order they were first given to :meth:`values`.
    """

    kind: ClassVar[str] = "insert"

    table: TableElem
    assignments: tuple[tuple[str, Any], ...] = ()
    returning_columns: tuple[ColumnElem, ...] = ()
    errors: tuple[str, ...] = ()

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_insert(context, self)

    def values(self, values: Mapping[str, Any] | None = None, **kwargs: Any) -> InsertStmt:
        """Set column values from a mapping and/or keyword arguments."""
        assignments, errors = merge_assignments(
            self.table, self.assignments, {**(values or {}), **kwargs}
        )
        return replace(self, assignments=assignments, errors=(*self.errors, *errors))

    def returning(self, *columns: ColumnElem | str) -> InsertStmt:
        resolved, errors = resolve_columns(self.table, columns)
        return replace(
            self,
            returning_columns=(*self.returning_columns, *resolved),
            errors=(*self.errors, *errors),
        )

    def problems(self) -> list[str]:
        problems = super().problems()
        if not self.assignments:
            problems.append(f"{self.kind.upper()} into '{self.table.name}' has no values.")
        return problems


def insert(table: TableElem) -> InsertStmt:
    return InsertStmt(table)
