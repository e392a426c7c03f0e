"""UPSERT statements.

There is no portable upsert syntax, so rendering is delegated entirely to
the dialect's compiler:

- SQLite: ``REPLACE INTO t(cols) VALUES(...)``
- MySQL: ``INSERT ... ON DUPLICATE KEY UPDATE a = ?, ...``
- PostgreSQL: ``INSERT ... ON CONFLICT (pk) DO UPDATE SET a = $n, ... RETURNING ...``

The default dialect raises :class:`~mortar.errors.UnsupportedOperationError`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from mortar.statement.insert import InsertStmt

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.schema.table import TableElem


@dataclass(frozen=True)
class UpsertStmt(InsertStmt):
    """Insert-or-update; RETURNING is only rendered for PostgreSQL."""

    kind: ClassVar[str] = "upsert"

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_upsert(context, self)


def upsert(table: TableElem) -> UpsertStmt:
    return UpsertStmt(table)
