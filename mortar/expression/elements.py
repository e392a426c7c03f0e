"""Clause tree nodes.

Every node is immutable and exposes a single operation,
:meth:`Clause.accept`, which hands the node to the matching ``visit_*``
method of the active compiler.  A node that binds values appends them to the
context in the same left-to-right order its placeholders appear in the
rendered text.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.schema.table import ColumnElem
    from mortar.statement.select import SelectStmt


class Clause(ABC):
    """A renderable SQL fragment."""

    @abstractmethod
    def accept(self, context: CompilerContext) -> str:
        """Render this clause against ``context``.

        Args:
            context: The per-compilation context; receives bound values.

        Returns:
            The SQL fragment.
        """


class Selectable(Clause):
    """A clause usable as a FROM target: a table, an alias, or a join."""

    @abstractmethod
    def c(self, name: str) -> ColumnElem:
        """Return the column ``name`` as seen through this selectable."""

    @abstractmethod
    def all(self) -> list[ColumnElem]:
        """Return every column reachable through this selectable."""

    @abstractmethod
    def default_name(self) -> str:
        """Return the name unqualified columns are resolved against."""


def as_clause(value: Any) -> Clause:
    """Return ``value`` unchanged if it is a clause, otherwise bind it."""
    if isinstance(value, Clause):
        return value
    return BindClause(value)


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextClause(Clause):
    """Raw SQL text, emitted verbatim."""

    text: str

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_text(context, self)


@dataclass(frozen=True)
class BindClause(Clause):
    """A bound value rendered as the dialect's placeholder."""

    value: Any

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_bind(context, self)


@dataclass(frozen=True)
class LabelClause(Clause):
    """A bare identifier such as a column name in an INSERT column list."""

    name: str

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_label(context, self)


# ---------------------------------------------------------------------------
# Composites
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ListClause(Clause):
    """Comma separated clauses."""

    clauses: tuple[Clause, ...]

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_list(context, self)


@dataclass(frozen=True)
class BinaryExpressionClause(Clause):
    """``left op right``."""

    left: Clause
    op: str
    right: Clause

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_binary(context, self)


@dataclass(frozen=True)
class InClause(Clause):
    """``left IN (values)`` or ``left NOT IN (values)``."""

    left: Clause
    op: str
    values: ListClause

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_in(context, self)


@dataclass(frozen=True)
class CombinerClause(Clause):
    """Parenthesised ``AND`` / ``OR`` of sub-clauses."""

    operator: str
    clauses: tuple[Clause, ...]

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_combiner(context, self)


@dataclass(frozen=True)
class AggregateClause(Clause):
    """``FN(clause)``, e.g. ``COUNT(id)``."""

    fn: str
    clause: Clause

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_aggregate(context, self)


@dataclass(frozen=True)
class ExistsClause(Clause):
    """``EXISTS(subquery)`` or ``NOT EXISTS(subquery)``."""

    select: SelectStmt
    negated: bool = False

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_exists(context, self)


# ---------------------------------------------------------------------------
# Statement sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WhereClause(Clause):
    clause: Clause

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_where(context, self)


@dataclass(frozen=True)
class HavingClause(Clause):
    """``HAVING aggregate op value``."""

    aggregate: AggregateClause
    op: str
    value: Clause

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_having(context, self)


@dataclass(frozen=True)
class OrderByClause(Clause):
    clauses: tuple[Clause, ...]
    direction: str = "ASC"

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_order_by(context, self)


@dataclass(frozen=True)
class ForUpdateClause(Clause):
    """``FOR UPDATE`` optionally restricted with ``OF`` to some tables."""

    tables: tuple[str, ...] = ()

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_for_update(context, self)
