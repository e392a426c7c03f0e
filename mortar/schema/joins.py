"""Aliases, joins, and foreign-key based ON clause resolution."""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from mortar.errors import JoinResolutionError, SchemaError
from mortar.expression.elements import Clause, Selectable
from mortar.expression.operators import and_, eq
from mortar.schema.table import ColumnElem, TableElem

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext


class JoinType(str, Enum):
    INNER = "INNER JOIN"
    LEFT = "LEFT OUTER JOIN"
    RIGHT = "RIGHT OUTER JOIN"
    CROSS = "CROSS JOIN"


@dataclass(frozen=True)
class AliasClause(Selectable):
    """``selectable AS name``; columns read through it are owned by ``name``."""

    name: str
    selectable: Selectable

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_alias(context, self)

    def c(self, name: str) -> ColumnElem:
        return replace(self.selectable.c(name), table=self.name)

    def all(self) -> list[ColumnElem]:
        return [replace(col, table=self.name) for col in self.selectable.all()]

    def default_name(self) -> str:
        return self.name


@dataclass(frozen=True)
class JoinClause(Selectable):
    """``left JOIN right [ON on]``.

    A join has no default name, so columns rendered inside a joined query
    are always table-qualified.
    """

    join_type: JoinType
    left: Selectable
    right: Selectable
    on: Clause | None = None

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_join(context, self)

    def c(self, name: str) -> ColumnElem:
        try:
            return self.left.c(name)
        except SchemaError:
            return self.right.c(name)

    def all(self) -> list[ColumnElem]:
        return self.left.all() + self.right.all()

    def default_name(self) -> str:
        return ""


def alias(name: str, selectable: Selectable) -> AliasClause:
    return AliasClause(name, selectable)


def join(
    join_type: JoinType,
    left: Selectable,
    right: Selectable,
    *on: Clause,
) -> JoinClause:
    """Join ``left`` and ``right``; a CROSS JOIN never takes an ON clause."""
    if join_type is JoinType.CROSS:
        if on:
            raise JoinResolutionError("CROSS JOIN does not accept an ON clause.")
        return JoinClause(join_type, left, right)
    return JoinClause(join_type, left, right, make_join_on_clause(left, right, *on))


def make_join_on_clause(left: Selectable, right: Selectable, *on: Clause) -> Clause:
    """Resolve the ON clause for joining ``left`` and ``right``.

    Args:
        left: Left side of the join.
        right: Right side of the join.
        *on: Nothing (guess from foreign keys), one condition, or two
            columns to compare for equality.

    Returns:
        The ON clause.

    Raises:
        JoinResolutionError: When the arguments cannot form an ON clause.
    """
    if not on:
        return guess_join_on_clause(left, right)
    if len(on) == 1:
        return on[0]
    if len(on) == 2 and all(isinstance(c, ColumnElem) for c in on):
        return eq(on[0], on[1])
    raise JoinResolutionError(
        "A join takes no ON argument, one condition, or two columns; "
        f"got {len(on)} arguments."
    )


def guess_join_on_clause(left: Selectable, right: Selectable) -> Clause:
    """Derive the ON clause from the single foreign key linking two tables.

    The key may point in either direction.  Composite keys produce an AND of
    equalities in the key's declared column order, with the referencing
    table's column on the left of each equality.  When ``left`` is itself a
    join, every table in it is considered.

    Raises:
        JoinResolutionError: If an alias is involved, or if zero or several
            foreign keys link the two sides.
    """
    left_tables = _tables_of(left)
    right_table = _as_table(right)

    candidates = []
    for lt in left_tables:
        candidates.extend((lt, right_table, fk) for fk in lt.foreign_keys_to(right_table.name))
        if lt.name != right_table.name:
            candidates.extend(
                (right_table, lt, fk) for fk in right_table.foreign_keys_to(lt.name)
            )

    names = f"'{', '.join(t.name for t in left_tables)}' and '{right_table.name}'"
    if not candidates:
        raise JoinResolutionError(f"No foreign key links {names}.")
    if len(candidates) > 1:
        raise JoinResolutionError(
            f"{len(candidates)} foreign keys link {names}; pass the ON clause explicitly."
        )

    owner, target, fk = candidates[0]
    conditions = [eq(owner.c(col), target.c(ref)) for col, ref in fk.pairs()]
    if len(conditions) == 1:
        return conditions[0]
    return and_(*conditions)


def _as_table(selectable: Selectable) -> TableElem:
    if isinstance(selectable, AliasClause):
        raise JoinResolutionError(
            f"Cannot guess a join ON clause through alias '{selectable.name}'."
        )
    if not isinstance(selectable, TableElem):
        raise JoinResolutionError(
            f"Cannot guess a join ON clause for {type(selectable).__name__}."
        )
    return selectable


def _tables_of(selectable: Selectable) -> list[TableElem]:
    if isinstance(selectable, JoinClause):
        return _tables_of(selectable.left) + _tables_of(selectable.right)
    return [_as_table(selectable)]
