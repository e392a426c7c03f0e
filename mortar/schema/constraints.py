"""Column and table constraints.

Column constraints (``NOT NULL``, ``DEFAULT 'x'``, ...) are plain SQL
fragments attached to a :class:`~mortar.schema.types.TypeElem`.  Table
constraints (primary, foreign and unique keys) and indices are attached to a
table through :func:`mortar.schema.table.table`.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from mortar.errors import SchemaError

if TYPE_CHECKING:
    from mortar.compile.dialect import Dialect

#: Referential actions accepted by ``ON UPDATE`` / ``ON DELETE``.
REFERENTIAL_ACTIONS = frozenset(
    {"CASCADE", "SET NULL", "SET DEFAULT", "RESTRICT", "NO ACTION"}
)


@dataclass(frozen=True)
class ConstraintElem:
    """A column-level constraint, rendered verbatim."""

    sql: str

    def __str__(self) -> str:
        return self.sql


def null_constraint() -> ConstraintElem:
    return ConstraintElem("NULL")


def not_null_constraint() -> ConstraintElem:
    return ConstraintElem("NOT NULL")


def unique_constraint() -> ConstraintElem:
    return ConstraintElem("UNIQUE")


def default_constraint(value: Any) -> ConstraintElem:
    return ConstraintElem(f"DEFAULT '{value}'")


def _names(dialect: Dialect | None, names: tuple[str, ...]) -> str:
    if dialect is None:
        return ", ".join(names)
    return ", ".join(dialect.escape_all(names))


def _ident(dialect: Dialect | None, name: str) -> str:
    return name if dialect is None else dialect.escape(name)


# ---------------------------------------------------------------------------
# Table constraints
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PrimaryKeyConstraint:
    columns: tuple[str, ...]

    def ddl(self, dialect: Dialect | None = None) -> str:
        return f"PRIMARY KEY({_names(dialect, self.columns)})"


@dataclass(frozen=True)
class ForeignKeyConstraint:
    """A (possibly composite) foreign key.

    ``columns[i]`` references ``ref_columns[i]`` on ``ref_table``.
    """

    columns: tuple[str, ...]
    ref_table: str = ""
    ref_columns: tuple[str, ...] = ()
    update_action: str | None = None
    delete_action: str | None = None

    def references(self, table: str, *columns: str) -> ForeignKeyConstraint:
        if len(columns) != len(self.columns):
            raise SchemaError(
                f"Foreign key on ({', '.join(self.columns)}) references "
                f"{len(columns)} column(s) of '{table}'.",
                details={"columns": list(self.columns), "ref_table": table},
            )
        return replace(self, ref_table=table, ref_columns=tuple(columns))

    def on_update(self, action: str) -> ForeignKeyConstraint:
        return replace(self, update_action=_check_action(action))

    def on_delete(self, action: str) -> ForeignKeyConstraint:
        return replace(self, delete_action=_check_action(action))

    def pairs(self) -> list[tuple[str, str]]:
        """Return ``(column, referenced column)`` pairs in declared order."""
        return list(zip(self.columns, self.ref_columns))

    def ddl(self, dialect: Dialect | None = None) -> str:
        if not self.ref_table:
            raise SchemaError(
                f"Foreign key on ({', '.join(self.columns)}) has no REFERENCES target."
            )
        sql = (
            f"FOREIGN KEY({_names(dialect, self.columns)}) "
            f"REFERENCES {_ident(dialect, self.ref_table)}"
            f"({_names(dialect, self.ref_columns)})"
        )
        if self.update_action:
            sql += f" ON UPDATE {self.update_action}"
        if self.delete_action:
            sql += f" ON DELETE {self.delete_action}"
        return sql


def _check_action(action: str) -> str:
    normalized = action.upper()
    if normalized not in REFERENTIAL_ACTIONS:
        raise SchemaError(
            f"Invalid referential action: '{action}'.",
            details={"allowed": sorted(REFERENTIAL_ACTIONS)},
        )
    return normalized


@dataclass(frozen=True)
class UniqueKeyConstraint:
    columns: tuple[str, ...]
    table: str = ""

    @property
    def name(self) -> str:
        return f"u_{self.table}_{'_'.join(self.columns)}"

    def ddl(self, dialect: Dialect | None = None) -> str:
        return (
            f"CONSTRAINT {_ident(dialect, self.name)} "
            f"UNIQUE({_names(dialect, self.columns)})"
        )


@dataclass(frozen=True)
class IndexElem:
    columns: tuple[str, ...]
    table: str = ""

    @property
    def name(self) -> str:
        return f"i_{'_'.join(self.columns)}"

    def ddl(self, dialect: Dialect | None = None) -> str:
        return (
            f"CREATE INDEX {_ident(dialect, self.name)} ON "
            f"{_ident(dialect, self.table)}({_names(dialect, self.columns)});"
        )


def primary_key(*columns: str) -> PrimaryKeyConstraint:
    return PrimaryKeyConstraint(tuple(columns))


def foreign_key(*columns: str) -> ForeignKeyConstraint:
    """Start a foreign key; finish it with :meth:`ForeignKeyConstraint.references`."""
    return ForeignKeyConstraint(tuple(columns))


def unique_key(*columns: str) -> UniqueKeyConstraint:
    return UniqueKeyConstraint(tuple(columns))


def index(*columns: str) -> IndexElem:
    return IndexElem(tuple(columns))
