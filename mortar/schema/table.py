"""Tables and columns.

Tables own their columns; a column refers back to its table by name only.
Both are usable directly inside clause trees::

    users = table(
        "users",
        column("id", int_()).primary_key().auto_increment(),
        column("email", varchar().unique().not_null()),
        index("email"),
    )
    select(users.c("id")).from_(users).where(users.c("email").eq("a@b.c"))
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Union

from mortar.errors import SchemaError
from mortar.expression import operators
from mortar.expression.elements import (
    BinaryExpressionClause,
    Clause,
    InClause,
    Selectable,
)
from mortar.schema.constraints import (
    ConstraintElem,
    ForeignKeyConstraint,
    IndexElem,
    PrimaryKeyConstraint,
    UniqueKeyConstraint,
)
from mortar.schema.types import TypeElem

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.compile.dialect import Dialect


@dataclass(frozen=True)
class ColumnOptions:
    primary_key: bool = False
    auto_increment: bool = False
    inline_primary_key: bool = False


@dataclass(frozen=True)
class ColumnElem(Clause):
    """A column; renders as ``name`` or ``table.name`` inside queries.

    Attributes:
        name: Column name.
        type: Column type, including its column-level constraints.
        table: Name of the owning table (or alias); empty until attached.
        options: Primary key / auto-increment flags.
    """

    name: str
    type: TypeElem
    table: str = ""
    options: ColumnOptions = ColumnOptions()

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_column(context, self)

    # -- definition -------------------------------------------------------

    def primary_key(self) -> ColumnElem:
        return replace(self, options=replace(self.options, primary_key=True))

    def auto_increment(self) -> ColumnElem:
        return replace(self, options=replace(self.options, auto_increment=True))

    def inline_primary_key(self) -> ColumnElem:
        """Declare the primary key inside the column definition."""
        return replace(
            self,
            options=replace(self.options, primary_key=True, inline_primary_key=True),
        )

    def null(self) -> ColumnElem:
        return replace(self, type=self.type.null())

    def not_null(self) -> ColumnElem:
        return replace(self, type=self.type.not_null())

    def unique(self) -> ColumnElem:
        return replace(self, type=self.type.unique())

    def default(self, value: Any) -> ColumnElem:
        return replace(self, type=self.type.default(value))

    def constraint(self, constraint: ConstraintElem | str) -> ColumnElem:
        return replace(self, type=self.type.constraint(constraint))

    def ddl(self, dialect: Dialect) -> str:
        """Render the column definition used inside ``CREATE TABLE``."""
        if self.options.auto_increment:
            spec = dialect.auto_increment(self)
        else:
            spec = dialect.compile_type(self.type)
        parts = [dialect.escape(self.name), spec]
        parts.extend(str(c) for c in self.type.constraints)
        return " ".join(parts)

    # -- conditions -------------------------------------------------------

    def eq(self, value: Any) -> BinaryExpressionClause:
        return operators.eq(self, value)

    def not_eq(self, value: Any) -> BinaryExpressionClause:
        return operators.not_eq(self, value)

    def gt(self, value: Any) -> BinaryExpressionClause:
        return operators.gt(self, value)

    def gte(self, value: Any) -> BinaryExpressionClause:
        return operators.gte(self, value)

    def lt(self, value: Any) -> BinaryExpressionClause:
        return operators.lt(self, value)

    def lte(self, value: Any) -> BinaryExpressionClause:
        return operators.lte(self, value)

    def like(self, pattern: str) -> BinaryExpressionClause:
        return operators.like(self, pattern)

    def in_(self, *values: Any) -> InClause:
        return operators.in_(self, *values)

    def not_in(self, *values: Any) -> InClause:
        return operators.not_in(self, *values)


TableElement = Union[
    ColumnElem,
    PrimaryKeyConstraint,
    ForeignKeyConstraint,
    UniqueKeyConstraint,
    IndexElem,
]


@dataclass(frozen=True)
class TableElem(Selectable):
    """A table definition.

    Build instances with :func:`table`, which attaches columns and
    constraints and validates their column references.
    """

    name: str
    columns: tuple[ColumnElem, ...] = ()
    primary_key: PrimaryKeyConstraint | None = None
    foreign_keys: tuple[ForeignKeyConstraint, ...] = ()
    unique_keys: tuple[UniqueKeyConstraint, ...] = ()
    indices: tuple[IndexElem, ...] = ()
    _columns_by_name: dict[str, ColumnElem] = field(
        init=False, repr=False, compare=False
    )
    _fk_index: dict[str, tuple[ForeignKeyConstraint, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_columns_by_name", {c.name: c for c in self.columns})
        fk_index: dict[str, list[ForeignKeyConstraint]] = {}
        for fk in self.foreign_keys:
            fk_index.setdefault(fk.ref_table, []).append(fk)
        object.__setattr__(
            self, "_fk_index", {k: tuple(v) for k, v in fk_index.items()}
        )

    def accept(self, context: CompilerContext) -> str:
        return context.compiler.visit_table(context, self)

    def c(self, name: str) -> ColumnElem:
        try:
            return self._columns_by_name[name]
        except KeyError:
            raise SchemaError(
                f"Table '{self.name}' has no column '{name}'.",
                details={"table": self.name, "column": name},
            ) from None

    def has_column(self, name: str) -> bool:
        return name in self._columns_by_name

    def all(self) -> list[ColumnElem]:
        return list(self.columns)

    def default_name(self) -> str:
        return self.name

    def primary_cols(self) -> list[ColumnElem]:
        if self.primary_key is None:
            return []
        return [self.c(name) for name in self.primary_key.columns]

    def foreign_keys_to(self, table_name: str) -> tuple[ForeignKeyConstraint, ...]:
        """Return this table's foreign keys referencing ``table_name``."""
        return self._fk_index.get(table_name, ())

    def index(self, *columns: str) -> TableElem:
        """Return a copy of this table with an extra index on ``columns``."""
        idx = IndexElem(tuple(columns), table=self.name)
        _check_columns(self, idx.columns, "index")
        return replace(self, indices=(*self.indices, idx))

    # -- DDL --------------------------------------------------------------

    def create(self, dialect: Dialect) -> str:
        """Render ``CREATE TABLE`` followed by one ``CREATE INDEX`` per index."""
        inline = self._inline_primary_key(dialect)
        lines: list[str] = []
        for col in self.columns:
            if col.name == inline:
                col = col.inline_primary_key()
            lines.append(col.ddl(dialect))
        if self.primary_key is not None and inline is None:
            lines.append(self.primary_key.ddl(dialect))
        lines.extend(fk.ddl(dialect) for fk in self.foreign_keys)
        lines.extend(uk.ddl(dialect) for uk in self.unique_keys)

        body = ",\n\t".join(lines)
        statements = [f"CREATE TABLE {dialect.escape(self.name)} (\n\t{body}\n);"]
        statements.extend(idx.ddl(dialect) for idx in self.indices)
        return "\n".join(statements)

    def drop(self, dialect: Dialect) -> str:
        return f"DROP TABLE {dialect.escape(self.name)};"

    def _inline_primary_key(self, dialect: Dialect) -> str | None:
        if self.primary_key is None or len(self.primary_key.columns) != 1:
            return None
        col = self.c(self.primary_key.columns[0])
        if col.options.inline_primary_key:
            return col.name
        if col.options.auto_increment and dialect.supports_inline_primary_key():
            return col.name
        return None


def column(name: str, type_: TypeElem) -> ColumnElem:
    return ColumnElem(name, type_)


def table(name: str, *elements: TableElement) -> TableElem:
    """Define a table from columns, constraints and indices.

    Columns flagged with :meth:`ColumnElem.primary_key` form the primary key
    unless an explicit :func:`~mortar.schema.constraints.primary_key` is
    given.

    Args:
        name: Table name.
        *elements: Columns and table-level constraints, in declaration order.

    Returns:
        The table definition.

    Raises:
        SchemaError: On duplicate columns, constraints naming unknown columns,
            or unsupported elements.
    """
    columns: list[ColumnElem] = []
    pk: PrimaryKeyConstraint | None = None
    pk_columns: list[str] = []
    foreign_keys: list[ForeignKeyConstraint] = []
    unique_keys: list[UniqueKeyConstraint] = []
    indices: list[IndexElem] = []

    for element in elements:
        if isinstance(element, ColumnElem):
            if any(c.name == element.name for c in columns):
                raise SchemaError(
                    f"Duplicate column '{element.name}' in table '{name}'.",
                    details={"table": name, "column": element.name},
                )
            columns.append(replace(element, table=name))
            if element.options.primary_key:
                pk_columns.append(element.name)
        elif isinstance(element, PrimaryKeyConstraint):
            pk = element
        elif isinstance(element, ForeignKeyConstraint):
            foreign_keys.append(element)
        elif isinstance(element, UniqueKeyConstraint):
            unique_keys.append(replace(element, table=name))
        elif isinstance(element, IndexElem):
            indices.append(replace(element, table=name))
        else:
            raise SchemaError(
                f"Unsupported table element {element!r} in table '{name}'."
            )

    if pk is None and pk_columns:
        pk = PrimaryKeyConstraint(tuple(pk_columns))
    if pk is not None:
        columns = [
            c.primary_key() if c.name in pk.columns else c for c in columns
        ]

    result = TableElem(
        name,
        columns=tuple(columns),
        primary_key=pk,
        foreign_keys=tuple(foreign_keys),
        unique_keys=tuple(unique_keys),
        indices=tuple(indices),
    )
    if pk is not None:
        _check_columns(result, pk.columns, "primary key")
    for fk in foreign_keys:
        _check_columns(result, fk.columns, "foreign key")
    for uk in unique_keys:
        _check_columns(result, uk.columns, "unique key")
    for idx in indices:
        _check_columns(result, idx.columns, "index")
    return result


def _check_columns(tbl: TableElem, names: tuple[str, ...], what: str) -> None:
    missing = [n for n in names if not tbl.has_column(n)]
    if missing:
        raise SchemaError(
            f"{what.capitalize()} on table '{tbl.name}' names unknown "
            f"column(s): {', '.join(missing)}.",
            details={"table": tbl.name, "columns": missing},
        )
