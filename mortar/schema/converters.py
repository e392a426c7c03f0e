"""Utilities for building mortar tables from SQLAlchemy schema objects.

SQLAlchemy converter
--------------------
:func:`table_from_sqlalchemy` and :func:`metadata_from_sqlalchemy` translate
declared SQLAlchemy tables; :func:`schema_from_sqlalchemy` reflects a live
database engine first.

Install the optional dependency before using this module::

    pip install "mortar[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from mortar.schema.converters import schema_from_sqlalchemy

    engine = create_engine("sqlite:///mydb.db")
    metadata = schema_from_sqlalchemy(engine)
    users = metadata.table("users")
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from mortar.schema.constraints import foreign_key, index, primary_key, unique_key
from mortar.schema.metadata import MetaData
from mortar.schema.table import ColumnElem, TableElem, column, table
from mortar.schema.types import TypeElem

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy import MetaData as SAMetaData
    from sqlalchemy import Table as SATable

# "VARCHAR(40)", "NUMERIC(10, 2)", "DOUBLE PRECISION"
_TYPE_PATTERN = re.compile(r"^(?P<name>[^(]+)(?:\(\s*(?P<a>\d+)\s*(?:,\s*(?P<b>\d+)\s*)?\))?")


def schema_from_sqlalchemy(
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> MetaData:
    """Build a :class:`MetaData` by reflecting a SQLAlchemy engine.

    Args:
        engine: A connected :class:`sqlalchemy.engine.Engine` instance.
        include_tables: Optional allowlist of table names to reflect.
            When ``None`` all tables in the schema are reflected.
        schema: Optional database schema name (e.g. ``"public"`` for
            PostgreSQL).  Passed directly to
            :meth:`sqlalchemy.schema.MetaData.reflect`.

    Returns:
        A :class:`MetaData` holding every reflected table.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for schema_from_sqlalchemy(). "
            'Install it with: pip install "mortar[sqlalchemy]"'
        ) from exc

    sa_metadata = _MetaData()
    with engine.connect() as conn:
        sa_metadata.reflect(bind=conn, only=include_tables, schema=schema)
    return metadata_from_sqlalchemy(sa_metadata)


def metadata_from_sqlalchemy(sa_metadata: SAMetaData) -> MetaData:
    """Convert every table of a SQLAlchemy ``MetaData``, parents first."""
    return MetaData(*(table_from_sqlalchemy(t) for t in sa_metadata.sorted_tables))


def table_from_sqlalchemy(sa_table: SATable) -> TableElem:
    """Convert a single SQLAlchemy ``Table``.

    Columns keep their declaration order.  Single-column unique constraints
    become column-level ``UNIQUE``; multi-column ones become unique keys.
    Server defaults are not carried over.
    """
    from sqlalchemy import UniqueConstraint

    unique_sets = sorted(
        tuple(c.name for c in constraint.columns)
        for constraint in sa_table.constraints
        if isinstance(constraint, UniqueConstraint)
    )
    unique_sets.extend(
        tuple(c.name for c in idx.columns) for idx in sa_table.indexes if idx.unique
    )
    single_unique = {cols[0] for cols in unique_sets if len(cols) == 1}

    pk_names = [c.name for c in sa_table.primary_key.columns]
    elements: list[Any] = [
        _column_from_sqlalchemy(c, unique=c.name in single_unique) for c in sa_table.columns
    ]
    if pk_names:
        elements.append(primary_key(*pk_names))

    for fkc in sorted(sa_table.foreign_key_constraints, key=lambda f: f.column_keys):
        fk = foreign_key(*(e.parent.name for e in fkc.elements)).references(
            fkc.referred_table.name, *(e.column.name for e in fkc.elements)
        )
        if fkc.onupdate:
            fk = fk.on_update(fkc.onupdate)
        if fkc.ondelete:
            fk = fk.on_delete(fkc.ondelete)
        elements.append(fk)

    seen_unique: set[tuple[str, ...]] = set()
    for cols in unique_sets:
        if len(cols) > 1 and cols not in seen_unique:
            seen_unique.add(cols)
            elements.append(unique_key(*cols))

    for idx in sorted(sa_table.indexes, key=lambda i: i.name or ""):
        if not idx.unique:
            elements.append(index(*(c.name for c in idx.columns)))

    return table(sa_table.name, *elements)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _column_from_sqlalchemy(sa_column: Any, *, unique: bool) -> ColumnElem:
    type_ = _type_from_sqlalchemy(sa_column.type)
    if unique or sa_column.unique:
        type_ = type_.unique()
    if not sa_column.nullable and not sa_column.primary_key:
        type_ = type_.not_null()

    col = column(sa_column.name, type_)
    if sa_column.autoincrement is True:
        col = col.auto_increment()
    return col


def _type_from_sqlalchemy(sa_type: Any) -> TypeElem:
    from sqlalchemy.exc import CompileError

    try:
        rendered = str(sa_type)
    except CompileError:
        rendered = type(sa_type).__name__

    rendered = rendered.strip().upper()
    unsigned = rendered.endswith(" UNSIGNED") or bool(getattr(sa_type, "unsigned", False))
    rendered = rendered.removesuffix(" UNSIGNED")

    match = _TYPE_PATTERN.match(rendered)
    if match is None:
        return TypeElem(rendered)

    type_ = TypeElem(match.group("name").strip().upper())
    a, b = match.group("a"), match.group("b")
    if a is not None and b is not None:
        type_ = type_.precision(int(a), int(b))
    elif a is not None:
        type_ = type_.size(int(a))
    if unsigned:
        type_ = type_.unsigned()
    return type_
