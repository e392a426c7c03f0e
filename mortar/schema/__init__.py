"""mortar schema elements: types, constraints, tables, joins and metadata."""
from mortar.schema.constraints import (
    ConstraintElem,
    ForeignKeyConstraint,
    IndexElem,
    PrimaryKeyConstraint,
    UniqueKeyConstraint,
    foreign_key,
    index,
    primary_key,
    unique_key,
)
from mortar.schema.joins import (
    AliasClause,
    JoinClause,
    JoinType,
    alias,
    guess_join_on_clause,
    make_join_on_clause,
)
from mortar.schema.metadata import MetaData
from mortar.schema.table import ColumnElem, ColumnOptions, TableElem, column, table
from mortar.schema.types import TypeElem, compile_type

__all__ = [
    "ConstraintElem",
    "ForeignKeyConstraint",
    "IndexElem",
    "PrimaryKeyConstraint",
    "UniqueKeyConstraint",
    "foreign_key",
    "index",
    "primary_key",
    "unique_key",
    "AliasClause",
    "JoinClause",
    "JoinType",
    "alias",
    "guess_join_on_clause",
    "make_join_on_clause",
    "MetaData",
    "ColumnElem",
    "ColumnOptions",
    "TableElem",
    "column",
    "table",
    "TypeElem",
    "compile_type",
]
