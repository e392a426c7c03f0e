"""mortar clause model: the nodes of a SQL fragment tree and their constructors."""
from mortar.expression.elements import (
    AggregateClause,
    BinaryExpressionClause,
    BindClause,
    Clause,
    CombinerClause,
    ExistsClause,
    ForUpdateClause,
    HavingClause,
    InClause,
    LabelClause,
    ListClause,
    OrderByClause,
    Selectable,
    TextClause,
    WhereClause,
)
from mortar.expression.operators import (
    aggregate,
    and_,
    avg,
    bind,
    condition,
    count,
    eq,
    exists,
    gt,
    gte,
    in_,
    like,
    lt,
    lte,
    max_,
    min_,
    not_eq,
    not_exists,
    not_in,
    or_,
    sql_text,
    sum_,
)

__all__ = [
    "AggregateClause",
    "BinaryExpressionClause",
    "BindClause",
    "Clause",
    "CombinerClause",
    "ExistsClause",
    "ForUpdateClause",
    "HavingClause",
    "InClause",
    "LabelClause",
    "ListClause",
    "OrderByClause",
    "Selectable",
    "TextClause",
    "WhereClause",
    "aggregate",
    "and_",
    "avg",
    "bind",
    "condition",
    "count",
    "eq",
    "exists",
    "gt",
    "gte",
    "in_",
    "like",
    "lt",
    "lte",
    "max_",
    "min_",
    "not_eq",
    "not_exists",
    "not_in",
    "or_",
    "sql_text",
    "sum_",
]
