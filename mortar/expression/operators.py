"""Constructors for conditions, combiners and aggregates.

Right-hand operands are bound as parameters unless they already are a
clause (for example another column)::

    eq(users.c("id"), 5)                          # id = ?
    eq(users.c("id"), sessions.c("user_id"))      # users.id = sessions.user_id
    and_(gt(users.c("age"), 18), like(users.c("email"), "%@example.com"))
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from mortar.expression.elements import (
    AggregateClause,
    BinaryExpressionClause,
    BindClause,
    Clause,
    CombinerClause,
    ExistsClause,
    InClause,
    ListClause,
    TextClause,
    as_clause,
)

if TYPE_CHECKING:
    from mortar.statement.select import SelectStmt


def sql_text(raw: str) -> TextClause:
    """Return raw SQL text, emitted without escaping or binding."""
    return TextClause(raw)


def bind(value: Any) -> BindClause:
    return BindClause(value)


def condition(left: Clause, op: str, right: Any) -> BinaryExpressionClause:
    """Return ``left op right`` for an arbitrary operator."""
    return BinaryExpressionClause(left, op, as_clause(right))


def eq(left: Clause, right: Any) -> BinaryExpressionClause:
    return condition(left, "=", right)


def not_eq(left: Clause, right: Any) -> BinaryExpressionClause:
    return condition(left, "!=", right)


def gt(left: Clause, right: Any) -> BinaryExpressionClause:
    return condition(left, ">", right)


def gte(left: Clause, right: Any) -> BinaryExpressionClause:
    return condition(left, ">=", right)


def lt(left: Clause, right: Any) -> BinaryExpressionClause:
    return condition(left, "<", right)


def lte(left: Clause, right: Any) -> BinaryExpressionClause:
    return condition(left, "<=", right)


def like(left: Clause, pattern: str) -> BinaryExpressionClause:
    """Return ``left LIKE 'pattern'``.

    The pattern is inlined verbatim between single quotes, not bound or
    escaped.  Never pass untrusted patterns.
    """
    return BinaryExpressionClause(left, "LIKE", TextClause(f"'{pattern}'"))


def in_(left: Clause, *values: Any) -> InClause:
    return InClause(left, "IN", ListClause(tuple(BindClause(v) for v in values)))


def not_in(left: Clause, *values: Any) -> InClause:
    return InClause(left, "NOT IN", ListClause(tuple(BindClause(v) for v in values)))


def and_(*clauses: Clause) -> CombinerClause:
    return CombinerClause("AND", tuple(clauses))


def or_(*clauses: Clause) -> CombinerClause:
    return CombinerClause("OR", tuple(clauses))


# ---------------------------------------------------------------------------
# Aggregates
# ---------------------------------------------------------------------------


def aggregate(fn: str, clause: Clause) -> AggregateClause:
    return AggregateClause(fn.upper(), clause)


def count(clause: Clause) -> AggregateClause:
    return aggregate("COUNT", clause)


def sum_(clause: Clause) -> AggregateClause:
    return aggregate("SUM", clause)


def avg(clause: Clause) -> AggregateClause:
    return aggregate("AVG", clause)


def min_(clause: Clause) -> AggregateClause:
    return aggregate("MIN", clause)


def max_(clause: Clause) -> AggregateClause:
    return aggregate("MAX", clause)


# ---------------------------------------------------------------------------
# Subqueries
# ---------------------------------------------------------------------------


def exists(select: SelectStmt) -> ExistsClause:
    return ExistsClause(select)


def not_exists(select: SelectStmt) -> ExistsClause:
    return ExistsClause(select, negated=True)
