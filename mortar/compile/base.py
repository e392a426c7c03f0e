"""Compiler abstractions: the Statement result and the SQLCompiler visitor.

The Template Method pattern (GoF) is used:
- ``SQLCompiler`` renders every clause kind the ANSI way.
- ``PostgresCompiler``, ``MySQLCompiler`` and ``SQLiteCompiler`` override
  the dialect-specific steps (placeholder style, UPSERT syntax).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mortar.errors import BuildError, UnsupportedOperationError
from mortar.expression.elements import (
    AggregateClause,
    BinaryExpressionClause,
    BindClause,
    CombinerClause,
    ExistsClause,
    ForUpdateClause,
    HavingClause,
    InClause,
    LabelClause,
    ListClause,
    OrderByClause,
    TextClause,
    WhereClause,
    as_clause,
)

if TYPE_CHECKING:
    from mortar.compile.context import CompilerContext
    from mortar.compile.dialect import Dialect
    from mortar.schema.joins import AliasClause, JoinClause
    from mortar.schema.table import ColumnElem, TableElem
    from mortar.statement.delete import DeleteStmt
    from mortar.statement.insert import InsertStmt
    from mortar.statement.select import SelectStmt
    from mortar.statement.update import UpdateStmt
    from mortar.statement.upsert import UpsertStmt


@dataclass
class Statement:
    """The output of a successful build.

    Attributes:
        clauses: Rendered SQL fragments, in order.
        bindings: Values for the placeholders, in placeholder order.
        driver: Driver name of the dialect used (``""`` for the default).
        delimiter: Separator placed between clauses.
    """

    clauses: list[str] = field(default_factory=list)
    bindings: list[Any] = field(default_factory=list)
    driver: str = ""
    delimiter: str = "\n"

    def add_clause(self, clause: str) -> None:
        self.clauses.append(clause)

    def add_binding(self, *values: Any) -> None:
        self.bindings.extend(values)

    @property
    def sql(self) -> str:
        """The full statement text, terminated by a semicolon."""
        return f"{self.delimiter.join(self.clauses)};"

    def __str__(self) -> str:
        return self.sql


class SQLCompiler:
    """Renders clause trees to ANSI-flavoured SQL.

    One ``visit_*`` method exists per clause kind.  Sub-clauses are rendered
    in the order their text is concatenated, so bound values reach the
    context in placeholder order.

    Args:
        dialect: The dialect supplying escaping rules.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect

    def placeholder(self, context: CompilerContext) -> str:
        """Return the placeholder for the bind most recently added to ``context``."""
        return "?"

    # ------------------------------------------------------------------
    # Leaves
    # ------------------------------------------------------------------

    def visit_text(self, context: CompilerContext, text: TextClause) -> str:
        return text.text

    def visit_bind(self, context: CompilerContext, bind: BindClause) -> str:
        context.add_binds(bind.value)
        return self.placeholder(context)

    def visit_label(self, context: CompilerContext, label: LabelClause) -> str:
        return self.dialect.escape(label.name)

    def visit_column(self, context: CompilerContext, column: ColumnElem) -> str:
        if column.table and (
            context.in_sub_query or column.table != context.default_table_name
        ):
            return f"{self.dialect.escape(column.table)}.{self.dialect.escape(column.name)}"
        return self.dialect.escape(column.name)

    def visit_table(self, context: CompilerContext, table: TableElem) -> str:
        return self.dialect.escape(table.name)

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def visit_list(self, context: CompilerContext, list_: ListClause) -> str:
        return ", ".join(c.accept(context) for c in list_.clauses)

    def visit_alias(self, context: CompilerContext, alias: AliasClause) -> str:
        return f"{alias.selectable.accept(context)} AS {self.dialect.escape(alias.name)}"

    def visit_binary(self, context: CompilerContext, binary: BinaryExpressionClause) -> str:
        left = binary.left.accept(context)
        right = binary.right.accept(context)
        return f"{left} {binary.op} {right}"

    def visit_in(self, context: CompilerContext, in_: InClause) -> str:
        left = in_.left.accept(context)
        return f"{left} {in_.op} ({in_.values.accept(context)})"

    def visit_combiner(self, context: CompilerContext, combiner: CombinerClause) -> str:
        parts = [c.accept(context) for c in combiner.clauses]
        return f"({f' {combiner.operator} '.join(parts)})"

    def visit_aggregate(self, context: CompilerContext, aggregate: AggregateClause) -> str:
        return f"{aggregate.fn}({aggregate.clause.accept(context)})"

    def visit_exists(self, context: CompilerContext, exists: ExistsClause) -> str:
        problems = exists.select.problems()
        if problems:
            raise BuildError(problems)
        with context.scope(in_sub_query=True):
            sql = exists.select.accept(context)
        keyword = "NOT EXISTS" if exists.negated else "EXISTS"
        return f"{keyword}({sql})"

    def visit_join(self, context: CompilerContext, join: JoinClause) -> str:
        sql = f"{join.left.accept(context)}\n{join.join_type.value} {join.right.accept(context)}"
        if join.on is not None:
            sql += f" ON {join.on.accept(context)}"
        return sql

    # ------------------------------------------------------------------
    # Statement sections
    # ------------------------------------------------------------------

    def visit_where(self, context: CompilerContext, where: WhereClause) -> str:
        return f"WHERE {where.clause.accept(context)}"

    def visit_having(self, context: CompilerContext, having: HavingClause) -> str:
        aggregate = having.aggregate.accept(context)
        return f"HAVING {aggregate} {having.op} {having.value.accept(context)}"

    def visit_order_by(self, context: CompilerContext, order_by: OrderByClause) -> str:
        columns = ", ".join(c.accept(context) for c in order_by.clauses)
        return f"ORDER BY {columns} {order_by.direction}"

    def visit_for_update(self, context: CompilerContext, for_update: ForUpdateClause) -> str:
        if not for_update.tables:
            return "FOR UPDATE"
        return f"FOR UPDATE OF {', '.join(self.dialect.escape_all(for_update.tables))}"

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def visit_select(self, context: CompilerContext, select: SelectStmt) -> str:
        default_table = None
        if select.from_clause is not None and not context.in_sub_query:
            default_table = select.from_clause.default_name()

        with context.scope(default_table_name=default_table):
            if select.columns:
                lines = [f"SELECT {ListClause(select.columns).accept(context)}"]
            else:
                lines = ["SELECT *"]
            if select.from_clause is not None:
                lines.append(f"FROM {select.from_clause.accept(context)}")
            if select.where_clause is not None:
                lines.append(select.where_clause.accept(context))
            if select.group_by_columns:
                names = self.dialect.escape_all(c.name for c in select.group_by_columns)
                lines.append(f"GROUP BY {', '.join(names)}")
            lines.extend(h.accept(context) for h in select.having_clauses)
            if select.order_by_clause is not None:
                lines.append(select.order_by_clause.accept(context))
            if select.limit_count is not None:
                limit = f"LIMIT {select.limit_count}"
                if select.offset_count is not None:
                    limit += f" OFFSET {select.offset_count}"
                lines.append(limit)
            elif select.offset_count is not None:
                lines.append(f"OFFSET {select.offset_count}")
            if select.for_update_clause is not None:
                lines.append(select.for_update_clause.accept(context))
        return "\n".join(lines)

    def visit_insert(self, context: CompilerContext, insert: InsertStmt) -> str:
        with context.scope(default_table_name=insert.table.name):
            table, columns, values = self.insert_parts(context, insert.table, insert.assignments)
            sql = f"INSERT INTO {table}({columns})\nVALUES({values})"
            sql += self.returning(insert.returning_columns)
        return sql

    def visit_update(self, context: CompilerContext, update: UpdateStmt) -> str:
        with context.scope(default_table_name=update.table.name):
            sql = f"UPDATE {update.table.accept(context)}\nSET {self.assignments(context, update.assignments)}"
            if update.where_clause is not None:
                sql += f"\n{update.where_clause.accept(context)}"
            sql += self.returning(update.returning_columns)
        return sql

    def visit_delete(self, context: CompilerContext, delete: DeleteStmt) -> str:
        sql = f"DELETE FROM {delete.table.accept(context)}"
        if delete.where_clause is not None:
            sql += f"\n{delete.where_clause.accept(context)}"
        sql += self.returning(delete.returning_columns)
        return sql

    def visit_upsert(self, context: CompilerContext, upsert: UpsertStmt) -> str:
        driver = self.dialect.driver or "default"
        raise UnsupportedOperationError(
            f"UPSERT is not supported by the {driver} dialect's base compiler.",
            clause="UPSERT",
        )

    # ------------------------------------------------------------------
    # Helpers shared with dialect compilers
    # ------------------------------------------------------------------

    def insert_parts(
        self,
        context: CompilerContext,
        table: TableElem,
        assignments: tuple[tuple[str, Any], ...],
    ) -> tuple[str, str, str]:
        """Render ``(table, column list, value list)`` for INSERT-like statements."""
        columns = ListClause(tuple(LabelClause(name) for name, _ in assignments))
        values = ListClause(tuple(as_clause(value) for _, value in assignments))
        return table.accept(context), columns.accept(context), values.accept(context)

    def assignments(
        self,
        context: CompilerContext,
        assignments: tuple[tuple[str, Any], ...],
    ) -> str:
        """Render ``a = ?, b = ?`` for SET / UPDATE lists."""
        return ", ".join(
            f"{self.dialect.escape(name)} = {as_clause(value).accept(context)}"
            for name, value in assignments
        )

    def returning(self, columns: tuple[ColumnElem, ...]) -> str:
        if not columns:
            return ""
        return f"\nRETURNING {', '.join(self.dialect.escape_all(c.name for c in columns))}"
