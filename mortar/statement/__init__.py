"""mortar statement builders: SELECT, INSERT, UPDATE, DELETE, UPSERT."""
from mortar.statement.base import BuildableStatement
from mortar.statement.delete import DeleteStmt, delete
from mortar.statement.insert import InsertStmt, insert
from mortar.statement.select import SelectStmt, select
from mortar.statement.update import UpdateStmt, update
from mortar.statement.upsert import UpsertStmt, upsert

__all__ = [
    "BuildableStatement",
    "DeleteStmt",
    "InsertStmt",
    "SelectStmt",
    "UpdateStmt",
    "UpsertStmt",
    "delete",
    "insert",
    "select",
    "update",
    "upsert",
]
