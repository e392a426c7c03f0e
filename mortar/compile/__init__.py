"""mortar compilation layer: clause trees → SQL text and bindings."""
from mortar.compile.base import SQLCompiler, Statement
from mortar.compile.context import CompilerContext
from mortar.compile.dialect import DefaultDialect, Dialect
from mortar.compile.mysql import MySQLCompiler, MySQLDialect
from mortar.compile.postgres import PostgresCompiler, PostgresDialect
from mortar.compile.registry import DialectRegistry, new_dialect, register_dialect
from mortar.compile.sqlite import SQLiteCompiler, SQLiteDialect

__all__ = [
    "SQLCompiler",
    "Statement",
    "CompilerContext",
    "Dialect",
    "DefaultDialect",
    "MySQLCompiler",
    "MySQLDialect",
    "PostgresCompiler",
    "PostgresDialect",
    "SQLiteCompiler",
    "SQLiteDialect",
    "DialectRegistry",
    "new_dialect",
    "register_dialect",
]
