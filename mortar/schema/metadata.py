"""Table registry.

:class:`MetaData` collects table definitions by name and keeps an index of
incoming foreign keys, so "which tables reference ``users``?" is a dict
lookup rather than a scan over every table.
"""
from __future__ import annotations

from mortar.errors import SchemaError
from mortar.schema.constraints import ForeignKeyConstraint
from mortar.schema.table import TableElem


class MetaData:
    """A set of named tables.

    Args:
        *tables: Tables to register immediately.
    """

    def __init__(self, *tables: TableElem) -> None:
        self._tables: dict[str, TableElem] = {}
        self._referencing: dict[str, list[tuple[TableElem, ForeignKeyConstraint]]] = {}
        for tbl in tables:
            self.add_table(tbl)

    def __contains__(self, name: object) -> bool:
        return name in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    @property
    def tables(self) -> list[TableElem]:
        """Registered tables in registration order."""
        return list(self._tables.values())

    def add_table(self, table: TableElem) -> TableElem:
        """Register ``table``.

        Raises:
            SchemaError: If a table with the same name is already registered.
        """
        if table.name in self._tables:
            raise SchemaError(
                f"Table '{table.name}' is already registered.",
                details={"table": table.name},
            )
        self._tables[table.name] = table
        for fk in table.foreign_keys:
            self._referencing.setdefault(fk.ref_table, []).append((table, fk))
        return table

    def table(self, name: str) -> TableElem:
        """Return the table called ``name``.

        Raises:
            SchemaError: If no such table is registered.
        """
        try:
            return self._tables[name]
        except KeyError:
            raise SchemaError(
                f"Unknown table '{name}'.",
                details={"table": name, "known_tables": sorted(self._tables)},
            ) from None

    def get(self, name: str) -> TableElem | None:
        return self._tables.get(name)

    def referencing(self, name: str) -> list[tuple[TableElem, ForeignKeyConstraint]]:
        """Return ``(table, foreign key)`` pairs whose key references ``name``."""
        return list(self._referencing.get(name, ()))

    def foreign_keys_between(
        self, a: str, b: str
    ) -> list[tuple[TableElem, ForeignKeyConstraint]]:
        """Return foreign keys linking tables ``a`` and ``b`` in either direction."""
        links = [(t, fk) for t, fk in self._referencing.get(b, ()) if t.name == a]
        if a != b:
            links.extend((t, fk) for t, fk in self._referencing.get(a, ()) if t.name == b)
        return links
