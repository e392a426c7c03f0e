"""Test fixtures: sample table definitions shared across the suite."""

from __future__ import annotations

from mortar.schema.constraints import foreign_key, index
from mortar.schema.metadata import MetaData
from mortar.schema.table import TableElem, column, table
from mortar.schema.types import int_, text, timestamp, varchar


def users_table() -> TableElem:
    """``users``: auto-increment key, unique email, indexed name."""
    return table(
        "users",
        column("id", int_()).primary_key().auto_increment(),
        column("email", varchar().unique().not_null()),
        column("full_name", varchar().not_null()),
        index("full_name"),
    )


def sessions_table() -> TableElem:
    """``sessions``: belongs to ``users`` through ``user_id``."""
    return table(
        "sessions",
        column("id", int_()).primary_key().auto_increment(),
        column("user_id", int_().not_null()),
        column("auth_token", varchar(36).unique().not_null()),
        column("created_at", timestamp().not_null()),
        foreign_key("user_id").references("users", "id").on_delete("CASCADE"),
    )


def profiles_table() -> TableElem:
    """``profiles``: string primary key, no auto-increment."""
    return table(
        "profiles",
        column("id", varchar(36)).primary_key(),
        column("email", varchar()),
        column("bio", text()),
    )


def load_metadata() -> MetaData:
    """Return a registry holding ``users`` and ``sessions``."""
    return MetaData(users_table(), sessions_table())
