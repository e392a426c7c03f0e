"""Dialect configuration.

:class:`MortarConfig` is the declarative way to pick and set up a dialect,
for example from an application settings file::

    config = MortarConfig.model_validate({"driver": "postgres", "escaping": True})
    dialect = config.new_dialect()
    statement = select(users.c("id")).from_(users).build(dialect)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from mortar.compile.dialect import Dialect
from mortar.compile.registry import new_dialect


class MortarConfig(BaseModel):
    """Settings used to create a dialect.

    Attributes:
        driver: Registered driver name (``"postgres"``, ``"mysql"``,
            ``"sqlite3"``, ...).  Unknown names produce the default dialect.
        escaping: Whether identifiers are quoted.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    driver: str = "default"
    escaping: bool = False

    @field_validator("driver")
    @classmethod
    def _normalize_driver(cls, value: str) -> str:
        return value.strip().lower()

    def new_dialect(self) -> Dialect:
        """Return a fresh dialect configured from these settings."""
        dialect = new_dialect(self.driver)
        dialect.set_escaping(self.escaping)
        return dialect
