"""Dialect registry.

``DialectRegistry`` maps driver names to dialect factories so callers can
obtain a dialect from a configuration string.  Every call to
:meth:`DialectRegistry.create` returns a fresh instance; unknown names fall
back to :class:`~mortar.compile.dialect.DefaultDialect`.

Usage::

    from mortar.compile.registry import DialectRegistry

    @DialectRegistry.register("oracle")
    class OracleDialect(Dialect):
        ...

    dialect = new_dialect("oracle")
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

import structlog

from mortar.compile.dialect import DefaultDialect, Dialect

logger = structlog.get_logger(__name__)

#: A zero-argument callable returning a new dialect (usually the class itself).
DialectFactory = Callable[[], Dialect]


class DialectRegistry:
    """Registry mapping driver names to dialect factories.

    Example::

        DialectRegistry.register_factory("postgresql", PostgresDialect)
        dialect = DialectRegistry.create("postgresql")
    """

    _factories: ClassVar[dict[str, DialectFactory]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[Dialect]], type[Dialect]]:
        """Decorator that registers a dialect class under ``name``.

        Args:
            name: The driver name (e.g. ``"postgres"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[Dialect]) -> type[Dialect]:
            cls.register_factory(name, dialect_cls)
            return dialect_cls

        return decorator

    @classmethod
    def register_factory(cls, name: str, factory: DialectFactory) -> None:
        """Register a factory without using the decorator form.

        Registering an existing name replaces the previous factory.
        """
        cls._factories[name] = factory
        logger.debug("dialect_registered", driver=name)

    @classmethod
    def create(cls, name: str) -> Dialect:
        """Return a new dialect for ``name``.

        Args:
            name: The driver name.

        Returns:
            A fresh dialect; the default dialect when ``name`` is unknown.
        """
        factory = cls._factories.get(name)
        if factory is None:
            logger.warning(
                "dialect_fallback",
                driver=name,
                registered=sorted(cls._factories),
            )
            return DefaultDialect()
        return factory()

    @classmethod
    def registered_drivers(cls) -> list[str]:
        """Return the sorted list of registered driver names."""
        return sorted(cls._factories)


def register_dialect(name: str, factory: DialectFactory) -> None:
    DialectRegistry.register_factory(name, factory)


def new_dialect(name: str) -> Dialect:
    return DialectRegistry.create(name)
