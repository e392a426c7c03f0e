"""Column data types.

A :class:`TypeElem` describes a column's SQL type and carries the
column-level constraints attached to it.  Every mutator returns a modified
copy so a type can be shared between columns safely::

    email = varchar().unique().not_null()
    amount = numeric().precision(10, 2)
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from mortar.schema.constraints import (
    ConstraintElem,
    default_constraint,
    not_null_constraint,
    null_constraint,
    unique_constraint,
)

# Widening applied to unsigned integers on engines without UNSIGNED.
_UNSIGNED_PROMOTION: dict[str, str] = {
    "TINYINT": "SMALLINT",
    "SMALLINT": "INT",
    "INT": "BIGINT",
    "BIGINT": "BIGINT",
}


@dataclass(frozen=True)
class TypeElem:
    """An SQL column type.

    Attributes:
        name: Upper-case type keyword (e.g. ``"VARCHAR"``).
        length: Size argument; rendered as ``NAME(length)``.
        digits: ``(precision, scale)`` pair; ignored when ``length`` is set.
        is_unsigned: Whether the type was declared unsigned.
        is_unique: Whether a UNIQUE constraint is attached.
        constraints: Column constraints in the order they were attached.
    """

    name: str
    length: int | None = None
    digits: tuple[int, int] | None = None
    is_unsigned: bool = False
    is_unique: bool = False
    constraints: tuple[ConstraintElem, ...] = ()

    def size(self, length: int) -> TypeElem:
        return replace(self, length=length)

    def precision(self, precision: int, scale: int) -> TypeElem:
        return replace(self, digits=(precision, scale))

    def unsigned(self) -> TypeElem:
        return replace(self, is_unsigned=True)

    def signed(self) -> TypeElem:
        return replace(self, is_unsigned=False)

    def null(self) -> TypeElem:
        return self.constraint(null_constraint())

    def not_null(self) -> TypeElem:
        return self.constraint(not_null_constraint())

    def unique(self) -> TypeElem:
        if self.is_unique:
            return self
        return replace(self.constraint(unique_constraint()), is_unique=True)

    def default(self, value: Any) -> TypeElem:
        return self.constraint(default_constraint(value))

    def constraint(self, constraint: ConstraintElem | str) -> TypeElem:
        """Attach a constraint; a plain string is used verbatim."""
        if isinstance(constraint, str):
            constraint = ConstraintElem(constraint)
        return replace(self, constraints=(*self.constraints, constraint))


def compile_type(type_: TypeElem, supports_unsigned: bool) -> str:
    """Render the type declaration, without constraints.

    Args:
        type_: The type to render.
        supports_unsigned: Whether the target dialect accepts ``UNSIGNED``.

    Returns:
        ``NAME``, ``NAME(size)`` or ``NAME(p, s)``, optionally followed by
        `` UNSIGNED``.
    """
    name = type_.name
    if type_.is_unsigned and not supports_unsigned:
        name = _UNSIGNED_PROMOTION.get(name, name)

    if type_.length is not None:
        sql = f"{name}({type_.length})"
    elif type_.digits is not None:
        sql = f"{name}({type_.digits[0]}, {type_.digits[1]})"
    else:
        sql = name

    if type_.is_unsigned and supports_unsigned:
        sql += " UNSIGNED"
    return sql


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def type_(name: str) -> TypeElem:
    """Return a type with an arbitrary keyword."""
    return TypeElem(name.upper())


def char() -> TypeElem:
    return TypeElem("CHAR")


def varchar(size: int = 255) -> TypeElem:
    return TypeElem("VARCHAR", length=size)


def text() -> TypeElem:
    return TypeElem("TEXT")


def int_() -> TypeElem:
    return TypeElem("INT")


def tiny_int() -> TypeElem:
    return TypeElem("TINYINT")


def small_int() -> TypeElem:
    return TypeElem("SMALLINT")


def big_int() -> TypeElem:
    return TypeElem("BIGINT")


def numeric() -> TypeElem:
    return TypeElem("NUMERIC")


def decimal() -> TypeElem:
    return TypeElem("DECIMAL")


def float_() -> TypeElem:
    return TypeElem("FLOAT")


def boolean() -> TypeElem:
    return TypeElem("BOOLEAN")


def timestamp() -> TypeElem:
    return TypeElem("TIMESTAMP")


def blob() -> TypeElem:
    return TypeElem("BLOB")


def uuid() -> TypeElem:
    return TypeElem("UUID")
