"""Portable column types."""

import uuid

from sqlalchemy import Numeric, String, TypeDecorator


class UUID(TypeDecorator):
    """UUID stored as CHAR(36).

    Works the same on MySQL and SQLite; values come back as ``uuid.UUID``.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, uuid.UUID):
            return str(value)
        return str(uuid.UUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


def Money() -> Numeric:
    """Numeric(15, 2) returning Decimal, used for every monetary column."""
    return Numeric(15, 2, asdecimal=True)


def Percentage() -> Numeric:
    """Numeric(7, 4) for shares such as 33.3333%."""
    return Numeric(7, 4, asdecimal=True)
