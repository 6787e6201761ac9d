"""Declarative base and shared column types."""

from datetime import datetime, timezone
from enum import IntEnum
from typing import Any

from sqlalchemy import DateTime, Integer, SmallInteger
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


def utc_now() -> datetime:
    """Current UTC timestamp."""
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class IdentityMixin:
    """Integer surrogate primary key, assigned by the database."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Created/updated timestamps set on the Python side."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now
    )


class IntEnumType(TypeDecorator):
    """Stores an ``IntEnum`` as a small integer and loads it back as the enum."""

    impl = SmallInteger
    cache_ok = True

    def __init__(self, enum_class: type[IntEnum], *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value: Any, dialect: Any) -> int | None:
        if value is None:
            return None
        return int(self.enum_class(value))

    def process_result_value(self, value: Any, dialect: Any) -> IntEnum | None:
        if value is None:
            return None
        return self.enum_class(value)
