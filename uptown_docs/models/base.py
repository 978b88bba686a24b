"""SQLAlchemy declarative base and shared mixins.

Tables are owned by the main sales API; this service maps only the
columns the document pipeline reads. Every table has an integer `id`.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class IntegerIdMixin:
    """Mixin adding the serial primary key used by every sales table."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class CreatedAtMixin:
    """Mixin for tables that expose `created_at`."""

    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
