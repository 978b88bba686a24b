"""User model — staff accounts of the sales system (consultants, finance, management)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from uptown_docs.models.base import Base, CreatedAtMixin, IntegerIdMixin


class User(IntegerIdMixin, CreatedAtMixin, Base):
    """A staff member. Display name is `trim(name)` if non-empty, else `email`."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(Text)
    role: Mapped[str] = mapped_column(String(50), nullable=False)
    meta: Mapped[dict[str, Any] | None] = mapped_column(JSONB)

    def __repr__(self) -> str:
        return f"<User id={self.id} role={self.role}>"
