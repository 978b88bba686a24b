"""Deal model — the persisted commercial snapshot a consultant produced.

`details.calculator` holds the calculator snapshot (client info, unit info,
generated plan, pricing breakdown, inputs). It is parsed once at the edge
into `schemas.snapshot.CalculatorSnapshot`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from uptown_docs.models.base import Base, CreatedAtMixin, IntegerIdMixin


class Deal(IntegerIdMixin, CreatedAtMixin, Base):
    """A sales deal."""

    __tablename__ = "deals"

    title: Mapped[str | None] = mapped_column(String(255))
    status: Mapped[str | None] = mapped_column(String(50))
    created_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"))
    fm_review_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), comment="Financial manager review instant"
    )
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONB)

    @property
    def calculator(self) -> dict[str, Any]:
        """Raw `details.calculator` blob (empty dict when absent)."""
        details = self.details if isinstance(self.details, dict) else {}
        calc = details.get("calculator")
        return calc if isinstance(calc, dict) else {}

    def __repr__(self) -> str:
        return f"<Deal id={self.id} fm_review_at={self.fm_review_at}>"
