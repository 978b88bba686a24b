"""Payment plans and reservation forms.

A reservation form is linked to a deal either through its payment plan
(`payment_plans.deal_id`) or, for legacy rows, through `details.deal_id`
stored as a digit string.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from uptown_docs.models.base import Base, CreatedAtMixin, IntegerIdMixin


class PaymentPlan(IntegerIdMixin, CreatedAtMixin, Base):
    """A payment plan proposed for a deal."""

    __tablename__ = "payment_plans"

    deal_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("deals.id"), index=True)
    status: Mapped[str | None] = mapped_column(String(30))
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONB)


class ReservationForm(IntegerIdMixin, CreatedAtMixin, Base):
    """A reservation record. Approved rows lock the down-payment split."""

    __tablename__ = "reservation_forms"

    payment_plan_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("payment_plans.id"))
    unit_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("units.id"))
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    reservation_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    preliminary_payment: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    language: Mapped[str | None] = mapped_column(String(10))
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    details: Mapped[dict[str, Any] | None] = mapped_column(JSONB)

    def __repr__(self) -> str:
        return f"<ReservationForm id={self.id} status={self.status}>"
