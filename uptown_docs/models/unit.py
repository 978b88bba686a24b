"""Unit inventory and approved model pricing.

All monetary amounts use Numeric / Decimal — never float.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import Boolean, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from uptown_docs.models.base import Base, IntegerIdMixin


class Unit(IntegerIdMixin, Base):
    """A sellable unit. Structural fields are informational only."""

    __tablename__ = "units"

    code: Mapped[str | None] = mapped_column(String(100))
    model_id: Mapped[int | None] = mapped_column(Integer)
    area: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    building_number: Mapped[str | None] = mapped_column(String(50))
    block_sector: Mapped[str | None] = mapped_column(String(50))
    zone: Mapped[str | None] = mapped_column(String(50))
    unit_status: Mapped[str | None] = mapped_column(String(30))
    available: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Unit id={self.id} status={self.unit_status} available={self.available}>"


class UnitModelPricing(IntegerIdMixin, Base):
    """Pricing attached to a unit model; only `approved` rows are usable."""

    __tablename__ = "unit_model_pricing"

    model_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False)
    price: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    maintenance_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    garage_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    garden_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    roof_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))
    storage_price: Mapped[Decimal | None] = mapped_column(Numeric(18, 2))

    def __repr__(self) -> str:
        return f"<UnitModelPricing id={self.id} model_id={self.model_id} status={self.status}>"
