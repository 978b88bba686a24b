"""Read-only queries used by the document pipeline.

Each function takes an AsyncSession and returns ORM rows or plain tuples.
None of them swallow errors: callers decide whether a failure is fatal
(deal load) or degrades one optional field (everything else).
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import ColumnElement, Numeric, Row, and_, case, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.models.deal import Deal
from uptown_docs.models.enums import ReservationStatus
from uptown_docs.models.reservation import PaymentPlan, ReservationForm
from uptown_docs.models.unit import Unit, UnitModelPricing
from uptown_docs.models.user import User

logger = logging.getLogger(__name__)

RESERVED_UNIT_STATUS = "RESERVED"
APPROVED_PRICING_STATUS = "approved"


# ── Deals ────────────────────────────────────────────────────────────


async def get_deal(db: AsyncSession, deal_id: int) -> Deal | None:
    """Load a deal by id."""
    result = await db.execute(select(Deal).where(Deal.id == deal_id))
    return result.scalar_one_or_none()


# ── Users ────────────────────────────────────────────────────────────


def _display_name(name_col: Any, email_col: Any) -> ColumnElement[Any]:
    """COALESCE(NULLIF(TRIM(name), ''), email)."""
    return func.coalesce(func.nullif(func.trim(name_col), ""), email_col)


async def get_consultant_via_deal(db: AsyncSession, deal_id: int) -> tuple[str | None, str | None] | None:
    """The deal creator's (full_name, email), or None when there is no creator."""
    result = await db.execute(
        select(_display_name(User.name, User.email).label("full_name"), User.email)
        .select_from(Deal)
        .join(User, User.id == Deal.created_by)
        .where(Deal.id == deal_id)
        .limit(1)
    )
    row = result.first()
    if row is None:
        return None
    return row.full_name, row.email


async def get_user_identity(db: AsyncSession, user_id: int) -> tuple[str | None, str | None] | None:
    """A user's (full_name, email) by id."""
    result = await db.execute(
        select(_display_name(User.name, User.email).label("full_name"), User.email)
        .where(User.id == user_id)
        .limit(1)
    )
    row = result.first()
    if row is None:
        return None
    return row.full_name, row.email


# ── Units ────────────────────────────────────────────────────────────


async def get_unit_metadata(db: AsyncSession, unit_id: int) -> Row[Any] | None:
    """Structural unit fields (area, building, block/sector, zone)."""
    result = await db.execute(
        select(Unit.area, Unit.building_number, Unit.block_sector, Unit.zone).where(Unit.id == unit_id)
    )
    return result.first()


async def is_unit_reserved(db: AsyncSession, unit_id: int) -> bool:
    """True when the unit is RESERVED and no longer available."""
    result = await db.execute(
        select(1).where(
            Unit.id == unit_id,
            Unit.unit_status == RESERVED_UNIT_STATUS,
            Unit.available.is_(False),
        )
    )
    return result.first() is not None


async def get_latest_model_pricing(db: AsyncSession, unit_id: int) -> UnitModelPricing | None:
    """Latest approved pricing row of the unit's model."""
    result = await db.execute(
        select(UnitModelPricing)
        .join(Unit, Unit.model_id == UnitModelPricing.model_id)
        .where(Unit.id == unit_id, UnitModelPricing.status == APPROVED_PRICING_STATUS)
        .order_by(UnitModelPricing.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


# ── Reservations ─────────────────────────────────────────────────────


async def get_approved_reservation_by_id(db: AsyncSession, reservation_form_id: int) -> ReservationForm | None:
    """An approved reservation form by its own id."""
    result = await db.execute(
        select(ReservationForm).where(
            ReservationForm.id == reservation_form_id,
            ReservationForm.status == ReservationStatus.APPROVED.value,
        )
    )
    return result.scalar_one_or_none()


async def get_approved_reservation_for_deal(db: AsyncSession, deal_id: int) -> ReservationForm | None:
    """Latest approved reservation linked to the deal.

    Linked through `payment_plans.deal_id`, or through a legacy all-digit
    `details.deal_id`. The CASE keeps the cast from ever seeing non-digits.
    """
    legacy_deal_id = ReservationForm.details["deal_id"].astext
    legacy_match = case(
        (legacy_deal_id.regexp_match("^[0-9]+$"), cast(legacy_deal_id, Numeric) == Decimal(deal_id)),
        else_=False,
    )
    result = await db.execute(
        select(ReservationForm)
        .outerjoin(PaymentPlan, PaymentPlan.id == ReservationForm.payment_plan_id)
        .where(
            and_(
                ReservationForm.status == ReservationStatus.APPROVED.value,
                or_(PaymentPlan.deal_id == deal_id, legacy_match),
            )
        )
        .order_by(ReservationForm.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()
