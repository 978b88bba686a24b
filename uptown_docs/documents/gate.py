"""Reservation approval gate.

A Reservation Form may be generated when any of these holds:

1. the deal carries `fm_review_at` (financial manager review),
2. an approved reservation record is linked to the deal,
3. the deal's unit is RESERVED and no longer available.

Paths are tried in that order. Failures while checking the reserved unit
are logged and count as "not reserved". When no path holds the gate raises
ForbiddenError.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.db import queries
from uptown_docs.errors import ForbiddenError
from uptown_docs.models.deal import Deal
from uptown_docs.models.enums import GatePath
from uptown_docs.models.reservation import ReservationForm

logger = logging.getLogger(__name__)

GATE_DENIED_MESSAGE = "Financial Manager approval required before generating Reservation Form."


async def check_gate(
    db: AsyncSession,
    deal: Deal,
    linked_reservation: ReservationForm | None,
    unit_id: int | None,
) -> GatePath:
    """Return the first approval path that holds, or raise ForbiddenError.

    `linked_reservation` must come from the deal-linked lookup; a form
    fetched by a caller-supplied id proves nothing about this deal.
    """
    if deal.fm_review_at is not None:
        return GatePath.FM_REVIEW

    if linked_reservation is not None:
        return GatePath.APPROVED_RESERVATION

    if unit_id is not None:
        try:
            if await queries.is_unit_reserved(db, unit_id):
                return GatePath.RESERVED_UNIT
        except SQLAlchemyError:
            logger.warning("Reserved-unit check for unit %s failed", unit_id, exc_info=True)

    logger.info("Reservation gate denied for deal %s", deal.id)
    raise ForbiddenError(GATE_DENIED_MESSAGE)
