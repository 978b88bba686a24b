"""Pricing resolver.

The unit pricing breakdown comes from exactly one source, chosen by strict
precedence:

    Client Offer:     caller breakdown → deal snapshot breakdown → live model pricing
    Reservation Form: deal snapshot breakdown only

A breakdown whose six components are all zero counts as absent. Live model
pricing is only consulted when no earlier source applies, and a failed fetch
leaves the breakdown unresolved (the summary box is then omitted).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.db import queries
from uptown_docs.models.unit import UnitModelPricing
from uptown_docs.schemas.documents import PricingBreakdown

logger = logging.getLogger(__name__)


# ── Sources ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class CallerPricing:
    breakdown: PricingBreakdown


@dataclass(frozen=True)
class SnapshotPricing:
    breakdown: PricingBreakdown


@dataclass(frozen=True)
class ModelPricing:
    unit_id: int


@dataclass(frozen=True)
class Unavailable:
    pass


PricingSource = CallerPricing | SnapshotPricing | ModelPricing | Unavailable


def coerce_breakdown(raw: Any) -> PricingBreakdown | None:
    """Component-wise coercion; None when `raw` is not an object or is all zero."""
    if not isinstance(raw, dict):
        return None
    breakdown = PricingBreakdown.model_validate(raw)
    return None if breakdown.is_all_zero else breakdown


def from_model_row(row: UnitModelPricing) -> PricingBreakdown:
    return PricingBreakdown(
        base=row.price,
        garden=row.garden_price,
        roof=row.roof_price,
        storage=row.storage_price,
        garage=row.garage_price,
        maintenance=row.maintenance_price,
    )


def select_offer_source(
    caller: Any,
    snapshot: Any = None,
    unit_id: int | None = None,
) -> PricingSource:
    """Pick the Client Offer pricing source."""
    breakdown = coerce_breakdown(caller)
    if breakdown is not None:
        return CallerPricing(breakdown)
    breakdown = coerce_breakdown(snapshot)
    if breakdown is not None:
        return SnapshotPricing(breakdown)
    if unit_id is not None and unit_id > 0:
        return ModelPricing(unit_id)
    return Unavailable()


async def resolve(db: AsyncSession, source: PricingSource) -> PricingBreakdown | None:
    """Turn a pricing source into a breakdown (None when unavailable)."""
    match source:
        case CallerPricing(breakdown) | SnapshotPricing(breakdown):
            return breakdown
        case ModelPricing(unit_id):
            try:
                row = await queries.get_latest_model_pricing(db, unit_id)
            except SQLAlchemyError:
                logger.warning("Model pricing lookup for unit %s failed", unit_id, exc_info=True)
                return None
            if row is None:
                return None
            return from_model_row(row)
        case _:
            return None


def reservation_breakdown(snapshot_breakdown: Any) -> PricingBreakdown:
    """Reservation Form pricing: always the snapshot, zeros when missing."""
    if not isinstance(snapshot_breakdown, dict):
        return PricingBreakdown()
    return PricingBreakdown.model_validate(snapshot_breakdown)
