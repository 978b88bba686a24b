"""Snapshot hydrator for the Client Offer.

When the caller omits `buyers` or `schedule` and names a deal, the deal's
calculator snapshot fills every field the caller left out. Buyer fields in
`clientInfo` are suffixed: `""` for the first buyer, `_2`…`_4` after that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.calculators.money import ZERO, to_amount
from uptown_docs.db import queries
from uptown_docs.documents.locale import resolve_language, today_iso
from uptown_docs.schemas.documents import (
    BUYER_FIELDS,
    MAX_BUYERS,
    BuyerView,
    ClientOfferRequest,
    ScheduleRow,
    UnitRef,
)
from uptown_docs.schemas.snapshot import CalculatorSnapshot

logger = logging.getLogger(__name__)


# ── Buyers ───────────────────────────────────────────────────────────


def buyer_suffix(index: int) -> str:
    """Key suffix of the 1-based buyer `index`."""
    return "" if index == 1 else f"_{index}"


def buyer_count(client_info: dict[str, Any]) -> int:
    """`number_of_buyers` clamped to [1, 4]; missing or invalid → 1."""
    try:
        n = int(to_amount(client_info.get("number_of_buyers")))
    except (ValueError, OverflowError):
        n = 0
    return min(max(n or 1, 1), MAX_BUYERS)


def buyers_from_client_info(client_info: dict[str, Any]) -> list[BuyerView]:
    """Build the per-buyer views from suffixed `clientInfo` keys."""
    buyers = []
    for i in range(1, buyer_count(client_info) + 1):
        sfx = buyer_suffix(i)
        buyers.append(BuyerView(**{f: client_info.get(f"{f}{sfx}") or "" for f in BUYER_FIELDS}))
    return buyers


def client_info_from_buyers(buyers: list[BuyerView]) -> dict[str, Any]:
    """Inverse of `buyers_from_client_info` for up to four buyers."""
    info: dict[str, Any] = {"number_of_buyers": min(max(len(buyers), 1), MAX_BUYERS)}
    for i, buyer in enumerate(buyers[:MAX_BUYERS], start=1):
        sfx = buyer_suffix(i)
        for f in BUYER_FIELDS:
            info[f"{f}{sfx}"] = getattr(buyer, f)
    return info


# ── Offer hydration ──────────────────────────────────────────────────


@dataclass
class OfferInputs:
    """Client Offer inputs after hydration and defaulting."""

    language: str
    currency: str
    buyers: list[BuyerView] = field(default_factory=list)
    schedule: list[ScheduleRow] = field(default_factory=list)
    totals: dict[str, Any] = field(default_factory=dict)
    offer_date: str = ""
    first_payment_date: str = ""
    unit: UnitRef = field(default_factory=UnitRef)
    unit_pricing_breakdown: dict[str, Any] | None = None
    snapshot_breakdown: dict[str, Any] | None = None
    hydrated: bool = False

    @property
    def total_nominal(self) -> Decimal:
        return to_amount(self.totals.get("totalNominal"))


def needs_hydration(request: ClientOfferRequest) -> bool:
    return (request.buyers is None or request.schedule is None) and request.positive_deal_id is not None


async def hydrate_offer(db: AsyncSession, request: ClientOfferRequest) -> OfferInputs:
    """Merge the request with the deal snapshot when needed, then apply defaults.

    A deal that does not exist simply skips hydration. Database errors on
    the deal load propagate.
    """
    buyers_raw = request.buyers
    schedule_raw = request.schedule
    totals = request.totals
    offer_date = request.offer_date
    first_payment_date = request.first_payment_date
    unit_raw = request.unit
    language = request.language
    currency = request.currency
    buyers: list[BuyerView] | None = None
    snapshot_breakdown = None
    hydrated = False

    deal_id = request.positive_deal_id
    if needs_hydration(request) and deal_id is not None:
        deal = await queries.get_deal(db, deal_id)
        if deal is None:
            logger.info("Deal %s not found, offer rendered from request only", deal_id)
        else:
            hydrated = True
            snapshot = CalculatorSnapshot.from_deal_details(deal.details)

            if buyers_raw is None and snapshot.client_info:
                buyers = buyers_from_client_info(snapshot.client_info)

            if schedule_raw is None and snapshot.generated_plan and snapshot.generated_plan.schedule is not None:
                schedule_raw = [row.model_dump() for row in snapshot.generated_plan.schedule]
                totals = snapshot.generated_plan.totals or totals or {"totalNominal": 0}

            if not offer_date:
                offer_date = snapshot.inputs.offer_date or today_iso()
            if not first_payment_date:
                first_payment_date = snapshot.inputs.first_payment_date or offer_date

            if unit_raw is None and snapshot.unit_info is not None:
                unit_raw = {
                    "unit_code": snapshot.unit_info.unit_code or "",
                    "unit_type": snapshot.unit_info.unit_type or "",
                    "unit_id": snapshot.unit_info.unit_id,
                }

            snapshot_breakdown = snapshot.unit_pricing_breakdown
            language = language or snapshot.snapshot_language
            details = deal.details if isinstance(deal.details, dict) else {}
            currency = currency or snapshot.currency or details.get("currency")

    if buyers is None:
        buyers = [BuyerView.model_validate(b) for b in (buyers_raw or [])][:MAX_BUYERS]
    schedule = [ScheduleRow.model_validate(r) for r in (schedule_raw or [])]

    totals = dict(totals or {})
    if totals.get("totalNominal") is None:
        totals["totalNominal"] = sum((row.amount for row in schedule), ZERO)

    return OfferInputs(
        language=resolve_language(language or "en"),
        currency=str(currency or ""),
        buyers=buyers,
        schedule=schedule,
        totals=totals,
        offer_date=offer_date or "",
        first_payment_date=first_payment_date or "",
        unit=UnitRef.model_validate(unit_raw or {}),
        unit_pricing_breakdown=request.unit_pricing_breakdown,
        snapshot_breakdown=snapshot_breakdown,
        hydrated=hydrated,
    )
