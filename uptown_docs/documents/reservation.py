"""Reservation Form data resolution.

Approved reservation lookup, the four-tier reservation date, the
down-payment lock stored on an approved record, the preliminary payment
and the structural unit fields.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC
from decimal import Decimal
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.calculators.money import to_amount
from uptown_docs.db import queries
from uptown_docs.documents.locale import (
    day_of_week,
    format_utc_dmy_slash,
    match_dmy_slash,
    now_local,
    parse_instant,
)
from uptown_docs.models.reservation import ReservationForm
from uptown_docs.schemas.documents import DownPaymentLock, ReservationFormRequest, UnitMetadata
from uptown_docs.schemas.snapshot import SnapshotUnitInfo

logger = logging.getLogger(__name__)


def _details(record: ReservationForm | None) -> dict[str, Any]:
    if record is None or not isinstance(record.details, dict):
        return {}
    return record.details


def _column_then_details(record: ReservationForm | None, name: str) -> Any:
    """Column value if non-null, else the same key under `details`."""
    if record is None:
        return None
    value = getattr(record, name, None)
    if value is not None:
        return value
    return _details(record).get(name)


# ── Approved record ──────────────────────────────────────────────────


@dataclass(frozen=True)
class ApprovedReservations:
    """Approved forms found for one Reservation Form request.

    `explicit` is the form the caller named by id, which may belong to any
    deal. `linked` is the latest approved form linked to this deal; only it
    counts toward the approval gate.
    """

    explicit: ReservationForm | None = None
    linked: ReservationForm | None = None

    @property
    def record(self) -> ReservationForm | None:
        """Source of the stored reservation date, preliminary payment and DP lock."""
        return self.explicit if self.explicit is not None else self.linked


async def find_approved_reservation(
    db: AsyncSession,
    deal_id: int,
    reservation_form_id: int | None = None,
) -> ApprovedReservations:
    """Explicit approved form (when an id is given) and the deal's latest approved form.

    Lookup failures are logged and treated as "no approved record".
    """
    explicit = None
    if reservation_form_id is not None:
        try:
            explicit = await queries.get_approved_reservation_by_id(db, reservation_form_id)
        except SQLAlchemyError:
            logger.warning("Reservation form %s lookup failed", reservation_form_id, exc_info=True)

    try:
        linked = await queries.get_approved_reservation_for_deal(db, deal_id)
    except SQLAlchemyError:
        logger.warning("Approved reservation lookup for deal %s failed", deal_id, exc_info=True)
        linked = None

    return ApprovedReservations(explicit=explicit, linked=linked)


# ── Reservation date ─────────────────────────────────────────────────


@dataclass(frozen=True)
class ReservationDate:
    display: str
    iso: str

    def weekday(self, lang: str) -> str:
        return day_of_week(self.iso, lang)


def _from_instant(value: Any) -> ReservationDate | None:
    parsed = parse_instant(value)
    if parsed is None:
        return None
    utc = parsed.astimezone(UTC)
    return ReservationDate(display=utc.strftime("%d/%m/%Y"), iso=utc.date().isoformat())


def resolve_reservation_date(record: ReservationForm | None, caller_value: str | None) -> ReservationDate:
    """Approved record's date → caller `DD/MM/YYYY` → caller parsed (UTC) → today.

    Caller text that does not parse as a date is still printed as given;
    only the weekday then comes from today.
    """
    stored = _column_then_details(record, "reservation_date")
    if stored:
        resolved = _from_instant(stored)
        if resolved is not None:
            return resolved

    raw = (caller_value or "").strip()
    if raw:
        parts = match_dmy_slash(raw)
        if parts is not None:
            dd, mm, yyyy = parts
            return ReservationDate(display=raw, iso=f"{yyyy}-{mm}-{dd}")
        resolved = _from_instant(raw)
        if resolved is not None:
            return resolved
        logger.info("Unparseable reservation_form_date %r, printing it as given", raw)

    today = now_local().date()
    return ReservationDate(display=raw or today.strftime("%d/%m/%Y"), iso=today.isoformat())


# ── Down payment lock and preliminary payment ────────────────────────


def lock_from_record(record: ReservationForm | None) -> DownPaymentLock | None:
    """`details.dp` of an approved record with its dates as UTC `DD/MM/YYYY`."""
    dp = _details(record).get("dp")
    if not isinstance(dp, dict):
        return None
    return DownPaymentLock(
        total=dp.get("total"),
        preliminary_amount=dp.get("preliminary_amount"),
        preliminary_date=format_utc_dmy_slash(dp.get("preliminary_date")),
        paid_amount=dp.get("paid_amount"),
        paid_date=format_utc_dmy_slash(dp.get("paid_date")),
        remaining=dp.get("remaining"),
    )


def resolve_preliminary(request: ReservationFormRequest, record: ReservationForm | None) -> Decimal:
    """Caller's preliminary payment, else the approved record's (column, then details)."""
    caller = request.caller_preliminary
    if caller is not None:
        return to_amount(caller)
    return to_amount(_column_then_details(record, "preliminary_payment"))


# ── Unit metadata ────────────────────────────────────────────────────


def _text(*values: Any) -> str:
    for v in values:
        if v is not None and str(v).strip():
            return str(v).strip()
    return ""


def _area(value: Any) -> Any:
    # Numeric columns come back as Decimal("120.00"); show "120".
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    return value


async def load_unit_metadata(
    db: AsyncSession,
    unit_id: int | None,
    unit_info: SnapshotUnitInfo | None,
) -> UnitMetadata:
    """Live structural fields, each falling back to the snapshot's `unitInfo`."""
    row = None
    if unit_id is not None:
        try:
            row = await queries.get_unit_metadata(db, unit_id)
        except SQLAlchemyError:
            logger.warning("Unit metadata lookup for unit %s failed", unit_id, exc_info=True)

    info = unit_info or SnapshotUnitInfo()
    live = row._mapping if row is not None else {}
    return UnitMetadata(
        area=_text(_area(live.get("area")), info.unit_area, info.area),
        garden_area=_text(info.garden_area, info.garden),
        building_number=_text(live.get("building_number"), info.building_number, info.building),
        block_sector=_text(live.get("block_sector"), info.block_sector, info.block),
        zone=_text(live.get("zone"), info.zone),
    )
