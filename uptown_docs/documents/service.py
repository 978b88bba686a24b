"""Document generation orchestrator.

Runs the pipeline stages strictly in order for one request and hands the
composed HTML to the renderer:

    Client Offer:     identity → hydration → pricing → compose → render
    Reservation Form: deal → approved record → gate → snapshot → identity →
                      pricing → unit metadata → financials → compose → render

DocumentError subclasses propagate unchanged; anything else is logged and
wrapped into a GenerationError with a bounded message.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.calculators.financials import decompose_down_payment, down_payment_base, remaining_balance
from uptown_docs.config import settings
from uptown_docs.db import queries
from uptown_docs.documents import pricing
from uptown_docs.documents.composer import (
    ClientOfferContext,
    ReservationFormContext,
    compose_client_offer,
    compose_reservation_form,
)
from uptown_docs.documents.gate import check_gate
from uptown_docs.documents.hydrate import buyers_from_client_info, hydrate_offer
from uptown_docs.documents.identity import resolve_consultant
from uptown_docs.documents.locale import resolve_language
from uptown_docs.documents.renderer import DEFAULT_PAGE, Renderer, renderer as default_renderer
from uptown_docs.documents.reservation import (
    find_approved_reservation,
    load_unit_metadata,
    lock_from_record,
    resolve_preliminary,
    resolve_reservation_date,
)
from uptown_docs.errors import BadInputError, DocumentError, ForbiddenError, GenerationError, NotFoundError
from uptown_docs.events import emit
from uptown_docs.models.enums import DocumentKind
from uptown_docs.schemas.documents import (
    AuthUser,
    ClientOfferRequest,
    GeneratedDocument,
    ReservationFormRequest,
    UnitRef,
    positive_int,
)
from uptown_docs.schemas.events import EventType, SystemEvent
from uptown_docs.schemas.snapshot import CalculatorSnapshot

logger = logging.getLogger(__name__)

FAILURE_MESSAGES = {
    DocumentKind.CLIENT_OFFER: "Failed to generate Client Offer PDF",
    DocumentKind.RESERVATION_FORM: "Failed to generate Reservation Form PDF",
}


def document_filename(kind: DocumentKind, moment: datetime | None = None) -> str:
    """`<kind>_<ISO timestamp with ':' and '.' replaced by '-'>.pdf`."""
    moment = (moment or datetime.now(UTC)).astimezone(UTC)
    stamp = moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"{kind.value}_{stamp.replace(':', '-').replace('.', '-')}.pdf"


async def _emit(event_type: EventType, kind: DocumentKind, user: AuthUser, deal_id: int | None, **data: object) -> None:
    await emit(SystemEvent(
        event_type=event_type,
        deal_id=deal_id,
        actor_id=user.user_id,
        actor_role=user.role,
        data={"kind": kind.value, **data},
        source_module="documents.service",
    ))


# ── Client Offer ─────────────────────────────────────────────────────


async def generate_client_offer(
    db: AsyncSession,
    user: AuthUser,
    request: ClientOfferRequest,
    renderer: Renderer | None = None,
) -> GeneratedDocument:
    """Compose and render a Client Offer."""
    kind = DocumentKind.CLIENT_OFFER
    deal_id = request.positive_deal_id
    try:
        consultant = await resolve_consultant(db, user, deal_id)
        offer = await hydrate_offer(db, request)

        source = pricing.select_offer_source(
            offer.unit_pricing_breakdown,
            offer.snapshot_breakdown,
            offer.unit.unit_id,
        )
        breakdown = await pricing.resolve(db, source)

        composed = compose_client_offer(ClientOfferContext(
            language=offer.language,
            currency=offer.currency,
            consultant=consultant,
            buyers=offer.buyers,
            schedule=offer.schedule,
            offer_date=offer.offer_date,
            first_payment_date=offer.first_payment_date,
            unit=offer.unit,
            breakdown=breakdown,
            total_nominal=offer.total_nominal,
        ))
        content = await (renderer or default_renderer).render(
            composed.html, composed.header, composed.footer, DEFAULT_PAGE
        )
    except DocumentError:
        raise
    except Exception as exc:
        logger.exception("Client Offer generation failed (deal=%s)", deal_id)
        await _emit(EventType.DOCUMENT_FAILED, kind, user, deal_id, error=type(exc).__name__)
        raise GenerationError(FAILURE_MESSAGES[kind]) from exc

    document = GeneratedDocument(filename=document_filename(kind), content=content)
    await _emit(
        EventType.DOCUMENT_GENERATED,
        kind,
        user,
        deal_id,
        filename=document.filename,
        size=len(content),
        pricing_source=type(source).__name__,
    )
    return document


# ── Reservation Form ─────────────────────────────────────────────────


async def generate_reservation_form(
    db: AsyncSession,
    user: AuthUser,
    request: ReservationFormRequest,
    renderer: Renderer | None = None,
) -> GeneratedDocument:
    """Gate, compose and render a Reservation Form."""
    kind = DocumentKind.RESERVATION_FORM
    deal_id = request.positive_deal_id
    if deal_id is None:
        raise BadInputError("deal_id must be a positive number")

    try:
        deal = await queries.get_deal(db, deal_id)
        if deal is None:
            raise NotFoundError("Deal not found")

        snapshot = CalculatorSnapshot.from_deal_details(deal.details)
        unit_id = positive_int(snapshot.unit_info.unit_id) if snapshot.unit_info else None

        approved = await find_approved_reservation(db, deal_id, request.positive_reservation_form_id)
        record = approved.record
        try:
            gate_path = await check_gate(db, deal, approved.linked, unit_id)
        except ForbiddenError:
            await _emit(EventType.RESERVATION_GATE_DENIED, kind, user, deal_id)
            raise

        language = resolve_language(request.language or snapshot.snapshot_language or "ar")
        details = deal.details if isinstance(deal.details, dict) else {}
        currency = (
            request.currency_override
            or snapshot.currency
            or details.get("currency")
            or settings.branding.default_reservation_currency
        )

        consultant = await resolve_consultant(db, user, deal_id)
        breakdown = pricing.reservation_breakdown(snapshot.unit_pricing_breakdown)
        metadata = await load_unit_metadata(db, unit_id, snapshot.unit_info)

        dp = decompose_down_payment(
            down_payment_base(snapshot.down_payment_amount, snapshot.schedule),
            resolve_preliminary(request, record),
            lock_from_record(record),
        )
        balance = remaining_balance(breakdown.total_incl, dp.total)
        reservation_date = resolve_reservation_date(record, request.reservation_form_date)

        unit_info = snapshot.unit_info
        composed = compose_reservation_form(ReservationFormContext(
            language=language,
            currency=str(currency),
            consultant=consultant,
            reservation_date=reservation_date.display,
            day_of_week=reservation_date.weekday(language),
            buyers=buyers_from_client_info(snapshot.client_info) if snapshot.client_info else [],
            unit=UnitRef(
                unit_code=unit_info.unit_code if unit_info else "",
                unit_type=unit_info.unit_type if unit_info else "",
                unit_id=unit_id,
            ),
            metadata=metadata,
            breakdown=breakdown,
            down_payment=dp,
            remaining_balance=balance,
        ))
        content = await (renderer or default_renderer).render(
            composed.html, composed.header, composed.footer, DEFAULT_PAGE
        )
    except DocumentError:
        raise
    except Exception as exc:
        logger.exception("Reservation Form generation failed (deal=%s)", deal_id)
        await _emit(EventType.DOCUMENT_FAILED, kind, user, deal_id, error=type(exc).__name__)
        raise GenerationError(FAILURE_MESSAGES[kind]) from exc

    document = GeneratedDocument(filename=document_filename(kind), content=content)
    await _emit(
        EventType.DOCUMENT_GENERATED,
        kind,
        user,
        deal_id,
        filename=document.filename,
        size=len(content),
        gate=gate_path.value,
        dp_locked=dp.locked,
    )
    return document
