"""Document endpoints — FastAPI router returning PDF byte streams.

POST /api/documents/client-offer      (property consultants)
POST /api/documents/reservation-form  (financial, contract and management roles)
"""
# ruff: noqa: B008  — Depends() in function defaults is standard FastAPI

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from uptown_docs.api.auth import require_roles
from uptown_docs.db.engine import get_session
from uptown_docs.documents import service
from uptown_docs.documents.renderer import Renderer, renderer
from uptown_docs.models.enums import CLIENT_OFFER_ROLES, RESERVATION_FORM_ROLES
from uptown_docs.schemas.documents import (
    AuthUser,
    ClientOfferRequest,
    GeneratedDocument,
    ReservationFormRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/documents", tags=["documents"])


def get_renderer() -> Renderer:
    """Dependency — the process-wide renderer (overridden in tests)."""
    return renderer


def _pdf_response(document: GeneratedDocument) -> Response:
    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'attachment; filename="{document.filename}"'},
    )


@router.post("/client-offer")
async def client_offer(
    payload: ClientOfferRequest,
    db: AsyncSession = Depends(get_session),
    user: AuthUser = Depends(require_roles(CLIENT_OFFER_ROLES)),
    pdf_renderer: Renderer = Depends(get_renderer),
) -> Response:
    """Client Offer PDF."""
    document = await service.generate_client_offer(db, user, payload, pdf_renderer)
    logger.info("Client Offer %s generated for user %s", document.filename, user.user_id)
    return _pdf_response(document)


@router.post("/reservation-form")
async def reservation_form(
    payload: ReservationFormRequest,
    db: AsyncSession = Depends(get_session),
    user: AuthUser = Depends(require_roles(RESERVATION_FORM_ROLES)),
    pdf_renderer: Renderer = Depends(get_renderer),
) -> Response:
    """Reservation Form PDF."""
    document = await service.generate_reservation_form(db, user, payload, pdf_renderer)
    logger.info("Reservation Form %s generated for user %s", document.filename, user.user_id)
    return _pdf_response(document)
