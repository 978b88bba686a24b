"""Enum types shared across the document service."""

from __future__ import annotations

from enum import Enum


class DocumentKind(str, Enum):
    """Generated document kinds; value doubles as the filename prefix."""

    CLIENT_OFFER = "client_offer"
    RESERVATION_FORM = "reservation_form"


class Role(str, Enum):
    """Staff roles recognised by the document endpoints."""

    PROPERTY_CONSULTANT = "property_consultant"
    FINANCIAL_ADMIN = "financial_admin"
    FINANCIAL_MANAGER = "financial_manager"
    CONTRACT_PERSON = "contract_person"
    CONTRACT_MANAGER = "contract_manager"
    CEO = "ceo"
    CHAIRMAN = "chairman"
    VICE_CHAIRMAN = "vice_chairman"
    TOP_MANAGEMENT = "top_management"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class ReservationStatus(str, Enum):
    """Reservation form workflow states."""

    PENDING = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class GatePath(str, Enum):
    """Which approval path let a Reservation Form through."""

    FM_REVIEW = "fm_review"
    APPROVED_RESERVATION = "approved_reservation"
    RESERVED_UNIT = "reserved_unit"


CLIENT_OFFER_ROLES: frozenset[str] = frozenset({Role.PROPERTY_CONSULTANT.value})

RESERVATION_FORM_ROLES: frozenset[str] = frozenset({
    Role.FINANCIAL_ADMIN.value,
    Role.FINANCIAL_MANAGER.value,
    Role.CONTRACT_PERSON.value,
    Role.CONTRACT_MANAGER.value,
    Role.CEO.value,
    Role.CHAIRMAN.value,
    Role.VICE_CHAIRMAN.value,
    Role.TOP_MANAGEMENT.value,
    Role.ADMIN.value,
    Role.SUPERADMIN.value,
})
