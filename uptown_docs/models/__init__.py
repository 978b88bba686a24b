"""SQLAlchemy ORM models for the document service.

Import all models here so Base.metadata sees every mapped table.
"""

from __future__ import annotations

from uptown_docs.models.base import Base
from uptown_docs.models.deal import Deal
from uptown_docs.models.enums import (
    CLIENT_OFFER_ROLES,
    RESERVATION_FORM_ROLES,
    DocumentKind,
    GatePath,
    ReservationStatus,
    Role,
)
from uptown_docs.models.reservation import PaymentPlan, ReservationForm
from uptown_docs.models.unit import Unit, UnitModelPricing
from uptown_docs.models.user import User

__all__ = [
    # Base
    "Base",
    # Models
    "User",
    "Deal",
    "Unit",
    "UnitModelPricing",
    "PaymentPlan",
    "ReservationForm",
    # Enums
    "DocumentKind",
    "Role",
    "ReservationStatus",
    "GatePath",
    "CLIENT_OFFER_ROLES",
    "RESERVATION_FORM_ROLES",
]
