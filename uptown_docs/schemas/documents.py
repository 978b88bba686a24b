"""Pydantic schemas for the document composition pipeline.

Request payloads, the authenticated caller, and the typed values that flow
between pipeline stages (breakdown, schedule rows, buyers, down payment).
All money is Decimal.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from uptown_docs.calculators.money import ZERO, non_negative, to_amount

MAX_BUYERS = 4

BUYER_FIELDS: tuple[str, ...] = (
    "buyer_name",
    "nationality",
    "id_or_passport",
    "id_issue_date",
    "birth_date",
    "address",
    "phone_primary",
    "phone_secondary",
    "email",
)

BREAKDOWN_COMPONENTS: tuple[str, ...] = ("base", "garden", "roof", "storage", "garage", "maintenance")


# ── Caller ────────────────────────────────────────────────────────────


class AuthUser(BaseModel):
    """Identity yielded by the auth guard."""

    user_id: int
    name: str | None = None
    email: str | None = None
    role: str


class Consultant(BaseModel):
    """Best-effort consultant identity for header metadata."""

    name: str | None = None
    email: str | None = None

    @property
    def display(self) -> str:
        """`name — email`, skipping whichever part is missing."""
        return " — ".join(p for p in (self.name, self.email) if p)


# ── Commercial values ─────────────────────────────────────────────────


class PricingBreakdown(BaseModel):
    """Six non-negative pricing components of a unit."""

    base: Decimal = ZERO
    garden: Decimal = ZERO
    roof: Decimal = ZERO
    storage: Decimal = ZERO
    garage: Decimal = ZERO
    maintenance: Decimal = ZERO

    @field_validator(*BREAKDOWN_COMPONENTS, mode="before")
    @classmethod
    def coerce_component(cls, v: Any) -> Decimal:
        return non_negative(to_amount(v))

    @property
    def total_excl(self) -> Decimal:
        """Total excluding maintenance."""
        return self.base + self.garden + self.roof + self.storage + self.garage

    @property
    def total_incl(self) -> Decimal:
        """Total including maintenance."""
        return self.total_excl + self.maintenance

    @property
    def is_all_zero(self) -> bool:
        return all(getattr(self, c) == ZERO for c in BREAKDOWN_COMPONENTS)


class ScheduleRow(BaseModel):
    """One payment schedule entry, rendered in the order supplied."""

    model_config = ConfigDict(extra="ignore")

    month: int = 0
    label: str = ""
    amount: Decimal = ZERO
    date: str = ""

    @field_validator("month", mode="before")
    @classmethod
    def coerce_month(cls, v: Any) -> int:
        try:
            return int(to_amount(v))
        except (ValueError, OverflowError):
            return 0

    @field_validator("label", "date", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Decimal:
        return to_amount(v)


class BuyerView(BaseModel):
    """Per-buyer contact and identity fields."""

    model_config = ConfigDict(extra="ignore")

    buyer_name: str = ""
    nationality: str = ""
    id_or_passport: str = ""
    id_issue_date: str = ""
    birth_date: str = ""
    address: str = ""
    phone_primary: str = ""
    phone_secondary: str = ""
    email: str = ""

    @field_validator(*BUYER_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def phones(self) -> str:
        return " / ".join(p for p in (self.phone_primary, self.phone_secondary) if p)


class UnitRef(BaseModel):
    """Unit identity as carried by the offer payload or snapshot."""

    model_config = ConfigDict(extra="ignore")

    unit_code: str = ""
    unit_type: str = ""
    unit_id: int | None = None

    @field_validator("unit_code", "unit_type", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @field_validator("unit_id", mode="before")
    @classmethod
    def coerce_unit_id(cls, v: Any) -> int | None:
        return positive_int(v)

    @property
    def line(self) -> str:
        """`code — type` (type part omitted when empty)."""
        if self.unit_type:
            return f"{self.unit_code} — {self.unit_type}".strip()
        return self.unit_code.strip()


class UnitMetadata(BaseModel):
    """Structural (non-price) unit fields, purely informational."""

    area: str = ""
    garden_area: str = ""
    building_number: str = ""
    block_sector: str = ""
    zone: str = ""


class DownPaymentLock(BaseModel):
    """`details.dp` of an approved reservation; dates already formatted DD/MM/YYYY."""

    total: Any = None
    preliminary_amount: Any = None
    preliminary_date: str | None = None
    paid_amount: Any = None
    paid_date: str | None = None
    remaining: Any = None


class DownPayment(BaseModel):
    """Resolved down-payment decomposition."""

    total: Decimal
    preliminary: Decimal
    preliminary_date: str | None = None
    paid: Decimal = ZERO
    paid_date: str | None = None
    remaining: Decimal
    locked: bool = False


# ── Requests ──────────────────────────────────────────────────────────


class ClientOfferRequest(BaseModel):
    """Client Offer payload. Omitted fields may be hydrated from the deal snapshot."""

    model_config = ConfigDict(extra="ignore")

    deal_id: Any = None
    language: str | None = None
    currency: str | None = None
    buyers: list[dict[str, Any]] | None = None
    schedule: list[dict[str, Any]] | None = None
    totals: dict[str, Any] | None = None
    offer_date: str | None = None
    first_payment_date: str | None = None
    unit: dict[str, Any] | None = None
    unit_pricing_breakdown: dict[str, Any] | None = None

    @field_validator("buyers", "schedule", mode="before")
    @classmethod
    def drop_non_lists(cls, v: Any) -> list[Any] | None:
        if v is None or not isinstance(v, list):
            return None
        return [item for item in v if isinstance(item, dict)]

    @field_validator("totals", "unit", "unit_pricing_breakdown", mode="before")
    @classmethod
    def drop_non_objects(cls, v: Any) -> dict[str, Any] | None:
        return v if isinstance(v, dict) else None

    @property
    def positive_deal_id(self) -> int | None:
        return positive_int(self.deal_id)


class ReservationFormRequest(BaseModel):
    """Reservation Form payload."""

    model_config = ConfigDict(extra="ignore")

    deal_id: Any = None
    reservation_form_id: Any = None
    reservation_form_date: str | None = None
    preliminary_payment_amount: Any = None
    preliminary_payment: Any = None
    currency_override: str | None = None
    language: str | None = None

    @property
    def positive_deal_id(self) -> int | None:
        return positive_int(self.deal_id)

    @property
    def positive_reservation_form_id(self) -> int | None:
        return positive_int(self.reservation_form_id)

    @property
    def caller_preliminary(self) -> Any:
        """`preliminary_payment_amount`, falling back to `preliminary_payment`."""
        if self.preliminary_payment_amount is not None:
            return self.preliminary_payment_amount
        return self.preliminary_payment


# ── Output ────────────────────────────────────────────────────────────


class GeneratedDocument(BaseModel):
    """A rendered PDF ready to stream."""

    filename: str
    content: bytes = Field(repr=False)
    media_type: str = "application/pdf"


def positive_int(value: Any) -> int | None:
    """Integer value if `value` is a positive finite integer, else None."""
    d = to_amount(value)
    if d <= ZERO or d != d.to_integral_value():
        return None
    return int(d)
