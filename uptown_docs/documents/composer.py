"""Document composer.

Builds the localized HTML body plus the repeating header and footer
fragments for each document, using the Jinja2 templates next to this
module. Rendering to PDF is the renderer's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from uptown_docs.calculators.money import ZERO, format_amount
from uptown_docs.documents.labels import (
    BRAND,
    DISCLAIMER,
    SIGNATURE_ROLES,
    TERMS_AND_CONDITIONS,
    schedule_label,
    text,
)
from uptown_docs.documents.locale import cairo_timestamp, direction, format_date_dmy, is_rtl
from uptown_docs.documents.words import amount_in_words, display_currency
from uptown_docs.schemas.documents import (
    BuyerView,
    Consultant,
    DownPayment,
    PricingBreakdown,
    ScheduleRow,
    UnitMetadata,
    UnitRef,
)

logger = logging.getLogger(__name__)

# Jinja2 templates
_template_dir = Path(__file__).parent / "templates"
env = Environment(
    loader=FileSystemLoader(str(_template_dir)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


@dataclass(frozen=True)
class ComposedDocument:
    """HTML body with the header and footer fragments printed on every page."""

    html: str
    header: str
    footer: str


@dataclass(frozen=True)
class Line:
    """One rendered money line: label, formatted amount, amount in words."""

    label: str
    amount: str
    words: str
    note: str = ""


@dataclass
class _Locale:
    lang: str
    currency: str

    @property
    def rtl(self) -> bool:
        return is_rtl(self.lang)

    @property
    def currency_display(self) -> str:
        return display_currency(self.currency, self.lang)

    def money(self, amount: Decimal) -> str:
        return f"{format_amount(amount)} {self.currency_display}".strip()

    def words(self, amount: Decimal) -> str:
        return amount_in_words(amount, self.lang, self.currency)

    def t(self, key: str) -> str:
        return text(key, self.lang)

    def base(self) -> dict[str, object]:
        return {
            "lang": self.lang,
            "dir": direction(self.lang),
            "rtl": self.rtl,
            "t": self.t,
            "brand": BRAND[self.lang],
            "generated_at": cairo_timestamp(),
        }


def _footer(loc: _Locale) -> str:
    return env.get_template("footer.html").render(**loc.base())


# ── Client Offer ─────────────────────────────────────────────────────


@dataclass
class ClientOfferContext:
    """Everything the Client Offer shows, already resolved."""

    language: str
    currency: str
    consultant: Consultant
    buyers: list[BuyerView] = field(default_factory=list)
    schedule: list[ScheduleRow] = field(default_factory=list)
    offer_date: str = ""
    first_payment_date: str = ""
    unit: UnitRef = field(default_factory=UnitRef)
    breakdown: PricingBreakdown | None = None
    total_nominal: Decimal | None = None


def _summary_lines(loc: _Locale, breakdown: PricingBreakdown) -> list[Line]:
    """Base always; optional components only when positive; then the total."""
    lines = [Line(loc.t("base"), loc.money(breakdown.base), "")]
    for key in ("garden", "roof", "storage", "garage", "maintenance"):
        value = getattr(breakdown, key)
        if value > ZERO:
            lines.append(Line(loc.t(key), loc.money(value), ""))
    lines.append(Line(loc.t("total_incl"), loc.money(breakdown.total_incl), ""))
    return lines


def compose_client_offer(ctx: ClientOfferContext) -> ComposedDocument:
    loc = _Locale(ctx.language, ctx.currency)

    rows = [
        {
            "month": row.month,
            "label": schedule_label(row.label, loc.lang),
            "amount": loc.money(row.amount),
            "date": format_date_dmy(row.date),
            "words": loc.words(row.amount),
        }
        for row in ctx.schedule
    ]
    summary = _summary_lines(loc, ctx.breakdown) if ctx.breakdown is not None else None
    schedule_total = None
    if ctx.total_nominal is not None:
        schedule_total = {"amount": loc.money(ctx.total_nominal), "words": loc.words(ctx.total_nominal)}

    values = {
        **loc.base(),
        "title": loc.t("client_offer"),
        "offer_date": format_date_dmy(ctx.offer_date),
        "first_payment_date": format_date_dmy(ctx.first_payment_date),
        "unit_line": ctx.unit.line,
        "summary_heading": ctx.unit.unit_type or loc.t("unit"),
        "summary": summary,
        "consultant": ctx.consultant,
        "buyers": ctx.buyers,
        "rows": rows,
        "schedule_total": schedule_total,
        "disclaimer": DISCLAIMER[loc.lang],
    }
    return ComposedDocument(
        html=env.get_template("client_offer.html").render(**values),
        header=env.get_template("client_offer_header.html").render(**values),
        footer=_footer(loc),
    )


# ── Reservation Form ─────────────────────────────────────────────────


@dataclass
class ReservationFormContext:
    """Everything the Reservation Form shows, already resolved."""

    language: str
    currency: str
    consultant: Consultant
    reservation_date: str
    day_of_week: str
    buyers: list[BuyerView]
    unit: UnitRef
    metadata: UnitMetadata
    breakdown: PricingBreakdown
    down_payment: DownPayment
    remaining_balance: Decimal


def _paid_on(loc: _Locale, date_str: str | None) -> str:
    return f"{loc.t('paid_on')} {date_str}" if date_str else ""


def financial_lines(loc: _Locale, ctx: ReservationFormContext) -> list[Line]:
    """Price, down-payment decomposition and remaining balance, in display order."""
    dp = ctx.down_payment
    b = ctx.breakdown
    lines = [
        Line(loc.t("rf_total_excl"), loc.money(b.total_excl), loc.words(b.total_excl)),
        Line(loc.t("rf_maintenance"), loc.money(b.maintenance), loc.words(b.maintenance)),
        Line(loc.t("rf_total_incl"), loc.money(b.total_incl), loc.words(b.total_incl)),
        Line(loc.t("dp_total"), loc.money(dp.total), loc.words(dp.total)),
        Line(
            loc.t("dp_preliminary"),
            loc.money(dp.preliminary),
            loc.words(dp.preliminary),
            _paid_on(loc, dp.preliminary_date),
        ),
    ]
    if dp.paid > ZERO:
        lines.append(Line(loc.t("dp_paid"), loc.money(dp.paid), loc.words(dp.paid), _paid_on(loc, dp.paid_date)))
    lines.append(Line(loc.t("dp_remaining"), loc.money(dp.remaining), loc.words(dp.remaining)))
    lines.append(
        Line(loc.t("remaining_balance"), loc.money(ctx.remaining_balance), loc.words(ctx.remaining_balance))
    )
    return lines


def compose_reservation_form(ctx: ReservationFormContext) -> ComposedDocument:
    loc = _Locale(ctx.language, ctx.currency)
    area_suffix = "م²" if loc.rtl else "m²"

    values = {
        **loc.base(),
        "title": loc.t("reservation_form"),
        "project": loc.t("project"),
        "reservation_date": ctx.reservation_date,
        "day_of_week": ctx.day_of_week,
        "consultant": ctx.consultant,
        "buyers": ctx.buyers,
        "unit": ctx.unit,
        "meta": ctx.metadata,
        "area_suffix": area_suffix,
        "lines": financial_lines(loc, ctx),
        "only": text("only", loc.lang),
        "terms": TERMS_AND_CONDITIONS[loc.lang],
        "signatures": SIGNATURE_ROLES[loc.lang],
    }
    return ComposedDocument(
        html=env.get_template("reservation_form.html").render(**values),
        header=env.get_template("reservation_form_header.html").render(**values),
        footer=_footer(loc),
    )
