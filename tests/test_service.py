"""End-to-end tests for Client Offer and Reservation Form generation.

Database queries are patched at `uptown_docs.db.queries`, the renderer is a
fake that records the composed HTML, and events are captured instead of
dispatched.
"""

from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from uptown_docs.documents.gate import GATE_DENIED_MESSAGE
from uptown_docs.documents.renderer import DEFAULT_PAGE, PageParams
from uptown_docs.documents.service import document_filename, generate_client_offer, generate_reservation_form
from uptown_docs.errors import BadInputError, ForbiddenError, GenerationError, NotFoundError
from uptown_docs.models.enums import DocumentKind
from uptown_docs.schemas.documents import AuthUser, ClientOfferRequest, ReservationFormRequest
from uptown_docs.schemas.events import EventType


class FakeRenderer:
    """Records what it was asked to print."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.html = ""
        self.header = ""
        self.footer = ""
        self.page: PageParams | None = None

    async def render(self, html: str, header: str, footer: str, page: PageParams = DEFAULT_PAGE) -> bytes:
        if self.fail:
            raise RuntimeError("browser crashed")
        self.html, self.header, self.footer, self.page = html, header, footer, page
        return b"%PDF-1.7 fake"


CONSULTANT = AuthUser(user_id=5, name="Sara Adel", email="sara@uptown.test", role="property_consultant")
MANAGER = AuthUser(user_id=8, name="Omar Fathy", email="omar@uptown.test", role="financial_manager")

BREAKDOWN = {"base": 1_000_000, "garden": 50_000, "roof": 0, "storage": 0, "garage": 0, "maintenance": 30_000}
ZEROS = {"base": 0, "garden": 0, "roof": 0, "storage": 0, "garage": 0, "maintenance": 0}

CALCULATOR = {
    "clientInfo": {"number_of_buyers": 1, "buyer_name": "Ahmed Ali", "nationality": "Egyptian"},
    "unitInfo": {"unit_id": 7, "unit_code": "B12-304", "unit_type": "Apartment", "unit_area": 120},
    "generatedPlan": {
        "downPaymentAmount": 200000,
        "schedule": [{"month": 0, "label": "Down Payment", "amount": 200000, "date": "2024-06-01"}],
    },
    "unitPricingBreakdown": BREAKDOWN,
}


def _make_deal(fm_review_at: datetime | None = None, calculator: dict | None = None) -> MagicMock:
    deal = MagicMock()
    deal.id = 42
    deal.fm_review_at = fm_review_at
    deal.details = {"calculator": calculator if calculator is not None else CALCULATOR}
    return deal


def _make_record(dp: dict | None = None) -> MagicMock:
    record = MagicMock()
    record.id = 11
    record.reservation_date = None
    record.preliminary_payment = None
    record.details = {"dp": dp} if dp is not None else {}
    return record


def _emitted(mock_emit: AsyncMock) -> list[EventType]:
    return [c.args[0].event_type for c in mock_emit.await_args_list]


@pytest.fixture
def mock_emit():
    with patch("uptown_docs.documents.service.emit", new_callable=AsyncMock) as mock:
        yield mock


@pytest.fixture
def mock_queries():
    """Patch every query used by the reservation pipeline."""
    with (
        patch("uptown_docs.db.queries.get_deal", new_callable=AsyncMock) as mock_deal,
        patch("uptown_docs.db.queries.get_approved_reservation_by_id", new_callable=AsyncMock) as mock_by_id,
        patch("uptown_docs.db.queries.get_approved_reservation_for_deal", new_callable=AsyncMock) as mock_for_deal,
        patch("uptown_docs.db.queries.is_unit_reserved", new_callable=AsyncMock) as mock_reserved,
        patch("uptown_docs.db.queries.get_unit_metadata", new_callable=AsyncMock) as mock_meta,
        patch("uptown_docs.db.queries.get_latest_model_pricing", new_callable=AsyncMock) as mock_pricing,
        patch("uptown_docs.db.queries.get_consultant_via_deal", new_callable=AsyncMock),
        patch("uptown_docs.db.queries.get_user_identity", new_callable=AsyncMock),
    ):
        mock_deal.return_value = _make_deal()
        mock_by_id.return_value = None
        mock_for_deal.return_value = None
        mock_reserved.return_value = False
        mock_meta.return_value = None
        mock_pricing.return_value = None
        yield {
            "deal": mock_deal,
            "by_id": mock_by_id,
            "for_deal": mock_for_deal,
            "reserved": mock_reserved,
            "meta": mock_meta,
            "pricing": mock_pricing,
        }


class TestDocumentFilename:
    def test_timestamped_name(self) -> None:
        moment = datetime(2024, 6, 1, 9, 5, 3, 123000, tzinfo=UTC)
        assert document_filename(DocumentKind.CLIENT_OFFER, moment) == "client_offer_2024-06-01T09-05-03-123Z.pdf"
        assert document_filename(DocumentKind.RESERVATION_FORM, moment).startswith("reservation_form_2024-06-01T")


class TestClientOffer:
    @pytest.mark.asyncio()
    async def test_english_with_caller_breakdown(self, mock_emit, mock_queries) -> None:
        fake = FakeRenderer()
        request = ClientOfferRequest(
            language="en",
            currency="EGP",
            unit_pricing_breakdown=BREAKDOWN,
            schedule=[{"month": 1, "label": "Down Payment", "amount": 200000, "date": "2024-06-01"}],
            offer_date="2024-06-01",
        )

        document = await generate_client_offer(AsyncMock(), CONSULTANT, request, fake)

        assert document.content == b"%PDF-1.7 fake"
        assert document.filename.startswith("client_offer_")
        assert document.filename.endswith("Z.pdf")
        assert "1,080,000.00 EGP" in fake.html
        assert "200,000.00 EGP" in fake.html
        assert "Two hundred thousand Egyptian Pounds" in fake.html
        assert "01-06-2024" in fake.header
        assert fake.page == DEFAULT_PAGE
        mock_queries["pricing"].assert_not_awaited()
        assert _emitted(mock_emit) == [EventType.DOCUMENT_GENERATED]
        assert mock_emit.await_args.args[0].data["pricing_source"] == "CallerPricing"

    @pytest.mark.asyncio()
    async def test_arabic_all_zero_breakdown(self, mock_emit, mock_queries) -> None:
        fake = FakeRenderer()
        request = ClientOfferRequest(
            language="ar",
            currency="EGP",
            unit_pricing_breakdown=ZEROS,
            schedule=[{"month": 1, "label": "Down Payment", "amount": 200000, "date": "2024-06-01"}],
            offer_date="2024-06-01",
        )

        await generate_client_offer(AsyncMock(), CONSULTANT, request, fake)

        assert 'class="unit-summary"' not in fake.html
        assert "دفعة التعاقد" in fake.html
        assert 'dir="rtl"' in fake.html

    @pytest.mark.asyncio()
    async def test_hydrated_from_deal(self, mock_emit, mock_queries) -> None:
        fake = FakeRenderer()
        await generate_client_offer(AsyncMock(), CONSULTANT, ClientOfferRequest(deal_id=42, language="en"), fake)

        assert "Ahmed Ali" in fake.html
        assert "1,080,000.00" in fake.html
        assert "B12-304 — Apartment" in fake.header
        mock_queries["pricing"].assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_schedule_total_from_snapshot(self, mock_emit, mock_queries) -> None:
        plan = {**CALCULATOR["generatedPlan"], "totals": {"totalNominal": 250000}}
        mock_queries["deal"].return_value = _make_deal(calculator={**CALCULATOR, "generatedPlan": plan})
        fake = FakeRenderer()

        await generate_client_offer(AsyncMock(), CONSULTANT, ClientOfferRequest(deal_id=42, language="en"), fake)

        assert "Schedule Total" in fake.html
        assert "250,000.00" in fake.html

    @pytest.mark.asyncio()
    async def test_model_pricing_fallback(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].return_value = _make_deal(
            calculator={**CALCULATOR, "unitPricingBreakdown": ZEROS}
        )
        row = MagicMock(
            price=Decimal("900000"),
            garden_price=Decimal("0"),
            roof_price=Decimal("0"),
            storage_price=Decimal("0"),
            garage_price=Decimal("0"),
            maintenance_price=Decimal("0"),
        )
        mock_queries["pricing"].return_value = row
        fake = FakeRenderer()

        await generate_client_offer(AsyncMock(), CONSULTANT, ClientOfferRequest(deal_id=42, language="en"), fake)

        mock_queries["pricing"].assert_awaited_once()
        assert "900,000.00" in fake.html

    @pytest.mark.asyncio()
    async def test_database_failure_wrapped(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(GenerationError) as exc_info:
            await generate_client_offer(AsyncMock(), CONSULTANT, ClientOfferRequest(deal_id=42), FakeRenderer())

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "Failed to generate Client Offer PDF"
        assert _emitted(mock_emit) == [EventType.DOCUMENT_FAILED]


class TestReservationForm:
    @pytest.mark.asyncio()
    async def test_gate_via_fm_review(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].return_value = _make_deal(fm_review_at=datetime(2024, 1, 1, tzinfo=UTC))
        fake = FakeRenderer()
        request = ReservationFormRequest(deal_id=42, language="ar", preliminary_payment_amount=50000)

        document = await generate_reservation_form(AsyncMock(), MANAGER, request, fake)

        assert document.filename.startswith("reservation_form_")
        assert "50,000.00 جم (" in fake.html
        assert "لاغير)" in fake.html
        assert "150,000.00 جم" in fake.html
        assert "880,000.00 جم" in fake.html
        mock_queries["reserved"].assert_not_awaited()
        event = mock_emit.await_args.args[0]
        assert event.event_type == EventType.DOCUMENT_GENERATED
        assert event.data["gate"] == "fm_review"
        assert event.data["dp_locked"] is False

    @pytest.mark.asyncio()
    async def test_gate_denied(self, mock_emit, mock_queries) -> None:
        fake = FakeRenderer()

        with pytest.raises(ForbiddenError) as exc_info:
            await generate_reservation_form(AsyncMock(), MANAGER, ReservationFormRequest(deal_id=42), fake)

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == GATE_DENIED_MESSAGE
        assert fake.html == ""
        assert _emitted(mock_emit) == [EventType.RESERVATION_GATE_DENIED]

    @pytest.mark.asyncio()
    async def test_form_of_another_deal_does_not_open_gate(self, mock_emit, mock_queries) -> None:
        other_deal_form = _make_record(dp={"total": 300000})
        other_deal_form.id = 99
        other_deal_form.details["deal_id"] = "777"
        mock_queries["by_id"].return_value = other_deal_form
        fake = FakeRenderer()
        request = ReservationFormRequest(deal_id=42, reservation_form_id=99)

        with pytest.raises(ForbiddenError) as exc_info:
            await generate_reservation_form(AsyncMock(), MANAGER, request, fake)

        assert exc_info.value.status_code == 403
        assert fake.html == ""
        mock_queries["by_id"].assert_awaited_once()
        mock_queries["for_deal"].assert_awaited_once()
        assert _emitted(mock_emit) == [EventType.RESERVATION_GATE_DENIED]

    @pytest.mark.asyncio()
    async def test_explicit_form_supplies_lock_once_gate_passes(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].return_value = _make_deal(fm_review_at=datetime(2024, 1, 1, tzinfo=UTC))
        mock_queries["by_id"].return_value = _make_record(
            dp={"total": 300000, "preliminary_amount": 20000, "paid_amount": 80000}
        )
        fake = FakeRenderer()
        request = ReservationFormRequest(deal_id=42, language="en", reservation_form_id=11)

        await generate_reservation_form(AsyncMock(), MANAGER, request, fake)

        assert "780,000.00 EGP" in fake.html
        event = mock_emit.await_args.args[0]
        assert event.data["gate"] == "fm_review"
        assert event.data["dp_locked"] is True

    @pytest.mark.asyncio()
    async def test_down_payment_locked_by_approved_record(self, mock_emit, mock_queries) -> None:
        mock_queries["for_deal"].return_value = _make_record(
            dp={
                "total": 300000,
                "preliminary_amount": 20000,
                "preliminary_date": "2024-05-01",
                "paid_amount": 80000,
                "paid_date": "2024-05-15",
            }
        )
        fake = FakeRenderer()
        request = ReservationFormRequest(deal_id=42, language="en", preliminary_payment_amount=9999)

        await generate_reservation_form(AsyncMock(), MANAGER, request, fake)

        assert "20,000.00 EGP" in fake.html
        assert "80,000.00 EGP" in fake.html
        assert "200,000.00 EGP" in fake.html
        assert "780,000.00 EGP" in fake.html
        assert "9,999.00" not in fake.html
        assert "Paid on 01/05/2024" in fake.html
        assert "Paid on 15/05/2024" in fake.html
        assert mock_emit.await_args.args[0].data["gate"] == "approved_reservation"

    @pytest.mark.asyncio()
    async def test_caller_reservation_date(self, mock_emit, mock_queries) -> None:
        mock_queries["reserved"].return_value = True
        fake = FakeRenderer()
        request = ReservationFormRequest(deal_id=42, language="en", reservation_form_date="15/07/2024")

        await generate_reservation_form(AsyncMock(), MANAGER, request, fake)

        assert "15/07/2024" in fake.html
        assert "15/07/2024" in fake.header
        assert "Monday" in fake.html
        assert mock_emit.await_args.args[0].data["gate"] == "reserved_unit"

    @pytest.mark.asyncio()
    async def test_language_defaults_to_arabic(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].return_value = _make_deal(fm_review_at=datetime(2024, 1, 1, tzinfo=UTC))
        fake = FakeRenderer()

        await generate_reservation_form(AsyncMock(), MANAGER, ReservationFormRequest(deal_id=42), fake)

        assert 'dir="rtl"' in fake.html
        assert "جم" in fake.html

    @pytest.mark.asyncio()
    async def test_currency_override(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].return_value = _make_deal(fm_review_at=datetime(2024, 1, 1, tzinfo=UTC))
        fake = FakeRenderer()
        request = ReservationFormRequest(deal_id=42, language="en", currency_override="USD")

        await generate_reservation_form(AsyncMock(), MANAGER, request, fake)

        assert "200,000.00 USD" in fake.html
        assert "US Dollars" in fake.html

    @pytest.mark.asyncio()
    @pytest.mark.parametrize("deal_id", [None, 0, -4, "abc", 1.5])
    async def test_bad_deal_id(self, deal_id, mock_emit, mock_queries) -> None:
        with pytest.raises(BadInputError) as exc_info:
            await generate_reservation_form(AsyncMock(), MANAGER, ReservationFormRequest(deal_id=deal_id))
        assert exc_info.value.status_code == 400
        mock_queries["deal"].assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_deal_not_found(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].return_value = None
        with pytest.raises(NotFoundError) as exc_info:
            await generate_reservation_form(AsyncMock(), MANAGER, ReservationFormRequest(deal_id=42), FakeRenderer())
        assert exc_info.value.message == "Deal not found"
        mock_emit.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_render_failure_wrapped(self, mock_emit, mock_queries) -> None:
        mock_queries["deal"].return_value = _make_deal(fm_review_at=datetime(2024, 1, 1, tzinfo=UTC))

        with pytest.raises(GenerationError) as exc_info:
            await generate_reservation_form(
                AsyncMock(), MANAGER, ReservationFormRequest(deal_id=42), FakeRenderer(fail=True)
            )

        assert exc_info.value.message == "Failed to generate Reservation Form PDF"
        assert "browser crashed" not in exc_info.value.message
        assert _emitted(mock_emit) == [EventType.DOCUMENT_FAILED]
