"""Tests for the reservation approval gate."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from uptown_docs.documents.gate import GATE_DENIED_MESSAGE, check_gate
from uptown_docs.errors import ForbiddenError
from uptown_docs.models.enums import GatePath


def _make_deal(fm_review_at: datetime | None = None) -> MagicMock:
    deal = MagicMock()
    deal.id = 42
    deal.fm_review_at = fm_review_at
    return deal


class TestCheckGate:
    @pytest.mark.asyncio()
    async def test_fm_review(self) -> None:
        deal = _make_deal(datetime(2024, 6, 1, tzinfo=UTC))
        with patch("uptown_docs.db.queries.is_unit_reserved", new_callable=AsyncMock) as reserved:
            path = await check_gate(AsyncMock(), deal, None, 7)
        assert path == GatePath.FM_REVIEW
        reserved.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_approved_reservation(self) -> None:
        with patch("uptown_docs.db.queries.is_unit_reserved", new_callable=AsyncMock) as reserved:
            path = await check_gate(AsyncMock(), _make_deal(), MagicMock(), 7)
        assert path == GatePath.APPROVED_RESERVATION
        reserved.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_reserved_unit(self) -> None:
        with patch("uptown_docs.db.queries.is_unit_reserved", new_callable=AsyncMock) as reserved:
            reserved.return_value = True
            path = await check_gate(AsyncMock(), _make_deal(), None, 7)
        assert path == GatePath.RESERVED_UNIT

    @pytest.mark.asyncio()
    async def test_denied(self) -> None:
        with patch("uptown_docs.db.queries.is_unit_reserved", new_callable=AsyncMock) as reserved:
            reserved.return_value = False
            with pytest.raises(ForbiddenError) as exc_info:
                await check_gate(AsyncMock(), _make_deal(), None, 7)
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == GATE_DENIED_MESSAGE
        assert GATE_DENIED_MESSAGE == "Financial Manager approval required before generating Reservation Form."

    @pytest.mark.asyncio()
    async def test_reserved_check_failure_denies(self) -> None:
        with patch("uptown_docs.db.queries.is_unit_reserved", new_callable=AsyncMock) as reserved:
            reserved.side_effect = OperationalError("SELECT", {}, Exception("down"))
            with pytest.raises(ForbiddenError):
                await check_gate(AsyncMock(), _make_deal(), None, 7)

    @pytest.mark.asyncio()
    async def test_no_unit_skips_reserved_check(self) -> None:
        with patch("uptown_docs.db.queries.is_unit_reserved", new_callable=AsyncMock) as reserved:
            with pytest.raises(ForbiddenError):
                await check_gate(AsyncMock(), _make_deal(), None, None)
        reserved.assert_not_awaited()
