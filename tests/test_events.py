"""Tests for the event pub/sub system."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from uptown_docs.events import (
    emit,
    emit_nowait,
    log_event,
    start_event_system,
    stop_event_system,
    subscribe,
    unsubscribe,
)
from uptown_docs.schemas.events import EventType, SystemEvent


def _event(event_type: EventType = EventType.DOCUMENT_GENERATED) -> SystemEvent:
    return SystemEvent(
        event_type=event_type,
        deal_id=42,
        actor_id=5,
        actor_role="property_consultant",
        data={"kind": "client_offer"},
        source_module="tests",
    )


class TestDispatch:
    @pytest.mark.asyncio()
    async def test_global_subscriber(self) -> None:
        received: list[SystemEvent] = []

        async def handler(event: SystemEvent) -> None:
            received.append(event)

        subscribe(handler)
        try:
            await emit_nowait(_event())
        finally:
            unsubscribe(handler)

        assert len(received) == 1
        assert received[0].deal_id == 42

    @pytest.mark.asyncio()
    async def test_typed_subscriber(self) -> None:
        received: list[EventType] = []

        async def handler(event: SystemEvent) -> None:
            received.append(event.event_type)

        subscribe(handler, EventType.RESERVATION_GATE_DENIED)
        try:
            await emit_nowait(_event())
            await emit_nowait(_event(EventType.RESERVATION_GATE_DENIED))
        finally:
            unsubscribe(handler)

        assert received == [EventType.RESERVATION_GATE_DENIED]

    @pytest.mark.asyncio()
    async def test_failing_handler_isolated(self) -> None:
        received: list[SystemEvent] = []

        async def broken(event: SystemEvent) -> None:
            raise ValueError("boom")

        async def healthy(event: SystemEvent) -> None:
            received.append(event)

        subscribe(broken)
        subscribe(healthy)
        try:
            await emit_nowait(_event())
        finally:
            unsubscribe(broken)
            unsubscribe(healthy)

        assert len(received) == 1

    @pytest.mark.asyncio()
    async def test_emit_inline_before_startup(self) -> None:
        received: list[SystemEvent] = []

        async def handler(event: SystemEvent) -> None:
            received.append(event)

        subscribe(handler)
        try:
            await emit(_event())
        finally:
            unsubscribe(handler)

        assert len(received) == 1

    @pytest.mark.asyncio()
    async def test_queued_events_delivered_on_stop(self) -> None:
        received: list[SystemEvent] = []

        async def handler(event: SystemEvent) -> None:
            received.append(event)

        subscribe(handler)
        try:
            await start_event_system()
            await emit(_event())
            await emit(_event(EventType.DOCUMENT_FAILED))
            await stop_event_system()
        finally:
            unsubscribe(handler)

        assert [e.event_type for e in received] == [EventType.DOCUMENT_GENERATED, EventType.DOCUMENT_FAILED]

    @pytest.mark.asyncio()
    async def test_log_subscriber(self) -> None:
        await log_event(_event())
        await log_event(_event(EventType.DOCUMENT_FAILED))


class TestSystemEvent:
    def test_frozen(self):
        event = _event()
        with pytest.raises(ValidationError):
            event.deal_id = 1

    def test_defaults(self):
        event = SystemEvent(event_type=EventType.SYSTEM_STARTUP)
        assert event.deal_id is None
        assert event.data == {}
        assert event.timestamp.tzinfo is not None
