"""Document lifecycle events.

Generation outcomes (document generated, generation failed, reservation gate
denied) are published as SystemEvents. Handlers register per event type, or
for every type, and run concurrently; one failing handler never affects the
others or the request that emitted the event.

While the service is running, `emit` only enqueues and a background worker
delivers. Before startup (scripts, tests) `emit` delivers inline.

    subscribe(log_event)                                  # every event
    subscribe(notify_finance, EventType.RESERVATION_GATE_DENIED)
    await emit(SystemEvent(event_type=EventType.DOCUMENT_GENERATED, deal_id=42))
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Callable, Coroutine
from typing import Any

import structlog

from uptown_docs.schemas.events import EventType, SystemEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[SystemEvent], Coroutine[Any, Any, None]]

# ── Routing table ────────────────────────────────────────────────────

# None routes to handlers that want every event type.
_routes: defaultdict[EventType | None, list[EventHandler]] = defaultdict(list)
_queue: asyncio.Queue[SystemEvent] | None = None
_worker: asyncio.Task[None] | None = None


def subscribe(handler: EventHandler, *event_types: EventType) -> None:
    """Route `event_types` (all types when none are given) to `handler`."""
    for key in event_types or (None,):
        if handler not in _routes[key]:
            _routes[key].append(handler)
    logger.info(
        "Subscribed %s to %s",
        handler.__name__,
        ", ".join(t.value for t in event_types) if event_types else "all events",
    )


def unsubscribe(handler: EventHandler) -> None:
    for handlers in _routes.values():
        if handler in handlers:
            handlers.remove(handler)


def _handlers_for(event: SystemEvent) -> list[EventHandler]:
    return [*_routes.get(None, ()), *_routes.get(event.event_type, ())]


async def _deliver(event: SystemEvent) -> None:
    handlers = _handlers_for(event)
    if not handlers:
        return
    outcomes = await asyncio.gather(*(h(event) for h in handlers), return_exceptions=True)
    for handler, outcome in zip(handlers, outcomes, strict=True):
        if isinstance(outcome, Exception):
            logger.error(
                "Handler %s failed for %s (deal=%s)",
                handler.__name__,
                event.event_type.value,
                event.deal_id,
                exc_info=outcome,
            )


# ── Publishing ───────────────────────────────────────────────────────


async def emit(event: SystemEvent) -> None:
    """Publish an event; queued for the worker once the event system is started."""
    if _queue is None:
        await _deliver(event)
        return
    await _queue.put(event)
    logger.debug("Queued %s (deal=%s)", event.event_type.value, event.deal_id)


async def emit_nowait(event: SystemEvent) -> None:
    """Deliver immediately, bypassing the queue (startup and shutdown events)."""
    await _deliver(event)


# ── Logging subscriber ───────────────────────────────────────────────

_event_log = structlog.get_logger("uptown_docs.events")

_WARNING_EVENTS = frozenset({EventType.DOCUMENT_FAILED, EventType.RESERVATION_GATE_DENIED})


async def log_event(event: SystemEvent) -> None:
    """Write every event to the structured log."""
    bound = _event_log.bind(
        event_id=str(event.id),
        deal_id=event.deal_id,
        actor_id=event.actor_id,
        actor_role=event.actor_role,
        source=event.source_module,
    )
    if event.event_type in _WARNING_EVENTS:
        bound.warning(event.event_type.value, **event.data)
    else:
        bound.info(event.event_type.value, **event.data)


# ── Worker lifecycle ─────────────────────────────────────────────────


async def _drain(queue: asyncio.Queue[SystemEvent]) -> None:
    while True:
        event = await queue.get()
        try:
            await _deliver(event)
        finally:
            queue.task_done()


async def start_event_system() -> None:
    """Create the queue and start the delivery worker (FastAPI lifespan startup)."""
    global _queue, _worker
    _queue = asyncio.Queue()
    _worker = asyncio.create_task(_drain(_queue), name="document-events")
    logger.info("Event system started (%d handlers)", sum(len(h) for h in _routes.values()))


async def stop_event_system() -> None:
    """Deliver what is still queued, then stop the worker (FastAPI lifespan shutdown)."""
    global _queue, _worker
    queue, worker = _queue, _worker
    _queue, _worker = None, None

    if queue is not None:
        await queue.join()
    if worker is not None:
        worker.cancel()
        try:
            await worker
        except asyncio.CancelledError:
            pass
    logger.info("Event system stopped")
