"""SystemEvent schema — the event record that flows through the document service.

Every generation attempt emits a SystemEvent. Subscribers (the logging
subscriber registered at startup, tests) consume these events asynchronously.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types emitted by the service."""

    # Documents
    DOCUMENT_GENERATED = "document.generated"
    DOCUMENT_FAILED = "document.failed"

    # Reservation approval gate
    RESERVATION_GATE_DENIED = "reservation.gate_denied"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class SystemEvent(BaseModel):
    """Core event of the document service.

    Immutable once created. Never persisted; the pipeline is read-only.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Context (optional — startup/shutdown carry no deal)
    deal_id: int | None = None
    actor_id: int | None = None
    actor_role: str | None = None

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}
