"""Event model used by streaming sessions.

A :class:`~coursecraft.streaming.session.StreamingSession` notifies its listeners with these
events as the buffer grows, so hosts can update chat text and artifact panes without a
global event bus.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from pydantic import BaseModel, Field


class StreamEventKind(str, Enum):
    """What changed in the stream."""

    DISPLAY_UPDATED = "display_updated"
    PAYLOAD_STREAMING = "payload_streaming"
    PAYLOAD_DETECTED = "payload_detected"
    COMPLETED = "completed"


class StreamEvent(BaseModel):
    """A single notification from a streaming session."""

    seq: int = Field(ge=1)
    ts: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    kind: StreamEventKind
    data: str | dict | list | None = None


StreamListener = Callable[[StreamEvent], None]
