"""Splitting of streamed AI output into prose and structured payloads."""

from __future__ import annotations

from coursecraft.streaming.session import StreamingSession
from coursecraft.streaming.splitter import (
    MINDMAP_TAG,
    PayloadRegistry,
    has_streaming_payload,
    split,
    validate_mindmap_node,
)

__all__ = [
    "MINDMAP_TAG",
    "PayloadRegistry",
    "StreamingSession",
    "has_streaming_payload",
    "split",
    "validate_mindmap_node",
]
