"""Streaming parse models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class StructuredPayload(BaseModel):
    """A structured object embedded in AI output.

    ``data`` is the raw parsed JSON object; it has passed the tag's shape check but has not
    been converted into a :class:`~coursecraft.models.mindmap.MindMapNode`.
    """

    type: str
    data: dict[str, Any]


class StreamParseResult(BaseModel):
    """Split of one (possibly partial) streamed buffer."""

    display_content: str
    payload: StructuredPayload | None = None
    is_complete: bool = False
    is_streaming_payload: bool = False
