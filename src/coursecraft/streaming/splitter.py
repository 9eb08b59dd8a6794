"""Streaming content splitter.

Separates conversational prose from a structured payload embedded in AI output. The splitter is
called on the cumulative buffer after every streamed chunk, so it is pure, idempotent and
never raises: JSON that does not parse yet is simply "not a payload yet".
"""

from __future__ import annotations

import re
from typing import Any, Callable, Mapping

from coursecraft.logging import get_logger
from coursecraft.models.stream import StreamParseResult, StructuredPayload
from coursecraft.utils.json_blocks import (
    JsonBlock,
    find_open_fence,
    iter_bare_objects,
    iter_fenced_objects,
    remove_span,
)

logger = get_logger(__name__)

MINDMAP_TAG = "mindmap"

PayloadValidator = Callable[[Any], bool]

_FENCE_OPEN_BEFORE_RE = re.compile(r"```(?:json)?\s*\Z", re.IGNORECASE)
_FENCE_CLOSE_AFTER_RE = re.compile(r"\s*`{1,3}")


def validate_mindmap_node(node: Any) -> bool:
    """Check a raw mindmap node recursively.

    Every node needs a non-empty ``id`` and ``title``; ``children``, when present, must be a list
    of valid nodes.
    """

    if not isinstance(node, dict):
        return False
    if not node.get("id") or not node.get("title"):
        return False
    children = node.get("children")
    if children is None:
        return True
    if not isinstance(children, list):
        return False
    return all(validate_mindmap_node(child) for child in children)


class PayloadRegistry:
    """Payload tags the splitter recognizes, each with a validator for its ``data`` object.

    Every registry starts with the ``mindmap`` tag. Registries are plain values owned by the
    caller; :func:`split` builds a default one when none is given.
    """

    def __init__(self, validators: Mapping[str, PayloadValidator] | None = None) -> None:
        self._validators: dict[str, PayloadValidator] = {MINDMAP_TAG: validate_mindmap_node}
        if validators:
            self._validators.update(validators)

    def register(self, tag: str, validator: PayloadValidator) -> None:
        """Recognize another ``{"type": tag, "data": ...}`` payload.

        Args:
            tag: Value of the payload's ``type`` field.
            validator: Returns True when the raw ``data`` object is well formed.
        """

        self._validators[tag] = validator

    def get(self, tag: str) -> PayloadValidator | None:
        return self._validators.get(tag)

    def tags(self) -> list[str]:
        return list(self._validators)

    def __contains__(self, tag: object) -> bool:
        return tag in self._validators


def _as_payload(obj: dict[str, Any], registry: PayloadRegistry) -> StructuredPayload | None:
    tag = obj.get("type")
    if isinstance(tag, str) and tag in registry and isinstance(obj.get("data"), dict):
        return StructuredPayload(type=tag, data=obj["data"])
    if "title" in obj and "children" in obj:
        return StructuredPayload(type=MINDMAP_TAG, data=obj)
    return None


def _first_candidate(text: str, registry: PayloadRegistry) -> tuple[JsonBlock, StructuredPayload] | None:
    for block in iter_fenced_objects(text):
        payload = _as_payload(block.obj, registry)
        if payload is not None:
            return block, payload

    for block in iter_bare_objects(text, required_keys=('"children"', '"title"')):
        payload = _as_payload(block.obj, registry)
        if payload is not None:
            return block, payload

    for block in iter_bare_objects(text, required_keys=('"type"', '"data"')):
        payload = _as_payload(block.obj, registry)
        if payload is not None:
            return block, payload
    return None


def _fence_bounds(text: str, block: JsonBlock) -> tuple[int, int]:
    # a bare object can close before the fence around it does
    start, end = block.start, block.end
    if block.fenced:
        return start, end
    opening = _FENCE_OPEN_BEFORE_RE.search(text, 0, start)
    if opening is not None:
        start = opening.start()
        closing = _FENCE_CLOSE_AFTER_RE.match(text, end)
        if closing is not None:
            end = closing.end()
    return start, end


def split(raw_text: str, registry: PayloadRegistry | None = None) -> StreamParseResult:
    """Split a (possibly partial) streamed buffer into display text and a payload.

    Args:
        raw_text: Cumulative streamed text.
        registry: Recognized payload tags. Defaults to a registry holding only ``mindmap``.

    Returns:
        StreamParseResult with the payload cut out of ``display_content``. When the located
        payload fails validation it is dropped and the raw text is displayed unchanged.
        ``is_complete`` is always False here; streaming sessions set it on finish.
    """

    text = raw_text or ""
    registry = registry if registry is not None else PayloadRegistry()
    found = _first_candidate(text, registry)

    if found is None:
        open_at = find_open_fence(text)
        if open_at is not None:
            return StreamParseResult(display_content=text[:open_at].strip(), is_streaming_payload=True)
        return StreamParseResult(display_content=text.strip())

    block, payload = found
    validator = registry.get(payload.type) or validate_mindmap_node
    if not validator(payload.data):
        logger.debug("split: discarding %s payload that failed validation", payload.type)
        return StreamParseResult(display_content=text.strip())

    start, end = _fence_bounds(text, block)
    return StreamParseResult(display_content=remove_span(text, start, end), payload=payload)


def has_streaming_payload(raw_text: str, registry: PayloadRegistry | None = None) -> bool:
    """True when the buffer holds a payload, complete or still streaming.

    Chat views use this to hide JSON from the message while it is being generated.
    """

    result = split(raw_text, registry)
    return result.payload is not None or result.is_streaming_payload
