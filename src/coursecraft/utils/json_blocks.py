"""JSON block location utilities.

Helpers that locate JSON objects embedded in free text produced by an LLM: inside markdown
code fences, as bare brace-delimited objects, or as a fence that is still being streamed.
Every helper returns spans so callers can cut the located text out of the prose.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Iterator

from coursecraft.logging import get_logger

logger = get_logger(__name__)


_FENCE_PAIR_RE = re.compile(r"```(?:json)?(?P<body>.*?)```", re.DOTALL | re.IGNORECASE)
_OBJECT_START_RE = re.compile(r'\{\s*(?:"|\Z)')
_OPEN_FENCE_RE = re.compile(r"```(?:json)?\s*\{(?:(?!```).)*\Z", re.DOTALL | re.IGNORECASE)


@dataclass(frozen=True)
class JsonBlock:
    """A parsed JSON object and the span of text it was read from."""

    start: int
    end: int
    obj: dict[str, Any]
    fenced: bool = False


def _loads_object(text: str) -> dict[str, Any] | None:
    try:
        obj = json.loads(text)
    except ValueError:
        return None
    return obj if isinstance(obj, dict) else None


def iter_fenced_objects(text: str) -> Iterator[JsonBlock]:
    """Yield JSON objects found in triple-backtick fences, in order.

    Fences may be tagged ``json`` or untagged. Each opening fence is paired with the nearest
    closing one first, so a truncated body never swallows the block after it. Bodies that do
    not start with ``{`` or do not parse are skipped. The yielded span covers the whole fence
    including the backticks.
    """

    for m in _FENCE_PAIR_RE.finditer(text):
        body = m.group("body").strip()
        if not body.startswith("{"):
            continue
        obj = _loads_object(body)
        if obj is None:
            logger.debug("iter_fenced_objects: fenced block at %d is not a JSON object", m.start())
            continue
        yield JsonBlock(start=m.start(), end=m.end(), obj=obj, fenced=True)


def match_brace(text: str, start: int) -> int | None:
    """Return the index just past the ``}`` closing the object opened at ``start``.

    Braces inside JSON strings are ignored. Returns ``None`` when the object is not closed
    yet, which is the normal state of a payload that is still streaming.
    """

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i + 1
    return None


def iter_bare_objects(text: str, *, required_keys: tuple[str, ...] = ()) -> Iterator[JsonBlock]:
    """Yield balanced, parseable ``{...}`` objects found outside of any structure, left to right.

    Scanning stops at the first unclosed brace that opens a JSON object (``{`` then a quote, or
    nothing yet): anything after it belongs to an object that is still streaming, so nested
    objects inside it are not reported on their own. Other unclosed braces are prose and are
    skipped.

    Args:
        text: Text to scan.
        required_keys: Quoted key names (e.g. ``'"children"'``) that must appear in a candidate's
            text before it is parsed.
    """

    pos = text.find("{")
    while pos != -1:
        end = match_brace(text, pos)
        if end is None:
            if _OBJECT_START_RE.match(text, pos):
                return
            pos = text.find("{", pos + 1)
            continue
        candidate = text[pos:end]
        if all(key in candidate for key in required_keys):
            obj = _loads_object(candidate)
            if obj is not None:
                yield JsonBlock(start=pos, end=end, obj=obj)
            else:
                logger.debug("iter_bare_objects: candidate at %d did not parse", pos)
        pos = text.find("{", pos + 1)


def find_open_fence(text: str) -> int | None:
    """Return the start of a trailing JSON fence that has not been closed yet, if any."""

    m = _OPEN_FENCE_RE.search(text)
    return m.start() if m else None


def remove_span(text: str, start: int, end: int) -> str:
    """Cut ``text[start:end]`` out and trim the result."""

    return (text[:start] + text[end:]).strip()
