"""Streaming session: incremental splitting with listener notifications."""

from __future__ import annotations

from typing import Iterable

from coursecraft.events import StreamEvent, StreamEventKind, StreamListener
from coursecraft.logging import get_logger, log_exception
from coursecraft.models.stream import StreamParseResult
from coursecraft.streaming.splitter import PayloadRegistry, split

logger = get_logger(__name__)


class StreamingSession:
    """Accumulates streamed chunks of one AI response.

    Each :meth:`feed` re-splits the whole buffer and notifies listeners about what changed.
    :meth:`finish` only marks the result complete; it does not parse again.
    """

    def __init__(
        self, listeners: Iterable[StreamListener] = (), *, registry: PayloadRegistry | None = None
    ) -> None:
        self._listeners: list[StreamListener] = list(listeners)
        self._registry = registry if registry is not None else PayloadRegistry()
        self._buffer = ""
        self._seq = 0
        self._latest = StreamParseResult(display_content="")

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def latest(self) -> StreamParseResult:
        return self._latest

    def subscribe(self, listener: StreamListener) -> None:
        self._listeners.append(listener)

    def feed(self, chunk: str) -> StreamParseResult:
        """Append a chunk and return the split of the cumulative buffer."""

        if self._latest.is_complete:
            logger.warning("Chunk received after stream completion; ignoring")
            return self._latest

        self._buffer += chunk
        previous = self._latest
        current = split(self._buffer, self._registry)
        self._latest = current

        if current.display_content != previous.display_content:
            self._emit(StreamEventKind.DISPLAY_UPDATED, current.display_content)
        if current.is_streaming_payload and not previous.is_streaming_payload:
            self._emit(StreamEventKind.PAYLOAD_STREAMING, None)
        if current.payload is not None and current.payload != previous.payload:
            logger.info("Structured payload detected (type=%s)", current.payload.type)
            self._emit(StreamEventKind.PAYLOAD_DETECTED, current.payload.model_dump())
        return current

    def finish(self) -> StreamParseResult:
        """Mark the stream complete."""

        if not self._latest.is_complete:
            self._latest = self._latest.model_copy(update={"is_complete": True, "is_streaming_payload": False})
            self._emit(StreamEventKind.COMPLETED, self._latest.payload.model_dump() if self._latest.payload else None)
        return self._latest

    def _emit(self, kind: StreamEventKind, data: str | dict | list | None) -> None:
        self._seq += 1
        event = StreamEvent(seq=self._seq, kind=kind, data=data)
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                log_exception(logger, "Stream listener failed", kind=kind.value, seq=event.seq)
