"""Chat session state and per-message handling.

A session holds the course currently being edited. Hosts create one per conversation and pass
every submitted message to :meth:`ChatSession.handle`; nothing here is global.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from coursecraft.config import Settings
from coursecraft.editing.executor import CommandExecutor
from coursecraft.events import StreamListener
from coursecraft.logging import get_logger, session_context, set_step
from coursecraft.models.command import CommandOutcome
from coursecraft.models.intent import IntentResult, RouteResult
from coursecraft.models.mindmap import MindMapNode
from coursecraft.models.stream import StructuredPayload
from coursecraft.nlu.classifier import classify
from coursecraft.nlu.router import route
from coursecraft.streaming.session import StreamingSession
from coursecraft.streaming.splitter import MINDMAP_TAG, PayloadRegistry
from coursecraft.tree.stats import count_nodes, total_hours
from coursecraft.utils.ids import new_session_id

logger = get_logger(__name__)


@dataclass(frozen=True)
class TurnResult:
    """What happened for one user message."""

    classification: IntentResult
    route: RouteResult
    outcome: CommandOutcome | None
    document: MindMapNode | None


class ChatSession:
    """Per-conversation state: the open course and the pipeline that edits it."""

    def __init__(
        self,
        document: MindMapNode | None = None,
        *,
        settings: Settings | None = None,
        executor: CommandExecutor | None = None,
        session_id: str | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._executor = executor or CommandExecutor(settings=self._settings)
        self._document = document
        self.session_id = session_id or new_session_id()
        self.revision = 0
        self.turns = 0

    @property
    def document(self) -> MindMapNode | None:
        return self._document

    def handle(self, utterance: str) -> TurnResult:
        """Classify, route and, when editing is allowed, apply one user message.

        Args:
            utterance: The submitted chat message.

        Returns:
            TurnResult. ``outcome`` is None unless the route enabled mutation tools.
        """

        self.turns += 1
        with session_context(session_id=self.session_id, turn=self.turns, step="classify"):
            classification = classify(utterance, self._document is not None)

            set_step("route")
            decision = route(
                classification,
                self._document,
                high=self._settings.high_confidence,
                medium=self._settings.medium_confidence,
            )
            logger.info(
                "Intent %s (%.2f) -> %s",
                classification.intent.value,
                classification.confidence,
                decision.handler.value,
            )

            outcome: CommandOutcome | None = None
            if decision.allow_mutation_tools:
                set_step("mutate")
                outcome = self._executor.execute(utterance, self._document)
                if outcome.success and outcome.document is not None:
                    self._document = outcome.document
                    self.revision += 1

            return TurnResult(
                classification=classification,
                route=decision,
                outcome=outcome,
                document=self._document,
            )

    def open_stream(
        self, listeners: Iterable[StreamListener] = (), *, registry: PayloadRegistry | None = None
    ) -> StreamingSession:
        """Start splitting a new AI response for this conversation."""

        return StreamingSession(listeners, registry=registry)

    def accept_payload(self, payload: StructuredPayload) -> MindMapNode:
        """Adopt a generated course from a streamed payload as the open document.

        Raises:
            ValueError: The payload is not a mindmap or does not form a valid tree.
        """

        if payload.type != MINDMAP_TAG:
            raise ValueError(f"Unsupported payload type {payload.type!r}")
        document = MindMapNode.from_payload(payload.data)
        self._document = document
        self.revision += 1
        logger.info("Adopted generated course %r", document.title)
        return document

    def snapshot(self) -> dict[str, str | int | float | None]:
        doc = self._document
        return {
            "session_id": self.session_id,
            "revision": self.revision,
            "title": doc.title if doc is not None else None,
            "node_count": count_nodes(doc) if doc is not None else 0,
            "total_hours": total_hours(doc) if doc is not None else 0.0,
        }
