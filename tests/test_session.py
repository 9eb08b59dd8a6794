"""End-to-end tests for chat sessions."""

from __future__ import annotations

import json

import pytest

from coursecraft.editing.session import ChatSession
from coursecraft.events import StreamEvent, StreamEventKind
from coursecraft.models.intent import Handler, Intent
from coursecraft.models.mindmap import Difficulty, MindMapNode
from coursecraft.models.stream import StructuredPayload
from coursecraft.streaming.splitter import PayloadRegistry
from coursecraft.tree.mutations import find_node


def test_creation_request_without_document() -> None:
    """It should route a creation request to the creation handler and change nothing."""

    session = ChatSession()
    turn = session.handle("create a new learning module about recursion")

    assert turn.classification.intent is Intent.CREATE_NEW
    assert turn.classification.confidence >= 0.7
    assert turn.route.handler is Handler.CREATION
    assert turn.route.allow_mutation_tools is False
    assert turn.outcome is None
    assert session.document is None


def test_edit_request_changes_only_target(course: MindMapNode) -> None:
    """It should apply an edit and leave every other node untouched."""

    session = ChatSession(course)
    turn = session.handle("set the difficulty of Loops to advanced")

    assert turn.classification.intent is Intent.EDIT_EXISTING
    assert turn.classification.confidence == 0.9
    assert turn.route.allow_mutation_tools is True
    assert turn.outcome is not None and turn.outcome.success

    expected = course.model_copy(deep=True)
    find_node(expected, "lesson-1").difficulty = Difficulty.ADVANCED
    assert session.document == expected
    assert turn.document == expected
    assert session.revision == 1
    assert session.turns == 1


def test_failed_edit_keeps_document(course: MindMapNode) -> None:
    """It should keep the current document when an edit fails."""

    session = ChatSession(course)
    turn = session.handle("delete the module Nope")

    assert turn.outcome is not None
    assert turn.outcome.success is False
    assert session.document == course
    assert session.revision == 0


def test_question_does_not_mutate(course: MindMapNode) -> None:
    """It should route questions to the explanation handler."""

    session = ChatSession(course)
    turn = session.handle("what is a closure?")

    assert turn.route.handler is Handler.EXPLANATION
    assert turn.outcome is None
    assert session.document == course


def test_stream_then_edit() -> None:
    """It should adopt a streamed course and then edit it."""

    session = ChatSession()
    detected: list[StreamEvent] = []
    stream = session.open_stream([lambda e: detected.append(e) if e.kind is StreamEventKind.PAYLOAD_DETECTED else None])

    doc = {
        "id": "root",
        "title": "Python",
        "children": [{"id": "m1", "title": "Intro To Python", "level": 1, "estimatedHours": 2}],
    }
    text = "Here is your plan.\n```json\n" + json.dumps({"type": "mindmap", "data": doc}) + "\n```"
    for start in range(0, len(text), 7):
        stream.feed(text[start : start + 7])
    result = stream.finish()

    assert len(detected) == 1
    assert result.display_content == "Here is your plan."
    document = session.accept_payload(result.payload)
    assert document.title == "Python"

    turn = session.handle("add the skill Loops to intro to python")
    assert turn.outcome is not None and turn.outcome.success
    assert find_node(session.document, "m1").skills == ["Loops"]
    assert session.snapshot() == {
        "session_id": session.session_id,
        "revision": 2,
        "title": "Python",
        "node_count": 2,
        "total_hours": 2.0,
    }


def test_accept_payload_rejects_other_types() -> None:
    """It should only adopt mindmap payloads."""

    session = ChatSession()
    with pytest.raises(ValueError):
        session.accept_payload(StructuredPayload(type="quiz", data={"questions": []}))
    assert session.document is None


def test_snapshot_without_document() -> None:
    """It should summarize an empty session."""

    session = ChatSession(session_id="s-1")
    assert session.snapshot() == {"session_id": "s-1", "revision": 0, "title": None, "node_count": 0, "total_hours": 0.0}


def test_open_stream_with_registry() -> None:
    """It should pass the payload registry to the streaming session it opens."""

    registry = PayloadRegistry({"quiz": lambda data: "questions" in data})
    stream = ChatSession().open_stream(registry=registry)
    stream.feed('```json\n{"type": "quiz", "data": {"questions": []}}\n```')

    result = stream.finish()
    assert result.payload == StructuredPayload(type="quiz", data={"questions": []})
