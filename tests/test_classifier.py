"""Tests for the keyword intent classifier."""

from __future__ import annotations

import pytest

from coursecraft.models.intent import Intent, IntentResult
from coursecraft.nlu.classifier import classify, confidence_band, is_confident


def test_edit_with_document() -> None:
    """It should treat an editing verb with an open document as a confident edit."""

    result = classify("change the title", True)

    assert result.intent is Intent.EDIT_EXISTING
    assert result.confidence == 0.9
    assert "change" in result.extracted_entities


def test_edit_takes_precedence_over_question() -> None:
    """It should prefer editing over question words when a document is open."""

    result = classify("how do I change the title?", True)
    assert result.intent is Intent.EDIT_EXISTING
    assert result.confidence == 0.9


def test_create_with_domain_terms() -> None:
    """It should report creation with learning context at high confidence."""

    result = classify("create a new learning module about recursion", False)

    assert result.intent is Intent.CREATE_NEW
    assert result.confidence == 0.9
    assert result.extracted_entities == ["module", "learning"]


def test_create_without_domain_terms() -> None:
    """It should lower confidence for creation without learning context."""

    result = classify("make something cool", False)

    assert result.intent is Intent.CREATE_NEW
    assert result.confidence == 0.7
    assert result.extracted_entities == ["make"]


def test_edit_without_document() -> None:
    """It should report a low-confidence edit when nothing is open."""

    result = classify("delete the intro", False)

    assert result.intent is Intent.EDIT_EXISTING
    assert result.confidence == 0.4


def test_question_words() -> None:
    """It should classify question words as a question."""

    result = classify("how do loops work", False)

    assert result.intent is Intent.ASK_QUESTION
    assert result.confidence == 0.8
    assert result.extracted_entities == ["how"]


def test_question_mark() -> None:
    """It should fall back to the question mark."""

    result = classify("is this any good?", False)

    assert result.intent is Intent.ASK_QUESTION
    assert result.confidence == 0.9
    assert result.extracted_entities == []


def test_general_conversation() -> None:
    """It should default to general conversation."""

    result = classify("thanks a lot", True)

    assert result.intent is Intent.GENERAL_CONVERSATION
    assert result.confidence == 0.3


def test_keywords_match_at_word_start() -> None:
    """It should not find "set" inside "asset"."""

    assert classify("asset pipeline", True).intent is Intent.GENERAL_CONVERSATION
    assert classify("settings look fine", True).intent is Intent.EDIT_EXISTING


def test_case_insensitive() -> None:
    """It should ignore case."""

    assert classify("CHANGE THE TITLE", True).intent is Intent.EDIT_EXISTING


@pytest.mark.parametrize(
    "utterance",
    ["", "   ", "???", "create", "update everything now", "what is a closure", "hello there"],
)
@pytest.mark.parametrize("has_document", [True, False])
def test_classify_is_total(utterance: str, has_document: bool) -> None:
    """It should always return a result with confidence in [0, 1]."""

    result = classify(utterance, has_document)
    assert isinstance(result, IntentResult)
    assert 0.0 <= result.confidence <= 1.0


def test_confidence_band_and_threshold() -> None:
    """It should place confidences in the high/medium/low bands."""

    assert confidence_band(0.9) == "high"
    assert confidence_band(0.8) == "high"
    assert confidence_band(0.7) == "medium"
    assert confidence_band(0.5) == "medium"
    assert confidence_band(0.3) == "low"
    assert confidence_band(0.7, high=0.6) == "high"
    assert is_confident(classify("thanks a lot", False)) is False
    assert is_confident(classify("make something cool", False)) is True
