"""Intent classification and routing models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Intent(str, Enum):
    """What the user wants from a chat message."""

    CREATE_NEW = "create_new"
    EDIT_EXISTING = "edit_existing"
    ASK_QUESTION = "ask_question"
    GENERAL_CONVERSATION = "general_conversation"


class IntentResult(BaseModel):
    """Outcome of classifying one utterance."""

    intent: Intent
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str = ""
    extracted_entities: list[str] = Field(default_factory=list)


class Handler(str, Enum):
    """Handling strategy chosen by the router."""

    CREATION = "creation"
    EDITING = "editing"
    EXPLANATION = "explanation"
    CHAT = "chat"


class QuestionType(str, Enum):
    HOW_TO = "how_to"
    WHAT_IS = "what_is"
    WHY = "why"
    WHEN = "when"
    WHERE = "where"
    WHO = "who"
    GENERAL = "general"


class RouteContext(BaseModel):
    """Context handed to the prompt-construction layer alongside a route."""

    intent: Intent
    confidence: float
    extracted_entities: list[str] = Field(default_factory=list)
    has_document: bool = False
    can_edit: bool = False
    needs_clarification: bool = False
    needs_confirmation: bool = False
    question_type: QuestionType | None = None


class RouteResult(BaseModel):
    """Handling strategy descriptor."""

    handler: Handler
    system_prompt: str
    allow_mutation_tools: bool = False
    context: RouteContext
