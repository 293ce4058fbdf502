"""Pydantic schemas for the relay's public API contract."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictStr


class _InboundBody(BaseModel):
    """Inbound body base: immutable, unknown fields are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class MessageRequest(_InboundBody):
    """Input payload for POST /generate, /headline and /summarize."""

    message: StrictStr


class QuestionRequest(_InboundBody):
    """Input payload for POST /answer."""

    question: StrictStr
    context: StrictStr


class GenerationResponse(BaseModel):
    """Output payload for POST /generate and /headline."""

    generated_text: str


class AnswerResponse(BaseModel):
    """Output payload for POST /answer."""

    answer: str


class SummarizeResponse(BaseModel):
    """Output payload for POST /summarize."""

    summary_text: str
