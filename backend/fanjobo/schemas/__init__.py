"""Pydantic request/response schemas for API endpoints."""

from fanjobo.schemas.bot import (
    EventResult,
    ReplyResponse,
    TextEventRequest,
    WizardSessionSummary,
)

__all__ = [
    "EventResult",
    "ReplyResponse",
    "TextEventRequest",
    "WizardSessionSummary",
]
