"""Pydantic schemas for the conversation API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from .models import EscalationNotice, Message


class ChatMessage(BaseModel):
    id: str
    content: str
    sender: str  # "user" or "agent"
    created_at: datetime
    escalate: bool = False
    suggested_actions: list[str] = Field(default_factory=list)
    category: str | None = None

    @classmethod
    def from_message(cls, message: Message) -> ChatMessage:
        return cls(
            id=message.id,
            content=message.content,
            sender=message.sender,
            created_at=message.created_at,
            escalate=message.escalate,
            suggested_actions=list(message.suggested_actions),
            category=message.category,
        )


class ConversationDetail(BaseModel):
    id: str
    busy: bool
    messages: list[ChatMessage] = Field(default_factory=list)


class SubmitMessageRequest(BaseModel):
    text: str


class SuggestedActionRequest(BaseModel):
    action: str


class SubmissionResult(BaseModel):
    """Outcome of a submission; rejected input is not an error."""

    accepted: bool
    busy: bool


class EscalationPayload(BaseModel):
    message_id: str
    title: str
    description: str
    severity: str
    resources: list[str] = Field(default_factory=list)
    raised_at: datetime

    @classmethod
    def from_notice(cls, notice: EscalationNotice) -> EscalationPayload:
        return cls(
            message_id=notice.message_id,
            title=notice.title,
            description=notice.description,
            severity=notice.severity,
            resources=list(notice.resources),
            raised_at=notice.raised_at,
        )
