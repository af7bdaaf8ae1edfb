"""Chat conversation API routes."""

from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import StreamingResponse

from ..config import get_settings
from ..conversations import Conversation, ConversationNotFoundError, ConversationService
from ..conversations import schemas
from ..limits import CHAT_RATE_LIMIT, CONVERSATION_CREATE_RATE_LIMIT, limiter
from ..sse_utils import conversation_event_stream

router = APIRouter(prefix="/api/conversations", tags=["conversations"])


@lru_cache(maxsize=1)
def get_conversation_service() -> ConversationService:
    return ConversationService(get_settings())


@contextmanager
def _conversation(service: ConversationService, conversation_id: str) -> Iterator[Conversation]:
    if len(conversation_id) > service.settings.conversation_id_max_length:
        raise HTTPException(status_code=400, detail="Invalid conversation id")
    try:
        yield service.get_conversation(conversation_id)
    except ConversationNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _detail(conversation: Conversation) -> schemas.ConversationDetail:
    return schemas.ConversationDetail(
        id=conversation.id,
        busy=conversation.is_busy(),
        messages=[schemas.ChatMessage.from_message(m) for m in conversation.transcript],
    )


def _submit(
    service: ConversationService, conversation_id: str, text: str
) -> schemas.SubmissionResult:
    if len(text) > service.settings.chat_max_message_length:
        raise HTTPException(status_code=400, detail="Message too long")
    with _conversation(service, conversation_id) as conversation:
        accepted = conversation.submit_user_text(text)
        return schemas.SubmissionResult(accepted=accepted, busy=conversation.is_busy())


@router.post("", response_model=schemas.ConversationDetail, status_code=status.HTTP_201_CREATED)
@limiter.limit(CONVERSATION_CREATE_RATE_LIMIT)
async def create_conversation(
    request: Request,
    service: ConversationService = Depends(get_conversation_service),
) -> schemas.ConversationDetail:
    """Start a conversation; it opens with the welcome message."""
    return _detail(service.create_conversation())


@router.get("/{conversation_id}", response_model=schemas.ConversationDetail)
async def get_conversation(
    conversation_id: str,
    service: ConversationService = Depends(get_conversation_service),
) -> schemas.ConversationDetail:
    with _conversation(service, conversation_id) as conversation:
        return _detail(conversation)


@router.post(
    "/{conversation_id}/messages",
    response_model=schemas.SubmissionResult,
    status_code=status.HTTP_202_ACCEPTED,
)
@limiter.limit(CHAT_RATE_LIMIT)
async def submit_message(
    request: Request,
    conversation_id: str,
    payload: schemas.SubmitMessageRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> schemas.SubmissionResult:
    """Queue user text for a reply.

    Blank text or text sent while a reply is pending is dropped and reported
    as ``accepted: false``.
    """
    return _submit(service, conversation_id, payload.text)


@router.post(
    "/{conversation_id}/actions",
    response_model=schemas.SubmissionResult,
    status_code=status.HTTP_202_ACCEPTED,
)
@limiter.limit(CHAT_RATE_LIMIT)
async def click_suggested_action(
    request: Request,
    conversation_id: str,
    payload: schemas.SuggestedActionRequest,
    service: ConversationService = Depends(get_conversation_service),
) -> schemas.SubmissionResult:
    """Send a suggested action exactly as if the user had typed it."""
    return _submit(service, conversation_id, payload.action)


@router.get("/{conversation_id}/events")
async def conversation_events(
    conversation_id: str,
    until_idle: bool = False,
    service: ConversationService = Depends(get_conversation_service),
):
    """Stream transcript messages and escalation notices as SSE."""
    with _conversation(service, conversation_id) as conversation:
        stream = conversation_event_stream(conversation, until_idle=until_idle)
    return StreamingResponse(
        stream,
        media_type="text/event-stream; charset=utf-8",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
