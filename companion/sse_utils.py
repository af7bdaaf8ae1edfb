"""SSE helpers for conversation event streaming.

Event format produced:
- "event: message" with the JSON of each appended transcript entry
- "event: escalation" with the JSON of each crisis notice
- ": keep-alive" comments while nothing happens
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator

from .conversations import Conversation, EscalationNotice, Message, schemas

KEEPALIVE_SECONDS = 15.0


def format_event(event: str, data: Any) -> str:
    """Render one SSE frame; ``data`` is JSON encoded on a single line."""

    payload = json.dumps(data, ensure_ascii=False, default=str)
    return f"event: {event}\ndata: {payload}\n\n"


def _message_data(message: Message) -> dict[str, Any]:
    return schemas.ChatMessage.from_message(message).model_dump(mode="json")


def _notice_data(notice: EscalationNotice) -> dict[str, Any]:
    return schemas.EscalationPayload.from_notice(notice).model_dump(mode="json")


async def conversation_event_stream(
    conversation: Conversation,
    *,
    until_idle: bool = False,
    keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """Replay the transcript and its notices, then follow new events.

    Each replayed escalation follows the message that raised it, so a client
    that connects after a crisis reply still sees the notice.

    With ``until_idle`` the stream ends as soon as no reply is pending and
    every queued event has been sent.
    """

    queue: asyncio.Queue[tuple[str, dict[str, Any]]] = asyncio.Queue()
    snapshot = conversation.transcript
    sent = len(snapshot)
    notices = {notice.message_id: notice for notice in conversation.notices}

    def _on_transcript(messages: tuple[Message, ...]) -> None:
        nonlocal sent
        for message in messages[sent:]:
            queue.put_nowait(("message", _message_data(message)))
        sent = len(messages)

    def _on_escalation(notice: EscalationNotice) -> None:
        if notice.message_id in notices:
            return
        notices[notice.message_id] = notice
        queue.put_nowait(("escalation", _notice_data(notice)))

    unsubscribe = conversation.subscribe(_on_transcript)
    unregister = conversation.on_escalation(_on_escalation)
    try:
        for message in snapshot:
            yield format_event("message", _message_data(message))
            if message.id in notices:
                yield format_event("escalation", _notice_data(notices[message.id]))
        while True:
            if until_idle and not conversation.is_busy() and queue.empty():
                break
            try:
                event, data = await asyncio.wait_for(queue.get(), timeout=keepalive)
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield format_event(event, data)
        yield format_event("done", {"busy": conversation.is_busy()})
    finally:
        unsubscribe()
        unregister()
