"""Registry bounds for :class:`companion.conversations.ConversationService`."""

import asyncio

import pytest

from companion.config import EngineSettings
from companion.conversations import ConversationNotFoundError, ConversationService


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _service(clock=None, **overrides):
    settings = EngineSettings(min_delay_seconds=0, max_delay_seconds=0, **overrides)
    return ConversationService(settings, clock=clock or FakeClock())


def test_oldest_conversation_is_evicted_at_capacity():
    service = _service(max_conversations=2)
    first = service.create_conversation()
    second = service.create_conversation()
    third = service.create_conversation()

    with pytest.raises(ConversationNotFoundError):
        service.get_conversation(first.id)
    assert service.list_conversations() == [second, third]


def test_recent_use_protects_a_conversation():
    service = _service(max_conversations=2)
    first = service.create_conversation()
    second = service.create_conversation()
    service.get_conversation(first.id)
    service.create_conversation()

    assert service.get_conversation(first.id) is first
    with pytest.raises(ConversationNotFoundError):
        service.get_conversation(second.id)


def test_idle_conversations_expire():
    clock = FakeClock()
    service = _service(clock, conversation_idle_ttl_seconds=60)
    stale = service.create_conversation()
    clock.now = 30
    fresh = service.create_conversation()
    clock.now = 61

    with pytest.raises(ConversationNotFoundError):
        service.get_conversation(stale.id)
    assert service.get_conversation(fresh.id) is fresh


def test_busy_conversation_is_evicted_last():
    async def scenario():
        service = _service(max_conversations=2)
        busy = service.create_conversation()
        idle = service.create_conversation()
        busy.submit_user_text("I feel tired")
        service.create_conversation()
        survivors = service.list_conversations()
        await busy.wait_idle()
        return busy, idle, survivors

    busy, idle, survivors = asyncio.run(scenario())
    assert busy in survivors
    assert idle not in survivors


def test_conversations_share_one_classifier():
    service = _service()
    a = service.create_conversation()
    b = service.create_conversation()
    assert a._classifier is b._classifier
    assert a._generator is b._generator
