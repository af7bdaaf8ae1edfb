from companion.conversations import EscalationNotifier, Message
from companion.engine import Category, ResponseGenerator


def _message(category):
    template = ResponseGenerator().respond(category)
    return Message.from_template(template, category=category.value)


def test_notifier_fires_once_per_escalated_message():
    notifier = EscalationNotifier()
    received = []
    notifier.register(received.append)
    crisis = _message(Category.CRISIS)

    notice = notifier.notify(crisis)
    assert notice is not None
    assert notifier.notify(crisis) is None

    assert received == [notice]
    assert notice.title == "Crisis Support Available"
    assert notice.resources == crisis.suggested_actions
    assert "Text HOME to 741741" in notice.resources


def test_notifier_ignores_regular_messages():
    notifier = EscalationNotifier()
    received = []
    notifier.register(received.append)
    for category in (Category.ANXIETY, Category.SLEEP, Category.STRESS, Category.DEFAULT):
        assert notifier.notify(_message(category)) is None
    assert received == []


def test_unregister_and_failing_callbacks():
    notifier = EscalationNotifier()
    received = []

    def broken(_notice):
        raise RuntimeError("toast failed")

    notifier.register(broken)
    unregister = notifier.register(received.append)
    assert notifier.notify(_message(Category.CRISIS)) is not None
    assert len(received) == 1

    unregister()
    notifier.notify(_message(Category.CRISIS))
    assert len(received) == 1
