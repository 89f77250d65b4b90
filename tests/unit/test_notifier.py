import json

import pytest

from app.features.charts.services.notifier import NullNotifier, RedisNotifier
from tests.conftest import NOW


class FakeRedis:
    def __init__(self, error: Exception | None = None):
        self.messages: list[tuple[str, str]] = []
        self.error = error

    async def publish(self, channel, message):
        if self.error:
            raise self.error
        self.messages.append((channel, message))
        return 1


@pytest.mark.asyncio
async def test_publish_sends_json_on_event_channel():
    client = FakeRedis()
    notifier = RedisNotifier(client)

    notifier.publish("charts:update:item", {"id": "s1", "newPos": 3})
    notifier.publish("trending:update:global", {"items": [], "at": NOW})
    await notifier.drain()

    assert [channel for channel, _ in client.messages] == [
        "charts:update:item",
        "trending:update:global",
    ]
    assert json.loads(client.messages[0][1]) == {"id": "s1", "newPos": 3}
    assert json.loads(client.messages[1][1])["at"] == str(NOW)
    assert notifier.pending == 0


@pytest.mark.asyncio
async def test_delivery_failure_is_swallowed():
    notifier = RedisNotifier(FakeRedis(error=ConnectionError("redis down")))

    notifier.publish("charts:update:category", {"category": "songs", "items": []})
    await notifier.drain()

    assert notifier.pending == 0


def test_publish_without_event_loop_is_dropped():
    client = FakeRedis()
    notifier = RedisNotifier(client)

    notifier.publish("charts:update:item", {"id": "s1", "newPos": 1})

    assert notifier.pending == 0
    assert client.messages == []


def test_null_notifier_accepts_events():
    NullNotifier().publish("charts:update:item", {"id": "s1", "newPos": 1})
