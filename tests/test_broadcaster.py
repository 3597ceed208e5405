import asyncio
import json

import pytest

from fakes import FakeWebSocket
from services.realtime.broadcaster import Broadcaster, encode_event


class BlockingWebSocket(FakeWebSocket):
    """A client whose sends never complete."""

    def __init__(self):
        super().__init__()
        self.release = asyncio.Event()

    async def send_text(self, message: str) -> None:
        await self.release.wait()
        self.sent.append(message)


async def test_broadcast_with_no_connections_is_a_noop():
    broadcaster = Broadcaster()

    assert broadcaster.broadcast({"type": "navigation_started", "session": {}}) == 0
    await broadcaster.flush()


async def test_every_connection_gets_the_same_message():
    broadcaster = Broadcaster()
    sockets = [FakeWebSocket() for _ in range(3)]
    for ws in sockets:
        broadcaster.register(ws)

    reached = broadcaster.broadcast({"type": "vision_analysis", "analysis": {"objects": []}})
    await broadcaster.flush()

    assert reached == 3
    assert all(len(ws.sent) == 1 for ws in sockets)
    assert len({ws.sent[0] for ws in sockets}) == 1
    assert json.loads(sockets[0].sent[0]) == {"type": "vision_analysis", "analysis": {"objects": []}}
    await broadcaster.close()


async def test_failed_connection_does_not_affect_others():
    broadcaster = Broadcaster()
    healthy = [FakeWebSocket(), FakeWebSocket()]
    broken = FakeWebSocket(fail=True)
    broadcaster.register(healthy[0])
    broadcaster.register(broken)
    broadcaster.register(healthy[1])

    broadcaster.broadcast({"type": "navigation_updated", "session": {"id": "s1"}})
    await broadcaster.flush()

    assert all(len(ws.sent) == 1 for ws in healthy)
    assert broadcaster.connection_count == 2

    broadcaster.broadcast({"type": "navigation_updated", "session": {"id": "s1"}})
    await broadcaster.flush()
    assert all(len(ws.sent) == 2 for ws in healthy)
    await broadcaster.close()


async def test_messages_arrive_in_broadcast_order():
    broadcaster = Broadcaster()
    ws = FakeWebSocket()
    broadcaster.register(ws)

    for step in range(5):
        broadcaster.broadcast({"type": "navigation_updated", "step": step})
    await broadcaster.flush()

    assert [json.loads(m)["step"] for m in ws.sent] == [0, 1, 2, 3, 4]
    await broadcaster.close()


async def test_unregistered_connection_receives_nothing_more():
    broadcaster = Broadcaster()
    ws = FakeWebSocket()
    broadcaster.register(ws)
    broadcaster.unregister(ws)
    broadcaster.unregister(ws)

    assert broadcaster.broadcast({"type": "navigation_started"}) == 0
    await broadcaster.flush()
    assert ws.sent == []


async def test_late_joiner_gets_no_replay():
    broadcaster = Broadcaster()
    early = FakeWebSocket()
    broadcaster.register(early)
    broadcaster.broadcast({"type": "navigation_started"})
    await broadcaster.flush()

    late = FakeWebSocket()
    broadcaster.register(late)
    await broadcaster.flush()

    assert len(early.sent) == 1
    assert late.sent == []
    await broadcaster.close()


async def test_slow_client_with_full_queue_is_dropped():
    broadcaster = Broadcaster(queue_size=1)
    slow = BlockingWebSocket()
    fast = FakeWebSocket()
    broadcaster.register(slow)
    broadcaster.register(fast)

    broadcaster.broadcast({"type": "audio_analysis", "n": 1})
    await asyncio.sleep(0)  # writer takes message 1 and blocks in send
    broadcaster.broadcast({"type": "audio_analysis", "n": 2})
    await asyncio.sleep(0)
    broadcaster.broadcast({"type": "audio_analysis", "n": 3})
    await asyncio.sleep(0)

    assert broadcaster.connection_count == 1
    assert slow.closed_with == 1013
    await broadcaster.flush()
    assert [json.loads(m)["n"] for m in fast.sent] == [1, 2, 3]
    await broadcaster.close()


def test_encode_event_requires_type():
    with pytest.raises(ValueError):
        encode_event({"session": {}})
