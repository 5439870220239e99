"""
Unit tests for the ordered event channel.
"""

import asyncio

import pytest

from recorder_app.events import EventChannel


class TestEventChannel:
    @pytest.mark.asyncio
    async def test_delivers_in_emission_order(self):
        channel = EventChannel()
        received = []
        channel.on("event", received.append)

        for i in range(20):
            channel.emit("event", i)
        await channel.drain()

        assert received == list(range(20))

    @pytest.mark.asyncio
    async def test_every_listener_receives_every_payload(self):
        channel = EventChannel()
        first, second = [], []
        channel.on("event", first.append)
        channel.on("event", second.append)

        channel.emit("event", "a")
        channel.emit("event", "b")
        await channel.drain()

        assert first == ["a", "b"]
        assert second == ["a", "b"]

    @pytest.mark.asyncio
    async def test_emit_is_asynchronous(self):
        channel = EventChannel()
        received = []
        channel.on("event", received.append)

        assert channel.emit("event", 1) is True
        assert received == []

        await channel.drain()
        assert received == [1]

    @pytest.mark.asyncio
    async def test_emit_without_listeners_is_dropped(self):
        channel = EventChannel()
        assert channel.emit("event", "lost") is False

        received = []
        channel.on("event", received.append)
        await channel.drain()
        assert received == []

    @pytest.mark.asyncio
    async def test_coroutine_listeners_are_awaited_in_order(self):
        channel = EventChannel()
        received = []

        async def slow(value):
            await asyncio.sleep(0.01 if value == 0 else 0)
            received.append(value)

        channel.on("event", slow)
        channel.emit("event", 0)
        channel.emit("event", 1)
        await channel.drain()

        assert received == [0, 1]

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_stop_delivery(self):
        channel = EventChannel()
        received = []

        def broken(_):
            raise RuntimeError("listener exploded")

        channel.on("event", broken)
        channel.on("event", received.append)
        channel.emit("event", "x")
        channel.emit("event", "y")
        await channel.drain()

        assert received == ["x", "y"]

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        channel = EventChannel()
        received = []
        unsubscribe = channel.on("event", received.append)
        assert channel.listener_count("event") == 1

        unsubscribe()
        assert channel.listener_count("event") == 0
        assert channel.off("event", received.append) is False

    @pytest.mark.asyncio
    async def test_once(self):
        channel = EventChannel()
        received = []
        channel.once("close", lambda: received.append("closed"))

        channel.emit("close")
        await channel.drain()
        assert channel.emit("close") is False
        assert received == ["closed"]

    @pytest.mark.asyncio
    async def test_aclose_flushes_and_clears(self):
        channel = EventChannel()
        received = []
        channel.on("event", received.append)

        channel.emit("event", 1)
        channel.emit("event", 2)
        await channel.aclose()

        assert received == [1, 2]
        assert channel.listener_count("event") == 0
        assert channel.emit("event", 3) is False

    @pytest.mark.asyncio
    async def test_aclose_twice(self):
        channel = EventChannel()
        await channel.aclose()
        await channel.aclose()

    @pytest.mark.asyncio
    async def test_aclose_from_listener_does_not_wait_on_itself(self):
        channel = EventChannel()
        received = []

        async def closing_listener(value):
            received.append(value)
            await channel.aclose()

        channel.on("event", closing_listener)
        channel.on("event", received.append)
        channel.emit("event", 1)
        channel.emit("event", 2)

        await asyncio.wait_for(channel.drain(), timeout=2)

        assert received == [1, 1, 2, 2]
        assert channel.listener_count("event") == 0
        assert channel.emit("event", 3) is False

    @pytest.mark.asyncio
    async def test_in_delivery(self):
        channel = EventChannel()
        seen = []
        channel.on("event", lambda _: seen.append(channel.in_delivery()))

        channel.emit("event", None)
        await channel.drain()

        assert seen == [True]
        assert channel.in_delivery() is False
