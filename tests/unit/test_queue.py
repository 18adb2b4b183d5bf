"""Unit tests for per-conversation lanes."""

import asyncio

import pytest

from bot_lanes.services.queue import ConversationQueueManager


class TestConversationQueueManager:
    """Tests for ConversationQueueManager."""

    @pytest.mark.asyncio
    async def test_same_conversation_runs_in_submission_order(self) -> None:
        """Later work with lower latency still finishes after earlier work."""
        manager = ConversationQueueManager()
        finished: list[int] = []

        def job(index: int, latency: float):
            async def run() -> int:
                await asyncio.sleep(latency)
                finished.append(index)
                return index

            return run

        futures = [
            manager.enqueue("chat", job(i, latency))
            for i, latency in enumerate([0.05, 0.03, 0.01, 0.0])
        ]
        results = await asyncio.gather(*futures)

        assert finished == [0, 1, 2, 3]
        assert results == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_same_conversation_never_overlaps(self) -> None:
        manager = ConversationQueueManager()
        active = 0
        peak = 0

        async def run() -> None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

        await asyncio.gather(*(manager.enqueue("chat", run) for _ in range(5)))

        assert peak == 1

    @pytest.mark.asyncio
    async def test_conversations_run_independently(self) -> None:
        """A slow conversation does not hold back another one."""
        manager = ConversationQueueManager()
        finished: list[str] = []
        release = asyncio.Event()

        async def slow() -> None:
            await release.wait()
            finished.append("slow")

        async def fast() -> None:
            finished.append("fast")

        slow_future = manager.enqueue("a", slow)
        await manager.enqueue("b", fast)

        assert finished == ["fast"]
        release.set()
        await slow_future
        assert finished == ["fast", "slow"]

    @pytest.mark.asyncio
    async def test_failure_does_not_block_lane(self) -> None:
        errors: list[tuple[object, BaseException]] = []
        manager = ConversationQueueManager(on_error=lambda cid, e: errors.append((cid, e)))

        async def boom() -> None:
            raise ValueError("boom")

        async def ok() -> str:
            return "ok"

        failing = manager.enqueue("chat", boom)
        following = manager.enqueue("chat", ok)

        with pytest.raises(ValueError, match="boom"):
            await failing
        assert await following == "ok"
        assert len(errors) == 1
        assert errors[0][0] == "chat"

    @pytest.mark.asyncio
    async def test_lane_dropped_when_drained(self) -> None:
        manager = ConversationQueueManager()

        async def noop() -> None:
            return None

        future = manager.enqueue("chat", noop)
        assert manager.has_lane("chat")
        assert manager.active_lanes == 1

        await future
        await manager.join()

        assert not manager.has_lane("chat")
        assert manager.active_lanes == 0
        assert manager.pending("chat") == 0

    @pytest.mark.asyncio
    async def test_new_work_after_drain_reopens_lane(self) -> None:
        manager = ConversationQueueManager()

        async def value(v: int) -> int:
            return v

        assert await manager.enqueue("chat", lambda: value(1)) == 1
        await manager.join()
        assert await manager.enqueue("chat", lambda: value(2)) == 2

    @pytest.mark.asyncio
    async def test_pending_counts_queued_work(self) -> None:
        manager = ConversationQueueManager()
        gate = asyncio.Event()

        async def wait() -> None:
            await gate.wait()

        manager.enqueue("chat", wait)
        manager.enqueue("chat", wait)
        manager.enqueue("chat", wait)
        await asyncio.sleep(0)

        # First task has started, two wait behind it
        assert manager.pending("chat") == 2
        gate.set()
        await manager.join()
        assert manager.pending("chat") == 0

    @pytest.mark.asyncio
    async def test_join_waits_for_all_lanes(self) -> None:
        manager = ConversationQueueManager()
        done: list[str] = []

        async def work(name: str) -> None:
            await asyncio.sleep(0.01)
            done.append(name)

        for name in ("a", "b", "c"):
            manager.enqueue(name, lambda n=name: work(n))

        await manager.join()

        assert sorted(done) == ["a", "b", "c"]
        assert manager.active_lanes == 0
