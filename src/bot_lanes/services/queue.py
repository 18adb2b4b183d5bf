"""Per-conversation serialization for bot_lanes.

This module provides the queue manager that gives each conversation
its own execution lane. Work for one conversation runs strictly in
submission order and never concurrently; different conversations run
independently on the same event loop.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from bot_lanes.logging import get_logger
from bot_lanes.models.turn import ConversationId

__all__ = [
    "ConversationLane",
    "ConversationQueueManager",
    "LaneErrorHook",
]

logger = get_logger(__name__)

T = TypeVar("T")

LaneTask = Callable[[], Awaitable[Any]]
LaneErrorHook = Callable[[ConversationId, BaseException], None]


class ConversationLane:
    """Single-consumer work queue of one conversation.

    The lane owns one worker task while it has pending work. The worker
    exits as soon as the queue drains and tells the manager to forget
    the lane, so an idle conversation holds no state.
    """

    def __init__(
        self,
        conversation_id: ConversationId,
        on_drained: Callable[["ConversationLane"], None],
        on_error: LaneErrorHook | None = None,
    ) -> None:
        self.conversation_id = conversation_id
        self._queue: asyncio.Queue[tuple[LaneTask, asyncio.Future[Any]]] = asyncio.Queue()
        self._on_drained = on_drained
        self._on_error = on_error
        self._worker: asyncio.Task[None] | None = None

    @property
    def pending(self) -> int:
        """Number of queued tasks not yet started."""
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def submit(self, task: LaneTask) -> "asyncio.Future[Any]":
        """Queue a task behind everything already in this lane."""
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._queue.put_nowait((task, future))
        if not self.is_running:
            self._worker = asyncio.create_task(
                self._run(), name=f"lane-{self.conversation_id}"
            )
        return future

    async def wait_drained(self) -> None:
        if self._worker is not None:
            await asyncio.shield(self._worker)

    async def _run(self) -> None:
        # No await between the emptiness check and the drained callback,
        # so a submit() can never land in a lane that is being dropped.
        while not self._queue.empty():
            task, future = self._queue.get_nowait()
            try:
                result = await task()
            except asyncio.CancelledError:
                future.cancel()
                raise
            except Exception as e:
                logger.warning(
                    "lane_task_failed",
                    conversation_id=self.conversation_id,
                    error=str(e),
                )
                if self._on_error is not None:
                    try:
                        self._on_error(self.conversation_id, e)
                    except Exception as hook_error:
                        logger.error("lane_error_hook_failed", error=str(hook_error))
                if not future.done():
                    future.set_exception(e)
            else:
                if not future.done():
                    future.set_result(result)
            finally:
                self._queue.task_done()
        self._on_drained(self)


class ConversationQueueManager:
    """Registry of conversation lanes.

    Guarantees:
    - for one conversation, tasks run in enqueue order, one at a time;
    - lanes of different conversations have no ordering relation;
    - a failing task does not block later tasks of its lane (the
      exception is set on the returned future);
    - lanes exist only while they have pending work.

    Example:
        manager = ConversationQueueManager()
        future = manager.enqueue(chat_id, lambda: handle(message))
        outcome = await future
    """

    def __init__(self, on_error: LaneErrorHook | None = None) -> None:
        """Initialize the manager.

        Args:
            on_error: Called with (conversation_id, exception) whenever a
                task fails
        """
        self._lanes: dict[ConversationId, ConversationLane] = {}
        self._on_error = on_error

    def enqueue(
        self,
        conversation_id: ConversationId,
        task: Callable[[], Awaitable[T]],
    ) -> "asyncio.Future[T]":
        """Queue a unit of work on a conversation's lane.

        Must be called from within the running event loop.

        Args:
            conversation_id: Lane key
            task: Zero-argument coroutine function to run

        Returns:
            Future resolved with the task's result or exception
        """
        lane = self._lanes.get(conversation_id)
        if lane is None:
            lane = ConversationLane(conversation_id, self._drop_lane, self._on_error)
            self._lanes[conversation_id] = lane
            logger.debug("lane_opened", conversation_id=conversation_id)
        return lane.submit(task)

    def pending(self, conversation_id: ConversationId) -> int:
        """Number of queued, not yet started tasks for a conversation."""
        lane = self._lanes.get(conversation_id)
        return lane.pending if lane else 0

    @property
    def active_lanes(self) -> int:
        """Number of conversations with work in flight."""
        return len(self._lanes)

    def has_lane(self, conversation_id: ConversationId) -> bool:
        return conversation_id in self._lanes

    async def join(self) -> None:
        """Wait until every lane has drained."""
        while True:
            running = [lane for lane in self._lanes.values() if lane.is_running]
            if not running:
                return
            await asyncio.gather(
                *(lane.wait_drained() for lane in running),
                return_exceptions=True,
            )

    def _drop_lane(self, lane: ConversationLane) -> None:
        if self._lanes.get(lane.conversation_id) is lane:
            del self._lanes[lane.conversation_id]
            logger.debug("lane_closed", conversation_id=lane.conversation_id)
