"""Cancellable scheduled tasks with a structured lifetime.

Coordinators never keep raw timer handles. They open a ``TaskScope``,
schedule repeating or one-shot work through it, and close the scope on
teardown, which cancels and awaits everything that is still scheduled.

Example:
    async with TaskScope("guest-status") as scope:
        poll = scope.every(3.0, check_status)
        ...
        poll.cancel()
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any

import logfire

logger = logging.getLogger(__name__)

Callback = Callable[[], Awaitable[None]]


class ScheduledTask:
    """Handle to one scheduled piece of work.

    Cancelling from inside the task's own callback is allowed: the current
    call finishes and nothing runs afterwards.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._task: asyncio.Task[None] | None = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._task is None or self._task.done()

    def cancel(self) -> None:
        """Stop the task. Idempotent.

        A handle first cancelled from inside its own callback is still
        interrupted by a later call from another task.
        """
        task = self._task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        if not self._cancelled:
            self._cancelled = True
            logger.debug(f"Cancelled scheduled task {self.name}")

    async def wait(self) -> None:
        """Wait until the task has stopped, swallowing its cancellation."""
        if self._task is None:
            return
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise


class TaskScope:
    """Owner of a group of scheduled tasks.

    Every task scheduled through the scope is cancelled by ``close()``.
    A closed scope refuses new work.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handles: list[ScheduledTask] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def active(self) -> list[ScheduledTask]:
        """Tasks that are neither cancelled nor finished."""
        return [h for h in self._handles if not h.cancelled and not h.done]

    def every(self, interval: float, callback: Callback, name: str = "") -> ScheduledTask:
        """Run ``callback`` now and then ``interval`` seconds after each run.

        The delay is measured from the end of one run to the start of the
        next, so a slow request never overlaps the following one.
        Exceptions raised by the callback are logged and the loop goes on.

        Args:
            interval: Seconds between the end of one run and the next
            callback: Coroutine function to run
            name: Label for logs

        Returns:
            Handle that stops the loop when cancelled
        """
        handle = ScheduledTask(name or f"{self.name}.every")

        async def _loop() -> None:
            while not handle.cancelled:
                try:
                    await callback()
                except asyncio.CancelledError:
                    raise
                except Exception as e:
                    logfire.error(
                        "Scheduled task failed",
                        task=handle.name,
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                if handle.cancelled:
                    break
                await asyncio.sleep(interval)

        return self._start(handle, _loop())

    def later(self, delay: float, callback: Callback, name: str = "") -> ScheduledTask:
        """Run ``callback`` once after ``delay`` seconds.

        Returns:
            Handle that prevents the run when cancelled before it fires
        """
        handle = ScheduledTask(name or f"{self.name}.later")

        async def _once() -> None:
            await asyncio.sleep(delay)
            if handle.cancelled:
                return
            try:
                await callback()
            except Exception as e:
                logfire.error(
                    "Scheduled task failed",
                    task=handle.name,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        return self._start(handle, _once())

    def _start(
        self, handle: ScheduledTask, coro: Coroutine[Any, Any, None]
    ) -> ScheduledTask:
        if self._closed:
            coro.close()
            raise RuntimeError(f"Task scope {self.name} is closed")

        handle._task = asyncio.get_running_loop().create_task(coro, name=handle.name)
        self._handles = [h for h in self._handles if not h.done]
        self._handles.append(handle)
        return handle

    def cancel_all(self) -> None:
        """Cancel every task without waiting for them."""
        for handle in self._handles:
            handle.cancel()

    async def close(self) -> None:
        """Cancel every task and wait until they have all stopped."""
        self._closed = True
        handles, self._handles = self._handles, []
        for handle in handles:
            handle.cancel()
        for handle in handles:
            if handle._task is asyncio.current_task():
                continue
            await handle.wait()

    async def __aenter__(self) -> "TaskScope":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
