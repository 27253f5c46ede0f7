"""Explicitly owned cancellation scope for background tasks."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from onlinesearch.logging import logger
from onlinesearch.services.exceptions import ScopeClosedError

T = TypeVar("T")


class TaskScope:
    """Tracks launched tasks and cancels whatever is still pending on close."""

    def __init__(self, name: str = "scope") -> None:
        self.name = name
        self._tasks: set[asyncio.Task[Any]] = set()
        self._closed = False
        self._close_callbacks: list[Callable[[], None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def launch(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        if self._closed:
            coro.close()
            raise ScopeClosedError(f"Scope {self.name!r} is closed.")
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def add_close_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` when the scope closes, before pending tasks are cancelled."""

        self._close_callbacks.append(callback)

    async def close(self) -> None:
        if not self._closed:
            self._closed = True
            callbacks, self._close_callbacks = self._close_callbacks, []
            for callback in callbacks:
                try:
                    callback()
                except Exception:
                    logger.exception("scope_close_callback_failed", scope=self.name)
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.debug("scope_closed", scope=self.name, cancelled=len(tasks))

    async def __aenter__(self) -> TaskScope:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "scope_task_failed",
                scope=self.name,
                task=task.get_name(),
                exc_info=exc,
            )


__all__ = ["TaskScope"]
