"""Debounced people search state holder."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Iterable
from typing import Any

from onlinesearch.config import SearchSettings, get_settings
from onlinesearch.domain.models import Person
from onlinesearch.logging import logger
from onlinesearch.services.exceptions import ScopeClosedError
from onlinesearch.services.matching import matches
from onlinesearch.services.seeds import DEFAULT_PEOPLE
from onlinesearch.utils.scope import TaskScope
from onlinesearch.utils.state import StateCell, Subscription


def filter_people(people: Iterable[Person], query: str) -> tuple[Person, ...]:
    """Return the people matching ``query`` in their original order.

    A blank query keeps everyone.
    """

    people = tuple(people)
    if not query.strip():
        return people
    return tuple(person for person in people if matches(person, query))


class SearchStore:
    """Owns the query, the candidate set and the derived results/busy state.

    Two inputs feed one recompute step. Query edits go through a debounce
    window before they are accepted; candidate updates recombine immediately
    with the last accepted query. Non-blank queries pay a simulated lookup
    delay, during which ``busy`` stays raised.

    With the ``while_subscribed`` sharing policy the pipeline only runs while
    ``results`` has subscribers, plus a keep-alive grace window after the last
    one leaves. All tasks live in the caller-owned ``scope``.
    """

    def __init__(
        self,
        scope: TaskScope,
        *,
        candidates: Iterable[Person] | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._scope = scope
        people = tuple(DEFAULT_PEOPLE if candidates is None else candidates)

        self.query: StateCell[str] = StateCell("", name="query")
        self.candidates: StateCell[tuple[Person, ...]] = StateCell(people, name="candidates")
        self.busy: StateCell[bool] = StateCell(False, name="busy")
        self.results: StateCell[tuple[Person, ...]] = StateCell(
            people,
            name="results",
            on_active=self._on_results_active,
            on_idle=self._on_results_idle,
        )

        self._loop: asyncio.AbstractEventLoop | None = None
        self._running = False
        self._accepted_query: str | None = None
        self._debounce_task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._candidates_subscription: Subscription[tuple[Person, ...]] | None = None
        self._stop_handle: asyncio.TimerHandle | None = None
        self._in_flight = 0
        scope.add_close_callback(self._on_scope_closed)

        if self.settings.sharing == "eager":
            self._start()

    @property
    def running(self) -> bool:
        return self._running

    def set_query(self, text: str) -> None:
        self._ensure_open()
        self.query.set(text)
        if self._running:
            self._schedule_debounce(text)

    def set_candidates(self, people: Iterable[Person]) -> None:
        self._ensure_open()
        self.candidates.set(tuple(people))

    def current_query(self) -> str:
        return self.query.value

    def current_results(self) -> tuple[Person, ...]:
        return self.results.value

    def is_busy(self) -> bool:
        return self.busy.value

    def _ensure_open(self) -> None:
        if self._scope.closed:
            raise ScopeClosedError("Search scope is closed.")

    def _launch(self, coro: Coroutine[Any, Any, None], name: str) -> asyncio.Task[None]:
        task = self._scope.launch(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _start(self) -> None:
        self._ensure_open()
        self._loop = asyncio.get_running_loop()
        self._running = True
        logger.debug("search_pipeline_started", query=self.query.value)
        self._schedule_debounce(self.query.value)
        self._candidates_subscription = self.candidates.subscribe(self._on_candidates_changed)

    def _stop(self) -> None:
        self._stop_handle = None
        if not self._running:
            return
        self._running = False
        self._accepted_query = None
        if self._candidates_subscription is not None:
            self._candidates_subscription.cancel()
            self._candidates_subscription = None
        self._debounce_task = None
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        logger.debug("search_pipeline_stopped", cancelled=len(pending))

    def _on_scope_closed(self) -> None:
        # The keep-alive timer lives outside the scope, so disarm it here.
        if self._stop_handle is not None:
            self._stop_handle.cancel()
        self._stop()

    def _on_results_active(self) -> None:
        self._ensure_open()
        if self._stop_handle is not None:
            self._stop_handle.cancel()
            self._stop_handle = None
            logger.debug("search_pipeline_kept_alive")
            return
        if not self._running:
            self._start()

    def _on_results_idle(self) -> None:
        if self.settings.sharing == "eager" or not self._running or self._scope.closed:
            return
        assert self._loop is not None
        self._stop_handle = self._loop.call_later(self.settings.keep_alive_seconds, self._stop)

    def _schedule_debounce(self, text: str) -> None:
        if self._debounce_task is not None:
            self._debounce_task.cancel()
        self._debounce_task = self._launch(self._debounce(text), "search-debounce")

    async def _debounce(self, text: str) -> None:
        await asyncio.sleep(self.settings.debounce_seconds)
        # Past this point a newer query no longer cancels the run.
        if self._debounce_task is asyncio.current_task():
            self._debounce_task = None
        self._accepted_query = text
        logger.debug("search_query_accepted", query=text)
        await self._recompute(text, mark_busy=True)

    def _on_candidates_changed(self, people: tuple[Person, ...]) -> None:
        if self._accepted_query is None:
            return
        self._launch(self._recompute(self._accepted_query, mark_busy=False), "search-recombine")

    async def _recompute(self, text: str, *, mark_busy: bool) -> None:
        blank = not text.strip()
        tracked = mark_busy and not blank
        if tracked:
            self._in_flight += 1
            self.busy.set(True)
        try:
            people = self.candidates.value
            if not blank:
                await asyncio.sleep(self.settings.processing_delay_seconds)
            result = filter_people(people, text)
            self.results.set(result)
            logger.debug("search_results_published", query=text, count=len(result))
        finally:
            if tracked:
                self._in_flight -= 1
                if self._in_flight == 0:
                    self.busy.set(False)


__all__ = ["SearchStore", "filter_people"]
