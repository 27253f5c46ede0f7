"""Application entrypoint."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence

from onlinesearch.config import SearchSettings, get_settings
from onlinesearch.logging import configure_logging, logger
from onlinesearch.services.search import SearchStore
from onlinesearch.utils.scope import TaskScope


def _settle_seconds(settings: SearchSettings) -> float:
    return settings.debounce_seconds + settings.processing_delay_seconds + 0.1


async def main(queries: Sequence[str], settings: SearchSettings | None = None) -> list[list[str]]:
    """Feed each query to a fresh store and log what a screen would render."""

    settings = settings or get_settings()
    configure_logging(settings.log_level, log_format=settings.log_format)
    snapshots: list[list[str]] = []

    async with TaskScope(name="main") as scope:
        store = SearchStore(scope, settings=settings)
        store.query.subscribe(lambda text: logger.info("query_changed", query=text))
        store.busy.subscribe(lambda busy: logger.info("busy_changed", busy=busy))
        results = store.results.subscribe(
            lambda people: logger.info(
                "results_changed", people=[person.full_name for person in people]
            )
        )

        logger.info("search_starting", queries=len(queries), sharing=settings.sharing)
        for query in queries:
            store.set_query(query)
            await asyncio.sleep(_settle_seconds(settings))
            snapshots.append([person.full_name for person in store.current_results()])
        results.cancel()

    return snapshots


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
