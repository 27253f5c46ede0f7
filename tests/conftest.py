"""Shared pytest fixtures for search store tests."""

from __future__ import annotations

import pytest
import pytest_asyncio

from onlinesearch.config import SearchSettings
from onlinesearch.utils.scope import TaskScope


@pytest.fixture
def settings() -> SearchSettings:
    return SearchSettings(
        debounce_seconds=0.05,
        processing_delay_seconds=0.05,
        keep_alive_seconds=0.2,
    )


@pytest_asyncio.fixture
async def scope():
    scope = TaskScope(name="test")
    try:
        yield scope
    finally:
        await scope.close()
