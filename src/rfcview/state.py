"""Per-invocation wiring of settings, HTTP client and services."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rfcview.cache import CacheStore
from rfcview.datatracker import DatatrackerClient
from rfcview.documents import DocumentService
from rfcview.fetcher import Fetcher, build_http_client
from rfcview.search import SearchService

if TYPE_CHECKING:
    import httpx

    from rfcview.config import Settings


@dataclass
class AppState:
    settings: Settings
    http_client: httpx.AsyncClient
    cache: CacheStore
    fetcher: Fetcher
    datatracker: DatatrackerClient
    documents: DocumentService
    search: SearchService


@asynccontextmanager
async def open_app_state(settings: Settings) -> AsyncIterator[AppState]:
    """Build every component around one shared HTTP client, closed on exit."""
    async with build_http_client(settings.fetcher) as client:
        fetcher = Fetcher(client, settings.fetcher)
        datatracker = DatatrackerClient(fetcher, settings.datatracker)
        cache = CacheStore(settings.cache_dir)
        yield AppState(
            settings=settings,
            http_client=client,
            cache=cache,
            fetcher=fetcher,
            datatracker=datatracker,
            documents=DocumentService(cache, fetcher, datatracker),
            search=SearchService(datatracker, settings.search.default_limit),
        )
