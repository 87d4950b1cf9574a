"""
================================================================================
CineSift - Smart Search Coordinator
================================================================================
Orchestrates parallel provider queries, deduplication and relevance ranking.

Flow:
  1. Pick providers from the type hint (anime / movie / all)
  2. Query them in parallel, each branch with its own timeout
  3. Concatenate outputs in fixed provider order
  4. Deduplicate (merge engine)
  5. Filter and rank by relevance to the query

A failing or hung provider only empties its own branch; the request always
returns the best partial result available.
================================================================================
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Dict, List, Optional

from .deduplicator import SearchDeduplicator
from .relevance import filter_relevant
from ..metadata.models import MediaRecord
from ..metadata.providers.base import BaseMetadataProvider
from ..metadata.providers.bangumi import BangumiProvider
from ..metadata.providers.douban import DoubanProvider
from ..metadata.providers.maoyan import MaoyanProvider
from ..metadata.providers.tmdb import TmdbProvider

logger = logging.getLogger(__name__)


class SearchMode(str, Enum):
    """Request mode selected by the client's type hint."""
    ANIME = "anime"
    MOVIE = "movie"
    ALL = "all"

    @classmethod
    def from_hint(cls, hint: Optional[str]) -> "SearchMode":
        """Anything that is not "anime" or "movie" means all sources."""
        if hint == cls.ANIME.value:
            return cls.ANIME
        if hint == cls.MOVIE.value:
            return cls.MOVIE
        return cls.ALL


# Concatenation order matters: ties in completeness keep this order
MODE_PROVIDERS: Dict[SearchMode, List[str]] = {
    SearchMode.ANIME: ['bgm'],
    SearchMode.MOVIE: ['tmdb', 'maoyan', 'douban'],
    SearchMode.ALL: ['bgm', 'tmdb', 'maoyan', 'douban'],
}

PROVIDER_ORDER = ['bgm', 'tmdb', 'maoyan', 'douban']


class SmartSearch:
    """
    Search orchestrator: fan-out to providers, fan-in, merge, rank.
    """

    def __init__(
        self,
        tmdb_token: Optional[str] = None,
        provider_timeout: float = 15.0,
        http_timeout: float = 10.0,
        providers: Optional[Dict[str, BaseMetadataProvider]] = None,
        deduplicator: Optional[SearchDeduplicator] = None
    ):
        """
        Initialize smart search.

        Args:
            tmdb_token: TMDb read access token (None disables TMDb)
            provider_timeout: Per-branch timeout in seconds
            http_timeout: Per-request HTTP timeout passed to providers
            providers: Pre-built providers keyed by id (replaces the defaults)
            deduplicator: Merge engine override
        """
        self.tmdb_token = tmdb_token
        self.provider_timeout = provider_timeout
        self.http_timeout = http_timeout
        self._injected = providers
        self.deduplicator = deduplicator or SearchDeduplicator()

    def build_providers(self) -> Dict[str, BaseMetadataProvider]:
        """Create one fresh provider (and HTTP client) per source."""
        return {
            'bgm': BangumiProvider(timeout=self.http_timeout),
            'tmdb': TmdbProvider(access_token=self.tmdb_token, timeout=self.http_timeout),
            'maoyan': MaoyanProvider(timeout=self.http_timeout),
            'douban': DoubanProvider(timeout=self.http_timeout),
        }

    def describe_providers(self) -> List[Dict]:
        providers = self._injected or self.build_providers()
        return [providers[pid].describe() for pid in PROVIDER_ORDER if pid in providers]

    async def search(self, query: str, type_hint: Optional[str] = None) -> List[MediaRecord]:
        """
        Run one aggregated search.

        Args:
            query: Search query (already validated as non-blank)
            type_hint: "anime", "movie", or anything else for all sources

        Returns:
            Deduplicated records ranked by relevance
        """
        start_time = time.time()
        mode = SearchMode.from_hint(type_hint)
        provider_ids = MODE_PROVIDERS[mode]

        logger.info(f"Searching for '{query}' with type: {mode.value}")

        if self._injected is not None:
            providers = self._injected
            owned = False
        else:
            providers = self.build_providers()
            owned = True

        try:
            selected = [(pid, providers[pid]) for pid in provider_ids if pid in providers]
            raw_results = await self._parallel_search(query, selected)
        finally:
            if owned:
                await asyncio.gather(
                    *(provider.close() for provider in providers.values()),
                    return_exceptions=True
                )

        logger.info(f"Total before dedup: {len(raw_results)}")
        unique = self.deduplicator.deduplicate(raw_results)
        logger.info(f"Total after dedup: {len(unique)}")

        filtered = filter_relevant(unique, query)

        elapsed = time.time() - start_time
        logger.info(
            f"Returning {len(filtered)} results after filtering "
            f"(before: {len(unique)}) in {elapsed:.2f}s"
        )
        return filtered

    async def _parallel_search(
        self,
        query: str,
        providers: List[tuple]
    ) -> List[MediaRecord]:
        """
        Query providers in parallel and concatenate in the given order.

        Args:
            query: Search query
            providers: (provider_id, provider) pairs in priority order

        Returns:
            Combined results from all providers
        """
        tasks = [
            asyncio.create_task(self._search_provider(provider, query), name=f"search:{pid}")
            for pid, provider in providers
        ]

        results = await asyncio.gather(*tasks, return_exceptions=True)

        all_results: List[MediaRecord] = []
        counts = []
        for (pid, _), result in zip(providers, results):
            if isinstance(result, BaseException):
                logger.error(f"Search failed for {pid}: {result!r}")
                result = []
            counts.append(f"{pid}: {len(result)}")
            all_results.extend(result)

        logger.info(f"Provider results - {', '.join(counts)}")
        return all_results

    async def _search_provider(
        self,
        provider: BaseMetadataProvider,
        query: str
    ) -> List[MediaRecord]:
        """One isolated branch: timeout or error yields an empty list."""
        try:
            return await asyncio.wait_for(provider.search(query), timeout=self.provider_timeout)
        except asyncio.TimeoutError:
            logger.error(f"{provider.id}: timed out after {self.provider_timeout}s")
            return []
        except Exception as e:
            logger.error(f"{provider.id}: error: {e!r}")
            return []
