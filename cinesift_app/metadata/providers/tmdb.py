"""
================================================================================
CineSift - TMDb Provider
================================================================================
REST client for The Movie Database v3.

TMDb Features:
  - Best structured data: runtime, episode counts, credits, genres
  - Multi-type search (movie, tv, person) in one request
  - Requires a v4 read access token (TMDB_ACCESS_TOKEN)

Search is a two-step process: one search/multi call, then one detail call
per candidate (in parallel) to pick up runtime and credits. A failed detail
call falls back to the search hit.

API Docs: https://developer.themoviedb.org/reference/search-multi
================================================================================
"""

import asyncio
import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from .base import BaseMetadataProvider
from .schemas import TmdbItem, TmdbSearchResponse
from ..models import (
    MAX_ACTORS, MAX_DIRECTORS, MediaRecord, MediaType, SourceType, clean_text
)

logger = logging.getLogger(__name__)


class TmdbProvider(BaseMetadataProvider):
    """TMDb v3 API provider (structured metadata)."""

    id = "tmdb"
    name = "TMDb"
    base_url = "https://api.themoviedb.org/3"
    site_url = "https://www.themoviedb.org"
    image_base_url = "https://image.tmdb.org/t/p/w500"

    language = "zh-CN"
    max_results = 8

    SUPPORTED_TYPES = {'movie': MediaType.MOVIE, 'tv': MediaType.TV}

    def __init__(self, access_token: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.access_token = access_token

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token)

    def _auth_headers(self) -> Dict[str, str]:
        return {
            'Authorization': f"Bearer {self.access_token}",
            'Content-Type': 'application/json',
        }

    async def _search(self, query: str) -> List[MediaRecord]:
        data = await self._get_json(
            f"{self.base_url}/search/multi",
            params={
                'query': query,
                'language': self.language,
                'include_adult': 'false',
            },
            headers=self._auth_headers()
        )
        response = TmdbSearchResponse.model_validate(data)

        candidates: List[TmdbItem] = []
        for raw in response.results:
            if raw.get('media_type') not in self.SUPPORTED_TYPES:
                continue
            try:
                candidates.append(TmdbItem.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"{self.id}: Skipping malformed search hit: {e}")
                continue
            if len(candidates) >= self.max_results:
                break

        records = await asyncio.gather(
            *(self._fetch_details(item) for item in candidates)
        )
        return [record for record in records if record is not None]

    async def _fetch_details(self, item: TmdbItem) -> Optional[MediaRecord]:
        """
        Fetch runtime/episodes and credits for one search hit.

        Falls back to the summary-level hit on any failure.
        """
        media_type = item.media_type
        try:
            data = await self._get_json(
                f"{self.base_url}/{media_type}/{item.id}",
                params={
                    'language': self.language,
                    'append_to_response': 'credits',
                },
                headers=self._auth_headers()
            )
            detail = TmdbItem.model_validate(data)
            return self._parse_item(detail, media_type)
        except Exception as e:
            logger.warning(f"{self.id}: Detail fetch failed for {media_type}/{item.id}: {e!r}")

        try:
            return self._parse_item(item, media_type)
        except Exception as e:
            logger.error(f"{self.id}: Could not parse {media_type}/{item.id}: {e!r}")
            return None

    def _parse_item(self, item: TmdbItem, media_type: str) -> MediaRecord:
        """
        Parse a TMDb movie/tv document into a MediaRecord.

        Args:
            item: Validated search hit or detail document
            media_type: "movie" or "tv"

        Returns:
            MediaRecord object
        """
        is_movie = media_type == 'movie'
        item_id = str(item.id)

        if is_movie:
            title = item.title
            original_title = item.original_title
            release_date = clean_text(item.release_date)
        else:
            title = item.name
            original_title = item.original_name
            release_date = clean_text(item.first_air_date)

        year = release_date[:4] if release_date and len(release_date) >= 4 else None

        poster_url = f"{self.image_base_url}{item.poster_path}" if item.poster_path else None

        # Duration
        duration = None
        if is_movie and item.runtime:
            duration = f"{item.runtime}分钟"
        elif not is_movie:
            if item.number_of_episodes:
                duration = f"共{item.number_of_episodes}集"
            elif item.episode_run_time:
                duration = f"{item.episode_run_time[0]}分钟/集"

        # Credits
        directors: List[str] = []
        actors: List[str] = []
        if item.credits:
            directors = [
                member.name for member in item.credits.crew
                if member.job == 'Director' and member.name
            ][:MAX_DIRECTORS]
            actors = [
                member.name for member in item.credits.cast
                if member.name
            ][:MAX_ACTORS]
            if not is_movie:
                directors.extend(c.name for c in item.created_by if c.name)

        rating = item.vote_average

        return MediaRecord(
            source_type=SourceType.TMDB,
            source_id=item_id,
            source_url=f"{self.site_url}/{media_type}/{item_id}",
            media_type=self.SUPPORTED_TYPES[media_type],
            title_localized=clean_text(title),
            title_original=clean_text(original_title),
            release_date=release_date,
            year=year,
            duration=duration,
            poster_url=poster_url,
            summary=clean_text(item.overview),
            directors=directors,
            actors=actors,
            rating=rating,
            rating_imdb=rating,
            genres=[g.name for g in item.genres if g.name],
        )
