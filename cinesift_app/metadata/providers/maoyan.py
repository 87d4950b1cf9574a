"""
================================================================================
CineSift - Maoyan Provider
================================================================================
Client for the Maoyan mobile-web search endpoint (m.maoyan.com).

Maoyan Features:
  - Box-office oriented: wish counts, ticketing state, mainland release dates
  - One JSON call, no detail pages
  - Results are city-scoped; cityId=1 (Beijing) is used for every query
================================================================================
"""

import re
import logging
from typing import List

from pydantic import ValidationError

from .base import BaseMetadataProvider, MOBILE_USER_AGENT
from .schemas import MaoyanMovie, MaoyanSearchResponse
from ..models import MediaRecord, MediaType, SourceType, clean_text
from ...utils.markup import parse_float

logger = logging.getLogger(__name__)

YEAR_RE = re.compile(r'\d{4}')

# Call-to-action labels meaning tickets can be bought now or pre-ordered
TICKETING_LABELS = {"购票", "预售"}


def _split_list(value) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


class MaoyanProvider(BaseMetadataProvider):
    """Maoyan mobile JSON provider."""

    id = "maoyan"
    name = "Maoyan"
    base_url = "https://m.maoyan.com"
    user_agent = MOBILE_USER_AGENT

    CITY_ID = "1"
    max_results = 8

    async def _search(self, query: str) -> List[MediaRecord]:
        data = await self._get_json(
            f"{self.base_url}/ajax/search",
            params={'kw': query, 'cityId': self.CITY_ID, 'stype': '-1'}
        )
        response = MaoyanSearchResponse.model_validate(data)

        results = []
        for raw in response.items()[:self.max_results]:
            try:
                results.append(self._parse_movie(MaoyanMovie.model_validate(raw)))
            except (ValidationError, ValueError, TypeError) as e:
                logger.error(f"{self.id}: Error parsing item: {e}")
                continue
        return results

    def _parse_movie(self, movie: MaoyanMovie) -> MediaRecord:
        score = parse_float(movie.sc)

        poster = movie.img or ""
        if "/w.h/" in poster:
            poster = poster.replace("/w.h/", "/")

        release_date = clean_text(movie.rt)
        year = None
        if release_date and len(release_date) >= 4:
            year = release_date[:4]
        elif movie.pubDesc:
            match = YEAR_RE.search(movie.pubDesc)
            if match:
                year = match.group(0)

        director = clean_text(movie.dir)
        actors_str = clean_text(movie.star)

        staff = ""
        if director:
            staff += f"导演: {director} "
        if actors_str:
            staff += f"主演: {actors_str}"

        is_new = bool(
            movie.showStateButton
            and movie.showStateButton.content in TICKETING_LABELS
        )

        return MediaRecord(
            source_type=SourceType.MAOYAN,
            source_id=movie.id,
            source_url=f"{self.base_url}/movie/{movie.id}",
            media_type=MediaType.MOVIE,
            title_localized=clean_text(movie.nm),
            title_original=clean_text(movie.enm),
            release_date=release_date,
            year=year,
            duration=f"{movie.dur}分钟" if movie.dur else None,
            poster_url=poster or None,
            staff=clean_text(staff),
            directors=[director] if director else [],
            actors=_split_list(actors_str),
            rating=score,
            rating_maoyan=score,
            genres=_split_list(movie.cat),
            wish=movie.wish or "0",
            is_new=is_new,
        )
