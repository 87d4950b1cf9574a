"""
================================================================================
CineSift - Douban Provider
================================================================================
HTML scraper for the douban.com general search page (movie category).

Douban Features:
  - Most trusted Chinese-language ratings
  - Result links go through a redirect tracker, so the subject id is read from
    the inline onclick handler ("sid: 12345") instead of the href

Detail pages are never fetched here: they are aggressively rate limited.
Posters are therefore left empty and only arrive through a merge with
another source.
================================================================================
"""

import re
import logging
from typing import Dict, List, Optional

from bs4 import Tag

from .base import BaseMetadataProvider
from ..models import MediaRecord, MediaType, SourceType, clean_text
from ...utils.markup import (
    extract_attr, extract_text, parse_float, parse_html, select_all, select_one
)

logger = logging.getLogger(__name__)

SID_RE = re.compile(r'sid:\s*(\d+)')
YEAR_RE = re.compile(r'\d{4}')
ORIGINAL_NAME_RE = re.compile(r'原名:.*?(?:/|$)')


class DoubanProvider(BaseMetadataProvider):
    """douban.com search page scraper."""

    id = "douban"
    name = "Douban"
    base_url = "https://www.douban.com"
    movie_url = "https://movie.douban.com"

    # Search category 1002 = movies & TV
    SEARCH_CATEGORY = "1002"
    max_results = 8

    def default_headers(self) -> Dict[str, str]:
        return {
            'User-Agent': self.user_agent,
            'Accept': (
                "text/html,application/xhtml+xml,application/xml;q=0.9,"
                "image/avif,image/webp,image/apng,*/*;q=0.8"
            ),
            'Accept-Language': "zh-CN,zh;q=0.9,en;q=0.8",
        }

    async def _search(self, query: str) -> List[MediaRecord]:
        html = await self._get_html(
            f"{self.base_url}/search",
            params={'cat': self.SEARCH_CATEGORY, 'q': query}
        )
        soup = parse_html(html)

        results = []
        for item in select_all(soup, ".result-list .result", limit=self.max_results):
            try:
                record = self._parse_item(item)
            except Exception as e:
                logger.error(f"{self.id}: Error parsing item: {e!r}")
                continue
            if record is not None:
                results.append(record)
        return results

    def _parse_item(self, item: Tag) -> Optional[MediaRecord]:
        title_link = select_one(item, "h3 a")
        onclick = extract_attr(title_link, 'onclick') or ""
        match = SID_RE.search(onclick)
        if not match:
            return None
        source_id = match.group(1)

        rating = parse_float(extract_text(item, ".rating_nums"))

        year = None
        staff = None
        cast_text = extract_text(item, ".subject-cast")
        if cast_text:
            year_match = YEAR_RE.search(cast_text)
            if year_match:
                year = year_match.group(0)
            staff = ORIGINAL_NAME_RE.sub("", cast_text, count=1).strip()
            if staff.startswith("/"):
                staff = staff[1:].strip()

        return MediaRecord(
            source_type=SourceType.DOUBAN,
            source_id=source_id,
            source_url=f"{self.movie_url}/subject/{source_id}",
            media_type=MediaType.MOVIE,
            title_localized=clean_text(extract_text(title_link)),
            year=year,
            staff=clean_text(staff),
            rating=rating,
            rating_douban=rating,
        )
