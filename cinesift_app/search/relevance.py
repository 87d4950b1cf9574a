"""
Relevance scoring and filtering for deduplicated search results.

Runs after the merge. Records that cannot be rendered (no poster or no
localized title) are always dropped; the rest are scored against the query
and anything below MIN_RELEVANCE is discarded.
"""

import math
import logging
from typing import List, Optional, Tuple

from ..metadata.models import MediaRecord, SourceType, clean_text

logger = logging.getLogger(__name__)


MIN_RELEVANCE = 10

CORROBORATION_BONUS = 30
EXACT_MATCH = 100
TITLE_STARTS_WITH_QUERY = 80
QUERY_STARTS_WITH_TITLE = 70
TITLE_CONTAINS_QUERY = 60
CHAR_OVERLAP_WEIGHT = 40
MIN_CHAR_OVERLAP = 0.5
RATED_BONUS = 10

# Bangumi gets nothing here: it is the only source for anime-only searches,
# where there is nothing to tie-break against.
SOURCE_BONUS = {
    SourceType.TMDB: 5,
    SourceType.MAOYAN: 4,
    SourceType.DOUBAN: 3,
}


def _fold(text: Optional[str]) -> str:
    return (text or "").lower().strip()


def is_renderable(record: MediaRecord) -> bool:
    return bool(record.poster_url) and clean_text(record.title_localized) is not None


def title_match_score(record: MediaRecord, query: str) -> int:
    """
    Best single title-vs-query tier.

    A missing title compares as "", so the query always starts with it: a
    record without an original title reaches the query-starts-with-title tier
    whenever it misses the first two.
    """
    q = _fold(query)
    titles = (_fold(record.title_localized), _fold(record.title_original))

    if any(t == q for t in titles):
        return EXACT_MATCH
    if any(t.startswith(q) for t in titles):
        return TITLE_STARTS_WITH_QUERY
    if any(q.startswith(t) for t in titles):
        return QUERY_STARTS_WITH_TITLE
    if any(q in t for t in titles):
        return TITLE_CONTAINS_QUERY

    # Repeated query characters are counted each time they occur
    matched = sum(1 for ch in q if any(ch in t for t in titles))
    ratio = matched / len(q)
    if ratio >= MIN_CHAR_OVERLAP:
        return math.floor(ratio * CHAR_OVERLAP_WEIGHT)
    return 0


def relevance_score(record: MediaRecord, query: str) -> int:
    """
    Score a record against the query.

    Multi-source corroboration dominates, then how well a title matches,
    then small bonuses for being rated and for the source it came from.
    """
    score = 0

    if record.match_count > 1:
        score += (record.match_count - 1) * CORROBORATION_BONUS

    score += title_match_score(record, query)

    if record.has_any_rating():
        score += RATED_BONUS

    score += SOURCE_BONUS.get(record.source_type, 0)

    return score


def filter_relevant(results: List[MediaRecord], query: Optional[str] = None) -> List[MediaRecord]:
    """
    Drop unrenderable records and, when a query is given, rank by relevance.

    Args:
        results: Deduplicated records
        query: Original query text (None skips scoring)

    Returns:
        Filtered records, highest relevance first (stable on ties)
    """
    renderable = [record for record in results if is_renderable(record)]

    if not query:
        return renderable

    scored: List[Tuple[MediaRecord, int]] = [
        (record, relevance_score(record, query)) for record in renderable
    ]
    relevant = [pair for pair in scored if pair[1] >= MIN_RELEVANCE]
    relevant.sort(key=lambda pair: pair[1], reverse=True)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Relevance scores for '{query}':")
        for record, score in relevant[:5]:
            logger.debug(f"  {record.title_localized} ({record.source_type.value}): {score}")

    return [record for record, _ in relevant]
