"""
================================================================================
CineSift - Title Matcher
================================================================================
Decides whether two records from different providers describe the same title.

Problem:
  Searching "铃芽之旅" returns the same film from TMDb, Maoyan and Douban,
  each with a different id, slightly different punctuation, and sometimes a
  release year that is off by one (festival vs. theatrical release).

Solution:
  Normalize titles aggressively, treat containment as a match when the
  shorter side is meaningful, and require years to be within one of each
  other when both are known.
================================================================================
"""

import re
from typing import Optional

from .models import MediaRecord, SourceType


# =============================================================================
# TITLE NORMALIZATION
# =============================================================================

# Full-width and half-width punctuation stripped before the catch-all pass
PUNCTUATION_RE = re.compile(
    r'[。、，！？：；“”‘’「」『』【】（）\[\]().,!?:;\'"－—·～~]'
)

# Anything that is not an ASCII word character, CJK ideograph, Hiragana or
# Katakana. Accented Latin, Hangul and Cyrillic letters are stripped too.
NON_TITLE_CHAR_RE = re.compile(r'[^\w\u4e00-\u9fa5\u3040-\u309f\u30a0-\u30ff]', re.ASCII)

WHITESPACE_RE = re.compile(r'\s+')

MIN_CONTAINED_LENGTH = 2
MAX_YEAR_GAP = 1


def normalize_title(title: Optional[str]) -> str:
    """
    Normalize a title for comparison.

    Examples:
        "Suzume no Tojimari" -> "suzumenotojimari"
        "铃芽之旅（2022）" -> "铃芽之旅2022"
        "すずめの戸締まり!" -> "すずめの戸締まり"
    """
    if not title:
        return ""
    normalized = title.lower()
    normalized = WHITESPACE_RE.sub("", normalized)
    normalized = PUNCTUATION_RE.sub("", normalized)
    normalized = NON_TITLE_CHAR_RE.sub("", normalized)
    return normalized.strip()


def titles_similar(title1: Optional[str], title2: Optional[str]) -> bool:
    """Equal after normalization, or one contains the other (shorter side >= 2 chars)."""
    norm1 = normalize_title(title1)
    norm2 = normalize_title(title2)

    if not norm1 or not norm2:
        return False

    if norm1 == norm2:
        return True

    if norm1 in norm2 or norm2 in norm1:
        shorter = norm1 if len(norm1) < len(norm2) else norm2
        return len(shorter) >= MIN_CONTAINED_LENGTH

    return False


def years_compatible(year1: Optional[str], year2: Optional[str]) -> bool:
    """Unknown years never disqualify; known years must be within one of each other."""
    if not year1 or not year2:
        return True
    try:
        y1 = int(year1)
        y2 = int(year2)
    except ValueError:
        return True
    return abs(y1 - y2) <= MAX_YEAR_GAP


def same_media(a: MediaRecord, b: MediaRecord) -> bool:
    """
    Symmetric same-title predicate.

    Year compatibility is a hard requirement; then any of localized/localized,
    original/original, or either localized/original cross pairing may match.
    """
    if not years_compatible(a.year, b.year):
        return False

    if titles_similar(a.title_localized, b.title_localized):
        return True
    if titles_similar(a.title_original, b.title_original):
        return True
    if titles_similar(a.title_localized, b.title_original):
        return True
    if titles_similar(a.title_original, b.title_localized):
        return True

    return False


# =============================================================================
# COMPLETENESS
# =============================================================================

# Known data quality per provider: TMDb > Bangumi > Maoyan > Douban
SOURCE_PRIOR = {
    SourceType.TMDB: 10,
    SourceType.BANGUMI: 8,
    SourceType.MAOYAN: 5,
    SourceType.DOUBAN: 3,
}

MIN_SUMMARY_LENGTH = 10


def completeness_score(record: MediaRecord) -> int:
    """
    Weight how much usable data a record carries.

    Higher scores win the merge: the most complete record keeps its
    provenance and is enriched from the others.
    """
    score = 0

    if record.poster_url:
        score += 20
    if record.summary and len(record.summary) > MIN_SUMMARY_LENGTH:
        score += 15

    if record.rating_imdb > 0:
        score += 10
    if record.rating_douban > 0:
        score += 10
    if record.rating_bangumi > 0:
        score += 10
    if record.rating_maoyan > 0:
        score += 8

    if record.directors:
        score += 8
    if record.actors:
        score += 8
    if record.genres:
        score += 5
    if record.duration:
        score += 5
    if record.title_original:
        score += 5

    score += SOURCE_PRIOR.get(record.source_type, 0)

    return score
