"""
================================================================================
CineSift - Media Record Models
================================================================================
Canonical record shape that every provider response is normalized into.

Sources:
  - TMDb (structured metadata API)
  - Bangumi (scraped, anime)
  - Maoyan (mobile-web JSON API)
  - Douban (scraped)

Unknown free-text fields are held as None internally. The display sentinels
the client expects ("未知", "暂无简介", "----", ...) are only produced by
to_dict(), so merge and ranking logic never compares against display text.
================================================================================
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# ENUMS
# =============================================================================

class SourceType(str, Enum):
    """Provider that produced a record."""
    TMDB = "tmdb"
    BANGUMI = "bgm"
    MAOYAN = "maoyan"
    DOUBAN = "douban"


class MediaType(str, Enum):
    """Kind of title."""
    MOVIE = "movie"
    TV = "tv"
    ANIME = "anime"


# =============================================================================
# DISPLAY SENTINELS (serialization boundary only)
# =============================================================================

UNKNOWN_TITLE = "未知标题"
UNKNOWN_DATE = "未知日期"
UNKNOWN_YEAR = "----"
UNKNOWN_DURATION = "未知"
NO_SUMMARY = "暂无简介"
NO_STAFF = "暂无制作信息"

SENTINELS = frozenset({
    UNKNOWN_TITLE,
    UNKNOWN_DATE,
    UNKNOWN_YEAR,
    UNKNOWN_DURATION,
    NO_SUMMARY,
    NO_STAFF,
})

MAX_DIRECTORS = 3
MAX_ACTORS = 5


def clean_text(value: Optional[str]) -> Optional[str]:
    """
    Collapse upstream text into the internal representation.

    Strips whitespace and maps empty strings and display sentinels to None.
    """
    if value is None:
        return None
    value = str(value).strip()
    if not value or value in SENTINELS:
        return None
    return value


# =============================================================================
# DATA MODELS
# =============================================================================

@dataclass
class MediaRecord:
    """
    One provider's view of a title, or several views merged together.

    match_count counts how many source observations were folded into this
    record; provenance (source_type/source_id/source_url) always belongs to
    the most complete contributor.
    """

    source_type: SourceType
    source_id: str
    source_url: str = ""
    media_type: MediaType = MediaType.MOVIE

    # Titles
    title_localized: Optional[str] = None
    title_original: Optional[str] = None

    # Temporal
    release_date: Optional[str] = None
    year: Optional[str] = None
    duration: Optional[str] = None

    # Presentation
    poster_url: Optional[str] = None
    summary: Optional[str] = None
    staff: Optional[str] = None

    # People
    directors: List[str] = field(default_factory=list)
    actors: List[str] = field(default_factory=list)

    # Ratings (0 = absent, nominal 0-10)
    rating: float = 0.0
    rating_douban: float = 0.0
    rating_imdb: float = 0.0
    rating_bangumi: float = 0.0
    rating_maoyan: float = 0.0

    genres: List[str] = field(default_factory=list)
    wish: str = "0"
    is_new: bool = False
    match_count: int = 1

    def __post_init__(self):
        self.source_type = SourceType(self.source_type)
        self.media_type = MediaType(self.media_type)
        self.directors = list(self.directors)
        self.actors = list(self.actors)[:MAX_ACTORS]
        self.genres = list(self.genres)
        for name in ('rating', 'rating_douban', 'rating_imdb',
                     'rating_bangumi', 'rating_maoyan'):
            value = float(getattr(self, name) or 0.0)
            setattr(self, name, max(value, 0.0))
        if self.year is not None and not (len(self.year) == 4 and self.year.isdigit()):
            self.year = None
        if self.match_count < 1:
            self.match_count = 1

    @property
    def source_ratings(self) -> List[float]:
        """Source-specific ratings in a fixed order."""
        return [
            self.rating_imdb,
            self.rating_douban,
            self.rating_bangumi,
            self.rating_maoyan,
        ]

    def has_any_rating(self) -> bool:
        return self.rating > 0 or any(r > 0 for r in self.source_ratings)

    def copy(self, **changes) -> "MediaRecord":
        """Return a shallow copy with list fields duplicated."""
        clone = replace(
            self,
            directors=list(self.directors),
            actors=list(self.actors),
            genres=list(self.genres),
        )
        for key, value in changes.items():
            setattr(clone, key, value)
        return clone

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the client wire shape (every field present)."""
        if self.staff:
            staff = self.staff
        elif self.source_type == SourceType.TMDB:
            staff = ""
        else:
            staff = NO_STAFF

        return {
            'sourceType': self.source_type.value,
            'sourceId': self.source_id,
            'sourceUrl': self.source_url,
            'mediaType': self.media_type.value,
            'titleZh': self.title_localized or UNKNOWN_TITLE,
            'titleOriginal': self.title_original or "",
            'releaseDate': self.release_date or UNKNOWN_DATE,
            'duration': self.duration or UNKNOWN_DURATION,
            'year': self.year or UNKNOWN_YEAR,
            'posterUrl': self.poster_url or "",
            'summary': self.summary or NO_SUMMARY,
            'staff': staff,
            'directors': list(self.directors),
            'actors': list(self.actors),
            'rating': self.rating,
            'ratingDouban': self.rating_douban,
            'ratingImdb': self.rating_imdb,
            'ratingBangumi': self.rating_bangumi,
            'ratingMaoyan': self.rating_maoyan,
            'genres': list(self.genres),
            'wish': self.wish,
            'isNew': self.is_new,
            'matchCount': self.match_count,
        }
