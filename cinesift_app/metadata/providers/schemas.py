"""
Raw upstream response schemas.

JSON payloads from TMDb and Maoyan are validated once here, at the provider
boundary, and converted into MediaRecord immediately afterwards. Fields are
optional because both APIs omit or null them freely; unknown keys are ignored.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UpstreamModel(BaseModel):
    model_config = ConfigDict(extra='ignore', coerce_numbers_to_str=True)


def keep_objects(value: Any) -> List[dict]:
    """Keep the JSON objects of an upstream result array; items are validated one by one later."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


# =============================================================================
# TMDb
# =============================================================================

class TmdbNamed(UpstreamModel):
    name: Optional[str] = None


class TmdbCrewMember(TmdbNamed):
    job: Optional[str] = None


class TmdbCredits(UpstreamModel):
    crew: List[TmdbCrewMember] = Field(default_factory=list)
    cast: List[TmdbNamed] = Field(default_factory=list)


class TmdbItem(UpstreamModel):
    """A search/multi hit or a /movie|/tv detail document."""

    id: int
    media_type: Optional[str] = None

    # movie fields
    title: Optional[str] = None
    original_title: Optional[str] = None
    release_date: Optional[str] = None
    runtime: Optional[int] = None

    # tv fields
    name: Optional[str] = None
    original_name: Optional[str] = None
    first_air_date: Optional[str] = None
    number_of_episodes: Optional[int] = None
    episode_run_time: List[int] = Field(default_factory=list)
    created_by: List[TmdbNamed] = Field(default_factory=list)

    poster_path: Optional[str] = None
    overview: Optional[str] = None
    vote_average: float = 0.0
    genres: List[TmdbNamed] = Field(default_factory=list)
    credits: Optional[TmdbCredits] = None

    @field_validator('vote_average', mode='before')
    @classmethod
    def _null_vote(cls, value):
        return value or 0.0

    @field_validator('episode_run_time', 'created_by', 'genres', mode='before')
    @classmethod
    def _null_list(cls, value):
        return value or []


class TmdbSearchResponse(UpstreamModel):
    results: List[dict] = Field(default_factory=list)

    @field_validator('results', mode='before')
    @classmethod
    def _drop_non_objects(cls, value):
        return keep_objects(value)


# =============================================================================
# Maoyan
# =============================================================================

class MaoyanShowStateButton(UpstreamModel):
    content: Optional[str] = None


class MaoyanMovie(UpstreamModel):
    id: str
    nm: Optional[str] = None
    enm: Optional[str] = None
    sc: Optional[str] = None
    wish: Optional[str] = None
    img: Optional[str] = None
    pubDesc: Optional[str] = None
    rt: Optional[str] = None
    dir: Optional[str] = None
    star: Optional[str] = None
    cat: Optional[str] = None
    dur: Optional[int] = None
    showStateButton: Optional[MaoyanShowStateButton] = None

    @field_validator('dur', mode='before')
    @classmethod
    def _blank_duration(cls, value):
        if value in ("", None):
            return None
        return value


class MaoyanMovieList(UpstreamModel):
    list: List[dict] = Field(default_factory=list)

    @field_validator('list', mode='before')
    @classmethod
    def _drop_non_objects(cls, value):
        return keep_objects(value)


class MaoyanSearchResponse(UpstreamModel):
    movies: Optional[MaoyanMovieList] = None

    def items(self) -> List[dict]:
        if self.movies is None:
            return []
        return self.movies.list
