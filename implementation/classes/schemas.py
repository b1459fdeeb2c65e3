"""
Pydantic schemas for catalog payloads and LLM response structures.

This module contains the models parsed from TMDB responses, the structured
intent the language model returns, and the filters derived from it.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from implementation.misc.helpers import join_ids
from .enums import MediaType

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
POSTER_PLACEHOLDER_URL = "https://placehold.co/300x450/1f2937/d1d5db?text=No+Image"


# -----------------------------
#          CATALOG
# -----------------------------

class Genre(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str


class KeywordMatch(BaseModel):
    id: int
    name: str


class Title(BaseModel):
    """
    A movie or TV show as returned by TMDB discover.

    Movies carry `title` / `release_date` while TV shows carry
    `name` / `first_air_date`; both are folded into `display_name` and
    `release_date` on the way in.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: int
    display_name: str = ""
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    overview: str = ""
    rating: float = Field(default=0.0, alias="vote_average")
    media_type: Optional[MediaType] = None
    adult: bool = False

    @model_validator(mode="before")
    @classmethod
    def fold_movie_and_tv_fields(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("media_type") is None and (data.get("title") or data.get("name")):
            data["media_type"] = MediaType.MOVIE if data.get("title") else MediaType.TV
        if not data.get("display_name"):
            data["display_name"] = data.get("title") or data.get("name") or ""
        if not data.get("release_date"):
            data["release_date"] = data.get("first_air_date") or None
        if data.get("overview") is None:
            data["overview"] = ""
        if data.get("vote_average") is None:
            data.pop("vote_average", None)
            if data.get("rating") is None:
                data["rating"] = 0.0
        return data

    @property
    def poster_url(self) -> str:
        if not self.poster_path:
            return POSTER_PLACEHOLDER_URL
        return f"{POSTER_BASE_URL}{self.poster_path}"

    @property
    def display_rating(self) -> str:
        return f"{self.rating:.1f}"

    def play_url(self, base_url: str) -> str:
        media_type = self.media_type or MediaType.MOVIE
        return f"{base_url.rstrip('/')}/{media_type.value}/{self.id}"


class DiscoverPage(BaseModel):
    results: List[Title] = Field(default_factory=list)
    total_results: int = 0


# -----------------------------
#        QUERY INTENT
# -----------------------------

class ExtractedIntent(BaseModel):
    """Structured search intent the language model derives from free text."""
    type: MediaType
    genres: List[str]
    keywords: List[str]
    year: Optional[int] = None

    @field_validator("year", mode="before")
    @classmethod
    def coerce_year(cls, value):
        # The schema types year as a JSON number, so 2024.0 or 1995.5 are legal replies.
        if isinstance(value, float):
            return int(value)
        return value

    @field_validator("genres", "keywords")
    @classmethod
    def drop_blank_entries(cls, values: List[str]) -> List[str]:
        return [v.strip() for v in values if v and v.strip()]


class SearchFilters(BaseModel):
    media_type: MediaType
    genre_ids: set[int] = Field(default_factory=set)
    keyword_ids: set[int] = Field(default_factory=set)

    def to_discover_params(self) -> dict[str, str]:
        """Build TMDB discover query parameters, sorted by popularity."""
        params: dict[str, str] = {"sort_by": "popularity.desc"}
        if self.genre_ids:
            params["with_genres"] = join_ids(self.genre_ids)
        if self.keyword_ids:
            params["with_keywords"] = join_ids(self.keyword_ids)
        if self.media_type is MediaType.MOVIE:
            params["include_adult"] = "false"
        return params
