"""
Enum classes shared by the search pipeline.
"""

from enum import Enum


class MediaType(Enum):
    """Catalog section a search targets."""
    MOVIE = "movie"
    TV = "tv"


class SearchState(Enum):
    """Lifecycle of a single search submission."""
    IDLE = "idle"
    EXTRACTING = "extracting"
    FETCHING = "fetching"
    DONE = "done"
    ERROR = "error"

    @property
    def is_settled(self) -> bool:
        return self in (SearchState.IDLE, SearchState.DONE, SearchState.ERROR)
