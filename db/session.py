"""
Session-scoped catalog caches.

One SearchSession lives as long as the user's session and is passed by
reference to each pipeline stage. Genres are loaded once; keyword IDs are
added as they are resolved and never evicted, so a keyword renamed on the
provider side keeps its old ID until the session is rebuilt.
"""

from dataclasses import dataclass, field
from typing import Optional

from implementation.classes.schemas import Genre
from implementation.misc.helpers import normalize_name


@dataclass(slots=True)
class SearchSession:
    genres: list[Genre] = field(default_factory=list)
    keyword_ids: dict[str, int] = field(default_factory=dict)  # lowercase keyword -> TMDB keyword id

    @property
    def genres_loaded(self) -> bool:
        return bool(self.genres)

    def set_genres(self, genres: list[Genre]) -> None:
        self.genres = list(genres)

    def genre_names(self) -> list[str]:
        return [g.name for g in self.genres]

    def find_genre_id(self, name: str) -> Optional[int]:
        """Exact, case-insensitive lookup against the cached genre list."""
        wanted = normalize_name(name)
        for genre in self.genres:
            if normalize_name(genre.name) == wanted:
                return genre.id
        return None

    def cached_keyword_id(self, keyword: str) -> Optional[int]:
        return self.keyword_ids.get(normalize_name(keyword))

    def remember_keyword(self, keyword: str, keyword_id: int) -> None:
        self.keyword_ids[normalize_name(keyword)] = keyword_id
