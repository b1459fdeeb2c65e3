"""Shared pytest fixtures for unit tests."""

from typing import Any, Callable
from pathlib import Path
import sys

import httpx
import pytest

# Ensure project root is importable when tests run from repository root.
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from db.session import SearchSession
from db.tmdb import TMDBClient
from implementation.classes.schemas import Genre, Title
from implementation.config import Settings

TEST_TMDB_BASE_URL = "https://tmdb.test/3"

DEFAULT_GENRES = [
    Genre(id=28, name="Action"),
    Genre(id=16, name="Animation"),
    Genre(id=10751, name="Family"),
    Genre(id=27, name="Horror"),
    Genre(id=878, name="Science Fiction"),
]


@pytest.fixture
def settings() -> Settings:
    """Settings with every credential present."""
    return Settings(
        tmdb_access_token="tmdb-token",
        tmdb_api_key="tmdb-key",
        gemini_api_key="gemini-key",
    )


@pytest.fixture
def session() -> SearchSession:
    """A session whose genre cache is already loaded."""
    return SearchSession(genres=list(DEFAULT_GENRES))


@pytest.fixture
def title_factory() -> Callable[..., Title]:
    """Return a factory that builds a TMDB movie payload parsed into a Title."""

    def _factory(**overrides: Any) -> Title:
        """Construct a complete movie Title while allowing targeted field overrides."""
        base_data: dict[str, Any] = {
            "id": 1,
            "title": "Alien",
            "poster_path": "/alien.jpg",
            "release_date": "1979-05-25",
            "overview": "The crew of a commercial spacecraft encounters a deadly lifeform.",
            "vote_average": 8.16,
            "adult": False,
        }
        base_data.update(overrides)
        return Title.model_validate(base_data)

    return _factory


@pytest.fixture
def tmdb_factory() -> Callable[[Callable[[httpx.Request], httpx.Response]], TMDBClient]:
    """Return a factory that builds a TMDBClient backed by an httpx.MockTransport handler."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> TMDBClient:
        http_client = httpx.AsyncClient(
            base_url=TEST_TMDB_BASE_URL,
            transport=httpx.MockTransport(handler),
        )
        return TMDBClient(access_token="tmdb-token", api_key="tmdb-key", http_client=http_client)

    return _factory
