"""
search.py — Mood search orchestrator.

Runs one submission through intent extraction (LLM), query mapping
(genre cache + keyword resolution) and a TMDB discover call, then filters
and caps the results. Every failure ends in the ERROR state with a short
user-facing message; nothing is retried and in-flight searches are never
cancelled.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Optional

import httpx
from openai import AsyncOpenAI

from db.query_mapping import build_search_filters
from db.session import SearchSession
from db.tmdb import TMDBClient
from implementation.classes.enums import MediaType, SearchState
from implementation.classes.errors import MovieSearchError, NoResultsFound
from implementation.classes.schemas import Genre, Title
from implementation.config import Settings
from implementation.llms.query_understanding_methods import extract_search_intent_async

logger = logging.getLogger(__name__)

API_KEYS_MISSING_MESSAGE = "API keys are not configured."
TMDB_TOKEN_MISSING_MESSAGE = "TMDB API token is not configured."
GENRES_UNAVAILABLE_MESSAGE = "Could not load genre data."
EXTRACTION_FAILED_MESSAGE = "Failed to process your request."
SEARCH_FAILED_MESSAGE = "Search failed. Please try again."
NO_RESULTS_MESSAGE = "No results found. Try a different search."


@dataclass(slots=True)
class SearchSnapshot:
    state: SearchState
    query: Optional[str]
    error: Optional[str]
    results: list[Title]
    history: list[str]


def filter_results(titles: list[Title], media_type: MediaType, limit: int = 50) -> list[Title]:
    """
    Drop adult movies, keep provider order, cap at `limit` and tag each title
    with the media type that was searched.
    """
    if media_type is MediaType.MOVIE:
        titles = [t for t in titles if not t.adult]
    return [t.model_copy(update={"media_type": media_type}) for t in titles[:limit]]


@dataclass
class MovieSearch:
    """
    UI-facing search state for one session.

    `tmdb` and `llm_client` may be None when their credentials are missing;
    submissions then fail fast without touching the network.
    """
    settings: Settings
    session: SearchSession
    tmdb: Optional[TMDBClient] = None
    llm_client: Optional[AsyncOpenAI] = None
    state: SearchState = SearchState.IDLE
    query: Optional[str] = None
    error: Optional[str] = None
    results: list[Title] = field(default_factory=list)
    _history: deque = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._history = deque(maxlen=self.settings.history_size)

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def snapshot(self) -> SearchSnapshot:
        return SearchSnapshot(
            state=self.state,
            query=self.query,
            error=self.error,
            results=list(self.results),
            history=self.history,
        )

    def _fail(self, message: str) -> None:
        self.error = message
        self.state = SearchState.ERROR

    # ---------------------------------------------------------------------------
    # Genres
    # ---------------------------------------------------------------------------

    async def load_genres(self) -> list[Genre]:
        """
        Fetch the movie genre list once per session.

        Returns the cached list on later calls. A missing token or a failed
        request (including an unreadable payload) leaves the cache empty and
        puts the search into ERROR. A later successful load clears that error.
        """
        if self.session.genres_loaded:
            return self.session.genres

        if not self.settings.has_tmdb_credentials or self.tmdb is None:
            self._fail(TMDB_TOKEN_MISSING_MESSAGE)
            return []

        try:
            genres = await self.tmdb.fetch_genres(MediaType.MOVIE)
        except (httpx.HTTPError, ValueError, MovieSearchError) as e:
            logger.error("Error fetching TMDB genres: %s", e)
            self._fail(GENRES_UNAVAILABLE_MESSAGE)
            return []

        self.session.set_genres(genres)
        logger.info("Loaded %d TMDB genres", len(genres))
        if self.error in (TMDB_TOKEN_MISSING_MESSAGE, GENRES_UNAVAILABLE_MESSAGE):
            self.error = None
            self.state = SearchState.IDLE
        return self.session.genres

    # ---------------------------------------------------------------------------
    # Search
    # ---------------------------------------------------------------------------

    async def submit(self, user_text: str) -> SearchSnapshot:
        """
        Run one search submission to completion.

        Blank input is ignored. Otherwise prior results and error are cleared,
        the query is added to the history, and the search settles in DONE or
        ERROR before this returns.
        """
        text = (user_text or "").strip()
        if not text:
            return self.snapshot()

        self.query = text
        self.results = []
        self.error = None

        missing = self.settings.missing_credentials()
        if missing or self.tmdb is None or self.llm_client is None:
            logger.warning("Search rejected, missing credentials: %s", ", ".join(missing) or "clients")
            self._fail(API_KEYS_MISSING_MESSAGE)
            return self.snapshot()

        self._history.appendleft(text)

        self.state = SearchState.EXTRACTING
        try:
            intent = await extract_search_intent_async(
                self.llm_client,
                text,
                self.session.genre_names(),
                model=self.settings.gemini_model,
            )
        except Exception as e:
            logger.error("Intent extraction failed for %r: %s", text, e)
            self._fail(EXTRACTION_FAILED_MESSAGE)
            return self.snapshot()

        logger.info(
            "Extracted intent type=%s genres=%s keywords=%s year=%s",
            intent.type.value, intent.genres, intent.keywords, intent.year,
        )

        self.state = SearchState.FETCHING
        try:
            filters = await build_search_filters(intent, self.session, self.tmdb)
            page = await self.tmdb.discover(filters.media_type, filters.to_discover_params())
            results = filter_results(page.results, intent.type, self.settings.max_results)
            if not results:
                raise NoResultsFound(f"No titles left for {text!r}")
        except NoResultsFound as e:
            logger.info("%s", e)
            self._fail(NO_RESULTS_MESSAGE)
            return self.snapshot()
        except Exception as e:
            logger.exception("Search failed for %r: %s", text, e)
            self._fail(SEARCH_FAILED_MESSAGE)
            return self.snapshot()

        self.results = results
        self.state = SearchState.DONE
        return self.snapshot()
