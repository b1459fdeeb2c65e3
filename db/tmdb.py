"""
TMDB API client for genre lists, keyword lookup and discover queries.

Uses httpx.AsyncClient with Bearer token authentication. The client is a thin
request/response wrapper: HTTP and transport errors propagate unchanged and
callers decide what they mean.
"""

import logging
from typing import Any, Optional

import httpx

from implementation.classes.enums import MediaType
from implementation.classes.errors import ConfigurationMissing
from implementation.classes.schemas import DiscoverPage, Genre, KeywordMatch
from implementation.config import TMDB_BASE_URL, Settings

logger = logging.getLogger(__name__)


class TMDBClient:
    """
    Async wrapper around the three TMDB endpoints the search pipeline uses.

    Pass `http_client` to share a connection pool (or to inject a mock
    transport in tests); otherwise the client owns one and closes it in
    `aclose()`.
    """

    def __init__(
        self,
        access_token: str,
        api_key: Optional[str] = None,
        base_url: str = TMDB_BASE_URL,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not access_token:
            raise ConfigurationMissing("TMDB API token is not configured.")
        self._api_key = api_key
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
        )
        self._headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> "TMDBClient":
        return cls(
            access_token=settings.tmdb_access_token,
            api_key=settings.tmdb_api_key,
            base_url=settings.tmdb_base_url,
            timeout=settings.http_timeout,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        query: dict[str, Any] = dict(params or {})
        if self._api_key:
            query["api_key"] = self._api_key
        response = await self._client.get(path, params=query, headers=self._headers)
        response.raise_for_status()
        return response.json()

    async def fetch_genres(self, media_type: MediaType = MediaType.MOVIE) -> list[Genre]:
        """Return the provider's genre list for a media type."""
        payload = await self._get(f"/genre/{media_type.value}/list")
        genres = [Genre.model_validate(g) for g in payload.get("genres", [])]
        logger.debug("Fetched %d TMDB %s genres", len(genres), media_type.value)
        return genres

    async def search_keyword(self, query: str) -> list[KeywordMatch]:
        """Return keyword matches for a free-text keyword, best match first."""
        payload = await self._get("/search/keyword", params={"query": query})
        return [KeywordMatch.model_validate(k) for k in payload.get("results", [])]

    async def discover(self, media_type: MediaType, params: dict[str, str]) -> DiscoverPage:
        """
        Run a discover query for a media type.

        Args:
            media_type: movie or tv; selects /discover/movie or /discover/tv.
            params: TMDB discover filters (sort_by, with_genres, ...).

        Returns:
            The first page of results in provider order.
        """
        payload = await self._get(f"/discover/{media_type.value}", params=params)
        page = DiscoverPage.model_validate(payload)
        logger.info(
            "TMDB discover/%s returned %d of %d results",
            media_type.value, len(page.results), page.total_results,
        )
        return page
