"""
query_mapping.py — Turn an extracted intent into TMDB discover filters.

Genre names are matched against the session's cached genre list. Keywords are
resolved to TMDB keyword IDs, hitting the provider only on a cache miss; all
lookups for one intent run concurrently and a failed lookup just leaves that
keyword out.
"""

import asyncio
import logging
from typing import Optional

import httpx

from db.session import SearchSession
from db.tmdb import TMDBClient
from implementation.classes.schemas import ExtractedIntent, SearchFilters
from implementation.misc.helpers import normalize_name

logger = logging.getLogger(__name__)


def map_genre_ids(genre_names: list[str], session: SearchSession) -> set[int]:
    """Return IDs for the genre names the cache knows; unknown names are dropped."""
    genre_ids: set[int] = set()
    for name in genre_names:
        genre_id = session.find_genre_id(name)
        if genre_id is None:
            logger.debug("Dropping unknown genre %r", name)
            continue
        genre_ids.add(genre_id)
    return genre_ids


async def resolve_keyword_id(
    keyword: str,
    session: SearchSession,
    tmdb: TMDBClient,
) -> Optional[int]:
    """
    Resolve one keyword to its TMDB ID.

    Cache hits return immediately. On a miss the first search result is taken
    and cached. Returns None when TMDB has no match, the request fails, or the
    payload cannot be parsed.
    """
    cached = session.cached_keyword_id(keyword)
    if cached is not None:
        return cached

    try:
        matches = await tmdb.search_keyword(keyword)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Keyword lookup failed for %r: %s", keyword, exc)
        return None

    if not matches:
        logger.debug("No TMDB keyword matches %r", keyword)
        return None

    keyword_id = matches[0].id
    session.remember_keyword(keyword, keyword_id)
    return keyword_id


async def map_keyword_ids(
    keywords: list[str],
    session: SearchSession,
    tmdb: TMDBClient,
) -> set[int]:
    """Resolve every distinct keyword concurrently and collect the IDs that came back."""
    unique_keywords = list(dict.fromkeys(normalize_name(k) for k in keywords if normalize_name(k)))
    if not unique_keywords:
        return set()

    outcomes: list[Optional[int]] = await asyncio.gather(
        *(resolve_keyword_id(keyword, session, tmdb) for keyword in unique_keywords)
    )
    return {keyword_id for keyword_id in outcomes if keyword_id is not None}


async def build_search_filters(
    intent: ExtractedIntent,
    session: SearchSession,
    tmdb: TMDBClient,
) -> SearchFilters:
    """Map an extracted intent onto provider-native discover filters."""
    genre_ids = map_genre_ids(intent.genres, session)
    keyword_ids = await map_keyword_ids(intent.keywords, session, tmdb)

    logger.info(
        "Mapped intent to %d genre ids and %d of %d keyword ids",
        len(genre_ids), len(keyword_ids), len(intent.keywords),
    )
    return SearchFilters(
        media_type=intent.type,
        genre_ids=genre_ids,
        keyword_ids=keyword_ids,
    )
