import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from pydantic import BaseModel, Field

from db.search import MovieSearch, SearchSnapshot
from db.session import SearchSession
from db.tmdb import TMDBClient
from implementation.classes.schemas import Genre
from implementation.config import Settings
from implementation.llms.generic_methods import create_gemini_client
from implementation.misc.helpers import append_genre_to_query

logger = logging.getLogger(__name__)


def build_movie_search(settings: Settings) -> MovieSearch:
    """Wire a MovieSearch with whichever clients the configured credentials allow."""
    tmdb = TMDBClient.from_settings(settings) if settings.has_tmdb_credentials else None
    llm_client = create_gemini_client(settings) if settings.has_llm_credentials else None
    missing = settings.missing_credentials()
    if missing:
        logger.warning("Missing credentials: %s; searches will be rejected", ", ".join(missing))
    return MovieSearch(settings=settings, session=SearchSession(), tmdb=tmdb, llm_client=llm_client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan handler for the search session.

    Builds the clients from the environment and loads the genre list once on
    startup. A failed genre load is reported through the search state rather
    than stopping the server.
    """
    search = getattr(app.state, "search", None)
    if search is None:
        search = build_movie_search(Settings.from_env())
        app.state.search = search
    await search.load_genres()
    yield
    if search.tmdb is not None:
        await search.tmdb.aclose()
    if search.llm_client is not None:
        await search.llm_client.close()


app = FastAPI(lifespan=lifespan)


# ---------------------------------------------------------------------------
# Request / response bodies
# ---------------------------------------------------------------------------

class SearchRequest(BaseModel):
    query: str


class GenrePickRequest(BaseModel):
    query: str = ""
    genre: str = Field(..., min_length=1)


class TitleResponse(BaseModel):
    id: int
    name: str
    media_type: Optional[str]
    overview: str
    rating: str
    release_date: Optional[str]
    poster_url: str
    play_url: str


class SearchResponse(BaseModel):
    state: str
    query: Optional[str]
    error: Optional[str]
    results: list[TitleResponse]
    history: list[str]


def get_search(request: Request) -> MovieSearch:
    return request.app.state.search


def to_response(snapshot: SearchSnapshot, play_base_url: str) -> SearchResponse:
    return SearchResponse(
        state=snapshot.state.value,
        query=snapshot.query,
        error=snapshot.error,
        results=[
            TitleResponse(
                id=title.id,
                name=title.display_name,
                media_type=title.media_type.value if title.media_type else None,
                overview=title.overview,
                rating=title.display_rating,
                release_date=title.release_date,
                poster_url=title.poster_url,
                play_url=title.play_url(play_base_url),
            )
            for title in snapshot.results
        ],
        history=snapshot.history,
    )


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/health")
async def health_check(search: MovieSearch = Depends(get_search)):
    """
    Report whether each upstream is usable.

    - tmdb: 'ok' once genres are cached, otherwise the current error or 'missing'
    - llm: 'configured' or 'missing'
    """
    if search.tmdb is None:
        tmdb_status = "missing"
    elif search.session.genres_loaded:
        tmdb_status = "ok"
    else:
        tmdb_status = search.error or "genres not loaded"
    return {
        "tmdb": tmdb_status,
        "llm": "configured" if search.llm_client is not None else "missing",
    }


@app.get("/genres", response_model=list[Genre])
async def list_genres(search: MovieSearch = Depends(get_search)):
    return await search.load_genres()


@app.post("/search", response_model=SearchResponse)
async def run_search(body: SearchRequest, search: MovieSearch = Depends(get_search)):
    snapshot = await search.submit(body.query)
    return to_response(snapshot, search.settings.play_base_url)


@app.get("/history")
async def search_history(search: MovieSearch = Depends(get_search)):
    return {"history": search.history}


@app.post("/query/genre")
async def pick_genre(body: GenrePickRequest):
    """Append a quick-pick genre to the query text being composed."""
    return {"query": append_genre_to_query(body.query, body.genre)}
