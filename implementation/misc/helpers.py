"""
Small string and parameter helpers used across the search pipeline.
"""

from typing import Iterable


def normalize_name(text: str) -> str:
    """
    Normalize a genre or keyword name for cache lookups and comparisons.

    Trims surrounding whitespace and lowercases. Inner whitespace and
    punctuation are left alone, since TMDB keyword search is sensitive to them.

    Examples:
        >>> normalize_name("  Science Fiction ")
        'science fiction'
        >>> normalize_name("Time-Travel")
        'time-travel'
    """
    if not text:
        return ""
    return text.strip().lower()


def join_ids(ids: Iterable[int]) -> str:
    """Join provider IDs into the comma-separated form TMDB filters expect."""
    return ",".join(str(i) for i in sorted(set(ids)))


def append_genre_to_query(query: str, genre_name: str) -> str:
    """
    Add a genre name to the free-text query, as the genre quick-pick buttons do.

    Empty query becomes the genre name. A query that already mentions the genre
    (case-insensitively) is returned unchanged. Otherwise the genre is appended
    after a comma.
    """
    if not query:
        return genre_name
    if genre_name.lower() in query.lower():
        return query
    return f"{query}, {genre_name}"
