"""
Exception types raised along the search pipeline.

The orchestrator in db.search converts each of these into a short message
for the user; lower layers only raise them.
"""


class MovieSearchError(Exception):
    """Base class for every failure the search pipeline reports."""


class ConfigurationMissing(MovieSearchError):
    """A credential required for a call path is not configured."""


class UpstreamCallFailed(MovieSearchError):
    """A network or HTTP failure from the catalog or the language model."""


class ResponseMalformed(MovieSearchError):
    """The language model returned no text, or text that does not fit the schema."""


class NoResultsFound(MovieSearchError):
    """The pipeline succeeded but nothing was left after filtering."""
