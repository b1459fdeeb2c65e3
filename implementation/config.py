"""
Runtime configuration for the search service.

Credentials and endpoints come from the environment (a local .env file is
loaded when present). Empty strings are treated the same as unset values so
that a blank line in .env reads as "not configured".
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables (for API keys)
load_dotenv()

TMDB_BASE_URL = "https://api.themoviedb.org/3"
GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEFAULT_PLAY_BASE_URL = "https://moviealtflix.netlify.app"


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


@dataclass(frozen=True, slots=True)
class Settings:
    tmdb_access_token: Optional[str] = None
    tmdb_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_base_url: str = GEMINI_OPENAI_BASE_URL
    tmdb_base_url: str = TMDB_BASE_URL
    http_timeout: float = 10.0
    max_results: int = 50      # results shown per search
    history_size: int = 5      # recent queries remembered per session
    play_base_url: str = DEFAULT_PLAY_BASE_URL

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        timeout = _env("TMDB_HTTP_TIMEOUT")
        return cls(
            tmdb_access_token=_env("TMDB_ACCESS_TOKEN"),
            tmdb_api_key=_env("TMDB_API_KEY"),
            gemini_api_key=_env("GEMINI_API_KEY"),
            gemini_model=_env("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
            gemini_base_url=_env("GEMINI_BASE_URL") or GEMINI_OPENAI_BASE_URL,
            tmdb_base_url=_env("TMDB_BASE_URL") or TMDB_BASE_URL,
            http_timeout=float(timeout) if timeout else 10.0,
            play_base_url=_env("PLAY_BASE_URL") or DEFAULT_PLAY_BASE_URL,
        )

    @property
    def has_tmdb_credentials(self) -> bool:
        return self.tmdb_access_token is not None

    @property
    def has_llm_credentials(self) -> bool:
        return self.gemini_api_key is not None

    def missing_credentials(self) -> list[str]:
        """Names of the credentials a search needs but does not have."""
        missing = []
        if not self.has_tmdb_credentials:
            missing.append("TMDB_ACCESS_TOKEN")
        if not self.has_llm_credentials:
            missing.append("GEMINI_API_KEY")
        return missing
