import json
import logging
from typing import Any, Optional, TypeVar

from openai import APIError, AsyncOpenAI
from pydantic import BaseModel, ValidationError

from implementation.classes.errors import ConfigurationMissing, ResponseMalformed, UpstreamCallFailed
from implementation.config import Settings

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


# ===============================
#           Clients
# ===============================

def create_gemini_client(settings: Settings) -> AsyncOpenAI:
    """
    Build an async client for Gemini's OpenAI-compatible endpoint.
    Raises ConfigurationMissing when no Gemini key is configured.
    """
    if not settings.gemini_api_key:
        raise ConfigurationMissing("Gemini API key is not configured.")
    return AsyncOpenAI(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout=settings.http_timeout,
        max_retries=0,
    )


# ===============================
#     Base Generation Methods
# ===============================

def parse_json_response(raw: Optional[str], response_format: type[ResponseT]) -> ResponseT:
    """
    Parse the model's raw text into `response_format`.
    Raises ResponseMalformed when the text is empty, not JSON, or off-schema.
    """
    if not raw or not raw.strip():
        raise ResponseMalformed("Model response was empty.")
    try:
        data = json.loads(raw)
        return response_format.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        raise ResponseMalformed(f"Model response did not match {response_format.__name__}: {e}") from e


async def generate_gemini_response_async(
    client: AsyncOpenAI,
    user_prompt: str,
    system_prompt: str,
    response_format: type[ResponseT],
    response_schema: dict[str, Any],
    model: str,
    temperature: float = 0.0,
) -> ResponseT:
    """
    Request a JSON-schema constrained completion and validate it against `response_format`.
    Throws UpstreamCallFailed or ResponseMalformed if anything fails.
    """
    try:
        response = await client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=temperature,
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": response_format.__name__,
                    "schema": response_schema,
                },
            },
        )
    except APIError as e:
        raise UpstreamCallFailed(f"Gemini failed to generate response: {e}") from e

    if not response.choices:
        raise ResponseMalformed("Model response had no choices.")

    raw = response.choices[0].message.content
    logger.debug("Gemini raw response: %s", raw)
    return parse_json_response(raw, response_format)
