from typing import Iterable

from openai import AsyncOpenAI

from implementation.classes.schemas import ExtractedIntent
from implementation.config import DEFAULT_GEMINI_MODEL
from implementation.llms.generic_methods import generate_gemini_response_async
from implementation.prompts.intent_prompts import (
    INTENT_RESPONSE_SCHEMA,
    build_intent_system_prompt,
    build_intent_user_prompt,
)


# ===============================
#        Search Intent
# ===============================

async def extract_search_intent_async(
    client: AsyncOpenAI,
    user_text: str,
    genre_names: Iterable[str],
    model: str = DEFAULT_GEMINI_MODEL,
) -> ExtractedIntent:
    """
        Extract media type, genres, keywords and year from a free-text mood description.
        The prompt lists the currently cached genre names so the model picks from them.
        Throws UpstreamCallFailed or ResponseMalformed if anything fails; never retries.
    """
    return await generate_gemini_response_async(
        client=client,
        user_prompt=build_intent_user_prompt(user_text),
        system_prompt=build_intent_system_prompt(genre_names),
        response_format=ExtractedIntent,
        response_schema=INTENT_RESPONSE_SCHEMA,
        model=model,
    )
