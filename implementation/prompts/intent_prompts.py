"""
Prompt and response schema for turning a mood description into a search intent.
"""

from typing import Any, Iterable

INTENT_SYSTEM_PROMPT_TEMPLATE = """\
You are a movie and TV show search assistant. Based on the user's sentence, \
identify the type, genres, keywords, and year.

RULES:
- Only use genres from this exact list: {valid_genres}.
- If no genre matches the list, use an empty array for genres.
- If the user doesn't specify tv or movie, default to "movie".
- keywords are short topical words or phrases from the sentence that are not genres.
- Only include year when the sentence implies a time period.

EXAMPLES:
Input: "I'm in the mood for a recent action-packed movie with lots of fighting"
-> {{"type":"movie","genres":["Action"],"keywords":["fighting"],"year":2024}}
Input: "Suggest a family-friendly animated series from the 90s"
-> {{"type":"tv","genres":["Animation","Family"],"keywords":["friendly"],"year":1990}}
Input: "Show me some horror films"
-> {{"type":"movie","genres":["Horror"],"keywords":[]}}
"""

# JSON schema the model's reply must satisfy. year is the only optional field.
INTENT_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "type": {"type": "string", "enum": ["tv", "movie"]},
        "genres": {"type": "array", "items": {"type": "string"}},
        "keywords": {"type": "array", "items": {"type": "string"}},
        "year": {"type": "number"},
    },
    "required": ["type", "genres", "keywords"],
}


def build_intent_system_prompt(genre_names: Iterable[str]) -> str:
    """Embed the session's current genre names into the extraction prompt."""
    return INTENT_SYSTEM_PROMPT_TEMPLATE.format(valid_genres=", ".join(genre_names))


def build_intent_user_prompt(user_text: str) -> str:
    return f'Input: "{user_text}"'
