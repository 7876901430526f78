"""Google Gemini API wrapper: client construction and response parsing."""

import asyncio
import json
import logging
import re

from google import genai
from google.genai import types

from config import settings

logger = logging.getLogger(__name__)


def create_client(api_key: str | None = None) -> genai.Client | None:
    """Build a Gemini client, or None when no API key is configured."""
    key = api_key if api_key is not None else settings.gemini_api_key
    if not key:
        logger.warning("No GEMINI_API_KEY set - Gemini features disabled")
        return None
    return genai.Client(api_key=key)


async def generate_text(
    client: genai.Client,
    prompt: str,
    model: str,
    timeout_s: float,
    temperature: float = 0.0,
    max_output_tokens: int = 256,
) -> str:
    """Send a prompt to Gemini and return the response text.

    Raises:
        asyncio.TimeoutError: if the call exceeds *timeout_s*.
        ValueError: if Gemini returned no text.
    """
    response = await asyncio.wait_for(
        client.aio.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
        ),
        timeout=timeout_s,
    )
    text = response.text
    if not text:
        raise ValueError("No response from Gemini")
    return text


def parse_json(text: str) -> dict | list:
    """Extract and parse JSON from an LLM response that may contain markdown fences.

    Handles responses like:
        ```json\\n{...}\\n```
        Some text {json} more text
        Raw JSON
    """
    if not text or not text.strip():
        raise ValueError("Empty response from API")

    stripped = re.sub(r"```(?:json)?\s*\n?", "", text).strip()
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    # First complete object embedded in prose, at any nesting depth
    decoder = json.JSONDecoder()
    for match in re.finditer(r"\{", stripped):
        try:
            obj, _ = decoder.raw_decode(stripped, match.start())
        except json.JSONDecodeError:
            continue
        return obj

    raise ValueError(f"Could not parse JSON from response: {text[:200]}")
