"""Thin wrapper around the Gemini text API (google-genai).

Everything here is best effort: without an API key, or when a call fails,
the helpers log and return a neutral value instead of raising.
"""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Optional

from google import genai
from google.genai import types

from app.config import settings

logger = logging.getLogger(__name__)

LOCAL_IPS = ("::1", "127.0.0.1", "testclient")


@lru_cache(maxsize=1)
def get_client() -> Optional[genai.Client]:
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; AI-powered features are disabled")
        return None
    return genai.Client(api_key=settings.GEMINI_API_KEY)


def generate(prompt: str, response_schema: Optional[dict[str, Any]] = None) -> Optional[str]:
    """Run one prompt. JSON mode when a response schema is given."""
    client = get_client()
    if client is None:
        return None

    config = None
    if response_schema is not None:
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_schema,
        )

    try:
        response = client.models.generate_content(
            model=settings.GEMINI_MODEL,
            contents=prompt,
            config=config,
        )
        return (response.text or "").strip() or None
    except Exception as e:
        logger.error("Gemini request failed: %s", e)
        return None


# ============================================================
# RELATIONSHIP PROSE
# ============================================================

def path_to_text(segments: list[dict]) -> str:
    return " -> ".join(f"{s['person_name']} ({s['relationship']})" for s in segments)


def fallback_description(segments: list[dict]) -> str:
    if len(segments) == 1:
        return f"{segments[0]['person_name']} is the same person."
    first = segments[0]["person_name"]
    last = segments[-1]["person_name"]
    return f"{last} is related to {first}: {path_to_text(segments)}"


def describe_relationship(segments: list[dict], language: Optional[str] = None) -> str:
    """Turn a hop list into one sentence; plain chain text if the model is unavailable."""
    prompt = (
        "Convert the following family tree path into a simple, natural language "
        "sentence describing the relationship between the first and last person. "
        'For example, "A (start) -> B (parent) -> C (parent)" should become '
        '"C is the grandparent of A". '
        f"Path: {path_to_text(segments)}"
    )
    if language == "fa":
        prompt += "\n\nPlease provide the response in Persian."

    return generate(prompt) or fallback_description(segments)


# ============================================================
# LOCATIONS
# ============================================================

def city_from_ip(ip: Optional[str]) -> Optional[str]:
    if not ip:
        return None
    if ip in LOCAL_IPS:
        return "Localhost"

    text = generate(
        f"What city is the IP address {ip} located in? Respond with only the city "
        'and country name, for example: "Mountain View, USA". If you cannot '
        'determine the city, respond with "Unknown".'
    )
    if not text or text == "Unknown":
        return None
    return text


def geocode(location: str) -> Optional[dict[str, float]]:
    text = generate(
        f'Provide the latitude and longitude for "{location}". Respond with only a '
        'JSON object with "lat" and "lng" keys.',
        response_schema={
            "type": "OBJECT",
            "properties": {
                "lat": {"type": "NUMBER"},
                "lng": {"type": "NUMBER"},
            },
            "required": ["lat", "lng"],
        },
    )
    if not text:
        return None

    try:
        data = json.loads(text)
        return {"lat": float(data["lat"]), "lng": float(data["lng"])}
    except (ValueError, KeyError, TypeError) as e:
        logger.error("Could not parse geocode response for %r: %s", location, e)
        return None


def location_suggestions(query: str) -> list[str]:
    text = generate(
        f'Provide up to 5 location suggestions for the query "{query}". The '
        "locations should be real places. Respond with only a JSON array of strings.",
        response_schema={"type": "ARRAY", "items": {"type": "STRING"}},
    )
    if not text:
        return []

    try:
        data = json.loads(text)
    except ValueError as e:
        logger.error("Could not parse location suggestions for %r: %s", query, e)
        return []

    return [str(s) for s in data][:5] if isinstance(data, list) else []
