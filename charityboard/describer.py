"""
AI-generated task descriptions.

Calls the Gemini generateContent REST endpoint with the task title and
returns the generated text. Never raises: a missing key or any failure is
turned into one of the fixed fallback strings below.
"""
import logging
from typing import Any, Dict, Optional

import requests

from .config import Config

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "API key missing: set an API key to generate descriptions."
GENERATION_ERROR_MESSAGE = (
    "An error occurred while generating the description. Please try again later."
)
EMPTY_RESPONSE_MESSAGE = "No description was generated."

DESCRIPTION_PROMPT = """You are an assistant on a charity task management platform.
The task is titled: "{title}".
Write a detailed, professional description of this task in about 50 words.
Focus on the practical steps."""


def build_prompt(title: str) -> str:
    return DESCRIPTION_PROMPT.format(title=title.strip())


def parse_generation_response(data: Dict[str, Any]) -> str:
    """Pull the text out of a generateContent response; empty string if absent."""
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(str(p.get("text", "")) for p in parts).strip()


class DescriptionGenerator:
    """HTTP client for the description model."""

    def __init__(self, config: Optional[Config] = None, session: Optional[requests.Session] = None):
        self.config = config or Config()
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.config.ai_endpoint.rstrip('/')}/{self.config.ai_model}:generateContent"

    def generate(self, title: str) -> str:
        api_key = self.config.ai_api_key
        if not api_key:
            logger.warning("API key missing (%s); AI descriptions disabled",
                           self.config.ai_api_key_env)
            return MISSING_KEY_MESSAGE

        try:
            r = self.session.post(
                self.url,
                json={"contents": [{"parts": [{"text": build_prompt(title)}]}]},
                headers={"x-goog-api-key": api_key, "Content-Type": "application/json"},
                timeout=self.config.ai_timeout_secs,
            )
            r.raise_for_status()
            text = parse_generation_response(r.json())
        except (requests.RequestException, ValueError,
                AttributeError, KeyError, TypeError, IndexError):
            logger.exception("Error generating description for %r", title)
            return GENERATION_ERROR_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE
