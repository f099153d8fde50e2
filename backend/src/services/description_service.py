"""
Bookmark description generation.

Asks an OpenAI-compatible chat completions endpoint for a short description
of a bookmark from its title. The request is a single call with no retries;
the caller decides what to do when it fails.
"""
import logging
from typing import Any

import httpx

from core.config import Settings, get_settings
from services.exceptions import RemoteFailureError, ServiceUnavailableError, ValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant that creates concise, informative descriptions for "
    "bookmarks. Generate a 1-2 sentence description based on the bookmark title that "
    "explains what the user might find at this link."
)
MAX_TOKENS = 100
TEMPERATURE = 0.7


def build_request_body(title: str, model: str) -> dict[str, Any]:
    """Build the chat completions payload for a bookmark title."""
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": f'Generate a brief description for this bookmark title: "{title}"',
            },
        ],
        "max_tokens": MAX_TOKENS,
        "temperature": TEMPERATURE,
    }


def extract_description(data: Any) -> str | None:
    """Return the stripped content of the first choice, if there is one."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        return None
    return content.strip() or None


class DescriptionService:
    """Generates bookmark descriptions through the configured completions API."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.settings.openai_api_key}",
            "Content-Type": "application/json",
        }

    async def generate(self, title: str) -> str:
        """
        Generate a one or two sentence description for ``title``.

        Raises:
            ValidationError: If the title is blank.
            ServiceUnavailableError: If no API key is configured.
            RemoteFailureError: If the completions call fails or returns no text.
        """
        title = title.strip()
        if not title:
            raise ValidationError("title", "Title is required")
        if not self.settings.description_enabled:
            raise ServiceUnavailableError("Description generation is not configured")

        body = build_request_body(title, self.settings.description_model)
        try:
            async with httpx.AsyncClient(
                base_url=self.settings.openai_base_url,
                timeout=self.settings.description_timeout,
            ) as client:
                response = await client.post(
                    "/chat/completions", json=body, headers=self._get_headers(),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Description request failed with status %s: %s",
                e.response.status_code,
                e.response.text,
            )
            raise RemoteFailureError("Failed to generate description") from e
        except httpx.RequestError as e:
            logger.warning("Description service unreachable: %s", e)
            raise RemoteFailureError("Failed to generate description") from e

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteFailureError("Description service returned an invalid response") from e

        description = extract_description(data)
        if description is None:
            logger.warning("Description service returned no content for %r", title)
            raise RemoteFailureError("No description generated")
        logger.info("Generated description for %r", title)
        return description
