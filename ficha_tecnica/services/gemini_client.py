"""Thin async wrapper around the google-genai client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from google import genai
from google.genai import types

from ficha_tecnica.config import Settings, settings as default_settings
from ficha_tecnica.utils.gemini_helpers import finish_reason, first_text_part

logger = logging.getLogger(__name__)


class GeminiClient:
    """Single-turn text generation against Gemini."""

    def __init__(self, settings: Settings = default_settings) -> None:
        self.settings = settings
        self._client: Optional[genai.Client] = None

    @property
    def client(self) -> genai.Client:
        """Get or create Gemini client (lazy initialization)."""
        if self._client is None:
            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    async def generate_text(
        self,
        contents: Any,
        *,
        max_output_tokens: int,
        system_instruction: Optional[str] = None,
    ) -> Optional[str]:
        """
        Send one generate_content call and return the first text part.

        The SDK call is blocking, so it runs in a worker thread. SDK and
        network errors propagate to the caller; there is no retry.
        """
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            max_output_tokens=max_output_tokens,
            temperature=self.settings.gemini_temperature,
        )

        def _sync_call() -> Any:
            return self.client.models.generate_content(
                model=self.settings.gemini_model,
                contents=contents,
                config=config,
            )

        response = await asyncio.to_thread(_sync_call)
        text = first_text_part(response)
        if text is None:
            logger.warning(
                "Gemini reply has no text part (finish_reason=%s)", finish_reason(response)
            )
        else:
            logger.debug("Gemini raw response:\n%s", text)
        return text
