"""Image to text extraction through Gemini vision."""

from __future__ import annotations

import logging

from google.genai import types

from ficha_tecnica.config import Settings, settings as default_settings
from ficha_tecnica.services.gemini_client import GeminiClient
from ficha_tecnica.utils.exceptions import ExtractionError

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = (
    "Extraia todo o texto desta imagem de receita, "
    "incluindo nome, ingredientes e modo de preparo."
)


class ExtractionClient:
    """Reads the recipe text off a photo."""

    def __init__(self, gemini: GeminiClient, settings: Settings = default_settings) -> None:
        self.gemini = gemini
        self.max_tokens = settings.extraction_max_tokens

    async def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str:
        """
        Return the recipe text Gemini reads from the image, verbatim.

        Raises:
            ExtractionError: If the call fails or the reply carries no text.
        """
        # The SDK base64-encodes inline bytes on the wire.
        contents = [
            types.Part.from_bytes(data=image_data, mime_type=mime_type),
            EXTRACTION_PROMPT,
        ]

        logger.info("Extracting recipe text from image (mime_type=%s, %d bytes)", mime_type, len(image_data))
        try:
            text = await self.gemini.generate_text(contents, max_output_tokens=self.max_tokens)
        except Exception as e:
            logger.error("Image extraction failed: %s", e, exc_info=True)
            raise ExtractionError(f"Falha ao extrair texto da imagem: {e}") from e

        if not text:
            raise ExtractionError("O modelo não retornou texto para a imagem")
        return text
