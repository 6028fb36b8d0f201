"""Normalize the three recipe input modes to plain text."""

from __future__ import annotations

import logging
from typing import Optional

from ficha_tecnica.models.recipe import ImageSource, LinkSource, RecipeSource, TextSource
from ficha_tecnica.services.extraction_client import ExtractionClient
from ficha_tecnica.services.fetcher_service import LinkFetcher
from ficha_tecnica.services.image_service import ImageService
from ficha_tecnica.utils.exceptions import AmbiguousInputError, NoInputError
from ficha_tecnica.utils.validators import clean_field

logger = logging.getLogger(__name__)


def build_source(
    text: Optional[str] = None,
    link: Optional[str] = None,
    image: Optional[bytes] = None,
    content_type: Optional[str] = None,
    filename: Optional[str] = None,
) -> RecipeSource:
    """
    Pick the single recipe source present in a request.

    Blank text/link fields and empty uploads count as absent.

    Raises:
        NoInputError: If no source is present.
        AmbiguousInputError: If more than one source is present.
    """
    text = clean_field(text)
    link = clean_field(link)

    sources = []
    if text is not None:
        sources.append(TextSource(text=text))
    if link is not None:
        sources.append(LinkSource(url=link.strip()))
    if image:
        sources.append(ImageSource(data=image, content_type=content_type, filename=filename))

    if not sources:
        raise NoInputError("Nenhuma receita fornecida")
    if len(sources) > 1:
        kinds = ", ".join(s.kind for s in sources)
        raise AmbiguousInputError(f"Envie apenas uma forma de receita (recebido: {kinds})")
    return sources[0]


class InputResolver:
    """Turns a RecipeSource into recipe text."""

    def __init__(
        self,
        fetcher: LinkFetcher,
        extraction_client: ExtractionClient,
        image_service: ImageService,
    ) -> None:
        self.fetcher = fetcher
        self.extraction_client = extraction_client
        self.image_service = image_service

    async def resolve(self, source: RecipeSource) -> str:
        if isinstance(source, TextSource):
            logger.info("Using pasted recipe text (%d chars)", len(source.text))
            return source.text

        if isinstance(source, LinkSource):
            logger.info("Fetching recipe link %s", source.url[:200])
            return await self.fetcher.fetch(source.url)

        if isinstance(source, ImageSource):
            data, mime_type = self.image_service.validate_image(
                source.data, source.filename or "image"
            )
            return await self.extraction_client.extract_text(data, mime_type)

        raise NoInputError("Nenhuma receita fornecida")
