"""Recipe source to technical sheet, end to end."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from ficha_tecnica.config import Settings, settings as default_settings
from ficha_tecnica.models.recipe import GeneratedFile, RecipeSource, StructuredRecipe
from ficha_tecnica.services.extraction_client import ExtractionClient
from ficha_tecnica.services.fetcher_service import LinkFetcher
from ficha_tecnica.services.gemini_client import GeminiClient
from ficha_tecnica.services.image_service import ImageService
from ficha_tecnica.services.input_resolver import InputResolver
from ficha_tecnica.services.sheet_filler import SheetFiller
from ficha_tecnica.services.structuring_client import StructuringClient

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    recipe: StructuredRecipe
    file: GeneratedFile


class TechnicalSheetPipeline:
    """Resolve input, structure it with Gemini and fill the sheet."""

    def __init__(
        self,
        resolver: InputResolver,
        structuring_client: StructuringClient,
        sheet_filler: SheetFiller,
    ) -> None:
        self.resolver = resolver
        self.structuring_client = structuring_client
        self.sheet_filler = sheet_filler

    @property
    def max_upload_size(self) -> int:
        return self.resolver.image_service.max_size

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "TechnicalSheetPipeline":
        """Wire the production collaborators from one Settings object."""
        gemini = GeminiClient(settings)
        resolver = InputResolver(
            fetcher=LinkFetcher(settings),
            extraction_client=ExtractionClient(gemini, settings),
            image_service=ImageService(settings),
        )
        return cls(
            resolver=resolver,
            structuring_client=StructuringClient(gemini, settings),
            sheet_filler=SheetFiller(settings),
        )

    async def process(self, source: RecipeSource) -> PipelineResult:
        content = await self.resolver.resolve(source)
        recipe = await self.structuring_client.structure(content)
        logger.info(
            "Structured recipe %r (%d ingredients, %d warnings)",
            recipe.name,
            len(recipe.ingredients),
            len(recipe.warnings),
        )
        generated = await asyncio.to_thread(self.sheet_filler.fill, recipe)
        return PipelineResult(recipe=recipe, file=generated)
