"""Shared API dependencies."""

from functools import lru_cache

from ficha_tecnica.config import settings
from ficha_tecnica.services.pipeline import TechnicalSheetPipeline


@lru_cache(maxsize=1)
def get_pipeline() -> TechnicalSheetPipeline:
    """Technical sheet pipeline wired from the global settings."""
    return TechnicalSheetPipeline.from_settings(settings)
