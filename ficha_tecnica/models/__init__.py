"""Pydantic models."""

from ficha_tecnica.models.recipe import (
    FilePayload,
    GeneratedFile,
    ImageSource,
    Ingredient,
    LinkSource,
    ProcessRecipeResponse,
    RecipeSource,
    StructuredRecipe,
    TextSource,
)

__all__ = [
    "FilePayload",
    "GeneratedFile",
    "ImageSource",
    "Ingredient",
    "LinkSource",
    "ProcessRecipeResponse",
    "RecipeSource",
    "StructuredRecipe",
    "TextSource",
]
