"""Fill the ficha técnica spreadsheet template."""

from __future__ import annotations

import io
import logging
import re
from datetime import date
from pathlib import Path
from typing import Optional
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.worksheet.worksheet import Worksheet

from ficha_tecnica.config import Settings, settings as default_settings
from ficha_tecnica.models.recipe import GeneratedFile, StructuredRecipe
from ficha_tecnica.utils.exceptions import FileSystemError

logger = logging.getLogger(__name__)

# Template layout
REVISION_DATE_CELL = "B2"
RECIPE_NAME_CELL = "B3"
FIRST_INGREDIENT_ROW = 5
MAX_INGREDIENTS = 12
NAME_COLUMN = "B"
GROSS_COLUMN = "C"
NET_COLUMN = "D"
PRICE_COLUMN = "G"
PREPARATION_CELL = "E19"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def safe_file_name(recipe_name: str) -> str:
    """``"Bolo de Cenoura!"`` -> ``"FT_Bolo_de_Cenoura_.xlsx"``."""
    return f"FT_{_UNSAFE_CHARS.sub('_', recipe_name)}.xlsx"


class SheetFiller:
    """Writes a StructuredRecipe into the template and saves the result."""

    def __init__(self, settings: Settings = default_settings) -> None:
        self.template_path = Path(settings.template_path)
        self.sheet_name = settings.template_sheet
        self.output_dir = Path(settings.output_dir)

    def fill(self, recipe: StructuredRecipe, revision_date: Optional[date] = None) -> GeneratedFile:
        """
        Produce the filled workbook, persist it to the output directory and
        return its bytes.

        Raises:
            FileSystemError: If the template cannot be loaded or the output
                file cannot be written.
        """
        worksheet, workbook = self._load_template()

        today = revision_date or date.today()
        worksheet[REVISION_DATE_CELL] = f"Data de revisão: {today.strftime('%d/%m/%Y')}"
        worksheet[RECIPE_NAME_CELL] = f"Preparo: {recipe.name}"

        self._write_ingredients(worksheet, recipe)

        worksheet[PREPARATION_CELL] = f"FORMA DE PREPARO:\n\n{recipe.preparation_text}"

        buffer = io.BytesIO()
        workbook.save(buffer)
        content = buffer.getvalue()

        file_name = safe_file_name(recipe.name)
        path = self._persist(file_name, content)
        return GeneratedFile(file_name=file_name, content=content, path=path)

    def _load_template(self):
        try:
            workbook = load_workbook(self.template_path)
        except (OSError, BadZipFile, InvalidFileException, KeyError) as e:
            logger.error("Could not load template %s: %s", self.template_path, e)
            raise FileSystemError(f"Não foi possível carregar o modelo {self.template_path}: {e}") from e

        if self.sheet_name not in workbook.sheetnames:
            raise FileSystemError(
                f"Planilha {self.sheet_name!r} não encontrada no modelo {self.template_path}"
            )
        return workbook[self.sheet_name], workbook

    @staticmethod
    def _write_ingredients(worksheet: Worksheet, recipe: StructuredRecipe) -> None:
        if len(recipe.ingredients) > MAX_INGREDIENTS:
            logger.info(
                "Recipe %r has %d ingredients; only the first %d fit the sheet",
                recipe.name,
                len(recipe.ingredients),
                MAX_INGREDIENTS,
            )

        for offset, ingredient in enumerate(recipe.ingredients[:MAX_INGREDIENTS]):
            row = FIRST_INGREDIENT_ROW + offset
            worksheet[f"{NAME_COLUMN}{row}"] = ingredient.name
            worksheet[f"{GROSS_COLUMN}{row}"] = ingredient.gross_quantity
            worksheet[f"{NET_COLUMN}{row}"] = ingredient.net_quantity
            if ingredient.price is not None:
                worksheet[f"{PRICE_COLUMN}{row}"] = ingredient.price

    def _persist(self, file_name: str, content: bytes) -> Path:
        path = self.output_dir / file_name
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as e:
            logger.error("Could not write %s: %s", path, e)
            raise FileSystemError(f"Não foi possível salvar {path}: {e}") from e

        logger.info("Technical sheet written to %s (%d bytes)", path, len(content))
        return path
