"""
Recipe text to StructuredRecipe through Gemini.

The model gets the culinary system prompt plus the recipe text, and must
answer with a single JSON object in the ficha técnica shape:

    {"nomeReceita": ..., "ingredientes": [{"nome", "qtdBruta", "qtdLiquida",
     "preco"}], "modoPreparo": ..., "avisos": [...]}

Replies may be wrapped in prose or markdown fences; the first balanced
object is used. Loose numeric types are normalized before validation.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ficha_tecnica.config import Settings, settings as default_settings
from ficha_tecnica.models.recipe import StructuredRecipe
from ficha_tecnica.services.gemini_client import GeminiClient
from ficha_tecnica.utils.exceptions import RecipeSchemaError, StructuringError
from ficha_tecnica.utils.json_extraction import parse_json_object

logger = logging.getLogger(__name__)

_CURRENCY = re.compile(r"^(?:R\$|US\$|\$|€)\s*")
# Digits may be followed by a unit ("250 g", "2 xícaras") but not by more digits.
_UNIT = r"(?:\s*[^\W\d_][^\d]*)?"
_DECIMAL = re.compile(
    r"(?:(?P<grouped>-?[1-9]\d{0,2}(?:\.\d{3})+(?:,\d+)?)|(?P<plain>-?\d+(?:[.,]\d+)?))" + _UNIT
)
_FRACTION = re.compile(r"(?:(?P<whole>\d+)\s+)?(?P<num>\d+)\s*/\s*(?P<den>\d+)" + _UNIT)

_NUMERIC_FIELDS = (
    ("qtdBruta", "quantidade bruta"),
    ("qtdLiquida", "quantidade líquida"),
    ("preco", "preço"),
)


def build_user_prompt(content: str) -> str:
    return f"""Processe esta receita e retorne em formato JSON estruturado:

{content}

Retorne APENAS um objeto JSON válido com esta estrutura:
{{
  "nomeReceita": "nome da receita",
  "ingredientes": [
    {{"nome": "ingrediente", "qtdBruta": 100, "qtdLiquida": 100, "preco": null}}
  ],
  "modoPreparo": "texto completo do modo de preparo",
  "avisos": ["aviso1", "aviso2"]
}}"""


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a model-provided quantity or price; None when not numeric.

    Accepts pt-BR decimals and thousands (``"1,5"``, ``"1.500"``,
    ``"1.500,75"``), simple fractions (``"1/2"``, ``"1 1/2 xícara"``), a
    leading currency symbol (``"R$ 3,50"``) and a trailing unit. Anything
    else, including ranges like ``"2 a 3"``, is rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None

    text = _CURRENCY.sub("", value.strip())

    match = _FRACTION.fullmatch(text)
    if match:
        denominator = int(match.group("den"))
        if denominator == 0:
            return None
        whole = int(match.group("whole") or 0)
        return whole + int(match.group("num")) / denominator

    match = _DECIMAL.fullmatch(text)
    if match:
        if match.group("grouped"):
            return float(match.group("grouped").replace(".", "").replace(",", "."))
        return float(match.group("plain").replace(",", "."))
    return None


def normalize_recipe_json(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalize recipe JSON so it satisfies StructuredRecipe.

    - missing lists become [], missing preparation text becomes ""
    - a numeric recipe name becomes a string, a bare warning string a list
    - quantities/prices are coerced with to_number; values that cannot be
      read are left empty and reported in ``avisos``
    - ingredients without a name are dropped
    """
    normalized: Dict[str, Any] = dict(data)

    name = normalized.get("nomeReceita")
    if isinstance(name, (int, float)) and not isinstance(name, bool):
        normalized["nomeReceita"] = str(name)

    for key in ("ingredientes", "avisos"):
        if normalized.get(key) is None:
            normalized[key] = []

    if normalized.get("modoPreparo") is None:
        normalized["modoPreparo"] = ""
    elif not isinstance(normalized["modoPreparo"], str):
        normalized["modoPreparo"] = str(normalized["modoPreparo"])

    if not isinstance(normalized["avisos"], list):
        normalized["avisos"] = [normalized["avisos"]]
    warnings = [str(w).strip() for w in normalized["avisos"] if str(w).strip()]

    ingredients = normalized["ingredientes"]
    if isinstance(ingredients, list):
        fixed: List[Dict[str, Any]] = []
        for ing in ingredients:
            if isinstance(ing, str):
                ing = {"nome": ing}
            if not isinstance(ing, dict):
                continue
            ing_name = str(ing.get("nome") or "").strip()
            if not ing_name:
                continue
            entry: Dict[str, Any] = {"nome": ing_name}
            for key, label in _NUMERIC_FIELDS:
                raw = ing.get(key)
                entry[key] = to_number(raw)
                if entry[key] is None and raw is not None and str(raw).strip():
                    logger.info("Unreadable %s %r for %r", key, raw, ing_name)
                    warnings.append(
                        f"{ing_name}: valor de {label} {str(raw).strip()!r} não reconhecido, "
                        "célula deixada em branco"
                    )
            fixed.append(entry)
        normalized["ingredientes"] = fixed

    normalized["avisos"] = warnings
    return normalized


class StructuringClient:
    """Turns free recipe text into a StructuredRecipe."""

    def __init__(
        self,
        gemini: GeminiClient,
        settings: Settings = default_settings,
        system_prompt: Optional[str] = None,
    ) -> None:
        self.gemini = gemini
        self.max_tokens = settings.structuring_max_tokens
        self.system_prompt = system_prompt if system_prompt is not None else settings.load_system_prompt()

    async def structure(self, content: str) -> StructuredRecipe:
        """
        Ask Gemini for the structured recipe and parse its reply.

        Raises:
            StructuringError: If the call fails or returns no text.
            MalformedResponseError: If the reply has no JSON object.
            JsonParseError: If the JSON object does not parse.
            RecipeSchemaError: If the object does not have the recipe shape.
        """
        logger.info("Structuring recipe content (%d chars)", len(content))
        try:
            reply = await self.gemini.generate_text(
                build_user_prompt(content),
                system_instruction=self.system_prompt,
                max_output_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.error("Structuring call failed: %s", e, exc_info=True)
            raise StructuringError(f"Falha ao estruturar a receita: {e}") from e

        if not reply:
            raise StructuringError("O modelo não retornou texto")

        return self.parse_reply(reply)

    @staticmethod
    def parse_reply(reply: str) -> StructuredRecipe:
        data = parse_json_object(reply)
        try:
            return StructuredRecipe.model_validate(normalize_recipe_json(data))
        except ValidationError as e:
            logger.warning("Model JSON does not match the recipe shape: %s", e)
            raise RecipeSchemaError(f"JSON fora do formato esperado: {e}") from e
