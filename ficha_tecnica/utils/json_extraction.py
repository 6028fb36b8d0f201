"""Locate and parse the JSON object embedded in a model reply."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from ficha_tecnica.utils.exceptions import JsonParseError, MalformedResponseError

logger = logging.getLogger(__name__)


def find_json_object(text: str) -> Optional[str]:
    """
    Return the first balanced ``{...}`` span in ``text``, or None.

    Braces inside JSON string literals (including escaped quotes) do not
    affect the depth count, so a value like ``"use } here"`` is safe.
    Prose and markdown fences around the object are ignored.
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for pos in range(start, len(text)):
            ch = text[pos]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : pos + 1]
        # Unbalanced from this opening brace; a later one may still close.
        start = text.find("{", start + 1)

    return None


def _strip_trailing_commas(json_text: str) -> str:
    # {"a": 1,} -> {"a": 1} and [1, 2,] -> [1, 2]
    return re.sub(r",(\s*[}\]])", r"\1", json_text)


def parse_json_object(text: str) -> Dict[str, Any]:
    """
    Extract and decode the JSON object a model reply carries.

    Raises:
        MalformedResponseError: If the reply has no ``{...}`` span.
        JsonParseError: If the span is not a valid JSON object.
    """
    span = find_json_object(text)
    if span is None:
        raise MalformedResponseError("A resposta do modelo não contém um objeto JSON")

    try:
        data = json.loads(span)
    except json.JSONDecodeError:
        try:
            data = json.loads(_strip_trailing_commas(span))
        except json.JSONDecodeError as e:
            logger.warning("Model reply JSON did not parse: %s", e)
            raise JsonParseError(f"JSON inválido na resposta do modelo: {e}") from e

    return data
