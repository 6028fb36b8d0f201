"""Helpers for reading google-genai responses."""

from typing import Any, Optional


def first_text_part(response: Any) -> Optional[str]:
    """
    Text of the first text-typed part of the first candidate, verbatim.

    Parts without text (inline data, function calls) and model "thought"
    parts are skipped. Returns None when the reply has no text part.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    for part in parts:
        if getattr(part, "thought", False):
            continue
        text = getattr(part, "text", None)
        if isinstance(text, str):
            return text
    return None


def finish_reason(response: Any) -> Optional[str]:
    """Finish reason of the first candidate, for logging."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return None
    reason = getattr(candidates[0], "finish_reason", None)
    return str(reason) if reason is not None else None
