"""
Structured parsing of LLM responses.

LLM output is free-form text that is supposed to contain one JSON object.
The object is located, decoded and validated against a pydantic schema; any
failure raises LLMResponseError so the caller can switch to its fallback.
"""
import json
import re
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_FENCED_JSON = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\})\s*```", re.IGNORECASE)


class LLMResponseError(ValueError):
    """LLM output was empty, not JSON, or did not match the expected schema."""


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """
    Find the first JSON object in text.

    Tries, in order: the whole text, a ```json fenced block, the span between
    the first "{" and the last "}".

    Returns:
        Decoded dict, or None if nothing decodes to a JSON object
    """
    text = (text or "").strip()
    if not text:
        return None

    candidates = [text]
    fenced = _FENCED_JSON.search(text)
    if fenced:
        candidates.append(fenced.group(1))
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except (json.JSONDecodeError, TypeError):
            continue
        if isinstance(parsed, dict):
            return parsed
    return None


def parse_structured_response(text: str, schema: Type[T]) -> T:
    """
    Parse LLM text into a validated schema instance.

    Args:
        text: Raw LLM output
        schema: Pydantic model describing the expected object

    Returns:
        Schema instance

    Raises:
        LLMResponseError: If no JSON object is found or validation fails
    """
    data = extract_json_object(text)
    if data is None:
        raise LLMResponseError("No JSON object found in LLM response")
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise LLMResponseError(f"LLM response does not match {schema.__name__}: {e}") from e
