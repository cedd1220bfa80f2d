"""Parse raw model output into a validated ModelResponse."""

from __future__ import annotations

import json
import logging
import re

import pydantic

from .errors import MalformedResponseError
from .models import ModelResponse

logger = logging.getLogger(__name__)

# Opening fence with an optional language tag, e.g. ```json
_LEADING_FENCE = re.compile(r"\A```[\w+-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?```\Z")


def strip_fences(raw: str) -> str:
    """Remove one leading and one trailing markdown fence marker, if present."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    if cleaned.endswith("```"):
        cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def _describe(exc: pydantic.ValidationError) -> str:
    first = exc.errors()[0]
    loc = ".".join(str(p) for p in first.get("loc", ())) or "<root>"
    return f"{loc}: {first.get('msg', 'invalid')}"


def parse(raw: str) -> ModelResponse:
    """Parse the model's raw text.

    Raises MalformedResponseError on invalid JSON or any schema violation.
    There is no partial recovery.
    """
    cleaned = strip_fences(raw or "")
    try:
        data = json.loads(cleaned)
    except (ValueError, RecursionError) as exc:
        # JSONDecodeError, oversized int literals, pathological nesting
        logger.warning("Model returned invalid JSON: %s", exc)
        raise MalformedResponseError("Model response is not valid JSON.") from exc

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Model response must be a JSON object, got {type(data).__name__}."
        )
    missing = [key for key in ("code", "mapping") if key not in data]
    if missing:
        raise MalformedResponseError(
            f"Model response is missing required key(s): {', '.join(missing)}."
        )

    try:
        return ModelResponse.model_validate(data)
    except pydantic.ValidationError as exc:
        detail = _describe(exc)
        logger.warning("Model response failed schema validation: %s", detail)
        raise MalformedResponseError(f"Model response does not match schema ({detail}).") from exc
