"""Runtime configuration, resolved from defaults and environment variables.

Precedence: CLI flag > environment variable > default.  The API key is
never a config field; it only lives in a Session.
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

_ENV_PREFIX = "PROMPTMAP_"
_TRUE_WORDS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "n", "off"})


class PromptmapConfig(BaseModel):
    """Effective settings for the server and the LLM client."""

    model: str = DEFAULT_MODEL
    """Gemini model id used for generation."""

    base_url: str = DEFAULT_BASE_URL
    """Root of the Generative Language REST API."""

    timeout: float = 60.0
    """Per-request timeout in seconds for the model call."""

    host: str = "127.0.0.1"
    port: int = 8000

    verify_key: bool = False
    """Check the key against the model endpoint when a session is created."""


def _coerce(raw: str, annotation: object) -> object:
    if annotation is bool or annotation == "bool":
        word = raw.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"not a boolean: {raw!r}")
    if annotation is int or annotation == "int":
        return int(raw)
    if annotation is float or annotation == "float":
        return float(raw)
    return raw


def load_config(environ: dict[str, str] | None = None) -> PromptmapConfig:
    """Build a PromptmapConfig from ``PROMPTMAP_*`` environment variables.

    Unparseable values are skipped with a warning and the default is kept.
    """
    env = os.environ if environ is None else environ
    values: dict[str, object] = {}
    for name, field_info in PromptmapConfig.model_fields.items():
        raw = env.get(f"{_ENV_PREFIX}{name.upper()}")
        if raw is None or raw == "":
            continue
        try:
            values[name] = _coerce(raw, field_info.annotation)
        except ValueError:
            logger.warning(
                "Ignoring %s%s=%r (expected %s)",
                _ENV_PREFIX, name.upper(), raw, field_info.annotation,
            )
    return PromptmapConfig(**values)
