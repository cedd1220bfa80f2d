"""promptmap - code generation with linked prompt/code segments."""

from .errors import (  # noqa: F401 -- public re-exports
    GenerationInProgressError,
    MalformedResponseError,
    ModelInvocationError,
    PromptmapError,
    ValidationError,
)
from .models import GenerationRequest, ModelResponse, RenderSnapshot, Segment
from .llm import LLMClient
from .composer import compose, submit
from .parser import parse
from .renderer import PALETTE, DisplayPair, Renderer
from .session import Session

__version__ = "0.1.0"

__all__ = [
    "LLMClient",
    "Session",
    "Renderer",
    "DisplayPair",
    "PALETTE",
    "compose",
    "submit",
    "parse",
    "GenerationRequest",
    "ModelResponse",
    "RenderSnapshot",
    "Segment",
    "PromptmapError",
    "ValidationError",
    "ModelInvocationError",
    "MalformedResponseError",
    "GenerationInProgressError",
]
