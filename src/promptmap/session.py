"""Explicit session context: credential-bound client plus the live renderer.

A Session is created once the user confirms a credential and is handed to
whoever runs the generate action.  There is no teardown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import pydantic

from .composer import compose, submit
from .config import PromptmapConfig
from .errors import (
    GenerationInProgressError,
    ModelInvocationError,
    ValidationError,
)
from .llm import LLMClient, LLMError
from .models import GenerationRequest, ModelResponse, RenderSnapshot
from .parser import parse
from .renderer import Renderer

logger = logging.getLogger(__name__)


def validate_request(target_language: str, user_prompt: str) -> GenerationRequest:
    """Build a GenerationRequest, mapping pydantic failures to ValidationError."""
    try:
        return GenerationRequest(
            target_language=target_language or "",
            user_prompt=user_prompt or "",
        )
    except pydantic.ValidationError as exc:
        fields = sorted({str(e["loc"][0]) for e in exc.errors() if e.get("loc")})
        raise ValidationError(
            "Please enter both the language/framework and the prompt "
            f"(missing: {', '.join(fields)})."
        ) from exc


@dataclass
class Session:
    """Holds the model handle and the renderer for the app's lifetime."""

    client: LLMClient
    renderer: Renderer = field(default_factory=Renderer)
    last_response: ModelResponse | None = None
    _busy: bool = field(default=False, init=False, repr=False)

    @classmethod
    async def start(cls, api_key: str, config: PromptmapConfig | None = None) -> "Session":
        """Create a session from a user-supplied credential.

        With ``config.verify_key`` set, the key is checked against the model
        endpoint first and a rejection raises ModelInvocationError.
        """
        cfg = config or PromptmapConfig()
        key = (api_key or "").strip()
        if not key:
            raise ValidationError("Please enter an API key.")
        client = LLMClient(
            api_key=key,
            model=cfg.model,
            base_url=cfg.base_url,
            timeout=cfg.timeout,
        )
        if cfg.verify_key:
            try:
                await client.verify()
            except LLMError as exc:
                raise ModelInvocationError(str(exc)) from exc
        logger.info("Session started (model=%s)", cfg.model)
        return cls(client=client)

    @property
    def busy(self) -> bool:
        return self._busy

    def snapshot(self) -> RenderSnapshot:
        code = self.last_response.code if self.last_response else ""
        return self.renderer.snapshot(code)

    async def generate(self, target_language: str, user_prompt: str) -> RenderSnapshot:
        """Run one generate action end to end.

        Validation happens before anything else, so an empty field never
        reaches the model.  The busy flag is released on every exit path.
        """
        request = validate_request(target_language, user_prompt)
        if self._busy:
            raise GenerationInProgressError("A generation is already in progress.")

        self._busy = True
        try:
            # Panels are emptied before the call.
            self.renderer.clear()
            self.last_response = None

            instruction = compose(request.target_language, request.user_prompt)
            raw = await submit(self.client, instruction)
            response = parse(raw)

            self.renderer.render(response.mapping, request.target_language)
            self.last_response = response
            logger.info(
                "Generated %s code with %d segments",
                request.target_language, len(response.mapping),
            )
            return self.renderer.snapshot(response.code)
        finally:
            self._busy = False
