"""LLM client -- async wrapper around the Gemini generateContent REST API."""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass

from .config import DEFAULT_BASE_URL, DEFAULT_MODEL

logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    """The model endpoint could not produce text for a request."""


@dataclass
class LLMClient:
    """Minimal async-friendly Gemini client using stdlib only.

    Single-shot: no retries, no backoff, no streaming.  Blocking HTTP runs
    in a worker thread via ``asyncio.to_thread``.
    """

    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0

    # ------------------------------------------------------------------
    # Header / URL helpers
    # ------------------------------------------------------------------

    def _json_headers(self) -> dict[str, str]:
        return {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}

    def _model_url(self, suffix: str = "") -> str:
        model = urllib.parse.quote(self.model, safe="-._")
        return f"{self.base_url.rstrip('/')}/models/{model}{suffix}"

    # ------------------------------------------------------------------
    # Response decoding
    # ------------------------------------------------------------------

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Concatenate the text parts of the first candidate."""
        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise LLMError(f"Gemini API error: {message}")

        candidates = data.get("candidates") or []
        if not candidates:
            feedback = data.get("promptFeedback") or {}
            reason = feedback.get("blockReason", "no candidates returned")
            raise LLMError(f"Gemini returned no output ({reason})")

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(str(p.get("text", "")) for p in parts if isinstance(p, dict))
        if not text:
            finish = candidates[0].get("finishReason", "unknown")
            raise LLMError(f"Gemini returned an empty response (finishReason={finish})")
        return text

    # ------------------------------------------------------------------
    # Core call methods
    # ------------------------------------------------------------------

    def _call_sync(self, prompt: str) -> str:
        """Blocking call. Meant to be run via asyncio.to_thread."""
        body = json.dumps({"contents": [{"parts": [{"text": prompt}]}]}).encode("utf-8")
        req = urllib.request.Request(
            self._model_url(":generateContent"),
            data=body,
            headers=self._json_headers(),
            method="POST",
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                data = json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as exc:
            error_body = exc.read().decode("utf-8", errors="replace")
            raise LLMError(f"Gemini API error ({exc.code}): {error_body}") from exc
        except urllib.error.URLError as exc:
            raise LLMError(f"Gemini API unreachable: {exc.reason}") from exc
        except TimeoutError as exc:
            raise LLMError(f"Gemini API timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise LLMError(f"Gemini API connection failed: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise LLMError("Gemini API returned a non-JSON body") from exc
        return self._extract_text(data)

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the model's raw text output."""
        return await asyncio.to_thread(self._call_sync, prompt)

    def _verify_sync(self) -> None:
        req = urllib.request.Request(
            self._model_url(), headers=self._json_headers(), method="GET"
        )
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                resp.read()
        except urllib.error.HTTPError as exc:
            error_body = exc.read().decode("utf-8", errors="replace")
            raise LLMError(f"Credential rejected ({exc.code}): {error_body}") from exc
        except urllib.error.URLError as exc:
            raise LLMError(f"Gemini API unreachable: {exc.reason}") from exc
        except TimeoutError as exc:
            raise LLMError(f"Gemini API timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise LLMError(f"Gemini API connection failed: {exc}") from exc

    async def verify(self) -> None:
        """Check that the API key can see the configured model."""
        await asyncio.to_thread(self._verify_sync)
