"""Pydantic models for promptmap's request/response pipeline."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

class GenerationRequest(BaseModel):
    """One user submission: a target language plus a free-text request."""

    model_config = ConfigDict(frozen=True)

    target_language: str
    user_prompt: str

    @field_validator("target_language", "user_prompt")
    @classmethod
    def _strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value


# ---------------------------------------------------------------------------
# Model response (wire contract with the LLM)
# ---------------------------------------------------------------------------

class Segment(BaseModel):
    """One correspondence between a prompt fragment and a code fragment."""

    model_config = ConfigDict(extra="ignore")

    id: StrictStr
    prompt_segment: StrictStr
    code_segment: StrictStr


class ModelResponse(BaseModel):
    """Parsed model output: the full code plus the ordered segment mapping."""

    model_config = ConfigDict(extra="ignore")

    code: StrictStr
    mapping: list[Segment]

    @field_validator("mapping")
    @classmethod
    def _unique_ids(cls, mapping: list[Segment]) -> list[Segment]:
        seen: set[str] = set()
        for seg in mapping:
            if seg.id in seen:
                raise ValueError(f"duplicate segment id {seg.id!r}")
            seen.add(seg.id)
        return mapping


# ---------------------------------------------------------------------------
# Render snapshot (what the web page draws)
# ---------------------------------------------------------------------------

class CardView(BaseModel):
    """Serializable form of a rendered card."""

    card_id: str
    kind: Literal["prompt", "code"]
    segment_id: str | None = None
    text: str
    color: str
    language_class: str | None = None
    linked: bool = False


class RenderSnapshot(BaseModel):
    """Both panels as currently rendered."""

    code: str = ""
    target_language: str = ""
    language_class: str = ""
    prompt_cards: list[CardView] = Field(default_factory=list)
    code_cards: list[CardView] = Field(default_factory=list)
