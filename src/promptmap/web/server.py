"""FastAPI app serving the promptmap page and its JSON API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..config import PromptmapConfig
from ..errors import (
    GenerationInProgressError,
    MalformedResponseError,
    ModelInvocationError,
    PromptmapError,
    ValidationError,
)
from ..models import RenderSnapshot
from ..session import Session
from ._page_html import PAGE_HTML

logger = logging.getLogger(__name__)

app = FastAPI(title="promptmap", version=__version__)

# Set by create_app()/start_server() and by POST /api/session.
_config: PromptmapConfig = PromptmapConfig()
_session: Session | None = None


class SessionRequest(BaseModel):
    api_key: str = ""


class GenerateRequest(BaseModel):
    target_language: str = ""
    user_prompt: str = ""


def _require_session() -> Session:
    if _session is None:
        raise HTTPException(status_code=503, detail="No session. Enter an API key first.")
    return _session


def _error_response(status_code: int, exc: PromptmapError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "kind": type(exc).__name__},
    )


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

@app.get("/", response_class=HTMLResponse)
async def index() -> HTMLResponse:
    return HTMLResponse(PAGE_HTML.replace("__HAS_SESSION__", "true" if _session else "false"))


# ---------------------------------------------------------------------------
# API endpoints
# ---------------------------------------------------------------------------

@app.post("/api/session")
async def create_session(req: SessionRequest) -> JSONResponse:
    """Confirm a credential and create the session context."""
    global _session
    try:
        _session = await Session.start(req.api_key, _config)
    except ValidationError as exc:
        return _error_response(422, exc)
    except ModelInvocationError as exc:
        logger.warning("Credential check failed: %s", exc)
        return _error_response(401, exc)
    return JSONResponse({"ok": True, "model": _config.model})


@app.post("/api/generate", response_model=RenderSnapshot)
async def generate(req: GenerateRequest) -> RenderSnapshot | JSONResponse:
    """Run one generate action and return the rendered panels."""
    session = _require_session()
    try:
        return await session.generate(req.target_language, req.user_prompt)
    except ValidationError as exc:
        return _error_response(400, exc)
    except GenerationInProgressError as exc:
        return _error_response(409, exc)
    except (ModelInvocationError, MalformedResponseError) as exc:
        logger.error("Generation failed: %s", exc)
        return _error_response(502, exc)


@app.get("/api/render", response_model=RenderSnapshot)
async def get_render() -> RenderSnapshot:
    if _session is None:
        return RenderSnapshot()
    return _session.snapshot()


@app.post("/api/cards/{card_id}/enter")
async def card_enter(card_id: str) -> dict:
    session = _require_session()
    group = session.renderer.pointer_enter(card_id)
    return {"linked": [c.card_id for c in group]}


@app.post("/api/cards/{card_id}/leave")
async def card_leave(card_id: str) -> dict:
    session = _require_session()
    group = session.renderer.pointer_leave(card_id)
    return {"unlinked": [c.card_id for c in group]}


# ---------------------------------------------------------------------------
# Server launcher
# ---------------------------------------------------------------------------


def create_app(config: PromptmapConfig | None = None, session: Session | None = None) -> FastAPI:
    """Reset module state and return the app."""
    global _config, _session
    _config = config or PromptmapConfig()
    _session = session
    return app


def start_server(
    config: PromptmapConfig,
    session: Session | None = None,
) -> None:
    """Start uvicorn on the configured host/port."""
    import uvicorn

    create_app(config, session)
    uvicorn.run(app, host=config.host, port=config.port)
