"""CLI entry point for promptmap."""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import nullcontext
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import PromptmapConfig, load_config

app = typer.Typer(
    name="promptmap",
    help="Generate code with a linked map from prompt fragments to code fragments.",
    add_completion=False,
)

console = Console()

API_KEY_ENV = "GEMINI_API_KEY"


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _load_dotenv(start_dir: Path) -> None:
    """Load a .env file from *start_dir* (or parents) into os.environ.

    Only sets vars that are not already present in the environment.
    """
    search = start_dir.resolve()
    for d in [search, *search.parents]:
        candidate = d / ".env"
        if candidate.is_file():
            try:
                for line in candidate.read_text(encoding="utf-8").splitlines():
                    line = line.strip()
                    if not line or line.startswith("#") or "=" not in line:
                        continue
                    key, _, value = line.partition("=")
                    key = key.strip()
                    value = value.strip().strip("\"'")
                    if key and key not in os.environ:
                        os.environ[key] = value
            except OSError:
                pass
            return  # stop after the first .env found


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _resolve_config(
    *,
    model: str | None = None,
    host: str | None = None,
    port: int | None = None,
    verify_key: bool | None = None,
) -> PromptmapConfig:
    """Environment config with CLI overrides applied on top."""
    cfg = load_config()
    overrides = {
        "model": model,
        "host": host,
        "port": port,
        "verify_key": verify_key,
    }
    return cfg.model_copy(update={k: v for k, v in overrides.items() if v is not None})


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port number."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Gemini model id."),
    verify_key: bool = typer.Option(False, "--verify-key", help="Check the API key when a session starts."),
    no_browser: bool = typer.Option(False, "--no-browser", help="Don't auto-open browser."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Launch the web UI.

    If GEMINI_API_KEY is set (environment or .env), the session starts
    immediately and the key screen is skipped.
    """
    _setup_logging(verbose)
    _load_dotenv(Path.cwd())
    cfg = _resolve_config(model=model, host=host, port=port, verify_key=verify_key or None)

    from .errors import PromptmapError
    from .session import Session

    session = None
    api_key = os.environ.get(API_KEY_ENV, "").strip()
    if api_key:
        try:
            session = asyncio.run(Session.start(api_key, cfg))
        except PromptmapError as exc:
            console.print(f"[yellow]{API_KEY_ENV} not usable:[/yellow] {exc}")

    from .web.server import start_server

    url = f"http://{cfg.host}:{cfg.port}"
    console.print(f"[bold cyan]Serving[/bold cyan] promptmap ({cfg.model})")
    console.print(f"  {url}")

    if not no_browser:
        import threading
        import webbrowser
        threading.Timer(1.0, webbrowser.open, args=(url,)).start()

    start_server(cfg, session)


@app.command()
def generate(
    language: str = typer.Argument(..., help="Target language or framework."),
    prompt: str = typer.Argument(..., help="What the code should do."),
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Gemini model id."),
    as_json: bool = typer.Option(False, "--json", help="Print the parsed response as JSON."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Run one generation and print the linked segments."""
    _setup_logging(verbose)
    _load_dotenv(Path.cwd())
    cfg = _resolve_config(model=model)

    from .errors import PromptmapError
    from .session import Session, validate_request

    try:
        validate_request(language, prompt)
    except PromptmapError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    api_key = os.environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        console.print(f"[red]Error:[/red] {API_KEY_ENV} is not set.")
        raise typer.Exit(code=1)

    async def _run() -> Session:
        session = await Session.start(api_key, cfg)
        status = console.status("Generating...") if console.is_terminal else nullcontext()
        with status:
            await session.generate(language, prompt)
        return session

    try:
        session = asyncio.run(_run())
    except PromptmapError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        console.print_json(session.last_response.model_dump_json())
        return

    console.print(session.renderer.rich_table())
    console.print(f"[dim]{len(session.renderer.prompt_panel)} linked segments[/dim]")


@app.command()
def config() -> None:
    """Print the effective configuration (environment + defaults)."""
    cfg = load_config()
    console.print("[bold]promptmap config:[/bold]")
    for field_name in PromptmapConfig.model_fields:
        console.print(f"  {field_name} = {getattr(cfg, field_name)!r}")
