"""Tests for the promptmap CLI."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from promptmap import cli
from promptmap.cli import _load_dotenv, app
from promptmap.llm import LLMClient

RESPONSE = json.dumps({
    "code": "x = 1\nprint(x)",
    "mapping": [
        {"prompt_segment": "set x to one", "code_segment": "x = 1", "id": "seg-1"},
        {"prompt_segment": "and print it", "code_segment": "print(x)", "id": "seg-2"},
    ],
})

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for name in ("GEMINI_API_KEY", "PROMPTMAP_MODEL", "PROMPTMAP_PORT"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("serve", "generate", "config"):
        assert command in result.stdout


def test_generate_requires_api_key() -> None:
    result = runner.invoke(app, ["generate", "Python", "print hello"])
    assert result.exit_code == 1
    assert "GEMINI_API_KEY" in result.stdout


def test_generate_empty_prompt_is_validation_error(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    called = []
    monkeypatch.setattr(LLMClient, "_call_sync", lambda self, prompt: called.append(prompt))
    result = runner.invoke(app, ["generate", "Python", "   "])
    assert result.exit_code == 1
    assert "Error" in result.stdout
    assert called == []


def test_generate_prints_linked_table(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setattr(LLMClient, "_call_sync", lambda self, prompt: RESPONSE)
    result = runner.invoke(app, ["generate", "Python", "set x to one and print it"])
    assert result.exit_code == 0, result.stdout
    assert "set x to one" in result.stdout
    assert "seg-2" in result.stdout
    assert "2 linked segments" in result.stdout


def test_generate_json_output(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setattr(LLMClient, "_call_sync", lambda self, prompt: f"```json\n{RESPONSE}\n```")
    result = runner.invoke(app, ["generate", "Python", "set x", "--json"])
    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    assert [m["id"] for m in payload["mapping"]] == ["seg-1", "seg-2"]


def test_generate_malformed_response_exits_1(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    monkeypatch.setattr(LLMClient, "_call_sync", lambda self, prompt: "not json")
    result = runner.invoke(app, ["generate", "Python", "set x"])
    assert result.exit_code == 1
    assert "not valid JSON" in result.stdout


def test_generate_reads_key_from_dotenv(monkeypatch, tmp_path: Path) -> None:
    (tmp_path / ".env").write_text("GEMINI_API_KEY='from-dotenv'\n", encoding="utf-8")
    seen = []

    def fake_call(self, prompt):
        seen.append(self.api_key)
        return RESPONSE

    monkeypatch.setattr(LLMClient, "_call_sync", fake_call)
    result = runner.invoke(app, ["generate", "Python", "set x"])
    assert result.exit_code == 0, result.stdout
    assert seen == ["from-dotenv"]


def test_config_shows_env_override(monkeypatch) -> None:
    monkeypatch.setenv("PROMPTMAP_MODEL", "gemini-2.0-flash")
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "model = 'gemini-2.0-flash'" in result.stdout


def test_serve_passes_config_and_session(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    captured = {}

    def fake_start(config, session=None):
        captured["config"] = config
        captured["session"] = session

    monkeypatch.setattr("promptmap.web.server.start_server", fake_start)
    result = runner.invoke(app, ["serve", "--no-browser", "--port", "9123", "-m", "gemini-x"])
    assert result.exit_code == 0, result.stdout
    assert captured["config"].port == 9123
    assert captured["config"].model == "gemini-x"
    assert captured["session"].client.api_key == "k"


def test_serve_without_key_has_no_session(monkeypatch) -> None:
    captured = {}
    monkeypatch.setattr(
        "promptmap.web.server.start_server",
        lambda config, session=None: captured.update(session=session),
    )
    result = runner.invoke(app, ["serve", "--no-browser"])
    assert result.exit_code == 0, result.stdout
    assert captured["session"] is None


def test_load_dotenv_does_not_override(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "already-set")
    (tmp_path / ".env").write_text("# comment\nGEMINI_API_KEY=other\n", encoding="utf-8")
    _load_dotenv(tmp_path)
    import os

    assert os.environ["GEMINI_API_KEY"] == "already-set"


def test_resolve_config_applies_overrides() -> None:
    cfg = cli._resolve_config(model="m", port=None)
    assert cfg.model == "m"
    assert cfg.port == 8000
