"""Front-door tests: create_client() and run() with the service swapped out."""

from __future__ import annotations

import logging
from typing import Any

import pytest

import cogito
from cogito import (
    ClaudeClient,
    ClaudeModel,
    ClaudeRequest,
    Config,
    FormatError,
    OpenAIClient,
    OpenAIModel,
    OpenAIRequest,
    TransportError,
)
from cogito.providers.claude import ClaudeService
from cogito.service import Auth, Service
from tests.helpers import FailingService, RecordingService, load_data

pytestmark = pytest.mark.unit


def _install(monkeypatch: pytest.MonkeyPatch, service: Any) -> None:
    """Route run() through *service* instead of a real HTTP client."""

    def _create_client(config: Config) -> OpenAIClient | ClaudeClient:
        client_cls = ClaudeClient if config.provider == "claude" else OpenAIClient
        return client_cls(config.auth(), service)

    monkeypatch.setattr(cogito, "create_client", _create_client)


@pytest.mark.parametrize(
    ("provider", "client_cls", "service_cls"),
    [("openai", OpenAIClient, Service), ("claude", ClaudeClient, ClaudeService)],
)
def test_create_client_matches_the_provider(
    provider: str, client_cls: type, service_cls: type
) -> None:
    config = Config(provider=provider, api_key="k", package="app", version="9.9")  # type: ignore[arg-type]

    client = cogito.create_client(config)

    assert type(client) is client_cls
    assert type(client.service) is service_cls
    assert client.auth == Auth("k")
    assert client.service.factory.user_agent == "app/9.9"


@pytest.mark.asyncio
async def test_run_openai_applies_model_instructions_and_input(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service = RecordingService(load_data("openai_single"))
    _install(monkeypatch, service)
    config = Config(provider="openai", model="gpt-5-nano", api_key="k")

    result = await cogito.run("Hello?", config=config, instructions="Be kind.")

    assert result == "Hello! How can I help you today?"
    sent = service.calls[0].data
    assert isinstance(sent, OpenAIRequest)
    assert sent.model is OpenAIModel.GPT_5_NANO
    assert sent.instructions == "Be kind."
    assert sent.input == "Hello?"
    assert service.closed is True


@pytest.mark.asyncio
async def test_run_claude_sends_instructions_ahead_of_the_prompt(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service = RecordingService(load_data("claude_messages"))
    _install(monkeypatch, service)
    config = Config(provider="claude", model="claude-haiku-4-5", api_key="k")

    result = await cogito.run("Beep?", config=config, instructions="Be a robot.")

    assert result == "Hi\nI am a friendly robot.\nBeep beep!"
    sent = service.calls[0].data
    assert isinstance(sent, ClaudeRequest)
    assert sent.model is ClaudeModel.HAIKU_4_5
    assert [m.content for m in sent.messages] == ["Be a robot.", "Beep?"]


@pytest.mark.asyncio
async def test_run_uses_the_provider_default_model(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service = RecordingService(load_data("openai_single"))
    _install(monkeypatch, service)

    await cogito.run("Hi", config=Config(provider="openai", api_key="k"))

    assert service.calls[0].data.model is OpenAIModel.default()


@pytest.mark.asyncio
async def test_run_rejects_unknown_models_before_sending(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    service = RecordingService(load_data("openai_single"))
    _install(monkeypatch, service)
    config = Config(provider="openai", model="gpt-99", api_key="k")

    with pytest.raises(FormatError):
        await cogito.run("Hi", config=config)

    assert service.calls == []


@pytest.mark.asyncio
async def test_run_propagates_transport_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    _install(monkeypatch, FailingService(TransportError("down", status_code=503)))

    with pytest.raises(TransportError, match="down"):
        await cogito.run("Hi", config=Config(provider="claude", api_key="k"))


@pytest.mark.asyncio
async def test_cleanup_failure_is_logged_not_raised(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    class _LeakyService(RecordingService):
        async def aclose(self) -> None:
            raise RuntimeError("socket already gone")

    _install(monkeypatch, _LeakyService(load_data("openai_single")))

    with caplog.at_level(logging.WARNING, logger="cogito"):
        result = await cogito.run("Hi", config=Config(provider="openai", api_key="k"))

    assert result == "Hello! How can I help you today?"
    assert any("socket already gone" in r.getMessage() for r in caplog.records)
