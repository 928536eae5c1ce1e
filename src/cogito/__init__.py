"""Cogito: one client interface over several LLM HTTP APIs.

Public API:
    - run(): Send a single prompt and return the response text
    - create_client(): Build the provider client for a Config
    - Config: Configuration dataclass
    - OpenAIClient / ClaudeClient and their request, response and model types
"""

from __future__ import annotations

import asyncio
import logging

from cogito.client import AiClient, AiModel, AiRequest, AiResponse
from cogito.config import Config
from cogito.errors import (
    CogitoError,
    ConfigurationError,
    DeserializationError,
    FormatError,
    TransportError,
)
from cogito.providers.claude import (
    ClaudeClient,
    ClaudeModel,
    ClaudeRequest,
    ClaudeResponse,
)
from cogito.providers.openai import (
    OpenAIClient,
    OpenAIModel,
    OpenAIRequest,
    OpenAIResponse,
)
from cogito.service import Auth, HttpClientFactory, HttpPost, Service

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("cogito-ai")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("cogito").addHandler(logging.NullHandler())

logger = logging.getLogger(__name__)


def create_client(config: Config) -> OpenAIClient | ClaudeClient:
    """Get the client for the configured provider."""
    if config.provider == "claude":
        return ClaudeClient.from_factory(config.auth(), config.factory())
    return OpenAIClient.from_factory(config.auth(), config.factory())


def _build_request(
    config: Config, prompt: str, instructions: str | None
) -> OpenAIRequest | ClaudeRequest:
    request: OpenAIRequest | ClaudeRequest
    if config.provider == "claude":
        request = ClaudeRequest()
    else:
        request = OpenAIRequest()
    if config.model is not None:
        request = request.with_model(config.model)
    if instructions is not None:
        request = request.with_instructions(instructions)
    return request.with_input(prompt)


async def run(
    prompt: str,
    *,
    config: Config,
    instructions: str | None = None,
) -> str:
    """Send a single prompt and return the response text.

    Args:
        prompt: The input to send.
        config: Configuration specifying provider and (optionally) model.
        instructions: Optional instructions. Claude receives them as a user
            message ahead of the prompt.

    Returns:
        The aggregated, trimmed text of the response.

    Example:
        config = Config(provider="openai", model="gpt-5-nano")
        print(await run("write a haiku about ai", config=config))
    """
    request = _build_request(config, prompt, instructions)
    client = create_client(config)
    try:
        response = await client.send(request)  # type: ignore[arg-type]
    finally:
        try:
            await client.aclose()
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # Cleanup should never mask the primary failure.
            logger.warning("Client cleanup failed: %s", exc)
    return response.result()


__all__ = [
    "AiClient",
    "AiModel",
    "AiRequest",
    "AiResponse",
    "Auth",
    "ClaudeClient",
    "ClaudeModel",
    "ClaudeRequest",
    "ClaudeResponse",
    "CogitoError",
    "Config",
    "ConfigurationError",
    "DeserializationError",
    "FormatError",
    "HttpClientFactory",
    "HttpPost",
    "OpenAIClient",
    "OpenAIModel",
    "OpenAIRequest",
    "OpenAIResponse",
    "Service",
    "TransportError",
    "__version__",
    "create_client",
    "run",
]
