"""Anthropic Claude Messages API provider.

Requests are sent to ``https://api.anthropic.com/v1/messages``. You are solely
responsible for the cost of API access.

Prices in US dollars per million tokens, as of 25 November 2025:

| Model      | Designation       | Input | Output |
|------------|-------------------|------:|-------:|
| Sonnet 4.5 | claude-sonnet-4-5 | $3    | $15    |
| Haiku 4.5  | claude-haiku-4-5  | $1    | $5     |
| Opus 4.5   | claude-opus-4-5   | $5    | $25    |
| Opus 4.1   | claude-opus-4-1   | $15   | $75    |
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cogito._http import JSON_CONTENT_TYPE
from cogito.client import AiModel, ServiceClient
from cogito.errors import DeserializationError
from cogito.providers._utils import join_blocks, join_units
from cogito.service import Auth, Service

_DEFAULT_MAX_TOKENS = 1024


class ClaudeModel(AiModel):
    """Available Claude models.

    Sonnet 4.5 is the default. Haiku 4.5 is both the cheapest and the fastest.
    Opus 4.1 is the most expensive.
    """

    SONNET_4_5 = "claude-sonnet-4-5"
    HAIKU_4_5 = "claude-haiku-4-5"
    OPUS_4_5 = "claude-opus-4-5"
    OPUS_4_1 = "claude-opus-4-1"

    @classmethod
    def default(cls) -> ClaudeModel:
        return cls.SONNET_4_5

    @classmethod
    def cheapest(cls) -> ClaudeModel:
        return cls.HAIKU_4_5

    @classmethod
    def fastest(cls) -> ClaudeModel:
        return cls.HAIKU_4_5


class ClaudeRole(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class ClaudeMessage(BaseModel):
    """One conversational turn in a request."""

    model_config = ConfigDict(frozen=True)

    role: ClaudeRole
    content: str

    @classmethod
    def with_content(cls, content: str) -> ClaudeMessage:
        """Create a user message."""
        return cls(role=ClaudeRole.USER, content=content)


class ClaudeRequest(BaseModel):
    """Parameters for a Messages API call.

    Every `with_input` call appends a new user message, so inputs accumulate
    in order:

        request = ClaudeRequest().with_input("Hi").with_input("Who are you?")
    """

    model_config = ConfigDict(frozen=True)

    model: ClaudeModel = Field(default_factory=ClaudeModel.default)
    max_tokens: int = _DEFAULT_MAX_TOKENS
    messages: tuple[ClaudeMessage, ...] = ()

    @field_validator("model", mode="before")
    @classmethod
    def _parse_model(cls, v: Any) -> ClaudeModel:
        return ClaudeModel.parse(v)

    def with_model(self, model: ClaudeModel | str) -> ClaudeRequest:
        """Return a copy using *model*."""
        return self.model_copy(update={"model": ClaudeModel.parse(model)})

    def with_instructions(self, instructions: str) -> ClaudeRequest:
        """Return a copy with *instructions* appended as a user message.

        The Messages API has no separate instructions channel here.
        """
        return self.with_input(instructions)

    def with_input(self, text: str) -> ClaudeRequest:
        """Return a copy with *text* appended as a new user message."""
        messages = (*self.messages, ClaudeMessage.with_content(text))
        return self.model_copy(update={"messages": messages})

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body: model, max_tokens, messages."""
        return self.model_dump(mode="json")

    @classmethod
    def from_payload(cls, data: Any) -> ClaudeRequest:
        """Parse a wire payload back into a request."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DeserializationError(f"Invalid Claude request: {e}") from e


class ClaudeContent(BaseModel):
    """A block of content in a response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_type: str = Field(alias="type")
    text: str


def _is_visible(block: ClaudeContent) -> bool:  # noqa: ARG001
    # Every block the response model accepts today is text.
    return True


class ClaudeCacheCreation(BaseModel):
    """Input tokens written to the prompt cache, per cache window."""

    model_config = ConfigDict(frozen=True)

    ephemeral_5m_input_tokens: int
    ephemeral_1h_input_tokens: int


class ClaudeUsage(BaseModel):
    """Billing and rate-limit usage for a response.

    Informational only. Optional counters are ``None`` when the API omits
    them, never zero.
    """

    model_config = ConfigDict(frozen=True)

    input_tokens: int
    output_tokens: int
    cache_creation_input_tokens: int | None = None
    cache_read_input_tokens: int | None = None
    cache_creation: ClaudeCacheCreation | None = None

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class ClaudeResponse(BaseModel):
    """A response from the Messages API."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    response_type: str = Field(alias="type")
    role: ClaudeRole
    content: tuple[ClaudeContent, ...]
    usage: ClaudeUsage
    model: str | None = None
    stop_reason: str | None = None
    stop_sequence: str | None = None

    def result(self) -> str:
        """Return the response's text blocks joined by newlines, trimmed.

        The response is a single output unit.
        """
        return join_units([join_blocks(self.content, _is_visible)])

    @classmethod
    def from_payload(cls, data: Any) -> ClaudeResponse:
        """Parse a decoded JSON body.

        Raises:
            DeserializationError: A required field is missing or mistyped.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DeserializationError(f"Invalid Claude response: {e}") from e


class ClaudeService(Service):
    """Communicates with the Claude API over HTTP."""

    provider = "claude"
    ANTHROPIC_VERSION = "2023-06-01"

    def headers(self, auth: Auth) -> dict[str, str]:
        """Return JSON, API-version and ``x-api-key`` headers."""
        return {
            "Content-Type": JSON_CONTENT_TYPE,
            "anthropic-version": self.ANTHROPIC_VERSION,
            "x-api-key": auth.api_key,
        }


class ClaudeClient(ServiceClient):
    """An Anthropic Claude API client.

    Example:
        factory = HttpClientFactory("my-package", "1.0.0")
        client = ClaudeClient.from_factory(Auth.from_env("CLAUDE_API_KEY"), factory)
        request = ClaudeRequest().with_model(ClaudeModel.HAIKU_4_5).with_input("hi")
        print((await client.send(request)).result())
    """

    BASE_URI: ClassVar[str] = "https://api.anthropic.com/v1/messages"
    response_type: ClassVar[type[ClaudeResponse]] = ClaudeResponse
    service_class: ClassVar[type[Service]] = ClaudeService

    async def send(self, request: ClaudeRequest) -> ClaudeResponse:
        """Send *request* and return the parsed response."""
        response: ClaudeResponse = await super().send(request)
        return response
