"""OpenAI Responses API provider.

Requests are sent to ``https://api.openai.com/v1/responses`` with bearer
authentication. You are solely responsible for the cost of API access; models
are billed per input and output token, see OpenAI's pricing documentation.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cogito.client import AiModel, ServiceClient
from cogito.errors import DeserializationError
from cogito.providers._utils import join_blocks, join_units
from cogito.service import Service

_OUTPUT_TEXT = "output_text"


class OpenAIModel(AiModel):
    """Available OpenAI models.

    The default is GPT-5; GPT-5 nano is the cheapest, GPT-4.1 nano the fastest.
    """

    GPT_5 = "gpt-5"
    GPT_5_MINI = "gpt-5-mini"
    GPT_5_NANO = "gpt-5-nano"
    GPT_4O = "gpt-4o"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4_1 = "gpt-4.1"
    GPT_4_1_MINI = "gpt-4.1-mini"
    GPT_4_1_NANO = "gpt-4.1-nano"
    O4_MINI = "o4-mini"
    O3 = "o3"
    O3_MINI = "o3-mini"
    O3_PRO = "o3-pro"
    O1 = "o1"
    O1_PRO = "o1-pro"

    @classmethod
    def default(cls) -> OpenAIModel:
        return cls.GPT_5

    @classmethod
    def cheapest(cls) -> OpenAIModel:
        return cls.GPT_5_NANO

    @classmethod
    def fastest(cls) -> OpenAIModel:
        # GPT-4.1 nano is noticeably faster than GPT-5 nano.
        return cls.GPT_4_1_NANO


class OpenAIRequest(BaseModel):
    """Parameters for a Responses API call.

    Built by chaining ``with_*`` calls on a default value; each call returns
    a new request:

        request = (
            OpenAIRequest()
            .with_model(OpenAIModel.GPT_4O_MINI)
            .with_instructions("Answer in one sentence.")
            .with_input("What is a haiku?")
        )
    """

    model_config = ConfigDict(frozen=True)

    model: OpenAIModel = Field(default_factory=OpenAIModel.default)
    #: Omitted from the wire payload when unset.
    instructions: str | None = None
    input: str = ""
    store: bool = False

    @field_validator("model", mode="before")
    @classmethod
    def _parse_model(cls, v: Any) -> OpenAIModel:
        return OpenAIModel.parse(v)

    def with_model(self, model: OpenAIModel | str) -> OpenAIRequest:
        """Return a copy using *model*."""
        return self.model_copy(update={"model": OpenAIModel.parse(model)})

    def with_instructions(self, instructions: str) -> OpenAIRequest:
        """Return a copy carrying system-level *instructions*."""
        return self.model_copy(update={"instructions": instructions})

    def with_input(self, text: str) -> OpenAIRequest:
        """Return a copy whose input is *text*.

        The Responses API takes a single input string, so the last call wins.
        """
        return self.model_copy(update={"input": text})

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body: model, instructions (if set), input, store."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_payload(cls, data: Any) -> OpenAIRequest:
        """Parse a wire payload back into a request."""
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DeserializationError(f"Invalid OpenAI request: {e}") from e


class OpenAIContent(BaseModel):
    """A block of content within a message output item."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content_type: str = Field(alias="type")
    text: str

    @property
    def is_output_text(self) -> bool:
        """Whether this block is text meant for the user."""
        return self.content_type == _OUTPUT_TEXT


def _is_output_text(block: OpenAIContent) -> bool:
    return block.is_output_text


class _OpenAIOutputItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: Any

    def concatenate(self) -> str:
        """Join this item's output text blocks with newlines, untrimmed."""
        return join_blocks(self.content, _is_output_text)


class OpenAIMessage(_OpenAIOutputItem):
    """A ``message`` output item carrying content blocks."""

    type: Literal["message"] = "message"
    content: tuple[OpenAIContent, ...]


class OpenAIReasoning(_OpenAIOutputItem):
    """A ``reasoning`` output item.

    GPT-5 models emit these ahead of the message. They carry a summary rather
    than content, so they contribute no content blocks; any payload beyond the
    tag is ignored.
    """

    type: Literal["reasoning"] = "reasoning"
    content: tuple[OpenAIContent, ...] = Field(default=(), exclude=True)

    @field_validator("content", mode="before")
    @classmethod
    def _drop_content(cls, v: Any) -> tuple[OpenAIContent, ...]:
        return ()


OpenAIOutput = Annotated[OpenAIMessage | OpenAIReasoning, Field(discriminator="type")]


class OpenAIResponse(BaseModel):
    """A response from the Responses API.

    Only the fields Cogito consumes are modelled; everything else in the
    payload is ignored.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    model: str | None = None
    #: Usually a single message; GPT-5 prepends a reasoning item.
    output: tuple[OpenAIOutput, ...]

    def concatenate(self) -> str:
        """Join every output item's text with newlines and trim the result."""
        return join_units(item.concatenate() for item in self.output)

    def result(self) -> str:
        """Return the visible text of the response."""
        return self.concatenate()

    @classmethod
    def from_payload(cls, data: Any) -> OpenAIResponse:
        """Parse a decoded JSON body.

        Raises:
            DeserializationError: A required field is missing, a value has the
                wrong type, or an output item has an unknown ``type``.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise DeserializationError(f"Invalid OpenAI response: {e}") from e


class OpenAIClient(ServiceClient):
    """An OpenAI Responses API client.

    Example:
        factory = HttpClientFactory("my-package", "1.0.0")
        client = OpenAIClient.from_factory(Auth.from_env("OPENAI_API_KEY"), factory)
        response = await client.send(OpenAIRequest().with_input("write a haiku"))
        print(response.result())
    """

    BASE_URI: ClassVar[str] = "https://api.openai.com/v1/responses"
    response_type: ClassVar[type[OpenAIResponse]] = OpenAIResponse
    service_class: ClassVar[type[Service]] = Service

    async def send(self, request: OpenAIRequest) -> OpenAIResponse:
        """Send *request* and return the parsed response."""
        response: OpenAIResponse = await super().send(request)
        return response
