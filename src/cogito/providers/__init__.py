"""Provider implementations."""

from .claude import (
    ClaudeClient,
    ClaudeModel,
    ClaudeRequest,
    ClaudeResponse,
    ClaudeService,
)
from .openai import OpenAIClient, OpenAIModel, OpenAIRequest, OpenAIResponse

__all__ = [
    "ClaudeClient",
    "ClaudeModel",
    "ClaudeRequest",
    "ClaudeResponse",
    "ClaudeService",
    "OpenAIClient",
    "OpenAIModel",
    "OpenAIRequest",
    "OpenAIResponse",
]
