"""Services for communicating with AI providers over HTTP.

A service acts as a proxy for a provider's REST API. Clients depend only on
the `HttpPost` protocol, so tests can hand a client a deterministic service
while production code uses `Service` (or a provider subclass such as
``ClaudeService``) backed by ``httpx``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
import os
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

import httpx

from cogito._errors import wrap_transport_error
from cogito._http import DEFAULT_TIMEOUT_S, JSON_CONTENT_TYPE
from cogito.errors import ConfigurationError, DeserializationError

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

R_co = TypeVar("R_co", covariant=True)
R = TypeVar("R")


@dataclass(frozen=True)
class Auth:
    """Opaque holder of a provider API key."""

    api_key: str

    @classmethod
    def from_env(cls, var: str) -> Auth:
        """Read the API key from the environment variable *var*."""
        value = os.environ.get(var)
        if not value:
            raise ConfigurationError(
                f"Environment variable {var} is not set",
                hint=f"Export {var} or construct Auth(api_key=...) directly.",
            )
        return cls(value)

    def __repr__(self) -> str:
        """Return a redacted representation."""
        return "Auth(api_key='[REDACTED]')"

    __str__ = __repr__


@dataclass(frozen=True)
class HttpClientFactory:
    """Creates HTTP clients identified by a package name and version.

    Example:
        factory = HttpClientFactory("my-package", "1.0.0")
        client = OpenAIClient.from_factory(Auth.from_env("OPENAI_API_KEY"), factory)
    """

    package: str
    version: str
    timeout_s: float = DEFAULT_TIMEOUT_S
    #: Custom httpx transport (proxies, test doubles); the default when *None*.
    transport: httpx.AsyncBaseTransport | None = None

    @property
    def user_agent(self) -> str:
        """Value sent in the ``User-Agent`` header."""
        return f"{self.package}/{self.version}"

    def create(self) -> httpx.AsyncClient:
        """Return a fresh async HTTP client."""
        return httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout_s,
            transport=self.transport,
        )


@runtime_checkable
class Serializable(Protocol):
    """A request body that knows its JSON wire shape."""

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready request body."""
        ...


class Deserializable(Protocol[R_co]):
    """A response type that can be built from a decoded JSON body."""

    def from_payload(self, data: Any) -> R_co:
        """Parse *data* or raise DeserializationError."""
        ...


@runtime_checkable
class HttpPost(Protocol):
    """Minimal transport protocol: one JSON POST, typed result."""

    async def post(
        self,
        uri: str,
        auth: Auth,
        data: Serializable,
        response_type: Deserializable[R],
    ) -> R:
        """POST *data* to *uri* and parse the body as *response_type*."""
        ...


class Service:
    """Communicates with an AI provider over HTTP using bearer auth.

    This is the default service for OpenAI-style APIs. It more or less wraps
    an ``httpx.AsyncClient``; subclasses override `headers` for providers with
    a different authentication scheme.
    """

    provider = "openai"

    def __init__(self, factory: HttpClientFactory) -> None:
        """Initialize with the factory that creates the HTTP client."""
        self.factory = factory
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily create and return the HTTP client."""
        if self._client is None:
            self._client = self.factory.create()
        return self._client

    def headers(self, auth: Auth) -> dict[str, str]:
        """Return the request headers for *auth*."""
        return {
            "Content-Type": JSON_CONTENT_TYPE,
            "Authorization": f"Bearer {auth.api_key}",
        }

    async def post(
        self,
        uri: str,
        auth: Auth,
        data: Serializable,
        response_type: Deserializable[R],
    ) -> R:
        """POST *data* as JSON and deserialize the response.

        Raises:
            TransportError: The request failed or returned a non-2xx status.
            DeserializationError: The body is not valid JSON for *response_type*.
        """
        client = self._get_client()
        logger.debug("POST %s (provider=%s)", uri, self.provider)
        try:
            response = await client.post(
                uri,
                headers=self.headers(auth),
                json=data.to_payload(),
            )
            logger.debug("HTTP response from %s: status=%s", uri, response.status_code)
            response.raise_for_status()
        except asyncio.CancelledError:
            raise
        except httpx.HTTPError as e:
            raise wrap_transport_error(
                e,
                provider=self.provider,
                uri=uri,
                message=f"POST {uri} failed",
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise DeserializationError(
                f"Response from {uri} is not valid JSON",
                hint="The provider may be behind a proxy returning HTML error pages.",
            ) from e
        return response_type.from_payload(body)

    async def aclose(self) -> None:
        """Close the underlying HTTP client, if one was created."""
        client = self._client
        if client is None:
            return
        self._client = None
        await client.aclose()

    async def __aenter__(self) -> Service:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
