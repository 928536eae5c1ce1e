"""Provider-agnostic contracts: models, requests, responses, clients.

Provider modules implement these so applications can swap one LLM provider
for another without touching call sites.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from cogito.errors import FormatError

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from cogito.service import (
        Auth,
        HttpClientFactory,
        HttpPost,
        Serializable,
        Service,
    )


class AiModel(str, Enum):
    """Base class for a provider's closed catalog of models.

    Each member's value is the identifier sent on the wire, and ``str()`` of a
    member is exactly that identifier. Subclasses add the members and pick
    the designated `default`, `cheapest` and `fastest` ones.
    """

    def __str__(self) -> str:
        return str(self.value)

    @classmethod
    def parse(cls, value: Any) -> Self:
        """Return the member whose wire string is *value*.

        Raises:
            FormatError: *value* is not in this provider's catalog.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as e:
            known = ", ".join(m.value for m in cls)
            raise FormatError(
                f"Unknown {cls.__name__} {value!r}",
                hint=f"Known models: {known}",
            ) from e

    @classmethod
    def default(cls) -> Self:
        """The provider's standard model."""
        raise NotImplementedError

    @classmethod
    def flagship(cls) -> Self:
        """The provider's flagship model; the same as `default`."""
        return cls.default()

    @classmethod
    def best(cls) -> Self:
        """The provider's own pick for best price/performance.

        Often the same as the flagship, but there is no guarantee of that.
        """
        return cls.default()

    @classmethod
    def cheapest(cls) -> Self:
        """The least expensive model."""
        raise NotImplementedError

    @classmethod
    def fastest(cls) -> Self:
        """The lowest-latency model."""
        raise NotImplementedError


@runtime_checkable
class AiRequest(Protocol):
    """An immutable request built by chained ``with_*`` transformations."""

    def with_model(self, model: Any) -> Self:
        """Return a copy using *model*."""
        ...

    def with_instructions(self, instructions: str) -> Self:
        """Return a copy carrying *instructions*."""
        ...

    def with_input(self, text: str) -> Self:
        """Return a copy carrying *text* as input."""
        ...

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready request body."""
        ...


@runtime_checkable
class AiResponse(Protocol):
    """A provider response that reduces to a single display string."""

    def result(self) -> str:
        """Return the visible text of the response."""
        ...


@runtime_checkable
class AiClient(Protocol):
    """Minimal client protocol: send one request, get one response."""

    async def send(self, request: Any) -> Any:
        """Send *request* and return the provider's parsed response."""
        ...


class ServiceClient:
    """Base for provider clients that delegate to an `HttpPost` service.

    Subclasses set `BASE_URI`, the response type parsed from the provider's
    JSON, and the default service class built by `from_factory`.
    """

    BASE_URI: ClassVar[str]
    response_type: ClassVar[type[Any]]
    service_class: ClassVar[type[Service]]

    def __init__(self, auth: Auth, service: HttpPost) -> None:
        """Initialize with credentials and the transport to send through."""
        self.auth = auth
        self.service = service

    @classmethod
    def from_factory(cls, auth: Auth, factory: HttpClientFactory) -> Self:
        """Create a client whose default service uses HTTP clients from *factory*."""
        return cls(auth, cls.service_class(factory))

    async def send(self, request: Serializable) -> Any:
        """Send *request* to `BASE_URI` in exactly one POST.

        No retries, caching or timeouts are applied here; whatever the
        service raises reaches the caller unchanged.
        """
        return await self.service.post(
            self.BASE_URI, self.auth, request, self.response_type
        )

    async def aclose(self) -> None:
        """Release the service's HTTP resources, if it holds any."""
        aclose = getattr(self.service, "aclose", None)
        if callable(aclose):
            await aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
