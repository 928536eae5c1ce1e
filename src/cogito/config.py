"""Configuration: Frozen Config with explicit provider requirements."""

from __future__ import annotations

from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
import os
from typing import Literal

from dotenv import load_dotenv

from cogito._http import DEFAULT_TIMEOUT_S
from cogito.errors import ConfigurationError
from cogito.service import Auth, HttpClientFactory

load_dotenv()

ProviderName = Literal["openai", "claude"]

# Checked in order; the first one set wins.
_API_KEY_ENV_VARS: dict[ProviderName, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "claude": ("CLAUDE_API_KEY", "ANTHROPIC_API_KEY"),
}


def _package_version() -> str:
    try:
        return version("cogito-ai")
    except PackageNotFoundError:
        return "0.0.0+unknown"


@dataclass(frozen=True)
class Config:
    """Immutable configuration for creating a client.

    API keys are auto-resolved from standard environment variables.

    Example:
        config = Config(provider="claude", model="claude-haiku-4-5")
        # API key is automatically resolved from CLAUDE_API_KEY
    """

    provider: ProviderName
    #: Wire identifier; the provider's default model when *None*.
    model: str | None = None
    #: Auto-resolved from ``OPENAI_API_KEY`` or ``CLAUDE_API_KEY`` when *None*.
    api_key: str | None = None
    #: Identifies the calling application in the ``User-Agent`` header.
    package: str = "cogito-ai"
    version: str = field(default_factory=_package_version)
    timeout_s: float = DEFAULT_TIMEOUT_S

    def __post_init__(self) -> None:
        """Auto-resolve API key and validate configuration."""
        if self.provider not in _API_KEY_ENV_VARS:
            raise ConfigurationError(
                f"Unknown provider: {self.provider!r}",
                hint="Supported providers: 'openai', 'claude'",
            )

        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {self.timeout_s}",
                hint="This bounds each HTTP round trip, in seconds.",
            )

        env_vars = _API_KEY_ENV_VARS[self.provider]
        if self.api_key is None:
            resolved_key = next(
                (os.environ[v] for v in env_vars if os.environ.get(v)), None
            )
            object.__setattr__(self, "api_key", resolved_key)

        if not self.api_key:
            raise ConfigurationError(
                f"API key required for {self.provider}",
                hint=f"Set {env_vars[0]} environment variable or pass api_key=...",
            )

    def auth(self) -> Auth:
        """Return the resolved credentials."""
        assert self.api_key is not None
        return Auth(self.api_key)

    def factory(self) -> HttpClientFactory:
        """Return the HTTP client factory for this configuration."""
        return HttpClientFactory(self.package, self.version, timeout_s=self.timeout_s)

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(provider={self.provider!r}, model={self.model!r}, "
            f"api_key={'[REDACTED]' if self.api_key else None})"
        )

    __repr__ = __str__
