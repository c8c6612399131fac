"""Configuration: frozen connection settings for an Azure AI Foundry endpoint."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from foundrykit.errors import ConfigurationError

load_dotenv()

ENDPOINT_ENV_VAR = "AZURE_OPENAI_ENDPOINT"
API_KEY_ENV_VAR = "AZURE_OPENAI_API_KEY"
API_VERSION_ENV_VAR = "AZURE_OPENAI_API_VERSION"


@dataclass(frozen=True)
class Config:
    """Immutable connection configuration.

    Unset fields are resolved from the standard Azure OpenAI environment
    variables. A key is required; token credentials are left to callers who
    build their own client.

    Example:
        config = Config(endpoint="https://my-resource.openai.azure.com")
        # API key is automatically resolved from AZURE_OPENAI_API_KEY
    """

    #: Auto-resolved from ``AZURE_OPENAI_ENDPOINT`` when *None*.
    endpoint: str | None = None
    #: Auto-resolved from ``AZURE_OPENAI_API_KEY`` when *None*.
    api_key: str | None = None
    #: Sent as the ``api-version`` query parameter when set.
    api_version: str | None = None
    use_mock: bool = False

    def __post_init__(self) -> None:
        """Auto-resolve settings from the environment and validate."""
        if self.endpoint is None:
            object.__setattr__(self, "endpoint", os.environ.get(ENDPOINT_ENV_VAR))
        if self.api_key is None and not self.use_mock:
            object.__setattr__(self, "api_key", os.environ.get(API_KEY_ENV_VAR))
        if self.api_version is None:
            object.__setattr__(
                self, "api_version", os.environ.get(API_VERSION_ENV_VAR) or None
            )

        if self.endpoint:
            object.__setattr__(self, "endpoint", self.endpoint.strip().rstrip("/"))

        if self.use_mock:
            return

        if not self.endpoint:
            raise ConfigurationError(
                "Azure AI Foundry endpoint is required",
                hint=f"Set {ENDPOINT_ENV_VAR} or pass endpoint=...",
            )
        if not self.endpoint.startswith(("https://", "http://")):
            raise ConfigurationError(
                f"Endpoint must be an http(s) URL, got {self.endpoint!r}",
                hint="Use the resource URL, e.g. https://<resource>.openai.azure.com",
            )
        if not self.api_key:
            raise ConfigurationError(
                "API key required for Azure AI Foundry",
                hint=f"Set {API_KEY_ENV_VAR} environment variable or pass api_key=...",
            )

    @property
    def base_url(self) -> str:
        """OpenAI-compatible v1 base URL for the endpoint."""
        return f"{self.endpoint or ''}/openai/v1"

    def __str__(self) -> str:
        """Return a redacted, developer-friendly representation."""
        return (
            f"Config(endpoint={self.endpoint!r}, "
            f"api_key={'[REDACTED]' if self.api_key else None}, "
            f"api_version={self.api_version!r}, use_mock={self.use_mock})"
        )

    __repr__ = __str__
