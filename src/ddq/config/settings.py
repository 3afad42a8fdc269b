"""Application settings resolved from CLI overrides and the environment."""

import typing as t
from enum import Enum

from pydantic import (
    AliasChoices,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.credentials import Credentials
from ..domain.exceptions import ConfigurationError
from ..domain.retry import RetryPolicy

DEFAULT_SITE = "datadoghq.com"


class Environment(Enum):
    """Runtime environment for the application."""

    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Log levels understood by loguru."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class OutputFormat(str, Enum):
    """How JSON documents are printed."""

    JSON = "json"
    PRETTY = "pretty"


class Settings(BaseSettings):
    """Settings container shared by the CLI and the API client.

    Datadog values use the conventional ``DD_*`` environment variables;
    everything else reads ``DDQ_*``. Values passed to the constructor
    (CLI flags) take precedence over the environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="DDQ_",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        populate_by_name=True,
    )

    api_key: SecretStr | None = Field(
        default=None, validation_alias=AliasChoices("DD_API_KEY")
    )
    app_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("DD_APP_KEY", "DD_APPLICATION_KEY"),
    )
    site: str = Field(default=DEFAULT_SITE, validation_alias=AliasChoices("DD_SITE"))

    retries: int = Field(default=3, ge=0)
    retry_backoff_ms: int = Field(default=250, gt=0)
    retry_max_backoff_ms: int = Field(default=5_000, gt=0)
    retry_rate_limit: bool = True
    timeout_seconds: float = Field(default=30.0, gt=0)

    output: OutputFormat = OutputFormat.JSON
    compact: bool = False

    environment: Environment = Environment.DEVELOPMENT
    log_level: LogLevel = LogLevel.ERROR

    @field_validator("site")
    @classmethod
    def _site_not_empty(cls, value: str) -> str:
        if not value.strip().rstrip("/"):
            raise ValueError("Datadog site value is empty.")
        return value

    @model_validator(mode="after")
    def _backoff_window_is_ordered(self) -> "Settings":
        if self.retry_max_backoff_ms < self.retry_backoff_ms:
            raise ValueError(
                "retry_max_backoff_ms must be greater than or equal to "
                "retry_backoff_ms."
            )
        return self

    @property
    def base_url(self) -> str:
        return normalize_base_url(self.site)

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_retries=self.retries,
            base_backoff_ms=self.retry_backoff_ms,
            max_backoff_ms=self.retry_max_backoff_ms,
            retry_on_rate_limit=self.retry_rate_limit,
        )

    @property
    def compact_output(self) -> bool:
        return self.compact or self.output is OutputFormat.JSON

    def credentials(self) -> Credentials:
        """Return the configured keys.

        Raises:
            ConfigurationError: If either key is missing
        """
        if self.api_key is None:
            raise ConfigurationError(
                "Missing Datadog API key. Set --api-key or DD_API_KEY."
            )
        if self.app_key is None:
            raise ConfigurationError(
                "Missing Datadog application key. Set --app-key or DD_APP_KEY "
                "(or DD_APPLICATION_KEY)."
            )
        return Credentials(api_key=self.api_key, app_key=self.app_key)


def normalize_base_url(site: str) -> str:
    """Turn a site suffix or URL into an API base URL.

    Examples:
        >>> normalize_base_url("datadoghq.eu")
        'https://api.datadoghq.eu'
        >>> normalize_base_url("api.us3.datadoghq.com/")
        'https://api.us3.datadoghq.com'
        >>> normalize_base_url("http://localhost:8080/")
        'http://localhost:8080'
    """
    cleaned = site.strip().rstrip("/")
    if not cleaned:
        raise ConfigurationError("Datadog site value is empty.")

    if cleaned.startswith(("http://", "https://")):
        return cleaned

    if cleaned.startswith("api."):
        return f"https://{cleaned}"

    return f"https://api.{cleaned}"


def build_settings(**overrides: t.Any) -> Settings:
    """Build Settings, ignoring overrides that are None.

    Lets the CLI pass every flag through while unset flags fall back to
    the environment and defaults.
    """
    filtered = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**filtered)


def format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into a single readable line."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        message = error["msg"].removeprefix("Value error, ")
        messages.append(f"{location}: {message}" if location else message)
    return "Invalid configuration: " + "; ".join(messages)
