"""Publish configuration models."""

from typing import Any

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from templatepub.core.errors import ConfigError
from templatepub.models.base import TemplatepubBaseModel


class StorageConfig(TemplatepubBaseModel):
    """Staging bucket settings."""

    bucket: str = Field(
        default="downloads.typesafe.com",
        description="S3 bucket holding staged template archives",
    )
    key_prefix: str = Field(
        default="play/templates",
        description="Key prefix under which each revision's archives are staged",
    )
    region: str | None = Field(default=None, description="AWS region of the bucket")
    endpoint_url: str | None = Field(
        default=None, description="Alternative S3 endpoint (e.g. a local minio)"
    )

    @field_validator("key_prefix")
    @classmethod
    def strip_slashes(cls, v: str) -> str:
        return v.strip("/")


class PublishConfig(BaseSettings):
    """Configuration for the template publish workflow.

    Precedence order (highest to lowest):
    1. Environment variables (TEMPLATEPUB_*)
    2. Constructor arguments (config file data)
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="TEMPLATEPUB_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: Any,
        env_settings: Any,
        dotenv_settings: Any,
        file_secret_settings: Any,
    ) -> tuple[Any, ...]:
        """Environment variables override config file values."""
        return (
            env_settings,
            init_settings,
            dotenv_settings,
            file_secret_settings,
        )

    publish_host: str = Field(
        default="typesafe.com",
        description="Host of the template validation service",
    )
    download_base_url: str = Field(
        default="http://downloads.typesafe.com",
        description="Public base URL where staged archives can be downloaded",
    )
    username: str | None = None
    password: SecretStr | None = None

    poll_interval: float = Field(
        default=2.0, gt=0, description="Seconds to wait before each status check"
    )
    batch_timeout: float = Field(
        default=3600.0, gt=0, description="Seconds allowed for a whole publish batch"
    )
    max_poll_attempts: int | None = Field(
        default=None,
        ge=1,
        description="Status checks per template before giving up (unbounded if unset)",
    )
    max_workers: int | None = Field(
        default=None, ge=1, description="Upper bound on concurrent publish tasks"
    )
    request_timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for each HTTP request"
    )

    storage: StorageConfig = Field(default_factory=StorageConfig)

    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        upper_v = v.strip().upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return upper_v

    @field_validator("download_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def service_base_url(self) -> str:
        return f"https://{self.publish_host}"

    def credentials(self) -> tuple[str, str]:
        """Return basic auth credentials for the publish host.

        Raises:
            ConfigError: If no credentials are configured for the host
        """
        if not self.username or self.password is None:
            raise ConfigError(
                f"Could not find credentials for host: {self.publish_host}"
            )
        return self.username, self.password.get_secret_value()
