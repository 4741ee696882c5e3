"""
Application settings using Pydantic Settings.
"""

from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        # Prefer local overrides while keeping .env as the default source
        env_file=(".env.local", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Azure Storage
    azure_storage_account: str | None = None
    azure_storage_access_key: SecretStr | None = None
    azure_storage_container: str | None = None

    # Serving
    images_url_prefix: str = Field("/content/images", description="Mount point for served blobs")

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


class StorageConfig(BaseModel):
    """
    Credentials and container used by the blob store.

    Immutable once built. Explicit values win over the environment; empty
    strings are treated as unset.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    storage_account: str | None = Field(default=None, alias="storageAccount")
    access_key: SecretStr | None = Field(default=None, alias="accessKey")
    container: str | None = None

    @field_validator("storage_account", "container", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("access_key", mode="before")
    @classmethod
    def blank_key_to_none(cls, v: Any) -> Any:
        if isinstance(v, SecretStr) and not v.get_secret_value():
            return None
        if isinstance(v, str) and not v:
            return None
        return v

    @classmethod
    def resolve(
        cls,
        config: Mapping[str, Any] | None = None,
        settings: Settings | None = None,
    ) -> "StorageConfig":
        """
        Merge an explicit config mapping with environment settings.

        Args:
            config: Host-provided values; accepts snake_case or camelCase keys
            settings: Settings to fall back on (defaults to a fresh read of the environment)

        Returns:
            Frozen StorageConfig
        """
        settings = settings or Settings()
        explicit = cls.model_validate(dict(config or {}))
        return cls(
            storage_account=explicit.storage_account or settings.azure_storage_account,
            access_key=explicit.access_key or settings.azure_storage_access_key,
            container=explicit.container or settings.azure_storage_container,
        )

    @property
    def access_key_str(self) -> str | None:
        """Get the access key as string."""
        if self.access_key:
            return self.access_key.get_secret_value()
        return None

    @property
    def missing_fields(self) -> list[str]:
        """Names of required settings that are not set."""
        missing = []
        if not self.storage_account:
            missing.append("storage_account")
        if not self.access_key:
            missing.append("access_key")
        if not self.container:
            missing.append("container")
        return missing

    @property
    def is_complete(self) -> bool:
        """Check whether every required setting is present."""
        return not self.missing_fields
