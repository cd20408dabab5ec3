from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _normalise_store_url(url: str) -> str:
    """Strip trailing slashes so path joins in the store client stay clean."""
    return url.rstrip("/")


class Settings(BaseSettings):
    """Publisher settings loaded from ``PUBLISHER_*`` environment variables.

    CLI options take precedence over anything read here. The artifact
    store URL and token are only needed when something is actually
    uploaded; ``plan`` runs without them.
    """

    model_config = SettingsConfigDict(
        env_prefix="PUBLISHER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Naming
    app_name: str = "Publisher"
    short_sha_length: int = 7

    # Build output tree. Bundle patterns are relative to this directory.
    artifact_root: str = "target"

    # The Debian bundle is opt-in; AppImage is the Linux default.
    include_deb: bool = False

    # Optional YAML manifest replacing the built-in bundle table.
    manifest_path: Optional[str] = None

    # Artifact store
    store_url: str = "http://localhost:8080"
    store_token: str = ""
    retention_days: int = 1
    upload_timeout: float = 300.0

    # App
    debug: bool = False

    @field_validator("store_url", mode="before")
    @classmethod
    def normalise_store_url(cls, v: str) -> str:
        return _normalise_store_url(v)

    @field_validator("short_sha_length")
    @classmethod
    def check_short_sha_length(cls, v: int) -> int:
        if not 4 <= v <= 40:
            raise ValueError("short_sha_length must be between 4 and 40")
        return v

    @field_validator("retention_days")
    @classmethod
    def check_retention_days(cls, v: int) -> int:
        if v < 1:
            raise ValueError("retention_days must be at least 1")
        return v


def get_settings() -> Settings:
    return Settings()
