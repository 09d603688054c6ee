"""Application configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, ValidationError, field_validator

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"


class SettingsError(RuntimeError):
    """Raised when application configuration is invalid or incomplete."""


@dataclass(frozen=True)
class RepoSpec:
    """Repository or organization the service labels pull requests for.

    ``name`` is ``None`` when only an owner was configured, in which case every
    repository under that owner matches.
    """

    owner: str
    name: str | None = None

    @classmethod
    def parse(cls, raw: str) -> "RepoSpec":
        parts = raw.strip().split("/")
        if len(parts) > 2 or not all(part.strip() for part in parts):
            raise ValueError(f"Repository spec '{raw}' must be 'owner' or 'owner/name'.")
        if len(parts) == 1:
            return cls(owner=parts[0].strip())
        return cls(owner=parts[0].strip(), name=parts[1].strip())

    def matches(self, owner: str, name: str) -> bool:
        if owner != self.owner:
            return False
        return self.name is None or name == self.name

    def __str__(self) -> str:
        return self.owner if self.name is None else f"{self.owner}/{self.name}"


class Settings(BaseModel):
    """Runtime settings loaded once from environment variables."""

    model_config = ConfigDict(frozen=True)

    github_shared_secret: str
    github_repo_name: str
    github_token: str
    github_api_base_url: AnyHttpUrl = DEFAULT_GITHUB_API_BASE_URL

    @field_validator("github_shared_secret", "github_token")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("value cannot be empty")
        return value

    @field_validator("github_repo_name")
    @classmethod
    def validate_repo_spec(cls, value: str) -> str:
        RepoSpec.parse(value)
        return value.strip()

    @property
    def repo_spec(self) -> RepoSpec:
        return RepoSpec.parse(self.github_repo_name)

    @property
    def normalized_github_api_base_url(self) -> str:
        """Return the GitHub API base URL without a trailing slash."""
        return str(self.github_api_base_url).rstrip("/")


def _redact_secret(value: str, visible_chars: int = 4) -> str:
    if len(value) <= visible_chars:
        return "*" * len(value)
    return value[:visible_chars] + "*" * (len(value) - visible_chars)


def describe_settings(settings: Settings) -> dict[str, str]:
    """Return settings suitable for logging, with secrets redacted."""

    return {
        "repository": str(settings.repo_spec),
        "github_api_base_url": settings.normalized_github_api_base_url,
        "github_token": _redact_secret(settings.github_token),
        "github_shared_secret": _redact_secret(settings.github_shared_secret),
    }


def _build_settings() -> Settings:
    shared_secret = os.getenv("GITHUB_SHARED_SECRET")
    repo_name = os.getenv("GITHUB_REPO_NAME")
    token = os.getenv("GITHUB_TOKEN")

    missing = []
    if not shared_secret:
        missing.append("GITHUB_SHARED_SECRET")
    if not repo_name:
        missing.append("GITHUB_REPO_NAME")
    if not token:
        missing.append("GITHUB_TOKEN")
    if missing:
        raise SettingsError(
            "Size labeler is not configured. Missing environment variables: "
            f"{', '.join(missing)}."
        )

    try:
        return Settings(
            github_shared_secret=shared_secret,
            github_repo_name=repo_name,
            github_token=token,
            github_api_base_url=os.getenv("GITHUB_API_BASE_URL") or DEFAULT_GITHUB_API_BASE_URL,
        )
    except ValidationError as exc:
        raise SettingsError(f"Invalid application configuration: {exc}") from exc


@lru_cache(maxsize=1)
def _cached_settings() -> Settings:
    return _build_settings()


def get_settings() -> Settings:
    """Retrieve cached application settings."""
    return _cached_settings()


def reset_settings_cache() -> None:
    """Clear the cached settings (primarily for tests)."""
    _cached_settings.cache_clear()
