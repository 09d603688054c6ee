"""FastAPI dependency factories."""

from __future__ import annotations

from typing import Dict, Tuple

from fastapi import Depends, HTTPException

from pr_size_labeler.config import Settings, SettingsError, get_settings
from pr_size_labeler.github_client import GitHubClient
from pr_size_labeler.logger import get_logger
from pr_size_labeler.services.size_processor import SizeLabelProcessor

logger = get_logger()

# one pooled client per (api base url, token)
_github_clients: Dict[Tuple[str, str], GitHubClient] = {}


def settings_dependency() -> Settings:
    """Resolve application settings, surfacing configuration errors via HTTPException."""

    try:
        return get_settings()
    except SettingsError as exc:
        logger.error(f"Failed to load settings: {exc}")
        raise HTTPException(status_code=500, detail="Service is not configured") from exc


def github_client_dependency(settings: Settings = Depends(settings_dependency)) -> GitHubClient:
    """Provide the shared GitHub client for the resolved settings."""

    key = (settings.normalized_github_api_base_url, settings.github_token)
    client = _github_clients.get(key)
    if client is None:
        client = GitHubClient(base_url=key[0], token=key[1])
        _github_clients[key] = client
    return client


def processor_dependency(
    github_client: GitHubClient = Depends(github_client_dependency),
) -> SizeLabelProcessor:
    return SizeLabelProcessor(github_client)


async def close_github_clients() -> None:
    """Close and forget every cached GitHub client."""

    clients = list(_github_clients.values())
    _github_clients.clear()
    for client in clients:
        await client.aclose()
