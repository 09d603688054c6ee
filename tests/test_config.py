"""Tests for environment configuration."""

import pytest
from pydantic import ValidationError

from pr_size_labeler.config import (
    RepoSpec,
    SettingsError,
    describe_settings,
    get_settings,
    reset_settings_cache,
)


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("GITHUB_SHARED_SECRET", "shared-secret")
    monkeypatch.setenv("GITHUB_REPO_NAME", "acme/widget")
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_abcdefgh")
    monkeypatch.delenv("GITHUB_API_BASE_URL", raising=False)
    reset_settings_cache()
    yield monkeypatch
    reset_settings_cache()


def test_settings_loaded_from_environment(env):
    settings = get_settings()

    assert settings.github_shared_secret == "shared-secret"
    assert settings.github_token == "ghp_abcdefgh"
    assert settings.repo_spec == RepoSpec(owner="acme", name="widget")
    assert settings.normalized_github_api_base_url == "https://api.github.com"


def test_settings_are_cached_until_reset(env):
    first = get_settings()
    env.setenv("GITHUB_REPO_NAME", "other")

    assert get_settings() is first
    reset_settings_cache()
    assert get_settings().repo_spec == RepoSpec(owner="other")


def test_settings_are_immutable(env):
    settings = get_settings()

    with pytest.raises(ValidationError):
        settings.github_token = "changed"


def test_custom_api_base_url(env):
    env.setenv("GITHUB_API_BASE_URL", "https://github.example.com/api/v3/")

    assert get_settings().normalized_github_api_base_url == "https://github.example.com/api/v3"


@pytest.mark.parametrize("missing", ["GITHUB_SHARED_SECRET", "GITHUB_REPO_NAME", "GITHUB_TOKEN"])
def test_missing_variables_are_reported(env, missing):
    env.delenv(missing)

    with pytest.raises(SettingsError, match=missing):
        get_settings()


@pytest.mark.parametrize("repo_name", ["acme/widget/extra", "/widget", "acme/", "  "])
def test_invalid_repo_spec_is_rejected(env, repo_name):
    env.setenv("GITHUB_REPO_NAME", repo_name)

    with pytest.raises(SettingsError):
        get_settings()


def test_describe_settings_redacts_secrets(env):
    described = describe_settings(get_settings())

    assert described["repository"] == "acme/widget"
    assert described["github_token"] == "ghp_********"
    assert described["github_shared_secret"] == "shar*********"
    assert "shared-secret" not in described.values()


def test_repo_spec_parsing():
    assert RepoSpec.parse("acme") == RepoSpec(owner="acme")
    assert RepoSpec.parse(" acme/widget ") == RepoSpec(owner="acme", name="widget")
    assert str(RepoSpec.parse("acme/widget")) == "acme/widget"
    assert RepoSpec.parse("acme").matches("acme", "anything")
    assert not RepoSpec.parse("acme/widget").matches("acme", "gadget")
    assert not RepoSpec.parse("acme/widget").matches("other", "widget")
