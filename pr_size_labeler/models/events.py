"""Webhook event models keyed by the ``X-GitHub-Event`` header."""

from __future__ import annotations

import json
from typing import Literal

from pydantic import BaseModel, Field

PULL_REQUEST_EVENT = "pull_request"


class RepositoryInfo(BaseModel):
    full_name: str = Field(..., pattern=r"^[^/]+/[^/]+$")

    @property
    def owner(self) -> str:
        return self.full_name.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.full_name.split("/", 1)[1]


class PullRequestInfo(BaseModel):
    number: int = Field(..., gt=0)
    title: str | None = None
    html_url: str | None = None


class PullRequestEvent(BaseModel):
    event_type: Literal["pull_request"] = PULL_REQUEST_EVENT
    action: str
    number: int = Field(..., gt=0)
    repository: RepositoryInfo
    pull_request: PullRequestInfo | None = None

    @property
    def repository_owner(self) -> str:
        return self.repository.owner

    @property
    def repository_name(self) -> str:
        return self.repository.name

    @property
    def pull_request_number(self) -> int:
        return self.number

    @property
    def pull_request_id(self) -> str:
        return f"{self.repository.full_name}#{self.number}"


class UnsupportedEvent(BaseModel):
    """Any event other than ``pull_request``; its body is never inspected."""

    event_type: str
    action: str | None = None


WebhookEvent = PullRequestEvent | UnsupportedEvent


def parse_webhook_event(event_type: str | None, raw_body: bytes) -> WebhookEvent:
    """Build the event variant for ``event_type`` from the raw request body.

    Raises ``json.JSONDecodeError`` or ``pydantic.ValidationError`` when a pull
    request payload cannot be parsed.
    """

    if event_type != PULL_REQUEST_EVENT:
        return UnsupportedEvent(event_type=event_type or "")

    payload = json.loads(raw_body.decode("utf-8"))
    return PullRequestEvent.model_validate(payload)
