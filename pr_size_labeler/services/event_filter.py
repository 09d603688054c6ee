"""Decide which webhook events should re-size a pull request."""

from __future__ import annotations

from dataclasses import dataclass

from pr_size_labeler.config import RepoSpec
from pr_size_labeler.models.events import PullRequestEvent, WebhookEvent

SUPPORTED_PR_ACTIONS = frozenset({"opened", "synchronize", "reopened"})

SKIP_UNSUPPORTED_EVENT = "unsupported event type"
SKIP_REPOSITORY_NOT_CONFIGURED = "repository not configured"
SKIP_ACTION_NOT_RELEVANT = "action not relevant"


@dataclass(frozen=True)
class FilterDecision:
    proceed: bool
    reason: str | None = None

    @classmethod
    def skip(cls, reason: str) -> "FilterDecision":
        return cls(proceed=False, reason=reason)


PROCEED = FilterDecision(proceed=True)


def should_process(event: WebhookEvent, repo_spec: RepoSpec) -> FilterDecision:
    """Return whether ``event`` means the pull request's code changed.

    Checks run in order: event type, repository, then action.
    """

    if not isinstance(event, PullRequestEvent):
        return FilterDecision.skip(SKIP_UNSUPPORTED_EVENT)

    if not repo_spec.matches(event.repository_owner, event.repository_name):
        return FilterDecision.skip(SKIP_REPOSITORY_NOT_CONFIGURED)

    # label changes, closures, edits and so on do not change the diff
    if event.action not in SUPPORTED_PR_ACTIONS:
        return FilterDecision.skip(SKIP_ACTION_NOT_RELEVANT)

    return PROCEED
