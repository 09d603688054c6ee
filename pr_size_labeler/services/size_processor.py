"""Size-label processing for accepted pull request events."""

from __future__ import annotations

from dataclasses import dataclass

from pr_size_labeler.github_client import GitHubAPIError, GitHubClient
from pr_size_labeler.logger import get_logger, log_success, log_timing, log_with_context
from pr_size_labeler.models.events import PullRequestEvent
from pr_size_labeler.services.change_aggregator import aggregate_changes
from pr_size_labeler.services.label_reconciler import reconcile_labels
from pr_size_labeler.sizes import DEFAULT_SIZES, SizeTable

logger = get_logger()


class SizeLabelProcessorError(RuntimeError):
    """Raised when an upstream step of size labeling fails."""

    def __init__(self, message: str, step: str, original_error: Exception | None = None):
        super().__init__(message)
        self.step = step
        self.original_error = original_error


@dataclass(frozen=True)
class SizeLabelResult:
    changes: int
    label: str | None


class SizeLabelProcessor:
    def __init__(self, github_client: GitHubClient, size_table: SizeTable = DEFAULT_SIZES) -> None:
        self._github_client = github_client
        self._size_table = size_table

    async def __call__(self, event: PullRequestEvent, *, delivery_id: str | None = None) -> SizeLabelResult:
        owner = event.repository_owner
        repo = event.repository_name
        number = event.pull_request_number
        context = {"delivery_id": delivery_id, "repository": event.repository.full_name, "pull_number": number}
        ctx_logger = log_with_context(logger, **context)
        ctx_logger.info(f"=== PROCESSOR: Sizing {event.pull_request_id} ({event.action}) ===")

        try:
            with log_timing(ctx_logger, "aggregate_changes"):
                changes = await aggregate_changes(self._github_client, owner=owner, repo=repo, pull_number=number)
        except GitHubAPIError as exc:
            raise SizeLabelProcessorError("Error reading PR changes", "aggregate_changes", exc) from exc

        label = self._size_table.classify(changes)
        ctx_logger.info(f"{event.pull_request_id} has {changes} changed lines -> {label or 'no matching size'}")

        try:
            with log_timing(ctx_logger, "reconcile_labels"):
                applied = await reconcile_labels(
                    self._github_client,
                    owner=owner,
                    repo=repo,
                    pull_number=number,
                    new_label=label,
                    size_table=self._size_table,
                )
        except GitHubAPIError as exc:
            raise SizeLabelProcessorError("Error updating size label", "reconcile_labels", exc) from exc

        log_success(logger, f"Labeled {event.pull_request_id} as {applied}", **context)
        return SizeLabelResult(changes=changes, label=applied)
