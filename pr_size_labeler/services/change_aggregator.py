"""Total the changed lines of a pull request."""

from __future__ import annotations

from pr_size_labeler.github_client import GitHubAPIError, GitHubClient
from pr_size_labeler.logger import get_logger

logger = get_logger()


async def aggregate_changes(client: GitHubClient, *, owner: str, repo: str, pull_number: int) -> int:
    """Sum the ``changes`` reported for every file across all listing pages.

    Any failed page raises ``GitHubAPIError``; a partial total is never returned.
    """

    total = 0
    pages = 0
    async for batch in client.iter_pull_request_file_pages(owner=owner, repo=repo, pull_number=pull_number):
        pages += 1
        for entry in batch:
            changes = entry.get("changes") if isinstance(entry, dict) else None
            if not isinstance(changes, int) or changes < 0:
                raise GitHubAPIError(
                    f"File entry on page {pages} has no valid change count.",
                    200,
                    entry,
                )
            total += changes

    logger.debug(f"Counted {total} changed lines across {pages} page(s) for {owner}/{repo}#{pull_number}")
    return total
