"""Swap stale size labels for the current one."""

from __future__ import annotations

from pr_size_labeler.github_client import GitHubClient
from pr_size_labeler.logger import get_logger
from pr_size_labeler.sizes import SizeTable

logger = get_logger()


async def reconcile_labels(
    client: GitHubClient,
    *,
    owner: str,
    repo: str,
    pull_number: int,
    new_label: str | None,
    size_table: SizeTable,
) -> str | None:
    """Remove every size label in ``size_table`` and then add ``new_label``.

    A size label that is not on the pull request is skipped. Any other removal
    failure raises ``GitHubAPIError`` before anything is added, which can leave
    the pull request without a size label. When ``new_label`` is ``None`` the
    old labels are still cleared and nothing is added.
    """

    for label in size_table:
        removed = await client.remove_label(owner=owner, repo=repo, issue_number=pull_number, label=label)
        if removed:
            logger.debug(f"Removed {label} from {owner}/{repo}#{pull_number}")

    if new_label is None:
        logger.warning(f"No size label matched {owner}/{repo}#{pull_number}; leaving it unlabeled")
        return None

    # the token needs permission to create the label if the repository lacks it
    await client.add_labels(owner=owner, repo=repo, issue_number=pull_number, labels=[new_label])
    return new_label
