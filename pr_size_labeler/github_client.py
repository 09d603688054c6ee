"""GitHub API client helpers."""

from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

import httpx


class GitHubAPIError(RuntimeError):
    """Raised when a GitHub API request fails."""

    def __init__(self, message: str, status_code: int, response_body: Any | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


DEFAULT_ACCEPT_HEADER = "application/vnd.github+json"
DEFAULT_API_VERSION = "2022-11-28"
FILES_PAGE_SIZE = 100


class GitHubClient:
    """Token-authenticated client for the pull request and label endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        token: str,
        timeout: float = 10.0,
        user_agent: str = "PR-Size-Labeler/1.0",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent
        self._token = token
        self._client: httpx.AsyncClient | None = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
            )
        return self._client

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": DEFAULT_ACCEPT_HEADER,
            "X-GitHub-Api-Version": DEFAULT_API_VERSION,
        }

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: Dict[str, Any] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        try:
            return await self._get_client().request(
                method, url, headers=self._headers(), params=params, json=json
            )
        except httpx.HTTPError as exc:
            raise GitHubAPIError(f"GitHub API request to {url} failed: {exc}", 0, None) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, url: str) -> None:
        if response.is_success:
            return
        detail: Any | None
        if response.content:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
        else:
            detail = None
        raise GitHubAPIError(
            f"GitHub API request to {url} failed with status {response.status_code}.",
            response.status_code,
            detail,
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Dict[str, Any] | None = None,
        json: Any | None = None,
    ) -> httpx.Response:
        response = await self._send(method, url, params=params, json=json)
        self._raise_for_status(response, url)
        return response

    async def iter_pull_request_file_pages(self, *, owner: str, repo: str, pull_number: int):
        """Yield each page of the pull request's changed files.

        Follows the ``rel="next"`` link until GitHub stops sending one.
        """

        url: str | None = f"/repos/{owner}/{repo}/pulls/{pull_number}/files"
        params: Dict[str, Any] | None = {"per_page": FILES_PAGE_SIZE}
        while url is not None:
            response = await self._request("GET", url, params=params)
            try:
                batch = response.json()
            except ValueError as exc:
                raise GitHubAPIError(
                    "GitHub API returned invalid JSON while listing pull request files.",
                    response.status_code,
                    response.text,
                ) from exc
            if not isinstance(batch, list):
                raise GitHubAPIError(
                    "Unexpected response while listing pull request files.",
                    response.status_code,
                    batch,
                )
            yield batch
            url = response.links.get("next", {}).get("url")
            # the next link already carries per_page and page
            params = None

    async def remove_label(self, *, owner: str, repo: str, issue_number: int, label: str) -> bool:
        """Remove ``label`` from the issue.

        Returns ``False`` when the label was not on the issue (404), which is
        not treated as an error.
        """

        url = f"/repos/{owner}/{repo}/issues/{issue_number}/labels/{quote(label, safe='')}"
        response = await self._send("DELETE", url)
        if response.status_code == 404:
            return False
        self._raise_for_status(response, url)
        return True

    async def add_labels(
        self, *, owner: str, repo: str, issue_number: int, labels: List[str]
    ) -> None:
        """Add labels to the issue, creating them on the repository if needed."""

        await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/labels",
            json={"labels": labels},
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""

        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None
