"""Pytest configuration and shared fakes."""

import asyncio
import json
import os
import tempfile
from typing import Any, Dict, List, Optional
from urllib.parse import unquote

# Keep log files out of the source tree before the package configures Loguru.
os.environ.setdefault("APP_LOG_DIR", tempfile.mkdtemp(prefix="pr-size-labeler-logs-"))

import httpx
import pytest

from pr_size_labeler.github_client import GitHubClient

API_BASE_URL = "https://api.github.test"


def run_async(coro):
    return asyncio.run(coro)


def make_pr_payload(
    action: str = "opened",
    number: int = 7,
    repo_full_name: str = "acme/widget",
) -> Dict[str, Any]:
    """Build a pull_request webhook payload."""
    return {
        "action": action,
        "number": number,
        "pull_request": {
            "number": number,
            "title": "Make the widget spin faster",
            "html_url": f"https://github.com/{repo_full_name}/pull/{number}",
        },
        "repository": {"full_name": repo_full_name},
        "sender": {"login": "octocat"},
    }


class FakeGitHub:
    """In-memory stand-in for the pull request files and issue label endpoints."""

    def __init__(
        self,
        file_pages: Optional[List[List[Dict[str, Any]]]] = None,
        labels: Optional[List[str]] = None,
    ) -> None:
        self.file_pages = file_pages if file_pages is not None else [[]]
        self.labels: List[str] = list(labels or [])
        self.requests: List[httpx.Request] = []
        self.failures: Dict[tuple, int] = {}

    def fail(self, method: str, key: str, status_code: int) -> None:
        """Answer ``method`` on ``key`` (a page number or label name) with ``status_code``."""
        self.failures[(method, key)] = status_code

    @property
    def removed_labels(self) -> List[str]:
        return [
            unquote(self._raw_path(request).rsplit("/labels/", 1)[1])
            for request in self.requests
            if request.method == "DELETE"
        ]

    @property
    def added_labels(self) -> List[List[str]]:
        return [json.loads(request.content)["labels"] for request in self.requests if request.method == "POST"]

    @staticmethod
    def _raw_path(request: httpx.Request) -> str:
        return request.url.raw_path.decode("ascii").split("?", 1)[0]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = self._raw_path(request)
        assert request.headers["Authorization"] == "Bearer test-token"

        if request.method == "GET" and path.endswith("/files"):
            page = int(request.url.params.get("page", "1"))
            status_code = self.failures.get(("GET", str(page)))
            if status_code:
                return httpx.Response(status_code, json={"message": "Server Error"})
            headers = {}
            if page < len(self.file_pages):
                base = f"{API_BASE_URL}{path}?per_page=100"
                headers["Link"] = (
                    f'<{base}&page={page + 1}>; rel="next", '
                    f'<{base}&page={len(self.file_pages)}>; rel="last"'
                )
            return httpx.Response(200, json=self.file_pages[page - 1], headers=headers)

        if request.method == "DELETE" and "/labels/" in path:
            label = unquote(path.rsplit("/labels/", 1)[1])
            status_code = self.failures.get(("DELETE", label))
            if status_code:
                return httpx.Response(status_code, json={"message": "Nope"})
            if label not in self.labels:
                return httpx.Response(404, json={"message": "Label does not exist"})
            self.labels.remove(label)
            return httpx.Response(200, json=[{"name": name} for name in self.labels])

        if request.method == "POST" and path.endswith("/labels"):
            status_code = self.failures.get(("POST", "labels"))
            if status_code:
                return httpx.Response(status_code, json={"message": "Must have admin rights"})
            for name in json.loads(request.content)["labels"]:
                if name not in self.labels:
                    self.labels.append(name)
            return httpx.Response(200, json=[{"name": name} for name in self.labels])

        return httpx.Response(404, json={"message": "Not Found"})


def make_client(fake: FakeGitHub) -> GitHubClient:
    transport = httpx.MockTransport(fake.handle)
    return GitHubClient(
        base_url=API_BASE_URL,
        token="test-token",
        client=httpx.AsyncClient(base_url=API_BASE_URL, transport=transport),
    )


def file_entries(*changes: int) -> List[Dict[str, Any]]:
    return [{"filename": f"src/file_{i}.py", "changes": c} for i, c in enumerate(changes)]


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()
