from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, urlparse

from .downloader import Downloader
from .logger import setup_logger

_logger = setup_logger()

GITHUB_HOSTS = ("github.com", "www.github.com")


class GitHubError(RuntimeError):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"GitHub API error {status}: {message}")
        self.status = status


def parse_repo_url(url: str) -> Tuple[str, str]:
    """
    Extract (owner, name) from a GitHub repository URL.
    Raises ValueError for other hosts or when owner/name are missing.
    """
    url = url.strip()
    if "://" not in url:
        url = "https://" + url
    parsed = urlparse(url)
    if (parsed.hostname or "").lower() not in GITHUB_HOSTS:
        raise ValueError(f"Not a GitHub repository URL: {url}")

    parts = [p for p in parsed.path.split("/") if p]
    if len(parts) < 2:
        raise ValueError(f"Repository URL is missing owner/name: {url}")
    owner, name = parts[0], parts[1]
    if name.endswith(".git"):
        name = name[: -len(".git")]
    if not owner or not name:
        raise ValueError(f"Repository URL is missing owner/name: {url}")
    return owner, name


def clone_url(owner: str, name: str) -> str:
    return f"https://github.com/{owner}/{name}.git"


class GitHubClient:
    """
    Minimal GitHub REST client: repository reads for the git auto-update
    source, and the handful of writes needed to open a pull request.
    """

    def __init__(self, downloader: Downloader, api_url: str = "https://api.github.com", token: Optional[str] = None):
        self.downloader = downloader
        self.api_url = api_url.rstrip("/")
        self.token = token

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        resp = self.downloader.request(method, f"{self.api_url}/{path}", headers=self.headers, json=payload)
        try:
            doc = resp.json()
        except ValueError:
            doc = None
        if resp.status_code >= 400:
            message = doc.get("message") if isinstance(doc, dict) else resp.reason
            raise GitHubError(resp.status_code, message or "unknown error")
        return doc

    # -------------------------
    # Repository reads
    # -------------------------
    def get_repo(self, owner: str, name: str) -> Dict[str, Any]:
        return self._call("GET", f"repos/{owner}/{name}")

    def get_tags(self, owner: str, name: str) -> List[Dict[str, Any]]:
        return self._call("GET", f"repos/{owner}/{name}/tags") or []

    def get_topics(self, owner: str, name: str) -> List[str]:
        doc = self._call("GET", f"repos/{owner}/{name}/topics") or {}
        return list(doc.get("names") or [])

    # -------------------------
    # Pull requests
    # -------------------------
    def create_pull_request(
        self,
        repo: str,
        base: str,
        branch: str,
        path: str,
        content: str,
        message: str,
        title: str,
        body: str,
    ) -> str:
        """Add one file on a new branch of repo and open a PR against base. Returns the PR URL."""
        ref = self._call("GET", f"repos/{repo}/git/ref/heads/{quote(base)}")
        base_sha = ref["object"]["sha"]
        _logger.debug("Creating branch %s from %s@%s", branch, base, base_sha)
        self._call("POST", f"repos/{repo}/git/refs", {"ref": f"refs/heads/{branch}", "sha": base_sha})

        self._call(
            "PUT",
            f"repos/{repo}/contents/{quote(path)}",
            {
                "message": message,
                "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
                "branch": branch,
            },
        )

        pr = self._call("POST", f"repos/{repo}/pulls", {"title": title, "head": branch, "base": base, "body": body})
        return pr["html_url"]
