from __future__ import annotations

import json
from typing import Optional, Tuple

from .github import GitHubClient
from .logger import Colors, setup_logger, style
from .prompt import Ask, ask as default_ask
from .record import LibraryRecord

_logger = setup_logger()


def serialize(record: LibraryRecord) -> str:
    return json.dumps(record.to_dict(), indent=2, ensure_ascii=False) + "\n"


def print_record(record: LibraryRecord, content: str, target_repo: str) -> None:
    print(style(f"\n\nCreate new file on {target_repo}: {record.path}", Colors.BOLD, Colors.MAGENTA))
    print(content, end="")


class Publisher:
    """
    Emits a finished record. With a GitHub client it opens a pull request
    against the packages repository; any failure there falls back to
    printing the exact same document.
    """

    def __init__(
        self,
        target_repo: str = "cdnjs/packages",
        base_branch: str = "master",
        branch_prefix: str = "add-library/",
        github: Optional[GitHubClient] = None,
        ask: Ask = default_ask,
    ) -> None:
        self.target_repo = target_repo
        self.base_branch = base_branch
        self.branch_prefix = branch_prefix
        self.github = github
        self.ask = ask

    def publish(self, record: LibraryRecord) -> Optional[str]:
        """Returns the pull request URL, or None when the record was printed."""
        if not record.publishable:
            raise ValueError(f"Record for {record.name!r} has no auto-update file map")
        content = serialize(record)
        if self.github is None:
            print_record(record, content, self.target_repo)
            return None

        try:
            url = self.open_pull_request(record, content)
        except Exception as e:
            _logger.error(f"Failed to open pull request: {e}")
            print_record(record, content, self.target_repo)
            return None

        _logger.info(f"\nPull request opened: {url}")
        return url

    def pull_request_text(self, record: LibraryRecord, issue: str = "") -> Tuple[str, str]:
        autoupdate = record.autoupdate
        title = f"Add {record.name} w/ {autoupdate.source} auto-update"
        body = f"Adds {record.name} with auto-updates from {autoupdate.source} target `{autoupdate.target}`."
        if issue:
            body += f"\n\nResolves {issue}"
        return title, body

    def open_pull_request(self, record: LibraryRecord, content: str) -> str:
        issue = self.ask("\nIssue this library resolves, e.g. #1234 (blank to skip): ").strip()
        title, body = self.pull_request_text(record, issue)
        return self.github.create_pull_request(
            repo=self.target_repo,
            base=self.base_branch,
            branch=f"{self.branch_prefix}{record.name}",
            path=record.path,
            content=content,
            message=f"Add {record.name}",
            title=title,
            body=body,
        )
