"""
Metadata assembly for a new library.

Two acquisition strategies produce the same :class:`LibraryRecord`:

- npm: package + latest version documents from the registry, release
  tarball from ``dist.tarball``; auto-updates track the npm package.
- git: repository metadata and tags from GitHub, tarball of the most recent
  tag, optional ``package.json``/``bower.json`` overrides; auto-updates
  track the clone URL.

Both download into ``<temp_path>/<source>/<version>``, let the user explore
the extracted release and build a file map there, and remove the download
directory before returning.
"""

from __future__ import annotations

import json
import shutil
import tarfile
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import requests

from .authors import normalize_authors
from .config import Config
from .downloader import Downloader
from .explorer import DELIMITER, explore, glob_explore
from .filemap import FileMapEntry, build_file_map, match_file_map
from .github import GitHubClient, GitHubError, clone_url, parse_repo_url
from .logger import setup_logger
from .prompt import Ask, ask as default_ask
from .record import AutoUpdate, LibraryRecord, Repository
from .registry import NpmRegistry, RegistryError

_logger = setup_logger()

MANIFEST_FILES = ("package.json", "bower.json")


# -------------------------
# Field normalization
# -------------------------
def normalize_license(doc: Dict[str, Any]) -> str:
    lic = doc.get("license")
    if isinstance(lic, str):
        return lic
    if isinstance(lic, dict):
        return lic.get("type") or ""
    # Legacy "licenses": [{"type": ...}, ...]
    legacy = doc.get("licenses")
    if isinstance(legacy, list):
        types = [item.get("type") if isinstance(item, dict) else item for item in legacy]
        return " OR ".join(t for t in types if isinstance(t, str) and t)
    return ""


def normalize_repository(raw: Any) -> Repository:
    if isinstance(raw, dict):
        return Repository(type=raw.get("type") or "git", url=raw.get("url") or "")
    if isinstance(raw, str) and raw:
        return Repository(type="git", url=raw)
    return Repository()


def normalize_keywords(raw: Any) -> List[str]:
    if isinstance(raw, str):
        return [raw] if raw else []
    if isinstance(raw, list):
        return [k for k in raw if isinstance(k, str) and k]
    return []


# -------------------------
# Field precedence
# -------------------------
def merge_npm_fields(name: str, package: Dict[str, Any], version: Dict[str, Any]) -> LibraryRecord:
    """Version document fields win over package document fields."""
    return LibraryRecord(
        name=name,
        description=version.get("description") or package.get("description") or "",
        keywords=normalize_keywords(version.get("keywords") or package.get("keywords")),
        authors=normalize_authors([version.get("author") or package.get("author")]),
        license=normalize_license(version) or normalize_license(package),
        homepage=version.get("homepage") or package.get("homepage") or "",
        repository=normalize_repository(version.get("repository") or package.get("repository")),
    )


def repository_defaults(name: str, owner: str, repo: str, repo_doc: Dict[str, Any], topics: List[str]) -> LibraryRecord:
    spdx = (repo_doc.get("license") or {}).get("spdx_id") or ""
    return LibraryRecord(
        name=name,
        description=repo_doc.get("description") or "",
        keywords=list(topics),
        license="" if spdx == "NOASSERTION" else spdx,
        homepage=repo_doc.get("homepage") or repo_doc.get("html_url") or f"https://github.com/{owner}/{repo}",
        repository=Repository(type="git", url=clone_url(owner, repo)),
    )


def merge_manifest(defaults: LibraryRecord, manifest: Dict[str, Any]) -> LibraryRecord:
    """Manifest fields win over repository defaults where present."""
    raw_authors = [manifest.get("author")]
    if isinstance(manifest.get("authors"), list):
        raw_authors.extend(manifest["authors"])
    return LibraryRecord(
        name=defaults.name,
        description=manifest.get("description") or defaults.description,
        keywords=normalize_keywords(manifest.get("keywords")) or list(defaults.keywords),
        authors=normalize_authors(raw_authors) or list(defaults.authors),
        license=normalize_license(manifest) or defaults.license,
        homepage=manifest.get("homepage") or defaults.homepage,
        repository=defaults.repository,
    )


def read_manifest(root: Path) -> Dict[str, Any]:
    """First readable manifest in root, or {} when none parses."""
    for filename in MANIFEST_FILES:
        path = Path(root) / filename
        try:
            doc = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            _logger.debug("No usable %s: %s", filename, e)
            continue
        if isinstance(doc, dict):
            _logger.debug("Using metadata from %s", filename)
            return doc
    return {}


class Assembler:
    def __init__(
        self,
        config: Config,
        downloader: Downloader,
        npm: NpmRegistry,
        github: GitHubClient,
        ask: Ask = default_ask,
    ) -> None:
        self.config = config
        self.downloader = downloader
        self.npm = npm
        self.github = github
        self.ask = ask

    # -------------------------
    # Shared steps
    # -------------------------
    def _ask_name(self, default: str) -> str:
        return self.ask(f"\nName to use for library (blank for {default}): ").strip() or default

    def _explore_and_map(self, root: Path) -> Tuple[List[FileMapEntry], Optional[str]]:
        explore(root, self.ask)
        glob_explore(root, self.ask)
        file_map = build_file_map(self.ask)

        files = match_file_map(root, file_map)
        print(f"\nFiles from file map:\n{DELIMITER.join(files)}")
        filename = self.ask("\nDefault file to highlight for usage (blank to skip): ").strip()
        return file_map, filename or None

    def _fetch_release(self, url: str, work_dir: Path, headers: Optional[Dict[str, str]] = None) -> Optional[Path]:
        # work_dir must start empty for top-level detection
        shutil.rmtree(work_dir, ignore_errors=True)
        try:
            return self.downloader.download_and_extract(url, work_dir, headers=headers)
        except (requests.RequestException, tarfile.TarError, OSError) as e:
            _logger.error("Failed to download %s: %s", url, e)
            return None

    # -------------------------
    # npm
    # -------------------------
    def from_npm(self, package_name: str) -> Optional[LibraryRecord]:
        try:
            package = self.npm.get_package(package_name)
            latest = self.npm.latest_version(package)
            version = self.npm.get_version(package.get("name") or package_name, latest)
        except RegistryError as e:
            _logger.error(str(e))
            return None
        except requests.RequestException as e:
            _logger.error("Registry request failed: %s", e)
            return None

        npm_name = package.get("name") or package_name
        _logger.info(f"Located {npm_name}@{latest}...")

        record = merge_npm_fields(self._ask_name(npm_name), package, version)

        tarball = (version.get("dist") or {}).get("tarball")
        if not tarball:
            _logger.error(f"No tarball published for {npm_name}@{latest}")
            return None

        work_dir = self.config.temp_path / npm_name / latest
        try:
            root = self._fetch_release(tarball, work_dir)
            if root is None:
                return None
            _logger.info(f"\nDownloaded {npm_name}@{latest}...")

            file_map, record.filename = self._explore_and_map(root)
        finally:
            _logger.debug("Removing %s", work_dir)
            shutil.rmtree(work_dir, ignore_errors=True)

        record.autoupdate = AutoUpdate(source="npm", target=npm_name, file_map=file_map)
        return record

    # -------------------------
    # git
    # -------------------------
    def _ask_repository(self) -> Tuple[str, str]:
        while True:
            url = self.ask("\nGitHub repository URL to use for library: ")
            try:
                return parse_repo_url(url)
            except ValueError as e:
                _logger.error(str(e))

    def from_git(self, name: str) -> Optional[LibraryRecord]:
        owner, repo = self._ask_repository()
        try:
            tags = self.github.get_tags(owner, repo)
            if not tags:
                _logger.error(f"{owner}/{repo} has no tags; a library needs at least one tagged version")
                return None
            repo_doc = self.github.get_repo(owner, repo)
            topics = self.github.get_topics(owner, repo)
        except (GitHubError, requests.RequestException) as e:
            _logger.error(str(e))
            return None

        tag = tags[0]
        _logger.info(f"Located {owner}/{repo}@{tag['name']}...")

        defaults = repository_defaults(self._ask_name(name), owner, repo, repo_doc, topics)

        work_dir = self.config.temp_path / owner / repo / tag["name"]
        try:
            root = self._fetch_release(tag["tarball_url"], work_dir, headers=self.github.headers)
            if root is None:
                return None
            _logger.info(f"\nDownloaded {owner}/{repo}@{tag['name']}...")

            record = merge_manifest(defaults, read_manifest(root))
            file_map, record.filename = self._explore_and_map(root)
        finally:
            _logger.debug("Removing %s", work_dir)
            shutil.rmtree(work_dir, ignore_errors=True)

        record.autoupdate = AutoUpdate(source="git", target=clone_url(owner, repo), file_map=file_map)
        return record
