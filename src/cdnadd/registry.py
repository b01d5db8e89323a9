from __future__ import annotations

from typing import Any, Dict
from urllib.parse import quote

from .downloader import Downloader
from .logger import setup_logger

_logger = setup_logger()


class RegistryError(RuntimeError):
    """The registry answered with an error document or an unusable response."""


class NpmRegistry:
    def __init__(self, downloader: Downloader, base_url: str = "https://registry.npmjs.com") -> None:
        self.downloader = downloader
        self.base_url = base_url.rstrip("/")

    def _fetch(self, path: str) -> Dict[str, Any]:
        status, doc = self.downloader.get_json(f"{self.base_url}/{path}")
        if not isinstance(doc, dict):
            raise RegistryError(f"Unexpected registry response for {path} (HTTP {status})")
        if doc.get("error"):
            raise RegistryError(doc["error"])
        if status >= 400:
            raise RegistryError(f"Registry returned HTTP {status} for {path}")
        return doc

    def get_package(self, name: str) -> Dict[str, Any]:
        return self._fetch(quote(name, safe="@"))

    def get_version(self, name: str, version: str) -> Dict[str, Any]:
        return self._fetch(f"{quote(name, safe='@')}/{quote(version)}")

    @staticmethod
    def latest_version(package: Dict[str, Any]) -> str:
        latest = (package.get("dist-tags") or {}).get("latest")
        if not latest:
            raise RegistryError(f"No latest version published for {package.get('name')}")
        return latest
