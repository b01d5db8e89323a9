from __future__ import annotations

import atexit
import tarfile
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import requests
import urllib3
from requests.adapters import HTTPAdapter, Retry
from tqdm import tqdm

from .config import Config
from .logger import setup_logger

_logger = setup_logger()


class Downloader:
    """
    Shared HTTP session for registry/GitHub calls and release archives.
    """

    ARCHIVE_NAME = "archive.tgz"

    def __init__(self, config: Config) -> None:
        self.config = config

        # Network Configuration
        self.proxy_url = getattr(self.config, "proxy_url", None)
        self.verify_ssl = getattr(self.config, "verify_ssl", True)
        self.ca_bundle = getattr(self.config, "ca_bundle", None)
        self.retries = getattr(self.config, "retries", 3)

        # Timeouts (Connect, Read)
        self.timeout = (
            getattr(self.config, "timeout_connect", 10),
            getattr(self.config, "timeout_read", 60),
        )

        self.session: Optional[requests.Session] = None
        self._init_session()
        atexit.register(self.close)

    def _init_session(self) -> None:
        if self.session:
            self.session.close()

        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "cdnadd"})

        # Proxy Setup
        if self.proxy_url:
            self.session.proxies.update({
                "http": self.proxy_url,
                "https": self.proxy_url,
            })

        # Connection Resilience (Keep-Alive + Retries on idempotent calls)
        retry_strategy = Retry(
            total=self.retries,
            backoff_factor=0.3,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        # SSL Logic
        if not self.verify_ssl:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            self.session.verify = False
            _logger.warning("SSL verification disabled (Insecure).")
        else:
            self.session.verify = self.ca_bundle if self.ca_bundle else True

    def close(self) -> None:
        if self.session:
            self.session.close()

    # --------------------------------------------------------
    # JSON APIs
    # --------------------------------------------------------

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        _logger.debug("%s %s", method, url)
        return self.session.request(method, url, **kwargs)

    def get_json(self, url: str, headers: Optional[Dict[str, str]] = None) -> Tuple[int, Any]:
        """
        GET a JSON document. Does not raise on HTTP error status: callers
        inspect the status and the document (registries put errors in the body).
        """
        resp = self.request("GET", url, headers=headers)
        try:
            doc = resp.json()
        except ValueError:
            doc = None
        return resp.status_code, doc

    # --------------------------------------------------------
    # Archives
    # --------------------------------------------------------

    def download_to_file(
        self, url: str, output_path: Union[str, Path], headers: Optional[Dict[str, str]] = None
    ) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        _logger.debug("Downloading %s -> %s", url, output_path)
        with self.session.get(url, headers=headers, stream=True, timeout=self.timeout) as resp:
            resp.raise_for_status()
            total = int(resp.headers.get("content-length", 0) or 0)
            with open(output_path, "wb") as fh:
                with tqdm(total=total, unit="B", unit_scale=True, desc=output_path.name, leave=False) as bar:
                    for chunk in resp.iter_content(chunk_size=8192):
                        if chunk:
                            fh.write(chunk)
                            bar.update(len(chunk))

    def download_and_extract(
        self, url: str, dest: Union[str, Path], headers: Optional[Dict[str, str]] = None
    ) -> Path:
        """
        Download a .tar.gz to dest, extract it there, and return the
        top-level extracted directory.
        """
        dest = Path(dest)
        archive = dest / self.ARCHIVE_NAME
        self.download_to_file(url, archive, headers=headers)
        try:
            with tarfile.open(archive, "r:*") as tar:
                tar.extractall(path=dest, filter="data")
        finally:
            archive.unlink(missing_ok=True)
        return top_level_dir(dest)


def top_level_dir(path: Union[str, Path]) -> Path:
    """
    Return the single directory an archive extracted into, or path itself
    when the extraction has no unique top-level directory.
    """
    path = Path(path)
    entries = list(path.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    _logger.warning("No unique top-level directory in %s; using it as the package root", path)
    return path
