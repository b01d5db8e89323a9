import configparser
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .logger import setup_logger

_logger = setup_logger()


class Config:
    def __init__(self, config_dir: Optional[Union[str, Path]] = None) -> None:
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".config" / "cdnadd"
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_path = self.config_dir / "cdnadd.conf"

        # Default values
        self.temp_path: Path = Path(tempfile.gettempdir()) / "cdnadd"
        self.npm_registry: str = "https://registry.npmjs.com"
        self.github_api: str = "https://api.github.com"

        # Network Defaults
        self.timeout_connect: int = 10
        self.timeout_read: int = 60
        self.retries: int = 3
        self.verify_ssl: bool = True
        self.proxy_url: Optional[str] = None
        self.ca_bundle: Optional[str] = None

        # Publishing Defaults
        self.pull_requests: bool = False
        self.github_token: Optional[str] = None
        self.target_repo: str = "cdnjs/packages"
        self.base_branch: str = "master"
        self.branch_prefix: str = "add-library/"

        self.load()

    @property
    def can_open_pull_requests(self) -> bool:
        return self.pull_requests and bool(self.github_token)

    def load(self) -> None:
        parser = configparser.ConfigParser()
        if not self.config_path.exists():
            _logger.debug(f"Config file {self.config_path} not found. Creating default config.")
            self._write_default_config()

        parser.read(self.config_path)

        # [general]
        self.temp_path = Path(parser.get("general", "temp_path", fallback=str(self.temp_path)))
        self.npm_registry = parser.get("general", "npm_registry", fallback=self.npm_registry).rstrip("/")
        self.github_api = parser.get("general", "github_api", fallback=self.github_api).rstrip("/")

        # [network]
        if parser.has_section("network"):
            self.timeout_connect = parser.getint("network", "timeout_connect", fallback=10)
            self.timeout_read = parser.getint("network", "timeout_read", fallback=60)
            self.retries = parser.getint("network", "retries", fallback=3)
            self.verify_ssl = parser.getboolean("network", "verify_ssl", fallback=True)

            # Handle empty strings mapping to None
            ca = parser.get("network", "ca_bundle", fallback=None)
            self.ca_bundle = ca if ca else None
            p_url = parser.get("network", "proxy_url", fallback=None)
            self.proxy_url = p_url if p_url else None

        # [publish]
        if parser.has_section("publish"):
            self.pull_requests = parser.getboolean("publish", "pull_requests", fallback=False)
            token = parser.get("publish", "github_token", fallback=None)
            self.github_token = token if token else None
            self.target_repo = parser.get("publish", "target_repo", fallback=self.target_repo)
            self.base_branch = parser.get("publish", "base_branch", fallback=self.base_branch)
            self.branch_prefix = parser.get("publish", "branch_prefix", fallback=self.branch_prefix)

        # GITHUB_TOKEN overrides the file
        env_token = os.environ.get("GITHUB_TOKEN")
        if env_token:
            self.github_token = env_token

    def _write_default_config(self) -> None:
        parser = configparser.ConfigParser()
        parser["general"] = {
            "temp_path": str(self.temp_path),
            "npm_registry": self.npm_registry,
            "github_api": self.github_api,
        }
        parser["network"] = {
            "timeout_connect": str(self.timeout_connect),
            "timeout_read": str(self.timeout_read),
            "retries": str(self.retries),
            "verify_ssl": str(self.verify_ssl).lower(),
            "ca_bundle": self.ca_bundle or "",
            "proxy_url": self.proxy_url or "",
        }
        parser["publish"] = {
            "pull_requests": str(self.pull_requests).lower(),
            "github_token": "",
            "target_repo": self.target_repo,
            "base_branch": self.base_branch,
            "branch_prefix": self.branch_prefix,
        }
        with self.config_path.open("w") as f:
            parser.write(f)
        _logger.info(f"Default config written to {self.config_path}")
