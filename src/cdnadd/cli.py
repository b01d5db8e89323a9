# cli.py
import argparse
import logging
import sys
from typing import Optional

from .assembler import Assembler
from .config import Config
from .downloader import Downloader
from .github import GitHubClient
from .logger import setup_logger
from .prompt import Ask, ask as default_ask
from .publisher import Publisher
from .record import LibraryRecord
from .registry import NpmRegistry

_logger = setup_logger()

METHODS = ("npm", "git")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cdnadd", description="Interactively add a new library to cdnjs")
    parser.add_argument("name", nargs="?", help="Library name (the npm package name for npm auto-updates)")
    parser.add_argument("--config-dir", help="Directory holding cdnadd.conf")
    parser.add_argument(
        "--no-pr", dest="pull_request", action="store_false", help="Print the record instead of opening a pull request"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def ask_method(ask: Ask = default_ask) -> str:
    while True:
        method = ask(f"\nAuto-update method to use [{'/'.join(METHODS)}]: ").strip().lower()
        if method in METHODS:
            return method
        _logger.error(f"Invalid auto-update method '{method}', expected one of: {', '.join(METHODS)}")


def run(name: str, config: Config, pull_request: bool = True, ask: Ask = default_ask) -> Optional[LibraryRecord]:
    downloader = Downloader(config)
    github = GitHubClient(downloader, config.github_api, config.github_token)
    assembler = Assembler(config, downloader, NpmRegistry(downloader, config.npm_registry), github, ask)

    method = ask_method(ask)
    record = assembler.from_npm(name) if method == "npm" else assembler.from_git(name)
    if record is None:
        return None

    pr_client = github if pull_request and config.can_open_pull_requests else None
    publisher = Publisher(config.target_repo, config.base_branch, config.branch_prefix, pr_client, ask)
    publisher.publish(record)
    return record


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    name = (args.name or "").strip()
    if not name:
        parser.print_usage()
        return

    if args.verbose:
        setup_logger(level=logging.DEBUG)

    config = Config(args.config_dir)
    try:
        record = run(name, config, args.pull_request)
    except (KeyboardInterrupt, EOFError):
        _logger.error("\nAborted.")
        sys.exit(1)

    if record is None:
        sys.exit(1)


if __name__ == "__main__":
    main()
