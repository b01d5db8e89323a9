"""Interactive exploration of an extracted package before committing to a file map."""

import os
from pathlib import Path
from typing import Union

from .filemap import glob_files, under_root
from .logger import setup_logger
from .prompt import Ask, ask as default_ask

_logger = setup_logger()

DELIMITER = "\t"


def show_path(root: Union[str, Path], rel_path: str) -> str:
    """Contents of a file, or the immediate entries of a directory, under root."""
    target = under_root(root, rel_path)
    if target.is_file():
        return target.read_text(encoding="utf-8", errors="replace")
    return DELIMITER.join(os.listdir(target))


def try_glob(root: Union[str, Path], glob_input: str) -> str:
    """Run one ``<basePath> <globPattern>`` line against root."""
    parts = glob_input.split(" ", 2)
    if len(parts) < 2 or not parts[1]:
        raise ValueError("Expected <basePath> <globPattern>")
    base_path, pattern = parts[0], parts[1]
    return DELIMITER.join(glob_files(under_root(root, base_path), pattern))


def explore(root: Union[str, Path], ask: Ask = default_ask) -> None:
    while True:
        path_input = ask("\nPath to explore in package (blank to end): ")
        if not path_input:
            return
        try:
            print(show_path(root, path_input))
        except OSError as e:
            _logger.error(str(e))


def glob_explore(root: Union[str, Path], ask: Ask = default_ask) -> None:
    while True:
        glob_input = ask("\nGlob to test in package [<basePath> <globPattern>] (blank to end): ")
        if not glob_input:
            return
        try:
            print(try_glob(root, glob_input))
        except Exception as e:
            _logger.error(str(e))
