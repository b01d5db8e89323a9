"""
File maps: which files of a release are tracked for auto-updates.

A file map is an ordered list of :class:`FileMapEntry`, each anchoring one
or more glob patterns at a base path relative to the package root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from wcmatch import glob

from .logger import setup_logger
from .prompt import Ask, ask as default_ask

_logger = setup_logger()


@dataclass
class FileMapEntry:
    base_path: str
    patterns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {"basePath": self.base_path, "files": list(self.patterns)}


# -------------------------
# Matching
# -------------------------
def under_root(root: Union[str, Path], rel_path: str) -> Path:
    """Join rel_path onto root; a leading slash stays inside root."""
    return Path(root) / rel_path.lstrip("/\\")


# Node-glob compatible: globstar, {a,b} braces, @(a|b) extglobs, files only
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.EXTGLOB | glob.NODIR


def glob_files(base: Union[str, Path], pattern: str) -> List[str]:
    """
    Files (not directories) under base matching pattern, as sorted
    POSIX-style paths relative to base. ``**`` matches across directories.
    """
    matches = glob.glob(pattern, root_dir=str(base), flags=GLOB_FLAGS)
    return sorted(m.replace(os.sep, "/") for m in matches)


def match_file_map(root: Union[str, Path], entries: Sequence[FileMapEntry]) -> List[str]:
    """
    All files matched by a file map, in declaration order. A pattern that
    fails contributes nothing; duplicates across patterns are kept.
    """
    root = Path(root)
    files: List[str] = []
    for entry in entries:
        base = under_root(root, entry.base_path)
        for pattern in entry.patterns:
            try:
                files.extend(glob_files(base, pattern))
            except Exception as e:
                _logger.debug("Pattern %r under %r failed: %s", pattern, entry.base_path, e)
    return files


# -------------------------
# Interactive builder
# -------------------------
def normalize_base_path(base_path: str, cwd: Optional[Union[str, Path]] = None) -> str:
    """A base path that resolves to the working directory is stored as ''."""
    here = Path(cwd) if cwd else Path.cwd()
    if (here / base_path).resolve() == here.resolve():
        return ""
    return base_path


def ask_patterns(base_path: str, ask: Ask = default_ask) -> List[str]:
    patterns: List[str] = []
    while True:
        pattern = ask(f"\nGlob pattern to get from base path {base_path} (blank to end): ")
        if not pattern:
            if patterns:
                return patterns
            _logger.error("At least one glob pattern is required for a base path in the file map")
            continue
        patterns.append(pattern)


def build_file_map(ask: Ask = default_ask) -> List[FileMapEntry]:
    """Prompt for base paths and their patterns until a blank base path ends the map."""
    file_map: List[FileMapEntry] = []
    print("\nFile map(s) to use for auto-updating library...")
    while True:
        base_path = ask("\nBase path to use in file map (blank to end): ")
        if not base_path:
            if file_map:
                return file_map
            _logger.error("At least one file map is required for a library to auto-update")
            continue
        patterns = ask_patterns(base_path, ask)
        file_map.append(FileMapEntry(normalize_base_path(base_path), patterns))
