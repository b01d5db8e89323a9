"""
cdnadd - Interactive helper for adding a new library to cdnjs.

Looks a library up on npm or GitHub, downloads its latest release,
lets the maintainer explore it and build an auto-update file map, and
emits the resulting package record (printed, or as a pull request).

Modules:
- cli: Command-line interface entry point.
- assembler: Metadata acquisition (npm / git) and record assembly.
- filemap: File map matching and the interactive file map builder.
- explorer: Interactive path listing and glob testing.
- authors: Author string/object normalization.
- publisher: Console output and pull request submission.
- registry / github: Remote API clients.
- downloader: HTTP session and archive extraction.
- config: Configuration management.
"""

from .cli import main

__all__ = ["main"]
