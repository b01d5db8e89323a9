from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .filemap import FileMapEntry


@dataclass
class Author:
    name: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Only the populated fields; empty values are never emitted."""
        out = {}
        for key in ("name", "email", "url"):
            value = getattr(self, key)
            if value:
                out[key] = value
        return out

    def __bool__(self) -> bool:
        return bool(self.to_dict())


@dataclass
class Repository:
    type: str = ""
    url: str = ""

    def to_dict(self) -> Dict[str, str]:
        if not self.url:
            return {}
        return {"type": self.type or "git", "url": self.url}


@dataclass
class AutoUpdate:
    source: str  # "npm" | "git"
    target: str
    file_map: List[FileMapEntry]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "fileMap": [entry.to_dict() for entry in self.file_map],
        }


@dataclass
class LibraryRecord:
    name: str
    description: str = ""
    keywords: List[str] = field(default_factory=list)
    authors: List[Author] = field(default_factory=list)
    license: str = ""
    homepage: str = ""
    repository: Repository = field(default_factory=Repository)
    autoupdate: Optional[AutoUpdate] = None
    filename: Optional[str] = None

    @property
    def publishable(self) -> bool:
        return bool(self.name) and self.autoupdate is not None and bool(self.autoupdate.file_map)

    @property
    def path(self) -> str:
        """Location of the record in the packages repository, sharded by first letter."""
        return f"packages/{self.name[0].lower()}/{self.name}.json"

    def to_dict(self) -> Dict[str, Any]:
        # Key order is part of the output format
        out: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "keywords": list(self.keywords),
            "authors": [a.to_dict() for a in self.authors if a],
            "license": self.license,
            "homepage": self.homepage,
            "repository": self.repository.to_dict(),
        }
        if self.autoupdate is not None:
            out["autoupdate"] = self.autoupdate.to_dict()
        if self.filename:
            out["filename"] = self.filename
        return out
