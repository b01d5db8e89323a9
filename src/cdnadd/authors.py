"""
Author normalization.

Package manifests describe people either as a single string,
``"Jane Doe <jane@example.com> (https://example.com)"``, or as an object
with ``name``/``email``/``url`` (``homepage`` is accepted in place of
``url``). Both forms are reduced to :class:`Author`, whose serialized form
never contains empty fields.
"""

import re
from typing import Any, Iterable, List, Optional

from .logger import setup_logger
from .record import Author

_logger = setup_logger()

# One trailing "<email>" or "(url)" segment
_TRAILING_SEGMENT_RE = re.compile(r"\s*(?:<(?P<email>[^<>]*)>|\((?P<url>[^()]*)\))\s*$")


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_author_string(raw: str) -> Author:
    """
    Parse ``name [<email>] [(url)]``. The two optional segments may come in
    either order; at most two are stripped from the end and the remainder is
    the name.
    """
    rest = raw.strip()
    email = url = None
    for _ in range(2):
        m = _TRAILING_SEGMENT_RE.search(rest)
        if not m:
            break
        if m.group("email") is not None:
            email = email or _clean(m.group("email"))
        else:
            url = url or _clean(m.group("url"))
        rest = rest[: m.start()]
    return Author(name=_clean(rest), email=email, url=url)


def author_from_object(raw: dict) -> Author:
    return Author(
        name=_clean(raw.get("name")),
        email=_clean(raw.get("email")),
        url=_clean(raw.get("url")) or _clean(raw.get("homepage")),
    )


def normalize_authors(raw_authors: Iterable[Any]) -> List[Author]:
    """Normalize a mixed list of author strings/objects; missing and empty entries are dropped."""
    out: List[Author] = []
    for raw in raw_authors:
        if raw is None:
            continue
        if isinstance(raw, str):
            author = parse_author_string(raw)
        elif isinstance(raw, dict):
            author = author_from_object(raw)
        else:
            _logger.debug("Ignoring unrecognised author entry: %r", raw)
            continue
        if author:
            out.append(author)
    return out
