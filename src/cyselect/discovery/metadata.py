"""Scrape tags and titles out of Cypress spec source.

Tags come from three places::

    // @tags: login, auth
    describe("[auth] Login flow", ...)
    it("logs in", { tags: ["login"] }, ...)

Titles are the string arguments of describe/it/context/specify, with any
leading ``[tag]`` prefix removed.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from cyselect.discovery.models import TestCandidate
from cyselect.tokens import normalize_tag, unique

_BLOCK = r"\b(?:describe|it|context|specify)"

_COMMENT_TAG_RE = re.compile(r"//\s*@tags?:\s*([^\n]+)", re.IGNORECASE)
_INLINE_TAG_RE = re.compile(
    _BLOCK + r"\s*\(\s*[\"'`]\[([^\]]+)\][^\"'`]*[\"'`]", re.IGNORECASE
)
_METADATA_TAG_RE = re.compile(
    _BLOCK + r"\s*\([^,]+,\s*\{[^}]*tags:\s*\[([^\]]+)\]", re.IGNORECASE
)
_TITLE_RE = re.compile(_BLOCK + r"\s*\(\s*[\"'`]([^\"'`]+)[\"'`]", re.IGNORECASE)
_TAG_PREFIX_RE = re.compile(r"^\[[^\]]+\]\s*")
_QUOTES_RE = re.compile(r"[\"'`]")


def _split_tags(raw: str) -> List[str]:
    tags = (normalize_tag(_QUOTES_RE.sub("", part)) for part in raw.split(","))
    return [t for t in tags if t]


def extract_tags(content: str) -> List[str]:
    tags: List[str] = []
    for regex in (_COMMENT_TAG_RE, _INLINE_TAG_RE, _METADATA_TAG_RE):
        for m in regex.finditer(content):
            tags.extend(_split_tags(m.group(1)))
    return unique(tags)


def extract_titles(content: str) -> List[str]:
    titles: List[str] = []
    for m in _TITLE_RE.finditer(content):
        title = _TAG_PREFIX_RE.sub("", m.group(1).strip())
        if title:
            titles.append(title)
    return unique(titles)


def extract_test_metadata(path: str) -> TestCandidate:
    """Build a candidate for *path*; an unreadable file yields no metadata."""
    try:
        content = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return TestCandidate.from_path(path)
    return TestCandidate.build(path, extract_tags(content), extract_titles(content))
