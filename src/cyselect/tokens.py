"""Identifier tokenisation shared by filename, tag and title matching.

Every code path that compares words (filename similarity, tag and title
heuristics, test metadata extraction) must go through ``tokenize`` so the
token sets stay comparable.
"""

from __future__ import annotations

import posixpath
import re
from typing import Iterable, List

_SPLIT_RE = re.compile(r"[-_\s]+")
_CAMEL_RE = re.compile(r"([a-z])([A-Z])")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
# A leading dot is part of the name (".env"), not an extension
_EXTENSION_RE = re.compile(r"(?<=.)\.[^.]+$")
_TAG_CLEAN_RE = re.compile(r"[^a-z0-9_-]")


def tokenize(text: str) -> List[str]:
    """Split *text* into lowercase words.

    Splits on hyphens, underscores and whitespace, then on camelCase
    boundaries; non-alphanumerics are dropped.

    >>> tokenize("LoginForm user_profile")
    ['login', 'form', 'user', 'profile']
    """
    tokens: List[str] = []
    for part in _SPLIT_RE.split(text):
        for word in _CAMEL_RE.sub(r"\1 \2", part).split():
            cleaned = _NON_ALNUM_RE.sub("", word.lower())
            if cleaned:
                tokens.append(cleaned)
    return tokens


def to_posix(path: str) -> str:
    return path.replace("\\", "/")


def basename(path: str) -> str:
    return posixpath.basename(to_posix(path))


def strip_extension(name: str) -> str:
    """Remove the last extension: ``Button.tsx`` -> ``Button``."""
    return _EXTENSION_RE.sub("", name)


def base_name(path: str) -> str:
    """File name of *path* without directory and extension."""
    return strip_extension(basename(path))


def tokenize_filename(path: str) -> List[str]:
    return tokenize(base_name(path))


def dice_coefficient(first: Iterable[str], second: Iterable[str]) -> float:
    """Dice coefficient over token sets: 2·|A∩B| / (|A| + |B|)."""
    a, b = set(first), set(second)
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    return 2 * len(a & b) / (len(a) + len(b))


def unique(items: Iterable[str]) -> List[str]:
    """De-duplicate *items*, keeping first-seen order."""
    return list(dict.fromkeys(items))


def normalize_tag(tag: str) -> str:
    """Lowercase and keep only ``[a-z0-9_-]``."""
    return _TAG_CLEAN_RE.sub("", tag.strip().lower())
