"""Test candidate model handed from discovery to the mapper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

from cyselect.tokens import to_posix, tokenize, unique


@dataclass(frozen=True)
class TestCandidate:
    """A discovered test file with the metadata scraped from its source."""

    __test__ = False  # not a pytest class

    file: str  # absolute POSIX path
    tags: Tuple[str, ...] = ()
    titles: Tuple[str, ...] = ()
    tokens: Tuple[str, ...] = ()

    @classmethod
    def from_path(cls, path: str) -> "TestCandidate":
        """A candidate with no metadata (bare path input)."""
        return cls(file=to_posix(path))

    @classmethod
    def build(
        cls,
        file: str,
        tags: Iterable[str] = (),
        titles: Iterable[str] = (),
    ) -> "TestCandidate":
        """De-duplicate metadata and derive title tokens."""
        title_list = unique(titles)
        tokens = unique(token for title in title_list for token in tokenize(title))
        return cls(
            file=to_posix(file),
            tags=tuple(unique(tags)),
            titles=tuple(title_list),
            tokens=tuple(tokens),
        )
