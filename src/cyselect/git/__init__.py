"""Git interface layer — adapter, diff parsing, models."""

from cyselect.git.adapter import (
    GitError,
    detect_base_branch,
    get_changed_files_diff,
    get_repo_root,
    is_git_repository,
)
from cyselect.git.diff_parser import (
    DiffFormat,
    UnifiedDiffAccumulator,
    detect_format,
    parse_diff,
    parse_raw_diff,
)
from cyselect.git.models import ChangedFile, FileStatus, ParseResult, RawDiffEntry
from cyselect.git.normalize import normalize_diff

__all__ = [
    "ChangedFile",
    "DiffFormat",
    "FileStatus",
    "GitError",
    "ParseResult",
    "RawDiffEntry",
    "UnifiedDiffAccumulator",
    "detect_base_branch",
    "detect_format",
    "get_changed_files_diff",
    "get_repo_root",
    "is_git_repository",
    "normalize_diff",
    "parse_diff",
    "parse_raw_diff",
]
