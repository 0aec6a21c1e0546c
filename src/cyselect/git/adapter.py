"""Git subprocess wrapper — repo root, base detection, changed-file diff."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

_BASE_CANDIDATES = ("origin/main", "origin/master", "main", "master")
_FALLBACK_BASE = "HEAD~1"


class GitError(Exception):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        raise GitError(f"git error: {stderr or 'exit code ' + str(result.returncode)}")
    return result.stdout


def get_repo_root(cwd: Optional[Path] = None) -> Path:
    """Return the root of the current git repository."""
    cwd = cwd or Path.cwd()
    out = _run_git(["rev-parse", "--show-toplevel"], cwd=cwd)
    return Path(out.strip())


def is_git_repository(cwd: Optional[Path] = None) -> bool:
    try:
        _run_git(["rev-parse", "--git-dir"], cwd=cwd or Path.cwd())
    except GitError:
        return False
    return True


def detect_base_branch(repo_root: Path) -> str:
    """Pick the first existing ref of origin/main, origin/master, main, master."""
    for candidate in _BASE_CANDIDATES:
        try:
            _run_git(["rev-parse", "--verify", "--quiet", candidate], cwd=repo_root)
        except GitError:
            continue
        return candidate
    return _FALLBACK_BASE


def get_changed_files_diff(repo_root: Path, base: Optional[str] = None) -> str:
    """Return ``--name-status`` output for *base*...HEAD plus uncommitted work.

    Either half may be empty (for example on a fresh repository where the
    base does not resolve); duplicates are removed later by normalisation.
    """
    base_ref = base or detect_base_branch(repo_root)

    try:
        committed = _run_git(
            ["diff", "--name-status", "--no-color", f"{base_ref}...HEAD"],
            cwd=repo_root,
        )
    except GitError:
        committed = ""

    try:
        uncommitted = _run_git(
            ["diff", "--name-status", "--no-color", "HEAD"],
            cwd=repo_root,
        )
    except GitError:
        uncommitted = ""

    if committed and not committed.endswith("\n"):
        committed += "\n"
    return committed + uncommitted
