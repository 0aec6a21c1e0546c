"""cy-select CLI — Typer application with diff and init commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

import typer
from rich.console import Console

from cyselect import __version__

if TYPE_CHECKING:
    from cyselect.config.schema import CySelectConfig
    from cyselect.discovery.models import TestCandidate
    from cyselect.mapper.models import MappingResult
    from cyselect.output.logger import Logger

app = typer.Typer(
    name="cy-select",
    help="Run only the Cypress specs your change can affect.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from cyselect.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _project_dir(require_git: bool) -> Path:
    """Repo root, or the working directory when git is optional and absent."""
    from cyselect.git.adapter import is_git_repository

    if require_git or is_git_repository():
        return _resolve_repo_root()
    return Path.cwd()


def _read_diff_file(diff_file: str) -> str:
    if diff_file == "-":
        return sys.stdin.read()
    try:
        return Path(diff_file).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read diff file {diff_file}: {exc}")
        raise typer.Exit(code=2) from exc


def _load_candidates(cfg: "CySelectConfig", logger: "Logger") -> List["TestCandidate"]:
    from cyselect.discovery import DiscoveryError, discover_tests, load_manifest

    try:
        if cfg.discovery.manifest:
            logger.verbose(f"Loading test manifest {cfg.discovery.manifest}...")
            return load_manifest(cfg.discovery.manifest)
        logger.verbose("Discovering test files...")
        return discover_tests(
            cfg.discovery.project_root,
            test_patterns=cfg.discovery.test_patterns or None,
            exclude=cfg.discovery.exclude or None,
        )
    except DiscoveryError as exc:
        console.print(f"[bold red]Discovery error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _empty_result(cfg: "CySelectConfig") -> "MappingResult":
    from cyselect.mapper.models import MappingResult
    from cyselect.mapper.safety import get_threshold

    level = cfg.selection.safety_level
    return MappingResult(safety_level=level, threshold=get_threshold(level, cfg.selection.threshold))


def _emit(
    result: "MappingResult",
    cfg: "CySelectConfig",
    candidates: List["TestCandidate"],
    output: Optional[str],
    logger: "Logger",
) -> None:
    from cyselect.output import json_report, terminal

    report_text: Optional[str] = None
    if cfg.output.format == "json":
        report_text = json_report.render(result)
        print(report_text)
    else:
        terminal.render(result, verbose=cfg.output.verbose, candidates=candidates)

    # --- Write to file (always JSON) ---
    if output:
        if report_text is None:
            report_text = json_report.render(result)
        Path(output).write_text(report_text, encoding="utf-8")
        logger.verbose(f"Report written to {output}")


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    base: Optional[str] = typer.Option(None, "--base", "-b", help="Base ref to diff against (default: auto-detect)"),
    diff_file: Optional[str] = typer.Option(None, "--diff-file", help="Read diff text from a file ('-' for stdin) instead of git"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Emit JSON on stdout"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show the scoring breakdown per test"),
    pattern: Optional[List[str]] = typer.Option(None, "--pattern", "-p", help="Test file glob (repeatable)"),
    safety: Optional[str] = typer.Option(None, "--safety", "-s", help="Safety level: high | moderate | medium | low"),
    threshold: Optional[float] = typer.Option(None, "--threshold", "-t", help="Explicit score cut-off, overrides --safety"),
    manifest: Optional[str] = typer.Option(None, "--manifest", help="YAML list of test candidates (skips discovery)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .cyselect.toml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write JSON report to file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="silent | normal | verbose | debug"),
    dry_run: bool = typer.Option(False, "--dry-run", help="List changed files and candidates without scoring"),
    workers: int = typer.Option(1, "--workers", min=1, help="Score candidates in N threads"),
) -> None:
    """Select the Cypress tests affected by the current diff."""
    from cyselect.config.loader import ConfigError, load_config
    from cyselect.git.adapter import GitError, detect_base_branch, get_changed_files_diff
    from cyselect.git.diff_parser import parse_diff
    from cyselect.mapper.engine import map_diff_to_tests
    from cyselect.output import json_report
    from cyselect.output.logger import LOG_LEVELS, Logger

    if log_level is not None and log_level not in LOG_LEVELS:
        console.print(f"[bold red]Invalid log level:[/bold red] {log_level}")
        raise typer.Exit(code=2)
    logger = Logger(log_level or ("verbose" if verbose else "normal"), console=console)  # type: ignore[arg-type]

    project_dir = _project_dir(require_git=diff_file is None)

    # --- Load config ---
    try:
        cfg = load_config(
            project_dir,
            config,
            cli_overrides={
                "selection": {"safety_level": safety, "threshold": threshold},
                "discovery": {"test_patterns": list(pattern) if pattern else None, "manifest": manifest},
                "git": {"default_base": base},
                "output": {"format": "json" if json_output else None, "verbose": True if verbose else None},
            },
        )
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    logger.debug(f"Project root: {cfg.discovery.project_root}")
    logger.debug(f"Safety level: {cfg.selection.safety_level}")

    # --- Get diff ---
    if diff_file is not None:
        diff_text = _read_diff_file(diff_file)
    else:
        try:
            base_ref = cfg.git.default_base or detect_base_branch(project_dir)
            logger.verbose(f"Fetching git diff against {base_ref}...")
            diff_text = get_changed_files_diff(project_dir, base_ref)
        except GitError as exc:
            console.print(f"[bold red]Git error:[/bold red] {exc}")
            raise typer.Exit(code=2) from exc

    if not diff_text or not diff_text.strip():
        logger.info("No changes detected. No tests to run.")
        if cfg.output.format == "json":
            print(json_report.render(_empty_result(cfg)))
        raise typer.Exit(code=0)

    # --- Parse diff ---
    logger.verbose("Parsing git diff...")
    parsed = parse_diff(diff_text)
    for warning in parsed.warnings:
        logger.warn(warning)

    if not parsed.files:
        logger.info("No changed files detected.")
        if cfg.output.format == "json":
            print(json_report.render(_empty_result(cfg)))
        raise typer.Exit(code=0)

    logger.debug(f"Found {len(parsed.files)} changed file(s)")
    if logger.is_debug:
        for changed in parsed.files:
            logger.debug(f"  - {changed.new_path} ({changed.status.value})")

    # --- Collect candidates ---
    candidates = _load_candidates(cfg, logger)
    if not candidates:
        logger.warn("No test files found in project.")
        raise typer.Exit(code=0)
    logger.debug(f"Found {len(candidates)} test file(s)")

    if dry_run:
        console.print(f"[bold]Dry run — {len(parsed.files)} changed file(s), {len(candidates)} candidate test(s):[/bold]")
        for changed in parsed.files:
            console.print(f"  [magenta]{changed.status.value}[/magenta] {changed.new_path}", highlight=False)
        raise typer.Exit(code=0)

    # --- Map ---
    logger.verbose("Mapping changed files to tests...")
    result = map_diff_to_tests(parsed.files, candidates, cfg.mapping_options(max_workers=workers))
    logger.debug(f"Mapped to {len(result.selected)} test(s) out of {result.total_mappings} evaluated")

    # --- Output ---
    _emit(result, cfg, candidates, output, logger)

    # --- Exit code ---
    if not result.selected:
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing .cyselect.toml"),
) -> None:
    """Generate a starter .cyselect.toml in the repo root."""
    from cyselect.config.defaults import DEFAULT_TOML
    from cyselect.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists() and not force:
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"cy-select {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """cy-select — run only the Cypress specs your change can affect."""
