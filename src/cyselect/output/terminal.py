"""Rich terminal reporter — selected test list, or a scoring breakdown."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cyselect.discovery.models import TestCandidate
from cyselect.mapper.models import MappingResult, TestMapping
from cyselect.tokens import basename

_MAX_TITLES = 3


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def _score_style(value: float) -> str:
    if value >= 0.7:
        return "bold green"
    if value >= 0.4:
        return "yellow"
    return "dim"


def _titles_display(titles: Sequence[str]) -> str:
    if not titles:
        return "(none)"
    if len(titles) > _MAX_TITLES:
        shown = ", ".join(titles[:_MAX_TITLES])
        return f"{shown}, ... (+{len(titles) - _MAX_TITLES} more)"
    return ", ".join(titles)


def _safety_line(result: MappingResult) -> str:
    return f"[dim]Safety level:[/dim] {result.safety_level} (threshold: {result.threshold})"


def render(
    result: MappingResult,
    verbose: bool = False,
    candidates: Optional[Sequence[TestCandidate]] = None,
    console: Optional[Console] = None,
) -> None:
    """Print the selection to stdout."""
    console = console or Console()

    if not result.selected:
        console.print("No tests selected.")
        console.print()
        console.print(_safety_line(result))
        return

    count = len(result.selected)
    console.print(f"[bold]Selected {count} test{'' if count == 1 else 's'}:[/bold]")
    console.print()

    if verbose:
        by_file: Dict[str, TestCandidate] = {c.file: c for c in candidates or ()}
        selected = set(result.selected)
        for mapping in result.mappings:
            if mapping.test_path in selected:
                _print_mapping(console, mapping, by_file.get(mapping.test_path))
    else:
        for test_path in result.selected:
            console.print(f"  {escape(test_path)}", highlight=False, soft_wrap=True)

    console.print()
    console.print(_safety_line(result))
    console.print(f"[dim]Total mappings evaluated:[/dim] {result.total_mappings}")


def _print_mapping(
    console: Console,
    mapping: TestMapping,
    candidate: Optional[TestCandidate],
) -> None:
    console.print(f"  [cyan]{escape(basename(mapping.test_path))}[/cyan]")
    console.print(f"    [dim]Path:[/dim] {escape(mapping.test_path)}", highlight=False, soft_wrap=True)

    if candidate is not None:
        tags = ", ".join(candidate.tags) if candidate.tags else "(none)"
        console.print(f"    [dim]Tags:[/dim] {escape(tags)}")
        console.print(f"    [dim]Titles:[/dim] {escape(_titles_display(candidate.titles))}")

    table = Table(show_header=True, header_style="bold", border_style="dim", box=None, padding=(0, 2))
    table.add_column("Heuristic", min_width=14)
    table.add_column("Score", justify="right")

    h = mapping.heuristics
    for label, value in (
        ("Directory", h.directory),
        ("Similarity", h.similarity),
        ("Import Graph", h.import_graph),
        ("Tags", h.tags),
        ("Titles", h.titles),
    ):
        table.add_row(label, f"[{_score_style(value)}]{_pct(value)}[/]")
    table.add_row("[bold]Combined[/bold]", f"[{_score_style(mapping.score)}]{_pct(mapping.score)}[/]")

    console.print(table)
    if mapping.reason:
        console.print(f"    [dim]Reason:[/dim] {escape(mapping.reason)}")
    console.print()
