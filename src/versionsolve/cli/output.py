"""Rich output formatting helpers for the versionsolve CLI.

Found names are rendered green, unsatisfied names red with every unmet
constraint listed.
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from versionsolve.core.dependency import Found, Graph, Result

console = Console()


def plain_result(result: Result) -> dict[str, Any]:
    """Flatten a Result into ``{name: "1.0.0"}`` / ``{name: ["= 2.0.0", ...]}``."""
    flat: dict[str, Any] = {}
    for name, outcome in result.items():
        if isinstance(outcome, Found):
            flat[name] = str(outcome.version)
        else:
            flat[name] = list(outcome.constraints)
    return flat


def print_result(result: Result) -> None:
    """Print a resolution Result as a panel plus one table row per name."""
    if result.all_found:
        console.print(
            Panel("[bold green]All demands resolved[/bold green]",
                  title="Resolution")
        )
    else:
        console.print(
            Panel(
                f"[bold red]{len(result.unsatisfied)} artifact(s) unsatisfied[/bold red]",
                title="Resolution",
            )
        )

    if not result:
        console.print("[dim]Nothing to resolve.[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("Artifact", style="bold")
    table.add_column("Status")
    table.add_column("Version / Unmet constraints")
    for name, outcome in result.items():
        if isinstance(outcome, Found):
            table.add_row(name, "[green]found[/green]", str(outcome.version))
        else:
            table.add_row(
                name, "[red]unsatisfied[/red]", ", ".join(outcome.constraints)
            )
    console.print(table)
    console.print(
        f"[dim]{result.stats.passes} pass(es), "
        f"{result.stats.backtracks} backtrack(s)[/dim]"
    )


def print_graph(graph: Graph, cycles: list[list[str]]) -> None:
    """Print every artifact name with its versions, then name-level cycles."""
    table = Table(title="Artifacts", show_header=True, header_style="bold")
    table.add_column("Name", style="bold")
    table.add_column("Versions (newest first)")
    for name in sorted(graph.names):
        table.add_row(name, ", ".join(str(v) for v in graph.versions_of(name)))
    console.print(table)

    if cycles:
        console.print(f"[yellow]{len(cycles)} dependency cycle(s):[/yellow]")
        for cycle in cycles:
            console.print(f"  [yellow]- {' -> '.join(cycle)}[/yellow]")
    else:
        console.print("[dim]No dependency cycles.[/dim]")


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    console.print_json(json.dumps(data, default=str))
