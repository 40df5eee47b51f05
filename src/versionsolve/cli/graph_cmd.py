"""``versionsolve graph <manifest>`` -- Summarize a manifest's artifact graph.

Lists every artifact name with its versions (newest first) and reports
name-level dependency cycles. Cycles are legal input for the resolver; they
are shown because they often explain long searches.

Exit Codes:
    0 -- The manifest was loaded.
    2 -- The manifest is malformed.
"""

from __future__ import annotations

import sys

import click

from versionsolve.cli.output import print_graph, print_json
from versionsolve.exceptions import SolveError
from versionsolve.manifest import load_manifest


@click.command("graph")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--json", "as_json",
    is_flag=True,
    default=False,
    help="Print versions and cycles as JSON.",
)
def graph_command(manifest: str, as_json: bool) -> None:
    """Show the artifacts, versions and dependency cycles of MANIFEST."""
    try:
        loaded = load_manifest(manifest)
    except SolveError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    graph = loaded.graph
    cycles = graph.detect_cycles()
    if as_json:
        print_json({
            "artifacts": {
                name: [str(v) for v in graph.versions_of(name)]
                for name in sorted(graph.names)
            },
            "cycles": cycles,
        })
    else:
        print_graph(graph, cycles)
