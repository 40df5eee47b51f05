"""versionsolve CLI -- Resolve versioned artifact graphs from manifests.

Entry point for the ``versionsolve`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    resolve -- Resolve a manifest's demands to one version per artifact.
    graph   -- List artifacts, versions and dependency cycles.

Usage::

    versionsolve resolve deps.yaml
    versionsolve resolve deps.yaml -d "nginx >= 1.0" -d mysql --json
    versionsolve --verbose resolve deps.yaml --max-backtracks 5000
    versionsolve graph deps.yaml
"""

from __future__ import annotations

import logging

import click

from versionsolve import __version__
from versionsolve.cli.graph_cmd import graph_command
from versionsolve.cli.resolve_cmd import resolve_command


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    default=False,
    help="Log search progress to stderr.",
)
def cli(verbose: bool) -> None:
    """versionsolve: Backtracking version resolution for artifact graphs.

    Reads artifact releases and their version-ranged dependencies from a
    YAML/JSON manifest and picks the newest consistent version of every
    required artifact, reporting unmet constraints per artifact when no
    version fits.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


# Register all subcommands
cli.add_command(resolve_command)
cli.add_command(graph_command)
