"""``versionsolve resolve <manifest>`` -- Resolve a manifest's demands.

Loads the artifact graph from a YAML/JSON manifest, resolves the manifest's
demands (or the ``--demand`` options, which replace them) and prints one
outcome per artifact name.

Exit Codes:
    0 -- Every artifact name was resolved to a version.
    1 -- At least one artifact name is unsatisfied.
    2 -- The manifest or a demand is malformed.
    3 -- The search exceeded --max-backtracks or --timeout.
"""

from __future__ import annotations

import sys

import click

from versionsolve.cli.output import plain_result, print_json, print_result
from versionsolve.core.dependency import (
    DEFAULT_MAX_BACKTRACKS,
    Demand,
    Resolver,
    ResolverLimits,
)
from versionsolve.exceptions import ResourceExhausted, SolveError
from versionsolve.manifest import load_manifest


@click.command("resolve")
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--demand", "-d", "demands",
    multiple=True,
    help='Demand such as "nginx >= 1.0" (repeatable; replaces manifest demands).',
)
@click.option(
    "--json", "as_json",
    is_flag=True,
    default=False,
    help="Print the tagged result as JSON.",
)
@click.option(
    "--plain",
    is_flag=True,
    default=False,
    help="With --json, print versions and constraint lists without status tags.",
)
@click.option(
    "--max-backtracks",
    type=click.IntRange(min=0),
    default=DEFAULT_MAX_BACKTRACKS,
    show_default=True,
    help="Give up after this many backtracks.",
)
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Give up after this many seconds.",
)
def resolve_command(
    manifest: str,
    demands: tuple[str, ...],
    as_json: bool,
    plain: bool,
    max_backtracks: int,
    timeout: float | None,
) -> None:
    """Resolve the demands of MANIFEST to one version per artifact.

    Exit code 0 when everything resolves, 1 when some artifact is
    unsatisfied, 2 on malformed input, 3 when the search budget runs out.
    """
    try:
        loaded = load_manifest(manifest)
        requested = [Demand.parse(text) for text in demands] or loaded.demands
    except SolveError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    resolver = Resolver(
        loaded.graph,
        ResolverLimits(max_backtracks=max_backtracks, timeout=timeout),
    )
    try:
        result = resolver.resolve(requested)
    except ResourceExhausted as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(3)

    if as_json:
        print_json(plain_result(result) if plain else result.to_dict())
    else:
        print_result(result)
    sys.exit(0 if result.all_found else 1)
