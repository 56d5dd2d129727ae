"""Command-line interface for aom-store.

Replays snapshot files through a store and prints the synchronized tree.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from . import __version__
from .errors import AomStoreError, SnapshotFormatError
from .snapshot import load_snapshot_file
from .store import Store
from .view import ViewMode, to_yaml

app = typer.Typer(
    name="aom-store",
    help="Replay accessible-tree snapshots and inspect the synchronized tree.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"aom-store version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Replay accessible-tree snapshots and inspect the synchronized tree."""
    pass


@app.command()
def replay(
    file: Annotated[Path, typer.Argument(help="Path to a YAML/JSON snapshot file")],
    verbosity: Annotated[
        str, typer.Option("--verbosity", "-V", help="minimal, standard or full")
    ] = "standard",
    each: Annotated[
        bool, typer.Option("--each", "-e", help="Print the tree after every snapshot")
    ] = False,
    include_hidden: Annotated[
        bool, typer.Option("--include-hidden", help="Show hidden nodes")
    ] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Log store events to stderr")] = False,
) -> None:
    """Synchronize a store with every snapshot of a file and print the result."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        view_mode = ViewMode(verbosity=verbosity, include_hidden=include_hidden)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    try:
        snapshots = load_snapshot_file(file)
        store = Store()
        for index, snapshot in enumerate(snapshots):
            store.sync(snapshot)
            if each:
                typer.echo(f"# snapshot {index + 1}/{len(snapshots)}")
                typer.echo(to_yaml(store, view_mode))
        if not each:
            typer.echo(to_yaml(store, view_mode))
    except SnapshotFormatError as e:
        typer.echo(f"Error: {e}", err=True)
        for problem in e.errors:
            typer.echo(f"  {problem}", err=True)
        raise typer.Exit(1)
    except (AomStoreError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def validate(
    file: Annotated[Path, typer.Argument(help="Path to a YAML/JSON snapshot file")],
) -> None:
    """Check that a snapshot file is well formed."""
    try:
        snapshots = load_snapshot_file(file)
    except SnapshotFormatError as e:
        typer.echo(f"Error: {e}", err=True)
        for problem in e.errors:
            typer.echo(f"  {problem}", err=True)
        raise typer.Exit(1)
    except OSError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"{file}: {len(snapshots)} snapshot(s) OK")
