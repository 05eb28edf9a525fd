#!/usr/bin/env python3
"""CLI entry point for refreshing downloaded OSM extracts."""

import os
import sys

import click

from download import get_extract
from errors import OeUpdateError
from providers import MATCH_FIELDS, available_providers, update_providers
from resolver import resolve
from update import list_directory, update_extracts

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

directory_option = click.option(
    "--directory", "-d",
    type=click.Path(file_okay=False),
    default=DATA_DIR,
    show_default=True,
    envvar="OE_DOWNLOAD_DIRECTORY",
    help="Directory holding the .osm.pbf files (env: OE_DOWNLOAD_DIRECTORY)",
)


def _fail(exc):
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


@click.group()
def cli():
    """Keep downloaded OpenStreetMap extracts up to date."""
    pass


@cli.command()
@directory_option
@click.option("--quiet", "-q", is_flag=True, default=False, help="Do not print file summaries")
@click.option("--delete-gpkg/--keep-gpkg", default=True,
              help="Delete converted .gpkg files before updating")
def update(directory, quiet, delete_gpkg):
    """Re-download every provider_place.osm.pbf file in DIRECTORY."""
    if not os.path.isdir(directory):
        _fail(f"{directory} is not a directory")
    try:
        updated = update_extracts(directory, quiet=quiet, delete_gpkg=delete_gpkg)
    except OeUpdateError as exc:
        _fail(exc)

    if not quiet:
        click.echo(f"\nUpdated {len(updated)} extract(s).")


@cli.command("list")
@directory_option
def list_(directory):
    """Show which files an update would download again."""
    if not os.path.isdir(directory):
        _fail(f"{directory} is not a directory")
    try:
        extracts = resolve(list_directory(directory), update_providers(), directory=directory)
    except OeUpdateError as exc:
        _fail(exc)

    if not extracts:
        click.echo("No .osm.pbf extracts found.")
        return

    click.echo(f"{'Provider':<12} {'Place':<20} {'File'}")
    click.echo("-" * 70)
    for extract in extracts:
        click.echo(f"{extract.provider:<12} {extract.place_id:<20} {extract.filename}")


@cli.command()
@click.argument("place")
@click.option("--provider", "-p", default="geofabrik", show_default=True,
              type=click.Choice(available_providers()), help="Extract provider")
@click.option("--match-by", default="name", show_default=True,
              type=click.Choice(MATCH_FIELDS), help="Zone field compared with PLACE")
@click.option("--force/--no-force", default=False, help="Download even if the file exists")
@directory_option
def get(place, provider, match_by, force, directory):
    """Download the extract of PLACE."""
    try:
        path = get_extract(place, provider=provider, match_by=match_by,
                           download_directory=directory, force_download=force)
    except OeUpdateError as exc:
        _fail(exc)
    click.echo(path)


@cli.command()
def providers():
    """List the available extract providers."""
    for name in available_providers():
        click.echo(name)


if __name__ == "__main__":
    cli()
