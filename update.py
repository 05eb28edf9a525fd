#!/usr/bin/env python3
"""Re-download every .osm.pbf extract saved in a directory.

Only files named ``<provider>_<place>...osm.pbf`` are refreshed; the
provider and place id are read back from the filename (see resolver.py)
and the extract is downloaded again over the existing file. Converted
``.gpkg`` files are deleted first by default so that nothing reads a
conversion of the old data.
"""

import os
from collections import namedtuple
from datetime import datetime

from download import get_extract
from errors import EmptyDirectory, FileDeletionFailure
from providers import update_providers
from resolver import resolve

GPKG_MARKER = ".gpkg"

FileInfo = namedtuple("FileInfo", ["name", "size", "mtime", "ctime"])


def list_directory(directory):
    """Return the entries of `directory`, sorted by name."""
    return sorted(os.listdir(directory))


def file_info(directory, filenames):
    """Return size, modification and status-change time for each file.

    Files that no longer exist are reported with None fields.
    """
    infos = []
    for name in filenames:
        try:
            st = os.stat(os.path.join(directory, name))
        except FileNotFoundError:
            infos.append(FileInfo(name, None, None, None))
            continue
        infos.append(FileInfo(
            name,
            st.st_size,
            datetime.fromtimestamp(st.st_mtime),
            datetime.fromtimestamp(st.st_ctime),
        ))
    return infos


def _fmt_time(ts):
    return ts.strftime("%Y-%m-%d %H:%M:%S") if ts else "N/A"


def print_file_info(infos, title):
    print(title)
    print(f"  {'File':<50} {'Size(B)':>12}  {'Modified':<19}  {'Changed':<19}")
    print("  " + "-" * 106)
    for info in infos:
        size = str(info.size) if info.size is not None else "N/A"
        print(f"  {info.name:<50} {size:>12}  {_fmt_time(info.mtime):<19}  {_fmt_time(info.ctime):<19}")


def delete_converted(directory, filenames, quiet=False):
    """Delete every file whose name contains ".gpkg".

    Returns:
        List of deleted filenames

    Raises:
        FileDeletionFailure: on the first file that cannot be removed
    """
    deleted = []
    for name in filenames:
        if GPKG_MARKER not in name:
            continue
        path = os.path.join(directory, name)
        try:
            os.remove(path)
        except OSError as exc:
            raise FileDeletionFailure(path) from exc
        deleted.append(name)
        if not quiet:
            print(f"  Removed {name}")
    return deleted


def update_extracts(download_directory, quiet=False, delete_gpkg=True,
                    fetch=get_extract, providers=None, **fetch_options):
    """Re-download all extracts stored in `download_directory`.

    Args:
        download_directory: Directory holding the .osm.pbf files
        quiet: Suppress informational output
        delete_gpkg: Delete converted .gpkg files before downloading
        fetch: Download function, called once per extract with keyword
            arguments (see download.get_extract)
        providers: Provider names to recognize; defaults to every catalog
            provider except the test one
        **fetch_options: Passed through to `fetch`

    With the default `fetch`, a file is only overwritten when its name is
    the one download.get_extract saves under (``<provider>_<url basename>``);
    a renamed file such as ``geofabrik_italy-latest-update.osm.pbf`` is
    downloaded again next to it and keeps its old content.

    Returns:
        Filenames of the extracts that were downloaded again, in directory order

    Raises:
        EmptyDirectory: `download_directory` has no entries
        FileDeletionFailure, FetchFailure: propagated as soon as they occur
    """
    all_files = list_directory(download_directory)
    if not all_files:
        raise EmptyDirectory(download_directory)

    if providers is None:
        providers = update_providers()

    if not quiet:
        print_file_info(
            file_info(download_directory, all_files),
            f"Files stored in {download_directory}:",
        )
        print("\nThe .osm.pbf files are going to be updated.")

    if delete_gpkg:
        deleted = delete_converted(download_directory, all_files, quiet=quiet)
        if not quiet:
            print(f"Removed {len(deleted)} .gpkg file(s) from {download_directory}.")
        deleted = set(deleted)
        remaining = [name for name in all_files if name not in deleted]
    else:
        remaining = all_files

    extracts = resolve(remaining, providers, directory=download_directory, allow_empty=True)

    for extract in extracts:
        fetch(
            place=extract.place_id,
            provider=extract.provider,
            match_by="id",
            force_download=True,
            download_only=True,
            skip_vectortranslate=True,
            download_directory=download_directory,
            quiet=quiet,
            **fetch_options,
        )

    updated = [extract.filename for extract in extracts]

    if not quiet:
        print_file_info(
            file_info(download_directory, updated),
            f"\nUpdated files in {download_directory}:",
        )

    return updated
