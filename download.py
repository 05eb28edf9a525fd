#!/usr/bin/env python3
"""Download a single OSM extract from one of the catalog providers."""

import os

import requests

from errors import FetchFailure
from providers import get_provider

CHUNK_SIZE = 8192
DOWNLOAD_TIMEOUT = 60  # seconds, per connect / read


def extract_filename(provider, pbf_url):
    """Filename an extract is saved under: ``<provider>_<url basename>``."""
    return f"{provider}_{os.path.basename(pbf_url)}"


def get_extract(place, provider="geofabrik", match_by="name", download_directory=None,
                force_download=False, download_only=True, skip_vectortranslate=True,
                quiet=False, timeout=DOWNLOAD_TIMEOUT):
    """Download the .osm.pbf extract of `place` into `download_directory`.

    Args:
        place: Zone id or name to look up in the provider's catalog
        provider: Provider name (see providers.available_providers())
        match_by: Zone field compared with `place`, "id" or "name"
        download_directory: Directory the extract is saved in
        force_download: Download again even if the file already exists
        download_only, skip_vectortranslate: Only downloading is supported;
            at least one of them must be True
        quiet: Suppress progress output
        timeout: Connect/read timeout passed to requests

    Returns:
        Path of the downloaded (or already present) .osm.pbf file
    """
    if download_directory is None:
        raise ValueError("download_directory is required")
    if not download_only and not skip_vectortranslate:
        raise ValueError("Conversion to .gpkg is not supported; pass download_only=True")

    try:
        zone = get_provider(provider).find_zone(place, match_by=match_by)
    except requests.RequestException as exc:
        raise FetchFailure(provider, place, f"zone index unavailable: {exc}") from exc

    os.makedirs(download_directory, exist_ok=True)
    dest_path = os.path.join(download_directory, extract_filename(provider, zone.pbf_url))

    if os.path.exists(dest_path) and not force_download:
        if not quiet:
            print(f"File already exists: {dest_path}")
        return dest_path

    if not quiet:
        print(f"Downloading {zone.pbf_url}...")

    temp_path = dest_path + ".downloading"
    try:
        _stream_to_file(zone.pbf_url, temp_path, timeout, quiet)
    except (requests.RequestException, OSError) as exc:
        _remove_partial(temp_path)
        raise FetchFailure(provider, place, str(exc)) from exc
    except BaseException:
        _remove_partial(temp_path)
        raise

    os.replace(temp_path, dest_path)
    if not quiet:
        print(f"\nSaved to {dest_path}")
    return dest_path


def _remove_partial(path):
    if os.path.exists(path):
        os.remove(path)


def _stream_to_file(url, path, timeout, quiet):
    with requests.get(url, stream=True, timeout=timeout) as response:
        response.raise_for_status()

        total_size = int(response.headers.get("content-length", 0))
        downloaded = 0

        with open(path, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                f.write(chunk)
                downloaded += len(chunk)
                if total_size and not quiet:
                    pct = downloaded / total_size * 100
                    print(f"\r  {downloaded / 1e6:.1f} / {total_size / 1e6:.1f} MB ({pct:.1f}%)", end="", flush=True)
