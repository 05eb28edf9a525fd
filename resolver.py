#!/usr/bin/env python3
"""Map extract filenames back to the (provider, place id) that produced them.

Extracts are saved as ``<provider>_<place><suffix>.osm.pbf``, for example
``geofabrik_italy-latest.osm.pbf``. The provider is the literal prefix of the
filename and the place id is the run of letters right after it, so the file
above resolves to ``("geofabrik", "italy")``.
"""

import re
from collections import namedtuple

from errors import EmptyDirectory

PBF_SUFFIX = ".osm.pbf"

ResolvedExtract = namedtuple("ResolvedExtract", ["provider", "place_id", "filename"])

_PLACE_RE = re.compile(r"[A-Za-z]+")


def build_extract_pattern(known_providers):
    """Compile the pattern selecting extract files for the given providers.

    Provider names are escaped, so they only ever match as literal text.
    Longer names come first: with both ``openstreetmap`` and
    ``openstreetmap_fr`` known, ``openstreetmap_fr_italy.osm.pbf`` belongs to
    the second one.
    """
    names = sorted(set(known_providers), key=lambda p: (-len(p), p))
    if not names:
        # Nothing can match an empty alternation
        return re.compile(r"(?!)")
    alternation = "|".join(re.escape(name) for name in names)
    return re.compile(r"^(?P<provider>" + alternation + r")_(?P<rest>.+)" + re.escape(PBF_SUFFIX) + r"$")


def resolve_filename(filename, pattern):
    """Return a ResolvedExtract for one filename, or None if it is not an extract."""
    m = pattern.match(filename)
    if m is None:
        return None
    place = _PLACE_RE.match(m.group("rest"))
    if place is None:
        return None
    return ResolvedExtract(m.group("provider"), place.group(0), filename)


def resolve(filenames, known_providers, directory=None, allow_empty=False):
    """Resolve every extract file in a directory listing.

    Args:
        filenames: Directory listing (bare file names, not paths)
        known_providers: Iterable of provider names
        directory: Directory the listing came from, used in the error message
        allow_empty: Return [] for an empty listing instead of raising

    Returns:
        List of ResolvedExtract, in listing order. Files that are not
        extracts of a known provider are left out.

    Raises:
        EmptyDirectory: The listing is empty and allow_empty is False
    """
    filenames = list(filenames)
    if not filenames:
        if allow_empty:
            return []
        raise EmptyDirectory(directory)

    pattern = build_extract_pattern(known_providers)
    resolved = []
    for filename in filenames:
        extract = resolve_filename(filename, pattern)
        if extract is not None:
            resolved.append(extract)
    return resolved
