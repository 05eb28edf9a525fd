#!/usr/bin/env python3
"""Catalog of the extract providers that files can be downloaded from.

Each provider knows its zones: the places it publishes an ``.osm.pbf``
extract for. Zones are looked up by ``id`` (the key used in saved filenames)
or by human readable ``name``.
"""

import re
from collections import namedtuple

import requests

from errors import FetchFailure, PlaceNotFound, UnknownProvider

# Reserved provider used only in tests; never part of an update
TEST_PROVIDER = "test"

INDEX_TIMEOUT = 60  # seconds

Zone = namedtuple("Zone", ["id", "name", "pbf_url"])

MATCH_FIELDS = ("id", "name")


class Provider:
    """A source of extracts. Subclasses implement _load_zones()."""

    name = None

    def __init__(self):
        self._zones = None

    def zones(self):
        """Return the provider's zones, loading them on first use."""
        if self._zones is None:
            self._zones = self._load_zones()
        return self._zones

    def find_zone(self, place, match_by="name"):
        """Return the zone whose `match_by` field equals `place` (case-insensitive)."""
        if match_by not in MATCH_FIELDS:
            raise ValueError(f"match_by must be one of {MATCH_FIELDS}, got {match_by!r}")
        wanted = place.lower()
        for zone in self.zones():
            if getattr(zone, match_by).lower() == wanted:
                return zone
        raise PlaceNotFound(self.name, place, match_by)

    def _load_zones(self):
        raise NotImplementedError


class GeofabrikProvider(Provider):
    name = "geofabrik"
    index_url = "https://download.geofabrik.de/index-v1-nogeom.json"

    def _load_zones(self):
        response = requests.get(self.index_url, timeout=INDEX_TIMEOUT)
        response.raise_for_status()
        zones = []
        try:
            for feature in response.json()["features"]:
                props = feature["properties"]
                pbf_url = props.get("urls", {}).get("pbf")
                if pbf_url:
                    zones.append(Zone(props["id"], props["name"], pbf_url))
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise FetchFailure(self.name, None, f"malformed index at {self.index_url}") from exc
        return zones


class BBBikeProvider(Provider):
    name = "bbbike"
    base_url = "https://download.bbbike.org/osm/bbbike/"

    # City directories in the listing, e.g. <a href="Leeds/">
    _CITY_RE = re.compile(r'href="([A-Z][A-Za-z]+)/"')

    def _load_zones(self):
        response = requests.get(self.base_url, timeout=INDEX_TIMEOUT)
        response.raise_for_status()
        cities = sorted(set(self._CITY_RE.findall(response.text)))
        return [
            Zone(city.lower(), city, f"{self.base_url}{city}/{city}.osm.pbf")
            for city in cities
        ]


class TestProvider(Provider):
    """A single tiny extract, small enough to download in tests."""

    name = TEST_PROVIDER
    __test__ = False

    ZONES = [
        Zone("its-leeds", "ITS Leeds",
             "https://github.com/ropensci/osmextract/raw/master/inst/its-example.osm.pbf"),
    ]

    def _load_zones(self):
        return list(self.ZONES)


_PROVIDER_CLASSES = {
    cls.name: cls for cls in (GeofabrikProvider, BBBikeProvider, TestProvider)
}

_instances = {}


def available_providers():
    """Return the names of every provider, including the test provider."""
    return sorted(_PROVIDER_CLASSES)


def update_providers():
    """Return the provider names whose extracts are refreshed by an update."""
    return set(available_providers()) - {TEST_PROVIDER}


def get_provider(name):
    """Return the (shared) Provider instance for `name`."""
    if name not in _PROVIDER_CLASSES:
        raise UnknownProvider(name)
    if name not in _instances:
        _instances[name] = _PROVIDER_CLASSES[name]()
    return _instances[name]
