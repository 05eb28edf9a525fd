import pytest

from errors import EmptyDirectory
from resolver import ResolvedExtract, build_extract_pattern, resolve

PROVIDERS = {"geofabrik", "bbbike"}


def test_resolves_provider_and_place():
    out = resolve(["geofabrik_italy-latest-update.osm.pbf"], PROVIDERS)
    assert out == [ResolvedExtract("geofabrik", "italy", "geofabrik_italy-latest-update.osm.pbf")]


def test_ignores_non_extract_files():
    listing = ["region.gpkg", "geofabrik_italy.gpkg", "random.txt", "bbbike_Leeds.osm.pbf"]
    out = resolve(listing, PROVIDERS)
    assert [e.filename for e in out] == ["bbbike_Leeds.osm.pbf"]


def test_only_random_file_gives_empty_result():
    assert resolve(["random.txt"], PROVIDERS) == []


def test_keeps_listing_order():
    listing = [
        "geofabrik_spain-latest.osm.pbf",
        "bbbike_Amsterdam.osm.pbf",
        "geofabrik_andorra-latest.osm.pbf",
    ]
    out = resolve(listing, PROVIDERS)
    assert [(e.provider, e.place_id) for e in out] == [
        ("geofabrik", "spain"),
        ("bbbike", "Amsterdam"),
        ("geofabrik", "andorra"),
    ]


def test_place_id_stops_at_first_non_letter():
    out = resolve(["bbbike_Leeds2024.osm.pbf", "geofabrik_north-america-latest.osm.pbf"], PROVIDERS)
    assert [e.place_id for e in out] == ["Leeds", "north"]


def test_file_without_leading_letters_is_skipped():
    assert resolve(["geofabrik_123.osm.pbf", "geofabrik_-italy.osm.pbf"], PROVIDERS) == []


def test_provider_must_be_at_start_of_filename():
    assert resolve(["old_geofabrik_italy.osm.pbf", "my-bbbike_Leeds.osm.pbf"], PROVIDERS) == []


def test_matching_is_case_sensitive():
    assert resolve(["Geofabrik_italy.osm.pbf"], PROVIDERS) == []


def test_extension_must_end_the_name():
    listing = [
        "geofabrik_italy-latest.osm.pbf.downloading",
        "geofabrik_italy-latest.osm.pbfx",
        "geofabrik_italy-latest.osmxpbf",
    ]
    assert resolve(listing, PROVIDERS) == []


def test_provider_without_underscore_is_not_matched():
    assert resolve(["geofabrikitaly.osm.pbf"], PROVIDERS) == []


def test_provider_names_are_literal():
    providers = {"geo.fabrik"}
    assert resolve(["geoXfabrik_italy.osm.pbf"], providers) == []
    out = resolve(["geo.fabrik_italy.osm.pbf"], providers)
    assert out[0].provider == "geo.fabrik"


def test_regex_metacharacters_in_provider_do_not_widen_match():
    providers = {"geofabrik|.*"}
    assert resolve(["anything_italy.osm.pbf", "geofabrik_italy.osm.pbf"], providers) == []


def test_longest_provider_prefix_wins():
    providers = {"openstreetmap", "openstreetmap_fr"}
    out = resolve(["openstreetmap_fr_italy.osm.pbf", "openstreetmap_france.osm.pbf"], providers)
    assert [(e.provider, e.place_id) for e in out] == [
        ("openstreetmap_fr", "italy"),
        ("openstreetmap", "france"),
    ]


def test_provider_choice_independent_of_input_order():
    filename = "openstreetmap_fr_italy.osm.pbf"
    a = resolve([filename], ["openstreetmap", "openstreetmap_fr"])
    b = resolve([filename], ["openstreetmap_fr", "openstreetmap"])
    assert a == b


def test_place_token_containing_another_provider():
    out = resolve(["geofabrik_bbbike-land.osm.pbf"], PROVIDERS)
    assert out == [ResolvedExtract("geofabrik", "bbbike", "geofabrik_bbbike-land.osm.pbf")]


def test_empty_listing_raises():
    with pytest.raises(EmptyDirectory) as excinfo:
        resolve([], PROVIDERS, directory="/data/osm")
    assert excinfo.value.directory == "/data/osm"
    assert "/data/osm" in str(excinfo.value)


def test_empty_listing_allowed():
    assert resolve([], PROVIDERS, allow_empty=True) == []


def test_no_known_providers_matches_nothing():
    assert resolve(["geofabrik_italy.osm.pbf"], set()) == []
    assert build_extract_pattern([]).match("geofabrik_italy.osm.pbf") is None


def test_accepts_generators():
    out = resolve((name for name in ["geofabrik_italy.osm.pbf"]), iter(["geofabrik"]))
    assert out[0].place_id == "italy"
