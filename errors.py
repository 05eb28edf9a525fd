#!/usr/bin/env python3
"""Exceptions raised while updating downloaded extracts."""


class OeUpdateError(Exception):
    """Base class for every error raised by this package."""


class EmptyDirectory(OeUpdateError):
    def __init__(self, directory):
        self.directory = directory
        if directory is None:
            super().__init__("The directory listing is empty.")
        else:
            super().__init__(f"The download directory, {directory}, is empty.")


class FileDeletionFailure(OeUpdateError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Could not remove converted file {path}")


class FetchFailure(OeUpdateError):
    """The extract for (provider, place) could not be downloaded."""

    def __init__(self, provider, place, reason=None):
        self.provider = provider
        self.place = place
        if place is None:
            msg = f"Could not fetch the zone index of provider {provider!r}"
        else:
            msg = f"Could not fetch {place!r} from provider {provider!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PlaceNotFound(FetchFailure):
    def __init__(self, provider, place, match_by):
        self.match_by = match_by
        super().__init__(provider, place, f"no zone with {match_by} == {place!r}")


class UnknownProvider(OeUpdateError, KeyError):
    def __init__(self, name):
        self.name = name
        super().__init__(f"Unknown provider {name!r}")

    def __str__(self):
        return self.args[0]
