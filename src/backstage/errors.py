"""Exceptions raised by the Backstage engine."""


class BackstageError(Exception):
    """Base class for Backstage errors."""


class InvalidArgument(BackstageError, ValueError):
    """A caller passed a value outside the accepted domain (e.g. an unknown feed tab)."""


class NotFound(BackstageError, LookupError):
    """A project or user id does not exist in the current snapshot."""


class SnapshotError(BackstageError):
    """The seed dataset could not be loaded or references unknown entities."""
