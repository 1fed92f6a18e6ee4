"""Errors raised by the tagging services.

Storage errors are not wrapped: they propagate as
:class:`sqlalchemy.exc.DBAPIError` (aliased here as :data:`StorageFailure`),
and callers may retry.
"""
from sqlalchemy.exc import DBAPIError

__all__ = [
    "TagError",
    "TagDefinitionError",
    "InvalidName",
    "AlreadyExists",
    "NotFound",
    "Reserved",
    "InUse",
    "TagApiError",
    "DefinitionMissing",
    "AlreadyTagged",
    "StorageFailure",
]

StorageFailure = DBAPIError


class TagError(Exception):
    """Base class for tagging errors."""


class TagDefinitionError(TagError):
    pass


class InvalidName(TagDefinitionError, ValueError):
    """Empty definition name, or a name reserved by a control tag."""


class AlreadyExists(TagDefinitionError):
    pass


class NotFound(TagDefinitionError, LookupError):
    pass


class Reserved(TagDefinitionError):
    """Control tag definitions cannot be deleted."""


class InUse(TagDefinitionError):
    """The definition is still referenced by live tags."""


class TagApiError(TagError):
    pass


class DefinitionMissing(TagApiError, LookupError):
    """A tag references an unregistered definition."""


class AlreadyTagged(TagApiError):
    """The object already carries a tag with this definition."""
