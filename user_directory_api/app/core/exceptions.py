"""
Domain exceptions raised by the service and repository layers.

The HTTP layer translates them into status codes (see
``app.main.create_app``): ``ResourceNotFoundError`` becomes 404 and
``DuplicateResourceError`` becomes 409.
"""


class UserDirectoryError(Exception):
    """Base class for errors signalled by the user directory core."""


class ResourceNotFoundError(UserDirectoryError):
    """A referenced record does not exist."""


class DuplicateResourceError(UserDirectoryError):
    """A unique field (username or email) is already taken."""
