"""Errors raised by the link access-control engine.

The HTTP layer maps each class to a status code through ``status_code``;
store failures are never wrapped in these.
"""

from fastapi import status


class LinkError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class LinkNotFound(LinkError):
    """No link matches, or the link is inactive."""

    status_code = status.HTTP_404_NOT_FOUND


class LinkUnauthorized(LinkError):
    """Protected link reached without the right password."""

    status_code = status.HTTP_401_UNAUTHORIZED


class LinkForbidden(LinkError):
    """Requester does not own the link."""

    status_code = status.HTTP_403_FORBIDDEN


class ShortCodeConflict(LinkError):
    """The store rejected a short code that is already taken."""

    status_code = status.HTTP_409_CONFLICT
