"""Errors raised by the portal, each carrying the HTTP status it maps to."""

from __future__ import annotations


class PortalError(Exception):
    """Base class for every error the portal reports to a client."""

    status: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message if message is not None else self.default_message
        super().__init__(self.message)


class NotFoundError(PortalError):
    """The requested record does not exist or is not visible to the caller."""

    status = 404
    default_message = "Not Found"


class BadRequestError(PortalError):
    """The request was understood but cannot be carried out as given."""

    status = 400
    default_message = "Bad Request"


class UnauthorizedError(PortalError):
    """The caller is not signed in or lacks the required role."""

    status = 401
    default_message = "Unauthorized"