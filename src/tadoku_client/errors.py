from __future__ import annotations

from typing import Optional


class TadokuError(Exception):
    """Base class for every failure surfaced by the client."""

    default_message = "Something went wrong."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(TadokuError):
    """Input rejected before it reached the network, or by the server as invalid."""

    default_message = "Invalid input."


class TransportError(TadokuError):
    """The server could not be reached at all."""

    default_message = "Network unreachable. Check your connection and try again."


class RequestError(TadokuError):
    """The server answered with a non-success status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, message={self.message!r})"


class ClientError(RequestError):
    default_message = "The request was rejected."


class InvalidRequestError(ClientError, ValidationError):
    """400/422 from the server."""

    default_message = "The server rejected the input."


class AuthError(ClientError):
    default_message = "Your session is missing or expired; you must re-authenticate."


class NotFoundError(ClientError):
    default_message = "The requested item no longer exists."


class ConflictError(ClientError):
    default_message = "The item already exists."


class RateLimitError(ClientError):
    default_message = "Daily generation quota exhausted. Try again tomorrow."

    def __init__(self, status_code: int = 429, message: Optional[str] = None):
        super().__init__(status_code, message)


class ServerError(RequestError):
    default_message = "The server failed unexpectedly. Please try again later."


def error_for_status(status_code: int, message: Optional[str] = None) -> RequestError:
    """Map an HTTP status onto the matching error type."""
    if status_code in (400, 422):
        return InvalidRequestError(status_code, message)
    if status_code in (401, 403):
        return AuthError(status_code, message)
    if status_code == 404:
        return NotFoundError(status_code, message)
    if status_code == 409:
        return ConflictError(status_code, message)
    if status_code == 429:
        return RateLimitError(status_code, message)
    if status_code >= 500:
        return ServerError(status_code, message)
    return ClientError(status_code, message)
