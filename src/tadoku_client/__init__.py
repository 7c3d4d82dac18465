from .client import TadokuClient
from .errors import (
    AuthError,
    ClientError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TadokuError,
    TransportError,
    ValidationError,
)

__all__ = [
    "TadokuClient",
    "TadokuError",
    "ValidationError",
    "AuthError",
    "RateLimitError",
    "NotFoundError",
    "ClientError",
    "TransportError",
    "ServerError",
]
