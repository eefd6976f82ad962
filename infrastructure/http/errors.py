"""Classified failures raised by the gateway client."""

from typing import Optional


class GatewayError(Exception):
    """Base class for every failure surfaced by the gateway client."""

    def __init__(self, message: str, *, status: Optional[int] = None, code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


class NetworkError(GatewayError):
    """Transport failure: no usable server response (DNS, connection, timeout)."""


class DomainError(GatewayError):
    """The server answered with an envelope whose ``code`` is not 0."""


class UnauthorizedError(GatewayError):
    """HTTP 401. Always invalidates the local session."""
