"""
Custom exceptions for the demand client.
"""

from __future__ import annotations


class DemandHubError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InvalidTokenFormat(DemandHubError):
    """Exception for tokens that cannot be decoded into an identity."""

    def __init__(self, message: str = "Invalid token format") -> None:
        super().__init__(message)


class AuthError(DemandHubError):
    """Exception for login, session and credential failures."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message, status)

    @property
    def status(self) -> int | None:
        return self.status_code


class PermissionDenied(AuthError):
    """Exception for actions the current role is not allowed to run."""

    def __init__(self, message: str = "Access denied. Insufficient permissions") -> None:
        super().__init__(message, 403)


class TransportError(DemandHubError):
    """Exception for network-level failures (no connection, timeout)."""


class MalformedResponse(DemandHubError):
    """Exception for a 2xx response whose body cannot be decoded."""


class HttpError(DemandHubError):
    """Exception for non-2xx responses."""

    def __init__(
        self, status: int, message: str, backend_message: str | None = None
    ) -> None:
        super().__init__(message, status)
        self.backend_message = backend_message

    @property
    def status(self) -> int:
        assert self.status_code is not None
        return self.status_code


class ValidationError(DemandHubError):
    """Exception for input that fails a field constraint."""

    def __init__(self, message: str, field: str, status_code: int = 422) -> None:
        super().__init__(message, status_code)
        self.field = field


class InvalidTransition(DemandHubError):
    """Exception for a status change that the workflow does not allow."""

    def __init__(self, message: str, status_code: int = 409) -> None:
        super().__init__(message, status_code)
