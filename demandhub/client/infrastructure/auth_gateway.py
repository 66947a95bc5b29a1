"""Infrastructure layer: backend authentication endpoints.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from demandhub.common.exceptions import (
    AuthError,
    HttpError,
    MalformedResponse,
    TransportError,
)
from demandhub.common.models import LoginRequest, LoginResponse

if TYPE_CHECKING:
    from demandhub.client.infrastructure.transport import Transport

logger = logging.getLogger(__name__)

HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_SERVER_ERROR = 500

# Backend (Spring Security) messages, matched in order by substring
KNOWN_AUTH_ERRORS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("BadCredentialsException", "Bad credentials"), "Invalid email or password"),
    (
        ("UserNotFoundException", "User not found"),
        "User not found. Please check your email address",
    ),
    (
        ("AccountExpiredException", "Account expired"),
        "Account has expired. Please contact support",
    ),
    (
        ("CredentialsExpiredException", "Credentials expired"),
        "Password has expired. Please reset your password",
    ),
    (
        ("AccountLockedException", "Account locked"),
        "Account is locked. Please contact support",
    ),
    (
        ("DisabledException", "Account disabled"),
        "Account is disabled. Please contact support",
    ),
    (
        ("InternalAuthenticationServiceException",),
        "Authentication service error. Please try again later",
    ),
)


def describe_auth_failure(status: int, backend_message: str | None) -> str:
    """Map a failed auth response to the message shown to the user."""
    for needles, message in KNOWN_AUTH_ERRORS:
        if backend_message and any(needle in backend_message for needle in needles):
            return message
    if status == HTTP_UNAUTHORIZED:
        return "Invalid email or password"
    if status == HTTP_FORBIDDEN:
        return "Access denied. Insufficient permissions"
    if status == HTTP_NOT_FOUND:
        return "Service not found. Please contact support"
    if status >= HTTP_SERVER_ERROR:
        return "Server error. Please try again later"
    return backend_message or f"HTTP error! status: {status}"


class AuthGateway:
    """Calls /auth/login and /auth/logout."""

    def __init__(self, transport: Transport):
        self.transport = transport

    def login(self, email: str, password: str) -> str:
        """Exchange credentials for a raw bearer token.

        Raises:
            AuthError: rejected credentials, network failure or missing token
        """
        body = LoginRequest(email=email, password=password)
        try:
            response = self.transport.send(
                "POST", "/auth/login", json=body.model_dump(), authenticated=False
            )
            data = self.transport.decode_as(response, LoginResponse)
        except HttpError as err:
            raise AuthError(
                describe_auth_failure(err.status, err.backend_message), err.status
            ) from err
        except TransportError as err:
            raise AuthError(str(err)) from err
        except MalformedResponse as err:
            msg = "Login failed. Please try again"
            raise AuthError(msg) from err

        if not data.token:
            msg = "No token received from server"
            raise AuthError(msg)
        return data.token

    def logout(self, token: str) -> None:
        self.transport.send("POST", "/auth/logout", token=token)
