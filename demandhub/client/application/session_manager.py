"""
Application layer: Session management use cases.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from demandhub.client.domain import token_codec
from demandhub.client.domain.authorization import can_access
from demandhub.client.domain.entities import EMPTY_SESSION, SessionState
from demandhub.common.exceptions import AuthError, DemandHubError, InvalidTokenFormat

if TYPE_CHECKING:
    from demandhub.common.interfaces import IAuthGateway, ITokenStorage
    from demandhub.common.models import Identity, Role

logger = logging.getLogger(__name__)

SESSION_INVALID_MESSAGE = "Session validation failed. Please log in again."


class SessionManager:
    """Application service owning the client's single authentication session.

    State is replaced wholesale under a lock and the most recently completed
    login or restore wins. A logout bumps the epoch, so a login or restore
    that was already in flight when the logout happened is discarded; such a
    login raises AuthError.
    """

    def __init__(self, auth_gateway: IAuthGateway, token_storage: ITokenStorage):
        self.auth_gateway = auth_gateway
        self.token_storage = token_storage
        self._lock = threading.Lock()
        self._state: SessionState = EMPTY_SESSION
        self._epoch = 0
        self._in_flight = 0
        # No session has been resolved until the first login, restore or logout
        self._resolved = False
        self.last_error: str | None = None

    def _begin(self) -> int:
        with self._lock:
            self._in_flight += 1
            return self._epoch

    def _finish(self) -> None:
        with self._lock:
            self._in_flight -= 1
            self._resolved = True

    def login(self, email: str, password: str) -> Identity:
        """Authenticate against the backend and start a session.

        Raises:
            AuthError: with a user-facing message for any failure
        """
        epoch = self._begin()
        try:
            self.last_error = None
            try:
                token = self.auth_gateway.login(email, password)
                identity = token_codec.decode(token)
            except InvalidTokenFormat as err:
                self.last_error = "Authentication failed. Please try again"
                logger.warning("Login for %s returned an undecodable token", email)
                raise AuthError(self.last_error) from err
            except AuthError as err:
                self.last_error = err.message
                logger.warning("Login failed for %s: %s", email, err.message)
                raise

            with self._lock:
                if epoch != self._epoch:
                    # Logged out while the request was in flight
                    logger.info("Discarding stale login result for %s", email)
                    msg = "Login cancelled by logout"
                    raise AuthError(msg)
                self._state = SessionState(identity=identity, raw_token=token)
                self.token_storage.save(token)
            logger.info("Logged in as %s (%s)", identity.email, identity.role.value)
            return identity
        finally:
            self._finish()

    def restore(self) -> Identity | None:
        """Resume the session from the persisted token, if any.

        An expired token logs out silently. A malformed token is cleared and
        reported with InvalidTokenFormat.
        """
        epoch = self._begin()
        try:
            token = self.token_storage.load()
            if token is None:
                return None
            try:
                identity = token_codec.decode(token)
            except InvalidTokenFormat:
                self._drop(epoch, SESSION_INVALID_MESSAGE)
                logger.warning("Stored token is malformed; cleared")
                raise
            if token_codec.is_expired(token):
                self._drop(epoch, None)
                logger.info("Stored token has expired; logged out")
                return None

            with self._lock:
                if epoch == self._epoch:
                    self._state = SessionState(identity=identity, raw_token=token)
                    self.last_error = None
            logger.info("Restored session for %s", identity.email)
            return identity
        finally:
            self._finish()

    def _drop(self, epoch: int, error: str | None) -> None:
        with self._lock:
            if epoch == self._epoch:
                self._state = EMPTY_SESSION
                self.token_storage.clear()
                self.last_error = error

    def logout(self) -> None:
        """Invalidate the token remotely (best effort) and clear the session."""
        with self._lock:
            self._epoch += 1
            self._in_flight += 1
        try:
            token = self._state.raw_token or self.token_storage.load()
            if token:
                try:
                    self.auth_gateway.logout(token)
                except DemandHubError as err:
                    logger.warning("Server logout failed: %s", err)
            with self._lock:
                self._state = EMPTY_SESSION
                self.token_storage.clear()
            logger.info("Logged out")
        finally:
            self._finish()

    def current_identity(self) -> Identity | None:
        return self._state.identity

    def bearer_token(self) -> str | None:
        return self._state.raw_token

    @property
    def session_state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state.is_authenticated

    @property
    def is_loading(self) -> bool:
        """True until the session is first resolved and while a call is in flight."""
        return not self._resolved or self._in_flight > 0

    def has_role(self, *roles: Role) -> bool:
        return self.is_authenticated and can_access(self._state.identity, roles)

    def clear_error(self) -> None:
        self.last_error = None
