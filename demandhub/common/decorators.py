"""Role decorators for function protection.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from demandhub.common.models import Role

from demandhub.client.domain.authorization import can_access
from demandhub.common.exceptions import AuthError, PermissionDenied

logger = logging.getLogger(__name__)


def _resolve_session(session: Any, args: tuple[Any, ...]) -> Any:
    """Get the session manager (direct, callable, or attribute name on self)."""
    if isinstance(session, str):
        if not args:
            error_msg = f"Cannot get session attribute '{session}' without self"
            raise ValueError(error_msg)
        return getattr(args[0], session)
    if callable(session) and not hasattr(session, "current_identity"):
        return session()
    return session


def requires_login(
    session: Any | Callable[[], Any] | str,
    error_message: str = "Please log in first",
) -> Callable:
    """Decorator that runs the function only for an authenticated user.

    Args:
        session: SessionManager, callable returning one, or attribute name on self
        error_message: Message of the AuthError raised otherwise

    Returns:
        Decorated function
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            manager = _resolve_session(session, args)
            if manager.current_identity() is None:
                raise AuthError(error_message, 401)
            return func(*args, **kwargs)

        return wrapper

    return decorator


def requires_role(
    session: Any | Callable[[], Any] | str,
    *roles: Role,
    error_message: str = "Access denied. Insufficient permissions",
) -> Callable:
    """Decorator that runs the function only when the current role is allowed.

    No roles means any authenticated user.

    Args:
        session: SessionManager, callable returning one, or attribute name on self
        roles: Roles allowed to run the function
        error_message: Message of the PermissionDenied raised otherwise

    Returns:
        Decorated function
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            manager = _resolve_session(session, args)
            identity = manager.current_identity()
            if identity is None:
                msg = "Please log in first"
                raise AuthError(msg, 401)
            if not can_access(identity, roles):
                logger.info(
                    "%s denied to role %s", func.__name__, identity.role.value
                )
                raise PermissionDenied(error_message)
            return func(*args, **kwargs)

        return wrapper

    return decorator
