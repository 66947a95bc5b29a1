"""Domain layer: role gating and route guards.

All role checks go through can_access; pages are described by Route records
and resolved with resolve().
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING
from urllib.parse import quote

from demandhub.common.models import Role

if TYPE_CHECKING:
    from collections.abc import Iterable

    from demandhub.common.models import Identity

LOGIN_PATH = "/login"
DASHBOARD_PATH = "/dashboard"


class Decision(str, Enum):
    ALLOW = "allow"
    REDIRECT_TO_LOGIN = "redirect_to_login"
    REDIRECT_TO_DASHBOARD = "redirect_to_dashboard"
    PENDING = "pending"
    FORBIDDEN = "forbidden"


def can_access(identity: Identity | None, allowed_roles: Iterable[Role]) -> bool:
    """True iff identity is present and holds one of allowed_roles.

    An empty allowed_roles means no restriction.
    """
    roles = frozenset(allowed_roles)
    if not roles:
        return True
    return identity is not None and identity.role in roles


def can_navigate(
    identity: Identity | None,
    requires_auth: bool,
    restricted_to_anonymous: bool,
    *,
    pending: bool = False,
    allowed_roles: Iterable[Role] = (),
) -> Decision:
    """Route-guard decision for a navigation target.

    While the session is still being resolved the answer is PENDING so the
    caller can show a loading state instead of redirecting. An authenticated
    visitor without one of allowed_roles gets FORBIDDEN.
    """
    if pending:
        return Decision.PENDING
    if requires_auth and identity is None:
        return Decision.REDIRECT_TO_LOGIN
    if restricted_to_anonymous and identity is not None:
        return Decision.REDIRECT_TO_DASHBOARD
    if identity is not None and not can_access(identity, allowed_roles):
        return Decision.FORBIDDEN
    return Decision.ALLOW


@dataclass(frozen=True)
class Route:
    path: str
    requires_auth: bool = False
    restricted_to_anonymous: bool = False
    allowed_roles: frozenset[Role] = field(default_factory=frozenset)

    @property
    def pattern(self) -> re.Pattern[str]:
        regex = re.sub(r"\\\{[^}]+\\\}", r"[^/]+", re.escape(self.path))
        return re.compile(f"^{regex}$")

    def matches(self, path: str) -> bool:
        return self.pattern.match(path) is not None


@dataclass(frozen=True)
class NavigationResult:
    decision: Decision
    route: Route | None = None
    redirect_to: str | None = None

    @property
    def allowed(self) -> bool:
        return self.decision is Decision.ALLOW


BOTH_ROLES = frozenset({Role.AGENT, Role.RESPONSABLE})

ROUTES: tuple[Route, ...] = (
    Route("/"),
    Route(LOGIN_PATH, restricted_to_anonymous=True),
    Route(DASHBOARD_PATH, requires_auth=True),
    Route("/dashboard/demands/create", requires_auth=True, allowed_roles=BOTH_ROLES),
    Route(
        "/dashboard/demands/{id}/edit",
        requires_auth=True,
        allowed_roles=frozenset({Role.AGENT}),
    ),
    Route(
        "/dashboard/demands/{id}/review",
        requires_auth=True,
        allowed_roles=frozenset({Role.RESPONSABLE}),
    ),
    Route("/dashboard/demands/{id}", requires_auth=True, allowed_roles=BOTH_ROLES),
    Route("/dashboard/profile", requires_auth=True, allowed_roles=BOTH_ROLES),
)


def find_route(path: str, routes: Iterable[Route] = ROUTES) -> Route | None:
    normalized = path.rstrip("/") or "/"
    for route in routes:
        if route.matches(normalized):
            return route
    return None


def resolve(
    path: str,
    identity: Identity | None,
    *,
    pending: bool = False,
    routes: Iterable[Route] = ROUTES,
) -> NavigationResult:
    """Combine the route guards and role gate for a requested path.

    Unknown paths are treated as authenticated-only pages.
    """
    route = find_route(path, routes)
    if route is None:
        route = Route(path, requires_auth=True)

    decision = can_navigate(
        identity,
        route.requires_auth,
        route.restricted_to_anonymous,
        pending=pending,
        allowed_roles=route.allowed_roles,
    )
    if decision is Decision.REDIRECT_TO_LOGIN:
        return NavigationResult(decision, route, f"{LOGIN_PATH}?next={quote(path)}")
    if decision is Decision.REDIRECT_TO_DASHBOARD:
        return NavigationResult(decision, route, DASHBOARD_PATH)
    return NavigationResult(decision, route)
