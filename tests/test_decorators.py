from typing import Any

import pytest

from demandhub.common.decorators import requires_login, requires_role
from demandhub.common.exceptions import AuthError, PermissionDenied
from demandhub.common.models import Identity, Role

AGENT = Identity(id="7", email="agent@chaabi.com", name="Agent", role=Role.AGENT)


class FakeSession:
    def __init__(self, identity: Identity | None = None) -> None:
        self.identity = identity

    def current_identity(self) -> Identity | None:
        return self.identity


class Reports:
    def __init__(self, session: FakeSession) -> None:
        self.session = session

    @requires_role("session", Role.RESPONSABLE)
    def approve_all(self) -> str:
        return "approved"

    @requires_role("session")
    def overview(self) -> str:
        return "overview"


def test_requires_login_with_direct_session() -> None:
    session = FakeSession()

    @requires_login(session)
    def protected() -> str:
        return "ok"

    with pytest.raises(AuthError) as exc_info:
        protected()
    assert exc_info.value.status == 401  # noqa: PLR2004

    session.identity = AGENT
    assert protected() == "ok"


def test_requires_role_with_callable_session() -> None:
    session = FakeSession(AGENT)

    @requires_role(lambda: session, Role.AGENT)
    def create(title: str, **kwargs: Any) -> str:
        return title

    assert create("Chairs") == "Chairs"


def test_requires_role_denies_other_roles() -> None:
    reports = Reports(FakeSession(AGENT))
    with pytest.raises(PermissionDenied, match="Insufficient permissions"):
        reports.approve_all()
    assert reports.overview() == "overview"


def test_requires_role_needs_login() -> None:
    reports = Reports(FakeSession())
    with pytest.raises(AuthError) as exc_info:
        reports.overview()
    assert not isinstance(exc_info.value, PermissionDenied)


def test_attribute_name_needs_self() -> None:
    @requires_login("session")
    def orphan() -> None:
        return None

    with pytest.raises(ValueError, match="without self"):
        orphan()
