"""Domain layer: Core client-side entities.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from demandhub.common.models import Identity


@dataclass(frozen=True)
class SessionState:
    """Domain entity representing the current authentication state.

    Replaced wholesale on every login, restore and logout.
    """

    identity: Identity | None = None
    raw_token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None and self.raw_token is not None


EMPTY_SESSION = SessionState()
