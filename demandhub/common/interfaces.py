"""
Interfaces and protocols for dependency injection.
"""

from __future__ import annotations

from typing import Protocol

from demandhub.common.models import (
    CreateDemandRequest,
    Demand,
    DemandFilters,
    DemandStatus,
    UpdateDemandRequest,
)


class ITokenStorage(Protocol):
    """Protocol for durable storage of the raw bearer token."""

    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def clear(self) -> None: ...


class IAuthGateway(Protocol):
    """Protocol for the backend authentication endpoints."""

    def login(self, email: str, password: str) -> str: ...

    def logout(self, token: str) -> None: ...


class IDemandGateway(Protocol):
    """Protocol for the backend demand endpoints."""

    def list(self, filters: DemandFilters | None = None) -> list[Demand]: ...

    def get_by_id(self, demand_id: int) -> Demand: ...

    def create(self, request: CreateDemandRequest) -> Demand: ...

    def update(self, demand_id: int, request: UpdateDemandRequest) -> Demand: ...

    def update_status(
        self, demand_id: int, status: DemandStatus, comment: str | None = None
    ) -> Demand: ...

    def delete(self, demand_id: int) -> None: ...
