"""
Application layer: demand use cases.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from demandhub.client.domain import workflow
from demandhub.common.decorators import requires_role
from demandhub.common.models import DemandStats, DemandStatus, Role

if TYPE_CHECKING:
    from demandhub.client.application.demand_cache import DemandCache
    from demandhub.client.application.session_manager import SessionManager
    from demandhub.common.interfaces import IDemandGateway
    from demandhub.common.models import (
        CreateDemandRequest,
        Demand,
        DemandFilters,
        UpdateDemandRequest,
    )

logger = logging.getLogger(__name__)


class DemandService:
    """Runs role checks and workflow rules before calling the gateway.

    Status changes are validated against a freshly fetched copy of the demand,
    never against the cache.
    """

    def __init__(
        self, session: SessionManager, gateway: IDemandGateway, cache: DemandCache
    ):
        self.session = session
        self.gateway = gateway
        self.cache = cache

    @requires_role("session")
    def list_demands(self, filters: DemandFilters | None = None) -> list[Demand]:
        demands = self.gateway.list(filters)
        if filters is None:
            self.cache.put_list(demands)
        else:
            for demand in demands:
                self.cache.put(demand)
        return demands

    @requires_role("session")
    def get_demand(self, demand_id: int) -> Demand:
        demand = self.gateway.get_by_id(demand_id)
        self.cache.put(demand)
        return demand

    @requires_role("session", Role.AGENT, Role.RESPONSABLE)
    def create_demand(self, request: CreateDemandRequest) -> Demand:
        workflow.validate_new_demand(request)
        demand = self.gateway.create(request)
        self.cache.add(demand)
        return demand

    @requires_role("session", Role.AGENT)
    def update_demand(self, demand_id: int, request: UpdateDemandRequest) -> Demand:
        demand = self.gateway.update(demand_id, request)
        self.cache.put(demand)
        return demand

    @requires_role("session", Role.RESPONSABLE)
    def approve(self, demand_id: int) -> Demand:
        latest = self.get_demand(demand_id)
        target = workflow.approve(latest)
        return self._persist_status(target)

    @requires_role("session", Role.RESPONSABLE)
    def reject(self, demand_id: int, comment: str) -> Demand:
        latest = self.get_demand(demand_id)
        target = workflow.reject(latest, comment)
        return self._persist_status(target)

    def _persist_status(self, target: Demand) -> Demand:
        comment = (
            target.rejection_comment
            if target.status is DemandStatus.REJECTED
            else None
        )
        updated = self.gateway.update_status(target.id, target.status, comment)
        self.cache.put(updated)
        return updated

    @requires_role("session", Role.AGENT)
    def delete_demand(self, demand_id: int) -> None:
        self.gateway.delete(demand_id)
        self.cache.remove(demand_id)

    def cached(self, demand_id: int) -> Demand | None:
        return self.cache.get(demand_id)

    @requires_role("session")
    def stats(self, filters: DemandFilters | None = None) -> DemandStats:
        return DemandStats.from_demands(self.list_demands(filters))
