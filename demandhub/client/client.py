"""
Demand client facade wiring configuration, session and gateways.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from demandhub.client.application.demand_cache import DemandCache
from demandhub.client.application.demand_service import DemandService
from demandhub.client.application.dispatcher import Dispatcher, ViewScope
from demandhub.client.application.session_manager import SessionManager
from demandhub.client.domain import authorization, workflow
from demandhub.client.infrastructure.auth_gateway import AuthGateway
from demandhub.client.infrastructure.config_loader import ConfigLoader
from demandhub.client.infrastructure.demand_gateway import DemandGateway
from demandhub.client.infrastructure.token_storage import FileTokenStorage
from demandhub.client.infrastructure.transport import Transport
from demandhub.common.models import ClientConfig

if TYPE_CHECKING:
    from concurrent.futures import Future
    from pathlib import Path

    from demandhub.client.domain.authorization import NavigationResult
    from demandhub.common.interfaces import ITokenStorage
    from demandhub.common.models import (
        Demand,
        DemandFilters,
        DemandStats,
        Identity,
    )


class DemandClient:
    """Client for the demand management backend."""

    def __init__(
        self,
        api_url: str | None = None,
        token_file: Path | None = None,
        log_level: int | None = None,
        http_timeout: float | None = None,
        token_storage: ITokenStorage | None = None,
        http_session: requests.Session | None = None,
    ):
        self.config_loader = ConfigLoader(
            ClientConfig(
                api_url=api_url,
                token_file=token_file,
                log_level=log_level,
                http_timeout=http_timeout,
            )
        )
        self.logger = logging.getLogger(__name__)
        self.api_url = self.config_loader.api_url

        storage = token_storage or FileTokenStorage(self.config_loader.token_file)
        self.transport = Transport(
            self.api_url,
            timeout=self.config_loader.http_timeout,
            session=http_session,
        )
        self.session = SessionManager(AuthGateway(self.transport), storage)
        self.transport.token_supplier = self.session.bearer_token

        self.gateway = DemandGateway(self.transport)
        self.cache = DemandCache()
        self.demands = DemandService(self.session, self.gateway, self.cache)
        self._dispatcher: Dispatcher | None = None

    # Session

    def login(self, email: str, password: str) -> Identity:
        return self.session.login(email, password)

    def restore(self) -> Identity | None:
        return self.session.restore()

    def logout(self) -> None:
        self.session.logout()
        self.cache.clear()

    def current_identity(self) -> Identity | None:
        return self.session.current_identity()

    def navigate(self, path: str) -> NavigationResult:
        return authorization.resolve(
            path, self.session.current_identity(), pending=self.session.is_loading
        )

    # Demands

    def list_demands(self, filters: DemandFilters | None = None) -> list[Demand]:
        return self.demands.list_demands(filters)

    def get_demand(self, demand_id: int) -> Demand:
        return self.demands.get_demand(demand_id)

    def create_demand(self, **fields: Any) -> Demand:
        """Validate form fields and create the demand."""
        return self.demands.create_demand(workflow.parse_create_request(fields))

    def update_demand(self, demand_id: int, **fields: Any) -> Demand:
        return self.demands.update_demand(
            demand_id, workflow.parse_update_request(fields)
        )

    def approve(self, demand_id: int) -> Demand:
        return self.demands.approve(demand_id)

    def reject(self, demand_id: int, comment: str) -> Demand:
        return self.demands.reject(demand_id, comment)

    def delete_demand(self, demand_id: int) -> None:
        self.demands.delete_demand(demand_id)

    def stats(self, filters: DemandFilters | None = None) -> DemandStats:
        return self.demands.stats(filters)

    # Background execution

    def run_in_background(
        self,
        fn: Any,
        scope: ViewScope,
        on_result: Any = None,
        on_error: Any = None,
        *args: Any,
        **kwargs: Any,
    ) -> Future:
        """Run a client call on a worker thread, guarded by a view scope."""
        if self._dispatcher is None:
            self._dispatcher = Dispatcher()
        return self._dispatcher.submit(fn, scope, on_result, on_error, *args, **kwargs)

    def close(self) -> None:
        if self._dispatcher is not None:
            self._dispatcher.shutdown()
            self._dispatcher = None
        self.transport.session.close()
        self.logger.debug("Client closed")

    def __enter__(self) -> DemandClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
