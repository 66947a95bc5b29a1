"""Infrastructure layer: backend demand endpoints.

Create and update are sent as multipart with indexed article fields
(articles[0].name, articles[0].quantity, ...). Mutating calls are sent once.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from demandhub.common.config import DEFAULTS
from demandhub.common.models import (
    Demand,
    DemandFilters,
    DemandStatus,
    StatusUpdate,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from demandhub.client.infrastructure.transport import Transport
    from demandhub.common.models import (
        ArticleDraft,
        CreateDemandRequest,
        UpdateDemandRequest,
    )

logger = logging.getLogger(__name__)

MultipartFields = list[tuple[str, tuple[Any, ...]]]


def encode_articles(articles: Sequence[ArticleDraft]) -> MultipartFields:
    fields: MultipartFields = []
    for index, article in enumerate(articles):
        prefix = f"articles[{index}]"
        fields.extend(
            [
                (f"{prefix}.name", (None, article.name)),
                (f"{prefix}.quantity", (None, str(article.quantity))),
                (f"{prefix}.description", (None, article.description)),
                (f"{prefix}.price", (None, str(article.price))),
            ]
        )
    return fields


def encode_demand_form(
    request: CreateDemandRequest | UpdateDemandRequest,
) -> MultipartFields:
    """Multipart parts for the set fields of a create or update request."""
    fields: MultipartFields = []
    if request.title is not None:
        fields.append(("title", (None, request.title)))
    if request.description is not None:
        fields.append(("description", (None, request.description)))
    if request.articles is not None:
        fields.extend(encode_articles(request.articles))
    if request.attachment is not None:
        path = request.attachment
        content_type = DEFAULTS.ATTACHMENT_EXTENSIONS.get(
            path.suffix.lower(), "application/octet-stream"
        )
        fields.append(("attachedFile", (path.name, path.read_bytes(), content_type)))
    return fields


class DemandGateway:
    """CRUD operations on /demands."""

    def __init__(self, transport: Transport):
        self.transport = transport

    def list(self, filters: DemandFilters | None = None) -> list[Demand]:
        params = filters.to_params() if filters else {}
        response = self.transport.send("GET", "/demands", params=params)
        return self.transport.decode_list_as(response, Demand)

    def get_by_id(self, demand_id: int) -> Demand:
        response = self.transport.send("GET", f"/demands/{demand_id}")
        return self.transport.decode_as(response, Demand)

    def create(self, request: CreateDemandRequest) -> Demand:
        response = self.transport.send(
            "POST", "/demands", files=encode_demand_form(request)
        )
        demand = self.transport.decode_as(response, Demand)
        logger.info("Created demand %s", demand.id)
        return demand

    def update(self, demand_id: int, request: UpdateDemandRequest) -> Demand:
        response = self.transport.send(
            "PUT", f"/demands/{demand_id}", files=encode_demand_form(request)
        )
        return self.transport.decode_as(response, Demand)

    def update_status(
        self, demand_id: int, status: DemandStatus, comment: str | None = None
    ) -> Demand:
        body = StatusUpdate(status=status, comment=comment)
        response = self.transport.send(
            "PATCH",
            f"/demands/{demand_id}/status",
            json=body.model_dump(mode="json", exclude_none=True),
        )
        demand = self.transport.decode_as(response, Demand)
        logger.info("Demand %s is now %s", demand.id, demand.status.value)
        return demand

    def delete(self, demand_id: int) -> None:
        self.transport.send("DELETE", f"/demands/{demand_id}")
        logger.info("Deleted demand %s", demand_id)
