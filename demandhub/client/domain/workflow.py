"""Domain layer: demand status workflow and form validation.

pending is the only state with outgoing transitions; approved and rejected
are terminal. Functions here compute the target record and never persist it.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from demandhub.common.config import DEFAULTS
from demandhub.common.exceptions import InvalidTransition, ValidationError
from demandhub.common.models import (
    CreateDemandRequest,
    Demand,
    DemandStatus,
    UpdateDemandRequest,
)

logger = logging.getLogger(__name__)


def _require_pending(demand: Demand, action: str) -> None:
    if demand.status is not DemandStatus.PENDING:
        msg = f"Cannot {action} demand {demand.id}: status is {demand.status.value}"
        logger.info(msg)
        raise InvalidTransition(msg)


def validate_rejection_comment(comment: str | None) -> str:
    """Check the rejection reason bounds on the trimmed text."""
    length = len((comment or "").strip())
    if length < DEFAULTS.REJECTION_COMMENT_MIN:
        msg = (
            "Rejection comment must contain at least "
            f"{DEFAULTS.REJECTION_COMMENT_MIN} characters"
        )
        raise ValidationError(msg, field="comment")
    if length > DEFAULTS.REJECTION_COMMENT_MAX:
        msg = (
            "Rejection comment must contain at most "
            f"{DEFAULTS.REJECTION_COMMENT_MAX} characters"
        )
        raise ValidationError(msg, field="comment")
    assert comment is not None
    return comment


def approve(demand: Demand) -> Demand:
    _require_pending(demand, "approve")
    return demand.model_copy(
        update={"status": DemandStatus.APPROVED, "rejection_comment": None}
    )


def reject(demand: Demand, comment: str) -> Demand:
    _require_pending(demand, "reject")
    validate_rejection_comment(comment)
    return demand.model_copy(
        update={"status": DemandStatus.REJECTED, "rejection_comment": comment}
    )


def transition(
    demand: Demand, target: DemandStatus, comment: str | None = None
) -> Demand:
    """Dispatch to approve/reject; moving back to pending is never allowed."""
    if target is DemandStatus.APPROVED:
        return approve(demand)
    if target is DemandStatus.REJECTED:
        return reject(demand, comment or "")
    msg = f"Cannot move demand {demand.id} to {target.value}"
    raise InvalidTransition(msg)


def _first_error(err: PydanticValidationError) -> ValidationError:
    error = err.errors()[0]
    field = ".".join(str(part) for part in error["loc"]) or "request"
    return ValidationError(f"{field}: {error['msg']}", field=field)


def parse_create_request(data: dict[str, Any]) -> CreateDemandRequest:
    """Build a CreateDemandRequest, reporting the first invalid field."""
    try:
        return CreateDemandRequest.model_validate(data)
    except PydanticValidationError as err:
        raise _first_error(err) from err


def parse_update_request(data: dict[str, Any]) -> UpdateDemandRequest:
    try:
        return UpdateDemandRequest.model_validate(data)
    except PydanticValidationError as err:
        raise _first_error(err) from err


def validate_new_demand(request: CreateDemandRequest) -> CreateDemandRequest:
    """A demand is submittable only with at least one article."""
    if not request.articles:
        msg = "At least one article is required"
        raise ValidationError(msg, field="articles")
    return request
