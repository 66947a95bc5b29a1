"""
Pydantic models for request/response validation.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from demandhub.common.config import DEFAULTS


class Role(str, Enum):
    AGENT = "agent"
    RESPONSABLE = "responsable"


class DemandStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class WireModel(BaseModel):
    """Base for records exchanged with the backend (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TokenClaims(BaseModel):
    id: str
    email: str
    name: str
    role: Role
    iat: float | None = None
    exp: float | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("role", mode="before")
    @classmethod
    def _lower_role(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


class Identity(WireModel):
    id: str
    email: str
    display_name: str = Field(alias="name")
    role: Role


class Article(WireModel):
    id: int | None = None
    name: str
    description: str = ""
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=Decimal("0.01"))

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class ArticleDraft(WireModel):
    """An article as typed into the creation form, before the backend assigns an id."""

    name: str = Field(
        min_length=DEFAULTS.ARTICLE_NAME_MIN, max_length=DEFAULTS.ARTICLE_NAME_MAX
    )
    description: str = Field(
        min_length=DEFAULTS.ARTICLE_DESCRIPTION_MIN,
        max_length=DEFAULTS.ARTICLE_DESCRIPTION_MAX,
    )
    quantity: int = Field(ge=1, le=DEFAULTS.ARTICLE_QUANTITY_MAX)
    price: Decimal = Field(
        ge=Decimal("0.01"), le=Decimal(DEFAULTS.ARTICLE_PRICE_MAX), decimal_places=2
    )

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Demand(WireModel):
    id: int
    title: str
    description: str
    articles: list[Article] = Field(default_factory=list)
    file_name: str | None = Field(default=None, alias="fileName")
    file_url: str | None = Field(default=None, alias="fileUrl")
    status: DemandStatus = DemandStatus.PENDING
    created_at: datetime = Field(alias="createdAt")
    created_by: str = Field(alias="createdBy")
    rejection_comment: str | None = Field(default=None, alias="rejectionComment")

    @model_validator(mode="before")
    @classmethod
    def _comment_only_when_rejected(cls, data: Any) -> Any:
        # rejectionComment is meaningful only on rejected demands
        if isinstance(data, dict):
            status = data.get("status", DemandStatus.PENDING)
            if str(getattr(status, "value", status)).lower() != DemandStatus.REJECTED.value:
                data = {
                    k: v
                    for k, v in data.items()
                    if k not in ("rejectionComment", "rejection_comment")
                }
        return data

    @field_validator("status", mode="before")
    @classmethod
    def _lower_status(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def total(self) -> Decimal:
        return sum((a.line_total for a in self.articles), Decimal("0"))


class CreateDemandRequest(BaseModel):
    title: str = Field(min_length=DEFAULTS.TITLE_MIN, max_length=DEFAULTS.TITLE_MAX)
    description: str = Field(
        min_length=DEFAULTS.DESCRIPTION_MIN, max_length=DEFAULTS.DESCRIPTION_MAX
    )
    articles: list[ArticleDraft] = Field(min_length=1)
    attachment: Path | None = None

    @field_validator("attachment")
    @classmethod
    def _check_attachment(cls, value: Path | None) -> Path | None:
        if value is None:
            return value
        return check_attachment(value)

    @property
    def total(self) -> Decimal:
        return sum((a.line_total for a in self.articles), Decimal("0"))


class UpdateDemandRequest(BaseModel):
    title: str | None = Field(
        default=None, min_length=DEFAULTS.TITLE_MIN, max_length=DEFAULTS.TITLE_MAX
    )
    description: str | None = Field(
        default=None,
        min_length=DEFAULTS.DESCRIPTION_MIN,
        max_length=DEFAULTS.DESCRIPTION_MAX,
    )
    articles: list[ArticleDraft] | None = Field(default=None, min_length=1)
    attachment: Path | None = None

    @field_validator("attachment")
    @classmethod
    def _check_attachment(cls, value: Path | None) -> Path | None:
        if value is None:
            return value
        return check_attachment(value)


def check_attachment(path: Path) -> Path:
    """Reject attachments the backend will not store."""
    if path.suffix.lower() not in DEFAULTS.ATTACHMENT_EXTENSIONS:
        allowed = ", ".join(sorted(DEFAULTS.ATTACHMENT_EXTENSIONS))
        msg = f"Unsupported attachment type {path.suffix!r} (allowed: {allowed})"
        raise ValueError(msg)
    if not path.is_file():
        msg = f"Attachment not found: {path}"
        raise ValueError(msg)
    if path.stat().st_size > DEFAULTS.ATTACHMENT_MAX_BYTES:
        msg = "Attachment exceeds the 10MB limit"
        raise ValueError(msg)
    return path


class DemandFilters(BaseModel):
    status: DemandStatus | None = None
    search: str | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)

    def to_params(self) -> dict[str, str]:
        """Query parameters for the set fields only."""
        params: dict[str, str] = {}
        for key, value in self.model_dump(exclude_none=True, mode="json").items():
            params[key] = str(value)
        return params


class StatusUpdate(BaseModel):
    status: DemandStatus
    comment: str | None = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str | None = None


class DemandStats(BaseModel):
    counts: dict[DemandStatus, int]
    total_amount: Decimal

    @classmethod
    def from_demands(cls, demands: list[Demand]) -> DemandStats:
        counts = {status: 0 for status in DemandStatus}
        for demand in demands:
            counts[demand.status] += 1
        total = sum((d.total for d in demands), Decimal("0"))
        return cls(counts=counts, total_amount=total)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class ClientConfig(BaseModel):
    api_url: str | None = None
    token_file: Path | None = None
    log_level: int | None = None
    http_timeout: float | None = None
