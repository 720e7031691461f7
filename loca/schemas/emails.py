from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EmailSendRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document: str = Field(..., min_length=1, max_length=100, description="emailer template name")
    tenant_ids: list[str] = Field(..., alias="tenantIds")
    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)


class NotificationOutcome(BaseModel):
    """One recipient's delivery result, as returned to the caller."""

    model_config = ConfigDict(populate_by_name=True)

    document: str
    tenant_id: str = Field(..., alias="tenantId")
    term: str
    email: str | None = None
    status: str | None = None
    name: str
    error: dict[str, Any] | None = None
