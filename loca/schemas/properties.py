from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field


class PropertyBase(BaseModel):
    type: str = Field(..., max_length=30, description="office, apartment, parking, ...")
    name: str = Field(..., min_length=1, max_length=120)
    description: str | None = None
    surface: Decimal | None = Field(default=None, ge=0)
    phone: str | None = Field(default=None, max_length=30)
    building: str | None = Field(default=None, max_length=60)
    level: str | None = Field(default=None, max_length=20)
    location: str | None = Field(default=None, max_length=255)
    price: Decimal = Field(default=Decimal("0"), ge=0)
    expense: Decimal = Field(default=Decimal("0"), ge=0)


class PropertyCreate(PropertyBase):
    pass


class PropertyUpdate(BaseModel):
    type: str | None = Field(default=None, max_length=30)
    name: str | None = Field(default=None, min_length=1, max_length=120)
    description: str | None = None
    surface: Decimal | None = Field(default=None, ge=0)
    phone: str | None = Field(default=None, max_length=30)
    building: str | None = Field(default=None, max_length=60)
    level: str | None = Field(default=None, max_length=20)
    location: str | None = Field(default=None, max_length=255)
    price: Decimal | None = Field(default=None, ge=0)
    expense: Decimal | None = Field(default=None, ge=0)


class PropertyRead(PropertyBase):
    model_config = {"from_attributes": True}

    id: int
    realm_id: int
