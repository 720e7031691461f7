from __future__ import annotations

from datetime import date

from pydantic import BaseModel, EmailStr, Field, model_validator


class OccupantBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    reference: str | None = Field(default=None, max_length=40)
    manager: str | None = Field(default=None, max_length=120)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(default=None, max_length=30)
    begin_date: date | None = None
    end_date: date | None = None

    @model_validator(mode="after")
    def _check_lease_dates(self):
        if self.begin_date and self.end_date and self.end_date < self.begin_date:
            raise ValueError("end_date must not be before begin_date")
        return self


class OccupantCreate(OccupantBase):
    property_ids: list[int] = Field(default_factory=list)


class OccupantUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    reference: str | None = Field(default=None, max_length=40)
    manager: str | None = Field(default=None, max_length=120)
    contact_email: EmailStr | None = None
    contact_phone: str | None = Field(default=None, max_length=30)
    begin_date: date | None = None
    end_date: date | None = None
    property_ids: list[int] | None = None


class OccupantPropertyRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    type: str
    name: str


class OccupantRead(OccupantBase):
    id: int
    realm_id: int
    properties: list[OccupantPropertyRead] = Field(default_factory=list)
