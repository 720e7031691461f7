from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from loca.core.roles import RoleCode


class UserCreate(BaseModel):
    username: str = Field(..., max_length=50)
    password: str = Field(..., min_length=8, max_length=72)
    email: EmailStr | None = None
    roles: list[RoleCode] = Field(default_factory=lambda: [RoleCode.VIEWER])
    status: str = Field(default="ACTIVE", pattern=r"^[A-Z_]+$")


class UserRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    username: str
    status: str
