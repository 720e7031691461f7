from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    LargeBinary,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from loca.models.base import AuditMixin, Base, BigIntId, TimestampMixin


class User(TimestampMixin, AuditMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    enc_email: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="ACTIVE")
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    roles: Mapped[list[Role]] = relationship(secondary="user_roles", lazy="selectin")


class Role(TimestampMixin, AuditMixin, Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    code: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str | None] = mapped_column(String(255))


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role_id", name="uq_user_role"),)

    user_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    role_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )


class AuthSession(TimestampMixin, Base):
    __tablename__ = "auth_sessions"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    user_id: Mapped[int] = mapped_column(BigIntId, ForeignKey("users.id", ondelete="CASCADE"))
    jwt_id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ip_address: Mapped[str | None] = mapped_column(String(50))
    user_agent: Mapped[str | None] = mapped_column(String(255))


class Realm(TimestampMixin, AuditMixin, Base):
    __tablename__ = "realms"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    locale: Mapped[str] = mapped_column(String(10), nullable=False, default="en")
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="EUR")


class RealmMember(Base):
    __tablename__ = "realm_members"
    __table_args__ = (UniqueConstraint("realm_id", "user_id", name="uq_realm_member"),)

    realm_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("realms.id", ondelete="CASCADE"), primary_key=True
    )
    user_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )


class Property(TimestampMixin, AuditMixin, Base):
    __tablename__ = "properties"
    __table_args__ = (Index("ix_property_realm_type_name", "realm_id", "type", "name"),)

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    realm_id: Mapped[int] = mapped_column(BigIntId, ForeignKey("realms.id", ondelete="CASCADE"))
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    surface: Mapped[Decimal | None] = mapped_column(Numeric(10, 2))
    phone: Mapped[str | None] = mapped_column(String(30))
    building: Mapped[str | None] = mapped_column(String(60))
    level: Mapped[str | None] = mapped_column(String(20))
    location: Mapped[str | None] = mapped_column(String(255))
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    expense: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=0)


class OccupantProperty(Base):
    __tablename__ = "occupant_properties"

    occupant_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("occupants.id", ondelete="CASCADE"), primary_key=True
    )
    property_id: Mapped[int] = mapped_column(
        BigIntId, ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True
    )


class Occupant(TimestampMixin, AuditMixin, Base):
    __tablename__ = "occupants"
    __table_args__ = (Index("ix_occupant_realm_name", "realm_id", "name"),)

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    realm_id: Mapped[int] = mapped_column(BigIntId, ForeignKey("realms.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(40))
    manager: Mapped[str | None] = mapped_column(String(120))
    enc_contact_email: Mapped[bytes | None] = mapped_column(LargeBinary)
    enc_contact_phone: Mapped[bytes | None] = mapped_column(LargeBinary)
    begin_date: Mapped[date | None] = mapped_column(Date)
    end_date: Mapped[date | None] = mapped_column(Date)

    properties: Mapped[list[Property]] = relationship(
        secondary="occupant_properties", lazy="selectin", order_by="Property.name"
    )


class AuditLog(TimestampMixin, Base):
    __tablename__ = "audit_logs"

    id: Mapped[int] = mapped_column(BigIntId, primary_key=True)
    user_id: Mapped[int | None] = mapped_column(BigIntId, ForeignKey("users.id"))
    realm_id: Mapped[int | None] = mapped_column(BigIntId, ForeignKey("realms.id"))
    action: Mapped[str] = mapped_column(String(50), nullable=False)
    target_type: Mapped[str | None] = mapped_column(String(50))
    target_id: Mapped[str | None] = mapped_column(String(255))
    ip_address: Mapped[str | None] = mapped_column(String(50))
    user_agent: Mapped[str | None] = mapped_column(String(255))
    success: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
