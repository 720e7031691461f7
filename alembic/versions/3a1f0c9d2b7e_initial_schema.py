"""initial_schema

Revision ID: 3a1f0c9d2b7e
Revises:
Create Date: 2026-10-18 09:12:41.503127

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f0c9d2b7e'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PK = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _audit() -> list[sa.Column]:
    return [
        sa.Column("created_by", sa.String(50), nullable=True),
        sa.Column("updated_by", sa.String(50), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", PK, primary_key=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("enc_email", sa.LargeBinary(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        *_audit(),
    )
    roles = op.create_table(
        "roles",
        sa.Column("id", PK, primary_key=True),
        sa.Column("code", sa.String(30), nullable=False, unique=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        *_timestamps(),
        *_audit(),
    )
    op.create_table(
        "user_roles",
        sa.Column("user_id", PK, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role_id", PK, sa.ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
        sa.UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )
    op.create_table(
        "auth_sessions",
        sa.Column("id", PK, primary_key=True),
        sa.Column("user_id", PK, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("jwt_id", sa.String(64), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ip_address", sa.String(50), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "realms",
        sa.Column("id", PK, primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("locale", sa.String(10), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        *_timestamps(),
        *_audit(),
    )
    op.create_table(
        "realm_members",
        sa.Column("realm_id", PK, sa.ForeignKey("realms.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("user_id", PK, sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.UniqueConstraint("realm_id", "user_id", name="uq_realm_member"),
    )
    op.create_table(
        "properties",
        sa.Column("id", PK, primary_key=True),
        sa.Column("realm_id", PK, sa.ForeignKey("realms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("surface", sa.Numeric(10, 2), nullable=True),
        sa.Column("phone", sa.String(30), nullable=True),
        sa.Column("building", sa.String(60), nullable=True),
        sa.Column("level", sa.String(20), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("expense", sa.Numeric(12, 2), nullable=False),
        *_timestamps(),
        *_audit(),
    )
    op.create_index("ix_property_realm_type_name", "properties", ["realm_id", "type", "name"])
    op.create_table(
        "occupants",
        sa.Column("id", PK, primary_key=True),
        sa.Column("realm_id", PK, sa.ForeignKey("realms.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("reference", sa.String(40), nullable=True),
        sa.Column("manager", sa.String(120), nullable=True),
        sa.Column("enc_contact_email", sa.LargeBinary(), nullable=True),
        sa.Column("enc_contact_phone", sa.LargeBinary(), nullable=True),
        sa.Column("begin_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        *_timestamps(),
        *_audit(),
    )
    op.create_index("ix_occupant_realm_name", "occupants", ["realm_id", "name"])
    op.create_table(
        "occupant_properties",
        sa.Column("occupant_id", PK, sa.ForeignKey("occupants.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("property_id", PK, sa.ForeignKey("properties.id", ondelete="CASCADE"), primary_key=True),
    )
    op.create_table(
        "audit_logs",
        sa.Column("id", PK, primary_key=True),
        sa.Column("user_id", PK, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("realm_id", PK, sa.ForeignKey("realms.id"), nullable=True),
        sa.Column("action", sa.String(50), nullable=False),
        sa.Column("target_type", sa.String(50), nullable=True),
        sa.Column("target_id", sa.String(255), nullable=True),
        sa.Column("ip_address", sa.String(50), nullable=True),
        sa.Column("user_agent", sa.String(255), nullable=True),
        sa.Column("success", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.bulk_insert(
        roles,
        [
            {"code": "ADMIN", "name": "Administrator", "description": "Users and realm membership"},
            {"code": "OPERATOR", "name": "Operator", "description": "Properties, occupants and notices"},
            {"code": "VIEWER", "name": "Viewer", "description": "Read-only access"},
        ],
    )


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("occupant_properties")
    op.drop_index("ix_occupant_realm_name", table_name="occupants")
    op.drop_table("occupants")
    op.drop_index("ix_property_realm_type_name", table_name="properties")
    op.drop_table("properties")
    op.drop_table("realm_members")
    op.drop_table("realms")
    op.drop_table("auth_sessions")
    op.drop_table("user_roles")
    op.drop_table("roles")
    op.drop_table("users")
