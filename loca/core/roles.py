from __future__ import annotations

from enum import Enum


class RoleCode(str, Enum):
    # manages users and realm membership
    ADMIN = "ADMIN"
    # manages properties and occupants, sends notices
    OPERATOR = "OPERATOR"
    VIEWER = "VIEWER"


READ_ROLES: set[str] = {role.value for role in RoleCode}

WRITE_ROLES: set[str] = {
    RoleCode.ADMIN.value,
    RoleCode.OPERATOR.value,
}

ADMIN_ROLES: set[str] = {RoleCode.ADMIN.value}
