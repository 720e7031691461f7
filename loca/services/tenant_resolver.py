from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from loca.core.errors import TenantNotFoundError
from loca.services.occupant_service import get_occupant

MAX_OCCUPANT_ID = 2**63 - 1


@dataclass(frozen=True)
class TenantRef:
    realm_id: int
    tenant_id: str
    display_name: str


class TenantResolver(Protocol):
    async def resolve(self, realm_id: int, tenant_id: str) -> TenantRef:
        """Return the tenant or raise ``TenantNotFoundError``."""
        ...


class OccupantTenantResolver:
    """Resolves tenant ids against the realm's occupants."""

    def __init__(self, db: Session) -> None:
        self.db = db

    async def resolve(self, realm_id: int, tenant_id: str) -> TenantRef:
        return await run_in_threadpool(self._lookup, realm_id, tenant_id)

    def _lookup(self, realm_id: int, tenant_id: str) -> TenantRef:
        occupant_id = _parse_occupant_id(tenant_id)
        if occupant_id is None:
            raise TenantNotFoundError(realm_id, tenant_id)
        try:
            occupant = get_occupant(self.db, realm_id, occupant_id)
        except LookupError as exc:
            raise TenantNotFoundError(realm_id, tenant_id) from exc
        return TenantRef(realm_id=realm_id, tenant_id=tenant_id, display_name=occupant.name)


def _parse_occupant_id(tenant_id: str) -> int | None:
    """Occupant id for an exact run of ASCII digits within BIGINT range, else None."""
    if not (tenant_id.isascii() and tenant_id.isdigit()):
        return None
    value = int(tenant_id)
    if not 0 < value <= MAX_OCCUPANT_ID:
        return None
    return value
