from __future__ import annotations

from typing import Any


class TenantNotFoundError(LookupError):
    """Raised when a tenant id does not match an occupant of the realm."""

    def __init__(self, realm_id: int, tenant_id: str) -> None:
        super().__init__(f"tenant {tenant_id!r} not found in realm {realm_id}")
        self.realm_id = realm_id
        self.tenant_id = tenant_id


class EmailerError(RuntimeError):
    """Emailer service call failure (transport, HTTP status or response shape)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class DispatchAggregateError(RuntimeError):
    """Every emailer failure of one dispatch, keyed by tenant id."""

    def __init__(self, failures: list[tuple[str, BaseException]]) -> None:
        details = "; ".join(f"{tenant_id}: {exc}" for tenant_id, exc in failures)
        super().__init__(f"{len(failures)} notification(s) failed: {details}")
        self.failures = failures

    @property
    def tenant_ids(self) -> list[str]:
        return [tenant_id for tenant_id, _ in self.failures]


class PropertyInUseError(ValueError):
    """Raised when deleting a property still rented by an occupant."""
