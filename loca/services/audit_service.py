from __future__ import annotations

from sqlalchemy.orm import Session

from loca.models.domain import AuditLog


def log_action(
    db: Session,
    *,
    user_id: int | None,
    action: str,
    realm_id: int | None = None,
    target_type: str | None = None,
    target_id: str | None = None,
    ip_address: str | None = None,
    user_agent: str | None = None,
    success: bool = True,
    commit: bool = False,
) -> AuditLog:
    log = AuditLog(
        user_id=user_id,
        realm_id=realm_id,
        action=action,
        target_type=target_type,
        target_id=target_id[:255] if target_id else target_id,
        ip_address=ip_address,
        user_agent=user_agent,
        success=success,
    )
    db.add(log)
    if commit:
        db.commit()
    else:
        db.flush()
    return log
