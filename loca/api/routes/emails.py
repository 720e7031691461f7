from __future__ import annotations

import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from loca.api import deps
from loca.core.roles import WRITE_ROLES
from loca.db.session import get_db
from loca.models.domain import Realm
from loca.schemas.emails import EmailSendRequest, NotificationOutcome
from loca.services.audit_service import log_action
from loca.services.emailer_service import EmailerClient
from loca.services.notification_service import dispatch
from loca.services.tenant_resolver import OccupantTenantResolver

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emails", tags=["emails"])

UNRESOLVED_HEADER = "X-Unresolved-Tenants"


@router.post(
    "",
    response_model=list[NotificationOutcome],
    response_model_exclude_none=True,
)
async def send_emails(
    payload: EmailSendRequest,
    response: Response,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(WRITE_ROLES)),
    emailer: EmailerClient = Depends(deps.get_emailer_client),
    policy: deps.DispatchPolicy = Depends(deps.get_dispatch_policy),
):
    """
    Send a document (rent notice, invoice, ...) to each tenant through the emailer.

    Returns one entry per recipient. Tenants that cannot be resolved in the
    realm are skipped and listed in the X-Unresolved-Tenants header.
    """
    try:
        result = await dispatch(
            OccupantTenantResolver(db),
            emailer,
            realm.id,
            payload.document,
            payload.tenant_ids,
            payload.year,
            payload.month,
            demo_mode=policy.demo_mode,
            join_policy=policy.join_policy,
        )
        outcomes = [NotificationOutcome.model_validate(o) for o in result.outcomes]
    except Exception as exc:  # noqa: BLE001
        logger.exception("POST /emails failed (realm_id=%s, document=%s)", realm.id, payload.document)
        db.rollback()
        log_action(
            db,
            user_id=current_user.id,
            realm_id=realm.id,
            action="emails.send",
            target_type="document",
            target_id=payload.document,
            success=False,
            commit=True,
        )
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    if result.unresolved:
        response.headers[UNRESOLVED_HEADER] = ",".join(quote(t, safe="") for t in result.unresolved)
    log_action(
        db,
        user_id=current_user.id,
        realm_id=realm.id,
        action="emails.send",
        target_type="document",
        target_id=payload.document,
        commit=True,
    )
    return outcomes
