from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from loca.api import deps
from loca.db.session import get_db
from loca.schemas.auth import LoginRequest, TokenResponse, TokenUser
from loca.services import auth_service
from loca.services.audit_service import log_action

router = APIRouter(prefix="/auth", tags=["auth"])


def _login(db: Session, request: Request, username: str, password: str) -> TokenResponse:
    user = auth_service.authenticate_user(db, username, password)
    client_ip = request.client.host if request.client else None
    user_agent = request.headers.get("user-agent")
    if not user:
        log_action(
            db,
            user_id=None,
            action="login",
            ip_address=client_ip,
            user_agent=user_agent,
            success=False,
            commit=True,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid username or password",
        )

    token = auth_service.issue_login_token(
        db,
        user=user,
        ip_address=client_ip,
        user_agent=user_agent,
    )
    log_action(
        db,
        user_id=user.id,
        action="login",
        ip_address=client_ip,
        user_agent=user_agent,
        success=True,
        commit=True,
    )
    return TokenResponse(
        access_token=token.token,
        token_type="bearer",
        expires_at=token.expires_at,
        user=TokenUser(
            id=user.id,
            username=user.username,
            roles=sorted(auth_service.list_role_codes(user)),
            realm_ids=sorted(auth_service.list_realm_ids(db, user.id)),
        ),
    )


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, request: Request, db: Session = Depends(get_db)):
    return _login(db, request, payload.username, payload.password)


@router.post("/token", response_model=TokenResponse, include_in_schema=False)
def login_form(
    request: Request,
    form: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    """OAuth2 password flow used by the interactive docs."""
    return _login(db, request, form.username, form.password)


@router.post("/logout")
def logout(current_user: deps.AuthenticatedUser = Depends(deps.get_current_user), db: Session = Depends(get_db)):
    auth_service.revoke_session(db, current_user.token_jti)
    log_action(
        db,
        user_id=current_user.id,
        action="logout",
        success=True,
        commit=True,
    )
    return {"status": "ok"}
