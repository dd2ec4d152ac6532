from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..core.capabilities import can_manage_inventory
from ..core.security import decode_token, issue_token_pair, verify_password
from ..crud.users import get_user, get_user_by_email, get_user_by_member_number
from ..db.session import get_db
from ..deps.auth import require_user
from ..models.user import User
from ..schemas.auth import ChairLoginRequest, MemberLoginRequest, RefreshRequest, TokenResponse, UserOut

logger = logging.getLogger("eqtracker.auth")

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _tokens_for(user: User) -> TokenResponse:
    pair = issue_token_pair(user.id, role=user.role)
    return TokenResponse(**pair.model_dump())


@router.post("/member", response_model=TokenResponse, summary="Sign in with a member number")
def member_login(payload: MemberLoginRequest, db: Session = Depends(get_db)):
    user = get_user_by_member_number(db, payload.member_number)
    if user is None:
        logger.info("auth.member_unknown", extra={"extra_data": {"member_number": payload.member_number}})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Member number not found")
    return _tokens_for(user)


@router.post("/login", response_model=TokenResponse, summary="Chair/admin email and password login")
def chair_login(payload: ChairLoginRequest, db: Session = Depends(get_db)):
    user = get_user_by_email(db, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    if not can_manage_inventory(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return _tokens_for(user)


@router.post("/refresh", response_model=TokenResponse, summary="Refresh access token")
def refresh_token(payload: RefreshRequest, db: Session = Depends(get_db)):
    try:
        claims = decode_token(payload.refresh_token, verify_type="refresh")
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    user = get_user(db, claims.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown member")
    # Role is re-read so a demotion takes effect on the next refresh.
    return _tokens_for(user)


@router.get("/me", response_model=UserOut)
def who_am_i(user: User = Depends(require_user)):
    out = UserOut.model_validate(user)
    out.can_manage_inventory = can_manage_inventory(user)
    return out
