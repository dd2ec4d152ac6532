from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from ..core.capabilities import Capability, require_capability
from ..core.security import decode_token
from ..crud.users import get_user
from ..db.session import get_db
from ..middlewares import principal_ctx_var
from ..models.user import User


def _unauthorized(detail: str = "Unauthorized") -> None:
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _set_principal(request: Request, principal: str) -> None:
    principal_ctx_var.set(principal)
    request.state.principal = principal


async def require_user(
    request: Request,
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer access token to the acting member."""

    if not authorization:
        _unauthorized("Authorization required")
    scheme, credentials = get_authorization_scheme_param(authorization)
    if scheme.lower() != "bearer" or not credentials:
        _unauthorized("Bearer token required")
    try:
        payload = decode_token(credentials, verify_type="access")
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    user = get_user(db, payload.user_id)
    if user is None:
        _unauthorized("Unknown member")
    _set_principal(request, f"member:{user.member_number}")
    request.state.token_payload = payload
    return user


async def require_manager(user: User = Depends(require_user)) -> User:
    """Chairs and admins only; everyone else gets a 403 envelope."""

    require_capability(user, Capability.MANAGE_INVENTORY)
    return user
