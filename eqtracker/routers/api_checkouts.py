from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..core.errors import NotFoundError
from ..crud.checkouts import list_checkouts
from ..crud.equipment import find_by_code
from ..db.session import get_db
from ..deps.auth import require_user
from ..models.user import User
from ..schemas.checkout import CheckoutCreate, CheckoutOut, ReturnRequest
from ..services.lifecycle import check_out, return_equipment

router = APIRouter(prefix="/api/v1/checkouts", tags=["checkouts"])


@router.get("", response_model=list[CheckoutOut])
def api_list(
    open_only: bool = False,
    equipment_id: int | None = None,
    mine: bool = False,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return list_checkouts(
        db,
        open_only=open_only,
        equipment_id=equipment_id,
        user_id=user.id if mine else None,
        limit=limit,
        offset=offset,
    )


@router.post("", response_model=CheckoutOut, status_code=status.HTTP_201_CREATED)
def api_check_out(payload: CheckoutCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    equipment_id = payload.equipment_id
    if not equipment_id:
        item = find_by_code(db, payload.equipment_code)
        if item is None:
            raise NotFoundError(
                f"No equipment with code {payload.equipment_code.strip()}",
                details={"code": payload.equipment_code},
            )
        equipment_id = item.id
    return check_out(
        db,
        equipment_id=equipment_id,
        user_id=user.id,
        use_type=payload.use_type,
        purpose=payload.purpose,
        expected_return=payload.expected_return,
    )


@router.post("/{checkout_id}/return", response_model=CheckoutOut)
def api_return(
    checkout_id: int,
    payload: ReturnRequest | None = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    payload = payload or ReturnRequest()
    return return_equipment(
        db,
        checkout_id=checkout_id,
        user_id=user.id,
        condition=payload.condition,
        deficiency_description=payload.deficiency_description,
        severity=payload.severity,
    )
