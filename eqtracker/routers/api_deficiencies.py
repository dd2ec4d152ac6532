from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..crud.deficiencies import list_deficiencies
from ..db.session import get_db
from ..deps.auth import require_user
from ..models.user import User
from ..schemas.deficiency import DeficiencyCreate, DeficiencyOut, DeficiencyResolve
from ..services.lifecycle import report_deficiency, resolve_deficiency

router = APIRouter(prefix="/api/v1/deficiencies", tags=["deficiencies"])


@router.get("", response_model=list[DeficiencyOut], dependencies=[Depends(require_user)])
def api_list(
    status_filter: Literal["pending", "resolved"] | None = Query(default=None, alias="status"),
    equipment_id: int | None = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
):
    return list_deficiencies(db, status=status_filter, equipment_id=equipment_id, limit=limit, offset=offset)


@router.post("", response_model=DeficiencyOut, status_code=status.HTTP_201_CREATED)
def api_report(payload: DeficiencyCreate, user: User = Depends(require_user), db: Session = Depends(get_db)):
    return report_deficiency(
        db,
        equipment_id=payload.equipment_id,
        user_id=user.id,
        description=payload.description,
        severity=payload.severity,
    )


@router.post("/{deficiency_id}/resolve", response_model=DeficiencyOut)
def api_resolve(
    deficiency_id: int,
    payload: DeficiencyResolve | None = None,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return resolve_deficiency(
        db,
        deficiency_id=deficiency_id,
        resolver_id=user.id,
        notes=payload.notes if payload else None,
    )
