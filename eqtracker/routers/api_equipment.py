from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..core.clock import local_today
from ..core.errors import NotFoundError
from ..crud.equipment import create_equipment, find_by_code, get_equipment, list_equipment, mark_maintained, update_equipment
from ..db.session import get_db
from ..deps.auth import require_manager, require_user
from ..models.user import User
from ..schemas.equipment import (
    EquipmentCreate,
    EquipmentOut,
    EquipmentUpdate,
    MaintenanceRequest,
    OutOfServiceRequest,
)
from ..services.lifecycle import set_out_of_service
from ..services.reporting import filter_equipment

router = APIRouter(prefix="/api/v1/equipment", tags=["equipment"])


def _get_or_404(db: Session, equipment_id: int):
    item = get_equipment(db, equipment_id)
    if item is None:
        raise NotFoundError(f"Equipment {equipment_id} not found")
    return item


@router.get("", response_model=list[EquipmentOut], dependencies=[Depends(require_user)])
def api_list(
    search: str | None = None,
    category: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
):
    items = filter_equipment(list_equipment(db), search=search, category=category)
    if status_filter:
        items = [item for item in items if item.status == status_filter.strip().lower()]
    return items


@router.post("", response_model=EquipmentOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_manager)])
def api_create(payload: EquipmentCreate, db: Session = Depends(get_db)):
    return create_equipment(db, payload.model_dump(exclude_none=True))


@router.get("/lookup", response_model=EquipmentOut, dependencies=[Depends(require_user)])
def api_lookup(code: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    item = find_by_code(db, code)
    if item is None:
        raise NotFoundError(f"No equipment with code {code.strip()}", details={"code": code})
    return item


@router.get("/{equipment_id}", response_model=EquipmentOut, dependencies=[Depends(require_user)])
def api_get(equipment_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, equipment_id)


@router.patch("/{equipment_id}", response_model=EquipmentOut, dependencies=[Depends(require_manager)])
def api_update(equipment_id: int, payload: EquipmentUpdate, db: Session = Depends(get_db)):
    item = _get_or_404(db, equipment_id)
    data = payload.model_dump(exclude_unset=True)
    if not data:
        return item
    return update_equipment(db, item, data)


@router.post("/{equipment_id}/maintenance", response_model=EquipmentOut, dependencies=[Depends(require_manager)])
def api_mark_maintained(
    equipment_id: int,
    payload: MaintenanceRequest | None = None,
    db: Session = Depends(get_db),
):
    item = _get_or_404(db, equipment_id)
    performed_on = payload.performed_on if payload and payload.performed_on else local_today()
    return mark_maintained(db, item, performed_on)


@router.post("/{equipment_id}/out-of-service", response_model=EquipmentOut)
def api_out_of_service(
    equipment_id: int,
    payload: OutOfServiceRequest,
    user: User = Depends(require_user),
    db: Session = Depends(get_db),
):
    return set_out_of_service(db, equipment_id=equipment_id, user_id=user.id, out_of_service=payload.out_of_service)
