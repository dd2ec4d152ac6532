"""Inventory CRUD helpers.

Apart from the initial value on create, status is never written here. It is
owned by ``services.lifecycle`` and recomputed there after each event.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.catalog import normalize_category
from ..core.clock import utcnow
from ..core.codes import next_equipment_code, normalize_equipment_code
from ..core.errors import ConstraintViolationError
from ..models.equipment import Equipment
from ..services.lifecycle import derive_status

EDITABLE_FIELDS = ("name", "category", "location", "notes")


def list_equipment(db: Session, limit: int | None = None, offset: int = 0) -> list[Equipment]:
    """Return equipment ordered by code, the way the inventory table lists it."""

    stmt = select(Equipment).order_by(Equipment.equipment_code).offset(offset)
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().all()


def get_equipment(db: Session, equipment_id: int) -> Equipment | None:
    return db.get(Equipment, equipment_id)


def find_by_code(db: Session, raw_code: str | None) -> Equipment | None:
    """Resolve a scanned or typed code (``eq7``, ``EQ-007``) to an item."""

    code = normalize_equipment_code(raw_code)
    if not code:
        return None
    stmt = select(Equipment).where(Equipment.equipment_code == code)
    item = db.execute(stmt).scalars().first()
    if item:
        return item
    stmt = select(Equipment).where(func.upper(Equipment.equipment_code) == code)
    return db.execute(stmt).scalars().first()


def _clean_text(value: object) -> str | None:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def create_equipment(db: Session, payload: dict) -> Equipment:
    """Add an item to the inventory under the next free ``EQnnn`` code."""

    name = _clean_text(payload.get("name"))
    if not name:
        raise ValueError("name is required")
    category = normalize_category(payload.get("category"))

    existing_codes = db.execute(select(Equipment.equipment_code)).scalars().all()
    now = utcnow()
    item = Equipment(
        equipment_code=next_equipment_code(existing_codes),
        name=name,
        category=category,
        location=_clean_text(payload.get("location")),
        notes=_clean_text(payload.get("notes")),
        last_maintenance=payload.get("last_maintenance"),
        out_of_service=False,
        status=derive_status(has_open_checkout=False, has_pending_major=False, out_of_service=False),
        created_at=now,
        updated_at=now,
    )
    db.add(item)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolationError(
            "Equipment code was taken by a concurrent insert; retry the request",
            details={"equipment_code": item.equipment_code},
        ) from exc
    db.refresh(item)
    return item


def update_equipment(db: Session, item: Equipment, payload: dict) -> Equipment:
    """Update descriptive fields. Unknown keys are ignored; ``status`` is refused."""

    if "status" in payload:
        raise ValueError("status is derived from checkouts and deficiencies and cannot be set directly")
    for key in EDITABLE_FIELDS:
        if key not in payload:
            continue
        value = payload[key]
        if key == "name":
            value = _clean_text(value)
            if not value:
                raise ValueError("name is required")
        elif key == "category":
            value = normalize_category(value)
        else:
            value = _clean_text(value)
        setattr(item, key, value)
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    return item


def mark_maintained(db: Session, item: Equipment, on: date) -> Equipment:
    """Record that maintenance was performed on ``on``."""

    item.last_maintenance = on
    item.updated_at = utcnow()
    db.commit()
    db.refresh(item)
    return item
