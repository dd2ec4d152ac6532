"""Deficiency queries."""

from __future__ import annotations

from sqlalchemy import desc, exists, select
from sqlalchemy.orm import Session

from ..core.catalog import DEFICIENCY_PENDING, SEVERITY_MAJOR
from ..models.deficiency import Deficiency


def list_deficiencies(
    db: Session,
    *,
    status: str | None = None,
    equipment_id: int | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Deficiency]:
    """Deficiencies, most recently reported first."""

    stmt = select(Deficiency).order_by(desc(Deficiency.reported_date), desc(Deficiency.id)).offset(offset)
    if status:
        stmt = stmt.where(Deficiency.status == status.strip().lower())
    if equipment_id is not None:
        stmt = stmt.where(Deficiency.equipment_id == equipment_id)
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().unique().all()


def get_deficiency(db: Session, deficiency_id: int) -> Deficiency | None:
    return db.get(Deficiency, deficiency_id)


def has_pending_major(db: Session, equipment_id: int) -> bool:
    stmt = select(
        exists().where(
            Deficiency.equipment_id == equipment_id,
            Deficiency.status == DEFICIENCY_PENDING,
            Deficiency.severity == SEVERITY_MAJOR,
        )
    )
    return bool(db.execute(stmt).scalar())
