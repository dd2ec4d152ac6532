"""Checkout queries."""

from __future__ import annotations

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from ..models.checkout import Checkout


def list_checkouts(
    db: Session,
    *,
    open_only: bool = False,
    equipment_id: int | None = None,
    user_id: int | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Checkout]:
    """Checkout history, newest first."""

    stmt = select(Checkout).order_by(desc(Checkout.checkout_date), desc(Checkout.id)).offset(offset)
    if open_only:
        stmt = stmt.where(Checkout.return_date.is_(None))
    if equipment_id is not None:
        stmt = stmt.where(Checkout.equipment_id == equipment_id)
    if user_id is not None:
        stmt = stmt.where(Checkout.user_id == user_id)
    if limit is not None:
        stmt = stmt.limit(limit)
    return db.execute(stmt).scalars().unique().all()


def get_checkout(db: Session, checkout_id: int) -> Checkout | None:
    return db.get(Checkout, checkout_id)


def get_open_checkout(db: Session, equipment_id: int) -> Checkout | None:
    stmt = select(Checkout).where(
        Checkout.equipment_id == equipment_id,
        Checkout.return_date.is_(None),
    )
    return db.execute(stmt).scalars().first()
