"""Equipment lifecycle: checkout, return, deficiency reporting and resolution.

Every mutating operation here follows the same shape:

1. resolve the acting member and check their capability,
2. validate input and check every precondition (nothing is written yet),
3. write the checkout/deficiency row,
4. call ``recompute_status`` for the affected equipment,
5. commit, all in the caller's session and a single transaction.

``recompute_status`` is the only code that assigns ``Equipment.status``. The
precedence is fixed: a pending major deficiency beats an open checkout, which
beats the administrative out-of-service flag, which beats ``available``.

Two members racing for the same item are settled by the partial unique index
on open checkouts; the loser's ``IntegrityError`` surfaces as
``ConstraintViolationError`` and the transaction is rolled back.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.capabilities import Capability, require_capability
from ..core.catalog import (
    CONDITION_DEFICIENCY,
    DEFICIENCY_PENDING,
    DEFICIENCY_RESOLVED,
    STATUS_AVAILABLE,
    STATUS_CHECKED_OUT,
    STATUS_NEEDS_REPAIR,
    STATUS_OUT_OF_SERVICE,
    normalize_condition,
    normalize_severity,
    normalize_use_type,
)
from ..core.clock import as_naive_utc, to_date, utcnow
from ..core.errors import (
    AlreadyReturnedError,
    ConstraintViolationError,
    InvalidStateError,
    NotFoundError,
)
from ..crud.checkouts import get_open_checkout
from ..crud.deficiencies import has_pending_major
from ..models.checkout import Checkout
from ..models.deficiency import Deficiency
from ..models.equipment import Equipment
from ..models.user import User

logger = logging.getLogger("eqtracker.lifecycle")

DEFAULT_RESOLUTION_NOTE = "Resolved"


def derive_status(*, has_open_checkout: bool, has_pending_major: bool, out_of_service: bool) -> str:
    """Pure status rule: major deficiency > open checkout > out of service > available."""

    if has_pending_major:
        return STATUS_NEEDS_REPAIR
    if has_open_checkout:
        return STATUS_CHECKED_OUT
    if out_of_service:
        return STATUS_OUT_OF_SERVICE
    return STATUS_AVAILABLE


def compute_status(db: Session, equipment: Equipment) -> str:
    """Status the item should have given what is currently in the session."""

    db.flush()
    return derive_status(
        has_open_checkout=get_open_checkout(db, equipment.id) is not None,
        has_pending_major=has_pending_major(db, equipment.id),
        out_of_service=bool(equipment.out_of_service),
    )


def recompute_status(db: Session, equipment: Equipment, *, actor: User | None = None) -> str:
    """Re-derive and store ``equipment.status``. Does not commit."""

    new_status = compute_status(db, equipment)
    old_status = equipment.status
    if new_status != old_status:
        equipment.status = new_status
        equipment.updated_at = utcnow()
        logger.info(
            "equipment.status_changed",
            extra={
                "extra_data": {
                    "equipment_code": equipment.equipment_code,
                    "from_status": old_status,
                    "to_status": new_status,
                    "actor_id": actor.id if actor else None,
                }
            },
        )
    return new_status


def _authorize(db: Session, user_id: int | None, capability: Capability) -> User:
    user = db.get(User, user_id) if user_id is not None else None
    require_capability(user, capability)
    return user


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


def _load_equipment(db: Session, equipment_id: int) -> Equipment:
    equipment = db.get(Equipment, equipment_id, populate_existing=True)
    if equipment is None:
        raise NotFoundError(f"Equipment {equipment_id} not found")
    return equipment


def _settle(db: Session, equipment: Equipment, *, actor: User, context: dict, conflict: str | None = None) -> None:
    """Recompute status and commit; a store rejection rolls everything back."""

    try:
        recompute_status(db, equipment, actor=actor)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("lifecycle.constraint_violation", extra={"extra_data": context})
        raise ConstraintViolationError(
            conflict or "The change conflicts with a concurrent update; nothing was saved",
            details=context,
        ) from exc


def _clean(value: str | None) -> str | None:
    cleaned = (value or "").strip()
    return cleaned or None


def check_out(
    db: Session,
    *,
    equipment_id: int,
    user_id: int,
    use_type: str = "club",
    purpose: str | None = None,
    expected_return: date | None = None,
    now: datetime | None = None,
) -> Checkout:
    """Lend an available item to a member."""

    actor = _authorize(db, user_id, Capability.CHECK_OUT)
    use_type = normalize_use_type(use_type)
    equipment = _load_equipment(db, equipment_id)
    if equipment.status != STATUS_AVAILABLE:
        raise InvalidStateError(
            f"{equipment.name} ({equipment.equipment_code}) is {equipment.status} and cannot be checked out",
            details={"equipment_code": equipment.equipment_code, "status": equipment.status},
        )

    checkout = Checkout(
        equipment_id=equipment.id,
        user_id=actor.id,
        checkout_date=as_naive_utc(_now(now)),
        expected_return=expected_return,
        use_type=use_type,
        purpose=_clean(purpose),
    )
    context = {"equipment_code": equipment.equipment_code, "operation": "check_out"}
    db.add(checkout)
    _settle(
        db,
        equipment,
        actor=actor,
        context=context,
        conflict=f"{context['equipment_code']} already has an open checkout",
    )
    db.refresh(checkout)
    logger.info(
        "equipment.checked_out",
        extra={
            "extra_data": {
                "equipment_code": equipment.equipment_code,
                "checkout_id": checkout.id,
                "member_number": actor.member_number,
                "use_type": use_type,
            }
        },
    )
    return checkout


def return_equipment(
    db: Session,
    *,
    checkout_id: int,
    user_id: int,
    condition: str = "good",
    deficiency_description: str | None = None,
    severity: str = "minor",
    now: datetime | None = None,
) -> Checkout:
    """Close an open checkout, optionally logging a deficiency found on return."""

    actor = _authorize(db, user_id, Capability.CHECK_OUT)
    condition = normalize_condition(condition)
    severity = normalize_severity(severity)
    checkout = db.get(Checkout, checkout_id, populate_existing=True)
    if checkout is None:
        raise NotFoundError(f"Checkout {checkout_id} not found")
    if checkout.return_date is not None:
        raise AlreadyReturnedError(
            f"Checkout {checkout_id} was already returned",
            details={"checkout_id": checkout_id, "return_date": checkout.return_date.isoformat()},
        )

    moment = _now(now)
    equipment = checkout.equipment
    # Only an open row is closed; a concurrent return that landed first leaves nothing to match.
    closed = db.execute(
        update(Checkout)
        .where(Checkout.id == checkout.id, Checkout.return_date.is_(None))
        .values(return_date=as_naive_utc(moment), return_condition=condition)
        .execution_options(synchronize_session=False)
    )
    if closed.rowcount == 0:
        db.rollback()
        raise AlreadyReturnedError(
            f"Checkout {checkout_id} was already returned",
            details={"checkout_id": checkout_id},
        )

    description = _clean(deficiency_description)
    if condition == CONDITION_DEFICIENCY and description:
        db.add(
            Deficiency(
                equipment_id=equipment.id,
                checkout_id=checkout.id,
                reported_by=actor.id,
                reported_date=to_date(moment),
                description=description,
                severity=severity,
                status=DEFICIENCY_PENDING,
            )
        )

    context = {"equipment_code": equipment.equipment_code, "operation": "return", "checkout_id": checkout.id}
    _settle(db, equipment, actor=actor, context=context)
    db.refresh(checkout)
    logger.info(
        "equipment.returned",
        extra={
            "extra_data": {
                "equipment_code": equipment.equipment_code,
                "checkout_id": checkout.id,
                "condition": condition,
                "deficiency_logged": bool(condition == CONDITION_DEFICIENCY and description),
            }
        },
    )
    return checkout


def report_deficiency(
    db: Session,
    *,
    equipment_id: int,
    user_id: int,
    description: str,
    severity: str = "minor",
    now: datetime | None = None,
) -> Deficiency:
    """Log a standalone problem. A major one pulls the item out of circulation."""

    actor = _authorize(db, user_id, Capability.CHECK_OUT)
    severity = normalize_severity(severity)
    cleaned = _clean(description)
    if not cleaned:
        raise ValueError("description is required")
    equipment = _load_equipment(db, equipment_id)

    deficiency = Deficiency(
        equipment_id=equipment.id,
        reported_by=actor.id,
        reported_date=to_date(_now(now)),
        description=cleaned,
        severity=severity,
        status=DEFICIENCY_PENDING,
    )
    db.add(deficiency)
    context = {"equipment_code": equipment.equipment_code, "operation": "report_deficiency"}
    _settle(db, equipment, actor=actor, context=context)
    db.refresh(deficiency)
    logger.info(
        "deficiency.reported",
        extra={
            "extra_data": {
                "equipment_code": equipment.equipment_code,
                "deficiency_id": deficiency.id,
                "severity": severity,
            }
        },
    )
    return deficiency


def resolve_deficiency(
    db: Session,
    *,
    deficiency_id: int,
    resolver_id: int,
    notes: str | None = None,
    now: datetime | None = None,
) -> Deficiency:
    """Mark a pending deficiency resolved and let the item's status settle."""

    actor = _authorize(db, resolver_id, Capability.MANAGE_INVENTORY)
    deficiency = db.get(Deficiency, deficiency_id, populate_existing=True)
    if deficiency is None:
        raise NotFoundError(f"Deficiency {deficiency_id} not found")
    if deficiency.status != DEFICIENCY_PENDING:
        raise InvalidStateError(
            f"Deficiency {deficiency_id} is already {deficiency.status}",
            details={"deficiency_id": deficiency_id, "status": deficiency.status},
        )

    resolved = db.execute(
        update(Deficiency)
        .where(Deficiency.id == deficiency.id, Deficiency.status == DEFICIENCY_PENDING)
        .values(
            status=DEFICIENCY_RESOLVED,
            resolved_by=actor.id,
            resolved_date=to_date(_now(now)),
            resolution_notes=_clean(notes) or DEFAULT_RESOLUTION_NOTE,
        )
        .execution_options(synchronize_session=False)
    )
    if resolved.rowcount == 0:
        db.rollback()
        raise InvalidStateError(
            f"Deficiency {deficiency_id} was resolved by someone else",
            details={"deficiency_id": deficiency_id, "status": DEFICIENCY_RESOLVED},
        )

    equipment = deficiency.equipment
    context = {"equipment_code": equipment.equipment_code, "operation": "resolve_deficiency"}
    _settle(db, equipment, actor=actor, context=context)
    db.refresh(deficiency)
    logger.info(
        "deficiency.resolved",
        extra={"extra_data": {"equipment_code": equipment.equipment_code, "deficiency_id": deficiency.id}},
    )
    return deficiency


def set_out_of_service(db: Session, *, equipment_id: int, user_id: int, out_of_service: bool) -> Equipment:
    """Raise or clear the administrative out-of-service flag.

    The flag only shows as the item's status while nothing stronger applies;
    an open checkout or a pending major deficiency still wins.
    """

    actor = _authorize(db, user_id, Capability.MANAGE_INVENTORY)
    equipment = _load_equipment(db, equipment_id)
    equipment.out_of_service = bool(out_of_service)
    equipment.updated_at = utcnow()
    context = {"equipment_code": equipment.equipment_code, "operation": "set_out_of_service"}
    _settle(db, equipment, actor=actor, context=context)
    db.refresh(equipment)
    return equipment


__all__ = [
    "check_out",
    "compute_status",
    "derive_status",
    "recompute_status",
    "report_deficiency",
    "resolve_deficiency",
    "return_equipment",
    "set_out_of_service",
]
