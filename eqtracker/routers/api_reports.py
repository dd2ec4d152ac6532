from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..core.catalog import MAINTENANCE_INTERVALS
from ..core.clock import local_now, local_today
from ..core.config import settings
from ..core.errors import NotFoundError
from ..crud.checkouts import list_checkouts
from ..crud.deficiencies import list_deficiencies
from ..crud.equipment import list_equipment
from ..db.session import get_db
from ..deps.auth import require_manager, require_user
from ..models.user import User
from ..schemas.checkout import CheckoutOut, OverdueCheckoutOut
from ..schemas.deficiency import DeficiencyOut
from ..schemas.equipment import EquipmentOut
from ..schemas.reports import AlertsOut, InventoryStats, MaintenanceDueOut, MaintenanceIntervalOut
from ..services import export
from ..services.reporting import (
    MaintenanceDue,
    OverdueCheckout,
    alerts_summary,
    inventory_stats,
    maintenance_due,
    overdue_checkouts,
)

logger = logging.getLogger("eqtracker.reports")

router = APIRouter(prefix="/api/v1/reports", tags=["reports"])


def _overdue_out(row: OverdueCheckout) -> OverdueCheckoutOut:
    return OverdueCheckoutOut(checkout=CheckoutOut.model_validate(row.checkout), days_overdue=row.days_overdue)


def _due_out(row: MaintenanceDue) -> MaintenanceDueOut:
    return MaintenanceDueOut(
        equipment=EquipmentOut.model_validate(row.equipment),
        interval_days=row.interval_days,
        next_due=row.next_due,
        days_past_due=row.days_past_due,
        never_maintained=row.never_maintained,
    )


@router.get("/overdue", response_model=list[OverdueCheckoutOut], dependencies=[Depends(require_user)])
def api_overdue(db: Session = Depends(get_db)):
    rows = overdue_checkouts(list_checkouts(db, open_only=True), local_now())
    return [_overdue_out(row) for row in rows]


@router.get("/maintenance-due", response_model=list[MaintenanceDueOut], dependencies=[Depends(require_user)])
def api_maintenance_due(db: Session = Depends(get_db)):
    rows = maintenance_due(
        list_equipment(db),
        MAINTENANCE_INTERVALS,
        local_today(),
        lookahead_days=settings.MAINTENANCE_LOOKAHEAD_DAYS,
    )
    return [_due_out(row) for row in rows]


@router.get("/maintenance-intervals", response_model=list[MaintenanceIntervalOut])
def api_maintenance_intervals():
    return [MaintenanceIntervalOut(category=name, interval_days=days) for name, days in MAINTENANCE_INTERVALS.items()]


@router.get("/alerts", response_model=AlertsOut, dependencies=[Depends(require_manager)])
def api_alerts(db: Session = Depends(get_db)):
    summary = alerts_summary(
        list_equipment(db),
        list_checkouts(db, open_only=True),
        list_deficiencies(db, status="pending"),
        local_now(),
        MAINTENANCE_INTERVALS,
        lookahead_days=settings.MAINTENANCE_LOOKAHEAD_DAYS,
    )
    return AlertsOut(
        overdue_checkouts=[_overdue_out(row) for row in summary["overdue_checkouts"]],
        maintenance_due=[_due_out(row) for row in summary["maintenance_due"]],
        pending_deficiencies=[DeficiencyOut.model_validate(d) for d in summary["pending_deficiencies"]],
        alert_count=summary["alert_count"],
    )


@router.get("/stats", response_model=InventoryStats, dependencies=[Depends(require_manager)])
def api_stats(db: Session = Depends(get_db)):
    return inventory_stats(list_equipment(db), list_checkouts(db), list_deficiencies(db))


@router.get("/export/{report}")
def api_export(report: str, user: User = Depends(require_manager), db: Session = Depends(get_db)):
    today = local_today()
    if report == export.REPORT_EQUIPMENT:
        body = export.equipment_inventory_csv(list_equipment(db))
    elif report == export.REPORT_CHECKOUTS:
        body = export.checkout_history_csv(list_checkouts(db))
    elif report == export.REPORT_DEFICIENCIES:
        body = export.deficiencies_csv(list_deficiencies(db))
    elif report == export.REPORT_MAINTENANCE:
        body = export.maintenance_schedule_csv(
            list_equipment(db),
            today,
            MAINTENANCE_INTERVALS,
            lookahead_days=settings.MAINTENANCE_LOOKAHEAD_DAYS,
        )
    else:
        raise NotFoundError(f"Unknown report '{report}'", details={"available": list(export.REPORTS)})

    filename = export.export_filename(report, today)
    logger.info("report.exported", extra={"extra_data": {"report": report, "member_number": user.member_number}})
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
