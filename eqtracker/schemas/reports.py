from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel

from .checkout import OverdueCheckoutOut
from .deficiency import DeficiencyOut
from .equipment import EquipmentOut


class MaintenanceDueOut(BaseModel):
    equipment: EquipmentOut
    interval_days: int
    next_due: Optional[date]
    days_past_due: Optional[int]
    never_maintained: bool


class InventoryStats(BaseModel):
    total_equipment: int
    by_status: dict[str, int]
    checked_out: int
    needs_repair: int
    total_checkouts: int
    open_checkouts: int
    pending_deficiencies: int
    pending_major_deficiencies: int


class AlertsOut(BaseModel):
    overdue_checkouts: list[OverdueCheckoutOut]
    maintenance_due: list[MaintenanceDueOut]
    pending_deficiencies: list[DeficiencyOut]
    alert_count: int


class MaintenanceIntervalOut(BaseModel):
    category: str
    interval_days: Optional[int]
