"""Derived views over equipment, checkouts and deficiencies.

These helpers work on plain in-memory sequences so the same code serves the
API, the CSV exports and the tests. Nothing here touches the database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Iterable, Mapping, Sequence

from ..core.catalog import (
    CATEGORY_ALL,
    DEFICIENCY_PENDING,
    EQUIPMENT_STATUSES,
    MAINTENANCE_INTERVALS,
    SEVERITY_MAJOR,
)
from ..core.clock import local_today, to_date

DUE_SOON_DAYS = 14

MAINTENANCE_OVERDUE = "OVERDUE"
MAINTENANCE_DUE_SOON = "DUE SOON"
MAINTENANCE_OK = "OK"


@dataclass(frozen=True)
class OverdueCheckout:
    checkout: Any
    days_overdue: int


@dataclass(frozen=True)
class MaintenanceDue:
    equipment: Any
    interval_days: int
    next_due: date | None
    days_past_due: int | None
    never_maintained: bool


def _today(now: date | datetime) -> date:
    return to_date(now)


def overdue_checkouts(checkouts: Iterable[Any], now: date | datetime) -> list[OverdueCheckout]:
    """Open checkouts past their expected return date, most overdue first.

    Dates are compared at day granularity, so an item due today is not yet
    overdue. Ties keep their input order.
    """

    today = _today(now)
    rows: list[OverdueCheckout] = []
    for checkout in checkouts:
        if checkout.return_date is not None or checkout.expected_return is None:
            continue
        expected = to_date(checkout.expected_return)
        if expected < today:
            rows.append(OverdueCheckout(checkout=checkout, days_overdue=(today - expected).days))
    return sorted(rows, key=lambda row: row.days_overdue, reverse=True)


def maintenance_due(
    equipment: Iterable[Any],
    intervals_by_category: Mapping[str, int | None] | None = None,
    now: date | datetime | None = None,
    *,
    lookahead_days: int = DUE_SOON_DAYS,
) -> list[MaintenanceDue]:
    """Items needing maintenance now or within ``lookahead_days``.

    Never-maintained items come first, then the longest overdue; items that
    are only coming due sort last because their days-past-due is negative.
    """

    intervals = MAINTENANCE_INTERVALS if intervals_by_category is None else intervals_by_category
    today = _today(now or local_today())
    rows: list[MaintenanceDue] = []
    for item in equipment:
        interval = intervals.get(item.category)
        if interval is None:
            continue
        if item.last_maintenance is None:
            rows.append(
                MaintenanceDue(
                    equipment=item,
                    interval_days=interval,
                    next_due=None,
                    days_past_due=None,
                    never_maintained=True,
                )
            )
            continue
        next_due = to_date(item.last_maintenance) + timedelta(days=interval)
        if (next_due - today).days <= lookahead_days:
            rows.append(
                MaintenanceDue(
                    equipment=item,
                    interval_days=interval,
                    next_due=next_due,
                    days_past_due=(today - next_due).days,
                    never_maintained=False,
                )
            )
    return sorted(rows, key=lambda row: (not row.never_maintained, -(row.days_past_due or 0)))


def maintenance_state(
    item: Any,
    intervals_by_category: Mapping[str, int | None] | None = None,
    now: date | datetime | None = None,
    *,
    lookahead_days: int = DUE_SOON_DAYS,
) -> str | None:
    """Schedule label for one item, or ``None`` when its category is exempt."""

    intervals = MAINTENANCE_INTERVALS if intervals_by_category is None else intervals_by_category
    interval = intervals.get(item.category)
    if interval is None:
        return None
    if item.last_maintenance is None:
        return MAINTENANCE_OVERDUE
    today = _today(now or local_today())
    next_due = to_date(item.last_maintenance) + timedelta(days=interval)
    if next_due < today:
        return MAINTENANCE_OVERDUE
    if (next_due - today).days <= lookahead_days:
        return MAINTENANCE_DUE_SOON
    return MAINTENANCE_OK


def filter_equipment(equipment: Iterable[Any], search: str | None = None, category: str | None = None) -> list[Any]:
    """Case-insensitive search on name or code plus an optional category."""

    term = (search or "").strip().lower()
    wanted = (category or "").strip()
    matches = []
    for item in equipment:
        if wanted and wanted != CATEGORY_ALL and item.category != wanted:
            continue
        if term and term not in (item.name or "").lower() and term not in (item.equipment_code or "").lower():
            continue
        matches.append(item)
    return matches


def pending_deficiencies(deficiencies: Iterable[Any]) -> list[Any]:
    return [d for d in deficiencies if d.status == DEFICIENCY_PENDING]


def inventory_stats(
    equipment: Sequence[Any],
    checkouts: Sequence[Any],
    deficiencies: Sequence[Any],
) -> dict[str, Any]:
    """Counts shown on the admin dashboard."""

    by_status = {status: 0 for status in EQUIPMENT_STATUSES}
    for item in equipment:
        by_status[item.status] = by_status.get(item.status, 0) + 1
    pending = pending_deficiencies(deficiencies)
    return {
        "total_equipment": len(equipment),
        "by_status": by_status,
        "checked_out": by_status.get("checked-out", 0),
        "needs_repair": by_status.get("needs-repair", 0),
        "total_checkouts": len(checkouts),
        "open_checkouts": sum(1 for c in checkouts if c.return_date is None),
        "pending_deficiencies": len(pending),
        "pending_major_deficiencies": sum(1 for d in pending if d.severity == SEVERITY_MAJOR),
    }


def alerts_summary(
    equipment: Sequence[Any],
    checkouts: Sequence[Any],
    deficiencies: Sequence[Any],
    now: date | datetime,
    intervals_by_category: Mapping[str, int | None] | None = None,
    *,
    lookahead_days: int = DUE_SOON_DAYS,
) -> dict[str, Any]:
    """Everything the alerts view lists, plus the badge count."""

    overdue = overdue_checkouts(checkouts, now)
    due = maintenance_due(equipment, intervals_by_category, now, lookahead_days=lookahead_days)
    pending = pending_deficiencies(deficiencies)
    return {
        "overdue_checkouts": overdue,
        "maintenance_due": due,
        "pending_deficiencies": pending,
        "alert_count": len(overdue) + len(due) + len(pending),
    }


__all__ = [
    "DUE_SOON_DAYS",
    "MAINTENANCE_DUE_SOON",
    "MAINTENANCE_OK",
    "MAINTENANCE_OVERDUE",
    "MaintenanceDue",
    "OverdueCheckout",
    "alerts_summary",
    "filter_equipment",
    "inventory_stats",
    "maintenance_due",
    "maintenance_state",
    "overdue_checkouts",
    "pending_deficiencies",
]
