"""CSV exports for the admin reports.

``to_csv`` is generic: give it records and ``(header, accessor)`` pairs. The
report builders below define the column sets for the four downloadable
reports. Fields are quoted only when they contain the delimiter, a quote or a
line break, with embedded quotes doubled.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime, timedelta
from typing import Any, Callable, Iterable, Mapping, Sequence

from ..core.catalog import MAINTENANCE_INTERVALS
from ..core.clock import to_date
from .reporting import maintenance_state

Column = tuple[str, Callable[[Any], Any]]

REPORT_EQUIPMENT = "equipment_inventory"
REPORT_CHECKOUTS = "checkout_history"
REPORT_DEFICIENCIES = "deficiencies_report"
REPORT_MAINTENANCE = "maintenance_schedule"


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def to_csv(records: Iterable[Any], columns: Sequence[Column], *, delimiter: str = ",") -> str:
    """Render records as delimited text with a header row."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=delimiter, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([header for header, _ in columns])
    for record in records:
        writer.writerow([_cell(accessor(record)) for _, accessor in columns])
    return buffer.getvalue()


def export_filename(name: str, today: date | datetime, extension: str = "csv") -> str:
    """``{name}_{YYYY-MM-DD}.{extension}``"""

    return f"{name}_{to_date(today).isoformat()}.{extension.lstrip('.')}"


def _day(value: date | datetime | None) -> str:
    return to_date(value).isoformat() if value else ""


EQUIPMENT_COLUMNS: list[Column] = [
    ("Code", lambda r: r.equipment_code),
    ("Name", lambda r: r.name),
    ("Category", lambda r: r.category),
    ("Location", lambda r: r.location),
    ("Status", lambda r: r.status),
    ("Last Maintenance", lambda r: _day(r.last_maintenance) or "Never"),
    ("Notes", lambda r: r.notes),
]

CHECKOUT_COLUMNS: list[Column] = [
    ("Equipment", lambda r: r.equipment_name),
    ("Code", lambda r: r.equipment_code),
    ("Member", lambda r: r.member_name),
    ("Use Type", lambda r: r.use_type),
    ("Purpose", lambda r: r.purpose),
    ("Checkout Date", lambda r: _day(r.checkout_date)),
    ("Expected Return", lambda r: _day(r.expected_return)),
    ("Return Date", lambda r: _day(r.return_date) or "Still Out"),
    ("Return Condition", lambda r: r.return_condition),
]

DEFICIENCY_COLUMNS: list[Column] = [
    ("Equipment", lambda r: r.equipment_name),
    ("Description", lambda r: r.description),
    ("Severity", lambda r: r.severity),
    ("Status", lambda r: r.status),
    ("Reported By", lambda r: r.reporter_name),
    ("Reported Date", lambda r: _day(r.reported_date)),
    ("Resolved Date", lambda r: _day(r.resolved_date)),
]


def maintenance_columns(
    intervals: Mapping[str, int | None],
    today: date,
    lookahead_days: int,
) -> list[Column]:
    def next_due(item: Any) -> str:
        if item.last_maintenance is None:
            return "Overdue - Never Done"
        return (to_date(item.last_maintenance) + timedelta(days=intervals[item.category])).isoformat()

    return [
        ("Code", lambda r: r.equipment_code),
        ("Name", lambda r: r.name),
        ("Category", lambda r: r.category),
        ("Last Maintenance", lambda r: _day(r.last_maintenance) or "Never"),
        ("Interval (Days)", lambda r: intervals[r.category]),
        ("Next Due", next_due),
        ("Status", lambda r: maintenance_state(r, intervals, today, lookahead_days=lookahead_days)),
    ]


def equipment_inventory_csv(equipment: Iterable[Any]) -> str:
    return to_csv(equipment, EQUIPMENT_COLUMNS)


def checkout_history_csv(checkouts: Iterable[Any]) -> str:
    return to_csv(checkouts, CHECKOUT_COLUMNS)


def deficiencies_csv(deficiencies: Iterable[Any]) -> str:
    return to_csv(deficiencies, DEFICIENCY_COLUMNS)


def maintenance_schedule_csv(
    equipment: Iterable[Any],
    today: date | datetime,
    intervals_by_category: Mapping[str, int | None] | None = None,
    *,
    lookahead_days: int = 14,
) -> str:
    """Every item whose category has a maintenance interval."""

    intervals = MAINTENANCE_INTERVALS if intervals_by_category is None else intervals_by_category
    tracked = [item for item in equipment if intervals.get(item.category) is not None]
    return to_csv(tracked, maintenance_columns(intervals, to_date(today), lookahead_days))


REPORTS = (REPORT_EQUIPMENT, REPORT_CHECKOUTS, REPORT_DEFICIENCIES, REPORT_MAINTENANCE)


__all__ = [
    "CHECKOUT_COLUMNS",
    "DEFICIENCY_COLUMNS",
    "EQUIPMENT_COLUMNS",
    "REPORTS",
    "REPORT_CHECKOUTS",
    "REPORT_DEFICIENCIES",
    "REPORT_EQUIPMENT",
    "REPORT_MAINTENANCE",
    "checkout_history_csv",
    "deficiencies_csv",
    "equipment_inventory_csv",
    "export_filename",
    "maintenance_schedule_csv",
    "to_csv",
]
