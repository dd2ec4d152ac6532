import os
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from eqtracker.core.catalog import MAINTENANCE_INTERVALS
from eqtracker.services import reporting
from eqtracker.services.reporting import (
    alerts_summary,
    filter_equipment,
    inventory_stats,
    maintenance_due,
    maintenance_state,
    overdue_checkouts,
)

TODAY = date(2024, 6, 15)


def _checkout(ident, expected, returned=None):
    return SimpleNamespace(id=ident, expected_return=expected, return_date=returned)


def _item(code, category, last=None, name=None, status="available"):
    return SimpleNamespace(
        equipment_code=code,
        name=name or code,
        category=category,
        last_maintenance=last,
        status=status,
    )


def test_overdue_checkouts_filters_and_orders():
    checkouts = [
        _checkout(1, TODAY - timedelta(days=2)),
        _checkout(2, TODAY),
        _checkout(3, None),
        _checkout(4, TODAY - timedelta(days=10)),
        _checkout(5, TODAY - timedelta(days=30), returned=datetime(2024, 6, 1, 12, 0)),
        _checkout(6, TODAY - timedelta(days=2)),
    ]

    rows = overdue_checkouts(checkouts, datetime(2024, 6, 15, 23, 59))

    assert [(row.checkout.id, row.days_overdue) for row in rows] == [(4, 10), (1, 2), (6, 2)]


def test_overdue_checkouts_is_idempotent():
    checkouts = [_checkout(i, TODAY - timedelta(days=i % 3 + 1)) for i in range(1, 10)]
    first = overdue_checkouts(checkouts, TODAY)
    second = overdue_checkouts(checkouts, TODAY)
    assert [r.checkout.id for r in first] == [r.checkout.id for r in second]
    assert [r.checkout.id for r in first] == [2, 5, 8, 1, 4, 7, 3, 6, 9]


def test_maintenance_due_rules_and_order():
    equipment = [
        _item("EQ001", "Grounds", TODAY - timedelta(days=100)),
        _item("EQ002", "Grounds", TODAY - timedelta(days=80)),
        _item("EQ003", "Grounds", TODAY - timedelta(days=30)),
        _item("EQ004", "Events", None),
        _item("EQ005", "Tools", None),
        _item("EQ006", "Electrical", TODAY - timedelta(days=400)),
        _item("EQ007", "Other", TODAY - timedelta(days=1000)),
    ]

    rows = maintenance_due(equipment, MAINTENANCE_INTERVALS, TODAY)

    assert [row.equipment.equipment_code for row in rows] == ["EQ005", "EQ006", "EQ001", "EQ002"]
    never = rows[0]
    assert never.never_maintained is True
    assert never.next_due is None
    assert rows[1].days_past_due == 35
    assert rows[2].days_past_due == 10
    assert rows[3].days_past_due == -10
    assert rows[3].next_due == TODAY + timedelta(days=10)


def test_maintenance_due_includes_fourteen_day_boundary():
    on_edge = _item("EQ001", "Range", TODAY - timedelta(days=76))
    beyond = _item("EQ002", "Range", TODAY - timedelta(days=75))

    rows = maintenance_due([on_edge, beyond], MAINTENANCE_INTERVALS, TODAY)

    assert [row.equipment.equipment_code for row in rows] == ["EQ001"]
    assert rows[0].days_past_due == -14


def test_maintenance_state_labels():
    assert maintenance_state(_item("EQ001", "Events"), MAINTENANCE_INTERVALS, TODAY) is None
    assert maintenance_state(_item("EQ002", "Tools"), MAINTENANCE_INTERVALS, TODAY) == "OVERDUE"
    overdue = _item("EQ003", "Cleaning", TODAY - timedelta(days=91))
    assert maintenance_state(overdue, MAINTENANCE_INTERVALS, TODAY) == "OVERDUE"
    due_today = _item("EQ004", "Cleaning", TODAY - timedelta(days=90))
    assert maintenance_state(due_today, MAINTENANCE_INTERVALS, TODAY) == "DUE SOON"
    fine = _item("EQ005", "Cleaning", TODAY - timedelta(days=10))
    assert maintenance_state(fine, MAINTENANCE_INTERVALS, TODAY) == "OK"


def test_filter_equipment_by_search_and_category():
    equipment = [
        _item("EQ001", "Grounds", name="Push Mower"),
        _item("EQ002", "Tools", name="Cordless Drill"),
        _item("EQ003", "Grounds", name="Leaf Blower"),
    ]

    assert [i.equipment_code for i in filter_equipment(equipment, "mower")] == ["EQ001"]
    assert [i.equipment_code for i in filter_equipment(equipment, "eq00")] == ["EQ001", "EQ002", "EQ003"]
    assert [i.equipment_code for i in filter_equipment(equipment, None, "Grounds")] == ["EQ001", "EQ003"]
    assert [i.equipment_code for i in filter_equipment(equipment, "", "All")] == ["EQ001", "EQ002", "EQ003"]
    assert filter_equipment(equipment, "drill", "Grounds") == []


def test_inventory_stats_and_alerts_summary():
    equipment = [
        _item("EQ001", "Grounds", TODAY - timedelta(days=200), status="checked-out"),
        _item("EQ002", "Tools", TODAY, status="needs-repair"),
        _item("EQ003", "Events", status="available"),
    ]
    checkouts = [
        _checkout(1, TODAY - timedelta(days=3)),
        _checkout(2, TODAY - timedelta(days=9), returned=datetime(2024, 6, 7)),
    ]
    deficiencies = [
        SimpleNamespace(status="pending", severity="major"),
        SimpleNamespace(status="pending", severity="minor"),
        SimpleNamespace(status="resolved", severity="major"),
    ]

    stats = inventory_stats(equipment, checkouts, deficiencies)
    assert stats["total_equipment"] == 3
    assert stats["by_status"] == {"available": 1, "checked-out": 1, "needs-repair": 1, "out-of-service": 0}
    assert stats["checked_out"] == 1
    assert stats["needs_repair"] == 1
    assert stats["total_checkouts"] == 2
    assert stats["open_checkouts"] == 1
    assert stats["pending_deficiencies"] == 2
    assert stats["pending_major_deficiencies"] == 1

    summary = alerts_summary(equipment, checkouts, deficiencies, TODAY, MAINTENANCE_INTERVALS)
    assert len(summary["overdue_checkouts"]) == 1
    assert [row.equipment.equipment_code for row in summary["maintenance_due"]] == ["EQ001"]
    assert len(summary["pending_deficiencies"]) == 2
    assert summary["alert_count"] == 4


def test_zero_interval_is_tracked_and_only_null_is_exempt():
    intervals = {"Range": 0, "Events": None}
    checked_today = _item("EQ001", "Range", TODAY)
    checked_last_week = _item("EQ002", "Range", TODAY - timedelta(days=7))
    exempt = _item("EQ003", "Events", TODAY - timedelta(days=7))

    rows = maintenance_due([checked_today, checked_last_week, exempt], intervals, TODAY)

    assert [row.equipment.equipment_code for row in rows] == ["EQ002", "EQ001"]
    assert rows[0].interval_days == 0
    assert maintenance_state(checked_last_week, intervals, TODAY) == "OVERDUE"
    assert maintenance_state(checked_today, intervals, TODAY) == "DUE SOON"
    assert maintenance_state(exempt, intervals, TODAY) is None


def test_maintenance_defaults_to_club_local_today(monkeypatch):
    monkeypatch.setattr(reporting, "local_today", lambda: TODAY)
    item = _item("EQ001", "Cleaning", TODAY - timedelta(days=91))

    rows = maintenance_due([item])

    assert rows[0].days_past_due == 1
    assert maintenance_state(item) == "OVERDUE"
    assert maintenance_state(_item("EQ002", "Cleaning", TODAY - timedelta(days=60))) == "OK"
