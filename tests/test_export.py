import csv
import io
import os
import sys
from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from eqtracker.services.export import (
    checkout_history_csv,
    deficiencies_csv,
    equipment_inventory_csv,
    export_filename,
    maintenance_schedule_csv,
    to_csv,
)

FIELDS = ["equipment_code", "name", "category", "location", "notes"]
COLUMNS = [(field, (lambda f: lambda r: getattr(r, f))(field)) for field in FIELDS]


def _item(code, name, category="Tools", location=None, notes=None, last=None, status="available"):
    return SimpleNamespace(
        equipment_code=code,
        name=name,
        category=category,
        location=location,
        notes=notes,
        last_maintenance=last,
        status=status,
    )


def _rows(text, delimiter=","):
    return list(csv.reader(io.StringIO(text), delimiter=delimiter))


def test_to_csv_quotes_only_when_needed():
    text = to_csv([_item("EQ001", "Mower, push", notes='The "good" one\nsecond line')], COLUMNS)
    lines = text.split("\n")
    assert lines[0] == "equipment_code,name,category,location,notes"
    assert lines[1].startswith('EQ001,"Mower, push",Tools,,"The ""good"" one')


def test_equipment_records_survive_export_and_reparse():
    records = [
        _item("EQ001", "Push Mower", "Grounds", "Barn", None),
        _item("EQ002", 'Drill "DeWalt", 20V', "Tools", "Shop, shelf 2", "Battery\nweak"),
        _item("EQ003", "Tablecloths", "Events", "", "Stored 'folded'"),
        _item("EQ004", "Semi;colon", "Other", None, "tab\there"),
    ]

    for delimiter in (",", ";"):
        parsed = _rows(to_csv(records, COLUMNS, delimiter=delimiter), delimiter)
        assert parsed[0] == FIELDS
        assert len(parsed) == len(records) + 1
        for record, row in zip(records, parsed[1:]):
            assert row == [getattr(record, f) or "" for f in FIELDS]


def test_export_filename_uses_iso_date():
    assert export_filename("equipment_inventory", date(2024, 3, 9)) == "equipment_inventory_2024-03-09.csv"
    assert export_filename("checkout_history", datetime(2024, 12, 31, 8, 0), ".txt") == "checkout_history_2024-12-31.txt"


def test_equipment_inventory_marks_never_maintained():
    rows = _rows(equipment_inventory_csv([_item("EQ001", "Mower", last=None), _item("EQ002", "Saw", last=date(2024, 1, 2))]))
    assert rows[0] == ["Code", "Name", "Category", "Location", "Status", "Last Maintenance", "Notes"]
    assert rows[1][5] == "Never"
    assert rows[2][5] == "2024-01-02"


def test_checkout_history_marks_open_loans_still_out():
    open_loan = SimpleNamespace(
        equipment_name="Mower",
        equipment_code="EQ001",
        member_name="Pat Volunteer",
        use_type="club",
        purpose="mowing",
        checkout_date=datetime(2024, 6, 1, 14, 30),
        expected_return=date(2024, 6, 3),
        return_date=None,
        return_condition=None,
    )
    rows = _rows(checkout_history_csv([open_loan]))
    assert rows[1] == ["Mower", "EQ001", "Pat Volunteer", "club", "mowing", "2024-06-01", "2024-06-03", "Still Out", ""]


def test_deficiencies_report_columns():
    deficiency = SimpleNamespace(
        equipment_name="Chainsaw",
        description="Chain loose, needs tension",
        severity="major",
        status="resolved",
        reporter_name="Pat Volunteer",
        reported_date=date(2024, 5, 1),
        resolved_date=date(2024, 5, 3),
    )
    rows = _rows(deficiencies_csv([deficiency]))
    assert rows[0][0] == "Equipment"
    assert rows[1] == ["Chainsaw", "Chain loose, needs tension", "major", "resolved", "Pat Volunteer", "2024-05-01", "2024-05-03"]


def test_maintenance_schedule_skips_exempt_categories():
    today = date(2024, 6, 15)
    equipment = [
        _item("EQ001", "Mower", "Grounds", last=date(2024, 1, 1)),
        _item("EQ002", "Tent", "Events"),
        _item("EQ003", "Drill", "Tools"),
        _item("EQ004", "Wiring kit", "Electrical", last=date(2024, 6, 1)),
    ]

    rows = _rows(maintenance_schedule_csv(equipment, today))

    assert rows[0] == ["Code", "Name", "Category", "Last Maintenance", "Interval (Days)", "Next Due", "Status"]
    by_code = {row[0]: row for row in rows[1:]}
    assert set(by_code) == {"EQ001", "EQ003", "EQ004"}
    assert by_code["EQ001"][5:] == ["2024-03-31", "OVERDUE"]
    assert by_code["EQ003"][3:] == ["Never", "180", "Overdue - Never Done", "OVERDUE"]
    assert by_code["EQ004"][5:] == ["2025-06-01", "OK"]


def test_maintenance_schedule_keeps_zero_interval_categories():
    rows = _rows(
        maintenance_schedule_csv(
            [_item("EQ001", "Target stand", "Range", last=date(2024, 6, 10)), _item("EQ002", "Tent", "Events")],
            date(2024, 6, 15),
            {"Range": 0, "Events": None},
        )
    )

    assert [row[0] for row in rows[1:]] == ["EQ001"]
    assert rows[1][4:] == ["0", "2024-06-10", "OVERDUE"]
