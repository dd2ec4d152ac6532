"""Small idempotent schema upgrades run at startup.

``Base.metadata.create_all`` creates missing tables but never touches existing
ones, so databases created by older releases are brought forward here. Only
additive changes: new columns and the indexes the lifecycle rules rely on.
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from ..models.checkout import OPEN_CHECKOUT_INDEX


def _column_names(engine: Engine, table: str) -> set[str]:
    inspector = inspect(engine)
    if not inspector.has_table(table):
        return set()
    return {column["name"] for column in inspector.get_columns(table)}


def _add_column(engine: Engine, table: str, col_def: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_def}"))


def _create_index_if_not_exists(
    engine: Engine,
    table: str,
    name: str,
    cols: Iterable[str],
    *,
    unique: bool = False,
    where: str | None = None,
) -> None:
    cols_sql = ", ".join(cols)
    unique_sql = "UNIQUE " if unique else ""
    where_sql = f" WHERE {where}" if where else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {name} ON {table} ({cols_sql}){where_sql}"))


def run_migrations(engine: Engine) -> None:
    """Bring an existing schema up to date with the models."""

    equipment_cols = _column_names(engine, "equipment")
    if equipment_cols:
        equipment_needed = {
            "out_of_service": "BOOLEAN DEFAULT FALSE NOT NULL",
            "last_maintenance": "DATE",
            "notes": "TEXT",
        }
        for name, dtype in equipment_needed.items():
            if name not in equipment_cols:
                _add_column(engine, "equipment", f"{name} {dtype}")

    checkout_cols = _column_names(engine, "checkouts")
    if checkout_cols:
        for name, dtype in {"purpose": "TEXT", "return_condition": "VARCHAR(16)"}.items():
            if name not in checkout_cols:
                _add_column(engine, "checkouts", f"{name} {dtype}")
        # At most one open checkout per equipment item.
        _create_index_if_not_exists(
            engine,
            "checkouts",
            OPEN_CHECKOUT_INDEX,
            ["equipment_id"],
            unique=True,
            where="return_date IS NULL",
        )

    deficiency_cols = _column_names(engine, "deficiencies")
    if deficiency_cols and "resolution_notes" not in deficiency_cols:
        _add_column(engine, "deficiencies", "resolution_notes TEXT")
