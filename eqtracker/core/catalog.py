"""Shared vocabulary for equipment, checkouts, deficiencies and members."""

from __future__ import annotations

CATEGORIES = (
    "Grounds",
    "Tools",
    "Cleaning",
    "Electrical",
    "Events",
    "Shop",
    "Range",
    "Other",
)
CATEGORY_ALL = "All"

# Maintenance intervals in days. ``None`` exempts the category from tracking.
MAINTENANCE_INTERVALS: dict[str, int | None] = {
    "Grounds": 90,
    "Tools": 180,
    "Cleaning": 90,
    "Electrical": 365,
    "Events": None,
    "Shop": 180,
    "Range": 90,
    "Other": None,
}

STATUS_AVAILABLE = "available"
STATUS_CHECKED_OUT = "checked-out"
STATUS_NEEDS_REPAIR = "needs-repair"
STATUS_OUT_OF_SERVICE = "out-of-service"
EQUIPMENT_STATUSES = (
    STATUS_AVAILABLE,
    STATUS_CHECKED_OUT,
    STATUS_NEEDS_REPAIR,
    STATUS_OUT_OF_SERVICE,
)

USE_TYPE_CLUB = "club"
USE_TYPE_PERSONAL = "personal"
USE_TYPES = (USE_TYPE_CLUB, USE_TYPE_PERSONAL)

CONDITION_GOOD = "good"
CONDITION_DEFICIENCY = "deficiency"
RETURN_CONDITIONS = (CONDITION_GOOD, CONDITION_DEFICIENCY)

SEVERITY_MINOR = "minor"
SEVERITY_MAJOR = "major"
SEVERITIES = (SEVERITY_MINOR, SEVERITY_MAJOR)

DEFICIENCY_PENDING = "pending"
DEFICIENCY_RESOLVED = "resolved"

ROLE_VOLUNTEER = "volunteer"
ROLE_CHAIR = "chair"
ROLE_ADMIN = "admin"
ROLES = (ROLE_VOLUNTEER, ROLE_CHAIR, ROLE_ADMIN)
MANAGER_ROLES = {ROLE_CHAIR, ROLE_ADMIN}


def _pick(value: str | None, choices: tuple[str, ...], label: str) -> str:
    cleaned = (value or "").strip().lower()
    for choice in choices:
        if choice.lower() == cleaned:
            return choice
    raise ValueError(f"{label} must be one of: {', '.join(choices)}")


def normalize_category(value: str | None) -> str:
    """Match a category case-insensitively and return its canonical spelling."""

    return _pick(value, CATEGORIES, "category")


def normalize_use_type(value: str | None) -> str:
    return _pick(value or USE_TYPE_CLUB, USE_TYPES, "use_type")


def normalize_condition(value: str | None) -> str:
    return _pick(value or CONDITION_GOOD, RETURN_CONDITIONS, "condition")


def normalize_severity(value: str | None) -> str:
    return _pick(value or SEVERITY_MINOR, SEVERITIES, "severity")


def normalize_role(value: str | None) -> str:
    return _pick(value or ROLE_VOLUNTEER, ROLES, "role")


__all__ = [
    "CATEGORIES",
    "CATEGORY_ALL",
    "CONDITION_DEFICIENCY",
    "CONDITION_GOOD",
    "DEFICIENCY_PENDING",
    "DEFICIENCY_RESOLVED",
    "EQUIPMENT_STATUSES",
    "MAINTENANCE_INTERVALS",
    "MANAGER_ROLES",
    "RETURN_CONDITIONS",
    "ROLES",
    "ROLE_ADMIN",
    "ROLE_CHAIR",
    "ROLE_VOLUNTEER",
    "SEVERITIES",
    "SEVERITY_MAJOR",
    "SEVERITY_MINOR",
    "STATUS_AVAILABLE",
    "STATUS_CHECKED_OUT",
    "STATUS_NEEDS_REPAIR",
    "STATUS_OUT_OF_SERVICE",
    "USE_TYPES",
    "USE_TYPE_CLUB",
    "USE_TYPE_PERSONAL",
    "normalize_category",
    "normalize_condition",
    "normalize_role",
    "normalize_severity",
    "normalize_use_type",
]
