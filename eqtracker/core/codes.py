"""Equipment code helpers.

Codes look like ``EQ001``: the ``EQ`` prefix followed by a sequence number
padded to three digits. Labels get scanned or typed by hand, so lookups accept
lower case, stray whitespace and missing zero padding.
"""

from __future__ import annotations

import re
from typing import Iterable

__all__ = [
    "CODE_PREFIX",
    "code_sequence",
    "format_equipment_code",
    "next_equipment_code",
    "normalize_equipment_code",
]

CODE_PREFIX = "EQ"
_CODE_RE = re.compile(r"^EQ(\d+)$")
_LOOSE_RE = re.compile(r"^EQ[\s\-_]*(\d+)$", re.IGNORECASE)


def format_equipment_code(sequence: int) -> str:
    return f"{CODE_PREFIX}{sequence:03d}"


def code_sequence(code: str | None) -> int | None:
    """Return the numeric part of a well-formed code, otherwise ``None``."""

    if not code:
        return None
    match = _CODE_RE.match(code)
    if not match:
        return None
    return int(match.group(1))


def normalize_equipment_code(raw: str | None) -> str | None:
    """Return the canonical spelling of a scanned or typed code.

    ``" eq7 "`` and ``"EQ-007"`` both become ``"EQ007"``. Values that do not
    look like equipment codes are trimmed and upper-cased so they can still be
    compared against legacy labels.
    """

    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    match = _LOOSE_RE.match(cleaned)
    if match:
        return format_equipment_code(int(match.group(1)))
    return cleaned.upper()


def next_equipment_code(existing_codes: Iterable[str | None]) -> str:
    """Scan existing ``EQnnn`` codes and return the next one in sequence."""

    highest = 0
    for code in existing_codes:
        sequence = code_sequence(code)
        if sequence is not None and sequence > highest:
            highest = sequence
    return format_equipment_code(highest + 1)
