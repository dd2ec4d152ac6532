from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeficiencyCreate(BaseModel):
    equipment_id: int
    description: str = Field(min_length=1)
    severity: Literal["minor", "major"] = "minor"


class DeficiencyResolve(BaseModel):
    notes: Optional[str] = None


class DeficiencyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    equipment_id: int
    equipment_code: Optional[str] = None
    equipment_name: Optional[str] = None
    checkout_id: Optional[int]
    reported_by: int
    reporter_name: Optional[str] = None
    reported_date: date
    description: str
    severity: str
    status: str
    resolved_by: Optional[int]
    resolved_date: Optional[date]
    resolution_notes: Optional[str]
